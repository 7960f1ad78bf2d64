"""
Runtime values for the YeetWords interpreter.

Every stored value carries exactly one kind tag. The `data` field holds the
plain Python object:

- LIST:         List[str]
- CATALOG:      Dict[str, List[str]]
- SINGLE:       str
- ENTITY_GROUP: List[Entity], an entity being Dict[str, List[str]]
- SNIPPET:      List[Node], an un-executed command sequence
"""

from copy import deepcopy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

Entity = Dict[str, List[str]]


class ValueKind(Enum):
    """The closed set of value kinds."""
    LIST = "list"
    CATALOG = "catalog"
    SINGLE = "single"
    ENTITY_GROUP = "gen"
    SNIPPET = "desc"

    def __str__(self) -> str:
        return self.value


@dataclass
class Value:
    """A runtime value with its kind tag."""
    data: Any
    kind: ValueKind

    def __repr__(self) -> str:
        return f"Value({self.data!r}, {self.kind})"

    def is_empty(self) -> bool:
        if self.kind == ValueKind.LIST:
            return len(self.data) == 0 or self.data == [""]
        if self.kind == ValueKind.SINGLE:
            return self.data == ""
        return len(self.data) == 0

    def copy(self) -> "Value":
        """Independent copy; snippets are immutable once stored and are shared."""
        if self.kind == ValueKind.SNIPPET:
            return Value(self.data, self.kind)
        return Value(deepcopy(self.data), self.kind)


def list_val(items: List[str]) -> Value:
    """Create a list value."""
    return Value(list(items), ValueKind.LIST)


def catalog_val(entries: Dict[str, List[str]]) -> Value:
    """Create a catalog value."""
    return Value(dict(entries), ValueKind.CATALOG)


def single_val(text: str) -> Value:
    """Create a single-string value."""
    return Value(str(text), ValueKind.SINGLE)


def gen_val(entities: List[Entity]) -> Value:
    """Create an entity-group value."""
    return Value(list(entities), ValueKind.ENTITY_GROUP)


def snippet_val(nodes: List[Any]) -> Value:
    """Create a snippet (stored command sequence) value."""
    return Value(list(nodes), ValueKind.SNIPPET)


def infer_kind(data: Any) -> ValueKind:
    """Kind of raw data found inside a catalog (lists, strings or sub-catalogs)."""
    if isinstance(data, str):
        return ValueKind.SINGLE
    if isinstance(data, dict):
        return ValueKind.CATALOG
    if isinstance(data, list):
        return ValueKind.LIST
    raise ValueError(f"cannot classify value of type {type(data).__name__}")


@dataclass(frozen=True)
class Lookup:
    """
    Result of a value-store lookup.

    `exists` is False for unknown names; kind and value are then None.
    """
    exists: bool
    kind: Optional[ValueKind] = None
    value: Any = None

    @classmethod
    def of(cls, value: Value) -> "Lookup":
        return cls(True, value.kind, value.data)

    def is_empty(self) -> bool:
        return Value(self.value, self.kind).is_empty()


MISSING = Lookup(False)


def dedupe(items: List[Any]) -> List[Any]:
    """Remove duplicates keeping first occurrence; works for unhashable items."""
    if all(isinstance(item, str) for item in items):
        return list(dict.fromkeys(items))
    result: List[Any] = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


def kind_name(kind: Optional[ValueKind]) -> str:
    """Human-readable kind for error messages."""
    return "nothing" if kind is None else str(kind)
