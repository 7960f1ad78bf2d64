"""
Value store for the YeetWords interpreter.

Owns every named value in five namespaces. All reads and writes go through
`ValueStore.access`, parameterized by a namespace hint and an access mode:

    store.access("nouns")                              # lookup, all namespaces
    store.access("hero.name", Namespace.ENTITY_GROUP)  # active entity's field
    store.access("nouns", mode=AccessMode.REPLACE, new_value=list_val([...]))

Names are case-insensitive. Under the ALL hint namespaces are searched in the
order word-sets, sentence-sets, entity-groups, user-variables; snippets live
apart and are only reached with the SNIPPET hint.
"""

from enum import Enum, auto
from typing import Dict, List, Optional, Tuple

from .values import (
    Value, ValueKind, Lookup, MISSING, Entity,
)


class Namespace(Enum):
    """Namespace hint for store access."""
    ALL = auto()
    WORD_SET = auto()
    SENTENCE_SET = auto()
    ENTITY_GROUP = auto()
    USER_VAR = auto()
    SNIPPET = auto()


class AccessMode(Enum):
    LOOKUP = auto()
    REPLACE = auto()


# Search order under the ALL hint
ALL_ORDER = (
    Namespace.WORD_SET,
    Namespace.SENTENCE_SET,
    Namespace.ENTITY_GROUP,
    Namespace.USER_VAR,
)

# User variables that alias the loaded vocabulary catalogs
WORDS_ALIAS = "wfolder"
SENTENCES_ALIAS = "sfolder"


def normalize_name(name: str) -> str:
    return name.strip().lower()


def split_field(name: str) -> Optional[Tuple[str, str]]:
    """Split `group.field`; None unless there is exactly one period with text on both sides."""
    parts = name.split(".")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


def has_period(name: str) -> bool:
    return "." in name.strip()


class ValueStore:
    """
    Named data for one program run.

    Word-sets and sentence-sets are plain catalogs (name -> list of strings)
    as supplied by the vocabulary loader. The `wfolder` and `sfolder` user
    variables share those dictionaries, so replacing a word-set is visible
    through `wfolder` as well.
    """

    def __init__(self, words: Dict[str, List[str]] = None,
                 sentences: Dict[str, List[str]] = None):
        self.words: Dict[str, List[str]] = words if words is not None else {}
        self.sentences: Dict[str, List[str]] = sentences if sentences is not None else {}
        self.gens: Dict[str, Value] = {}
        self.descs: Dict[str, Value] = {}
        self.user_vars: Dict[str, Value] = {}
        self.gen_pointers: Dict[str, Optional[int]] = {}

        self.user_vars[WORDS_ALIAS] = Value(self.words, ValueKind.CATALOG)
        self.user_vars[SENTENCES_ALIAS] = Value(self.sentences, ValueKind.CATALOG)

    # =========================================================================
    # Access contract
    # =========================================================================

    def access(self, name: str, namespace: Namespace = Namespace.ALL,
               mode: AccessMode = AccessMode.LOOKUP,
               new_value: Optional[Value] = None) -> Lookup:
        """
        Look up or replace a named value.

        In LOOKUP mode returns what was found (or MISSING). In REPLACE mode
        the value is written to the namespace the name was found in and the
        previous value is returned; if nothing was found, nothing is written
        and MISSING is returned. No type coercion happens here.
        """
        if mode == AccessMode.REPLACE and new_value is None:
            raise ValueError("replace requires a new value")

        key = normalize_name(name)
        if namespace == Namespace.ALL:
            order = ALL_ORDER
        else:
            order = (namespace,)

        for ns in order:
            found = self._find(ns, key)
            if found.exists:
                if mode == AccessMode.REPLACE:
                    self._write(ns, key, new_value)
                return found
        return MISSING

    def lookup(self, name: str, namespace: Namespace = Namespace.ALL) -> Lookup:
        return self.access(name, namespace)

    def replace(self, name: str, value: Value,
                namespace: Namespace = Namespace.ALL) -> bool:
        """Replace an existing value; returns False if the name was not found."""
        return self.access(name, namespace, AccessMode.REPLACE, value).exists

    def exists(self, name: str, namespace: Namespace = Namespace.ALL) -> bool:
        return self.access(name, namespace).exists

    def namespace_of(self, name: str) -> Optional[Namespace]:
        """The namespace that currently holds a name (ALL search order)."""
        key = normalize_name(name)
        for ns in ALL_ORDER:
            if self._find(ns, key).exists:
                return ns
        return None

    def create(self, name: str, value: Value, namespace: Namespace) -> None:
        """Add a new name; entity groups get their pointer set up."""
        key = normalize_name(name)
        if namespace == Namespace.WORD_SET:
            self.words[key] = value.data
        elif namespace == Namespace.SENTENCE_SET:
            self.sentences[key] = value.data
        elif namespace == Namespace.ENTITY_GROUP:
            self.gens[key] = value
            self.gen_pointers[key] = 0 if value.data else None
        elif namespace == Namespace.USER_VAR:
            self.user_vars[key] = value
        elif namespace == Namespace.SNIPPET:
            self.descs[key] = value
        else:
            raise ValueError(f"cannot create a variable in namespace {namespace.name}")

    def _find(self, ns: Namespace, key: str) -> Lookup:
        if ns == Namespace.WORD_SET:
            if key in self.words:
                return Lookup(True, ValueKind.LIST, self.words[key])
        elif ns == Namespace.SENTENCE_SET:
            if key in self.sentences:
                return Lookup(True, ValueKind.LIST, self.sentences[key])
        elif ns == Namespace.ENTITY_GROUP:
            if has_period(key):
                return self._find_field(key)
            if key in self.gens:
                return Lookup.of(self.gens[key])
        elif ns == Namespace.USER_VAR:
            if key in self.user_vars:
                return Lookup.of(self.user_vars[key])
        elif ns == Namespace.SNIPPET:
            if key in self.descs:
                return Lookup.of(self.descs[key])
        return MISSING

    def _find_field(self, key: str) -> Lookup:
        parts = split_field(key)
        if parts is None:
            return MISSING
        group, field_name = parts
        entity = self.active_entity(group)
        if entity is None or field_name not in entity:
            return MISSING
        return Lookup(True, ValueKind.LIST, entity[field_name])

    def _write(self, ns: Namespace, key: str, value: Value) -> None:
        if ns == Namespace.WORD_SET:
            self.words[key] = value.data
        elif ns == Namespace.SENTENCE_SET:
            self.sentences[key] = value.data
        elif ns == Namespace.ENTITY_GROUP:
            if has_period(key):
                group, field_name = split_field(key)
                self.active_entity(group)[field_name] = value.data
            else:
                self._replace_group(key, value)
        elif ns == Namespace.USER_VAR:
            self.user_vars[key] = value
        elif ns == Namespace.SNIPPET:
            self.descs[key] = value

    def _replace_group(self, key: str, value: Value) -> None:
        """Swap a group's members, keeping the pointer on the same member if it survives."""
        previous = self.active_entity(key)
        self.gens[key] = value
        members = value.data
        if previous is not None and previous in members:
            self.gen_pointers[key] = members.index(previous)
        else:
            self.gen_pointers[key] = 0 if members else None

    # =========================================================================
    # Entity groups
    # =========================================================================

    def group_members(self, group: str) -> Optional[List[Entity]]:
        value = self.gens.get(normalize_name(group))
        return None if value is None else value.data

    def pointer(self, group: str) -> Optional[int]:
        """Index of the active member, or None if unset or out of range."""
        key = normalize_name(group)
        members = self.group_members(key)
        idx = self.gen_pointers.get(key)
        if members is None or idx is None or not 0 <= idx < len(members):
            return None
        return idx

    def set_pointer(self, group: str, index: Optional[int]) -> None:
        key = normalize_name(group)
        members = self.group_members(key)
        if members is None:
            raise KeyError(group)
        if index is not None and not 0 <= index < len(members):
            raise IndexError(f"pointer {index} out of range for group {key}")
        self.gen_pointers[key] = index

    def active_entity(self, group: str) -> Optional[Entity]:
        idx = self.pointer(group)
        if idx is None:
            return None
        return self.group_members(group)[idx]

    def set_field(self, group: str, field_name: str, items: List[str]) -> bool:
        """Set (or add) a field on the active entity; False if there is none."""
        entity = self.active_entity(group)
        if entity is None:
            return False
        entity[normalize_name(field_name)] = items
        return True

    def field_values_all(self, group: str, field_name: str) -> List[str]:
        """A field's items concatenated across every member of a group."""
        result: List[str] = []
        for entity in self.group_members(group) or []:
            result.extend(entity.get(normalize_name(field_name), []))
        return result
