"""
Assignment right-hand sides.

Every assignment command has the form ``NAME [NAME ...] = RHS``. The RHS is
evaluated once and the result is assigned to each name on the left.

RHS forms:
- ``term + term - term ...``: set union / difference, left to right
- ``variable count``: `count` random distinct items drawn from `variable`
- WORDJOIN: ``term + term ...`` joined item by item
- case conversions: a single string literal or list variable

A term is either a double-quoted string literal or an existing variable.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .context import ProgramState
from .store import Namespace, normalize_name, has_period, split_field
from .values import (
    Value, ValueKind, dedupe, kind_name,
    list_val, catalog_val, gen_val,
)
from .quantities import is_count_or_range, resolve_count
from .selection import unique_sample, sample_catalog
from ..errors import (
    error_syntax, error_parameter_count, error_parameter_value,
    error_unknown_variable, error_type_mismatch, error_invalid_name,
)
from ..lines import is_string_literal, literal_value, split_lhs_rhs

PLUS = " + "
MINUS = " - "


class AssignStyle(Enum):
    """The kind of assignment a command performs."""
    LIST = "ASSIGNLIST"
    CATALOG = "ASSIGNCATALOG"
    GEN_ALL = "ASSIGNGEN"
    WORDJOIN = "WORDJOIN"
    UPPER = "UPCASE"
    LOWER = "LOWCASE"
    SENTENCE_CASE = "SUPCASE"
    SENTENCE_CASE_LOWER = "SLOWCASE"

    @property
    def is_case_conversion(self) -> bool:
        return self in CASE_STYLES

    @property
    def result_kind(self) -> ValueKind:
        return STYLE_KINDS.get(self, ValueKind.LIST)


CASE_STYLES = frozenset({
    AssignStyle.UPPER, AssignStyle.LOWER,
    AssignStyle.SENTENCE_CASE, AssignStyle.SENTENCE_CASE_LOWER,
})

STYLE_KINDS = {
    AssignStyle.LIST: ValueKind.LIST,
    AssignStyle.CATALOG: ValueKind.CATALOG,
    AssignStyle.GEN_ALL: ValueKind.ENTITY_GROUP,
}

# Operand kinds accepted by each arithmetic style; None stands for a string literal
ALLOWED_OPERANDS = {
    AssignStyle.LIST: frozenset({None, ValueKind.LIST}),
    AssignStyle.CATALOG: frozenset({ValueKind.LIST, ValueKind.CATALOG}),
    AssignStyle.GEN_ALL: frozenset({ValueKind.ENTITY_GROUP}),
}

# Namespaces whose values must keep their kind when replaced
_FIXED_KIND = {
    Namespace.WORD_SET: ValueKind.LIST,
    Namespace.SENTENCE_SET: ValueKind.LIST,
    Namespace.ENTITY_GROUP: ValueKind.ENTITY_GROUP,
}


@dataclass(frozen=True)
class Operand:
    """One resolved RHS term."""
    text: str
    kind: Optional[ValueKind]       # None for a string literal
    value: Any

    @property
    def is_literal(self) -> bool:
        return self.kind is None

    def as_list(self) -> List[str]:
        return [self.value] if self.is_literal else list(self.value)


def resolve_operand(text: str, state: ProgramState) -> Operand:
    """Resolve a string literal or variable name."""
    text = text.strip()
    if is_string_literal(text):
        return Operand(text, None, literal_value(text))
    found = state.store.lookup(text)
    if not found.exists:
        raise error_unknown_variable(
            text, state.current_command, state.current_line,
            expected="an existing variable or a string literal in double quotes",
            actual=text,
        )
    return Operand(text, found.kind, found.value)


def convert_case(style: AssignStyle, item: str) -> str:
    if not item:
        return ""
    if style == AssignStyle.UPPER:
        return item.upper()
    if style == AssignStyle.LOWER:
        return item.lower()
    if style == AssignStyle.SENTENCE_CASE:
        return item[0].upper() + item[1:]
    if style == AssignStyle.SENTENCE_CASE_LOWER:
        return item[0].lower() + item[1:]
    raise ValueError(f"{style.value} is not a case conversion")


# =============================================================================
# Evaluation
# =============================================================================

def evaluate(style: AssignStyle, rhs: str, state: ProgramState) -> Value:
    """Evaluate an assignment RHS to a fresh value."""
    if style == AssignStyle.WORDJOIN:
        return list_val(word_join(rhs, state))
    if style.is_case_conversion:
        return list_val(case_convert(style, rhs, state))

    tokens = rhs.split()
    if len(tokens) == 2 and is_count_or_range(tokens[1]):
        return select_items(style, tokens[0], tokens[1], state)
    return combine(style, rhs, state)


def combine(style: AssignStyle, rhs: str, state: ProgramState) -> Value:
    """Union and difference of terms, left to right."""
    if style == AssignStyle.CATALOG:
        result: Any = {}
    else:
        result = []

    for plus_term in rhs.split(PLUS):
        minus_terms = plus_term.split(MINUS)
        result = _apply(style, result, resolve_operand(minus_terms[0], state), "+", state)
        for term in minus_terms[1:]:
            result = _apply(style, result, resolve_operand(term, state), "-", state)

    return Value(result, style.result_kind)


def _apply(style: AssignStyle, result: Any, operand: Operand, op: str,
           state: ProgramState) -> Any:
    allowed = ALLOWED_OPERANDS[style]
    if operand.kind not in allowed:
        raise error_type_mismatch(
            f"cannot add or subtract {operand.text}: it is not of a compatible type",
            state.current_command, state.current_line,
            expected=" or ".join(sorted("string literal" if k is None else str(k)
                                        for k in allowed)),
            actual="string literal" if operand.is_literal else kind_name(operand.kind),
        )

    if style == AssignStyle.LIST:
        items = operand.as_list()
        if op == "+":
            return dedupe(result + items)
        return dedupe([item for item in result if item not in items])

    if style == AssignStyle.CATALOG:
        updated: Dict[str, List[str]] = dict(result)
        if operand.kind == ValueKind.LIST:
            key = normalize_name(operand.text)
            if op == "+":
                updated[key] = list(operand.value)
            else:
                updated.pop(key, None)
        else:
            if op == "+":
                updated.update(operand.value)
            else:
                for key in operand.value:
                    updated.pop(key, None)
        return updated

    # Entity groups compare members structurally
    if op == "+":
        return dedupe(result + list(operand.value))
    return dedupe([member for member in result if member not in operand.value])


def select_items(style: AssignStyle, name: str, count_text: str,
                 state: ProgramState) -> Value:
    """`variable count` shorthand: draw distinct items at random."""
    count = resolve_count(count_text, state.rng)
    if count <= 0:
        raise error_parameter_value(
            state.current_command, state.current_line,
            expected="one or more items to select", actual=count_text,
            message="you cannot select zero items from a variable",
        )
    found = state.store.lookup(name)
    if not found.exists:
        raise error_unknown_variable(name, state.current_command, state.current_line)
    if found.kind != style.result_kind:
        raise error_type_mismatch(
            f"the command does not match the type of variable {name}",
            state.current_command, state.current_line,
            expected=str(style.result_kind), actual=kind_name(found.kind),
        )

    if found.kind == ValueKind.CATALOG:
        return catalog_val(sample_catalog(found.value, count, state.rng))
    if found.kind == ValueKind.ENTITY_GROUP:
        return gen_val(unique_sample(found.value, count, state.rng))
    return list_val(unique_sample(found.value, count, state.rng))


def _list_operand(text: str, state: ProgramState) -> List[str]:
    operand = resolve_operand(text, state)
    if operand.kind not in (None, ValueKind.LIST):
        raise error_type_mismatch(
            f"incompatible type for {operand.text}",
            state.current_command, state.current_line,
            expected="a variable of type list or a string literal",
            actual=kind_name(operand.kind),
        )
    return operand.as_list()


def word_join(rhs: str, state: ProgramState) -> List[str]:
    """
    Join terms item by item.

    When two operands differ in length, the shorter one is reused
    cyclically. Empty operands are skipped.
    """
    terms = rhs.split(PLUS)
    if len(terms) < 2:
        raise error_parameter_count(
            state.current_command, state.current_line,
            expected="at least 2 terms on the right hand side",
            actual=f"{len(terms)} term",
        )

    result: List[str] = []
    for term in terms:
        add = _list_operand(term, state)
        if not add or add == [""]:
            continue
        if not result:
            result = list(add)
        elif len(add) >= len(result):
            result = [result[i % len(result)] + item for i, item in enumerate(add)]
        else:
            result = [item + add[i % len(add)] for i, item in enumerate(result)]
    return result


def case_convert(style: AssignStyle, rhs: str, state: ProgramState) -> List[str]:
    rhs = rhs.strip()
    if not is_string_literal(rhs) and len(rhs.split()) != 1:
        raise error_syntax(
            state.current_command, state.current_line,
            expected="one string literal or one list variable", actual=rhs,
        )
    return [convert_case(style, item) for item in _list_operand(rhs, state)]


# =============================================================================
# Assignment
# =============================================================================

def assign(style: AssignStyle, target: str, value: Value, state: ProgramState) -> None:
    """
    Assign a value to one name.

    Existing names are replaced where they live; word-sets, sentence-sets
    and entity groups must keep their kind, and a gen may only replace a
    gen. New names become entity groups for ASSIGNGEN and user variables
    otherwise.
    """
    store = state.store
    name = normalize_name(target)

    if has_period(name):
        _assign_field(name, value, state)
        return

    ns = store.namespace_of(name)
    if ns is None:
        namespace = Namespace.ENTITY_GROUP if style == AssignStyle.GEN_ALL else Namespace.USER_VAR
        store.create(name, value.copy(), namespace)
        return

    fixed = _FIXED_KIND.get(ns)
    if fixed is not None and value.kind != fixed:
        raise error_type_mismatch(
            f"cannot assign a {kind_name(value.kind)} to {name}",
            state.current_command, state.current_line,
            expected=str(fixed), actual=kind_name(value.kind),
        )
    # a group needs a pointer, which only the gen namespace keeps
    if value.kind == ValueKind.ENTITY_GROUP and ns != Namespace.ENTITY_GROUP:
        current = store.lookup(name, ns)
        raise error_type_mismatch(
            f"cannot assign a gen to {name}, which is a {kind_name(current.kind)}",
            state.current_command, state.current_line,
            expected="a new name or an existing gen", actual=kind_name(current.kind),
        )
    store.replace(name, value.copy(), ns)


def _assign_field(name: str, value: Value, state: ProgramState) -> None:
    parts = split_field(name)
    if parts is None:
        raise error_invalid_name(
            name, state.current_command, state.current_line,
            reason="only one period is allowed, between a group and a field name",
        )
    if value.kind != ValueKind.LIST:
        raise error_type_mismatch(
            f"entity fields hold lists; cannot assign a {kind_name(value.kind)} to {name}",
            state.current_command, state.current_line,
            expected=str(ValueKind.LIST), actual=kind_name(value.kind),
        )
    group, field_name = parts
    if not state.store.set_field(group, field_name, list(value.data)):
        raise error_unknown_variable(
            name, state.current_command, state.current_line,
            expected="an existing entity group with an active member",
            actual=group,
        )


def execute_assignment(style: AssignStyle, params: str, state: ProgramState) -> ProgramState:
    """Parse ``NAME [NAME ...] = RHS``, evaluate the RHS and assign it."""
    parts = split_lhs_rhs(params)
    if parts is None:
        raise error_syntax(
            state.current_command, state.current_line,
            expected="NAME = VALUE", actual=params or "nothing",
            message="too few arguments given or ' = ' missing",
        )
    lhs, rhs = parts
    value = evaluate(style, rhs, state)
    for target in lhs.split():
        assign(style, target, value, state)
    return state
