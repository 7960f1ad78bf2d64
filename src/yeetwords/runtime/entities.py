"""
Entity groups: GEN blocks and the commands that move through a group.

A GEN block creates a named group of entities (characters, cities, ...),
each a mapping from field name to a list of words:

    GEN hero 3 human
    weapon 1 weapons
    friends 2 names ALLUNIQUE
    GENEND

The opening line gives the group name, the number of entities and an
optional gender set; each body line fills one field of every entity.
One member of each group is active at a time; `hero.weapon` in a sentence
or an assignment refers to the active member's field.
"""

from typing import List, Optional

from .context import ProgramState
from .store import Namespace, normalize_name, has_period
from .values import Entity, ValueKind, gen_val, kind_name
from .quantities import is_count_or_range, resolve_count, is_signed_int
from .selection import unique_sample, sample_one, shift_group, shuffle_group
from ..errors import (
    error_parameter_count, error_parameter_value, error_syntax,
    error_unknown_variable, error_type_mismatch, error_invalid_name,
    error_undefined_gender, error_nested_block,
)
from ..genders import NAME_FIELD
from ..lines import SourceLine, split_lhs_rhs
from ..structure import Block

ALL_UNIQUE = "ALLUNIQUE"

GEN_USAGE = "GEN name [count] [gender-set]"
FIELD_USAGE = "field count list-variable [ALLUNIQUE]"


def _resolve_positive(text: str, command: str, line: SourceLine,
                      state: ProgramState) -> int:
    if not is_count_or_range(text):
        raise error_syntax(command, line, expected="a number or numeric range", actual=text)
    amount = resolve_count(text, state.rng)
    if amount <= 0:
        raise error_parameter_value(command, line, expected="greater than zero",
                                    actual=str(amount))
    return amount


def _make_entity(state: ProgramState, gender_set: Optional[str],
                 used_names: List[str]) -> Entity:
    """A new entity; with a gender set it gets a unique name and pronouns."""
    entity: Entity = {}
    if gender_set is None:
        return entity

    gender_name = sample_one(state.genders.gender_set(gender_set), state.rng)[0]
    gender = state.genders.gender(gender_name)
    name = sample_one(gender.names, state.rng, exclude=used_names)
    entity[NAME_FIELD] = name
    used_names.extend(name)
    for field_name, words in gender.pronouns.items():
        entity[field_name] = list(words)
    return entity


def generate_group(block: Block, state: ProgramState) -> ProgramState:
    """Execute a whole GEN block."""
    opener = block.opener
    state.current_line = opener
    params = opener.param_list

    if not 1 <= len(params) <= 3:
        raise error_parameter_count("GEN", opener, expected=GEN_USAGE,
                                    actual=f"{len(params)} parameters")

    name = normalize_name(params[0])
    if has_period(name):
        raise error_invalid_name(name, "GEN", opener)

    holder = state.store.namespace_of(name)
    if holder == Namespace.ENTITY_GROUP:
        state.warn_mild("W101", f"entity group {name} already exists and will be overwritten")
    elif holder is not None:
        found = state.store.lookup(name)
        raise error_type_mismatch(
            f"{name} already exists as a {kind_name(found.kind)}", "GEN", opener,
            expected="a new name or an existing entity group", actual=kind_name(found.kind),
        )

    count = _resolve_positive(params[1] if len(params) > 1 else "1", "GEN", opener, state)

    gender_set = None
    if len(params) == 3:
        gender_set = params[2].lower()
        if not state.genders.has_set(gender_set):
            raise error_undefined_gender(gender_set, "GEN", opener)

    used_names: List[str] = []
    entities = [_make_entity(state, gender_set, used_names) for _ in range(count)]
    state.store.create(name, gen_val(entities), Namespace.ENTITY_GROUP)

    for node in block.body:
        if isinstance(node, Block):
            raise error_nested_block("GEN", node.opener)
        _fill_field(name, entities, node, state)

    state.current_line = opener
    return state


def _fill_field(group: str, entities: List[Entity], line: SourceLine,
                state: ProgramState) -> None:
    """Apply one GEN body line to every entity of the group."""
    state.current_line = line
    if line.is_blank or line.is_comment:
        return

    params = line.text.split()
    if not 3 <= len(params) <= 4:
        raise error_parameter_count("GEN", line, expected=FIELD_USAGE,
                                    actual=f"{len(params)} parameters")

    field_name = normalize_name(params[0])
    if state.store.exists(f"{group}.{field_name}", Namespace.ENTITY_GROUP):
        state.warn_mild("W101", f"field {field_name} already exists in {group} "
                                f"and will be overwritten")

    amount = _resolve_positive(params[1], "GEN", line, state)

    all_unique = False
    if len(params) == 4:
        if params[3].upper() != ALL_UNIQUE:
            raise error_parameter_value("GEN", line, expected=ALL_UNIQUE, actual=params[3])
        all_unique = True

    source = state.store.lookup(params[2])
    if not source.exists:
        raise error_unknown_variable(params[2], "GEN", line)
    if source.kind != ValueKind.LIST:
        raise error_type_mismatch(
            f"incompatible variable type for {params[2]}", "GEN", line,
            expected=str(ValueKind.LIST), actual=kind_name(source.kind),
        )

    exclude: List[str] = []
    for entity in entities:
        items = unique_sample(source.value, amount, state.rng, exclude)
        entity[field_name] = items
        if all_unique:
            exclude.extend(items)


# =============================================================================
# Commands on existing groups
# =============================================================================

def _group_param(text: str, state: ProgramState) -> str:
    """Validate a parameter naming an entity group."""
    name = normalize_name(text)
    command, line = state.current_command, state.current_line
    if has_period(name):
        raise error_syntax(command, line, expected="an entity group",
                           actual="a field inside an entity group")
    if state.store.group_members(name) is None:
        raise error_unknown_variable(name, command, line, expected="an entity group",
                                     actual="an unknown variable or one that is not an entity group")
    return name


def shift(state: ProgramState, line: SourceLine) -> ProgramState:
    """SHIFT group [offset]: move the active member cyclically."""
    params = line.param_list
    if not 1 <= len(params) <= 2:
        raise error_parameter_count("SHIFT", line, expected="1 or 2 parameters",
                                    actual=str(len(params)))

    offset = 1
    if len(params) == 2:
        if not is_signed_int(params[1]) or int(params[1]) == 0:
            raise error_syntax("SHIFT", line, expected="a non-zero whole number",
                               actual=params[1])
        offset = int(params[1])

    group = _group_param(params[0], state)
    if not state.store.group_members(group) or state.store.pointer(group) is None:
        state.warn_severe("W004", f"entity group {group} is empty or has no active member")
        return state

    shift_group(state.store, group, offset)
    return state


def shuffle(state: ProgramState, line: SourceLine) -> ProgramState:
    """SHUFFLE group: reorder members, keeping the same member active."""
    params = line.param_list
    if len(params) != 1:
        raise error_parameter_count("SHUFFLE", line, expected="1 parameter",
                                    actual=str(len(params)))
    shuffle_group(state.store, _group_param(params[0], state), state.rng)
    return state


def refgender(state: ProgramState, line: SourceLine) -> ProgramState:
    """REFGENDER gender.field [gender.field ...] = list-variable"""
    parts = split_lhs_rhs(line.params)
    if parts is None:
        raise error_syntax("REFGENDER", line, expected="gender.names = your_variable",
                           actual=line.params or "nothing")
    lhs, rhs = parts
    if len(rhs.split()) != 1:
        raise error_syntax("REFGENDER", line,
                           expected="only 1 variable on the right hand side", actual=rhs)

    source = state.store.lookup(rhs)
    if not source.exists:
        raise error_unknown_variable(rhs, "REFGENDER", line)
    if source.kind != ValueKind.LIST:
        raise error_type_mismatch(
            f"variable {rhs.lower()} is not of a compatible type", "REFGENDER", line,
            expected=str(ValueKind.LIST), actual=kind_name(source.kind),
        )

    for target in lhs.split():
        pair = split_lhs_rhs(target.lower(), ".")
        if pair is None:
            raise error_syntax("REFGENDER", line,
                               expected="gender-specific names such as male.names",
                               actual=target)
        gender_name, field_name = pair
        gender = state.genders.gender(gender_name)
        if gender is None:
            raise error_undefined_gender(gender_name, "REFGENDER", line)
        if not gender.set(field_name, source.value):
            raise error_unknown_variable(field_name, "REFGENDER", line,
                                         expected=", ".join(gender.fields()),
                                         actual=field_name)
    return state
