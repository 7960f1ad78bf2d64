"""
Tests for assignment commands and their right-hand sides.
"""

import random

import pytest

from yeetwords.runtime import (
    ProgramState, ValueStore, Namespace, ValueKind, AssignStyle,
    evaluate, execute_assignment, gen_val, list_val,
)
from yeetwords.errors import (
    UnknownVariable, TypeMismatch, InvalidSyntax, InvalidParameterValue,
    ParameterCountError, InvalidVariableName,
)


def make_state(seed=5):
    store = ValueStore(
        words={"noun": ["cat", "dog", "owl"], "adj": ["big", "red"]},
        sentences={"opening": ["the _adj_ _noun_"]},
    )
    return ProgramState(store=store, rng=random.Random(seed))


def assign_list(state, params):
    return execute_assignment(AssignStyle.LIST, params, state)


# --- List Arithmetic Tests ---

class TestListAssignment:
    """Test ASSIGNLIST union, difference and selection."""

    def test_literals_are_deduplicated(self):
        state = assign_list(make_state(), 'x = "a" + "b" + "a"')
        assert state.store.lookup("x").value == ["a", "b"]
        assert state.store.namespace_of("x") == Namespace.USER_VAR

    def test_union_with_variable(self):
        state = assign_list(make_state(), 'x = noun + "fox"')
        assert state.store.lookup("x").value == ["cat", "dog", "owl", "fox"]

    def test_difference(self):
        state = assign_list(make_state(), 'x = noun - "dog"')
        assert state.store.lookup("x").value == ["cat", "owl"]

    def test_left_to_right(self):
        state = assign_list(make_state(), 'x = "a" - "a" + "a"')
        assert state.store.lookup("x").value == ["a"]

    def test_multiple_targets_get_copies(self):
        state = assign_list(make_state(), 'x y = "a"')
        state.store.lookup("x").value.append("b")
        assert state.store.lookup("y").value == ["a"]

    def test_replaces_word_set(self):
        state = assign_list(make_state(), 'noun = "bat"')
        assert state.store.words["noun"] == ["bat"]
        assert state.store.lookup("wfolder").value["noun"] == ["bat"]

    def test_selection_shorthand(self):
        state = assign_list(make_state(), "x = noun 2")
        picked = state.store.lookup("x").value
        assert len(picked) == 2
        assert set(picked) <= {"cat", "dog", "owl"}

    def test_selection_more_than_available(self):
        state = assign_list(make_state(), "x = adj 5")
        assert sorted(state.store.lookup("x").value) == ["big", "red"]

    def test_selection_of_zero(self):
        with pytest.raises(InvalidParameterValue):
            assign_list(make_state(), "x = noun 0")

    def test_selection_kind_must_match(self):
        with pytest.raises(TypeMismatch):
            assign_list(make_state(), "x = wfolder 1")

    def test_unknown_variable(self):
        with pytest.raises(UnknownVariable):
            assign_list(make_state(), "x = nothing + noun")

    def test_catalog_operand_rejected(self):
        with pytest.raises(TypeMismatch):
            assign_list(make_state(), "x = wfolder")

    def test_missing_equals(self):
        with pytest.raises(InvalidSyntax) as exc_info:
            assign_list(make_state(), 'x "a"')
        assert exc_info.value.diagnostic.code == "E103"

    def test_word_set_must_stay_a_list(self):
        state = make_state()
        with pytest.raises(TypeMismatch):
            execute_assignment(AssignStyle.CATALOG, "noun = adj", state)


# --- Catalog Tests ---

class TestCatalogAssignment:
    """Test ASSIGNCATALOG."""

    def test_lists_become_entries(self):
        state = execute_assignment(AssignStyle.CATALOG, "c = noun + adj", make_state())
        found = state.store.lookup("c")
        assert found.kind == ValueKind.CATALOG
        assert found.value == {"noun": ["cat", "dog", "owl"], "adj": ["big", "red"]}

    def test_merge_and_remove(self):
        state = execute_assignment(AssignStyle.CATALOG, "c = wfolder - adj", make_state())
        assert list(state.store.lookup("c").value) == ["noun"]

    def test_catalog_selection(self):
        state = execute_assignment(AssignStyle.CATALOG, "c = wfolder 1", make_state())
        picked = state.store.lookup("c").value
        assert len(picked) == 1
        assert set(picked) <= {"noun", "adj"}

    def test_literal_rejected(self):
        with pytest.raises(TypeMismatch):
            execute_assignment(AssignStyle.CATALOG, 'c = "a"', make_state())


# --- Entity Group Assignment Tests ---

class TestGroupAssignment:
    """Test ASSIGNGEN and field assignment."""

    def make_groups(self):
        state = make_state()
        ann, bob, cy = {"name": ["Ann"]}, {"name": ["Bob"]}, {"name": ["Cy"]}
        state.store.create("a", gen_val([ann, bob]), Namespace.ENTITY_GROUP)
        state.store.create("b", gen_val([bob, cy]), Namespace.ENTITY_GROUP)
        return state

    def test_union_creates_group(self):
        state = execute_assignment(AssignStyle.GEN_ALL, "all = a + b", self.make_groups())
        assert state.store.namespace_of("all") == Namespace.ENTITY_GROUP
        names = [m["name"][0] for m in state.store.group_members("all")]
        assert names == ["Ann", "Bob", "Cy"]
        assert state.store.pointer("all") == 0

    def test_difference(self):
        state = execute_assignment(AssignStyle.GEN_ALL, "rest = a - b", self.make_groups())
        assert [m["name"][0] for m in state.store.group_members("rest")] == ["Ann"]

    def test_list_operand_rejected(self):
        with pytest.raises(TypeMismatch):
            execute_assignment(AssignStyle.GEN_ALL, "g = a + noun", self.make_groups())

    def test_gen_into_user_variable_rejected(self):
        state = assign_list(self.make_groups(), 'x = "sword"')
        with pytest.raises(TypeMismatch):
            execute_assignment(AssignStyle.GEN_ALL, "x = a", state)
        assert state.store.namespace_of("x") == Namespace.USER_VAR
        assert state.store.lookup("x").value == ["sword"]

    def test_gen_replaces_gen(self):
        state = execute_assignment(AssignStyle.GEN_ALL, "b = a", self.make_groups())
        assert [m["name"][0] for m in state.store.group_members("b")] == ["Ann", "Bob"]
        # pointer stays on Bob, the active member before the swap
        assert state.store.pointer("b") == 1

    def test_field_assignment(self):
        state = assign_list(self.make_groups(), 'a.weapon = "sword"')
        assert state.store.lookup("a.weapon").value == ["sword"]

    def test_field_of_missing_group(self):
        with pytest.raises(UnknownVariable):
            assign_list(make_state(), 'ghost.weapon = "sword"')

    def test_two_periods(self):
        with pytest.raises(InvalidVariableName):
            assign_list(self.make_groups(), 'a.b.c = "x"')


# --- WORDJOIN Tests ---

class TestWordJoin:
    """Test item-by-item joining."""

    def test_literals(self):
        state = execute_assignment(AssignStyle.WORDJOIN, 'x = "big " + noun', make_state())
        assert state.store.lookup("x").value == ["big cat", "big dog", "big owl"]

    def test_shorter_operand_cycles(self):
        state = execute_assignment(AssignStyle.WORDJOIN, 'x = noun + adj', make_state())
        assert state.store.lookup("x").value == ["catbig", "dogred", "owlbig"]

    def test_empty_operand_skipped(self):
        state = execute_assignment(AssignStyle.WORDJOIN, 'x = "" + noun', make_state())
        assert state.store.lookup("x").value == ["cat", "dog", "owl"]

    def test_needs_two_terms(self):
        with pytest.raises(ParameterCountError):
            execute_assignment(AssignStyle.WORDJOIN, "x = noun", make_state())


# --- Case Conversion Tests ---

class TestCaseConversion:
    """Test UPCASE, LOWCASE, SUPCASE and SLOWCASE."""

    def test_upcase_list(self):
        state = execute_assignment(AssignStyle.UPPER, "x = adj", make_state())
        assert state.store.lookup("x").value == ["BIG", "RED"]

    def test_lowcase_literal(self):
        state = execute_assignment(AssignStyle.LOWER, 'x = "Hello There"', make_state())
        assert state.store.lookup("x").value == ["hello there"]

    def test_sentence_case(self):
        state = execute_assignment(AssignStyle.SENTENCE_CASE, 'x = "hello There"', make_state())
        assert state.store.lookup("x").value == ["Hello There"]
        state = execute_assignment(AssignStyle.SENTENCE_CASE_LOWER, 'y = "Hello"', state)
        assert state.store.lookup("y").value == ["hello"]

    def test_in_place(self):
        state = execute_assignment(AssignStyle.UPPER, "noun = noun", make_state())
        assert state.store.words["noun"] == ["CAT", "DOG", "OWL"]

    def test_expression_rejected(self):
        with pytest.raises(InvalidSyntax):
            execute_assignment(AssignStyle.UPPER, "x = noun + adj", make_state())


class TestEvaluate:
    """Test evaluating a right-hand side on its own."""

    def test_evaluate_does_not_assign(self):
        state = make_state()
        value = evaluate(AssignStyle.LIST, '"a" + "b"', state)
        assert value.data == ["a", "b"]
        assert not state.store.exists("a")

    def test_result_kind(self):
        assert AssignStyle.GEN_ALL.result_kind == ValueKind.ENTITY_GROUP
        assert AssignStyle.WORDJOIN.result_kind == ValueKind.LIST
        assert AssignStyle.UPPER.is_case_conversion
