"""
Tests for format codes, word counting and placeholder substitution.
"""

import random

import pytest

from yeetwords.runtime import (
    ProgramState, ValueStore, Namespace, gen_val, FALLBACK,
    apply_format, word_count, total_words, substitute,
)
from yeetwords.runtime.formatting import a_an, capitalize_first_letter, invalid_codes
from yeetwords.runtime.substitution import substitute_with_count


def make_state(words=None, seed=1):
    return ProgramState(store=ValueStore(words or {}), rng=random.Random(seed))


# --- Format Code Tests ---

class TestFormatCodes:
    """Test format strings applied to sentences."""

    def test_capitalize_period_space(self):
        assert apply_format("the cat sat", "CPS") == "The cat sat. "

    def test_codes_apply_in_order(self):
        assert apply_format("hi", "PQ") == '"hi."'
        assert apply_format("hi", "QP") == '"hi".'

    def test_default_format(self):
        assert apply_format("a owl hooted", "ACPS") == "An owl hooted. "

    def test_no_formatting(self):
        assert apply_format("as is", "X") == "as is"

    def test_markdown_codes(self):
        assert apply_format("Title", "D") == "  \n# Title  \n"
        assert apply_format("Chapter 1", "F") == "  \n## Chapter 1  \n"
        assert apply_format(" ", "Z") == " \n\n"
        assert apply_format("quote", "T") == "  \n> quote"

    def test_a_an(self):
        assert a_an("a apple and a pear") == "an apple and a pear"
        assert a_an("A OWL") == "AN OWL"
        assert a_an("banana a egg") == "banana an egg"
        assert a_an("data analysis") == "data analysis"

    def test_capitalize_skips_leading_symbols(self):
        assert capitalize_first_letter('"well," she said') == '"Well," she said'
        assert capitalize_first_letter("123") == "123"

    def test_invalid_codes(self):
        assert invalid_codes("CPS") == []
        assert invalid_codes("cps") == []
        assert invalid_codes("CORUVW") == ["O", "R", "U", "V", "W"]
        assert invalid_codes("OO1") == ["O", "1"]


# --- Word Count Tests ---

class TestWordCount:
    """Test counting words of output sentences."""

    def test_plain(self):
        assert word_count("The cat sat. ") == 3

    def test_markdown_markers_not_counted(self):
        assert word_count("  \n## Chapter 1  \n") == 2
        assert word_count("  \n> a quote") == 2

    def test_blank(self):
        assert word_count(" \n\n") == 0

    def test_total(self):
        assert total_words(["One two. ", "Three. "]) == 3


# --- Substitution Tests ---

class TestSubstitution:
    """Test placeholder replacement."""

    def test_single_choice(self):
        state = make_state({"noun": ["cat"]})
        assert substitute("the _noun_ sat", state) == "the cat sat"

    def test_one_pass_per_placeholder(self):
        state = make_state({"a": ["x"], "b": ["y"]})
        text, passes = substitute_with_count("_a_ _b_ _a_", state, state.store.words)
        assert text == "x y x"
        assert passes == 3

    def test_inserted_text_is_not_rescanned(self):
        state = make_state({"loop": ["_loop_"]})
        text, passes = substitute_with_count("say _loop_", state, state.store.words)
        assert text == "say _loop_"
        assert passes == 1

    def test_draws_from_set(self):
        state = make_state({"color": ["red", "green", "blue"]})
        for _ in range(20):
            assert substitute("_color_", state) in ("red", "green", "blue")

    def test_case_insensitive_token(self):
        state = make_state({"noun": ["cat"]})
        assert substitute("_NOUN_", state) == "cat"

    def test_missing_set_uses_fallback(self):
        state = make_state({"noun": ["cat"]})
        assert substitute("the _verb_", state) == f"the {FALLBACK}"
        assert state.diagnostics.codes() == ["W001"]

    def test_empty_set_uses_fallback(self):
        state = make_state({"noun": []})
        assert substitute("_noun_", state) == FALLBACK
        assert state.diagnostics.codes() == ["W002"]

    def test_entity_field(self):
        state = make_state()
        state.store.create("hero", gen_val([{"name": ["Ann"]}, {"name": ["Bob"]}]),
                           Namespace.ENTITY_GROUP)
        assert substitute("_hero.name_ waved", state) == "Ann waved"
        state.store.set_pointer("hero", 1)
        assert substitute("_hero.name_ waved", state) == "Bob waved"

    def test_explicit_catalog(self):
        state = make_state({"noun": ["cat"]})
        assert substitute("_noun_", state, {"noun": ["owl"]}) == "owl"
