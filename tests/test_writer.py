"""
Tests for choosing the story file name and writing the story.
"""

import random

import pytest

from yeetwords.errors import DuplicateOutputFile
from yeetwords.writer import proposed_filename, choose_path, write_story, save_story


def no_prompt(message):
    raise AssertionError("prompt should not be called")


class TestProposedFilename:
    """Test default file names."""

    def test_letters_of_first_sentence(self):
        name = proposed_filename(["The cat sat. ", "It ran."], random.Random(1))
        stem, rest = name.split("_")
        assert stem == "Thecatsat"
        assert rest.endswith(".md")
        assert 1000 <= int(rest[:-3]) <= 9999

    def test_stem_is_truncated(self):
        name = proposed_filename(["Once upon a time"], random.Random(1))
        assert name.startswith("Onceupona_")

    def test_empty_story(self):
        assert proposed_filename([], random.Random(1)).startswith("STORY_")

    def test_no_letters(self):
        assert proposed_filename(["  \n---  "], random.Random(1)).startswith("YourStory_")

    def test_seeded(self):
        output = ["The end."]
        assert proposed_filename(output, random.Random(5)) == \
            proposed_filename(output, random.Random(5))


class TestChoosePath:
    """Test collision handling."""

    def test_free_name_is_used(self, tmp_path):
        path = choose_path(["The cat."], tmp_path, random.Random(2), prompt=no_prompt)
        assert path.parent == tmp_path
        assert path.name.startswith("Thecat_")

    def test_existing_name_prompts(self, tmp_path):
        taken = proposed_filename(["The cat."], random.Random(2))
        (tmp_path / taken).write_text("old")
        path = choose_path(["The cat."], tmp_path, random.Random(2),
                           prompt=lambda message: "mine.md")
        assert path == tmp_path / "mine.md"

    def test_empty_answer_keeps_name_and_fails(self, tmp_path):
        taken = proposed_filename(["The cat."], random.Random(2))
        (tmp_path / taken).write_text("old")
        with pytest.raises(DuplicateOutputFile):
            choose_path(["The cat."], tmp_path, random.Random(2), prompt=lambda m: "")
        assert (tmp_path / taken).read_text() == "old"

    def test_chosen_name_also_taken(self, tmp_path):
        taken = proposed_filename(["The cat."], random.Random(2))
        (tmp_path / taken).write_text("old")
        (tmp_path / "mine.md").write_text("older")
        with pytest.raises(DuplicateOutputFile) as exc_info:
            choose_path(["The cat."], tmp_path, random.Random(2), prompt=lambda m: "mine.md")
        assert exc_info.value.diagnostic.code == "E301"


class TestWriteStory:
    """Test writing the story file."""

    def test_sentences_joined_as_is(self, tmp_path):
        path = write_story(["One. ", "Two.  \n", "Three."], tmp_path / "s.md")
        assert path.read_text(encoding="utf-8") == "One. Two.  \nThree."

    def test_save_story(self, tmp_path):
        path = save_story(["The end. "], tmp_path, rng=random.Random(3), prompt=no_prompt)
        assert path.exists()
        assert path.read_text(encoding="utf-8") == "The end. "
