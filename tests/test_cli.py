"""
Tests for the command-line runner.
"""

import textwrap

import pytest

from yeetwords.__main__ import main, unknown_keywords
from yeetwords.structure import parse_source


PROGRAM = textwrap.dedent("""\
    FORMAT CPS
    LOOP 2
    WRITE sentences wfolder
    LOOPEND
""")


@pytest.fixture
def project(tmp_path):
    words = tmp_path / "words"
    words.mkdir()
    (words / "noun.txt").write_text("cat\n", encoding="utf-8")
    sentences = tmp_path / "sentences"
    sentences.mkdir()
    (sentences / "sentences.txt").write_text("the _noun_ slept\n", encoding="utf-8")
    program = tmp_path / "story.yw"
    program.write_text(PROGRAM, encoding="utf-8")
    return tmp_path


class TestCheck:
    """Test the check subcommand."""

    def test_ok(self, project, capsys):
        assert main(["check", str(project / "story.yw")]) == 0
        assert "OK: story.yw - 4 line(s), no errors" in capsys.readouterr().out

    def test_tree(self, project, capsys):
        assert main(["check", str(project / "story.yw"), "--tree"]) == 0
        assert "[LOOP]" in capsys.readouterr().out

    def test_structure_error(self, tmp_path, capsys):
        program = tmp_path / "bad.yw"
        program.write_text("LOOP 2\nNEWLINE\n")
        assert main(["check", str(program)]) == 1
        assert "E002" in capsys.readouterr().err

    def test_unknown_command(self, tmp_path, capsys):
        program = tmp_path / "bad.yw"
        program.write_text("NEWLINE\nFLY away\n")
        assert main(["check", str(program)]) == 1
        assert "E101" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["check", str(tmp_path / "none.yw")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_gen_fields_are_not_commands(self):
        root = parse_source("GEN hero\nweapon 1 weapons\nGENEND\nLOOP\nFLY\nLOOPEND")
        assert [line.number for line in unknown_keywords(root)] == [5]


class TestRun:
    """Test the run subcommand."""

    def test_no_write_prints_story(self, project, capsys):
        code = main(["run", str(project / "story.yw"), "--vocab", str(project),
                     "--seed", "1", "--no-write"])
        captured = capsys.readouterr()
        assert code == 0
        assert "The cat slept. The cat slept. " in captured.out
        assert "Y| Reading file noun.txt" in captured.err
        assert "6 words, not written" in captured.err

    def test_writes_file(self, project, capsys):
        out_dir = project / "out"
        out_dir.mkdir()
        code = main(["run", str(project / "story.yw"), "--vocab", str(project),
                     "--seed", "1", "--output-dir", str(out_dir)])
        assert code == 0
        files = list(out_dir.iterdir())
        assert len(files) == 1
        assert files[0].name.startswith("Thecatsle_")
        assert files[0].read_text(encoding="utf-8") == "The cat slept. The cat slept. "
        assert "Writing 6 words to file" in capsys.readouterr().err

    def test_runtime_error(self, project, capsys):
        program = project / "bad.yw"
        program.write_text("WRITE nothing wfolder\n")
        code = main(["run", str(program), "--vocab", str(project), "--no-write"])
        assert code == 1
        assert "E201" in capsys.readouterr().err

    def test_missing_vocabulary_warns(self, tmp_path, capsys):
        program = tmp_path / "p.yw"
        program.write_text("NEWLINE\n")
        code = main(["run", str(program), "--vocab", str(tmp_path / "none"), "--no-write"])
        assert code == 0
        assert "W005" in capsys.readouterr().err

    def test_bad_seed_from_environment(self, project, monkeypatch, capsys):
        monkeypatch.setenv("YEETWORDS_SEED", "abc")
        code = main(["run", str(project / "story.yw"), "--vocab", str(project), "--no-write"])
        assert code == 1
        assert "YEETWORDS_SEED" in capsys.readouterr().err

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            main([])
