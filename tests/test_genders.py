"""
Tests for the gender catalog and its YAML data.
"""

import pytest

from yeetwords.genders import (
    YEETWORDS_GENDER_DATA, PRONOUN_FIELDS, Gender, GenderCatalog,
    load_gender_data, load_gender_catalog, clear_cache,
)


CUSTOM = """\
schema_version: "1.0"
genders:
  elf:
    names: [Arwen, Legolas]
    pronouns:
      heshe: they
sets:
  fae: [elf]
  broken: [elf, dwarf]
"""


@pytest.fixture(autouse=True)
def fresh_cache():
    clear_cache()
    yield
    clear_cache()


class TestBundledData:
    """Test the gender data shipped with the package."""

    def test_loads(self):
        data = load_gender_data()
        assert data["schema_version"] == "1.0"
        assert set(data["genders"]) == {"female", "male", "nonbinary", "robot"}

    def test_every_gender_has_names_and_pronouns(self):
        catalog = load_gender_catalog()
        for gender in catalog.genders.values():
            assert len(gender.names) == 13
            assert tuple(sorted(gender.pronouns)) == tuple(sorted(PRONOUN_FIELDS))
            for words in gender.pronouns.values():
                assert isinstance(words, list)

    def test_sets(self):
        catalog = load_gender_catalog()
        assert catalog.gender_set("binary") == ["female", "male"]
        assert catalog.has_set("all")
        assert catalog.has_set("HUMAN")
        assert not catalog.has_set("elves")

    def test_catalogs_are_independent(self):
        first = load_gender_catalog()
        first.gender("male").set("names", ["Zed"])
        assert load_gender_catalog().gender("male").names != ["Zed"]


class TestGender:
    """Test field access and overrides."""

    def test_fields(self):
        gender = Gender("x", ["A"], {"heshe": ["they"]})
        assert gender.fields() == ["names", "heshe"]
        assert gender.get("names") == ["A"]
        assert gender.get("nothing") is None

    def test_set(self):
        gender = Gender("x", ["A"], {"heshe": ["they"]})
        assert gender.set("heshe", ["xe"])
        assert gender.pronouns["heshe"] == ["xe"]
        assert not gender.set("tail", ["long"])

    def test_from_dict_wraps_strings(self):
        catalog = GenderCatalog.from_dict({
            "genders": {"Elf": {"names": ["Arwen"], "pronouns": {"HeShe": "they"}}},
            "sets": {"Fae": ["ELF"]},
        })
        assert catalog.gender("elf").pronouns == {"heshe": ["they"]}
        assert catalog.gender_set("fae") == ["elf"]


class TestCustomData:
    """Test loading gender data from other files."""

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "genders.yaml"
        path.write_text(CUSTOM)
        catalog = load_gender_catalog(path)
        assert catalog.gender("elf").names == ["Arwen", "Legolas"]
        assert catalog.has_set("fae")
        assert not catalog.has_set("broken")

    def test_environment_variable(self, tmp_path, monkeypatch):
        path = tmp_path / "genders.yaml"
        path.write_text(CUSTOM)
        monkeypatch.setenv(YEETWORDS_GENDER_DATA, str(path))
        assert "elf" in load_gender_catalog().genders

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_gender_data(tmp_path / "missing.yaml")

    def test_bad_schema_version(self, tmp_path):
        path = tmp_path / "genders.yaml"
        path.write_text(CUSTOM.replace('"1.0"', '"2.0"'))
        with pytest.raises(ValueError, match="schema version"):
            load_gender_data(path)

    def test_missing_section(self, tmp_path):
        path = tmp_path / "genders.yaml"
        path.write_text('schema_version: "1.0"\ngenders: {}\n')
        with pytest.raises(ValueError, match="sets"):
            load_gender_data(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "genders.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            load_gender_data(path)
