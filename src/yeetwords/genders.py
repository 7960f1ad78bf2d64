"""Gender catalog loading with bundled data and external override support.

GEN blocks with a gender-set parameter give every generated entity a name
and pronoun fields drawn from this catalog. The catalog ships as
``data/genders.yaml`` and may be replaced by a file of the same shape:

- Explicit path passed to ``load_gender_catalog``
- Environment variable ``YEETWORDS_GENDER_DATA``
- Bundled data

Programs may override a gender's fields at runtime with REFGENDER; those
changes apply to the run's own copy of the catalog only.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

__all__ = [
    "YEETWORDS_GENDER_DATA",
    "PRONOUN_FIELDS",
    "NAME_FIELD",
    "Gender",
    "GenderCatalog",
    "load_gender_data",
    "load_gender_catalog",
    "clear_cache",
]

# Environment variable name for a custom gender file
YEETWORDS_GENDER_DATA = "YEETWORDS_GENDER_DATA"

# Bundled data location (relative to this file)
_BUNDLED_DATA_FILE = Path(__file__).parent / "data" / "genders.yaml"

# Pronoun fields copied onto generated entities, in this order
PRONOUN_FIELDS = ("heshe", "hisher", "himher", "manwoman", "waswere", "isare")

# Entity field holding a generated name; the gender itself keeps a pool
# of "names"
NAME_FIELD = "name"
NAMES_POOL = "names"


@dataclass
class Gender:
    """One gender: a pool of names and its pronoun set."""
    name: str
    names: List[str] = field(default_factory=list)
    pronouns: Dict[str, List[str]] = field(default_factory=dict)

    def fields(self) -> List[str]:
        """Every field REFGENDER may override."""
        return [NAMES_POOL] + list(self.pronouns)

    def get(self, field_name: str) -> Optional[List[str]]:
        if field_name == NAMES_POOL:
            return self.names
        return self.pronouns.get(field_name)

    def set(self, field_name: str, items: List[str]) -> bool:
        """Override a field; False if this gender has no such field."""
        if field_name == NAMES_POOL:
            self.names = list(items)
            return True
        if field_name in self.pronouns:
            self.pronouns[field_name] = list(items)
            return True
        return False


@dataclass
class GenderCatalog:
    """Genders by name plus named sets of genders."""
    genders: Dict[str, Gender] = field(default_factory=dict)
    sets: Dict[str, List[str]] = field(default_factory=dict)

    def gender(self, name: str) -> Optional[Gender]:
        return self.genders.get(name.lower())

    def gender_set(self, name: str) -> Optional[List[str]]:
        return self.sets.get(name.lower())

    def has_set(self, name: str) -> bool:
        """True if the set exists and every gender in it is defined."""
        members = self.gender_set(name)
        if not members:
            return False
        return all(m in self.genders for m in members)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenderCatalog":
        genders = {}
        for name, entry in data.get("genders", {}).items():
            pronouns = {}
            for key, value in (entry.get("pronouns") or {}).items():
                pronouns[str(key).lower()] = value if isinstance(value, list) else [str(value)]
            genders[str(name).lower()] = Gender(
                name=str(name).lower(),
                names=[str(n) for n in entry.get("names") or []],
                pronouns=pronouns,
            )
        sets = {
            str(name).lower(): [str(m).lower() for m in members]
            for name, members in data.get("sets", {}).items()
        }
        return cls(genders=genders, sets=sets)


def clear_cache() -> None:
    """Clear cached gender data.

    Call this if you modify an external gender file and want to reload.
    """
    _load_cached.cache_clear()


@lru_cache(maxsize=8)
def _load_cached(path_str: str) -> Dict[str, Any]:
    return _load_yaml(Path(path_str))


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load and validate a YAML gender file."""
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Invalid gender data in {path}: expected dict at root")

    schema_version = str(data.get("schema_version", "1.0"))
    if not schema_version.startswith("1."):
        raise ValueError(
            f"Unsupported schema version '{schema_version}' in {path}. "
            f"Expected version 1.x"
        )

    for section in ("genders", "sets"):
        if not isinstance(data.get(section), dict):
            raise ValueError(f"Gender data {path} missing required '{section}' section")

    data["_source_path"] = str(path)
    return data


def _resolve_path(custom_path: Optional[Path]) -> Path:
    if custom_path:
        path = Path(custom_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Custom gender data not found: {path}")
        return path.resolve()

    env_path = os.environ.get(YEETWORDS_GENDER_DATA, "").strip()
    if env_path:
        path = Path(env_path).expanduser()
        if path.is_file():
            return path.resolve()

    return _BUNDLED_DATA_FILE


def load_gender_data(custom_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load raw gender data (cached; do not mutate the result).

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ValueError: If the file has an invalid format
    """
    return _load_cached(str(_resolve_path(custom_path)))


def load_gender_catalog(custom_path: Optional[Path] = None) -> GenderCatalog:
    """A fresh, independently mutable catalog for one program run."""
    return GenderCatalog.from_dict(copy.deepcopy(load_gender_data(custom_path)))
