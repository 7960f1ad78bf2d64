"""
Run configuration.

A `RunConfig` is built once, before a program runs, and passed into the
interpreter. Nothing in the runtime reads the environment directly.

Environment Variables:
    YEETWORDS_VOCAB_DIR:   directory searched for the word and sentence folders
    YEETWORDS_SEED:        integer seed for reproducible runs
    YEETWORDS_GENDER_DATA: path to a replacement gender YAML file
"""

import os
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .genders import YEETWORDS_GENDER_DATA

YEETWORDS_VOCAB_DIR = "YEETWORDS_VOCAB_DIR"
YEETWORDS_SEED = "YEETWORDS_SEED"

DEFAULT_FORMAT = "ACPS"
LIVENESS_THRESHOLD = 10000


@dataclass(frozen=True)
class RunConfig:
    """Settings for one program run."""
    vocab_dir: Path = Path(".")
    words_prefix: str = "word"
    sentences_prefix: str = "sentence"
    seed: Optional[int] = None
    default_format: str = DEFAULT_FORMAT
    gender_data: Optional[Path] = None
    liveness_threshold: int = LIVENESS_THRESHOLD

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None, **overrides) -> "RunConfig":
        """
        Build a config from environment variables.

        Keyword overrides that are not None win over the environment.

        Raises:
            ValueError: if YEETWORDS_SEED is set but is not an integer
        """
        env = os.environ if environ is None else environ
        values = {}

        vocab = env.get(YEETWORDS_VOCAB_DIR, "").strip()
        if vocab:
            values["vocab_dir"] = Path(vocab).expanduser()

        seed = env.get(YEETWORDS_SEED, "").strip()
        if seed:
            try:
                values["seed"] = int(seed)
            except ValueError:
                raise ValueError(f"{YEETWORDS_SEED} must be an integer, got {seed!r}")

        genders = env.get(YEETWORDS_GENDER_DATA, "").strip()
        if genders:
            values["gender_data"] = Path(genders).expanduser()

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def make_rng(self) -> random.Random:
        """A fresh random generator for one run."""
        return random.Random(self.seed)
