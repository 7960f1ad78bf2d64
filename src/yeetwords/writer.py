"""
Story output.

The finished story is written as one markdown file. Its default name comes
from the letters of the first sentence, e.g. "The cat sat." gives
``Thecatsat_4821.md``. An existing file is never overwritten.
"""

import random
from pathlib import Path
from typing import Callable, List, Optional

from .errors import error_duplicate_output

EXTENSION = ".md"
FALLBACK_STEM = "STORY"
EMPTY_STEM = "YourStory"
STEM_LENGTH = 9

Prompt = Callable[[str], str]


def proposed_filename(output: List[str], rng: random.Random) -> str:
    """Default file name for a story."""
    first = output[0].strip() if output else FALLBACK_STEM
    letters = "".join(ch for ch in first if ch.isalpha())[:STEM_LENGTH]
    suffix = rng.randint(1000, 9999)
    return f"{letters or EMPTY_STEM}_{suffix}{EXTENSION}"


def choose_path(output: List[str], directory: Path, rng: random.Random,
                prompt: Prompt = input) -> Path:
    """
    Pick the output path, asking for another name if the default exists.

    Raises:
        DuplicateOutputFile: if the final choice also exists
    """
    directory = Path(directory)
    proposed = proposed_filename(output, rng)
    path = directory / proposed
    if path.exists():
        answer = prompt("Enter filename for story: ").strip()
        path = directory / (answer or proposed)
    if path.exists():
        raise error_duplicate_output(str(path))
    return path


def write_story(output: List[str], path: Path) -> Path:
    """Write sentences to a file exactly as they are, with no separators."""
    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        f.write("".join(output))
    return path


def save_story(output: List[str], directory: Path = Path("."),
               rng: Optional[random.Random] = None,
               prompt: Prompt = input) -> Path:
    """Choose a file name and write the story; returns the path written."""
    rng = rng if rng is not None else random.Random()
    return write_story(output, choose_path(output, directory, rng, prompt))
