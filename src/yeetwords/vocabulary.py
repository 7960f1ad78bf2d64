"""Vocabulary folder loading.

A story's words and sentences live in two folders next to the program, for
example ``words/`` and ``sentences/``. Each non-empty file in a folder is
one set, named by the file name up to its first period, holding the file's
distinct non-blank lines:

    words/
        noun.txt        ->  words["noun"] = ["cat", "dog", ...]
        Colour.list     ->  words["colour"] = [...]

Folders are matched by case-insensitive name prefix; the first match in
sorted order wins. A missing folder gives an empty catalog and a warning.
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from .config import RunConfig
from .errors import DiagnosticCollector, severe_warning, mild_warning
from .runtime.values import dedupe

Catalog = Dict[str, List[str]]


def find_folder(base: Path, prefix: str) -> Optional[Path]:
    """First entry of `base` whose name starts with `prefix`, ignoring case."""
    base = Path(base)
    if not base.is_dir():
        return None
    prefix = prefix.lower()
    for entry in sorted(base.iterdir(), key=lambda p: p.name):
        if entry.name.lower().startswith(prefix):
            return entry
    return None


def set_name(path: Path) -> str:
    """Set name for a file: its name up to the first period, lower-cased."""
    return path.name.split(".", 1)[0].lower()


def read_word_file(path: Path) -> List[str]:
    """Distinct stripped non-blank lines of a file, in order."""
    with open(path, 'r', encoding='utf-8') as f:
        lines = [line.strip() for line in f]
    return dedupe([line for line in lines if line])


def load_folder(base: Path, prefix: str,
                diagnostics: Optional[DiagnosticCollector] = None,
                on_file: Optional[Callable[[Path], None]] = None) -> Catalog:
    """
    Load every set in the first folder matching `prefix`.

    Args:
        base: Directory to search
        prefix: Folder name prefix, e.g. "word"
        diagnostics: Receives warnings for a missing folder or skipped entries
        on_file: Called with each file as it is read
    """
    diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
    catalog: Catalog = {}

    folder = find_folder(base, prefix)
    if folder is None or not folder.is_dir():
        diagnostics.add(severe_warning(
            "W005", f"no directory found for words or sentences matching {prefix}*"))
        return catalog

    for entry in sorted(folder.iterdir(), key=lambda p: p.name):
        if not entry.is_file() or entry.stat().st_size == 0:
            diagnostics.add(mild_warning(
                "W103", f"item {entry.name} in directory {folder} is not a file or is "
                        f"an empty file - ignoring"))
            continue
        if on_file is not None:
            on_file(entry)
        catalog[set_name(entry)] = read_word_file(entry)

    return catalog


def load_vocabulary(config: RunConfig,
                    diagnostics: Optional[DiagnosticCollector] = None,
                    on_file: Optional[Callable[[Path], None]] = None) -> Tuple[Catalog, Catalog]:
    """Load the (words, sentences) catalogs named by a run configuration."""
    words = load_folder(config.vocab_dir, config.words_prefix, diagnostics, on_file)
    sentences = load_folder(config.vocab_dir, config.sentences_prefix, diagnostics, on_file)
    return words, sentences
