"""
Placeholder substitution.

A placeholder is a token between underscores: `_noun_` names a word-set in
the word catalog given to WRITE, `_hero.name_` names a field of the active
member of an entity group. Each placeholder is replaced by one random item
of the named list, or by the fallback token when there is nothing to draw.

Placeholders are resolved left to right and the scan resumes after each
replacement, so a sentence with n placeholders takes exactly n passes and
text that was just inserted is never scanned again.
"""

import re
from typing import Dict, List, Optional, Tuple

from .context import ProgramState
from .store import Namespace, has_period
from .values import Lookup, MISSING, ValueKind, infer_kind
from .selection import sample_one

FALLBACK = "SOMETHING"

# Token: letters and digits, optionally one period followed by more of them
PLACEHOLDER = re.compile(r"_([^\W_]+(?:\.[^\W_]*)?)_")


def catalog_lookup(key: str, catalog: Optional[Dict[str, object]]) -> Lookup:
    """Look up one key in a raw catalog dictionary."""
    key = key.lower()
    if catalog is None or key not in catalog:
        return MISSING
    data = catalog[key]
    try:
        kind = infer_kind(data)
    except ValueError:
        kind = None
    return Lookup(True, kind, data)


def resolve_placeholder(token: str, state: ProgramState,
                        words: Optional[Dict[str, List[str]]]) -> Lookup:
    token = token.lower()
    if has_period(token):
        return state.store.lookup(token, Namespace.ENTITY_GROUP)
    return catalog_lookup(token, words)


def choose_replacement(token: str, state: ProgramState,
                       words: Optional[Dict[str, List[str]]]) -> str:
    """One random item for a placeholder token, or the fallback with a warning."""
    found = resolve_placeholder(token, state, words)
    if not found.exists:
        state.warn_severe(
            "W001",
            f"cannot substitute _{token}_: the word set {token.lower()} does not "
            f"exist in the word catalog used by this command",
        )
        return FALLBACK
    if found.kind != ValueKind.LIST or not found.value:
        state.warn_severe(
            "W002",
            f"cannot substitute _{token}_: {token.lower()} is empty or is not "
            f"a collection of words",
        )
        return FALLBACK
    return sample_one(found.value, state.rng)[0]


def substitute_with_count(sentence: str, state: ProgramState,
                          words: Optional[Dict[str, List[str]]]) -> Tuple[str, int]:
    """Substitute every placeholder; also returns the number of passes taken."""
    passes = 0
    pos = 0
    while True:
        match = PLACEHOLDER.search(sentence, pos)
        if match is None:
            return sentence, passes
        replacement = choose_replacement(match.group(1), state, words)
        sentence = sentence[:match.start()] + replacement + sentence[match.end():]
        pos = match.start() + len(replacement)
        passes += 1


def substitute(sentence: str, state: ProgramState,
               words: Optional[Dict[str, List[str]]] = None) -> str:
    """
    Replace every placeholder in a sentence.

    Args:
        sentence: Text possibly containing `_token_` placeholders
        state: Program state (store lookups, random source, warnings)
        words: Word catalog for plain tokens (defaults to the loaded word-sets)
    """
    if words is None:
        words = state.store.words
    return substitute_with_count(sentence, state, words)[0]
