"""
Sentence formatting codes and word counting.

Output is markdown. A format string is a sequence of single-letter codes
applied left to right, so "CPS" capitalizes, then appends a period, then
appends a space.
"""

import re
from typing import Callable, Dict, Iterable, List

_A_AN_LOWER = re.compile(r"(^| )a (?=[aeiou])")
_A_AN_UPPER = re.compile(r"(^| )A (?=[AEIOU])")

# Words that are only markdown markup and do not count towards word totals
MARKDOWN_MARKERS = frozenset({"#", "##", ">", "---"})


def a_an(sentence: str) -> str:
    """Replace 'a' with 'an' before a vowel ('A' with 'AN' in upper case)."""
    sentence = _A_AN_LOWER.sub(r"\1an ", sentence)
    return _A_AN_UPPER.sub(r"\1AN ", sentence)


def capitalize_first_letter(sentence: str) -> str:
    for i, ch in enumerate(sentence):
        if ch.isalpha():
            return sentence[:i] + ch.upper() + sentence[i + 1:]
    return sentence


FORMAT_CODES: Dict[str, Callable[[str], str]] = {
    "X": lambda s: s,                                   # no formatting
    "P": lambda s: s + ".",                             # period
    "S": lambda s: s + " ",                             # trailing space
    "K": lambda s: s + "?",                             # question mark
    "E": lambda s: s + "!",                             # exclamation mark
    "M": lambda s: s + ",",                             # comma
    "C": capitalize_first_letter,                       # capitalize
    "G": lambda s: s + "\n",                            # carriage return
    "A": a_an,                                          # a / an
    "Q": lambda s: '"' + s + '"',                       # quotation marks
    "B": lambda s: " **" + s + "** ",                   # bold
    "I": lambda s: " *" + s + "* ",                     # italics
    "L": lambda s: "  \n" + s,                          # starts on a new line
    "H": lambda s: s + "  \n\n---   \n",               # horizontal rule after
    "J": lambda s: "  \n\n---   \n" + s,               # horizontal rule before
    "Y": lambda s: s + "  \n",                          # new line after
    "N": lambda s: "\n\n" + s,                          # starts a new paragraph
    "Z": lambda s: s + "\n\n",                          # new paragraph after
    "T": lambda s: "  \n> " + s,                        # blockquote
    "D": lambda s: "  \n# " + s + "  \n",               # heading
    "F": lambda s: "  \n## " + s + "  \n",              # subheading
}


def invalid_codes(codes: str) -> List[str]:
    """
    Characters of a format string that are not format codes, in order, once each.

    Every letter A-Z is a code except O, R, U, V and W.
    """
    bad: List[str] = []
    for ch in codes.upper():
        if ch not in FORMAT_CODES and ch not in bad:
            bad.append(ch)
    return bad


def apply_format(sentence: str, codes: str) -> str:
    """Apply every code of a format string, left to right."""
    for code in codes:
        sentence = FORMAT_CODES[code](sentence)
    return sentence


def word_count(text: str) -> int:
    """Words in one output sentence, not counting bare markdown markers."""
    return sum(1 for word in text.split() if word not in MARKDOWN_MARKERS)


def total_words(sentences: Iterable[str]) -> int:
    return sum(word_count(s) for s in sentences)
