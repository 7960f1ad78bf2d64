"""
Source lines and keyword classification for YeetWords programs.

A program is a sequence of lines, one command per line. Each line keeps its
1-indexed line number so that every error can point back at it.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional


class LineKind(Enum):
    """Structural role of a line."""
    PLAIN = auto()      # ordinary command, comment or blank line
    OPENER = auto()     # LOOP / GEN / DESC
    CLOSER = auto()     # LOOPEND / GENEND / DESCEND / END


class BlockKind(Enum):
    """The three kinds of block a program may contain."""
    LOOP = "LOOP"       # repeat block
    GEN = "GEN"         # entity-generation block
    DESC = "DESC"       # reusable snippet definition


# Every leaf command keyword.
COMMAND_KEYWORDS = frozenset({
    "DISPLAY", "WRITE", "FORMAT", "NEWLINE", "NEWPARA", "NEWCHAPTER",
    "ASSIGNLIST", "ASSIGNCATALOG", "ASSIGNGEN", "WORDJOIN",
    "UPCASE", "LOWCASE", "SUPCASE", "SLOWCASE",
    "REFGENDER", "RECITE", "SHIFT", "SHUFFLE", "CALL",
})

OPENER_KEYWORDS = {kind.value: kind for kind in BlockKind}

CLOSER_KEYWORDS = {
    "LOOPEND": BlockKind.LOOP,
    "GENEND": BlockKind.GEN,
    "DESCEND": BlockKind.DESC,
    "END": None,
}

COMMENT_PREFIX = "#"


@dataclass(frozen=True)
class SourceLine:
    """A single program line with its position."""
    number: int         # 1-indexed line number
    text: str           # raw text as written

    def __str__(self) -> str:
        return f"{self.number}: {self.text}"

    @property
    def stripped(self) -> str:
        return self.text.strip()

    @property
    def keyword(self) -> str:
        """The command keyword, upper-cased ("" for a blank line)."""
        words = self.text.split()
        return words[0].upper() if words else ""

    @property
    def params(self) -> str:
        """Everything after the keyword, stripped."""
        return remove_first_word(self.text)

    @property
    def param_list(self) -> List[str]:
        return self.params.split()

    @property
    def is_blank(self) -> bool:
        return not self.stripped

    @property
    def is_comment(self) -> bool:
        return self.stripped.startswith(COMMENT_PREFIX)

    @property
    def kind(self) -> LineKind:
        return classify(self.text)

    @property
    def block_kind(self) -> Optional[BlockKind]:
        """Block kind named by an opener or closer ("END" gives None)."""
        kw = self.keyword
        if kw in OPENER_KEYWORDS:
            return OPENER_KEYWORDS[kw]
        return CLOSER_KEYWORDS.get(kw)


def classify(text: str) -> LineKind:
    """Classify one raw line as opener, closer or plain."""
    words = text.split()
    if not words:
        return LineKind.PLAIN
    kw = words[0].upper()
    if kw in OPENER_KEYWORDS:
        return LineKind.OPENER
    if kw in CLOSER_KEYWORDS:
        return LineKind.CLOSER
    return LineKind.PLAIN


def remove_first_word(text: str) -> str:
    words = text.strip().split(maxsplit=1)
    return words[1].strip() if len(words) > 1 else ""


def is_string_literal(text: str) -> bool:
    """True if text (already stripped) is surrounded by double quotes."""
    return len(text) >= 2 and text[0] == '"' and text[-1] == '"'


def literal_value(text: str) -> str:
    """The contents of a string literal without its quotes."""
    return text[1:-1]


def split_lhs_rhs(text: str, delimiter: str = " = ") -> Optional[tuple]:
    """
    Split text into exactly two non-empty stripped parts.

    Returns None if the delimiter is missing, appears more than once, or
    either side is empty.
    """
    parts = text.split(delimiter)
    if len(parts) != 2:
        return None
    left, right = parts[0].strip(), parts[1].strip()
    if not left or not right:
        return None
    return left, right


def read_lines(source: str) -> List[SourceLine]:
    """Split program source into numbered lines."""
    return [SourceLine(i + 1, text) for i, text in enumerate(source.splitlines())]
