"""
Block structural parser for YeetWords programs.

Converts a flat list of numbered lines into a tree of blocks. Each block
keeps its opening and closing lines as the first and last of its items, so
an in-order walk of the tree gives back the original lines exactly once.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from .lines import SourceLine, BlockKind, LineKind, read_lines
from .errors import (
    DiagnosticCollector,
    error_unmatched_closer,
    error_unclosed_block,
    mild_warning,
)


@dataclass
class Block:
    """
    A nested command sequence.

    For LOOP/GEN/DESC blocks, items[0] is the opener and items[-1] the
    closer. The synthetic root block has kind None and no opener/closer.
    """
    items: List["Node"] = field(default_factory=list)
    kind: Optional[BlockKind] = None

    @property
    def is_root(self) -> bool:
        return self.kind is None

    @property
    def opener(self) -> Optional[SourceLine]:
        return None if self.is_root else self.items[0]

    @property
    def closer(self) -> Optional[SourceLine]:
        if self.is_root or len(self.items) < 2:
            return None
        return self.items[-1]

    @property
    def body(self) -> List["Node"]:
        """Children without the opener and closer lines."""
        if self.is_root:
            return list(self.items)
        return self.items[1:-1]

    def lines(self) -> Iterator[SourceLine]:
        """In-order traversal of every line in this block."""
        for item in self.items:
            if isinstance(item, Block):
                yield from item.lines()
            else:
                yield item

    def __len__(self) -> int:
        return len(self.items)


Node = Union[SourceLine, Block]


def chunk_lines(lines: List[SourceLine]) -> List[List[SourceLine]]:
    """
    Group maximal runs of plain lines together.

    Openers and closers always form a chunk of their own. Order is
    preserved; only grouping changes.
    """
    chunks: List[List[SourceLine]] = []
    for line in lines:
        kind = line.kind
        if (chunks and kind == LineKind.PLAIN
                and chunks[-1][-1].kind == LineKind.PLAIN):
            chunks[-1].append(line)
        else:
            chunks.append([line])
    return chunks


class StructureParser:
    """
    Builds the block tree with an explicit stack of open blocks.

    Usage:
        parser = StructureParser(lines)
        root = parser.parse()
    """

    def __init__(self, lines: List[SourceLine],
                 diagnostics: Optional[DiagnosticCollector] = None):
        self.lines = lines
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()

    def parse(self) -> Block:
        root = Block()
        stack: List[Block] = [root]

        for chunk in chunk_lines(self.lines):
            head = chunk[0]
            kind = head.kind
            if kind == LineKind.OPENER:
                block = Block(items=[head], kind=head.block_kind)
                stack[-1].items.append(block)
                stack.append(block)
            elif kind == LineKind.CLOSER:
                if len(stack) == 1:
                    raise error_unmatched_closer(head)
                top = stack.pop()
                self._check_closer(top, head)
                top.items.append(head)
            else:
                stack[-1].items.extend(chunk)

        if len(stack) > 1:
            raise error_unclosed_block(len(stack) - 1, stack[-1].opener)
        return root

    def _check_closer(self, block: Block, closer: SourceLine) -> None:
        """Warn when e.g. LOOPEND closes a GEN block. Plain END closes anything."""
        closes = closer.block_kind
        if closes is not None and closes != block.kind:
            self.diagnostics.add(mild_warning(
                "W104",
                f"{closer.keyword} closes the {block.kind.value} block opened at "
                f"line {block.opener.number}",
                closer.keyword,
                closer,
            ))


def parse(lines: List[SourceLine],
          diagnostics: Optional[DiagnosticCollector] = None) -> Block:
    """
    Convenience function to parse numbered lines into a block tree.

    Raises:
        UnmatchedCloser: a closer appears with no open block
        UnclosedBlock: input ends with blocks still open
    """
    return StructureParser(lines, diagnostics).parse()


def parse_source(source: str,
                 diagnostics: Optional[DiagnosticCollector] = None) -> Block:
    """Parse program text directly."""
    return parse(read_lines(source), diagnostics)


def flatten(block: Block) -> List[SourceLine]:
    """All lines of a tree in original order."""
    return list(block.lines())


def print_tree(block: Block, indent: int = 0) -> str:
    """Render a block tree for debugging."""
    out = []
    pad = "  " * indent
    for item in block.items:
        if isinstance(item, Block):
            out.append(f"{pad}[{item.kind.value}]")
            out.append(print_tree(item, indent + 1))
        else:
            out.append(f"{pad}{item.number:>4} | {item.text}")
    return "\n".join(line for line in out if line)
