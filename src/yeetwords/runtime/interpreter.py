"""
Tree-walking interpreter for YeetWords programs.

Walks the block tree produced by the structural parser, dispatching leaf
commands to the command registry and handling LOOP, GEN and DESC blocks
itself. Repeat blocks are run as an explicit loop over full passes of the
block body, counted either in passes (cycle mode) or in the total number
of words in the story (word mode).
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .context import ProgramState
from .store import ValueStore, Namespace
from .values import ValueKind
from .quantities import CountMode, Quantity, parse_quantity
from .commands import Command, CommandRegistry, store_snippet
from .entities import generate_group
from ..config import RunConfig
from ..errors import (
    Diagnostic, DiagnosticCollector, YeetError,
    error_call_depth, error_parameter_count, error_parameter_value, error_syntax,
    error_unknown_variable,
)
from ..genders import load_gender_catalog
from ..lines import BlockKind, SourceLine
from ..structure import Block, Node, parse_source

LOOP_USAGE = "LOOP 5, LOOP 4--10, LOOP 500W or LOOP 600W--900W"
MAX_CALL_DEPTH = 64


@dataclass
class ExecutionResult:
    """Result of running a program."""
    success: bool
    state: Optional[ProgramState] = None
    error: Optional[YeetError] = None
    error_message: Optional[str] = None

    @property
    def output(self) -> List[str]:
        """The finished sentences, in order."""
        if self.state:
            return self.state.output
        return []

    @property
    def text(self) -> str:
        return "".join(self.output)

    @property
    def word_count(self) -> int:
        return self.state.word_count if self.state else 0

    @property
    def diagnostics(self) -> List[Diagnostic]:
        if self.state:
            return self.state.diagnostics.diagnostics
        return []


class Interpreter:
    """
    Tree-walking interpreter for YeetWords programs.

    Usage:
        interp = Interpreter(RunConfig(seed=1))
        state = interp.new_state(words=..., sentences=...)
        result = interp.execute(parse_source(text), state)
    """

    def __init__(self, config: RunConfig = None,
                 display: Callable[[str], None] = print,
                 progress: Optional[Callable[[int], None]] = None):
        """
        Initialize the interpreter.

        Args:
            config: Run settings (seed, default format, gender data)
            display: Sink for DISPLAY output
            progress: Called with the remaining count while long repeats run
        """
        self.config = config or RunConfig()
        self.display = display
        self.progress = progress
        self.commands = CommandRegistry()
        self.commands.register(Command("CALL", self._call, "CALL name",
                                       "run a stored desc once"))

    def new_state(self, words: Dict[str, List[str]] = None,
                  sentences: Dict[str, List[str]] = None,
                  diagnostics: Optional[DiagnosticCollector] = None) -> ProgramState:
        """A fresh program state holding the given vocabulary."""
        return ProgramState(
            store=ValueStore(words, sentences),
            genders=load_gender_catalog(self.config.gender_data),
            rng=self.config.make_rng(),
            format_string=self.config.default_format,
            diagnostics=diagnostics if diagnostics is not None else DiagnosticCollector(),
            display=self.display,
            progress=self.progress,
            liveness_threshold=self.config.liveness_threshold,
        )

    def execute(self, root: Block, state: ProgramState) -> ExecutionResult:
        """
        Run a whole program once.

        Stopping errors end the run; the state is returned as it was when
        the error happened.
        """
        try:
            state = self.run(root, state)
        except YeetError as e:
            state.diagnostics.add_error(e)
            return ExecutionResult(
                success=False,
                state=state,
                error=e,
                error_message=str(e),
            )
        return ExecutionResult(success=True, state=state)

    def run(self, root: Block, state: ProgramState) -> ProgramState:
        """Run the root block for one cycle; stopping errors propagate."""
        return self.run_nodes(state, root.body, 0, 1, CountMode.CYCLE)

    # =========================================================================
    # Engine
    # =========================================================================

    def run_nodes(self, state: ProgramState, nodes: List[Node], current: int,
                  stop: int, mode: CountMode) -> ProgramState:
        """
        Run a node sequence in full passes until `current` reaches `stop`.

        In cycle mode `current` counts passes; in word mode it is the word
        count of the story, re-measured after every pass.
        """
        while current < stop:
            remaining = stop - current
            if state.progress is not None and remaining > state.liveness_threshold:
                state.progress(remaining)

            for node in nodes:
                state = self._execute_node(state, node)

            if mode == CountMode.CYCLE:
                current += 1
            else:
                current = state.word_count
        return state

    def _execute_node(self, state: ProgramState, node: Node) -> ProgramState:
        if isinstance(node, SourceLine):
            return self.commands.dispatch(state, node)

        if node.kind == BlockKind.GEN:
            return generate_group(node, state)
        if node.kind == BlockKind.DESC:
            return store_snippet(node, state)
        return self._execute_loop(node, state)

    def _execute_loop(self, block: Block, state: ProgramState) -> ProgramState:
        state.current_line = block.opener
        target = loop_target(block.opener, state)
        if target.mode == CountMode.WORD:
            start = state.word_count
            return self.run_nodes(state, block.body, start, start + target.amount,
                                  CountMode.WORD)
        return self.run_nodes(state, block.body, 0, target.amount, CountMode.CYCLE)

    def _call(self, state: ProgramState, line: SourceLine) -> ProgramState:
        """CALL name: run a stored desc once."""
        params = line.param_list
        if len(params) != 1:
            raise error_parameter_count(
                "CALL", line,
                expected="one parameter only, the name of the desc to be called",
                actual=f"{len(params)} parameters",
            )
        found = state.store.lookup(params[0], Namespace.SNIPPET)
        if not found.exists:
            raise error_unknown_variable(
                params[0].lower(), "CALL", line,
                expected="a desc defined before it is called", actual=params[0],
            )
        if found.kind != ValueKind.SNIPPET:
            raise error_syntax("CALL", line, expected="a desc", actual=str(found.kind))
        if state.call_depth >= MAX_CALL_DEPTH:
            raise error_call_depth(params[0].lower(), line, MAX_CALL_DEPTH)

        state.call_depth += 1
        try:
            return self.run_nodes(state, found.value, 0, 1, CountMode.CYCLE)
        finally:
            state.call_depth -= 1


def loop_target(opener: SourceLine, state: ProgramState) -> Quantity:
    """
    Parse a LOOP line's target.

    A bare LOOP runs once. Ranges are drawn here, and a target that comes
    out as zero is rejected before the block runs.
    """
    params = opener.param_list
    if not params:
        return Quantity(1, CountMode.CYCLE)
    if len(params) > 1:
        raise error_parameter_count("LOOP", opener, expected=LOOP_USAGE,
                                    actual=f"{len(params)} parameters")

    text = params[0]
    quantity = parse_quantity(text, state.rng)
    if quantity is None:
        raise error_syntax("LOOP", opener, expected=LOOP_USAGE, actual=text)
    if quantity.amount <= 0:
        raise error_parameter_value("LOOP", opener, expected="a target greater than zero",
                                    actual=text)
    return quantity


def run_program(source: str, words: Dict[str, List[str]] = None,
                sentences: Dict[str, List[str]] = None,
                config: RunConfig = None,
                display: Callable[[str], None] = print,
                diagnostics: Optional[DiagnosticCollector] = None) -> ExecutionResult:
    """
    Parse and run program text in one call.

    Structural errors are reported the same way as runtime errors, in the
    returned result.
    """
    interp = Interpreter(config, display=display)
    state = interp.new_state(words, sentences, diagnostics)
    try:
        root = parse_source(source, state.diagnostics)
    except YeetError as e:
        state.diagnostics.add_error(e)
        return ExecutionResult(success=False, state=state, error=e, error_message=str(e))
    return interp.execute(root, state)
