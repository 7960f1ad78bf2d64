"""
Command registry for the YeetWords interpreter.

Maps command keywords to handlers. A handler takes the program state and
the command's source line and returns the updated state:

    handler(state, line) -> state

Block commands (LOOP, GEN, DESC) are not in the registry; the interpreter
handles them as whole blocks. CALL needs the interpreter itself and is
registered by it.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .context import ProgramState
from .store import Namespace, normalize_name, has_period, split_field
from .values import ValueKind, dedupe, kind_name, list_val, snippet_val
from .quantities import CountMode, Quantity, parse_quantity, is_signed_int
from .formatting import invalid_codes, word_count
from .selection import sample_one
from .substitution import substitute
from .expressions import AssignStyle, assign, execute_assignment
from . import entities
from ..errors import (
    error_unknown_command, error_parameter_count, error_parameter_value,
    error_syntax, error_unknown_variable, error_type_mismatch,
)
from ..lines import SourceLine, is_string_literal, literal_value, split_lhs_rhs
from ..structure import Block

Handler = Callable[[ProgramState, SourceLine], ProgramState]

RANDOM_ORDER = "random"
SEQUENTIAL_ORDER = "order"


@dataclass
class Command:
    """A leaf command with its handler and usage text."""
    keyword: str
    handler: Handler
    usage: str = ""
    doc: str = ""


class CommandRegistry:
    """
    Registry of all leaf commands.

    Commands are registered by keyword and looked up for dispatch.
    """

    def __init__(self):
        self._commands: Dict[str, Command] = {}
        self._register_all()

    def get(self, keyword: str) -> Optional[Command]:
        """Look up a command by keyword (case-insensitive)."""
        return self._commands.get(keyword.upper())

    def register(self, command: Command) -> None:
        """Register a command, replacing any with the same keyword."""
        self._commands[command.keyword.upper()] = command

    def dispatch(self, state: ProgramState, line: SourceLine) -> ProgramState:
        """Run one leaf line. Blank lines and comments do nothing."""
        if line.is_blank or line.is_comment:
            return state
        command = self.get(line.keyword)
        if command is None:
            raise error_unknown_command(line)
        state.current_line = line
        return command.handler(state, line)

    def _register_all(self) -> None:
        """Register all built-in leaf commands."""
        self._register_output_commands()
        self._register_assignment_commands()
        self._register_entity_commands()

    # --- Output ---

    def _register_output_commands(self) -> None:
        self.register(Command("DISPLAY", display, "DISPLAY [n]",
                              "show the story so far, or its first/last n sentences"))
        self.register(Command("WRITE", write,
                              "WRITE sentences words [amount] [RANDOM|ORDER]",
                              "write substituted, formatted sentences"))
        self.register(Command("FORMAT", set_format, "FORMAT codes",
                              "set the format codes for following sentences"))
        self.register(Command("NEWLINE", newline, "NEWLINE", "start a new line"))
        self.register(Command("NEWPARA", newpara, "NEWPARA", "start a new paragraph"))
        self.register(Command("NEWCHAPTER", newchapter, "NEWCHAPTER",
                              "write the next chapter heading"))

    # --- Assignment ---

    def _register_assignment_commands(self) -> None:
        for style in AssignStyle:
            self.register(Command(
                style.value,
                _assignment_handler(style),
                f"{style.value} name [name ...] = value",
            ))
        self.register(Command("RECITE", recite,
                              'RECITE name = list [+ "prefix"] [+ all]',
                              "turn a list into one 'a, b and c' phrase"))

    # --- Entity groups ---

    def _register_entity_commands(self) -> None:
        self.register(Command("SHIFT", entities.shift, "SHIFT group [offset]",
                              "move the active member of a group"))
        self.register(Command("SHUFFLE", entities.shuffle, "SHUFFLE group",
                              "reorder the members of a group"))
        self.register(Command("REFGENDER", entities.refgender,
                              "REFGENDER gender.field [...] = list",
                              "override a gender's names or pronouns"))


def _assignment_handler(style: AssignStyle) -> Handler:
    def handler(state: ProgramState, line: SourceLine) -> ProgramState:
        return execute_assignment(style, line.params, state)
    handler.__name__ = style.name.lower()
    return handler


# =============================================================================
# Output commands
# =============================================================================

def display(state: ProgramState, line: SourceLine) -> ProgramState:
    """Print the story so far between banners. The story is not changed."""
    params = line.param_list
    if len(params) > 1:
        raise error_parameter_count("DISPLAY", line, expected="0 or 1 numeric parameters",
                                    actual=f"{len(params)} parameters")

    shown = state.output
    if params:
        if not is_signed_int(params[0]) or int(params[0]) == 0:
            raise error_parameter_value("DISPLAY", line,
                                        expected="a non-zero whole number", actual=params[0])
        n = int(params[0])
        if abs(n) > len(state.output):
            state.warn_mild("W102", "the number of sentences requested is larger than "
                                    "the story; displaying all sentences")
        elif n > 0:
            shown = state.output[:n]
        else:
            shown = state.output[n:]

    banner = f"DISPLAY COMMAND {line.stripped} in line {line.number}"
    state.display(f"\n---BEGIN {banner}---")
    for sentence in shown:
        state.display(sentence)
    state.display(f"---END {banner}---")
    return state


def _write_target(params: List[str], state: ProgramState, line: SourceLine) -> Quantity:
    if len(params) < 3:
        return Quantity(1, CountMode.CYCLE)
    quantity = parse_quantity(params[2], state.rng)
    if quantity is None:
        raise error_syntax(
            "WRITE", line,
            expected="a number or numeric range, or an amount of words or range of words",
            actual=params[2], message="syntax error in requested amount",
        )
    return quantity


def write(state: ProgramState, line: SourceLine) -> ProgramState:
    """
    WRITE sentences words [amount] [RANDOM|ORDER]

    Sentences may be a list or a catalog; words must be a catalog. The
    amount is a number of sentences or, written `NW`, a number of words
    to add to the story. Word targets stop after the first sentence that
    reaches the target; no extra sentence is written past it.
    """
    params = line.param_list
    if not 2 <= len(params) <= 4:
        raise error_parameter_count("WRITE", line, expected="2 - 4 parameters",
                                    actual=str(len(params)))

    words = state.store.lookup(params[1])
    if not words.exists:
        raise error_unknown_variable(params[1], "WRITE", line,
                                     expected="a valid word variable name", actual=params[1])
    if words.is_empty():
        raise error_parameter_value("WRITE", line, expected="a non-empty word variable",
                                    actual=params[1], message="the word variable is empty")

    sentences = state.store.lookup(params[0])
    if not sentences.exists:
        raise error_unknown_variable(params[0], "WRITE", line,
                                     expected="a valid sentence variable name",
                                     actual=params[0])
    if sentences.is_empty():
        raise error_parameter_value("WRITE", line, expected="a non-empty sentence variable",
                                    actual=params[0], message="the sentence variable is empty")

    if sentences.kind not in (ValueKind.LIST, ValueKind.CATALOG):
        raise error_type_mismatch(
            f"the sentence variable {params[0].lower()} is of the wrong type", "WRITE", line,
            expected="a variable of type list or catalog", actual=kind_name(sentences.kind),
        )
    if words.kind != ValueKind.CATALOG:
        raise error_type_mismatch(
            f"the word variable {params[1].lower()} is of the wrong type", "WRITE", line,
            expected="a variable of type catalog", actual=kind_name(words.kind),
        )

    target = _write_target(params, state, line)

    ordering = RANDOM_ORDER
    if len(params) == 4:
        ordering = params[3].lower()
        if ordering not in (RANDOM_ORDER, SEQUENTIAL_ORDER):
            raise error_syntax("WRITE", line, expected="RANDOM or ORDER", actual=params[3],
                               message="syntax error in the ordering parameter")

    if sentences.kind == ValueKind.CATALOG:
        pool = list(sentences.value.items())
    else:
        pool = list(sentences.value)

    if ordering == SEQUENTIAL_ORDER:
        index = 0
    else:
        index = state.rng.randrange(len(pool))

    written = 0
    words_so_far = state.word_count
    stop_at = words_so_far + target.amount

    while True:
        if target.mode == CountMode.CYCLE and written >= target.amount:
            break
        if target.mode == CountMode.WORD and words_so_far >= stop_at:
            break

        sentence = _pick_sentence(pool[index % len(pool)], state, line)
        formatted = state.write(substitute(sentence, state, words.value))
        written += 1
        words_so_far += word_count(formatted)
        index = _next_index(index, len(pool), ordering, state)

    return state


def _pick_sentence(item, state: ProgramState, line: SourceLine) -> str:
    if isinstance(item, str):
        return item
    key, choices = item
    picked = sample_one(choices, state.rng)
    if not picked:
        raise error_parameter_value(
            "WRITE", line,
            expected="no empty lists in a sentence catalog", actual=f"{key} is empty",
            message="your sentence variable should not contain any empty values",
        )
    return picked[0]


def _next_index(index: int, size: int, ordering: str, state: ProgramState) -> int:
    """Next sentence index; random order never repeats the previous index."""
    if ordering == SEQUENTIAL_ORDER:
        return index + 1
    if size == 1:
        return 0
    choices = [i for i in range(size) if i != index % size]
    return choices[state.rng.randrange(len(choices))]


def set_format(state: ProgramState, line: SourceLine) -> ProgramState:
    params = line.params.upper().split()
    if len(params) != 1:
        raise error_parameter_count("FORMAT", line, expected="1 string parameter",
                                    actual=f"{len(params)} parameters")
    bad = invalid_codes(params[0])
    if bad:
        raise error_parameter_value("FORMAT", line, expected="letters A-Z except O, R, U, V, W",
                                    actual="".join(bad),
                                    message=f"invalid format codes: {', '.join(bad)}")
    state.format_string = params[0]
    return state


def _special_write(state: ProgramState, line: SourceLine, sentence: str,
                   codes: str) -> ProgramState:
    if line.param_list:
        raise error_parameter_count(line.keyword, line, expected="no parameters",
                                    actual=f"{len(line.param_list)} parameters")
    state.write(sentence, codes)
    return state


def newline(state: ProgramState, line: SourceLine) -> ProgramState:
    return _special_write(state, line, " ", "Y")


def newpara(state: ProgramState, line: SourceLine) -> ProgramState:
    return _special_write(state, line, " ", "Z")


def newchapter(state: ProgramState, line: SourceLine) -> ProgramState:
    state = _special_write(state, line, f"Chapter {state.chapter_counter + 1}", "F")
    state.chapter_counter += 1
    return state


# =============================================================================
# RECITE
# =============================================================================

def recite_items(items: List[str], prefix: str = "") -> str:
    """
    Join items as a phrase: "a, b and c".

    A non-empty prefix is put in front of every item ("a sword, a bow").
    """
    prefix = prefix.strip()
    if prefix:
        items = [f"{prefix} {item}" for item in items]
    if len(items) <= 1:
        return "".join(items)
    return ", ".join(items[:-1]) + " and " + items[-1]


def recite(state: ProgramState, line: SourceLine) -> ProgramState:
    usage = 'name = list-variable + "prefix"[optional] + all[optional]'
    parts = split_lhs_rhs(line.params)
    if parts is None:
        raise error_syntax("RECITE", line, expected=usage, actual=line.params or "nothing")
    lhs, rhs = parts
    terms = [t.strip() for t in rhs.split(" + ")]
    if len(terms) > 3:
        raise error_syntax("RECITE", line, expected=usage, actual=rhs)

    source = normalize_name(terms[0])
    prefix = ""
    all_members = False
    if len(terms) >= 2:
        if is_string_literal(terms[1]):
            prefix = literal_value(terms[1])
        elif terms[1].lower() == "all":
            all_members = True
        else:
            raise error_parameter_value(
                "RECITE", line,
                expected="a string literal in quotes or the word 'all' without quotes",
                actual=terms[1],
            )
    if len(terms) == 3:
        if terms[2].lower() != "all":
            raise error_parameter_value("RECITE", line,
                                        expected="the word 'all' at the end, without quotes",
                                        actual=terms[2])
        all_members = True

    found = state.store.lookup(source)
    if not found.exists:
        raise error_unknown_variable(source, "RECITE", line,
                                     expected="a non-empty variable", actual=source)
    if found.kind != ValueKind.LIST:
        raise error_type_mismatch(f"the referenced variable {source} must be a list",
                                  "RECITE", line, expected=str(ValueKind.LIST),
                                  actual=kind_name(found.kind))

    if all_members and has_period(source):
        group, field_name = split_field(source)
        items = dedupe(state.store.field_values_all(group, field_name))
    else:
        items = dedupe(list(found.value))

    if not items:
        state.warn_severe("W003", f"empty variable {source}")

    phrase = list_val([recite_items(items, prefix)])
    for target in lhs.split():
        assign(AssignStyle.LIST, target, phrase, state)
    return state


# =============================================================================
# Snippets
# =============================================================================

def store_snippet(block: Block, state: ProgramState) -> ProgramState:
    """Store a DESC block's body, unexecuted, under its name."""
    opener = block.opener
    state.current_line = opener
    params = opener.param_list
    if len(params) != 1:
        raise error_parameter_count(
            "DESC", opener,
            expected="one parameter only, the name of the variable for storing this desc",
            actual=f"{len(params)} parameters",
        )
    name = normalize_name(params[0])
    if state.store.exists(name, Namespace.SNIPPET):
        state.warn_mild("W101", f"desc {name} already exists and will be overwritten")
    state.store.create(name, snippet_val(block.body), Namespace.SNIPPET)
    return state
