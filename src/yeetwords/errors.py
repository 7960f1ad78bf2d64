"""
YeetWords exceptions and diagnostics.

Error code ranges:
- E0xx: Block structure errors
- E1xx: Command syntax and parameter errors
- E2xx: Variable and type errors
- E3xx: Output errors
- W0xx: Severe warnings
- W1xx: Mild warnings
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from .lines import SourceLine


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    STOPPING = "stopping"
    SEVERE = "severe warning"
    MILD = "mild warning"


@dataclass
class Diagnostic:
    """A single diagnostic message (stopping error or warning)."""
    code: str                           # E101, W001, etc.
    message: str                        # Human-readable message
    severity: ErrorSeverity
    command: str = ""                   # Command keyword, e.g. WRITE
    line_number: Optional[int] = None
    line_text: Optional[str] = None     # The raw program line
    expected: Optional[str] = None
    actual: Optional[str] = None
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        loc = f"line {self.line_number}" if self.line_number is not None else "program"
        where = f" in {self.command}" if self.command else ""
        parts.append(f"{loc}: {self.severity.value}[{self.code}]: {self.message}{where}")

        if show_source and self.line_text is not None:
            parts.append("    |")
            parts.append(f"{self.line_number or '':>3} | {self.line_text}")

        if self.expected:
            parts.append(f"    = expected: {self.expected}")
        if self.actual:
            parts.append(f"    = found: {self.actual}")
        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "command": self.command,
            "line": self.line_number,
            "text": self.line_text,
            "expected": self.expected,
            "actual": self.actual,
            "hints": self.hints,
        }


class YeetError(Exception):
    """Base exception for YeetWords errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    def __str__(self) -> str:
        return self.diagnostic.format()

    @property
    def line_number(self) -> Optional[int]:
        return self.diagnostic.line_number


class StoppingError(YeetError):
    """A fatal error; the run halts immediately."""
    pass


class UnmatchedCloser(StoppingError):
    """A block closer with no open block (E001)."""
    pass


class UnclosedBlock(StoppingError):
    """Program ended with blocks still open (E002)."""

    def __init__(self, diagnostic: Diagnostic, open_count: int):
        self.open_count = open_count
        super().__init__(diagnostic)


class NestedBlockError(StoppingError):
    """A block appeared where only plain commands are allowed (E003)."""
    pass


class UnknownCommand(StoppingError):
    """Unrecognised command keyword (E101)."""
    pass


class ParameterCountError(StoppingError):
    """Wrong number of parameters (E102)."""
    pass


class InvalidSyntax(StoppingError):
    """Malformed command syntax (E103)."""
    pass


class InvalidParameterValue(StoppingError):
    """Parameter present but with an unacceptable value (E104)."""
    pass


class CallDepthExceeded(StoppingError):
    """CALL chain went too deep (E105)."""
    pass


class UnknownVariable(StoppingError):
    """Reference to a variable that does not exist (E201)."""
    pass


class TypeMismatch(StoppingError):
    """Variable of the wrong kind for the command (E202)."""
    pass


class InvalidVariableName(StoppingError):
    """Variable name that cannot be used as a target (E203)."""
    pass


class UndefinedGender(StoppingError):
    """Gender or gender set is not defined (E204)."""
    pass


class DuplicateOutputFile(StoppingError):
    """Chosen output file already exists (E301)."""
    pass


def _diag(code: str, message: str, command: str, line: Optional[SourceLine],
          expected: str = None, actual: str = None,
          severity: ErrorSeverity = ErrorSeverity.STOPPING) -> Diagnostic:
    return Diagnostic(
        code=code,
        message=message,
        severity=severity,
        command=command,
        line_number=line.number if line else None,
        line_text=line.text if line else None,
        expected=expected,
        actual=actual,
    )


# --- Structure error codes ---

def error_unmatched_closer(line: SourceLine) -> UnmatchedCloser:
    """E001: Closer with no open block."""
    diag = _diag("E001", "too many END-style commands (LOOPEND, GENEND, DESCEND)",
                 line.keyword, line)
    return UnmatchedCloser(diag)


def error_unclosed_block(open_count: int, opener: Optional[SourceLine] = None) -> UnclosedBlock:
    """E002: Blocks left open at end of program."""
    diag = _diag(
        "E002",
        "insufficient END-style commands compared to start-style commands",
        opener.keyword if opener else "",
        opener,
        expected="an equal amount of start-style and end-style commands",
        actual=f"{open_count} extra start(s) or missing end(s)",
    )
    diag.hints.append("every LOOP, GEN and DESC needs a matching LOOPEND, GENEND or DESCEND")
    return UnclosedBlock(diag, open_count)


def error_nested_block(command: str, line: SourceLine) -> NestedBlockError:
    """E003: Nested block in a location that does not allow one."""
    diag = _diag("E003", "you cannot have nested structures in this location", command, line)
    return NestedBlockError(diag)


# --- Command error codes ---

def error_unknown_command(line: SourceLine) -> UnknownCommand:
    """E101: Unrecognised command."""
    diag = _diag("E101", f"unrecognized command '{line.keyword}'", line.keyword, line)
    return UnknownCommand(diag)


def error_parameter_count(command: str, line: SourceLine, expected: str = None,
                          actual: str = None) -> ParameterCountError:
    """E102: Incorrect number of parameters."""
    diag = _diag("E102", "incorrect number of parameters", command, line, expected, actual)
    return ParameterCountError(diag)


def error_syntax(command: str, line: SourceLine, expected: str = None,
                 actual: str = None, message: str = "incorrect syntax") -> InvalidSyntax:
    """E103: Incorrect syntax."""
    diag = _diag("E103", message, command, line, expected, actual)
    return InvalidSyntax(diag)


def error_parameter_value(command: str, line: SourceLine, expected: str = None,
                          actual: str = None,
                          message: str = "incorrect parameter value") -> InvalidParameterValue:
    """E104: Incorrect parameter value."""
    diag = _diag("E104", message, command, line, expected, actual)
    return InvalidParameterValue(diag)


def error_call_depth(name: str, line: SourceLine, limit: int) -> CallDepthExceeded:
    """E105: CALL nested too deeply."""
    diag = _diag("E105", f"CALL nested too deeply while calling {name}", "CALL", line,
                 expected=f"at most {limit} nested CALLs",
                 actual=f"more than {limit} nested CALLs")
    diag.hints.append("a DESC that CALLs itself, directly or through another DESC, never finishes")
    return CallDepthExceeded(diag)


# --- Variable error codes ---

def error_unknown_variable(name: str, command: str, line: SourceLine,
                           expected: str = None, actual: str = None) -> UnknownVariable:
    """E201: Unknown variable name."""
    diag = _diag("E201", f"unknown variable name {name}", command, line, expected, actual)
    return UnknownVariable(diag)


def error_type_mismatch(message: str, command: str, line: SourceLine,
                        expected: str = None, actual: str = None) -> TypeMismatch:
    """E202: Type mismatch."""
    diag = _diag("E202", message, command, line, expected, actual)
    return TypeMismatch(diag)


def error_invalid_name(name: str, command: str, line: SourceLine,
                       reason: str = "it contains a period") -> InvalidVariableName:
    """E203: Invalid variable name."""
    diag = _diag("E203", f"variable name {name} is invalid because {reason}", command, line)
    return InvalidVariableName(diag)


def error_undefined_gender(name: str, command: str, line: SourceLine) -> UndefinedGender:
    """E204: Undefined gender."""
    diag = _diag("E204", f"gender {name} is not defined", command, line)
    return UndefinedGender(diag)


# --- Output error codes ---

def error_duplicate_output(filename: str) -> DuplicateOutputFile:
    """E301: Output file already exists."""
    diag = _diag("E301", f"desired filename {filename} already exists; no changes were made to it",
                 "", None)
    return DuplicateOutputFile(diag)


# --- Warnings ---

def severe_warning(code: str, message: str, command: str = "",
                   line: Optional[SourceLine] = None) -> Diagnostic:
    """W0xx: Something is probably wrong but the run can continue."""
    return _diag(code, message, command, line, severity=ErrorSeverity.SEVERE)


def mild_warning(code: str, message: str, command: str = "",
                 line: Optional[SourceLine] = None) -> Diagnostic:
    """W1xx: Informational warning, e.g. overwriting a variable."""
    return _diag(code, message, command, line, severity=ErrorSeverity.MILD)


class DiagnosticCollector:
    """Collects warnings during a run."""

    def __init__(self, listener: Optional[Callable[[Diagnostic], None]] = None):
        self.diagnostics: List[Diagnostic] = []
        self.listener = listener

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic, notifying the listener if there is one."""
        self.diagnostics.append(diagnostic)
        if self.listener is not None:
            self.listener(diagnostic)

    def add_error(self, error: YeetError) -> None:
        """Add an error exception as a diagnostic."""
        self.add(error.diagnostic)

    def _count(self, severity: ErrorSeverity) -> int:
        return sum(1 for d in self.diagnostics if d.severity == severity)

    @property
    def error_count(self) -> int:
        return self._count(ErrorSeverity.STOPPING)

    @property
    def severe_count(self) -> int:
        return self._count(ErrorSeverity.SEVERE)

    @property
    def mild_count(self) -> int:
        return self._count(ErrorSeverity.MILD)

    @property
    def warning_count(self) -> int:
        return self.severe_count + self.mild_count

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    @property
    def has_warnings(self) -> bool:
        return self.warning_count > 0

    def codes(self) -> List[str]:
        """Codes of all collected diagnostics, in order."""
        return [d.code for d in self.diagnostics]

    def format_all(self, show_source: bool = True) -> str:
        """Format all diagnostics for display."""
        parts = [d.format(show_source) for d in self.diagnostics]
        if self.error_count > 0:
            parts.append(f"\n{self.error_count} error(s), {self.warning_count} warning(s)")
        elif self.warning_count > 0:
            parts.append(f"\n{self.warning_count} warning(s)")
        return "\n\n".join(parts)

    def to_json(self) -> dict:
        """Convert all diagnostics to JSON format."""
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self.error_count,
            "warning_count": self.warning_count,
        }
