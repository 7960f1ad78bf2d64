"""
Program state for the YeetWords interpreter.

One `ProgramState` exists per run. Command handlers receive it, update it
and hand it back; no handler keeps a reference to it after returning.
"""

import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .store import ValueStore
from .formatting import apply_format, total_words
from ..config import DEFAULT_FORMAT
from ..errors import DiagnosticCollector, severe_warning, mild_warning
from ..genders import GenderCatalog
from ..lines import SourceLine


@dataclass
class ProgramState:
    """
    Everything a running program can read or change.

    Tracks:
    - Named values (the value store) and the run's gender catalog
    - The story written so far
    - Active format string and chapter counter
    - The line currently executing, for error context
    - How many CALLs are running inside each other
    - Diagnostics (warnings)
    """
    store: ValueStore = field(default_factory=ValueStore)
    genders: GenderCatalog = field(default_factory=GenderCatalog)
    rng: random.Random = field(default_factory=random.Random)

    # Story
    output: List[str] = field(default_factory=list)
    format_string: str = DEFAULT_FORMAT
    chapter_counter: int = 0

    # Nested CALLs currently running
    call_depth: int = 0

    # Error context
    current_line: Optional[SourceLine] = None

    # Feedback
    diagnostics: DiagnosticCollector = field(default_factory=DiagnosticCollector)
    display: Callable[[str], None] = print
    progress: Optional[Callable[[int], None]] = None
    liveness_threshold: int = 10000

    @property
    def current_command(self) -> str:
        return self.current_line.keyword if self.current_line else ""

    @property
    def word_count(self) -> int:
        return total_words(self.output)

    def write(self, sentence: str, codes: Optional[str] = None) -> str:
        """Format a sentence (active format string by default) and append it."""
        formatted = apply_format(sentence, self.format_string if codes is None else codes)
        self.output.append(formatted)
        return formatted

    def warn_severe(self, code: str, message: str) -> None:
        self.diagnostics.add(severe_warning(code, message, self.current_command, self.current_line))

    def warn_mild(self, code: str, message: str) -> None:
        self.diagnostics.add(mild_warning(code, message, self.current_command, self.current_line))
