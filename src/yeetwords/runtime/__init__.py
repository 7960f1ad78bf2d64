"""
YeetWords Runtime - Tree-walking interpreter for YeetWords programs.

This module provides:
- Interpreter: Runs a parsed program and produces the story
- Value: Runtime values with their kind tag
- ValueStore: Named values across the five namespaces
- ProgramState: Everything a running program can read or change
- CommandRegistry: Leaf command handlers
"""

from .values import (
    Value,
    ValueKind,
    Entity,
    Lookup,
    MISSING,
    list_val,
    catalog_val,
    single_val,
    gen_val,
    snippet_val,
    dedupe,
)

from .store import (
    ValueStore,
    Namespace,
    AccessMode,
)

from .quantities import (
    CountMode,
    Quantity,
    parse_quantity,
    resolve_count,
)

from .selection import (
    unique_sample,
    sample_one,
    shift_pointer,
    shift_group,
    shuffle_group,
)

from .formatting import (
    FORMAT_CODES,
    apply_format,
    word_count,
    total_words,
)

from .context import ProgramState

from .substitution import (
    FALLBACK,
    substitute,
)

from .expressions import (
    AssignStyle,
    evaluate,
    execute_assignment,
)

from .commands import (
    Command,
    CommandRegistry,
)

from .interpreter import (
    Interpreter,
    ExecutionResult,
    run_program,
)

__all__ = [
    # Values
    'Value',
    'ValueKind',
    'Entity',
    'Lookup',
    'MISSING',
    'list_val',
    'catalog_val',
    'single_val',
    'gen_val',
    'snippet_val',
    'dedupe',

    # Store
    'ValueStore',
    'Namespace',
    'AccessMode',

    # Quantities and selection
    'CountMode',
    'Quantity',
    'parse_quantity',
    'resolve_count',
    'unique_sample',
    'sample_one',
    'shift_pointer',
    'shift_group',
    'shuffle_group',

    # Formatting and substitution
    'FORMAT_CODES',
    'apply_format',
    'word_count',
    'total_words',
    'FALLBACK',
    'substitute',

    # State
    'ProgramState',

    # Commands
    'AssignStyle',
    'evaluate',
    'execute_assignment',
    'Command',
    'CommandRegistry',

    # Interpreter
    'Interpreter',
    'ExecutionResult',
    'run_program',
]
