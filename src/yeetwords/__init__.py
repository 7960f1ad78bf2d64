"""
YeetWords - a small language for procedurally varied prose.

This package provides:
- Structural parser: Builds the block tree from program lines
- Interpreter: Runs a program and produces the story
- Vocabulary loader and story writer for the command-line runner

Usage:
    from yeetwords import run_program

    program = '''
    FORMAT CPS
    LOOP 3
    WRITE sentences wfolder
    LOOPEND
    '''
    result = run_program(
        program,
        words={"noun": ["cat", "dog"]},
        sentences={"sentences": ["the _noun_ sat"]},
    )
    if result.success:
        print(result.text)
    else:
        print(result.error_message)
"""

__version__ = "1.0.0"

from .lines import (
    SourceLine,
    LineKind,
    BlockKind,
    COMMAND_KEYWORDS,
    read_lines,
)

from .structure import (
    Block,
    StructureParser,
    parse,
    parse_source,
    flatten,
)

from .errors import (
    ErrorSeverity,
    Diagnostic,
    DiagnosticCollector,
    YeetError,
    StoppingError,
    UnmatchedCloser,
    UnclosedBlock,
    NestedBlockError,
    UnknownCommand,
    ParameterCountError,
    InvalidSyntax,
    InvalidParameterValue,
    CallDepthExceeded,
    UnknownVariable,
    TypeMismatch,
    InvalidVariableName,
    UndefinedGender,
    DuplicateOutputFile,
)

from .config import RunConfig

from .runtime import (
    Interpreter,
    ExecutionResult,
    ProgramState,
    run_program,
)

__all__ = [
    '__version__',

    # Lines
    'SourceLine',
    'LineKind',
    'BlockKind',
    'COMMAND_KEYWORDS',
    'read_lines',

    # Structure
    'Block',
    'StructureParser',
    'parse',
    'parse_source',
    'flatten',

    # Errors
    'ErrorSeverity',
    'Diagnostic',
    'DiagnosticCollector',
    'YeetError',
    'StoppingError',
    'UnmatchedCloser',
    'UnclosedBlock',
    'NestedBlockError',
    'UnknownCommand',
    'ParameterCountError',
    'InvalidSyntax',
    'InvalidParameterValue',
    'CallDepthExceeded',
    'UnknownVariable',
    'TypeMismatch',
    'InvalidVariableName',
    'UndefinedGender',
    'DuplicateOutputFile',

    # Config
    'RunConfig',

    # Runtime
    'Interpreter',
    'ExecutionResult',
    'ProgramState',
    'run_program',
]
