#!/usr/bin/env python3
"""
CLI for the YeetWords interpreter.

Usage:
    python -m yeetwords run PROGRAM [--vocab DIR] [--seed N] [--output-dir DIR] [--no-write]
    python -m yeetwords check PROGRAM [--tree]

Examples:
    # Check block structure and command names
    python -m yeetwords check mystory.txt

    # Run with the word/sentence folders in ./vocab, writing the story here
    python -m yeetwords run mystory.txt --vocab vocab

    # Reproducible run, printing the story instead of writing a file
    python -m yeetwords run mystory.txt --seed 42 --no-write
"""

import argparse
import sys
from pathlib import Path

PREFIX = "Y| "


def feedback(message: str) -> None:
    """Print an interpreter message, set apart from story text."""
    print(f"{PREFIX}{message}", file=sys.stderr)


def unknown_keywords(root) -> list:
    """Lines whose keyword is not a command (GEN field lines are skipped)."""
    from .lines import COMMAND_KEYWORDS, BlockKind
    from .structure import Block

    found = []
    for node in root.body:
        if isinstance(node, Block):
            if node.kind != BlockKind.GEN:
                found.extend(unknown_keywords(node))
        elif not (node.is_blank or node.is_comment) and node.keyword not in COMMAND_KEYWORDS:
            found.append(node)
    return found


def cmd_check(args):
    """Check a program's block structure and command names."""
    from .errors import DiagnosticCollector, YeetError, error_unknown_command
    from .structure import parse_source, print_tree

    source_path = Path(args.file)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return 1

    source = source_path.read_text(encoding='utf-8')
    diagnostics = DiagnosticCollector()

    try:
        root = parse_source(source, diagnostics)
    except YeetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for line in unknown_keywords(root):
        diagnostics.add_error(error_unknown_command(line))

    if diagnostics.has_errors or diagnostics.has_warnings:
        print(diagnostics.format_all(), file=sys.stderr)
    if diagnostics.has_errors:
        return 1

    if args.tree:
        print(print_tree(root))
    print(f"OK: {source_path.name} - {sum(1 for _ in root.lines())} line(s), no errors")
    return 0


def cmd_run(args):
    """Run a program and write the story."""
    from .config import RunConfig
    from .errors import DiagnosticCollector, ErrorSeverity, YeetError
    from .runtime import Interpreter
    from .structure import parse_source
    from .vocabulary import load_vocabulary
    from .writer import save_story

    source_path = Path(args.file)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return 1

    try:
        config = RunConfig.from_env(vocab_dir=args.vocab, seed=args.seed)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    def report(diag):
        if diag.severity != ErrorSeverity.STOPPING:
            feedback(diag.format(show_source=False))

    diagnostics = DiagnosticCollector(listener=report)
    feedback("Running your program...")

    words, sentences = load_vocabulary(
        config, diagnostics, on_file=lambda path: feedback(f"Reading file {path.name}"))

    interp = Interpreter(
        config,
        display=print,
        progress=lambda remaining: print(".", end="", file=sys.stderr, flush=True),
    )
    state = interp.new_state(words, sentences, diagnostics)

    try:
        root = parse_source(source_path.read_text(encoding='utf-8'), diagnostics)
    except YeetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = interp.execute(root, state)
    if not result.success:
        print(f"Error: {result.error_message}", file=sys.stderr)
        return 1

    if args.no_write:
        print(result.text)
        feedback(f"{result.word_count} words, not written")
        return 0

    try:
        path = save_story(result.output, Path(args.output_dir), rng=result.state.rng)
    except YeetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    feedback(f"Writing {result.word_count} words to file: {path}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='python -m yeetwords',
        description='YeetWords procedural prose interpreter',
    )

    subparsers = parser.add_subparsers(dest='action', required=True)

    # check command
    check_parser = subparsers.add_parser('check', help='Check a program for structural errors')
    check_parser.add_argument('file', help='YeetWords program file')
    check_parser.add_argument('--tree', action='store_true',
                              help='Print the block tree')

    # run command
    run_parser = subparsers.add_parser('run', help='Run a program and write the story')
    run_parser.add_argument('file', help='YeetWords program file')
    run_parser.add_argument('--vocab', metavar='DIR', type=Path,
                            help='Directory holding the word and sentence folders')
    run_parser.add_argument('--seed', type=int, help='Random seed for a reproducible story')
    run_parser.add_argument('--output-dir', metavar='DIR', default='.',
                            help='Directory to write the story into')
    run_parser.add_argument('--no-write', action='store_true',
                            help='Print the story instead of writing a file')

    args = parser.parse_args(argv)

    if args.action == 'check':
        return cmd_check(args)
    elif args.action == 'run':
        return cmd_run(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
