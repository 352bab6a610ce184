"""Command line front end: compile calc files or run an interactive session."""

from __future__ import annotations

import argparse
import os
import sys
from pprint import pformat
from typing import TextIO

from calcmachine.analyzer import AnalyzedStatement, analyze_program
from calcmachine.compiler import translate_to_rust_program
from calcmachine.executor import execute_program, format_number
from calcmachine.parser import Statement, parse_program
from calcmachine.symbol_table import SymbolError, SymbolTable

CALC_SUFFIX = ".calc"


class CalcFileError(Exception):
    """Raised when a calc source file cannot be read, parsed or analyzed."""


class _InvalidArgumentError(CalcFileError):
    pass


def read_calc_file(source_path) -> str:
    """Return the text of a ``.calc`` file."""
    source_path = os.fspath(source_path)
    if not source_path.endswith(CALC_SUFFIX):
        raise _InvalidArgumentError(
            f"Invalid argument '{source_path}': It must end with {CALC_SUFFIX}"
        )
    try:
        with open(source_path, encoding="utf-8") as source:
            return source.read()
    except (OSError, UnicodeDecodeError) as err:
        raise CalcFileError(f"Failed to read from file {source_path}: ({err})") from err


def parse_file(source_path) -> list[Statement]:
    """Parse a ``.calc`` file; everything in it must be valid code."""
    statements, rest = parse_program(read_calc_file(source_path))
    trimmed_rest = rest.strip()
    if trimmed_rest:
        raise CalcFileError(
            f"Invalid remaining code in '{os.fspath(source_path)}': {trimmed_rest}"
        )
    return statements


def analyze_file(source_path) -> tuple[SymbolTable, list[AnalyzedStatement]]:
    """Parse and analyze a ``.calc`` file, returning its variables and program."""
    statements = parse_file(source_path)
    variables = SymbolTable()
    try:
        program = analyze_program(variables, statements)
    except SymbolError as err:
        raise CalcFileError(
            f"Invalid code in '{os.fspath(source_path)}': {err}"
        ) from err
    return variables, program


def compile_file(source_path) -> str:
    """Compile ``name.calc`` into ``name.rs`` and return the target path."""
    source_path = os.fspath(source_path)
    variables, program = analyze_file(source_path)
    target_path = source_path[: -len(CALC_SUFFIX)] + ".rs"
    try:
        with open(target_path, "w", encoding="utf-8") as target:
            target.write(translate_to_rust_program(variables, program))
    except OSError as err:
        raise CalcFileError(f"Failed to write to file {target_path}: ({err})") from err
    return target_path


def run_interpreter(
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    """Read and run calc commands line by line until ``q`` or end of input."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr

    def report(message: str) -> None:
        stderr.write(message + "\n")

    report("* Calc interactive interpreter *")
    variables = SymbolTable()
    while True:
        stderr.write("> ")
        stderr.flush()
        command = stdin.readline()
        if not command:
            break
        trimmed_command = command.strip()
        if trimmed_command == "q":
            break
        if trimmed_command == "c":
            variables = SymbolTable()
            report("Cleared variables.")
        elif trimmed_command == "v":
            report("Variables:")
            for name, value in variables:
                report(f"  {name}: {format_number(value)}")
        else:
            statements, rest = parse_program(trimmed_command)
            if rest:
                report(f"Unparsed input: `{rest}`.")
                continue
            try:
                program = analyze_program(variables, statements)
            except SymbolError as err:
                report(f"Error: {err}")
                continue
            execute_program(variables, program, stdin, stdout, stderr)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="calc",
        description="Compile a .calc file to Rust, or run an interactive session.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--parse", action="store_true", help="print the parsed program")
    mode.add_argument(
        "--analyze", action="store_true", help="print the symbol table and analyzed program"
    )
    parser.add_argument("source", nargs="?", help="source file ending with .calc")
    args = parser.parse_args(argv)

    if args.source is None:
        if args.parse or args.analyze:
            print(f"{parser.prog}: Missing argument <file>{CALC_SUFFIX}", file=sys.stderr)
            return 1
        run_interpreter()
        return 0

    try:
        if args.parse:
            print(f"Parsed program: {pformat(parse_file(args.source))}")
        elif args.analyze:
            variables, program = analyze_file(args.source)
            print(f"Symbol table: {pformat(list(variables))}")
            print(f"Analyzed program: {pformat(program)}")
        else:
            target_path = compile_file(args.source)
            print(f"Compiled {args.source} to {target_path}.", file=sys.stderr)
    except _InvalidArgumentError as err:
        print(f"{parser.prog}: {err}", file=sys.stderr)
        return 1
    except CalcFileError as err:
        print(err, file=sys.stderr)
        return 1
    return 0