"""Translation of analyzed calc programs into Rust source code."""

from __future__ import annotations

from collections.abc import Iterable

from calcmachine.analyzer import (
    AnalyzedAssignment,
    AnalyzedDeclaration,
    AnalyzedExpr,
    AnalyzedInput,
    AnalyzedOutput,
    AnalyzedStatement,
    AnalyzedSubExpression,
    AnalyzedTerm,
    VariableRef,
)
from calcmachine.executor import format_number
from calcmachine.parser import Literal
from calcmachine.symbol_table import SymbolTable

_PRELUDE = (
    "use std::io::Write;\n"
    "\n"
    "#[allow(dead_code)]\n"
    "fn input() -> f64 {\n"
    "    let mut text = String::new();\n"
    "    eprint!(\"? \");\n"
    "    std::io::stderr().flush().unwrap();\n"
    "    std::io::stdin()\n"
    "        .read_line(&mut text)\n"
    "        .expect(\"Cannot read line.\");\n"
    "    text.trim().parse::<f64>().unwrap_or(0.)\n"
    "}\n"
    "\n"
    "fn main() {\n"
)


def format_literal(value: float) -> str:
    """Return ``value`` as a Rust ``f64`` literal."""
    return format_number(value) + "f64"


def _translate_factor(variables: SymbolTable, factor) -> str:
    match factor:
        case Literal(value):
            return format_literal(value)
        case VariableRef(handle):
            return "_" + variables.get_name(handle)
        case AnalyzedSubExpression(expr):
            return "(" + translate_to_rust_expr(variables, expr) + ")"
    raise TypeError(f"not a factor: {factor!r}")


def _translate_term(variables: SymbolTable, term: AnalyzedTerm) -> str:
    parts = [_translate_factor(variables, term.first)]
    for operator, factor in term.rest:
        parts.append(f" {operator.value} {_translate_factor(variables, factor)}")
    return "".join(parts)


def translate_to_rust_expr(variables: SymbolTable, expr: AnalyzedExpr) -> str:
    """Return the Rust source of an analyzed expression."""
    parts = [_translate_term(variables, expr.first)]
    for operator, term in expr.rest:
        parts.append(f" {operator.value} {_translate_term(variables, term)}")
    return "".join(parts)


def _translate_statement(variables: SymbolTable, statement: AnalyzedStatement) -> str:
    match statement:
        case AnalyzedAssignment(handle, expr):
            name = variables.get_name(handle)
            return f"_{name} = {translate_to_rust_expr(variables, expr)}"
        case AnalyzedDeclaration(handle):
            return f"let mut _{variables.get_name(handle)} = 0.0"
        case AnalyzedInput(handle):
            return f"_{variables.get_name(handle)} = input()"
        case AnalyzedOutput(expr):
            return f'println!("{{}}", {translate_to_rust_expr(variables, expr)})'
    raise TypeError(f"not a statement: {statement!r}")


def translate_to_rust_program(
    variables: SymbolTable, analyzed_program: Iterable[AnalyzedStatement]
) -> str:
    """Return a complete Rust program equivalent to ``analyzed_program``."""
    body = "".join(
        f"    {_translate_statement(variables, statement)};\n"
        for statement in analyzed_program
    )
    return _PRELUDE + body + "}\n"