"""Direct execution of analyzed calc programs."""

from __future__ import annotations

import math
import sys
from collections.abc import Iterable
from decimal import Decimal
from typing import TextIO

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
from calcmachine.parser import ExprOperator, Literal, TermOperator
from calcmachine.symbol_table import SymbolTable


def format_number(value: float) -> str:
    """Format a float as the shortest round-trip decimal, never in exponent form."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _divide(dividend: float, divisor: float) -> float:
    if divisor != 0:
        return dividend / divisor
    if dividend == 0 or math.isnan(dividend):
        return math.nan
    return math.copysign(math.inf, dividend) * math.copysign(1.0, divisor)


def _evaluate_factor(variables: SymbolTable, factor) -> float:
    match factor:
        case Literal(value):
            return value
        case VariableRef(handle):
            return variables.get_value(handle)
        case AnalyzedSubExpression(expr):
            return evaluate_expr(variables, expr)
    raise TypeError(f"not a factor: {factor!r}")


def _evaluate_term(variables: SymbolTable, term: AnalyzedTerm) -> float:
    result = _evaluate_factor(variables, term.first)
    for operator, factor in term.rest:
        value = _evaluate_factor(variables, factor)
        if operator is TermOperator.MULTIPLY:
            result *= value
        else:
            result = _divide(result, value)
    return result


def evaluate_expr(variables: SymbolTable, expr: AnalyzedExpr) -> float:
    """Evaluate an analyzed expression with IEEE floating point semantics."""
    result = _evaluate_term(variables, expr.first)
    for operator, term in expr.rest:
        value = _evaluate_term(variables, term)
        if operator is ExprOperator.ADD:
            result += value
        else:
            result -= value
    return result


def _parse_input(text: str) -> float:
    text = text.strip()
    if not text or "_" in text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


def execute_program(
    variables: SymbolTable,
    program: Iterable[AnalyzedStatement],
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    """Run ``program``, updating ``variables``.

    Input prompts go to ``stderr``; unreadable input counts as 0.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr
    for statement in program:
        match statement:
            case AnalyzedAssignment(handle, expr):
                variables.set_value(handle, evaluate_expr(variables, expr))
            case AnalyzedDeclaration():
                pass
            case AnalyzedInput(handle):
                stderr.write("? ")
                stderr.flush()
                variables.set_value(handle, _parse_input(stdin.readline()))
            case AnalyzedOutput(expr):
                stdout.write(format_number(evaluate_expr(variables, expr)) + "\n")
            case _:
                raise TypeError(f"not a statement: {statement!r}")