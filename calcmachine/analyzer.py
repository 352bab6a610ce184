"""Semantic analysis: resolves identifiers to symbol table handles."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

from calcmachine.parser import (
    Assignment,
    Declaration,
    ExprOperator,
    Identifier,
    InputOperation,
    Literal,
    OutputOperation,
    ParsedExpr,
    ParsedTerm,
    Statement,
    SubExpression,
    TermOperator,
)
from calcmachine.symbol_table import SymbolTable


@dataclass(frozen=True)
class VariableRef:
    handle: int


@dataclass(frozen=True)
class AnalyzedSubExpression:
    expr: AnalyzedExpr


AnalyzedFactor = Union[Literal, VariableRef, AnalyzedSubExpression]


@dataclass(frozen=True)
class AnalyzedTerm:
    first: AnalyzedFactor
    rest: tuple[tuple[TermOperator, AnalyzedFactor], ...] = ()


@dataclass(frozen=True)
class AnalyzedExpr:
    first: AnalyzedTerm
    rest: tuple[tuple[ExprOperator, AnalyzedTerm], ...] = ()


@dataclass(frozen=True)
class AnalyzedDeclaration:
    handle: int


@dataclass(frozen=True)
class AnalyzedInput:
    handle: int


@dataclass(frozen=True)
class AnalyzedOutput:
    expr: AnalyzedExpr


@dataclass(frozen=True)
class AnalyzedAssignment:
    handle: int
    expr: AnalyzedExpr


AnalyzedStatement = Union[
    AnalyzedDeclaration, AnalyzedInput, AnalyzedOutput, AnalyzedAssignment
]


def _analyze_factor(variables: SymbolTable, factor) -> AnalyzedFactor:
    match factor:
        case Literal():
            return factor
        case Identifier(name):
            return VariableRef(variables.find_symbol(name))
        case SubExpression(expr):
            return AnalyzedSubExpression(_analyze_expr(variables, expr))
    raise TypeError(f"not a factor: {factor!r}")


def _analyze_term(variables: SymbolTable, term: ParsedTerm) -> AnalyzedTerm:
    first = _analyze_factor(variables, term.first)
    rest = tuple(
        (operator, _analyze_factor(variables, factor)) for operator, factor in term.rest
    )
    return AnalyzedTerm(first, rest)


def _analyze_expr(variables: SymbolTable, expr: ParsedExpr) -> AnalyzedExpr:
    first = _analyze_term(variables, expr.first)
    rest = tuple(
        (operator, _analyze_term(variables, term)) for operator, term in expr.rest
    )
    return AnalyzedExpr(first, rest)


def _analyze_statement(
    variables: SymbolTable, statement: Statement
) -> AnalyzedStatement:
    match statement:
        case Assignment(name, expr):
            handle = variables.find_symbol(name)
            return AnalyzedAssignment(handle, _analyze_expr(variables, expr))
        case Declaration(name):
            return AnalyzedDeclaration(variables.insert_symbol(name))
        case InputOperation(name):
            return AnalyzedInput(variables.find_symbol(name))
        case OutputOperation(expr):
            return AnalyzedOutput(_analyze_expr(variables, expr))
    raise TypeError(f"not a statement: {statement!r}")


def analyze_program(
    variables: SymbolTable, parsed_program: Iterable[Statement]
) -> list[AnalyzedStatement]:
    """Resolve a parsed program against ``variables``.

    Declarations are added to the table as they are met, so those preceding
    a failing statement stay declared. Raises SymbolError on a redeclared or
    undeclared identifier.
    """
    return [_analyze_statement(variables, statement) for statement in parsed_program]