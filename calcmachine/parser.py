"""Parser for the calc language.

Statements are ``@name`` (declaration), ``>name`` (input), ``<expr`` (output)
and ``name := expr`` (assignment). Expressions use ``+ - * /``, parentheses,
alphabetic identifiers and floating point literals.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar, Union

_T = TypeVar("_T")


class TermOperator(Enum):
    MULTIPLY = "*"
    DIVIDE = "/"


class ExprOperator(Enum):
    ADD = "+"
    SUBTRACT = "-"


@dataclass(frozen=True)
class Literal:
    value: float


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class SubExpression:
    expr: ParsedExpr


Factor = Union[Literal, Identifier, SubExpression]


@dataclass(frozen=True)
class ParsedTerm:
    first: Factor
    rest: tuple[tuple[TermOperator, Factor], ...] = ()


@dataclass(frozen=True)
class ParsedExpr:
    first: ParsedTerm
    rest: tuple[tuple[ExprOperator, ParsedTerm], ...] = ()


@dataclass(frozen=True)
class Declaration:
    name: str


@dataclass(frozen=True)
class InputOperation:
    name: str


@dataclass(frozen=True)
class OutputOperation:
    expr: ParsedExpr


@dataclass(frozen=True)
class Assignment:
    name: str
    expr: ParsedExpr


Statement = Union[Declaration, InputOperation, OutputOperation, Assignment]

_SPACES = re.compile(r"[ \t\r\n]*")
_IDENTIFIER = re.compile(r"[A-Za-z]+")
_NUMBER = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)


class _NoMatch(Exception):
    pass


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    # Primitives

    def _match(self, pattern: re.Pattern) -> str:
        found = pattern.match(self.text, self.pos)
        if found is None or found.end() == self.pos and pattern is not _SPACES:
            raise _NoMatch
        self.pos = found.end()
        return found.group()

    def _skip_spaces(self) -> None:
        self._match(_SPACES)

    def _tag(self, tag: str) -> None:
        if not self.text.startswith(tag, self.pos):
            raise _NoMatch
        self.pos += len(tag)

    def _attempt(self, parse: Callable[[], _T]) -> _T | None:
        start = self.pos
        try:
            return parse()
        except _NoMatch:
            self.pos = start
            return None

    def _first(self, *parsers: Callable[[], _T]) -> _T:
        for parse in parsers:
            result = self._attempt(parse)
            if result is not None:
                return result
        raise _NoMatch

    def _repeat(self, parse: Callable[[], _T]) -> Iterator[_T]:
        while (item := self._attempt(parse)) is not None:
            yield item

    def _operator(self, kind: type[Enum]):
        self._skip_spaces()
        symbol = self.text[self.pos:self.pos + 1]
        try:
            operator = kind(symbol)
        except ValueError:
            raise _NoMatch from None
        self.pos += 1
        return operator

    # Grammar

    def identifier(self) -> str:
        return self._match(_IDENTIFIER)

    def statement(self) -> Statement:
        self._skip_spaces()
        return self._first(
            self.declaration,
            self.input_operation,
            self.output_operation,
            self.assignment,
        )

    def declaration(self) -> Declaration:
        self._tag("@")
        self._skip_spaces()
        return Declaration(self.identifier())

    def input_operation(self) -> InputOperation:
        self._tag(">")
        self._skip_spaces()
        return InputOperation(self.identifier())

    def output_operation(self) -> OutputOperation:
        self._tag("<")
        self._skip_spaces()
        return OutputOperation(self.expr())

    def assignment(self) -> Assignment:
        name = self.identifier()
        self._skip_spaces()
        self._tag(":=")
        self._skip_spaces()
        return Assignment(name, self.expr())

    def factor(self) -> Factor:
        self._skip_spaces()
        return self._first(
            lambda: Identifier(self.identifier()),
            lambda: Literal(float(self._match(_NUMBER))),
            self.subexpression,
        )

    def subexpression(self) -> SubExpression:
        self._skip_spaces()
        self._tag("(")
        expr = self.expr()
        self._skip_spaces()
        self._tag(")")
        return SubExpression(expr)

    def term(self) -> ParsedTerm:
        first = self.factor()
        rest = tuple(
            self._repeat(lambda: (self._operator(TermOperator), self.factor()))
        )
        return ParsedTerm(first, rest)

    def expr(self) -> ParsedExpr:
        first = self.term()
        rest = tuple(
            self._repeat(lambda: (self._operator(ExprOperator), self.term()))
        )
        return ParsedExpr(first, rest)


def parse_program(text: str) -> tuple[list[Statement], str]:
    """Parse as many statements as possible from ``text``.

    Returns the statements and the text left unparsed, starting where the
    first statement that could not be parsed begins (leading blanks included).
    """
    parser = _Parser(text)
    statements = list(parser._repeat(parser.statement))
    return statements, text[parser.pos:]