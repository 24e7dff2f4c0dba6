"""
Filter Parser (surface text -> Expression AST).

Grammar:
    expr     := STRING | IDENT "(" arglist ")"
    arglist  := expr ("," expr)*
    IDENT    in { not, any, all, min, max, min_excl, max_excl }

Syntax Notes:
    - not/min/max/min_excl/max_excl take exactly one argument
    - the four bounds take a string literal naming a registered version
    - any/all take zero or more arguments, a trailing comma is allowed,
      so all() parses to an empty conjunction
    - strings use double quotes with backslash escapes

The tokenizer is shared with the version-list parser in `options`.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from versioning.errors import ParseError, SourceLocation
from versioning.expressions import (
    BoundExpression,
    BoundOperator,
    CompoundExpression,
    CompoundOperator,
    Expression,
    NotExpression,
    VersionMatch,
)


STRING = "STRING"
IDENT = "IDENT"
LPAREN = "("
RPAREN = ")"
COMMA = ","
EQUALS = "="
END = "END"


_TOKEN_PATTERN = re.compile(r"""
    (?P<WS>\s+)
  | (?P<STRING>"(?:[^"\\]|\\.)*")
  | (?P<IDENT>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<PUNCT>[(),=])
""", re.VERBOSE | re.DOTALL)

_ESCAPE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0"}

_BOUNDS = {op.value: op for op in BoundOperator}
_COMPOUNDS = {op.value: op for op in CompoundOperator}
_OPERATORS = ("not", "any", "all", "min", "max", "min_excl", "max_excl")


@dataclass(frozen=True)
class Token:
    """A lexical token with its absolute source location."""
    kind: str
    value: str
    location: SourceLocation


def _location_at(text: str, pos: int, origin: SourceLocation) -> SourceLocation:
    line = text.count("\n", 0, pos)
    column = pos - (text.rfind("\n", 0, pos) + 1) + 1
    return origin.advance(line, column)


def _unescape(literal: str) -> str:
    return _ESCAPE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), literal[1:-1])


def tokenize(text: str, origin: Optional[SourceLocation] = None) -> List[Token]:
    """
    Split text into tokens, always ending with an END token.

    Raises:
        ParseError: On an unterminated string or an unexpected character
    """
    origin = origin or SourceLocation()
    tokens = []
    pos = 0
    while pos < len(text):
        m = _TOKEN_PATTERN.match(text, pos)
        if m is None:
            location = _location_at(text, pos, origin)
            if text[pos] == '"':
                raise ParseError("Unterminated string literal", location)
            raise ParseError(f"Unexpected character '{text[pos]}'", location)

        kind = m.lastgroup
        if kind != "WS":
            location = _location_at(text, pos, origin)
            value = m.group(kind)
            if kind == STRING:
                tokens.append(Token(STRING, _unescape(value), location))
            elif kind == IDENT:
                tokens.append(Token(IDENT, value, location))
            else:
                tokens.append(Token(value, value, location))
        pos = m.end()

    tokens.append(Token(END, "", _location_at(text, len(text), origin)))
    return tokens


def describe(token: Token) -> str:
    if token.kind == END:
        return "end of input"
    if token.kind == STRING:
        return f'string "{token.value}"'
    return f"'{token.value}'"


def _expect(tokens: List[Token], pos: int, kind: str) -> int:
    token = tokens[pos]
    if token.kind != kind:
        raise ParseError(f"Expected '{kind}', found {describe(token)}", token.location)
    return pos + 1


def _parse_expression(tokens: List[Token], pos: int) -> Tuple[Expression, int]:
    """Parse a string literal or an operator call."""
    token = tokens[pos]

    if token.kind == STRING:
        return VersionMatch(token.value, token.location), pos + 1

    if token.kind == IDENT:
        name = token.value
        if name not in _OPERATORS:
            raise ParseError(
                f"Unknown operator function '{name}' (expected one of: {', '.join(_OPERATORS)})",
                token.location,
            )
        pos = _expect(tokens, pos + 1, LPAREN)

        if name in _COMPOUNDS:
            operands, pos = _parse_arguments(tokens, pos)
            return CompoundExpression(_COMPOUNDS[name], tuple(operands)), pos

        if name == "not":
            operand, pos = _parse_expression(tokens, pos)
            pos = _expect(tokens, pos, RPAREN)
            return NotExpression(operand), pos

        # Positional bounds
        literal = tokens[pos]
        if literal.kind != STRING:
            raise ParseError(
                f"Expected version string as argument to '{name}', found {describe(literal)}",
                literal.location,
            )
        pos = _expect(tokens, pos + 1, RPAREN)
        return BoundExpression(_BOUNDS[name], literal.value, literal.location), pos

    raise ParseError(
        f"Expected string or operator function (e.g., `all(...)`, `not(...)`), found {describe(token)}",
        token.location,
    )


def _parse_arguments(tokens: List[Token], pos: int) -> Tuple[List[Expression], int]:
    """Parse a comma-separated list up to and including the closing paren."""
    operands = []
    while tokens[pos].kind != RPAREN:
        operand, pos = _parse_expression(tokens, pos)
        operands.append(operand)
        if tokens[pos].kind == COMMA:
            pos += 1
        elif tokens[pos].kind != RPAREN:
            raise ParseError(
                f"Expected ',' or ')' in argument list, found {describe(tokens[pos])}",
                tokens[pos].location,
            )
    return operands, pos + 1


def parse_filter(text: str, origin: Optional[SourceLocation] = None) -> Expression:
    """
    Parse filter surface text into an Expression.

    Args:
        text: Filter text, e.g. 'any("v1", min("v3_0_0"))'
        origin: Location of the first character, used to report
            absolute positions inside a larger source

    Returns:
        Expression AST

    Raises:
        ParseError: If the text is not exactly one valid expression
    """
    tokens = tokenize(text, origin)
    expr, pos = _parse_expression(tokens, 0)
    if tokens[pos].kind != END:
        raise ParseError(f"Unexpected {describe(tokens[pos])} after filter expression", tokens[pos].location)
    return expr


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_filter(expr: Expression) -> str:
    """Render an Expression back to canonical surface text."""
    if isinstance(expr, VersionMatch):
        return _quote(expr.pattern)
    if isinstance(expr, BoundExpression):
        return f"{expr.operator.value}({_quote(expr.version)})"
    if isinstance(expr, NotExpression):
        return f"not({format_filter(expr.operand)})"
    if isinstance(expr, CompoundExpression):
        inner = ", ".join(format_filter(op) for op in expr.operands)
        return f"{expr.operator.value}({inner})"
    raise TypeError(f"Unsupported Expression type: {type(expr)}")


__all__ = [
    "Token",
    "tokenize",
    "parse_filter",
    "format_filter",
]
