"""
Version Filter Expressions

Every `version(...)` annotation is represented as an Abstract Syntax Tree,
never as a string, once it has been parsed.

The language is deliberately tiny:
    "v1"                  prefix match on the version name
    min("v1_1_0")         at or after a registered version
    min_excl("v1_1_0")    strictly after
    max("v1_0_1")         at or before
    max_excl("v1_0_1")    strictly before
    not(expr)             negation
    any(expr, ...)        disjunction
    all(expr, ...)        conjunction

ARCHITECTURAL RULE:
    These classes are structure only.
    Parsing lives in filter_parser, evaluation in evaluator.
    Trees are immutable, acyclic, and never share subexpressions.
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from versioning.errors import SourceLocation


class Expression(ABC):
    """
    Base class for all filter expressions.

    It exists to give the expression hierarchy a common type.
    """
    pass


@dataclass(frozen=True)
class VersionMatch(Expression):
    """
    Prefix test against the candidate version name.

    Example:
        "v1" matches "v1_0_0" and "v1_1_0" but not "v2_0_0".
        "" matches every version.

    Properties:
        pattern: The literal prefix
        location: Where the literal was written (ignored by equality)
    """

    pattern: str
    location: Optional[SourceLocation] = field(default=None, compare=False)


class BoundOperator(Enum):
    """
    Positional comparisons relative to the registry order.

    Values are the operator names used in the surface syntax.
    """

    MIN = "min"
    MIN_EXCL = "min_excl"
    MAX = "max"
    MAX_EXCL = "max_excl"


@dataclass(frozen=True)
class BoundExpression(Expression):
    """
    Positional bound against a registered version.

    Example:
        max("v1_0_1") with registry [v1_0_0, v1_0_1, v1_1_0]
        holds for v1_0_0 and v1_0_1 only.

    IMPORTANT:
        Unlike VersionMatch, the referenced name must exactly equal a
        registry entry. This is checked by evaluator.verify().
    """

    operator: BoundOperator
    version: str
    location: Optional[SourceLocation] = field(default=None, compare=False)


@dataclass(frozen=True)
class NotExpression(Expression):
    """Logical negation of a single operand."""

    operand: Expression


class CompoundOperator(Enum):
    """N-ary logical operators."""

    ANY = "any"
    ALL = "all"


@dataclass(frozen=True)
class CompoundExpression(Expression):
    """
    Disjunction or conjunction over zero or more operands.

    IMPORTANT:
        Both any() and all() are false when empty. An empty conjunction is
        NOT vacuously true here.
    """

    operator: CompoundOperator
    operands: Tuple[Expression, ...] = ()


def match(pattern: str) -> VersionMatch:
    return VersionMatch(pattern)


def at_least(version: str) -> BoundExpression:
    return BoundExpression(BoundOperator.MIN, version)


def at_least_exclusive(version: str) -> BoundExpression:
    return BoundExpression(BoundOperator.MIN_EXCL, version)


def at_most(version: str) -> BoundExpression:
    return BoundExpression(BoundOperator.MAX, version)


def at_most_exclusive(version: str) -> BoundExpression:
    return BoundExpression(BoundOperator.MAX_EXCL, version)


def negate(operand: Expression) -> NotExpression:
    return NotExpression(operand)


def any_of(*operands: Expression) -> CompoundExpression:
    return CompoundExpression(CompoundOperator.ANY, tuple(operands))


def all_of(*operands: Expression) -> CompoundExpression:
    return CompoundExpression(CompoundOperator.ALL, tuple(operands))


__all__ = [
    "Expression",
    "VersionMatch",
    "BoundOperator",
    "BoundExpression",
    "NotExpression",
    "CompoundOperator",
    "CompoundExpression",
    "match",
    "at_least",
    "at_least_exclusive",
    "at_most",
    "at_most_exclusive",
    "negate",
    "any_of",
    "all_of",
]
