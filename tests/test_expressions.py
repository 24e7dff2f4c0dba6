"""
Tests for the filter expression AST.

These tests verify:
    - Expression objects can be created
    - Expression tree composition
    - Expression immutability
    - Locations do not take part in equality
"""

import pytest
from versioning.errors import SourceLocation
from versioning.expressions import (
    BoundExpression,
    BoundOperator,
    CompoundExpression,
    CompoundOperator,
    Expression,
    NotExpression,
    VersionMatch,
    all_of,
    any_of,
    at_least,
    at_most_exclusive,
    match,
    negate,
)


class TestVersionMatch:
    """Test prefix match literals."""

    def test_create_match(self):
        """Should hold the prefix pattern."""
        expr = VersionMatch("v1")
        assert expr.pattern == "v1"
        assert isinstance(expr, Expression)

    def test_match_immutable(self):
        """Matches should be immutable."""
        expr = VersionMatch("v1")
        with pytest.raises(AttributeError):
            expr.pattern = "v2"

    def test_location_ignored_by_equality(self):
        """Two matches with different locations are equal."""
        assert VersionMatch("v1", SourceLocation(1, 1)) == VersionMatch("v1", SourceLocation(3, 7))


class TestBoundExpression:
    """Test positional bounds."""

    def test_operator_names(self):
        """Operator values are the surface-syntax names."""
        assert [op.value for op in BoundOperator] == ["min", "min_excl", "max", "max_excl"]

    def test_helpers(self):
        """Helper constructors pick the right operator."""
        assert at_least("v1") == BoundExpression(BoundOperator.MIN, "v1")
        assert at_most_exclusive("v2") == BoundExpression(BoundOperator.MAX_EXCL, "v2")


class TestComposition:
    """Test nested expression trees."""

    def test_not(self):
        """Negation wraps one operand."""
        expr = negate(match("v1"))
        assert isinstance(expr, NotExpression)
        assert expr.operand == VersionMatch("v1")

    def test_any_and_all(self):
        """Compound expressions hold operand tuples."""
        expr = any_of(match("v1"), all_of(at_least("v2"), negate(match("v3"))))
        assert expr.operator == CompoundOperator.ANY
        assert len(expr.operands) == 2
        assert isinstance(expr.operands[1], CompoundExpression)
        assert expr.operands[1].operator == CompoundOperator.ALL

    def test_empty_compound(self):
        """Empty operand lists are representable."""
        assert all_of().operands == ()
        assert CompoundExpression(CompoundOperator.ANY).operands == ()
