"""
Filter Evaluation

Validates filter expressions against a registry and decides whether a
candidate version satisfies them.

verify() is called before any evaluate() so that an undeclared version
reference aborts the whole invocation instead of silently matching nothing.
"""

from typing import List

from versioning.errors import UnknownVersionReference
from versioning.expressions import (
    BoundExpression,
    BoundOperator,
    CompoundExpression,
    CompoundOperator,
    Expression,
    NotExpression,
    VersionMatch,
)
from versioning.registry import VersionRegistry


def verify(expr: Expression, registry: VersionRegistry) -> None:
    """
    Check every positional bound references a declared version.

    Prefix matches are free-form and never fail verification.

    Raises:
        UnknownVersionReference: With the literal and its location
    """
    if isinstance(expr, VersionMatch):
        return
    if isinstance(expr, BoundExpression):
        if expr.version not in registry:
            raise UnknownVersionReference(expr.version, expr.location)
        return
    if isinstance(expr, NotExpression):
        verify(expr.operand, registry)
        return
    if isinstance(expr, CompoundExpression):
        for operand in expr.operands:
            verify(operand, registry)
        return
    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def _bound_holds(expr: BoundExpression, registry: VersionRegistry, candidate: int) -> bool:
    if expr.version not in registry:
        raise UnknownVersionReference(expr.version, expr.location)
    reference = registry.index_of(expr.version)

    if expr.operator == BoundOperator.MIN:
        return candidate >= reference
    if expr.operator == BoundOperator.MIN_EXCL:
        return candidate > reference
    if expr.operator == BoundOperator.MAX:
        return candidate <= reference
    if expr.operator == BoundOperator.MAX_EXCL:
        return candidate < reference
    raise ValueError(f"Unsupported bound operator: {expr.operator}")


def evaluate(expr: Expression, registry: VersionRegistry, version: str) -> bool:
    """
    Decide whether `version` satisfies `expr`.

    Args:
        expr: Filter expression
        registry: Declared versions, defining positional order
        version: Candidate version name

    Returns:
        True if the version matches the filter

    Raises:
        UnknownVersionError: If a bound is evaluated for an undeclared candidate
        UnknownVersionReference: If a bound names an undeclared version
    """
    if isinstance(expr, VersionMatch):
        return version.startswith(expr.pattern)

    if isinstance(expr, BoundExpression):
        return _bound_holds(expr, registry, registry.index_of(version))

    if isinstance(expr, NotExpression):
        return not evaluate(expr.operand, registry, version)

    if isinstance(expr, CompoundExpression):
        results = [evaluate(op, registry, version) for op in expr.operands]
        if expr.operator == CompoundOperator.ANY:
            return any(results)
        # Empty conjunction is false
        return bool(results) and all(results)

    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def referenced_versions(expr: Expression) -> List[str]:
    """Version names referenced by positional bounds, in source order."""
    if isinstance(expr, BoundExpression):
        return [expr.version]
    if isinstance(expr, NotExpression):
        return referenced_versions(expr.operand)
    if isinstance(expr, CompoundExpression):
        names = []
        for operand in expr.operands:
            names.extend(referenced_versions(operand))
        return names
    return []


def expression_depth(expr: Expression) -> int:
    """Nesting depth; a single literal or bound has depth 1."""
    if isinstance(expr, NotExpression):
        return 1 + expression_depth(expr.operand)
    if isinstance(expr, CompoundExpression):
        return 1 + max((expression_depth(op) for op in expr.operands), default=0)
    return 1


__all__ = ["verify", "evaluate", "referenced_versions", "expression_depth"]
