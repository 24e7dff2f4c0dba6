"""
Filter annotation extraction.

Locates the `version(...)` attribute on a node, independent of node kind,
and detaches it from the node's other attributes.
"""

import logging
from typing import Optional, Sequence, Tuple

from versioning.errors import SourceLocation
from versioning.expressions import Expression
from versioning.filter_parser import parse_filter
from versioning.model import Attribute


logger = logging.getLogger(__name__)

FILTER_ATTRIBUTE = "version"
BUILD_GATE_ATTRIBUTE = "cfg"


def is_filter_attribute(attribute: Attribute) -> bool:
    return attribute.name == FILTER_ATTRIBUTE


def parse_attribute(attribute: Attribute) -> Expression:
    """
    Return the filter expression carried by a `version` attribute.

    Raises:
        ParseError: If the argument text is malformed
    """
    if isinstance(attribute.arguments, Expression):
        return attribute.arguments
    return parse_filter(attribute.arguments, attribute.location)


def extract_filter(
        attributes: Sequence[Attribute], warn: bool = True) -> Tuple[Tuple[Attribute, ...], Optional[Expression]]:
    """
    Detach the filter annotation from a list of attributes.

    Args:
        attributes: The node's attributes, in source order
        warn: Log a warning for each duplicate filter that is dropped

    Returns:
        (remaining attributes in original order, filter or None)

    Only the first `version` attribute is honored. Later ones are dropped
    with a warning, so the remaining attributes never contain a filter and
    extracting twice yields None the second time.

    Raises:
        ParseError: If the honored annotation is malformed
    """
    remaining = []
    found: Optional[Attribute] = None
    for attribute in attributes:
        if not is_filter_attribute(attribute):
            remaining.append(attribute)
        elif found is None:
            found = attribute
        elif warn:
            logger.warning(
                "Ignoring duplicate version filter at %s; only the first one at %s is honored",
                attribute.location or "<unknown>",
                found.location or "<unknown>",
            )

    if found is None:
        return tuple(remaining), None
    return tuple(remaining), parse_attribute(found)


def version_attribute(
        arguments, location: Optional[SourceLocation] = None) -> Attribute:
    """Build a filter annotation from surface text or an Expression."""
    return Attribute(FILTER_ATTRIBUTE, arguments, location)


def build_gate_attribute(version: str) -> Attribute:
    """The conditional-compilation marker attached when `features` is set."""
    return Attribute(BUILD_GATE_ATTRIBUTE, f'feature = "{version}"')


__all__ = [
    "FILTER_ATTRIBUTE",
    "BUILD_GATE_ATTRIBUTE",
    "is_filter_attribute",
    "parse_attribute",
    "extract_filter",
    "version_attribute",
    "build_gate_attribute",
]
