"""
Tests for filter annotation extraction.

These tests verify:
    - The filter is detached and parsed
    - Other attributes survive in order
    - Only the first filter is honored
    - Extraction is idempotent
"""

import logging

import pytest
from versioning.annotations import (
    build_gate_attribute,
    extract_filter,
    parse_attribute,
    version_attribute,
)
from versioning.errors import ParseError, SourceLocation
from versioning.expressions import VersionMatch, at_least
from versioning.model import Attribute


DERIVE = Attribute("derive", "Clone, Debug")
DOC = Attribute("doc", '" A field"')


class TestExtractFilter:
    """Test extraction from attribute lists."""

    def test_no_attributes(self):
        """Nothing in, nothing out."""
        assert extract_filter(()) == ((), None)

    def test_no_filter(self):
        """Other attributes pass through untouched."""
        remaining, expr = extract_filter((DERIVE, DOC))
        assert remaining == (DERIVE, DOC)
        assert expr is None

    def test_filter_detached(self):
        """The version attribute is removed and parsed."""
        remaining, expr = extract_filter((DERIVE, version_attribute('"v1"'), DOC))
        assert remaining == (DERIVE, DOC)
        assert expr == VersionMatch("v1")

    def test_parsed_expression_accepted(self):
        """Filters built in code need no parsing."""
        _, expr = extract_filter((version_attribute(at_least("v2")),))
        assert expr == at_least("v2")

    def test_first_filter_wins(self, caplog):
        """A second filter is ignored with a warning."""
        attributes = (version_attribute('"v1"'), DOC, version_attribute('"v2"'))
        with caplog.at_level(logging.WARNING, logger="versioning.annotations"):
            remaining, expr = extract_filter(attributes)
        assert expr == VersionMatch("v1")
        assert remaining == (DOC,)
        assert "duplicate" in caplog.text.lower()

    def test_duplicate_warning_can_be_silenced(self, caplog):
        """With warn=False the duplicate is still dropped, but not logged."""
        attributes = (version_attribute('"v1"'), version_attribute('"v2"'))
        with caplog.at_level(logging.WARNING, logger="versioning.annotations"):
            remaining, expr = extract_filter(attributes, warn=False)
        assert expr == VersionMatch("v1")
        assert remaining == ()
        assert caplog.records == []

    def test_idempotent(self):
        """Extracting from the remaining attributes finds no filter."""
        attributes = (version_attribute('"v1"'), DERIVE, version_attribute('"v2"'))
        remaining, _ = extract_filter(attributes)
        again, expr = extract_filter(remaining)
        assert expr is None
        assert again == remaining

    def test_malformed_filter(self):
        """A broken filter raises a ParseError located in the source."""
        attribute = version_attribute('any("v1" "v2")', SourceLocation(7, 15))
        with pytest.raises(ParseError) as exc:
            extract_filter((attribute,))
        assert exc.value.location == SourceLocation(7, 24)


class TestHelpers:
    """Test attribute constructors."""

    def test_parse_attribute(self):
        """Text arguments are parsed from the attribute's own location."""
        attribute = version_attribute('max("v1")', SourceLocation(3, 10))
        assert parse_attribute(attribute).location == SourceLocation(3, 14)

    def test_build_gate(self):
        """Build gates are cfg(feature = "<version>") attributes."""
        gate = build_gate_attribute("v1_0_0")
        assert gate.name == "cfg"
        assert gate.arguments == 'feature = "v1_0_0"'
