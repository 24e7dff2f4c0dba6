"""
Error taxonomy for the versioning engine.

Every failure is fatal for the whole invocation. Nothing here is recovered
locally: either the full set of variants is produced, or a single error
reaches the caller.

Hierarchy:
    VersioningError
        ParseError                      malformed version list or filter
        ConfigurationError              unknown or ill-typed option
        UnknownVersionReference         positional filter names an absent version
        UnknownVersionError             registry lookup of an absent version
        DuplicateVersionError           registry built with a repeated name
        UnsupportedVisibilityOverride   force-public on a node without visibility
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SourceLocation:
    """
    A position in annotation or argument source text.

    Both fields are 1-based, matching what an editor displays.
    """

    line: int = 1
    column: int = 1

    def advance(self, line_offset: int, column: int) -> "SourceLocation":
        """
        Translate a position relative to this origin into an absolute one.

        Columns only shift on the first line; later lines start afresh.
        """
        if line_offset == 0:
            return SourceLocation(self.line, self.column + column - 1)
        return SourceLocation(self.line + line_offset, column)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class VersioningError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.location}: {self.message}"


class ParseError(VersioningError):
    """Raised when a version list or filter expression is malformed."""
    pass


class ConfigurationError(VersioningError):
    """Raised for an unknown option key or a non-boolean option value."""

    def __init__(self, message: str, key: str, location: Optional[SourceLocation] = None):
        super().__init__(message, location)
        self.key = key


class UnknownVersionReference(VersioningError):
    """
    Raised when min/max/min_excl/max_excl name a version that is not declared.

    Properties:
        literal: The version name exactly as written in the filter
    """

    def __init__(self, literal: str, location: Optional[SourceLocation] = None):
        super().__init__(f"Unknown version '{literal}' in version filter", location)
        self.literal = literal


class UnknownVersionError(VersioningError):
    """Raised when a registry is asked for the position of an absent name."""

    def __init__(self, name: str):
        super().__init__(f"Version '{name}' is not declared")
        self.name = name


class DuplicateVersionError(VersioningError):
    """Raised when the same version name is declared twice."""

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(f"Duplicate version '{name}'", location)
        self.name = name


class UnsupportedVisibilityOverride(VersioningError):
    """
    Raised when wrapping would force a node public that has no visibility.

    Implementation and foreign blocks cannot be marked public, so they cannot
    be re-exported from a synthesized per-version container.
    """

    def __init__(self, kind: str, name: Optional[str] = None):
        subject = f"{kind} '{name}'" if name else kind
        super().__init__(
            f"Cannot force {subject} public; use a container as the versioned item"
        )
        self.kind = kind
        self.name = name


__all__ = [
    "SourceLocation",
    "VersioningError",
    "ParseError",
    "ConfigurationError",
    "UnknownVersionReference",
    "UnknownVersionError",
    "DuplicateVersionError",
    "UnsupportedVisibilityOverride",
]
