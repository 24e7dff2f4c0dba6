"""
Version list and option parsing.

The arguments of a `versioning(...)` invocation are a sequence of version
names interleaved with boolean settings:

    versioning(v1_0_0, "v1_1_0", v2_0_0, features = true)

Versions may be identifiers or string literals. Commas and whitespace both
separate entries and a run of commas counts as one separator.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from versioning.errors import ConfigurationError, ParseError, SourceLocation
from versioning.filter_parser import COMMA, END, EQUALS, IDENT, STRING, Token, describe, tokenize
from versioning.registry import VersionRegistry


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmitOptions:
    """
    Settings for variant emission.

    Properties:
        features:
            Tag each variant with a build-gate marker named after its version
        nest_top_level:
            Always wrap the filtered declaration in a new per-version
            container, even when the declaration is itself a container
    """

    features: bool = False
    nest_top_level: bool = False


# key -> (field name, inverted)
_OPTION_KEYS: Dict[str, Tuple[str, bool]] = {
    "features": ("features", False),
    "nest_top_level": ("nest_top_level", False),
    "nestTopLevel": ("nest_top_level", False),
    "visible_modules": ("nest_top_level", False),
    "invisible_modules": ("nest_top_level", True),
}

_BOOLEANS = {"true": True, "false": False}


def _parse_setting(tokens: List[Token], pos: int) -> Tuple[str, bool, int]:
    key = tokens[pos]
    value = tokens[pos + 2]
    if key.value not in _OPTION_KEYS:
        known = ", ".join(sorted(_OPTION_KEYS))
        raise ConfigurationError(
            f"Unknown option '{key.value}' (expected one of: {known})",
            key.value,
            key.location,
        )
    if value.kind != IDENT or value.value not in _BOOLEANS:
        raise ConfigurationError(
            f"Option '{key.value}' expects true or false, found {describe(value)}",
            key.value,
            value.location,
        )
    return key.value, _BOOLEANS[value.value], pos + 3


def parse_versioning_arguments(
        text: str,
        origin: Optional[SourceLocation] = None) -> Tuple[VersionRegistry, EmitOptions]:
    """
    Parse a version list with optional settings.

    Args:
        text: e.g. 'v1, v2, nest_top_level = true'
        origin: Location of the first character

    Returns:
        (registry, options)

    Raises:
        ParseError: On malformed input
        ConfigurationError: On unknown keys or non-boolean values
        DuplicateVersionError: If a version is listed twice
    """
    tokens = tokenize(text, origin)
    names: List[str] = []
    locations: List[SourceLocation] = []
    settings: Dict[str, bool] = {}

    pos = 0
    while tokens[pos].kind != END:
        token = tokens[pos]
        if token.kind == COMMA:
            pos += 1
            continue

        if token.kind == IDENT and tokens[pos + 1].kind == EQUALS:
            key, value, pos = _parse_setting(tokens, pos)
            field_name, inverted = _OPTION_KEYS[key]
            settings[field_name] = (not value) if inverted else value
            continue

        if token.kind in (IDENT, STRING):
            names.append(token.value)
            locations.append(token.location)
            pos += 1
            continue

        raise ParseError(f"Expected version name or option, found {describe(token)}", token.location)

    registry = VersionRegistry(names, locations)
    options = EmitOptions(**settings)
    logger.debug("Parsed %d versions with options %s", len(registry), options)
    return registry, options


__all__ = ["EmitOptions", "parse_versioning_arguments"]
