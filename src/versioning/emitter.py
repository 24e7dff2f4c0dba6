"""
Variant Emitter

Drives the tree filter once per registered version and packages each result
as a per-version container.

Wrapping policy:
    nest_top_level=False, root is a Container
        -> the filtered container is renamed to the version name
    otherwise
        -> a new container named after the version is synthesized around the
           filtered node, which is forced public so it can be reached through
           the new namespace

Example:
    registry, options = parse_versioning_arguments('v1, v2')
    for variant in emit(root, registry, options):
        print(variant.version, variant.node)
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from versioning.annotations import build_gate_attribute
from versioning.errors import SourceLocation
from versioning.model import Container, Declaration, Visibility, display_name
from versioning.options import EmitOptions, parse_versioning_arguments
from versioning.registry import VersionRegistry
from versioning.tree_filter import TreeFilter, VisibilityPolicy, verify_tree


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmittedVariant:
    """
    One filtered copy of the declaration.

    Properties:
        version: The version this copy was produced for
        node: The per-version container holding the filtered declaration
    """

    version: str
    node: Declaration


def _wraps(root: Declaration, options: EmitOptions) -> bool:
    return options.nest_top_level or not isinstance(root, Container)


def emit(
        root: Declaration,
        registry: VersionRegistry,
        options: Optional[EmitOptions] = None) -> List[EmittedVariant]:
    """
    Produce one variant per version, in registry order.

    Versions for which the whole declaration is filtered away are omitted.
    All annotations are verified before the first variant is built, so an
    error never leaves a partial result.

    Args:
        root: The annotated declaration
        registry: Versions to emit, in order
        options: Wrapping and build-gate settings

    Returns:
        List of EmittedVariant

    Raises:
        ParseError, UnknownVersionReference, UnsupportedVisibilityOverride
    """
    options = options or EmitOptions()
    verify_tree(root, registry)

    wrap = _wraps(root, options)
    policy = VisibilityPolicy.FORCE_PUBLIC if wrap else VisibilityPolicy.PRESERVE
    namespace_visibility = getattr(root, "visibility", None) or Visibility.PRIVATE

    variants = []
    for version in registry:
        node = TreeFilter(registry, version, policy).filter(root, is_top_level=True)
        if node is None:
            logger.debug("%s %s is empty for %s; omitting", root.kind, display_name(root), version)
            continue

        if wrap:
            node = Container(name=version, items=(node,), visibility=namespace_visibility)
        else:
            node = replace(node, name=version)

        if options.features:
            node = replace(node, attributes=node.attributes + (build_gate_attribute(version),))

        logger.debug("Emitted %s for %s", display_name(root), version)
        variants.append(EmittedVariant(version, node))

    logger.info(
        "Versioned %s %s: %d versions, %d variants",
        root.kind, display_name(root), len(registry), len(variants),
    )
    return variants


def versioning(
        arguments: str,
        root: Declaration,
        origin: Optional[SourceLocation] = None) -> List[EmittedVariant]:
    """
    One-shot entry point: parse `versioning(...)` arguments, then emit.

    Args:
        arguments: Version list and options, e.g. 'v1, v2, features = true'
        root: The annotated declaration
        origin: Location of the argument text for error reporting
    """
    registry, options = parse_versioning_arguments(arguments, origin)
    return emit(root, registry, options)


__all__ = ["EmittedVariant", "emit", "versioning"]
