"""
Tree Filter

Walks a declaration tree for one version and rebuilds it without the parts
whose filter annotation does not match.

At every node:
    1. Detach the node's own filter (if any), verify it, evaluate it.
       A false result prunes the node and its entire subtree.
    2. Recurse into children by category, keeping survivors in order.
    3. Reassemble the node with its non-filter attributes unchanged.

The source tree is never modified. Every returned node is newly built and
payloads are deep-copied, so variants share no structure.
"""

import copy
import logging
from dataclasses import replace
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from versioning.annotations import extract_filter
from versioning.errors import UnsupportedVisibilityOverride
from versioning.evaluator import evaluate, verify
from versioning.model import (
    BehaviorDefinition,
    Container,
    Declaration,
    EnumDefinition,
    Field,
    Leaf,
    StructDefinition,
    Variant,
    Visibility,
    display_name,
    walk,
)
from versioning.registry import VersionRegistry


logger = logging.getLogger(__name__)


class VisibilityPolicy(Enum):
    """
    What happens to the visibility of surviving nodes.

    PRESERVE:     leave declared visibility untouched
    FORCE_PUBLIC: mark every node that has a visibility as public; used when
                  the result is re-exported from a synthesized container
    """

    PRESERVE = "preserve"
    FORCE_PUBLIC = "force_public"


def verify_tree(node: Declaration, registry: VersionRegistry) -> None:
    """
    Parse and verify every filter annotation in the tree.

    Runs before any evaluation so that a bad reference anywhere, including
    inside subtrees that some versions would prune, aborts the invocation.

    Raises:
        ParseError: On a malformed annotation
        UnknownVersionReference: On a bound naming an undeclared version
    """
    for descendant in walk(node):
        _, expr = extract_filter(descendant.attributes)
        if expr is not None:
            verify(expr, registry)


class TreeFilter:
    """
    Produces the variant of a declaration for a single version.

    Example:
        tree_filter = TreeFilter(registry, "v1_0_0")
        variant = tree_filter.filter(root)   # None if root itself is pruned
    """

    def __init__(
            self,
            registry: VersionRegistry,
            version: str,
            policy: VisibilityPolicy = VisibilityPolicy.PRESERVE):
        self.registry = registry
        self.version = version
        self.policy = policy

    def filter(self, node: Declaration, is_top_level: bool = True) -> Optional[Declaration]:
        """
        Filter a node and its subtree.

        Returns:
            A new node, or None if the node's filter excludes this version

        Raises:
            UnsupportedVisibilityOverride: If FORCE_PUBLIC is requested for a
                top-level node without a visibility
        """
        if is_top_level and self.policy == VisibilityPolicy.FORCE_PUBLIC and not node.has_visibility:
            raise UnsupportedVisibilityOverride(node.kind, getattr(node, "name", None))

        # Duplicates were already reported by verify_tree
        attributes, expr = extract_filter(node.attributes, warn=False)
        if expr is not None:
            verify(expr, self.registry)
            if not evaluate(expr, self.registry, self.version):
                logger.debug("Pruned %s %s for %s", node.kind, display_name(node), self.version)
                return None

        changes: Dict[str, Any] = {
            "attributes": attributes,
            "payload": copy.deepcopy(node.payload),
        }

        if isinstance(node, Container):
            changes["items"] = self._filter_all(node.items)
        elif isinstance(node, StructDefinition):
            changes["fields"] = self._filter_all(node.fields)
        elif isinstance(node, EnumDefinition):
            changes["variants"] = self._filter_all(node.variants)
        elif isinstance(node, Variant):
            changes["fields"] = self._filter_all(node.fields)
        elif isinstance(node, BehaviorDefinition):
            changes["members"] = self._filter_all(node.members)
        elif not isinstance(node, (Field, Leaf)):
            raise TypeError(f"Unsupported Declaration type: {type(node)}")

        if node.has_visibility and self.policy == VisibilityPolicy.FORCE_PUBLIC:
            changes["visibility"] = Visibility.PUBLIC

        return replace(node, **changes)

    def _filter_all(self, nodes: Sequence[Declaration]) -> Tuple[Declaration, ...]:
        survivors = []
        for child in nodes:
            result = self.filter(child, is_top_level=False)
            if result is not None:
                survivors.append(result)
        return tuple(survivors)


def filter_tree(
        node: Declaration,
        registry: VersionRegistry,
        version: str,
        policy: VisibilityPolicy = VisibilityPolicy.PRESERVE) -> Optional[Declaration]:
    """Convenience wrapper: filter `node` for one version."""
    return TreeFilter(registry, version, policy).filter(node, is_top_level=True)


__all__ = ["VisibilityPolicy", "TreeFilter", "verify_tree", "filter_tree"]
