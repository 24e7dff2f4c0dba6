"""
Variant Analyzer: diagnostics for an annotated declaration.

This module provides lightweight analysis of a versioned declaration:
    - Annotation inventory and filter complexity
    - Per-version surviving node counts
    - Versions never referenced by any positional bound
    - Warning flags for annotations that look like mistakes

IMPORTANT: This is read-only. It does NOT modify the tree or the variants.
It only produces a report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from versioning.annotations import extract_filter
from versioning.emitter import EmittedVariant
from versioning.evaluator import evaluate, expression_depth, referenced_versions
from versioning.model import Declaration, display_name, walk
from versioning.registry import VersionRegistry


@dataclass
class VersioningReport:
    """Analysis report for one versioned declaration."""

    declaration: str
    total_nodes: int = 0
    annotated_nodes: int = 0
    total_versions: int = 0
    total_variants: int = 0

    # Declarations inside each per-version container
    nodes_per_version: Dict[str, int] = field(default_factory=dict)
    missing_versions: List[str] = field(default_factory=list)
    unreferenced_versions: Set[str] = field(default_factory=set)

    # Filter complexity
    max_filter_depth: int = 0

    # Annotation problems, as "kind name" labels
    never_emitted: List[str] = field(default_factory=list)
    redundant_filters: List[str] = field(default_factory=list)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def _label(node: Declaration) -> str:
    return f"{node.kind} {display_name(node)}"


def _count_contents(variant: EmittedVariant) -> int:
    # The per-version container itself is not counted
    return sum(1 for _ in walk(variant.node)) - 1


def _matching_versions(
        node: Declaration,
        registry: VersionRegistry,
        inherited: Set[str]) -> Dict[int, Set[str]]:
    """Map id(node) to the versions in which it survives, for every node."""
    _, expr = extract_filter(node.attributes, warn=False)
    versions = set(inherited)
    if expr is not None:
        versions = {v for v in versions if evaluate(expr, registry, v)}
    result = {id(node): versions}
    for child in node.children():
        result.update(_matching_versions(child, registry, versions))
    return result


def analyze_variants(
        root: Declaration,
        registry: VersionRegistry,
        variants: List[EmittedVariant]) -> VersioningReport:
    """
    Perform analysis of a declaration and the variants emitted from it.

    Checks for:
    - Nodes whose filters exclude every version (never emitted)
    - Annotated nodes kept in every version (redundant filter)
    - Versions for which no variant was produced
    - Versions not referenced by any positional bound

    Returns a VersioningReport with metrics and warnings.
    """
    report = VersioningReport(declaration=_label(root))
    report.total_versions = len(registry)
    report.total_variants = len(variants)

    all_versions = set(registry)
    survival = _matching_versions(root, registry, all_versions)
    referenced: Set[str] = set()

    for node in walk(root):
        report.total_nodes += 1
        _, expr = extract_filter(node.attributes, warn=False)
        if expr is None:
            continue

        report.annotated_nodes += 1
        report.max_filter_depth = max(report.max_filter_depth, expression_depth(expr))
        referenced.update(referenced_versions(expr))

        survives_in = survival[id(node)]
        if not survives_in:
            report.never_emitted.append(_label(node))
        elif survives_in == all_versions:
            report.redundant_filters.append(_label(node))

    emitted = {v.version for v in variants}
    report.missing_versions = [v for v in registry if v not in emitted]
    report.unreferenced_versions = all_versions - referenced
    report.nodes_per_version = {v.version: _count_contents(v) for v in variants}

    if report.never_emitted:
        report.add_warning(f"Never emitted in any version: {', '.join(report.never_emitted)}")

    if report.redundant_filters:
        report.add_warning(f"Filter matches every version: {', '.join(report.redundant_filters)}")

    if report.missing_versions:
        report.add_warning(f"No variant produced for: {', '.join(report.missing_versions)}")

    if report.max_filter_depth > 5:
        report.add_warning(f"High filter complexity: max depth {report.max_filter_depth}")

    return report


__all__ = ["VersioningReport", "analyze_variants"]
