"""
Graphviz DOT diagram generator for emitted variants.

Renders each variant as a cluster, with one node per declaration and edges
from each declaration to the declarations it contains.

Supports two modes:
    - SIMPLE: Names only
    - DETAILED: Kind, visibility and remaining attributes in each label
"""

from enum import Enum
from typing import List

from versioning.emitter import EmittedVariant
from versioning.model import Declaration, display_name


class DotMode(Enum):
    """Visualization modes for DOT output."""
    SIMPLE = "simple"
    DETAILED = "detailed"


def _escape_dot_string(s: str) -> str:
    """Escape special characters for DOT labels."""
    if not s:
        return '""'
    s = s.replace('\\', '\\\\')
    s = s.replace('"', '\\"')
    s = s.replace('\n', '\\n')
    return f'"{s}"'


def _node_label(node: Declaration, mode: DotMode) -> str:
    label = display_name(node)
    if mode == DotMode.DETAILED:
        info = [node.kind]
        visibility = getattr(node, "visibility", None)
        if visibility is not None:
            info.append(visibility.value)
        for attribute in node.attributes:
            info.append(f"#[{attribute.name}({attribute.arguments})]")
        label = f"{label}\n({', '.join(info)})"
    return label


def _emit_tree(node: Declaration, node_id: str, mode: DotMode, lines: List[str]) -> None:
    lines.append(f"    {node_id} [label={_escape_dot_string(_node_label(node, mode))}];")
    for i, child in enumerate(node.children()):
        child_id = f"{node_id}_{i}"
        _emit_tree(child, child_id, mode, lines)
        lines.append(f"    {node_id} -> {child_id};")


def generate_dot(variants: List[EmittedVariant], mode: DotMode = DotMode.SIMPLE) -> str:
    """
    Generate Graphviz DOT format for a list of variants.

    Args:
        variants: Output of emit()
        mode: Visualization mode (SIMPLE, DETAILED)

    Returns:
        String containing DOT graph definition
    """
    lines = []
    lines.append("digraph variants {")
    lines.append("  rankdir=LR;")
    lines.append("  node [shape=box, style=filled, fillcolor=lightblue];")

    for index, variant in enumerate(variants):
        lines.append(f'  subgraph "cluster_{index}" {{')
        lines.append(f"    label={_escape_dot_string(variant.version)};")
        lines.append("    style=filled;")
        lines.append("    color=lightgrey;")
        _emit_tree(variant.node, f"n{index}", mode, lines)
        lines.append("  }")

    lines.append("}")
    return "\n".join(lines)


def save_dot_file(variants: List[EmittedVariant], filename: str, mode: DotMode = DotMode.SIMPLE) -> None:
    """
    Generate DOT and save to file.

    Args:
        variants: Variants to visualize
        filename: Output file path (.dot extension recommended)
        mode: Visualization mode
    """
    dot = generate_dot(variants, mode=mode)
    with open(filename, 'w') as f:
        f.write(dot)


__all__ = ["DotMode", "generate_dot", "save_dot_file"]
