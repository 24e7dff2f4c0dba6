"""
Generic Declaration Tree

Defines the handful of semantic categories the engine understands:
    - Container            (a namespace of items)
    - StructDefinition     (ordered fields)
    - EnumDefinition       (ordered variants, each with ordered fields)
    - Field / Variant      (members of type definitions)
    - BehaviorDefinition   (trait, implementation or foreign block)
    - Leaf                 (function, constant, type alias, import, ...)

Concrete-syntax detail the engine never inspects (types, generics, function
bodies, where-clauses) travels in each node's opaque `payload` and is passed
through unchanged.

ARCHITECTURAL RULE:
    Nodes are immutable. The source tree is built once by a front-end and
    only read afterwards; every variant is a brand-new tree.
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional, Tuple, Union

from versioning.errors import SourceLocation
from versioning.expressions import Expression


class Visibility(Enum):
    """
    Declared visibility of an item.

    RESTRICTED covers scoped forms (crate- or parent-visible); the exact
    scope, if any, lives in the node payload.
    """

    PRIVATE = "private"
    RESTRICTED = "restricted"
    PUBLIC = "public"


@dataclass(frozen=True)
class Attribute:
    """
    A generic annotation attached to a node.

    Properties:
        name: Attribute name, e.g. "version", "derive", "cfg"
        arguments: Argument source text, or an already-parsed Expression
            for filter annotations built in code
        location: Where the arguments begin (ignored by equality)

    Only attributes named "version" are interpreted by the engine. Every
    other attribute is opaque and re-attached unchanged.
    """

    name: str
    arguments: Union[str, Expression] = ""
    location: Optional[SourceLocation] = field(default=None, compare=False)


class Declaration(ABC):
    """
    Base class for all tree nodes.

    Capabilities:
        has_attributes: Every node carries annotations
        has_visibility: Only nodes whose `visibility` is not None
        has_children:   Kinds that can hold sub-declarations, even when empty
    """

    KIND = "declaration"
    HAS_CHILDREN = False

    @property
    def kind(self) -> str:
        return self.KIND

    @property
    def has_attributes(self) -> bool:
        return True

    @property
    def has_visibility(self) -> bool:
        return getattr(self, "visibility", None) is not None

    @property
    def has_children(self) -> bool:
        return self.HAS_CHILDREN

    def children(self) -> Tuple["Declaration", ...]:
        return ()


@dataclass(frozen=True)
class Field(Declaration):
    """
    A struct or variant field.

    Properties:
        name: Field name, or None for positional (tuple-style) fields
        visibility: None for enum-variant fields, which cannot declare one
        payload: Opaque type information
    """

    KIND = "field"

    name: Optional[str] = None
    visibility: Optional[Visibility] = Visibility.PRIVATE
    attributes: Tuple[Attribute, ...] = ()
    payload: Any = None


@dataclass(frozen=True)
class Variant(Declaration):
    """An enum variant. Variants have no visibility of their own."""

    KIND = "variant"
    HAS_CHILDREN = True

    name: str
    fields: Tuple[Field, ...] = ()
    attributes: Tuple[Attribute, ...] = ()
    payload: Any = None

    def children(self) -> Tuple[Declaration, ...]:
        return self.fields


@dataclass(frozen=True)
class StructDefinition(Declaration):
    """
    A record type.

    IMPORTANT:
        A struct with zero fields is meaningful and is never dropped for
        being empty.
    """

    KIND = "struct"
    HAS_CHILDREN = True

    name: str
    fields: Tuple[Field, ...] = ()
    visibility: Optional[Visibility] = Visibility.PRIVATE
    attributes: Tuple[Attribute, ...] = ()
    payload: Any = None

    def children(self) -> Tuple[Declaration, ...]:
        return self.fields


@dataclass(frozen=True)
class EnumDefinition(Declaration):
    """A sum type with ordered variants."""

    KIND = "enum"
    HAS_CHILDREN = True

    name: str
    variants: Tuple[Variant, ...] = ()
    visibility: Optional[Visibility] = Visibility.PRIVATE
    attributes: Tuple[Attribute, ...] = ()
    payload: Any = None

    def children(self) -> Tuple[Declaration, ...]:
        return self.variants


class BehaviorKind(Enum):
    TRAIT = "trait"
    IMPLEMENTATION = "impl"
    FOREIGN_BLOCK = "foreign"


@dataclass(frozen=True)
class BehaviorDefinition(Declaration):
    """
    A block of members: trait, implementation or foreign block.

    Properties:
        behavior: Which kind of block this is
        name: Trait name, or the implementing type for implementations
        members: Ordered member items (usually Leaf functions/constants)
        visibility: Only traits have one; implementation and foreign
            blocks leave this as None

    Members without a version annotation are always kept.
    """

    HAS_CHILDREN = True

    behavior: BehaviorKind
    name: Optional[str] = None
    members: Tuple[Declaration, ...] = ()
    visibility: Optional[Visibility] = None
    attributes: Tuple[Attribute, ...] = ()
    payload: Any = None

    @property
    def kind(self) -> str:
        return self.behavior.value

    def children(self) -> Tuple[Declaration, ...]:
        return self.members


@dataclass(frozen=True)
class Leaf(Declaration):
    """
    Any item the engine does not recurse into.

    Examples of `item`: "fn", "const", "static", "type", "use", "macro".
    A leaf is kept or dropped solely by its own annotation. Leaves default
    to PRIVATE like other items; pass visibility=None for items that cannot
    declare one, such as macro invocations.
    """

    item: str
    name: Optional[str] = None
    visibility: Optional[Visibility] = Visibility.PRIVATE
    attributes: Tuple[Attribute, ...] = ()
    payload: Any = None

    @property
    def kind(self) -> str:
        return self.item


@dataclass(frozen=True)
class Container(Declaration):
    """
    A namespace holding other declarations.

    Properties:
        name: Namespace name; renamed to the version name when emitted in place
        items: Ordered child declarations
    """

    KIND = "mod"
    HAS_CHILDREN = True

    name: str
    items: Tuple[Declaration, ...] = ()
    visibility: Optional[Visibility] = Visibility.PRIVATE
    attributes: Tuple[Attribute, ...] = ()
    payload: Any = None

    def children(self) -> Tuple[Declaration, ...]:
        return self.items


def walk(node: Declaration) -> Iterator[Declaration]:
    """Yield a node and all of its descendants, pre-order."""
    yield node
    for child in node.children():
        yield from walk(child)


def display_name(node: Declaration) -> str:
    name = getattr(node, "name", None)
    return name if name is not None else f"<{node.kind}>"


__all__ = [
    "Visibility",
    "Attribute",
    "Declaration",
    "Field",
    "Variant",
    "StructDefinition",
    "EnumDefinition",
    "BehaviorKind",
    "BehaviorDefinition",
    "Leaf",
    "Container",
    "walk",
    "display_name",
]
