"""
Example declarations for demos and tests.

Each builder returns the annotated tree for one showcase; the matching
`versioning(...)` arguments are in EXAMPLES. Payloads hold the concrete
syntax the engine never looks at (types, signatures).
"""
from typing import Callable, Dict, Tuple

from versioning.annotations import version_attribute
from versioning.model import (
    BehaviorDefinition,
    BehaviorKind,
    Container,
    Declaration,
    EnumDefinition,
    Field,
    Leaf,
    StructDefinition,
    Variant,
    Visibility,
)


def _field(name, type_, filter_text=None, visibility=Visibility.PRIVATE) -> Field:
    attributes = (version_attribute(filter_text),) if filter_text is not None else ()
    return Field(name=name, visibility=visibility, attributes=attributes, payload={"type": type_})


def _fn(name, signature, filter_text=None, visibility=Visibility.PUBLIC) -> Leaf:
    attributes = (version_attribute(filter_text),) if filter_text is not None else ()
    return Leaf(item="fn", name=name, visibility=visibility, attributes=attributes,
                payload={"signature": signature})


def build_structs_example() -> Declaration:
    """A named struct whose two fields each belong to one version."""
    return StructDefinition(
        name="Example1",
        fields=(
            _field("foo", "String", '"v1_0_0"'),
            _field("bar", "u64", '"v2_0_0"'),
        ),
    )


def build_tuple_struct_example() -> Declaration:
    """The positional-field form of the structs example."""
    return StructDefinition(
        name="Example2",
        fields=(
            _field(None, "String", '"v1_0_0"'),
            _field(None, "u64", '"v2_0_0"'),
        ),
    )


def build_ordered_example() -> Declaration:
    """Inclusive and exclusive positional bounds splitting four versions in half."""
    pub = Visibility.PUBLIC
    return Container(
        name="defs",
        items=(
            StructDefinition(
                name="Example",
                visibility=pub,
                fields=(
                    _field("foo", "String", 'max("v1_0_1")', pub),
                    _field("bar", "u64", 'min("v1_1_0")', pub),
                    _field("baz", "String", 'max_excl("v1_1_0")', pub),
                    _field("quz", "u64", 'min_excl("v1_0_1")', pub),
                ),
            ),
        ),
    )


def build_partial_example() -> Declaration:
    """Prefix matching: "v1" covers every 1.x version, "" covers all."""
    pub = Visibility.PUBLIC
    return Container(
        name="defs",
        items=(
            StructDefinition(
                name="Example",
                visibility=pub,
                fields=(
                    _field("foo", "String", '"v1"', pub),
                    _field("bar", "u64", '""', pub),
                ),
            ),
        ),
    )


def build_enum_example() -> Declaration:
    """Variants filtered as a whole, plus fields filtered inside variants."""
    return EnumDefinition(
        name="Example",
        variants=(
            Variant(name="Variant1", attributes=(version_attribute('"v1_0_0"'),)),
            Variant(
                name="Variant2",
                attributes=(version_attribute('any("v2_0_0", "v3_0_0")'),),
                fields=(
                    _field(None, "String", '"v2_0_0"', None),
                    _field(None, "u64", '"v3_0_0"', None),
                ),
            ),
            Variant(
                name="Variant3",
                attributes=(version_attribute('any("v4_0_0", "v5_0_0")'),),
                fields=(
                    _field("foo", "String", '"v4_0_0"', None),
                    _field("bar", "u64", '"v5_0_0"', None),
                ),
            ),
        ),
    )


def build_impls_example() -> Declaration:
    """Whole implementation blocks and individual methods per version."""
    pub = Visibility.PUBLIC
    return Container(
        name="defs",
        items=(
            StructDefinition(
                name="Example1",
                visibility=pub,
                fields=(
                    _field("foo", "String", '"v1_0_0"'),
                    _field("bar", "u64", '"v2_0_0"'),
                ),
            ),
            BehaviorDefinition(
                behavior=BehaviorKind.IMPLEMENTATION,
                name="Example1",
                attributes=(version_attribute('"v1_0_0"'),),
                members=(_fn("new", "fn new() -> Self"),),
            ),
            BehaviorDefinition(
                behavior=BehaviorKind.IMPLEMENTATION,
                name="Example1",
                attributes=(version_attribute('"v2_0_0"'),),
                members=(_fn("new", "fn new() -> Self"),),
            ),
            BehaviorDefinition(
                behavior=BehaviorKind.IMPLEMENTATION,
                name="Example1",
                members=(
                    _fn("foo", "fn foo(&self) -> &str", '"v1_0_0"'),
                    _fn("bar", "fn bar(&self) -> u64", '"v2_0_0"'),
                ),
            ),
        ),
    )


def build_generics_example() -> Declaration:
    """Generic parameters ride along untouched in the payload."""
    pub = Visibility.PUBLIC
    return Container(
        name="defs",
        items=(
            StructDefinition(
                name="List",
                visibility=pub,
                payload={"generics": "<I>"},
                fields=(
                    _field("data", "Vec<I>", '"v1_0_0"', pub),
                    _field("contents", "Vec<I>", '"v2_0_0"', pub),
                ),
            ),
            BehaviorDefinition(
                behavior=BehaviorKind.IMPLEMENTATION,
                name="List",
                payload={"generics": "<I>", "where": "I: Clone"},
                members=(
                    _fn("clone", "fn clone(&self) -> Self", '"v1_0_0"'),
                    _fn("clone", "fn clone(&self) -> Self", '"v2_0_0"'),
                ),
            ),
        ),
    )


EXAMPLES: Dict[str, Tuple[str, Callable[[], Declaration]]] = {
    "structs": ('"v1_0_0", "v2_0_0"', build_structs_example),
    "tuple_structs": ('"v1_0_0", "v2_0_0"', build_tuple_struct_example),
    "ordered": ('"v1_0_0", "v1_0_1", "v1_1_0", "v2_0_0"', build_ordered_example),
    "partial": ("v1_0_0, v1_0_1, v1_1_0, v2_0_0", build_partial_example),
    "enums": ("v1_0_0, v2_0_0, v3_0_0, v4_0_0, v5_0_0", build_enum_example),
    "impls": ('"v1_0_0", "v2_0_0"', build_impls_example),
    "generics": ("v1_0_0, v2_0_0", build_generics_example),
}
