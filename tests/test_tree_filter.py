"""
Tests for the Tree Filter.

Tests verify that, for a single version, the filter:
    - Prunes nodes whose annotation does not match, with their subtrees
    - Recurses into every node category, preserving order
    - Re-attaches non-filter attributes unchanged
    - Applies the visibility policy
    - Never modifies the source tree
"""

import pytest
from versioning.annotations import version_attribute
from versioning.errors import UnknownVersionReference, UnsupportedVisibilityOverride
from versioning.model import (
    Attribute,
    BehaviorDefinition,
    BehaviorKind,
    Container,
    EnumDefinition,
    Field,
    Leaf,
    StructDefinition,
    Variant,
    Visibility,
)
from versioning.registry import VersionRegistry
from versioning.tree_filter import TreeFilter, VisibilityPolicy, filter_tree, verify_tree


REGISTRY = VersionRegistry(["v1", "v2", "v3"])
DERIVE = Attribute("derive", "Debug")


def tagged(text):
    return (version_attribute(text),)


def field_names(node):
    return [f.name for f in node.fields]


class TestPruning:
    """Test keep/drop decisions."""

    def test_unannotated_node_kept(self):
        """A node without a filter survives every version."""
        leaf = Leaf(item="const", name="X", visibility=Visibility.PRIVATE)
        for version in REGISTRY:
            assert filter_tree(leaf, REGISTRY, version) == leaf

    def test_non_matching_root_pruned(self):
        """A failing filter on the root returns None."""
        leaf = Leaf(item="fn", name="f", attributes=tagged('"v2"'))
        assert filter_tree(leaf, REGISTRY, "v1") is None
        assert filter_tree(leaf, REGISTRY, "v2") is not None

    def test_subtree_pruned_with_parent(self):
        """Children go with a pruned parent, whatever their own filters."""
        struct = StructDefinition(
            name="S",
            attributes=tagged('"v1"'),
            fields=(Field(name="a", attributes=tagged('"v2"')),),
        )
        assert filter_tree(struct, REGISTRY, "v2") is None

    def test_filter_attribute_removed(self):
        """Surviving nodes no longer carry their version attribute."""
        leaf = Leaf(item="fn", name="f", attributes=(DERIVE,) + tagged('"v1"'))
        result = filter_tree(leaf, REGISTRY, "v1")
        assert result.attributes == (DERIVE,)

    def test_all_empty_never_survives(self):
        """all() excludes a node from every version."""
        leaf = Leaf(item="fn", name="f", attributes=tagged("all()"))
        assert all(filter_tree(leaf, REGISTRY, v) is None for v in REGISTRY)

    def test_unknown_reference(self):
        """A bound naming an undeclared version aborts filtering."""
        leaf = Leaf(item="fn", name="f", attributes=tagged('max("v9")'))
        with pytest.raises(UnknownVersionReference):
            filter_tree(leaf, REGISTRY, "v1")


class TestCategories:
    """Test recursion per node category."""

    def test_struct_fields(self):
        """Fields are filtered independently, in order."""
        struct = StructDefinition(
            name="S",
            fields=(
                Field(name="a", attributes=tagged('"v1"')),
                Field(name="b"),
                Field(name="c", attributes=tagged('min("v2")')),
            ),
        )
        assert field_names(filter_tree(struct, REGISTRY, "v1")) == ["a", "b"]
        assert field_names(filter_tree(struct, REGISTRY, "v3")) == ["b", "c"]

    def test_empty_struct_kept(self):
        """A struct losing all its fields is still emitted."""
        struct = StructDefinition(name="S", fields=(Field(name="a", attributes=tagged('"v1"')),))
        result = filter_tree(struct, REGISTRY, "v2")
        assert result is not None
        assert result.fields == ()

    def test_positional_fields(self):
        """Unnamed fields filter the same way."""
        struct = StructDefinition(
            name="T",
            fields=(
                Field(payload={"type": "String"}, attributes=tagged('"v1"')),
                Field(payload={"type": "u64"}, attributes=tagged('"v2"')),
            ),
        )
        result = filter_tree(struct, REGISTRY, "v2")
        assert [f.payload for f in result.fields] == [{"type": "u64"}]

    def test_enum_variants_and_fields(self):
        """Variants are checked first, then their fields."""
        enum = EnumDefinition(
            name="E",
            variants=(
                Variant(name="A", attributes=tagged('"v1"')),
                Variant(
                    name="B",
                    attributes=tagged('any("v2", "v3")'),
                    fields=(
                        Field(visibility=None, attributes=tagged('"v2"')),
                        Field(visibility=None, attributes=tagged('"v3"')),
                    ),
                ),
            ),
        )
        v1 = filter_tree(enum, REGISTRY, "v1")
        assert [v.name for v in v1.variants] == ["A"]

        v3 = filter_tree(enum, REGISTRY, "v3")
        assert [v.name for v in v3.variants] == ["B"]
        assert len(v3.variants[0].fields) == 1

    def test_behavior_members(self):
        """Unannotated members are always kept, order preserved."""
        impl = BehaviorDefinition(
            behavior=BehaviorKind.IMPLEMENTATION,
            name="S",
            members=(
                Leaf(item="fn", name="foo", attributes=tagged('"v1"')),
                Leaf(item="fn", name="shared"),
                Leaf(item="fn", name="bar", attributes=tagged('"v2"')),
            ),
        )
        result = filter_tree(impl, REGISTRY, "v2")
        assert [m.name for m in result.members] == ["shared", "bar"]

    def test_container_children(self):
        """Container items are filtered and kept in order."""
        container = Container(
            name="defs",
            items=(
                StructDefinition(name="A", attributes=tagged('"v1"')),
                StructDefinition(name="B"),
                BehaviorDefinition(behavior=BehaviorKind.IMPLEMENTATION, name="A",
                                   attributes=tagged('"v1"')),
            ),
        )
        assert [i.name for i in filter_tree(container, REGISTRY, "v1").items] == ["A", "B", "A"]
        assert [i.name for i in filter_tree(container, REGISTRY, "v2").items] == ["B"]

    def test_payload_passed_through(self):
        """Opaque payloads survive unchanged but are not shared."""
        payload = {"generics": ["I"], "where": "I: Clone"}
        struct = StructDefinition(name="List", payload=payload)
        result = filter_tree(struct, REGISTRY, "v1")
        assert result.payload == payload
        assert result.payload is not payload


class TestVisibility:
    """Test the visibility policy."""

    def test_preserve(self):
        """PRESERVE leaves visibility alone."""
        struct = StructDefinition(name="S", fields=(Field(name="a"),))
        result = filter_tree(struct, REGISTRY, "v1", VisibilityPolicy.PRESERVE)
        assert result.visibility == Visibility.PRIVATE
        assert result.fields[0].visibility == Visibility.PRIVATE

    def test_force_public(self):
        """FORCE_PUBLIC marks every node with a visibility public."""
        struct = StructDefinition(
            name="S",
            visibility=Visibility.RESTRICTED,
            fields=(Field(name="a"),),
        )
        result = filter_tree(struct, REGISTRY, "v1", VisibilityPolicy.FORCE_PUBLIC)
        assert result.visibility == Visibility.PUBLIC
        assert result.fields[0].visibility == Visibility.PUBLIC

    def test_force_public_skips_nodes_without_visibility(self):
        """Variants and variant fields have no visibility to force."""
        enum = EnumDefinition(
            name="E",
            variants=(Variant(name="A", fields=(Field(visibility=None),)),),
        )
        result = filter_tree(enum, REGISTRY, "v1", VisibilityPolicy.FORCE_PUBLIC)
        assert result.visibility == Visibility.PUBLIC
        assert result.variants[0].fields[0].visibility is None

    def test_force_public_on_impl_block(self):
        """An implementation block at the top level cannot be forced public."""
        impl = BehaviorDefinition(behavior=BehaviorKind.IMPLEMENTATION, name="S")
        with pytest.raises(UnsupportedVisibilityOverride) as exc:
            filter_tree(impl, REGISTRY, "v1", VisibilityPolicy.FORCE_PUBLIC)
        assert exc.value.kind == "impl"

    def test_nested_impl_block_allowed(self):
        """Blocks without visibility are fine below the top level."""
        container = Container(
            name="defs",
            items=(BehaviorDefinition(behavior=BehaviorKind.FOREIGN_BLOCK),),
        )
        result = filter_tree(container, REGISTRY, "v1", VisibilityPolicy.FORCE_PUBLIC)
        assert result.items[0].visibility is None

    def test_trait_can_be_forced(self):
        """Traits do have a visibility."""
        trait = BehaviorDefinition(behavior=BehaviorKind.TRAIT, name="T", visibility=Visibility.PRIVATE)
        result = filter_tree(trait, REGISTRY, "v1", VisibilityPolicy.FORCE_PUBLIC)
        assert result.visibility == Visibility.PUBLIC


class TestPurity:
    """Test that the source tree is left untouched."""

    def test_source_unchanged(self):
        """Filtering returns new nodes and leaves the input as it was."""
        def build():
            return StructDefinition(name="S", fields=(Field(name="a", attributes=tagged('"v1"')), Field(name="b")))

        struct = build()
        before = build()
        TreeFilter(REGISTRY, "v2").filter(struct)
        assert struct == before
        assert struct.fields[0].attributes == tagged('"v1"')


class TestVerifyTree:
    """Test whole-tree verification."""

    def test_reference_in_pruned_subtree_found(self):
        """Bad references are found even below nodes some versions prune."""
        struct = StructDefinition(
            name="S",
            attributes=tagged('"v1"'),
            fields=(Field(name="a", attributes=tagged('min("v7")')),),
        )
        with pytest.raises(UnknownVersionReference):
            verify_tree(struct, REGISTRY)

    def test_clean_tree(self):
        """A tree with valid filters verifies silently."""
        struct = StructDefinition(name="S", fields=(Field(name="a", attributes=tagged('min("v2")')),))
        verify_tree(struct, REGISTRY)
