"""
Serialization helpers for declaration trees and emitted variants.

Provides lossless JSON/YAML round-trip via an intermediate dict
representation. This is the adapter a host uses to hand a tree to the engine
and read the variants back; payloads must therefore be plain JSON/YAML data.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from versioning.emitter import EmittedVariant
from versioning.errors import SourceLocation
from versioning.expressions import Expression
from versioning.filter_parser import format_filter
from versioning.model import (
    Attribute,
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


def location_to_dict(loc: SourceLocation | None) -> Dict[str, int] | None:
    if loc is None:
        return None
    return {"line": loc.line, "column": loc.column}


def location_from_dict(d: Dict[str, int] | None) -> SourceLocation | None:
    if d is None:
        return None
    return SourceLocation(line=d.get("line", 1), column=d.get("column", 1))


def attribute_to_dict(a: Attribute) -> Dict[str, Any]:
    arguments = a.arguments
    if isinstance(arguments, Expression):
        arguments = format_filter(arguments)
    return {"name": a.name, "arguments": arguments, "location": location_to_dict(a.location)}


def attribute_from_dict(d: Dict[str, Any]) -> Attribute:
    return Attribute(
        name=d["name"],
        arguments=d.get("arguments", ""),
        location=location_from_dict(d.get("location")),
    )


def visibility_to_str(v: Visibility | None) -> str | None:
    return None if v is None else v.value


def visibility_from_str(s: str | None) -> Visibility | None:
    return None if s is None else Visibility(s)


def node_to_dict(node: Declaration) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "attributes": [attribute_to_dict(a) for a in node.attributes],
        "payload": node.payload,
    }
    if isinstance(node, Container):
        d.update(type="container", name=node.name, visibility=visibility_to_str(node.visibility),
                 items=[node_to_dict(n) for n in node.items])
    elif isinstance(node, StructDefinition):
        d.update(type="struct", name=node.name, visibility=visibility_to_str(node.visibility),
                 fields=[node_to_dict(f) for f in node.fields])
    elif isinstance(node, EnumDefinition):
        d.update(type="enum", name=node.name, visibility=visibility_to_str(node.visibility),
                 variants=[node_to_dict(v) for v in node.variants])
    elif isinstance(node, Variant):
        d.update(type="variant", name=node.name, fields=[node_to_dict(f) for f in node.fields])
    elif isinstance(node, Field):
        d.update(type="field", name=node.name, visibility=visibility_to_str(node.visibility))
    elif isinstance(node, BehaviorDefinition):
        d.update(type="behavior", behavior=node.behavior.value, name=node.name,
                 visibility=visibility_to_str(node.visibility),
                 members=[node_to_dict(m) for m in node.members])
    elif isinstance(node, Leaf):
        d.update(type="leaf", item=node.item, name=node.name, visibility=visibility_to_str(node.visibility))
    else:
        raise TypeError(f"Unsupported Declaration type: {type(node)}")
    return d


def _visibility_from_dict(d: Dict[str, Any], default: Visibility | None) -> Visibility | None:
    """A missing key takes the model default; an explicit null means no visibility."""
    if "visibility" not in d:
        return default
    return visibility_from_str(d["visibility"])


def node_from_dict(d: Dict[str, Any], in_variant: bool = False) -> Declaration:
    """
    Rebuild a declaration from its dict form.

    Nodes written without a "visibility" key get the same default as the
    model: PRIVATE for items and struct fields, None for variants, variant
    fields and implementation/foreign blocks.
    """
    t = d.get("type")
    attributes = tuple(attribute_from_dict(a) for a in d.get("attributes", []))
    payload = d.get("payload")

    if t == "container":
        return Container(
            name=d["name"],
            items=tuple(node_from_dict(n) for n in d.get("items", [])),
            visibility=_visibility_from_dict(d, Visibility.PRIVATE),
            attributes=attributes,
            payload=payload,
        )
    if t == "struct":
        return StructDefinition(
            name=d["name"],
            fields=tuple(node_from_dict(f) for f in d.get("fields", [])),
            visibility=_visibility_from_dict(d, Visibility.PRIVATE),
            attributes=attributes,
            payload=payload,
        )
    if t == "enum":
        return EnumDefinition(
            name=d["name"],
            variants=tuple(node_from_dict(v) for v in d.get("variants", [])),
            visibility=_visibility_from_dict(d, Visibility.PRIVATE),
            attributes=attributes,
            payload=payload,
        )
    if t == "variant":
        return Variant(
            name=d["name"],
            fields=tuple(node_from_dict(f, in_variant=True) for f in d.get("fields", [])),
            attributes=attributes,
            payload=payload,
        )
    if t == "field":
        default = None if in_variant else Visibility.PRIVATE
        return Field(name=d.get("name"), visibility=_visibility_from_dict(d, default),
                     attributes=attributes, payload=payload)
    if t == "behavior":
        return BehaviorDefinition(
            behavior=BehaviorKind(d["behavior"]),
            name=d.get("name"),
            members=tuple(node_from_dict(m) for m in d.get("members", [])),
            visibility=_visibility_from_dict(d, None),
            attributes=attributes,
            payload=payload,
        )
    if t == "leaf":
        return Leaf(item=d["item"], name=d.get("name"),
                    visibility=_visibility_from_dict(d, Visibility.PRIVATE),
                    attributes=attributes, payload=payload)
    raise TypeError(f"Unsupported declaration dict type: {t}")


def variants_to_dict(variants: List[EmittedVariant]) -> List[Dict[str, Any]]:
    return [{"version": v.version, "node": node_to_dict(v.node)} for v in variants]


def variants_from_dict(d: List[Dict[str, Any]]) -> List[EmittedVariant]:
    return [EmittedVariant(version=v["version"], node=node_from_dict(v["node"])) for v in d]


def node_to_json(node: Declaration) -> str:
    return json.dumps(node_to_dict(node), sort_keys=True)


def node_from_json(s: str) -> Declaration:
    return node_from_dict(json.loads(s))


def node_to_yaml(node: Declaration) -> str:
    return yaml.safe_dump(node_to_dict(node))


def node_from_yaml(s: str) -> Declaration:
    return node_from_dict(yaml.safe_load(s))


def variants_to_json(variants: List[EmittedVariant]) -> str:
    return json.dumps(variants_to_dict(variants), sort_keys=True)


def variants_to_yaml(variants: List[EmittedVariant]) -> str:
    return yaml.safe_dump(variants_to_dict(variants))


def variants_from_yaml(s: str) -> List[EmittedVariant]:
    return variants_from_dict(yaml.safe_load(s))
