"""Convert raw JSON Schema mappings into typed schema nodes.

:func:`parse_schema` picks exactly one :data:`~clientsynth.models.SchemaNode`
variant per raw mapping, checking keywords in this order:

``$ref`` > ``anyOf`` > ``oneOf`` > ``allOf`` > ``type`` list > ``const`` >
base shape (``enum``, ``object``, ``array``, primitive).

The resolution core relies on that order and never looks at raw mappings
itself.  Schema ``$ref``\\ s are kept as :class:`~clientsynth.models.ReferenceNode`
without being followed.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from clientsynth.models import (
    ArrayNode,
    CompositionKind,
    CompositionNode,
    ConstNode,
    Discriminator,
    EnumNode,
    ObjectNode,
    PrimitiveNode,
    ReferenceNode,
    SchemaAnnotations,
    SchemaNode,
    TypeArrayNode,
    UnknownNode,
)

_COMPOSITIONS = (
    ("anyOf", CompositionKind.ANY_OF),
    ("oneOf", CompositionKind.ONE_OF),
    ("allOf", CompositionKind.ALL_OF),
)

# Base types whose enum values become a literal union.
_ENUM_TYPES = frozenset({"string", "number", "integer"})


def parse_schema(raw: Any) -> SchemaNode:
    """Parse one raw schema mapping.

    Args:
        raw: The schema as decoded from the document.  Anything that is not
            a mapping yields :class:`~clientsynth.models.UnknownNode`.

    Returns:
        The schema node.
    """
    if not isinstance(raw, dict):
        return UnknownNode()

    annotations = parse_annotations(raw)

    ref = raw.get("$ref")
    if isinstance(ref, str):
        return ReferenceNode(pointer=ref, annotations=annotations)

    for keyword, operator in _COMPOSITIONS:
        members = raw.get(keyword)
        if isinstance(members, list):
            return CompositionNode(
                operator=operator,
                members=[parse_schema(m) for m in members],
                discriminator=_discriminator(raw.get("discriminator")),
                annotations=annotations,
            )

    type_value = raw.get("type")
    if isinstance(type_value, list):
        enum = raw.get("enum")
        return TypeArrayNode(
            types=[str(t) for t in type_value],
            items=_optional_schema(raw.get("items")),
            enum_values=list(enum) if isinstance(enum, list) and enum else None,
            annotations=annotations,
        )

    if "const" in raw:
        return ConstNode(value=raw["const"], annotations=annotations)

    return _base_shape(raw, type_value, annotations)


def _base_shape(
    raw: dict[str, Any], type_value: Any, annotations: SchemaAnnotations
) -> SchemaNode:
    enum = raw.get("enum")
    # An enum on any other type, or with no type, leaves the base shape alone.
    typed = isinstance(type_value, str) and type_value in _ENUM_TYPES
    if typed and isinstance(enum, list) and enum:
        return EnumNode(base_type=type_value, values=list(enum), annotations=annotations)

    properties = raw.get("properties")
    if type_value == "object" or (type_value is None and isinstance(properties, dict)):
        required = raw.get("required")
        return ObjectNode(
            properties=(
                {str(k): parse_schema(v) for k, v in properties.items()}
                if isinstance(properties, dict)
                else None
            ),
            required=[r for r in required if isinstance(r, str)]
            if isinstance(required, list)
            else [],
            additional=_additional(raw.get("additionalProperties")),
            annotations=annotations,
        )

    if type_value == "array":
        return ArrayNode(items=_optional_schema(raw.get("items")), annotations=annotations)

    if isinstance(type_value, str) and type_value:
        return PrimitiveNode(type=type_value, annotations=annotations)

    return UnknownNode(annotations=annotations)


def parse_annotations(raw: dict[str, Any]) -> SchemaAnnotations:
    """Collect documentation metadata from a raw schema mapping."""
    type_value = raw.get("type")
    if isinstance(type_value, list):
        type_tag: Optional[str] = ",".join(str(t) for t in type_value)
    elif isinstance(type_value, str) and type_value:
        type_tag = type_value
    else:
        type_tag = None

    description = raw.get("description")
    enum = raw.get("enum")
    pattern = raw.get("pattern")
    fmt = raw.get("format")

    return SchemaAnnotations(
        description=description if isinstance(description, str) and description else None,
        type_tag=type_tag,
        has_default="default" in raw,
        default=raw.get("default"),
        has_example="example" in raw,
        example=raw.get("example"),
        enum_values=list(enum) if isinstance(enum, list) and enum else None,
        has_const="const" in raw,
        const=raw.get("const"),
        format=fmt if isinstance(fmt, str) and fmt else None,
        minimum=_number(raw.get("minimum")),
        maximum=_number(raw.get("maximum")),
        min_length=_integer(raw.get("minLength")),
        max_length=_integer(raw.get("maxLength")),
        pattern=str(pattern) if pattern not in (None, "") else None,
        min_items=_integer(raw.get("minItems")),
        max_items=_integer(raw.get("maxItems")),
        nullable=raw.get("nullable") is True,
        read_only=raw.get("readOnly") is True,
        write_only=raw.get("writeOnly") is True,
    )


def _optional_schema(raw: Any) -> Optional[SchemaNode]:
    return parse_schema(raw) if isinstance(raw, dict) else None


def _additional(raw: Any) -> Optional[Union[SchemaNode, bool]]:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, dict):
        return parse_schema(raw)
    return None


def _discriminator(raw: Any) -> Optional[Discriminator]:
    if not isinstance(raw, dict):
        return None
    property_name = raw.get("propertyName")
    mapping = raw.get("mapping")
    return Discriminator(
        property_name=property_name if isinstance(property_name, str) else None,
        mapping=(
            {str(k): str(v) for k, v in mapping.items()}
            if isinstance(mapping, dict)
            else None
        ),
    )


def _number(value: Any) -> Optional[Union[int, float]]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _integer(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value
