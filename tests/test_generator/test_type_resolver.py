"""Tests for clientsynth.generator.type_resolver."""

from __future__ import annotations

from typing import Any

import pytest

from clientsynth.generator.naming import IdentifierNormalizer
from clientsynth.generator.type_resolver import TypeResolver
from clientsynth.models import (
    ArrayType,
    DescriptionRecord,
    InlineObjectType,
    IntersectionType,
    LiteralType,
    MappingType,
    NamedType,
    NullableType,
    ObjectField,
    PrimitiveKind,
    PrimitiveType,
    UnionType,
    UnknownType,
)
from clientsynth.parser.schema import parse_schema

STRING = PrimitiveType(name=PrimitiveKind.STRING)
INTEGER = PrimitiveType(name=PrimitiveKind.INTEGER)
NULL = PrimitiveType(name=PrimitiveKind.NULL)


def _resolve(raw: Any):
    return TypeResolver(IdentifierNormalizer()).resolve(parse_schema(raw))


def _tag(property_name: str, value: str) -> InlineObjectType:
    return InlineObjectType(
        fields=[
            ObjectField(
                name=property_name,
                identifier=property_name,
                type=LiteralType(value=value),
                optional=False,
            )
        ]
    )


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------


class TestReferences:
    """References become named back-references and are never followed."""

    def test_reference_uses_normalized_target(self) -> None:
        result = _resolve({"$ref": "#/components/schemas/user_profile"})
        assert result == NamedType(name="UserProfile")

    def test_swagger_definition_reference(self) -> None:
        assert _resolve({"$ref": "#/definitions/Pet"}) == NamedType(name="Pet")

    def test_nullable_ignored_on_reference(self) -> None:
        result = _resolve({"$ref": "#/components/schemas/Pet", "nullable": True})
        assert result == NamedType(name="Pet")

    def test_self_referential_schema_is_finite(
        self, petstore_30_raw: dict[str, Any]
    ) -> None:
        category = petstore_30_raw["components"]["schemas"]["Category"]
        result = _resolve(category)

        assert isinstance(result, InlineObjectType)
        subcategories = {f.name: f for f in result.fields}["subcategories"]
        assert subcategories.type == ArrayType(items=NamedType(name="Category"))


# ---------------------------------------------------------------------------
# Compositions
# ---------------------------------------------------------------------------


class TestCompositions:
    """anyOf / oneOf / allOf resolution."""

    def test_any_of_is_union(self) -> None:
        result = _resolve({"anyOf": [{"type": "string"}, {"type": "integer"}]})
        assert result == UnionType(members=[STRING, INTEGER])

    def test_one_of_without_discriminator_is_union(self) -> None:
        result = _resolve(
            {"oneOf": [{"$ref": "#/components/schemas/A"}, {"type": "string"}]}
        )
        assert result == UnionType(members=[NamedType(name="A"), STRING])

    def test_discriminated_union(self) -> None:
        result = _resolve({
            "oneOf": [{"$ref": "#/A"}, {"$ref": "#/B"}],
            "discriminator": {
                "propertyName": "type",
                "mapping": {"a": "#/A", "b": "#/B"},
            },
        })
        assert result == UnionType(
            members=[
                IntersectionType(members=[NamedType(name="A"), _tag("type", "a")]),
                IntersectionType(members=[NamedType(name="B"), _tag("type", "b")]),
            ]
        )

    def test_discriminator_without_mapping_falls_back(self) -> None:
        result = _resolve({
            "oneOf": [{"$ref": "#/A"}, {"$ref": "#/B"}],
            "discriminator": {"propertyName": "type"},
        })
        assert result == UnionType(members=[NamedType(name="A"), NamedType(name="B")])

    def test_mapping_value_without_pointer_uses_key(self) -> None:
        result = _resolve({
            "oneOf": [{"$ref": "#/components/schemas/Dog"}],
            "discriminator": {"propertyName": "petType", "mapping": {"dog": "Dog"}},
        })
        assert result == UnionType(
            members=[IntersectionType(members=[NamedType(name="Dog"), _tag("petType", "dog")])]
        )

    def test_discriminator_on_any_of_is_ignored(self) -> None:
        result = _resolve({
            "anyOf": [{"$ref": "#/A"}],
            "discriminator": {"propertyName": "type", "mapping": {"a": "#/A"}},
        })
        assert result == UnionType(members=[NamedType(name="A")])

    def test_all_of_is_intersection(self) -> None:
        result = _resolve({
            "allOf": [
                {"$ref": "#/components/schemas/Animal"},
                {"type": "object", "properties": {"breed": {"type": "string"}}},
            ]
        })
        assert isinstance(result, IntersectionType)
        assert result.members[0] == NamedType(name="Animal")
        assert isinstance(result.members[1], InlineObjectType)
        assert result.members[1].fields[0].name == "breed"


# ---------------------------------------------------------------------------
# Type arrays, const, nullable
# ---------------------------------------------------------------------------


class TestTypeArrays:
    """OpenAPI 3.1 ``type: [...]`` lists."""

    def test_string_or_null(self) -> None:
        assert _resolve({"type": ["string", "null"]}) == UnionType(members=[STRING, NULL])

    def test_array_tag_resolves_items(self) -> None:
        result = _resolve({"type": ["array", "null"], "items": {"$ref": "#/X"}})
        assert result == UnionType(members=[ArrayType(items=NamedType(name="X")), NULL])

    def test_object_tag_is_open_mapping(self) -> None:
        result = _resolve({"type": ["object", "null"]})
        assert result == UnionType(members=[MappingType(values=UnknownType()), NULL])

    def test_string_tag_with_enum(self) -> None:
        result = _resolve({"type": ["string", "null"], "enum": ["a", "b"]})
        assert result == UnionType(
            members=[
                UnionType(members=[LiteralType(value="a"), LiteralType(value="b")]),
                NULL,
            ]
        )

    def test_unknown_tag(self) -> None:
        assert _resolve({"type": ["file"]}) == UnionType(members=[UnknownType()])

    def test_nullable_flag_does_not_wrap_type_array(self) -> None:
        result = _resolve({"type": ["string", "null"], "nullable": True})
        assert result == UnionType(members=[STRING, NULL])


class TestConstAndNullable:
    """const literals and ``nullable: true`` wrapping."""

    def test_const(self) -> None:
        assert _resolve({"const": "circle"}) == LiteralType(value="circle")

    def test_const_null(self) -> None:
        assert _resolve({"const": None}) == LiteralType(value=None)

    def test_nullable_integer(self) -> None:
        result = _resolve({"type": "integer", "nullable": True})
        assert result == NullableType(inner=INTEGER)

    def test_nullable_object(self) -> None:
        result = _resolve({"type": "object", "properties": {}, "nullable": True})
        assert result == NullableType(inner=InlineObjectType(fields=[]))


# ---------------------------------------------------------------------------
# Base shapes
# ---------------------------------------------------------------------------


class TestBaseShapes:
    """Objects, mappings, arrays, enums, primitives and unknowns."""

    def test_object_fields_and_optionality(self) -> None:
        result = _resolve({
            "type": "object",
            "required": ["id"],
            "properties": {
                "id": {"type": "string"},
                "name": {"type": "string", "description": "Display name"},
            },
        })
        assert result == InlineObjectType(
            fields=[
                ObjectField(
                    name="id",
                    identifier="id",
                    type=STRING,
                    optional=False,
                    description=DescriptionRecord(
                        summary="id property", constraints=["Type: string"]
                    ),
                ),
                ObjectField(
                    name="name",
                    identifier="name",
                    type=STRING,
                    optional=True,
                    description=DescriptionRecord(summary="Display name"),
                ),
            ]
        )

    def test_field_order_follows_document(self) -> None:
        result = _resolve({
            "type": "object",
            "properties": {"z": {}, "a": {}, "m": {}},
        })
        assert [f.name for f in result.fields] == ["z", "a", "m"]

    def test_non_bare_property_is_quoted(self) -> None:
        result = _resolve({"type": "object", "properties": {"created-at": {"type": "string"}}})
        field = result.fields[0]
        assert field.name == "created-at"
        assert field.identifier == "'created-at'"

    def test_properties_without_type(self) -> None:
        result = _resolve({"properties": {"id": {"type": "integer"}}})
        assert isinstance(result, InlineObjectType)
        assert result.fields[0].type == INTEGER

    def test_additional_properties_schema(self) -> None:
        result = _resolve({"type": "object", "additionalProperties": {"type": "integer"}})
        assert result == MappingType(values=INTEGER)

    @pytest.mark.parametrize("additional", [True, False, None])
    def test_open_mapping(self, additional: Any) -> None:
        raw: dict[str, Any] = {"type": "object"}
        if additional is not None:
            raw["additionalProperties"] = additional
        assert _resolve(raw) == MappingType(values=UnknownType())

    def test_array_of_references(self) -> None:
        result = _resolve({"type": "array", "items": {"$ref": "#/components/schemas/Pet"}})
        assert result == ArrayType(items=NamedType(name="Pet"))

    def test_array_without_items(self) -> None:
        assert _resolve({"type": "array"}) == ArrayType(items=UnknownType())

    def test_string_enum(self) -> None:
        result = _resolve({"type": "string", "enum": ["available", "sold"]})
        assert result == UnionType(
            members=[LiteralType(value="available"), LiteralType(value="sold")]
        )

    def test_integer_enum(self) -> None:
        result = _resolve({"type": "integer", "enum": [1, 2]})
        assert result == UnionType(members=[LiteralType(value=1), LiteralType(value=2)])

    def test_enum_without_type_is_unknown(self) -> None:
        assert _resolve({"enum": ["x"]}) == UnknownType()

    def test_enum_on_object_keeps_object(self) -> None:
        result = _resolve({"type": "object", "enum": [{}], "properties": {}})
        assert result == InlineObjectType(fields=[])

    def test_empty_enum_is_plain_primitive(self) -> None:
        assert _resolve({"type": "string", "enum": []}) == STRING

    def test_boolean_enum_is_plain_boolean(self) -> None:
        result = _resolve({"type": "boolean", "enum": [True]})
        assert result == PrimitiveType(name=PrimitiveKind.BOOLEAN)

    @pytest.mark.parametrize(
        "type_name,kind",
        [
            ("string", PrimitiveKind.STRING),
            ("number", PrimitiveKind.NUMBER),
            ("integer", PrimitiveKind.INTEGER),
            ("boolean", PrimitiveKind.BOOLEAN),
            ("null", PrimitiveKind.NULL),
        ],
    )
    def test_primitives(self, type_name: str, kind: PrimitiveKind) -> None:
        assert _resolve({"type": type_name}) == PrimitiveType(name=kind)

    @pytest.mark.parametrize("raw", [{}, {"type": "file"}, {"description": "x"}, "bogus"])
    def test_unrecognised_shape_is_unknown(self, raw: Any) -> None:
        assert _resolve(raw) == UnknownType()

    def test_missing_schema_is_unknown(self) -> None:
        assert TypeResolver(IdentifierNormalizer()).resolve(None) == UnknownType()


class TestSharedNaming:
    """The resolver normalizes through the naming instance it was given."""

    def test_reference_names_land_in_shared_cache(self) -> None:
        naming = IdentifierNormalizer()
        TypeResolver(naming).resolve(parse_schema({"$ref": "#/components/schemas/user_profile"}))
        assert naming._type_cache["user_profile"] == "UserProfile"
