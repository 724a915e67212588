"""Resolve schema nodes into type expressions.

This is the core algorithm of clientsynth.  :class:`TypeResolver` maps one
:data:`~clientsynth.models.SchemaNode` to one
:data:`~clientsynth.models.TypeExpression`, applying these rules in order:

1. **Reference** -> :class:`~clientsynth.models.NamedType` of the normalized
   target name.  References are never followed, which is what keeps cyclic
   and self-referential schemas finite.
2. **anyOf** -> union of the resolved members.
3. **oneOf** -> with a discriminator mapping, a union of
   ``Named(target) & {property: "key"}`` intersections, one per mapping entry;
   otherwise a plain union.
4. **allOf** -> intersection of the resolved members.
5. **Type array** (``type: ["string", "null"]``) -> union of one primitive
   per tag, ``"null"`` mapping to the null primitive.
6. **const** -> a literal.
7. **Base shape** -- inline object, string-keyed mapping, array, enum union,
   primitive, or unknown.
8. **nullable: true** on a base shape wraps it in
   :class:`~clientsynth.models.NullableType`.

Anything the rules do not recognise becomes
:class:`~clientsynth.models.UnknownType`; resolution never fails on an odd
schema.
"""

from __future__ import annotations

from typing import Any, Optional

from clientsynth.generator.docs import describe
from clientsynth.generator.naming import IdentifierNormalizer
from clientsynth.models import (
    ArrayNode,
    ArrayType,
    CompositionKind,
    CompositionNode,
    ConstNode,
    EnumNode,
    InlineObjectType,
    IntersectionType,
    LiteralType,
    MappingType,
    NamedType,
    NullableType,
    ObjectField,
    ObjectNode,
    PrimitiveKind,
    PrimitiveNode,
    PrimitiveType,
    ReferenceNode,
    SchemaNode,
    TypeArrayNode,
    TypeExpression,
    UnionType,
    UnknownType,
)

_PRIMITIVES: dict[str, PrimitiveKind] = {
    "string": PrimitiveKind.STRING,
    "number": PrimitiveKind.NUMBER,
    "integer": PrimitiveKind.INTEGER,
    "boolean": PrimitiveKind.BOOLEAN,
    "null": PrimitiveKind.NULL,
}


class TypeResolver:
    """Maps schema nodes to type expressions.

    Args:
        naming: The run's :class:`~clientsynth.generator.naming.IdentifierNormalizer`.
            Reference targets, discriminator targets and property keys are
            normalized through it, so they share its caches.

    Example::

        resolver = TypeResolver(IdentifierNormalizer())
        resolver.resolve(parse_schema({"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}))
        # ArrayType(items=NamedType(name='Pet'))
    """

    def __init__(self, naming: IdentifierNormalizer) -> None:
        self.naming = naming

    def resolve(self, node: Optional[SchemaNode]) -> TypeExpression:
        """Resolve *node* into a type expression.

        Args:
            node: A schema node, or ``None`` for a missing schema.

        Returns:
            The resolved expression.  ``None`` resolves to
            :class:`~clientsynth.models.UnknownType`.
        """
        if node is None:
            return UnknownType()

        if isinstance(node, ReferenceNode):
            return NamedType(name=self.naming.to_type_identifier(node.target))

        if isinstance(node, CompositionNode):
            return self._resolve_composition(node)

        if isinstance(node, TypeArrayNode):
            return UnionType(
                members=[self._resolve_tag(tag, node) for tag in node.types]
            )

        if isinstance(node, ConstNode):
            return LiteralType(value=node.value)

        result = self._resolve_base(node)
        if node.annotations.nullable:
            return NullableType(inner=result)
        return result

    # ------------------------------------------------------------------
    # Compositions
    # ------------------------------------------------------------------

    def _resolve_composition(self, node: CompositionNode) -> TypeExpression:
        if node.operator == CompositionKind.ONE_OF:
            disc = node.discriminator
            if disc is not None and disc.property_name and disc.mapping:
                return self._discriminated_union(disc.property_name, disc.mapping)

        members = [self.resolve(member) for member in node.members]
        if node.operator == CompositionKind.ALL_OF:
            return IntersectionType(members=members)
        return UnionType(members=members)

    def _discriminated_union(
        self, property_name: str, mapping: dict[str, str]
    ) -> UnionType:
        """Build ``(Target & {property: "key"}) | ...`` from a discriminator mapping.

        A mapping value that is a ``#/`` pointer names its last segment; any
        other value falls back to the mapping key itself.
        """
        tag_identifier = self.naming.to_property_identifier(property_name)
        variants: list[TypeExpression] = []
        for key, value in mapping.items():
            if isinstance(value, str) and value.startswith("#/"):
                target = value.rsplit("/", 1)[-1]
            else:
                target = key
            tag = InlineObjectType(
                fields=[
                    ObjectField(
                        name=property_name,
                        identifier=tag_identifier,
                        type=LiteralType(value=key),
                        optional=False,
                    )
                ]
            )
            variants.append(
                IntersectionType(
                    members=[NamedType(name=self.naming.to_type_identifier(target)), tag]
                )
            )
        return UnionType(members=variants)

    # ------------------------------------------------------------------
    # Type arrays and base shapes
    # ------------------------------------------------------------------

    def _resolve_tag(self, tag: str, node: TypeArrayNode) -> TypeExpression:
        """Resolve one tag of a ``type: [...]`` list."""
        if tag == "string" and node.enum_values:
            return _literal_union(node.enum_values)
        if tag == "array":
            return ArrayType(items=self.resolve(node.items))
        if tag == "object":
            return MappingType(values=UnknownType())
        kind = _PRIMITIVES.get(tag)
        if kind is None:
            return UnknownType()
        return PrimitiveType(name=kind)

    def _resolve_base(self, node: SchemaNode) -> TypeExpression:
        if isinstance(node, ObjectNode):
            return self._resolve_object(node)

        if isinstance(node, ArrayNode):
            return ArrayType(items=self.resolve(node.items))

        if isinstance(node, EnumNode):
            return _literal_union(node.values)

        if isinstance(node, PrimitiveNode):
            kind = _PRIMITIVES.get(node.type)
            if kind is not None:
                return PrimitiveType(name=kind)

        return UnknownType()

    def _resolve_object(self, node: ObjectNode) -> TypeExpression:
        if node.properties is not None:
            required = set(node.required)
            fields = [
                ObjectField(
                    name=name,
                    identifier=self.naming.to_property_identifier(name),
                    type=self.resolve(prop),
                    optional=name not in required,
                    description=describe(prop, name),
                )
                for name, prop in node.properties.items()
            ]
            return InlineObjectType(fields=fields)

        additional = node.additional
        if additional is None or isinstance(additional, bool):
            # ``true``, ``false`` and absent all leave the value type open.
            return MappingType(values=UnknownType())
        return MappingType(values=self.resolve(additional))


def _literal_union(values: list[Any]) -> UnionType:
    return UnionType(members=[LiteralType(value=v) for v in values])
