"""Top-level driver: turn a parsed document into the intermediate model.

Usage::

    from clientsynth.generator import assemble
    from clientsynth.parser import extract_document, load_document, validate_document_version

    raw = load_document("openapi.yaml")
    document = extract_document(raw, validate_document_version(raw))
    model = assemble(document)

The model is plain, frozen Pydantic data; ``model.model_dump(mode="json")``
is what a renderer consumes.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from clientsynth.generator.docs import describe
from clientsynth.generator.naming import IdentifierNormalizer
from clientsynth.generator.operations import OperationSynthesizer
from clientsynth.generator.type_resolver import TypeResolver
from clientsynth.models import (
    ApiDocument,
    ArrayType,
    CompositionKind,
    CompositionNode,
    InlineObjectType,
    IntersectionType,
    MappingType,
    Model,
    NamedType,
    NamespaceNode,
    NullableType,
    ReferenceNode,
    SchemaNode,
    TypeDeclaration,
    TypeExpression,
    UnionType,
)

logger = logging.getLogger(__name__)


class ModelAssembler:
    """Builds a :class:`~clientsynth.models.Model` from an :class:`~clientsynth.models.ApiDocument`.

    Args:
        naming: Normalizer to use.  A fresh one is created when omitted, so
            each assembler run starts with empty caches.
    """

    def __init__(self, naming: Optional[IdentifierNormalizer] = None) -> None:
        self.naming = naming if naming is not None else IdentifierNormalizer()
        self.resolver = TypeResolver(self.naming)
        self.operations = OperationSynthesizer(self.naming, self.resolver)

    def assemble(
        self,
        document: ApiDocument,
        operation_ids: Optional[Iterable[str]] = None,
    ) -> Model:
        """Resolve every named schema and operation of *document*.

        Args:
            document: The parsed document.
            operation_ids: Optional allowlist of operation ids.  When given,
                only those operations are synthesized and declarations are
                limited to the types they reach.

        Returns:
            The complete, frozen model.
        """
        declarations = self.declarations(document)
        root = self.operations.synthesize(document, operation_ids)

        if operation_ids is not None:
            declarations = _reachable(declarations, root)

        _log_dangling(declarations, root)
        logger.debug(
            "Assembled %d declarations and %d operations",
            len(declarations),
            sum(1 for _ in root.walk()),
        )
        return Model(
            info=document.info,
            type_declarations=declarations,
            namespace_root=root,
        )

    def declarations(self, document: ApiDocument) -> list[TypeDeclaration]:
        """Return one declaration per named schema, in document order.

        When two schema names normalize to the same identifier, the later
        declaration takes the earlier one's place.
        """
        by_identifier: dict[str, TypeDeclaration] = {}
        for name, node in document.schemas.items():
            decl = self.declare(name, node)
            previous = by_identifier.get(decl.identifier)
            if previous is not None:
                logger.warning(
                    "Schema %r replaces %r (both named %s)",
                    name,
                    previous.name,
                    decl.identifier,
                )
            by_identifier[decl.identifier] = decl
        return list(by_identifier.values())

    def declare(self, name: str, node: SchemaNode) -> TypeDeclaration:
        """Build the declaration of one named schema."""
        return TypeDeclaration(
            name=name,
            identifier=self.naming.to_type_identifier(name),
            type=self.resolver.resolve(node),
            description=describe(node),
            extends=self._extends(node),
        )

    def _extends(self, node: SchemaNode) -> list[str]:
        if not isinstance(node, CompositionNode) or node.operator != CompositionKind.ALL_OF:
            return []
        if not node.members or not all(isinstance(m, ReferenceNode) for m in node.members):
            return []
        return [self.naming.to_type_identifier(m.target) for m in node.members]


def assemble(
    document: ApiDocument,
    operation_ids: Optional[Iterable[str]] = None,
    naming: Optional[IdentifierNormalizer] = None,
) -> Model:
    """Assemble *document* with a fresh :class:`ModelAssembler`."""
    return ModelAssembler(naming).assemble(document, operation_ids)


# ---------------------------------------------------------------------------
# Reference walking
# ---------------------------------------------------------------------------


def named_types(expr: TypeExpression) -> Iterator[str]:
    """Yield the name of every :class:`~clientsynth.models.NamedType` inside *expr*."""
    if isinstance(expr, NamedType):
        yield expr.name
    elif isinstance(expr, ArrayType):
        yield from named_types(expr.items)
    elif isinstance(expr, MappingType):
        yield from named_types(expr.values)
    elif isinstance(expr, NullableType):
        yield from named_types(expr.inner)
    elif isinstance(expr, (UnionType, IntersectionType)):
        for member in expr.members:
            yield from named_types(member)
    elif isinstance(expr, InlineObjectType):
        for field in expr.fields:
            yield from named_types(field.type)


def _operation_references(root: NamespaceNode) -> Iterator[str]:
    for op in root.walk():
        for param in op.parameters:
            yield from named_types(param.type)
        if op.request_body is not None:
            yield from named_types(op.request_body.type)
        yield from named_types(op.response_type)


def _reachable(
    declarations: list[TypeDeclaration], root: NamespaceNode
) -> list[TypeDeclaration]:
    """Keep only the declarations reachable from the operations in *root*."""
    by_identifier = {d.identifier: d for d in declarations}
    seen: set[str] = set()
    pending = list(_operation_references(root))
    while pending:
        name = pending.pop()
        if name in seen:
            continue
        seen.add(name)
        decl = by_identifier.get(name)
        if decl is not None:
            pending.extend(named_types(decl.type))
            pending.extend(decl.extends)
    return [d for d in declarations if d.identifier in seen]


def _log_dangling(declarations: list[TypeDeclaration], root: NamespaceNode) -> None:
    declared = {d.identifier for d in declarations}
    referenced: set[str] = set(_operation_references(root))
    for decl in declarations:
        referenced.update(named_types(decl.type))
    for name in sorted(referenced - declared):
        logger.debug("Reference to undeclared type %s", name)
