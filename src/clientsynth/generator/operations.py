"""Synthesize callable operations and group them into a namespace tree.

For every :class:`~clientsynth.models.RawOperation` of a document the
:class:`OperationSynthesizer`:

1. Derives the method name and namespace segments from the operation id
   (or the ``<verb>_<path>`` fallback) via
   :meth:`~clientsynth.generator.naming.IdentifierNormalizer.to_namespace_path`.
2. Classifies parameters: ``path``, ``query`` and ``header`` parameters
   become :class:`~clientsynth.models.ParameterSpec` entries; path parameters
   are always required.  Cookie and form parameters are skipped.
3. Turns the request body (or a Swagger 2.0 ``in: body`` parameter) into the
   synthetic ``data`` parameter.
4. Picks the response type from the first of ``200``, ``201``, ``204``.
5. Inserts the resulting :class:`~clientsynth.models.OperationSpec` under its
   namespace segments.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from clientsynth.generator.docs import describe_operation
from clientsynth.generator.naming import IdentifierNormalizer
from clientsynth.generator.type_resolver import TypeResolver
from clientsynth.models import (
    ApiDocument,
    NamespaceNode,
    NoContentType,
    OperationSpec,
    ParameterLocation,
    ParameterSpec,
    RawOperation,
    RequestBodySpec,
    TypeExpression,
    UnknownType,
)

logger = logging.getLogger(__name__)

# Success statuses in the order they are considered.
RESPONSE_PRIORITY: tuple[str, ...] = ("200", "201", "204")

_LOCATIONS: dict[str, ParameterLocation] = {
    "path": ParameterLocation.PATH,
    "query": ParameterLocation.QUERY,
    "header": ParameterLocation.HEADER,
}


class _Branch:
    """Mutable namespace node used while the tree is being built."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.children: dict[str, _Branch] = {}
        self.operations: dict[str, OperationSpec] = {}

    def child(self, name: str) -> _Branch:
        if name not in self.children:
            self.children[name] = _Branch(name)
        return self.children[name]

    def freeze(self) -> NamespaceNode:
        return NamespaceNode(
            name=self.name,
            children={name: b.freeze() for name, b in self.children.items()},
            operations=list(self.operations.values()),
        )


class OperationSynthesizer:
    """Builds :class:`~clientsynth.models.OperationSpec` records from a document.

    Args:
        naming: Identifier normalizer shared with *resolver*.
        resolver: Type resolver used for parameter, body and response schemas.
    """

    def __init__(self, naming: IdentifierNormalizer, resolver: TypeResolver) -> None:
        self.naming = naming
        self.resolver = resolver

    def synthesize(
        self,
        document: ApiDocument,
        operation_ids: Optional[Iterable[str]] = None,
    ) -> NamespaceNode:
        """Return the namespace tree of every operation in *document*.

        Args:
            document: The parsed document.
            operation_ids: When given, only operations whose (fallback) id is
                listed are synthesized.

        Returns:
            The frozen namespace root.
        """
        wanted = set(operation_ids) if operation_ids is not None else None
        root = _Branch()

        for raw in document.operations:
            if wanted is not None and raw.effective_id not in wanted:
                continue
            spec = self.build_operation(raw)
            branch = root
            for segment in spec.namespace_path:
                branch = branch.child(segment)
            if spec.method_name in branch.operations:
                previous = branch.operations[spec.method_name]
                logger.warning(
                    "Operation %s %s replaces %s %s as %s",
                    spec.http_method.value.upper(),
                    spec.url_template,
                    previous.http_method.value.upper(),
                    previous.url_template,
                    ".".join([*spec.namespace_path, spec.method_name]),
                )
            branch.operations[spec.method_name] = spec

        return root.freeze()

    def build_operation(self, raw: RawOperation) -> OperationSpec:
        """Build the :class:`~clientsynth.models.OperationSpec` for one operation."""
        operation_id = raw.effective_id
        namespace = self.naming.to_namespace_path(operation_id)

        return OperationSpec(
            http_method=raw.method,
            url_template=raw.path,
            operation_id=operation_id,
            method_name=namespace.method_name,
            namespace_path=list(namespace.segments),
            parameters=self._parameters(raw),
            request_body=self._request_body(raw),
            response_type=self.response_type(raw),
            description=describe_operation(raw),
            tags=list(raw.tags),
            deprecated=raw.deprecated,
        )

    def response_type(self, raw: RawOperation) -> TypeExpression:
        """Resolve the success response type of *raw*.

        The first status of :data:`RESPONSE_PRIORITY` present in the
        responses decides.  A response without content means no content; with
        content it is the resolved schema.  No success response at all yields
        :class:`~clientsynth.models.UnknownType`.
        """
        for status in RESPONSE_PRIORITY:
            response = raw.responses.get(status)
            if response is None:
                continue
            if not response.has_content:
                return NoContentType()
            return self.resolver.resolve(response.schema_)
        return UnknownType()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _parameters(self, raw: RawOperation) -> list[ParameterSpec]:
        params: list[ParameterSpec] = []
        for param in raw.parameters:
            if not param.name.strip():
                logger.debug("Skipping unnamed parameter on %s", raw.effective_id)
                continue
            location = _LOCATIONS.get(param.location)
            if location is None:
                if param.location != "body":
                    logger.debug(
                        "Skipping %s parameter %r on %s",
                        param.location,
                        param.name,
                        raw.effective_id,
                    )
                continue
            params.append(
                ParameterSpec(
                    name=param.name,
                    identifier=self.naming.to_property_identifier(param.name),
                    location=location,
                    required=param.required or location == ParameterLocation.PATH,
                    type=self.resolver.resolve(param.schema_),
                    description=param.description,
                )
            )
        return params

    def _request_body(self, raw: RawOperation) -> Optional[RequestBodySpec]:
        body = raw.request_body
        if body is not None:
            return RequestBodySpec(
                type=self.resolver.resolve(body.schema_),
                required=body.required,
                content_type=body.content_types[0] if body.content_types else None,
            )

        for param in raw.parameters:
            if param.location == "body":
                return RequestBodySpec(
                    type=self.resolver.resolve(param.schema_),
                    required=param.required,
                )
        return None
