"""Extract schemas and operations from a raw API document.

This module walks a decoded OpenAPI 3.x or Swagger 2.0 mapping and builds an
:class:`~clientsynth.models.ApiDocument`:

* ``_extract_info`` -- the ``info`` object.
* ``_extract_servers`` -- ``servers``, or for Swagger 2.0 the URLs built from
  ``schemes``, ``host`` and ``basePath``.
* ``_extract_schemas`` -- ``components.schemas`` (or ``definitions``), in
  document order.
* ``_extract_operations`` -- every path + HTTP method combination.

Parameter, request-body and response ``$ref``\\ s are followed with
:func:`~clientsynth.parser.resolver.dereference`.  Schemas are handed to
:func:`~clientsynth.parser.schema.parse_schema` untouched, so their
references stay references.

Path-level parameters provide defaults; operation-level parameters override
them when they share the same ``name`` and ``in`` values.
"""

from __future__ import annotations

from typing import Any, Optional

from clientsynth.exceptions import MalformedDocumentError
from clientsynth.models import (
    ApiDocument,
    ApiInfo,
    HTTPMethod,
    RawOperation,
    RawParameter,
    RawRequestBody,
    RawResponse,
    SchemaNode,
    ServerInfo,
)
from clientsynth.parser.resolver import dereference
from clientsynth.parser.schema import parse_schema

# Swagger 2.0 keywords that describe a non-body parameter's value inline.
_INLINE_SCHEMA_KEYS = (
    "type",
    "format",
    "items",
    "enum",
    "default",
    "minimum",
    "maximum",
    "minLength",
    "maxLength",
    "pattern",
    "minItems",
    "maxItems",
)


def extract_document(raw: dict[str, Any], version: str) -> ApiDocument:
    """Build an :class:`~clientsynth.models.ApiDocument` from a raw mapping.

    Args:
        raw: The decoded document, as returned by
            :func:`~clientsynth.parser.loader.load_document`.
        version: The version string from
            :func:`~clientsynth.parser.loader.validate_document_version`.

    Returns:
        The parsed document.

    Raises:
        MalformedDocumentError: If a non-schema ``$ref`` cannot be resolved,
            or ``paths`` is not a mapping.

    Example::

        raw = load_document("petstore.yaml")
        document = extract_document(raw, validate_document_version(raw))
        for op in document.operations:
            print(f"{op.method.value.upper()} {op.path}")
    """
    swagger = version.startswith("2.")
    return ApiDocument(
        document_version=version,
        info=_extract_info(raw),
        servers=_extract_swagger_servers(raw) if swagger else _extract_servers(raw),
        schemas=_extract_schemas(raw, swagger),
        operations=_extract_operations(raw, swagger),
    )


def _extract_info(raw: dict[str, Any]) -> ApiInfo:
    info = raw.get("info")
    if not isinstance(info, dict):
        info = {}
    description = info.get("description")
    return ApiInfo(
        title=str(info.get("title") or "Untitled API"),
        version=str(info.get("version") or "0.0.0"),
        description=description if isinstance(description, str) else None,
    )


def _extract_servers(raw: dict[str, Any]) -> list[ServerInfo]:
    servers = raw.get("servers")
    if not isinstance(servers, list):
        return []
    return [
        ServerInfo(url=str(server.get("url", "/")), description=server.get("description"))
        for server in servers
        if isinstance(server, dict)
    ]


def _extract_swagger_servers(raw: dict[str, Any]) -> list[ServerInfo]:
    """Build server URLs from Swagger 2.0 ``schemes``, ``host`` and ``basePath``."""
    host = raw.get("host")
    base_path = str(raw.get("basePath") or "")
    if not host:
        return [ServerInfo(url=base_path)] if base_path else []

    schemes = raw.get("schemes")
    if not isinstance(schemes, list) or not schemes:
        schemes = ["https"]
    return [ServerInfo(url=f"{scheme}://{host}{base_path}") for scheme in schemes]


def _extract_schemas(raw: dict[str, Any], swagger: bool) -> dict[str, SchemaNode]:
    if swagger:
        schemas = raw.get("definitions")
    else:
        components = raw.get("components")
        schemas = components.get("schemas") if isinstance(components, dict) else None
    if not isinstance(schemas, dict):
        return {}
    return {str(name): parse_schema(schema) for name, schema in schemas.items()}


def _extract_operations(raw: dict[str, Any], swagger: bool) -> list[RawOperation]:
    """Extract one :class:`~clientsynth.models.RawOperation` per path and verb.

    Verbs are visited in :class:`~clientsynth.models.HTTPMethod` order so the
    result is deterministic.
    """
    paths = raw.get("paths", {})
    if paths is None:
        return []
    if not isinstance(paths, dict):
        raise MalformedDocumentError("'paths' must be a mapping")

    consumes = _string_list(raw.get("consumes"))
    produces = _string_list(raw.get("produces"))
    operations: list[RawOperation] = []

    for path, path_item in paths.items():
        path_item = dereference(path_item, raw)
        if not isinstance(path_item, dict):
            continue

        path_params = _dereference_list(path_item.get("parameters"), raw)

        for method in HTTPMethod:
            operation = path_item.get(method.value)
            if not isinstance(operation, dict):
                continue

            op_params = _dereference_list(operation.get("parameters"), raw)
            parameters = [
                _extract_parameter(p)
                for p in _merge_parameters(path_params, op_params)
            ]

            if swagger:
                parameters, request_body = _split_body_parameter(
                    parameters, _string_list(operation.get("consumes")) or consumes
                )
                responses = _extract_swagger_responses(
                    operation.get("responses"),
                    raw,
                    _string_list(operation.get("produces")) or produces,
                )
            else:
                request_body = _extract_request_body(operation.get("requestBody"), raw)
                responses = _extract_responses(operation.get("responses"), raw)

            operation_id = operation.get("operationId")
            summary = operation.get("summary")
            description = operation.get("description")
            tags = operation.get("tags")
            operations.append(
                RawOperation(
                    path=str(path),
                    method=method,
                    operation_id=str(operation_id) if operation_id else None,
                    summary=summary if isinstance(summary, str) else None,
                    description=description if isinstance(description, str) else None,
                    tags=[str(t) for t in tags] if isinstance(tags, list) else [],
                    deprecated=operation.get("deprecated") is True,
                    parameters=parameters,
                    request_body=request_body,
                    responses=responses,
                )
            )

    return operations


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    ``name`` and ``in``.
    """
    overridden = {(p.get("name", ""), p.get("in", "")) for p in op_params}
    merged = [
        p for p in path_params if (p.get("name", ""), p.get("in", "")) not in overridden
    ]
    merged.extend(op_params)
    return merged


def _extract_parameter(param: dict[str, Any]) -> RawParameter:
    """Convert one parameter mapping.

    A parameter without ``schema`` gets one built from its inline Swagger
    2.0 keywords, and a plain ``{"type": "string"}`` when it has none.
    """
    location = str(param.get("in", "query"))
    schema = param.get("schema")

    if not isinstance(schema, dict) and location != "body":
        schema = _inline_parameter_schema(param) or {"type": "string"}

    description = param.get("description")
    return RawParameter(
        name=str(param.get("name", "")),
        location=location,
        required=param.get("required") is True,
        description=description if isinstance(description, str) else None,
        schema=parse_schema(schema),
    )


def _inline_parameter_schema(param: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Build a schema from a Swagger 2.0 parameter's inline keywords."""
    schema = {key: param[key] for key in _INLINE_SCHEMA_KEYS if key in param}
    return schema if "type" in schema else None


def _split_body_parameter(
    parameters: list[RawParameter], consumes: list[str]
) -> tuple[list[RawParameter], Optional[RawRequestBody]]:
    """Move a Swagger 2.0 ``in: body`` parameter into a request body.

    Only the first body parameter counts; Swagger allows no more than one.
    """
    kept: list[RawParameter] = []
    body: Optional[RawRequestBody] = None
    for param in parameters:
        if param.location != "body":
            kept.append(param)
        elif body is None:
            body = RawRequestBody(
                required=param.required,
                description=param.description,
                content_types=list(consumes),
                schema=param.schema_,
            )
    return kept, body


def _extract_request_body(body: Any, root: dict[str, Any]) -> Optional[RawRequestBody]:
    body = dereference(body, root)
    if not isinstance(body, dict):
        return None

    content = body.get("content")
    content = content if isinstance(content, dict) else {}
    description = body.get("description")
    return RawRequestBody(
        required=body.get("required") is True,
        description=description if isinstance(description, str) else None,
        content_types=[str(ct) for ct in content],
        schema=_first_schema(content),
    )


def _extract_responses(responses: Any, root: dict[str, Any]) -> dict[str, RawResponse]:
    if not isinstance(responses, dict):
        return {}

    result: dict[str, RawResponse] = {}
    for status_code, response in responses.items():
        response = dereference(response, root)
        if not isinstance(response, dict):
            continue

        content = response.get("content")
        has_content = isinstance(content, dict)
        content = content if has_content else {}
        description = response.get("description")
        result[str(status_code)] = RawResponse(
            status_code=str(status_code),
            description=description if isinstance(description, str) else None,
            content_types=[str(ct) for ct in content],
            has_content=has_content,
            schema=_first_schema(content),
        )
    return result


def _extract_swagger_responses(
    responses: Any, root: dict[str, Any], produces: list[str]
) -> dict[str, RawResponse]:
    if not isinstance(responses, dict):
        return {}

    result: dict[str, RawResponse] = {}
    for status_code, response in responses.items():
        response = dereference(response, root)
        if not isinstance(response, dict):
            continue

        schema = response.get("schema")
        has_content = isinstance(schema, dict)
        description = response.get("description")
        result[str(status_code)] = RawResponse(
            status_code=str(status_code),
            description=description if isinstance(description, str) else None,
            content_types=list(produces) if has_content else [],
            has_content=has_content,
            schema=parse_schema(schema) if has_content else None,
        )
    return result


def _first_schema(content: dict[str, Any]) -> Optional[SchemaNode]:
    # Only the first declared media type counts, schema or not.
    media = next(iter(content.values()), None)
    if isinstance(media, dict) and isinstance(media.get("schema"), dict):
        return parse_schema(media["schema"])
    return None


def _dereference_list(values: Any, root: dict[str, Any]) -> list[dict[str, Any]]:
    if not isinstance(values, list):
        return []
    resolved = (dereference(v, root) for v in values)
    return [v for v in resolved if isinstance(v, dict)]


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]
