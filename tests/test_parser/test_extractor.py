"""Tests for clientsynth.parser.extractor."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from clientsynth.exceptions import MalformedDocumentError
from clientsynth.models import (
    ApiDocument,
    ArrayNode,
    EnumNode,
    HTTPMethod,
    ObjectNode,
    PrimitiveNode,
    RawOperation,
    ReferenceNode,
    UnknownNode,
)
from clientsynth.parser.extractor import (
    _extract_info,
    _extract_swagger_servers,
    _merge_parameters,
    extract_document,
)


def _find_operation(document: ApiDocument, method: str, path: str) -> Optional[RawOperation]:
    for op in document.operations:
        if op.method.value == method.lower() and op.path == path:
            return op
    return None


# ---------------------------------------------------------------------------
# Full extraction from petstore 3.0
# ---------------------------------------------------------------------------


class TestExtractPetstore30:
    """Test full extraction from the Petstore 3.0 fixture."""

    def test_document_version(self, petstore_document: ApiDocument) -> None:
        assert petstore_document.document_version == "3.0.3"

    def test_info(self, petstore_document: ApiDocument) -> None:
        assert petstore_document.info.title == "Petstore API"
        assert petstore_document.info.version == "1.0.0"
        assert petstore_document.info.description == "A sample pet store."

    def test_servers(self, petstore_document: ApiDocument) -> None:
        (server,) = petstore_document.servers
        assert server.url == "https://petstore.example.com/v1"
        assert server.description == "Production"

    def test_schemas_in_document_order(self, petstore_document: ApiDocument) -> None:
        assert list(petstore_document.schemas) == ["Pet", "NewPet", "Category", "Error"]
        pet = petstore_document.schemas["Pet"]
        assert isinstance(pet, ObjectNode)
        assert isinstance(pet.properties["category"], ReferenceNode)

    def test_operation_order(self, petstore_document: ApiDocument) -> None:
        assert [(op.method.value, op.path) for op in petstore_document.operations] == [
            ("get", "/pets"),
            ("post", "/pets"),
            ("get", "/pets/{petId}"),
            ("delete", "/pets/{petId}"),
            ("get", "/store/inventory"),
            ("get", "/health"),
        ]

    def test_parameter_ref_resolved(self, petstore_document: ApiDocument) -> None:
        op = _find_operation(petstore_document, "GET", "/pets")
        limit = op.parameters[0]
        assert limit.name == "limit"
        assert limit.location == "query"
        assert limit.description == "How many items to return"
        assert isinstance(limit.schema_, PrimitiveNode)
        assert limit.schema_.annotations.maximum == 100

    def test_cookie_parameter_kept_raw(self, petstore_document: ApiDocument) -> None:
        op = _find_operation(petstore_document, "GET", "/pets")
        assert [p.location for p in op.parameters] == ["query", "header", "cookie"]

    def test_path_level_parameters(self, petstore_document: ApiDocument) -> None:
        op = _find_operation(petstore_document, "DELETE", "/pets/{petId}")
        (param,) = op.parameters
        assert param.name == "petId"
        assert param.required is True

    def test_request_body(self, petstore_document: ApiDocument) -> None:
        op = _find_operation(petstore_document, "POST", "/pets")
        body = op.request_body
        assert body is not None
        assert body.required is True
        assert body.content_types == ["application/json"]
        assert body.schema_ == ReferenceNode(pointer="#/components/schemas/NewPet")

    def test_response_ref_resolved(self, petstore_document: ApiDocument) -> None:
        op = _find_operation(petstore_document, "GET", "/pets/{petId}")
        not_found = op.responses["404"]
        assert not_found.description == "Error"
        assert not_found.has_content is True
        assert not_found.schema_ == ReferenceNode(pointer="#/components/schemas/Error")

    def test_response_without_content(self, petstore_document: ApiDocument) -> None:
        op = _find_operation(petstore_document, "DELETE", "/pets/{petId}")
        no_content = op.responses["204"]
        assert no_content.has_content is False
        assert no_content.schema_ is None

    def test_operation_metadata(self, petstore_document: ApiDocument) -> None:
        op = _find_operation(petstore_document, "DELETE", "/pets/{petId}")
        assert op.operation_id == "deletePet"
        assert op.deprecated is True
        assert op.tags == ["pets"]

    def test_missing_operation_id(self, petstore_document: ApiDocument) -> None:
        op = _find_operation(petstore_document, "GET", "/health")
        assert op.operation_id is None
        assert op.effective_id == "get_/health"


# ---------------------------------------------------------------------------
# Swagger 2.0
# ---------------------------------------------------------------------------


class TestExtractSwagger20:
    """Test extraction from the Swagger 2.0 fixture."""

    def test_servers_from_host(self, swagger_document: ApiDocument) -> None:
        assert [s.url for s in swagger_document.servers] == [
            "https://api.example.com/v1",
            "http://api.example.com/v1",
        ]

    def test_definitions(self, swagger_document: ApiDocument) -> None:
        assert list(swagger_document.schemas) == ["User", "Order"]
        owner = swagger_document.schemas["Order"].properties["owner"]
        assert owner == ReferenceNode(pointer="#/definitions/User")

    def test_body_parameter_becomes_request_body(
        self, swagger_document: ApiDocument
    ) -> None:
        op = _find_operation(swagger_document, "POST", "/users")
        assert op.parameters == []
        body = op.request_body
        assert body is not None
        assert body.required is True
        assert body.content_types == ["application/json"]
        assert body.schema_ == ReferenceNode(pointer="#/definitions/User")

    def test_inline_parameter_schemas(self, swagger_document: ApiDocument) -> None:
        op = _find_operation(swagger_document, "GET", "/orders")
        params = {p.name: p for p in op.parameters}

        assert isinstance(params["status"].schema_, EnumNode)
        assert params["status"].schema_.values == ["open", "closed"]
        assert params["page"].schema_.annotations.minimum == 1
        assert params["note"].location == "formData"
        assert params["trace"].schema_ == PrimitiveNode(
            type="string", annotations=params["trace"].schema_.annotations
        )

    def test_responses(self, swagger_document: ApiDocument) -> None:
        op = _find_operation(swagger_document, "GET", "/users/{id}")
        ok = op.responses["200"]
        assert ok.has_content is True
        assert ok.content_types == ["application/json"]
        assert ok.schema_ == ReferenceNode(pointer="#/definitions/User")
        assert op.responses["404"].has_content is False

    def test_array_response(self, swagger_document: ApiDocument) -> None:
        op = _find_operation(swagger_document, "GET", "/orders")
        assert isinstance(op.responses["200"].schema_, ArrayNode)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    """Test the extraction helpers directly."""

    def test_info_defaults(self) -> None:
        info = _extract_info({})
        assert info.title == "Untitled API"
        assert info.version == "0.0.0"
        assert info.description is None

    def test_swagger_servers_default_scheme(self) -> None:
        servers = _extract_swagger_servers({"host": "api.example.com"})
        assert [s.url for s in servers] == ["https://api.example.com"]

    def test_swagger_servers_base_path_only(self) -> None:
        servers = _extract_swagger_servers({"basePath": "/api"})
        assert [s.url for s in servers] == ["/api"]

    def test_swagger_servers_none(self) -> None:
        assert _extract_swagger_servers({}) == []

    def test_merge_parameters_operation_overrides(self) -> None:
        path_params = [
            {"name": "id", "in": "path", "description": "path level"},
            {"name": "verbose", "in": "query"},
        ]
        op_params = [{"name": "id", "in": "path", "description": "op level"}]
        merged = _merge_parameters(path_params, op_params)
        assert [p["name"] for p in merged] == ["verbose", "id"]
        assert merged[1]["description"] == "op level"

    def test_merge_parameters_same_name_other_location(self) -> None:
        merged = _merge_parameters(
            [{"name": "id", "in": "query"}], [{"name": "id", "in": "header"}]
        )
        assert len(merged) == 2


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------


def _minimal(**extra: Any) -> dict[str, Any]:
    doc: dict[str, Any] = {"openapi": "3.1.0", "info": {"title": "T", "version": "1"}}
    doc.update(extra)
    return doc


class TestEdgeCases:
    """Odd but tolerated documents."""

    def test_no_paths(self) -> None:
        assert extract_document(_minimal(), "3.1.0").operations == []

    def test_null_paths(self) -> None:
        assert extract_document(_minimal(paths=None), "3.1.0").operations == []

    def test_paths_not_mapping_raises(self) -> None:
        with pytest.raises(MalformedDocumentError, match="'paths' must be a mapping"):
            extract_document(_minimal(paths=["/a"]), "3.1.0")

    def test_non_operation_keys_ignored(self) -> None:
        raw = _minimal(paths={"/a": {"summary": "x", "servers": [], "get": {"responses": {}}}})
        (op,) = extract_document(raw, "3.1.0").operations
        assert op.method == HTTPMethod.GET

    def test_unresolvable_parameter_ref_raises(self) -> None:
        raw = _minimal(
            paths={"/a": {"get": {"parameters": [{"$ref": "#/components/parameters/Nope"}]}}}
        )
        with pytest.raises(MalformedDocumentError, match="Nope"):
            extract_document(raw, "3.1.0")

    def test_request_body_without_schema(self) -> None:
        raw = _minimal(
            paths={
                "/a": {
                    "post": {
                        "requestBody": {"content": {"application/octet-stream": {}}},
                        "responses": {},
                    }
                }
            }
        )
        (op,) = extract_document(raw, "3.1.0").operations
        assert op.request_body.content_types == ["application/octet-stream"]
        assert op.request_body.schema_ is None

    def test_swagger_body_without_schema(self) -> None:
        raw = {
            "swagger": "2.0",
            "info": {"title": "T", "version": "1"},
            "paths": {"/a": {"post": {"parameters": [{"name": "b", "in": "body"}]}}},
        }
        (op,) = extract_document(raw, "2.0").operations
        assert isinstance(op.request_body.schema_, UnknownNode)

    def test_schemas_missing(self) -> None:
        assert extract_document(_minimal(components={}), "3.1.0").schemas == {}
