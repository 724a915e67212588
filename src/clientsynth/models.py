"""Canonical Pydantic models shared across all clientsynth modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into four groups:

**Configuration models** -- serialised as ``clientsynth.json`` in a project:
    :class:`ApiConfig` and :class:`ProjectConfig`.

**Document models** -- produced by the parser from a raw OpenAPI/Swagger
mapping: :class:`ApiInfo`, :class:`ServerInfo`, :class:`RawParameter`,
:class:`RawRequestBody`, :class:`RawResponse`, :class:`RawOperation` and
:class:`ApiDocument`.

**Schema nodes** -- the typed rendition of a JSON Schema object. Each node is
one variant of the :data:`SchemaNode` tagged union (discriminated on
``kind``) and carries its metadata in a :class:`SchemaAnnotations` record.

**Intermediate model** -- the output of the resolution core and the contract
with renderers: :data:`TypeExpression` variants, :class:`TypeDeclaration`,
:class:`ParameterSpec`, :class:`RequestBodySpec`, :class:`OperationSpec`,
:class:`NamespaceNode` and :class:`Model`. These are frozen once built.

Cyclic schema graphs never produce cyclic model objects: schema references
stay :class:`ReferenceNode` instances and resolve to :class:`NamedType`
back-references.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class ApiConfig(BaseModel):
    """One API entry in a :class:`ProjectConfig`.

    Example::

        ApiConfig(
            name="Petstore",
            spec="https://petstore3.swagger.io/api/v3/openapi.json",
            output="./generated/petstore",
            headers={"Authorization": "Bearer ${PETSTORE_TOKEN}"},
        )
    """

    name: str
    spec: str = Field(description="URL, file path, or '-' for the API document")
    output: str = Field(
        default="./generated", description="Directory that receives model.json"
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers sent when fetching a URL; values support ${VAR:default}",
    )
    operation_ids: list[str] = Field(
        default_factory=list,
        description="Only synthesize these operations (empty means all)",
    )
    timeout: float = Field(default=30.0, description="Fetch timeout in seconds")


class ProjectConfig(BaseModel):
    """Project-local configuration persisted as ``clientsynth.json``.

    Loaded and saved by :func:`~clientsynth.config.load_project_config` and
    :func:`~clientsynth.config.save_project_config`.
    """

    apis: list[ApiConfig] = Field(default_factory=list)


# --- Document ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised on OpenAPI/Swagger path-item objects."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class ApiInfo(BaseModel):
    """API metadata extracted from the document's *Info Object*."""

    title: str
    version: str
    description: Optional[str] = None


class ServerInfo(BaseModel):
    """A server entry (OpenAPI ``servers`` or Swagger ``host``/``basePath``)."""

    url: str
    description: Optional[str] = None


# --- Schema nodes ---


class CompositionKind(str, enum.Enum):
    """Composition keywords of JSON Schema."""

    ANY_OF = "anyOf"
    ONE_OF = "oneOf"
    ALL_OF = "allOf"


class SchemaAnnotations(BaseModel):
    """Metadata that may be attached to any schema node.

    ``default`` and ``example`` can legitimately be ``null`` in a document,
    so their presence is tracked by ``has_default`` / ``has_example``.
    ``type_tag`` is the raw ``type`` keyword as written (type arrays joined
    with commas), kept for documentation only.
    ``enum_values`` and ``const`` are recorded whatever shape the node takes,
    so the documentation can list them even where the type ignores them.
    """

    model_config = ConfigDict(frozen=True)

    description: Optional[str] = None
    type_tag: Optional[str] = None
    has_default: bool = False
    default: Any = None
    has_example: bool = False
    example: Any = None
    enum_values: Optional[list[Any]] = None
    has_const: bool = False
    const: Any = None
    format: Optional[str] = None
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    nullable: bool = False
    read_only: bool = False
    write_only: bool = False


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    annotations: SchemaAnnotations = Field(default_factory=SchemaAnnotations)


class ReferenceNode(_Node):
    """A ``$ref`` to another schema. Never expanded in place."""

    kind: Literal["reference"] = "reference"
    pointer: str

    @property
    def target(self) -> str:
        """Last segment of the pointer (``#/components/schemas/Pet`` -> ``Pet``)."""
        return self.pointer.rsplit("/", 1)[-1]


class PrimitiveNode(_Node):
    kind: Literal["primitive"] = "primitive"
    type: str


class EnumNode(_Node):
    kind: Literal["enum"] = "enum"
    base_type: str
    values: list[Any]


class ConstNode(_Node):
    kind: Literal["const"] = "const"
    value: Any = None


class ArrayNode(_Node):
    kind: Literal["array"] = "array"
    items: Optional[SchemaNode] = None


class ObjectNode(_Node):
    """An object shape.

    ``properties`` is ``None`` when the keyword is absent, and an (ordered)
    mapping -- possibly empty -- when it is present.
    """

    kind: Literal["object"] = "object"
    properties: Optional[dict[str, SchemaNode]] = None
    required: list[str] = Field(default_factory=list)
    additional: Optional[Union[SchemaNode, bool]] = None


class Discriminator(BaseModel):
    model_config = ConfigDict(frozen=True)

    property_name: Optional[str] = None
    mapping: Optional[dict[str, str]] = None


class CompositionNode(_Node):
    kind: Literal["composition"] = "composition"
    operator: CompositionKind
    members: list[SchemaNode] = Field(default_factory=list)
    discriminator: Optional[Discriminator] = None


class TypeArrayNode(_Node):
    """A node whose ``type`` keyword is a list (OpenAPI 3.1 style)."""

    kind: Literal["type_array"] = "type_array"
    types: list[str]
    items: Optional[SchemaNode] = None
    enum_values: Optional[list[Any]] = None


class UnknownNode(_Node):
    kind: Literal["unknown"] = "unknown"


SchemaNode = Annotated[
    Union[
        ReferenceNode,
        PrimitiveNode,
        EnumNode,
        ConstNode,
        ArrayNode,
        ObjectNode,
        CompositionNode,
        TypeArrayNode,
        UnknownNode,
    ],
    Field(discriminator="kind"),
]
"""Tagged union of every schema node variant."""


# --- Raw operations ---


class RawParameter(BaseModel):
    """A parameter as declared in the document, ``$ref``-resolved.

    ``location`` keeps the raw ``in`` value (``path``, ``query``, ``header``,
    ``cookie``, ``body``, ``formData``); classification happens in the
    operation synthesizer.
    """

    name: str
    location: str
    required: bool = False
    description: Optional[str] = None
    schema_: SchemaNode = Field(default_factory=UnknownNode, alias="schema")

    model_config = {"populate_by_name": True}


class RawRequestBody(BaseModel):
    """Request body of an operation; ``schema`` comes from the first content entry."""

    required: bool = False
    description: Optional[str] = None
    content_types: list[str] = Field(default_factory=list)
    schema_: Optional[SchemaNode] = Field(default=None, alias="schema")

    model_config = {"populate_by_name": True}


class RawResponse(BaseModel):
    """Response for one status code.

    ``has_content`` is ``True`` when the response declares a body (an OpenAPI
    3 ``content`` map, or a Swagger 2.0 ``schema``), even when no schema can
    be found in it.
    """

    status_code: str
    description: Optional[str] = None
    content_types: list[str] = Field(default_factory=list)
    has_content: bool = False
    schema_: Optional[SchemaNode] = Field(default=None, alias="schema")

    model_config = {"populate_by_name": True}


class RawOperation(BaseModel):
    """One path + HTTP method pair, with path-level parameters merged in."""

    path: str
    method: HTTPMethod
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    deprecated: bool = False
    parameters: list[RawParameter] = Field(default_factory=list)
    request_body: Optional[RawRequestBody] = None
    responses: dict[str, RawResponse] = Field(default_factory=dict)

    @property
    def effective_id(self) -> str:
        """The operation id, or the ``<verb>_<path>`` fallback."""
        return self.operation_id or f"{self.method.value}_{self.path}"


class ApiDocument(BaseModel):
    """A parsed API document, ready for the resolution core.

    Produced by :func:`~clientsynth.parser.extractor.extract_document`.
    ``schemas`` preserves the declaration order of the source document.
    """

    document_version: str = Field(
        description="Original version string (e.g. '2.0', '3.0.3', '3.1.0')"
    )
    info: ApiInfo
    servers: list[ServerInfo] = Field(default_factory=list)
    schemas: dict[str, SchemaNode] = Field(default_factory=dict)
    operations: list[RawOperation] = Field(default_factory=list)


# --- Intermediate model ---


class PrimitiveKind(str, enum.Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    NULL = "null"


class ParameterLocation(str, enum.Enum):
    """Parameter locations that reach the synthesized client surface."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"


class _Expr(BaseModel):
    model_config = ConfigDict(frozen=True)


class NamedType(_Expr):
    """Back-reference to a declared type (possibly dangling)."""

    kind: Literal["named"] = "named"
    name: str


class PrimitiveType(_Expr):
    kind: Literal["primitive"] = "primitive"
    name: PrimitiveKind


class LiteralType(_Expr):
    kind: Literal["literal"] = "literal"
    value: Any


class ArrayType(_Expr):
    kind: Literal["array"] = "array"
    items: TypeExpression


class MappingType(_Expr):
    """A dictionary keyed by string."""

    kind: Literal["mapping"] = "mapping"
    values: TypeExpression


class UnionType(_Expr):
    kind: Literal["union"] = "union"
    members: list[TypeExpression]


class IntersectionType(_Expr):
    kind: Literal["intersection"] = "intersection"
    members: list[TypeExpression]


class NullableType(_Expr):
    kind: Literal["nullable"] = "nullable"
    inner: TypeExpression


class UnknownType(_Expr):
    kind: Literal["unknown"] = "unknown"


class NoContentType(_Expr):
    """Marker for a success response without a body."""

    kind: Literal["no_content"] = "no_content"


class DescriptionRecord(BaseModel):
    """Documentation for a type, field or operation.

    ``constraints`` are ``"Label: value"`` strings in a fixed order; see
    :func:`~clientsynth.generator.docs.describe`.
    """

    model_config = ConfigDict(frozen=True)

    summary: Optional[str] = None
    constraints: list[str] = Field(default_factory=list)


class ObjectField(_Expr):
    """One field of an :class:`InlineObjectType`.

    ``name`` is the key as written in the document; ``identifier`` is the
    accessor produced by
    :meth:`~clientsynth.generator.naming.IdentifierNormalizer.to_property_identifier`.
    """

    name: str
    identifier: str
    type: TypeExpression
    optional: bool = False
    description: Optional[DescriptionRecord] = None


class InlineObjectType(_Expr):
    kind: Literal["object"] = "object"
    fields: list[ObjectField] = Field(default_factory=list)


TypeExpression = Annotated[
    Union[
        NamedType,
        PrimitiveType,
        LiteralType,
        ArrayType,
        MappingType,
        InlineObjectType,
        UnionType,
        IntersectionType,
        NullableType,
        UnknownType,
        NoContentType,
    ],
    Field(discriminator="kind"),
]
"""Tagged union of every resolved type expression."""


class TypeDeclaration(_Expr):
    """A named type produced from one top-level schema."""

    name: str = Field(description="Schema key as written in the document")
    identifier: str
    type: TypeExpression
    description: Optional[DescriptionRecord] = None
    extends: list[str] = Field(default_factory=list)


class ParameterSpec(_Expr):
    name: str
    identifier: str
    location: ParameterLocation
    required: bool = False
    type: TypeExpression
    description: Optional[str] = None


class RequestBodySpec(_Expr):
    """The synthetic ``data`` parameter carrying the request body."""

    name: str = "data"
    type: TypeExpression
    required: bool = False
    content_type: Optional[str] = None


class OperationSpec(_Expr):
    """One callable operation of the synthesized client."""

    http_method: HTTPMethod
    url_template: str
    operation_id: str
    method_name: str
    namespace_path: list[str] = Field(default_factory=list)
    parameters: list[ParameterSpec] = Field(default_factory=list)
    request_body: Optional[RequestBodySpec] = None
    response_type: TypeExpression
    description: Optional[DescriptionRecord] = None
    tags: list[str] = Field(default_factory=list)
    deprecated: bool = False


class NamespaceNode(_Expr):
    """A node of the operation namespace tree. The root has an empty name."""

    name: str = ""
    children: dict[str, NamespaceNode] = Field(default_factory=dict)
    operations: list[OperationSpec] = Field(default_factory=list)

    def walk(self):
        """Yield every operation in the subtree, own operations first."""
        yield from self.operations
        for child in self.children.values():
            yield from child.walk()


class Model(_Expr):
    """The complete intermediate model handed to a renderer."""

    info: Optional[ApiInfo] = None
    type_declarations: list[TypeDeclaration] = Field(default_factory=list)
    namespace_root: NamespaceNode = Field(default_factory=NamespaceNode)

    def declaration(self, identifier: str) -> Optional[TypeDeclaration]:
        """Return the declaration named *identifier*, or ``None``."""
        for decl in self.type_declarations:
            if decl.identifier == identifier:
                return decl
        return None


for _model in (
    ArrayNode,
    ObjectNode,
    CompositionNode,
    TypeArrayNode,
    RawParameter,
    RawRequestBody,
    RawResponse,
    RawOperation,
    ApiDocument,
    ArrayType,
    MappingType,
    UnionType,
    IntersectionType,
    NullableType,
    ObjectField,
    InlineObjectType,
    TypeDeclaration,
    ParameterSpec,
    RequestBodySpec,
    OperationSpec,
    NamespaceNode,
    Model,
):
    _model.model_rebuild()
del _model
