"""Inspect commands -- examine a document and the model built from it.

Provides ``clientsynth info`` and the ``clientsynth inspect`` sub-command
group.  All of them are read-only: they load the document, build what they
need in memory, and print tables or records to stdout.
"""

from __future__ import annotations

import json
from typing import Optional

import typer

from clientsynth.commands.common import exit_with, load_api_document
from clientsynth.config import parse_header_options
from clientsynth.exceptions import ClientsynthError
from clientsynth.generator import assemble
from clientsynth.models import (
    ApiDocument,
    ArrayType,
    InlineObjectType,
    IntersectionType,
    LiteralType,
    MappingType,
    Model,
    NamedType,
    NoContentType,
    NullableType,
    PrimitiveType,
    TypeExpression,
    UnionType,
)
from clientsynth.output import get_output
from clientsynth.parser.loader import DEFAULT_TIMEOUT

inspect_app = typer.Typer(no_args_is_help=True)


def _load(spec: str, header: Optional[list[str]], timeout: float) -> ApiDocument:
    try:
        return load_api_document(spec, parse_header_options(header), timeout)
    except ClientsynthError as exc:
        raise exit_with(exc) from None


def _build(spec: str, header: Optional[list[str]], timeout: float) -> Model:
    return assemble(_load(spec, header, timeout))


def info_command(
    spec: str = typer.Argument(..., help="Document URL, file path, or '-' for stdin."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Request header 'Name: Value' (repeatable)."
    ),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Fetch timeout in seconds."),
) -> None:
    """Show document metadata and counts.

    Example::

        clientsynth info openapi.yaml
        clientsynth --json info https://petstore3.swagger.io/api/v3/openapi.json
    """
    document = _load(spec, header, timeout)

    get_output().print_record({
        "title": document.info.title,
        "version": document.info.version,
        "document_version": document.document_version,
        "description": document.info.description or "-",
        "servers": [s.url for s in document.servers],
        "paths": len({op.path for op in document.operations}),
        "operations": len(document.operations),
        "schemas": len(document.schemas),
    })


@inspect_app.command("types")
def inspect_types(
    spec: str = typer.Argument(..., help="Document URL, file path, or '-' for stdin."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Request header 'Name: Value' (repeatable)."
    ),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Fetch timeout in seconds."),
) -> None:
    """List the type declarations the document produces.

    Example::

        clientsynth inspect types openapi.yaml
    """
    model = _build(spec, header, timeout)

    rows = [
        [
            decl.identifier,
            decl.name,
            format_type(decl.type),
            ", ".join(decl.extends) or "-",
        ]
        for decl in model.type_declarations
    ]
    get_output().print_table(
        ["Type", "Schema", "Definition", "Extends"],
        rows,
        title=f"Types ({len(rows)})",
    )


@inspect_app.command("operations")
def inspect_operations(
    spec: str = typer.Argument(..., help="Document URL, file path, or '-' for stdin."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Request header 'Name: Value' (repeatable)."
    ),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Fetch timeout in seconds."),
) -> None:
    """List the client operations and where they live in the namespace tree.

    Example::

        clientsynth inspect operations openapi.yaml
    """
    model = _build(spec, header, timeout)

    rows: list[list[str]] = []
    for op in model.namespace_root.walk():
        rows.append([
            ".".join([*op.namespace_path, op.method_name]),
            op.http_method.value.upper(),
            op.url_template,
            format_type(op.response_type),
            "Yes" if op.deprecated else "",
        ])
    get_output().print_table(
        ["Call", "Method", "Path", "Returns", "Deprecated"],
        rows,
        title=f"Operations ({len(rows)})",
    )


def format_type(expr: TypeExpression) -> str:
    """Render *expr* in a compact, TypeScript-like notation for display."""
    if isinstance(expr, NamedType):
        return expr.name
    if isinstance(expr, PrimitiveType):
        return expr.name.value
    if isinstance(expr, LiteralType):
        return json.dumps(expr.value)
    if isinstance(expr, ArrayType):
        inner = format_type(expr.items)
        return f"({inner})[]" if " " in inner else f"{inner}[]"
    if isinstance(expr, MappingType):
        return f"map<{format_type(expr.values)}>"
    if isinstance(expr, UnionType):
        return " | ".join(format_type(m) for m in expr.members)
    if isinstance(expr, IntersectionType):
        parts = []
        for member in expr.members:
            text = format_type(member)
            parts.append(f"({text})" if isinstance(member, UnionType) else text)
        return " & ".join(parts)
    if isinstance(expr, NullableType):
        return f"{format_type(expr.inner)} | null"
    if isinstance(expr, InlineObjectType):
        fields = ", ".join(
            f"{f.identifier}{'?' if f.optional else ''}: {format_type(f.type)}"
            for f in expr.fields
        )
        return f"{{{fields}}}"
    if isinstance(expr, NoContentType):
        return "void"
    return "unknown"
