"""Helpers shared by the CLI commands."""

from __future__ import annotations

from typing import Optional

import typer

from clientsynth.config import resolve_header_variables
from clientsynth.exceptions import ClientsynthError
from clientsynth.models import ApiDocument
from clientsynth.output import get_output
from clientsynth.parser import extract_document, load_document, validate_document_version
from clientsynth.parser.loader import DEFAULT_TIMEOUT


def load_api_document(
    source: str,
    headers: Optional[dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> ApiDocument:
    """Load, validate and extract the document at *source*.

    Header values are interpolated from the environment before the fetch.
    """
    raw = load_document(source, resolve_header_variables(headers or {}), timeout)
    return extract_document(raw, validate_document_version(raw))


def exit_with(exc: ClientsynthError) -> typer.Exit:
    """Report *exc* on stderr and return the matching :class:`typer.Exit`.

    Usage: ``raise exit_with(exc) from None``.
    """
    get_output().error(str(exc))
    return typer.Exit(code=exc.exit_code)
