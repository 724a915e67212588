"""Read API documents from a URL, a local file, or stdin.

Documents may be JSON or YAML.  JSON is tried first (every JSON document is
also YAML, but the JSON parser is stricter and reports better errors), with
the file extension or response ``Content-Type`` used as a hint.

* :func:`load_document` -- Fetch or read a document and return the raw
  mapping.
* :func:`validate_document_version` -- Accept Swagger 2.0 and OpenAPI 3.x,
  returning the version string.

The raw mapping then goes to
:func:`~clientsynth.parser.extractor.extract_document`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from clientsynth import __version__
from clientsynth.exceptions import FetchError, MalformedDocumentError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
USER_AGENT = f"clientsynth/{__version__}"


def load_document(
    source: str,
    headers: Optional[dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> dict[str, Any]:
    """Load an API document from *source*.

    Args:
        source: An ``http://`` or ``https://`` URL, a file path, or ``-`` for
            stdin.
        headers: Extra request headers for URL sources (already
            interpolated; see :func:`~clientsynth.config.resolve_header_variables`).
        timeout: Fetch timeout in seconds for URL sources.

    Returns:
        The decoded document mapping.

    Raises:
        FetchError: If a URL cannot be fetched.
        MalformedDocumentError: If the content cannot be read or decoded, or
            is not a mapping.
    """
    if source == "-":
        return _read_stdin()
    if source.startswith(("http://", "https://")):
        return _fetch(source, headers or {}, timeout)
    return _read_file(source)


def _read_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise MalformedDocumentError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise MalformedDocumentError("No input received from stdin")
    return _decode(content, hint="")


def _fetch(url: str, headers: dict[str, str], timeout: float) -> dict[str, Any]:
    """GET *url*, following redirects.

    A ``User-Agent`` is sent unless *headers* already carries one (header
    names compare case-insensitively).
    """
    request_headers = {"Accept": "application/json, application/yaml, */*"}
    if not any(name.lower() == "user-agent" for name in headers):
        request_headers["User-Agent"] = USER_AGENT
    request_headers.update(headers)

    logger.debug("Fetching %s", url)
    try:
        response = httpx.get(
            url, headers=request_headers, timeout=timeout, follow_redirects=True
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.TimeoutException as exc:
        raise FetchError(f"Timed out after {timeout:g}s fetching {url}") from exc
    except httpx.RequestError as exc:
        raise FetchError(f"Failed to fetch document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    else:
        hint = ""
    return _decode(response.text, hint=hint)


def _read_file(path: str) -> dict[str, Any]:
    file_path = Path(path)
    if not file_path.is_file():
        raise MalformedDocumentError(f"Document not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedDocumentError(f"Failed to read {path}: {exc}") from exc

    if not content.strip():
        raise MalformedDocumentError(f"Document is empty: {path}")

    suffix = file_path.suffix.lower()
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"
    else:
        hint = ""
    return _decode(content, hint=hint)


def _decode(content: str, hint: str) -> dict[str, Any]:
    """Decode *content* as JSON, then YAML.

    A ``"json"`` hint disables the YAML fallback; a ``"yaml"`` hint skips
    JSON.
    """
    errors: list[str] = []

    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise MalformedDocumentError(f"Invalid JSON: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _require_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise MalformedDocumentError(
        "Failed to parse document as JSON or YAML\n  " + "\n  ".join(errors)
    )


def _require_mapping(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        got = "empty document" if value is None else type(value).__name__
        raise MalformedDocumentError(f"Document must be a JSON/YAML object (got {got})")
    return value


def validate_document_version(raw: dict[str, Any]) -> str:
    """Return the document's version string.

    Accepts ``swagger: "2.0"`` and any ``openapi: 3.x``.

    Raises:
        MalformedDocumentError: If neither field is present, or the version
            is not supported.
    """
    if "swagger" in raw:
        version = str(raw["swagger"])
        if version == "2.0":
            return version
        raise MalformedDocumentError(
            f"Unsupported Swagger version: {version}. Only Swagger 2.0 is supported."
        )

    openapi_version = raw.get("openapi")
    if openapi_version is None:
        raise MalformedDocumentError(
            "Missing 'openapi' or 'swagger' field. Is this an API description?"
        )

    version = str(openapi_version)
    if version.startswith("3."):
        return version
    raise MalformedDocumentError(
        f"Unsupported OpenAPI version: {version}. Only 3.x documents are supported."
    )
