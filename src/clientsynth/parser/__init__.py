"""Document parser -- load, validate and extract API documents.

This sub-package is the first half of the clientsynth pipeline: turning a raw
OpenAPI 3.x or Swagger 2.0 document (JSON or YAML, local file, stdin or
remote URL) into an :class:`~clientsynth.models.ApiDocument` that the
generator can consume.

Typical usage::

    from clientsynth.parser import load_document, validate_document_version, extract_document

    raw = load_document("https://petstore3.swagger.io/api/v3/openapi.json")
    version = validate_document_version(raw)
    document = extract_document(raw, version)

Sub-modules:

* :mod:`~clientsynth.parser.loader` -- I/O layer (URL, file, stdin) plus
  format detection and version validation.
* :mod:`~clientsynth.parser.resolver` -- JSON pointer lookup for non-schema
  ``$ref``\\ s.
* :mod:`~clientsynth.parser.schema` -- Raw schema mappings to typed schema
  nodes.
* :mod:`~clientsynth.parser.extractor` -- Walks the document and produces the
  :class:`~clientsynth.models.ApiDocument`.
"""

from clientsynth.parser.extractor import extract_document
from clientsynth.parser.loader import load_document, validate_document_version
from clientsynth.parser.schema import parse_schema

__all__ = ["load_document", "validate_document_version", "extract_document", "parse_schema"]
