"""clientsynth -- Synthesize a typed client model from OpenAPI/Swagger documents.

This package reads an OpenAPI 3.0/3.1 or Swagger 2.0 document and builds a
language-agnostic intermediate model of the client surface it describes:
named type declarations resolved from the document's schemas, and callable
operations grouped into a namespace tree. A separate renderer turns the
model into source files.

Typical workflow::

    clientsynth info openapi.yaml          # look at the document
    clientsynth generate openapi.yaml      # write generated/model.json

Library usage::

    from clientsynth.generator import assemble
    from clientsynth.parser import extract_document, load_document, validate_document_version

    raw = load_document("openapi.yaml")
    document = extract_document(raw, validate_document_version(raw))
    model = assemble(document)

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Project configuration and header interpolation.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
