"""Generate command -- write the intermediate model for one or more APIs.

``clientsynth generate SPEC`` loads a single document; without ``SPEC`` every
API listed in the project config (``clientsynth.json``) is generated in turn.
The model is written as ``model.json`` into the output directory, or to
stdout with ``--output -``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from clientsynth.commands.common import exit_with, load_api_document
from clientsynth.config import atomic_write, load_project_config, parse_header_options
from clientsynth.exceptions import ClientsynthError, InvalidUsageError
from clientsynth.generator import assemble
from clientsynth.models import ApiConfig
from clientsynth.output import get_output
from clientsynth.parser.loader import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

MODEL_FILENAME = "model.json"


def generate_command(
    spec: Optional[str] = typer.Argument(
        None, help="Document URL, file path, or '-' for stdin."
    ),
    output_dir: str = typer.Option(
        "./generated", "--output", "-o", help="Output directory, or '-' for stdout."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Request header 'Name: Value' (repeatable)."
    ),
    operation_id: Optional[list[str]] = typer.Option(
        None, "--operation-id", help="Only generate this operation (repeatable)."
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT, "--timeout", help="Fetch timeout in seconds."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Build the model but write nothing."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Project config file (default: ./clientsynth.json)."
    ),
) -> None:
    """Generate the client model for SPEC, or for every API in the project config.

    Example::

        clientsynth generate openapi.yaml -o ./generated/petstore
        clientsynth generate https://api.example.com/openapi.json -H "Authorization: Bearer ${TOKEN}"
        clientsynth generate openapi.yaml -o - | my-renderer
        clientsynth generate            # everything in clientsynth.json
    """
    try:
        if spec is not None:
            apis = [
                ApiConfig(
                    name=spec,
                    spec=spec,
                    output=output_dir,
                    headers=parse_header_options(header),
                    operation_ids=list(operation_id or []),
                    timeout=timeout,
                )
            ]
        else:
            project = load_project_config(config_path)
            if project is None or not project.apis:
                raise InvalidUsageError(
                    "No SPEC given and no APIs configured. "
                    "Run: clientsynth init <spec>"
                )
            apis = project.apis

        for api in apis:
            generate_api(api, dry_run=dry_run)
    except ClientsynthError as exc:
        raise exit_with(exc) from None


def generate_api(api: ApiConfig, dry_run: bool = False) -> Optional[Path]:
    """Run the pipeline for one configured API.

    Returns:
        The path of the written model, or ``None`` for stdout and dry runs.
    """
    output = get_output()
    output.info(f"Loading {api.spec}")
    document = load_api_document(api.spec, api.headers, api.timeout)

    model = assemble(document, api.operation_ids or None)
    operation_count = sum(1 for _ in model.namespace_root.walk())
    summary = (
        f"{document.info.title}: {len(model.type_declarations)} types, "
        f"{operation_count} operations"
    )

    data = model.model_dump(mode="json")
    if api.output == "-":
        output.print_data(json.dumps(data, indent=2, ensure_ascii=False))
        return None

    if dry_run:
        output.info(f"[dry-run] {summary}")
        return None

    path = Path(api.output) / MODEL_FILENAME
    atomic_write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    logger.debug("Wrote %s", path)
    output.success(f"{summary} -> {path}")
    return path
