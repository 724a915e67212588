"""Init command -- add an API to the project config.

``clientsynth init SPEC`` loads the document, lists every operation id it
declares, and writes (or updates) ``clientsynth.json`` so that a later bare
``clientsynth generate`` regenerates the API.  Trim the ``operation_ids``
list by hand to generate a subset.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from clientsynth.commands.common import exit_with, load_api_document
from clientsynth.config import (
    config_from_document,
    load_project_config,
    parse_header_options,
    save_project_config,
)
from clientsynth.exceptions import ClientsynthError
from clientsynth.models import ProjectConfig
from clientsynth.output import get_output
from clientsynth.parser.loader import DEFAULT_TIMEOUT


def init_command(
    spec: str = typer.Argument(..., help="Document URL, file path, or '-' for stdin."),
    output_dir: str = typer.Option(
        "./generated", "--output", "-o", help="Output directory for this API."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Request header 'Name: Value' (repeatable)."
    ),
    name: Optional[str] = typer.Option(
        None, "--name", help="API name (defaults to the document title)."
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT, "--timeout", help="Fetch timeout in seconds."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Project config file (default: ./clientsynth.json)."
    ),
) -> None:
    """Add SPEC to the project config with every operation id listed.

    Headers are stored as given, so ``${VAR}`` placeholders stay
    placeholders on disk and are filled in at generation time.

    Example::

        clientsynth init https://petstore3.swagger.io/api/v3/openapi.json -o ./generated/petstore
        clientsynth init ./openapi.yaml -H 'Authorization: Bearer ${API_TOKEN}'
    """
    output = get_output()
    try:
        headers = parse_header_options(header)
        document = load_api_document(spec, headers, timeout)

        api = config_from_document(document, spec, output_dir, headers)
        api.timeout = timeout
        if name:
            api.name = name

        project = load_project_config(config_path, resolve_headers=False) or ProjectConfig()
        replaced = False
        for index, existing in enumerate(project.apis):
            if existing.name == api.name:
                project.apis[index] = api
                replaced = True
        if not replaced:
            project.apis.append(api)

        path = save_project_config(project, config_path)
    except ClientsynthError as exc:
        raise exit_with(exc) from None

    verb = "Updated" if replaced else "Added"
    output.success(
        f'{verb} "{api.name}" ({len(api.operation_ids)} operations) in {path}'
    )
    output.suggest("Generate: clientsynth generate")
