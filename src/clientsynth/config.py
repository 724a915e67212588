"""Project configuration, header interpolation and data paths.

This module handles everything clientsynth persists or reads from the
environment:

* **Project config** -- ``./clientsynth.json`` (or the file named by
  ``$CLIENTSYNTH_CONFIG``) lists the APIs to generate, deserialised into a
  :class:`~clientsynth.models.ProjectConfig`.  See
  :func:`load_project_config` and :func:`save_project_config`.
* **Header interpolation** -- ``${NAME}`` and ``${NAME:default}``
  placeholders in header values are filled from the environment by
  :func:`resolve_environment_variables`.
* **Data directory** -- XDG compliant on Linux/BSD, ``~/.clientsynth/`` on
  macOS and Windows; holds crash logs.  See :func:`get_data_dir`.

Config writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import re
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from clientsynth.exceptions import ConfigError, InvalidUsageError
from clientsynth.models import ApiConfig, ApiDocument, ProjectConfig

_APP_NAME = "clientsynth"
PROJECT_CONFIG_FILENAME = "clientsynth.json"
CONFIG_ENV_VAR = "CLIENTSYNTH_CONFIG"

# ${NAME} or ${NAME:default}
_PLACEHOLDER_RE = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


# --- Data directory ---


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/clientsynth/`` (default
    ``~/.local/share/clientsynth/``).  On macOS/Windows: ``~/.clientsynth/logs/``.
    """
    system = platform.system()
    if system == "Linux" or system.endswith("BSD"):
        base = os.environ.get("XDG_DATA_HOME", "")
        root = Path(base) if base else Path.home() / ".local" / "share"
        path = root / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a temp file in the same directory and a rename."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


# --- Environment interpolation ---


def resolve_environment_variables(value: str) -> str:
    """Substitute ``${NAME}`` and ``${NAME:default}`` placeholders.

    A set variable wins over the default.  A placeholder with neither a
    value nor a default is kept verbatim.

    Example::

        >>> os.environ["TOKEN"] = "abc"
        >>> resolve_environment_variables("Bearer ${TOKEN}")
        'Bearer abc'
        >>> resolve_environment_variables("${MISSING:none}")
        'none'
    """

    def _replace(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1))
        if env_value is not None:
            return env_value
        if match.group(2) is not None:
            return match.group(2)
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_replace, value)


def resolve_header_variables(headers: dict[str, str]) -> dict[str, str]:
    """Return a copy of *headers* with every value interpolated."""
    return {name: resolve_environment_variables(value) for name, value in headers.items()}


def parse_header_option(text: str) -> tuple[str, str]:
    """Split a ``-H "Name: Value"`` option into its name and value.

    Raises:
        InvalidUsageError: If there is no colon or the name is empty.
    """
    name, sep, value = text.partition(":")
    name = name.strip()
    if not sep or not name:
        raise InvalidUsageError(
            f"Invalid header {text!r}: expected 'Name: Value'"
        )
    return name, value.strip()


def parse_header_options(values: Optional[list[str]]) -> dict[str, str]:
    """Parse repeated ``-H`` options; later duplicates win."""
    headers: dict[str, str] = {}
    for text in values or []:
        name, value = parse_header_option(text)
        headers[name] = value
    return headers


# --- Project config ---


def project_config_path(path: Optional[Path] = None) -> Path:
    """Return the project config location.

    Precedence: explicit *path*, then ``$CLIENTSYNTH_CONFIG``, then
    ``./clientsynth.json``.
    """
    if path is not None:
        return path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.cwd() / PROJECT_CONFIG_FILENAME


def load_project_config(
    path: Optional[Path] = None, resolve_headers: bool = True
) -> Optional[ProjectConfig]:
    """Load the project configuration.

    Args:
        path: Explicit config path; see :func:`project_config_path`.
        resolve_headers: Fill ``${...}`` placeholders in header values.
            Pass ``False`` when the config will be written back, so secrets
            pulled from the environment never land on disk.

    Returns:
        The config, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON, or fails
            validation.
    """
    config_path = project_config_path(path)
    if not config_path.is_file():
        return None
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        config = ProjectConfig.model_validate(data)
    except OSError as exc:
        raise ConfigError(f"Cannot read project config at {config_path}: {exc}") from exc
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid project config at {config_path}: {exc}") from exc

    if resolve_headers:
        for api in config.apis:
            api.headers = resolve_header_variables(api.headers)
    return config


def save_project_config(config: ProjectConfig, path: Optional[Path] = None) -> Path:
    """Persist *config* atomically and return the path written."""
    config_path = project_config_path(path)
    data = config.model_dump(mode="json")
    atomic_write(config_path, json.dumps(data, indent=2) + "\n")
    return config_path


def config_from_document(
    document: ApiDocument,
    spec: str,
    output: str = "./generated",
    headers: Optional[dict[str, str]] = None,
) -> ApiConfig:
    """Build an :class:`~clientsynth.models.ApiConfig` listing every operation id.

    Operations without an ``operationId`` are listed under their
    ``<verb>_<path>`` fallback id.  Ids are sorted.
    """
    return ApiConfig(
        name=document.info.title,
        spec=spec,
        output=output,
        headers=dict(headers or {}),
        operation_ids=sorted({op.effective_id for op in document.operations}),
    )
