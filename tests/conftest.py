"""Shared test fixtures for clientsynth.

Provides reusable fixtures for loading document fixtures, building parsed
documents and models, isolating the project config, managing output state,
and running CLI commands.  These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from clientsynth.models import ApiDocument, Model
from clientsynth.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and log handler after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw document fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


def _load_fixture(name: str) -> dict[str, Any]:
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def petstore_30_raw() -> dict[str, Any]:
    """Load raw petstore 3.0 document dict."""
    return _load_fixture("petstore_3.0.json")


@pytest.fixture
def swagger_20_raw() -> dict[str, Any]:
    """Load raw Swagger 2.0 document dict."""
    return _load_fixture("swagger_2.0.json")


@pytest.fixture
def comprehensive_31_raw() -> dict[str, Any]:
    """Load raw 3.1 document dict with compositions and odd names."""
    return _load_fixture("comprehensive_3.1.json")


# ---------------------------------------------------------------------------
# Parsed document and model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_document(petstore_30_raw: dict[str, Any]) -> ApiDocument:
    """Parsed petstore 3.0 document."""
    from clientsynth.parser.extractor import extract_document

    return extract_document(petstore_30_raw, "3.0.3")


@pytest.fixture
def swagger_document(swagger_20_raw: dict[str, Any]) -> ApiDocument:
    """Parsed Swagger 2.0 document."""
    from clientsynth.parser.extractor import extract_document

    return extract_document(swagger_20_raw, "2.0")


@pytest.fixture
def comprehensive_document(comprehensive_31_raw: dict[str, Any]) -> ApiDocument:
    """Parsed 3.1 document."""
    from clientsynth.parser.extractor import extract_document

    return extract_document(comprehensive_31_raw, "3.1.0")


@pytest.fixture
def petstore_model(petstore_document: ApiDocument) -> Model:
    """Model assembled from the petstore 3.0 document."""
    from clientsynth.generator import assemble

    return assemble(petstore_document)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and data to a temporary directory.

    Points XDG_DATA_HOME at tmp_path, clears CLIENTSYNTH_CONFIG, and
    changes the working directory to tmp_path so ``./clientsynth.json``
    lands there.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("CLIENTSYNTH_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, PLAIN-format output manager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
