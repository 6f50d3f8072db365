"""Shared test fixtures for specbook.

Provides reusable fixtures for loading spec fixtures, building documents
from inline dicts, and isolating config. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

import pytest

from specbook.models import ResolvedDocument
from specbook.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the ``specbook`` logger after every test.

    Both cache references to sys.stdout/sys.stderr at creation time. When
    Typer's CliRunner redirects those streams during a test and the test
    finishes, the cached references become stale ("I/O operation on closed
    file").
    """
    yield
    reset_output()
    logger = logging.getLogger("specbook")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Raw spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_yaml_path() -> Path:
    """Path to the YAML petstore fixture (tagged, multi-tagged and untagged operations)."""
    return FIXTURES_DIR / "petstore.yaml"


@pytest.fixture
def petstore_yaml_bytes(petstore_yaml_path: Path) -> bytes:
    return petstore_yaml_path.read_bytes()


@pytest.fixture
def petstore_json_path() -> Path:
    """Path to the minimal JSON petstore fixture (one tagged, one untagged operation)."""
    return FIXTURES_DIR / "petstore.json"


@pytest.fixture
def petstore_json_bytes(petstore_json_path: Path) -> bytes:
    return petstore_json_path.read_bytes()


@pytest.fixture
def split_spec_path() -> Path:
    """Path to a spec whose schemas live in a sibling file."""
    return FIXTURES_DIR / "split" / "openapi.yaml"


# ---------------------------------------------------------------------------
# Document factory
# ---------------------------------------------------------------------------


def make_spec(
    paths: dict[str, Any],
    tags: list[dict[str, Any]] | None = None,
    title: str = "Test API",
) -> dict[str, Any]:
    """Build a minimal OpenAPI 3.0 spec dict around *paths* and *tags*."""
    spec: dict[str, Any] = {
        "openapi": "3.0.3",
        "info": {"title": title, "version": "1.0.0"},
        "paths": paths,
    }
    if tags is not None:
        spec["tags"] = tags
    return spec


@pytest.fixture
def document_factory() -> Callable[..., ResolvedDocument]:
    """Return a callable that parses a :func:`make_spec` dict into a ResolvedDocument."""
    from specbook.parser import parse_spec

    def _factory(
        paths: dict[str, Any],
        tags: list[dict[str, Any]] | None = None,
        title: str = "Test API",
    ) -> ResolvedDocument:
        return parse_spec(json.dumps(make_spec(paths, tags, title)))

    return _factory


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    that tests never touch real user config, clears SPECBOOK_* environment
    variables, and changes the working directory to tmp_path.
    """
    monkeypatch.setattr("specbook.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["SPECBOOK_UNKNOWN_TAGS", "SPECBOOK_OUTPUT"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path

