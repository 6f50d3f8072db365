"""Read OpenAPI source bytes and parse them into plain Python data.

This module handles all input I/O for specbook. Reading and parsing are kept
apart because the bundle must embed the *exact* bytes the user supplied,
while every later stage works on the parsed tree.

The public functions are:

* :func:`read_source` -- Fetch raw bytes from a URL, local file, or stdin.
* :func:`decode_source` -- Turn those bytes into text, failing on bad UTF-8.
* :func:`parse_text` -- Parse text as JSON or YAML into a dictionary.
* :func:`validate_openapi_version` -- Check and return the ``openapi`` version
  string, rejecting Swagger 2.x and unsupported versions.
* :func:`load_document` -- Read and parse in one step; used by the resolver
  for documents pulled in through external ``$ref`` pointers.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specbook.exceptions import SchemaInvalidError, SpecSourceError, SpecSyntaxError

SPEC_EXTENSIONS = (".json", ".yaml", ".yml")
"""File extensions accepted by ``specbook build`` without ``--any-extension``."""


def is_url(source: str) -> bool:
    """Return ``True`` when *source* is an http(s) URL."""
    return source.startswith(("http://", "https://"))


def read_source(source: str) -> bytes:
    """Read raw spec bytes from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The bytes exactly as received.

    Raises:
        SpecSourceError: If the source cannot be read or is empty.
    """
    if source == "-":
        return _read_from_stdin()
    elif is_url(source):
        return _read_from_url(source)
    else:
        return _read_from_file(source)


def _read_from_stdin() -> bytes:
    try:
        content = sys.stdin.buffer.read()
    except Exception as exc:
        raise SpecSourceError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecSourceError("No input received from stdin")
    return content


def _read_from_url(url: str) -> bytes:
    """Fetch spec bytes from URL.

    Raises:
        SpecSourceError: On HTTP error status or transport failure.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecSourceError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecSourceError(f"Failed to fetch spec from {url}: {exc}") from exc

    content = response.content
    if not content.strip():
        raise SpecSourceError(f"Empty response fetching spec from {url}")
    return content


def _read_from_file(path: str) -> bytes:
    """Read spec bytes from a local file.

    The file is read in binary mode so line endings and any byte-order mark
    survive untouched.

    Raises:
        SpecSourceError: If the file is missing, unreadable or empty.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecSourceError(f"Spec file not found: {path}")

    try:
        content = file_path.read_bytes()
    except OSError as exc:
        raise SpecSourceError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecSourceError(f"Spec file is empty: {path}")
    return content


def decode_source(data: bytes | str) -> str:
    """Decode raw spec bytes as UTF-8 (a leading BOM is dropped).

    Raises:
        SpecSyntaxError: If *data* is not valid UTF-8.
    """
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SpecSyntaxError(f"Spec is not valid UTF-8 text: {exc}") from exc


def parse_text(content: str) -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first, then falls back to YAML.
    Valid JSON is also valid YAML, so the fallback accepts everything a
    JSON parser would; JSON simply gives sharper error messages.

    Args:
        content: The raw string content.

    Returns:
        The parsed dictionary.

    Raises:
        SpecSyntaxError: If the content cannot be parsed as either format.
        SchemaInvalidError: If it parses but the top level is not a mapping.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    try:
        return _require_mapping(json.loads(content))
    except json.JSONDecodeError as exc:
        json_error = exc

    try:
        return _require_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        yaml_error = exc

    msg = "Failed to parse spec as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SpecSyntaxError(msg)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        raise SchemaInvalidError(
            "Spec must be a JSON/YAML object (got "
            f"{type(result).__name__ if result is not None else 'empty document'})"
        )
    return result


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Validate and return the OpenAPI version string.

    Supports OpenAPI 3.x. Swagger 2.x, missing version fields, and other
    major versions are rejected.

    Raises:
        SchemaInvalidError: If the version is missing, unsupported, or
            indicates Swagger 2.x.
    """
    if "swagger" in spec:
        swagger_ver = str(spec["swagger"])
        raise SchemaInvalidError(
            f"Swagger {swagger_ver} is not supported. "
            "Only OpenAPI 3.x documents are supported. "
            "Consider converting with https://converter.swagger.io"
        )

    openapi_version = spec.get("openapi")
    if openapi_version is None:
        raise SchemaInvalidError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(openapi_version)
    if version_str.startswith("3."):
        return version_str

    raise SchemaInvalidError(
        f"Unsupported OpenAPI version: {version_str}. "
        "Only OpenAPI 3.x documents are supported."
    )


def load_document(source: str) -> dict[str, Any]:
    """Read *source* and parse it into a dictionary."""
    return parse_text(decode_source(read_source(source)))
