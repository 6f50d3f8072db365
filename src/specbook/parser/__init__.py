"""OpenAPI spec parser -- load, resolve ``$ref`` pointers, and validate.

This sub-package is the first stage of the specbook pipeline: turning raw
OpenAPI text (JSON or YAML, local file or remote URL) into a frozen
:class:`~specbook.models.ResolvedDocument` that the generator can consume.

Typical usage::

    from specbook.parser import parse_spec, read_source

    raw = read_source("https://petstore3.swagger.io/api/v3/openapi.json")
    document = parse_spec(raw, base_uri="https://petstore3.swagger.io/api/v3/")

Sub-modules:

* :mod:`~specbook.parser.loader` -- I/O layer (URL, file, stdin) plus
  JSON/YAML parsing and OpenAPI version validation.
* :mod:`~specbook.parser.resolver` -- Recursive ``$ref`` resolution across
  documents with circular-reference detection.
* :mod:`~specbook.parser.validator` -- Pydantic validation into
  :class:`~specbook.models.ResolvedDocument` and tag-list checks.
"""

from __future__ import annotations

from typing import Optional

from specbook.models import ResolvedDocument
from specbook.parser.loader import (
    decode_source,
    parse_text,
    read_source,
    validate_openapi_version,
)
from specbook.parser.resolver import Fetcher, resolve_refs
from specbook.parser.validator import validate_document


def parse_spec(
    raw: bytes | str,
    base_uri: Optional[str] = None,
    fetch: Optional[Fetcher] = None,
) -> ResolvedDocument:
    """Parse, resolve and validate raw spec text.

    Args:
        raw: The spec as received, bytes or text, JSON or YAML.
        base_uri: Where *raw* came from, used for relative ``$ref`` targets.
        fetch: Optional loader for external ``$ref`` documents.

    Raises:
        SpecSyntaxError: If *raw* is not valid JSON/YAML text.
        SchemaInvalidError: If the document is not valid OpenAPI 3.x or a
            reference cannot be resolved.
    """
    spec = parse_text(decode_source(raw))
    validate_openapi_version(spec)
    return validate_document(resolve_refs(spec, base_uri=base_uri, fetch=fetch))


__all__ = [
    "decode_source",
    "parse_spec",
    "parse_text",
    "read_source",
    "resolve_refs",
    "validate_document",
    "validate_openapi_version",
]
