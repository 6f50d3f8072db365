"""Structural validation of a resolved OpenAPI document.

Turns the ``$ref``-free dictionary produced by
:func:`~specbook.parser.resolver.resolve_refs` into a frozen
:class:`~specbook.models.ResolvedDocument`. Pydantic enforces the shape of
the parts the bundle depends on (``info``, ``paths``, operations and
``tags``); :func:`check_tag_names` then rejects tag lists that would make
grouping ambiguous.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from specbook.exceptions import DuplicateTagError, SchemaInvalidError
from specbook.models import UNTAGGED_TAG_NAME, ResolvedDocument


def validate_document(spec: dict[str, Any]) -> ResolvedDocument:
    """Validate *spec* and return it as a :class:`ResolvedDocument`.

    Raises:
        SchemaInvalidError: If the document does not match the OpenAPI
            structure, or its tag list is ambiguous.
    """
    try:
        document = ResolvedDocument.model_validate(spec)
    except ValidationError as exc:
        raise SchemaInvalidError(_format_errors(exc)) from exc

    check_tag_names(document)
    return document


def check_tag_names(document: ResolvedDocument) -> None:
    """Reject duplicate tag names and the reserved untagged name.

    Raises:
        DuplicateTagError: If two declared tags share a name.
        SchemaInvalidError: If a declared tag uses the reserved name.
    """
    seen: set[str] = set()
    duplicates: list[str] = []
    for tag in document.tags:
        if tag.name == UNTAGGED_TAG_NAME:
            raise SchemaInvalidError(
                f"Tag name '{UNTAGGED_TAG_NAME}' is reserved for untagged operations"
            )
        if tag.name in seen and tag.name not in duplicates:
            duplicates.append(tag.name)
        seen.add(tag.name)

    if duplicates:
        names = ", ".join(f"'{name}'" for name in duplicates)
        raise DuplicateTagError(f"Duplicate tag names in document: {names}")


def _format_errors(exc: ValidationError) -> str:
    """Render Pydantic errors as ``location: message`` lines."""
    lines = ["Spec is not a valid OpenAPI document:"]
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"] if part != "root")
        lines.append(f"  {loc or '<document>'}: {err['msg']}")
    return "\n".join(lines)
