"""Run the whole spec-to-bundle pipeline in one call.

Stages run strictly in order and each one only sees the previous stage's
output::

    raw bytes -> ResolvedDocument -> tag groups -> pages -> zip bytes

Any failure aborts the run before an archive exists; there is no partial
output.
"""

from __future__ import annotations

import logging
from typing import Optional

from specbook.generator.bundle import assemble
from specbook.generator.collator import collate
from specbook.generator.renderer import render_pages
from specbook.models import Bundle, UnknownTagPolicy
from specbook.parser import parse_spec
from specbook.parser.resolver import Fetcher

logger = logging.getLogger(__name__)


def build_bundle(
    raw: bytes | str,
    base_uri: Optional[str] = None,
    unknown_tags: UnknownTagPolicy | str = UnknownTagPolicy.ERROR,
    fetch: Optional[Fetcher] = None,
) -> Bundle:
    """Turn raw OpenAPI text into a GitBook bundle.

    Args:
        raw: The spec exactly as received (JSON or YAML, bytes or text).
            These bytes are embedded unchanged in the archive.
        base_uri: Where *raw* came from, for relative ``$ref`` targets.
        unknown_tags: Policy for undeclared tag references, see
            :func:`~specbook.generator.collator.collate`.
        fetch: Optional loader for external ``$ref`` documents.

    Returns:
        The :class:`~specbook.models.Bundle` holding the archive bytes plus
        the intermediate results.

    Raises:
        SpecSyntaxError: If *raw* is not JSON or YAML.
        SchemaInvalidError: If the document is not valid OpenAPI 3.x.
        UnknownTagReferenceError: If an undeclared tag is referenced and the
            policy is ``"error"``.
    """
    document = parse_spec(raw, base_uri=base_uri, fetch=fetch)
    groups = collate(document, unknown_tags=unknown_tags)
    pages = render_pages(groups)
    archive = assemble(pages, raw, document)
    logger.debug("Bundled %d pages (%d bytes)", len(pages), len(archive))
    return Bundle(document=document, groups=groups, pages=pages, archive=archive)
