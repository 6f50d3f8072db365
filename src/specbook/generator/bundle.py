"""Assemble rendered pages into a GitBook import archive.

The archive always has the same logical layout::

    SUMMARY.md               table of contents, one link per page
    README.md                "# <API title>"
    <tag page>.md ...        one per tag group
    .gitbook/openapi.yaml    the original spec, byte for byte

The embedded spec is never re-serialised: a JSON upload ends up verbatim
inside a file named ``openapi.yaml``. Every entry gets the same fixed
timestamp, so identical inputs produce identical archive bytes.
"""

from __future__ import annotations

import io
import logging
import zipfile

from specbook.exceptions import BundleError
from specbook.generator.renderer import SPEC_ARCHIVE_PATH
from specbook.models import GitBookFile, ResolvedDocument

logger = logging.getLogger(__name__)

SUMMARY_PATH = "SUMMARY.md"
README_PATH = "README.md"

_FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def build_summary(pages: list[GitBookFile]) -> str:
    """Return ``SUMMARY.md``: a heading plus one ``[path](path)`` line per page."""
    links = "\n".join(f"[{page.path}]({page.path})" for page in pages)
    return f"# Table of contents\n\n{links}\n"


def build_readme(document: ResolvedDocument) -> str:
    """Return ``README.md``, exactly ``# `` followed by the API title."""
    return f"# {document.info.title}"


def assemble_files(
    pages: list[GitBookFile],
    raw_spec: bytes | str,
    document: ResolvedDocument,
) -> dict[str, bytes]:
    """Lay out the bundle as an ordered mapping of archive path to bytes.

    Pages sharing a path overwrite each other; the last one wins.
    """
    files: dict[str, bytes] = {
        SUMMARY_PATH: build_summary(pages).encode("utf-8"),
        README_PATH: build_readme(document).encode("utf-8"),
    }
    for page in pages:
        if page.path in files:
            logger.warning("Page %s written more than once; keeping the last", page.path)
        files[page.path] = page.contents.encode("utf-8")

    if isinstance(raw_spec, str):
        raw_spec = raw_spec.encode("utf-8")
    files[SPEC_ARCHIVE_PATH] = raw_spec
    return files


def assemble(
    pages: list[GitBookFile],
    raw_spec: bytes | str,
    document: ResolvedDocument,
) -> bytes:
    """Build the zip archive for *pages* and return its bytes.

    Args:
        pages: Rendered tag pages, in summary order.
        raw_spec: The spec exactly as the user supplied it.
        document: The parsed document, used for the readme title.

    Raises:
        BundleError: If the archive cannot be written.
    """
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            for path, data in assemble_files(pages, raw_spec, document).items():
                info = zipfile.ZipInfo(path, date_time=_FIXED_DATE_TIME)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = 0o644 << 16
                zf.writestr(info, data)
    except (OSError, ValueError, zipfile.LargeZipFile) as exc:
        raise BundleError(f"Failed to build archive: {exc}") from exc
    return buffer.getvalue()


def read_bundle(data: bytes) -> dict[str, bytes]:
    """Read an archive produced by :func:`assemble` back into a path-to-bytes mapping.

    Raises:
        BundleError: If *data* is not a zip archive.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            return {name: zf.read(name) for name in zf.namelist()}
    except zipfile.BadZipFile as exc:
        raise BundleError(f"Not a valid bundle archive: {exc}") from exc
