"""Bundle generator -- group operations by tag, render pages, build the archive.

This sub-package is the second half of the specbook pipeline. It takes the
:class:`~specbook.models.ResolvedDocument` produced by :mod:`specbook.parser`
and turns it into a GitBook import archive.

Typical usage::

    from specbook.generator import build_bundle

    bundle = build_bundle(Path("openapi.yaml").read_bytes())
    Path("docs.zip").write_bytes(bundle.archive)

Sub-modules:

* :mod:`~specbook.generator.collator` -- Flatten ``paths`` and group
  endpoints by tag, with an untagged catch-all.
* :mod:`~specbook.generator.renderer` -- Render one markdown page per group.
* :mod:`~specbook.generator.bundle` -- Lay out ``SUMMARY.md``, ``README.md``,
  the pages and the original spec, and zip them.
* :mod:`~specbook.generator.pipeline` -- All of the above in one call.
"""

from specbook.generator.bundle import assemble, read_bundle
from specbook.generator.collator import collate
from specbook.generator.pipeline import build_bundle
from specbook.generator.renderer import (
    page_filename,
    page_filenames,
    render_page,
    render_pages,
)

__all__ = [
    "assemble",
    "build_bundle",
    "collate",
    "page_filename",
    "page_filenames",
    "read_bundle",
    "render_page",
    "render_pages",
]
