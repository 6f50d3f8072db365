"""Render one GitBook markdown page per tag group.

Each page carries the tag's heading, description and external-docs link,
followed by one GitBook ``{% swagger %}`` block per endpoint. The blocks
only *reference* the bundled spec by path and method; GitBook expands
parameters, bodies and responses from the spec file itself at import time,
so no operation detail is inlined here.

Pages are rendered from the ``page.md.j2`` Jinja2 template that lives in
``generator/templates/`` next to this module.
"""

from __future__ import annotations

import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from specbook.models import GitBookFile, TagGroup


TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generator/templates/``)."""

SPEC_ARCHIVE_PATH = ".gitbook/openapi.yaml"
"""Where the original spec sits inside the bundle."""

SPEC_REFERENCE = f"./{SPEC_ARCHIVE_PATH}"
"""How pages at the bundle root point at the bundled spec."""

RESERVED_PAGE_NAMES = frozenset({"summary.md", "readme.md"})
"""Root files owned by the bundle itself; tag pages must not replace them."""

_UNSAFE_CHARS = re.compile(r'[\x00-\x1f\x7f/\\:*?"<>|]')

_env: Environment | None = None


def page_filename(tag_name: str) -> str:
    """Return the archive path of the page for *tag_name*.

    Path separators, control characters and characters that some archive
    tools refuse (``: * ? " < > |``) become ``-``. A name that would shadow
    ``SUMMARY.md`` or ``README.md`` gets a leading ``_``.

    Example::

        page_filename("pets")          # "pets.md"
        page_filename("admin/users")   # "admin-users.md"
        page_filename("README")        # "_README.md"
    """
    filename = _UNSAFE_CHARS.sub("-", tag_name) + ".md"
    if filename.lower() in RESERVED_PAGE_NAMES:
        filename = f"_{filename}"
    return filename


def page_filenames(groups: dict[str, TagGroup]) -> dict[str, str]:
    """Assign every group a distinct page path, in group order.

    Escaping can map different tag names to one file (``a/b`` and ``a:b``
    both give ``a-b.md``). The first group keeps the plain name and later
    ones get a numeric suffix, compared case-insensitively so extraction on
    case-folding filesystems cannot merge pages either::

        a/b -> a-b.md
        a:b -> a-b-2.md
    """
    assigned: dict[str, str] = {}
    used: set[str] = set()
    for name in groups:
        filename = page_filename(name)
        stem = filename[: -len(".md")]
        counter = 2
        while filename.lower() in used:
            filename = f"{stem}-{counter}.md"
            counter += 1
        used.add(filename.lower())
        assigned[name] = filename
    return assigned


def render_page(group: TagGroup, path: str | None = None) -> GitBookFile:
    """Render the markdown page for one tag group.

    *path* overrides the archive path, which otherwise comes from
    :func:`page_filename`.
    """
    template = _get_env().get_template("page.md.j2")
    contents = template.render(
        tag=group.tag,
        endpoints=group.endpoints,
        spec_src=SPEC_REFERENCE,
        spec_name=Path(SPEC_ARCHIVE_PATH).name,
    )
    return GitBookFile(
        path=path or page_filename(group.tag.name),
        contents=contents.rstrip("\n") + "\n",
    )


def render_pages(groups: dict[str, TagGroup]) -> list[GitBookFile]:
    """Render every group, preserving the mapping's order.

    Each page gets a distinct path from :func:`page_filenames`.
    """
    paths = page_filenames(groups)
    return [render_page(group, paths[name]) for name, group in groups.items()]


def _get_env() -> Environment:
    """Create (once) the Jinja2 environment for page templates.

    Autoescape stays off for ``.md.j2`` templates since they produce
    Markdown, not HTML. Block trimming and lstrip keep the template
    readable without leaking blank lines into the output.
    """
    global _env
    if _env is None:
        _env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(disabled_extensions=("md.j2",)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
    return _env
