"""Inspect commands -- preview a bundle before or after building it.

Provides the ``specbook inspect`` sub-command group:

* ``tags`` -- parse a spec and list the pages a build would produce.
* ``bundle`` -- list the entries of an existing archive.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from specbook.exceptions import BundleError, SpecbookError
from specbook.output import error, get_output


inspect_app = typer.Typer(no_args_is_help=True)


@inspect_app.command("tags")
def inspect_tags(
    source: str = typer.Argument(
        help="OpenAPI spec: file path, http(s) URL, or '-' for stdin."
    ),
    unknown_tags: Optional[str] = typer.Option(
        None,
        "--unknown-tags",
        help="Undeclared tag references: 'error' or 'placeholder'.",
    ),
) -> None:
    """List the tag pages a build would produce.

    Shows one row per tag group with its page file and endpoint count,
    in the order the pages appear in ``SUMMARY.md``.

    Example::

        specbook inspect tags openapi.yaml
        specbook inspect tags openapi.yaml --json
    """
    from specbook.config import resolve_config
    from specbook.generator import collate, page_filenames
    from specbook.parser import parse_spec, read_source

    try:
        config = resolve_config(cli_unknown_tags=unknown_tags)
        document = parse_spec(read_source(source), base_uri=source)
        groups = collate(document, unknown_tags=config.bundle.unknown_tags)
    except SpecbookError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    paths = page_filenames(groups)
    rows = [
        [name, paths[name], str(len(group.endpoints))]
        for name, group in groups.items()
    ]
    get_output().print_table(
        ["Tag", "Page", "Endpoints"],
        rows,
        title=f"{document.info.title} -- Tags ({len(rows)})",
    )


@inspect_app.command("bundle")
def inspect_bundle(
    archive: str = typer.Argument(help="Path to a bundle built by specbook."),
) -> None:
    """List the entries of a bundle archive with their sizes.

    Example::

        specbook inspect bundle docs.zip
    """
    from specbook.generator import read_bundle

    try:
        path = Path(archive)
        if not path.is_file():
            raise BundleError(f"Archive not found: {archive}")
        files = read_bundle(path.read_bytes())
    except SpecbookError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    rows = [[name, str(len(data))] for name, data in files.items()]
    get_output().print_table(
        ["Path", "Bytes"], rows, title=f"{path.name} ({len(rows)} entries)"
    )
