"""Build command -- turn an OpenAPI spec into a GitBook import archive.

This is the thin I/O shell around :func:`~specbook.generator.build_bundle`:
it reads the spec from a file, URL or stdin, runs the pipeline, and writes
the archive to a file (atomically) or to stdout.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from specbook.exceptions import BundleError, InvalidUsageError, SpecbookError
from specbook.output import debug, error, get_output, info, success, suggest


def build_command(
    ctx: typer.Context,
    source: str = typer.Argument(
        help="OpenAPI spec: file path, http(s) URL, or '-' for stdin."
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Archive path, or '-' for stdout."
    ),
    unknown_tags: Optional[str] = typer.Option(
        None,
        "--unknown-tags",
        help="Undeclared tag references: 'error' or 'placeholder'.",
    ),
    any_extension: bool = typer.Option(
        False,
        "--any-extension",
        help="Accept spec files without a .json/.yaml/.yml extension.",
    ),
) -> None:
    """Build a GitBook bundle from an OpenAPI spec.

    Writes a zip archive containing ``SUMMARY.md``, ``README.md``, one page
    per tag and the original spec under ``.gitbook/openapi.yaml``.

    Args:
        ctx: Typer context carrying the global ``force`` flag.
        source: Where to read the spec from.
        output: Destination override (config ``bundle.output`` otherwise).
        unknown_tags: Policy override for undeclared tags.
        any_extension: Skip the file extension check.

    Raises:
        typer.Exit: With the failing error's exit code.

    Example::

        specbook build openapi.yaml -o docs.zip
        curl -s https://example.com/openapi.json | specbook build - -o - > docs.zip
    """
    from specbook.config import resolve_config
    from specbook.generator import build_bundle
    from specbook.parser import read_source

    force = ctx.obj.get("force", False) if ctx.obj else False

    try:
        config = resolve_config(cli_unknown_tags=unknown_tags, cli_output=output)
        _check_extension(source, any_extension)

        debug(f"Reading spec from {source}")
        raw = read_source(source)
        bundle = build_bundle(
            raw, base_uri=source, unknown_tags=config.bundle.unknown_tags
        )

        destination = config.bundle.output
        if destination == "-":
            get_output().write_bytes(bundle.archive)
        else:
            _write_archive(Path(destination), bundle.archive, force)
    except SpecbookError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"{bundle.document.info.title}: {len(bundle.pages)} pages")
    if destination != "-":
        success(f"Bundle written to {destination}")
        suggest("Import the archive into GitBook to publish the pages")


def _check_extension(source: str, any_extension: bool) -> None:
    """Reject local files that are not named like JSON or YAML."""
    from specbook.parser.loader import SPEC_EXTENSIONS, is_url

    if any_extension or source == "-" or is_url(source):
        return
    if Path(source).suffix.lower() not in SPEC_EXTENSIONS:
        raise InvalidUsageError(
            f"File must be either JSON or YAML ({', '.join(SPEC_EXTENSIONS)}): {source}. "
            "Pass --any-extension to skip this check."
        )


def _write_archive(path: Path, data: bytes, force: bool) -> None:
    from specbook.config import atomic_write

    if path.exists() and not force:
        raise InvalidUsageError(f"{path} already exists. Use --force to overwrite.")
    try:
        atomic_write(path, data)
    except OSError as exc:
        raise BundleError(f"Failed to write {path}: {exc}") from exc
