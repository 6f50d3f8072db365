"""Exception hierarchy for specbook.

All exceptions inherit from :class:`SpecbookError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specbook.exit_codes`.
The top-level error handler in :func:`specbook.app.main` catches
``SpecbookError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SpecbookError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- ConfigError                (exit 1)
    +-- BundleError                (exit 1)
    +-- SpecSourceError            (exit 6)
    +-- SpecSyntaxError            (exit 7)
    +-- SchemaInvalidError         (exit 8)
    |   +-- DuplicateTagError      (exit 8)
    +-- UnknownTagReferenceError   (exit 9)
"""

from __future__ import annotations

from specbook.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SCHEMA_INVALID,
    EXIT_SOURCE_ERROR,
    EXIT_SYNTAX_ERROR,
    EXIT_UNKNOWN_TAG,
)


class SpecbookError(Exception):
    """Base exception for all specbook errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specbook.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecbookError):
    """Raised for invalid CLI arguments (bad extension, existing output file)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(SpecbookError):
    """Raised for configuration problems (invalid JSON, unknown keys)."""

    exit_code = EXIT_GENERIC_FAILURE


class BundleError(SpecbookError):
    """Raised when the archive cannot be written or read back."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecSourceError(SpecbookError):
    """Raised when the spec source cannot be read (file, URL or stdin)."""

    exit_code = EXIT_SOURCE_ERROR


class SpecSyntaxError(SpecbookError):
    """Raised when the spec text is neither valid JSON nor valid YAML."""

    exit_code = EXIT_SYNTAX_ERROR


class SchemaInvalidError(SpecbookError):
    """Raised when the document fails OpenAPI structural validation or ``$ref`` resolution."""

    exit_code = EXIT_SCHEMA_INVALID


class DuplicateTagError(SchemaInvalidError):
    """Raised when two entries of the top-level ``tags`` list share a name."""


class UnknownTagReferenceError(SpecbookError):
    """Raised when an operation lists a tag name absent from the document's ``tags``.

    Args:
        references: ``(method, path, tag_name)`` triples for every offending
            operation, in document order.
    """

    exit_code = EXIT_UNKNOWN_TAG

    def __init__(self, references: list[tuple[str, str, str]]):
        self.references = references
        lines = [
            f"  {method.upper()} {path} -> '{tag}'" for method, path, tag in references
        ]
        super().__init__(
            "Operations reference undeclared tags:\n" + "\n".join(lines)
        )
