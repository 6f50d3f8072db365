"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specbook.exceptions.SpecbookError` subclass.
Wrapper scripts can inspect the exit code to tell a broken upload from a
broken spec without parsing stderr.

Example::

    $ specbook build petstore.yaml
    $ echo $?
    9   # EXIT_UNKNOWN_TAG -- an operation names an undeclared tag
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_SOURCE_ERROR = 6
"""The spec source could not be read (missing file, network failure)."""

EXIT_SYNTAX_ERROR = 7
"""The spec text is not valid JSON or YAML."""

EXIT_SCHEMA_INVALID = 8
"""The spec is not a structurally valid OpenAPI 3.x document, or a ``$ref`` could not be resolved."""

EXIT_UNKNOWN_TAG = 9
"""An operation references a tag that the document does not declare."""
