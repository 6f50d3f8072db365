"""Canonical Pydantic models shared across all specbook modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`BundleConfig`, :class:`OutputConfig` and :class:`GlobalConfig`.

**Document models** -- the validated, ``$ref``-free OpenAPI document produced
by the parser:
    :class:`HTTPMethod`, :class:`ExternalDocs`, :class:`TagObject`,
    :class:`Operation`, :class:`PathItem`, :class:`Info` and
    :class:`ResolvedDocument`.

**Pipeline models** -- intermediate and final products of a bundle run:
    :class:`Endpoint`, :class:`TagGroup`, :class:`GitBookFile` and
    :class:`Bundle`.

Document models are frozen and use ``extra="allow"`` so that OpenAPI fields
specbook does not care about pass through untouched.
"""

from __future__ import annotations

import datetime
import enum
from typing import Any, Iterator, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator


# --- Config ---


class UnknownTagPolicy(str, enum.Enum):
    """What to do when an operation names a tag the document never declares.

    ``ERROR`` rejects the whole run; ``PLACEHOLDER`` synthesizes a bare
    :class:`TagObject` carrying only the referenced name.
    """

    ERROR = "error"
    PLACEHOLDER = "placeholder"


class BundleConfig(BaseModel):
    """Defaults for ``specbook build``."""

    unknown_tags: UnknownTagPolicy = Field(
        default=UnknownTagPolicy.ERROR,
        description="Policy for undeclared tag references: error, placeholder",
    )
    output: str = Field(
        default="bundle.zip", description="Default archive path for build"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specbook/config.json``.

    Loaded and saved by :func:`~specbook.config.load_global_config` and
    :func:`~specbook.config.save_global_config`. Fields here have the
    lowest precedence; see :func:`~specbook.config.resolve_config` for the
    full chain.
    """

    bundle: BundleConfig = Field(default_factory=BundleConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Document ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised as operations inside an OpenAPI path item."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)

UNTAGGED_TAG_NAME = "__internal-untagged"
"""Name of the synthetic tag that collects operations declaring no tags."""


def _scalar_to_str(value: Any) -> Any:
    """Turn YAML-typed scalars back into the text the author wrote.

    YAML 1.1 reads unquoted ``1.0`` as a float and ``2023-10-16`` as a date.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, datetime.date):
        return value.isoformat()
    return value


class ExternalDocs(BaseModel):
    """An OpenAPI *External Documentation Object*."""

    model_config = ConfigDict(extra="allow", frozen=True)

    url: str
    description: Optional[str] = None


class TagObject(BaseModel):
    """An entry of the document's top-level ``tags`` list.

    The ``name`` doubles as the grouping key and, after escaping, as the
    page file name.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = Field(default=None, alias="externalDocs")


class Operation(BaseModel):
    """An OpenAPI *Operation Object*.

    Only ``tags`` matters to the pipeline; the remaining fields are kept for
    display and everything else rides along in ``model_extra``.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    tags: list[str] = Field(default_factory=list)
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("tags")
    @classmethod
    def _non_empty_tags(cls, value: list[str]) -> list[str]:
        if any(not name for name in value):
            raise ValueError("tag names must not be empty")
        return value


class PathItem(RootModel[dict[str, Any]]):
    """An OpenAPI *Path Item Object*.

    Kept as the raw mapping so key order survives; HTTP-method entries are
    validated into :class:`Operation` instances while shared ``parameters``,
    ``summary`` and ``x-*`` keys pass through as-is.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _validate_operations(cls, value: dict[str, Any]) -> dict[str, Any]:
        validated: dict[str, Any] = {}
        for key, item in value.items():
            if key in _HTTP_METHODS:
                if isinstance(item, Operation):
                    validated[key] = item
                    continue
                if not isinstance(item, dict):
                    raise ValueError(
                        f"operation '{key}' must be a mapping, got {type(item).__name__}"
                    )
                validated[key] = Operation.model_validate(item)
            else:
                validated[key] = item
        return validated

    def operations(self) -> Iterator[tuple[str, Operation]]:
        """Yield ``(method, operation)`` pairs in declaration order."""
        for key, item in self.root.items():
            if isinstance(item, Operation):
                yield key, item


class Info(BaseModel):
    """The document's *Info Object*."""

    model_config = ConfigDict(extra="allow", frozen=True)

    title: str
    version: str
    description: Optional[str] = None

    @field_validator("version", mode="before")
    @classmethod
    def _stringify_version(cls, value: Any) -> Any:
        return _scalar_to_str(value)


class ResolvedDocument(BaseModel):
    """A validated OpenAPI 3.x document with every ``$ref`` already inlined.

    Produced by :func:`~specbook.parser.parse_spec` and treated as read-only
    by every later stage.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    openapi: str
    info: Info
    paths: dict[str, PathItem] = Field(default_factory=dict)
    tags: list[TagObject] = Field(default_factory=list)

    @field_validator("openapi", mode="before")
    @classmethod
    def _stringify_openapi(cls, value: Any) -> Any:
        return _scalar_to_str(value)

    @field_validator("paths", mode="before")
    @classmethod
    def _null_paths(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("paths")
    @classmethod
    def _check_path_keys(cls, value: dict[str, PathItem]) -> dict[str, PathItem]:
        for path in value:
            if not path.startswith("/"):
                raise ValueError(f"path '{path}' must start with '/'")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value: Any) -> Any:
        return [] if value is None else value

    def find_tag(self, name: str) -> Optional[TagObject]:
        """Return the first declared tag called *name*, or ``None``."""
        for tag in self.tags:
            if tag.name == name:
                return tag
        return None


# --- Pipeline ---


class Endpoint(BaseModel):
    """One operation flattened out of ``paths``: a path plus an HTTP method."""

    model_config = ConfigDict(frozen=True)

    path: str
    method: str
    operation: Operation


class TagGroup(BaseModel):
    """A tag together with every endpoint listing it, in document order."""

    tag: TagObject
    endpoints: list[Endpoint] = Field(default_factory=list)


class GitBookFile(BaseModel):
    """A virtual file destined for the archive."""

    path: str
    contents: str


class Bundle(BaseModel):
    """Everything a bundle run produced.

    ``archive`` holds the zip bytes; the other fields are kept so callers
    such as ``specbook inspect`` can report on the run without reopening the
    archive.
    """

    document: ResolvedDocument
    groups: dict[str, TagGroup]
    pages: list[GitBookFile]
    archive: bytes
