"""Resolve ``$ref`` JSON Reference pointers in OpenAPI specifications.

OpenAPI documents commonly use ``$ref`` pointers to avoid repetition or to
split a large API across files. This module performs a recursive deep-copy
traversal of the spec, replacing every ``$ref`` with the object it points at,
so later stages see a self-contained tree.

Three kinds of reference are handled:

* internal -- ``#/components/schemas/Pet``
* relative file -- ``common.yaml#/components/schemas/Error``, resolved
  against the location of the document that contains the reference
* remote -- ``https://example.com/schemas.json#/Error``

Each external document is fetched at most once per :func:`resolve_refs` call.

Circular references are detected via a ``seen`` set and left unresolved to
prevent infinite recursion. A schema that references itself (common in
tree-like structures) will retain its ``$ref`` dict at the cycle point.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import urljoin

from specbook.exceptions import SchemaInvalidError, SpecbookError
from specbook.parser.loader import is_url, load_document

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], dict[str, Any]]
"""Signature of the callable that loads an external document by location."""


def resolve_refs(
    spec: dict[str, Any],
    base_uri: Optional[str] = None,
    fetch: Optional[Fetcher] = None,
) -> dict[str, Any]:
    """Resolve all ``$ref`` JSON Reference pointers in the spec.

    Creates a deep copy of the input and recursively replaces every ``$ref``
    dict with the object it points to.

    Args:
        spec: The parsed OpenAPI spec dictionary.
        base_uri: Location the spec was read from (file path or URL). Relative
            file references resolve against it; ``None`` means the current
            working directory.
        fetch: Loader for external documents. Defaults to
            :func:`~specbook.parser.loader.load_document`.

    Returns:
        A **new** dictionary with all resolvable ``$ref`` pointers replaced
        by their target objects.

    Raises:
        SchemaInvalidError: If a ``$ref`` points to a non-existent location
            or an external document cannot be loaded.

    Example::

        resolved = resolve_refs(raw, base_uri="specs/petstore.yaml")
        # resolved["paths"]["/pets"]["get"]["responses"]["200"]["content"]
        # now contains the inlined schema instead of a $ref pointer.
    """
    root = copy.deepcopy(spec)
    resolver = _Resolver(root, _normalize_uri(base_uri), fetch or load_document)
    return resolver.resolve(root, resolver.base_uri, frozenset())


def _normalize_uri(uri: Optional[str]) -> str:
    if not uri or uri == "-":
        return ""
    if is_url(uri):
        return uri.split("#", 1)[0]
    return str(Path(uri).resolve())


class _Resolver:
    """Holds the per-run document cache while walking the tree."""

    def __init__(self, root: dict[str, Any], base_uri: str, fetch: Fetcher) -> None:
        self.base_uri = base_uri
        self._fetch = fetch
        self._documents: dict[str, Any] = {base_uri: root}

    def resolve(self, obj: Any, doc_uri: str, seen: frozenset[str]) -> Any:
        """Recursively resolve all ``$ref`` pointers within *obj*.

        *doc_uri* is the document *obj* lives in; internal pointers found
        inside an external document refer to that document, not the root.
        ``seen`` holds the absolute references on the current resolution
        stack so sibling branches do not interfere with each other.
        """
        if isinstance(obj, dict):
            ref = obj.get("$ref")
            if isinstance(ref, str):
                target_uri, pointer = self._split(ref, doc_uri)
                key = f"{target_uri}#{pointer}"
                if key in seen:
                    # Circular reference -- return the $ref dict unresolved
                    return obj
                document = self._document(target_uri, ref)
                target = _resolve_pointer(pointer, document, ref)
                return self.resolve(target, target_uri, seen | {key})

            return {key: self.resolve(value, doc_uri, seen) for key, value in obj.items()}

        if isinstance(obj, list):
            return [self.resolve(item, doc_uri, seen) for item in obj]

        return obj

    def _split(self, ref: str, doc_uri: str) -> tuple[str, str]:
        """Split *ref* into an absolute document location and a JSON pointer."""
        target, _, pointer = ref.partition("#")
        if not target:
            return doc_uri, pointer
        if is_url(target):
            return target, pointer
        if is_url(doc_uri):
            return urljoin(doc_uri, target), pointer
        base_dir = Path(doc_uri).parent if doc_uri else Path.cwd()
        return str((base_dir / target).resolve()), pointer

    def _document(self, uri: str, ref: str) -> Any:
        if uri not in self._documents:
            logger.debug("Fetching external document %s", uri)
            try:
                self._documents[uri] = self._fetch(uri)
            except SpecbookError as exc:
                raise SchemaInvalidError(f"Cannot resolve $ref '{ref}': {exc}") from exc
        return self._documents[uri]


def _resolve_pointer(pointer: str, document: Any, ref: str) -> Any:
    """Navigate *document* along an RFC 6901 JSON Pointer.

    An empty pointer selects the whole document. ``~1`` decodes to ``/``
    and ``~0`` to ``~``.

    Raises:
        SchemaInvalidError: If any segment does not exist.
    """
    if not pointer:
        return document
    if not pointer.startswith("/"):
        raise SchemaInvalidError(
            f"Cannot resolve $ref '{ref}': fragment must be a JSON pointer"
        )

    current: Any = document
    for segment in pointer[1:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            # YAML loads unquoted status codes such as 200 as int keys
            if segment not in current and segment.isdigit() and int(segment) in current:
                current = current[int(segment)]
                continue
            if segment not in current:
                raise SchemaInvalidError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SchemaInvalidError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise SchemaInvalidError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current
