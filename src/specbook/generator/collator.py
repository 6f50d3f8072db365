"""Group API operations by the tags they declare.

Walks ``paths`` in declaration order, flattens it into
:class:`~specbook.models.Endpoint` objects and files each endpoint under
every tag it lists. Operations without tags go into a synthetic
``__internal-untagged`` group.

Groups are keyed by tag *name* and kept in first-insertion order: a tag's
position in the result is the position of the first operation that used it,
not its position in the document's ``tags`` list. Declared tags that no
operation uses never get a group.
"""

from __future__ import annotations

import logging

from specbook.exceptions import ConfigError, UnknownTagReferenceError
from specbook.models import (
    UNTAGGED_TAG_NAME,
    Endpoint,
    ResolvedDocument,
    TagGroup,
    TagObject,
    UnknownTagPolicy,
)

logger = logging.getLogger(__name__)


def flatten_endpoints(document: ResolvedDocument) -> list[Endpoint]:
    """Return every operation in *document* as an :class:`Endpoint`.

    Order follows the document: paths as declared, then methods as declared
    within each path.
    """
    return [
        Endpoint(path=path, method=method, operation=operation)
        for path, path_item in document.paths.items()
        for method, operation in path_item.operations()
    ]


def collate(
    document: ResolvedDocument,
    unknown_tags: UnknownTagPolicy | str = UnknownTagPolicy.ERROR,
) -> dict[str, TagGroup]:
    """Group the endpoints of *document* by tag.

    An endpoint listing N tags lands in N groups; an endpoint listing none
    lands in the untagged group only. Repeated tag names on one operation
    are not deduplicated.

    Args:
        document: The validated document.
        unknown_tags: What to do with tag names missing from
            ``document.tags``. ``"error"`` raises, ``"placeholder"`` invents
            a bare :class:`TagObject` for each such name.

    Returns:
        Mapping of tag name to :class:`TagGroup`, in first-use order.

    Raises:
        ConfigError: If *unknown_tags* is not a known policy.
        UnknownTagReferenceError: If *unknown_tags* is ``"error"`` and some
            operation names an undeclared tag.
    """
    try:
        policy = UnknownTagPolicy(unknown_tags)
    except ValueError as exc:
        choices = ", ".join(p.value for p in UnknownTagPolicy)
        raise ConfigError(
            f"Invalid unknown-tag policy '{unknown_tags}': expected one of {choices}"
        ) from exc
    untagged = TagObject(name=UNTAGGED_TAG_NAME)
    endpoints = flatten_endpoints(document)
    placeholders = _check_references(document, endpoints, policy)

    groups: dict[str, TagGroup] = {}
    for endpoint in endpoints:
        if not endpoint.operation.tags:
            _append(groups, untagged, endpoint)
            continue
        for tag_name in endpoint.operation.tags:
            tag = document.find_tag(tag_name) or placeholders[tag_name]
            _append(groups, tag, endpoint)

    logger.debug(
        "Collated %d endpoints into %d tag groups", len(endpoints), len(groups)
    )
    return groups


def _check_references(
    document: ResolvedDocument,
    endpoints: list[Endpoint],
    policy: UnknownTagPolicy,
) -> dict[str, TagObject]:
    """Find undeclared tag references before any grouping happens.

    Returns the placeholder tags to use under the ``placeholder`` policy.
    """
    missing: list[tuple[str, str, str]] = []
    placeholders: dict[str, TagObject] = {}
    for endpoint in endpoints:
        for tag_name in endpoint.operation.tags:
            if document.find_tag(tag_name) is not None:
                continue
            missing.append((endpoint.method, endpoint.path, tag_name))
            if tag_name not in placeholders:
                placeholders[tag_name] = TagObject(name=tag_name)

    if missing and policy is UnknownTagPolicy.ERROR:
        raise UnknownTagReferenceError(missing)
    return placeholders


def _append(groups: dict[str, TagGroup], tag: TagObject, endpoint: Endpoint) -> None:
    group = groups.get(tag.name)
    if group is None:
        group = groups[tag.name] = TagGroup(tag=tag)
    group.endpoints.append(endpoint)
