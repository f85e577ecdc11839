"""
Path Filter Engine
=================

Keeps or drops items by the part of their link that follows the host.

For ``https://www.heise.de/security/meldung/x.html`` the path segment is
``security/meldung/x.html``; a whitelist entry matches when the segment
starts with it.
"""

from typing import Iterable, List, Sequence

from ..core.models import CanonicalItem
from ..utils.exceptions import PathSegmentError


def path_segment(link: str) -> str:
    """Return the remainder of ``link`` after ``scheme://host/``.

    Raises:
        PathSegmentError: If the link has fewer than four '/'-delimited parts
    """
    parts = link.split("/", 3)
    if len(parts) < 4:
        raise PathSegmentError(link)
    return parts[3]


def matches(segment: str, whitelist: Iterable[str]) -> bool:
    """True when any whitelist entry is a prefix of ``segment``."""
    return any(segment.startswith(prefix) for prefix in whitelist)


def is_retained(link: str, whitelist: Sequence[str], include: bool) -> bool:
    """Filter predicate: allow-list when ``include``, block-list otherwise."""
    return matches(path_segment(link), whitelist) == include


def filter_items(
    items: Iterable[CanonicalItem],
    whitelist: Sequence[str],
    include: bool,
    logger=None,
) -> List[CanonicalItem]:
    """Return retained items in their original order.

    Items whose link has no path segment are dropped.
    """
    retained = []
    for item in items:
        try:
            keep = is_retained(item.link, whitelist, include)
        except PathSegmentError as e:
            if logger:
                logger.warning(f"Dropping item without path segment: {e}", extra=e.to_dict())
            continue
        if keep:
            retained.append(item)
    return retained
