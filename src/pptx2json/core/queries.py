"""
Read-only lookups over a decoded presentation package.

Element names are matched on their local part, so ``p:sldId`` and a
differently prefixed ``pml:sldId`` are treated alike.
"""

import logging
import re
from typing import Dict, Iterator, Mapping, NamedTuple, Optional

from .markup import local_name
from .parts import MarkupPart, Node

logger = logging.getLogger(__name__)

__all__ = [
    "PRESENTATION_PATH",
    "SLIDE_LAYOUTS_DIR",
    "SlideIds",
    "get_max_slide_ids",
    "get_next_slide_ids",
    "get_slide_layout_type_index",
]

PRESENTATION_PATH = "ppt/presentation.xml"
SLIDE_LAYOUTS_DIR = "ppt/slideLayouts/"

# slideLayout1.xml, but not _rels/slideLayout1.xml.rels or slide_layout.xml
_LAYOUT_PATH_PATTERN = re.compile(rf"^{re.escape(SLIDE_LAYOUTS_DIR)}[^/_]+\.xml$")

RID_PREFIX = "rId"
# Slide ids below 256 are reserved by the file format
FIRST_SLIDE_ID = 256
FIRST_RID = 1


class SlideIds(NamedTuple):
    """Slide id / relationship number pair; -1 means none present."""

    id: int
    rid: int


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _relationship_id(node: Node) -> Optional[str]:
    """Return the ``r:id`` attribute, whatever prefix the document bound."""
    value = node.attributes.get("r:id")
    if value is not None:
        return value
    for name, value in node.attributes.items():
        if ":" in name and not name.startswith("xmlns") and local_name(name) == "id":
            return value
    return None


def _iter_slide_refs(package: Mapping[str, object]) -> Iterator[Node]:
    part = package.get(PRESENTATION_PATH)
    if not isinstance(part, MarkupPart):
        return
    for group in part.root.elements():
        if local_name(group.tag) != "sldIdLst":
            continue
        for ref in group.elements():
            if local_name(ref.tag) == "sldId":
                yield ref


def get_max_slide_ids(package: Mapping[str, object]) -> SlideIds:
    """
    Find the largest slide id and relationship number referenced by the
    presentation manifest.

    Every ``sldId`` record of every ``sldIdLst`` group is considered. A
    missing manifest or an empty slide list is a normal state (a deck
    with no slides) and yields ``SlideIds(-1, -1)``.

    Args:
        package: Decoded package

    Returns:
        SlideIds with the maximum ``id`` and the maximum ``rIdN`` suffix
    """
    max_id = -1
    max_rid = -1
    for ref in _iter_slide_refs(package):
        slide_id = _parse_int(ref.attributes.get("id"))
        if slide_id is None:
            logger.debug(f"Ignoring slide reference with bad id: {ref.attributes}")
        else:
            max_id = max(max_id, slide_id)

        rid = _relationship_id(ref)
        rid_number = None
        if rid is not None and rid.startswith(RID_PREFIX):
            rid_number = _parse_int(rid[len(RID_PREFIX) :])
        if rid_number is None:
            logger.debug(f"Ignoring slide reference with bad r:id: {ref.attributes}")
        else:
            max_rid = max(max_rid, rid_number)

    return SlideIds(id=max_id, rid=max_rid)


def get_next_slide_ids(package: Mapping[str, object]) -> SlideIds:
    """Return the next free slide id and relationship number."""
    current = get_max_slide_ids(package)
    return SlideIds(
        id=max(current.id + 1, FIRST_SLIDE_ID),
        rid=max(current.rid + 1, FIRST_RID),
    )


def get_slide_layout_type_index(package: Mapping[str, object]) -> Dict[str, str]:
    """
    Map each layout type (``title``, ``blank``, ``obj`` ...) to the path
    of the slide layout declaring it.

    Layouts without a ``type`` attribute on their ``sldLayout`` root are
    left out. When two layouts declare the same type, the one that comes
    later in the package's key order wins; for a decoded package that is
    archive order.
    """
    index: Dict[str, str] = {}
    for path, part in package.items():
        if not isinstance(part, MarkupPart) or not _LAYOUT_PATH_PATTERN.match(path):
            continue
        if local_name(part.root.tag) != "sldLayout":
            continue

        layout_type = part.root.attributes.get("type")
        if layout_type is None:
            continue
        if layout_type in index:
            logger.debug(
                f"Layout type {layout_type!r} of {index[layout_type]} "
                f"overridden by {path}"
            )
        index[layout_type] = path
    return index
