"""
In-memory model of a decoded presentation package.

A package maps each archive path to a part. Parts whose path ends in
``.xml`` or ``.rels`` are markup and hold a node tree; everything else
(images, audio, fonts, embedded workbooks) is kept as opaque bytes.
"""

import logging
import posixpath
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

logger = logging.getLogger(__name__)

__all__ = [
    "MARKUP_EXTENSIONS",
    "BinaryPart",
    "MarkupPart",
    "Node",
    "Package",
    "Part",
    "PartKind",
    "classify_path",
    "dump_package_json",
    "is_markup_path",
    "load_package_json",
]

MARKUP_EXTENSIONS = frozenset({"xml", "rels"})


class PartKind(str, Enum):
    MARKUP = "markup"
    BINARY = "binary"


def classify_path(path: str) -> PartKind:
    """Classify an archive path by its extension.

    The extension is whatever follows the last ``.`` of the final path
    segment, compared case-sensitively, so the package-level
    ``_rels/.rels`` is markup. Paths without a dot are binary.
    """
    name = posixpath.basename(path)
    if "." in name and name.rpartition(".")[2] in MARKUP_EXTENSIONS:
        return PartKind.MARKUP
    return PartKind.BINARY


def is_markup_path(path: str) -> bool:
    return classify_path(path) is PartKind.MARKUP


class Node(BaseModel):
    """A markup element: qualified tag, attributes, and ordered children.

    Children are either nested nodes or text runs. Namespace declarations
    (``xmlns``, ``xmlns:p``) are kept as ordinary attributes.
    Adjacent text runs are merged and empty runs dropped, the same shape
    the parser produces.
    """

    tag: str
    attributes: Dict[str, str] = Field(default_factory=dict)
    children: List[Union["Node", str]] = Field(default_factory=list)

    @field_validator("children")
    @classmethod
    def _merge_text(
        cls, children: List[Union["Node", str]]
    ) -> List[Union["Node", str]]:
        merged: List[Union["Node", str]] = []
        for child in children:
            if isinstance(child, str):
                if not child:
                    continue
                if merged and isinstance(merged[-1], str):
                    merged[-1] += child
                    continue
            merged.append(child)
        return merged

    def find(self, tag: str) -> Optional["Node"]:
        """Return the first child element with the given tag."""
        for child in self.children:
            if isinstance(child, Node) and child.tag == tag:
                return child
        return None

    def findall(self, tag: str) -> List["Node"]:
        """Return all child elements with the given tag, in document order."""
        return [
            child
            for child in self.children
            if isinstance(child, Node) and child.tag == tag
        ]

    def elements(self) -> List["Node"]:
        return [child for child in self.children if isinstance(child, Node)]

    @property
    def text(self) -> str:
        """Concatenated text runs directly under this node."""
        return "".join(child for child in self.children if isinstance(child, str))


class MarkupPart(BaseModel):
    kind: Literal["markup"] = "markup"
    root: Node
    # standalone flag of the XML declaration, None when absent
    standalone: Optional[bool] = None


class BinaryPart(BaseModel):
    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    kind: Literal["binary"] = "binary"
    data: bytes


Part = Annotated[Union[MarkupPart, BinaryPart], Field(discriminator="kind")]
Package = Dict[str, Part]

_package_adapter: TypeAdapter = TypeAdapter(Package)


def dump_package_json(package: Package, indent: Optional[int] = None) -> str:
    """Serialize a package to JSON, with binary parts base64-encoded."""
    return _package_adapter.dump_json(package, indent=indent).decode("utf-8")


def load_package_json(text: Union[str, bytes]) -> Package:
    """Rebuild a package from the output of :func:`dump_package_json`."""
    package = _package_adapter.validate_json(text)
    logger.debug(f"Loaded package with {len(package)} parts from JSON")
    return package
