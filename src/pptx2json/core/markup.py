"""
Markup codec: XML text <-> Node trees.

Parsing runs expat without namespace processing so tags and attributes
keep the qualified names written in the part (``p:sldId``, ``r:id``) and
namespace declarations survive as plain attributes. Serialization is
compact: no indentation or other whitespace is added.
"""

import re
from typing import List, Optional, Union
from xml.parsers import expat
from xml.sax.saxutils import escape

from .parts import MarkupPart, Node

__all__ = ["MarkupError", "local_name", "parse_markup", "serialize_markup"]

_NAME_PATTERN = re.compile(r"^[^\W\d][\w.\-:]*$")
_INVALID_CHARS = re.compile(
    "[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)

_TEXT_ENTITIES = {"\r": "&#13;"}
_ATTR_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}


class MarkupError(ValueError):
    """Raised when XML cannot be parsed or a node tree cannot be written."""


def local_name(qname: str) -> str:
    """Strip the namespace prefix from a qualified name."""
    return qname.rpartition(":")[2]


def parse_markup(text: Union[str, bytes]) -> MarkupPart:
    """
    Parse an XML document into a MarkupPart.

    Args:
        text: Document as text, or as bytes in the encoding its declaration names

    Returns:
        MarkupPart with the root node and the declaration's standalone flag

    Raises:
        MarkupError: If the document is not well-formed
    """
    parser = expat.ParserCreate("utf-8" if isinstance(text, str) else None)
    parser.buffer_text = True

    stack: List[Node] = []
    roots: List[Node] = []
    declaration = {"standalone": None}

    def on_xml_decl(version, encoding, standalone):
        if standalone != -1:
            declaration["standalone"] = bool(standalone)

    def on_start(name, attributes):
        stack.append(Node(tag=name, attributes=attributes))

    def on_end(name):
        node = stack.pop()
        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)

    def on_text(data):
        # Whitespace around the root element is not part of the tree
        if not stack:
            return
        children = stack[-1].children
        if children and isinstance(children[-1], str):
            children[-1] += data
        else:
            children.append(data)

    parser.XmlDeclHandler = on_xml_decl
    parser.StartElementHandler = on_start
    parser.EndElementHandler = on_end
    parser.CharacterDataHandler = on_text

    try:
        parser.Parse(text, True)
    except expat.ExpatError as e:
        raise MarkupError(str(e)) from e

    return MarkupPart(root=roots[0], standalone=declaration["standalone"])


def _check_name(name: object) -> str:
    if not isinstance(name, str) or not _NAME_PATTERN.match(name):
        raise MarkupError(f"Invalid XML name: {name!r}")
    return name


def _check_text(value: object, where: str) -> str:
    if not isinstance(value, str):
        raise MarkupError(f"{where} must be a string, got {type(value).__name__}")
    match = _INVALID_CHARS.search(value)
    if match:
        raise MarkupError(
            f"{where} contains a character not allowed in XML: {match.group()!r}"
        )
    return value


def _write_node(node: Node, out: List[str]) -> None:
    tag = _check_name(node.tag)
    out.append(f"<{tag}")
    for name, value in node.attributes.items():
        _check_name(name)
        value = _check_text(value, f"Attribute {name!r} of <{tag}>")
        out.append(f' {name}="{escape(value, _ATTR_ENTITIES)}"')

    if not node.children:
        out.append("/>")
        return

    out.append(">")
    previous: object = None
    for child in node.children:
        if isinstance(child, Node):
            _write_node(child, out)
        else:
            text = _check_text(child, f"Text of <{tag}>")
            # would not read back as the same children
            if not text or isinstance(previous, str):
                raise MarkupError(
                    f"Text of <{tag}> has empty or adjacent runs; "
                    "rebuild the node to merge them"
                )
            out.append(escape(text, _TEXT_ENTITIES))
        previous = child
    out.append(f"</{tag}>")


def serialize_markup(part: MarkupPart, xml_declaration: bool = True) -> str:
    """
    Serialize a MarkupPart to compact XML text.

    Output is deterministic: attributes keep their mapping order and no
    whitespace is introduced between elements.

    Raises:
        MarkupError: If a name, attribute value or text run cannot be
            represented in XML 1.0, or text runs are empty or adjacent
    """
    out: List[str] = []
    if xml_declaration:
        standalone: Optional[str] = None
        if part.standalone is not None:
            standalone = "yes" if part.standalone else "no"
        out.append('<?xml version="1.0" encoding="UTF-8"')
        if standalone:
            out.append(f' standalone="{standalone}"')
        out.append("?>")

    try:
        _write_node(part.root, out)
    except RecursionError as e:
        raise MarkupError("Node tree is too deeply nested") from e
    return "".join(out)
