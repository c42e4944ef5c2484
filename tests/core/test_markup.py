"""Tests for the XML <-> Node codec."""

import pytest

from pptx2json.core.markup import (
    MarkupError,
    local_name,
    parse_markup,
    serialize_markup,
)
from pptx2json.core.parts import MarkupPart, Node


def test_parse_keeps_qualified_names_and_namespace_declarations() -> None:
    part = parse_markup(
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        '<p:presentation xmlns:p="urn:p" xmlns:r="urn:r">'
        '<p:sldIdLst><p:sldId id="256" r:id="rId2"/></p:sldIdLst>'
        "</p:presentation>"
    )

    root = part.root
    assert part.standalone is True
    assert root.tag == "p:presentation"
    assert root.attributes == {"xmlns:p": "urn:p", "xmlns:r": "urn:r"}
    sld_id = root.find("p:sldIdLst").find("p:sldId")
    assert sld_id.attributes == {"id": "256", "r:id": "rId2"}
    assert sld_id.children == []


def test_parse_without_declaration_has_no_standalone_flag() -> None:
    assert parse_markup("<a/>").standalone is None
    assert parse_markup('<?xml version="1.0" standalone="no"?><a/>').standalone is False


def test_parse_keeps_mixed_content_in_order() -> None:
    part = parse_markup("<a:p>\n  <a:t>one &amp; two</a:t> tail<![CDATA[<x>]]></a:p>")

    children = part.root.children
    assert children[0] == "\n  "
    assert children[1] == Node(tag="a:t", children=["one & two"])
    # adjacent text and CDATA merge into one run
    assert children[2] == " tail<x>"
    assert len(children) == 3


def test_parse_accepts_bytes_in_declared_encoding() -> None:
    data = '<?xml version="1.0" encoding="UTF-16"?><t>héllo</t>'.encode("utf-16")
    assert parse_markup(data).root.text == "héllo"


@pytest.mark.parametrize(
    "text",
    ["", "<a>", "<a></b>", "<a x='1' x='2'/>", "not xml", "<a/><b/>"],
)
def test_parse_rejects_malformed_markup(text: str) -> None:
    with pytest.raises(MarkupError):
        parse_markup(text)


def test_serialize_is_compact_and_deterministic() -> None:
    part = MarkupPart(
        root=Node(
            tag="p:sld",
            attributes={"xmlns:p": "urn:p", "show": "0"},
            children=[Node(tag="p:cSld", attributes={"name": "A"}), "x"],
        ),
        standalone=True,
    )

    text = serialize_markup(part)
    assert text == (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<p:sld xmlns:p="urn:p" show="0"><p:cSld name="A"/>x</p:sld>'
    )
    assert serialize_markup(part) == text


def test_serialize_without_declaration() -> None:
    part = MarkupPart(root=Node(tag="a"), standalone=True)
    assert serialize_markup(part, xml_declaration=False) == "<a/>"


def test_serialize_escapes_text_and_attributes() -> None:
    part = MarkupPart(
        root=Node(
            tag="a:t",
            attributes={"title": 'say "hi" <&>\n\tnow'},
            children=["1 < 2 & 3 > 2\r\n"],
        )
    )

    text = serialize_markup(part, xml_declaration=False)
    assert "&quot;hi&quot;" in text
    assert "&#10;&#9;" in text
    assert "1 &lt; 2 &amp; 3 &gt; 2&#13;\n" in text
    assert parse_markup(text) == part


def test_serialize_then_parse_gives_equal_tree() -> None:
    source = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<Relationships xmlns="urn:rels">'
        '<Relationship Id="rId1" Type="urn:slide" Target="slides/slide1.xml"/>'
        "<Note>  spaced  </Note>"
        "</Relationships>"
    )
    part = parse_markup(source)
    assert parse_markup(serialize_markup(part)) == part


@pytest.mark.parametrize(
    "root",
    [
        Node(tag="1bad"),
        Node(tag="has space"),
        Node(tag="a", attributes={"bad name": "x"}),
        Node(tag="a", children=["bell \x07"]),
        Node(tag="a", attributes={"v": "nul \x00"}),
    ],
)
def test_serialize_rejects_unrepresentable_trees(root: Node) -> None:
    with pytest.raises(MarkupError):
        serialize_markup(MarkupPart(root=root))


def test_serialize_rejects_non_string_values_added_after_construction() -> None:
    root = Node(tag="a")
    root.attributes["count"] = 3
    with pytest.raises(MarkupError):
        serialize_markup(MarkupPart(root=root))

    root = Node(tag="a")
    root.children.append(3.5)
    with pytest.raises(MarkupError):
        serialize_markup(MarkupPart(root=root))


@pytest.mark.parametrize("extra", ["", "more"])
def test_serialize_rejects_text_runs_that_would_not_read_back(extra: str) -> None:
    root = Node(tag="a", children=["text"])
    root.children.append(extra)

    with pytest.raises(MarkupError, match="adjacent"):
        serialize_markup(MarkupPart(root=root))


def test_local_name() -> None:
    assert local_name("p:sldId") == "sldId"
    assert local_name("Relationship") == "Relationship"
