"""Shared fixtures: small in-memory PPTX archives."""

import io
import zipfile
from typing import Callable, Dict, Iterable, Union

import pytest

NS_P = "http://schemas.openxmlformats.org/presentationml/2006/main"
NS_R = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
NS_A = "http://schemas.openxmlformats.org/drawingml/2006/main"
XML_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

CONTENT_TYPES = (
    XML_DECL
    + '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" '
    'ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="jpeg" ContentType="image/jpeg"/>'
    "</Types>"
)

ROOT_RELS = (
    XML_DECL
    + '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    '<Relationship Id="rId1" '
    'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
    'Target="ppt/presentation.xml"/>'
    "</Relationships>"
)

PRESENTATION = (
    XML_DECL + f'<p:presentation xmlns:a="{NS_A}" xmlns:r="{NS_R}" xmlns:p="{NS_P}">'
    '<p:sldMasterIdLst><p:sldMasterId id="2147483648" r:id="rId1"/></p:sldMasterIdLst>'
    "<p:sldIdLst>"
    '<p:sldId id="262" r:id="rId5"/>'
    '<p:sldId id="261" r:id="rId6"/>'
    '<p:sldId id="267" r:id="rId7"/>'
    "</p:sldIdLst>"
    '<p:sldSz cx="12192000" cy="6858000"/>'
    "</p:presentation>"
)

SLIDE = (
    XML_DECL + f'<p:sld xmlns:a="{NS_A}" xmlns:r="{NS_R}" xmlns:p="{NS_P}">'
    "<p:cSld><p:spTree>\n  <p:sp><p:txBody><a:p><a:r>"
    "<a:t>Q3 &amp; Q4 results</a:t>"
    "</a:r></a:p></p:txBody></p:sp>\n</p:spTree></p:cSld></p:sld>"
)


def layout_xml(layout_type: Union[str, None], name: str) -> str:
    type_attr = f' type="{layout_type}"' if layout_type else ""
    return (
        XML_DECL + f'<p:sldLayout xmlns:a="{NS_A}" xmlns:r="{NS_R}" '
        f'xmlns:p="{NS_P}"{type_attr} preserve="1">'
        f'<p:cSld name="{name}"/></p:sldLayout>'
    )


JPEG = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00fake-image-data\xff\xd9"


def build_zip(
    entries: Dict[str, Union[str, bytes]],
    directories: Iterable[str] = (),
    compression: int = zipfile.ZIP_DEFLATED,
) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression) as zf:
        for directory in directories:
            zf.writestr(directory, b"")
        for path, content in entries.items():
            zf.writestr(path, content)
    return buffer.getvalue()


@pytest.fixture
def sample_entries() -> Dict[str, Union[str, bytes]]:
    return {
        "[Content_Types].xml": CONTENT_TYPES,
        "_rels/.rels": ROOT_RELS,
        "ppt/presentation.xml": PRESENTATION,
        "ppt/slides/slide1.xml": SLIDE,
        "ppt/slideLayouts/slideLayout1.xml": layout_xml("title", "Title Slide"),
        "ppt/slideLayouts/slideLayout2.xml": layout_xml("blank", "Blank"),
        "ppt/slideLayouts/slideLayout3.xml": layout_xml(None, "Custom"),
        "ppt/media/image1.jpeg": JPEG,
        "docProps/thumbnail": b"\x89PNG\r\n\x1a\nthumb",
    }


@pytest.fixture
def sample_pptx(sample_entries: Dict[str, Union[str, bytes]]) -> bytes:
    return build_zip(sample_entries, directories=["ppt/", "ppt/media/"])


@pytest.fixture
def make_pptx() -> Callable[..., bytes]:
    """Factory building an archive from a path -> content dict."""
    return build_zip
