"""
pptx2json

Convert PowerPoint (OOXML) packages into editable in-memory parts and back.
"""

from .config import ErrorPolicy, TranscoderConfig
from .core import (
    ArchiveOpenError,
    BinaryPart,
    InvalidInputError,
    MarkupPart,
    Node,
    Package,
    Part,
    PartDecodeError,
    PartEncodeError,
    PartKind,
    PPTX2Json,
    PPTX2JsonError,
    SlideIds,
    classify_path,
    decode_package,
    dump_package_json,
    encode_package,
    get_max_slide_ids,
    get_next_slide_ids,
    get_slide_layout_type_index,
    load_package_json,
    to_json,
    to_pptx,
)

__version__ = "0.1.0"

__all__ = [
    "ArchiveOpenError",
    "BinaryPart",
    "ErrorPolicy",
    "InvalidInputError",
    "MarkupPart",
    "Node",
    "Package",
    "Part",
    "PartDecodeError",
    "PartEncodeError",
    "PartKind",
    "PPTX2Json",
    "PPTX2JsonError",
    "SlideIds",
    "TranscoderConfig",
    "classify_path",
    "decode_package",
    "dump_package_json",
    "encode_package",
    "get_max_slide_ids",
    "get_next_slide_ids",
    "get_slide_layout_type_index",
    "load_package_json",
    "to_json",
    "to_pptx",
]
