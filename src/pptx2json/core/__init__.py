"""
Core transcoding: archive access, markup codec, package model and queries.
"""

from .archive import ArchiveEntry, ArchiveWriter, list_entries, open_archive, read_entry
from .errors import (
    ArchiveOpenError,
    EntryReadError,
    InvalidInputError,
    PartDecodeError,
    PartEncodeError,
    PPTX2JsonError,
)
from .markup import MarkupError, local_name, parse_markup, serialize_markup
from .parts import (
    MARKUP_EXTENSIONS,
    BinaryPart,
    MarkupPart,
    Node,
    Package,
    Part,
    PartKind,
    classify_path,
    dump_package_json,
    is_markup_path,
    load_package_json,
)
from .queries import (
    SlideIds,
    get_max_slide_ids,
    get_next_slide_ids,
    get_slide_layout_type_index,
)
from .transcoder import PPTX2Json, decode_package, encode_package, to_json, to_pptx

__all__ = [
    # Archive
    "ArchiveEntry",
    "ArchiveWriter",
    "list_entries",
    "open_archive",
    "read_entry",
    # Errors
    "ArchiveOpenError",
    "EntryReadError",
    "InvalidInputError",
    "PartDecodeError",
    "PartEncodeError",
    "PPTX2JsonError",
    # Markup
    "MarkupError",
    "local_name",
    "parse_markup",
    "serialize_markup",
    # Parts
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
    # Queries
    "SlideIds",
    "get_max_slide_ids",
    "get_next_slide_ids",
    "get_slide_layout_type_index",
    # Transcoder
    "PPTX2Json",
    "decode_package",
    "encode_package",
    "to_json",
    "to_pptx",
]
