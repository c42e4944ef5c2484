"""
ZIP container access for presentation packages.

Reading works on an in-memory ``zipfile.ZipFile``; writing goes through
:class:`ArchiveWriter`, which stamps every entry with a fixed timestamp
so that encoding the same package twice gives identical bytes.
"""

import io
import logging
import lzma
import zipfile
import zlib
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from .errors import ArchiveOpenError, EntryReadError

logger = logging.getLogger(__name__)

__all__ = [
    "ArchiveEntry",
    "ArchiveWriter",
    "list_entries",
    "open_archive",
    "read_entry",
]

BytesLike = Union[bytes, bytearray, memoryview]

# Earliest timestamp the ZIP format can store
FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)
FILE_MODE = 0o644


@dataclass(frozen=True)
class ArchiveEntry:
    """One member of an archive as listed in its central directory."""

    path: str
    is_dir: bool
    info: zipfile.ZipInfo


def open_archive(data: BytesLike) -> zipfile.ZipFile:
    """Open raw bytes as a ZIP archive.

    Raises:
        ArchiveOpenError: If the bytes are not a valid ZIP archive
    """
    try:
        return zipfile.ZipFile(io.BytesIO(bytes(data)), "r")
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, EOFError) as e:
        raise ArchiveOpenError(f"Not a valid ZIP archive: {e}") from e


def list_entries(archive: zipfile.ZipFile) -> List[ArchiveEntry]:
    """List archive members in central-directory order."""
    return [
        ArchiveEntry(path=info.filename, is_dir=info.is_dir(), info=info)
        for info in archive.infolist()
    ]


def read_entry(
    archive: zipfile.ZipFile, entry: ArchiveEntry, mode: str = "binary"
) -> Union[bytes, str]:
    """
    Read the content of one archive member.

    Args:
        archive: Open archive
        entry: Member to read
        mode: "binary" for raw bytes, "text" for UTF-8 decoded text

    Returns:
        Entry content

    Raises:
        EntryReadError: If the member's data is corrupt, encrypted or
            uses an unsupported compression method
    """
    if mode not in ("binary", "text"):
        raise ValueError(f"Invalid read mode: {mode}")

    try:
        data = archive.read(entry.info)
    except (
        zipfile.BadZipFile,
        NotImplementedError,
        RuntimeError,
        zlib.error,
        lzma.LZMAError,
        OSError,
        EOFError,
    ) as e:
        raise EntryReadError(f"Cannot read {entry.path}: {e}") from e

    if mode == "text":
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise EntryReadError(f"{entry.path} is not UTF-8 text: {e}") from e
    return data


class ArchiveWriter:
    """Builds a new ZIP archive in memory.

    Usage:
        with ArchiveWriter() as writer:
            writer.add_entry("ppt/presentation.xml", xml_text)
        data = writer.getvalue()
    """

    def __init__(
        self,
        compression: int = zipfile.ZIP_DEFLATED,
        compresslevel: Optional[int] = None,
    ):
        self.compression = compression
        self.compresslevel = compresslevel
        self._buffer = io.BytesIO()
        self._zip: Optional[zipfile.ZipFile] = zipfile.ZipFile(
            self._buffer, "w", compression, compresslevel=compresslevel
        )
        self.entry_count = 0

    def __enter__(self) -> "ArchiveWriter":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def add_entry(self, path: str, content: Union[str, BytesLike]) -> None:
        """Add a member; text content is stored as UTF-8."""
        if self._zip is None:
            raise ValueError("Archive is already finalized")

        if isinstance(content, str):
            data = content.encode("utf-8")
        else:
            data = bytes(content)

        info = zipfile.ZipInfo(path, date_time=FIXED_DATE_TIME)
        info.compress_type = self.compression
        info.external_attr = FILE_MODE << 16
        self._zip.writestr(info, data, compresslevel=self.compresslevel)
        self.entry_count += 1

    def close(self) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    def getvalue(self) -> bytes:
        """Finalize the archive and return its bytes."""
        self.close()
        logger.debug(
            f"Finalized archive with {self.entry_count} entries "
            f"({self._buffer.getbuffer().nbytes} bytes)"
        )
        return self._buffer.getvalue()
