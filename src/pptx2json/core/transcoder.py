"""
Presentation package transcoder.

Decodes a PPTX (or any OOXML ZIP package) into a dict of path -> part and
encodes such a dict back into a ZIP archive:

- ``*.xml`` / ``*.rels`` entries become MarkupPart node trees
- every other entry (media, fonts, embeddings) becomes a BinaryPart

Parts are decoded and encoded independently on a thread pool; results are
assembled in archive order so that the returned dict follows the order in
which entries were discovered.

Typical usage:
    transcoder = PPTX2Json()
    package = transcoder.to_json("deck.pptx")
    package["ppt/media/image6.jpeg"] = BinaryPart(data=jpeg_bytes)
    transcoder.to_pptx(package, file="out.pptx")
"""

import asyncio
import logging
import os
import zipfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from ..config import ErrorPolicy, TranscoderConfig
from .archive import (
    ArchiveEntry,
    ArchiveWriter,
    BytesLike,
    list_entries,
    open_archive,
    read_entry,
)
from .errors import (
    EntryReadError,
    InvalidInputError,
    PartDecodeError,
    PartEncodeError,
)
from .markup import MarkupError, parse_markup, serialize_markup
from .parts import (
    BinaryPart,
    MarkupPart,
    Package,
    Part,
    PartKind,
    classify_path,
)

logger = logging.getLogger(__name__)

__all__ = [
    "PPTX2Json",
    "decode_package",
    "encode_package",
    "to_json",
    "to_pptx",
]

T = TypeVar("T")
R = TypeVar("R")

FilePath = Union[str, os.PathLike]
Source = Union[FilePath, BytesLike]


class PPTX2Json:
    """Converts between PPTX archives and in-memory packages."""

    def __init__(self, config: Optional[TranscoderConfig] = None, **options: Any):
        """
        Initialize the transcoder.

        Args:
            config: Explicit configuration. When omitted, PPTX2JSON_*
                environment variables are used.
            **options: TranscoderConfig fields overriding ``config``
        """
        if config is None:
            config = TranscoderConfig.from_env(**options)
        elif options:
            config = TranscoderConfig(**{**config.model_dump(), **options})
        self.config = config
        # Per-entry errors of the most recent decode/encode call
        self.last_failures: Dict[str, Exception] = {}

    # ------------------------------------------------------------------
    # Fan-out helpers
    # ------------------------------------------------------------------

    def _map(
        self, func: Callable[[T], R], items: List[T]
    ) -> List[Tuple[Optional[R], Optional[Exception]]]:
        """Apply ``func`` to every item, capturing per-part failures.

        Results keep the order of ``items``. Only part-level errors are
        captured; anything else propagates.
        """

        def capture(item: T) -> Tuple[Optional[R], Optional[Exception]]:
            try:
                return func(item), None
            except (PartDecodeError, PartEncodeError) as e:
                return None, e

        if self.config.max_workers == 1 or len(items) <= 1:
            return [capture(item) for item in items]

        with ThreadPoolExecutor(
            max_workers=self.config.max_workers, thread_name_prefix="pptx2json"
        ) as executor:
            return list(executor.map(capture, items))

    def _settle(self, failures: Dict[str, Exception], action: str) -> None:
        """Apply the error policy to the failures of one call."""
        self.last_failures = failures
        if not failures:
            return

        if self.config.error_policy is ErrorPolicy.RAISE:
            first = next(iter(failures.values()))
            first.failures = failures  # type: ignore[attr-defined]
            raise first

        for error in failures.values():
            logger.warning(f"Skipping part that failed to {action}: {error}")

    # ------------------------------------------------------------------
    # Decode
    # ------------------------------------------------------------------

    def _decode_entry(
        self, archive: zipfile.ZipFile, entry: ArchiveEntry
    ) -> Optional[Part]:
        try:
            data = read_entry(archive, entry, "binary")
        except EntryReadError as e:
            logger.warning(f"Skipping unreadable entry: {e}")
            return None

        if classify_path(entry.path) is PartKind.MARKUP:
            try:
                return parse_markup(data)
            except MarkupError as e:
                raise PartDecodeError(entry.path, str(e)) from e

        # images, audio, movies, fonts, embedded workbooks
        return BinaryPart(data=data)

    def zip_to_package(self, archive: zipfile.ZipFile) -> Package:
        """
        Decode an already opened ZIP archive.

        Directory entries and entries whose data cannot be read are left
        out. Markup that fails to parse is handled per ``error_policy``.

        Args:
            archive: Open archive to read from

        Returns:
            Package keyed by entry path, in archive order

        Raises:
            PartDecodeError: If a markup entry is malformed and the policy
                is ``ErrorPolicy.RAISE``
        """
        entries = [entry for entry in list_entries(archive) if not entry.is_dir]
        results = self._map(lambda entry: self._decode_entry(archive, entry), entries)

        package: Package = {}
        failures: Dict[str, Exception] = {}
        for entry, (part, error) in zip(entries, results):
            if error is not None:
                failures[entry.path] = error
                continue
            if part is None:
                continue
            if entry.path in package:
                logger.warning(f"Duplicate archive entry, keeping last: {entry.path}")
            package[entry.path] = part

        self._settle(failures, "decode")

        markup_count = sum(isinstance(part, MarkupPart) for part in package.values())
        logger.debug(
            f"Decoded {len(package)} parts ({markup_count} markup, "
            f"{len(package) - markup_count} binary) from {len(entries)} entries"
        )
        return package

    def decode(self, data: BytesLike) -> Package:
        """
        Decode PPTX bytes into a package.

        Raises:
            ArchiveOpenError: If the bytes are not a ZIP archive
            PartDecodeError: If a markup entry is malformed (RAISE policy)
        """
        with open_archive(data) as archive:
            return self.zip_to_package(archive)

    # ------------------------------------------------------------------
    # Encode
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_package(package: Any) -> List[Tuple[str, Part]]:
        if not isinstance(package, Mapping):
            raise InvalidInputError(
                f"Expected a mapping of path to part, got {type(package).__name__}"
            )

        items: List[Tuple[str, Part]] = []
        for path, part in package.items():
            if not isinstance(path, str) or not path or path.endswith("/"):
                raise InvalidInputError(f"Invalid part path: {path!r}")

            if isinstance(part, (bytes, bytearray, memoryview)):
                part = BinaryPart(data=bytes(part))
            elif not isinstance(part, (MarkupPart, BinaryPart)):
                raise InvalidInputError(
                    f"{path}: expected MarkupPart, BinaryPart or bytes, "
                    f"got {type(part).__name__}"
                )

            expected = classify_path(path)
            if expected.value != part.kind:
                raise InvalidInputError(
                    f"{path}: {part.kind} part stored under a {expected.value} path"
                )
            items.append((path, part))
        return items

    def _encode_entry(self, item: Tuple[str, Part]) -> Union[str, bytes]:
        path, part = item
        if isinstance(part, MarkupPart):
            try:
                return serialize_markup(
                    part, xml_declaration=self.config.xml_declaration
                )
            except (MarkupError, AttributeError, TypeError) as e:
                raise PartEncodeError(path, str(e)) from e
        return part.data

    def write_package(self, package: Mapping[str, Any], writer: ArchiveWriter) -> int:
        """
        Serialize every part of a package into an open ArchiveWriter.

        The whole package is validated before anything is written.

        Returns:
            Number of entries written

        Raises:
            InvalidInputError: If the package is malformed
            PartEncodeError: If a markup part cannot be serialized (RAISE policy)
        """
        items = self._validate_package(package)
        results = self._map(self._encode_entry, items)

        failures = {
            path: error
            for (path, _), (_, error) in zip(items, results)
            if error is not None
        }
        self._settle(failures, "encode")

        written = 0
        for (path, _), (content, error) in zip(items, results):
            if error is None and content is not None:
                writer.add_entry(path, content)
                written += 1
        return written

    def encode(self, package: Mapping[str, Any]) -> bytes:
        """
        Encode a package into PPTX bytes.

        Raises:
            InvalidInputError: If the package is malformed
            PartEncodeError: If a markup part cannot be serialized (RAISE policy)
        """
        validated = dict(self._validate_package(package))
        with ArchiveWriter(
            compression=self.config.compression,
            compresslevel=self.config.compresslevel,
        ) as writer:
            written = self.write_package(validated, writer)
            data = writer.getvalue()
        logger.debug(f"Encoded {written} parts into {len(data)} bytes")
        return data

    # ------------------------------------------------------------------
    # File conveniences
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_path(file_path: FilePath) -> Path:
        path = Path(file_path)
        if not path.is_absolute():
            path = Path.cwd() / path
        return path.resolve()

    def to_json(self, source: Source) -> Package:
        """
        Parse a PowerPoint file into a package.

        Args:
            source: Path of a .pptx file, or its raw bytes

        Returns:
            Package keyed by archive path
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            return self.decode(source)
        if not isinstance(source, (str, os.PathLike)):
            raise InvalidInputError(
                f"source must be a path or bytes, got {type(source).__name__}"
            )

        path = self._resolve_path(source)
        logger.debug(f"Reading PPTX file: {path}")
        return self.decode(path.read_bytes())

    def to_pptx(
        self,
        package: Mapping[str, Any],
        file: Optional[FilePath] = None,
    ) -> Optional[bytes]:
        """
        Convert a package back into a PowerPoint file.

        Parts may be added to or removed from the package before calling.

        Args:
            package: Package created by ``to_json`` (or built by hand)
            file: Output path. When given, the archive is written there.

        Returns:
            Archive bytes if no file was given, otherwise None
        """
        data = self.encode(package)
        if file is None:
            return data

        path = self._resolve_path(file)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"Wrote PPTX file: {path}")
        return None

    async def to_json_async(self, source: Source) -> Package:
        return await asyncio.to_thread(self.to_json, source)

    async def to_pptx_async(
        self,
        package: Mapping[str, Any],
        file: Optional[FilePath] = None,
    ) -> Optional[bytes]:
        return await asyncio.to_thread(self.to_pptx, package, file)


def decode_package(
    data: BytesLike, config: Optional[TranscoderConfig] = None
) -> Package:
    """Decode PPTX bytes with a one-off transcoder."""
    return PPTX2Json(config).decode(data)


def encode_package(
    package: Mapping[str, Any], config: Optional[TranscoderConfig] = None
) -> bytes:
    """Encode a package to PPTX bytes with a one-off transcoder."""
    return PPTX2Json(config).encode(package)


def to_json(source: Source, config: Optional[TranscoderConfig] = None) -> Package:
    return PPTX2Json(config).to_json(source)


def to_pptx(
    package: Mapping[str, Any],
    file: Optional[FilePath] = None,
    config: Optional[TranscoderConfig] = None,
) -> Optional[bytes]:
    return PPTX2Json(config).to_pptx(package, file)
