"""Exceptions raised while transcoding presentation packages."""

from typing import Dict, Optional


class PPTX2JsonError(Exception):
    """Base class for all pptx2json errors."""


class ArchiveOpenError(PPTX2JsonError):
    """The input bytes (or file) are not a readable ZIP archive."""


class InvalidInputError(PPTX2JsonError, TypeError):
    """The value handed to encode is not a well-formed package."""


class _PartError(PPTX2JsonError):
    def __init__(
        self,
        path: str,
        message: str,
        failures: Optional[Dict[str, Exception]] = None,
    ):
        super().__init__(f"{path}: {message}")
        self.path = path
        # Every failing path of the call, including this one
        self.failures: Dict[str, Exception] = (
            failures if failures is not None else {path: self}
        )


class PartDecodeError(_PartError):
    """A markup entry could not be parsed."""


class PartEncodeError(_PartError):
    """A markup part could not be serialized."""


class EntryReadError(PPTX2JsonError):
    """An archive entry exists but its bytes cannot be retrieved."""
