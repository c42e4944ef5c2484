"""
Transcoder configuration.

Options can be passed explicitly or read from the environment:

    PPTX2JSON_MAX_WORKERS     thread pool size for per-entry work (1 = sequential)
    PPTX2JSON_ERROR_POLICY    "raise" (default) or "skip"
    PPTX2JSON_COMPRESSION     "deflated" (default) or "stored"
    PPTX2JSON_COMPRESSLEVEL   zlib level 0-9 for deflated output
"""

import logging
import os
import zipfile
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

__all__ = ["ErrorPolicy", "TranscoderConfig"]

COMPRESSION_METHODS = {
    "deflated": zipfile.ZIP_DEFLATED,
    "stored": zipfile.ZIP_STORED,
}


class ErrorPolicy(str, Enum):
    """What to do when a single part fails to decode or encode."""

    RAISE = "raise"
    SKIP = "skip"


class TranscoderConfig(BaseModel):
    max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Worker threads for per-entry decode/encode (None = executor default)",
    )
    error_policy: ErrorPolicy = Field(
        default=ErrorPolicy.RAISE,
        description="Raise after all entries ran, or drop failing entries",
    )
    compression: int = Field(
        default=zipfile.ZIP_DEFLATED, description="zipfile compression constant"
    )
    compresslevel: Optional[int] = Field(
        default=None, ge=0, le=9, description="Compression level for deflated output"
    )
    xml_declaration: bool = Field(
        default=True, description="Write an XML declaration at the top of markup parts"
    )

    @field_validator("compression")
    @classmethod
    def _check_compression(cls, value: int) -> int:
        if value not in COMPRESSION_METHODS.values():
            raise ValueError(
                f"Unsupported compression {value}: use ZIP_DEFLATED or ZIP_STORED"
            )
        return value

    @classmethod
    def from_env(cls, **overrides) -> "TranscoderConfig":
        """Build a config from PPTX2JSON_* environment variables.

        Keyword overrides take precedence over the environment.
        """
        values = {}

        max_workers = os.getenv("PPTX2JSON_MAX_WORKERS")
        if max_workers:
            values["max_workers"] = int(max_workers)

        error_policy = os.getenv("PPTX2JSON_ERROR_POLICY")
        if error_policy:
            values["error_policy"] = ErrorPolicy(error_policy.strip().lower())

        compression = os.getenv("PPTX2JSON_COMPRESSION")
        if compression:
            name = compression.strip().lower()
            if name not in COMPRESSION_METHODS:
                raise ValueError(
                    f"Invalid PPTX2JSON_COMPRESSION: {compression!r} "
                    f"(expected one of {', '.join(COMPRESSION_METHODS)})"
                )
            values["compression"] = COMPRESSION_METHODS[name]

        compresslevel = os.getenv("PPTX2JSON_COMPRESSLEVEL")
        if compresslevel:
            values["compresslevel"] = int(compresslevel)

        values.update(overrides)
        config = cls(**values)
        logger.debug(f"Transcoder config from environment: {config}")
        return config
