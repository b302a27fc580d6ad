"""Codec configuration.

This module provides the CodecConfig model that tunes how streams are
decoded and written. Values are checked by pydantic on construction.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CodecConfig(BaseModel):
    """Settings for reading and writing DMAP streams.

    Example:
        >>> config = CodecConfig(max_workers=4, strict=False)
        >>> records = read_records("20240101.fitacf", "fitacf", config=config)

    Attributes:
        max_workers: Worker threads for parallel decode (None uses the executor default)
        strict: Raise the first decode error instead of returning per-record outcomes
        parallel_threshold: Minimum number of records before a worker pool is used
        compresslevel: bzip2 level used when writing ``.bz2`` files
    """

    model_config = ConfigDict(
        # Immutable once built
        frozen=True,
        # Forbid unknown settings
        extra="forbid",
    )

    max_workers: int | None = Field(default=None, ge=1)
    strict: bool = True
    parallel_threshold: int = Field(default=4, ge=1)
    compresslevel: int = Field(default=9, ge=1, le=9)


DEFAULT_CONFIG = CodecConfig()
