"""Encoder configuration - supports defaults, ENV and YAML."""

from __future__ import annotations

import os
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from rserial.core.constants import (
    DEFAULT_WRITER_R_VERSION,
    FORMAT_VERSION_3,
    MIN_READER_VERSION_V2,
    MIN_READER_VERSION_V3,
    STRING_ENCODING_LEVELS,
    SUPPORTED_VERSIONS,
)


def pack_r_version(version: str) -> int:
    """Pack "x.y.z" the way R_Version() does: x * 65536 + y * 256 + z."""
    parts = version.strip().split(".")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid R version: {version!r} (expected x.y.z)")
    major, minor, patch = (int(p) for p in parts)
    if minor > 255 or patch > 255:
        raise ValueError(f"Invalid R version: {version!r} (minor/patch must be < 256)")
    return major * 65536 + minor * 256 + patch


class EncoderConfig(BaseModel):
    """Target format settings for the R serialization encoder."""

    format_version: int = Field(
        2,
        description="R serialization format version: 2 or 3",
    )
    writer_r_version: str = Field(
        DEFAULT_WRITER_R_VERSION,
        description="R version recorded as the writer in the envelope",
    )
    native_encoding: str = Field(
        "UTF-8",
        description="Native encoding name recorded in version 3 envelopes",
    )
    string_encoding: str = Field(
        "utf8",
        description="CHARSXP flag for non-ASCII strings: native, utf8, latin1, bytes",
    )

    @field_validator("format_version")
    @classmethod
    def validate_format_version(cls, v: int) -> int:
        if v not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported format version: {v} (supported: {SUPPORTED_VERSIONS})"
            )
        return v

    @field_validator("writer_r_version")
    @classmethod
    def validate_writer_r_version(cls, v: str) -> str:
        pack_r_version(v)
        return v.strip()

    @field_validator("native_encoding")
    @classmethod
    def validate_native_encoding(cls, v: str) -> str:
        if not v or not v.isascii():
            raise ValueError(f"Invalid native encoding name: {v!r}")
        return v

    @field_validator("string_encoding", mode="before")
    @classmethod
    def validate_string_encoding(cls, v: Any) -> str:
        key = str(v).lower().replace("-", "")
        if key not in STRING_ENCODING_LEVELS:
            raise ValueError(
                f"Unknown string encoding: {v!r} "
                f"(allowed: {', '.join(STRING_ENCODING_LEVELS)})"
            )
        return key

    @property
    def packed_writer_version(self) -> int:
        return pack_r_version(self.writer_r_version)

    @property
    def min_reader_version(self) -> int:
        if self.format_version == FORMAT_VERSION_3:
            return MIN_READER_VERSION_V3
        return MIN_READER_VERSION_V2

    @property
    def string_levels(self) -> int:
        return STRING_ENCODING_LEVELS[self.string_encoding]

    @classmethod
    def from_env(cls) -> "EncoderConfig":
        return cls(
            format_version=int(os.getenv("RSERIAL_FORMAT_VERSION", "2")),
            writer_r_version=os.getenv("RSERIAL_WRITER_R_VERSION", DEFAULT_WRITER_R_VERSION),
            native_encoding=os.getenv("RSERIAL_NATIVE_ENCODING", "UTF-8"),
            string_encoding=os.getenv("RSERIAL_STRING_ENCODING", "utf8"),
        )

    @classmethod
    def from_yaml(cls, path: str) -> "EncoderConfig":
        """Load configuration from YAML file (top-level or under ``encoder:``)."""
        import yaml

        with open(path, "r", encoding="utf-8") as f:
            data: Dict[str, Any] = yaml.safe_load(f) or {}

        if "encoder" in data:
            data = data["encoder"] or {}
        return cls(**data)


DEFAULT_CONFIG = EncoderConfig()


__all__ = ["EncoderConfig", "DEFAULT_CONFIG", "pack_r_version"]
