"""Configuration for the rserial encoder."""

from .config import DEFAULT_CONFIG, EncoderConfig, pack_r_version

__all__ = ["EncoderConfig", "DEFAULT_CONFIG", "pack_r_version"]
