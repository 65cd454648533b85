"""Exception types shared across the draftboard canvas core."""
from __future__ import annotations


class DraftboardError(Exception):
    """Base class for every error raised by draftboard."""


class InvalidArgument(DraftboardError, ValueError):
    """Raised when a value object or shape is built from malformed input."""


class ConfigError(DraftboardError):
    """Raised when an editor settings file cannot be read or validated."""
