# tripcodec/errors.py
from __future__ import annotations

"""
Exception hierarchy.

Every failure raised by tripcodec is a TripError. Format problems also derive
from ValueError and storage problems from OSError, so callers that only know
the builtin exceptions still catch them.
"""

from pathlib import Path
from typing import Optional, Union


class TripError(Exception):
    """Base class for all tripcodec failures."""


class TripFormatError(TripError, ValueError):
    """Persisted bytes do not describe a valid image."""


class BadMagic(TripFormatError):
    """Header does not start with the expected token."""


class TruncatedStream(TripFormatError):
    """Fewer header fields, samples or entry bytes than declared."""


class BadHeader(TripFormatError):
    """Header field present but not a usable integer."""


class UnsupportedChannelCount(TripError, ValueError):
    """Channel count outside {1, 3}."""

    def __init__(self, channels: object) -> None:
        super().__init__(f"unsupported channel count: {channels} (expected 1 or 3)")
        self.channels = channels


class InvalidDimensions(TripError, ValueError):
    """Non-positive width or height."""

    def __init__(self, width: object, height: object) -> None:
        super().__init__(f"invalid dimensions: {width}x{height}")
        self.width = width
        self.height = height


class IOFailure(TripError, OSError):
    """Underlying storage unreadable or unwritable."""

    def __init__(self, path: Union[str, Path], reason: Optional[str] = None) -> None:
        msg = f"cannot access {path}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.path = Path(path)


__all__ = [
    "TripError",
    "TripFormatError",
    "BadMagic",
    "TruncatedStream",
    "BadHeader",
    "UnsupportedChannelCount",
    "InvalidDimensions",
    "IOFailure",
]
