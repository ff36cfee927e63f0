# tripcodec/header.py
from __future__ import annotations

"""
The ASCII header line shared by both .trip body variants:

  TRIP <width> <height> <channels> <entry_count> <bg_0> <bg_1> <bg_2>\\n

Writing is exact (single spaces, one newline). Reading accepts any run of
spaces or tabs between fields. The magic token is checked before anything
else is looked at.
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

from .constants import HEADER_FIELDS, INT32_MAX, MAGIC, MAX_CHANNEL_VALUE
from .core_types import Pixel, TripRecord, check_channels, check_dimensions, pixel_for_channels
from .errors import BadHeader, BadMagic, TruncatedStream

INT_TOKEN_RE = re.compile(rb"-?[0-9]+")
_MAGIC_BYTES = MAGIC.encode("ascii")


@dataclass(frozen=True)
class TripHeader:
    width: int
    height: int
    channels: int
    count: int
    background: Pixel

    @classmethod
    def for_record(cls, record: TripRecord) -> "TripHeader":
        return cls(
            record.width,
            record.height,
            record.channels,
            record.entry_count,
            pixel_for_channels(record.background, record.channels),
        )

    def to_bytes(self) -> bytes:
        if self.width > INT32_MAX or self.height > INT32_MAX:
            raise ValueError(f"dimensions do not fit int32: {self.width}x{self.height}")
        b0, b1, b2 = self.background
        line = (
            f"{MAGIC} {self.width} {self.height} {self.channels} {self.count} "
            f"{b0} {b1} {b2}\n"
        )
        return line.encode("ascii")


def _parse_int(token: bytes, name: str) -> int:
    if not INT_TOKEN_RE.fullmatch(token):
        raise BadHeader(f"header field {name} is not an integer: {token!r}")
    return int(token)


def parse_header(data: bytes) -> Tuple[TripHeader, int]:
    """
    Parse the header at the start of data.

    Returns (header, body_offset) where body_offset is the index just past the
    terminating newline.
    """
    end = data.find(b"\n")
    line = data if end < 0 else data[:end]
    tokens: List[bytes] = line.split()

    if not tokens or tokens[0] != _MAGIC_BYTES:
        lead = tokens[0][:16] if tokens else b""
        raise BadMagic(f"expected {MAGIC!r} header, got {lead!r}")
    if end < 0:
        raise TruncatedStream("header is not newline-terminated")
    if len(tokens) < HEADER_FIELDS:
        raise TruncatedStream(
            f"header has {len(tokens)} fields, expected {HEADER_FIELDS}"
        )
    if len(tokens) > HEADER_FIELDS:
        raise BadHeader(f"header has {len(tokens)} fields, expected {HEADER_FIELDS}")

    names = ("width", "height", "channels", "count", "bg_0", "bg_1", "bg_2")
    width, height, channels, count, b0, b1, b2 = (
        _parse_int(tok, name) for tok, name in zip(tokens[1:], names)
    )
    check_channels(channels)
    check_dimensions(width, height)
    if width > INT32_MAX or height > INT32_MAX:
        raise BadHeader(f"dimensions do not fit int32: {width}x{height}")
    if count < 0:
        raise BadHeader(f"negative entry count: {count}")
    for comp in (b0, b1, b2):
        if comp < 0 or comp > MAX_CHANNEL_VALUE:
            raise BadHeader(f"background component out of range: {comp}")

    header = TripHeader(width, height, channels, count, (b0, b1, b2))
    return header, end + 1


__all__ = ["INT_TOKEN_RE", "TripHeader", "parse_header"]
