# tripcodec/legacy.py
from __future__ import annotations

"""
Legacy all-text .trip variant.

Same header line as the binary format, then one line per entry:
  row col v0            (grey)
  row col v0 v1 v2      (colour)

Kept for reading and writing files produced before the binary body. Reading
stops at the first entry that is short, non-numeric, or carries a value
outside [0, 255]; everything before it is kept.
"""

from typing import List, Optional

from .constants import MAX_CHANNEL_VALUE
from .core_types import PixelSample, TripRecord
from .errors import TruncatedStream
from .header import INT_TOKEN_RE, TripHeader, parse_header


def encode_text(record: TripRecord) -> bytes:
    lines: List[str] = []
    for e in record.entries:
        if record.channels == 3:
            lines.append(f"{e.row} {e.col} {e.value[0]} {e.value[1]} {e.value[2]}\n")
        else:
            lines.append(f"{e.row} {e.col} {e.value[0]}\n")
    return TripHeader.for_record(record).to_bytes() + "".join(lines).encode("ascii")


def _as_int(token: bytes) -> Optional[int]:
    if not INT_TOKEN_RE.fullmatch(token):
        return None
    return int(token)


def decode_text(data: bytes, strict: bool = False) -> TripRecord:
    raw = bytes(data)
    header, offset = parse_header(raw)
    width = 3 + (2 if header.channels == 3 else 0)

    tokens = raw[offset:].split()
    entries: List[PixelSample] = []
    pos = 0
    while len(entries) < header.count and pos + width <= len(tokens):
        nums = [_as_int(t) for t in tokens[pos : pos + width]]
        if any(v is None for v in nums):
            break
        row, col = nums[0], nums[1]
        vals = nums[2:]
        if any(v < 0 or v > MAX_CHANNEL_VALUE for v in vals):  # type: ignore[operator]
            break
        vals += [0] * (3 - len(vals))
        entries.append(PixelSample(row, col, (vals[0], vals[1], vals[2])))  # type: ignore[arg-type]
        pos += width

    missing = header.count - len(entries)
    if missing and strict:
        raise TruncatedStream(
            f"text body holds {len(entries)} of {header.count} declared entries"
        )
    return TripRecord(
        header.width,
        header.height,
        header.channels,
        header.background,
        tuple(entries),
        missing=missing,
    )


__all__ = ["encode_text", "decode_text"]
