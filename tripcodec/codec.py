# tripcodec/codec.py
from __future__ import annotations

"""
Binary TRIP codec and the compress/decompress pipeline.

Layout:
  ASCII header line (see header.py), then entry_count packed records:
    int32 row, int32 col, uint8 v0 [, uint8 v1, uint8 v2]
  Integers are little-endian. v1/v2 are only present for 3-channel images,
  so an entry is 9 bytes for grey and 11 bytes for colour.

Exports:
  encode(record) -> bytes
  decode(data, strict=False) -> TripRecord
  compress(image) -> TripRecord
  decompress(record) -> DenseImage
  write_record / read_record / save_trip / load_trip : file helpers

A body shorter than the header declares is not an error by default: the
entries that were fully present are returned and record.missing says how many
were lost. strict=True turns that into TruncatedStream.
"""

from pathlib import Path
from typing import Union

import numpy as np

from .analysis import estimate_background
from .constants import ENTRY_DTYPES, ENTRY_SIZES, INT32_MAX, INT32_MIN
from .core_types import DenseImage, TripRecord, as_dense_image
from .errors import InvalidDimensions, IOFailure, TruncatedStream
from .header import TripHeader, parse_header
from .legacy import decode_text, encode_text
from .sparse import entries_from_array, entries_to_array, to_entries, to_image

BytesLike = Union[bytes, bytearray, memoryview]
PathLike = Union[str, Path]


# Wire format


def encode(record: TripRecord) -> bytes:
    """Serialise a record: text header followed by the binary entry section."""
    for e in record.entries:
        if not (INT32_MIN <= e.row <= INT32_MAX and INT32_MIN <= e.col <= INT32_MAX):
            raise ValueError(f"entry position does not fit int32: ({e.row}, {e.col})")
    head = TripHeader.for_record(record).to_bytes()
    body = entries_to_array(record.entries, record.channels).tobytes()
    return head + body


def decode(data: BytesLike, strict: bool = False) -> TripRecord:
    """
    Parse a .trip byte string.

    Raises BadMagic, TruncatedStream (header), BadHeader,
    UnsupportedChannelCount or InvalidDimensions for a bad header. A short
    entry section yields a partial record unless strict is set.
    """
    raw = bytes(data)
    header, offset = parse_header(raw)

    size = ENTRY_SIZES[header.channels]
    available = (len(raw) - offset) // size
    n = min(header.count, available)
    missing = header.count - n
    if missing and strict:
        raise TruncatedStream(
            f"entry section holds {n} of {header.count} declared entries"
        )

    dtype = ENTRY_DTYPES[header.channels]
    if n:
        arr = np.frombuffer(raw, dtype=dtype, count=n, offset=offset)
    else:
        arr = np.zeros(0, dtype=dtype)
    return TripRecord(
        header.width,
        header.height,
        header.channels,
        header.background,
        tuple(entries_from_array(arr, header.channels)),
        missing=missing,
    )


# Pipeline


def compress(image: Union[DenseImage, np.ndarray]) -> TripRecord:
    """Estimate the background and keep every pixel that differs from it."""
    img = as_dense_image(image)
    if img.is_empty:
        raise InvalidDimensions(img.width, img.height)
    background = estimate_background(img)
    entries = to_entries(img, background)
    return TripRecord(img.width, img.height, img.channels, background, tuple(entries))


def decompress(record: TripRecord) -> DenseImage:
    return to_image(
        record.entries, record.width, record.height, record.channels, record.background
    )


# Files


def write_record(path: PathLike, record: TripRecord, legacy_text: bool = False) -> Path:
    """Write a record to path. legacy_text selects the all-text body."""
    if legacy_text:
        payload = encode_text(record)
    else:
        payload = encode(record)
    p = Path(path)
    try:
        p.write_bytes(payload)
    except OSError as exc:
        raise IOFailure(p, exc.strerror) from exc
    return p


def read_record(
    path: PathLike, legacy_text: bool = False, strict: bool = False
) -> TripRecord:
    p = Path(path)
    try:
        payload = p.read_bytes()
    except OSError as exc:
        raise IOFailure(p, exc.strerror) from exc
    if legacy_text:
        return decode_text(payload, strict=strict)
    return decode(payload, strict=strict)


def save_trip(
    path: PathLike, image: Union[DenseImage, np.ndarray], legacy_text: bool = False
) -> TripRecord:
    """Compress image and write it to path. Returns the written record."""
    record = compress(image)
    write_record(path, record, legacy_text=legacy_text)
    return record


def load_trip(
    path: PathLike, legacy_text: bool = False, strict: bool = False
) -> DenseImage:
    return decompress(read_record(path, legacy_text=legacy_text, strict=strict))


__all__ = [
    "encode",
    "decode",
    "compress",
    "decompress",
    "write_record",
    "read_record",
    "save_trip",
    "load_trip",
]
