# tripcodec/constants.py
from __future__ import annotations

"""
Fixed format constants.

Exports:
  MAGIC              : leading header token of a .trip file
  HEADER_FIELDS      : number of whitespace-separated header tokens
  SUPPORTED_CHANNELS : channel counts the codec understands
  ENTRY_DTYPES       : numpy record layout of one binary entry, per channel count
  GRAY_WEIGHTS       : R, G, B weights for grey conversion
"""

from typing import Dict, FrozenSet, Tuple

import numpy as np

MAGIC = "TRIP"
HEADER_FIELDS = 8  # magic, width, height, channels, count, bg0, bg1, bg2

SUPPORTED_CHANNELS: FrozenSet[int] = frozenset({1, 3})
MAX_CHANNEL_VALUE = 255

# int32 row, int32 col, uint8 per channel. Packed, little-endian.
ENTRY_DTYPES: Dict[int, np.dtype] = {
    1: np.dtype([("row", "<i4"), ("col", "<i4"), ("v0", "u1")]),
    3: np.dtype(
        [("row", "<i4"), ("col", "<i4"), ("v0", "u1"), ("v1", "u1"), ("v2", "u1")]
    ),
}
ENTRY_SIZES: Dict[int, int] = {k: int(dt.itemsize) for k, dt in ENTRY_DTYPES.items()}

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

GRAY_WEIGHTS: Tuple[float, float, float] = (0.299, 0.587, 0.114)

TRIP_SUFFIX = ".trip"
IMAGE_SUFFIXES: FrozenSet[str] = frozenset(
    {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif", ".tif", ".tiff"}
)
PPM_SUFFIXES: FrozenSet[str] = frozenset({".ppm", ".pgm", ".pnm"})

__all__ = [
    "MAGIC",
    "HEADER_FIELDS",
    "SUPPORTED_CHANNELS",
    "MAX_CHANNEL_VALUE",
    "ENTRY_DTYPES",
    "ENTRY_SIZES",
    "INT32_MIN",
    "INT32_MAX",
    "GRAY_WEIGHTS",
    "TRIP_SUFFIX",
    "IMAGE_SUFFIXES",
    "PPM_SUFFIXES",
]
