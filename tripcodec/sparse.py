# tripcodec/sparse.py
from __future__ import annotations

"""
Dense image <-> sparse entry list.

to_entries keeps every pixel that differs from the background, in row-major
order. to_image paints entries over a background-filled canvas and skips any
entry whose position falls outside the canvas, so a damaged file still yields
a partial image.
"""

from typing import List, Sequence, Union

import numpy as np

from .constants import ENTRY_DTYPES
from .core_types import (
    DenseImage,
    PixelLike,
    PixelSample,
    as_dense_image,
    check_channels,
    check_dimensions,
    coerce_pixel,
)
from .errors import InvalidDimensions


def foreground_mask(image: DenseImage, background: PixelLike) -> np.ndarray:
    """(H, W) bool mask of pixels that differ from background on any channel."""
    bg = np.asarray(coerce_pixel(background)[: image.channels], dtype=np.uint8)
    return np.any(image.pixels != bg, axis=-1)


def to_entries(
    image: Union[DenseImage, np.ndarray], background: PixelLike
) -> List[PixelSample]:
    """Non-background pixels as samples, in row-major scan order."""
    img = as_dense_image(image)
    mask = foreground_mask(img, background)
    rows, cols = np.nonzero(mask)  # C order == row-major
    if rows.size == 0:
        return []

    values = img.pixels[rows, cols]  # (N, C)
    if img.channels == 1:
        padded = np.zeros((values.shape[0], 3), dtype=np.uint8)
        padded[:, 0] = values[:, 0]
        values = padded
    return [
        PixelSample(r, c, (v[0], v[1], v[2]))
        for r, c, v in zip(rows.tolist(), cols.tolist(), values.tolist())
    ]


def to_image(
    entries: Sequence[PixelSample],
    width: int,
    height: int,
    channels: int,
    background: PixelLike,
) -> DenseImage:
    """
    Rebuild a dense image from entries.

    Later entries overwrite earlier ones at the same position. Out-of-range
    entries are ignored.
    """
    check_channels(channels)
    check_dimensions(width, height)
    bg = coerce_pixel(background)
    try:
        canvas = np.empty((height, width, channels), dtype=np.uint8)
    except (ValueError, MemoryError) as exc:
        raise InvalidDimensions(width, height) from exc
    canvas[...] = np.asarray(bg[:channels], dtype=np.uint8)
    if not entries:
        return DenseImage(canvas)

    n = len(entries)
    rows = np.fromiter((e.row for e in entries), dtype=np.int64, count=n)
    cols = np.fromiter((e.col for e in entries), dtype=np.int64, count=n)
    keep = (rows >= 0) & (rows < height) & (cols >= 0) & (cols < width)
    if not np.any(keep):
        return DenseImage(canvas)

    values = np.array([e.value for e in entries], dtype=np.uint8).reshape(n, 3)
    canvas[rows[keep], cols[keep]] = values[keep, :channels]
    return DenseImage(canvas)


# Bulk conversion for the binary codec


def entries_to_array(entries: Sequence[PixelSample], channels: int) -> np.ndarray:
    """Pack samples into the on-disk record layout for `channels`."""
    dtype = ENTRY_DTYPES[check_channels(channels)]
    out = np.zeros(len(entries), dtype=dtype)
    if not entries:
        return out
    out["row"] = np.fromiter((e.row for e in entries), dtype=np.int64, count=len(entries))
    out["col"] = np.fromiter((e.col for e in entries), dtype=np.int64, count=len(entries))
    values = np.array([e.value for e in entries], dtype=np.uint8).reshape(-1, 3)
    out["v0"] = values[:, 0]
    if channels == 3:
        out["v1"] = values[:, 1]
        out["v2"] = values[:, 2]
    return out


def entries_from_array(arr: np.ndarray, channels: int) -> List[PixelSample]:
    """Inverse of entries_to_array; channels not stored come back as 0."""
    if arr.size == 0:
        return []
    values = np.zeros((arr.shape[0], 3), dtype=np.uint8)
    values[:, :channels] = _channel_values(arr, channels)
    return [
        PixelSample(r, c, (v[0], v[1], v[2]))
        for r, c, v in zip(arr["row"].tolist(), arr["col"].tolist(), values.tolist())
    ]


def _channel_values(arr: np.ndarray, channels: int) -> np.ndarray:
    if channels == 1:
        return arr["v0"][:, None]
    return np.stack([arr["v0"], arr["v1"], arr["v2"]], axis=1)


__all__ = [
    "foreground_mask",
    "to_entries",
    "to_image",
    "entries_to_array",
    "entries_from_array",
]
