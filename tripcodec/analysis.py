# tripcodec/analysis.py
from __future__ import annotations

"""
Colour statistics: dominant (background) colour estimation and histograms.

Exports:
- estimate_background(image) -> Pixel
- colour_histogram(image, top=None) -> [(Pixel, count), ...]
- background_share(image, background) -> float

Ties on frequency go to the colour whose first occurrence comes earliest in
row-major scan order, so the same image always yields the same background.
"""

from typing import List, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .core_types import DenseImage, Pixel, as_dense_image, coerce_pixel
from .errors import UnsupportedChannelCount


def pack_keys(pixels: NDArray[np.uint8]) -> NDArray[np.uint32]:
    """(H, W, C) uint8 -> flat uint32 keys, c0 << 16 | c1 << 8 | c2 for colour."""
    channels = pixels.shape[-1]
    flat = pixels.reshape(-1, channels)
    if channels == 1:
        return flat[:, 0].astype(np.uint32)
    if channels == 3:
        return (
            (flat[:, 0].astype(np.uint32) << 16)
            | (flat[:, 1].astype(np.uint32) << 8)
            | flat[:, 2].astype(np.uint32)
        )
    raise UnsupportedChannelCount(channels)


def unpack_key(key: int, channels: int) -> Pixel:
    if channels == 1:
        return (int(key) & 0xFF, 0, 0)
    return ((int(key) >> 16) & 0xFF, (int(key) >> 8) & 0xFF, int(key) & 0xFF)


def _counts(keys: NDArray[np.uint32], channels: int) -> Tuple[np.ndarray, np.ndarray]:
    """Distinct keys and their counts. Grey uses a fixed 256-bin histogram."""
    if channels == 1:
        hist = np.bincount(keys.astype(np.intp), minlength=256)
        values = np.flatnonzero(hist)
        return values.astype(np.uint32), hist[values]
    values, counts = np.unique(keys, return_counts=True)
    return values, counts


def _first_positions(keys: NDArray[np.uint32], values: np.ndarray) -> np.ndarray:
    """Index of the first occurrence of each of `values` in `keys`."""
    order = np.argsort(keys, kind="stable")
    sorted_keys = keys[order]
    starts = np.searchsorted(sorted_keys, values, side="left")
    return order[starts]


def estimate_background(image: Union[DenseImage, np.ndarray]) -> Pixel:
    """
    Most frequent pixel value of the image.

    Among values tied for the highest count, the one met first in row-major
    order wins. Empty images have no background and give (0, 0, 0).
    """
    img = as_dense_image(image)
    channels = img.channels
    keys = pack_keys(img.pixels)
    if keys.size == 0:
        return (0, 0, 0)

    values, counts = _counts(keys, channels)
    top = counts.max()
    leaders = values[counts == top]
    if leaders.size == 1:
        return unpack_key(int(leaders[0]), channels)

    # tie: earliest first occurrence in scan order
    first = int(np.flatnonzero(np.isin(keys, leaders))[0])
    return unpack_key(int(keys[first]), channels)


def colour_histogram(
    image: Union[DenseImage, np.ndarray], top: Optional[int] = None
) -> List[Tuple[Pixel, int]]:
    """
    (pixel, count) pairs, most frequent first; equal counts ordered by first
    occurrence. `top` limits the result length.
    """
    img = as_dense_image(image)
    keys = pack_keys(img.pixels)
    if keys.size == 0:
        return []
    values, counts = _counts(keys, img.channels)
    first = _first_positions(keys, values)
    order = np.lexsort((first, -counts.astype(np.int64)))
    if top is not None:
        order = order[: max(0, int(top))]
    return [
        (unpack_key(int(values[i]), img.channels), int(counts[i])) for i in order
    ]


def background_share(image: Union[DenseImage, np.ndarray], background: Pixel) -> float:
    """Fraction of pixels equal to background, in [0, 1]."""
    img = as_dense_image(image)
    total = img.width * img.height
    if total == 0:
        return 0.0
    bg = np.asarray(coerce_pixel(background)[: img.channels], dtype=np.uint8)
    same = np.all(img.pixels == bg, axis=-1)
    return float(np.count_nonzero(same)) / float(total)


__all__ = [
    "pack_keys",
    "unpack_key",
    "estimate_background",
    "colour_histogram",
    "background_share",
]
