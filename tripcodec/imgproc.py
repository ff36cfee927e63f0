# tripcodec/imgproc.py
from __future__ import annotations

"""
Image-space operations: bilinear resize and grey conversion.

Exports:
- resize(image, new_width, new_height) -> DenseImage
- to_gray(image) -> DenseImage
- sample_positions(src_size, dst_size) -> (i0, i1, w)

Resize maps destination pixel centres onto the source grid,
  src = (dst + 0.5) * (src_size / dst_size) - 0.5
and blends the four surrounding samples. Positions that fall before the
first or past the last source sample are clamped to that border sample, so
the source is never read out of bounds and never extrapolated.
"""

from typing import Tuple, Union

import numpy as np

from .constants import GRAY_WEIGHTS, MAX_CHANNEL_VALUE
from .core_types import DenseImage, as_dense_image
from .errors import InvalidDimensions, UnsupportedChannelCount


def sample_positions(src_size: int, dst_size: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Per-axis neighbour indices and weights for dst_size output samples.

    Returns (i0, i1, w): int64 lower and upper source indices and the float64
    weight of i1.
    """
    scale = float(src_size) / float(dst_size)
    src = (np.arange(dst_size, dtype=np.float64) + 0.5) * scale - 0.5
    i0 = np.floor(src).astype(np.int64)
    i1 = i0 + 1
    w = src - i0

    low = i0 < 0
    i0[low] = 0
    i1[low] = 0
    w[low] = 0.0

    high = i1 >= src_size
    i0[high] = src_size - 1
    i1[high] = src_size - 1
    w[high] = 0.0
    return i0, i1, w


def resize(image: Union[DenseImage, np.ndarray], new_width: int, new_height: int) -> DenseImage:
    """Bilinear resize to new_width x new_height; channels handled independently."""
    img = as_dense_image(image)
    if img.is_empty:
        raise InvalidDimensions(img.width, img.height)
    if new_width <= 0 or new_height <= 0:
        raise InvalidDimensions(new_width, new_height)

    x0, x1, wx = sample_positions(img.width, new_width)
    y0, y1, wy = sample_positions(img.height, new_height)

    src = img.pixels.astype(np.float64)
    top = src[y0]  # (new_h, W, C)
    bottom = src[y1]
    q00 = top[:, x0]
    q10 = top[:, x1]
    q01 = bottom[:, x0]
    q11 = bottom[:, x1]

    wx_ = wx[None, :, None]
    wy_ = wy[:, None, None]
    blended = (
        (1.0 - wx_) * (1.0 - wy_) * q00
        + wx_ * (1.0 - wy_) * q10
        + (1.0 - wx_) * wy_ * q01
        + wx_ * wy_ * q11
    )
    # round half away from zero; values are non-negative
    out = np.floor(blended + 0.5)
    out = np.clip(out, 0, MAX_CHANNEL_VALUE).astype(np.uint8)
    return DenseImage(out)


def to_gray(image: Union[DenseImage, np.ndarray]) -> DenseImage:
    """Weighted R, G, B sum, truncated toward zero. Needs a 3-channel image."""
    img = as_dense_image(image)
    if img.channels != 3:
        raise UnsupportedChannelCount(img.channels)
    wr, wg, wb = GRAY_WEIGHTS
    px = img.pixels.astype(np.float64)
    grey = wr * px[..., 0] + wg * px[..., 1] + wb * px[..., 2]
    grey = np.clip(np.trunc(grey), 0, MAX_CHANNEL_VALUE).astype(np.uint8)
    return DenseImage(grey)


__all__ = ["sample_positions", "resize", "to_gray"]
