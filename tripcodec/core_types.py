# tripcodec/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .constants import MAX_CHANNEL_VALUE, SUPPORTED_CHANNELS
from .errors import InvalidDimensions, UnsupportedChannelCount

# Basic aliases

Pixel = Tuple[int, int, int]  # channel 0, 1, 2; unused channels are 0
U8Image = NDArray[np.uint8]  # (H, W, C)
PixelLike = Union[int, Sequence[int], NDArray[np.generic]]

# Value objects


@dataclass(frozen=True, eq=False)
class DenseImage:
    """
    Row-major pixel grid backed by a contiguous uint8 array of shape (H, W, C).

    (H, W) input is taken as a single-channel image. The array is copied on
    construction and made read-only, so later writes to the source array do
    not reach the image.
    """

    pixels: U8Image

    def __post_init__(self) -> None:
        arr = self.pixels
        if not isinstance(arr, np.ndarray):
            raise TypeError("expected a numpy array")
        if arr.dtype != np.uint8:
            raise TypeError(f"expected uint8 pixels, got {arr.dtype}")
        if arr.ndim == 2:
            arr = arr[:, :, None]
        if arr.ndim != 3:
            raise TypeError("expected (H,W) or (H,W,C) array")
        if arr.shape[2] not in SUPPORTED_CHANNELS:
            raise UnsupportedChannelCount(arr.shape[2])
        pixels = np.array(arr, dtype=np.uint8, order="C")
        pixels.flags.writeable = False
        object.__setattr__(self, "pixels", pixels)

    @classmethod
    def filled(
        cls, width: int, height: int, channels: int, value: PixelLike = 0
    ) -> "DenseImage":
        """Uniform image of the given size, every pixel equal to value."""
        check_channels(channels)
        check_dimensions(width, height)
        px = coerce_pixel(value)
        arr = np.empty((height, width, channels), dtype=np.uint8)
        arr[...] = np.asarray(px[:channels], dtype=np.uint8)
        return cls(arr)

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def channels(self) -> int:
        return int(self.pixels.shape[2])

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height), Pillow order."""
        return (self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def pixel(self, row: int, col: int) -> Pixel:
        return coerce_pixel(self.pixels[row, col])

    def as_array(self) -> NDArray[np.uint8]:
        """(H, W) for grey images, (H, W, 3) for colour ones."""
        if self.channels == 1:
            return self.pixels[:, :, 0]
        return self.pixels

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DenseImage):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(
            np.array_equal(self.pixels, other.pixels)
        )

    def __repr__(self) -> str:
        return f"DenseImage({self.width}x{self.height}x{self.channels})"


@dataclass(frozen=True)
class PixelSample:
    """One non-background pixel: position plus its value."""

    row: int
    col: int
    value: Pixel


@dataclass(frozen=True)
class TripRecord:
    """
    In-memory form of a .trip file.

    entry_count is always len(entries). `missing` counts entries the header
    declared but the stream did not carry; encoder-built records have none.
    """

    width: int
    height: int
    channels: int
    background: Pixel
    entries: Tuple[PixelSample, ...] = field(default_factory=tuple)
    missing: int = 0

    def __post_init__(self) -> None:
        check_channels(self.channels)
        check_dimensions(self.width, self.height)
        object.__setattr__(self, "background", coerce_pixel(self.background))
        object.__setattr__(self, "entries", tuple(self.entries))
        if self.missing < 0:
            raise ValueError("missing must be >= 0")

    @property
    def entry_count(self) -> int:
        return len(self.entries)

    @property
    def declared_count(self) -> int:
        return len(self.entries) + self.missing

    @property
    def is_complete(self) -> bool:
        return self.missing == 0


# Small helpers


def check_channels(channels: int) -> int:
    """Return channels if supported, else raise UnsupportedChannelCount."""
    if channels not in SUPPORTED_CHANNELS:
        raise UnsupportedChannelCount(channels)
    return channels


def check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidDimensions(width, height)


def coerce_pixel(value: PixelLike) -> Pixel:
    """
    Normalise an int, sequence or array row to a padded (c0, c1, c2) tuple.
    Components must lie in [0, 255].
    """
    if isinstance(value, np.ndarray):
        comps: List[int] = [int(v) for v in value.ravel().tolist()]
    elif isinstance(value, (int, np.integer)):
        comps = [int(value)]
    else:
        comps = [int(v) for v in value]
    if not 1 <= len(comps) <= 3:
        raise ValueError(f"pixel needs 1 to 3 components, got {len(comps)}")
    for c in comps:
        if c < 0 or c > MAX_CHANNEL_VALUE:
            raise ValueError(f"pixel component out of range: {c}")
    comps += [0] * (3 - len(comps))
    return (comps[0], comps[1], comps[2])


def pixel_for_channels(value: Pixel, channels: int) -> Pixel:
    """Zero the components an image with `channels` channels does not use."""
    if channels == 1:
        return (value[0], 0, 0)
    return value


def as_dense_image(image: Union[DenseImage, NDArray[np.generic]]) -> DenseImage:
    """Accept either a DenseImage or a raw uint8 array."""
    if isinstance(image, DenseImage):
        return image
    return DenseImage(np.asarray(image))


__all__ = [
    # aliases / types
    "Pixel",
    "U8Image",
    "PixelLike",
    # value objects
    "DenseImage",
    "PixelSample",
    "TripRecord",
    # helpers
    "check_channels",
    "check_dimensions",
    "coerce_pixel",
    "pixel_for_channels",
    "as_dense_image",
]
