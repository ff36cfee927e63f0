# tripcodec/binding.py
from __future__ import annotations

"""
Raw-buffer API for host bindings.

Images cross the boundary as ImageBuffer(width, height, channels, data) where
data is the row-major interleaved pixel bytes. Compressed images cross as the
.trip byte string.

Provides:
  image_to_buffer(image) -> ImageBuffer
  buffer_to_image(buf) -> DenseImage
  compress_buffer(buf) -> bytes
  decompress_buffer(data, strict=False) -> ImageBuffer
  resize_buffer(buf, new_width, new_height) -> ImageBuffer
  gray_buffer(buf) -> ImageBuffer
"""

from typing import NamedTuple, Union

import numpy as np

from .codec import compress, decode, decompress, encode
from .core_types import DenseImage, as_dense_image, check_channels, check_dimensions
from .errors import TruncatedStream
from .imgproc import resize, to_gray


class ImageBuffer(NamedTuple):
    width: int
    height: int
    channels: int
    data: bytes


def image_to_buffer(image: Union[DenseImage, np.ndarray]) -> ImageBuffer:
    img = as_dense_image(image)
    return ImageBuffer(img.width, img.height, img.channels, img.tobytes())


def buffer_to_image(buf: ImageBuffer) -> DenseImage:
    """Copy the first width*height*channels bytes into a new image."""
    width, height, channels, data = buf
    check_channels(channels)
    check_dimensions(width, height)
    needed = width * height * channels
    if len(data) < needed:
        raise TruncatedStream(f"buffer holds {len(data)} bytes, need {needed}")
    arr = np.frombuffer(bytes(data), dtype=np.uint8, count=needed)
    return DenseImage(arr.reshape(height, width, channels))


def compress_buffer(buf: ImageBuffer) -> bytes:
    return encode(compress(buffer_to_image(buf)))


def decompress_buffer(data: bytes, strict: bool = False) -> ImageBuffer:
    return image_to_buffer(decompress(decode(data, strict=strict)))


def resize_buffer(buf: ImageBuffer, new_width: int, new_height: int) -> ImageBuffer:
    return image_to_buffer(resize(buffer_to_image(buf), new_width, new_height))


def gray_buffer(buf: ImageBuffer) -> ImageBuffer:
    return image_to_buffer(to_gray(buffer_to_image(buf)))


__all__ = [
    "ImageBuffer",
    "image_to_buffer",
    "buffer_to_image",
    "compress_buffer",
    "decompress_buffer",
    "resize_buffer",
    "gray_buffer",
]
