import numpy as np
import pytest

from tripcodec.binding import (
    ImageBuffer,
    buffer_to_image,
    compress_buffer,
    decompress_buffer,
    gray_buffer,
    image_to_buffer,
    resize_buffer,
)
from tripcodec.errors import TruncatedStream, UnsupportedChannelCount


def test_buffer_layout_is_interleaved_row_major():
    arr = np.arange(12, dtype=np.uint8).reshape(2, 2, 3)
    buf = image_to_buffer(arr)
    assert buf == ImageBuffer(2, 2, 3, bytes(range(12)))
    assert buffer_to_image(buf).pixel(1, 0) == (6, 7, 8)


def test_short_buffer():
    with pytest.raises(TruncatedStream):
        buffer_to_image(ImageBuffer(2, 2, 1, b"\x00\x01"))


def test_bad_channels():
    with pytest.raises(UnsupportedChannelCount):
        buffer_to_image(ImageBuffer(1, 1, 4, b"\x00" * 4))


def test_extra_bytes_ignored():
    img = buffer_to_image(ImageBuffer(1, 1, 1, b"\x05\x06"))
    assert img.pixel(0, 0) == (5, 0, 0)


def test_compress_round_trip(screenshot_rgb):
    buf = image_to_buffer(screenshot_rgb)
    blob = compress_buffer(buf)
    assert blob.startswith(b"TRIP ")
    assert decompress_buffer(blob) == buf


def test_resize_and_gray(screenshot_rgb):
    buf = image_to_buffer(screenshot_rgb)
    small = resize_buffer(buf, 8, 6)
    assert (small.width, small.height, small.channels) == (8, 6, 3)
    assert len(small.data) == 8 * 6 * 3
    grey = gray_buffer(buf)
    assert grey.channels == 1
    assert len(grey.data) == 16 * 12
