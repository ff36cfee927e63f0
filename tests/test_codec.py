import struct

import numpy as np
import pytest

from tripcodec.codec import (
    compress,
    decode,
    decompress,
    encode,
    load_trip,
    read_record,
    save_trip,
)
from tripcodec.core_types import DenseImage, PixelSample, TripRecord
from tripcodec.errors import (
    BadHeader,
    BadMagic,
    InvalidDimensions,
    IOFailure,
    TripError,
    TruncatedStream,
    UnsupportedChannelCount,
)


def test_round_trip_colour(screenshot_rgb):
    assert decompress(decode(encode(compress(screenshot_rgb)))) == screenshot_rgb


def test_round_trip_gray(mask_gray):
    assert decompress(decode(encode(compress(mask_gray)))) == mask_gray


def test_round_trip_without_dominant_colour(noise_rgb):
    assert decompress(decode(encode(compress(noise_rgb)))) == noise_rgb


def test_gray_layout_is_bit_exact():
    arr = np.zeros((3, 3), dtype=np.uint8)
    arr[1, 1] = 200
    blob = encode(compress(DenseImage(arr)))
    assert blob == b"TRIP 3 3 1 1 0 0 0\n" + struct.pack("<iiB", 1, 1, 200)


def test_colour_layout_is_bit_exact():
    arr = np.full((2, 3, 3), (10, 20, 30), dtype=np.uint8)
    arr[1, 2] = (1, 2, 3)
    blob = encode(compress(DenseImage(arr)))
    assert blob == b"TRIP 3 2 3 1 10 20 30\n" + struct.pack("<iiBBB", 1, 2, 1, 2, 3)


def test_uniform_image_has_no_entries():
    img = DenseImage.filled(2, 2, 3, (10, 20, 30))
    record = compress(img)
    assert record.entry_count == 0
    assert record.background == (10, 20, 30)
    assert encode(record) == b"TRIP 2 2 3 0 10 20 30\n"


def test_gray_header_zero_fills_unused_background():
    record = TripRecord(2, 2, 1, (5, 6, 7))
    assert encode(record) == b"TRIP 2 2 1 0 5 0 0\n"


def test_decode_reads_header_fields():
    record = decode(b"TRIP 4 2 3 0 1 2 3\n")
    assert (record.width, record.height, record.channels) == (4, 2, 3)
    assert record.background == (1, 2, 3)
    assert record.entries == ()
    assert record.is_complete


def test_out_of_range_entry_is_ignored_on_decode():
    record = TripRecord(
        4, 4, 1, (0, 0, 0), (PixelSample(10, 10, (9, 0, 0)), PixelSample(2, 3, (8, 0, 0)))
    )
    image = decompress(decode(encode(record)))
    expected = np.zeros((4, 4), dtype=np.uint8)
    expected[2, 3] = 8
    assert image == DenseImage(expected)


@pytest.mark.parametrize(
    "blob",
    [b"", b"\n", b"TRIX 1 1 1 0 0 0 0\n", b"trip 1 1 1 0 0 0 0\n", b"XXXX", b"\x89PNG\r\n"],
)
def test_bad_magic(blob):
    with pytest.raises(BadMagic):
        decode(blob)


def test_magic_checked_before_other_fields():
    with pytest.raises(BadMagic):
        decode(b"NOPE x y z\n")


def test_header_too_short():
    with pytest.raises(TruncatedStream):
        decode(b"TRIP 1 1 1\n")
    with pytest.raises(TruncatedStream):
        decode(b"TRIP 1 1 1 0 0 0 0")


def test_header_field_not_integer():
    with pytest.raises(BadHeader):
        decode(b"TRIP a 1 1 0 0 0 0\n")
    with pytest.raises(BadHeader):
        decode(b"TRIP 1 1 1 0 300 0 0\n")
    with pytest.raises(BadHeader):
        decode(b"TRIP 1 1 1 -2 0 0 0\n")


def test_header_channel_and_size_checks():
    with pytest.raises(UnsupportedChannelCount):
        decode(b"TRIP 1 1 2 0 0 0 0\n")
    with pytest.raises(InvalidDimensions):
        decode(b"TRIP 0 1 1 0 0 0 0\n")
    with pytest.raises(InvalidDimensions):
        decode(b"TRIP 3 -1 3 0 0 0 0\n")


def test_header_dimensions_beyond_int32():
    with pytest.raises(BadHeader):
        decode(b"TRIP 4000000000 4000000000 3 0 0 0 0\n")
    with pytest.raises(BadHeader):
        decode(b"TRIP 1 2147483648 1 0 0 0 0\n")


def test_decompress_of_unallocatable_canvas_is_typed():
    record = decode(b"TRIP 2147483647 2147483647 3 0 0 0 0\n")
    with pytest.raises(InvalidDimensions):
        decompress(record)


def test_truncated_entries_give_partial_record():
    record = TripRecord(
        5,
        5,
        3,
        (0, 0, 0),
        (
            PixelSample(0, 0, (1, 1, 1)),
            PixelSample(1, 1, (2, 2, 2)),
            PixelSample(2, 2, (3, 3, 3)),
        ),
    )
    blob = encode(record)[:-4]
    partial = decode(blob)
    assert partial.entry_count == 2
    assert partial.missing == 1
    assert partial.declared_count == 3
    assert not partial.is_complete
    assert partial.entries == record.entries[:2]
    with pytest.raises(TruncatedStream):
        decode(blob, strict=True)


def test_count_larger_than_body_is_bounded():
    blob = b"TRIP 2 2 1 1000000 0 0 0\n" + struct.pack("<iiB", 0, 1, 4)
    record = decode(blob)
    assert record.entries == (PixelSample(0, 1, (4, 0, 0)),)
    assert record.missing == 999999


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        decode(b"junk")
    with pytest.raises(TripError):
        decode(b"junk")


def test_compress_rejects_empty_image():
    with pytest.raises(InvalidDimensions):
        compress(np.zeros((0, 0), dtype=np.uint8))


def test_encode_rejects_positions_outside_int32():
    record = TripRecord(1, 1, 1, (0, 0, 0), (PixelSample(2**31, 0, (1, 0, 0)),))
    with pytest.raises(ValueError):
        encode(record)


def test_encode_rejects_dimensions_outside_int32():
    with pytest.raises(ValueError):
        encode(TripRecord(2**31, 1, 1, (0, 0, 0)))


def test_file_round_trip(tmp_path, screenshot_rgb):
    path = tmp_path / "shot.trip"
    record = save_trip(path, screenshot_rgb)
    assert path.read_bytes().startswith(b"TRIP 16 12 3 33 240 240 240\n")
    assert read_record(path) == record
    assert load_trip(path) == screenshot_rgb


def test_file_round_trip_legacy_text(tmp_path, mask_gray):
    path = tmp_path / "mask.trip"
    save_trip(path, mask_gray, legacy_text=True)
    assert load_trip(path, legacy_text=True) == mask_gray


def test_missing_file_is_io_failure(tmp_path):
    with pytest.raises(IOFailure) as info:
        load_trip(tmp_path / "nope.trip")
    assert isinstance(info.value, OSError)
    assert info.value.path == tmp_path / "nope.trip"
