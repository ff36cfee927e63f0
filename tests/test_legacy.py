import pytest

from tripcodec.core_types import PixelSample, TripRecord
from tripcodec.errors import BadMagic, TruncatedStream
from tripcodec.legacy import decode_text, encode_text


def _record(channels):
    return TripRecord(
        4,
        3,
        channels,
        (7, 8, 9) if channels == 3 else (7, 0, 0),
        (PixelSample(0, 1, (1, 2, 3)), PixelSample(2, 3, (4, 5, 6))),
    )


def test_text_layout_colour():
    assert encode_text(_record(3)) == b"TRIP 4 3 3 2 7 8 9\n0 1 1 2 3\n2 3 4 5 6\n"


def test_text_layout_gray_drops_unused_channels():
    assert encode_text(_record(1)) == b"TRIP 4 3 1 2 7 0 0\n0 1 1\n2 3 4\n"


def test_text_decode():
    record = decode_text(b"TRIP 4 3 3 2 7 8 9\n0 1 1 2 3\n2 3 4 5 6\n")
    assert record == _record(3)


def test_gray_values_come_back_zero_padded():
    record = decode_text(encode_text(_record(1)))
    assert record.entries == (PixelSample(0, 1, (1, 0, 0)), PixelSample(2, 3, (4, 0, 0)))


def test_text_decode_stops_at_bad_line():
    record = decode_text(b"TRIP 4 3 1 3 0 0 0\n0 1 9\n1 x 9\n2 2 9\n")
    assert record.entries == (PixelSample(0, 1, (9, 0, 0)),)
    assert record.missing == 2


def test_text_decode_stops_at_out_of_range_value():
    record = decode_text(b"TRIP 4 3 1 2 0 0 0\n0 1 9\n1 1 300\n")
    assert record.entry_count == 1


def test_text_decode_rejects_underscored_numbers():
    record = decode_text(b"TRIP 4 3 1 2 0 0 0\n0 1 9\n1 1_0 9\n")
    assert record.entries == (PixelSample(0, 1, (9, 0, 0)),)
    assert record.missing == 1


def test_text_decode_short_body_strict():
    blob = b"TRIP 4 3 3 2 7 8 9\n0 1 1 2 3\n2 3\n"
    assert decode_text(blob).entry_count == 1
    with pytest.raises(TruncatedStream):
        decode_text(blob, strict=True)


def test_text_decode_bad_magic():
    with pytest.raises(BadMagic):
        decode_text(b"P2 1 1 255\n0\n")
