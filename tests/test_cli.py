import trip
from tripcodec.codec import read_record
from tripcodec.image_io import load_image, save_image
from tripcodec.ppm import load_ppm, save_ppm


def test_compress_then_decompress(tmp_path, screenshot_rgb, capsys):
    src = save_image(tmp_path / "shot.png", screenshot_rgb)
    assert trip.main(["compress", str(src)]) == 0
    packed = tmp_path / "shot.trip"
    assert packed.exists()
    assert "Wrote shot.trip" in capsys.readouterr().out

    assert trip.main(["decompress", str(packed)]) == 0
    assert load_image(tmp_path / "shot_restored.png") == screenshot_rgb


def test_text_body_and_ppm_output(tmp_path, mask_gray):
    src = save_ppm(tmp_path / "mask.pgm", mask_gray)
    outdir = tmp_path / "out"
    assert trip.main(["compress", str(src), "--text", "--outdir", str(outdir)]) == 0
    packed = outdir / "mask.trip"
    assert packed.read_bytes().startswith(b"TRIP 11 9 1 13 0 0 0\n")
    assert (
        trip.main(["decompress", str(packed), "--text", "--format", "ppm"]) == 0
    )
    assert load_ppm(outdir / "mask_restored.ppm") == mask_gray


def test_compress_with_resize(tmp_path, screenshot_rgb):
    src = save_image(tmp_path / "shot.png", screenshot_rgb)
    assert trip.main(["compress", str(src), "--width", "8"]) == 0
    record = read_record(tmp_path / "shot.trip")
    assert (record.width, record.height) == (8, 6)


def test_folder_mode_skips_artifacts(tmp_path, screenshot_rgb, mask_gray):
    save_image(tmp_path / "a.png", screenshot_rgb)
    save_image(tmp_path / "b.png", mask_gray)
    save_image(tmp_path / "c_restored.png", mask_gray)
    assert trip.main(["compress", str(tmp_path)]) == 0
    assert sorted(p.name for p in tmp_path.glob("*.trip")) == ["a.trip", "b.trip"]
    assert trip.main(["decompress", str(tmp_path)]) == 0
    assert load_image(tmp_path / "b_restored.png") == mask_gray


def test_resize_and_gray_commands(tmp_path, screenshot_rgb):
    src = save_image(tmp_path / "shot.png", screenshot_rgb)
    assert trip.main(["resize", str(src), "--width", "4", "--height", "3"]) == 0
    assert load_image(tmp_path / "shot_resized.png").size == (4, 3)
    out = tmp_path / "g.png"
    assert trip.main(["gray", str(src), "--out", str(out)]) == 0
    assert load_image(out).channels == 1


def test_info(tmp_path, capsys):
    packed = tmp_path / "x.trip"
    packed.write_bytes(b"TRIP 2 2 1 3 0 0 0\n" + b"\x00" * 9)
    assert trip.main(["info", str(packed)]) == 0
    out = capsys.readouterr().out
    assert "Entries: 1" in out
    assert "Complete: off" in out


def test_missing_input(tmp_path):
    assert trip.main(["decompress", str(tmp_path / "none.trip")]) == 2


def test_corrupt_input(tmp_path, capsys):
    bad = tmp_path / "bad.trip"
    bad.write_bytes(b"JUNK 1 1 1 0 0 0 0\n")
    assert trip.main(["decompress", str(bad)]) == 1
    assert "[error]" in capsys.readouterr().err


def test_oversized_header_exits_cleanly(tmp_path, capsys):
    huge = tmp_path / "huge.trip"
    huge.write_bytes(b"TRIP 4000000000 4000000000 3 0 0 0 0\n")
    assert trip.main(["decompress", str(huge)]) == 1
    assert "[error]" in capsys.readouterr().err

    wide = tmp_path / "wide.trip"
    wide.write_bytes(b"TRIP 2147483647 2147483647 3 0 0 0 0\n")
    assert trip.main(["decompress", str(wide)]) == 1


def test_strict_rejects_partial(tmp_path):
    bad = tmp_path / "short.trip"
    bad.write_bytes(b"TRIP 2 2 1 2 0 0 0\n" + b"\x00" * 9)
    assert trip.main(["decompress", str(bad), "--strict"]) == 1
    assert trip.main(["decompress", str(bad)]) == 0


def test_target_size_keeps_aspect():
    assert trip.target_size(16, 12, 8, None) == (8, 6)
    assert trip.target_size(16, 12, None, 3) == (4, 3)
    assert trip.target_size(16, 12, None, None) == (16, 12)
    assert trip.target_size(10, 10, 3, 7) == (3, 7)
