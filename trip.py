#!/usr/bin/env python3
"""
trip.py
Compress images dominated by one colour into .trip files, restore them, and
resize or grey-convert images on the way.

Usage:
  python trip.py compress SRC [--outdir D] [--text] [--width W] [--height H] [--debug]
  python trip.py decompress SRC [--outdir D] [--format png|ppm] [--text] [--strict] [--debug]
  python trip.py resize SRC --width W --height H [--out PATH]
  python trip.py gray SRC [--out PATH]
  python trip.py info SRC [--text]

Input:
  Any Pillow-readable image, or a plain-text P2/P3 matrix (.ppm/.pgm/.pnm).
  compress and decompress also accept a folder and process every matching file
  in name order.

Output:
  compress   : <stem>.trip next to the input (or in --outdir)
  decompress : <stem>_restored.png (or .ppm with --format ppm)
  resize     : <stem>_resized.png unless --out is given
  gray       : <stem>_gray.png unless --out is given

Notes:
  --text reads/writes the legacy all-text .trip body instead of the binary one.
  With only one of --width/--height the other follows the aspect ratio.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from tripcodec.analysis import background_share, colour_histogram
from tripcodec.codec import compress, decompress, read_record, write_record
from tripcodec.constants import IMAGE_SUFFIXES, PPM_SUFFIXES, TRIP_SUFFIX
from tripcodec.core_types import DenseImage
from tripcodec.errors import TripError
from tripcodec.image_io import load_image, save_image
from tripcodec.imgproc import resize, to_gray
from tripcodec.ppm import load_ppm, save_ppm
from tripcodec.utils import (
    compression_ratio,
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_bytes_compact,
    format_percentage,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    warn,
)

ARTIFACT_TAGS = ("_restored", "_resized", "_gray")

# CLI args & small helpers


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with `command` set to one of
      compress / decompress / resize / gray / info plus that command's flags.
    """
    parser = argparse.ArgumentParser(
        prog="trip",
        description="Background-subtraction image compression with tidy, readable output.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_comp = sub.add_parser("compress", help="Image(s) -> .trip")
    p_comp.add_argument("src", type=Path, help="Input image or folder")
    p_comp.add_argument("--outdir", type=Path, default=None, help="Output directory")
    p_comp.add_argument("--text", action="store_true", help="Write the legacy text body")
    p_comp.add_argument("--width", type=int, default=None, help="Resize to this width first")
    p_comp.add_argument("--height", type=int, default=None, help="Resize to this height first")
    p_comp.add_argument("--debug", action="store_true", help="Verbose details")

    p_dec = sub.add_parser("decompress", help=".trip -> image(s)")
    p_dec.add_argument("src", type=Path, help="Input .trip file or folder")
    p_dec.add_argument("--outdir", type=Path, default=None, help="Output directory")
    p_dec.add_argument(
        "--format", choices=["png", "ppm"], default="png", help="Output format"
    )
    p_dec.add_argument("--text", action="store_true", help="Read the legacy text body")
    p_dec.add_argument(
        "--strict", action="store_true", help="Reject files with missing entries"
    )
    p_dec.add_argument("--debug", action="store_true", help="Verbose details")

    p_res = sub.add_parser("resize", help="Bilinear resize")
    p_res.add_argument("src", type=Path, help="Input image")
    p_res.add_argument("--width", type=int, default=None, help="Target width")
    p_res.add_argument("--height", type=int, default=None, help="Target height")
    p_res.add_argument("--out", type=Path, default=None, help="Output path")

    p_gray = sub.add_parser("gray", help="Colour -> grey")
    p_gray.add_argument("src", type=Path, help="Input image")
    p_gray.add_argument("--out", type=Path, default=None, help="Output path")

    p_info = sub.add_parser("info", help="Print .trip header details")
    p_info.add_argument("src", type=Path, help="Input .trip file")
    p_info.add_argument("--text", action="store_true", help="Read the legacy text body")

    return parser.parse_args(argv)


def target_size(
    width0: int, height0: int, width: Optional[int], height: Optional[int]
) -> Tuple[int, int]:
    """Fill in a missing target side from the source aspect ratio."""
    if width is None and height is None:
        return width0, height0
    if width is None:
        assert height is not None
        return max(1, int(round(width0 * (height / float(height0))))), height
    if height is None:
        return width, max(1, int(round(height0 * (width / float(width0)))))
    return width, height


def load_any(path: Path) -> DenseImage:
    """Plain-text matrices by suffix, everything else through Pillow."""
    if path.suffix.lower() in PPM_SUFFIXES:
        return load_ppm(path)
    return load_image(path)


def save_any(path: Path, image: DenseImage) -> Path:
    if path.suffix.lower() in PPM_SUFFIXES:
        return save_ppm(path, image)
    return save_image(path, image)


def _is_artifact(path: Path) -> bool:
    return path.stem.endswith(ARTIFACT_TAGS)


def _collect(src: Path, suffixes: frozenset) -> List[Path]:
    files = [
        p
        for p in src.iterdir()
        if p.is_file() and p.suffix.lower() in suffixes and not _is_artifact(p)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Per-file processing


def _compress_one(
    src_path: Path,
    outdir: Optional[Path],
    text: bool,
    width: Optional[int],
    height: Optional[int],
    debug: bool,
) -> Path:
    """load -> optional resize -> compress -> write -> report."""
    t_start = time.perf_counter()
    print_banner(src_path.name)

    image = load_any(src_path)
    width0, height0 = image.size
    new_w, new_h = target_size(width0, height0, width, height)
    if (new_w, new_h) != (width0, height0):
        image = resize(image, new_w, new_h)
        if debug:
            debug_log(f"resized {width0}x{height0} -> {new_w}x{new_h}")
    t_loaded = time.perf_counter()

    record = compress(image)
    t_encoded = time.perf_counter()

    out_dir = outdir if outdir is not None else src_path.parent
    out_path = out_dir / f"{src_path.stem}{TRIP_SUFFIX}"
    write_record(out_path, record, legacy_text=text)
    t_saved = time.perf_counter()
    packed = out_path.stat().st_size

    raw = image.width * image.height * image.channels
    share = background_share(image, record.background)
    log(
        key_value_pairs_to_string(
            [
                ("Size", f"{image.width}x{image.height}x{image.channels}"),
                ("Background", record.background[: image.channels]),
                ("Share", format_percentage(share)),
                ("Entries", record.entry_count),
            ]
        )
    )
    log(
        f"Wrote {out_path.name} | {format_bytes_compact(packed)} "
        f"(raw {format_bytes_compact(raw)}, ratio {compression_ratio(raw, packed):.2f}x)"
    )
    if share < 0.5:
        warn("background covers under half the image; .trip may be larger than raw")

    if debug:
        for px, count in colour_histogram(image, top=5):
            debug_log(f"  colour {px[: image.channels]}: {count:,}")
        debug_log(
            f"Total {format_total_duration_compact(t_saved - t_start)}  "
            f"(load={format_seconds_compact(t_loaded - t_start)}, "
            f"compress={format_seconds_compact(t_encoded - t_loaded)}, "
            f"save={format_seconds_compact(t_saved - t_encoded)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_saved - t_start)}")
    return out_path


def _decompress_one(
    src_path: Path,
    outdir: Optional[Path],
    fmt: str,
    text: bool,
    strict: bool,
    debug: bool,
) -> Path:
    t_start = time.perf_counter()
    print_banner(src_path.name)

    record = read_record(src_path, legacy_text=text, strict=strict)
    if not record.is_complete:
        warn(
            f"{record.missing:,} of {record.declared_count:,} entries missing; "
            "image is partial"
        )
    image = decompress(record)

    out_dir = outdir if outdir is not None else src_path.parent
    out_path = out_dir / f"{src_path.stem}_restored.{fmt}"
    save_any(out_path, image)
    t_saved = time.perf_counter()

    log(
        f"Wrote {out_path.name} | size={image.width}x{image.height} | "
        f"channels={image.channels} | entries={record.entry_count:,}"
    )
    if debug:
        debug_log(f"Total {format_total_duration_compact(t_saved - t_start)}")
    return out_path


# Commands


def cmd_compress(args: argparse.Namespace) -> int:
    print_config_line(
        "compress",
        [
            ("Body", "text" if args.text else "binary"),
            ("Resize", args.width is not None or args.height is not None),
        ],
        debug=args.debug,
    )
    if args.outdir is not None:
        args.outdir.mkdir(parents=True, exist_ok=True)
    if args.src.is_dir():
        files = _collect(args.src, IMAGE_SUFFIXES | PPM_SUFFIXES)
        if args.debug:
            debug_log(key_value_pairs_to_string([("Images", len(files))]))
    else:
        files = [args.src]
    for p in files:
        _compress_one(p, args.outdir, args.text, args.width, args.height, args.debug)
    return 0


def cmd_decompress(args: argparse.Namespace) -> int:
    print_config_line(
        "decompress",
        [("Body", "text" if args.text else "binary"), ("Strict", args.strict)],
        debug=args.debug,
    )
    if args.outdir is not None:
        args.outdir.mkdir(parents=True, exist_ok=True)
    if args.src.is_dir():
        files = _collect(args.src, frozenset({TRIP_SUFFIX}))
    else:
        files = [args.src]
    for p in files:
        _decompress_one(p, args.outdir, args.format, args.text, args.strict, args.debug)
    return 0


def cmd_resize(args: argparse.Namespace) -> int:
    image = load_any(args.src)
    new_w, new_h = target_size(image.width, image.height, args.width, args.height)
    out = resize(image, new_w, new_h)
    out_path = args.out or args.src.with_name(f"{args.src.stem}_resized.png")
    save_any(out_path, out)
    log(f"Wrote {out_path.name} | {image.width}x{image.height} -> {new_w}x{new_h}")
    return 0


def cmd_gray(args: argparse.Namespace) -> int:
    image = load_any(args.src)
    out = to_gray(image)
    out_path = args.out or args.src.with_name(f"{args.src.stem}_gray.png")
    save_any(out_path, out)
    log(f"Wrote {out_path.name} | size={out.width}x{out.height}")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    record = read_record(args.src, legacy_text=args.text)
    log(
        key_value_pairs_to_string(
            [
                ("Size", f"{record.width}x{record.height}"),
                ("Channels", record.channels),
                ("Background", record.background[: record.channels]),
                ("Entries", record.entry_count),
                ("Declared", record.declared_count),
                ("Complete", record.is_complete),
            ]
        )
    )
    return 0


COMMANDS = {
    "compress": cmd_compress,
    "decompress": cmd_decompress,
    "resize": cmd_resize,
    "gray": cmd_gray,
    "info": cmd_info,
}


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Returns the process exit status: 0 on success, 1 on a codec or I/O
    failure, 2 when the input path does not exist.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    if not args.src.exists():
        error(f"not found: {args.src}")
        return 2

    try:
        return COMMANDS[args.command](args)
    except TripError as exc:
        error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
