# tripcodec/ppm.py
from __future__ import annotations

"""
Plain-text pixel matrices: Netpbm ASCII P2 (grey) and P3 (colour).

  P2|P3  <width> <height> <maxval>  samples...

`#` starts a comment that runs to the end of the line. Samples are clamped to
[0, maxval] and scaled to 8 bits with integer arithmetic. P3 samples are
R G B, which is also the channel order of the returned image. Output always
uses maxval 255 and one image row per line.
"""

from pathlib import Path
from typing import Iterator, List, Union

import numpy as np

from .core_types import DenseImage, as_dense_image
from .errors import BadHeader, BadMagic, InvalidDimensions, IOFailure, TruncatedStream

PathLike = Union[str, Path]


def _tokens(text: str) -> Iterator[str]:
    for line in text.splitlines():
        body = line.split("#", 1)[0]
        yield from body.split()


def _int_token(tok: str, what: str) -> int:
    try:
        return int(tok)
    except ValueError:
        raise BadHeader(f"{what} is not an integer: {tok!r}") from None


def read_ppm(text: str) -> DenseImage:
    tokens = _tokens(text)
    magic = next(tokens, "")
    if magic not in ("P2", "P3"):
        raise BadMagic(f"expected P2 or P3, got {magic[:16]!r}")

    head: List[int] = []
    for what in ("width", "height", "maxval"):
        tok = next(tokens, None)
        if tok is None:
            raise TruncatedStream(f"missing {what}")
        head.append(_int_token(tok, what))
    width, height, maxval = head
    if width <= 0 or height <= 0:
        raise InvalidDimensions(width, height)
    if maxval <= 0:
        raise BadHeader(f"maxval must be positive, got {maxval}")

    channels = 1 if magic == "P2" else 3
    needed = width * height * channels
    samples = [_int_token(t, "sample") for _, t in zip(range(needed), tokens)]
    if len(samples) < needed:
        raise TruncatedStream(f"expected {needed} samples, got {len(samples)}")

    arr = np.asarray(samples, dtype=np.int64)
    arr = np.clip(arr, 0, maxval) * 255 // maxval
    return DenseImage(arr.astype(np.uint8).reshape(height, width, channels))


def write_ppm(image: Union[DenseImage, np.ndarray]) -> str:
    img = as_dense_image(image)
    magic = "P2" if img.channels == 1 else "P3"
    lines = [magic, f"{img.width} {img.height}", "255"]
    flat = img.pixels.reshape(img.height, img.width * img.channels)
    for row in flat.tolist():
        lines.append(" ".join(str(v) for v in row))
    return "\n".join(lines) + "\n"


def load_ppm(path: PathLike) -> DenseImage:
    p = Path(path)
    try:
        text = p.read_text(encoding="ascii", errors="replace")
    except OSError as exc:
        raise IOFailure(p, exc.strerror) from exc
    return read_ppm(text)


def save_ppm(path: PathLike, image: Union[DenseImage, np.ndarray]) -> Path:
    p = Path(path)
    try:
        p.write_text(write_ppm(image), encoding="ascii")
    except OSError as exc:
        raise IOFailure(p, exc.strerror) from exc
    return p


__all__ = ["read_ppm", "write_ppm", "load_ppm", "save_ppm"]
