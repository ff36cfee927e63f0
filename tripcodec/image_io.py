# tripcodec/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Literal, Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .core_types import DenseImage, as_dense_image
from .errors import IOFailure, TripFormatError

"""
Raster image I/O through Pillow (PNG and every other format Pillow reads).

Images come back as DenseImage in R, G, B (or grey) channel order. Alpha is
dropped; the codec only handles 1 and 3 channels.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except Exception:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]

LoadMode = Literal["auto", "gray", "rgb"]

_GREY_MODES = {"1", "L", "LA", "I", "I;16", "I;16B", "I;16L", "F"}


def _convert_to_srgb(im: Image.Image) -> Image.Image:
    icc_bytes = im.info.get("icc_profile")
    if not icc_bytes or ImageCms is None or im.mode not in ("RGB", "RGBA"):
        return im
    try:
        src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
        dst_prof = ImageCms.createProfile("sRGB")
        im2 = ImageCms.profileToProfile(
            im,
            src_prof,
            dst_prof,
            renderingIntent=ImageCms.Intent.PERCEPTUAL,
            outputMode=im.mode,
        )
        return im if im2 is None else im2
    except (ImageCms.PyCMSError, OSError, ValueError):
        return im


def pil_to_dense(im: Image.Image, mode: LoadMode = "auto") -> DenseImage:
    """Pillow image -> DenseImage. "auto" keeps grey images single-channel."""
    im = ImageOps.exif_transpose(im)
    if mode == "gray" or (mode == "auto" and im.mode in _GREY_MODES):
        target = "L"
    else:
        target = "RGB"
        im = _convert_to_srgb(im)
    arr = np.array(im.convert(target), dtype=np.uint8)
    return DenseImage(arr)


def dense_to_pil(image: Union[DenseImage, np.ndarray]) -> Image.Image:
    # 2-D uint8 -> "L", (H, W, 3) uint8 -> "RGB"
    return Image.fromarray(as_dense_image(image).as_array())


def load_image(path: Union[str, Path], mode: LoadMode = "auto") -> DenseImage:
    p = Path(path)
    try:
        with Image.open(p) as im0:
            im0.load()
            return pil_to_dense(im0, mode)
    except UnidentifiedImageError as exc:
        raise IOFailure(p, "not a recognised image") from exc
    except OSError as exc:
        raise IOFailure(p, exc.strerror or str(exc)) from exc


def save_image(path: Union[str, Path], image: Union[DenseImage, np.ndarray]) -> Path:
    """Save with the format implied by the suffix; no suffix means PNG."""
    p = Path(path)
    if not p.suffix:
        p = p.with_suffix(".png")
    try:
        dense_to_pil(image).save(p)
    except (OSError, ValueError) as exc:
        raise IOFailure(p, str(exc)) from exc
    return p


def decode_image(data: bytes, mode: LoadMode = "auto") -> DenseImage:
    """Decode an encoded raster image held in memory."""
    try:
        with Image.open(io.BytesIO(data)) as im0:
            im0.load()
            return pil_to_dense(im0, mode)
    except (UnidentifiedImageError, OSError) as exc:
        raise TripFormatError(f"cannot decode image buffer: {exc}") from exc


def encode_image(image: Union[DenseImage, np.ndarray], fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    dense_to_pil(image).save(buf, format=fmt)
    return buf.getvalue()


def is_image_file(path: Path) -> bool:
    try:
        with Image.open(path) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = [
    "LoadMode",
    "pil_to_dense",
    "dense_to_pil",
    "load_image",
    "save_image",
    "decode_image",
    "encode_image",
    "is_image_file",
]
