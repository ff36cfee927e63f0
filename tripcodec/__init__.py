# tripcodec/__init__.py
"""
tripcodec package.

Purpose:
  Lossless compression for images dominated by one colour. The most frequent
  pixel value becomes the background; only pixels that differ from it are
  stored, in the .trip container. A bilinear resampler rescales images before
  or after storage. See trip.py for the CLI.

Public API:
  compress / decompress : DenseImage <-> TripRecord
  encode / decode       : TripRecord <-> .trip bytes
  save_trip / load_trip : file round-trip
  estimate_background   : dominant colour of an image
  to_entries / to_image : dense grid <-> sparse entry list
  resize / to_gray      : image-space operations
  core_types            : DenseImage, PixelSample, TripRecord and helpers
  errors                : TripError and its subclasses
  image_io, ppm, binding: Pillow, plain-text and raw-buffer boundaries
  utils                 : formatting and logging helpers

Quick start:
  from tripcodec import compress, encode, decode, decompress
  from tripcodec.image_io import load_image
  blob = encode(compress(load_image("shot.png")))
  image = decompress(decode(blob))
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import constants
from . import core_types
from . import errors
from . import header
from . import analysis
from . import sparse
from . import codec
from . import legacy
from . import imgproc
from . import image_io
from . import ppm
from . import binding
from . import utils

from .core_types import DenseImage, PixelSample, TripRecord  # noqa: E402
from .errors import (  # noqa: E402
    BadHeader,
    BadMagic,
    InvalidDimensions,
    IOFailure,
    TripError,
    TripFormatError,
    TruncatedStream,
    UnsupportedChannelCount,
)
from .analysis import estimate_background  # noqa: E402
from .sparse import to_entries, to_image  # noqa: E402
from .codec import (  # noqa: E402
    compress,
    decode,
    decompress,
    encode,
    load_trip,
    read_record,
    save_trip,
    write_record,
)
from .imgproc import resize, to_gray  # noqa: E402

__all__ = [
    "__version__",
    # namespaces
    "constants",
    "core_types",
    "errors",
    "header",
    "analysis",
    "sparse",
    "codec",
    "legacy",
    "imgproc",
    "image_io",
    "ppm",
    "binding",
    "utils",
    # types
    "DenseImage",
    "PixelSample",
    "TripRecord",
    # errors
    "TripError",
    "TripFormatError",
    "BadMagic",
    "TruncatedStream",
    "BadHeader",
    "UnsupportedChannelCount",
    "InvalidDimensions",
    "IOFailure",
    # operations
    "estimate_background",
    "to_entries",
    "to_image",
    "compress",
    "decompress",
    "encode",
    "decode",
    "save_trip",
    "load_trip",
    "read_record",
    "write_record",
    "resize",
    "to_gray",
]
