"""
BMP Toolkit - validate, compare and negate uncompressed BMP images

Byte-level decoding of 8-bit palette and 24-bit truecolor
BITMAPINFOHEADER files.
"""

__version__ = "0.1.0"

from bmp_toolkit.bmp_utils import BmpHeader, decode_header, parse_bmp_header
from bmp_toolkit.pixel_reader import BmpImage, load_image, read_pixel_planes
from bmp_toolkit.comparator import DiffReport, Verdict, compare_images
from bmp_toolkit.negator import encode_image, negate_image, negate_with_pillow

__all__ = [
    "BmpHeader",
    "decode_header",
    "parse_bmp_header",
    "BmpImage",
    "load_image",
    "read_pixel_planes",
    "DiffReport",
    "Verdict",
    "compare_images",
    "encode_image",
    "negate_image",
    "negate_with_pillow",
    "__version__",
]
