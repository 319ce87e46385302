"""Color inversion of BMP images, natively or through Pillow."""

from pathlib import Path
from typing import Union
import logging

from PIL import Image, ImageOps

from .bmp_utils import PALETTE_ENTRY_SIZE, parse_bmp_header
from .errors import BmpIoError, LibraryError, UnsupportedFormatError
from .pixel_reader import BmpImage, iter_pixel_offsets

logger = logging.getLogger(__name__)


def _invert_triple(buffer: bytearray, offset: int) -> None:
    for i in range(offset, offset + 3):
        buffer[i] ^= 0xFF


def negate_image(image: BmpImage) -> BmpImage:
    """
    Return a copy of ``image`` with B, G and R inverted.

    8-bit images have their palette inverted and keep their pixel
    indices; the reserved fourth palette byte is left alone. 24-bit
    images have every pixel inverted while row padding is copied as-is.
    The header is reused unchanged.
    """
    palette = bytearray(image.palette)
    pixels = bytearray(image.pixels)

    if image.bits_per_pixel == 8:
        for offset in range(0, len(palette), PALETTE_ENTRY_SIZE):
            _invert_triple(palette, offset)
    else:
        for _x, _y, offset in iter_pixel_offsets(image.header):
            _invert_triple(pixels, offset)

    return BmpImage(
        header=image.header,
        palette=palette,
        pixels=pixels,
        gap=image.gap,
        name=image.name,
    )


def encode_image(image: BmpImage) -> bytes:
    """Serialize an image: header, then palette or header gap, then pixels."""
    return b"".join((image.header.to_bytes(), bytes(image.palette), image.gap, bytes(image.pixels)))


def write_image(image: BmpImage, output_path: Union[str, Path]) -> int:
    """Write an encoded image, returning the number of bytes written."""
    data = encode_image(image)
    try:
        with open(output_path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise BmpIoError(f"Data writing error: {e}.", str(output_path)) from e
    logger.debug(f"Wrote {len(data)} bytes to {output_path}")
    return len(data)


def negate_with_pillow(input_path: Union[str, Path], output_path: Union[str, Path]) -> None:
    """
    Invert an image with Pillow and save it as BMP.

    Palette and grayscale images stay 8-bit; everything else is written
    as 24-bit RGB.

    Raises:
        UnsupportedFormatError: Image is stored top-down (negative height).
        LibraryError: Pillow failed to read, invert or save the image.
    """
    try:
        data = Path(input_path).read_bytes()
    except OSError as e:
        raise BmpIoError(f"Cannot open {input_path}: {e}") from e

    header = parse_bmp_header(data, str(input_path))
    if header.top_down:
        raise UnsupportedFormatError(
            "The Pillow path does not support negative height images. Use --mine option.",
            str(input_path),
        )

    try:
        with Image.open(input_path) as img:
            img.load()
            if img.mode == "P":
                palette = img.getpalette()
                inverted = img.copy()
                inverted.putpalette([255 - value for value in palette])
            elif img.mode == "L":
                inverted = ImageOps.invert(img)
            else:
                inverted = ImageOps.invert(img.convert("RGB"))
            inverted.save(output_path, format="BMP")
    except (OSError, ValueError) as e:
        raise LibraryError(f"Pillow conversion failed: {e}", str(input_path)) from e

    logger.debug(f"Pillow negated {input_path} -> {output_path}")
