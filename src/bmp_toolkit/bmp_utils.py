"""BMP header decoding and validation for 8-bit and 24-bit BITMAPINFOHEADER images."""

from dataclasses import dataclass
from typing import BinaryIO, Optional
import io
import logging
import os
import struct

from .errors import (
    BadMagicError,
    BmpIoError,
    InconsistentMetadataError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)

BMP_MAGIC = b"BM"
HEADER_SIZE = 0x36
DIB_HEADER_SIZE = 40
SUPPORTED_BIT_DEPTHS = (8, 24)
MAX_PALETTE_COLORS = 256
PALETTE_ENTRY_SIZE = 4

# Everything after the magic: 14-byte file header remainder + BITMAPINFOHEADER.
_HEADER_BLOCK = struct.Struct("<IIIIiiHHIIiiII")


@dataclass(frozen=True)
class BmpHeader:
    file_size: int
    reserved: int
    pixel_array_offset: int
    dib_header_size: int
    width: int
    height: int
    planes: int
    bits_per_pixel: int
    compression: int
    image_size: int = 0
    x_pixels_per_meter: int = 0
    y_pixels_per_meter: int = 0
    colors_in_palette: int = 0
    important_colors: int = 0

    @property
    def top_down(self) -> bool:
        return self.height < 0

    @property
    def abs_height(self) -> int:
        return abs(self.height)

    @property
    def bytes_per_pixel(self) -> int:
        return self.bits_per_pixel // 8

    @property
    def row_padding(self) -> int:
        return row_padding(self.width, self.bits_per_pixel)

    @property
    def row_stride(self) -> int:
        return self.width * self.bytes_per_pixel + self.row_padding

    @property
    def palette_size(self) -> int:
        if self.bits_per_pixel != 8:
            return 0
        return self.colors_in_palette * PALETTE_ENTRY_SIZE

    @property
    def pixel_array_size(self) -> int:
        return self.file_size - self.pixel_array_offset

    def to_bytes(self) -> bytes:
        """Serialize back to the 54-byte on-disk header."""
        return BMP_MAGIC + _HEADER_BLOCK.pack(
            self.file_size,
            self.reserved,
            self.pixel_array_offset,
            self.dib_header_size,
            self.width,
            self.height,
            self.planes,
            self.bits_per_pixel,
            self.compression,
            self.image_size,
            self.x_pixels_per_meter,
            self.y_pixels_per_meter,
            self.colors_in_palette,
            self.important_colors,
        )


def row_padding(width: int, bits_per_pixel: int) -> int:
    """
    Bytes appended to each pixel row to reach a DWORD boundary.

    The 24-bit rule is written as ``width % 4``; since ``3 * width`` is
    congruent to ``-width`` mod 4 this always agrees with the usual
    ``(4 - (3 * width) % 4) % 4``.
    """
    if bits_per_pixel == 24:
        return width % 4
    return (4 - width % 4) % 4


def _stream_length(stream: BinaryIO, source: Optional[str]) -> int:
    try:
        stream.seek(0, os.SEEK_END)
        length = stream.tell()
        stream.seek(0, os.SEEK_SET)
    except OSError as e:
        raise BmpIoError(f"fseek() error: {e}.", source) from e
    return length


def _read_exact(stream: BinaryIO, size: int, what: str, source: Optional[str]) -> bytes:
    try:
        data = stream.read(size)
    except OSError as e:
        raise BmpIoError(f"{what} read error: {e}.", source) from e
    if len(data) != size:
        raise BmpIoError(f"{what} read error. End of file.", source)
    return data


def decode_header(stream: BinaryIO, source: Optional[str] = None) -> BmpHeader:
    """
    Parse and validate the 54-byte header of a BMP stream.

    On success the stream is positioned right after the header.

    Raises:
        BmpIoError: Stream could not be sized or read, or is truncated.
        BadMagicError: Stream does not start with 'BM'.
        UnsupportedFormatError: Header variant, plane count, bit depth or
            compression not supported.
        InconsistentMetadataError: Fields contradict each other or the
            actual stream length.
    """
    real_file_size = _stream_length(stream, source)
    if real_file_size == 0:
        raise BmpIoError("Incorrect file. Empty file.", source)

    magic = _read_exact(stream, len(BMP_MAGIC), "Signature", source)
    if magic != BMP_MAGIC:
        raise BadMagicError("Unsupported format. Missing BMP signature.", source)

    block = _read_exact(stream, _HEADER_BLOCK.size, "Header", source)
    header = BmpHeader(*_HEADER_BLOCK.unpack(block))
    logger.debug(f"Decoded header of {source or 'stream'}: {header}")

    validate_header(header, real_file_size, source)
    return header


def validate_header(header: BmpHeader, real_file_size: int, source: Optional[str] = None) -> None:
    """Check every cross-field invariant, in a fixed order."""
    if header.file_size != real_file_size:
        raise InconsistentMetadataError(
            "Size data from metadata does not match the actual size "
            f"({header.file_size} != {real_file_size}).",
            source,
        )
    if header.reserved != 0:
        raise InconsistentMetadataError("Reserved fields should be equal to 0.", source)
    if header.dib_header_size != DIB_HEADER_SIZE:
        raise UnsupportedFormatError(
            "Unsupported format. Only images with BITMAPINFOHEADER header are supported.",
            source,
        )
    if header.planes != 1:
        raise UnsupportedFormatError("The number of color planes should be 1.", source)
    if header.bits_per_pixel not in SUPPORTED_BIT_DEPTHS:
        raise UnsupportedFormatError(
            "Unsupported format. Only 8-bit and 24-bit images are supported.",
            source,
        )
    if header.compression != 0:
        raise UnsupportedFormatError("Support only uncompressed images.", source)
    if header.bits_per_pixel == 8 and header.colors_in_palette > MAX_PALETTE_COLORS:
        raise InconsistentMetadataError(
            f"Number of colors may not exceed {MAX_PALETTE_COLORS}.", source
        )

    if header.width <= 0 or header.height == 0:
        raise InconsistentMetadataError(
            f"Invalid BMP dimensions {header.width}x{header.height}.", source
        )
    if header.pixel_array_offset < HEADER_SIZE:
        raise InconsistentMetadataError("Pixel array overlaps the header.", source)

    if header.row_stride * header.abs_height != header.pixel_array_size:
        raise InconsistentMetadataError(
            "The size of the pixel array does not coincide with the size "
            "specified in the header.",
            source,
        )
    if header.bits_per_pixel == 8 and header.palette_size != header.pixel_array_offset - HEADER_SIZE:
        raise InconsistentMetadataError(
            "The size of the palette array does not coincide with the size "
            "specified in the header.",
            source,
        )


def parse_bmp_header(data: bytes, source: Optional[str] = None) -> BmpHeader:
    """Decode a header from a complete in-memory BMP file."""
    return decode_header(io.BytesIO(data), source)
