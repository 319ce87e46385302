"""
Palette and pixel-array reading for validated BMP streams.

The reader assumes the stream was already passed through
``decode_header`` and is positioned right after the 54-byte header.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Tuple, Union
import logging

from .bmp_utils import BmpHeader, HEADER_SIZE, decode_header
from .errors import AllocationError, BmpIoError

logger = logging.getLogger(__name__)


@dataclass
class BmpImage:
    """
    A decoded image: header plus the buffers it exclusively owns.

    Attributes:
        header: Validated header
        palette: BGR0 palette entries (8-bit only, empty otherwise)
        pixels: Pixel array including row padding, in storage order
        gap: Bytes between the header and a 24-bit pixel array
        name: Source name used in diagnostics
    """
    header: BmpHeader
    palette: bytearray = field(default_factory=bytearray)
    pixels: bytearray = field(default_factory=bytearray)
    gap: bytes = b""
    name: str = ""

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.abs_height

    @property
    def bits_per_pixel(self) -> int:
        return self.header.bits_per_pixel


def _read_buffer(stream: BinaryIO, size: int, what: str, source: Optional[str]) -> bytearray:
    try:
        buffer = bytearray(size)
    except MemoryError as e:
        raise AllocationError("Memory allocation error.", source) from e
    try:
        count = stream.readinto(buffer)
    except OSError as e:
        raise BmpIoError(f"{what} read error.", source) from e
    if count != size:
        raise BmpIoError(f"{what} read error. End of file.", source)
    return buffer


def read_pixel_planes(
    stream: BinaryIO,
    header: BmpHeader,
    source: Optional[str] = None,
) -> BmpImage:
    """
    Read palette (8-bit) and pixel-array bytes that follow a decoded header.

    Raises:
        BmpIoError: Short read (truncated file) or stream failure.
        AllocationError: A buffer could not be allocated.
    """
    image = BmpImage(header=header, name=source or "")

    if header.bits_per_pixel == 8:
        image.palette = _read_buffer(stream, header.palette_size, "Palette", source)
    else:
        gap_size = header.pixel_array_offset - HEADER_SIZE
        if gap_size:
            image.gap = bytes(_read_buffer(stream, gap_size, "Header gap", source))
        try:
            stream.seek(header.pixel_array_offset)
        except OSError as e:
            raise BmpIoError("fseek() error.", source) from e

    image.pixels = _read_buffer(stream, header.pixel_array_size, "Pixel array", source)
    logger.debug(
        f"Read {len(image.palette)} palette bytes and {len(image.pixels)} "
        f"pixel bytes from {source or 'stream'}"
    )
    return image


def load_image(path: Union[str, Path]) -> BmpImage:
    """Open, decode and fully buffer a BMP file; the file is closed on return."""
    path = Path(path)
    try:
        stream = path.open("rb")
    except OSError as e:
        raise BmpIoError(f"Cannot open {path}: {e}") from e

    with stream:
        header = decode_header(stream, str(path))
        return read_pixel_planes(stream, header, str(path))


def iter_pixel_offsets(header: BmpHeader) -> Iterator[Tuple[int, int, int]]:
    """Yield ``(x, y, byte_offset)`` for every pixel in storage order, skipping row padding."""
    stride = header.row_stride
    step = header.bytes_per_pixel
    for y in range(header.abs_height):
        row_start = y * stride
        for x in range(header.width):
            yield x, y, row_start + x * step
