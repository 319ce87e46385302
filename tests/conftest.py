"""Shared BMP builders for the test suite."""

import struct

import pytest


def pack_rows(rows, bits=24, padding_byte=0):
    """
    Build a pixel array from rows in storage order.

    24-bit rows hold (b, g, r) tuples, 8-bit rows hold palette indices.
    """
    data = bytearray()
    for row in rows:
        if bits == 24:
            for pixel in row:
                data.extend(pixel)
            row_bytes = len(row) * 3
        else:
            data.extend(row)
            row_bytes = len(row)
        data.extend(bytes([padding_byte]) * ((4 - row_bytes % 4) % 4))
    return bytes(data)


def build_bmp(
    width,
    height,
    bits=24,
    pixels=None,
    palette=None,
    gap=b"",
    colors=None,
    reserved=0,
    dib_size=40,
    planes=1,
    compression=0,
    file_size=None,
    magic=b"BM",
):
    """Assemble a BITMAPINFOHEADER file; any field can be overridden to make it invalid."""
    row_bytes = width * bits // 8
    stride = row_bytes + (4 - row_bytes % 4) % 4
    if pixels is None:
        pixels = bytes(stride * abs(height))

    if bits == 8:
        if palette is None:
            palette = bytes([0, 0, 0, 0, 255, 255, 255, 0, 0, 0, 255, 0, 255, 0, 0, 0])
        extra = palette
        if colors is None:
            colors = len(palette) // 4
    else:
        extra = gap
        if colors is None:
            colors = 0

    offset = 54 + len(extra)
    if file_size is None:
        file_size = offset + len(pixels)

    header = magic + struct.pack(
        "<IIIIiiHHIIiiII",
        file_size,
        reserved,
        offset,
        dib_size,
        width,
        height,
        planes,
        bits,
        compression,
        len(pixels),
        2835,
        2835,
        colors,
        colors,
    )
    return header + extra + pixels


@pytest.fixture
def make_bmp():
    return build_bmp


@pytest.fixture
def make_pixels():
    return pack_rows


@pytest.fixture
def write_bmp(tmp_path):
    """Write BMP bytes under tmp_path and return the path."""
    def _write(name, data):
        path = tmp_path / name
        path.write_bytes(data)
        return path
    return _write
