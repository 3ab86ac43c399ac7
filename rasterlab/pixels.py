"""Packing and unpacking of single Targa pixels."""

from __future__ import annotations

from typing import NamedTuple

from .image import TgaError, TgaErrorCode

_FIVE_BITS = 0x1F
_ALPHA_BIT = 0x8000


class Pixel(NamedTuple):
    """A pixel as blue, green, red and alpha channels."""

    b: int
    g: int
    r: int
    a: int


def _require(data, length: int) -> None:
    if len(data) < length:
        raise ValueError(f"need {length} bytes of pixel data, got {len(data)}")


def unpack_pixel(data, bits: int) -> Pixel:
    """Decode the pixel at the start of ``data`` stored with ``bits`` per pixel."""
    if bits == 32:
        _require(data, 4)
        return Pixel(data[0], data[1], data[2], data[3])
    if bits == 24:
        _require(data, 3)
        return Pixel(data[0], data[1], data[2], 0)
    if bits == 16:
        _require(data, 2)
        value = data[0] | (data[1] << 8)
        return Pixel(
            (value & _FIVE_BITS) << 3,
            ((value >> 5) & _FIVE_BITS) << 3,
            ((value >> 10) & _FIVE_BITS) << 3,
            255 if value & _ALPHA_BIT else 0,
        )
    if bits == 8:
        _require(data, 1)
        return Pixel(data[0], data[0], data[0], 0)
    raise TgaError(TgaErrorCode.PIXEL_DEPTH)


def pack_pixel(bits: int, b: int, g: int, r: int, a: int) -> bytes:
    """Encode a pixel into ``bits`` per pixel (32, 24 or 16)."""
    if bits == 32:
        return bytes((b, g, r, a))
    if bits == 24:
        return bytes((b, g, r))
    if bits == 16:
        value = (b >> 3) & _FIVE_BITS
        value |= ((g >> 3) & _FIVE_BITS) << 5
        value |= ((r >> 3) & _FIVE_BITS) << 10
        if a > 127:
            value |= _ALPHA_BIT
        return value.to_bytes(2, "little")
    raise TgaError(TgaErrorCode.PIXEL_DEPTH)