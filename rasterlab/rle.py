"""Run-length encoding of Targa pixel rows."""

from __future__ import annotations

from enum import Enum

from .image import TgaError, TgaErrorCode

MAX_PACKET = 128
_RLE_BIT = 0x80
_COUNT_MASK = 0x7F


class PacketType(Enum):
    """Kind of a Targa RLE packet."""

    RAW = 0
    RLE = 1


def _same(row, first: int, second: int, bpp: int) -> bool:
    return row[first * bpp:(first + 1) * bpp] == row[second * bpp:(second + 1) * bpp]


def packet_type(row, pos: int, width: int, bpp: int) -> PacketType:
    """Choose whether the packet starting at ``pos`` is best stored RAW or RLE."""
    if pos == width - 1:
        return PacketType.RAW
    if _same(row, pos, pos + 1, bpp):
        if bpp > 1:
            return PacketType.RLE
        # With one byte per pixel a run only pays off from three repeats on.
        if pos < width - 2 and _same(row, pos + 1, pos + 2, bpp):
            return PacketType.RLE
    return PacketType.RAW


def packet_length(row, pos: int, width: int, bpp: int, kind: PacketType) -> int:
    """Number of pixels, at most 128, covered by the packet starting at ``pos``."""
    if pos == width - 1:
        return 1
    if pos == width - 2:
        return 2
    length = 2
    while pos + length < width:
        if kind is PacketType.RLE:
            extends = _same(row, pos, pos + length, bpp)
        else:
            extends = packet_type(row, pos + length, width, bpp) is PacketType.RAW
        if not extends:
            return length
        length += 1
        if length == MAX_PACKET:
            return length
    return length


def encode_row(row, width: int, bpp: int) -> bytes:
    """Encode one row of ``width`` pixels of ``bpp`` bytes each as RLE packets."""
    out = bytearray()
    pos = 0
    while pos < width:
        kind = packet_type(row, pos, width, bpp)
        length = packet_length(row, pos, width, bpp, kind)
        header = length - 1
        if kind is PacketType.RLE:
            out.append(header | _RLE_BIT)
            out += row[pos * bpp:(pos + 1) * bpp]
        else:
            out.append(header)
            out += row[pos * bpp:(pos + length) * bpp]
        pos += length
    return bytes(out)


def _read_exact(stream, size: int) -> bytes:
    data = stream.read(size)
    if len(data) < size:
        raise TgaError(TgaErrorCode.EOF)
    return data


def decode(stream, width: int, height: int, bpp: int) -> bytearray:
    """Read RLE packets from ``stream`` until ``width * height`` pixels are decoded."""
    expected = width * height
    loaded = 0
    out = bytearray()
    while loaded < expected:
        header = _read_exact(stream, 1)[0]
        count = (header & _COUNT_MASK) + 1
        if header & _RLE_BIT:
            value = _read_exact(stream, bpp)
            if loaded + count > expected:
                raise TgaError(TgaErrorCode.RLE)
            out += value * count
        else:
            if loaded + count > expected:
                raise TgaError(TgaErrorCode.RLE)
            out += _read_exact(stream, bpp * count)
        loaded += count
    return out