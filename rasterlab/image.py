"""Targa image container, header constants and error reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

COLOR_MAP_ABSENT = 0
COLOR_MAP_PRESENT = 1

ATTRIB_BITS = 0x0F
R_TO_L_BIT = 0x10
T_TO_B_BIT = 0x20
UNUSED_BITS = 0xC0

SANE_DEPTHS = frozenset({8, 16, 24, 32})
UNMAP_DEPTHS = frozenset({16, 24, 32})


class ImageType(IntEnum):
    """Image type codes stored in the Targa header."""

    NONE = 0
    COLORMAP = 1
    BGR = 2
    MONO = 3
    COLORMAP_RLE = 9
    BGR_RLE = 10
    MONO_RLE = 11


_COLORMAPPED = frozenset({ImageType.COLORMAP, ImageType.COLORMAP_RLE})
_RLE = frozenset({ImageType.COLORMAP_RLE, ImageType.BGR_RLE, ImageType.MONO_RLE})
_MONO = frozenset({ImageType.MONO, ImageType.MONO_RLE})


class TgaErrorCode(IntEnum):
    """Reasons a Targa operation can fail."""

    NOERR = 0
    FOPEN = 1
    EOF = 2
    WRITE = 3
    CMAP_TYPE = 4
    IMG_TYPE = 5
    NO_IMG = 6
    CMAP_MISSING = 7
    CMAP_PRESENT = 8
    CMAP_LENGTH = 9
    CMAP_DEPTH = 10
    ZERO_SIZE = 11
    PIXEL_DEPTH = 12
    NO_MEM = 13
    NOT_CMAP = 14
    RLE = 15
    INDEX_RANGE = 16
    MONO = 17


_MESSAGES = {
    TgaErrorCode.NOERR: "no error",
    TgaErrorCode.FOPEN: "error opening file",
    TgaErrorCode.EOF: "premature end of file",
    TgaErrorCode.WRITE: "error writing to file",
    TgaErrorCode.CMAP_TYPE: "invalid color map type",
    TgaErrorCode.IMG_TYPE: "invalid image type",
    TgaErrorCode.NO_IMG: "no image data included",
    TgaErrorCode.CMAP_MISSING: "color-mapped image without color map",
    TgaErrorCode.CMAP_PRESENT: "non-color-mapped image with extraneous color map",
    TgaErrorCode.CMAP_LENGTH: "color map has zero length",
    TgaErrorCode.CMAP_DEPTH: "invalid color map depth",
    TgaErrorCode.ZERO_SIZE: "the image dimensions are zero",
    TgaErrorCode.PIXEL_DEPTH: "invalid pixel depth",
    TgaErrorCode.NO_MEM: "out of memory",
    TgaErrorCode.NOT_CMAP: "image is not color mapped",
    TgaErrorCode.RLE: "RLE data is corrupt",
    TgaErrorCode.INDEX_RANGE: "color map index out of range",
    TgaErrorCode.MONO: "image is mono",
}


def error_message(code) -> str:
    """Return the human-readable description of an error code."""
    try:
        return _MESSAGES[TgaErrorCode(code)]
    except (ValueError, KeyError):
        return "unknown error code"


class TgaError(Exception):
    """Raised when reading, writing or manipulating a Targa image fails."""

    def __init__(self, code: TgaErrorCode) -> None:
        self.code = TgaErrorCode(code)
        super().__init__(error_message(self.code))


@dataclass
class TgaImage:
    """A Targa image: header fields plus raw id, color map and pixel bytes."""

    image_type: int
    width: int
    height: int
    pixel_depth: int
    image_data: bytearray = field(default_factory=bytearray)
    color_map_type: int = COLOR_MAP_ABSENT
    color_map_origin: int = 0
    color_map_length: int = 0
    color_map_depth: int = 0
    origin_x: int = 0
    origin_y: int = 0
    image_descriptor: int = T_TO_B_BIT
    image_id: bytes = b""
    color_map_data: bytearray | None = None

    def attribute_bits(self) -> int:
        """Attribute bits per pixel stored in the image descriptor."""
        return self.image_descriptor & ATTRIB_BITS

    def is_right_to_left(self) -> bool:
        return bool(self.image_descriptor & R_TO_L_BIT)

    def is_top_to_bottom(self) -> bool:
        return bool(self.image_descriptor & T_TO_B_BIT)

    def is_colormapped(self) -> bool:
        return self.image_type in _COLORMAPPED

    def is_rle(self) -> bool:
        return self.image_type in _RLE

    def is_mono(self) -> bool:
        return self.image_type in _MONO