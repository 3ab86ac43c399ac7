"""In-place manipulations of Targa images: flips, unmapping, desaturation, depth."""

from __future__ import annotations

from .image import (
    COLOR_MAP_ABSENT,
    R_TO_L_BIT,
    SANE_DEPTHS,
    T_TO_B_BIT,
    UNMAP_DEPTHS,
    ImageType,
    TgaError,
    TgaErrorCode,
    TgaImage,
)
from .pixels import pack_pixel, unpack_pixel


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def _pixels(data, count: int, bpp: int):
    for offset in range(0, count * bpp, bpp):
        yield data[offset:offset + bpp]


def flip_horizontal(image: TgaImage) -> None:
    """Mirror every row in place and toggle the right-to-left descriptor bit."""
    if image.pixel_depth not in SANE_DEPTHS:
        raise TgaError(TgaErrorCode.PIXEL_DEPTH)
    bpp = image.pixel_depth // 8
    line = image.width * bpp
    flipped = bytearray()
    for top in range(0, image.height * line, line):
        row = image.image_data[top:top + line]
        flipped += b"".join(reversed(list(_pixels(row, image.width, bpp))))
    image.image_data[:len(flipped)] = flipped
    image.image_descriptor ^= R_TO_L_BIT


def flip_vertical(image: TgaImage) -> None:
    """Reverse the order of the rows in place and toggle the top-to-bottom bit."""
    if image.pixel_depth not in SANE_DEPTHS:
        raise TgaError(TgaErrorCode.PIXEL_DEPTH)
    line = image.width * (image.pixel_depth // 8)
    rows = [image.image_data[top:top + line] for top in range(0, image.height * line, line)]
    flipped = b"".join(reversed(rows))
    image.image_data[:len(flipped)] = flipped
    image.image_descriptor ^= T_TO_B_BIT


def color_unmap(image: TgaImage) -> None:
    """Replace color-map indices by the color map entries they refer to."""
    if not image.is_colormapped():
        raise TgaError(TgaErrorCode.NOT_CMAP)
    if image.pixel_depth != 8:
        raise TgaError(TgaErrorCode.PIXEL_DEPTH)
    if image.color_map_depth not in SANE_DEPTHS:
        raise TgaError(TgaErrorCode.CMAP_DEPTH)

    bpp = image.color_map_depth // 8
    limit = image.color_map_origin + image.color_map_length
    color_map = image.color_map_data or b""
    unmapped = bytearray()
    for index in image.image_data[:image.width * image.height]:
        if index >= limit:
            raise TgaError(TgaErrorCode.INDEX_RANGE)
        unmapped += color_map[index * bpp:(index + 1) * bpp]

    image.image_data = unmapped
    image.image_type = ImageType.BGR
    image.pixel_depth = image.color_map_depth
    image.color_map_data = None
    image.color_map_type = COLOR_MAP_ABSENT
    image.color_map_origin = 0
    image.color_map_length = 0
    image.color_map_depth = 0


def find_pixel(image: TgaImage, x: int, y: int) -> int | None:
    """Byte offset of pixel (x, y) honouring the image orientation, or None if outside."""
    if not (0 <= x < image.width and 0 <= y < image.height):
        return None
    if not image.is_top_to_bottom():
        y = image.height - 1 - y
    if image.is_right_to_left():
        x = image.width - 1 - x
    return (x + y * image.width) * image.pixel_depth // 8


def desaturate(image: TgaImage, cr: int, cg: int, cb: int, dv: int) -> None:
    """Turn the image into 8-bit mono using ``(r*cr + g*cg + b*cb) / dv``."""
    if image.is_mono():
        raise TgaError(TgaErrorCode.MONO)
    if image.is_colormapped():
        color_unmap(image)
    if image.pixel_depth not in UNMAP_DEPTHS:
        raise TgaError(TgaErrorCode.PIXEL_DEPTH)

    bpp = image.pixel_depth // 8
    grey = bytearray()
    for chunk in _pixels(image.image_data, image.width * image.height, bpp):
        pixel = unpack_pixel(chunk, image.pixel_depth)
        value = _trunc_div(pixel.b * cb + pixel.g * cg + pixel.r * cr, dv)
        grey.append(value & 0xFF)

    image.image_data = grey
    image.pixel_depth = 8
    image.image_type = ImageType.MONO


def desaturate_rec_601_1(image: TgaImage) -> None:
    desaturate(image, 2989, 5866, 1145, 10000)


def desaturate_rec_709(image: TgaImage) -> None:
    desaturate(image, 2126, 7152, 722, 10000)


def desaturate_itu(image: TgaImage) -> None:
    desaturate(image, 2220, 7067, 713, 10000)


def desaturate_avg(image: TgaImage) -> None:
    desaturate(image, 1, 1, 1, 3)


def convert_depth(image: TgaImage, bits: int) -> None:
    """Convert the pixels to ``bits`` per pixel (32, 24 or 16)."""
    if bits not in UNMAP_DEPTHS or image.pixel_depth not in SANE_DEPTHS:
        raise TgaError(TgaErrorCode.PIXEL_DEPTH)
    if image.is_colormapped():
        color_unmap(image)
    if image.pixel_depth == bits:
        return

    bpp = image.pixel_depth // 8
    converted = bytearray()
    for chunk in _pixels(image.image_data, image.width * image.height, bpp):
        pixel = unpack_pixel(chunk, image.pixel_depth)
        converted += pack_pixel(bits, pixel.b, pixel.g, pixel.r, pixel.a)

    image.image_data = converted
    image.pixel_depth = bits