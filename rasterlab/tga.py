"""Reading and writing Targa files."""

from __future__ import annotations

import contextlib
import struct

from .image import (
    COLOR_MAP_ABSENT,
    COLOR_MAP_PRESENT,
    SANE_DEPTHS,
    T_TO_B_BIT,
    UNMAP_DEPTHS,
    ImageType,
    TgaError,
    TgaErrorCode,
    TgaImage,
)
from .pixels import pack_pixel, unpack_pixel
from .rle import decode, encode_row

_FOOTER = b"\0" * 8 + b"TRUEVISION-XFILE." + b"\0"
_COLORMAPPED = (ImageType.COLORMAP, ImageType.COLORMAP_RLE)


def _read_exact(stream, size: int) -> bytes:
    data = stream.read(size)
    if len(data) < size:
        raise TgaError(TgaErrorCode.EOF)
    return data


def _read_u8(stream) -> int:
    return _read_exact(stream, 1)[0]


def _read_u16(stream) -> int:
    return int.from_bytes(_read_exact(stream, 2), "little")


def read_tga(path) -> TgaImage:
    """Read a Targa image from the file at ``path``."""
    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise TgaError(TgaErrorCode.FOPEN) from exc
    with handle:
        return read_tga_from(handle)


def read_tga_from(stream) -> TgaImage:
    """Read a Targa image from a binary stream."""
    id_length = _read_u8(stream)
    color_map_type = _read_u8(stream)
    if color_map_type not in (COLOR_MAP_ABSENT, COLOR_MAP_PRESENT):
        raise TgaError(TgaErrorCode.CMAP_TYPE)

    raw_type = _read_u8(stream)
    if raw_type == ImageType.NONE:
        raise TgaError(TgaErrorCode.NO_IMG)
    try:
        image_type = ImageType(raw_type)
    except ValueError:
        raise TgaError(TgaErrorCode.IMG_TYPE) from None

    colormapped = image_type in _COLORMAPPED
    if colormapped and color_map_type == COLOR_MAP_ABSENT:
        raise TgaError(TgaErrorCode.CMAP_MISSING)
    if not colormapped and color_map_type == COLOR_MAP_PRESENT:
        raise TgaError(TgaErrorCode.CMAP_PRESENT)

    cmap_origin = _read_u16(stream)
    cmap_length = _read_u16(stream)
    cmap_depth = _read_u8(stream)
    if color_map_type == COLOR_MAP_PRESENT:
        if cmap_length == 0:
            raise TgaError(TgaErrorCode.CMAP_LENGTH)
        if cmap_depth not in UNMAP_DEPTHS:
            raise TgaError(TgaErrorCode.CMAP_DEPTH)

    origin_x = _read_u16(stream)
    origin_y = _read_u16(stream)
    width = _read_u16(stream)
    height = _read_u16(stream)
    if width == 0 or height == 0:
        raise TgaError(TgaErrorCode.ZERO_SIZE)

    pixel_depth = _read_u8(stream)
    if pixel_depth not in SANE_DEPTHS or (pixel_depth != 8 and colormapped):
        raise TgaError(TgaErrorCode.PIXEL_DEPTH)

    descriptor = _read_u8(stream)
    image_id = _read_exact(stream, id_length) if id_length else b""

    color_map_data = None
    if color_map_type == COLOR_MAP_PRESENT:
        entry = cmap_depth // 8
        color_map_data = bytearray((cmap_origin + cmap_length) * entry)
        start = cmap_origin * entry
        color_map_data[start:] = _read_exact(stream, cmap_length * entry)

    bpp = pixel_depth // 8
    if image_type in (ImageType.COLORMAP_RLE, ImageType.BGR_RLE, ImageType.MONO_RLE):
        image_data = decode(stream, width, height, bpp)
    else:
        image_data = bytearray(_read_exact(stream, width * height * bpp))

    return TgaImage(
        image_type=image_type,
        width=width,
        height=height,
        pixel_depth=pixel_depth,
        image_data=image_data,
        color_map_type=color_map_type,
        color_map_origin=cmap_origin,
        color_map_length=cmap_length,
        color_map_depth=cmap_depth,
        origin_x=origin_x,
        origin_y=origin_y,
        image_descriptor=descriptor,
        image_id=bytes(image_id),
        color_map_data=color_map_data,
    )


def _validate(image: TgaImage) -> None:
    if image.color_map_type not in (COLOR_MAP_ABSENT, COLOR_MAP_PRESENT):
        raise TgaError(TgaErrorCode.CMAP_TYPE)
    if image.image_type == ImageType.NONE:
        raise TgaError(TgaErrorCode.NO_IMG)
    if image.image_type not in tuple(ImageType):
        raise TgaError(TgaErrorCode.IMG_TYPE)
    if image.is_colormapped() and image.color_map_type == COLOR_MAP_ABSENT:
        raise TgaError(TgaErrorCode.CMAP_MISSING)
    if not image.is_colormapped() and image.color_map_type == COLOR_MAP_PRESENT:
        raise TgaError(TgaErrorCode.CMAP_PRESENT)
    if image.color_map_type == COLOR_MAP_PRESENT:
        if image.color_map_length == 0:
            raise TgaError(TgaErrorCode.CMAP_LENGTH)
        if image.color_map_depth not in UNMAP_DEPTHS:
            raise TgaError(TgaErrorCode.CMAP_DEPTH)
        if image.color_map_data is None:
            raise ValueError("color map present but no color map data given")
    if image.width == 0 or image.height == 0:
        raise TgaError(TgaErrorCode.ZERO_SIZE)
    if image.pixel_depth not in SANE_DEPTHS or (
        image.pixel_depth != 8 and image.is_colormapped()
    ):
        raise TgaError(TgaErrorCode.PIXEL_DEPTH)
    if len(image.image_id) > 255:
        raise ValueError("image id is longer than 255 bytes")
    needed = image.width * image.height * (image.pixel_depth // 8)
    if len(image.image_data) < needed:
        raise ValueError(f"need {needed} bytes of image data, got {len(image.image_data)}")


def _encode(image: TgaImage) -> bytes:
    out = bytearray(
        struct.pack(
            "<BBBHHBHHHHBB",
            len(image.image_id),
            image.color_map_type,
            int(image.image_type),
            image.color_map_origin,
            image.color_map_length,
            image.color_map_depth,
            image.origin_x,
            image.origin_y,
            image.width,
            image.height,
            image.pixel_depth,
            image.image_descriptor,
        )
    )
    out += image.image_id
    if image.color_map_type == COLOR_MAP_PRESENT:
        entry = image.color_map_depth // 8
        start = image.color_map_origin * entry
        out += image.color_map_data[start:start + image.color_map_length * entry]

    bpp = image.pixel_depth // 8
    line = image.width * bpp
    if image.is_rle():
        for top in range(0, image.height * line, line):
            out += encode_row(image.image_data[top:top + line], image.width, bpp)
    else:
        out += image.image_data[:image.height * line]
    out += _FOOTER
    return bytes(out)


def write_tga_to(stream, image: TgaImage) -> None:
    """Write ``image`` to a binary stream in Targa format."""
    _validate(image)
    payload = _encode(image)
    try:
        stream.write(payload)
    except OSError as exc:
        raise TgaError(TgaErrorCode.WRITE) from exc


def write_tga(path, image: TgaImage) -> None:
    """Write ``image`` to the file at ``path``."""
    try:
        handle = open(path, "wb")
    except OSError as exc:
        raise TgaError(TgaErrorCode.FOPEN) from exc
    with handle:
        write_tga_to(handle, image)


def swap_red_blue(image: TgaImage) -> None:
    """Swap the red and blue channels of every pixel in place."""
    depth = image.pixel_depth
    if depth not in UNMAP_DEPTHS:
        raise TgaError(TgaErrorCode.PIXEL_DEPTH)
    bpp = depth // 8
    data = image.image_data
    for offset in range(0, image.width * image.height * bpp, bpp):
        pixel = unpack_pixel(data[offset:offset + bpp], depth)
        data[offset:offset + bpp] = pack_pixel(depth, pixel.r, pixel.g, pixel.b, pixel.a)


def _new_image(data, width: int, height: int, depth: int, image_type: ImageType) -> TgaImage:
    return TgaImage(
        image_type=image_type,
        width=width,
        height=height,
        pixel_depth=depth,
        image_data=bytearray(data),
        image_descriptor=T_TO_B_BIT,
    )


def write_mono(path, data, width: int, height: int) -> None:
    """Write 8-bit greyscale pixels, uncompressed."""
    write_tga(path, _new_image(data, width, height, 8, ImageType.MONO))


def write_mono_rle(path, data, width: int, height: int) -> None:
    """Write 8-bit greyscale pixels, run-length encoded."""
    write_tga(path, _new_image(data, width, height, 8, ImageType.MONO_RLE))


def write_bgr(path, data, width: int, height: int, depth: int) -> None:
    """Write BGR(A) pixels, uncompressed."""
    write_tga(path, _new_image(data, width, height, depth, ImageType.BGR))


def write_bgr_rle(path, data, width: int, height: int, depth: int) -> None:
    """Write BGR(A) pixels, run-length encoded."""
    write_tga(path, _new_image(data, width, height, depth, ImageType.BGR_RLE))


def _write_rgb(path, data, width: int, height: int, depth: int, image_type: ImageType) -> None:
    image = _new_image(data, width, height, depth, image_type)
    with contextlib.suppress(TgaError):
        swap_red_blue(image)
    write_tga(path, image)


def write_rgb(path, data, width: int, height: int, depth: int) -> None:
    """Write RGB(A) pixels, uncompressed; the caller's data is left untouched."""
    _write_rgb(path, data, width, height, depth, ImageType.BGR)


def write_rgb_rle(path, data, width: int, height: int, depth: int) -> None:
    """Write RGB(A) pixels, run-length encoded; the caller's data is left untouched."""
    _write_rgb(path, data, width, height, depth, ImageType.BGR_RLE)