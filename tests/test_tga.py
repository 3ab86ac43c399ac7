import io
import struct

import pytest

from rasterlab.image import ImageType, TgaError, TgaErrorCode, TgaImage
from rasterlab.tga import (
    read_tga,
    read_tga_from,
    swap_red_blue,
    write_bgr,
    write_bgr_rle,
    write_mono,
    write_mono_rle,
    write_rgb,
    write_rgb_rle,
    write_tga,
    write_tga_to,
)

FOOTER = b"\0" * 8 + b"TRUEVISION-XFILE.\0"


def header(cmap_type=0, image_type=2, origin=0, length=0, cmap_depth=0,
           width=2, height=1, depth=24, descriptor=0x20, id_length=0):
    return struct.pack(
        "<BBBHHBHHHHBB", id_length, cmap_type, image_type, origin, length,
        cmap_depth, 0, 0, width, height, depth, descriptor,
    )


def expect_code(code, func, *args):
    with pytest.raises(TgaError) as info:
        func(*args)
    assert info.value.code is code


def test_write_mono_layout(tmp_path):
    path = tmp_path / "mono.tga"
    write_mono(path, b"\x01\x02", 2, 1)
    data = path.read_bytes()
    assert data[:18] == header(image_type=3, width=2, height=1, depth=8)
    assert data[18:20] == b"\x01\x02"
    assert data[20:] == FOOTER


@pytest.mark.parametrize("depth", [16, 24, 32])
def test_bgr_round_trip(tmp_path, depth):
    bpp = depth // 8
    pixels = bytes((i * 7) % 256 for i in range(3 * 2 * bpp))
    path = tmp_path / "bgr.tga"
    write_bgr(path, pixels, 3, 2, depth)
    image = read_tga(path)
    assert image.image_type is ImageType.BGR
    assert (image.width, image.height, image.pixel_depth) == (3, 2, depth)
    assert image.is_top_to_bottom()
    assert image.image_data == bytearray(pixels)


@pytest.mark.parametrize("depth", [24, 32])
def test_bgr_rle_round_trip(tmp_path, depth):
    bpp = depth // 8
    pixels = b"\x10\x20\x30\x40"[:bpp] * 5 + bytes(range(bpp * 3))
    path = tmp_path / "bgr_rle.tga"
    write_bgr_rle(path, pixels, 4, 2, depth)
    image = read_tga(path)
    assert image.is_rle()
    assert image.image_data == bytearray(pixels)


def test_mono_rle_round_trip_and_smaller(tmp_path):
    pixels = b"\x80" * 64
    plain, packed = tmp_path / "plain.tga", tmp_path / "packed.tga"
    write_mono(plain, pixels, 8, 8)
    write_mono_rle(packed, pixels, 8, 8)
    assert packed.stat().st_size < plain.stat().st_size
    assert read_tga(packed).image_data == read_tga(plain).image_data == bytearray(pixels)


def test_colormap_round_trip():
    cmap = bytearray(b"\0\0\0" + b"\x01\x02\x03" + b"\x04\x05\x06")
    image = TgaImage(
        image_type=ImageType.COLORMAP, width=2, height=1, pixel_depth=8,
        image_data=bytearray([1, 2]), color_map_type=1, color_map_origin=1,
        color_map_length=2, color_map_depth=24, color_map_data=cmap,
    )
    stream = io.BytesIO()
    write_tga_to(stream, image)
    stream.seek(0)
    loaded = read_tga_from(stream)
    assert loaded.is_colormapped()
    assert loaded.color_map_data == cmap
    assert loaded.image_data == bytearray([1, 2])


def test_image_id_round_trip():
    image = TgaImage(image_type=ImageType.MONO, width=1, height=1, pixel_depth=8,
                     image_data=bytearray(b"\x07"), image_id=b"label")
    stream = io.BytesIO()
    write_tga_to(stream, image)
    stream.seek(0)
    loaded = read_tga_from(stream)
    assert loaded.image_id == b"label"
    assert loaded.image_data == bytearray(b"\x07")


def test_read_missing_file(tmp_path):
    with pytest.raises(TgaError) as info:
        read_tga(tmp_path / "absent.tga")
    assert info.value.code is TgaErrorCode.FOPEN


@pytest.mark.parametrize(
    "blob,code",
    [
        (b"\x00\x02\x02", TgaErrorCode.CMAP_TYPE),
        (b"\x00\x00\x00", TgaErrorCode.NO_IMG),
        (b"\x00\x00\x04", TgaErrorCode.IMG_TYPE),
        (b"\x00\x00\x01", TgaErrorCode.CMAP_MISSING),
        (b"\x00\x01\x02", TgaErrorCode.CMAP_PRESENT),
        (b"\x00\x00\x02\x00", TgaErrorCode.EOF),
        (header(width=0), TgaErrorCode.ZERO_SIZE),
        (header(depth=12), TgaErrorCode.PIXEL_DEPTH),
        (header(cmap_type=1, image_type=1, length=0, cmap_depth=24, depth=8),
         TgaErrorCode.CMAP_LENGTH),
        (header(cmap_type=1, image_type=1, length=2, cmap_depth=8, depth=8),
         TgaErrorCode.CMAP_DEPTH),
        (header(cmap_type=1, image_type=1, length=2, cmap_depth=24, depth=24),
         TgaErrorCode.PIXEL_DEPTH),
        (header() + b"\x01\x02", TgaErrorCode.EOF),
        (header(image_type=10) + b"\x81", TgaErrorCode.EOF),
        (header(image_type=10, width=1) + b"\x81\x01\x02\x03", TgaErrorCode.RLE),
    ],
)
def test_read_errors(blob, code):
    expect_code(code, read_tga_from, io.BytesIO(blob))


@pytest.mark.parametrize(
    "kwargs,code",
    [
        (dict(image_type=ImageType.NONE), TgaErrorCode.NO_IMG),
        (dict(image_type=ImageType.BGR, width=0), TgaErrorCode.ZERO_SIZE),
        (dict(image_type=ImageType.BGR, pixel_depth=12), TgaErrorCode.PIXEL_DEPTH),
        (dict(image_type=ImageType.COLORMAP, pixel_depth=8), TgaErrorCode.CMAP_MISSING),
        (dict(image_type=ImageType.BGR, color_map_type=1), TgaErrorCode.CMAP_PRESENT),
        (dict(image_type=ImageType.BGR, color_map_type=3), TgaErrorCode.CMAP_TYPE),
    ],
)
def test_write_errors(kwargs, code):
    params = dict(image_type=ImageType.BGR, width=1, height=1, pixel_depth=24,
                  image_data=bytearray(4))
    params.update(kwargs)
    expect_code(code, write_tga_to, io.BytesIO(), TgaImage(**params))


def test_write_short_data_rejected():
    image = TgaImage(image_type=ImageType.BGR, width=4, height=4, pixel_depth=24,
                     image_data=bytearray(3))
    with pytest.raises(ValueError):
        write_tga_to(io.BytesIO(), image)


def test_write_tga_to_path(tmp_path):
    image = TgaImage(image_type=ImageType.MONO, width=2, height=2, pixel_depth=8,
                     image_data=bytearray(b"\x01\x02\x03\x04"))
    path = tmp_path / "out.tga"
    write_tga(path, image)
    assert read_tga(path).image_data == image.image_data


def test_swap_red_blue_32():
    image = TgaImage(image_type=ImageType.BGR, width=2, height=1, pixel_depth=32,
                     image_data=bytearray(b"\x01\x02\x03\x04\x05\x06\x07\x08"))
    swap_red_blue(image)
    assert image.image_data == bytearray(b"\x03\x02\x01\x04\x07\x06\x05\x08")


def test_swap_red_blue_twice_is_identity():
    original = bytearray(b"\x11\x22\x33\x44\x55\x66")
    image = TgaImage(image_type=ImageType.BGR, width=2, height=1, pixel_depth=24,
                     image_data=bytearray(original))
    swap_red_blue(image)
    swap_red_blue(image)
    assert image.image_data == original


def test_swap_red_blue_rejects_mono_depth():
    image = TgaImage(image_type=ImageType.MONO, width=1, height=1, pixel_depth=8,
                     image_data=bytearray(1))
    expect_code(TgaErrorCode.PIXEL_DEPTH, swap_red_blue, image)


@pytest.mark.parametrize("writer", [write_rgb, write_rgb_rle])
def test_write_rgb_stores_bgr(tmp_path, writer):
    rgb = b"\x0a\x0b\x0c\x0d\x0e\x0f"
    path = tmp_path / "rgb.tga"
    writer(path, rgb, 2, 1, 24)
    assert rgb == b"\x0a\x0b\x0c\x0d\x0e\x0f"
    assert read_tga(path).image_data == bytearray(b"\x0c\x0b\x0a\x0f\x0e\x0d")