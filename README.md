# rasterlab

A small, dependency-free toolkit for Truevision Targa (`.tga`) images, with
two demo software rasterizers that write their frames as TGA files.

## Installation

```
pip install .
```

Python 3.10 or newer is required. There are no runtime dependencies.

## Modules

- `rasterlab.image` – the `TgaImage` dataclass holding the header fields,
  image id, colour map and pixel bytes, with `attribute_bits()`,
  `is_right_to_left()`, `is_top_to_bottom()`, `is_colormapped()`, `is_rle()`
  and `is_mono()`. Also the `ImageType` and `TgaErrorCode` enums, the
  `TgaError` exception and `error_message(code)`.
- `rasterlab.pixels` – `unpack_pixel(data, bits)` decodes one 8, 16, 24 or
  32-bit pixel into a `Pixel(b, g, r, a)`; `pack_pixel(bits, b, g, r, a)`
  encodes one into 16, 24 or 32 bits.
- `rasterlab.rle` – the TGA run-length codec: `encode_row(row, width, bpp)`
  and `decode(stream, width, height, bpp)`, plus the packet helpers
  `packet_type`, `packet_length` and the `PacketType` enum.
- `rasterlab.tga` – reading and writing files and streams.
- `rasterlab.transform` – operations on a `TgaImage`.
- `rasterlab.triangles` and `rasterlab.quads` – the rasterizer demos.

## Reading and writing images

```python
from rasterlab.image import TgaError
from rasterlab.tga import read_tga, write_tga, write_bgr

try:
    image = read_tga("input.tga")
except TgaError as exc:
    print("could not read image:", exc, exc.code)
else:
    print(image.width, image.height, image.pixel_depth)
    write_tga("copy.tga", image)

# A 2x1 true-colour image, 32 bits per pixel, bytes in B, G, R, A order.
write_bgr("tiny.tga", bytes([255, 0, 0, 255, 0, 0, 255, 255]), 2, 1, 32)
```

`read_tga_from(stream)` and `write_tga_to(stream, image)` do the same on
binary streams. Colour-mapped, true-colour and monochrome images are
supported, uncompressed or run-length encoded, at 8, 16, 24 or 32 bits per
pixel (colour-mapped images at 8 bits, with 16, 24 or 32-bit map entries).
Written files end with the standard TGA 2.0 footer.

The helpers `write_mono`, `write_mono_rle`, `write_bgr`, `write_bgr_rle`,
`write_rgb` and `write_rgb_rle` build a top-to-bottom image from raw pixel
bytes and write it in the matching format. The RGB variants swap red and blue
on a copy, so the caller's bytes are left untouched. `swap_red_blue(image)`
does that swap in place on a `TgaImage`.

A truncated file, an invalid header, corrupt RLE data, an unsupported depth
or a file that cannot be opened or written is raised as `TgaError`, carrying a
`TgaErrorCode` in its `code` attribute. An image handed to the writer whose
pixel data is shorter than its dimensions need, whose id is longer than 255
bytes, or which declares a colour map but holds no map data raises
`ValueError`.

## Manipulating images

The functions in `rasterlab.transform` change a `TgaImage` in place:

- `flip_horizontal(image)` and `flip_vertical(image)` mirror the pixels and
  toggle the right-to-left or top-to-bottom descriptor bit.
- `color_unmap(image)` replaces colour-map indices with their map entries,
  giving a true-colour image.
- `convert_depth(image, bits)` converts to 16, 24 or 32 bits per pixel.
- `desaturate(image, cr, cg, cb, dv)` turns the image into 8-bit mono using
  `(r*cr + g*cg + b*cb) / dv`; `desaturate_rec_601_1`, `desaturate_rec_709`,
  `desaturate_itu` and `desaturate_avg` use preset weights.

`convert_depth` and `desaturate` expand colour-mapped images first.
`find_pixel(image, x, y)` returns the byte offset of a pixel, honouring the
image orientation, or `None` for coordinates outside the image.

## Rasterizer demos

```
rasterlab-triangles [OUTPUT]
```

draws two grid-textured triangles and a filled, outlined quad into a 320×168
frame buffer on a green background and saves it as a 32-bit TGA file
(`test.tga` by default).

```
rasterlab-quads [TEXTURE TEXTURE TEXTURE] [-o OUTPUT]
```

renders three wall segments into a 320×201 frame buffer, applying a
perspective divide to the corners and mapping the textures affinely, column
by column. It takes exactly three 32-bit TGA textures (by default
`../MWALL4_1.tga`, `../MWALL4_2.tga` and `../MWALL5_1.tga`), writes
`test.tga` unless `-o` says otherwise, and exits with status 1 if a texture
cannot be loaded.

Both demos can be used as libraries: `rasterlab.triangles.Canvas` and
`rasterlab.quads.Screen` expose their drawing routines, `pixel(x, y)` to read
back a pixel, and `to_bgra_bytes()` to get the frame buffer in the byte order
`write_bgr` expects.

## What it does not do

The package does not display images; results are only written to files.
The wall demo maps textures affinely only, without perspective correction.
When reading, the TGA extension and developer areas are not read.

## Running the tests

```
pip install ".[test]"
pytest
```