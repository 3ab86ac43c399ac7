"""Affine texture mapping of wall quads, column by column."""

from __future__ import annotations

import argparse
import copy
import sys
from dataclasses import dataclass

from .image import TgaError, TgaImage
from .tga import read_tga, write_bgr

BLACK = 0xFF000000
WIDTH = 320
HEIGHT = 201

DEFAULT_TEXTURES = ("../MWALL4_1.tga", "../MWALL4_2.tga", "../MWALL5_1.tga")


class Texture:
    """A 32-bit Targa image sampled with normalised coordinates."""

    def __init__(self, image: TgaImage) -> None:
        self.image = image

    @classmethod
    def load(cls, path) -> "Texture":
        return cls(read_tga(path))

    def sample(self, u: float, v: float) -> int:
        """Color at (u, v), both clamped to [0, 1], as a little-endian 32-bit value."""
        u = min(max(u, 0.0), 1.0)
        v = min(max(v, 0.0), 1.0)
        img_u = int(u * self.image.width)
        img_v = int(v * self.image.height)
        offset = (img_u + self.image.width * img_v) * 4
        data = self.image.image_data
        # u or v at 1 points one past the pixels; stay on the last one.
        offset = max(0, min(offset, len(data) - 4))
        return int.from_bytes(data[offset:offset + 4], "little")


@dataclass
class Point:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    u: float = 0.0
    v: float = 0.0


class Quad:
    """Corners in order top-left, top-right, bottom-right, bottom-left."""

    def __init__(self, p0: Point, p1: Point, p2: Point, p3: Point) -> None:
        self.points = [copy.copy(p) for p in (p0, p1, p2, p3)]

    def __repr__(self) -> str:
        return f"Quad({self.points!r})"

    def perspective_divide(self) -> None:
        for point in self.points:
            point.x /= point.z
            point.y /= point.z

    def width(self) -> int:
        return int(self.points[1].x - self.points[0].x)

    def delta_y_top(self) -> int:
        return int(self.points[1].y - self.points[0].y)

    def delta_y_bottom(self) -> int:
        return int(self.points[2].y - self.points[3].y)


class Screen:
    """An ARGB framebuffer addressed with the origin at its centre and y up."""

    def __init__(self, width: int = WIDTH, height: int = HEIGHT, background: int = BLACK) -> None:
        self.width = width
        self.height = height
        self.framebuffer = [background] * (width * height)

    def _index(self, x, y) -> int | None:
        x = int(x)
        y = int(y)
        half_w = self.width // 2
        half_h = self.height // 2
        if x >= half_w or x <= -half_w or y >= half_h or y <= -half_h:
            return None
        column = x + half_w
        row = self.height - (y + half_h)
        return column + row * self.width

    def plot_color(self, x, y, color: int) -> None:
        """Set the pixel at centred coordinates; points off screen are ignored."""
        index = self._index(x, y)
        if index is not None:
            self.framebuffer[index] = color

    def pixel(self, x, y) -> int:
        index = self._index(x, y)
        if index is None:
            raise IndexError(f"pixel ({x}, {y}) is outside the screen")
        return self.framebuffer[index]

    def plot(self, point: Point, texture: Texture) -> None:
        self.plot_color(point.x, point.y, texture.sample(point.u, point.v))

    def draw_column_affine(self, start: Point, end: Point, texture: Texture) -> None:
        """Draw the column from ``start`` down to ``end`` with v spread linearly."""
        cursor = copy.copy(start)
        height = int(start.y) - int(end.y)
        y = int(start.y)
        for i in range(1, height):
            cursor.y = y
            cursor.v = i / (height - 1)
            self.plot(cursor, texture)
            y -= 1

    def draw_quad(self, quad: Quad, texture: Texture) -> None:
        """Texture the quad with affine mapping, one column per screen x."""
        width = float(quad.width() + 1)
        delta_y_top = quad.delta_y_top() / width
        delta_y_bottom = quad.delta_y_bottom() / width
        start = copy.copy(quad.points[0])
        end = copy.copy(quad.points[3])
        columns = int(width) if width > 0 else 0
        for i in range(columns):
            u = i / (width - 1) if width != 1 else 0.0
            start.u = end.u = u
            self.draw_column_affine(start, end, texture)
            start.y += delta_y_top
            end.y += delta_y_bottom
            start.x += 1
            end.x += 1

    def to_bgra_bytes(self) -> bytes:
        """The framebuffer as little-endian 32-bit pixels, i.e. B, G, R, A bytes."""
        return b"".join((color & 0xFFFFFFFF).to_bytes(4, "little") for color in self.framebuffer)


def main(argv=None) -> int:
    """Render three textured wall quads into a Targa file."""
    parser = argparse.ArgumentParser(description="Texture-map three wall quads.")
    parser.add_argument("textures", nargs="*", default=list(DEFAULT_TEXTURES))
    parser.add_argument("-o", "--output", default="test.tga")
    args = parser.parse_args(argv)
    if len(args.textures) != 3:
        parser.error("expected exactly three texture files")

    try:
        first, second, third = (Texture.load(path) for path in args.textures)
    except TgaError as exc:
        print(f"cannot load texture: {exc}", file=sys.stderr)
        return 1

    screen = Screen(WIDTH, HEIGHT, BLACK)

    close_z = 0.5
    far_z = 1.0
    a = Point(-80, 50, close_z)
    b = Point(-25, 50, far_z)
    c = Point(-25, -50, far_z)
    d = Point(-80, -50, close_z)
    e = Point(75, 50, far_z)
    f = Point(75, -50, far_z)
    g = Point(80, 50, close_z)
    h = Point(80, -50, close_z)

    for corners, texture in (
        ((a, b, c, d), first),
        ((b, e, f, c), second),
        ((e, g, h, f), third),
    ):
        p0, p1, p2, p3 = corners
        quad = Quad(
            Point(p0.x, p0.y, p0.z, 0, 0),
            Point(p1.x, p1.y, p1.z, 1, 0),
            Point(p2.x, p2.y, p2.z, 1, 1),
            Point(p3.x, p3.y, p3.z, 0, 1),
        )
        quad.perspective_divide()
        screen.draw_quad(quad, texture)

    write_bgr(args.output, screen.to_bgra_bytes(), WIDTH, HEIGHT, 32)
    return 0