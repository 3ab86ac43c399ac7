"""Scanline rasterisation of flat-topped and flat-bottomed triangles."""

from __future__ import annotations

import argparse
import struct
from dataclasses import dataclass, field

from .tga import write_bgr

# Colors are ARGB.
BLACK = 0xFF000000
WHITE = 0xFFFFFFFF
RED = 0xFFFF0000
GREEN = 0xFF00FF00
BLUE = 0xFF0000FF

WIDTH = 320
HEIGHT = 168


def _trunc_div(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero; a zero-height edge has no slope."""
    if denominator == 0:
        return 0
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


@dataclass
class GridTexture:
    """A 2x2 checker of white and ``color``."""

    width: int = 0
    height: int = 0
    color: int = BLACK

    def sample(self, x: float, y: float) -> int:
        if y < 0.5:
            return WHITE if x < 0.5 else self.color
        return self.color if x < 0.5 else WHITE


@dataclass
class TextureCoordinate:
    u: float = 0.0
    v: float = 0.0


@dataclass
class Point:
    x: int = 0
    y: int = 0
    z: float = 0.0
    tex: TextureCoordinate = field(default_factory=TextureCoordinate)


class Triangle:
    """Three points kept sorted by ascending y, plus a texture."""

    def __init__(self, p1: Point, p2: Point, p3: Point, texture: GridTexture) -> None:
        self.points = tuple(sorted((p1, p2, p3), key=lambda point: point.y))
        self.texture = texture

    def __repr__(self) -> str:
        return f"Triangle({self.points!r}, {self.texture!r})"


class Quad:
    """Four points split into the triangles (p1, p2, p3) and (p3, p4, p1)."""

    def __init__(self, p1: Point, p2: Point, p3: Point, p4: Point, texture: GridTexture) -> None:
        self.triangles = (Triangle(p1, p2, p3, texture), Triangle(p3, p4, p1, texture))
        self.texture = texture

    def __repr__(self) -> str:
        return f"Quad({self.triangles!r})"


class Canvas:
    """An ARGB framebuffer whose y axis points up."""

    def __init__(self, width: int = WIDTH, height: int = HEIGHT, background: int = GREEN) -> None:
        self.width = width
        self.height = height
        self.framebuffer = [background] * (width * height)

    def _index(self, x: int, y: int) -> int | None:
        if not 0 <= x < self.width:
            return None
        index = (self.height - y) * self.width + x
        return index if 0 <= index < len(self.framebuffer) else None

    def plot(self, point: Point, color: int) -> None:
        """Set the pixel under ``point``; points off the framebuffer are ignored."""
        index = self._index(int(point.x), int(point.y))
        if index is not None:
            self.framebuffer[index] = color

    def pixel(self, x: int, y: int) -> int:
        index = self._index(x, y)
        if index is None:
            raise IndexError(f"pixel ({x}, {y}) is outside the canvas")
        return self.framebuffer[index]

    def draw_line(self, a: Point, b: Point, texture: GridTexture) -> None:
        """Draw from ``a`` towards ``b`` with a DDA; the end point is not drawn."""
        dx = float(b.x - a.x)
        dy = float(b.y - a.y)
        steps = max(abs(dx), abs(dy))
        if steps == 0:
            return
        dx /= steps
        dy /= steps
        cursor_x = float(a.x)
        cursor_y = float(a.y)
        for _ in range(int(steps)):
            point = Point(int(cursor_x), int(cursor_y))
            self.plot(point, texture.sample(point.tex.u, point.tex.v))
            cursor_x += dx
            cursor_y += dy

    def fill_bottom_flat_triangle(self, v1: Point, v2: Point, v3: Point, texture: GridTexture) -> None:
        """Fill from apex ``v3`` down to the flat edge ``v1``-``v2``."""
        invslope1 = float(_trunc_div(v3.x - v1.x, v3.y - v1.y))
        invslope2 = float(_trunc_div(v3.x - v2.x, v3.y - v2.y))
        curx1 = curx2 = float(v3.x)
        for scanline in range(v3.y, v1.y, -1):
            self.draw_line(Point(int(curx1), scanline), Point(int(curx2), scanline), texture)
            curx1 -= invslope1
            curx2 -= invslope2

    def fill_top_flat_triangle(self, v1: Point, v2: Point, v3: Point, texture: GridTexture) -> None:
        """Fill from apex ``v1`` up to the flat edge ``v2``-``v3``."""
        invslope1 = float(_trunc_div(v2.x - v1.x, v2.y - v1.y))
        invslope2 = float(_trunc_div(v3.x - v1.x, v3.y - v1.y))
        curx1 = curx2 = float(v1.x)
        for scanline in range(v1.y, v2.y + 1):
            self.draw_line(Point(int(curx1), scanline), Point(int(curx2), scanline), texture)
            curx1 += invslope1
            curx2 += invslope2

    def draw_triangle(self, triangle: Triangle) -> None:
        v1, v2, v3 = triangle.points
        if v1.y == v2.y:
            self.fill_bottom_flat_triangle(v1, v2, v3, triangle.texture)
        elif v3.y == v2.y:
            self.fill_top_flat_triangle(v1, v2, v3, triangle.texture)
        else:
            ratio = (v2.y - v1.y) / (v3.y - v1.y)
            v4 = Point(int(v1.x + ratio * (v3.x - v1.x)), v2.y)
            self.fill_bottom_flat_triangle(v1, v2, v4, triangle.texture)
            self.fill_top_flat_triangle(v2, v4, v3, triangle.texture)

    def render_triangle(self, triangle: Triangle) -> None:
        self.draw_triangle(triangle)

    def render_quad(self, quad: Quad) -> None:
        for triangle in quad.triangles:
            self.draw_triangle(triangle)

    def to_bgra_bytes(self) -> bytes:
        """The framebuffer as little-endian 32-bit pixels, i.e. B, G, R, A bytes."""
        return struct.pack(
            f"<{len(self.framebuffer)}I", *(color & 0xFFFFFFFF for color in self.framebuffer)
        )


def _point(x: int, y: int, u: float = 0.0, v: float = 0.0) -> Point:
    return Point(x, y, 0.0, TextureCoordinate(u, v))


def main(argv=None) -> int:
    """Render the demo scene of triangles and a quad into a Targa file."""
    parser = argparse.ArgumentParser(description="Rasterise a small triangle scene.")
    parser.add_argument("output", nargs="?", default="test.tga")
    args = parser.parse_args(argv)

    canvas = Canvas(WIDTH, HEIGHT, GREEN)

    red_texture = GridTexture(10, 10, RED)
    canvas.render_triangle(
        Triangle(_point(0, 0, 0, 0), _point(10, 10, 0, 1), _point(10, 0, 1, 0), red_texture)
    )

    blue_texture = GridTexture(10, 10, BLUE)
    canvas.render_triangle(
        Triangle(_point(30, 30, 0, 0), _point(40, 30, 0, 1), _point(30, 40, 1, 0), blue_texture)
    )

    p7 = _point(100, 100)
    p8 = _point(100, 150)
    p9 = _point(150, 150)
    p10 = _point(150, 100)
    quad = Quad(p7, p8, p9, p10, red_texture)
    black_texture = GridTexture(1, 1, BLACK)
    canvas.render_quad(quad)
    for start, end in ((p7, p9), (p7, p8), (p8, p9), (p9, p10), (p10, p7)):
        canvas.draw_line(start, end, black_texture)

    write_bgr(args.output, canvas.to_bgra_bytes(), WIDTH, HEIGHT, 32)
    return 0