"""Targa image reading, writing and manipulation, with two small software rasterizer demos."""

__version__ = "0.1.0"
__all__ = ["image", "pixels", "rle", "tga", "transform", "triangles", "quads"]