[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rasterlab"
version = "0.1.0"
description = "Truevision Targa (TGA) reading, writing and manipulation, plus two small software rasterizer demos"
requires-python = ">=3.10"
dependencies = []
keywords = ["tga", "targa", "image", "rle", "rasterizer", "texture-mapping"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rasterlab-triangles = "rasterlab.triangles:main"
rasterlab-quads = "rasterlab.quads:main"

[tool.hatch.build.targets.wheel]
packages = ["rasterlab"]

[tool.pytest.ini_options]
addopts = "-ra"
