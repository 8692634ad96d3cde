"""
Shape Annealer
==============

Approximate any target image by layering random single-colour shapes
onto a black canvas, keeping or discarding each one by simulated
annealing. Two primitives are available:

- **Rectangles** (axis-aligned, half-open boxes)
- **Triangles** (scanline-filled, flat-bottom / flat-top split)
"""

__version__ = "1.0.0"

from shape_anneal.annealing import AnnealResult, anneal, run, schedule_length
from shape_anneal.config import AnnealConfig
from shape_anneal.cost import full_cost, update_cost
from shape_anneal.errors import (
    DegenerateShapeError,
    InvalidDimensionsError,
    ShapeAnnealError,
)
from shape_anneal.image_io import load_image, make_comparison_grid, save_image
from shape_anneal.pixel_buffer import Pixel, PixelBuffer
from shape_anneal.shapes import Rectangle, ShapeKind, Triangle, rasterize

__all__ = [
    "AnnealConfig",
    "AnnealResult",
    "DegenerateShapeError",
    "InvalidDimensionsError",
    "Pixel",
    "PixelBuffer",
    "Rectangle",
    "ShapeAnnealError",
    "ShapeKind",
    "Triangle",
    "anneal",
    "full_cost",
    "load_image",
    "make_comparison_grid",
    "rasterize",
    "run",
    "save_image",
    "schedule_length",
    "update_cost",
]
