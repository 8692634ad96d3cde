"""Random shape proposals bounded by the canvas."""

from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass

import numpy as np

from shape_anneal.errors import DegenerateShapeError
from shape_anneal.pixel_buffer import Pixel
from shape_anneal.shapes import Rectangle, Shape, ShapeKind, Triangle, rasterize


@dataclass(frozen=True)
class Candidate:
    """A proposed single-colour change: the shape, the coordinates it
    covers and the colour it would paint."""

    shape: Shape
    coords: np.ndarray
    color: Pixel

    @property
    def is_empty(self) -> bool:
        return len(self.coords) == 0


def random_color(rng: np.random.Generator) -> Pixel:
    r, g, b = rng.integers(0, 256, size=3)
    return Pixel(int(r), int(g), int(b))


def random_rectangle(width: int, height: int, rng: np.random.Generator) -> Rectangle:
    """Bottom-right corner anywhere in ``[0, W] x [0, H]``, top-left above it.

    A zero bottom-right axis pins the matching top-left axis to 0, so the
    result may be an empty rectangle.
    """
    x1 = int(rng.integers(0, width + 1))
    y1 = int(rng.integers(0, height + 1))
    x0 = int(rng.integers(0, x1)) if x1 > 0 else 0
    y0 = int(rng.integers(0, y1)) if y1 > 0 else 0
    return Rectangle((x0, y0), (x1, y1))


def random_triangle(width: int, height: int, rng: np.random.Generator) -> Triangle:
    """Three vertices in ``[0, W) x [0, H)``, redrawn until non-degenerate.

    The canvas must be at least 2x2, otherwise every draw is degenerate.
    """
    while True:
        xs = rng.integers(0, width, size=3)
        ys = rng.integers(0, height, size=3)
        try:
            return Triangle(
                (int(xs[0]), int(ys[0])),
                (int(xs[1]), int(ys[1])),
                (int(xs[2]), int(ys[2])),
            )
        except DegenerateShapeError:
            continue


def propose(
    width: int,
    height: int,
    shape_kind: ShapeKind,
    rng: np.random.Generator,
    executor: Executor | None = None,
) -> Candidate:
    """Draw one random shape of *shape_kind* and rasterise it."""
    if shape_kind is ShapeKind.TRIANGLE:
        shape: Shape = random_triangle(width, height, rng)
    else:
        shape = random_rectangle(width, height, rng)
    return Candidate(shape, rasterize(shape, executor), random_color(rng))
