"""Shape primitives and their scanline rasterisation.

Rasterising is pure geometry: a shape maps to an ``(N, 2)`` int64 array
of ``(x, y)`` canvas coordinates and no buffer is touched.  Triangles
use the classic flat-bottom / flat-top decomposition: the vertices are
sorted by ``(y, x)`` and, unless two of them already share a row, the
triangle is split along the middle vertex's row into a flat-bottom half
(rows ``y1..y2``) and a flat-top half (rows ``y2+1..y3``).  Because the
halves own disjoint rows and each row is a single span, the output never
repeats a coordinate.
"""

from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass
from enum import Enum

import numpy as np

from shape_anneal.errors import DegenerateShapeError

Point = tuple[int, int]

_EMPTY = np.empty((0, 2), dtype=np.int64)


class ShapeKind(str, Enum):
    RECTANGLE = "rectangle"
    TRIANGLE = "triangle"


@dataclass(frozen=True)
class Rectangle:
    """Half-open axis-aligned box ``[x0, x1) x [y0, y1)``."""

    top_left: Point
    bottom_right: Point

    @property
    def area(self) -> int:
        (x0, y0), (x1, y1) = self.top_left, self.bottom_right
        return max(0, x1 - x0) * max(0, y1 - y0)


@dataclass(frozen=True)
class Triangle:
    """Three integer vertices.

    Construction rejects coincident vertices and triples that all share
    an x or all share a y.  Other collinear triples are accepted and
    rasterise to a thin line of pixels.
    """

    v1: Point
    v2: Point
    v3: Point

    def __post_init__(self) -> None:
        if is_degenerate(self.v1, self.v2, self.v3):
            msg = f"Degenerate triangle {self.v1}, {self.v2}, {self.v3}"
            raise DegenerateShapeError(msg)

    @property
    def vertices(self) -> tuple[Point, Point, Point]:
        return self.v1, self.v2, self.v3

    @property
    def area(self) -> float:
        (x1, y1), (x2, y2), (x3, y3) = self.vertices
        return abs((x2 - x1) * (y3 - y1) - (x3 - x1) * (y2 - y1)) / 2


Shape = Rectangle | Triangle


def is_degenerate(v1: Point, v2: Point, v3: Point) -> bool:
    """Coincident vertices, or all three on one row or one column."""
    return (
        v1 == v2
        or v2 == v3
        or v1 == v3
        or v1[0] == v2[0] == v3[0]
        or v1[1] == v2[1] == v3[1]
    )


def rasterize(shape: Shape, executor: Executor | None = None) -> np.ndarray:
    """Canvas coordinates covered by *shape* as an ``(N, 2)`` array of ``(x, y)``.

    Args:
        shape:    A :class:`Rectangle` or :class:`Triangle`.
        executor: If given, the two halves of a split triangle are
                  rasterised as separate tasks on it.
    """
    if isinstance(shape, Rectangle):
        return _rasterize_rectangle(shape)
    if isinstance(shape, Triangle):
        return _rasterize_triangle(shape, executor)
    msg = f"Cannot rasterise {type(shape).__name__}"
    raise TypeError(msg)


def _rasterize_rectangle(rect: Rectangle) -> np.ndarray:
    (x0, y0), (x1, y1) = rect.top_left, rect.bottom_right
    if x1 <= x0 or y1 <= y0:
        return _EMPTY.copy()
    xs, ys = np.meshgrid(
        np.arange(x0, x1, dtype=np.int64),
        np.arange(y0, y1, dtype=np.int64),
    )
    return np.column_stack((xs.ravel(), ys.ravel()))


def _rasterize_triangle(tri: Triangle, executor: Executor | None) -> np.ndarray:
    top, mid, bottom = sorted(tri.vertices, key=lambda v: (v[1], v[0]))

    # flat bottom
    if mid[1] == bottom[1]:
        return _fill(top, mid, bottom, top[1], bottom[1])
    # flat top
    if top[1] == mid[1]:
        return _fill(bottom, top, mid, top[1], bottom[1])

    # General case: the long edge top -> bottom crosses the middle row at
    # the split point, so the flat-bottom half is (top, mid, split) and the
    # flat-top half is (mid, split, bottom).  Each half is walked from its
    # apex along the short edge and the long edge itself.
    upper = (top, mid, bottom, top[1], mid[1])
    lower = (bottom, mid, top, mid[1] + 1, bottom[1])
    if executor is None:
        halves = [_fill(*upper), _fill(*lower)]
    else:
        futures = [executor.submit(_fill, *upper), executor.submit(_fill, *lower)]
        halves = [f.result() for f in futures]
    return np.concatenate(halves)


def _edge_x(apex: Point, end: Point, rows: np.ndarray) -> np.ndarray:
    """Floored x of the edge apex -> end on each row.

    Exact integer interpolation, so span starts and ends are rounded the
    same way and the apex row lands on the apex itself.
    """
    ax, ay = apex
    ex, ey = end
    return ax + ((rows - ay) * (ex - ax)) // (ey - ay)


def _fill(apex: Point, a: Point, b: Point, row_start: int, row_end: int) -> np.ndarray:
    """One span per row between the edges apex -> a and apex -> b."""
    if row_end < row_start:
        return _EMPTY.copy()
    rows = np.arange(row_start, row_end + 1, dtype=np.int64)
    xa = _edge_x(apex, a, rows)
    xb = _edge_x(apex, b, rows)
    left = np.minimum(xa, xb)
    right = np.maximum(xa, xb)
    return _spans(rows, left, right)


def _spans(rows: np.ndarray, left: np.ndarray, right: np.ndarray) -> np.ndarray:
    """Expand inclusive ``[left, right]`` spans, one per row, into coordinates."""
    widths = right - left + 1
    ys = np.repeat(rows, widths)
    # offset of each coordinate within its own span
    starts = np.repeat(np.cumsum(widths) - widths, widths)
    xs = np.repeat(left, widths) + (np.arange(len(ys), dtype=np.int64) - starts)
    return np.column_stack((xs, ys))
