"""RGB pixel grid shared by the reference and working images."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from shape_anneal.errors import InvalidDimensionsError


class Pixel(NamedTuple):
    """One opaque RGB sample."""

    r: int
    g: int
    b: int


class PixelBuffer:
    """A ``(H, W, 3)`` uint8 grid addressed by ``(x, y)``.

    Coordinate arrays used by :meth:`gather` and :meth:`paint` are
    ``(N, 2)`` integer arrays whose columns are ``x`` then ``y``.
    """

    def __init__(self, pixels: np.ndarray) -> None:
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            msg = f"Expected an (H, W, 3) array, got shape {pixels.shape}"
            raise InvalidDimensionsError(msg)
        h, w = pixels.shape[:2]
        if w == 0 or h == 0:
            msg = f"Pixel buffer must have a non-zero area, got {w}x{h}"
            raise InvalidDimensionsError(msg)
        self._pixels = np.ascontiguousarray(pixels, dtype=np.uint8)

    @classmethod
    def blank(cls, width: int, height: int) -> PixelBuffer:
        """All-black buffer of the given size."""
        if width <= 0 or height <= 0:
            msg = f"Pixel buffer must have a non-zero area, got {width}x{height}"
            raise InvalidDimensionsError(msg)
        return cls(np.zeros((height, width, 3), dtype=np.uint8))

    # -- geometry ------------------------------------------------------

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> int:
        """Number of pixels (``W * H``)."""
        return self.width * self.height

    @property
    def pixels(self) -> np.ndarray:
        """The underlying array (not copied)."""
        return self._pixels

    # -- access --------------------------------------------------------

    def get(self, x: int, y: int) -> Pixel:
        r, g, b = self._pixels[y, x]
        return Pixel(int(r), int(g), int(b))

    def set(self, x: int, y: int, pixel: Pixel | tuple[int, int, int]) -> None:
        self._pixels[y, x] = pixel

    def gather(self, coords: np.ndarray) -> np.ndarray:
        """Colours at *coords* as an ``(N, 3)`` uint8 array."""
        return self._pixels[coords[:, 1], coords[:, 0]]

    def paint(self, coords: np.ndarray, color: Pixel | tuple[int, int, int]) -> None:
        """Write *color* to every coordinate in *coords*."""
        if len(coords) == 0:
            return
        self._pixels[coords[:, 1], coords[:, 0]] = color

    def freeze(self) -> PixelBuffer:
        """Make the buffer read-only and return it."""
        self._pixels.setflags(write=False)
        return self

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self._pixels.copy())

    def to_array(self) -> np.ndarray:
        return self._pixels.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self._pixels, other._pixels)

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"
