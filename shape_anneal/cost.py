"""Full and incremental image-difference cost.

The per-pixel difference is the L1 distance between two RGB samples.
Summed over the image into ``S``, the cost is ``sqrt(S**2 / (W*H*3))``:
the linear sum is squared once, scaled and rooted.  That is not a true
RMSE, but both the full scan and the incremental update use exactly this
form, and the incremental path depends on being able to invert it.
"""

from __future__ import annotations

import math

import numpy as np

from shape_anneal.pixel_buffer import Pixel, PixelBuffer


def pixel_difference(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Sum of absolute per-channel differences along the last axis."""
    return np.abs(
        np.asarray(a, dtype=np.int64) - np.asarray(b, dtype=np.int64)
    ).sum(axis=-1)


def cost_from_sum(total: float, n_pixels: int) -> float:
    return math.sqrt(total * total / (n_pixels * 3))


def sum_from_cost(cost: float, n_pixels: int) -> float:
    """Invert :func:`cost_from_sum`."""
    return math.sqrt(cost * cost * n_pixels * 3)


def full_cost(reference: PixelBuffer, working: PixelBuffer) -> float:
    """Cost of *working* against *reference* over every pixel."""
    if (reference.width, reference.height) != (working.width, working.height):
        msg = (
            f"Buffer sizes differ: {reference.width}x{reference.height} "
            f"vs {working.width}x{working.height}"
        )
        raise ValueError(msg)
    total = float(pixel_difference(reference.pixels, working.pixels).sum())
    return cost_from_sum(total, reference.size)


def sample_indices(count: int, sample_size: int) -> np.ndarray:
    """*sample_size* evenly spaced indices into a sequence of *count*.

    Deterministic for a given pair of arguments.  When the sample is at
    least as large as the sequence every index is returned.
    """
    if sample_size < 1:
        msg = f"sample_size must be >= 1, got {sample_size}"
        raise ValueError(msg)
    if sample_size >= count:
        return np.arange(count)
    return np.linspace(0, count - 1, num=sample_size, dtype=np.int64)


def update_cost(
    previous_cost: float,
    reference: PixelBuffer,
    old_values: np.ndarray,
    new_color: Pixel | tuple[int, int, int],
    coords: np.ndarray,
    sample_size: int | None = None,
) -> float:
    """Cost after repainting *coords* from *old_values* to *new_color*.

    Only the touched pixels are read.  *old_values* is the ``(N, 3)``
    array of colours at *coords* before the change, row-aligned with
    *coords*.

    Args:
        previous_cost: A cost obtained from :func:`full_cost` or from an
                       earlier call of this function.
        reference:     The target image.
        old_values:    Colours currently at *coords*.
        new_color:     Colour the candidate would paint.
        coords:        ``(N, 2)`` array of ``(x, y)``, free of duplicates.
        sample_size:   If smaller than ``N``, only an evenly spaced subset
                       of the touched pixels is folded into the sum.

    Returns:
        The new cost; *previous_cost* unchanged when *coords* is empty.
    """
    if len(coords) == 0:
        return previous_cost

    if sample_size is not None:
        idx = sample_indices(len(coords), sample_size)
        coords = coords[idx]
        old_values = old_values[idx]

    n_pixels = reference.size
    total = sum_from_cost(previous_cost, n_pixels)

    target = reference.gather(coords)
    total -= float(pixel_difference(target, old_values).sum())
    total += float(pixel_difference(target, np.asarray(new_color)).sum())

    return cost_from_sum(total, n_pixels)
