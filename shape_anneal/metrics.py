"""Quality metrics reported after a run."""

from __future__ import annotations

import numpy as np
from skimage.metrics import structural_similarity as ssim

from shape_anneal.pixel_buffer import PixelBuffer


def mean_color_error(target: PixelBuffer, result: PixelBuffer) -> float:
    """Mean per-pixel Euclidean RGB distance."""
    t = target.pixels.reshape(-1, 3).astype(np.float64)
    r = result.pixels.reshape(-1, 3).astype(np.float64)
    return float(np.mean(np.sqrt(np.sum((t - r) ** 2, axis=1))))


def structural_similarity(target: PixelBuffer, result: PixelBuffer) -> float:
    """SSIM over the RGB channels, or ``nan`` for images under 3 pixels a side.

    The window shrinks to the largest odd size (up to 7) that fits.
    """
    win_size = min(7, target.width, target.height)
    if win_size % 2 == 0:
        win_size -= 1
    if win_size < 3:
        return float("nan")
    return float(ssim(
        target.pixels, result.pixels,
        win_size=win_size, channel_axis=2, data_range=255,
    ))
