"""Simulated Annealing over random shapes with optional GIF animation export."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image

from shape_anneal.candidates import propose
from shape_anneal.cost import full_cost, update_cost
from shape_anneal.errors import InvalidDimensionsError
from shape_anneal.pixel_buffer import PixelBuffer
from shape_anneal.shapes import ShapeKind

logger = logging.getLogger(__name__)


@dataclass
class AnnealResult:
    """Outcome of one annealing run."""

    image: PixelBuffer
    cost: float
    iterations: int
    accepted: int
    elapsed: float


def _check_schedule(alpha: float, initial_temp: float, final_temp: float) -> None:
    if not 0.0 < alpha < 1.0:
        msg = f"alpha must lie in (0, 1), got {alpha}"
        raise ValueError(msg)
    if not 0.0 < final_temp < initial_temp:
        msg = (
            f"Need 0 < final_temp < initial_temp, "
            f"got final_temp={final_temp} initial_temp={initial_temp}"
        )
        raise ValueError(msg)


def schedule_length(
    alpha: float,
    initial_temp: float = 1000.0,
    final_temp: float = 0.001,
) -> int:
    """Number of iterations the cooling schedule runs for.

    Replays the same float multiplications as :func:`anneal`, so the
    count matches the loop exactly.
    """
    _check_schedule(alpha, initial_temp, final_temp)
    n = 0
    temp = initial_temp
    while temp >= final_temp:
        n += 1
        temp *= alpha
    return n


def anneal(
    reference: PixelBuffer,
    alpha: float = 0.999,
    shape_kind: ShapeKind | str = ShapeKind.RECTANGLE,
    sample_size: int | None = None,
    *,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    initial_temp: float = 1000.0,
    final_temp: float = 0.001,
    resync_every: int | None = None,
    workers: int | None = None,
    log_every: int = 1000,
    gif_path: Path | None = None,
    gif_frames: int = 60,
    pixel_upscale: int = 1,
    should_stop: Callable[[], bool] | None = None,
) -> AnnealResult:
    """Approximate *reference* with random single-colour shapes.

    Starts from an all-black canvas.  Each iteration proposes one shape,
    prices it with an incremental cost update and accepts it by the
    Metropolis rule; only accepted shapes are painted.  The temperature
    decays geometrically by *alpha* until it drops below *final_temp*.

    Args:
        reference:     Target image.  Never modified.
        alpha:         Cooling factor per iteration, in (0, 1).
        shape_kind:    Rectangles or triangles.
        sample_size:   Touched pixels folded into each cost update (None = all).
        rng:           Random generator; built from *seed* when omitted.
        seed:          Seed for the default generator.
        initial_temp:  Starting temperature.
        final_temp:    Stop once the temperature falls below this.
        resync_every:  Replace the running cost by a full recompute every n
                       iterations, logging the drift.
        workers:       Thread pool size used to rasterise triangle halves.
        log_every:     Progress log interval in iterations.
        gif_path:      If given, save an animated GIF showing convergence.
        gif_frames:    How many snapshots to capture for the GIF.
        pixel_upscale: Upscale factor for GIF frames.
        should_stop:   Polled between iterations; returning True ends the
                       run early.

    Returns:
        The final canvas together with run statistics.
    """
    shape_kind = ShapeKind(shape_kind)
    _check_schedule(alpha, initial_temp, final_temp)
    if sample_size is not None and sample_size < 1:
        msg = f"sample_size must be >= 1, got {sample_size}"
        raise ValueError(msg)

    w, h = reference.width, reference.height
    if shape_kind is ShapeKind.TRIANGLE and (w < 2 or h < 2):
        msg = f"Triangles need a canvas of at least 2x2, got {w}x{h}"
        raise InvalidDimensionsError(msg)

    if rng is None:
        rng = np.random.default_rng(seed)

    target = reference.copy().freeze()
    image = PixelBuffer.blank(w, h)
    cost = full_cost(target, image)
    total = schedule_length(alpha, initial_temp, final_temp)

    logger.info(
        "SA start  | %dx%d  shape=%s  iterations=%s  alpha=%.6f  sample=%s",
        w, h, shape_kind.value, f"{total:,}", alpha, sample_size or "all",
    )

    # GIF frame capture
    frames: list[Image.Image] = []
    frame_interval = max(1, total // gif_frames) if gif_frames > 0 else total + 1

    def _capture_frame() -> None:
        if gif_path is None:
            return
        img = Image.fromarray(image.to_array())
        img = img.resize((w * pixel_upscale, h * pixel_upscale), Image.NEAREST)
        frames.append(img)

    _capture_frame()

    temp = initial_temp
    iterations = 0
    accepted = 0
    t0 = time.perf_counter()

    pool = ThreadPoolExecutor(max_workers=workers) if workers else nullcontext()
    with pool as executor:
        while temp >= final_temp:
            if should_stop is not None and should_stop():
                logger.info("SA stopped early at temp=%.3e", temp)
                break

            candidate = propose(w, h, shape_kind, rng, executor)
            old_values = image.gather(candidate.coords)
            neighbor_cost = update_cost(
                cost, target, old_values, candidate.color, candidate.coords,
                sample_size,
            )
            delta = neighbor_cost - cost

            if delta < 0 or rng.random() < math.exp(-delta / temp):
                image.paint(candidate.coords, candidate.color)
                cost = neighbor_cost
                accepted += 1

            temp *= alpha
            iterations += 1

            if resync_every and iterations % resync_every == 0:
                exact = full_cost(target, image)
                logger.debug(
                    "  resync at %s: running=%.6f  full=%.6f  drift=%.3e",
                    f"{iterations:,}", cost, exact, cost - exact,
                )
                cost = exact

            if iterations % frame_interval == 0:
                _capture_frame()

            if log_every > 0 and iterations % log_every == 0:
                logger.info(
                    "  SA %5.1f%%  cost=%.3f  temp=%.3e  accepted=%s  (%.1f s)",
                    iterations / total * 100, cost, temp, f"{accepted:,}",
                    time.perf_counter() - t0,
                )

    _capture_frame()

    elapsed = time.perf_counter() - t0
    logger.info(
        "SA done   | cost=%.3f  accepted=%s/%s  (%.2f s)",
        cost, f"{accepted:,}", f"{iterations:,}", elapsed,
    )

    if gif_path is not None and frames:
        gif_path = Path(gif_path)
        frames[0].save(
            gif_path,
            save_all=True,
            append_images=frames[1:],
            duration=120,
            loop=0,
        )
        logger.info("SA animation saved: %s (%d frames)", gif_path, len(frames))

    return AnnealResult(image, cost, iterations, accepted, elapsed)


def run(
    reference: PixelBuffer,
    alpha: float = 0.999,
    shape_kind: ShapeKind | str = ShapeKind.RECTANGLE,
    sample_size: int | None = None,
    **kwargs,
) -> PixelBuffer:
    """Anneal and return only the final canvas."""
    return anneal(reference, alpha, shape_kind, sample_size, **kwargs).image
