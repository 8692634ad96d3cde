"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class AnnealConfig:
    """All tuneable parameters for an annealing run.

    Attributes:
        alpha:          Multiplicative cooling factor per iteration, in (0, 1).
        initial_temp:   Starting temperature.
        final_temp:     The run stops once the temperature drops below this.
        shape:          "rectangle" or "triangle".
        sample_size:    Touched pixels folded into each cost update (None = all).
        seed:           Random seed (None = non-deterministic).
        max_side:       Downscale the input so its longest side fits (None = keep).
        resync_every:   Recompute the full cost every n iterations (None = never).
        workers:        Thread pool size for triangle rasterisation (None = inline).
        log_every:      Progress log interval in iterations.
        pixel_upscale:  Each pixel becomes n x n in saved images.
        save_gif:       Save an animated GIF of the run.
        gif_frames:     Number of snapshot frames for the GIF.
        save_comparison: Save a side-by-side comparison grid.
        output_format:  Image format for batch output files.
        input_dir:      Folder to scan for source images.
        output_dir:     Folder for results.
    """

    # Cooling schedule
    alpha: float = 0.999
    initial_temp: float = 1000.0
    final_temp: float = 0.001

    # Candidates
    shape: str = "rectangle"  # "rectangle" | "triangle"
    sample_size: int | None = None
    seed: int | None = None

    # Image scaling
    max_side: int | None = None

    # Run control
    resync_every: int | None = None
    workers: int | None = None
    log_every: int = 1000

    # Output
    pixel_upscale: int = 1
    save_gif: bool = False
    gif_frames: int = 60
    save_comparison: bool = False
    output_format: str = "png"

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".jfif"}
    )
