"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from shape_anneal.annealing import AnnealResult, anneal
from shape_anneal.config import AnnealConfig
from shape_anneal.errors import ShapeAnnealError
from shape_anneal.image_io import load_image, make_comparison_grid, save_image
from shape_anneal.metrics import mean_color_error, structural_similarity
from shape_anneal.pixel_buffer import PixelBuffer
from shape_anneal.shapes import ShapeKind

app = typer.Typer(
    name="shape-anneal",
    help="Approximate images with random rectangles or triangles via simulated annealing.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]error:[/bold red] {message}")
    raise typer.Exit(1)


def _run_one(
    cfg: AnnealConfig,
    target: PixelBuffer,
    gif_path: Path | None,
) -> AnnealResult:
    return anneal(
        target,
        alpha=cfg.alpha,
        shape_kind=ShapeKind(cfg.shape),
        sample_size=cfg.sample_size,
        seed=cfg.seed,
        initial_temp=cfg.initial_temp,
        final_temp=cfg.final_temp,
        resync_every=cfg.resync_every,
        workers=cfg.workers,
        log_every=cfg.log_every,
        gif_path=gif_path,
        gif_frames=cfg.gif_frames,
        pixel_upscale=cfg.pixel_upscale,
    )


def _summary(target: PixelBuffer, result: AnnealResult) -> str:
    err = mean_color_error(target, result.image)
    sim = structural_similarity(target, result.image)
    return (
        f"{target.width}x{target.height}  cost={result.cost:.2f}"
        f"  error={err:.1f}  ssim={sim:.3f}"
        f"  accepted={result.accepted:,}/{result.iterations:,}"
    )


# Defaults come from AnnealConfig - single source of truth
_DEFAULTS = AnnealConfig()


# -- single-image command ----------------------------------------------

@app.command()
def single(
    target: Path = typer.Argument(..., help="Path to the target image"),
    output: Path = typer.Option(Path("output/result.png"), "--output", "-o"),
    alpha: float = typer.Option(
        _DEFAULTS.alpha, "--alpha", "-a", help="Cooling factor per iteration",
    ),
    triangle: bool = typer.Option(
        False, "--triangle", "-t", help="Draw triangles instead of rectangles",
    ),
    sample: int | None = typer.Option(
        _DEFAULTS.sample_size, "--sample", "-s",
        help="Touched pixels sampled per cost update (faster, less accurate)",
    ),
    seed: int | None = typer.Option(_DEFAULTS.seed, "--seed"),
    max_side: int | None = typer.Option(
        _DEFAULTS.max_side, "--max-side", "-m",
        help="Downscale so the longest side fits (aspect ratio preserved)",
    ),
    upscale: int = typer.Option(_DEFAULTS.pixel_upscale, "--upscale", "-u"),
    gif: bool = typer.Option(_DEFAULTS.save_gif, "--gif/--no-gif"),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
    ),
    resync: int | None = typer.Option(
        _DEFAULTS.resync_every, "--resync",
        help="Recompute the full cost every N iterations",
    ),
    workers: int | None = typer.Option(_DEFAULTS.workers, "--workers", "-w"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Approximate a single image."""
    _setup_logging(verbose)

    cfg = AnnealConfig(
        alpha=alpha,
        shape=ShapeKind.TRIANGLE.value if triangle else ShapeKind.RECTANGLE.value,
        sample_size=sample,
        seed=seed,
        max_side=max_side,
        resync_every=resync,
        workers=workers,
        pixel_upscale=upscale,
        save_gif=gif,
        save_comparison=comparison,
    )

    try:
        img = load_image(target, cfg.max_side)
    except OSError as exc:
        _fail(f"cannot read {target}: {exc}")

    output.parent.mkdir(parents=True, exist_ok=True)
    gif_path = output.with_suffix(".gif") if cfg.save_gif else None

    try:
        result = _run_one(cfg, img, gif_path)
    except ShapeAnnealError as exc:
        _fail(str(exc))

    try:
        save_image(result.image, output, cfg.pixel_upscale)
        if cfg.save_comparison:
            comp_path = output.with_name(f"{output.stem}_comparison{output.suffix}")
            make_comparison_grid(target, img, result.image, comp_path, cfg.pixel_upscale)
    except OSError as exc:
        _fail(f"cannot write {output}: {exc}")

    console.print(
        f"[green]✓[/green] Saved to {output}  "
        f"[dim]{_summary(img, result)}  time={result.elapsed:.1f}s[/dim]"
    )


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    alpha: float = typer.Option(_DEFAULTS.alpha, "--alpha", "-a"),
    triangle: bool = typer.Option(False, "--triangle", "-t"),
    sample: int | None = typer.Option(_DEFAULTS.sample_size, "--sample", "-s"),
    seed: int | None = typer.Option(_DEFAULTS.seed, "--seed"),
    max_side: int | None = typer.Option(_DEFAULTS.max_side, "--max-side", "-m"),
    upscale: int = typer.Option(_DEFAULTS.pixel_upscale, "--upscale", "-u"),
    gif: bool = typer.Option(_DEFAULTS.save_gif, "--gif/--no-gif"),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
    ),
    workers: int | None = typer.Option(_DEFAULTS.workers, "--workers", "-w"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Process all images in INPUT_DIR and write results to OUTPUT_DIR."""
    _setup_logging(verbose)
    logger = logging.getLogger("shape_anneal")

    cfg = AnnealConfig(
        alpha=alpha,
        shape=ShapeKind.TRIANGLE.value if triangle else ShapeKind.RECTANGLE.value,
        sample_size=sample,
        seed=seed,
        max_side=max_side,
        workers=workers,
        pixel_upscale=upscale,
        save_gif=gif,
        save_comparison=comparison,
        input_dir=input_dir,
        output_dir=output_dir,
    )

    input_dir.mkdir(exist_ok=True)
    output_dir.mkdir(exist_ok=True)

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]SHAPE ANNEALER[/bold]\n"
        f"Shape: {cfg.shape}  |  Alpha: {cfg.alpha}\n"
        f"Sample: {cfg.sample_size or 'all'}  |  Images: {len(images)}",
        border_style="cyan",
    ))

    for idx, img_path in enumerate(images, 1):
        stem = img_path.stem
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        t_total = time.perf_counter()

        try:
            img = load_image(img_path, cfg.max_side)
        except OSError as exc:
            _fail(f"cannot read {img_path}: {exc}")
        logger.info("Target: %dx%d = %d pixels", img.width, img.height, img.size)

        gif_path = output_dir / f"{stem}_annealing.gif" if cfg.save_gif else None
        try:
            result = _run_one(cfg, img, gif_path)
        except ShapeAnnealError as exc:
            _fail(f"{img_path.name}: {exc}")

        result_path = output_dir / f"{stem}_{cfg.shape}.{cfg.output_format}"
        save_image(result.image, result_path, cfg.pixel_upscale)

        if cfg.save_comparison:
            comp_path = output_dir / f"{stem}_comparison.{cfg.output_format}"
            make_comparison_grid(img_path, img, result.image, comp_path, cfg.pixel_upscale)

        elapsed = time.perf_counter() - t_total
        console.print(
            f"  [green]✓[/green] {result_path.name}  "
            f"[dim]{_summary(img, result)}  time={elapsed:.1f}s[/dim]"
        )

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]",
        border_style="green",
    ))


if __name__ == "__main__":
    app()
