"""Image loading, saving, and comparison-grid generation."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from shape_anneal.pixel_buffer import PixelBuffer


def compute_target_size(
    original_width: int,
    original_height: int,
    max_side: int,
) -> tuple[int, int]:
    """Compute downscaled (w, h) preserving aspect ratio.

    The longest side becomes *max_side*; the other is scaled
    proportionally (rounded to the nearest integer, minimum 1).
    """
    if original_width >= original_height:
        w = max_side
        h = max(1, round(original_height * max_side / original_width))
    else:
        h = max_side
        w = max(1, round(original_width * max_side / original_height))
    return w, h


def load_image(path: str | Path, max_side: int | None = None) -> PixelBuffer:
    """Decode an image file into an RGB :class:`PixelBuffer`.

    If *max_side* is given and the image is larger, it is downscaled so
    that its longest side equals *max_side*.
    """
    with Image.open(path) as src:
        img = src.convert("RGB")
    if max_side is not None and max(img.width, img.height) > max_side:
        w, h = compute_target_size(img.width, img.height, max_side)
        img = img.resize((w, h), Image.LANCZOS)
    return PixelBuffer(np.array(img, dtype=np.uint8))


def save_image(
    buffer: PixelBuffer,
    path: str | Path,
    pixel_upscale: int = 1,
) -> None:
    """Save a buffer, nearest-neighbour-upscaled by *pixel_upscale*."""
    img = Image.fromarray(buffer.to_array())
    if pixel_upscale > 1:
        img = img.resize(
            (buffer.width * pixel_upscale, buffer.height * pixel_upscale),
            Image.NEAREST,
        )
    img.save(path)


def make_comparison_grid(
    original_path: str | Path,
    target: PixelBuffer,
    result: PixelBuffer,
    output_path: str | Path,
    pixel_upscale: int = 1,
) -> None:
    """Create a 3-panel comparison: Original | Target | Approximation.

    All panels are scaled to the target's size times *pixel_upscale*.
    """
    panel_w = target.width * pixel_upscale
    panel_h = target.height * pixel_upscale
    label_height = 36

    with Image.open(original_path) as src:
        original = src.convert("RGB").resize((panel_w, panel_h), Image.LANCZOS)
    target_img = Image.fromarray(target.to_array()).resize(
        (panel_w, panel_h), Image.NEAREST,
    )
    result_img = Image.fromarray(result.to_array()).resize(
        (panel_w, panel_h), Image.NEAREST,
    )

    panels = [original, target_img, result_img]
    labels = [
        "Original",
        f"Target {target.width}x{target.height}",
        "Approximation",
    ]

    gap = 8
    total_w = len(panels) * panel_w + (len(panels) - 1) * gap
    total_h = panel_h + label_height

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (panel, label) in enumerate(zip(panels, labels, strict=False)):
        x = i * (panel_w + gap)
        canvas.paste(panel, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    canvas.save(output_path)
