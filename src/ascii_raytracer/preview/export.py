"""Image export utilities for rendered frames.

A terminal frame is tiny (80x40 by default), so snapshots are upscaled with
nearest-neighbour filtering to keep the blocky look.

Example:
    >>> from src.ascii_raytracer.preview.export import save_png_from_array
    >>> framebuffer = renderer.render()
    >>> save_png_from_array(framebuffer, "frame.png", scale=8)
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.ascii_raytracer.preview.palette import clamp_colors, palette_to_rgb, quantize


def image_to_uint8(
    image: npt.NDArray[np.floating],
    *,
    quantized: bool = False,
) -> npt.NDArray[np.uint8]:
    """Convert an unclamped float framebuffer to uint8 RGB.

    Args:
        image: Framebuffer of shape (H, W, 3).
        quantized: If True, reproduce the 256-color palette the terminal
            shows instead of the full-precision colors.

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    if quantized:
        return palette_to_rgb(quantize(image))
    return (clamp_colors(image) * 255).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.floating],
    filepath: str,
    *,
    scale: int = 1,
    quantized: bool = False,
) -> None:
    """Save a framebuffer as a PNG file.

    Args:
        image: Framebuffer of shape (H, W, 3), unclamped.
        filepath: Output file path (should end in .png).
        scale: Integer upscaling factor (nearest neighbour).
        quantized: If True, save the palette colors the terminal shows.

    Raises:
        ValueError: If scale is not a positive integer.
    """
    if scale < 1:
        raise ValueError(f"Scale must be a positive integer, got {scale}")

    pil_image = PILImage.fromarray(image_to_uint8(image, quantized=quantized))
    if scale != 1:
        pil_image = pil_image.resize(
            (pil_image.width * scale, pil_image.height * scale),
            PILImage.Resampling.NEAREST,
        )
    pil_image.save(filepath)
