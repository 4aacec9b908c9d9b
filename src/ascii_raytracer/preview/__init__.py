"""Preview module for terminal output and snapshots.

Components:
    palette: Clamping and 256-color quantization
    terminal: ANSI frame encoding and terminal control
    export: PNG snapshots via Pillow
    player: Fixed-rate animate/render/draw loop

Example:
    >>> from src.ascii_raytracer.preview import FramePlayer, TerminalController
    >>> with TerminalController() as terminal:
    ...     FramePlayer(scene, renderer, terminal, orbits).run(frames=100)
"""

from src.ascii_raytracer.preview.export import image_to_uint8, save_png_from_array
from src.ascii_raytracer.preview.palette import clamp_colors, palette_to_rgb, quantize
from src.ascii_raytracer.preview.player import FramePlayer, PlaybackStats
from src.ascii_raytracer.preview.terminal import (
    TerminalController,
    encode_frame,
    encode_framebuffer,
)

__all__ = [
    # Palette
    "clamp_colors",
    "quantize",
    "palette_to_rgb",
    # Terminal
    "TerminalController",
    "encode_frame",
    "encode_framebuffer",
    # Export
    "save_png_from_array",
    "image_to_uint8",
    # Player
    "FramePlayer",
    "PlaybackStats",
]
