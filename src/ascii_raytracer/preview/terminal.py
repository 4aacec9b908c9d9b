"""ANSI terminal output of rendered frames.

Each pixel becomes one colored glyph. Frames are drawn from the home
position over the previous one, so the image updates in place.
"""

from __future__ import annotations

import sys
from typing import TextIO

import numpy as np
import numpy.typing as npt

from src.ascii_raytracer.preview.palette import quantize

# Square glyph; most terminals draw it two cells wide, which keeps the
# 80x40 image roughly square.
PIXEL_GLYPH = "⬛"

CLEAR_SCREEN = "\033[2J"
CURSOR_HOME = "\033[H"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"
RESET_ATTRIBUTES = "\033[0m"


def color_escape(index: int) -> str:
    """Escape sequence selecting a 256-color foreground."""
    return f"\033[38;5;{index}m"


def encode_frame(indices: npt.NDArray[np.integer], glyph: str = PIXEL_GLYPH) -> str:
    """Turn a grid of palette indices into a printable frame.

    A color escape is emitted only when the color changes along a row.

    Args:
        indices: Array of shape (H, W) of 256-color palette indices.
        glyph: The character drawn for each pixel.

    Returns:
        The frame text, one line per row, with attributes reset at the end
        of every row.
    """
    lines = []
    for row in np.asarray(indices):
        parts = []
        previous = None
        for index in row.tolist():
            if index != previous:
                parts.append(color_escape(index))
                previous = index
            parts.append(glyph)
        parts.append(RESET_ATTRIBUTES)
        lines.append("".join(parts))
    return "\n".join(lines)


def encode_framebuffer(framebuffer: npt.NDArray[np.floating], glyph: str = PIXEL_GLYPH) -> str:
    """Quantize an unclamped framebuffer and encode it as frame text."""
    return encode_frame(quantize(framebuffer), glyph)


class TerminalController:
    """Context manager that prepares the terminal for in-place animation.

    On entry the screen is cleared and the cursor hidden; on exit the
    attributes are reset and the cursor shown again, also when the body
    raised.
    """

    def __init__(self, stream: TextIO | None = None, *, clear: bool = True) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._clear = clear
        self._active = False

    def __enter__(self) -> TerminalController:
        if self._clear:
            self._stream.write(CLEAR_SCREEN)
        self._stream.write(CURSOR_HOME)
        self._stream.write(HIDE_CURSOR)
        self._stream.flush()
        self._active = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    @property
    def active(self) -> bool:
        return self._active

    def restore(self) -> None:
        if self._active:
            self._stream.write(RESET_ATTRIBUTES)
            self._stream.write(SHOW_CURSOR)
            self._stream.write("\n")
            self._stream.flush()
            self._active = False

    def draw(self, frame: str) -> None:
        self._stream.write(CURSOR_HOME)
        self._stream.write(frame)
        self._stream.write(RESET_ATTRIBUTES)
        self._stream.flush()

    def draw_framebuffer(self, framebuffer: npt.NDArray[np.floating]) -> None:
        """Quantize, encode and draw a framebuffer."""
        self.draw(encode_framebuffer(framebuffer))
