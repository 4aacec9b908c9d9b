"""Tests for the preview module.

This module tests palette quantization, terminal encoding, the terminal
controller and PNG export.

Note: Terminal output is written to an in-memory stream, never to the real
terminal.
"""

import io

import numpy as np
import pytest
from PIL import Image as PILImage


class TestPalette:
    """Tests for clamping and 256-color quantization."""

    def test_black_and_white(self):
        from src.ascii_raytracer.preview.palette import quantize

        image = np.array([[[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]], dtype=np.float32)
        assert quantize(image).tolist() == [[16, 231]]

    def test_primary_colors(self):
        from src.ascii_raytracer.preview.palette import quantize

        image = np.array([[[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]], dtype=np.float32)
        assert quantize(image).tolist() == [[196, 46, 21]]

    def test_levels_truncate(self):
        """Channels are truncated, not rounded: 0.39 * 5 = 1.95 -> level 1."""
        from src.ascii_raytracer.preview.palette import quantize

        image = np.array([[[0.39, 0.0, 0.0]]], dtype=np.float32)
        assert quantize(image)[0, 0] == 16 + 36

    def test_out_of_range_values_are_clamped(self):
        from src.ascii_raytracer.preview.palette import quantize

        image = np.array([[[16.0, -3.0, 2.0]]], dtype=np.float32)
        assert quantize(image)[0, 0] == 16 + 36 * 5 + 5

    def test_nan_becomes_black(self):
        from src.ascii_raytracer.preview.palette import clamp_colors, quantize

        image = np.array([[[np.nan, np.nan, np.nan]]], dtype=np.float32)
        assert quantize(image)[0, 0] == 16
        assert np.all(clamp_colors(image) == 0.0)

    def test_clamp_does_not_modify_input(self):
        from src.ascii_raytracer.preview.palette import clamp_colors

        image = np.full((2, 2, 3), 3.0, dtype=np.float32)
        clamp_colors(image)
        assert np.all(image == 3.0)

    def test_background_index(self):
        from src.ascii_raytracer.core.integrator import BACKGROUND_COLOR
        from src.ascii_raytracer.preview.palette import quantize

        image = np.array([[BACKGROUND_COLOR]], dtype=np.float32)
        # int(1.0), int(3.5), int(4.0)
        assert quantize(image)[0, 0] == 16 + 36 * 1 + 6 * 3 + 4

    def test_palette_to_rgb(self):
        from src.ascii_raytracer.preview.palette import palette_to_rgb

        rgb = palette_to_rgb(np.array([16, 231, 196]))
        assert rgb.tolist() == [[0, 0, 0], [255, 255, 255], [255, 0, 0]]

    def test_palette_to_rgb_rejects_system_colors(self):
        from src.ascii_raytracer.preview.palette import palette_to_rgb

        with pytest.raises(ValueError, match="color cube"):
            palette_to_rgb(np.array([15]))
        with pytest.raises(ValueError, match="color cube"):
            palette_to_rgb(np.array([232]))


class TestEncodeFrame:
    """Tests for frame text encoding."""

    def test_escape_only_on_color_change(self):
        from src.ascii_raytracer.preview.terminal import RESET_ATTRIBUTES, encode_frame

        text = encode_frame(np.array([[16, 16, 17]]), glyph="#")
        assert text == "\033[38;5;16m##\033[38;5;17m#" + RESET_ATTRIBUTES

    def test_rows_restart_color(self):
        """Each row is reset at its end, so every row begins with an escape."""
        from src.ascii_raytracer.preview.terminal import encode_frame

        text = encode_frame(np.array([[20, 20], [20, 20]]), glyph="#")
        lines = text.split("\n")
        assert len(lines) == 2
        assert all(line.startswith("\033[38;5;20m##") for line in lines)

    def test_default_glyph(self):
        from src.ascii_raytracer.preview.terminal import PIXEL_GLYPH, encode_frame

        text = encode_frame(np.array([[16, 17, 18]]))
        assert text.count(PIXEL_GLYPH) == 3

    def test_encode_framebuffer(self):
        from src.ascii_raytracer.preview.terminal import encode_framebuffer

        framebuffer = np.zeros((2, 3, 3), dtype=np.float32)
        framebuffer[1, 2] = (1.0, 1.0, 1.0)
        text = encode_framebuffer(framebuffer, glyph="#")
        assert text.split("\n")[1] == "\033[38;5;16m##\033[38;5;231m#\033[0m"


class TestTerminalController:
    """Tests for the terminal context manager."""

    def test_enter_and_exit(self):
        from src.ascii_raytracer.preview.terminal import (
            CLEAR_SCREEN,
            HIDE_CURSOR,
            SHOW_CURSOR,
            TerminalController,
        )

        stream = io.StringIO()
        with TerminalController(stream) as terminal:
            assert terminal.active
            assert stream.getvalue().startswith(CLEAR_SCREEN)
            assert HIDE_CURSOR in stream.getvalue()
        assert not terminal.active
        assert stream.getvalue().endswith(SHOW_CURSOR + "\n")

    def test_no_clear(self):
        from src.ascii_raytracer.preview.terminal import CLEAR_SCREEN, TerminalController

        stream = io.StringIO()
        with TerminalController(stream, clear=False):
            pass
        assert CLEAR_SCREEN not in stream.getvalue()

    def test_restores_on_exception(self):
        from src.ascii_raytracer.preview.terminal import SHOW_CURSOR, TerminalController

        stream = io.StringIO()
        with pytest.raises(RuntimeError):
            with TerminalController(stream):
                raise RuntimeError("boom")
        assert SHOW_CURSOR in stream.getvalue()

    def test_restore_is_idempotent(self):
        from src.ascii_raytracer.preview.terminal import SHOW_CURSOR, TerminalController

        stream = io.StringIO()
        with TerminalController(stream) as terminal:
            terminal.restore()
        assert stream.getvalue().count(SHOW_CURSOR) == 1

    def test_draw_starts_at_home(self):
        from src.ascii_raytracer.preview.terminal import CURSOR_HOME, TerminalController

        stream = io.StringIO()
        terminal = TerminalController(stream)
        terminal.draw("frame")
        assert stream.getvalue() == CURSOR_HOME + "frame\033[0m"

    def test_draw_framebuffer(self):
        from src.ascii_raytracer.preview.terminal import PIXEL_GLYPH, TerminalController

        stream = io.StringIO()
        TerminalController(stream).draw_framebuffer(np.zeros((2, 4, 3), dtype=np.float32))
        assert stream.getvalue().count(PIXEL_GLYPH) == 8


class TestImageExport:
    """Test PNG export functionality."""

    def test_image_to_uint8(self):
        from src.ascii_raytracer.preview.export import image_to_uint8

        image = np.array([[[0.0, 0.5, 2.0]]], dtype=np.float32)
        assert image_to_uint8(image).tolist() == [[[0, 127, 255]]]

    def test_image_to_uint8_quantized(self):
        from src.ascii_raytracer.preview.export import image_to_uint8
        from src.ascii_raytracer.preview.palette import CUBE_CHANNEL_VALUES

        rng = np.random.default_rng(0)
        image = rng.uniform(-0.5, 1.5, size=(4, 4, 3)).astype(np.float32)
        result = image_to_uint8(image, quantized=True)
        assert result.dtype == np.uint8
        assert set(np.unique(result).tolist()) <= set(CUBE_CHANNEL_VALUES)

    def test_save_png(self, tmp_path):
        from src.ascii_raytracer.preview.export import save_png_from_array

        image = np.zeros((4, 8, 3), dtype=np.float32)
        image[0, 0] = (1.0, 0.0, 0.0)
        path = tmp_path / "frame.png"
        save_png_from_array(image, str(path))

        with PILImage.open(path) as saved:
            assert saved.size == (8, 4)
            assert saved.getpixel((0, 0)) == (255, 0, 0)
            assert saved.getpixel((1, 0)) == (0, 0, 0)

    def test_save_png_scaled(self, tmp_path):
        from src.ascii_raytracer.preview.export import save_png_from_array

        image = np.zeros((4, 8, 3), dtype=np.float32)
        image[0, 0] = (1.0, 1.0, 1.0)
        path = tmp_path / "frame.png"
        save_png_from_array(image, str(path), scale=3)

        with PILImage.open(path) as saved:
            assert saved.size == (24, 12)
            # Nearest neighbour keeps hard pixel edges
            assert saved.getpixel((2, 2)) == (255, 255, 255)
            assert saved.getpixel((3, 3)) == (0, 0, 0)

    def test_invalid_scale(self, tmp_path):
        from src.ascii_raytracer.preview.export import save_png_from_array

        with pytest.raises(ValueError, match="Scale"):
            save_png_from_array(np.zeros((2, 2, 3)), str(tmp_path / "x.png"), scale=0)
