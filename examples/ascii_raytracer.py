#!/usr/bin/env python3
"""Animate the demo scene in the terminal.

Renders the four-sphere demo scene with Whitted-style ray tracing and draws
every frame as a grid of colored glyphs, redrawn in place at a fixed frame
rate. Two of the spheres orbit slowly, so reflections and refractions change
from frame to frame.

Usage:
    python -m examples.ascii_raytracer [options]

Options:
    --width WIDTH        Image width in glyphs (default: 80)
    --height HEIGHT      Image height in glyphs (default: 40)
    --fps FPS            Target frame rate (default: 30)
    --frames N           Stop after N frames (default: run until Ctrl+C)
    --max-depth DEPTH    Reflection/refraction bounce limit (default: 4)
    --no-animate         Keep the spheres still
    --snapshot PATH      Render a single frame to a PNG file and exit
    --scale N            Upscaling factor for --snapshot (default: 8)
    --quantized          Save the snapshot in terminal palette colors
    --cpu                Force the CPU backend
    --quiet              Suppress status output

Example:
    python -m examples.ascii_raytracer --frames 300
    python -m examples.ascii_raytracer --snapshot demo.png --scale 10
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Animate the ray traced demo scene in the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=80,
        help="Image width in glyphs (default: 80)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=40,
        help="Image height in glyphs (default: 40)",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=30.0,
        help="Target frame rate (default: 30)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=None,
        help="Stop after this many frames (default: run until interrupted)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=4,
        help="Reflection/refraction bounce limit (default: 4)",
    )
    parser.add_argument(
        "--no-animate",
        action="store_true",
        help="Keep the spheres still",
    )
    parser.add_argument(
        "--snapshot",
        type=str,
        default=None,
        help="Render one frame to this PNG file instead of animating",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=8,
        help="Upscaling factor for --snapshot (default: 8)",
    )
    parser.add_argument(
        "--quantized",
        action="store_true",
        help="Save the snapshot in the terminal palette colors",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress status output",
    )
    return parser.parse_args(argv)


def _status(message: str, quiet: bool) -> None:
    # stdout belongs to the frames
    if not quiet:
        print(message, file=sys.stderr)


def save_snapshot(
    output_path: str,
    width: int = 80,
    height: int = 40,
    max_depth: int = 4,
    scale: int = 8,
    quantized: bool = False,
    quiet: bool = False,
) -> Path:
    """Render a single frame of the demo scene and save it as PNG.

    Args:
        output_path: Output file path (PNG).
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Bounce limit.
        scale: Nearest-neighbour upscaling factor.
        quantized: If True, save the 256-color palette version.
        quiet: If True, suppress status output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.ascii_raytracer.core.integrator import Renderer, RenderConfig
    from src.ascii_raytracer.preview.export import save_png_from_array
    from src.ascii_raytracer.scene.demo import create_demo_scene

    _status(f"Creating demo scene ({width}x{height})...", quiet)
    scene, _ = create_demo_scene()
    renderer = Renderer(scene, RenderConfig(width=width, height=height, max_depth=max_depth))

    start_time = time.time()
    framebuffer = renderer.render()

    output_file = Path(output_path)
    save_png_from_array(framebuffer, str(output_file), scale=scale, quantized=quantized)

    total_time = time.time() - start_time
    _status(f"Saved to: {output_file.absolute()}", quiet)
    _status(f"Total time: {total_time:.2f}s", quiet)
    return output_file


def run_animation(
    width: int = 80,
    height: int = 40,
    fps: float = 30.0,
    frames: int | None = None,
    max_depth: int = 4,
    animate: bool = True,
    quiet: bool = False,
) -> int:
    """Animate the demo scene in the terminal.

    Args:
        width: Image width in glyphs.
        height: Image height in glyphs.
        fps: Target frame rate.
        frames: Number of frames to draw, or None to run until Ctrl+C.
        max_depth: Bounce limit.
        animate: If False, the spheres do not move.
        quiet: If True, suppress the summary printed after the run.

    Returns:
        Number of frames drawn.
    """
    from src.ascii_raytracer.core.integrator import Renderer, RenderConfig
    from src.ascii_raytracer.preview.player import FramePlayer
    from src.ascii_raytracer.preview.terminal import TerminalController
    from src.ascii_raytracer.scene.demo import create_demo_scene

    scene, orbits = create_demo_scene()
    renderer = Renderer(scene, RenderConfig(width=width, height=height, max_depth=max_depth))

    with TerminalController() as terminal:
        player = FramePlayer(scene, renderer, terminal, orbits, fps=fps, animate=animate)
        stats = player.run(frames)

    _status(
        f"{stats.frames} frames in {stats.elapsed:.2f}s "
        f"({stats.effective_fps:.1f} fps, {stats.average_frame_time * 1000:.1f} ms/frame)",
        quiet,
    )
    return stats.frames


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Initialize Taichi
    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
        _status("Using CPU backend", args.quiet)
    else:
        try:
            ti.init(arch=ti.gpu)
            _status("Using GPU backend", args.quiet)
        except Exception:
            ti.init(arch=ti.cpu)
            _status("Using CPU backend", args.quiet)

    try:
        if args.snapshot is not None:
            save_snapshot(
                args.snapshot,
                width=args.width,
                height=args.height,
                max_depth=args.max_depth,
                scale=args.scale,
                quantized=args.quantized,
                quiet=args.quiet,
            )
        else:
            run_animation(
                width=args.width,
                height=args.height,
                fps=args.fps,
                frames=args.frames,
                max_depth=args.max_depth,
                animate=not args.no_animate,
                quiet=args.quiet,
            )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
