"""Fixed-rate animation loop.

Each tick advances the sphere orbits, renders a frame and hands it to a
display, then sleeps for whatever is left of the frame period. A slow frame
is not made up for; the next tick simply starts late.

Example:
    >>> from src.ascii_raytracer.preview.player import FramePlayer
    >>> from src.ascii_raytracer.preview.terminal import TerminalController
    >>>
    >>> with TerminalController() as terminal:
    ...     player = FramePlayer(scene, renderer, terminal, orbits, fps=30)
    ...     player.run(frames=300)
"""

from __future__ import annotations

import time
from collections.abc import Callable, Generator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import numpy as np
import numpy.typing as npt

from src.ascii_raytracer.scene.animation import Orbit, animate

if TYPE_CHECKING:
    from src.ascii_raytracer.core.integrator import Renderer
    from src.ascii_raytracer.scene.scene import Scene

DEFAULT_FPS = 30.0

# Callback receives (frame_index, render_seconds)
FrameCallback = Callable[[int, float], None]


class FrameSink(Protocol):
    """Anything that can show a framebuffer."""

    def draw_framebuffer(self, framebuffer: npt.NDArray[np.floating]) -> None: ...


@dataclass
class PlaybackStats:
    """Summary of a run() call.

    Attributes:
        frames: Number of frames rendered and drawn.
        elapsed: Wall-clock seconds for the whole run.
        render_time: Seconds spent animating, rendering and drawing.
    """

    frames: int = 0
    elapsed: float = 0.0
    render_time: float = 0.0

    @property
    def average_frame_time(self) -> float:
        """Mean seconds of work per frame (0 if nothing was rendered)."""
        return self.render_time / self.frames if self.frames else 0.0

    @property
    def effective_fps(self) -> float:
        """Frames per wall-clock second (0 if nothing was rendered)."""
        return self.frames / self.elapsed if self.elapsed > 0 else 0.0


class FramePlayer:
    """Drives animate -> render -> draw at a target frame rate.

    Attributes:
        scene: The scene whose spheres are animated.
        renderer: The renderer producing frames of the scene.
        display: Where frames are drawn.
        orbits: Per-frame sphere rotations.
        fps: Target frames per second.
        animate: Whether orbits are advanced each frame.
    """

    def __init__(
        self,
        scene: Scene,
        renderer: Renderer,
        display: FrameSink,
        orbits: Sequence[Orbit] = (),
        *,
        fps: float = DEFAULT_FPS,
        animate: bool = True,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Create a player.

        Args:
            scene: The scene to animate.
            renderer: A renderer bound to the same scene.
            display: The frame sink, e.g. a TerminalController.
            orbits: Sphere orbits applied once per frame.
            fps: Target frame rate (must be positive).
            animate: If False, the scene is left untouched.
            clock: Monotonic time source, in seconds.
            sleep: Function used to wait out the rest of a frame.

        Raises:
            ValueError: If fps is not positive or the renderer renders a
                different scene.
        """
        if not fps > 0:
            raise ValueError(f"fps must be positive, got {fps}")
        if renderer.scene is not scene:
            raise ValueError("Renderer is bound to a different scene")

        self.scene = scene
        self.renderer = renderer
        self.display = display
        self.orbits = list(orbits)
        self.fps = fps
        self.animate = animate
        self._clock = clock
        self._sleep = sleep
        self._frame_index = 0

    @property
    def frame_period(self) -> float:
        """Target seconds per frame."""
        return 1.0 / self.fps

    @property
    def frame_index(self) -> int:
        """Number of frames produced so far."""
        return self._frame_index

    def step(self) -> npt.NDArray[np.float32]:
        """Produce one frame: advance the orbits, render, draw.

        The scene is updated before the render kernel starts, so the frame
        sees one consistent snapshot.

        Returns:
            The rendered framebuffer.
        """
        if self.animate:
            animate(self.scene, self.orbits)
        framebuffer = self.renderer.render()
        self.display.draw_framebuffer(framebuffer)
        self._frame_index += 1
        return framebuffer

    def play(self, frames: int | None = None) -> Generator[tuple[int, float], None, None]:
        """Run the paced loop, yielding after each frame.

        Args:
            frames: Number of frames to produce, or None to run forever.

        Yields:
            Tuple of (frame_index, work_seconds) for each frame.
        """
        produced = 0
        while frames is None or produced < frames:
            start = self._clock()
            self.step()
            work = self._clock() - start
            produced += 1
            yield self._frame_index, work

            remaining = self.frame_period - work
            if remaining > 0:
                self._sleep(remaining)

    def run(
        self,
        frames: int | None = None,
        callback: FrameCallback | None = None,
    ) -> PlaybackStats:
        """Run the paced loop to completion.

        Args:
            frames: Number of frames to produce, or None to run until
                interrupted (KeyboardInterrupt ends the run normally).
            callback: Optional function called after each frame with
                (frame_index, work_seconds).

        Returns:
            Statistics of the run.
        """
        stats = PlaybackStats()
        start = self._clock()
        try:
            for frame_index, work in self.play(frames):
                stats.frames += 1
                stats.render_time += work
                if callback is not None:
                    callback(frame_index, work)
        except KeyboardInterrupt:
            pass
        stats.elapsed = self._clock() - start
        return stats
