"""Interactive preview window using Taichi GGUI.

This module provides a window that plays the planets animation in real time
using Taichi's ti.ui.Window and canvas system.

Features:
    - Taichi GGUI-based window (GPU-accelerated)
    - Display of RGBA8 frame buffers from the FrameRenderer
    - Animation loop advancing the orbit once per rendered frame
    - Pause and PNG export controls

Example:
    >>> from spheretrace.core.renderer import FrameRenderer
    >>> from spheretrace.preview.interactive import InteractivePreview
    >>> from spheretrace.scene.planets import create_planets_scene
    >>>
    >>> scene, orbit = create_planets_scene()
    >>> renderer = FrameRenderer(320, 240)
    >>> preview = InteractivePreview(320, 240)
    >>> preview.run_animation(renderer, scene, orbit)  # Blocks until closed
"""

from __future__ import annotations

import os
from datetime import datetime
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

if TYPE_CHECKING:
    import numpy.typing as npt

    from spheretrace.core.renderer import FrameRenderer
    from spheretrace.scene.manager import SceneManager
    from spheretrace.scene.planets import PlanetOrbit


class InteractivePreview:
    """Interactive preview window using Taichi GGUI.

    Wraps ti.ui.Window and keeps a float RGB display field that frames are
    copied into before being shown.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        window: The Taichi GGUI window instance.
        canvas: The canvas for rendering.
        display_image: Taichi field storing the display image (RGB float).
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        title: str = "Planets - Interactive Preview",
    ) -> None:
        """Initialize the interactive preview.

        The window itself is created lazily on first use so that the object
        can be constructed on headless machines.

        Args:
            width: Window width in pixels.
            height: Window height in pixels.
            title: Window title.
        """
        self.width = width
        self.height = height
        self._title = title
        self._is_initialized = False
        self._paused = False
        self._frames_shown = 0
        self._renderer: FrameRenderer | None = None

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None

        # Shape is (width, height) for the canvas, RGB values stored as vec3
        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

    def _initialize_window(self) -> None:
        if self._is_initialized:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()
        self._is_initialized = True

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    @property
    def frames_shown(self) -> int:
        """Number of frames shown by run_animation()."""
        return self._frames_shown

    def update_frame(self, frame: npt.NDArray[np.uint8]) -> None:
        """Update the display image from a flat RGBA8 frame buffer.

        Args:
            frame: Flat uint8 buffer of width * height * 4 bytes, row 0 at
                the bottom of the viewport.

        Raises:
            ValueError: If the buffer size doesn't match the window size.
        """
        expected = self.width * self.height * 4
        if frame.size != expected:
            raise ValueError(f"Frame has {frame.size} bytes, expected {expected}")

        # Canvas origin is bottom-left like the frame buffer, so only the
        # (row, column) axes need swapping
        rgb = frame.reshape(self.height, self.width, 4)[:, :, :3].astype(np.float32) / 255.0
        self.display_image.from_numpy(np.ascontiguousarray(np.transpose(rgb, (1, 0, 2))))

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the current display image."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def run_animation(
        self,
        renderer: FrameRenderer,
        scene: SceneManager,
        orbit: PlanetOrbit,
        max_frames: int | None = None,
    ) -> None:
        """Render and display the animation until the window is closed.

        Each iteration renders the scene, shows the frame and, unless paused,
        advances the orbit by one tick.

        Args:
            renderer: Renderer with the same dimensions as the window.
            scene: The scene to animate.
            orbit: Orbit that moves the spheres between frames.
            max_frames: Stop after this many frames (None runs until closed).

        Raises:
            ValueError: If the renderer size differs from the window size.
        """
        if (renderer.width, renderer.height) != (self.width, self.height):
            raise ValueError(
                f"Renderer size {renderer.width}x{renderer.height} doesn't match "
                f"window size {self.width}x{self.height}"
            )

        self._initialize_window()
        self._renderer = renderer

        while self.is_running():
            if max_frames is not None and self._frames_shown >= max_frames:
                break

            frame = renderer.render(scene)
            self.update_frame(frame)
            self._draw_gui_panel()
            self.show_frame()
            self._frames_shown += 1

            if not self._paused:
                orbit.tick(scene)

    def _draw_gui_panel(self) -> None:
        with self.window.GUI.sub_window("Animation", 0.02, 0.02, 0.3, 0.16) as gui:
            gui.text(f"Frame: {self._frames_shown}")
            if gui.button("Resume" if self._paused else "Pause"):
                self._paused = not self._paused
            if gui.button("Export PNG"):
                self._export_png()

    def _export_png(self) -> None:
        """Export the current frame to a timestamped PNG file."""
        from spheretrace.preview.export import save_png

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"planets_{timestamp}.png"

        if self._renderer is not None:
            save_png(self._renderer, filename)
            print(f"Exported: {filename} (frame {self._frames_shown})")
        else:
            print("Error: No renderer available for export")

    def close(self) -> None:
        """Close the preview window.

        After calling this, the window cannot be reopened.
        """
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        # On macOS, display is always available if not in SSH
        if os.uname().sysname == "Darwin":
            ssh_connection = os.environ.get("SSH_CONNECTION")
            if ssh_connection and not display:
                return False
            return True

        return bool(display or wayland)
