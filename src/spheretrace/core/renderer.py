"""Frame renderer: one primary ray per pixel into an RGBA8 buffer.

The render kernel walks every pixel (outer loop over x, inner over y),
traces the primary ray and writes the color at byte offset

    index = x * 4 + y * width * 4

with alpha fixed at 255. The loop is serialized, and the Python entry point
synchronizes before handing the finished buffer back, so callers only ever
see complete frames.

Channel write policy:
    Colors are unclamped inside the tracer. Each channel is written as
    round(clamp(c, 0, 255)); NaN and infinite channels (from zero-length
    normalization) are written as 0.

Row order:
    Row y = 0 of the buffer is the bottom row of the viewport. Image export
    in spheretrace.preview flips rows for top-left-origin image formats.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.core.renderer import FrameRenderer
    >>> from spheretrace.scene.planets import create_planets_scene
    >>>
    >>> scene, orbit = create_planets_scene()
    >>> renderer = FrameRenderer(320, 240)
    >>> frame = renderer.render(scene)  # uint8 array of 320 * 240 * 4 bytes
"""

from collections.abc import Callable, Generator
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from spheretrace.camera.pinhole import get_ray, is_camera_initialized, setup_camera
from spheretrace.core.tracer import trace

if TYPE_CHECKING:
    from spheretrace.scene.manager import SceneManager
    from spheretrace.scene.planets import PlanetOrbit

# Type alias for 3D vectors
vec3 = tm.vec3

# Bytes per pixel in the output buffer (R, G, B, A)
CHANNELS = 4

# Alpha written for every pixel
OPAQUE_ALPHA = 255

# =============================================================================
# Render Target (Frame Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Flat RGBA8 buffer (preallocated to max size)
_frame_buffer = ti.field(dtype=ti.u8, shape=MAX_IMAGE_WIDTH * MAX_IMAGE_HEIGHT * CHANNELS)

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the frame buffer for the given dimensions.

    Args:
        width: Image width in pixels (2 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (2 to MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is below 2 or exceeds the maximum.
    """
    if width < 2 or height < 2:
        raise ValueError(f"Image must be at least 2x2 pixels, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the frame buffer to zero."""
    _frame_buffer.fill(0)


def reset_render_target() -> None:
    """Mark the render target as not set up."""
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Rendering Kernel
# =============================================================================


@ti.func
def to_channel(value: ti.f32) -> ti.u8:
    """Convert an unclamped color channel to a byte."""
    result = 0.0
    if not (tm.isnan(value) or tm.isinf(value)):
        result = tm.clamp(value, 0.0, 255.0)
    return ti.cast(ti.floor(result + 0.5), ti.u8)


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32):
    """Trace one primary ray per pixel and write RGBA8 bytes."""
    ti.loop_config(serialize=True)
    for x in range(width):
        for y in range(height):
            ray = get_ray(x, y)
            color = trace(ray.origin, ray.direction, 0)
            index = x * CHANNELS + y * width * CHANNELS
            for c in ti.static(range(3)):
                _frame_buffer[index + c] = to_channel(color[c])
            _frame_buffer[index + 3] = ti.cast(OPAQUE_ALPHA, ti.u8)


def render_frame() -> npt.NDArray[np.uint8]:
    """Render the current scene with the current camera.

    Returns:
        The RGBA8 buffer as a flat uint8 array of width * height * 4 bytes.

    Raises:
        RuntimeError: If the render target or the camera is not set up.
    """
    _check_render_target_initialized()
    if not is_camera_initialized():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")

    width, height = get_image_dimensions()
    _render_frame(width, height)
    ti.sync()
    return get_frame()


def get_frame() -> npt.NDArray[np.uint8]:
    """Copy the active part of the frame buffer to NumPy.

    Returns:
        Flat uint8 array of width * height * 4 bytes.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    return _frame_buffer.to_numpy()[: width * height * CHANNELS].copy()


# =============================================================================
# Frame Renderer
# =============================================================================

# Callback receives (frame_index, frame_buffer)
FrameCallback = Callable[[int, npt.NDArray[np.uint8]], None]


class FrameRenderer:
    """Renders complete frames of a scene into an RGBA8 buffer.

    The renderer owns the render target dimensions; scene data is passed to
    render() for the duration of one call and is not retained.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (2 to 2048).
            height: Image height in pixels (2 to 2048).

        Raises:
            ValueError: If dimensions are out of range.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height
        self._frame_count = 0

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def frame_count(self) -> int:
        """Number of frames rendered since creation or the last resize."""
        return self._frame_count

    def resize(self, width: int, height: int) -> None:
        """Resize the render target.

        Raises:
            ValueError: If dimensions are out of range.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height
        self._frame_count = 0

    def render(self, scene: "SceneManager") -> npt.NDArray[np.uint8]:
        """Render one frame of the scene.

        Args:
            scene: The scene to render. Its spheres, materials and lights
                are uploaded to the Taichi fields and its camera is set up
                for this renderer's dimensions before tracing.

        Returns:
            Flat uint8 RGBA buffer of width * height * 4 bytes.

        Raises:
            RuntimeError: If the scene has no camera.
            ValueError: If the scene's camera is degenerate.
        """
        if scene.camera is None:
            raise RuntimeError("Scene has no camera. Call SceneManager.set_camera() first.")

        # Fields are shared by all scenes; draw exactly the one passed in
        scene.upload()

        # Re-activate this renderer's size in case another renderer changed it
        if get_image_dimensions() != (self._width, self._height):
            setup_render_target(self._width, self._height)

        setup_camera(scene.camera, self._width, self._height)
        frame = render_frame()
        self._frame_count += 1
        return frame

    def render_animation(
        self,
        scene: "SceneManager",
        orbit: "PlanetOrbit",
        num_frames: int,
        callback: "FrameCallback | None" = None,
    ) -> Generator[npt.NDArray[np.uint8], None, None]:
        """Render consecutive animation frames.

        Each frame is rendered from the current scene state, then the orbit
        is advanced by one tick, so the first frame shows the initial
        positions.

        Args:
            scene: The scene to render.
            orbit: Animation that moves spheres between frames.
            num_frames: Number of frames to render.
            callback: Optional callback receiving (frame_index, frame).

        Yields:
            Each rendered frame buffer.
        """
        for i in range(num_frames):
            frame = self.render(scene)
            if callback is not None:
                callback(i, frame)
            yield frame
            orbit.tick(scene)

    def get_frame(self) -> npt.NDArray[np.uint8]:
        """Get the last rendered frame as a flat RGBA buffer."""
        return get_frame()

    def get_frame_image(self) -> npt.NDArray[np.uint8]:
        """Get the last rendered frame as an array of shape (height, width, 4).

        Row 0 is the bottom of the viewport (buffer order).
        """
        return self.get_frame().reshape(self._height, self._width, CHANNELS)

    def save_image(self, filepath: str, flip_vertical: bool = True) -> None:
        """Save the last rendered frame to an image file.

        Args:
            filepath: Path to save the image (e.g., "output.png").
            flip_vertical: Put the top of the viewport at the top of the
                image. Default True.
        """
        from spheretrace.preview.export import save_png_from_frame

        save_png_from_frame(
            self.get_frame(), self._width, self._height, filepath, flip_vertical=flip_vertical
        )

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"FrameRenderer(width={self.width}, height={self.height}, "
            f"frames={self.frame_count})"
        )
