"""Image export utilities for rendered frames.

Frames come out of the renderer as flat RGBA8 buffers whose row 0 is the
bottom of the viewport. The functions here reshape them into Pillow images,
flipping rows by default so the top of the viewport lands at the top of the
file.

Supported formats:
    - PNG (8-bit RGBA via Pillow)
    - Animated GIF (via Pillow)

Example:
    >>> from spheretrace.preview.export import save_png
    >>> from spheretrace.core.renderer import FrameRenderer
    >>> from spheretrace.scene.planets import create_planets_scene
    >>>
    >>> scene, orbit = create_planets_scene()
    >>> renderer = FrameRenderer(320, 240)
    >>> renderer.render(scene)
    >>> save_png(renderer, "planets.png")
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from spheretrace.core.renderer import FrameRenderer


def frame_to_image(
    frame: npt.NDArray[np.uint8],
    width: int,
    height: int,
    flip_vertical: bool = True,
) -> PILImage.Image:
    """Convert a flat RGBA8 frame to a Pillow image.

    Args:
        frame: Flat uint8 buffer of width * height * 4 bytes.
        width: Image width in pixels.
        height: Image height in pixels.
        flip_vertical: Put the top of the viewport at the top of the image.

    Returns:
        An RGBA Pillow image.

    Raises:
        ValueError: If the buffer size doesn't match the dimensions.
    """
    if frame.size != width * height * 4:
        raise ValueError(
            f"Frame has {frame.size} bytes, expected {width * height * 4} "
            f"for {width}x{height} RGBA"
        )
    pixels = np.asarray(frame, dtype=np.uint8).reshape(height, width, 4)
    if flip_vertical:
        pixels = pixels[::-1]
    return PILImage.fromarray(np.ascontiguousarray(pixels), mode="RGBA")


def save_png_from_frame(
    frame: npt.NDArray[np.uint8],
    width: int,
    height: int,
    filepath: str,
    *,
    flip_vertical: bool = True,
) -> None:
    """Save a flat RGBA8 frame as a PNG file.

    Args:
        frame: Flat uint8 buffer of width * height * 4 bytes.
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output file path (should end in .png).
        flip_vertical: Put the top of the viewport at the top of the image.
    """
    frame_to_image(frame, width, height, flip_vertical=flip_vertical).save(filepath)


def save_png(
    renderer: FrameRenderer,
    filepath: str,
    *,
    flip_vertical: bool = True,
) -> None:
    """Save the renderer's last frame as a PNG file."""
    save_png_from_frame(
        renderer.get_frame(),
        renderer.width,
        renderer.height,
        filepath,
        flip_vertical=flip_vertical,
    )


def save_animation(
    frames: Sequence[npt.NDArray[np.uint8]],
    width: int,
    height: int,
    filepath: str,
    *,
    duration_ms: int = 40,
    loop: int = 0,
    flip_vertical: bool = True,
) -> None:
    """Save a sequence of frames as an animated GIF.

    Args:
        frames: Flat RGBA8 frames, all of the same dimensions.
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output file path (should end in .gif).
        duration_ms: Display time of each frame in milliseconds.
        loop: Number of loops (0 loops forever).
        flip_vertical: Put the top of the viewport at the top of the image.

    Raises:
        ValueError: If no frames are given or a frame has the wrong size.
    """
    if len(frames) == 0:
        raise ValueError("Cannot save an animation without frames")

    images = [
        frame_to_image(frame, width, height, flip_vertical=flip_vertical).convert("RGB")
        for frame in frames
    ]
    images[0].save(
        filepath,
        save_all=True,
        append_images=images[1:],
        duration=duration_ms,
        loop=loop,
    )


def compute_rmse(
    frame_a: npt.NDArray[np.uint8],
    frame_b: npt.NDArray[np.uint8],
) -> float:
    """Compute root mean squared error between two frames.

    Args:
        frame_a: First frame buffer.
        frame_b: Second frame buffer (must have same shape as frame_a).

    Returns:
        RMSE value in byte units (lower is more similar).

    Raises:
        ValueError: If frame shapes don't match.
    """
    if frame_a.shape != frame_b.shape:
        raise ValueError(f"Frame shapes must match: {frame_a.shape} vs {frame_b.shape}")

    diff = frame_a.astype(np.float64) - frame_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
