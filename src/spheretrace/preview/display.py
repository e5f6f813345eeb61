"""Matplotlib-based preview display for rendered frames.

This module converts RGBA8 frame buffers to float RGB images and shows them
with Matplotlib. Matplotlib is imported lazily so that headless rendering
never needs a display backend.

Example:
    >>> from spheretrace.preview.display import show_preview
    >>> from spheretrace.core.renderer import FrameRenderer
    >>> from spheretrace.scene.planets import create_planets_scene
    >>>
    >>> scene, orbit = create_planets_scene()
    >>> renderer = FrameRenderer(320, 240)
    >>> renderer.render(scene)
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from spheretrace.core.renderer import FrameRenderer


def frame_to_rgb_float(
    frame: npt.NDArray[np.uint8],
    width: int,
    height: int,
    flip_vertical: bool = True,
) -> npt.NDArray[np.float32]:
    """Convert a flat RGBA8 frame to a float RGB image in [0, 1].

    Args:
        frame: Flat uint8 buffer of width * height * 4 bytes.
        width: Image width in pixels.
        height: Image height in pixels.
        flip_vertical: Put the top of the viewport in row 0.

    Returns:
        Image array of shape (height, width, 3).

    Raises:
        ValueError: If the buffer size doesn't match the dimensions.
    """
    if frame.size != width * height * 4:
        raise ValueError(
            f"Frame has {frame.size} bytes, expected {width * height * 4} "
            f"for {width}x{height} RGBA"
        )
    image = frame.reshape(height, width, 4)[:, :, :3]
    if flip_vertical:
        image = image[::-1]
    return (image.astype(np.float32) / 255.0).copy()


def show_preview(
    renderer: FrameRenderer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display the last rendered frame as a Matplotlib figure.

    Args:
        renderer: The FrameRenderer instance to display.
        title: Custom title (default shows the frame count).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = frame_to_rgb_float(renderer.get_frame(), renderer.width, renderer.height)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title = f"Render Preview - frame {renderer.frame_count}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    frame_a: npt.NDArray[np.uint8],
    frame_b: npt.NDArray[np.uint8],
    width: int,
    height: int,
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 5),
    block: bool = True,
) -> float:
    """Display two frames side by side with an amplified difference view.

    Args:
        frame_a: First flat RGBA8 frame.
        frame_b: Second flat RGBA8 frame.
        width: Image width in pixels.
        height: Image height in pixels.
        labels: Labels for the two frames.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until figure is closed.

    Returns:
        RMSE between the two frames in [0, 1] display space.
    """
    import matplotlib.pyplot as plt

    display_a = frame_to_rgb_float(frame_a, width, height)
    display_b = frame_to_rgb_float(frame_b, width, height)

    diff = display_a.astype(np.float64) - display_b.astype(np.float64)
    rmse = float(np.sqrt(np.mean(diff**2)))
    diff_amplified = np.clip(np.abs(diff) * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(display_a)
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(display_b)
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff_amplified)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
