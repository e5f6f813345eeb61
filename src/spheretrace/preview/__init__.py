"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PNG and animated GIF export via Pillow
    interactive: Taichi GGUI-based animation window

Frame buffers keep row 0 at the bottom of the viewport. Export and display
flip rows by default so the image reads top-down.

Example:
    >>> from spheretrace.preview import save_png, show_preview
    >>> renderer.render(scene)
    >>> show_preview(renderer)
    >>> save_png(renderer, "planets.png")
"""

from spheretrace.preview.display import frame_to_rgb_float, show_comparison, show_preview
from spheretrace.preview.export import (
    compute_rmse,
    frame_to_image,
    save_animation,
    save_png,
    save_png_from_frame,
)
from spheretrace.preview.interactive import InteractivePreview

__all__ = [
    # Interactive preview
    "InteractivePreview",
    # Display functions
    "show_preview",
    "show_comparison",
    "frame_to_rgb_float",
    # Export functions
    "frame_to_image",
    "save_png",
    "save_png_from_frame",
    "save_animation",
    "compute_rmse",
]
