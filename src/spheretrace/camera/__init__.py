"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole camera with a look-at target and horizontal fov

Pixel coordinates are integers: x = 0 is the left edge of the viewport and
y = 0 the bottom edge. The viewport basis is computed per frame on the
Python side and read by the render kernel.
"""

from .pinhole import (
    Camera,
    camera_from_dict,
    camera_to_dict,
    get_camera_info,
    get_ray,
    is_camera_initialized,
    reset_camera,
    setup_camera,
)

__all__ = [
    "Camera",
    "setup_camera",
    "get_ray",
    "get_camera_info",
    "is_camera_initialized",
    "reset_camera",
    "camera_from_dict",
    "camera_to_dict",
]
