"""Pinhole camera model for primary ray generation.

The camera is a position, a look-at target and a field of view in degrees.
Before each frame the viewport basis and per-pixel steps are computed on the
Python side and stored in Taichi fields:

    eye    = unit(target - position)
    right  = unit(eye x UP)
    up     = unit(right x eye)
    half_width  = tan(pi * (fov / 2) / 180)
    half_height = (height / width) * half_width
    pixel_width  = 2 * half_width  / (width - 1)
    pixel_height = 2 * half_height / (height - 1)

The primary ray for integer pixel (x, y) starts at the camera position and
points along

    unit(eye + right * (x * pixel_width - half_width)
             + up * (y * pixel_height - half_height))

so x = 0 is the left edge and y = 0 the bottom edge of the viewport. The fov
spans the horizontal direction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.camera.pinhole import Camera, setup_camera, get_ray
    >>>
    >>> camera = Camera(position=(0.0, 1.8, 10.0), target=(0.0, 3.0, 0.0), fov=45.0)
    >>> setup_camera(camera, 320, 240)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(160, 120)
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from spheretrace.core.ray import UP, Ray, add3, make_ray, scale, unit

# Basis vectors shorter than this are treated as degenerate
DEGENERATE_EPSILON = 1e-8

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Configuration for a pinhole camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        target: Point the camera looks toward (x, y, z). This is a point,
            not a direction; the view direction is unit(target - position).
        fov: Field of view in degrees.
    """

    position: tuple[float, float, float]
    target: tuple[float, float, float]
    fov: float


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal viewport basis
_camera_eye = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())

# Viewport extents and per-pixel steps
_half_width = ti.field(dtype=ti.f32, shape=())
_half_height = ti.field(dtype=ti.f32, shape=())
_pixel_width = ti.field(dtype=ti.f32, shape=())
_pixel_height = ti.field(dtype=ti.f32, shape=())

_camera_initialized = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per frame)
# =============================================================================


def setup_camera(camera: Camera, width: int, height: int) -> None:
    """Compute the viewport basis and pixel steps for a frame.

    Args:
        camera: Camera position, look-at target and fov.
        width: Image width in pixels (must be > 1).
        height: Image height in pixels (must be > 1).

    Raises:
        ValueError: If the image is narrower or shorter than 2 pixels, if
            target equals position, or if the view direction is parallel to
            the world up vector. Either camera case would leave the basis
            without a defined right vector.
    """
    if width < 2 or height < 2:
        raise ValueError(f"Image must be at least 2x2 pixels, got {width}x{height}")

    position = np.array(camera.position, dtype=np.float64)
    target = np.array(camera.target, dtype=np.float64)
    up_axis = np.array([UP[0], UP[1], UP[2]], dtype=np.float64)

    view = target - position
    view_length = np.linalg.norm(view)
    if view_length < DEGENERATE_EPSILON:
        raise ValueError("Camera target must differ from camera position")
    eye = view / view_length

    right = np.cross(eye, up_axis)
    right_length = np.linalg.norm(right)
    if right_length < DEGENERATE_EPSILON:
        raise ValueError("Camera view direction is parallel to the up vector")
    right = right / right_length

    up = np.cross(right, eye)
    up = up / np.linalg.norm(up)

    fov_radians = math.pi * (camera.fov / 2.0) / 180.0
    half_width = math.tan(fov_radians)
    half_height = (height / width) * half_width

    _camera_position[None] = position.tolist()
    _camera_eye[None] = eye.tolist()
    _camera_right[None] = right.tolist()
    _camera_up[None] = up.tolist()

    _half_width[None] = half_width
    _half_height[None] = half_height
    _pixel_width[None] = (half_width * 2.0) / (width - 1)
    _pixel_height[None] = (half_height * 2.0) / (height - 1)

    _camera_initialized[None] = 1


def is_camera_initialized() -> bool:
    """Check whether setup_camera has been called."""
    return bool(_camera_initialized[None])


def reset_camera() -> None:
    """Mark the camera as not configured."""
    _camera_initialized[None] = 0


# =============================================================================
# Ray Generation (Taichi-side)
# =============================================================================


@ti.func
def get_ray(x: ti.i32, y: ti.i32) -> Ray:
    """Generate the primary ray through integer pixel (x, y).

    Args:
        x: Pixel column, 0 = left.
        y: Pixel row, 0 = bottom of the viewport.

    Returns:
        A Ray from the camera position with a unit direction.
    """
    x_comp = scale(_camera_right[None], ti.cast(x, ti.f32) * _pixel_width[None] - _half_width[None])
    y_comp = scale(_camera_up[None], ti.cast(y, ti.f32) * _pixel_height[None] - _half_height[None])
    direction = unit(add3(_camera_eye[None], x_comp, y_comp))
    return make_ray(_camera_position[None], direction)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float] | float]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with position, eye, right, up (vectors) and half_width,
        half_height, pixel_width, pixel_height (floats).
    """

    def _vec(field: ti.MatrixField) -> tuple[float, float, float]:
        v = field[None]
        return (float(v[0]), float(v[1]), float(v[2]))

    return {
        "position": _vec(_camera_position),
        "eye": _vec(_camera_eye),
        "right": _vec(_camera_right),
        "up": _vec(_camera_up),
        "half_width": float(_half_width[None]),
        "half_height": float(_half_height[None]),
        "pixel_width": float(_pixel_width[None]),
        "pixel_height": float(_pixel_height[None]),
    }


def camera_from_dict(data: dict) -> Camera:
    """Build a Camera from a plain dictionary.

    Raises:
        ValueError: If a required key is missing.
    """
    missing = [key for key in ("position", "target", "fov") if key not in data]
    if missing:
        raise ValueError(f"Camera config is missing keys: {', '.join(missing)}")
    position = data["position"]
    target = data["target"]
    return Camera(
        position=(float(position[0]), float(position[1]), float(position[2])),
        target=(float(target[0]), float(target[1]), float(target[2])),
        fov=float(data["fov"]),
    )


def camera_to_dict(camera: Camera) -> dict:
    """Export a Camera to a plain dictionary."""
    return {
        "position": list(camera.position),
        "target": list(camera.target),
        "fov": camera.fov,
    }
