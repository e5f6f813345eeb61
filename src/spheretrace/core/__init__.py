"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector algebra
    tracer: Depth-bounded reflection tracing, Lambertian shading, shadow test
    renderer: Per-pixel frame loop writing into an RGBA8 buffer

All per-pixel work runs inside Taichi kernels. The frame loop is serialized,
so one render call walks the pixels in order and returns a complete frame.
"""

from .ray import (
    UP,
    ZERO,
    Ray,
    add,
    add3,
    cross,
    dot,
    length,
    make_ray,
    ray_at,
    reflect,
    scale,
    subtract,
    unit,
    vec3,
)

# Note: tracer and renderer are NOT imported here to avoid circular imports.
# Import directly from spheretrace.core.tracer or spheretrace.core.renderer.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "UP",
    "ZERO",
    "dot",
    "cross",
    "scale",
    "add",
    "add3",
    "subtract",
    "length",
    "unit",
    "reflect",
]
