"""Ray data structure and vector algebra for the Whitted-style tracer.

This module provides the Ray dataclass and the small set of 3-component
vector operations the tracer is built from. All operations are Taichi
functions so they can be called from inside render kernels.

Colors travel through the tracer as vec3 values as well (r, g, b in x, y, z),
so the same helpers double as color arithmetic.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# World up direction used to build the camera basis
UP = vec3(0.0, 1.0, 0.0)

# Origin / black
ZERO = vec3(0.0, 0.0, 0.0)


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Camera rays are
            always normalized; the type itself does not enforce it.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Negative values lie behind the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return add(ray.origin, scale(ray.direction, t))


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Algebra
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the right-handed cross product a x b."""
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def scale(a: vec3, t: ti.f32) -> vec3:
    """Multiply every component of a by t."""
    return vec3(a.x * t, a.y * t, a.z * t)


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    """Componentwise a + b."""
    return vec3(a.x + b.x, a.y + b.y, a.z + b.z)


@ti.func
def add3(a: vec3, b: vec3, c: vec3) -> vec3:
    """Componentwise a + b + c."""
    return vec3(a.x + b.x + c.x, a.y + b.y + c.y, a.z + b.z + c.z)


@ti.func
def subtract(a: vec3, b: vec3) -> vec3:
    """Componentwise a - b."""
    return vec3(a.x - b.x, a.y - b.y, a.z - b.z)


@ti.func
def length(a: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(dot(a, a))


@ti.func
def unit(a: vec3) -> vec3:
    """Scale a vector to unit length.

    There is no guard for zero-length input: the result is non-finite and
    propagates until the frame writer replaces it.

    Args:
        a: The input vector.

    Returns:
        a / length(a).
    """
    return scale(a, 1.0 / length(a))


@ti.func
def reflect(a: vec3, normal: vec3) -> vec3:
    """Reflect a about normal using 2 (a . n) n - a.

    Args:
        a: The vector to reflect.
        normal: The mirror axis (should be unit length).

    Returns:
        The reflected vector. Length is preserved when normal is unit.
    """
    d = scale(normal, dot(a, normal))
    return subtract(scale(d, 2.0), a)
