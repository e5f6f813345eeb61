"""Sphere primitive with the geometric ray-sphere intersection.

The intersection projects the vector from the ray origin to the sphere
center onto the ray direction and compares the squared perpendicular
distance against the squared radius:

    eye_to_center = center - origin
    v = eye_to_center . direction
    discriminant = radius^2 - |eye_to_center|^2 + v^2

A negative discriminant is a miss. Otherwise the nearer root
t = v - sqrt(discriminant) is reported as-is. There is no t >= 0 test, so
a sphere behind the ray origin still reports a (negative) hit; the tracer
and the shadow test both depend on that sign.

The formula assumes a unit-length ray direction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.geometry.sphere import Sphere, HitRecord, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -5), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import dot, subtract, unit

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Result of a single ray-sphere test.

    Attributes:
        hit: 1 if the ray line meets the sphere, 0 otherwise.
        t: The nearer ray parameter of the intersection. Only valid if
            hit == 1. May be negative.
    """

    hit: ti.i32
    t: ti.f32


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test against.

    Returns:
        A HitRecord. When hit == 1, t is v - sqrt(discriminant), which may
        be negative for spheres behind (or around) the origin.
    """
    eye_to_center = subtract(sphere.center, ray_origin)
    v = dot(eye_to_center, ray_direction)
    eo_dot = dot(eye_to_center, eye_to_center)
    discriminant = sphere.radius * sphere.radius - eo_dot + v * v

    did_hit = 0
    hit_t = 0.0
    if discriminant >= 0.0:
        did_hit = 1
        hit_t = v - ti.sqrt(discriminant)

    return HitRecord(hit=did_hit, t=hit_t)


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of the sphere at a surface point."""
    return unit(subtract(point, sphere.center))


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
