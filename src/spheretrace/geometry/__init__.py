"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with ray-sphere intersection and surface normal

Spheres are the only primitive. Intersection routines are Taichi functions
(@ti.func) so they can be called per pixel from render kernels.

Ray-object intersection follows the pattern:
    record = hit_sphere(ray_origin, ray_direction, sphere)
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_sphere, sphere_normal

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
]
