"""Scene-level sphere storage and nearest-hit intersection.

Spheres are stored in Taichi fields (structure-of-arrays) so render kernels
can scan them directly. Each sphere carries the index of its surface
material.

intersect_scene performs a linear scan and keeps the hit with the strictly
smallest t, so on equal distances the sphere added first wins. The result is
a tagged SceneHitRecord: hit == 0 is a miss and its other fields are
meaningless; hit == 1 always carries a valid sphere index.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.scene.intersection import add_sphere, clear_scene, vec3
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, -5), 1.0, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from spheretrace.geometry.sphere import Sphere, hit_sphere

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Attributes:
        hit: 1 if any sphere reported an intersection, 0 for a miss.
        t: The ray parameter of the nearest intersection. Only valid if
            hit == 1. May be negative.
        sphere_index: Index of the nearest sphere. Only valid if hit == 1;
            -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    sphere_index: ti.i32


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres from the scene.

    Resets the sphere count to zero. The actual field data is not
    cleared but will be overwritten when new spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        material_id: The surface material index for this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
        ValueError: If the radius is not positive.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def set_sphere_center(index: int, center: vec3) -> None:
    """Move an existing sphere.

    Intended to be called between frames; a render in progress never sees
    a partial update because kernels run to completion.

    Args:
        index: The sphere index returned by add_sphere.
        center: The new center point.

    Raises:
        ValueError: If the index does not refer to a stored sphere.
    """
    if index < 0 or index >= num_spheres[None]:
        raise ValueError(f"Invalid sphere index: {index}")
    sphere_centers[index] = center


def get_sphere_center(index: int) -> tuple[float, float, float]:
    """Read back the center of a stored sphere (Python side)."""
    if index < 0 or index >= num_spheres[None]:
        raise ValueError(f"Invalid sphere index: {index}")
    c = sphere_centers[index]
    return (float(c[0]), float(c[1]), float(c[2]))


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(index: ti.i32) -> Sphere:
    """Build the Sphere geometry stored at index."""
    return Sphere(center=sphere_centers[index], radius=sphere_radii[index])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(hit=0, t=0.0, sphere_index=-1)


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest sphere along a ray.

    Tests every sphere and keeps the one with the smallest t. Negative t
    values compete like any other, so a sphere behind the origin can be the
    nearest hit.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        A SceneHitRecord for the nearest sphere, or a miss record.
    """
    result = _make_miss_record()

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        rec = hit_sphere(ray_origin, ray_direction, get_sphere(i))
        if rec.hit == 1:
            if result.hit == 0 or rec.t < result.t:
                result = SceneHitRecord(hit=1, t=rec.t, sphere_index=i)

    return result
