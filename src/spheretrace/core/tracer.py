"""Whitted-style tracer: nearest hit, Lambertian shading, mirror reflection.

For a ray the tracer finds the nearest sphere, shades the hit point with an
ambient term and a shadow-tested Lambertian term, and follows the mirror
direction for the specular term:

    trace(ray, depth) =
        black                                  if depth > MAX_DEPTH
        white                                  if nothing is hit
        specular * trace(reflected, depth + 1)
          + color * lambert_amount * lambert
          + color * ambient                    otherwise

Taichi functions cannot recurse, and each hit spawns at most one reflected
ray, so trace() walks the reflection chain in a loop. It carries the color
accumulated so far and the product of the specular weights along the chain.
A primary ray therefore visits at most MAX_DEPTH + 1 = 4 surfaces.

Shadow test:
    The shadow ray starts at the hit point and points away from the light,
    along unit(point - light). The point counts as lit when nothing is hit
    or the nearest t exceeds SHADOW_BIAS (-0.005). Occluders between the
    point and the light sit at negative t and fail that test; the surface
    itself reports t close to zero and passes. The test is not bounded by
    the distance to the light, so a sphere beyond the light on the same
    line also casts a shadow.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.core.tracer import trace_ray
    >>> trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))  # empty scene
    (255.0, 255.0, 255.0)
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import add, dot, reflect, scale, subtract, unit
from spheretrace.geometry.sphere import sphere_normal
from spheretrace.materials.surface import eval_local_color, get_surface_material
from spheretrace.scene.intersection import get_sphere, intersect_scene, sphere_material_ids
from spheretrace.scene.lights import get_light_position, num_lights

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Tracing Constants
# =============================================================================

# Deepest reflection level that is still shaded (levels 0..MAX_DEPTH)
MAX_DEPTH = 3

# Shadow rays count as unblocked when the nearest t exceeds this
SHADOW_BIAS = -0.005

# Color returned for rays that leave the scene
BACKGROUND_COLOR = vec3(255.0, 255.0, 255.0)

# Color returned once the reflection depth limit is exceeded
DEPTH_LIMIT_COLOR = vec3(0.0, 0.0, 0.0)


# =============================================================================
# Shading
# =============================================================================


@ti.func
def is_light_visible(point: vec3, light: vec3) -> ti.i32:
    """Test whether a point receives light from a point light.

    Args:
        point: The surface point.
        light: The light position.

    Returns:
        1 if the point is lit, 0 if it is in shadow.
    """
    direction = unit(subtract(point, light))
    rec = intersect_scene(point, direction)
    visible = 0
    if rec.hit == 0 or rec.t > SHADOW_BIAS:
        visible = 1
    return visible


@ti.func
def lambert_amount(point: vec3, normal: vec3) -> ti.f32:
    """Sum the cosine terms of all visible lights, clamped to at most 1.

    Each light contributes max(0, unit(light - point) . normal).
    """
    amount = 0.0
    for i in range(num_lights[None]):
        light = get_light_position(i)
        if is_light_visible(point, light) == 1:
            contribution = dot(unit(subtract(light, point)), normal)
            if contribution > 0.0:
                amount += contribution
    return tm.min(1.0, amount)


@ti.func
def surface(material_id: ti.i32, point: vec3, normal: vec3) -> vec3:
    """Local (non-reflective) color of a surface point.

    The Lambertian term is only evaluated when the material's lambert
    weight is non-zero; the specular term is handled by trace().

    Args:
        material_id: Surface material index of the hit sphere.
        point: The hit point.
        normal: The outward unit normal at the hit point.

    Returns:
        color * lambert_amount * lambert + color * ambient.
    """
    material = get_surface_material(material_id)
    amount = 0.0
    if material.lambert != 0.0:
        amount = lambert_amount(point, normal)
    return eval_local_color(material, amount)


# =============================================================================
# Tracing Core
# =============================================================================


@ti.func
def trace(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    """Trace a ray through the scene, following mirror reflections.

    Args:
        origin: Ray origin.
        direction: Unit ray direction.
        depth: Reflection depth of this ray (0 for primary rays).

    Returns:
        The ray color (RGB, 0-255 nominal, not clamped).
    """
    color = vec3(0.0, 0.0, 0.0)
    ray_origin = origin
    ray_direction = direction
    ray_depth = depth

    # Product of specular weights along the reflection chain
    weight = 1.0

    # Active flag for chain continuation (no break inside ti.func loops)
    active = 1

    for _ in range(MAX_DEPTH + 2):
        if active == 1:
            if ray_depth > MAX_DEPTH:
                color += weight * DEPTH_LIMIT_COLOR
                active = 0
            else:
                rec = intersect_scene(ray_origin, ray_direction)
                if rec.hit == 0:
                    color += weight * BACKGROUND_COLOR
                    active = 0
                else:
                    sphere = get_sphere(rec.sphere_index)
                    material_id = sphere_material_ids[rec.sphere_index]
                    point = add(ray_origin, scale(ray_direction, rec.t))
                    normal = sphere_normal(sphere, point)

                    color += weight * surface(material_id, point, normal)

                    specular = get_surface_material(material_id).specular
                    if specular == 0.0:
                        active = 0
                    else:
                        weight *= specular
                        ray_origin = point
                        ray_direction = reflect(ray_direction, normal)
                        ray_depth += 1

    return color


# =============================================================================
# Python-callable Entry Points
# =============================================================================


@ti.kernel
def _trace_single_ray(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    depth: ti.i32,
) -> vec3:
    return trace(vec3(ox, oy, oz), vec3(dx, dy, dz), depth)


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> tuple[float, float, float]:
    """Trace one ray from Python against the current scene.

    Useful for tests and for probing a scene without rendering a frame.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction (x, y, z); expected to be unit length.
        depth: Starting reflection depth.

    Returns:
        Tuple of (R, G, B) color values.
    """
    color = _trace_single_ray(
        origin[0], origin[1], origin[2], direction[0], direction[1], direction[2], depth
    )
    return (float(color[0]), float(color[1]), float(color[2]))
