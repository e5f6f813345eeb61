"""Surface material: base color plus ambient, Lambertian and specular weights.

Every sphere is shaded with the same simple model:

    color = specular * reflected
          + base_color * lambert_amount * lambert
          + base_color * ambient

where lambert_amount is the clamped sum of cosine terms over the visible
lights and reflected is the color traced along the mirror direction. The
three coefficients are independent weights in [0, 1]; they are not required
to sum to 1. Base colors use the 0-255 range per channel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.materials.surface import add_surface_material
    >>> idx = add_surface_material((155, 200, 155), specular=0.2, lambert=0.7, ambient=0.1)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class SurfaceMaterial:
    """Surface shading properties.

    Attributes:
        color: Base color (RGB, nominally 0-255 per channel).
        specular: Weight of the reflected color.
        lambert: Weight of the diffuse (cosine) term.
        ambient: Constant fraction of the base color.
    """

    color: vec3
    specular: ti.f32
    lambert: ti.f32
    ambient: ti.f32


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of surface materials in the scene
MAX_SURFACE_MATERIALS = 1024

surface_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SURFACE_MATERIALS)
surface_speculars = ti.field(dtype=ti.f32, shape=MAX_SURFACE_MATERIALS)
surface_lamberts = ti.field(dtype=ti.f32, shape=MAX_SURFACE_MATERIALS)
surface_ambients = ti.field(dtype=ti.f32, shape=MAX_SURFACE_MATERIALS)
num_surface_materials = ti.field(dtype=ti.i32, shape=())


def clear_surface_materials() -> None:
    """Clear all surface materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_surface_materials[None] = 0


def _validate_coefficient(name: str, value: float) -> None:
    if value < 0.0 or value > 1.0:
        raise ValueError(f"{name} coefficient {value} is outside [0, 1]")


def add_surface_material(
    color: tuple[float, float, float],
    specular: float,
    lambert: float,
    ambient: float,
) -> int:
    """Add a surface material to the registry.

    Args:
        color: Base color as (R, G, B), nominally 0-255 per channel.
            Values above 255 are allowed; negative values are not.
        specular: Reflection weight in [0, 1].
        lambert: Diffuse weight in [0, 1].
        ambient: Ambient weight in [0, 1].

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If a color channel is negative or a coefficient is
            outside [0, 1].
    """
    for i, component in enumerate(color):
        if component < 0.0:
            raise ValueError(f"Color component {i} = {component} is negative")
    _validate_coefficient("specular", specular)
    _validate_coefficient("lambert", lambert)
    _validate_coefficient("ambient", ambient)

    idx = num_surface_materials[None]
    if idx >= MAX_SURFACE_MATERIALS:
        raise RuntimeError(
            f"Maximum number of surface materials ({MAX_SURFACE_MATERIALS}) exceeded"
        )

    surface_colors[idx] = vec3(color[0], color[1], color[2])
    surface_speculars[idx] = specular
    surface_lamberts[idx] = lambert
    surface_ambients[idx] = ambient
    num_surface_materials[None] = idx + 1
    return idx


def get_surface_material_count() -> int:
    """Get the number of surface materials in the registry."""
    return int(num_surface_materials[None])


@ti.func
def get_surface_material(material_idx: ti.i32) -> SurfaceMaterial:
    """Look up a surface material by index.

    Args:
        material_idx: The index of the material in the registry.

    Returns:
        The SurfaceMaterial stored at that index.
    """
    return SurfaceMaterial(
        color=surface_colors[material_idx],
        specular=surface_speculars[material_idx],
        lambert=surface_lamberts[material_idx],
        ambient=surface_ambients[material_idx],
    )


@ti.func
def eval_local_color(material: SurfaceMaterial, lambert_amount: ti.f32) -> vec3:
    """Evaluate the non-reflective part of the surface color.

    Args:
        material: The surface material.
        lambert_amount: The clamped diffuse light amount in [0, 1].

    Returns:
        color * lambert_amount * lambert + color * ambient.
    """
    return (
        material.color * (lambert_amount * material.lambert)
        + material.color * material.ambient
    )
