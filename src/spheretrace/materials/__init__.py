"""Materials module.

Components:
    surface: Base color with ambient, Lambertian and specular weights

Each sphere references one surface material. Materials are stored in
Taichi fields and looked up by index from the shading code.
"""

from .surface import (
    MAX_SURFACE_MATERIALS,
    SurfaceMaterial,
    add_surface_material,
    clear_surface_materials,
    eval_local_color,
    get_surface_material,
    get_surface_material_count,
)

__all__ = [
    "SurfaceMaterial",
    "add_surface_material",
    "clear_surface_materials",
    "get_surface_material",
    "get_surface_material_count",
    "eval_local_color",
    "MAX_SURFACE_MATERIALS",
]
