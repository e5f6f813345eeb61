"""Scene module for scene storage and management.

Components:
    intersection: Sphere storage and nearest-hit scene queries
    lights: Point light storage
    manager: SceneManager coordinating camera, lights, spheres and materials
    planets: The default planets scene and its orbit animation

Scene data lives in Taichi fields (structure-of-arrays) so the render
kernels can read it directly. The SceneManager keeps a Python-side mirror
for serialization.
"""

from .intersection import (
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .lights import MAX_LIGHTS, add_light, clear_lights, get_light_count
from .manager import SceneConfig, SceneManager, SphereInfo
from .planets import PlanetOrbit, PlanetsParams, create_planets_scene

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Lights module
    "add_light",
    "clear_lights",
    "get_light_count",
    "MAX_LIGHTS",
    # Manager module
    "SceneManager",
    "SphereInfo",
    "SceneConfig",
    # Planets scene
    "PlanetsParams",
    "PlanetOrbit",
    "create_planets_scene",
]
