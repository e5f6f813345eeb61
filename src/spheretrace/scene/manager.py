"""Scene manager coordinating camera, lights, spheres and surface materials.

This module provides the host-facing scene API. The SceneManager writes
spheres, surface materials and lights into the Taichi fields read by the
render kernels and keeps a Python-side mirror of everything it added, which
is what the dict/config serialization works from.

The fields are shared by every SceneManager. A renderer uploads the scene it
draws at the start of each frame, and the editing methods re-upload first if
another manager wrote to the fields in between. Spheres may be moved
between frames with set_sphere_position(); the render kernels read the
fields as they are when a frame starts.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.camera.pinhole import Camera
    >>> from spheretrace.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.set_camera(Camera(position=(0, 1.8, 10), target=(0, 3, 0), fov=45))
    >>> scene.add_light((-30, -10, 20))
    >>> scene.add_sphere((0, 3.5, -3), 3.0, color=(155, 200, 155),
    ...                  specular=0.2, lambert=0.7, ambient=0.1)
"""

from dataclasses import dataclass, field
from typing import Any

import taichi.math as tm

from spheretrace.camera.pinhole import Camera, camera_from_dict, camera_to_dict
from spheretrace.materials.surface import add_surface_material, clear_surface_materials
from spheretrace.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    set_sphere_center,
)
from spheretrace.scene.lights import (
    MAX_LIGHTS,
    add_light,
    clear_lights,
    get_light_count,
    set_light_position,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        material_id: The surface material index of the sphere.
        position: The center of the sphere.
        radius: The radius of the sphere.
        color: Base color (R, G, B), 0-255 nominal.
        specular: Reflection weight.
        lambert: Diffuse weight.
        ambient: Ambient weight.
    """

    sphere_index: int
    material_id: int
    position: tuple[float, float, float]
    radius: float
    color: tuple[float, float, float]
    specular: float
    lambert: float
    ambient: float


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        camera: Camera configuration, or None if no camera is set.
        lights: List of light positions.
        spheres: List of sphere configurations.
    """

    camera: dict[str, Any] | None = None
    lights: list[list[float]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)


def _as_vec3_tuple(values: Any, name: str) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Scene container for the tracer.

    Holds the camera and registers lights, spheres and their surface
    materials with the GPU-side storage.

    Attributes:
        camera: The scene camera, or None until set_camera() is called.
        lights: Light positions in insertion order.
        spheres: SphereInfo for all spheres in the scene.

    Example:
        >>> scene = SceneManager()
        >>> scene.add_light((10.0, 0.0, 0.0))
        >>> idx = scene.add_sphere((0, 0, -3), 2.5, color=(200, 200, 200),
        ...                        specular=0.0, lambert=0.9, ambient=0.1)
        >>> scene.set_sphere_position(idx, (0.5, 0.0, -3.0))
    """

    # Manager whose contents are currently in the Taichi fields
    _uploaded: "SceneManager | None" = None

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.camera: Camera | None = None
        self.lights: list[tuple[float, float, float]] = []
        self.spheres: list[SphereInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_surface_materials()
        clear_lights()
        self.camera = None
        self.lights.clear()
        self.spheres.clear()
        SceneManager._uploaded = self

    def clear(self) -> None:
        """Clear the entire scene (camera, lights, spheres and materials)."""
        self._clear_all()

    def upload(self) -> None:
        """Write this scene's spheres, materials and lights into the Taichi fields.

        Replaces whatever the fields held before. Sphere and material indices
        are reassigned in insertion order, so they match the ones returned by
        add_sphere().
        """
        clear_scene()
        clear_surface_materials()
        clear_lights()

        for light in self.lights:
            add_light(light)

        for info in self.spheres:
            info.material_id = add_surface_material(
                info.color, info.specular, info.lambert, info.ambient
            )
            info.sphere_index = add_sphere(
                vec3(info.position[0], info.position[1], info.position[2]),
                info.radius,
                info.material_id,
            )

        SceneManager._uploaded = self

    def _ensure_uploaded(self) -> None:
        """Re-upload if the fields no longer hold this scene."""
        if (
            SceneManager._uploaded is not self
            or get_sphere_count() != len(self.spheres)
            or get_light_count() != len(self.lights)
        ):
            self.upload()

    # =========================================================================
    # Camera
    # =========================================================================

    def set_camera(self, camera: Camera) -> None:
        """Set the scene camera.

        The viewport basis is computed when a frame is rendered, since it
        depends on the image dimensions.
        """
        self.camera = camera

    # =========================================================================
    # Lights
    # =========================================================================

    def add_light(self, position: tuple[float, float, float]) -> int:
        """Add a white point light.

        Args:
            position: The light position as (x, y, z).

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
        """
        position = _as_vec3_tuple(position, "Light position")
        self._ensure_uploaded()
        idx = add_light(position)
        self.lights.append(position)
        return idx

    def set_light_position(self, index: int, position: tuple[float, float, float]) -> None:
        """Move an existing light.

        Raises:
            ValueError: If the index is invalid.
        """
        position = _as_vec3_tuple(position, "Light position")
        self._ensure_uploaded()
        set_light_position(index, position)
        self.lights[index] = position

    # =========================================================================
    # Spheres
    # =========================================================================

    def add_sphere(
        self,
        position: tuple[float, float, float],
        radius: float,
        color: tuple[float, float, float],
        specular: float = 0.0,
        lambert: float = 1.0,
        ambient: float = 0.0,
    ) -> int:
        """Add a sphere with its own surface material.

        Args:
            position: The center of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            color: Base color as (R, G, B), 0-255 nominal.
            specular: Reflection weight in [0, 1].
            lambert: Diffuse weight in [0, 1].
            ambient: Ambient weight in [0, 1].

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres or materials
                is exceeded.
            ValueError: If the radius, a coefficient or a color channel
                is invalid.
        """
        position = _as_vec3_tuple(position, "Sphere position")
        color = _as_vec3_tuple(color, "Sphere color")
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        if len(self.spheres) >= MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

        self._ensure_uploaded()
        material_id = add_surface_material(color, specular, lambert, ambient)
        sphere_index = add_sphere(
            vec3(position[0], position[1], position[2]), radius, material_id
        )

        info = SphereInfo(
            sphere_index=sphere_index,
            material_id=material_id,
            position=position,
            radius=float(radius),
            color=color,
            specular=float(specular),
            lambert=float(lambert),
            ambient=float(ambient),
        )
        self.spheres.append(info)

        return sphere_index

    def set_sphere_position(self, index: int, position: tuple[float, float, float]) -> None:
        """Move an existing sphere.

        Call between frames, never while a frame is rendering.

        Args:
            index: The sphere index returned by add_sphere().
            position: The new center as (x, y, z).

        Raises:
            ValueError: If the index is invalid.
        """
        position = _as_vec3_tuple(position, "Sphere position")
        self._ensure_uploaded()
        set_sphere_center(index, vec3(position[0], position[1], position[2]))
        self.spheres[index].position = position

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return len(self.spheres)

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return len(self.lights)

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing the camera, lights and spheres.
        """
        config = SceneConfig()

        if self.camera is not None:
            config.camera = camera_to_dict(self.camera)

        for light in self.lights:
            config.lights.append(list(light))

        for sphere in self.spheres:
            sphere_config = {
                "position": list(sphere.position),
                "radius": sphere.radius,
                "color": list(sphere.color),
                "specular": sphere.specular,
                "lambert": sphere.lambert,
                "ambient": sphere.ambient,
            }
            config.spheres.append(sphere_config)

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        if config.camera is not None:
            self.set_camera(camera_from_dict(config.camera))

        for light in config.lights:
            self.add_light(_as_vec3_tuple(light, "Light position"))

        for sphere_config in config.spheres:
            if "position" not in sphere_config or "radius" not in sphere_config:
                raise ValueError("Sphere config requires 'position' and 'radius'")
            self.add_sphere(
                position=_as_vec3_tuple(sphere_config["position"], "Sphere position"),
                radius=float(sphere_config["radius"]),
                color=_as_vec3_tuple(sphere_config.get("color", [255, 255, 255]), "Sphere color"),
                specular=float(sphere_config.get("specular", 0.0)),
                lambert=float(sphere_config.get("lambert", 1.0)),
                ambient=float(sphere_config.get("ambient", 0.0)),
            )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        config = self.to_config()
        return {
            "camera": config.camera,
            "lights": config.lights,
            "spheres": config.spheres,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'camera', 'lights', 'spheres' keys.

        Raises:
            ValueError: If the dictionary contains unknown keys or invalid data.
        """
        unknown = set(data) - {"camera", "lights", "spheres"}
        if unknown:
            raise ValueError(f"Unknown scene keys: {', '.join(sorted(unknown))}")
        config = SceneConfig(
            camera=data.get("camera"),
            lights=data.get("lights", []),
            spheres=data.get("spheres", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS
