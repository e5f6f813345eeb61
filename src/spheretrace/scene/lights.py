"""Point light storage.

Lights are bare positions: white, unit weight, no falloff. The shading code
iterates over all of them for every diffuse hit.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Maximum number of point lights in the scene
MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all point lights."""
    num_lights[None] = 0


def add_light(position: tuple[float, float, float]) -> int:
    """Add a point light.

    Args:
        position: The light position as (x, y, z).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = vec3(position[0], position[1], position[2])
    num_lights[None] = idx + 1
    return idx


def set_light_position(index: int, position: tuple[float, float, float]) -> None:
    """Move an existing light.

    Raises:
        ValueError: If the index does not refer to a stored light.
    """
    if index < 0 or index >= num_lights[None]:
        raise ValueError(f"Invalid light index: {index}")
    light_positions[index] = vec3(position[0], position[1], position[2])


def get_light_count() -> int:
    """Get the number of point lights."""
    return int(num_lights[None])


@ti.func
def get_light_position(index: ti.i32) -> vec3:
    return light_positions[index]
