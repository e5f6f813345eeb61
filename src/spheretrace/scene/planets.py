"""The default "planets" scene: one large sphere orbited by two moons.

The scene is built with a SceneManager and animated by PlanetOrbit, which
advances two orbit phases per tick and moves the moons in the x/z plane:

    phase_1 += 0.1, phase_2 += 0.2
    moon_1.x = sin(phase_1) * 3.5    moon_1.z = -3 + cos(phase_1) * 3.5
    moon_2.x = sin(phase_2) * 4.0    moon_2.z = -3 + cos(phase_2) * 4.0

The moons keep their initial y coordinate.

Example:
    >>> scene, orbit = create_planets_scene()
    >>> orbit.tick(scene)
"""

import math
from dataclasses import dataclass

from spheretrace.camera.pinhole import Camera
from spheretrace.scene.manager import SceneManager


@dataclass
class PlanetsParams:
    """Parameters for the planets scene.

    Attributes:
        camera_position: Camera position.
        camera_target: Point the camera looks at.
        fov: Horizontal field of view in degrees.
        light_position: Position of the single point light.
        orbit_center: Center of both moon orbits in the x/z plane.
        orbit_radii: Orbit radius of each moon.
        orbit_speeds: Phase advance per tick of each moon.
    """

    camera_position: tuple[float, float, float] = (0.0, 1.8, 10.0)
    camera_target: tuple[float, float, float] = (0.0, 3.0, 0.0)
    fov: float = 45.0
    light_position: tuple[float, float, float] = (-30.0, -10.0, 20.0)
    orbit_center: tuple[float, float] = (0.0, -3.0)
    orbit_radii: tuple[float, float] = (3.5, 4.0)
    orbit_speeds: tuple[float, float] = (0.1, 0.2)


class PlanetOrbit:
    """Moves the moons of the planets scene along circular orbits.

    Attributes:
        sphere_indices: Scene indices of the orbiting spheres.
        phases: Current orbit phase of each sphere, in radians.
        radii: Orbit radius of each sphere.
        speeds: Phase advance per tick of each sphere.
        center: Orbit center (x, z).
    """

    def __init__(
        self,
        sphere_indices: list[int],
        radii: tuple[float, ...],
        speeds: tuple[float, ...],
        center: tuple[float, float] = (0.0, -3.0),
    ) -> None:
        if not (len(sphere_indices) == len(radii) == len(speeds)):
            raise ValueError("sphere_indices, radii and speeds must have the same length")
        self.sphere_indices = list(sphere_indices)
        self.radii = tuple(radii)
        self.speeds = tuple(speeds)
        self.center = center
        self.phases = [0.0] * len(self.sphere_indices)

    @property
    def tick_count(self) -> int:
        """Number of ticks applied so far (based on the first orbit)."""
        if not self.speeds or self.speeds[0] == 0.0:
            return 0
        return round(self.phases[0] / self.speeds[0])

    def positions(self, scene: SceneManager) -> list[tuple[float, float, float]]:
        """Orbit positions for the current phases, keeping each sphere's y."""
        result = []
        for i, sphere_index in enumerate(self.sphere_indices):
            y = scene.spheres[sphere_index].position[1]
            x = math.sin(self.phases[i]) * self.radii[i] + self.center[0]
            z = self.center[1] + math.cos(self.phases[i]) * self.radii[i]
            result.append((x, y, z))
        return result

    def tick(self, scene: SceneManager) -> None:
        """Advance every orbit by one step and move the spheres."""
        for i in range(len(self.phases)):
            self.phases[i] += self.speeds[i]
        for sphere_index, position in zip(self.sphere_indices, self.positions(scene)):
            scene.set_sphere_position(sphere_index, position)


def create_planets_scene(
    params: PlanetsParams | None = None,
    scene: SceneManager | None = None,
) -> tuple[SceneManager, PlanetOrbit]:
    """Create the planets scene.

    Args:
        params: Scene parameters. Uses defaults if None.
        scene: Existing scene to fill. It is cleared first. A new one is
            created if None.

    Returns:
        The populated scene and the orbit animating its two moons.
    """
    if params is None:
        params = PlanetsParams()
    if scene is None:
        scene = SceneManager()
    else:
        scene.clear()

    scene.set_camera(
        Camera(position=params.camera_position, target=params.camera_target, fov=params.fov)
    )
    scene.add_light(params.light_position)

    # Planet
    scene.add_sphere(
        (0.0, 3.5, -3.0), 3.0, color=(155.0, 200.0, 155.0),
        specular=0.2, lambert=0.7, ambient=0.1,
    )

    # Moons
    moon_1 = scene.add_sphere(
        (-4.0, 2.0, -1.0), 0.2, color=(155.0, 155.0, 155.0),
        specular=0.2, lambert=0.9, ambient=0.0,
    )
    moon_2 = scene.add_sphere(
        (-4.0, 3.0, -1.0), 0.1, color=(255.0, 255.0, 255.0),
        specular=0.2, lambert=0.7, ambient=0.1,
    )

    orbit = PlanetOrbit(
        [moon_1, moon_2], params.orbit_radii, params.orbit_speeds, params.orbit_center
    )
    return scene, orbit
