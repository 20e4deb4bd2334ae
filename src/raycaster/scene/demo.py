"""Demo scene configuration.

This module provides a factory for a small test scene that exercises every
primitive the renderer supports:

- An infinite floor plane
- A bounded back wall (rectangle)
- Three spheres at different depths, one partly hidden behind another

The scene uses a right-handed world frame with +y up. The default camera sits
on the +z axis looking toward -z, which is the camera's unrotated orientation.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.camera import Camera
    >>> from raycaster.scene.demo import create_demo_scene
    >>>
    >>> objects, settings = create_demo_scene()
    >>> camera = Camera(settings.view_plane, rotation=settings.rotation)
    >>> camera.init(settings.position)
    >>> camera.update_pixel_buffer(objects)
    True
"""

from dataclasses import dataclass, field

from raycaster.camera.view_plane import ViewPlane
from raycaster.core.colour import Colour
from raycaster.geometry.base import Object
from raycaster.geometry.plane import Plane
from raycaster.geometry.sphere import Sphere

# =============================================================================
# Demo Scene Colours
# =============================================================================

FLOOR_COLOUR = Colour(90, 90, 110)
WALL_COLOUR = Colour(200, 200, 190)
RED_SPHERE_COLOUR = Colour(200, 40, 40)
GREEN_SPHERE_COLOUR = Colour(40, 180, 60)
BLUE_SPHERE_COLOUR = Colour(50, 70, 210)


@dataclass(frozen=True)
class DemoCameraSettings:
    """Camera placement for the demo scene.

    Attributes:
        position: Camera position in world space.
        rotation: Euler angles (radians) about the x, y and z axes.
        view_plane: View plane configuration.
    """

    position: tuple[float, float, float] = (0.0, 1.0, 12.0)
    rotation: tuple[float, float, float] = (0.0, 0.0, 0.0)
    view_plane: ViewPlane = field(default_factory=ViewPlane)


def create_demo_scene(
    view_plane: ViewPlane | None = None,
) -> tuple[list[Object], DemoCameraSettings]:
    """Create the demo scene and a camera placement that frames it.

    Args:
        view_plane: Optional view plane override (e.g. a different resolution).

    Returns:
        A tuple of (objects, camera settings). The objects list is in the
        order the renderer should test them.
    """
    objects: list[Object] = [
        # Floor: infinite plane at y = -1
        Plane(centre=(0.0, -1.0, 0.0), normal=(0.0, 1.0, 0.0), colour=FLOOR_COLOUR),
        # Back wall: 16 x 8 rectangle facing the camera
        Plane(
            centre=(0.0, 3.0, -8.0),
            normal=(0.0, 0.0, 1.0),
            up=(0.0, 1.0, 0.0),
            width=16.0,
            height=8.0,
            colour=WALL_COLOUR,
        ),
        Sphere(centre=(0.0, 0.5, 0.0), radius=1.5, colour=RED_SPHERE_COLOUR),
        Sphere(centre=(-3.0, 0.0, 2.0), radius=1.0, colour=GREEN_SPHERE_COLOUR),
        # Partly hidden behind the red sphere
        Sphere(centre=(1.5, 1.0, -3.0), radius=1.25, colour=BLUE_SPHERE_COLOUR),
    ]

    settings = (
        DemoCameraSettings()
        if view_plane is None
        else DemoCameraSettings(view_plane=view_plane)
    )
    return objects, settings
