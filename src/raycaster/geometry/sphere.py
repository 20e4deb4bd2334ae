"""Sphere primitive with closest-approach ray-sphere intersection.

The intersection test projects the centre onto the ray to find the distance of
closest approach ``tc``. If the closest point lies ahead of the ray origin and
inside the sphere, the near entry point is at

    t = tc - sqrt(radius^2 - perp^2)

where ``perp^2 = |centre - origin|^2 - tc^2`` is the squared distance from the
centre to the ray. Only the entry point is reported: rays starting inside the
sphere, or pointing away from it, are misses. The renderer assumes the camera
is outside every object.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.core.vector import Point3D, Vector3D
    >>> from raycaster.geometry.sphere import Sphere
    >>> sphere = Sphere(centre=(0.0, 0.0, 0.0), radius=1.0)
    >>> sphere.intersect(Point3D(0.0, 0.0, -5.0), Vector3D(0.0, 0.0, 1.0))
    4.0
"""

import math
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from raycaster.core.colour import DEFAULT_OBJECT_COLOUR, Colour
from raycaster.core.matrix import Matrix3D
from raycaster.core.ray import primary_ray
from raycaster.core.vector import Point3D, Vector3D

from .base import Object

if TYPE_CHECKING:
    from raycaster.camera.pixel_buffer import PixelBuffer
    from raycaster.camera.view_plane import Footprint, ViewPlane

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


# =============================================================================
# Taichi intersection (kernel-side)
# =============================================================================


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    centre: vec3,
    radius_squared: ti.f32,
) -> ti.f32:
    """Distance to the near intersection of a ray with a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        centre: The sphere centre.
        radius_squared: The squared sphere radius.

    Returns:
        The hit distance, or +inf on a miss.
    """
    t_hit = tm.inf

    src_to_centre = centre - ray_origin
    tc = tm.dot(src_to_centre, ray_direction)

    # Closest approach must be ahead of the ray
    if tc > 0.0:
        dist_sq = tm.dot(src_to_centre, src_to_centre) - tc * tc
        if dist_sq < radius_squared:
            t = tc - ti.sqrt(radius_squared - dist_sq)
            # Origin inside the sphere gives t <= 0
            if t > 0.0:
                t_hit = t

    return t_hit


@ti.kernel
def _intersect_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    centre: vec3,
    radius_squared: ti.f32,
) -> ti.f32:
    return hit_sphere(ray_origin, ray_direction, centre, radius_squared)


@ti.kernel
def _record_sphere_hits(
    object_ids: ti.template(),
    distances: ti.template(),
    handle: ti.i32,
    centre: vec3,
    radius_squared: ti.f32,
    x_start: ti.i32,
    x_end: ti.i32,
    y_start: ti.i32,
    y_end: ti.i32,
    pixel_width: ti.f32,
    pixel_height: ti.f32,
    half_width: ti.f32,
    half_height: ti.f32,
    distance: ti.f32,
):
    for i, j in ti.ndrange((x_start, x_end), (y_start, y_end)):
        ray = primary_ray(i, j, pixel_width, pixel_height, half_width, half_height, distance)
        t = hit_sphere(ray.origin, ray.direction, centre, radius_squared)
        if t < distances[i, j]:
            distances[i, j] = t
            object_ids[i, j] = handle


# =============================================================================
# Sphere object (host-side)
# =============================================================================


class Sphere(Object):
    """A sphere defined by its centre and radius.

    Only the squared radius is stored. Transformations move the centre and
    leave the radius alone, so only rigid transforms are supported.
    """

    def __init__(
        self,
        centre: Point3D | Iterable[float] = (0.0, 0.0, 0.0),
        radius: float = 1.0,
        colour: Colour | Iterable[int] = DEFAULT_OBJECT_COLOUR,
    ) -> None:
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        super().__init__(centre, colour)
        self._radius_squared = float(radius) * float(radius)

    @property
    def radius(self) -> float:
        return math.sqrt(self._radius_squared)

    @property
    def radius_squared(self) -> float:
        return self._radius_squared

    @property
    def max_radius(self) -> float:
        return self.radius

    def intersect(self, ray_src: Point3D, ray_dir: Vector3D) -> float | None:
        t = _intersect_sphere(
            ray_src.to_vec3(),
            ray_dir.to_vec3(),
            self._centre.to_vec3(),
            self._radius_squared,
        )
        if math.isinf(t):
            return None
        return float(t)

    def apply_transformation(self, matrix: Matrix3D) -> None:
        self._centre = matrix @ self._centre

    def record_hits(
        self,
        buffer: "PixelBuffer",
        handle: int,
        footprint: "Footprint",
        view_plane: "ViewPlane",
    ) -> None:
        _record_sphere_hits(
            buffer.object_ids,
            buffer.distances,
            handle,
            self._centre.to_vec3(),
            self._radius_squared,
            *footprint,
            *view_plane.ray_parameters(),
        )

    def spatial_state(self) -> tuple[npt.NDArray[np.float64], ...]:
        return (self._centre.to_numpy(),)

    def __repr__(self) -> str:
        return f"Sphere(centre={self._centre!r}, radius={self.radius!r}, colour={self.colour!r})"
