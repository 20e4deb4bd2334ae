"""Plane primitive, optionally bounded to a rectangle.

A plane is defined by a centre point and a unit normal. When both a width and
a height are given it is bounded to the rectangle spanned by its width and
height directions around the centre; otherwise it extends infinitely.

Ray-plane intersection uses the classic parametric solve:

    t = dot(centre - origin, normal) / dot(direction, normal)

Rays parallel to the plane (denominator near zero) and hits behind the ray
origin (t <= 0) are misses. For bounded planes the hit point's offsets along
the width/height directions must lie strictly inside (-half, +half); points
exactly on an edge are outside.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.core.vector import Point3D, Vector3D
    >>> from raycaster.geometry.plane import Plane
    >>> floor = Plane(centre=(0.0, -1.0, 0.0), normal=(0.0, 1.0, 0.0))
    >>> floor.intersect(Point3D(0.0, 0.0, 0.0), Vector3D(0.0, -1.0, 0.0))
    1.0
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
from raycaster.core.vector import Point3D, Vector3D, as_vector

from .base import Object

if TYPE_CHECKING:
    from raycaster.camera.pixel_buffer import PixelBuffer
    from raycaster.camera.view_plane import Footprint, ViewPlane

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# |dot(direction, normal)| at or below which a ray counts as parallel
PARALLEL_EPSILON = 1e-8


# =============================================================================
# Taichi intersection (kernel-side)
# =============================================================================


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    centre: vec3,
    normal: vec3,
    width_direction: vec3,
    height_direction: vec3,
    half_width: ti.f32,
    half_height: ti.f32,
    bounded: ti.i32,
) -> ti.f32:
    """Distance to the intersection of a ray with a (possibly bounded) plane.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        centre: A point on the plane; bounds are measured from it.
        normal: Unit normal of the plane.
        width_direction: Unit vector along the plane's width.
        height_direction: Unit vector along the plane's height.
        half_width: Half the width of a bounded plane.
        half_height: Half the height of a bounded plane.
        bounded: 1 if the bounds apply, 0 for an infinite plane.

    Returns:
        The hit distance, or +inf on a miss.
    """
    t_hit = tm.inf

    denom = tm.dot(ray_direction, normal)

    # Ray not parallel to plane
    if ti.abs(denom) > PARALLEL_EPSILON:
        t = tm.dot(centre - ray_origin, normal) / denom

        # Reject intersections behind the ray origin
        if t > 0.0:
            inside = 1
            if bounded != 0:
                offset = ray_origin + t * ray_direction - centre
                u = tm.dot(offset, width_direction)
                v = tm.dot(offset, height_direction)
                inside = 0
                if u > -half_width and u < half_width and v > -half_height and v < half_height:
                    inside = 1
            if inside != 0:
                t_hit = t

    return t_hit


@ti.kernel
def _intersect_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    centre: vec3,
    normal: vec3,
    width_direction: vec3,
    height_direction: vec3,
    half_width: ti.f32,
    half_height: ti.f32,
    bounded: ti.i32,
) -> ti.f32:
    return hit_plane(
        ray_origin,
        ray_direction,
        centre,
        normal,
        width_direction,
        height_direction,
        half_width,
        half_height,
        bounded,
    )


@ti.kernel
def _record_plane_hits(
    object_ids: ti.template(),
    distances: ti.template(),
    handle: ti.i32,
    centre: vec3,
    normal: vec3,
    width_direction: vec3,
    height_direction: vec3,
    half_width: ti.f32,
    half_height: ti.f32,
    bounded: ti.i32,
    x_start: ti.i32,
    x_end: ti.i32,
    y_start: ti.i32,
    y_end: ti.i32,
    pixel_width: ti.f32,
    pixel_height: ti.f32,
    view_half_width: ti.f32,
    view_half_height: ti.f32,
    distance: ti.f32,
):
    for i, j in ti.ndrange((x_start, x_end), (y_start, y_end)):
        ray = primary_ray(
            i, j, pixel_width, pixel_height, view_half_width, view_half_height, distance
        )
        t = hit_plane(
            ray.origin,
            ray.direction,
            centre,
            normal,
            width_direction,
            height_direction,
            half_width,
            half_height,
            bounded,
        )
        if t < distances[i, j]:
            distances[i, j] = t
            object_ids[i, j] = handle


# =============================================================================
# Plane object (host-side)
# =============================================================================


class Plane(Object):
    """A plane with an orientation and optional rectangular bounds.

    Args:
        centre: The point from which the width and height limits are measured.
        normal: Normal to the plane; normalised on construction.
        up: Direction along which the height is measured. Should be orthogonal
            to the normal; only used for bounded planes.
        width: Full width of the plane (zero or negative for infinite).
        height: Full height of the plane (zero or negative for infinite).
        colour: The plane's flat colour.

    Raises:
        ValueError: If the normal has zero length, or if a bounded plane's
            ``up`` is zero or parallel to the normal.
    """

    def __init__(
        self,
        centre: Point3D | Iterable[float] = (0.0, 0.0, 0.0),
        normal: Vector3D | Iterable[float] = (0.0, 1.0, 0.0),
        up: Vector3D | Iterable[float] = (0.0, 0.0, 1.0),
        width: float = 0.0,
        height: float = 0.0,
        colour: Colour | Iterable[int] = DEFAULT_OBJECT_COLOUR,
    ) -> None:
        super().__init__(centre, colour)
        self._normal = as_vector(normal)
        self._height_direction = as_vector(up)
        self._width_direction = Vector3D(1.0, 0.0, 0.0)
        self._half_width = float(width) / 2.0
        self._half_height = float(height) / 2.0
        self._half_diagonal = math.inf

        try:
            self._normal.normalise()
        except ValueError:
            raise ValueError("Plane normal must be non-zero") from None

        self._bounded = self._half_width > 0.0 and self._half_height > 0.0
        if self._bounded:
            self._width_direction = self._height_direction.cross(self._normal)
            try:
                self._width_direction.normalise()
            except ValueError:
                raise ValueError(
                    "Plane 'up' direction must be non-zero and not parallel to the normal"
                ) from None
            self._height_direction.normalise()
            self._half_diagonal = math.hypot(self._half_width, self._half_height)

    @property
    def normal(self) -> Vector3D:
        return self._normal.copy()

    @property
    def width_direction(self) -> Vector3D:
        return self._width_direction.copy()

    @property
    def height_direction(self) -> Vector3D:
        return self._height_direction.copy()

    @property
    def half_width(self) -> float:
        return self._half_width

    @property
    def half_height(self) -> float:
        return self._half_height

    @property
    def bounded(self) -> bool:
        return self._bounded

    @property
    def max_radius(self) -> float:
        return self._half_diagonal

    def _geometry_args(self) -> tuple:
        return (
            self._centre.to_vec3(),
            self._normal.to_vec3(),
            self._width_direction.to_vec3(),
            self._height_direction.to_vec3(),
            self._half_width,
            self._half_height,
            int(self._bounded),
        )

    def intersect(self, ray_src: Point3D, ray_dir: Vector3D) -> float | None:
        t = _intersect_plane(ray_src.to_vec3(), ray_dir.to_vec3(), *self._geometry_args())
        if math.isinf(t):
            return None
        return float(t)

    def apply_transformation(self, matrix: Matrix3D) -> None:
        self._centre = matrix @ self._centre
        self._normal = matrix @ self._normal
        self._width_direction = matrix @ self._width_direction
        self._height_direction = matrix @ self._height_direction

    def record_hits(
        self,
        buffer: "PixelBuffer",
        handle: int,
        footprint: "Footprint",
        view_plane: "ViewPlane",
    ) -> None:
        _record_plane_hits(
            buffer.object_ids,
            buffer.distances,
            handle,
            *self._geometry_args(),
            *footprint,
            *view_plane.ray_parameters(),
        )

    def spatial_state(self) -> tuple[npt.NDArray[np.float64], ...]:
        return (
            self._centre.to_numpy(),
            self._normal.to_numpy(),
            self._width_direction.to_numpy(),
            self._height_direction.to_numpy(),
        )

    def __repr__(self) -> str:
        return (
            f"Plane(centre={self._centre!r}, normal={self._normal!r}, "
            f"half_width={self._half_width!r}, half_height={self._half_height!r}, "
            f"colour={self.colour!r})"
        )
