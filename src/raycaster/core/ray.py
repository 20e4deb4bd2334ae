"""Ray data structure and camera-space ray generation for Taichi kernels.

Primary rays all start at the camera-space origin and pass through a point on
the view plane. The view plane sits at ``distance`` along +z and spans
[-half_width, half_width] x [-half_height, half_height]; pixel (i, j) maps to
its grid corner ``(i * pixel_width - half_width, j * pixel_height -
half_height)``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.core.ray import primary_ray
    >>> # Use within a Taichi kernel:
    >>> # ray = primary_ray(i, j, pw, ph, hw, hh, d)
    >>> # t = hit_sphere(ray.origin, ray.direction, centre, radius_squared)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Unit length for
            primary rays, so that hit parameters are distances.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction.

    Args:
        origin: The starting point of the ray.
        direction: The direction vector.

    Returns:
        A new Ray instance.
    """
    return Ray(origin=origin, direction=direction)


@ti.func
def ray_direction_through_pixel(
    i: ti.i32,
    j: ti.i32,
    pixel_width: ti.f32,
    pixel_height: ti.f32,
    half_width: ti.f32,
    half_height: ti.f32,
    distance: ti.f32,
) -> vec3:
    """Normalised camera-space direction of the ray through pixel (i, j).

    Args:
        i: Pixel column, 0 <= i < resolution_x.
        j: Pixel row, 0 <= j < resolution_y (0 is the bottom of the plane).
        pixel_width: View plane width of one pixel.
        pixel_height: View plane height of one pixel.
        half_width: Half the view plane width.
        half_height: Half the view plane height.
        distance: Distance from the camera origin to the view plane.

    Returns:
        Unit vector from the origin through the pixel's view plane point.
    """
    x = ti.cast(i, ti.f32) * pixel_width - half_width
    y = ti.cast(j, ti.f32) * pixel_height - half_height
    return tm.normalize(vec3(x, y, distance))


@ti.func
def primary_ray(
    i: ti.i32,
    j: ti.i32,
    pixel_width: ti.f32,
    pixel_height: ti.f32,
    half_width: ti.f32,
    half_height: ti.f32,
    distance: ti.f32,
) -> Ray:
    """Camera-space primary ray through pixel (i, j), starting at the origin."""
    direction = ray_direction_through_pixel(
        i, j, pixel_width, pixel_height, half_width, half_height, distance
    )
    return make_ray(vec3(0.0, 0.0, 0.0), direction)
