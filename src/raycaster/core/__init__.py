"""Core building blocks shared by the geometry and camera packages.

Components:
    vector: Point3D / Vector3D host-side geometry in double precision
    matrix: Matrix3D homogeneous affine transforms
    ray: Ray data structure and per-pixel ray generation for Taichi kernels
    colour: RGBA colours and the default/background colours

Host-side values (points, vectors, matrices) are plain NumPy; only ray
generation and intersection run inside Taichi kernels.
"""

from .colour import BACKGROUND_COLOUR, DEFAULT_OBJECT_COLOUR, Colour
from .matrix import Matrix3D
from .ray import Ray, make_ray, primary_ray, ray_direction_through_pixel
from .vector import Point3D, Vector3D, as_point, as_vector, vec3

__all__ = [
    "Point3D",
    "Vector3D",
    "as_point",
    "as_vector",
    "vec3",
    "Matrix3D",
    "Ray",
    "make_ray",
    "primary_ray",
    "ray_direction_through_pixel",
    "Colour",
    "DEFAULT_OBJECT_COLOUR",
    "BACKGROUND_COLOUR",
]
