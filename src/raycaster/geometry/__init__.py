"""Geometry module for scene primitives.

This module provides the scene object interface and its primitives:

Components:
    base: Abstract Object with the per-object capability set
    sphere: Sphere primitive with closest-approach intersection
    plane: Infinite or rectangular plane primitive

Each primitive keeps its geometry host-side in double precision and exposes a
Taichi function for ray intersection, used both by a single-ray kernel (for
``intersect``) and by the footprint kernel the camera launches per object.

Ray-object intersection follows the pattern:
    t = hit_shape(ray_origin, ray_direction, shape_parameters...)
with t = +inf on a miss.
"""

from .base import Object
from .plane import PARALLEL_EPSILON, Plane, hit_plane
from .sphere import Sphere, hit_sphere

__all__ = [
    "Object",
    "Plane",
    "Sphere",
    "hit_plane",
    "hit_sphere",
    "PARALLEL_EPSILON",
]
