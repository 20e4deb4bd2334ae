"""Points and vectors for Python-side scene geometry.

Scene objects keep their geometry in double precision on the host so that the
world -> camera -> world round trip performed every frame does not drift. The
values are handed to Taichi kernels as ``vec3`` arguments when rays are cast.

Two distinct types are used so that a transform can tell them apart:

- ``Point3D`` is a position; matrices apply their translation to it.
- ``Vector3D`` is a direction or offset; matrices ignore translation.

Arithmetic follows affine-space rules:
    Point3D - Point3D -> Vector3D
    Point3D +/- Vector3D -> Point3D
    Vector3D +/- Vector3D -> Vector3D

Example:
    >>> a = Point3D(1.0, 2.0, 3.0)
    >>> b = Point3D(1.0, 2.0, 5.0)
    >>> v = b - a
    >>> v.normalise()
    >>> v
    Vector3D(0.0, 0.0, 1.0)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import numpy as np
import numpy.typing as npt
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class _Triple:
    """Shared storage and accessors for 3-component values."""

    __slots__ = ("_xyz",)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self._xyz = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, values: Iterable[float]):
        """Build from any 3-element iterable (tuple, list, NumPy array)."""
        array = np.asarray(list(values), dtype=np.float64)
        if array.shape != (3,):
            raise ValueError(f"Expected 3 components, got shape {array.shape}")
        result = cls.__new__(cls)
        result._xyz = array
        return result

    @property
    def x(self) -> float:
        return float(self._xyz[0])

    @property
    def y(self) -> float:
        return float(self._xyz[1])

    @property
    def z(self) -> float:
        return float(self._xyz[2])

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return a copy of the components as a float64 array."""
        return self._xyz.copy()

    def to_vec3(self) -> vec3:
        """Convert to a Taichi ``vec3`` for use as a kernel argument."""
        return vec3(self.x, self.y, self.z)

    def copy(self):
        return type(self).from_array(self._xyz)

    def isclose(self, other: _Triple, atol: float = 1e-9) -> bool:
        """Component-wise comparison within an absolute tolerance."""
        return bool(np.allclose(self._xyz, other._xyz, rtol=0.0, atol=atol))

    def __iter__(self) -> Iterator[float]:
        return iter(float(c) for c in self._xyz)

    def __getitem__(self, index: int) -> float:
        return float(self._xyz[index])

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return bool(np.array_equal(self._xyz, other._xyz))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.x!r}, {self.y!r}, {self.z!r})"


class Vector3D(_Triple):
    """A direction or displacement in 3D space."""

    __slots__ = ()

    def dot(self, other: Vector3D) -> float:
        return float(np.dot(self._xyz, other._xyz))

    def cross(self, other: Vector3D) -> Vector3D:
        return Vector3D.from_array(np.cross(self._xyz, other._xyz))

    def length(self) -> float:
        return float(np.linalg.norm(self._xyz))

    def length_squared(self) -> float:
        return float(np.dot(self._xyz, self._xyz))

    def normalise(self) -> None:
        """Scale this vector to unit length, in place.

        Raises:
            ValueError: If the vector has zero length.
        """
        norm = np.linalg.norm(self._xyz)
        if norm == 0.0:
            raise ValueError("Cannot normalise a zero-length vector")
        self._xyz /= norm

    def normalised(self) -> Vector3D:
        """Return a unit-length copy of this vector."""
        result = self.copy()
        result.normalise()
        return result

    def __add__(self, other: Vector3D) -> Vector3D:
        if isinstance(other, Vector3D):
            return Vector3D.from_array(self._xyz + other._xyz)
        return NotImplemented

    def __sub__(self, other: Vector3D) -> Vector3D:
        if isinstance(other, Vector3D):
            return Vector3D.from_array(self._xyz - other._xyz)
        return NotImplemented

    def __mul__(self, scalar: float) -> Vector3D:
        return Vector3D.from_array(self._xyz * float(scalar))

    __rmul__ = __mul__


class Point3D(_Triple):
    """A position in 3D space."""

    __slots__ = ()

    def as_vector(self) -> Vector3D:
        """The vector from the origin to this point."""
        return Vector3D.from_array(self._xyz)

    def __add__(self, other: Vector3D) -> Point3D:
        if isinstance(other, Vector3D):
            return Point3D.from_array(self._xyz + other._xyz)
        return NotImplemented

    def __sub__(self, other: Point3D | Vector3D) -> Vector3D | Point3D:
        if isinstance(other, Point3D):
            return Vector3D.from_array(self._xyz - other._xyz)
        if isinstance(other, Vector3D):
            return Point3D.from_array(self._xyz - other._xyz)
        return NotImplemented


def as_point(value: Point3D | Iterable[float]) -> Point3D:
    """Coerce a tuple/list/array (or an existing point) into a ``Point3D``."""
    if isinstance(value, Point3D):
        return value.copy()
    return Point3D.from_array(value)


def as_vector(value: Vector3D | Iterable[float]) -> Vector3D:
    """Coerce a tuple/list/array (or an existing vector) into a ``Vector3D``."""
    if isinstance(value, Vector3D):
        return value.copy()
    return Vector3D.from_array(value)
