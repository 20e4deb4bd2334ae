"""Homogeneous 4x4 affine transforms.

``Matrix3D`` wraps a 4x4 float64 NumPy array. Only affine transforms are
supported: the bottom row is always (0, 0, 0, 1), so applying a matrix never
needs a perspective divide.

Multiplication with ``@`` dispatches on the right-hand operand:
    Matrix3D @ Point3D   -> Point3D   (translation applied)
    Matrix3D @ Vector3D  -> Vector3D  (translation ignored)
    Matrix3D @ Matrix3D  -> Matrix3D  (composition, right-hand side first)

Example:
    >>> import math
    >>> m = Matrix3D.translation(0.0, 0.0, 5.0) @ Matrix3D.rotation_y(math.pi)
    >>> m @ Point3D(1.0, 0.0, 0.0)
    Point3D(-1.0, 0.0, 5.0)
    >>> p = Point3D(1.0, 2.0, 3.0)
    >>> (m.inverse_transform() @ (m @ p)).isclose(p)
    True
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

from .vector import Point3D, Vector3D

# Determinant magnitude below which the linear part is treated as singular
SINGULAR_EPSILON = 1e-12


class Matrix3D:
    """A 4x4 homogeneous affine transform, identity by default."""

    __slots__ = ("_m",)

    def __init__(self, values: npt.ArrayLike | None = None) -> None:
        if values is None:
            self._m = np.identity(4, dtype=np.float64)
        else:
            array = np.array(values, dtype=np.float64)
            if array.shape == (3, 4):
                array = np.vstack([array, [0.0, 0.0, 0.0, 1.0]])
            if array.shape != (4, 4):
                raise ValueError(f"Expected a 3x4 or 4x4 matrix, got shape {array.shape}")
            self._m = array

    # =========================================================================
    # Factories
    # =========================================================================

    @classmethod
    def identity(cls) -> Matrix3D:
        return cls()

    @classmethod
    def translation(cls, x: float, y: float, z: float) -> Matrix3D:
        mat = cls()
        mat[0, 3] = x
        mat[1, 3] = y
        mat[2, 3] = z
        return mat

    @classmethod
    def scaling(cls, sx: float, sy: float, sz: float) -> Matrix3D:
        mat = cls()
        mat[0, 0] = sx
        mat[1, 1] = sy
        mat[2, 2] = sz
        return mat

    @classmethod
    def rotation_x(cls, rad: float) -> Matrix3D:
        mat = cls()
        c = math.cos(rad)
        s = math.sin(rad)
        mat[1, 1] = c
        mat[1, 2] = -s
        mat[2, 1] = s
        mat[2, 2] = c
        return mat

    @classmethod
    def rotation_y(cls, rad: float) -> Matrix3D:
        mat = cls()
        c = math.cos(rad)
        s = math.sin(rad)
        mat[0, 0] = c
        mat[0, 2] = s
        mat[2, 0] = -s
        mat[2, 2] = c
        return mat

    @classmethod
    def rotation_z(cls, rad: float) -> Matrix3D:
        mat = cls()
        c = math.cos(rad)
        s = math.sin(rad)
        mat[0, 0] = c
        mat[0, 1] = -s
        mat[1, 0] = s
        mat[1, 1] = c
        return mat

    # =========================================================================
    # Element access
    # =========================================================================

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, col = index
        return float(self._m[row, col])

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        row, col = index
        if row == 3:
            raise IndexError("The bottom row of an affine transform is fixed")
        self._m[row, col] = value

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return a copy of the 4x4 array."""
        return self._m.copy()

    # =========================================================================
    # Products
    # =========================================================================

    def transform_point(self, point: Point3D) -> Point3D:
        xyz = point.to_numpy()
        return Point3D.from_array(self._m[:3, :3] @ xyz + self._m[:3, 3])

    def transform_vector(self, vector: Vector3D) -> Vector3D:
        xyz = vector.to_numpy()
        return Vector3D.from_array(self._m[:3, :3] @ xyz)

    def __matmul__(self, other):
        if isinstance(other, Matrix3D):
            return Matrix3D(self._m @ other._m)
        if isinstance(other, Point3D):
            return self.transform_point(other)
        if isinstance(other, Vector3D):
            return self.transform_vector(other)
        return NotImplemented

    def inverse_transform(self) -> Matrix3D:
        """Compute the inverse of this affine transform.

        For M = [L | t] the inverse is [L^-1 | -L^-1 t]. The linear part may
        contain rotations, reflections and scales; only singular matrices are
        rejected.

        Returns:
            The inverse transform.

        Raises:
            ValueError: If the linear part is not invertible.
        """
        linear = self._m[:3, :3]
        if abs(np.linalg.det(linear)) < SINGULAR_EPSILON:
            raise ValueError("Transform is singular and cannot be inverted")

        linear_inv = np.linalg.inv(linear)
        result = np.identity(4, dtype=np.float64)
        result[:3, :3] = linear_inv
        result[:3, 3] = -linear_inv @ self._m[:3, 3]
        return Matrix3D(result)

    def isclose(self, other: Matrix3D, atol: float = 1e-9) -> bool:
        return bool(np.allclose(self._m, other._m, rtol=0.0, atol=atol))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix3D):
            return NotImplemented
        return bool(np.array_equal(self._m, other._m))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows = ", ".join(str(row) for row in self._m.tolist())
        return f"Matrix3D([{rows}])"
