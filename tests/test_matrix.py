"""Unit tests for Matrix3D affine transforms.

Tests cover:
- Factories and element access
- Point vs vector transformation
- Composition order
- Affine inverse, including reflections and the singular reject
"""

import math

import numpy as np
import pytest


class TestMatrixBasics:
    """Tests for construction and element access."""

    def test_default_is_identity(self):
        from raycaster.core.matrix import Matrix3D

        assert np.array_equal(Matrix3D().to_numpy(), np.identity(4))
        assert Matrix3D.identity() == Matrix3D()

    def test_accepts_3x4(self):
        from raycaster.core.matrix import Matrix3D

        m = Matrix3D([[1, 0, 0, 1], [0, 1, 0, 2], [0, 0, 1, 3]])
        assert m[3, 3] == 1.0
        assert m[1, 3] == 2.0

    def test_rejects_bad_shape(self):
        from raycaster.core.matrix import Matrix3D

        with pytest.raises(ValueError):
            Matrix3D(np.zeros((2, 2)))

    def test_set_element(self):
        from raycaster.core.matrix import Matrix3D

        m = Matrix3D()
        m[0, 3] = 7.0
        assert m[0, 3] == 7.0

    def test_bottom_row_is_fixed(self):
        from raycaster.core.matrix import Matrix3D

        m = Matrix3D()
        with pytest.raises(IndexError):
            m[3, 0] = 1.0


class TestMatrixProducts:
    """Tests for transforming points, vectors and matrices."""

    def test_translation_moves_points_not_vectors(self):
        from raycaster.core.matrix import Matrix3D
        from raycaster.core.vector import Point3D, Vector3D

        m = Matrix3D.translation(1.0, 2.0, 3.0)
        assert m @ Point3D(0.0, 0.0, 0.0) == Point3D(1.0, 2.0, 3.0)
        assert m @ Vector3D(0.0, 0.0, 1.0) == Vector3D(0.0, 0.0, 1.0)

    def test_rotation_z_quarter_turn(self):
        from raycaster.core.matrix import Matrix3D
        from raycaster.core.vector import Vector3D

        v = Matrix3D.rotation_z(math.pi / 2) @ Vector3D(1.0, 0.0, 0.0)
        assert v.isclose(Vector3D(0.0, 1.0, 0.0))

    def test_rotation_x_quarter_turn(self):
        from raycaster.core.matrix import Matrix3D
        from raycaster.core.vector import Vector3D

        v = Matrix3D.rotation_x(math.pi / 2) @ Vector3D(0.0, 1.0, 0.0)
        assert v.isclose(Vector3D(0.0, 0.0, 1.0))

    def test_rotation_y_quarter_turn(self):
        from raycaster.core.matrix import Matrix3D
        from raycaster.core.vector import Vector3D

        v = Matrix3D.rotation_y(math.pi / 2) @ Vector3D(0.0, 0.0, 1.0)
        assert v.isclose(Vector3D(1.0, 0.0, 0.0))

    def test_composition_applies_right_first(self):
        from raycaster.core.matrix import Matrix3D
        from raycaster.core.vector import Point3D

        m = Matrix3D.translation(0.0, 0.0, 5.0) @ Matrix3D.rotation_y(math.pi)
        assert (m @ Point3D(1.0, 0.0, 0.0)).isclose(Point3D(-1.0, 0.0, 5.0))

    def test_unsupported_operand(self):
        from raycaster.core.matrix import Matrix3D

        with pytest.raises(TypeError):
            Matrix3D() @ (1.0, 2.0, 3.0)


class TestInverseTransform:
    """Tests for inverse_transform."""

    def test_inverse_of_rigid_transform(self):
        from raycaster.core.matrix import Matrix3D
        from raycaster.core.vector import Point3D, Vector3D

        m = (
            Matrix3D.translation(1.0, -2.0, 3.0)
            @ Matrix3D.rotation_z(0.3)
            @ Matrix3D.rotation_y(-1.1)
            @ Matrix3D.rotation_x(0.7)
        )
        inv = m.inverse_transform()

        assert (m @ inv).isclose(Matrix3D())
        assert (inv @ m).isclose(Matrix3D())

        p = Point3D(4.0, 5.0, -6.0)
        assert (inv @ (m @ p)).isclose(p)
        v = Vector3D(0.0, 1.0, 1.0)
        assert (inv @ (m @ v)).isclose(v)

    def test_inverse_with_reflection(self):
        from raycaster.core.matrix import Matrix3D
        from raycaster.core.vector import Point3D

        m = (
            Matrix3D.translation(0.0, 1.0, 12.0)
            @ Matrix3D.rotation_y(0.4)
            @ Matrix3D.scaling(1.0, 1.0, -1.0)
        )
        inv = m.inverse_transform()

        assert (m @ inv).isclose(Matrix3D())
        p = Point3D(-3.0, 0.0, 2.0)
        assert (m @ (inv @ p)).isclose(p)

    def test_inverse_with_scaling(self):
        from raycaster.core.matrix import Matrix3D
        from raycaster.core.vector import Point3D

        m = Matrix3D.translation(1.0, 1.0, 1.0) @ Matrix3D.scaling(2.0, 4.0, 0.5)
        inv = m.inverse_transform()
        assert (inv @ Point3D(3.0, 5.0, 2.0)).isclose(Point3D(1.0, 1.0, 2.0))

    def test_singular_raises(self):
        from raycaster.core.matrix import Matrix3D

        with pytest.raises(ValueError, match="singular"):
            Matrix3D.scaling(1.0, 0.0, 1.0).inverse_transform()

    def test_inverse_leaves_matrix_unchanged(self):
        from raycaster.core.matrix import Matrix3D

        m = Matrix3D.translation(1.0, 2.0, 3.0)
        m.inverse_transform()
        assert m == Matrix3D.translation(1.0, 2.0, 3.0)
