"""Unit tests for plane intersection.

Tests cover:
- Bounded plane: centre hit, beyond-boundary miss, boundary-exact miss
- Infinite plane hits far from the centre
- Rays parallel to the plane and planes behind the ray origin
- Construction checks (zero normal, parallel up)
- Transformation of the centre and directions
"""

import math

import pytest
import taichi as ti


def _wall(**kwargs):
    """A 2x2 plane at z=0 facing +z, bounded unless overridden."""
    from raycaster.geometry.plane import Plane

    params = dict(
        centre=(0.0, 0.0, 0.0),
        normal=(0.0, 0.0, 1.0),
        up=(0.0, 1.0, 0.0),
        width=2.0,
        height=2.0,
    )
    params.update(kwargs)
    return Plane(**params)


class TestHitPlane:
    """Tests for the kernel-side hit_plane function."""

    def test_infinite_plane_hit(self):
        from raycaster.geometry.plane import hit_plane, vec3

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            t_val[None] = hit_plane(
                vec3(0.0, 3.0, 0.0),
                vec3(0.0, -1.0, 0.0),
                vec3(0.0, 0.0, 0.0),
                vec3(0.0, 1.0, 0.0),
                vec3(1.0, 0.0, 0.0),
                vec3(0.0, 0.0, 1.0),
                0.0,
                0.0,
                0,
            )

        test_kernel()
        assert abs(t_val[None] - 3.0) < 1e-6

    def test_bounded_plane_miss(self):
        from raycaster.geometry.plane import hit_plane, vec3

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            # Hits the plane at x = 5, outside half width 1
            t_val[None] = hit_plane(
                vec3(5.0, 3.0, 0.0),
                vec3(0.0, -1.0, 0.0),
                vec3(0.0, 0.0, 0.0),
                vec3(0.0, 1.0, 0.0),
                vec3(1.0, 0.0, 0.0),
                vec3(0.0, 0.0, 1.0),
                1.0,
                1.0,
                1,
            )

        test_kernel()
        assert math.isinf(t_val[None])


class TestBoundedPlane:
    """Tests for Plane.intersect on a bounded plane."""

    def test_centre_hit(self):
        from raycaster.core.vector import Point3D, Vector3D

        plane = _wall()
        t = plane.intersect(Point3D(0.0, 0.0, 5.0), Vector3D(0.0, 0.0, -1.0))
        assert t == pytest.approx(5.0, abs=1e-5)

    def test_hit_from_behind(self):
        """Planes are two-sided."""
        from raycaster.core.vector import Point3D, Vector3D

        plane = _wall()
        t = plane.intersect(Point3D(0.0, 0.0, -2.0), Vector3D(0.0, 0.0, 1.0))
        assert t == pytest.approx(2.0, abs=1e-5)

    def test_beyond_boundary_miss(self):
        from raycaster.core.vector import Point3D, Vector3D

        plane = _wall()
        assert plane.intersect(Point3D(1.5, 0.0, 5.0), Vector3D(0.0, 0.0, -1.0)) is None
        assert plane.intersect(Point3D(0.0, -1.5, 5.0), Vector3D(0.0, 0.0, -1.0)) is None

    def test_boundary_exact_miss(self):
        from raycaster.core.vector import Point3D, Vector3D

        plane = _wall()
        assert plane.intersect(Point3D(1.0, 0.0, 5.0), Vector3D(0.0, 0.0, -1.0)) is None
        assert plane.intersect(Point3D(0.0, 1.0, 5.0), Vector3D(0.0, 0.0, -1.0)) is None

    def test_just_inside_boundary_hit(self):
        from raycaster.core.vector import Point3D, Vector3D

        plane = _wall()
        assert plane.intersect(Point3D(0.99, 0.99, 5.0), Vector3D(0.0, 0.0, -1.0)) is not None

    def test_width_and_height_are_independent(self):
        from raycaster.core.vector import Point3D, Vector3D

        # 6 wide along x, 2 high along y
        plane = _wall(width=6.0)
        assert plane.intersect(Point3D(2.5, 0.0, 5.0), Vector3D(0.0, 0.0, -1.0)) is not None
        assert plane.intersect(Point3D(0.0, 2.5, 5.0), Vector3D(0.0, 0.0, -1.0)) is None


class TestInfinitePlane:
    """Tests for Plane.intersect on an unbounded plane."""

    def test_far_hit(self):
        from raycaster.core.vector import Point3D, Vector3D
        from raycaster.geometry.plane import Plane

        floor = Plane(centre=(0.0, -1.0, 0.0), normal=(0.0, 1.0, 0.0))
        t = floor.intersect(Point3D(100.0, 0.0, -100.0), Vector3D(0.0, -1.0, 0.0))
        assert t == pytest.approx(1.0, abs=1e-5)

    def test_parallel_ray_is_miss(self):
        from raycaster.core.vector import Point3D, Vector3D
        from raycaster.geometry.plane import Plane

        floor = Plane(centre=(0.0, -1.0, 0.0), normal=(0.0, 1.0, 0.0))
        assert floor.intersect(Point3D(0.0, 0.0, 0.0), Vector3D(1.0, 0.0, 0.0)) is None

    def test_ray_in_plane_is_miss(self):
        from raycaster.core.vector import Point3D, Vector3D
        from raycaster.geometry.plane import Plane

        floor = Plane(centre=(0.0, -1.0, 0.0), normal=(0.0, 1.0, 0.0))
        assert floor.intersect(Point3D(0.0, -1.0, 0.0), Vector3D(0.0, 0.0, 1.0)) is None

    def test_plane_behind_origin_is_miss(self):
        from raycaster.core.vector import Point3D, Vector3D
        from raycaster.geometry.plane import Plane

        floor = Plane(centre=(0.0, -1.0, 0.0), normal=(0.0, 1.0, 0.0))
        assert floor.intersect(Point3D(0.0, 0.0, 0.0), Vector3D(0.0, 1.0, 0.0)) is None

    def test_max_radius_is_infinite(self):
        from raycaster.geometry.plane import Plane

        plane = Plane()
        assert not plane.bounded
        assert math.isinf(plane.max_radius)

    def test_only_one_extent_is_infinite(self):
        from raycaster.geometry.plane import Plane

        plane = Plane(width=4.0, height=0.0)
        assert not plane.bounded


class TestPlaneConstruction:
    """Tests for construction checks and derived geometry."""

    def test_normal_is_normalised(self):
        from raycaster.core.vector import Vector3D
        from raycaster.geometry.plane import Plane

        plane = Plane(normal=(0.0, 5.0, 0.0))
        assert plane.normal == Vector3D(0.0, 1.0, 0.0)

    def test_zero_normal_raises(self):
        from raycaster.geometry.plane import Plane

        with pytest.raises(ValueError, match="normal"):
            Plane(normal=(0.0, 0.0, 0.0))

    def test_parallel_up_raises(self):
        from raycaster.geometry.plane import Plane

        with pytest.raises(ValueError, match="up"):
            Plane(normal=(0.0, 0.0, 1.0), up=(0.0, 0.0, 2.0), width=2.0, height=2.0)

    def test_zero_up_raises_when_bounded(self):
        from raycaster.geometry.plane import Plane

        with pytest.raises(ValueError):
            Plane(normal=(0.0, 0.0, 1.0), up=(0.0, 0.0, 0.0), width=2.0, height=2.0)

    def test_parallel_up_allowed_when_unbounded(self):
        from raycaster.geometry.plane import Plane

        plane = Plane(normal=(0.0, 1.0, 0.0), up=(0.0, 1.0, 0.0))
        assert not plane.bounded

    def test_bounded_geometry(self):
        from raycaster.core.vector import Vector3D

        plane = _wall(width=6.0, height=8.0)
        assert plane.bounded
        assert plane.half_width == 3.0
        assert plane.half_height == 4.0
        assert plane.max_radius == pytest.approx(5.0)
        # cross(up, normal) = cross(+y, +z) = +x
        assert plane.width_direction.isclose(Vector3D(1.0, 0.0, 0.0))
        assert plane.height_direction.isclose(Vector3D(0.0, 1.0, 0.0))


class TestPlaneTransformation:
    """Tests for apply_transformation."""

    def test_translation_moves_centre_only(self):
        from raycaster.core.matrix import Matrix3D
        from raycaster.core.vector import Point3D, Vector3D

        plane = _wall()
        plane.apply_transformation(Matrix3D.translation(1.0, 2.0, 3.0))
        assert plane.centre == Point3D(1.0, 2.0, 3.0)
        assert plane.normal == Vector3D(0.0, 0.0, 1.0)
        assert plane.width_direction == Vector3D(1.0, 0.0, 0.0)

    def test_rotation_turns_directions(self):
        from raycaster.core.matrix import Matrix3D
        from raycaster.core.vector import Point3D, Vector3D

        plane = _wall(centre=(0.0, 0.0, -4.0))
        plane.apply_transformation(Matrix3D.rotation_y(math.pi / 2))
        assert plane.centre.isclose(Point3D(-4.0, 0.0, 0.0))
        assert plane.normal.isclose(Vector3D(1.0, 0.0, 0.0))
        assert plane.width_direction.isclose(Vector3D(0.0, 0.0, -1.0))
        assert plane.height_direction.isclose(Vector3D(0.0, 1.0, 0.0))

        # Still hit through its (moved) centre
        t = plane.intersect(Point3D(0.0, 0.0, 0.0), Vector3D(-1.0, 0.0, 0.0))
        assert t == pytest.approx(4.0, abs=1e-5)

    def test_round_trip_restores_state(self):
        import numpy as np

        from raycaster.core.matrix import Matrix3D

        plane = _wall(centre=(1.0, 2.0, -3.0))
        before = plane.spatial_state()
        m = Matrix3D.translation(0.0, 1.0, 12.0) @ Matrix3D.rotation_x(0.3) @ Matrix3D.scaling(1.0, 1.0, -1.0)
        plane.apply_transformation(m.inverse_transform())
        plane.apply_transformation(m)
        for a, b in zip(before, plane.spatial_state()):
            assert np.allclose(a, b, atol=1e-12)
