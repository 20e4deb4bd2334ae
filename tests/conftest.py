"""Pytest configuration for raycaster tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def small_view_plane():
    """A 16x16 view plane with the default extents."""
    from raycaster.camera.view_plane import ViewPlane

    return ViewPlane(resolution_x=16, resolution_y=16, half_width=3.0, half_height=3.0, distance=5.0)


@pytest.fixture
def camera_at_z10(small_view_plane):
    """An initialised camera on the +z axis looking toward the origin."""
    from raycaster.camera.camera import Camera

    camera = Camera(small_view_plane)
    camera.init((0.0, 0.0, 10.0))
    return camera
