"""Ray-casting camera: transform pipeline, ray generation and render pass.

The camera owns a view plane, a pixel buffer and its camera-to-world
transform. Camera space has the camera at the origin looking along +z with a
left-handed frame; world space is right-handed. The camera-to-world transform
is therefore

    T(position) @ Rz(rz) @ Ry(ry) @ Rx(rx) @ S(1, 1, -1)

where the final z flip is a fixed part of the pipeline. The transform is
cached and only rebuilt at the start of a render pass when the position or
rotation changed since the last build.

A render pass (``update_pixel_buffer``):
    1. clears the pixel buffer;
    2. refreshes the camera-to-world transform if needed;
    3. moves every object into camera space, restoring them on every exit path;
    4. for each object, in caller order, casts rays through the pixels of its
       footprint and records hits nearer than what the pixel already holds.

Ties between objects at exactly equal distances keep the object that came
first in the caller's list.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.camera import Camera, ViewPlane
    >>> from raycaster.geometry import Sphere
    >>> camera = Camera(ViewPlane(resolution_x=64, resolution_y=64))
    >>> camera.init((0.0, 0.0, 10.0))
    >>> ball = Sphere(centre=(0.0, 0.0, 0.0), radius=1.0, colour=(255, 0, 0))
    >>> camera.update_pixel_buffer([ball])
    True
    >>> camera.get_colour_at_pixel(32, 32)
    Colour(r=255, g=0, b=0, a=255)
"""

from __future__ import annotations

import logging
import math
import weakref
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager

import numpy as np
import numpy.typing as npt

from raycaster.core.colour import BACKGROUND_COLOUR, Colour
from raycaster.core.matrix import Matrix3D
from raycaster.core.vector import Point3D, Vector3D, as_point, as_vector
from raycaster.geometry.base import Object

from .pixel_buffer import NO_OBJECT, ObjectInfo, PixelBuffer
from .view_plane import Footprint, ViewPlane

logger = logging.getLogger(__name__)

# Extra pixels added around every projected footprint
FOOTPRINT_PADDING = 1


# =============================================================================
# Footprint estimation
# =============================================================================


def compute_footprint(
    centre: Point3D,
    max_radius: float,
    view_plane: ViewPlane,
) -> Footprint | None:
    """Conservative pixel range covered by a bounding sphere in camera space.

    The centre is projected onto the view plane along its direction from the
    origin, then expanded by the larger of the bounding radius itself and the
    radius of the sphere's perspective projection, plus padding. The result is
    clamped to the view plane resolution.

    Unbounded objects, and bounding spheres that reach the camera plane
    (z = 0), cover the whole view plane since their projection is unbounded.

    Args:
        centre: Camera-space centre of the object.
        max_radius: Bounding radius around the centre (inf if unbounded).
        view_plane: View plane the rays are cast through.

    Returns:
        The footprint, or ``None`` if the object lies entirely behind the
        camera.
    """
    if math.isinf(max_radius):
        return view_plane.full_footprint

    radius = abs(max_radius)
    x, y, z = centre

    if z <= 0.0:
        # Projection of the centre is undefined; keep the object only if part
        # of it is in front of the camera
        if z + radius > 0.0:
            return view_plane.full_footprint
        return None

    if z - radius <= 0.0:
        return view_plane.full_footprint

    d = view_plane.distance
    pixel_width = view_plane.pixel_width
    pixel_height = view_plane.pixel_height

    # Where the centre line crosses the view plane, measured from its corner
    t = d / z
    view_x = x * t + view_plane.half_width
    view_y = y * t + view_plane.half_height

    # |d*(a*z - b*x) / (z*(z + b))| <= d*r*(z + |x|) / (z*(z - r)) for |a|, |b| <= r
    denom = z * (z - radius)
    spread_x = max(radius, d * radius * (z + abs(x)) / denom)
    spread_y = max(radius, d * radius * (z + abs(y)) / denom)

    x_start = max(math.floor((view_x - spread_x) / pixel_width) - FOOTPRINT_PADDING, 0)
    x_end = min(
        math.floor((view_x + spread_x) / pixel_width) + 1 + FOOTPRINT_PADDING,
        view_plane.resolution_x,
    )
    y_start = max(math.floor((view_y - spread_y) / pixel_height) - FOOTPRINT_PADDING, 0)
    y_end = min(
        math.floor((view_y + spread_y) / pixel_height) + 1 + FOOTPRINT_PADDING,
        view_plane.resolution_y,
    )

    return Footprint(x_start, x_end, y_start, y_end)


# =============================================================================
# Camera
# =============================================================================


class Camera:
    """A ray-casting camera with a pixel buffer of nearest hits.

    Args:
        view_plane: View plane configuration. Defaults to ``ViewPlane()``.
        rotation: Initial Euler angles (radians) about the x, y and z axes.
    """

    def __init__(
        self,
        view_plane: ViewPlane | None = None,
        rotation: Iterable[float] = (0.0, 0.0, 0.0),
    ) -> None:
        self._view_plane = view_plane if view_plane is not None else ViewPlane()
        self._pixel_buf = PixelBuffer()
        self._position = Point3D()
        self._rotation = self._as_angles(rotation)
        self._camera_to_world = Matrix3D()
        self._world_transform_changed = True
        # Weak references to the objects of the last render pass, by handle
        self._frame_objects: list[weakref.ReferenceType[Object]] = []

    @staticmethod
    def _as_angles(values: Iterable[float]) -> tuple[float, float, float]:
        angles = tuple(float(v) for v in values)
        if len(angles) != 3:
            raise ValueError(f"Expected 3 Euler angles, got {len(angles)}")
        return angles  # type: ignore[return-value]

    def init(self, position: Point3D | Iterable[float]) -> None:
        """Place the camera and size the pixel buffer to the view plane.

        Args:
            position: Camera position in world space.
        """
        self.position = position
        self._pixel_buf.init(self._view_plane.resolution_x, self._view_plane.resolution_y)
        self._frame_objects = []
        logger.debug(
            "Camera initialised at %r with a %dx%d view plane",
            self._position,
            self._view_plane.resolution_x,
            self._view_plane.resolution_y,
        )

    # =========================================================================
    # State
    # =========================================================================

    @property
    def view_plane(self) -> ViewPlane:
        return self._view_plane

    @property
    def pixel_buffer(self) -> PixelBuffer:
        return self._pixel_buf

    @property
    def pixel_width(self) -> float:
        return self._view_plane.pixel_width

    @property
    def pixel_height(self) -> float:
        return self._view_plane.pixel_height

    @property
    def position(self) -> Point3D:
        return self._position.copy()

    @position.setter
    def position(self, value: Point3D | Iterable[float]) -> None:
        self._position = as_point(value)
        self._world_transform_changed = True

    @property
    def rotation(self) -> tuple[float, float, float]:
        """Euler angles (radians) about the x, y and z axes."""
        return self._rotation

    @rotation.setter
    def rotation(self, value: Iterable[float]) -> None:
        self._rotation = self._as_angles(value)
        self._world_transform_changed = True

    def move(self, delta: Vector3D | Iterable[float]) -> None:
        """Translate the camera by ``delta`` in world space."""
        self.position = self._position + as_vector(delta)

    def rotate(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> None:
        """Add to the camera's Euler angles (radians)."""
        rx, ry, rz = self._rotation
        self.rotation = (rx + dx, ry + dy, rz + dz)

    @property
    def world_transform_changed(self) -> bool:
        """True when the cached camera-to-world transform is stale."""
        return self._world_transform_changed

    @property
    def camera_to_world(self) -> Matrix3D:
        """The current camera-to-world transform."""
        self._refresh_world_transform()
        return Matrix3D(self._camera_to_world.to_numpy())

    # =========================================================================
    # Transform pipeline
    # =========================================================================

    def update_world_transform(self) -> None:
        """Rebuild the camera-to-world transform from position and rotation."""
        rx, ry, rz = self._rotation
        self._camera_to_world = (
            Matrix3D.translation(*self._position)
            @ Matrix3D.rotation_z(rz)
            @ Matrix3D.rotation_y(ry)
            @ Matrix3D.rotation_x(rx)
            @ Matrix3D.scaling(1.0, 1.0, -1.0)
        )
        self._world_transform_changed = False

    def _refresh_world_transform(self) -> None:
        if self._world_transform_changed:
            self.update_world_transform()

    @contextmanager
    def _objects_in_camera_space(self, objects: Sequence[Object]) -> Iterator[None]:
        """Move objects into camera space for the duration of the block.

        Every object that was moved is moved back with the camera-to-world
        transform when the block exits, whether normally or by an exception.
        If moving an object back fails, the remaining objects are still
        restored and the first failure is raised afterwards.
        """
        camera_to_world = self._camera_to_world
        world_to_camera = camera_to_world.inverse_transform()
        transformed: list[Object] = []
        try:
            for obj in objects:
                obj.apply_transformation(world_to_camera)
                transformed.append(obj)
            yield
        finally:
            restore_error: Exception | None = None
            for obj in transformed:
                try:
                    obj.apply_transformation(camera_to_world)
                except Exception as exc:
                    logger.error("Failed to restore %r to world space: %s", obj, exc)
                    if restore_error is None:
                        restore_error = exc
            if restore_error is not None:
                raise restore_error

    # =========================================================================
    # Ray generation
    # =========================================================================

    def get_ray_direction_through_pixel(self, i: int, j: int) -> Vector3D:
        """Normalised camera-space direction of the ray through pixel (i, j).

        Args:
            i: Pixel column, 0 <= i < resolution_x.
            j: Pixel row, 0 <= j < resolution_y.

        Raises:
            IndexError: If the pixel is outside the view plane.
        """
        plane = self._view_plane
        if not plane.contains_pixel(i, j):
            raise IndexError(
                f"Pixel ({i}, {j}) is outside the "
                f"{plane.resolution_x}x{plane.resolution_y} view plane"
            )
        direction = Vector3D(
            i * plane.pixel_width - plane.half_width,
            j * plane.pixel_height - plane.half_height,
            plane.distance,
        )
        direction.normalise()
        return direction

    # =========================================================================
    # Render pass
    # =========================================================================

    def update_pixel_buffer(self, objects: Sequence[Object]) -> bool:
        """Cast rays through the view plane and record the nearest object per pixel.

        Objects are borrowed for the duration of the call. Their geometry is
        temporarily moved into camera space and is back in world space when
        the call returns or raises.

        Args:
            objects: Scene objects, in the order used to break distance ties.

        Returns:
            False if the pixel buffer was never initialised (nothing is
            touched), True otherwise.
        """
        if not self._pixel_buf.is_initialised:
            logger.warning("Render pass skipped: camera not initialised, call init() first")
            return False

        objects = list(objects)
        self._pixel_buf.clear()
        self._frame_objects = [weakref.ref(obj) for obj in objects]
        self._refresh_world_transform()

        rays_cast = 0
        skipped = 0
        with self._objects_in_camera_space(objects):
            for handle, obj in enumerate(objects):
                footprint = compute_footprint(obj.centre, obj.max_radius, self._view_plane)
                if footprint is None or footprint.is_empty:
                    skipped += 1
                    continue
                obj.record_hits(self._pixel_buf, handle, footprint, self._view_plane)
                rays_cast += footprint.pixel_count

        logger.debug(
            "Render pass complete: %d objects (%d outside the view), %d rays cast",
            len(objects),
            skipped,
            rays_cast,
        )
        return True

    # =========================================================================
    # Colour resolution
    # =========================================================================

    def _object_for_handle(self, handle: int) -> Object | None:
        if not 0 <= handle < len(self._frame_objects):
            return None
        return self._frame_objects[handle]()

    def get_object_info(self, i: int, j: int) -> ObjectInfo:
        """The closest object recorded for pixel (i, j) by the last pass."""
        record = self._pixel_buf.get_record(i, j)
        return ObjectInfo(self._object_for_handle(record.handle), record.distance)

    def get_colour_at_pixel(self, i: int, j: int) -> Colour:
        """Colour of the closest object at pixel (i, j), or the background."""
        obj = self.get_object_info(i, j).object
        if obj is None:
            return BACKGROUND_COLOUR
        return obj.colour

    def get_colour_buffer(self) -> npt.NDArray[np.uint8]:
        """The whole frame as an RGBA image.

        Returns:
            Array of shape (resolution_y, resolution_x, 4), dtype uint8, with
            row 0 at the top of the view plane.
        """
        handles = self._pixel_buf.handles_numpy()

        # Palette entry 0 is the background, entry h + 1 is object h
        palette = [BACKGROUND_COLOUR]
        for ref in self._frame_objects:
            obj = ref()
            palette.append(obj.colour if obj is not None else BACKGROUND_COLOUR)
        palette_array = np.array(palette, dtype=np.uint8)

        # Handles outside the last pass read as background
        handles = np.where((handles >= 0) & (handles < len(self._frame_objects)), handles, NO_OBJECT)
        image = palette_array[handles + 1]
        return np.ascontiguousarray(np.flipud(image.transpose(1, 0, 2)))

    def __repr__(self) -> str:
        return (
            f"Camera(position={self._position!r}, rotation={self._rotation!r}, "
            f"view_plane={self._view_plane!r})"
        )
