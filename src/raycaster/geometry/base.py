"""Abstract scene object shared by all primitives.

Every primitive offers the same capability set, dispatched per object during a
render pass:

- ``intersect``: host-side ray test returning the hit distance or ``None``;
- ``apply_transformation``: move the object's geometry by a rigid transform;
- ``record_hits``: launch the primitive's Taichi kernel over a pixel footprint,
  writing nearest hits into a pixel buffer;
- ``max_radius``: bounding radius around ``centre`` used to size footprints
  (``math.inf`` for unbounded primitives).

Objects are created and owned by the scene. The renderer only borrows them for
one pass, temporarily moving them into camera space.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from raycaster.core.colour import DEFAULT_OBJECT_COLOUR, Colour
from raycaster.core.matrix import Matrix3D
from raycaster.core.vector import Point3D, Vector3D, as_point

if TYPE_CHECKING:
    from raycaster.camera.pixel_buffer import PixelBuffer
    from raycaster.camera.view_plane import Footprint, ViewPlane


class Object(ABC):
    """Base class for all objects in the scene.

    Attributes:
        colour: The object's flat RGBA colour.
    """

    def __init__(
        self,
        centre: Point3D | Iterable[float] = (0.0, 0.0, 0.0),
        colour: Colour | Iterable[int] = DEFAULT_OBJECT_COLOUR,
    ) -> None:
        self._centre = as_point(centre)
        self.colour = colour if isinstance(colour, Colour) else Colour.from_sequence(colour)

    @property
    def centre(self) -> Point3D:
        """The object's centre (a copy; use ``apply_transformation`` to move it)."""
        return self._centre.copy()

    @property
    @abstractmethod
    def max_radius(self) -> float:
        """Radius of a sphere around ``centre`` that contains the object."""

    @abstractmethod
    def intersect(self, ray_src: Point3D, ray_dir: Vector3D) -> float | None:
        """Distance along ``ray_dir`` to the first intersection, or ``None``.

        Args:
            ray_src: Starting point of the ray.
            ray_dir: Unit direction of the ray.
        """

    @abstractmethod
    def apply_transformation(self, matrix: Matrix3D) -> None:
        """Transform the object's geometry in place."""

    @abstractmethod
    def record_hits(
        self,
        buffer: PixelBuffer,
        handle: int,
        footprint: Footprint,
        view_plane: ViewPlane,
    ) -> None:
        """Cast camera-space rays through ``footprint`` and record nearer hits.

        The object must already be in camera space. A pixel is overwritten only
        when this object's hit distance is strictly smaller than the recorded
        one.

        Args:
            buffer: Pixel buffer receiving (handle, distance) records.
            handle: Index identifying this object within the current pass.
            footprint: Half-open pixel ranges to test.
            view_plane: View plane the rays are cast through.
        """

    @abstractmethod
    def spatial_state(self) -> tuple[npt.NDArray[np.float64], ...]:
        """Copies of every transformable quantity (centre, directions)."""
