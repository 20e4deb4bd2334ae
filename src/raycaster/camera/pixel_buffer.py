"""Per-pixel nearest-hit storage.

The pixel buffer keeps two Taichi fields indexed by pixel ``[i, j]``:

- ``object_ids``: handle of the closest object hit so far (``NO_OBJECT`` if
  none). Handles are positions in the object list of the current render pass;
  the buffer never holds the objects themselves.
- ``distances``: distance along the pixel's ray to that hit (+inf if none).

Lifecycle: allocated by ``init`` (normally once, at camera initialisation),
reset by ``clear`` at the start of every render pass, written by the
primitives' footprint kernels during the pass, and read-only afterwards.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

if TYPE_CHECKING:
    from raycaster.geometry.base import Object

# Handle stored for pixels where nothing was hit
NO_OBJECT = -1


class PixelRecord(NamedTuple):
    """Raw contents of one pixel buffer entry."""

    handle: int
    distance: float


@dataclass(frozen=True)
class ObjectInfo:
    """Information about the closest object seen through a pixel.

    Attributes:
        object: The closest object, or ``None`` if the pixel saw nothing (or
            the object has since been discarded by the scene).
        distance_to_intersection: Distance from the camera to the hit,
            +inf when nothing was hit.
    """

    object: "Object | None" = None
    distance_to_intersection: float = math.inf


@ti.kernel
def _reset(object_ids: ti.template(), distances: ti.template()):
    for i, j in distances:
        distances[i, j] = tm.inf
        object_ids[i, j] = NO_OBJECT


class PixelBuffer:
    """A grid of (object handle, distance) records, one per pixel."""

    def __init__(self) -> None:
        self.object_ids: Any = None
        self.distances: Any = None
        self._resolution = (0, 0)

    @property
    def is_initialised(self) -> bool:
        return self.object_ids is not None

    @property
    def resolution(self) -> tuple[int, int]:
        """(resolution_x, resolution_y), or (0, 0) before ``init``."""
        return self._resolution

    def init(self, resolution_x: int, resolution_y: int) -> None:
        """Size the buffer and reset every entry to "no hit".

        Fields are only reallocated when the resolution changes.

        Args:
            resolution_x: Number of pixel columns.
            resolution_y: Number of pixel rows.

        Raises:
            ValueError: If either resolution is not positive.
        """
        if resolution_x <= 0 or resolution_y <= 0:
            raise ValueError(
                f"Pixel buffer resolution must be positive, got {resolution_x}x{resolution_y}"
            )
        if self._resolution != (resolution_x, resolution_y):
            shape = (resolution_x, resolution_y)
            self.object_ids = ti.field(dtype=ti.i32, shape=shape)
            self.distances = ti.field(dtype=ti.f32, shape=shape)
            self._resolution = shape
        self.clear()

    def _check_initialised(self) -> None:
        """Check the buffer has been sized and raise if not."""
        if not self.is_initialised:
            raise RuntimeError("Pixel buffer not initialised. Call init() first.")

    def _check_pixel(self, i: int, j: int) -> None:
        width, height = self._resolution
        if not (0 <= i < width and 0 <= j < height):
            raise IndexError(f"Pixel ({i}, {j}) is outside the {width}x{height} buffer")

    def clear(self) -> None:
        """Reset every entry to (NO_OBJECT, +inf)."""
        self._check_initialised()
        _reset(self.object_ids, self.distances)

    def get_record(self, i: int, j: int) -> PixelRecord:
        self._check_initialised()
        self._check_pixel(i, j)
        return PixelRecord(int(self.object_ids[i, j]), float(self.distances[i, j]))

    def handles_numpy(self) -> npt.NDArray[np.int32]:
        """All handles as an array of shape (resolution_x, resolution_y)."""
        self._check_initialised()
        return self.object_ids.to_numpy()

    def distances_numpy(self) -> npt.NDArray[np.float32]:
        """All distances as an array of shape (resolution_x, resolution_y)."""
        self._check_initialised()
        return self.distances.to_numpy()
