"""View plane configuration and pixel footprints.

The view plane is the virtual rectangle in camera space through which primary
rays are cast. It sits ``distance`` units along the camera's forward (+z) axis
and spans [-half_width, half_width] x [-half_height, half_height]. Its
resolution discretises it into pixels; pixel sizes are derived from the
extents and resolution.

Example:
    >>> plane = ViewPlane(resolution_x=640, resolution_y=480,
    ...                   half_width=4.0, half_height=3.0, distance=5.0)
    >>> plane.pixel_width
    0.0125
"""

from dataclasses import dataclass
from typing import NamedTuple


class Footprint(NamedTuple):
    """Half-open pixel ranges an object may cover.

    Attributes:
        x_start: First column (inclusive).
        x_end: Last column (exclusive).
        y_start: First row (inclusive).
        y_end: Last row (exclusive).
    """

    x_start: int
    x_end: int
    y_start: int
    y_end: int

    @property
    def is_empty(self) -> bool:
        return self.x_start >= self.x_end or self.y_start >= self.y_end

    @property
    def pixel_count(self) -> int:
        if self.is_empty:
            return 0
        return (self.x_end - self.x_start) * (self.y_end - self.y_start)


@dataclass(frozen=True)
class ViewPlane:
    """Resolution and extents of the camera's view plane.

    Attributes:
        resolution_x: Number of pixel columns (positive).
        resolution_y: Number of pixel rows (positive).
        half_width: Half the plane width in camera-space units (positive).
        half_height: Half the plane height in camera-space units (positive).
        distance: Distance from the camera origin along +z (positive).
    """

    resolution_x: int = 512
    resolution_y: int = 512
    half_width: float = 3.0
    half_height: float = 3.0
    distance: float = 5.0

    def __post_init__(self) -> None:
        for name in ("resolution_x", "resolution_y"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        for name in ("half_width", "half_height", "distance"):
            value = getattr(self, name)
            if not value > 0.0:
                raise ValueError(f"{name} must be positive, got {value!r}")

    @property
    def pixel_width(self) -> float:
        return 2.0 * self.half_width / self.resolution_x

    @property
    def pixel_height(self) -> float:
        return 2.0 * self.half_height / self.resolution_y

    @property
    def full_footprint(self) -> Footprint:
        """Footprint covering every pixel."""
        return Footprint(0, self.resolution_x, 0, self.resolution_y)

    def contains_pixel(self, i: int, j: int) -> bool:
        return 0 <= i < self.resolution_x and 0 <= j < self.resolution_y

    def ray_parameters(self) -> tuple[float, float, float, float, float]:
        """Arguments for ``ray_direction_through_pixel`` in kernel launches.

        Returns:
            (pixel_width, pixel_height, half_width, half_height, distance)
        """
        return (
            self.pixel_width,
            self.pixel_height,
            float(self.half_width),
            float(self.half_height),
            float(self.distance),
        )
