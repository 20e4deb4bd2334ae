"""Camera module for view plane projection and per-pixel hit resolution.

Components:
    view_plane: View plane configuration and pixel footprints
    pixel_buffer: Per-pixel nearest-hit records (Taichi fields)
    camera: Camera transform pipeline, ray generation and render pass

Camera responsibilities:
    - Maintain the camera-to-world transform (cached behind a dirty flag)
    - Generate one primary ray per pixel in camera space
    - Move scene objects into camera space for a pass and back afterwards
    - Record the nearest object per pixel and resolve pixel colours

Pixel coordinates are integer grid indices:
    i in [0, resolution_x): left to right across the view plane
    j in [0, resolution_y): bottom to top across the view plane
"""

from .camera import FOOTPRINT_PADDING, Camera, compute_footprint
from .pixel_buffer import NO_OBJECT, ObjectInfo, PixelBuffer, PixelRecord
from .view_plane import Footprint, ViewPlane

__all__ = [
    "Camera",
    "compute_footprint",
    "FOOTPRINT_PADDING",
    "PixelBuffer",
    "PixelRecord",
    "ObjectInfo",
    "NO_OBJECT",
    "ViewPlane",
    "Footprint",
]
