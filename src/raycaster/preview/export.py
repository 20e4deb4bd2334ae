"""Image export utilities for rendered frames.

This module saves the colour buffer of a completed render pass to disk.

Supported formats:
    - PNG (8-bit RGBA or RGB via Pillow)

Example:
    >>> from raycaster.preview.export import save_png
    >>> camera.update_pixel_buffer(objects)
    >>> save_png(camera, "frame.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from raycaster.camera.camera import Camera

logger = logging.getLogger(__name__)


def save_png(
    camera: Camera,
    filepath: str | Path,
    *,
    alpha: bool = False,
) -> Path:
    """Save the camera's current frame as a PNG file.

    Must be called after a successful ``update_pixel_buffer``.

    Args:
        camera: The camera whose pixel buffer holds the frame.
        filepath: Output file path (should end in .png).
        alpha: Keep the alpha channel (RGBA) instead of writing RGB.

    Returns:
        The path written.
    """
    return save_png_from_array(camera.get_colour_buffer(), filepath, alpha=alpha)


def save_png_from_array(
    image: npt.NDArray[np.uint8],
    filepath: str | Path,
    *,
    alpha: bool = False,
) -> Path:
    """Save an RGBA uint8 array of shape (H, W, 4) as a PNG file.

    Args:
        image: Frame as returned by ``Camera.get_colour_buffer``.
        filepath: Output file path (should end in .png).
        alpha: Keep the alpha channel (RGBA) instead of writing RGB.

    Returns:
        The path written.

    Raises:
        ValueError: If the array is not (H, W, 4) uint8.
    """
    if image.ndim != 3 or image.shape[2] != 4:
        raise ValueError(f"Expected an (H, W, 4) RGBA image, got shape {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"Expected a uint8 image, got {image.dtype}")

    if alpha:
        pil_image = PILImage.fromarray(image)
    else:
        pil_image = PILImage.fromarray(np.ascontiguousarray(image[:, :, :3]))

    path = Path(filepath)
    pil_image.save(path)
    logger.info("Saved %dx%d frame to %s", image.shape[1], image.shape[0], path)
    return path
