"""Matplotlib-based preview display for rendered frames.

This module shows the colour buffer of a completed render pass in a
Matplotlib window, optionally next to a depth view built from the pixel
buffer's hit distances.

Example:
    >>> from raycaster.preview.display import show_preview
    >>> camera.update_pixel_buffer(objects)
    >>> show_preview(camera, show_depth=True)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from raycaster.camera.camera import Camera


def depth_image(camera: Camera) -> npt.NDArray[np.float32]:
    """Normalised depth view of the last render pass.

    Near hits are bright and far hits dark; pixels with no hit are 0.

    Args:
        camera: The camera whose pixel buffer holds the frame.

    Returns:
        Array of shape (resolution_y, resolution_x) with values in [0, 1],
        row 0 at the top of the view plane.
    """
    distances = camera.pixel_buffer.distances_numpy().T[::-1]
    hit = np.isfinite(distances)

    result = np.zeros(distances.shape, dtype=np.float32)
    if not np.any(hit):
        return result

    near = float(distances[hit].min())
    far = float(distances[hit].max())
    span = far - near
    if span > 0.0:
        result[hit] = 1.0 - 0.8 * (distances[hit] - near) / span
    else:
        result[hit] = 1.0
    return result


def show_preview(
    camera: Camera,
    *,
    show_depth: bool = False,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display the current frame as a Matplotlib figure.

    Args:
        camera: The camera whose pixel buffer holds the frame.
        show_depth: Also show the normalised depth view side by side.
        title: Custom title (default shows the resolution).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    image = camera.get_colour_buffer()
    plane = camera.view_plane

    if title is None:
        title = f"Render Preview - {plane.resolution_x}x{plane.resolution_y}"

    if show_depth:
        fig, axes = plt.subplots(1, 2, figsize=(figsize[0] * 2, figsize[1]))
        axes[0].imshow(image)
        axes[0].set_title(title)
        axes[0].axis("off")
        axes[1].imshow(depth_image(camera), cmap="gray", vmin=0.0, vmax=1.0)
        axes[1].set_title("Depth")
        axes[1].axis("off")
    else:
        fig, ax = plt.subplots(1, 1, figsize=figsize)
        ax.imshow(image)
        ax.set_title(title)
        ax.axis("off")

    plt.tight_layout()
    plt.show(block=block)
