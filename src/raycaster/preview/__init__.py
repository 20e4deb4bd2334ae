"""Preview module for output and visualization.

This module handles frame output once a render pass has completed:

Components:
    display: Matplotlib-based preview window and depth view
    export: PNG export via Pillow

Both read the camera's pixel buffer through ``Camera.get_colour_buffer`` and
never trigger a render pass themselves.

Example:
    >>> from raycaster.preview import save_png, show_preview
    >>> camera.update_pixel_buffer(objects)
    >>> save_png(camera, "frame.png")
    >>> show_preview(camera)
"""

from raycaster.preview.display import depth_image, show_preview
from raycaster.preview.export import save_png, save_png_from_array

__all__ = [
    # Display functions
    "show_preview",
    "depth_image",
    # Export functions
    "save_png",
    "save_png_from_array",
]
