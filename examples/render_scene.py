#!/usr/bin/env python3
"""Render the demo scene.

This script demonstrates end-to-end ray casting of the demo scene: it creates
the scene, places the camera, runs one render pass and saves the frame.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH       View plane resolution in x (default: 512)
    --height HEIGHT     View plane resolution in y (default: 512)
    --output OUTPUT     Output file path (default: demo_scene.png)
    --camera-z Z        Camera distance along +z (default: 12.0)
    --yaw DEGREES       Camera rotation about the y axis (default: 0.0)
    --preview           Show a Matplotlib preview window after rendering
    --verbose           Log per-pass diagnostics

Example:
    python -m examples.render_scene --width 256 --height 256 --yaw 10
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_scene")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=512,
        help="View plane resolution in x (default: 512)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=512,
        help="View plane resolution in y (default: 512)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="demo_scene.png",
        help="Output file path (default: demo_scene.png)",
    )
    parser.add_argument(
        "--camera-z",
        type=float,
        default=12.0,
        help="Camera distance along +z (default: 12.0)",
    )
    parser.add_argument(
        "--yaw",
        type=float,
        default=0.0,
        help="Camera rotation about the y axis in degrees (default: 0.0)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show a Matplotlib preview window after rendering",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-pass diagnostics",
    )
    return parser.parse_args()


def render_scene(
    width: int = 512,
    height: int = 512,
    output_path: str = "demo_scene.png",
    camera_z: float = 12.0,
    yaw_degrees: float = 0.0,
    preview: bool = False,
) -> Path:
    """Render the demo scene and save it to file.

    Args:
        width: View plane resolution in x.
        height: View plane resolution in y.
        output_path: Output file path (PNG).
        camera_z: Camera distance along +z.
        yaw_degrees: Camera rotation about the y axis.
        preview: Show a Matplotlib window once the frame is saved.

    Returns:
        Path to the saved image file.

    Raises:
        RuntimeError: If the render pass reports failure.
    """
    # Lazy imports to allow Taichi initialization first
    from raycaster.camera import Camera, ViewPlane
    from raycaster.preview.export import save_png
    from raycaster.scene.demo import create_demo_scene

    # Keep square pixels: scale the half height with the aspect ratio
    half_width = 3.0
    view_plane = ViewPlane(
        resolution_x=width,
        resolution_y=height,
        half_width=half_width,
        half_height=half_width * height / width,
        distance=5.0,
    )

    logger.info("Creating demo scene (%dx%d)...", width, height)
    objects, settings = create_demo_scene(view_plane)

    camera = Camera(settings.view_plane, rotation=settings.rotation)
    x, y, _ = settings.position
    camera.init((x, y, camera_z))
    camera.rotate(dy=math.radians(yaw_degrees))

    start_time = time.time()
    if not camera.update_pixel_buffer(objects):
        raise RuntimeError("Render pass failed: camera pixel buffer is not initialised")
    logger.info("Render pass took %.3fs", time.time() - start_time)

    output_file = save_png(camera, output_path)
    logger.info("Saved to: %s", output_file.absolute())

    if preview:
        from raycaster.preview.display import show_preview

        show_preview(camera, show_depth=True)

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize Taichi
    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        logger.info("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        logger.info("Using CPU backend")

    try:
        render_scene(
            width=args.width,
            height=args.height,
            output_path=args.output,
            camera_z=args.camera_z,
            yaw_degrees=args.yaw,
            preview=args.preview,
        )
        return 0
    except Exception:
        logger.exception("Rendering failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
