"""Taichi-based ray-casting renderer.

This package casts one ray per pixel from a camera into a scene of planes and
spheres, keeps the nearest hit per pixel and resolves a flat colour for it:
- Double-precision host-side geometry with homogeneous affine transforms
- Per-object footprint kernels written in Taichi
- Nearest-hit pixel buffer with weak back-references to scene objects

Subpackages:
    core: Points, vectors, matrices, rays and colours
    geometry: Scene object interface and primitives (plane, sphere)
    camera: View plane, pixel buffer and the camera render pass
    scene: Demo scene construction
    preview: PNG export and Matplotlib preview
"""

__version__ = "0.1.0"
