"""Scene module for assembling object lists.

The renderer never owns scene objects: a scene is simply an ordered list of
primitives supplied to the camera each frame. This module provides a ready-made
demo scene and the camera placement that frames it.

Components:
    demo: Demo scene factory (floor, back wall, three spheres)
"""

from .demo import DemoCameraSettings, create_demo_scene

__all__ = [
    "DemoCameraSettings",
    "create_demo_scene",
]
