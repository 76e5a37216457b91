"""Scene module for shapes, scene state and ray-scene queries.

Components:
    shapes: Sphere and Plane primitives and the Shape union
    intersection: HitRecord, HitBatch and the closest/any-hit kernels
    scene: Scene container with accumulation state and the default scene

Shapes are kept as ordinary Python objects so editing tools can change them
freely. They are packed into flat arrays on every query, so there is no GPU
copy to keep in sync.
"""

from .intersection import (
    HitBatch,
    HitRecord,
    any_hit,
    any_hits,
    closest_hit,
    closest_hits,
    pack_shapes,
)
from .scene import RESTART_FRAME_INDEX, Scene
from .shapes import Plane, Shape, Sphere

__all__ = [
    # Intersection module
    "HitRecord",
    "HitBatch",
    "closest_hit",
    "closest_hits",
    "any_hit",
    "any_hits",
    "pack_shapes",
    # Shapes module
    "Sphere",
    "Plane",
    "Shape",
    # Scene module
    "Scene",
    "RESTART_FRAME_INDEX",
]
