"""Scene container with nearest-hit queries and accumulation state.

A Scene is an ordered list of shapes scanned linearly for every ray, plus the
state a progressive renderer keeps between frames:

- accumulate: whether frames should be averaged over time
- frame_index: number of frames in the running sum; -1 requests a restart
- accumulation: the per-pixel running-sum buffer

The scene only carries this state. The averaging itself is done by the
renderer side (see scenehit.core.progressive). Any edit that invalidates
accumulated samples (a shape moved, a material changed, a viewport resize)
should be followed by resize().

Queries never mutate the scene. Edits must not overlap in-flight queries;
callers serialize them between frames.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from scenehit.core.ray import Interval, Ray
    >>> from scenehit.scene.scene import Scene
    >>> scene = Scene.default()
    >>> rec = scene.intersect(Ray((0, 0, 5), (0, 0, -1)), Interval.positive())
    >>> round(rec.t, 4)
    4.0
"""

import logging
from collections.abc import Iterable
from typing import Any

import numpy as np
import numpy.typing as npt

from scenehit.core.ray import Interval, Ray
from scenehit.materials.material import Material
from scenehit.scene.intersection import (
    HitBatch,
    HitRecord,
    any_hit,
    any_hits,
    closest_hit,
    closest_hits,
)
from scenehit.scene.shapes import Shape, Sphere

logger = logging.getLogger(__name__)

# Sentinel frame index asking the renderer to restart accumulation
RESTART_FRAME_INDEX = -1


class Scene:
    """An ordered collection of shapes plus progressive-rendering state.

    Attributes:
        shapes: The shapes in iteration order. Editing tools may add, remove
            or replace entries directly.
        accumulate: Whether the renderer averages frames over time.
        frame_index: Frames accumulated so far, or -1 to request a restart.
        accumulation: Per-pixel running-sum buffer, sized by the renderer.
    """

    def __init__(self, shapes: Iterable[Shape] = ()) -> None:
        """Create a scene from an ordered sequence of shapes.

        Args:
            shapes: The shapes to hold. Order only affects iteration cost
                and the tie-break between hits at equal t.
        """
        self.shapes: list[Shape] = list(shapes)
        self.accumulate = False
        self.frame_index = 0
        self.accumulation: npt.NDArray[np.float32] = np.zeros(0, dtype=np.float32)

    @classmethod
    def default(cls) -> "Scene":
        """Create the default scene.

        Two diffuse spheres in front of the camera, a large ground sphere
        below them and a large emissive sky sphere off to the side.
        """
        return cls(
            [
                Shape(
                    Sphere(
                        center=(0.0, 0.0, 0.0),
                        radius=1.0,
                        material=Material(albedo=(1.0, 0.0, 1.0), roughness=0.8),
                    )
                ),
                Shape(
                    Sphere(
                        center=(2.0, 0.0, -1.0),
                        radius=1.0,
                        material=Material(albedo=(0.2, 0.7, 0.1), roughness=0.6),
                    )
                ),
                Shape(
                    Sphere(
                        center=(0.0, -101.0, 0.0),
                        radius=100.0,
                        material=Material(albedo=(0.2, 0.3, 6.0), roughness=0.5),
                    )
                ),
                Shape(
                    Sphere(
                        center=(100.0, 101.0, -20.0),
                        radius=100.0,
                        material=Material(emission=3.0, emission_color=(0.9, 0.9, 0.7)),
                    )
                ),
            ]
        )

    # =========================================================================
    # Shape Editing
    # =========================================================================

    def add(self, shape: Shape) -> int:
        """Append a shape and return its index."""
        self.shapes.append(shape)
        logger.debug("Added %s shape at index %d", shape.kind.name.lower(), len(self.shapes) - 1)
        return len(self.shapes) - 1

    def remove(self, index: int) -> Shape:
        """Remove and return the shape at index.

        Raises:
            IndexError: If index is out of range.
        """
        shape = self.shapes.pop(index)
        logger.debug("Removed %s shape at index %d", shape.kind.name.lower(), index)
        return shape

    def __len__(self) -> int:
        return len(self.shapes)

    # =========================================================================
    # Accumulation State
    # =========================================================================

    def resize(self) -> None:
        """Request an accumulation restart.

        Sets frame_index to -1. The renderer discards or reallocates the
        accumulation buffer and starts averaging from frame 0 on its next
        pass. Calling it repeatedly has the same effect as calling it once.
        """
        self.frame_index = RESTART_FRAME_INDEX
        logger.debug("Accumulation restart requested")

    @property
    def needs_restart(self) -> bool:
        """Whether the renderer must restart accumulation before the next frame."""
        return self.frame_index < 0

    # =========================================================================
    # Intersection Queries
    # =========================================================================

    def intersect(self, ray: Ray, interval: Interval) -> HitRecord | None:
        """Find the closest hit of a ray among all shapes.

        Every shape is tested against the full interval. The smallest t wins;
        equal t values keep the shape that comes first in self.shapes.

        Args:
            ray: The ray to trace.
            interval: The valid t range.

        Returns:
            The closest HitRecord, or None if no shape was hit.
        """
        return closest_hit(self.shapes, ray, interval)

    def intersect_many(self, origins: Any, directions: Any, interval: Interval) -> HitBatch:
        """Find the closest hit for a batch of independent rays.

        Args:
            origins: Ray origins, array-like of shape (N, 3).
            directions: Ray directions, array-like of shape (N, 3).
            interval: The valid t range, shared by all rays.

        Returns:
            A HitBatch with one row per ray. Use batch.record(i, scene.shapes)
            to get a HitRecord for a single row.

        Raises:
            ValueError: If origins or directions are not (N, 3) with equal N.
        """
        return closest_hits(self.shapes, origins, directions, interval)

    def occluded(self, ray: Ray, interval: Interval) -> bool:
        """Check whether any shape blocks the ray within the interval."""
        return any_hit(self.shapes, ray, interval)

    def occluded_many(
        self, origins: Any, directions: Any, interval: Interval
    ) -> npt.NDArray[np.bool_]:
        """Check a batch of rays for any blocking shape (shadow rays).

        Raises:
            ValueError: If origins or directions are not (N, 3) with equal N.
        """
        return any_hits(self.shapes, origins, directions, interval)

    def __repr__(self) -> str:
        return (
            f"Scene(shapes={len(self.shapes)}, accumulate={self.accumulate}, "
            f"frame_index={self.frame_index})"
        )
