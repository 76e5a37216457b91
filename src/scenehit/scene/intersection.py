"""Closest-hit and any-hit queries over a flat list of shapes.

This module turns an ordered list of shapes into packed arrays and runs the
Taichi kernels that test rays against every shape. It is the single code path
behind Sphere.intersect, Plane.intersect, Shape.intersect and the Scene
queries: a single-ray query is a batch of one.

Reduction rules for closest-hit queries:
    - Every shape is tested against the same caller interval.
    - The hit with the smallest t wins.
    - Equal t values keep the shape that comes first in the list.

The outer loop over rays runs in parallel. Each ray scans the shapes
serially, so results do not depend on scheduling.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from scenehit.core.ray import Interval, Ray
    >>> from scenehit.scene.intersection import closest_hit
    >>> from scenehit.scene.shapes import Shape
    >>> shapes = [Shape.sphere(center=(0, 0, -3), radius=1.0)]
    >>> rec = closest_hit(shapes, Ray((0, 0, 0), (0, 0, -1)), Interval.positive())
    >>> round(rec.t, 4)
    2.0
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from scenehit.core.ray import Interval, Ray
from scenehit.geometry.shape import SHAPE_PARAM_COUNT, hit_shape
from scenehit.geometry.sphere import miss_record
from scenehit.materials.material import Material

if TYPE_CHECKING:
    from scenehit.scene.shapes import Shape

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@dataclass(frozen=True)
class HitRecord:
    """Result of a successful intersection query.

    Constructed fresh per query and never mutated. The material is a copy, so
    the record stays valid after the scene is edited.

    Attributes:
        point: World-space position of the intersection.
        normal: Surface normal at the point. Unit length and outward for
            spheres, exactly as stored for planes.
        t: Ray parameter at the hit.
        material: Copy of the hit surface's material.
        shape_index: Index of the hit shape in the queried list.
    """

    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    t: float
    material: Material
    shape_index: int = -1


@dataclass
class HitBatch:
    """Closest-hit results for a batch of rays.

    Row i holds the result for ray i. Misses have shape_index -1 and t = inf;
    their point and normal rows are zero.

    Attributes:
        shape_index: Index of the hit shape per ray, -1 on miss (int32, (N,)).
        t: Ray parameter per ray (float32, (N,)).
        point: Hit points (float32, (N, 3)).
        normal: Hit normals (float32, (N, 3)).
    """

    shape_index: npt.NDArray[np.int32]
    t: npt.NDArray[np.float32]
    point: npt.NDArray[np.float32]
    normal: npt.NDArray[np.float32]

    @property
    def hit(self) -> npt.NDArray[np.bool_]:
        """Boolean mask of rays that hit something."""
        return self.shape_index >= 0

    def __len__(self) -> int:
        return int(self.shape_index.shape[0])

    def record(self, ray_index: int, shapes: Sequence["Shape"]) -> HitRecord | None:
        """Convert one row into a HitRecord.

        Args:
            ray_index: The row to convert.
            shapes: The shape list the batch was computed against. The hit
                shape's material is copied from it.

        Returns:
            The HitRecord for that ray, or None if the ray missed.
        """
        index = int(self.shape_index[ray_index])
        if index < 0:
            return None
        point = self.point[ray_index]
        normal = self.normal[ray_index]
        return HitRecord(
            point=(float(point[0]), float(point[1]), float(point[2])),
            normal=(float(normal[0]), float(normal[1]), float(normal[2])),
            t=float(self.t[ray_index]),
            material=shapes[index].material.copy(),
            shape_index=index,
        )


def pack_shapes(
    shapes: Sequence["Shape"],
) -> tuple[npt.NDArray[np.int32], npt.NDArray[np.float32]]:
    """Pack shapes into the kind and params arrays read by the kernels.

    Args:
        shapes: The shapes to pack, in iteration order.

    Returns:
        Tuple of (kinds, params) with shapes (M,) and (M, SHAPE_PARAM_COUNT).
    """
    kinds = np.empty(len(shapes), dtype=np.int32)
    params = np.zeros((len(shapes), SHAPE_PARAM_COUNT), dtype=np.float32)
    for i, shape in enumerate(shapes):
        kind, row = shape.pack()
        kinds[i] = int(kind)
        params[i] = row
    return kinds, params


def _as_ray_array(values: Any, name: str) -> npt.NDArray[np.float32]:
    """Convert ray origins or directions into a contiguous (N, 3) float32 array."""
    array = np.ascontiguousarray(values, dtype=np.float32)
    if array.ndim != 2 or array.shape[1] != 3:
        raise ValueError(f"{name} must have shape (N, 3), got {array.shape}")
    return array


def _ray_arrays(
    origins: Any, directions: Any
) -> tuple[npt.NDArray[np.float32], npt.NDArray[np.float32]]:
    origins_arr = _as_ray_array(origins, "origins")
    directions_arr = _as_ray_array(directions, "directions")
    if origins_arr.shape[0] != directions_arr.shape[0]:
        raise ValueError(
            f"origins and directions differ in length "
            f"({origins_arr.shape[0]} != {directions_arr.shape[0]})"
        )
    return origins_arr, directions_arr


@ti.kernel
def _closest_hits_kernel(
    kinds: ti.types.ndarray(dtype=ti.i32, ndim=1),
    params: ti.types.ndarray(dtype=ti.f32, ndim=2),
    origins: ti.types.ndarray(dtype=ti.f32, ndim=2),
    directions: ti.types.ndarray(dtype=ti.f32, ndim=2),
    t_min: ti.f32,
    t_max: ti.f32,
    out_index: ti.types.ndarray(dtype=ti.i32, ndim=1),
    out_t: ti.types.ndarray(dtype=ti.f32, ndim=1),
    out_point: ti.types.ndarray(dtype=ti.f32, ndim=2),
    out_normal: ti.types.ndarray(dtype=ti.f32, ndim=2),
):
    """Find the closest hit for every ray.

    Args:
        kinds: ShapeKind tag per shape.
        params: Packed shape parameters, one row per shape.
        origins: Ray origins, one row per ray.
        directions: Ray directions, one row per ray.
        t_min: Minimum t value to consider a valid hit (inclusive).
        t_max: Maximum t value to consider a valid hit (exclusive).
        out_index: Receives the hit shape index per ray, or -1.
        out_t: Receives the hit t per ray.
        out_point: Receives the hit point per ray.
        out_normal: Receives the hit normal per ray.
    """
    for r in range(origins.shape[0]):
        ray_origin = vec3(origins[r, 0], origins[r, 1], origins[r, 2])
        ray_direction = vec3(directions[r, 0], directions[r, 1], directions[r, 2])

        closest = miss_record()
        closest_index = -1

        for i in range(kinds.shape[0]):
            anchor = vec3(params[i, 0], params[i, 1], params[i, 2])
            axis = vec3(params[i, 3], params[i, 4], params[i, 5])
            rec = hit_shape(
                kinds[i], anchor, axis, params[i, 6], ray_origin, ray_direction, t_min, t_max
            )
            # Strict comparison keeps the earlier shape on ties
            if rec.hit == 1 and (closest_index < 0 or rec.t < closest.t):
                closest = rec
                closest_index = i

        out_index[r] = closest_index
        out_t[r] = closest.t
        for k in ti.static(range(3)):
            out_point[r, k] = closest.point[k]
            out_normal[r, k] = closest.normal[k]


@ti.kernel
def _any_hits_kernel(
    kinds: ti.types.ndarray(dtype=ti.i32, ndim=1),
    params: ti.types.ndarray(dtype=ti.f32, ndim=2),
    origins: ti.types.ndarray(dtype=ti.f32, ndim=2),
    directions: ti.types.ndarray(dtype=ti.f32, ndim=2),
    t_min: ti.f32,
    t_max: ti.f32,
    out_hit: ti.types.ndarray(dtype=ti.i32, ndim=1),
):
    """Test whether every ray hits any shape (shadow ray query).

    Stops testing further shapes for a ray once one hit is found.
    """
    for r in range(origins.shape[0]):
        ray_origin = vec3(origins[r, 0], origins[r, 1], origins[r, 2])
        ray_direction = vec3(directions[r, 0], directions[r, 1], directions[r, 2])

        hit_any = 0
        for i in range(kinds.shape[0]):
            if hit_any == 0:
                anchor = vec3(params[i, 0], params[i, 1], params[i, 2])
                axis = vec3(params[i, 3], params[i, 4], params[i, 5])
                rec = hit_shape(
                    kinds[i], anchor, axis, params[i, 6], ray_origin, ray_direction, t_min, t_max
                )
                if rec.hit == 1:
                    hit_any = 1

        out_hit[r] = hit_any


def closest_hits(
    shapes: Sequence["Shape"],
    origins: Any,
    directions: Any,
    interval: Interval,
) -> HitBatch:
    """Find the closest hit of each ray against a list of shapes.

    Args:
        shapes: The shapes to test, in iteration order.
        origins: Ray origins, array-like of shape (N, 3).
        directions: Ray directions, array-like of shape (N, 3).
        interval: The valid t range, shared by all rays.

    Returns:
        A HitBatch with one row per ray.

    Raises:
        ValueError: If origins or directions are not (N, 3) with equal N.
    """
    origins_arr, directions_arr = _ray_arrays(origins, directions)
    num_rays = origins_arr.shape[0]

    out_index = np.full(num_rays, -1, dtype=np.int32)
    out_t = np.zeros(num_rays, dtype=np.float32)
    out_point = np.zeros((num_rays, 3), dtype=np.float32)
    out_normal = np.zeros((num_rays, 3), dtype=np.float32)

    if num_rays > 0 and len(shapes) > 0:
        kinds, params = pack_shapes(shapes)
        _closest_hits_kernel(
            kinds,
            params,
            origins_arr,
            directions_arr,
            float(interval.t_min),
            float(interval.t_max),
            out_index,
            out_t,
            out_point,
            out_normal,
        )

    out_t[out_index < 0] = np.inf
    return HitBatch(shape_index=out_index, t=out_t, point=out_point, normal=out_normal)


def closest_hit(shapes: Sequence["Shape"], ray: Ray, interval: Interval) -> HitRecord | None:
    """Find the closest hit of a single ray against a list of shapes.

    Args:
        shapes: The shapes to test, in iteration order.
        ray: The ray to trace.
        interval: The valid t range.

    Returns:
        The closest HitRecord, or None if nothing was hit.
    """
    batch = closest_hits(shapes, [ray.origin], [ray.direction], interval)
    return batch.record(0, shapes)


def any_hits(
    shapes: Sequence["Shape"],
    origins: Any,
    directions: Any,
    interval: Interval,
) -> npt.NDArray[np.bool_]:
    """Test whether each ray hits any of the shapes.

    Args:
        shapes: The shapes to test.
        origins: Ray origins, array-like of shape (N, 3).
        directions: Ray directions, array-like of shape (N, 3).
        interval: The valid t range, shared by all rays.

    Returns:
        Boolean array of shape (N,).

    Raises:
        ValueError: If origins or directions are not (N, 3) with equal N.
    """
    origins_arr, directions_arr = _ray_arrays(origins, directions)
    out_hit = np.zeros(origins_arr.shape[0], dtype=np.int32)

    if origins_arr.shape[0] > 0 and len(shapes) > 0:
        kinds, params = pack_shapes(shapes)
        _any_hits_kernel(
            kinds,
            params,
            origins_arr,
            directions_arr,
            float(interval.t_min),
            float(interval.t_max),
            out_hit,
        )

    return out_hit.astype(bool)


def any_hit(shapes: Sequence["Shape"], ray: Ray, interval: Interval) -> bool:
    """Test whether a single ray hits any of the shapes."""
    return bool(any_hits(shapes, [ray.origin], [ray.direction], interval)[0])
