"""Shape kind tags and the dispatching hit_shape Taichi function.

Shapes reach the intersection kernels as a flat list of (kind, params) rows.
The kind is a ShapeKind tag and params is a fixed-width float row whose
meaning depends on the kind:

    index   SPHERE      PLANE
    0..2    center      point
    3..5    (unused)    normal
    6       radius      (unused)

hit_shape reads the tag and forwards to exactly one primitive solver. The set
of kinds is closed: a new primitive needs a ShapeKind member, a solver, one
arm here and one packing arm in scenehit.scene.shapes.
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from .plane import PlaneData, hit_plane
from .sphere import SphereData, SurfaceHit, hit_sphere, miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class ShapeKind(IntEnum):
    """Enumeration of supported primitive kinds.

    Used as the tag of the shape union, both for Python-side packing and for
    dispatch inside the intersection kernels.
    """

    SPHERE = 0
    PLANE = 1


# Width of one packed params row
SHAPE_PARAM_COUNT = 7


@ti.func
def hit_shape(
    kind: ti.i32,
    anchor: vec3,
    axis: vec3,
    radius: ti.f32,
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SurfaceHit:
    """Dispatch a ray test to the solver selected by the shape kind.

    Args:
        kind: The ShapeKind tag of the shape.
        anchor: Sphere center or plane point (params 0..2).
        axis: Plane normal (params 3..5), ignored for spheres.
        radius: Sphere radius (param 6), ignored for planes.
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Minimum t value to consider a valid hit (inclusive).
        t_max: Maximum t value to consider a valid hit (exclusive).

    Returns:
        The SurfaceHit produced by the selected solver, or a miss record for
        an unknown kind.
    """
    result = miss_record()

    if kind == int(ShapeKind.SPHERE):
        sphere = SphereData(center=anchor, radius=radius)
        result = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)

    elif kind == int(ShapeKind.PLANE):
        plane = PlaneData(point=anchor, normal=axis)
        result = hit_plane(ray_origin, ray_direction, plane, t_min, t_max)

    return result
