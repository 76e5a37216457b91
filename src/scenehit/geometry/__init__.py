"""Geometry module for primitive solvers.

Components:
    sphere: Sphere data and near-root ray-sphere intersection
    plane: Plane data and ray-plane intersection
    shape: ShapeKind tags and the dispatching hit_shape function

All intersection routines are Taichi functions (@ti.func) meant to be called
from kernels. They follow the pattern:
    rec = hit_<primitive>(ray_origin, ray_direction, primitive, t_min, t_max)
and return a SurfaceHit whose hit field tells whether the ray hit.
"""

from .plane import PlaneData, hit_plane
from .shape import SHAPE_PARAM_COUNT, ShapeKind, hit_shape
from .sphere import SphereData, SurfaceHit, hit_sphere, miss_record

__all__ = [
    "SphereData",
    "SurfaceHit",
    "hit_sphere",
    "miss_record",
    "PlaneData",
    "hit_plane",
    "ShapeKind",
    "SHAPE_PARAM_COUNT",
    "hit_shape",
]
