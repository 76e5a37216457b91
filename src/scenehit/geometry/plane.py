"""Infinite plane primitive with ray-plane intersection.

A plane is defined by any point on it and a normal vector. The normal does not
have to be unit length and is reported back unchanged: it is neither
normalized nor flipped toward the incoming ray.

The ray-plane intersection is found by solving:
    dot(normal, ray_origin + t * ray_direction - point) = 0

which gives:
    t = dot(normal, point - ray_origin) / dot(normal, ray_direction)

There is no separate branch for rays parallel to the plane. The division then
yields +-inf or NaN, and the interval test rejects both.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from scenehit.geometry.plane import PlaneData, hit_plane
    >>> # Ground plane at y=0
    >>> plane = PlaneData(point=ti.math.vec3(0, 0, 0), normal=ti.math.vec3(0, 1, 0))
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from scenehit.core.ray import interval_contains, ray_at

from .sphere import SurfaceHit, miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class PlaneData:
    """An infinite plane defined by a point and a normal.

    Attributes:
        point: Any point on the plane (vec3).
        normal: The plane normal (vec3). Must be nonzero.
    """

    point: vec3
    normal: vec3


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: PlaneData,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SurfaceHit:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        plane: The plane to test intersection against.
        t_min: Minimum t value to consider a valid hit (inclusive).
        t_max: Maximum t value to consider a valid hit (exclusive).

    Returns:
        A SurfaceHit containing intersection information. Check hit field
        to determine if intersection occurred.
    """
    t = tm.dot(plane.normal, plane.point - ray_origin) / tm.dot(plane.normal, ray_direction)

    result = miss_record()

    if interval_contains(t_min, t_max, t):
        result = SurfaceHit(
            hit=1,
            t=t,
            point=ray_at(ray_origin, ray_direction, t),
            normal=plane.normal,
        )

    return result
