"""Sphere primitive with near-root ray-sphere intersection.

This module provides the SphereData dataclass, the SurfaceHit record shared by
all primitive solvers, and the hit_sphere Taichi function.

The solver uses the half-b form of the quadratic. With oc = origin - center:

    a = dot(direction, direction)
    b = dot(oc, direction)          (half of the traditional b)
    c = dot(oc, oc) - radius^2
    discriminant = b^2 - a*c

and only the near root t = (-b - sqrt(discriminant)) / a is tested. The far
root is never considered, so spheres are opaque from the outside only: a ray
that starts inside a sphere does not hit it. Renderers built on this module
rely on that behavior, so it is kept as is.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from scenehit.geometry.sphere import SphereData, hit_sphere
    >>> sphere = SphereData(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from scenehit.core.ray import interval_contains

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class SphereData:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere. Non-positive radii produce no hits
            or degenerate ones; they are not rejected.
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class SurfaceHit:
    """Record of a ray-primitive intersection inside a kernel.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The surface normal at the intersection point. Unit length and
            outward for spheres, exactly as stored for planes.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def miss_record() -> SurfaceHit:
    """Create a SurfaceHit indicating no intersection."""
    return SurfaceHit(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: SphereData,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SurfaceHit:
    """Test for ray-sphere intersection at the near root.

    The hit point is first computed relative to the center, where its
    normalized value is the outward normal, then moved back to world space.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        sphere: The sphere to test intersection against.
        t_min: Minimum t value to consider a valid hit (inclusive).
        t_max: Maximum t value to consider a valid hit (exclusive).

    Returns:
        A SurfaceHit containing intersection information. Check hit field
        to determine if intersection occurred.
    """
    oc = ray_origin - sphere.center

    a = tm.dot(ray_direction, ray_direction)
    b = tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = b * b - a * c

    result = miss_record()

    if discriminant >= 0.0:
        t = (-b - ti.sqrt(discriminant)) / a
        if interval_contains(t_min, t_max, t):
            local_point = oc + ray_direction * t
            result = SurfaceHit(
                hit=1,
                t=t,
                point=local_point + sphere.center,
                normal=tm.normalize(local_point),
            )

    return result
