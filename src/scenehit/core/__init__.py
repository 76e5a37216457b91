"""Core types shared by every query.

Components:
    ray: Ray and Interval value types, plus ray_at and interval_contains
        Taichi functions used by the solvers
    progressive: Running-average accumulation over a Scene's buffer

Rays are plain Python values at the API boundary. Inside kernels they are
passed around as separate origin and direction vectors.
"""

from .ray import DEFAULT_EPSILON, Interval, Ray, interval_contains, ray_at, vec3

# Note: progressive is NOT imported here to avoid circular imports.
# Import it directly from scenehit.core.progressive when needed.

__all__ = [
    "Ray",
    "Interval",
    "DEFAULT_EPSILON",
    "ray_at",
    "interval_contains",
    "vec3",
]
