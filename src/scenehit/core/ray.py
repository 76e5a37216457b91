"""Ray and parameter interval types for intersection queries.

This module provides the Python-scope Ray and Interval value types handed to
scene queries, together with the Taichi functions the intersection kernels
use to evaluate rays and test the valid parameter range.

A ray is the parametric line origin + t * direction. The direction is not
required to be normalized; every solver is correct for any nonzero magnitude.

An interval is the half-open range [t_min, t_max) of accepted t values.
Callers supply a sane range, typically [epsilon, +inf) to skip
self-intersections and hits behind the origin.

Example:
    >>> from scenehit.core.ray import Interval, Ray
    >>> ray = Ray(origin=(0.0, 0.0, 5.0), direction=(0.0, 0.0, -1.0))
    >>> ray.at(2.0)
    (0.0, 0.0, 3.0)
    >>> Interval.positive().contains(2.0)
    True
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Default lower bound used to skip hits at the ray origin
DEFAULT_EPSILON = 1e-3


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray as (x, y, z).
        direction: The direction vector of the ray as (x, y, z). Need not be
            normalized, but must be nonzero for meaningful results.
    """

    origin: tuple[float, float, float]
    direction: tuple[float, float, float]

    def at(self, t: float) -> tuple[float, float, float]:
        """Compute the point along the ray at parameter t."""
        ox, oy, oz = self.origin
        dx, dy, dz = self.direction
        return (ox + t * dx, oy + t * dy, oz + t * dz)


@dataclass(frozen=True)
class Interval:
    """Half-open range [t_min, t_max) of valid ray parameters.

    The bounds are not validated. An interval with t_min > t_max simply
    contains nothing.

    Attributes:
        t_min: Smallest accepted t (inclusive).
        t_max: Upper bound on t (exclusive). Defaults to +inf.
    """

    t_min: float = 0.0
    t_max: float = math.inf

    @classmethod
    def positive(cls, epsilon: float = DEFAULT_EPSILON) -> "Interval":
        """Create the usual [epsilon, +inf) interval for primary and bounce rays."""
        return cls(t_min=epsilon, t_max=math.inf)

    def contains(self, t: float) -> bool:
        """Check whether t lies in the interval.

        NaN is never contained, and neither is +inf when t_max is +inf.
        """
        return self.t_min <= t < self.t_max


@ti.func
def ray_at(ray_origin: vec3, ray_direction: vec3, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t: The parameter value.

    Returns:
        The point ray_origin + t * ray_direction.
    """
    return ray_origin + t * ray_direction


@ti.func
def interval_contains(t_min: ti.f32, t_max: ti.f32, t: ti.f32) -> ti.i32:
    """Test t against the half-open interval [t_min, t_max).

    Relies on IEEE comparison semantics: a NaN t compares false on both
    sides, so degenerate solves (zero direction, parallel plane) drop out
    here. Taichi must run with fast_math disabled for this to hold, which
    init_runtime() guarantees.

    Args:
        t_min: Inclusive lower bound.
        t_max: Exclusive upper bound.
        t: The candidate ray parameter.

    Returns:
        1 if t is inside the interval, 0 otherwise.
    """
    return t >= t_min and t < t_max
