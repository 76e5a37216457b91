"""Unit tests for the ray module.

Tests cover:
- Ray value type and Ray.at
- Interval containment, including NaN and infinite t
- ray_at and interval_contains Taichi functions
"""

import dataclasses
import math

import pytest
import taichi as ti


class TestRayBasics:
    """Tests for the Python-scope Ray type."""

    def test_ray_at_origin(self):
        """Test Ray.at returns origin when t=0."""
        from scenehit.core.ray import Ray

        ray = Ray(origin=(1.0, 2.0, 3.0), direction=(0.0, 0.0, -1.0))
        assert ray.at(0.0) == (1.0, 2.0, 3.0)

    def test_ray_at_unnormalized_direction(self):
        """Test Ray.at scales by the raw direction length."""
        from scenehit.core.ray import Ray

        ray = Ray(origin=(0.0, 0.0, 0.0), direction=(2.0, 0.0, 0.0))
        assert ray.at(1.5) == (3.0, 0.0, 0.0)

    def test_ray_is_immutable(self):
        """Test that rays are frozen values."""
        from scenehit.core.ray import Ray

        ray = Ray(origin=(0.0, 0.0, 0.0), direction=(1.0, 0.0, 0.0))
        with pytest.raises(dataclasses.FrozenInstanceError):
            ray.origin = (1.0, 1.0, 1.0)


class TestInterval:
    """Tests for the Python-scope Interval type."""

    def test_lower_bound_inclusive(self):
        """Test that t_min itself is contained."""
        from scenehit.core.ray import Interval

        assert Interval(1.0, 2.0).contains(1.0)

    def test_upper_bound_exclusive(self):
        """Test that t_max itself is not contained."""
        from scenehit.core.ray import Interval

        assert not Interval(1.0, 2.0).contains(2.0)

    def test_nan_not_contained(self):
        """Test that NaN is never contained."""
        from scenehit.core.ray import Interval

        assert not Interval(0.0, math.inf).contains(math.nan)

    def test_infinity_not_contained(self):
        """Test that +inf is outside [eps, +inf) and -inf below it."""
        from scenehit.core.ray import Interval

        interval = Interval.positive()
        assert not interval.contains(math.inf)
        assert not interval.contains(-math.inf)

    def test_positive_interval(self):
        """Test Interval.positive builds [epsilon, +inf)."""
        from scenehit.core.ray import DEFAULT_EPSILON, Interval

        interval = Interval.positive()
        assert interval.t_min == DEFAULT_EPSILON
        assert interval.t_max == math.inf
        assert not interval.contains(0.0)
        assert interval.contains(1e6)

    def test_inverted_interval_contains_nothing(self):
        """Test that an interval with t_min > t_max is empty, not an error."""
        from scenehit.core.ray import Interval

        interval = Interval(5.0, 1.0)
        assert not interval.contains(3.0)


class TestTaichiFunctions:
    """Tests for the ray Taichi functions."""

    def test_ray_at_kernel(self):
        """Test ray_at computes correct point along ray."""
        from scenehit.core.ray import ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = ray_at(vec3(1.0, 0.0, 0.0), vec3(0.0, 2.0, 0.0), 2.5)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 5.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_interval_contains_kernel(self):
        """Test interval_contains bounds and non-finite values."""
        from scenehit.core.ray import interval_contains

        results = ti.field(dtype=ti.i32, shape=6)

        @ti.kernel
        def test_kernel(zero: ti.f32):
            inf = 1.0 / zero
            nan = zero / zero
            results[0] = interval_contains(1.0, 2.0, 1.0)
            results[1] = interval_contains(1.0, 2.0, 1.5)
            results[2] = interval_contains(1.0, 2.0, 2.0)
            results[3] = interval_contains(0.001, inf, inf)
            results[4] = interval_contains(0.001, inf, nan)
            results[5] = interval_contains(0.001, inf, -inf)

        test_kernel(0.0)
        assert [results[i] for i in range(6)] == [1, 1, 0, 0, 0, 0]
