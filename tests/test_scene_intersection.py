"""Tests for nearest-hit reduction across shapes.

Tests cover:
- Closest hit wins regardless of shape order
- Equal t keeps the first shape
- Empty scenes and empty ray batches
- Hit records carrying an independent material copy
- Batched queries agreeing with single-ray queries
- Occlusion queries
- Rays in the default scene
"""

import math

import numpy as np
import pytest


class TestNearestHit:
    """Tests for Scene.intersect reduction."""

    def test_nearest_shape_wins_either_order(self, forward_interval):
        """Test the smaller t is reported whichever shape comes first."""
        from scenehit.core.ray import Ray
        from scenehit.materials.material import Material
        from scenehit.scene.scene import Scene
        from scenehit.scene.shapes import Shape

        near = Shape.sphere(center=(0, 0, -3), radius=1.0, material=Material(roughness=0.1))
        far = Shape.sphere(center=(0, 0, -6), radius=1.0, material=Material(roughness=0.9))
        ray = Ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        for shapes, near_index in [([near, far], 0), ([far, near], 1)]:
            rec = Scene(shapes).intersect(ray, forward_interval)
            assert rec is not None
            assert abs(rec.t - 2.0) < 1e-5
            assert rec.shape_index == near_index
            assert rec.material.roughness == pytest.approx(0.1)

    def test_hit_beyond_interval_is_ignored(self):
        """Test that a nearer hit outside the interval does not shadow a valid one."""
        from scenehit.core.ray import Interval, Ray
        from scenehit.scene.scene import Scene
        from scenehit.scene.shapes import Shape

        scene = Scene(
            [
                Shape.sphere(center=(0, 0, -3), radius=1.0),
                Shape.sphere(center=(0, 0, -6), radius=1.0),
            ]
        )
        rec = scene.intersect(Ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)), Interval(3.0, 100.0))

        assert rec is not None
        assert rec.shape_index == 1
        assert abs(rec.t - 5.0) < 1e-5

    def test_tie_keeps_first_identical_spheres(self, forward_interval):
        """Test two identical spheres report the first one."""
        from scenehit.core.ray import Ray
        from scenehit.materials.material import Material
        from scenehit.scene.scene import Scene
        from scenehit.scene.shapes import Shape

        first = Shape.sphere(center=(0, 0, -3), radius=1.0, material=Material(roughness=0.25))
        second = Shape.sphere(center=(0, 0, -3), radius=1.0, material=Material(roughness=0.75))

        rec = Scene([first, second]).intersect(
            Ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)), forward_interval
        )
        assert rec is not None
        assert rec.shape_index == 0
        assert rec.material.roughness == 0.25

    def test_tie_keeps_first_sphere_and_plane(self, forward_interval):
        """Test a sphere and a plane hit at the same t."""
        from scenehit.core.ray import Ray
        from scenehit.scene.scene import Scene
        from scenehit.scene.shapes import Shape

        sphere = Shape.sphere(center=(0, 0, -3), radius=1.0)
        plane = Shape.plane(point=(0, 0, -2), normal=(0, 0, 1))
        ray = Ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        for shapes in ([sphere, plane], [plane, sphere]):
            scene = Scene(shapes)
            rec = scene.intersect(ray, forward_interval)
            assert rec is not None
            assert rec.t == 2.0
            assert rec.shape_index == 0

    def test_empty_scene_returns_none(self, forward_interval):
        """Test a scene with no shapes never hits."""
        from scenehit.core.ray import Ray
        from scenehit.scene.scene import Scene

        scene = Scene()
        assert scene.intersect(Ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)), forward_interval) is None
        assert not scene.occluded(Ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)), forward_interval)

    def test_material_copy_survives_scene_edits(self, forward_interval):
        """Test a HitRecord is unaffected by later material edits or removal."""
        from scenehit.core.ray import Ray
        from scenehit.materials.material import Material
        from scenehit.scene.scene import Scene
        from scenehit.scene.shapes import Shape

        material = Material(albedo=(0.5, 0.5, 0.5), roughness=0.4)
        scene = Scene([Shape.sphere(center=(0, 0, -3), radius=1.0, material=material)])

        rec = scene.intersect(Ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)), forward_interval)
        assert rec is not None
        assert rec.material is not material

        material.roughness = 1.0
        material.albedo = (1.0, 0.0, 0.0)
        scene.remove(0)

        assert rec.material.roughness == 0.4
        assert rec.material.albedo == (0.5, 0.5, 0.5)


class TestBatchQueries:
    """Tests for intersect_many and occluded_many."""

    def test_intersect_many_matches_single_queries(self, default_scene, forward_interval):
        """Test every batch row agrees with the single-ray query."""
        from scenehit.core.ray import Ray

        rng = np.random.default_rng(11)
        origins = rng.uniform(-4.0, 4.0, size=(64, 3)).astype(np.float32)
        origins[:, 1] = np.abs(origins[:, 1]) + 1.5
        directions = rng.normal(size=(64, 3)).astype(np.float32)

        batch = default_scene.intersect_many(origins, directions, forward_interval)
        assert len(batch) == 64

        for i in range(64):
            single = default_scene.intersect(
                Ray(tuple(origins[i].tolist()), tuple(directions[i].tolist())), forward_interval
            )
            row = batch.record(i, default_scene.shapes)
            if single is None:
                assert row is None
                assert math.isinf(batch.t[i])
            else:
                assert row is not None
                assert row.shape_index == single.shape_index
                assert row.t == pytest.approx(single.t)
                assert np.allclose(row.point, single.point)

    def test_empty_batch(self, default_scene, forward_interval):
        """Test zero rays produce an empty batch."""
        batch = default_scene.intersect_many(
            np.zeros((0, 3)), np.zeros((0, 3)), forward_interval
        )
        assert len(batch) == 0
        assert default_scene.occluded_many(
            np.zeros((0, 3)), np.zeros((0, 3)), forward_interval
        ).shape == (0,)

    def test_empty_scene_batch_all_miss(self, forward_interval):
        """Test an empty scene marks every ray as a miss."""
        from scenehit.scene.scene import Scene

        batch = Scene().intersect_many(np.zeros((5, 3)), np.ones((5, 3)), forward_interval)
        assert not batch.hit.any()
        assert np.all(batch.shape_index == -1)
        assert np.all(np.isinf(batch.t))

    @pytest.mark.parametrize(
        "origins, directions",
        [
            (np.zeros((4, 2)), np.zeros((4, 2))),
            (np.zeros(3), np.zeros(3)),
            (np.zeros((4, 3)), np.zeros((5, 3))),
        ],
    )
    def test_bad_shapes_raise(self, default_scene, forward_interval, origins, directions):
        """Test malformed ray arrays raise ValueError."""
        with pytest.raises(ValueError):
            default_scene.intersect_many(origins, directions, forward_interval)
        with pytest.raises(ValueError):
            default_scene.occluded_many(origins, directions, forward_interval)

    def test_occluded_agrees_with_intersect(self, default_scene, forward_interval):
        """Test occlusion is true exactly when a closest hit exists."""
        rng = np.random.default_rng(5)
        origins = rng.uniform(-3.0, 3.0, size=(128, 3)).astype(np.float32)
        origins[:, 1] = np.abs(origins[:, 1]) + 1.5
        directions = rng.normal(size=(128, 3)).astype(np.float32)

        batch = default_scene.intersect_many(origins, directions, forward_interval)
        blocked = default_scene.occluded_many(origins, directions, forward_interval)

        assert blocked.dtype == bool
        assert np.array_equal(blocked, batch.hit)

    def test_occluded_respects_t_max(self):
        """Test a shadow ray stopping before the blocker is not occluded."""
        from scenehit.core.ray import Interval, Ray
        from scenehit.scene.scene import Scene
        from scenehit.scene.shapes import Shape

        scene = Scene([Shape.sphere(center=(0, 0, -3), radius=1.0)])
        ray = Ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert scene.occluded(ray, Interval(0.001, 10.0))
        assert not scene.occluded(ray, Interval(0.001, 1.5))


class TestDefaultScene:
    """Rays traced against the default scene."""

    def test_ray_hits_front_sphere(self, default_scene, forward_interval):
        """Test a ray down -z from z=5 hits the unit sphere at the origin."""
        from scenehit.core.ray import Ray

        rec = default_scene.intersect(Ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0)), forward_interval)

        assert rec is not None
        assert rec.shape_index == 0
        assert abs(rec.t - 4.0) < 1e-4
        assert rec.material.albedo == (1.0, 0.0, 1.0)

    def test_ray_hits_ground(self, default_scene, forward_interval):
        """Test a ray straight down away from the small spheres hits the ground."""
        from scenehit.core.ray import Ray

        rec = default_scene.intersect(Ray((-3.0, 5.0, 3.0), (0.0, -1.0, 0.0)), forward_interval)

        # Ground sphere: t = 106 - sqrt(106^2 - 1254)
        expected = 106.0 - math.sqrt(106.0**2 - 1254.0)
        assert rec is not None
        assert rec.shape_index == 2
        assert rec.t == pytest.approx(expected, abs=1e-3)
        assert rec.point[1] == pytest.approx(5.0 - expected, abs=1e-3)
        assert rec.material.albedo == pytest.approx((0.2, 0.3, 6.0))

    def test_ray_from_inside_sphere_reaches_ground(self, default_scene, forward_interval):
        """Test a ray starting inside the front sphere passes through it."""
        from scenehit.core.ray import Ray

        rec = default_scene.intersect(Ray((0.0, 0.5, 0.0), (0.0, -1.0, 0.0)), forward_interval)

        assert rec is not None
        assert rec.shape_index == 2
        assert rec.t == pytest.approx(1.5, abs=1e-4)
        assert np.allclose(rec.normal, (0.0, 1.0, 0.0), atol=1e-4)

    def test_ray_hits_sky_light(self, default_scene, forward_interval):
        """Test a ray toward the sky sphere reports its emissive material."""
        from scenehit.core.ray import Ray

        rec = default_scene.intersect(Ray((0.0, 3.0, 0.0), (1.0, 1.0, -0.2)), forward_interval)

        assert rec is not None
        assert rec.shape_index == 3
        assert rec.material.emitted_radiance() == pytest.approx((2.7, 2.7, 2.1))
