"""Pytest configuration for scenehit tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    from scenehit.config import RuntimeConfig, init_runtime

    init_runtime(RuntimeConfig(arch="cpu", random_seed=42))
    yield


@pytest.fixture
def default_scene():
    """Create a fresh default scene for each test."""
    from scenehit.scene.scene import Scene

    return Scene.default()


@pytest.fixture
def forward_interval():
    """The usual [epsilon, +inf) interval."""
    from scenehit.core.ray import Interval

    return Interval.positive()
