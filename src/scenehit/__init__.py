"""Analytic ray/scene intersection engine built on Taichi.

This package tests rays against a flat list of spheres and planes and reports
the nearest hit, with the state a progressive renderer needs between frames:
- Closed-form sphere (near root) and plane solvers
- A closed Shape union dispatched inside Taichi kernels
- Closest-hit and any-hit queries for one ray or a batch of rays
- Accumulation state and a running-average helper

Subpackages:
    core: Ray and interval types, progressive accumulation
    geometry: Primitive solvers and shape-kind dispatch (Taichi functions)
    materials: The flat surface material descriptor
    scene: Shapes, scene container and intersection queries
"""

__version__ = "0.1.0"
