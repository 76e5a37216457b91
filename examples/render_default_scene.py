#!/usr/bin/env python3
"""Render the default scene with flat shading.

This script traces one jittered primary ray per pixel and frame against the
default scene, shades hits with the material albedo, a single directional
light (with shadow rays) and the material emission, and averages the frames
through a ProgressiveAccumulator before writing a PNG.

Usage:
    python examples/render_default_scene.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 320)
    --height HEIGHT     Image height in pixels (default: 180)
    --frames FRAMES     Number of frames to accumulate (default: 16)
    --output OUTPUT     Output file path (default: default_scene.png)
    --arch ARCH         Taichi backend (default: SCENEHIT_ARCH or cpu)
    --quiet             Suppress progress output

Example:
    python examples/render_default_scene.py --width 160 --height 90 --frames 8
"""

from __future__ import annotations

import argparse
import math
import sys
import time
from pathlib import Path

import numpy as np
import numpy.typing as npt

# Camera placement for the default scene
LOOKFROM = np.array([0.0, 0.5, 5.0], dtype=np.float32)
LOOKAT = np.array([0.5, 0.0, -0.5], dtype=np.float32)
VUP = np.array([0.0, 1.0, 0.0], dtype=np.float32)
VFOV_DEGREES = 45.0

# Directional light used for flat shading
LIGHT_DIRECTION = np.array([0.5, 1.0, 0.3], dtype=np.float32)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the default scene with flat shading.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=320,
        help="Image width in pixels (default: 320)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=180,
        help="Image height in pixels (default: 180)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=16,
        help="Number of frames to accumulate (default: 16)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="default_scene.png",
        help="Output file path (default: default_scene.png)",
    )
    parser.add_argument(
        "--arch",
        type=str,
        default=None,
        help="Taichi backend (default: SCENEHIT_ARCH or cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def primary_rays(
    width: int, height: int, rng: np.random.Generator
) -> tuple[npt.NDArray[np.float32], npt.NDArray[np.float32]]:
    """Generate one jittered pinhole ray per pixel, rows top to bottom."""
    w = LOOKFROM - LOOKAT
    w = w / np.linalg.norm(w)
    u = np.cross(VUP, w)
    u = u / np.linalg.norm(u)
    v = np.cross(w, u)

    half_height = math.tan(math.radians(VFOV_DEGREES) / 2.0)
    half_width = half_height * width / height

    jj, ii = np.meshgrid(np.arange(height), np.arange(width), indexing="ij")
    s = (ii + rng.random((height, width))) / width
    t = 1.0 - (jj + rng.random((height, width))) / height

    directions = (
        (2.0 * s - 1.0)[..., None] * half_width * u
        + (2.0 * t - 1.0)[..., None] * half_height * v
        - w
    ).reshape(-1, 3)
    origins = np.broadcast_to(LOOKFROM, directions.shape)
    return origins.astype(np.float32), directions.astype(np.float32)


def shade_frame(scene, width: int, height: int, rng: np.random.Generator) -> npt.NDArray:
    """Trace and shade one frame of the scene."""
    from scenehit.core.ray import Interval

    interval = Interval.positive()
    origins, directions = primary_rays(width, height, rng)
    batch = scene.intersect_many(origins, directions, interval)

    unit = directions / np.linalg.norm(directions, axis=1, keepdims=True)
    sky = 0.5 * (unit[:, 1:2] + 1.0)
    color = (1.0 - sky) * np.array([1.0, 1.0, 1.0]) + sky * np.array([0.5, 0.7, 1.0])

    hit = batch.hit
    if np.any(hit):
        albedo = np.array([s.material.albedo for s in scene.shapes], dtype=np.float32)
        emitted = np.array(
            [s.material.emitted_radiance() for s in scene.shapes], dtype=np.float32
        )
        index = batch.shape_index[hit]

        light = LIGHT_DIRECTION / np.linalg.norm(LIGHT_DIRECTION)
        normals = batch.normal[hit]
        lambert = np.clip(normals @ light, 0.0, None)

        shadow_origins = batch.point[hit] + 1e-3 * normals
        shadow_dirs = np.broadcast_to(light, shadow_origins.shape)
        lit = ~scene.occluded_many(shadow_origins, shadow_dirs, interval)

        diffuse = albedo[index] * (0.15 + 0.85 * (lambert * lit))[:, None]
        color[hit] = diffuse + emitted[index]

    return color.reshape(height, width, 3).astype(np.float32)


def render_default_scene(
    width: int = 320,
    height: int = 180,
    num_frames: int = 16,
    output_path: str = "default_scene.png",
    quiet: bool = False,
) -> Path:
    """Render the default scene and save it as a PNG.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_frames: Number of jittered frames to average.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    from scenehit.core.progressive import ProgressiveAccumulator
    from scenehit.scene.scene import Scene

    scene = Scene.default()
    scene.accumulate = True
    accumulator = ProgressiveAccumulator(scene, width, height)
    rng = np.random.default_rng(0)

    start_time = time.time()

    def source(scene_: Scene, w: int, h: int) -> npt.NDArray:
        return shade_frame(scene_, w, h, rng)

    for count, _ in accumulator.render_progressive(source, num_frames):
        if not quiet:
            print(f"\r  Progress: {count}/{num_frames} frames", end="", flush=True)

    if not quiet:
        print()

    output_file = Path(output_path)
    accumulator.save_image(str(output_file), gamma=2.2)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    from scenehit.config import RuntimeConfig, init_runtime

    args = parse_args()

    config = RuntimeConfig.from_env()
    if args.arch is not None:
        config.arch = args.arch.lower()

    try:
        init_runtime(config)
        render_default_scene(
            width=args.width,
            height=args.height,
            num_frames=args.frames,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
