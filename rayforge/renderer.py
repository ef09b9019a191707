"""
Renderer module - the heart of the path tracer.

Implements:
- Recursive path tracing bounded by a maximum bounce depth
- Per-pixel supersampling (antialiasing)
- Scanline-parallel rendering on a thread or process pool, with one
  independent random stream per scanline
"""

from __future__ import annotations
import os
from concurrent.futures import ThreadPoolExecutor, ProcessPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Optional
import numpy as np

from .vec3 import Color
from .ray import Ray
from .camera import Camera
from .shapes import Hittable
from .sampling import random_double, spawn_seeds

# Minimum hit distance; rays leaving a surface would otherwise re-hit it
# because of rounding in the origin ("shadow acne").
T_MIN = 0.001

BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)

EXECUTORS = ('thread', 'process')


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 400
    height: int = 225
    samples_per_pixel: int = 100
    max_depth: int = 50
    num_threads: int = 0  # 0 = auto-detect
    executor: str = 'thread'
    seed: Optional[int] = None
    gamma: float = 2.0

    def __post_init__(self):
        if self.width < 2 or self.height < 2:
            raise ValueError(f"Image must be at least 2x2 pixels, got {self.width}x{self.height}")
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.executor not in EXECUTORS:
            raise ValueError(f"Unknown executor '{self.executor}', expected one of {EXECUTORS}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4

    @classmethod
    def from_aspect_ratio(cls, width: int, aspect_ratio: float, **kwargs: Any) -> RenderSettings:
        """Build settings whose height follows from the width and aspect ratio."""
        return cls(width=width, height=int(width / aspect_ratio), **kwargs)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


def sky_color(ray: Ray) -> Color:
    """Background gradient: white at the bottom, sky blue at the top.

    Args:
        ray: The ray direction to use for gradient

    Returns:
        Sky color at this direction
    """
    unit_direction = ray.direction.unit()
    t = 0.5 * (unit_direction.y + 1.0)
    return WHITE * (1.0 - t) + SKY_BLUE * t


def ray_color(
    ray: Ray,
    scene: Hittable,
    depth: int,
    rng: Optional[np.random.Generator] = None
) -> Color:
    """Compute the color for a ray using path tracing.

    Args:
        ray: The ray to trace
        scene: The scene to trace against
        depth: Remaining bounces; at zero no more light is gathered
        rng: Random stream of the calling task

    Returns:
        The computed color for this ray
    """
    if depth <= 0:
        return BLACK

    hit_record = scene.hit(ray, T_MIN, float('inf'))

    if hit_record is None:
        return sky_color(ray)

    if hit_record.material is None:
        return BLACK

    scatter_result = hit_record.material.scatter(ray, hit_record, rng)
    if scatter_result is None:
        return BLACK

    return scatter_result.attenuation * ray_color(
        scatter_result.scattered_ray, scene, depth - 1, rng
    )


def sample_pixel(
    i: int,
    j: int,
    scene: Hittable,
    camera: Camera,
    settings: RenderSettings,
    rng: Optional[np.random.Generator] = None
) -> Color:
    """Average `samples_per_pixel` jittered traces through pixel (i, j).

    Args:
        i: Column, 0 at the left edge
        j: Row counted from the bottom edge (0 = bottom scanline)
        scene: The scene to render
        camera: The camera to render from
        settings: Image size, sample count and depth
        rng: Random stream of the calling task

    Returns:
        Averaged linear color, before gamma correction
    """
    pixel_color = Color(0, 0, 0)
    for _ in range(settings.samples_per_pixel):
        u = (i + random_double(rng)) / (settings.width - 1)
        v = (j + random_double(rng)) / (settings.height - 1)
        ray = camera.get_ray(u, v, rng)
        pixel_color = pixel_color + ray_color(ray, scene, settings.max_depth, rng)
    return pixel_color / settings.samples_per_pixel


def render_scanline(
    row: int,
    seed: np.random.SeedSequence,
    scene: Hittable,
    camera: Camera,
    settings: RenderSettings
) -> np.ndarray:
    """Render one scanline, left to right.

    Kept at module level so process pools can pickle it.

    Args:
        row: Image row, 0 at the top
        seed: Seed sequence owned by this scanline

    Returns:
        Array of shape (width, 3) with averaged linear colors
    """
    rng = np.random.default_rng(seed)
    j = settings.height - 1 - row
    scanline = np.zeros((settings.width, 3), dtype=np.float64)
    for i in range(settings.width):
        scanline[i] = sample_pixel(i, j, scene, camera, settings, rng).to_array()
    return scanline


class Renderer:
    """Path tracing renderer with multi-worker support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, scene: Hittable, camera: Camera, sink: Any = None) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Args:
            scene: The scene to render (any Hittable)
            camera: The camera to render from
            sink: Optional consumer of finished scanlines, either a callable
                or an object with a `write_scanline` method. Rows arrive top
                to bottom.

        Returns:
            Linear image as numpy array of shape (height, width, 3)
        """
        width = self.settings.width
        height = self.settings.height

        image = np.zeros((height, width, 3), dtype=np.float64)
        write_scanline = getattr(sink, 'write_scanline', sink)

        seeds = spawn_seeds(self.settings.seed, height)
        task = partial(render_scanline, scene=scene, camera=camera, settings=self.settings)

        for row, scanline in enumerate(self._map(task, range(height), seeds)):
            image[row] = scanline
            if write_scanline is not None:
                write_scanline(scanline)
            if self._progress_callback:
                self._progress_callback((row + 1) / height)

        return image

    def _map(self, task: Callable, rows, seeds):
        """Run scanline tasks, yielding results in row order."""
        if self.settings.num_threads <= 1:
            yield from map(task, rows, seeds)
            return

        pool_cls = ProcessPoolExecutor if self.settings.executor == 'process' else ThreadPoolExecutor
        with pool_cls(max_workers=self.settings.num_threads) as executor:
            yield from executor.map(task, rows, seeds)
