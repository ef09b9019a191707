"""
Render timing benchmark.

Renders a fixed, fully deterministic sphere field a few times and reports
wall-clock timings and sample throughput. Scene contents do not depend on
any random draws, so timings from different runs are comparable.

Usage:
    rayforge-bench --repeats 5 --threads 4
"""

import argparse
import sys
import time
from typing import List, Optional, Sequence

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Lambertian, Metal, Dielectric
from .renderer import Renderer, RenderSettings, EXECUTORS

ASPECT_RATIO = 16.0 / 9.0


def benchmark_scene() -> HittableList:
    """Ground plane plus a diagonal row of small spheres.

    Material choice cycles with the grid index through the same
    diffuse/metal/glass split as the random scene, without drawing random
    numbers.
    """
    world = HittableList()
    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5))))

    diffuse = Lambertian(Color(0.5, 0.7, 0.0))
    metal = Metal(Color(0.5, 0.7, 0.0), 0.3)
    glass = Dielectric(1.5)

    for a in range(-11, 11):
        center = Point3(a + 0.9, 0.2, a + 0.9)
        if (center - Point3(4, 0.2, 0)).length() <= 0.9:
            continue

        choose_mat = (a % 20) / 20.0
        if choose_mat < 0.8:
            material = diffuse
        elif choose_mat < 0.95:
            material = metal
        else:
            material = glass
        world.add(Sphere(center, 0.2, material))

    return world


def benchmark_camera() -> Camera:
    return Camera(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        vfov=20.0,
        aspect_ratio=ASPECT_RATIO,
        aperture=0.1,
        focus_dist=10.0
    )


def run_benchmark(settings: RenderSettings, repeats: int = 3) -> List[float]:
    """Render the benchmark scene `repeats` times.

    Args:
        settings: Render settings for every run
        repeats: Number of timed renders

    Returns:
        Elapsed seconds per run
    """
    if repeats < 1:
        raise ValueError(f"repeats must be positive, got {repeats}")

    world = benchmark_scene()
    camera = benchmark_camera()
    renderer = Renderer(settings)

    timings = []
    for _ in range(repeats):
        start = time.perf_counter()
        renderer.render(world, camera)
        timings.append(time.perf_counter() - start)
    return timings


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog='rayforge-bench', description='Time a fixed render')
    parser.add_argument('--repeats', type=int, default=3, help='Timed renders (default: 3)')
    parser.add_argument('--width', type=int, default=50, help='Image width (default: 50)')
    parser.add_argument('--samples', type=int, default=15, help='Samples per pixel (default: 15)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--threads', type=int, default=1, help='Number of workers (0=auto)')
    parser.add_argument('--executor', type=str, default='thread', choices=EXECUTORS)
    args = parser.parse_args(argv)

    try:
        settings = RenderSettings.from_aspect_ratio(
            args.width, ASPECT_RATIO,
            samples_per_pixel=args.samples,
            max_depth=args.depth,
            num_threads=args.threads,
            executor=args.executor,
            seed=0
        )
        timings = run_benchmark(settings, args.repeats)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    samples = settings.width * settings.height * settings.samples_per_pixel
    best = min(timings)
    print(f"Benchmark: {settings.width}x{settings.height}, {settings.samples_per_pixel} spp, "
          f"{settings.num_threads} {settings.executor} worker(s)")
    for i, elapsed in enumerate(timings, 1):
        print(f"  Run {i}: {elapsed:.3f}s")
    print(f"  Best: {best:.3f}s, mean: {sum(timings) / len(timings):.3f}s")
    print(f"  Samples per second: {samples / max(best, 1e-9):.0f}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
