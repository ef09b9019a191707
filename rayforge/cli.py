"""
Command-line entry point for rendering scenes.
"""

import argparse
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from .renderer import Renderer, RenderSettings, EXECUTORS
from .scenes import SCENES, build_scene
from .scene_parser import SceneParser, SceneParseError
from .image_io import PPMWriter, save_image


DEFAULT_ASPECT_RATIO = 16.0 / 9.0


def log(message: str = '', **kwargs) -> None:
    """Status output goes to stderr; stdout may carry the image."""
    print(message, file=sys.stderr, **kwargs)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rayforge',
        description='RayForge - A Python Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene random --output render.png
  python main.py --scene two-spheres --width 256 --samples 20 --output - > image.ppm
  python main.py --scene-file scenes/demo.yaml --threads 8 --executor process
        '''
    )

    parser.add_argument('--scene', type=str, default='random', choices=sorted(SCENES),
                        help='Built-in scene to render (default: random)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='YAML or JSON scene description (overrides --scene)')
    parser.add_argument('--width', type=int, default=None, help='Image width (default: 400)')
    parser.add_argument('--height', type=int, default=None,
                        help='Image height (default: derived from --aspect-ratio)')
    parser.add_argument('--aspect-ratio', type=float, default=None,
                        help='Width / height when only one side is given '
                             '(default: the scene file\'s ratio, else 16/9)')
    parser.add_argument('--samples', type=int, default=None, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=None, help='Max ray depth (default: 50)')
    parser.add_argument('--threads', type=int, default=None, help='Number of workers (0=auto)')
    parser.add_argument('--executor', type=str, default=None, choices=EXECUTORS,
                        help='Worker pool kind (default: thread)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducible renders')
    parser.add_argument('--output', type=str, default='output/render.png',
                        help="Output filename, '-' streams P3 PPM to stdout")
    parser.add_argument('--quiet', action='store_true', help='Suppress progress output')
    return parser


def settings_from_args(args: argparse.Namespace, base: Optional[RenderSettings] = None) -> RenderSettings:
    """Merge explicit command-line flags over base settings.

    When only one image side is given, the other follows from
    --aspect-ratio, falling back to the scene file's own ratio.
    """
    from_file = base is not None
    base = base if base else RenderSettings()

    aspect_ratio = args.aspect_ratio
    if aspect_ratio is None:
        aspect_ratio = base.aspect_ratio if from_file else DEFAULT_ASPECT_RATIO

    if args.width is not None and args.height is not None:
        width, height = args.width, args.height
    elif args.height is not None:
        width, height = int(round(args.height * aspect_ratio)), args.height
    elif args.width is not None or not from_file or args.aspect_ratio is not None:
        width = args.width if args.width is not None else base.width
        height = int(width / aspect_ratio)
    else:
        width, height = base.width, base.height

    return RenderSettings(
        width=width,
        height=height,
        samples_per_pixel=args.samples if args.samples is not None else base.samples_per_pixel,
        max_depth=args.depth if args.depth is not None else base.max_depth,
        num_threads=args.threads if args.threads is not None else base.num_threads,
        executor=args.executor if args.executor is not None else base.executor,
        seed=args.seed if args.seed is not None else base.seed,
        gamma=base.gamma
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        if args.scene_file:
            scene_parser = SceneParser()
            world, camera, file_settings = scene_parser.parse_file(args.scene_file)
            settings = settings_from_args(args, file_settings)
            if settings.aspect_ratio != file_settings.aspect_ratio:
                camera = scene_parser.build_camera(settings.aspect_ratio)
            scene_name = args.scene_file
        else:
            settings = settings_from_args(args)
            world, camera = build_scene(
                args.scene, settings.aspect_ratio, np.random.default_rng(settings.seed)
            )
            scene_name = args.scene
    except (SceneParseError, ValueError) as e:
        log(f"Error: {e}")
        return 2

    if not args.quiet:
        log("=" * 60)
        log("RayForge Path Tracer")
        log("=" * 60)
        log(f"Scene: {scene_name} ({len(world)} objects)")
        log(f"  Resolution: {settings.width}x{settings.height}")
        log(f"  Samples: {settings.samples_per_pixel}")
        log(f"  Max Depth: {settings.max_depth}")
        log(f"  Workers: {settings.num_threads} ({settings.executor})")

    renderer = Renderer(settings)

    if not args.quiet:
        last_progress = [0]

        def progress_callback(progress: float):
            pct = int(progress * 100)
            if pct > last_progress[0]:
                last_progress[0] = pct
                bar_len = 40
                filled = int(bar_len * progress)
                bar = '█' * filled + '░' * (bar_len - filled)
                log(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

        renderer.set_progress_callback(progress_callback)

    sink = None
    if args.output == '-':
        sink = PPMWriter(sys.stdout, settings.width, settings.height, settings.gamma)

    start_time = time.time()
    image = renderer.render(world, camera, sink)
    elapsed = time.time() - start_time

    if sink is not None:
        sys.stdout.flush()
    else:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        save_image(image, output_path, settings.gamma)

    if not args.quiet:
        rays = settings.width * settings.height * settings.samples_per_pixel
        log(f"\nRender completed in {elapsed:.2f} seconds")
        log(f"  Samples per second: {rays / max(elapsed, 1e-9):.0f}")
        if sink is None:
            log(f"Saved to: {args.output}")

    return 0
