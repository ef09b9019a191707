"""Built-in demo scenes and the cameras that frame them."""

from __future__ import annotations
from typing import Callable, Optional, Tuple
import numpy as np

from .vec3 import Vec3, Color, Point3
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Lambertian, Metal, Dielectric
from .sampling import random_double, resolve


def two_sphere_scene() -> HittableList:
    """A diffuse sphere resting on a huge ground sphere."""
    world = HittableList()
    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.7, 0.3, 0.3))))
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.8, 0.8, 0.0))))
    return world


def two_sphere_camera(aspect_ratio: float) -> Camera:
    """Pinhole camera at the origin looking down -z."""
    return Camera(
        look_from=Point3(0, 0, 0),
        look_at=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        vfov=90,
        aspect_ratio=aspect_ratio,
        aperture=0.0,
        focus_dist=1.0
    )


def material_scene() -> HittableList:
    """Ground, a diffuse center sphere, a hollow glass sphere and a metal sphere."""
    world = HittableList()

    ground = Lambertian(Color(0.8, 0.8, 0.0))
    center = Lambertian(Color(0.1, 0.2, 0.5))
    glass = Dielectric(1.5)
    metal = Metal(Color(0.8, 0.6, 0.2), 0.0)

    world.add(Sphere(Point3(0, -100.5, -1), 100, ground))
    world.add(Sphere(Point3(0, 0, -1), 0.5, center))
    # Two spheres share one glass material; the negative radius makes a shell
    world.add(Sphere(Point3(-1, 0, -1), 0.5, glass))
    world.add(Sphere(Point3(-1, 0, -1), -0.45, glass))
    world.add(Sphere(Point3(1, 0, -1), 0.5, metal))

    return world


def material_camera(aspect_ratio: float) -> Camera:
    look_from = Point3(3, 3, 2)
    look_at = Point3(0, 0, -1)
    return Camera(
        look_from=look_from,
        look_at=look_at,
        vup=Vec3(0, 1, 0),
        vfov=20,
        aspect_ratio=aspect_ratio,
        aperture=2.0,
        focus_dist=(look_from - look_at).length()
    )


def random_scene(rng: Optional[np.random.Generator] = None) -> HittableList:
    """The cover scene: a field of small random spheres around three big ones.

    Args:
        rng: Generator used for placement and materials (fixed seed gives a
            fixed scene)
    """
    rng = resolve(rng)
    world = HittableList()

    ground = Lambertian(Color(0.5, 0.5, 0.5))
    world.add(Sphere(Point3(0, -1000, 0), 1000, ground))

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = random_double(rng)
            center = Point3(a + 0.9 * random_double(rng), 0.2, b + 0.9 * random_double(rng))

            if (center - Point3(4, 0.2, 0)).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                albedo = Color.random(rng=rng) * Color.random(rng=rng)
                material = Lambertian(albedo)
            elif choose_mat < 0.95:
                albedo = Color.random(0.5, 1.0, rng=rng)
                fuzz = random_double(rng, 0.0, 0.5)
                material = Metal(albedo, fuzz)
            else:
                material = Dielectric(1.5)

            world.add(Sphere(center, 0.2, material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return world


def random_scene_camera(aspect_ratio: float) -> Camera:
    return Camera(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        vfov=20,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0
    )


SCENES: dict[str, Tuple[Callable[..., HittableList], Callable[[float], Camera]]] = {
    'two-spheres': (two_sphere_scene, two_sphere_camera),
    'materials': (material_scene, material_camera),
    'random': (random_scene, random_scene_camera),
}


def build_scene(
    name: str,
    aspect_ratio: float,
    rng: Optional[np.random.Generator] = None
) -> Tuple[HittableList, Camera]:
    """Build a named scene and its camera.

    Args:
        name: One of SCENES
        aspect_ratio: Image width / height, passed to the camera
        rng: Generator for procedurally placed scenes

    Returns:
        Tuple of (world, camera)
    """
    if name not in SCENES:
        raise KeyError(f"Unknown scene '{name}', expected one of {sorted(SCENES)}")

    world_fn, camera_fn = SCENES[name]
    world = world_fn(rng) if world_fn is random_scene else world_fn()
    return world, camera_fn(aspect_ratio)
