"""
RayForge - A Python Path Tracer

A CPU Monte Carlo path tracer in the "ray tracing in a weekend" tradition:
- Spheres, including hollow shells via negative radii
- Lambertian, metal and dielectric materials
- Thin-lens camera with depth of field
- Supersampled, gamma-corrected output (PPM, PNG, ...)
- Scanline-parallel rendering with reproducible per-task random streams
"""

__version__ = "0.1.0"
__author__ = "RayForge Team"

from .vec3 import Vec3, Point3, Color, dot, cross, unit_vector, reflect, refract
from .ray import Ray
from .shapes import Sphere, HittableList, HitRecord, Hittable
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric, reflectance
from .camera import Camera
from .renderer import Renderer, RenderSettings, ray_color, sky_color, sample_pixel, render_scanline
from .image_io import PPMWriter, quantize_color, to_ldr, format_ppm, write_ppm, save_image
from .scenes import SCENES, build_scene, two_sphere_scene, material_scene, random_scene
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
