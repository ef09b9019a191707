"""
Materials system.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)

A material is immutable once built and may be shared by any number of
shapes.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray
from .sampling import random_double

if TYPE_CHECKING:
    from .shapes import HitRecord


@dataclass(frozen=True)
class ScatterResult:
    """Result of a material scatter operation."""
    attenuation: Color
    scattered_ray: Ray


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(
        self,
        ray_in: Ray,
        rec: HitRecord,
        rng: Optional[np.random.Generator] = None
    ) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            rec: Hit record for the surface point
            rng: Random stream of the calling task

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """
        pass


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Color):
        """Create a Lambertian material.

        Args:
            albedo: The base color (RGB, each component 0-1)
        """
        self.albedo = albedo

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: Optional[np.random.Generator] = None) -> Optional[ScatterResult]:
        scatter_direction = rec.normal + Vec3.random_unit_vector(rng)

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = rec.normal

        return ScatterResult(
            attenuation=self.albedo,
            scattered_ray=Ray(rec.point, scatter_direction)
        )

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Blur radius of the reflection (0 = mirror, clamped to 1)
        """
        self.albedo = albedo
        self.fuzz = min(fuzz, 1.0)

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: Optional[np.random.Generator] = None) -> Optional[ScatterResult]:
        reflected = ray_in.direction.unit().reflect(rec.normal)

        if self.fuzz > 0:
            reflected = reflected + Vec3.random_in_unit_sphere(rng) * self.fuzz

        # Reflections pushed below the surface are absorbed
        if reflected.dot(rec.normal) <= 0:
            return None

        return ScatterResult(
            attenuation=self.albedo,
            scattered_ray=Ray(rec.point, reflected)
        )

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo}, fuzz={self.fuzz})"


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction."""

    def __init__(self, ref_idx: float = 1.5):
        """Create a dielectric material.

        Args:
            ref_idx: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
        """
        self.ref_idx = ref_idx

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: Optional[np.random.Generator] = None) -> Optional[ScatterResult]:
        attenuation = Color(1.0, 1.0, 1.0)

        # Entering the medium from outside vs. leaving it
        refraction_ratio = 1.0 / self.ref_idx if rec.front_face else self.ref_idx

        unit_direction = ray_in.direction.unit()
        cos_theta = min((-unit_direction).dot(rec.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        cannot_refract = refraction_ratio * sin_theta > 1.0

        if cannot_refract or random_double(rng) < reflectance(cos_theta, refraction_ratio):
            direction = unit_direction.reflect(rec.normal)
        else:
            direction = unit_direction.refract(rec.normal, refraction_ratio)

        return ScatterResult(
            attenuation=attenuation,
            scattered_ray=Ray(rec.point, direction)
        )

    def __repr__(self) -> str:
        return f"Dielectric(ref_idx={self.ref_idx})"


def reflectance(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation for reflectance."""
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)
