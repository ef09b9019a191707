"""
Vector3 class for 3D math operations.

This is the fundamental building block of the path tracer, used for:
- Points in 3D space
- Direction vectors
- RGB color values
"""

from __future__ import annotations
import math
from typing import Optional, Union
import numpy as np

from .sampling import resolve


class Vec3:
    """An immutable 3D vector.

    Uses numpy internally for the arithmetic; every operation returns a
    new vector and no method mutates the receiver.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Create Vec3 from numpy array."""
        v = cls.__new__(cls)
        v._data = np.asarray(arr, dtype=np.float64)
        return v

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    # Aliases for color operations
    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return bool(np.allclose(self._data, other._data))

    # Tolerance-based equality has no consistent hash
    __hash__ = None

    def __neg__(self) -> Vec3:
        return Vec3.from_array(-self._data)

    def __add__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data + other._data)
        return Vec3.from_array(self._data + other)

    def __radd__(self, other: float) -> Vec3:
        return Vec3.from_array(other + self._data)

    def __sub__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data - other._data)
        return Vec3.from_array(self._data - other)

    def __rsub__(self, other: float) -> Vec3:
        return Vec3.from_array(other - self._data)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data * other._data)
        return Vec3.from_array(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3.from_array(other * self._data)

    def __truediv__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data / other._data)
        return Vec3.from_array(self._data / other)

    def __getitem__(self, index: int) -> float:
        if not 0 <= index < 3:
            raise IndexError(f"Vec3 index out of range: {index}")
        return float(self._data[index])

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def unit(self) -> Vec3:
        """Return a unit vector in the same direction.

        The zero vector has no direction; its components come back as NaN.
        """
        with np.errstate(invalid='ignore', divide='ignore'):
            return Vec3.from_array(self._data / self.length())

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector."""
        a, b = self._data, other._data
        return Vec3(
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0]
        )

    def reflect(self, normal: Vec3) -> Vec3:
        """Reflect this vector around the given normal."""
        return self - normal * (2 * self.dot(normal))

    def refract(self, normal: Vec3, etai_over_etat: float) -> Vec3:
        """Refract this (unit) vector through a surface using Snell's law.

        Args:
            normal: Unit surface normal on the incoming side
            etai_over_etat: Ratio of refractive indices (n1/n2)

        Returns:
            Refracted direction. Total internal reflection is not detected
            here; callers decide between reflect and refract first.
        """
        cos_theta = min((-self).dot(normal), 1.0)
        r_out_perp = (self + normal * cos_theta) * etai_over_etat
        r_out_parallel = normal * -math.sqrt(abs(1.0 - r_out_perp.length_squared()))
        return r_out_perp + r_out_parallel

    def near_zero(self, epsilon: float = 1e-8) -> bool:
        """Check if vector is close to zero in all dimensions."""
        return bool(np.all(np.abs(self._data) < epsilon))

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()

    @staticmethod
    def random(
        min_val: float = 0.0,
        max_val: float = 1.0,
        rng: Optional[np.random.Generator] = None
    ) -> Vec3:
        """Generate a random vector with components in [min_val, max_val)."""
        return Vec3.from_array(resolve(rng).uniform(min_val, max_val, 3))

    @staticmethod
    def random_in_unit_sphere(rng: Optional[np.random.Generator] = None) -> Vec3:
        """Generate a random point inside the unit sphere."""
        rng = resolve(rng)
        while True:
            p = rng.uniform(-1.0, 1.0, 3)
            if np.dot(p, p) < 1:
                return Vec3.from_array(p)

    @staticmethod
    def random_unit_vector(rng: Optional[np.random.Generator] = None) -> Vec3:
        """Generate a random unit vector (uniform on sphere surface)."""
        rng = resolve(rng)
        while True:
            p = rng.uniform(-1.0, 1.0, 3)
            len_sq = np.dot(p, p)
            # Reject the tiny core where normalizing would blow up
            if 1e-160 < len_sq <= 1:
                return Vec3.from_array(p / math.sqrt(len_sq))

    @staticmethod
    def random_in_unit_disk(rng: Optional[np.random.Generator] = None) -> Vec3:
        """Generate a random point inside the unit disk (z=0)."""
        rng = resolve(rng)
        while True:
            px, py = rng.uniform(-1.0, 1.0, 2)
            if px * px + py * py < 1:
                return Vec3(px, py, 0.0)


# Convenience type aliases
Point3 = Vec3
Color = Vec3


def dot(a: Vec3, b: Vec3) -> float:
    return a.dot(b)


def cross(a: Vec3, b: Vec3) -> Vec3:
    return a.cross(b)


def unit_vector(v: Vec3) -> Vec3:
    return v.unit()


def reflect(v: Vec3, n: Vec3) -> Vec3:
    """v - 2*dot(v,n)*n"""
    return v.reflect(n)


def refract(uv: Vec3, n: Vec3, etai_over_etat: float) -> Vec3:
    return uv.refract(n, etai_over_etat)
