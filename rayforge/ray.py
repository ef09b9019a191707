"""
Rays traced through the scene.

Camera rays and every scattered bounce are `Ray` instances; shapes and
materials only ever read them.
"""

from __future__ import annotations
from .vec3 import Vec3, Point3


class Ray:
    """Half-line starting at `origin` and heading along `direction`.

    The direction keeps whatever length its producer gave it, so `t` is a
    distance only for unit directions. Sphere intersection and the
    scattering code both work with unnormalized directions.
    """

    __slots__ = ('origin', 'direction')

    def __init__(self, origin: Point3, direction: Vec3):
        self.origin = origin
        self.direction = direction

    def at(self, t: float) -> Point3:
        """Point reached after travelling `t` direction-lengths from the origin."""
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray({self.origin!r} -> {self.direction!r})"
