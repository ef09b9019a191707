"""
Scene description language parser.

Supports a YAML (or JSON) scene description format with:
- Camera configuration
- Render settings
- Materials library
- Objects (spheres with materials)

Example scene file:
```yaml
camera:
  look_from: [13, 2, 3]
  look_at: [0, 0, 0]
  vfov: 20
  aperture: 0.1
  focus_dist: 10

render:
  width: 400
  height: 225
  samples: 100
  max_depth: 50

materials:
  ground:
    type: lambertian
    albedo: [0.5, 0.5, 0.5]

  glass:
    type: dielectric
    ref_idx: 1.5

objects:
  - type: sphere
    center: [0, -1000, 0]
    radius: 1000
    material: ground

  - type: sphere
    center: [0, 1, 0]
    radius: 1
    material: glass
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, Optional, Tuple
import json

import yaml

from .vec3 import Vec3, Color
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric
from .renderer import RenderSettings


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.objects: HittableList = HittableList()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None
        self.camera_data: Dict[str, Any] = {}

    def parse_file(self, filepath: str) -> Tuple[HittableList, Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (scene, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON, so this covers unknown suffixes too
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping: {filepath}")

        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[HittableList, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        if not isinstance(data, dict):
            raise SceneParseError(f"Scene must be a mapping, got {type(data).__name__}")

        # Parse materials first (objects reference them)
        self._parse_materials(self._section(data, 'materials', dict))
        self._parse_objects(self._section(data, 'objects', list))

        # Settings before camera: the camera defaults to the image aspect ratio
        self._parse_settings(self._section(data, 'render', dict))
        self.camera_data = self._section(data, 'camera', dict)
        self.camera = self.build_camera(self.settings.aspect_ratio)

        return self.objects, self.camera, self.settings

    @staticmethod
    def _section(data: Dict[str, Any], key: str, kind: type) -> Any:
        """Fetch a top-level section; a missing or null section is empty."""
        section = data.get(key)
        if section is None:
            return kind()
        if not isinstance(section, kind):
            raise SceneParseError(
                f"Section '{key}' must be a {'mapping' if kind is dict else 'list'}, "
                f"got {type(section).__name__}"
            )
        return section

    @staticmethod
    def _number(value: Any, what: str) -> float:
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid {what}: {value!r}") from e

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from various formats."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(*(self._number(c, 'vector component') for c in data))
        elif isinstance(data, dict):
            return Vec3(*(self._number(data.get(k, 0), 'vector component') for k in 'xyz'))
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from various formats."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(*(self._number(c, 'color component') for c in data))
        elif isinstance(data, dict):
            return Color(*(self._number(data.get(k, 0), 'color component') for k in 'rgb'))
        elif isinstance(data, str):
            # Handle hex colors
            if data.startswith('#') and len(data) == 7:
                try:
                    r = int(data[1:3], 16) / 255.0
                    g = int(data[3:5], 16) / 255.0
                    b = int(data[5:7], 16) / 255.0
                except ValueError as e:
                    raise SceneParseError(f"Cannot parse color from string: {data}") from e
                return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_material(self, mat_data: Any) -> Material:
        if not isinstance(mat_data, dict):
            raise SceneParseError(f"Material must be a mapping, got: {mat_data!r}")
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        if mat_type == 'lambertian':
            albedo = self._parse_color(mat_data.get('albedo', [0.5, 0.5, 0.5]))
            return Lambertian(albedo)

        elif mat_type == 'metal':
            albedo = self._parse_color(mat_data.get('albedo', [0.8, 0.8, 0.8]))
            fuzz = self._number(mat_data.get('fuzz', 0.0), 'fuzz')
            return Metal(albedo, fuzz)

        elif mat_type == 'dielectric':
            ref_idx = self._number(mat_data.get('ref_idx', mat_data.get('ior', 1.5)), 'ref_idx')
            return Dielectric(ref_idx)

        raise SceneParseError(f"Unknown material type: {mat_type}")

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        for name, mat_data in materials_data.items():
            self.materials[name] = self._parse_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Optional[Material]:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return None
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        for obj_data in objects_data:
            if not isinstance(obj_data, dict):
                raise SceneParseError(f"Object must be a mapping, got: {obj_data!r}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            material = self._get_material(obj_data.get('material'))

            if obj_type == 'sphere':
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                radius = self._number(obj_data.get('radius', 1.0), 'radius')
                self.objects.add(Sphere(center, radius, material))

            else:
                raise SceneParseError(f"Unknown object type: {obj_type}")

    def build_camera(self, aspect_ratio: float) -> Camera:
        """Build the camera described by the parsed camera section.

        The camera follows the given image aspect ratio unless the scene
        file pins one with `aspect_ratio`.
        """
        camera_data = self.camera_data
        return Camera(
            look_from=self._parse_vec3(camera_data.get('look_from', [0, 0, 0])),
            look_at=self._parse_vec3(camera_data.get('look_at', [0, 0, -1])),
            vup=self._parse_vec3(camera_data.get('vup', [0, 1, 0])),
            vfov=self._number(camera_data.get('vfov', 90), 'vfov'),
            aspect_ratio=self._number(camera_data.get('aspect_ratio', aspect_ratio), 'aspect_ratio'),
            aperture=self._number(camera_data.get('aperture', 0.0), 'aperture'),
            focus_dist=self._number(camera_data.get('focus_dist', 1.0), 'focus_dist')
        )

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        seed = settings_data.get('seed')
        try:
            self.settings = RenderSettings(
                width=int(settings_data.get('width', 400)),
                height=int(settings_data.get('height', 225)),
                samples_per_pixel=int(settings_data.get('samples', 100)),
                max_depth=int(settings_data.get('max_depth', 50)),
                num_threads=int(settings_data.get('threads', 0)),
                executor=str(settings_data.get('executor', 'thread')),
                seed=int(seed) if seed is not None else None,
                gamma=float(settings_data.get('gamma', 2.0))
            )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath: str) -> Tuple[HittableList, Camera, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[HittableList, Camera, RenderSettings]:
    """Convenience function to parse a scene from a dictionary."""
    parser = SceneParser()
    return parser.parse_dict(data)
