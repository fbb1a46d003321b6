"""Scene module.

Components:
    intersection: Flattened primitive storage and nearest-hit queries
    background: Radiance for rays that escape the scene
    manager: SceneManager owning textures, materials, primitives and view
    builder: ShapeBuilder and ShapeConfig
    cornell_box: The Cornell box reference scene
"""

from .builder import BuilderStateError, BuiltShape, ShapeBuilder, ShapeConfig, build_shape
from .cornell_box import BOX_SIZE, create_cornell_box_scene
from .intersection import (
    MAX_RECTS,
    MAX_SPHERES,
    add_rect,
    add_sphere,
    clear_scene,
    get_rect_count,
    get_sphere_count,
    intersect_scene,
)
from .manager import MaterialInfo, RectInfo, SceneConfig, SceneManager, SphereInfo, TextureInfo

__all__ = [
    "add_sphere",
    "add_rect",
    "clear_scene",
    "get_sphere_count",
    "get_rect_count",
    "intersect_scene",
    "MAX_SPHERES",
    "MAX_RECTS",
    "SceneManager",
    "SceneConfig",
    "TextureInfo",
    "MaterialInfo",
    "SphereInfo",
    "RectInfo",
    "ShapeBuilder",
    "ShapeConfig",
    "BuiltShape",
    "BuilderStateError",
    "build_shape",
    "create_cornell_box_scene",
    "BOX_SIZE",
]
