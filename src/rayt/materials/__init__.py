"""Materials module.

Components:
    texture: Constant and checker textures
    registry: Unified material ids and the MaterialType tag
    lambertian: Cosine-weighted diffuse reflection
    metal: Fuzzy mirror reflection
    dielectric: Reflection and refraction with Schlick's approximation
    diffuse_light: One-sided area emitter
    material: ScatterInfo and the scatter/emitted/scattering_pdf dispatchers
"""

from .dielectric import add_dielectric_material, clear_dielectric_materials, schlick
from .diffuse_light import add_diffuse_light_material, clear_diffuse_light_materials
from .lambertian import add_lambertian_material, clear_lambertian_materials
from .material import ScatterInfo, emitted, scatter, scattering_pdf
from .metal import add_metal_material, clear_metal_materials
from .registry import MaterialType, clear_material_registry, register_material
from .texture import (
    TextureType,
    add_checker_texture,
    add_constant_texture,
    clear_textures,
    texture_value,
)

__all__ = [
    "TextureType",
    "add_constant_texture",
    "add_checker_texture",
    "clear_textures",
    "texture_value",
    "MaterialType",
    "register_material",
    "clear_material_registry",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "add_metal_material",
    "clear_metal_materials",
    "add_dielectric_material",
    "clear_dielectric_materials",
    "schlick",
    "add_diffuse_light_material",
    "clear_diffuse_light_materials",
    "ScatterInfo",
    "scatter",
    "emitted",
    "scattering_pdf",
]
