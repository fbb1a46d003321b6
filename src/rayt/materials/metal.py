"""Metal (specular reflective) material implementation.

The incoming direction is normalized and mirrored about the surface normal,
then perturbed by fuzz * random_in_unit_sphere(). The perturbed direction is
kept as is (not renormalized); the scatter is accepted only while it still
points away from the surface:

    reflected = reflect(normalize(d), n) + fuzz * random_in_unit_sphere()
    scatter   = dot(reflected, n) > 0

Specular reflection has no usable density, so the sampling pdf value is the
sentinel 0 and the scattering density is 0.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.materials.texture import add_constant_texture
    >>> from rayt.materials.metal import add_metal_material
    >>> gold = add_constant_texture((0.8, 0.6, 0.2))
    >>> idx = add_metal_material(gold, fuzz=0.3)
"""

import taichi as ti
import taichi.math as tm

from rayt.core.float3 import normalize, random_in_unit_sphere, reflect, vec3
from rayt.core.ray import Ray
from rayt.geometry.sphere import HitRecord
from rayt.materials.texture import check_texture_id, texture_value

# Maximum number of metal materials in the scene
MAX_METAL_MATERIALS = 256

metal_texture_ids = ti.field(dtype=ti.i32, shape=MAX_METAL_MATERIALS)
metal_fuzzes = ti.field(dtype=ti.f64, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    """Clear all metal materials."""
    num_metal_materials[None] = 0


def add_metal_material(texture_id: int, fuzz: float = 0.0) -> int:
    """Add a metal material to the material registry.

    Args:
        texture_id: Id of the albedo texture.
        fuzz: Reflection perturbation in [0, 1]. 0 is a perfect mirror.

    Returns:
        The type-local index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If texture_id is unknown or fuzz is outside [0, 1].
    """
    check_texture_id(texture_id)

    if fuzz < 0.0 or fuzz > 1.0:
        raise ValueError(
            f"Fuzz = {fuzz} is outside [0, 1]. "
            "Fuzz must be between 0 (perfect mirror) and 1 (maximum perturbation)."
        )

    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded")

    metal_texture_ids[idx] = texture_id
    metal_fuzzes[idx] = fuzz
    num_metal_materials[None] = idx + 1
    return idx


def get_metal_material_count() -> int:
    """Get the number of metal materials in the registry."""
    return int(num_metal_materials[None])


@ti.func
def scatter_metal(material_idx: ti.i32, ray: Ray, hit: HitRecord):
    """Reflect the incoming ray with fuzz.

    Args:
        material_idx: The type-local index of the material.
        ray: The incoming ray.
        hit: The surface hit being shaded.

    Returns:
        A tuple of (did_scatter, direction, albedo). When did_scatter is 0
        the ray is absorbed and the other values are meaningless.
    """
    fuzz = metal_fuzzes[material_idx]
    reflected = reflect(normalize(ray.direction), hit.n) + fuzz * random_in_unit_sphere()

    did_scatter = 0
    albedo = vec3(0.0, 0.0, 0.0)
    if tm.dot(reflected, hit.n) > 0.0:
        did_scatter = 1
        albedo = texture_value(metal_texture_ids[material_idx], hit.u, hit.v, hit.p)

    return did_scatter, reflected, albedo
