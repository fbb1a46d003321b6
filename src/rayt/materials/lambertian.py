"""Lambertian (ideal diffuse) material implementation.

A Lambertian surface scatters incident light with a cosine-weighted
distribution about the surface normal. The material stores the texture id of
its albedo.

Scattering draws a cosine-weighted direction in the local frame of the hit
normal, so the sampling density of the outgoing direction is

    pdf(wo) = cos(theta) / pi

and the scattering density the integrator weights against is the same
expression, clamped at zero for directions below the surface:

    scattering_pdf(wo) = max(cos(theta), 0) / pi

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.materials.texture import add_constant_texture
    >>> from rayt.materials.lambertian import add_lambertian_material
    >>> white = add_constant_texture((0.73, 0.73, 0.73))
    >>> idx = add_lambertian_material(white)
"""

import taichi as ti
import taichi.math as tm

from rayt.core.float3 import normalize, random_cosine_direction, vec3
from rayt.core.ray import Ray, build_onb, onb_local
from rayt.geometry.sphere import HitRecord
from rayt.materials.texture import check_texture_id, texture_value

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 256

lambertian_texture_ids = ti.field(dtype=ti.i32, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Clear all Lambertian materials."""
    num_lambertian_materials[None] = 0


def add_lambertian_material(texture_id: int) -> int:
    """Add a Lambertian material to the material registry.

    Args:
        texture_id: Id of the albedo texture.

    Returns:
        The type-local index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If texture_id is not a registered texture.
    """
    check_texture_id(texture_id)

    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_texture_ids[idx] = texture_id
    num_lambertian_materials[None] = idx + 1
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def scatter_lambertian(material_idx: ti.i32, hit: HitRecord):
    """Sample a cosine-weighted scatter direction about the hit normal.

    Args:
        material_idx: The type-local index of the material.
        hit: The surface hit being shaded.

    Returns:
        A tuple of (direction, albedo, pdf_value) where direction is the
        normalized outgoing direction and pdf_value is its sampling density.
    """
    onb = build_onb(hit.n)
    direction = normalize(onb_local(onb, random_cosine_direction()))
    albedo = albedo_lambertian(material_idx, hit)
    pdf_value = tm.dot(direction, hit.n) / tm.pi
    return direction, albedo, pdf_value


@ti.func
def scattering_pdf_lambertian(ray: Ray, hit: HitRecord) -> ti.f64:
    """Scattering density of the outgoing ray, max(cos(theta), 0) / pi."""
    cosine = tm.dot(normalize(ray.direction), hit.n)
    return ti.max(cosine, 0.0) / tm.pi


@ti.func
def albedo_lambertian(material_idx: ti.i32, hit: HitRecord) -> vec3:
    """Evaluate the albedo texture of a Lambertian material at a hit."""
    return texture_value(lambertian_texture_ids[material_idx], hit.u, hit.v, hit.p)

