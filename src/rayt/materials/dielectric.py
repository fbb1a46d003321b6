"""Dielectric (glass/water) material implementation.

A dielectric both reflects and refracts. The normal stored in the hit record
is the shape's outward normal, so the side the ray arrives from is decided
here:

    dot(d, n) > 0   leaving the material:  normal -n, ratio ri,     cos = ri * dot(d, n) / |d|
    otherwise       entering the material: normal  n, ratio 1 / ri, cos = -dot(d, n) / |d|

If Snell's law has no solution (total internal reflection) the ray reflects.
Otherwise a uniform draw is compared against the Schlick reflectance

    R(cos) = R0 + (1 - R0) * (1 - cos)^5,    R0 = ((1 - ri) / (1 + ri))^2

and the ray refracts when the draw exceeds it. Glass does not tint, so the
albedo is always one. The sampling pdf value is the specular sentinel 0.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.materials.dielectric import add_dielectric_material
    >>> idx = add_dielectric_material(ri=1.5)
"""

import taichi as ti
import taichi.math as tm

from rayt.core.float3 import length, reflect, refract, vec3
from rayt.core.ray import Ray
from rayt.geometry.sphere import HitRecord

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 256

dielectric_ris = ti.field(dtype=ti.f64, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials."""
    num_dielectric_materials[None] = 0


def add_dielectric_material(ri: float = 1.5) -> int:
    """Add a dielectric material to the material registry.

    Args:
        ri: Refractive index. Common values: water 1.33, glass 1.5,
            diamond 2.4.

    Returns:
        The type-local index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If ri is not positive.
    """
    if ri <= 0.0:
        raise ValueError(f"Refractive index = {ri} must be positive")

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_ris[idx] = ri
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def schlick(cosine: ti.f64, ri: ti.f64) -> ti.f64:
    """Schlick's approximation of Fresnel reflectance."""
    r0 = (1.0 - ri) / (1.0 + ri)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def scatter_dielectric(material_idx: ti.i32, ray: Ray, hit: HitRecord):
    """Reflect or refract the incoming ray.

    Args:
        material_idx: The type-local index of the material.
        ray: The incoming ray.
        hit: The surface hit being shaded.

    Returns:
        A tuple of (direction, albedo). Dielectrics always scatter.
    """
    ri = dielectric_ris[material_idx]
    reflected = reflect(ray.direction, hit.n)

    d = tm.dot(ray.direction, hit.n)
    outward_normal = hit.n
    ni_over_nt = 1.0 / ri
    cosine = -d / length(ray.direction)
    if d > 0.0:
        outward_normal = -hit.n
        ni_over_nt = ri
        cosine = ri * d / length(ray.direction)

    direction = reflected
    ok, refracted = refract(ray.direction, outward_normal, ni_over_nt)
    if ok == 1:
        if ti.random(ti.f64) > schlick(cosine, ri):
            direction = refracted

    return direction, vec3(1.0, 1.0, 1.0)
