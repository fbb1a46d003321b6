"""One-sided area light material.

A diffuse light never scatters. It emits its texture color toward the side
its normal faces: a ray arriving against the normal (dot(d, n) < 0) sees the
emission, a ray arriving from behind sees black. Wrapping an emitter in a
flipped face therefore turns the lit side around.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.materials.texture import add_constant_texture
    >>> from rayt.materials.diffuse_light import add_diffuse_light_material
    >>> lamp = add_constant_texture((15.0, 15.0, 15.0))
    >>> idx = add_diffuse_light_material(lamp)
"""

import taichi as ti
import taichi.math as tm

from rayt.core.float3 import vec3
from rayt.core.ray import Ray
from rayt.geometry.sphere import HitRecord
from rayt.materials.texture import check_texture_id, texture_value

# Maximum number of diffuse light materials in the scene
MAX_DIFFUSE_LIGHT_MATERIALS = 256

diffuse_light_texture_ids = ti.field(dtype=ti.i32, shape=MAX_DIFFUSE_LIGHT_MATERIALS)
num_diffuse_light_materials = ti.field(dtype=ti.i32, shape=())


def clear_diffuse_light_materials() -> None:
    """Clear all diffuse light materials."""
    num_diffuse_light_materials[None] = 0


def add_diffuse_light_material(texture_id: int) -> int:
    """Add a diffuse light material to the material registry.

    Args:
        texture_id: Id of the emission texture. Colors above 1 are allowed.

    Returns:
        The type-local index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If texture_id is not a registered texture.
    """
    check_texture_id(texture_id)

    idx = num_diffuse_light_materials[None]
    if idx >= MAX_DIFFUSE_LIGHT_MATERIALS:
        raise RuntimeError(
            f"Maximum number of diffuse light materials ({MAX_DIFFUSE_LIGHT_MATERIALS}) exceeded"
        )

    diffuse_light_texture_ids[idx] = texture_id
    num_diffuse_light_materials[None] = idx + 1
    return idx


def get_diffuse_light_material_count() -> int:
    """Get the number of diffuse light materials in the registry."""
    return int(num_diffuse_light_materials[None])


@ti.func
def emitted_diffuse_light(material_idx: ti.i32, ray: Ray, hit: HitRecord) -> vec3:
    """Emission seen along ray: the texture color from the front, zero from behind."""
    result = vec3(0.0, 0.0, 0.0)
    if tm.dot(ray.direction, hit.n) < 0.0:
        result = texture_value(diffuse_light_texture_ids[material_idx], hit.u, hit.v, hit.p)
    return result
