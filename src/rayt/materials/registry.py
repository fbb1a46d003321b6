"""Unified material id space.

Each material variant keeps its own parameter registry with type-local
indices. This module maps a single material id, shared by every shape, to
the pair (MaterialType, type-local index) so that Taichi code can dispatch
to the right variant. Several shapes may reference the same material id;
materials are never mutated after registration.
"""

from enum import IntEnum

import taichi as ti


class MaterialType(IntEnum):
    """Enumeration of supported material variants.

    Used by the material dispatchers to select the scatter, emission and
    scattering-density functions of a material.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2
    DIFFUSE_LIGHT = 3


# Maximum number of materials across all types
MAX_MATERIALS = 1024  # 256 per type * 4 types

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_material_registry() -> None:
    """Forget every unified material id."""
    num_materials[None] = 0


def register_material(material_type: MaterialType, type_index: int) -> int:
    """Assign a unified material id to a type-local material.

    Args:
        material_type: The variant of the material.
        type_index: Index of the material in its variant registry.

    Returns:
        The new unified material id.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    material_id = num_materials[None]
    if material_id >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_types[material_id] = int(material_type)
    material_type_indices[material_id] = type_index
    num_materials[None] = material_id + 1
    return material_id


def get_material_count() -> int:
    """Get the number of registered materials."""
    return int(num_materials[None])


def is_valid_material_id(material_id: int) -> bool:
    """Return True if material_id names a registered material."""
    return 0 <= material_id < num_materials[None]


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the MaterialType of a material id, or -1 if the id is invalid."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the type-local index of a material id, or -1 if the id is invalid.

    The index addresses the variant's own parameter fields, e.g.
    metal_fuzzes[type_index].
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result
