"""Scene-level primitive storage and nearest-hit queries.

The scene's shape list is flattened into Taichi fields, one
structure-of-arrays block per primitive kind. Composite shapes (boxes) are
expanded into their rectangles before they reach this module, and the
normal-flipping wrapper is a per-primitive flag that negates the normal of
every hit on that primitive.

intersect_scene walks every primitive and shrinks its upper bound to the
closest accepted hit, so the result is the globally nearest hit whatever the
insertion order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.scene.intersection import add_sphere, add_rect, clear_scene
    >>> from rayt.geometry.rect import RectAxis
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
    >>> add_rect(RectAxis.XZ, 0.0, 555.0, 0.0, 555.0, 0.0, material_id=1)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti

from rayt.core.float3 import vec3
from rayt.core.ray import Ray
from rayt.geometry.rect import Rect, RectAxis, hit_rect
from rayt.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss_record

# Maximum number of primitives supported in the scene
MAX_SPHERES = 1024
MAX_RECTS = 1024

# Sphere storage
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
sphere_flips = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Rect storage: bounds packed as (x0, x1, y0, y1)
rect_bounds = ti.Vector.field(4, dtype=ti.f64, shape=MAX_RECTS)
rect_offsets = ti.field(dtype=ti.f64, shape=MAX_RECTS)
rect_axes = ti.field(dtype=ti.i32, shape=MAX_RECTS)
rect_material_ids = ti.field(dtype=ti.i32, shape=MAX_RECTS)
rect_flips = ti.field(dtype=ti.i32, shape=MAX_RECTS)
num_rects = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the primitive counts to zero. The field data is overwritten when
    new primitives are added.
    """
    num_spheres[None] = 0
    num_rects[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material_id: int = 0,
    flip: bool = False,
) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        material_id: The unified material id of the sphere.
        flip: Negate the normal of every hit on this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = vec3(center[0], center[1], center[2])
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    sphere_flips[idx] = int(flip)
    num_spheres[None] = idx + 1
    return idx


def add_rect(
    axis: RectAxis,
    x0: float,
    x1: float,
    y0: float,
    y1: float,
    k: float,
    material_id: int = 0,
    flip: bool = False,
) -> int:
    """Add an axis-aligned rectangle to the scene.

    Args:
        axis: Orientation of the rectangle.
        x0, x1: Extent along the first in-plane axis.
        y0, y1: Extent along the second in-plane axis.
        k: Plane offset along the normal axis.
        material_id: The unified material id of the rectangle.
        flip: Negate the normal of every hit on this rectangle.

    Returns:
        The index of the added rectangle.

    Raises:
        RuntimeError: If the maximum number of rectangles is exceeded.
    """
    idx = num_rects[None]
    if idx >= MAX_RECTS:
        raise RuntimeError(f"Maximum number of rects ({MAX_RECTS}) exceeded")
    rect_bounds[idx] = ti.Vector([x0, x1, y0, y1], dt=ti.f64)
    rect_offsets[idx] = k
    rect_axes[idx] = int(axis)
    rect_material_ids[idx] = material_id
    rect_flips[idx] = int(flip)
    num_rects[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_rect_count() -> int:
    """Get the number of rectangles in the scene."""
    return int(num_rects[None])


@ti.func
def _apply_flip(rec: HitRecord, flip: ti.i32) -> HitRecord:
    """Negate the normal of a hit record when flip is set."""
    result = rec
    if flip == 1:
        result.n = -rec.n
    return result


@ti.func
def intersect_scene(ray: Ray, t_min: ti.f64, t_max: ti.f64) -> HitRecord:
    """Find the nearest primitive hit over (t_min, t_max).

    Args:
        ray: The ray to test.
        t_min: Lower bound of accepted ray parameters (exclusive).
        t_max: Upper bound of accepted ray parameters (exclusive).

    Returns:
        The closest intersection, or a miss record if nothing was hit.
    """
    closest_t = t_max
    result = make_miss_record()

    for i in range(num_spheres[None]):
        sphere = Sphere(
            center=sphere_centers[i],
            radius=sphere_radii[i],
            material_id=sphere_material_ids[i],
        )
        rec = hit_sphere(ray, sphere, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _apply_flip(rec, sphere_flips[i])

    for i in range(num_rects[None]):
        bounds = rect_bounds[i]
        rect = Rect(
            x0=bounds[0],
            x1=bounds[1],
            y0=bounds[2],
            y1=bounds[3],
            k=rect_offsets[i],
            axis=rect_axes[i],
            material_id=rect_material_ids[i],
        )
        rec = hit_rect(ray, rect, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _apply_flip(rec, rect_flips[i])

    return result
