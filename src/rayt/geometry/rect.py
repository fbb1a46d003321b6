"""Axis-aligned rectangle primitive.

A rectangle lies in a plane perpendicular to one coordinate axis at offset
k and spans [x0, x1] x [y0, y1] in the two remaining coordinates. All three
orientations share one intersection routine: the ray is permuted so that the
rectangle becomes the canonical XY rectangle at z = k, tested there, and the
hit point is evaluated on the original ray.

    axis  plane   spans (x0..x1, y0..y1)   normal
    XY    z = k   x, y                     +z
    XZ    y = k   x, z                     +y
    YZ    x = k   y, z                     +x

Texture coordinates are the hit position normalized over the rectangle, so
the center of any rectangle has u = v = 0.5.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.geometry.rect import Rect, RectAxis, hit_rect
    >>> # Floor: XZ rectangle at y = 0 spanning x, z in [0, 555]
    >>> # Rect(x0=0, x1=555, y0=0, y1=555, k=0, axis=int(RectAxis.XZ), material_id=0)
"""

from enum import IntEnum

import taichi as ti

from rayt.core.float3 import vec3
from rayt.core.ray import Ray, ray_at
from rayt.geometry.sphere import HitRecord, make_miss_record

# Rays whose direction component along the plane normal is below this
# magnitude are treated as parallel to the rectangle.
PARALLEL_EPSILON = 1e-12


class RectAxis(IntEnum):
    """Orientation of an axis-aligned rectangle, named by the plane it spans."""

    XY = 0
    XZ = 1
    YZ = 2


@ti.dataclass
class Rect:
    """An axis-aligned rectangle bound to a material.

    Attributes:
        x0, x1: Extent along the first in-plane axis.
        y0, y1: Extent along the second in-plane axis.
        k: Offset of the plane along its normal axis.
        axis: RectAxis value selecting the orientation.
        material_id: Unified material id used for shading.
    """

    x0: ti.f64
    x1: ti.f64
    y0: ti.f64
    y1: ti.f64
    k: ti.f64
    axis: ti.i32
    material_id: ti.i32


@ti.func
def _permute(v: vec3, axis: ti.i32) -> vec3:
    """Reorder v so that the rectangle's normal axis becomes z."""
    result = v
    if axis == int(RectAxis.XZ):
        result = vec3(v.x, v.z, v.y)
    elif axis == int(RectAxis.YZ):
        result = vec3(v.y, v.z, v.x)
    return result


@ti.func
def rect_normal(axis: ti.i32) -> vec3:
    """The fixed unit normal of a rectangle orientation."""
    n = vec3(0.0, 0.0, 1.0)
    if axis == int(RectAxis.XZ):
        n = vec3(0.0, 1.0, 0.0)
    elif axis == int(RectAxis.YZ):
        n = vec3(1.0, 0.0, 0.0)
    return n


@ti.func
def hit_rect(ray: Ray, rect: Rect, t_min: ti.f64, t_max: ti.f64) -> HitRecord:
    """Intersect a ray with an axis-aligned rectangle over (t_min, t_max).

    Args:
        ray: The ray to test.
        rect: The rectangle to test against.
        t_min: Lower bound of accepted ray parameters (exclusive).
        t_max: Upper bound of accepted ray parameters (exclusive).

    Returns:
        The intersection, or a miss record. Rays parallel to the plane miss.
    """
    rec = make_miss_record()

    origin = _permute(ray.origin, rect.axis)
    direction = _permute(ray.direction, rect.axis)

    if ti.abs(direction.z) > PARALLEL_EPSILON:
        t = (rect.k - origin.z) / direction.z
        if t_min < t and t < t_max:
            x = origin.x + t * direction.x
            y = origin.y + t * direction.y
            if rect.x0 <= x and x <= rect.x1 and rect.y0 <= y and y <= rect.y1:
                rec = HitRecord(
                    hit=1,
                    t=t,
                    p=ray_at(ray, t),
                    n=rect_normal(rect.axis),
                    material_id=rect.material_id,
                    u=(x - rect.x0) / (rect.x1 - rect.x0),
                    v=(y - rect.y0) / (rect.y1 - rect.y0),
                )

    return rec
