"""Sphere primitive and the shared hit record.

The ray-sphere intersection solves

    |origin + t * direction - center|^2 = radius^2

for t. The near root is tested first and the far root only if the near one
falls outside the open interval (t_min, t_max). A discriminant that is not
strictly positive is a miss, so grazing rays never produce a hit.

The normal stored in the hit record is the outward normal (p - center) / r.
It is not flipped toward the ray; materials that care about the side a ray
arrives from compare the ray direction with the normal themselves.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.geometry.sphere import Sphere, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from rayt.core.float3 import vec3
from rayt.core.ray import Ray, ray_at


@ti.dataclass
class HitRecord:
    """Record of a ray-shape intersection.

    Attributes:
        hit: 1 if the ray intersected the shape, 0 on a miss. The other
            fields are only meaningful when hit == 1.
        t: Ray parameter of the intersection.
        p: World-space intersection point.
        n: Unit outward normal of the shape at p (after any face flip).
        material_id: Unified material id of the struck shape.
        u: First texture coordinate.
        v: Second texture coordinate.
    """

    hit: ti.i32
    t: ti.f64
    p: vec3
    n: vec3
    material_id: ti.i32
    u: ti.f64
    v: ti.f64


@ti.dataclass
class Sphere:
    """A sphere bound to a material.

    Attributes:
        center: Center of the sphere.
        radius: Radius of the sphere (positive).
        material_id: Unified material id used for shading.
    """

    center: vec3
    radius: ti.f64
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """A HitRecord describing no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        p=vec3(0.0, 0.0, 0.0),
        n=vec3(0.0, 0.0, 0.0),
        material_id=-1,
        u=0.0,
        v=0.0,
    )


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f64, t_max: ti.f64) -> HitRecord:
    """Intersect a ray with a sphere over the open interval (t_min, t_max).

    Args:
        ray: The ray to test.
        sphere: The sphere to test against.
        t_min: Lower bound of accepted ray parameters (exclusive).
        t_max: Upper bound of accepted ray parameters (exclusive).

    Returns:
        The nearest accepted intersection, or a miss record.
    """
    rec = make_miss_record()

    oc = ray.origin - sphere.center
    a = tm.dot(ray.direction, ray.direction)
    b = 2.0 * tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    if discriminant > 0.0:
        root = ti.sqrt(discriminant)

        # Near root first, far root as fallback
        t = (-b - root) / (2.0 * a)
        valid = t_min < t and t < t_max
        if not valid:
            t = (-b + root) / (2.0 * a)
            valid = t_min < t and t < t_max

        if valid:
            p = ray_at(ray, t)
            rec = HitRecord(
                hit=1,
                t=t,
                p=p,
                n=(p - sphere.center) / sphere.radius,
                material_id=sphere.material_id,
                u=0.0,
                v=0.0,
            )

    return rec


@ti.func
def make_sphere(center: vec3, radius: ti.f64, material_id: ti.i32) -> Sphere:
    """Create a sphere inside a kernel."""
    return Sphere(center=center, radius=radius, material_id=material_id)
