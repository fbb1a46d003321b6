"""Ray data structure and orthonormal basis.

A ray is an origin and a direction; ``ray_at`` evaluates the point at a
parameter t. The orthonormal basis (ONB) aligns a local frame with a surface
normal so that directions sampled around +z can be steered around the normal.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.core.ray import Ray, ray_at, build_onb, onb_local, vec3
    >>> @ti.kernel
    ... def demo() -> ti.f64:
    ...     ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    ...     return ray_at(ray, 5.0).z
"""

import taichi as ti

from rayt.core.float3 import cross, normalize, vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Not required to be unit length.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute origin + t * direction."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Orthonormal Basis
# =============================================================================


@ti.dataclass
class ONB:
    """A right-handed orthonormal frame.

    Attributes:
        u: Local x-axis in world space.
        v: Local y-axis in world space.
        w: Local z-axis in world space (the normal the frame was built from).
    """

    u: vec3
    v: vec3
    w: vec3


@ti.func
def build_onb(n: vec3) -> ONB:
    """Build a right-handed frame whose z-axis is the normalized n.

    A helper axis not parallel to n is crossed with it to obtain the tangent;
    the bitangent completes the frame so that cross(u, v) == w.
    """
    w = normalize(n)
    a = vec3(1.0, 0.0, 0.0)
    if ti.abs(w.x) > 0.9:
        a = vec3(0.0, 1.0, 0.0)
    u = normalize(cross(a, w))
    v = cross(w, u)
    return ONB(u=u, v=v, w=w)


@ti.func
def onb_local(onb: ONB, a: vec3) -> vec3:
    """Map a vector expressed in the local frame into world space."""
    return a.x * onb.u + a.y * onb.v + a.z * onb.w

