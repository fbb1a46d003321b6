"""Core rendering module.

Components:
    float3: Vector and color algebra, random sampling helpers
    ray: Ray and orthonormal basis
    pdf: Cosine-weighted importance-sampling density
    integrator: Depth-bounded path integrator and render target
    progressive: Batch renderer over the integrator's buffers
"""

from .float3 import (
    EPS,
    cross,
    degamma,
    dot,
    from_hex,
    from_rgb,
    gamma,
    length,
    length_squared,
    lerp,
    near_zero,
    normalize,
    random_cosine_direction,
    random_full,
    random_in_unit_sphere,
    random_limit,
    random_vec,
    reflect,
    refract,
    saturate,
    to_rgb,
    vec3,
)
from .ray import ONB, Ray, build_onb, make_ray, onb_local, ray_at

# integrator and progressive allocate Taichi fields and are not imported here.
# Import them directly from rayt.core.integrator and rayt.core.progressive.

__all__ = [
    "EPS",
    "vec3",
    "dot",
    "cross",
    "length",
    "length_squared",
    "normalize",
    "lerp",
    "near_zero",
    "reflect",
    "refract",
    "saturate",
    "gamma",
    "degamma",
    "to_rgb",
    "random_vec",
    "random_full",
    "random_limit",
    "random_in_unit_sphere",
    "random_cosine_direction",
    "from_rgb",
    "from_hex",
    "Ray",
    "ray_at",
    "make_ray",
    "ONB",
    "build_onb",
    "onb_local",
]
