"""Cosine-weighted importance-sampling density.

The integrator samples every diffuse bounce from this distribution and
divides by its density:

    generate(hit)       cosine-weighted direction about hit.n
    value(hit, dir)     cos(theta) / pi, or 0 behind the surface

where theta is the angle between the normalized direction and hit.n.
"""

import taichi as ti
import taichi.math as tm

from rayt.core.float3 import normalize, random_cosine_direction, vec3
from rayt.core.ray import build_onb, onb_local
from rayt.geometry.sphere import HitRecord


@ti.func
def cosine_pdf_value(hit: HitRecord, direction: vec3) -> ti.f64:
    """Density of direction under cosine sampling about the hit normal."""
    cosine = tm.dot(normalize(direction), hit.n)
    result = 0.0
    if cosine > 0.0:
        result = cosine / tm.pi
    return result


@ti.func
def cosine_pdf_generate(hit: HitRecord) -> vec3:
    """Draw a cosine-weighted unit direction about the hit normal."""
    return onb_local(build_onb(hit.n), random_cosine_direction())
