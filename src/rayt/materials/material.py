"""Material dispatch over the unified material id.

Every shape stores a unified material id. The functions here look up the
material's variant in the registry and forward to that variant's
implementation:

    variant         scatter                      emitted         scattering_pdf
    LAMBERTIAN      cosine sample, pdf cos/pi    zero            max(cos, 0)/pi
    METAL           fuzzed mirror, pdf 0         zero            zero
    DIELECTRIC      reflect or refract, pdf 0    zero            zero
    DIFFUSE_LIGHT   never                        front-face      zero

A pdf_value of 0 in ScatterInfo marks a specular scatter whose direction has
no meaningful density.
"""

import taichi as ti

from rayt.core.float3 import vec3
from rayt.core.ray import Ray
from rayt.geometry.sphere import HitRecord
from rayt.materials.dielectric import scatter_dielectric
from rayt.materials.diffuse_light import emitted_diffuse_light
from rayt.materials.lambertian import scatter_lambertian, scattering_pdf_lambertian
from rayt.materials.metal import scatter_metal
from rayt.materials.registry import MaterialType, get_material_type, get_material_type_index


@ti.dataclass
class ScatterInfo:
    """Result of a material scatter.

    Attributes:
        did_scatter: 1 if the material produced an outgoing ray, 0 if the
            incoming ray was absorbed. Other fields are only meaningful when
            did_scatter == 1.
        ray: The outgoing ray, starting at the hit point.
        albedo: Attenuation color applied to light along the outgoing ray.
        pdf_value: Density of the outgoing direction under the material's
            own sampling, or 0 for specular scatters.
    """

    did_scatter: ti.i32
    ray: Ray
    albedo: vec3
    pdf_value: ti.f64


@ti.func
def scatter(material_id: ti.i32, ray: Ray, hit: HitRecord) -> ScatterInfo:
    """Scatter an incoming ray off the material of a hit.

    Args:
        material_id: Unified material id of the struck surface.
        ray: The incoming ray.
        hit: The surface hit being shaded.

    Returns:
        A ScatterInfo; did_scatter is 0 for absorbed rays, emitters and
        invalid material ids.
    """
    mat_type = get_material_type(material_id)
    type_idx = get_material_type_index(material_id)

    did_scatter = 0
    direction = vec3(0.0, 0.0, 0.0)
    albedo = vec3(0.0, 0.0, 0.0)
    pdf_value = 0.0

    if mat_type == int(MaterialType.LAMBERTIAN):
        d, a, p = scatter_lambertian(type_idx, hit)
        did_scatter = 1
        direction = d
        albedo = a
        pdf_value = p
    elif mat_type == int(MaterialType.METAL):
        s, d, a = scatter_metal(type_idx, ray, hit)
        did_scatter = s
        direction = d
        albedo = a
    elif mat_type == int(MaterialType.DIELECTRIC):
        d, a = scatter_dielectric(type_idx, ray, hit)
        did_scatter = 1
        direction = d
        albedo = a

    return ScatterInfo(
        did_scatter=did_scatter,
        ray=Ray(origin=hit.p, direction=direction),
        albedo=albedo,
        pdf_value=pdf_value,
    )


@ti.func
def emitted(material_id: ti.i32, ray: Ray, hit: HitRecord) -> vec3:
    """Radiance emitted by the material toward the viewer of ray."""
    result = vec3(0.0, 0.0, 0.0)
    if get_material_type(material_id) == int(MaterialType.DIFFUSE_LIGHT):
        result = emitted_diffuse_light(get_material_type_index(material_id), ray, hit)
    return result


@ti.func
def scattering_pdf(material_id: ti.i32, ray: Ray, hit: HitRecord) -> ti.f64:
    """Scattering density of the material for the outgoing ray."""
    result = 0.0
    if get_material_type(material_id) == int(MaterialType.LAMBERTIAN):
        result = scattering_pdf_lambertian(ray, hit)
    return result
