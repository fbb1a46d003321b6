"""Offline Monte Carlo path tracer built on Taichi.

Subpackages:
    core: Vector algebra, rays, the cosine PDF, the path integrator and
        the progressive renderer
    geometry: Sphere and axis-aligned rectangle primitives, box expansion
    materials: Textures and the Lambertian, metal, dielectric and
        diffuse light materials
    scene: Primitive storage, scene manager, shape builder and the
        Cornell box
    camera: Pinhole camera
    preview: PNG output

Taichi must be initialized (see rayt.config.init_taichi) before importing
any subpackage that allocates fields.
"""

__version__ = "0.1.0"
