"""Pytest configuration for rayt tests.

Taichi is initialized once per session before any test imports a module that
allocates fields, and every registry is cleared around each test.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Repeated ti.init() calls discard every field allocated so far, so the
    rendering modules are only imported inside tests.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Start each test from an empty scene with a black background."""
    from rayt.materials.dielectric import clear_dielectric_materials
    from rayt.materials.diffuse_light import clear_diffuse_light_materials
    from rayt.materials.lambertian import clear_lambertian_materials
    from rayt.materials.metal import clear_metal_materials
    from rayt.materials.registry import clear_material_registry
    from rayt.materials.texture import clear_textures
    from rayt.scene.background import set_background
    from rayt.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_textures()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        clear_diffuse_light_materials()
        clear_material_registry()
        set_background((0.0, 0.0, 0.0))

    _clear_all()
    yield
    _clear_all()
