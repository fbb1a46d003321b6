"""Unit tests for unified material ids and dispatch.

Tests cover:
- The material registry mapping ids to (type, type index)
- scatter / emitted / scattering_pdf per material variant
- Invalid ids behaving as non-scattering, non-emitting materials
"""

import math

import pytest
import taichi as ti


@pytest.fixture
def materials():
    """One material of every variant, registered in order."""
    from rayt.materials.dielectric import add_dielectric_material
    from rayt.materials.diffuse_light import add_diffuse_light_material
    from rayt.materials.lambertian import add_lambertian_material
    from rayt.materials.metal import add_metal_material
    from rayt.materials.registry import MaterialType, register_material
    from rayt.materials.texture import add_constant_texture

    albedo = add_constant_texture((0.5, 0.25, 0.125))
    lamp = add_constant_texture((15.0, 15.0, 15.0))
    return {
        "lambertian": register_material(MaterialType.LAMBERTIAN, add_lambertian_material(albedo)),
        "metal": register_material(MaterialType.METAL, add_metal_material(albedo, 0.0)),
        "dielectric": register_material(MaterialType.DIELECTRIC, add_dielectric_material(1.5)),
        "light": register_material(MaterialType.DIFFUSE_LIGHT, add_diffuse_light_material(lamp)),
    }


def _dispatch(material_id):
    """Run every dispatcher for a ray arriving straight down onto an upward normal."""
    from rayt.core.float3 import vec3
    from rayt.core.ray import Ray
    from rayt.geometry.sphere import HitRecord
    from rayt.materials.material import emitted, scatter, scattering_pdf

    did = ti.field(dtype=ti.i32, shape=())
    vectors = ti.Vector.field(3, dtype=ti.f64, shape=4)
    scalars = ti.field(dtype=ti.f64, shape=2)

    @ti.kernel
    def test_kernel(mat_id: ti.i32):
        ray = Ray(origin=vec3(0.0, 1.0, 0.0), direction=vec3(0.0, -1.0, 0.0))
        hit = HitRecord(
            hit=1,
            t=1.0,
            p=vec3(0.0, 0.0, 0.0),
            n=vec3(0.0, 1.0, 0.0),
            material_id=mat_id,
            u=0.0,
            v=0.0,
        )
        info = scatter(mat_id, ray, hit)
        did[None] = info.did_scatter
        vectors[0] = info.ray.origin
        vectors[1] = info.ray.direction
        vectors[2] = info.albedo
        scalars[0] = info.pdf_value
        # Seen from below, a downward-facing surface presents its front side
        viewer = Ray(origin=vec3(0.0, -1.0, 0.0), direction=vec3(0.0, 1.0, 0.0))
        facing = HitRecord(
            hit=1,
            t=1.0,
            p=vec3(0.0, 0.0, 0.0),
            n=vec3(0.0, -1.0, 0.0),
            material_id=mat_id,
            u=0.0,
            v=0.0,
        )
        vectors[3] = emitted(mat_id, viewer, facing)
        outgoing = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 1.0, 0.0))
        scalars[1] = scattering_pdf(mat_id, outgoing, hit)

    test_kernel(material_id)
    return {
        "did_scatter": did[None],
        "origin": tuple(vectors[0]),
        "direction": tuple(vectors[1]),
        "albedo": tuple(vectors[2]),
        "pdf_value": scalars[0],
        "emitted": tuple(vectors[3]),
        "scattering_pdf": scalars[1],
    }


class TestRegistry:
    """Tests for the unified id registry."""

    def test_ids_are_sequential_across_variants(self, materials):
        """Test that unified ids count across material types."""
        from rayt.materials.registry import get_material_count, is_valid_material_id

        assert [materials[k] for k in ("lambertian", "metal", "dielectric", "light")] == [0, 1, 2, 3]
        assert get_material_count() == 4
        assert is_valid_material_id(3)
        assert not is_valid_material_id(4)
        assert not is_valid_material_id(-1)

    def test_type_lookup(self, materials):
        """Test type and type-local index lookup from a unified id."""
        from rayt.materials.registry import MaterialType, get_material_type, get_material_type_index

        types = ti.field(dtype=ti.i32, shape=6)
        indices = ti.field(dtype=ti.i32, shape=6)

        @ti.kernel
        def test_kernel():
            for i in range(6):
                types[i] = get_material_type(i - 1)
                indices[i] = get_material_type_index(i - 1)

        test_kernel()
        assert types.to_numpy().tolist() == [
            -1,
            int(MaterialType.LAMBERTIAN),
            int(MaterialType.METAL),
            int(MaterialType.DIELECTRIC),
            int(MaterialType.DIFFUSE_LIGHT),
            -1,
        ]
        assert indices.to_numpy().tolist() == [-1, 0, 0, 0, 0, -1]


class TestDispatch:
    """Tests for scatter, emitted and scattering_pdf."""

    def test_lambertian(self, materials):
        """Test dispatch to a lambertian material."""
        result = _dispatch(materials["lambertian"])
        assert result["did_scatter"] == 1
        assert result["origin"] == pytest.approx((0.0, 0.0, 0.0))
        assert result["direction"][1] >= 0.0
        assert result["albedo"] == pytest.approx((0.5, 0.25, 0.125))
        assert result["pdf_value"] == pytest.approx(result["direction"][1] / math.pi)
        assert result["emitted"] == (0.0, 0.0, 0.0)
        assert result["scattering_pdf"] == pytest.approx(1.0 / math.pi)

    def test_metal(self, materials):
        """Test dispatch to a metal material."""
        result = _dispatch(materials["metal"])
        assert result["did_scatter"] == 1
        assert result["direction"] == pytest.approx((0.0, 1.0, 0.0))
        assert result["albedo"] == pytest.approx((0.5, 0.25, 0.125))
        assert result["pdf_value"] == 0.0
        assert result["emitted"] == (0.0, 0.0, 0.0)
        assert result["scattering_pdf"] == 0.0

    def test_dielectric(self, materials):
        """Test dispatch to a dielectric material."""
        result = _dispatch(materials["dielectric"])
        assert result["did_scatter"] == 1
        assert result["albedo"] == pytest.approx((1.0, 1.0, 1.0))
        assert result["pdf_value"] == 0.0
        assert result["scattering_pdf"] == 0.0

    def test_diffuse_light(self, materials):
        """Test dispatch to a diffuse light."""
        result = _dispatch(materials["light"])
        assert result["did_scatter"] == 0
        assert result["emitted"] == pytest.approx((15.0, 15.0, 15.0))
        assert result["scattering_pdf"] == 0.0

    @pytest.mark.parametrize("material_id", [-1, 99])
    def test_invalid_id_is_inert(self, materials, material_id):
        """Test that an invalid id neither scatters nor emits."""
        result = _dispatch(material_id)
        assert result["did_scatter"] == 0
        assert result["emitted"] == (0.0, 0.0, 0.0)
        assert result["scattering_pdf"] == 0.0
