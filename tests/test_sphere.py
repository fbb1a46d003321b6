"""Unit tests for ray-sphere intersection."""

import pytest
import taichi as ti


def _hit(origin, direction, center, radius, t_min=0.001, t_max=1e300):
    """Intersect one ray with one sphere and return (hit, t, p, n, material_id)."""
    from rayt.core.float3 import vec3
    from rayt.core.ray import Ray
    from rayt.geometry.sphere import hit_sphere, make_sphere

    hit = ti.field(dtype=ti.i32, shape=())
    t = ti.field(dtype=ti.f64, shape=())
    p = ti.Vector.field(3, dtype=ti.f64, shape=())
    n = ti.Vector.field(3, dtype=ti.f64, shape=())
    mat = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel():
        ray = Ray(
            origin=vec3(origin[0], origin[1], origin[2]),
            direction=vec3(direction[0], direction[1], direction[2]),
        )
        sphere = make_sphere(vec3(center[0], center[1], center[2]), radius, 7)
        rec = hit_sphere(ray, sphere, t_min, t_max)
        hit[None] = rec.hit
        t[None] = rec.t
        p[None] = rec.p
        n[None] = rec.n
        mat[None] = rec.material_id

    test_kernel()
    return hit[None], t[None], tuple(p[None]), tuple(n[None]), mat[None]


class TestSphereHit:
    """Tests for hit_sphere."""

    def test_hit_from_outside_returns_near_root(self):
        """Test ray hitting sphere head-on from outside."""
        hit, t, p, n, mat = _hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 1
        assert t == pytest.approx(4.0)
        assert p == pytest.approx((0.0, 0.0, -4.0))
        assert n == pytest.approx((0.0, 0.0, 1.0))
        assert mat == 7

    def test_hit_from_inside_returns_far_root(self):
        """The normal stays outward even when the ray starts inside."""
        hit, t, _, n, _ = _hit((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), 2.0)
        assert hit == 1
        assert t == pytest.approx(2.0)
        assert n == pytest.approx((1.0, 0.0, 0.0))

    def test_unnormalized_direction(self):
        hit, t, p, _, _ = _hit((0.0, 0.0, 0.0), (0.0, 0.0, -2.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 1
        assert t == pytest.approx(2.0)
        assert p == pytest.approx((0.0, 0.0, -4.0))

    def test_miss(self):
        """Test ray missing sphere entirely."""
        hit, *_ = _hit((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 0

    def test_sphere_behind_ray_misses(self):
        """Test that spheres behind ray origin are missed."""
        hit, *_ = _hit((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 0

    def test_grazing_ray_misses(self):
        """A zero discriminant is not a hit."""
        hit, *_ = _hit((1.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 0

    def test_t_max_excludes_hit(self):
        """Test that hits after t_max are rejected."""
        hit, *_ = _hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0, t_max=3.5)
        assert hit == 0

    def test_t_min_skips_near_root(self):
        """Test that a near root before t_min falls through to the far root."""
        hit, t, *_ = _hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0, t_min=4.5)
        assert hit == 1
        assert t == pytest.approx(6.0)

    def test_interval_is_open(self):
        """Test that hits exactly at the interval bounds are rejected."""
        hit, *_ = _hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0, t_min=4.0, t_max=6.0)
        assert hit == 0
