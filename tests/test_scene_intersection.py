"""Unit tests for scene-level intersection.

Tests cover:
- Adding and clearing primitives
- Nearest-hit selection across spheres and rectangles
- Independence from insertion order
- Per-primitive normal flipping
"""

import pytest
import taichi as ti


def _trace(origin, direction, t_min=0.001, t_max=1e300):
    """Return (hit, t, n, material_id) for the nearest scene hit."""
    from rayt.core.float3 import vec3
    from rayt.core.ray import Ray
    from rayt.scene.intersection import intersect_scene

    hit = ti.field(dtype=ti.i32, shape=())
    mat = ti.field(dtype=ti.i32, shape=())
    t = ti.field(dtype=ti.f64, shape=())
    n = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel():
        ray = Ray(
            origin=vec3(origin[0], origin[1], origin[2]),
            direction=vec3(direction[0], direction[1], direction[2]),
        )
        rec = intersect_scene(ray, t_min, t_max)
        hit[None] = rec.hit
        mat[None] = rec.material_id
        t[None] = rec.t
        n[None] = rec.n

    test_kernel()
    return hit[None], t[None], tuple(n[None]), mat[None]


class TestSceneStorage:
    """Tests for the primitive registries."""

    def test_add_and_count(self):
        """Test adding spheres and rectangles."""
        from rayt.geometry.rect import RectAxis
        from rayt.scene.intersection import add_rect, add_sphere, get_rect_count, get_sphere_count

        assert add_sphere((0.0, 0.0, 0.0), 1.0) == 0
        assert add_sphere((0.0, 0.0, 5.0), 1.0) == 1
        assert add_rect(RectAxis.XZ, 0.0, 1.0, 0.0, 1.0, 0.0) == 0
        assert get_sphere_count() == 2
        assert get_rect_count() == 1

    def test_clear(self):
        """Test that clear_scene removes every primitive."""
        from rayt.geometry.rect import RectAxis
        from rayt.scene.intersection import add_rect, add_sphere, clear_scene, get_rect_count, get_sphere_count

        add_sphere((0.0, 0.0, 0.0), 1.0)
        add_rect(RectAxis.XZ, 0.0, 1.0, 0.0, 1.0, 0.0)
        clear_scene()
        assert get_sphere_count() == 0
        assert get_rect_count() == 0

    def test_empty_scene_misses(self):
        """Test that an empty scene reports no hit."""
        hit, *_ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0


class TestNearestHit:
    """Tests for nearest-hit selection."""

    def test_nearest_sphere_wins(self):
        """Test that the nearest of two spheres is hit."""
        from rayt.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -10.0), 1.0, material_id=1)
        add_sphere((0.0, 0.0, -5.0), 1.0, material_id=2)
        hit, t, _, mat = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert t == pytest.approx(4.0)
        assert mat == 2

    def test_rect_in_front_of_sphere(self):
        """Test a rectangle occluding a sphere."""
        from rayt.geometry.rect import RectAxis
        from rayt.scene.intersection import add_rect, add_sphere

        add_sphere((0.0, 0.0, -10.0), 1.0, material_id=1)
        add_rect(RectAxis.XY, -1.0, 1.0, -1.0, 1.0, -3.0, material_id=4)
        hit, t, n, mat = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert t == pytest.approx(3.0)
        assert n == pytest.approx((0.0, 0.0, 1.0))
        assert mat == 4

    def test_sphere_in_front_of_rect(self):
        """Test a sphere occluding a rectangle."""
        from rayt.geometry.rect import RectAxis
        from rayt.scene.intersection import add_rect, add_sphere

        add_rect(RectAxis.XY, -1.0, 1.0, -1.0, 1.0, -20.0, material_id=4)
        add_sphere((0.0, 0.0, -10.0), 1.0, material_id=1)
        _, t, _, mat = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert t == pytest.approx(9.0)
        assert mat == 1

    @pytest.mark.parametrize("order", [(0, 1, 2), (2, 1, 0), (1, 2, 0)])
    def test_insertion_order_does_not_matter(self, order):
        """Test that the nearest hit is independent of insertion order."""
        from rayt.geometry.rect import RectAxis
        from rayt.scene.intersection import add_rect

        planes = [(-3.0, 10), (-7.0, 11), (-5.0, 12)]
        for i in order:
            k, material_id = planes[i]
            add_rect(RectAxis.XY, -1.0, 1.0, -1.0, 1.0, k, material_id=material_id)

        _, t, _, mat = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert t == pytest.approx(3.0)
        assert mat == 10

    def test_t_max_limits_search(self):
        """Test that hits beyond t_max are ignored."""
        from rayt.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -5.0), 1.0)
        hit, *_ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=2.0)
        assert hit == 0


class TestFlip:
    """Tests for per-primitive normal flipping."""

    def test_flipped_rect_normal(self):
        """Test that a flipped rectangle reports the negated normal."""
        from rayt.geometry.rect import RectAxis
        from rayt.scene.intersection import add_rect

        add_rect(RectAxis.XZ, 0.0, 10.0, 0.0, 10.0, 5.0, flip=True)
        hit, _, n, _ = _trace((5.0, 0.0, 5.0), (0.0, 1.0, 0.0))
        assert hit == 1
        assert n == pytest.approx((0.0, -1.0, 0.0))

    def test_flipped_sphere_normal_points_inward(self):
        """Test that a flipped sphere's normal points inward."""
        from rayt.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -5.0), 1.0, flip=True)
        _, _, n, _ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert n == pytest.approx((0.0, 0.0, -1.0))

    def test_flip_is_per_primitive(self):
        from rayt.geometry.rect import RectAxis
        from rayt.scene.intersection import add_rect

        add_rect(RectAxis.XY, -1.0, 1.0, -1.0, 1.0, -3.0, flip=True)
        add_rect(RectAxis.XY, -1.0, 1.0, -1.0, 1.0, -6.0, flip=False)
        _, _, near, _ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        _, _, far, _ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_min=4.0)
        assert near == pytest.approx((0.0, 0.0, -1.0))
        assert far == pytest.approx((0.0, 0.0, 1.0))
