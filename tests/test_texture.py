"""Unit tests for textures.

Tests cover:
- Constant and checker registration
- Checker pattern selection by world position
- Validation of texture ids and nested checkers
"""

import math

import pytest
import taichi as ti


def _eval(texture_id, p, u=0.0, v=0.0):
    from rayt.core.float3 import vec3
    from rayt.materials.texture import texture_value

    result = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(tex: ti.i32):
        result[None] = texture_value(tex, u, v, vec3(p[0], p[1], p[2]))

    test_kernel(texture_id)
    return tuple(result[None])


class TestConstantTexture:
    """Tests for constant textures."""

    def test_ids_are_sequential(self):
        """Test that texture ids are assigned in order."""
        from rayt.materials.texture import add_constant_texture, get_texture_count

        assert add_constant_texture((1.0, 0.0, 0.0)) == 0
        assert add_constant_texture((0.0, 1.0, 0.0)) == 1
        assert get_texture_count() == 2

    def test_value_ignores_inputs(self):
        """Test that a constant texture ignores uv and position."""
        from rayt.materials.texture import add_constant_texture

        tex = add_constant_texture((0.2, 0.4, 0.6))
        assert _eval(tex, (0.0, 0.0, 0.0)) == pytest.approx((0.2, 0.4, 0.6))
        assert _eval(tex, (100.0, -3.0, 7.0), u=0.9, v=0.1) == pytest.approx((0.2, 0.4, 0.6))

    def test_emissive_values_not_clamped(self):
        """Test that colors above 1 are kept."""
        from rayt.materials.texture import add_constant_texture

        tex = add_constant_texture((15.0, 15.0, 15.0))
        assert _eval(tex, (0.0, 0.0, 0.0)) == pytest.approx((15.0, 15.0, 15.0))

    def test_clear(self):
        from rayt.materials.texture import add_constant_texture, clear_textures, get_texture_count

        add_constant_texture((1.0, 1.0, 1.0))
        clear_textures()
        assert get_texture_count() == 0


class TestCheckerTexture:
    """Tests for the 3-D checker."""

    def test_selects_odd_where_sine_product_negative(self):
        """Test odd/even selection by the sign of the sine product."""
        from rayt.materials.texture import add_checker_texture, add_constant_texture

        odd = add_constant_texture((1.0, 0.0, 0.0))
        even = add_constant_texture((0.0, 0.0, 1.0))
        checker = add_checker_texture(odd, even, freq=1.0)

        q = math.pi / 2.0
        # sin(q)^3 > 0 -> even
        assert _eval(checker, (q, q, q)) == pytest.approx((0.0, 0.0, 1.0))
        # sin(-q) * sin(q) * sin(q) < 0 -> odd
        assert _eval(checker, (-q, q, q)) == pytest.approx((1.0, 0.0, 0.0))

    def test_zero_product_is_even(self):
        """Test that a zero sine product selects the even texture."""
        from rayt.materials.texture import add_checker_texture, add_constant_texture

        odd = add_constant_texture((1.0, 0.0, 0.0))
        even = add_constant_texture((0.0, 0.0, 1.0))
        checker = add_checker_texture(odd, even, freq=10.0)
        assert _eval(checker, (0.0, 0.3, 0.7)) == pytest.approx((0.0, 0.0, 1.0))

    def test_ignores_uv(self):
        from rayt.materials.texture import add_checker_texture, add_constant_texture

        odd = add_constant_texture((1.0, 0.0, 0.0))
        even = add_constant_texture((0.0, 0.0, 1.0))
        checker = add_checker_texture(odd, even, freq=1.0)
        p = (-1.0, 1.0, 1.0)
        assert _eval(checker, p, u=0.0, v=0.0) == _eval(checker, p, u=0.7, v=0.3)

    def test_type_lookup(self):
        from rayt.materials.texture import (
            TextureType,
            add_checker_texture,
            add_constant_texture,
            get_texture_type,
        )

        a = add_constant_texture((0.0, 0.0, 0.0))
        b = add_constant_texture((1.0, 1.0, 1.0))
        c = add_checker_texture(a, b, 2.0)
        assert get_texture_type(a) == TextureType.CONSTANT
        assert get_texture_type(c) == TextureType.CHECKER

    def test_unknown_sub_texture_rejected(self):
        from rayt.materials.texture import add_checker_texture, add_constant_texture

        a = add_constant_texture((0.0, 0.0, 0.0))
        with pytest.raises(ValueError, match="Invalid texture_id"):
            add_checker_texture(a, 5, 1.0)

    def test_nested_checker_rejected(self):
        """Test that a checker of checkers is rejected."""
        from rayt.materials.texture import add_checker_texture, add_constant_texture

        a = add_constant_texture((0.0, 0.0, 0.0))
        b = add_constant_texture((1.0, 1.0, 1.0))
        c = add_checker_texture(a, b, 2.0)
        with pytest.raises(ValueError, match="nested checkers"):
            add_checker_texture(c, b, 1.0)

    def test_check_texture_id(self):
        """Test texture id validation."""
        from rayt.materials.texture import add_constant_texture, check_texture_id

        add_constant_texture((0.0, 0.0, 0.0))
        check_texture_id(0)
        with pytest.raises(ValueError):
            check_texture_id(1)
        with pytest.raises(ValueError):
            check_texture_id(-1)
