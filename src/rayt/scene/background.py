"""Background radiance for rays that leave the scene.

The background is a vertical gradient over the normalized ray direction:

    t = 0.5 * (normalize(d).y + 1)
    L = lerp(bottom, top, t)

A constant background is the gradient with bottom == top. The reference
scene is enclosed and uses black.
"""

import taichi as ti

from rayt.core.float3 import lerp, normalize, vec3

_background_bottom = ti.Vector.field(3, dtype=ti.f64, shape=())
_background_top = ti.Vector.field(3, dtype=ti.f64, shape=())


def set_background(color: tuple[float, float, float]) -> None:
    """Use a constant background color."""
    set_background_gradient(color, color)


def set_background_gradient(
    bottom: tuple[float, float, float],
    top: tuple[float, float, float],
) -> None:
    """Blend from bottom (looking straight down) to top (looking straight up)."""
    _background_bottom[None] = vec3(bottom[0], bottom[1], bottom[2])
    _background_top[None] = vec3(top[0], top[1], top[2])


def get_background() -> tuple[tuple[float, ...], tuple[float, ...]]:
    """Current (bottom, top) background colors."""
    bottom = tuple(float(c) for c in _background_bottom[None])
    top = tuple(float(c) for c in _background_top[None])
    return bottom, top


@ti.func
def background(direction: vec3) -> vec3:
    """Radiance arriving along a ray with the given direction that hits nothing."""
    t = 0.5 * (normalize(direction).y + 1.0)
    return lerp(_background_bottom[None], _background_top[None], t)
