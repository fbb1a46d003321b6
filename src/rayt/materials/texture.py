"""Texture registry and evaluation.

A texture maps a surface parametrization (u, v) and a world-space point to a
color. Two variants are supported:

    CONSTANT  a single color, independent of every input
    CHECKER   a 3-D checker pattern selecting between two sub-textures

The checker evaluates sin(freq * x) * sin(freq * y) * sin(freq * z) at the hit
point. A negative product selects the "odd" texture, anything else the "even"
texture, so the pattern depends only on world position and not on (u, v).

Textures live in Taichi fields indexed by a texture id. Sub-textures of a
checker must be constant textures, since texture evaluation runs inside
Taichi functions where recursion is not available.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.materials.texture import add_constant_texture, add_checker_texture
    >>> black = add_constant_texture((0.0, 0.0, 0.0))
    >>> white = add_constant_texture((1.0, 1.0, 1.0))
    >>> checker = add_checker_texture(black, white, freq=10.0)
"""

from enum import IntEnum

import taichi as ti

from rayt.core.float3 import vec3


class TextureType(IntEnum):
    """Enumeration of supported texture variants."""

    CONSTANT = 0
    CHECKER = 1


# Maximum number of textures in the scene
MAX_TEXTURES = 256

texture_types = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
texture_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_TEXTURES)
texture_odd_ids = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
texture_even_ids = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
texture_freqs = ti.field(dtype=ti.f64, shape=MAX_TEXTURES)
num_textures = ti.field(dtype=ti.i32, shape=())


def clear_textures() -> None:
    """Clear all textures.

    Resets the texture count to zero. Existing field data is overwritten
    when new textures are added.
    """
    num_textures[None] = 0


def get_texture_count() -> int:
    """Get the number of registered textures."""
    return int(num_textures[None])


def get_texture_type(texture_id: int) -> TextureType:
    """Get the variant of a registered texture.

    Raises:
        ValueError: If texture_id is not a registered texture.
    """
    check_texture_id(texture_id)
    return TextureType(int(texture_types[texture_id]))


def check_texture_id(texture_id: int) -> None:
    """Raise ValueError unless texture_id names a registered texture."""
    if not 0 <= texture_id < num_textures[None]:
        raise ValueError(
            f"Invalid texture_id {texture_id}. Valid range: 0 to {num_textures[None] - 1}"
        )


def _next_texture_index() -> int:
    idx = num_textures[None]
    if idx >= MAX_TEXTURES:
        raise RuntimeError(f"Maximum number of textures ({MAX_TEXTURES}) exceeded")
    return idx


def add_constant_texture(color: tuple[float, float, float]) -> int:
    """Add a constant-color texture.

    Args:
        color: The (R, G, B) color returned for every lookup. Components are
            not clamped, so emissive textures may exceed 1.

    Returns:
        The texture id.

    Raises:
        RuntimeError: If the maximum number of textures is exceeded.
    """
    idx = _next_texture_index()
    texture_types[idx] = int(TextureType.CONSTANT)
    texture_colors[idx] = vec3(color[0], color[1], color[2])
    texture_odd_ids[idx] = -1
    texture_even_ids[idx] = -1
    texture_freqs[idx] = 0.0
    num_textures[None] = idx + 1
    return idx


def add_checker_texture(odd_id: int, even_id: int, freq: float) -> int:
    """Add a 3-D checker texture over two existing constant textures.

    Args:
        odd_id: Texture id used where the sine product is negative.
        even_id: Texture id used elsewhere.
        freq: Spatial frequency of the pattern.

    Returns:
        The texture id.

    Raises:
        ValueError: If either sub-texture is unknown or is itself a checker.
        RuntimeError: If the maximum number of textures is exceeded.
    """
    for sub_id in (odd_id, even_id):
        if get_texture_type(sub_id) != TextureType.CONSTANT:
            raise ValueError(
                f"Checker sub-texture {sub_id} must be a constant texture; nested checkers are not supported"
            )

    idx = _next_texture_index()
    texture_types[idx] = int(TextureType.CHECKER)
    texture_colors[idx] = vec3(0.0, 0.0, 0.0)
    texture_odd_ids[idx] = odd_id
    texture_even_ids[idx] = even_id
    texture_freqs[idx] = freq
    num_textures[None] = idx + 1
    return idx


@ti.func
def texture_value(texture_id: ti.i32, u: ti.f64, v: ti.f64, p: vec3) -> vec3:
    """Evaluate a texture at surface coordinates (u, v) and point p.

    Args:
        texture_id: Id of the texture to evaluate.
        u: First surface coordinate (unused by the built-in variants).
        v: Second surface coordinate (unused by the built-in variants).
        p: World-space point being shaded.

    Returns:
        The texture color.
    """
    color = texture_colors[texture_id]
    if texture_types[texture_id] == int(TextureType.CHECKER):
        freq = texture_freqs[texture_id]
        sines = ti.sin(freq * p.x) * ti.sin(freq * p.y) * ti.sin(freq * p.z)
        if sines < 0.0:
            color = texture_colors[texture_odd_ids[texture_id]]
        else:
            color = texture_colors[texture_even_ids[texture_id]]
    return color
