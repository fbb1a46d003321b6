"""Vector and color algebra for the path tracer.

Points, directions and colors share one representation: a Taichi vector of
three doubles. Arithmetic (``+ - * /``, componentwise and by scalar) comes
from Taichi itself; this module adds the geometric, color and random
sampling helpers used by every other part of the renderer.

All helpers are Taichi functions and must be called from inside a kernel.
The host-side helpers at the bottom of the module (``from_rgb``,
``from_hex``) produce plain tuples for scene construction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.core.float3 import vec3, gamma, to_rgb
    >>> @ti.kernel
    ... def encode() -> ti.i32:
    ...     return to_rgb(gamma(vec3(0.25, 0.5, 1.0), 2.2))[0]
"""

import taichi as ti
import taichi.math as tm

# Double precision 3-vector used for points, directions and colors
vec3 = ti.types.vector(3, ti.f64)

# Byte triple produced by to_rgb()
rgb8 = ti.types.vector(3, ti.i32)

# Threshold for near_zero()
EPS = 1e-6

# Scale used when converting [0, 1] colors to bytes. Values just below 256
# map 1.0 to 255 while truncating instead of rounding.
RGB_SCALE = 255.99


# =============================================================================
# Geometric Operations
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Cross product a x b."""
    return tm.cross(a, b)


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Squared Euclidean length of v."""
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> ti.f64:
    """Euclidean length of v."""
    return ti.sqrt(length_squared(v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale v to unit length.

    The result is undefined for a zero-length vector; callers must only
    normalize vectors they know to be non-degenerate.
    """
    return v / length(v)


@ti.func
def lerp(a: vec3, b: vec3, t: ti.f64) -> vec3:
    """Linear interpolation from a (t = 0) to b (t = 1)."""
    return a + (b - a) * t


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Return 1 when every component of v is smaller than EPS in magnitude."""
    return ti.abs(v.x) < EPS and ti.abs(v.y) < EPS and ti.abs(v.z) < EPS


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Mirror v about the unit normal n."""
    return v - 2.0 * tm.dot(v, n) * n


@ti.func
def refract(v: vec3, n: vec3, ni_over_nt: ti.f64):
    """Refract v through a surface with unit normal n using Snell's law.

    The normal must face the incoming side (dot(v, n) < 0).

    Args:
        v: Incoming direction (any length).
        n: Unit normal on the incident side.
        ni_over_nt: Ratio of refractive indices n_incident / n_transmitted.

    Returns:
        A tuple (ok, direction). ok is 0 on total internal reflection, in
        which case direction is the zero vector.
    """
    uv = normalize(v)
    dt = tm.dot(uv, n)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)
    ok = 0
    direction = vec3(0.0, 0.0, 0.0)
    if discriminant > 0.0:
        ok = 1
        direction = ni_over_nt * (uv - n * dt) - n * ti.sqrt(discriminant)
    return ok, direction


# =============================================================================
# Color Operations
# =============================================================================


@ti.func
def saturate(c: vec3) -> vec3:
    """Clamp every component to [0, 1]."""
    return tm.clamp(c, 0.0, 1.0)


@ti.func
def gamma(c: vec3, factor: ti.f64) -> vec3:
    """Encode linear color c with exponent 1 / factor."""
    return c ** (1.0 / factor)


@ti.func
def degamma(c: vec3, factor: ti.f64) -> vec3:
    """Decode gamma-encoded color c back to linear space."""
    return c ** factor


@ti.func
def to_rgb(c: vec3) -> rgb8:
    """Convert a color to an 8-bit triple.

    Each channel is clamped to [0, 1], scaled by 255.99 and truncated, so
    1.0 maps to 255 and 0.5 maps to 127.
    """
    scaled = RGB_SCALE * saturate(c)
    return rgb8(ti.cast(scaled.x, ti.i32), ti.cast(scaled.y, ti.i32), ti.cast(scaled.z, ti.i32))


# =============================================================================
# Random Sampling
# =============================================================================


@ti.func
def random_vec() -> vec3:
    """Uniform point in the unit cube [0, 1)^3."""
    return vec3(ti.random(ti.f64), ti.random(ti.f64), ti.random(ti.f64))


@ti.func
def random_full() -> vec3:
    """A single uniform draw in [0, 1) replicated to all three components."""
    r = ti.random(ti.f64)
    return vec3(r, r, r)


@ti.func
def random_limit(lo: ti.f64, hi: ti.f64) -> vec3:
    """Uniform point in the cube [lo, hi)^3."""
    return lo + random_vec() * (hi - lo)


@ti.func
def random_in_unit_sphere() -> vec3:
    """Uniform point strictly inside the unit sphere.

    Rejection sampling: draw from [-1, 1)^3 until the point lies inside.
    """
    p = random_limit(-1.0, 1.0)
    while length_squared(p) >= 1.0:
        p = random_limit(-1.0, 1.0)
    return p


@ti.func
def random_cosine_direction() -> vec3:
    """Cosine-weighted unit direction about the local +z axis.

    The density of the returned direction is cos(theta) / pi.
    """
    r1 = ti.random(ti.f64)
    r2 = ti.random(ti.f64)
    z = ti.sqrt(1.0 - r2)
    phi = 2.0 * tm.pi * r1
    x = ti.cos(phi) * ti.sqrt(r2)
    y = ti.sin(phi) * ti.sqrt(r2)
    return vec3(x, y, z)


# =============================================================================
# Host-side Helpers
# =============================================================================


def from_rgb(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Convert 8-bit channels to a linear [0, 1] color tuple."""
    return (r / 255.0, g / 255.0, b / 255.0)


def from_hex(hex_color: str) -> tuple[float, float, float]:
    """Convert a ``"rrggbb"`` hex string (optional leading '#') to a color tuple.

    Raises:
        ValueError: If the string is not six hexadecimal digits.
    """
    digits = hex_color.lstrip("#")
    if len(digits) != 6:
        raise ValueError(f"Expected six hex digits, got {hex_color!r}")
    return from_rgb(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
