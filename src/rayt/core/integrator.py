"""Depth-bounded Monte Carlo path integrator and render target.

The radiance carried back along a ray is estimated as

    trace(ray, depth) =
        background(d)                                       no hit
        Le                                                  depth == 0 or no scatter
        Le + albedo * p_scatter(w) * trace(ray_w, depth - 1) / p_cos(w)
                                                            otherwise

where Le is the emission of the struck material, w is a direction drawn from
the cosine density about the hit normal, p_cos(w) its density and p_scatter(w)
the material's scattering density for w. If p_cos(w) is not positive only Le
is returned. Materials whose scattering density is zero (metal, dielectric)
therefore contribute their emission only.

Taichi functions cannot recurse, so the estimator is evaluated as a loop
carrying the path throughput (the product of the albedo * p_scatter / p_cos
factors so far). The loop body runs at most depth + 1 times; a path also ends
as soon as its throughput is zero, since every later term would be scaled
by it.

Per pixel, render_image() draws num_samples jittered camera rays in one
parallel kernel and adds them to an accumulation buffer. resolve_image()
averages, gamma-encodes and quantizes the buffer to bytes.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.core.integrator import setup_render_target, render_image, get_image_uint8
    >>> from rayt.scene.cornell_box import create_cornell_box_scene
    >>> from rayt.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_cornell_box_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(200, 200)
    >>> render_image(num_samples=8)
    >>> image = get_image_uint8()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from rayt.camera.pinhole import get_ray_jittered
from rayt.core.float3 import gamma, to_rgb, vec3
from rayt.core.pdf import cosine_pdf_generate, cosine_pdf_value
from rayt.core.ray import Ray
from rayt.materials.material import emitted, scatter, scattering_pdf
from rayt.scene.background import background
from rayt.scene.intersection import intersect_scene

# =============================================================================
# Rendering Constants
# =============================================================================

# Default maximum number of scatter events per path
MAX_DEPTH = 50

# Accepted ray parameter interval; the lower bound avoids self-intersection
T_MIN = 0.001
T_MAX = 1e300

# Default gamma used when encoding the image
GAMMA_FACTOR = 2.2

# =============================================================================
# Render Target
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Sum of all radiance samples per pixel
_color_sum = ti.Vector.field(3, dtype=ti.f64, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Number of samples in _color_sum per pixel
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Gamma-encoded 8-bit result written by resolve_image()
_pixels = ti.Vector.field(3, dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image size and clear the buffers.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Discard every accumulated sample."""
    _color_sum.fill(0.0)
    _sample_count.fill(0)
    _pixels.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the active (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def trace(ray: Ray, depth: ti.i32) -> vec3:
    """Estimate the radiance arriving along ray with at most depth bounces.

    Args:
        ray: The ray to follow.
        depth: Remaining number of scatter events. 0 returns emission only.

    Returns:
        The radiance estimate (RGB), unclamped.
    """
    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray
    remaining = depth
    active = 1

    for _ in range(depth + 1):
        if active == 1:
            active = 0
            hit = intersect_scene(current, T_MIN, T_MAX)

            if hit.hit == 0:
                radiance += throughput * background(current.direction)
            else:
                radiance += throughput * emitted(hit.material_id, current, hit)

                if remaining > 0:
                    info = scatter(hit.material_id, current, hit)
                    if info.did_scatter == 1:
                        direction = cosine_pdf_generate(hit)
                        next_ray = Ray(origin=hit.p, direction=direction)
                        spdf = cosine_pdf_value(hit, direction)
                        if spdf > 0.0:
                            weight = info.albedo * scattering_pdf(hit.material_id, next_ray, hit) / spdf
                            throughput *= weight
                            if throughput.max() > 0.0:
                                active = 1
                                current = next_ray
                                remaining -= 1

    return radiance


@ti.func
def _scrub(color: vec3) -> vec3:
    """Replace NaN, infinite and negative channels with zero."""
    result = color
    for c in ti.static(range(3)):
        if tm.isnan(result[c]) or tm.isinf(result[c]) or result[c] < 0.0:
            result[c] = 0.0
    return result


@ti.func
def render_sample_impl(
    pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32
) -> vec3:
    """Trace one jittered camera ray through pixel (i, j), row 0 at the bottom."""
    ray = get_ray_jittered(pixel_i, pixel_j, width, height)
    return _scrub(trace(ray, max_depth))


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_pixels(width: ti.i32, height: ti.i32, num_samples: ti.i32, max_depth: ti.i32):
    """Accumulate num_samples samples into every pixel.

    The outer loop is parallelized by Taichi; each pixel is written by
    exactly one thread.
    """
    for i, j in ti.ndrange(width, height):
        total = vec3(0.0, 0.0, 0.0)
        for _ in range(num_samples):
            total += render_sample_impl(i, j, width, height, max_depth)
        _color_sum[i, j] += total
        _sample_count[i, j] += num_samples


@ti.kernel
def _resolve(width: ti.i32, height: ti.i32, gamma_factor: ti.f64):
    """Average, gamma-encode and quantize the accumulation buffer."""
    for i, j in ti.ndrange(width, height):
        n = _sample_count[i, j]
        color = vec3(0.0, 0.0, 0.0)
        if n > 0:
            color = _color_sum[i, j] / ti.cast(n, ti.f64)
        _pixels[i, j] = to_rgb(gamma(color, gamma_factor))


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32
) -> vec3:
    return render_sample_impl(pixel_i, pixel_j, width, height, max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_sample(pixel_i: int, pixel_j: int, max_depth: int = MAX_DEPTH) -> tuple[float, float, float]:
    """Trace a single sample for one pixel without touching the buffers.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = bottom).
        max_depth: Maximum number of scatter events.

    Returns:
        Tuple of (R, G, B) linear radiance.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, height, max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def render_image(num_samples: int = 1, max_depth: int = MAX_DEPTH) -> None:
    """Add num_samples samples per pixel to the accumulation buffer.

    Can be called repeatedly; samples keep accumulating until
    clear_render_target() or setup_render_target() is called.

    Raises:
        RuntimeError: If the render target has not been set up.
        ValueError: If num_samples or max_depth is negative.
    """
    _check_render_target_initialized()
    if num_samples < 0:
        raise ValueError(f"num_samples must be non-negative, got {num_samples}")
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")

    if num_samples == 0:
        return

    width, height = get_image_dimensions()
    _render_pixels(width, height, num_samples, max_depth)


def get_total_samples() -> int:
    """Samples accumulated per pixel, read from pixel (0, 0).

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()
    return int(_sample_count[0, 0])


def resolve_image(gamma_factor: float = GAMMA_FACTOR) -> None:
    """Encode the averaged buffer into 8-bit pixels.

    Each channel is gamma-encoded with exponent 1 / gamma_factor, clamped to
    [0, 1], scaled by 255.99 and truncated.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    _resolve(width, height, gamma_factor)


def get_image_uint8(gamma_factor: float = GAMMA_FACTOR) -> npt.NDArray[np.uint8]:
    """Resolve the buffer and return it as an image array.

    Returns:
        Array of shape (height, width, 3), dtype uint8, top row first.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    resolve_image(gamma_factor)
    width, height = get_image_dimensions()

    # (width, height, 3) with row 0 at the bottom -> (height, width, 3) top first
    image = _pixels.to_numpy()[:width, :height, :]
    image = np.flipud(np.transpose(image, (1, 0, 2)))
    return np.ascontiguousarray(image).astype(np.uint8)


def get_radiance_numpy() -> npt.NDArray[np.float64]:
    """Averaged linear radiance as an array of shape (height, width, 3), top row first.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()

    sums = _color_sum.to_numpy()[:width, :height, :]
    counts = _sample_count.to_numpy()[:width, :height]
    mean = sums / np.maximum(counts, 1)[..., None]
    return np.ascontiguousarray(np.flipud(np.transpose(mean, (1, 0, 2))))
