"""Pinhole camera mapping normalized image coordinates to primary rays.

The camera is configured from a look-at description and then lives in Taichi
fields so that kernels can generate rays:

    w = normalize(lookfrom - lookat)      backward
    u = normalize(cross(vup, w))          image-plane horizontal axis
    v = cross(w, u)                       image-plane up

The image plane sits at unit distance in front of the camera. Its height is
2 * tan(vfov / 2) and its width is aspect_ratio times that. Normalized image
coordinates have (0, 0) at the lower-left corner and (1, 1) at the upper-right.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.camera.pinhole import PinholeCamera, setup_camera
    >>> camera = PinholeCamera(
    ...     lookfrom=(278.0, 278.0, -800.0),
    ...     lookat=(278.0, 278.0, 0.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=40.0,
    ...     aspect_ratio=1.0,
    ... )
    >>> setup_camera(camera)
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from rayt.core.float3 import normalize
from rayt.core.ray import Ray, make_ray


@dataclass
class PinholeCamera:
    """Look-at description of a pinhole camera.

    Attributes:
        lookfrom: Camera position in world space.
        lookat: Point the camera looks at.
        vup: Up direction used to orient the image plane.
        vfov: Vertical field of view in degrees.
        aspect_ratio: Image width divided by image height.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float]
    vfov: float
    aspect_ratio: float


_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f64, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f64, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f64, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Compute the image-plane geometry of camera and upload it to Taichi.

    Must be called from Python before any kernel calls get_ray().

    Raises:
        ValueError: If the view direction is degenerate, parallel to vup, or
            the field of view is outside (0, 180).
    """
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"vfov must lie in (0, 180) degrees, got {camera.vfov}")

    half_height = math.tan(math.radians(camera.vfov) / 2.0)
    half_width = camera.aspect_ratio * half_height

    lookfrom = np.array(camera.lookfrom, dtype=np.float64)
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    w = lookfrom - lookat
    w_norm = np.linalg.norm(w)
    if w_norm == 0.0:
        raise ValueError("lookfrom and lookat must differ")
    w = w / w_norm

    u = np.cross(vup, w)
    u_norm = np.linalg.norm(u)
    if u_norm == 0.0:
        raise ValueError("vup must not be parallel to the view direction")
    u = u / u_norm
    v = np.cross(w, u)

    horizontal = 2.0 * half_width * u
    vertical = 2.0 * half_height * v
    lower_left = lookfrom - half_width * u - half_height * v - w

    _camera_origin[None] = lookfrom.tolist()
    _lower_left_corner[None] = lower_left.tolist()
    _viewport_horizontal[None] = horizontal.tolist()
    _viewport_vertical[None] = vertical.tolist()


@ti.func
def get_ray(u: ti.f64, v: ti.f64) -> Ray:
    """Primary ray through normalized image coordinates (u, v).

    u runs left to right and v bottom to top, both over [0, 1]. The returned
    direction is unit length.
    """
    origin = _camera_origin[None]
    target = _lower_left_corner[None] + u * _viewport_horizontal[None] + v * _viewport_vertical[None]
    return make_ray(origin, normalize(target - origin))


@ti.func
def get_ray_jittered(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Primary ray through a uniformly jittered point of pixel (i, j).

    The offsets are divided by the image size, so the samples of a pixel
    cover exactly its own footprint. Renderers that divide by size - 1
    produce a slightly wider field of view than this one.

    Args:
        pixel_i: Pixel column, 0 at the left.
        pixel_j: Pixel row, 0 at the bottom.
        width: Image width in pixels.
        height: Image height in pixels.
    """
    u = (ti.cast(pixel_i, ti.f64) + ti.random(ti.f64)) / ti.cast(width, ti.f64)
    v = (ti.cast(pixel_j, ti.f64) + ti.random(ti.f64)) / ti.cast(height, ti.f64)
    return get_ray(u, v)


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Current camera state as plain tuples, for inspection and tests."""
    fields = {
        "origin": _camera_origin,
        "lower_left": _lower_left_corner,
        "horizontal": _viewport_horizontal,
        "vertical": _viewport_vertical,
    }
    return {name: tuple(float(x) for x in f[None]) for name, f in fields.items()}
