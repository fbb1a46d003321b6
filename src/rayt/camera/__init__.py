"""Camera module.

Components:
    pinhole: Look-at pinhole camera mapping normalized image coordinates
        (u, v) in [0, 1], v = 0 at the bottom, to primary rays
"""

from .pinhole import PinholeCamera, get_camera_info, get_ray, get_ray_jittered, setup_camera

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_ray",
    "get_ray_jittered",
    "get_camera_info",
]
