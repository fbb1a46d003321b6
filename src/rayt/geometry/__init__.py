"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive and the shared HitRecord
    rect: Axis-aligned rectangles in the XY, XZ and YZ planes
    box: Expansion of an axis-aligned box into six rectangles
"""

from .box import RectFace, box_faces
from .rect import Rect, RectAxis, hit_rect, rect_normal
from .sphere import HitRecord, Sphere, hit_sphere, make_miss_record, make_sphere

__all__ = [
    "HitRecord",
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "make_miss_record",
    "Rect",
    "RectAxis",
    "hit_rect",
    "rect_normal",
    "RectFace",
    "box_faces",
]
