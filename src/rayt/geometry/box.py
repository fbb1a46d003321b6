"""Axis-aligned box built from six rectangles.

A box is not a primitive of its own: it expands into six axis-aligned
rectangles that are added to the scene individually. The faces at the
maximum corner keep the positive axis normal; the three faces at the minimum
corner are flipped so that every face normal points out of the box.
"""

from dataclasses import dataclass

from rayt.geometry.rect import RectAxis

Point = tuple[float, float, float]


@dataclass(frozen=True)
class RectFace:
    """Host-side description of one axis-aligned rectangle.

    Attributes:
        axis: Orientation of the rectangle.
        x0, x1: Extent along the first in-plane axis.
        y0, y1: Extent along the second in-plane axis.
        k: Plane offset along the normal axis.
        flip: Whether the face normal is negated.
    """

    axis: RectAxis
    x0: float
    x1: float
    y0: float
    y1: float
    k: float
    flip: bool = False


def box_faces(p0: Point, p1: Point) -> list[RectFace]:
    """Return the six faces of the box spanned by corners p0 and p1.

    Args:
        p0: Minimum corner (x, y, z).
        p1: Maximum corner (x, y, z).

    Returns:
        Six RectFace descriptions with outward-facing normals.

    Raises:
        ValueError: If p0 is not strictly below p1 on every axis.
    """
    if not all(lo < hi for lo, hi in zip(p0, p1)):
        raise ValueError(f"Box corners must satisfy p0 < p1 on every axis, got {p0} and {p1}")

    x0, y0, z0 = p0
    x1, y1, z1 = p1
    return [
        RectFace(RectAxis.XY, x0, x1, y0, y1, z1),
        RectFace(RectAxis.XY, x0, x1, y0, y1, z0, flip=True),
        RectFace(RectAxis.XZ, x0, x1, z0, z1, y1),
        RectFace(RectAxis.XZ, x0, x1, z0, z1, y0, flip=True),
        RectFace(RectAxis.YZ, y0, y1, z0, z1, x1),
        RectFace(RectAxis.YZ, y0, y1, z0, z1, x0, flip=True),
    ]
