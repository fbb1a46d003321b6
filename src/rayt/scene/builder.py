"""Fluent construction of shapes bound to materials and textures.

A shape is described by a ShapeConfig with four slots:

    texture   ColorTexture | CheckerTexture | None
    material  Lambertian | Metal | Dielectric | DiffuseLight | SharedMaterial | None
    shape     SphereShape | RectShape | BoxShape | None
    flip      bool

ShapeBuilder fills the slots through chained calls and build() validates the
whole configuration in one step before anything is added to the scene:

- a shape and a material are required
- Lambertian, Metal and DiffuseLight need a texture
- Dielectric and SharedMaterial must not be given one

A violation is a programming error and raises BuilderStateError; nothing is
defaulted.

Example:
    >>> from rayt.scene.builder import ShapeBuilder
    >>> from rayt.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> (
    ...     ShapeBuilder(scene)
    ...     .color_texture((0.12, 0.45, 0.15))
    ...     .lambertian()
    ...     .rect_yz(0.0, 555.0, 0.0, 555.0, 555.0)
    ...     .flip_face()
    ...     .build()
    ... )
"""

import logging
from dataclasses import dataclass, field
from typing import Union

from rayt.geometry.box import box_faces
from rayt.geometry.rect import RectAxis
from rayt.scene.manager import SceneManager

logger = logging.getLogger(__name__)

Color = tuple[float, float, float]
Point = tuple[float, float, float]


class BuilderStateError(RuntimeError):
    """Raised when a ShapeConfig is missing required state or is contradictory."""


# =============================================================================
# Slot Values
# =============================================================================


@dataclass(frozen=True)
class ColorTexture:
    color: Color


@dataclass(frozen=True)
class CheckerTexture:
    odd: Color
    even: Color
    freq: float


@dataclass(frozen=True)
class Lambertian:
    pass


@dataclass(frozen=True)
class Metal:
    fuzz: float


@dataclass(frozen=True)
class Dielectric:
    ri: float


@dataclass(frozen=True)
class DiffuseLight:
    pass


@dataclass(frozen=True)
class SharedMaterial:
    """Reuse a material that is already registered in the scene."""

    material_id: int


@dataclass(frozen=True)
class SphereShape:
    center: Point
    radius: float


@dataclass(frozen=True)
class RectShape:
    axis: RectAxis
    x0: float
    x1: float
    y0: float
    y1: float
    k: float


@dataclass(frozen=True)
class BoxShape:
    p0: Point
    p1: Point


TextureSpec = Union[ColorTexture, CheckerTexture]
MaterialSpec = Union[Lambertian, Metal, Dielectric, DiffuseLight, SharedMaterial]
ShapeSpec = Union[SphereShape, RectShape, BoxShape]

_TEXTURED_MATERIALS = (Lambertian, Metal, DiffuseLight)


@dataclass
class ShapeConfig:
    """Complete description of one shape to add to a scene."""

    texture: TextureSpec | None = None
    material: MaterialSpec | None = None
    shape: ShapeSpec | None = None
    flip: bool = False

    def validate(self) -> None:
        """Check that the slots form a buildable shape.

        Raises:
            BuilderStateError: Describing the first problem found.
        """
        if self.shape is None:
            raise BuilderStateError("No shape staged: call sphere(), rect_*() or box3d() before build()")
        if self.material is None:
            raise BuilderStateError(
                "No material staged: call lambertian(), metal(), dielectric(), "
                "diffuse_light() or material() before build()"
            )
        material_name = type(self.material).__name__
        if isinstance(self.material, _TEXTURED_MATERIALS):
            if self.texture is None:
                raise BuilderStateError(
                    f"{material_name} needs a texture: call color_texture() or checker_texture() first"
                )
        elif self.texture is not None:
            raise BuilderStateError(f"{material_name} does not take a texture, but one is staged")


@dataclass
class BuiltShape:
    """What build() added to the scene.

    Attributes:
        material_id: Unified material id of the shape.
        sphere_indices: Indices of added spheres.
        rect_indices: Indices of added rectangles (six for a box).
    """

    material_id: int
    sphere_indices: list[int] = field(default_factory=list)
    rect_indices: list[int] = field(default_factory=list)


# =============================================================================
# Building
# =============================================================================


def _add_texture(scene: SceneManager, texture: TextureSpec) -> int:
    if isinstance(texture, ColorTexture):
        return scene.add_constant_texture(texture.color)
    odd_id = scene.add_constant_texture(texture.odd)
    even_id = scene.add_constant_texture(texture.even)
    return scene.add_checker_texture(odd_id, even_id, texture.freq)


def _add_material(scene: SceneManager, config: ShapeConfig) -> int:
    material = config.material
    if isinstance(material, SharedMaterial):
        if scene.get_material_info(material.material_id) is None:
            raise BuilderStateError(f"Shared material {material.material_id} is not registered")
        return material.material_id
    if isinstance(material, Dielectric):
        return scene.add_dielectric_material(material.ri)

    texture_id = _add_texture(scene, config.texture)
    if isinstance(material, Lambertian):
        return scene.add_lambertian_material(texture_id)
    if isinstance(material, Metal):
        return scene.add_metal_material(texture_id, material.fuzz)
    return scene.add_diffuse_light_material(texture_id)


def _check_parameters(config: ShapeConfig) -> None:
    """Reject parameter values the scene would refuse, before anything is registered."""
    material = config.material
    if isinstance(material, Metal) and not 0.0 <= material.fuzz <= 1.0:
        raise ValueError(f"Fuzz = {material.fuzz} is outside [0, 1]")

    shape = config.shape
    if isinstance(shape, SphereShape):
        if shape.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {shape.radius}")
    elif isinstance(shape, RectShape):
        if not (shape.x0 < shape.x1 and shape.y0 < shape.y1):
            raise ValueError(
                f"Rect extent must satisfy x0 < x1 and y0 < y1, got ({shape.x0}, {shape.x1}, {shape.y0}, {shape.y1})"
            )
    else:
        box_faces(shape.p0, shape.p1)


def build_shape(scene: SceneManager, config: ShapeConfig) -> BuiltShape:
    """Validate config and add the shape it describes to scene.

    Raises:
        BuilderStateError: If config is incomplete or contradictory.
        ValueError: If a parameter is rejected. Nothing is added to the
            scene in that case.
    """
    config.validate()
    _check_parameters(config)

    material_id = _add_material(scene, config)
    result = BuiltShape(material_id=material_id)
    shape = config.shape
    if isinstance(shape, SphereShape):
        result.sphere_indices.append(scene.add_sphere(shape.center, shape.radius, material_id, config.flip))
    elif isinstance(shape, RectShape):
        result.rect_indices.append(
            scene.add_rect(shape.axis, shape.x0, shape.x1, shape.y0, shape.y1, shape.k, material_id, config.flip)
        )
    else:
        result.rect_indices.extend(scene.add_box(shape.p0, shape.p1, material_id, config.flip))

    logger.debug("Built %s with material %d", type(shape).__name__, material_id)
    return result


class ShapeBuilder:
    """Chained staging of a ShapeConfig for one scene.

    Every staging call returns the builder. build() validates, adds the shape
    and starts a fresh configuration, so one builder can produce many shapes.
    """

    def __init__(self, scene: SceneManager) -> None:
        self._scene = scene
        self._config = ShapeConfig()

    @property
    def config(self) -> ShapeConfig:
        """The configuration staged so far."""
        return self._config

    # textures

    def color_texture(self, color: Color) -> "ShapeBuilder":
        self._config.texture = ColorTexture(tuple(color))
        return self

    def checker_texture(self, odd_color: Color, even_color: Color, freq: float) -> "ShapeBuilder":
        self._config.texture = CheckerTexture(tuple(odd_color), tuple(even_color), freq)
        return self

    # materials

    def lambertian(self) -> "ShapeBuilder":
        self._config.material = Lambertian()
        return self

    def metal(self, fuzz: float) -> "ShapeBuilder":
        self._config.material = Metal(fuzz)
        return self

    def dielectric(self, ri: float) -> "ShapeBuilder":
        self._config.material = Dielectric(ri)
        return self

    def diffuse_light(self) -> "ShapeBuilder":
        self._config.material = DiffuseLight()
        return self

    def material(self, material_id: int) -> "ShapeBuilder":
        """Bind the shape to an existing material instead of creating one."""
        self._config.material = SharedMaterial(material_id)
        return self

    # shapes

    def sphere(self, center: Point, radius: float) -> "ShapeBuilder":
        self._config.shape = SphereShape(tuple(center), radius)
        return self

    def rect_xy(self, x0: float, x1: float, y0: float, y1: float, k: float) -> "ShapeBuilder":
        self._config.shape = RectShape(RectAxis.XY, x0, x1, y0, y1, k)
        return self

    def rect_xz(self, x0: float, x1: float, z0: float, z1: float, k: float) -> "ShapeBuilder":
        self._config.shape = RectShape(RectAxis.XZ, x0, x1, z0, z1, k)
        return self

    def rect_yz(self, y0: float, y1: float, z0: float, z1: float, k: float) -> "ShapeBuilder":
        self._config.shape = RectShape(RectAxis.YZ, y0, y1, z0, z1, k)
        return self

    def box3d(self, p0: Point, p1: Point) -> "ShapeBuilder":
        self._config.shape = BoxShape(tuple(p0), tuple(p1))
        return self

    def flip_face(self) -> "ShapeBuilder":
        """Negate the normals of the staged shape. Calling it twice cancels out."""
        self._config.flip = not self._config.flip
        return self

    def build(self) -> BuiltShape:
        """Add the staged shape to the scene and reset the builder.

        Raises:
            BuilderStateError: If the staged configuration is incomplete or
                contradictory. The staged state is kept so it can be fixed.
        """
        result = build_shape(self._scene, self._config)
        self._config = ShapeConfig()
        return result
