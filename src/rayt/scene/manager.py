"""Scene manager coordinating textures, materials, primitives and view.

The SceneManager is the host-side owner of a scene. It fills the Taichi
registries (textures, per-variant materials, spheres and rectangles), hands
out the unified material ids that shapes reference, and keeps a Python-side
record of everything it added so a scene can be exported and rebuilt.

The manager also holds the two scene-level collaborators of the renderer:
- the background radiance for rays that escape the scene
- the camera factory, producing a PinholeCamera for a given aspect ratio

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.scene.manager import SceneManager
    >>> from rayt.geometry.rect import RectAxis
    >>> scene = SceneManager()
    >>> white = scene.add_constant_texture((0.73, 0.73, 0.73))
    >>> floor = scene.add_lambertian_material(white)
    >>> scene.add_rect(RectAxis.XZ, 0.0, 555.0, 0.0, 555.0, 0.0, floor)
    >>> scene.set_camera((278.0, 278.0, -800.0), (278.0, 278.0, 0.0), (0.0, 1.0, 0.0), 40.0)
    >>> camera = scene.camera(aspect_ratio=1.0)
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from rayt.camera.pinhole import PinholeCamera
from rayt.geometry.box import box_faces
from rayt.geometry.rect import RectAxis
from rayt.materials.dielectric import add_dielectric_material, clear_dielectric_materials
from rayt.materials.diffuse_light import (
    add_diffuse_light_material,
    clear_diffuse_light_materials,
)
from rayt.materials.lambertian import add_lambertian_material, clear_lambertian_materials
from rayt.materials.metal import add_metal_material, clear_metal_materials
from rayt.materials.registry import (
    MAX_MATERIALS,
    MaterialType,
    clear_material_registry,
    get_material_count,
    is_valid_material_id,
    register_material,
)
from rayt.materials.texture import (
    MAX_TEXTURES,
    TextureType,
    add_checker_texture,
    add_constant_texture,
    clear_textures,
    get_texture_count,
)
from rayt.scene.background import set_background_gradient
from rayt.scene.intersection import (
    MAX_RECTS,
    MAX_SPHERES,
    add_rect,
    add_sphere,
    clear_scene,
    get_rect_count,
    get_sphere_count,
)

logger = logging.getLogger(__name__)

Color = tuple[float, float, float]
Point = tuple[float, float, float]


@dataclass
class TextureInfo:
    """A registered texture.

    Attributes:
        texture_id: The texture id.
        texture_type: The texture variant.
        params: The parameters the texture was created with.
    """

    texture_id: int
    texture_type: TextureType
    params: dict[str, Any]


@dataclass
class MaterialInfo:
    """A registered material.

    Attributes:
        material_id: The unified material id.
        material_type: The material variant.
        type_index: Index of the material in its variant registry.
        params: The parameters the material was created with.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


@dataclass
class SphereInfo:
    """A sphere in the scene."""

    sphere_index: int
    center: Point
    radius: float
    material_id: int
    flip: bool = False


@dataclass
class RectInfo:
    """An axis-aligned rectangle in the scene."""

    rect_index: int
    axis: RectAxis
    x0: float
    x1: float
    y0: float
    y1: float
    k: float
    material_id: int
    flip: bool = False


@dataclass
class CameraConfig:
    """Look-at parameters of the scene camera; the aspect ratio is chosen per render."""

    lookfrom: Point
    lookat: Point
    vup: Point
    vfov: float


@dataclass
class SceneConfig:
    """Serializable description of a scene."""

    textures: list[dict[str, Any]] = field(default_factory=list)
    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    rects: list[dict[str, Any]] = field(default_factory=list)
    background: dict[str, list[float]] = field(default_factory=dict)
    camera: dict[str, Any] | None = None


def _vec(values: Any) -> tuple[float, float, float]:
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Host-side scene owner.

    Creating a SceneManager clears every registry, since the underlying
    Taichi fields are global. Only one scene is live at a time.

    Attributes:
        textures: TextureInfo for every registered texture.
        materials: MaterialInfo for every registered material.
        spheres: SphereInfo for every sphere.
        rects: RectInfo for every rectangle, including box faces.
    """

    def __init__(self) -> None:
        self.textures: list[TextureInfo] = []
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.rects: list[RectInfo] = []
        self._background: tuple[Color, Color] = ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
        self._camera: CameraConfig | None = None
        self._clear_all()

    def _clear_all(self) -> None:
        clear_scene()
        clear_textures()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        clear_diffuse_light_materials()
        clear_material_registry()
        self.textures.clear()
        self.materials.clear()
        self.spheres.clear()
        self.rects.clear()
        self._camera = None
        self.set_background((0.0, 0.0, 0.0))

    def clear(self) -> None:
        """Remove every texture, material and primitive and reset the view."""
        self._clear_all()

    # =========================================================================
    # Textures
    # =========================================================================

    def add_constant_texture(self, color: Color) -> int:
        """Add a constant-color texture and return its id."""
        texture_id = add_constant_texture(color)
        self.textures.append(
            TextureInfo(texture_id, TextureType.CONSTANT, {"color": tuple(color)})
        )
        logger.debug("Added constant texture %d color=%s", texture_id, color)
        return texture_id

    def add_checker_texture(self, odd_id: int, even_id: int, freq: float) -> int:
        """Add a checker texture over two constant textures and return its id.

        Raises:
            ValueError: If a sub-texture is unknown or not constant.
        """
        texture_id = add_checker_texture(odd_id, even_id, freq)
        self.textures.append(
            TextureInfo(
                texture_id,
                TextureType.CHECKER,
                {"odd_id": odd_id, "even_id": even_id, "freq": freq},
            )
        )
        logger.debug("Added checker texture %d (%d/%d, freq=%s)", texture_id, odd_id, even_id, freq)
        return texture_id

    def get_texture_count(self) -> int:
        """Get the number of registered textures."""
        return get_texture_count()

    # =========================================================================
    # Materials
    # =========================================================================

    def _register(self, material_type: MaterialType, type_index: int, params: dict[str, Any]) -> int:
        material_id = register_material(material_type, type_index)
        self.materials.append(MaterialInfo(material_id, material_type, type_index, params))
        logger.debug(
            "Added %s material %d (type index %d) %s",
            material_type.name.lower(),
            material_id,
            type_index,
            params,
        )
        return material_id

    def add_lambertian_material(self, texture_id: int) -> int:
        """Add a diffuse material with an albedo texture.

        Returns:
            The unified material id.

        Raises:
            ValueError: If texture_id is unknown.
            RuntimeError: If a material limit is exceeded.
        """
        type_index = add_lambertian_material(texture_id)
        return self._register(MaterialType.LAMBERTIAN, type_index, {"texture_id": texture_id})

    def add_metal_material(self, texture_id: int, fuzz: float = 0.0) -> int:
        """Add a metal material with an albedo texture and reflection fuzz in [0, 1].

        Raises:
            ValueError: If texture_id is unknown or fuzz is out of range.
            RuntimeError: If a material limit is exceeded.
        """
        type_index = add_metal_material(texture_id, fuzz)
        return self._register(
            MaterialType.METAL, type_index, {"texture_id": texture_id, "fuzz": fuzz}
        )

    def add_dielectric_material(self, ri: float = 1.5) -> int:
        """Add a dielectric material with refractive index ri.

        Raises:
            ValueError: If ri is not positive.
            RuntimeError: If a material limit is exceeded.
        """
        type_index = add_dielectric_material(ri)
        return self._register(MaterialType.DIELECTRIC, type_index, {"ri": ri})

    def add_diffuse_light_material(self, texture_id: int) -> int:
        """Add a one-sided emitter with an emission texture.

        Raises:
            ValueError: If texture_id is unknown.
            RuntimeError: If a material limit is exceeded.
        """
        type_index = add_diffuse_light_material(texture_id)
        return self._register(MaterialType.DIFFUSE_LIGHT, type_index, {"texture_id": texture_id})

    def get_material_count(self) -> int:
        """Get the total number of materials."""
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """MaterialInfo for material_id, or None if there is no such material."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def _check_material_id(self, material_id: int) -> None:
        if not is_valid_material_id(material_id):
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Primitives
    # =========================================================================

    def add_sphere(self, center: Point, radius: float, material_id: int, flip: bool = False) -> int:
        """Add a sphere.

        Returns:
            The index of the sphere.

        Raises:
            ValueError: If radius is not positive or material_id is invalid.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        self._check_material_id(material_id)
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")

        sphere_index = add_sphere(center, radius, material_id, flip)
        self.spheres.append(SphereInfo(sphere_index, tuple(center), radius, material_id, flip))
        logger.debug("Added sphere %d center=%s radius=%s", sphere_index, center, radius)
        return sphere_index

    def add_rect(
        self,
        axis: RectAxis,
        x0: float,
        x1: float,
        y0: float,
        y1: float,
        k: float,
        material_id: int,
        flip: bool = False,
    ) -> int:
        """Add an axis-aligned rectangle.

        Returns:
            The index of the rectangle.

        Raises:
            ValueError: If the extent is empty or material_id is invalid.
            RuntimeError: If the maximum number of rectangles is exceeded.
        """
        self._check_material_id(material_id)
        if not (x0 < x1 and y0 < y1):
            raise ValueError(f"Rect extent must satisfy x0 < x1 and y0 < y1, got ({x0}, {x1}, {y0}, {y1})")

        axis = RectAxis(axis)
        rect_index = add_rect(axis, x0, x1, y0, y1, k, material_id, flip)
        self.rects.append(RectInfo(rect_index, axis, x0, x1, y0, y1, k, material_id, flip))
        logger.debug("Added rect %d %s k=%s flip=%s", rect_index, axis.name, k, flip)
        return rect_index

    def add_box(self, p0: Point, p1: Point, material_id: int, flip: bool = False) -> list[int]:
        """Add the six faces of the axis-aligned box spanned by p0 and p1.

        Args:
            p0: Minimum corner.
            p1: Maximum corner.
            material_id: Material shared by all faces.
            flip: Flip the whole box, toggling the flip flag of every face.

        Returns:
            The rectangle indices of the faces.

        Raises:
            ValueError: If p0 is not below p1 on every axis.
        """
        self._check_material_id(material_id)
        return [
            self.add_rect(face.axis, face.x0, face.x1, face.y0, face.y1, face.k, material_id, face.flip != flip)
            for face in box_faces(p0, p1)
        ]

    def get_sphere_count(self) -> int:
        """Get the number of spheres."""
        return get_sphere_count()

    def get_rect_count(self) -> int:
        """Get the number of rectangles."""
        return get_rect_count()

    def get_primitive_count(self) -> int:
        """Get the total number of primitives."""
        return self.get_sphere_count() + self.get_rect_count()

    # =========================================================================
    # Background and Camera
    # =========================================================================

    def set_background(self, color: Color) -> None:
        """Use a constant background color."""
        self.set_background_gradient(color, color)

    def set_background_gradient(self, bottom: Color, top: Color) -> None:
        """Blend the background from bottom (looking down) to top (looking up)."""
        self._background = (tuple(bottom), tuple(top))
        set_background_gradient(bottom, top)

    @property
    def background(self) -> tuple[Color, Color]:
        """The (bottom, top) background colors."""
        return self._background

    def set_camera(self, lookfrom: Point, lookat: Point, vup: Point, vfov: float) -> None:
        """Set the look-at parameters used by camera()."""
        self._camera = CameraConfig(tuple(lookfrom), tuple(lookat), tuple(vup), vfov)

    def camera(self, aspect_ratio: float) -> PinholeCamera:
        """Build the scene camera for the given aspect ratio.

        Raises:
            RuntimeError: If no camera has been set.
        """
        if self._camera is None:
            raise RuntimeError("Scene has no camera. Call set_camera() first.")
        return PinholeCamera(
            lookfrom=self._camera.lookfrom,
            lookat=self._camera.lookat,
            vup=self._camera.vup,
            vfov=self._camera.vfov,
            aspect_ratio=aspect_ratio,
        )

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a SceneConfig."""
        config = SceneConfig()

        for tex in self.textures:
            config.textures.append(
                {"type": tex.texture_type.name.lower(), **_listify(tex.params)}
            )
        for mat in self.materials:
            config.materials.append(
                {"type": mat.material_type.name.lower(), **_listify(mat.params)}
            )
        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                    "flip": sphere.flip,
                }
            )
        for rect in self.rects:
            config.rects.append(
                {
                    "axis": rect.axis.name.lower(),
                    "bounds": [rect.x0, rect.x1, rect.y0, rect.y1],
                    "k": rect.k,
                    "material_id": rect.material_id,
                    "flip": rect.flip,
                }
            )

        bottom, top = self._background
        config.background = {"bottom": list(bottom), "top": list(top)}
        if self._camera is not None:
            config.camera = {
                "lookfrom": list(self._camera.lookfrom),
                "lookat": list(self._camera.lookat),
                "vup": list(self._camera.vup),
                "vfov": self._camera.vfov,
            }
        return config

    def from_config(self, config: SceneConfig) -> None:
        """Replace the scene with the contents of config.

        Ids are assigned in order, so the ids recorded in config stay valid.

        Raises:
            ValueError: If the configuration names an unknown type or
                contains invalid parameters.
        """
        self.clear()

        for tex in config.textures:
            tex_type = tex.get("type", "").lower()
            if tex_type == "constant":
                self.add_constant_texture(_vec(tex["color"]))
            elif tex_type == "checker":
                self.add_checker_texture(int(tex["odd_id"]), int(tex["even_id"]), float(tex["freq"]))
            else:
                raise ValueError(f"Unknown texture type: {tex_type}")

        for mat in config.materials:
            mat_type = mat.get("type", "").lower()
            if mat_type == "lambertian":
                self.add_lambertian_material(int(mat["texture_id"]))
            elif mat_type == "metal":
                self.add_metal_material(int(mat["texture_id"]), float(mat.get("fuzz", 0.0)))
            elif mat_type == "dielectric":
                self.add_dielectric_material(float(mat.get("ri", 1.5)))
            elif mat_type == "diffuse_light":
                self.add_diffuse_light_material(int(mat["texture_id"]))
            else:
                raise ValueError(f"Unknown material type: {mat_type}")

        for sphere in config.spheres:
            self.add_sphere(
                _vec(sphere["center"]),
                float(sphere["radius"]),
                int(sphere["material_id"]),
                bool(sphere.get("flip", False)),
            )

        for rect in config.rects:
            axis_name = str(rect.get("axis", "")).upper()
            if axis_name not in RectAxis.__members__:
                raise ValueError(f"Unknown rect axis: {rect.get('axis')}")
            x0, x1, y0, y1 = (float(b) for b in rect["bounds"])
            self.add_rect(
                RectAxis[axis_name],
                x0,
                x1,
                y0,
                y1,
                float(rect["k"]),
                int(rect["material_id"]),
                bool(rect.get("flip", False)),
            )

        if config.background:
            self.set_background_gradient(
                _vec(config.background["bottom"]), _vec(config.background["top"])
            )
        if config.camera is not None:
            self.set_camera(
                _vec(config.camera["lookfrom"]),
                _vec(config.camera["lookat"]),
                _vec(config.camera["vup"]),
                float(config.camera["vfov"]),
            )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a JSON-compatible dictionary."""
        config = self.to_config()
        return {
            "textures": config.textures,
            "materials": config.materials,
            "spheres": config.spheres,
            "rects": config.rects,
            "background": config.background,
            "camera": config.camera,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Replace the scene with one exported by to_dict()."""
        self.from_config(
            SceneConfig(
                textures=data.get("textures", []),
                materials=data.get("materials", []),
                spheres=data.get("spheres", []),
                rects=data.get("rects", []),
                background=data.get("background", {}),
                camera=data.get("camera"),
            )
        )

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        return MAX_SPHERES

    @staticmethod
    def get_max_rects() -> int:
        return MAX_RECTS

    @staticmethod
    def get_max_materials() -> int:
        return MAX_MATERIALS

    @staticmethod
    def get_max_textures() -> int:
        return MAX_TEXTURES


def _listify(params: dict[str, Any]) -> dict[str, Any]:
    """Copy params with tuples turned into lists."""
    return {key: list(value) if isinstance(value, tuple) else value for key, value in params.items()}
