"""Cornell box reference scene.

The room spans [0, 555] on every axis and the camera looks into it along +z
through the open front:

- green wall at x = 555 and red wall at x = 0
- white floor, ceiling and back wall
- a 130 x 105 ceiling light just below the ceiling, emitting 15
- two white boxes standing on the floor

Every enclosing surface faces into the room. The walls at the maximum
coordinate and the light are flipped for that; the walls at 0 already face
inward. The background is black.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.scene.cornell_box import create_cornell_box_scene
    >>> from rayt.camera.pinhole import setup_camera
    >>> scene, camera = create_cornell_box_scene()
    >>> setup_camera(camera)
"""

from rayt.camera.pinhole import PinholeCamera
from rayt.scene.builder import ShapeBuilder
from rayt.scene.manager import SceneManager

BOX_SIZE = 555.0

RED = (0.64, 0.05, 0.05)
WHITE = (0.73, 0.73, 0.73)
GREEN = (0.12, 0.45, 0.15)
LIGHT = (15.0, 15.0, 15.0)

# Ceiling light extent (x0, x1, z0, z1) and height
LIGHT_RECT = (213.0, 343.0, 227.0, 332.0)
LIGHT_HEIGHT = 554.0

SHORT_BOX = ((130.0, 0.0, 65.0), (295.0, 165.0, 230.0))
TALL_BOX = ((265.0, 0.0, 295.0), (430.0, 330.0, 460.0))

LOOKFROM = (278.0, 278.0, -800.0)
LOOKAT = (278.0, 278.0, 0.0)
VUP = (0.0, 1.0, 0.0)
VFOV = 40.0


def create_cornell_box_scene(aspect_ratio: float = 1.0) -> tuple[SceneManager, PinholeCamera]:
    """Build the Cornell box into a fresh SceneManager.

    Args:
        aspect_ratio: Image width divided by height for the returned camera.

    Returns:
        A tuple of (SceneManager, PinholeCamera).
    """
    scene = SceneManager()
    builder = ShapeBuilder(scene)
    s = BOX_SIZE

    builder.color_texture(GREEN).lambertian().rect_yz(0.0, s, 0.0, s, s).flip_face().build()
    builder.color_texture(RED).lambertian().rect_yz(0.0, s, 0.0, s, 0.0).build()

    x0, x1, z0, z1 = LIGHT_RECT
    builder.color_texture(LIGHT).diffuse_light().rect_xz(x0, x1, z0, z1, LIGHT_HEIGHT).flip_face().build()

    builder.color_texture(WHITE).lambertian().rect_xz(0.0, s, 0.0, s, s).flip_face().build()
    builder.color_texture(WHITE).lambertian().rect_xz(0.0, s, 0.0, s, 0.0).build()
    builder.color_texture(WHITE).lambertian().rect_xy(0.0, s, 0.0, s, s).flip_face().build()

    for p0, p1 in (SHORT_BOX, TALL_BOX):
        builder.color_texture(WHITE).lambertian().box3d(p0, p1).build()

    scene.set_background((0.0, 0.0, 0.0))
    scene.set_camera(LOOKFROM, LOOKAT, VUP, VFOV)
    return scene, scene.camera(aspect_ratio)
