"""Tests for the SceneManager.

This module covers:
- Texture and material registration with unified ids
- Primitive validation and box expansion
- Background and camera handling
- Export to and rebuild from dictionaries
"""

import pytest


class TestTexturesAndMaterials:
    """Registration through the manager."""

    def test_init_clears_registries(self):
        """Test that a new manager starts from empty registries."""
        from rayt.scene.manager import SceneManager

        scene = SceneManager()
        tex = scene.add_constant_texture((1.0, 1.0, 1.0))
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, scene.add_lambertian_material(tex))

        fresh = SceneManager()
        assert fresh.get_texture_count() == 0
        assert fresh.get_material_count() == 0
        assert fresh.get_primitive_count() == 0

    def test_material_ids_are_unified(self):
        """Test that material ids are unified across types."""
        from rayt.materials.registry import MaterialType
        from rayt.scene.manager import SceneManager

        scene = SceneManager()
        tex = scene.add_constant_texture((0.5, 0.5, 0.5))
        ids = [
            scene.add_lambertian_material(tex),
            scene.add_metal_material(tex, 0.2),
            scene.add_lambertian_material(tex),
            scene.add_dielectric_material(1.33),
            scene.add_diffuse_light_material(tex),
        ]
        assert ids == [0, 1, 2, 3, 4]
        assert scene.get_material_count() == 5

        info = scene.get_material_info(2)
        assert info.material_type == MaterialType.LAMBERTIAN
        assert info.type_index == 1
        assert scene.get_material_info(3).params == {"ri": 1.33}
        assert scene.get_material_info(99) is None

    def test_checker_texture_recorded(self):
        """Test that a checker texture is recorded with its parameters."""
        from rayt.materials.texture import TextureType
        from rayt.scene.manager import SceneManager

        scene = SceneManager()
        a = scene.add_constant_texture((0.0, 0.0, 0.0))
        b = scene.add_constant_texture((1.0, 1.0, 1.0))
        c = scene.add_checker_texture(a, b, 10.0)
        assert c == 2
        assert scene.textures[c].texture_type == TextureType.CHECKER
        assert scene.textures[c].params == {"odd_id": a, "even_id": b, "freq": 10.0}

    def test_invalid_parameters_propagate(self):
        """Test that registry errors reach the caller."""
        from rayt.scene.manager import SceneManager

        scene = SceneManager()
        tex = scene.add_constant_texture((0.5, 0.5, 0.5))
        with pytest.raises(ValueError):
            scene.add_lambertian_material(7)
        with pytest.raises(ValueError):
            scene.add_metal_material(tex, 2.0)
        with pytest.raises(ValueError):
            scene.add_dielectric_material(0.0)
        assert scene.get_material_count() == 0


class TestPrimitives:
    """Primitive validation."""

    @pytest.fixture
    def scene_and_material(self):
        from rayt.scene.manager import SceneManager

        scene = SceneManager()
        material = scene.add_lambertian_material(scene.add_constant_texture((0.5, 0.5, 0.5)))
        return scene, material

    def test_sphere(self, scene_and_material):
        """Test adding a sphere."""
        scene, material = scene_and_material
        assert scene.add_sphere((1.0, 2.0, 3.0), 0.5, material) == 0
        assert scene.spheres[0].center == (1.0, 2.0, 3.0)
        assert scene.get_sphere_count() == 1

    def test_sphere_rejects_bad_radius(self, scene_and_material):
        """Test that a non-positive radius is rejected."""
        scene, material = scene_and_material
        with pytest.raises(ValueError, match="radius"):
            scene.add_sphere((0.0, 0.0, 0.0), 0.0, material)

    def test_unknown_material_rejected(self, scene_and_material):
        """Test that primitives need a registered material."""
        from rayt.geometry.rect import RectAxis

        scene, _ = scene_and_material
        with pytest.raises(ValueError, match="material_id"):
            scene.add_sphere((0.0, 0.0, 0.0), 1.0, 5)
        with pytest.raises(ValueError, match="material_id"):
            scene.add_rect(RectAxis.XY, 0.0, 1.0, 0.0, 1.0, 0.0, -1)

    def test_rect_rejects_empty_extent(self, scene_and_material):
        """Test that an empty rectangle is rejected."""
        from rayt.geometry.rect import RectAxis

        scene, material = scene_and_material
        with pytest.raises(ValueError, match="extent"):
            scene.add_rect(RectAxis.XZ, 1.0, 1.0, 0.0, 1.0, 0.0, material)

    def test_rect_accepts_int_axis(self, scene_and_material):
        from rayt.geometry.rect import RectAxis

        scene, material = scene_and_material
        scene.add_rect(2, 0.0, 1.0, 0.0, 1.0, 0.0, material)
        assert scene.rects[0].axis is RectAxis.YZ

    def test_box_adds_six_rects(self, scene_and_material):
        """Test that add_box adds six rectangles."""
        scene, material = scene_and_material
        indices = scene.add_box((0.0, 0.0, 0.0), (1.0, 2.0, 3.0), material)
        assert indices == [0, 1, 2, 3, 4, 5]
        assert scene.get_rect_count() == 6
        assert [r.flip for r in scene.rects] == [False, True, False, True, False, True]

    def test_flipped_box_toggles_every_face(self, scene_and_material):
        """Test that flipping a box toggles every face."""
        scene, material = scene_and_material
        scene.add_box((0.0, 0.0, 0.0), (1.0, 1.0, 1.0), material, flip=True)
        assert [r.flip for r in scene.rects] == [True, False, True, False, True, False]

    def test_capacity(self):
        """Test the sphere capacity limit."""
        from rayt.scene.manager import SceneManager

        assert SceneManager.get_max_spheres() == 1024
        assert SceneManager.get_max_rects() == 1024
        assert SceneManager.get_max_materials() == 1024
        assert SceneManager.get_max_textures() == 256


class TestView:
    """Background and camera."""

    def test_background_defaults_to_black(self):
        """Test the default background."""
        from rayt.scene.background import get_background
        from rayt.scene.manager import SceneManager

        scene = SceneManager()
        assert scene.background == ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
        assert get_background() == ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

    def test_background_gradient_reaches_fields(self):
        """Test that a gradient background is uploaded."""
        from rayt.scene.background import get_background
        from rayt.scene.manager import SceneManager

        scene = SceneManager()
        scene.set_background_gradient((1.0, 1.0, 1.0), (0.5, 0.7, 1.0))
        assert scene.background == ((1.0, 1.0, 1.0), (0.5, 0.7, 1.0))
        bottom, top = get_background()
        assert bottom == pytest.approx((1.0, 1.0, 1.0))
        assert top == pytest.approx((0.5, 0.7, 1.0))

    def test_camera_requires_set_camera(self):
        """Test that camera() needs set_camera first."""
        from rayt.scene.manager import SceneManager

        with pytest.raises(RuntimeError, match="set_camera"):
            SceneManager().camera(1.0)

    def test_camera_uses_aspect_ratio(self):
        """Test that camera() uses the given aspect ratio."""
        from rayt.scene.manager import SceneManager

        scene = SceneManager()
        scene.set_camera((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 1.0, 0.0), 60.0)
        camera = scene.camera(aspect_ratio=1.5)
        assert camera.lookat == (0.0, 0.0, -1.0)
        assert camera.vfov == 60.0
        assert camera.aspect_ratio == 1.5


class TestSerialization:
    """Export and rebuild."""

    def _populated(self):
        from rayt.geometry.rect import RectAxis
        from rayt.scene.manager import SceneManager

        scene = SceneManager()
        odd = scene.add_constant_texture((0.2, 0.3, 0.1))
        even = scene.add_constant_texture((0.9, 0.9, 0.9))
        checker = scene.add_checker_texture(odd, even, 10.0)
        ground = scene.add_lambertian_material(checker)
        glass = scene.add_dielectric_material(1.5)
        lamp = scene.add_diffuse_light_material(scene.add_constant_texture((4.0, 4.0, 4.0)))
        scene.add_sphere((0.0, -1000.0, 0.0), 1000.0, ground)
        scene.add_sphere((0.0, 1.0, 0.0), 1.0, glass, flip=True)
        scene.add_rect(RectAxis.XY, 3.0, 5.0, 1.0, 3.0, -2.0, lamp)
        scene.add_box((-4.0, 0.0, -1.0), (-3.0, 1.0, 1.0), ground)
        scene.set_background_gradient((1.0, 1.0, 1.0), (0.5, 0.7, 1.0))
        scene.set_camera((13.0, 2.0, 3.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0), 20.0)
        return scene

    def test_to_dict_layout(self):
        """Test the exported dictionary layout."""
        data = self._populated().to_dict()
        assert data["textures"][2] == {"type": "checker", "odd_id": 0, "even_id": 1, "freq": 10.0}
        assert data["materials"][1] == {"type": "dielectric", "ri": 1.5}
        assert data["materials"][2] == {"type": "diffuse_light", "texture_id": 3}
        assert data["spheres"][1]["flip"] is True
        assert data["rects"][0] == {
            "axis": "xy",
            "bounds": [3.0, 5.0, 1.0, 3.0],
            "k": -2.0,
            "material_id": 2,
            "flip": False,
        }
        assert len(data["rects"]) == 7
        assert data["background"] == {"bottom": [1.0, 1.0, 1.0], "top": [0.5, 0.7, 1.0]}
        assert data["camera"]["vfov"] == 20.0

    def test_round_trip(self):
        """Test that from_dict restores an exported scene."""
        from rayt.scene.manager import SceneManager

        data = self._populated().to_dict()
        rebuilt = SceneManager()
        rebuilt.from_dict(data)
        assert rebuilt.to_dict() == data
        assert rebuilt.get_sphere_count() == 2
        assert rebuilt.get_rect_count() == 7

    def test_unknown_types_rejected(self):
        """Test that unknown texture or material types are rejected."""
        from rayt.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="texture type"):
            scene.from_dict({"textures": [{"type": "marble"}]})
        with pytest.raises(ValueError, match="material type"):
            scene.from_dict({"materials": [{"type": "plastic"}]})
        with pytest.raises(ValueError, match="rect axis"):
            scene.from_dict(
                {
                    "textures": [{"type": "constant", "color": [1, 1, 1]}],
                    "materials": [{"type": "lambertian", "texture_id": 0}],
                    "rects": [{"axis": "xw", "bounds": [0, 1, 0, 1], "k": 0, "material_id": 0}],
                }
            )
