import numpy as np
import pytest
import trimesh

from desk_core.exporter import SceneExporter, export_configuration
from desk_core.layout import build_scene
from desk_core.materials import hex_to_rgba
from desk_core.objects import add_object, move_object
from desk_core.project import default_project
from desk_core.schema import Component, ObjectType


def test_hex_to_rgba():
    assert hex_to_rgba('#E3C8AA') == [227, 200, 170, 255]
    assert hex_to_rgba('#fff', 0.1) == [255, 255, 255, 26]


class TestSceneExporter:
    def test_default_desk_parts(self):
        exporter = SceneExporter()
        # drawers 7 + cpu 2, countertop 1, two uppers 3 each + TV 2, two monitors 3 each
        count = exporter.add_scene_graph(build_scene(default_project()))
        assert count == 9 + 1 + 8 + 6
        assert len(exporter.scene.graph.nodes_geometry) == count

    def test_room(self):
        exporter = SceneExporter()
        assert exporter.add_room(default_project()) == 5

    def test_degenerate_parts_are_skipped(self):
        # Uppers with no headroom have a negative height
        cfg = default_project().model_copy(update={'upper_height_from_desk': 70, 'tv_size': 0})
        unit = build_scene(cfg).upper_cabinets[0]
        assert unit.bounds.height < 0

        exporter = SceneExporter()
        # Carcass and door are dropped, the handle keeps its fixed size
        assert exporter.add_unit(unit) == 1
        assert SceneExporter._mesh(unit.components[0]) is None

    def test_cylinder_stands_upright(self):
        mesh = SceneExporter._mesh(Component(type="part", dims=[2, 16, 2], pos=[0, 0, 0],
                                             color='#888888', shape="cylinder"))
        assert mesh.extents == pytest.approx([2, 16, 2], abs=1e-6)

    def test_box_extents_and_color(self):
        mesh = SceneExporter._mesh(Component(type="carcass", dims=[24, 28.5, 26], pos=[0, 0, 0],
                                             color='#5D4037'))
        assert mesh.extents == pytest.approx([24, 28.5, 26])
        assert list(mesh.visual.face_colors[0]) == [93, 64, 55, 255]

    def test_unit_is_placed_at_anchor(self):
        graph = build_scene(default_project())
        top = graph.countertop[0]
        exporter = SceneExporter()
        exporter.add_unit(top, anchor=(0, 0, -35))
        bounds = exporter.scene.bounds
        assert np.allclose(bounds[0], [-60, 28.5, -35 + 0.5 - 13.5])
        assert np.allclose(bounds[1], [60, 30, -35 + 0.5 + 13.5])

    def test_placed_object(self):
        cfg = add_object(default_project(), ObjectType.STAPLER, object_id="s")
        exporter = SceneExporter()
        assert exporter.add_object(cfg.placed_objects[0]) == 2

    @pytest.mark.parametrize("rotation", [
        (np.pi / 2, np.pi / 2, 0.0),
        (0.3, -1.1, 2.4),
    ])
    def test_object_rotation_is_xyz_euler(self, rotation):
        cfg = add_object(default_project(), ObjectType.PRINTER, object_id="p")
        cfg = move_object(cfg, "p", (10, 0, -5), rotation)

        matrix = SceneExporter.object_matrix(cfg.placed_objects[0])

        rx, ry, rz = (trimesh.transformations.rotation_matrix(angle, axis)[:3, :3]
                      for angle, axis in zip(rotation, np.eye(3)))
        assert np.allclose(matrix[:3, :3], rx @ ry @ rz)
        assert np.allclose(matrix[:3, 3], [10, 0, -5])

    def test_two_axis_rotation(self):
        cfg = add_object(default_project(), ObjectType.PRINTER, object_id="p")
        cfg = move_object(cfg, "p", (0, 0, 0), (np.pi / 2, np.pi / 2, 0))
        matrix = SceneExporter.object_matrix(cfg.placed_objects[0])
        assert np.allclose(matrix[0, :3], [0, 0, 1])


def test_export_glb(tmp_path):
    cfg = add_object(default_project(), ObjectType.PLANT, object_id="p")
    out = export_configuration(cfg, str(tmp_path / "desk.glb"))
    assert (tmp_path / "desk.glb").stat().st_size > 0

    loaded = trimesh.load(out, force='scene')
    assert len(loaded.geometry) > 0


def test_export_desk_only(tmp_path):
    out = tmp_path / "desk.glb"
    export_configuration(default_project(), str(out), include_room=False)
    assert out.exists()
