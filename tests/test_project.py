import json

import pytest
from pydantic import ValidationError

from desk_core.project import (
    ProjectFileError, default_project, apply_patch, apply_base_preset, set_tv_size,
    export_project, import_project, save_project, load_project, export_room, import_room,
    room_from_estimate, start_project, BASE_PRESETS, TV_UPPER_LAYOUT, NO_TV_UPPER_LAYOUT,
)
from desk_core.schema import BaseUnitType, UpperUnitType, MaterialType, FloorType, RoomConfig, RoomEstimate


SAMPLE_PROJECT = {
    "images": [],
    "room": {
        "width": 132, "height": 108, "depth": 120,
        "wallColor": "#ffffff", "floorType": "carpet", "floorColor": "#777777",
        "sideWalls": [True, False],
    },
    "deskHeight": 29,
    "deskDepth": 24,
    "baseLayout": ["cabinet", "empty", "drawers"],
    "hasUppers": True,
    "upperDepth": 12,
    "upperLayout": ["cabinet", "tv_gap", "cabinet"],
    "upperHeightFromDesk": 20,
    "tvSize": 55,
    "monitorCount": 1,
    "material": "Solid Oak",
    "placedObjects": [
        {"id": "1700000000000", "type": "chair", "position": [0, 5, 20], "rotation": [0, 0, 0]},
    ],
}


class TestDefaultProject:
    def test_values(self):
        cfg = default_project()
        assert cfg.room.width == 120
        assert cfg.room.height == 96
        assert cfg.desk_height == 30
        assert cfg.desk_depth == 26
        assert cfg.base_layout == BASE_PRESETS['gamer']
        assert cfg.has_uppers is True
        assert cfg.upper_layout == TV_UPPER_LAYOUT
        assert cfg.tv_size == 42
        assert cfg.monitor_count == 2
        assert cfg.material == MaterialType.BIRCH_PLYWOOD
        assert cfg.placed_objects == []

    def test_fresh_copy_each_call(self):
        a = default_project()
        a.base_layout.append(BaseUnitType.DRAWERS)
        assert default_project().base_layout == BASE_PRESETS['gamer']


class TestImportExport:
    def test_round_trip(self):
        cfg = default_project()
        assert import_project(export_project(cfg)) == cfg

    def test_camel_case_document(self):
        text = export_project(default_project())
        doc = json.loads(text)
        assert doc["deskHeight"] == 30
        assert doc["baseLayout"] == ["drawers", "empty", "cpu_holder"]
        assert doc["room"]["sideWalls"] == [True, True]
        assert "desk_height" not in doc

    def test_import_sample(self):
        cfg = import_project(json.dumps(SAMPLE_PROJECT))
        assert cfg.room.floor_type == FloorType.CARPET
        assert cfg.room.side_walls == (True, False)
        assert cfg.base_layout == [BaseUnitType.CABINET, BaseUnitType.EMPTY, BaseUnitType.DRAWERS]
        assert cfg.material == MaterialType.SOLID_OAK
        assert cfg.placed_objects[0].position == (0, 5, 20)

    def test_import_bytes(self):
        cfg = import_project(json.dumps(SAMPLE_PROJECT).encode('utf-8'))
        assert cfg.tv_size == 55

    @pytest.mark.parametrize("text", [
        "not json at all",
        "{\"room\": ",
        "[]",
    ])
    def test_malformed(self, text):
        with pytest.raises(ProjectFileError, match="Invalid project file"):
            import_project(text)

    @pytest.mark.parametrize("key, value", [
        ("baseLayout", ["drawers", "sofa"]),
        ("upperLayout", ["none"]),
        ("monitorCount", 3),
        ("tvSize", -1),
        ("material", "Particle Board"),
        ("deskHeight", "tall"),
    ])
    def test_schema_mismatch(self, key, value):
        doc = dict(SAMPLE_PROJECT, **{key: value})
        with pytest.raises(ProjectFileError):
            import_project(json.dumps(doc))

    def test_missing_room(self):
        doc = {k: v for k, v in SAMPLE_PROJECT.items() if k != "room"}
        with pytest.raises(ProjectFileError):
            import_project(json.dumps(doc))

    def test_save_load(self, tmp_path):
        cfg = default_project()
        path = save_project(cfg, tmp_path / "desk_project.json")
        assert path.exists()
        assert load_project(path) == cfg

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ProjectFileError):
            load_project(tmp_path / "nope.json")


class TestEdits:
    def test_patch_camel_and_snake(self):
        cfg = apply_patch(default_project(), {"deskDepth": 30, "monitor_count": 1})
        assert cfg.desk_depth == 30
        assert cfg.monitor_count == 1
        assert cfg.tv_size == 42

    def test_patch_is_validated(self):
        with pytest.raises(ValidationError):
            apply_patch(default_project(), {"monitorCount": 5})

    def test_patch_leaves_original(self):
        cfg = default_project()
        apply_patch(cfg, {"baseLayout": ["empty"]})
        assert cfg.base_layout == BASE_PRESETS['gamer']

    @pytest.mark.parametrize("name", ["standard", "left-heavy", "long", "gamer"])
    def test_presets(self, name):
        cfg = apply_base_preset(default_project(), name)
        assert cfg.base_layout == BASE_PRESETS[name]

    def test_unknown_preset_is_standard(self):
        cfg = apply_base_preset(default_project(), "bunker")
        assert cfg.base_layout == BASE_PRESETS['standard']

    def test_tv_slider_on(self):
        cfg = default_project().model_copy(update={'upper_layout': list(NO_TV_UPPER_LAYOUT)})
        cfg = set_tv_size(cfg, 65)
        assert cfg.tv_size == 65
        assert cfg.upper_layout == [UpperUnitType.CABINET, UpperUnitType.TV_GAP, UpperUnitType.CABINET]

    def test_tv_slider_off(self):
        cfg = set_tv_size(default_project(), 0)
        assert cfg.tv_size == 0
        assert cfg.upper_layout == [UpperUnitType.CABINET, UpperUnitType.SHELVES, UpperUnitType.CABINET]


class TestRoomFile:
    def test_round_trip(self):
        room = RoomConfig(width=140, height=100, depth=90, wall_color='#abcdef', side_walls=(False, True))
        current = default_project().room
        assert import_room(export_room(room), current) == room

    def test_partial_document_keeps_current(self):
        current = default_project().room
        room = import_room('{"width": 150, "height": 110}', current)
        assert room.width == 150
        assert room.height == 110
        assert room.depth == current.depth
        assert room.wall_color == current.wall_color

    def test_not_json(self):
        with pytest.raises(ProjectFileError, match="Error reading file."):
            import_room("{{{", default_project().room)

    @pytest.mark.parametrize("text", [
        '{"width": 150}',
        '{"width": "150", "height": 96}',
        '{"width": true, "height": 96}',
        '[1, 2]',
        '{"width": 150, "height": 96, "wallColor": "red"}',
        '{"width": -5, "height": 96}',
    ])
    def test_invalid_room(self, text):
        with pytest.raises(ProjectFileError, match="Invalid room configuration file."):
            import_room(text, default_project().room)


class TestSetupWizard:
    def test_full_estimate(self):
        estimate = RoomEstimate(width=150, height=108, wall_color='#eeeeee', floor_type=FloorType.CONCRETE,
                                floor_color='#999999')
        room = room_from_estimate(estimate)
        assert (room.width, room.height, room.depth) == (150, 108, 96)
        assert room.floor_type == FloorType.CONCRETE
        assert room.side_walls == (True, True)

    def test_missing_values_take_defaults(self):
        room = room_from_estimate(RoomEstimate())
        assert (room.width, room.height) == (120, 96)
        assert room.wall_color == '#f3f4f6'
        assert room.floor_color == '#8d6e63'

    def test_start_project(self):
        cfg = start_project(["data:image/png;base64,AAAA"], RoomEstimate(width=140))
        assert cfg.images == ["data:image/png;base64,AAAA"]
        assert cfg.room.width == 140
        assert cfg.base_layout == BASE_PRESETS['gamer']
