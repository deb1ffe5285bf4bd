"""
Project persistence and whole-configuration edits.

The project file is the camelCase JSON document of a DeskConfiguration
(desk_project.json). Import is all-or-nothing: anything that does not parse
or does not match the schema is rejected with ProjectFileError.
"""

import json
import logging
from typing import Dict, Any, List, Union
from pathlib import Path

from pydantic import ValidationError

from .schema import (
    DeskConfiguration, RoomConfig, RoomEstimate, BaseUnitType, UpperUnitType, MaterialType, FloorType,
)

logger = logging.getLogger(__name__)

PROJECT_FILENAME = "desk_project.json"
ROOM_FILENAME = "room_config.json"


class ProjectFileError(ValueError):
    """A project or room document could not be read."""


BASE_PRESETS: Dict[str, List[BaseUnitType]] = {
    'standard': [BaseUnitType.DRAWERS, BaseUnitType.EMPTY, BaseUnitType.DRAWERS],
    'left-heavy': [BaseUnitType.DRAWERS, BaseUnitType.CABINET, BaseUnitType.EMPTY],
    'long': [BaseUnitType.CABINET, BaseUnitType.EMPTY, BaseUnitType.EMPTY, BaseUnitType.DRAWERS],
    'gamer': [BaseUnitType.DRAWERS, BaseUnitType.EMPTY, BaseUnitType.CPU_HOLDER],
}

TV_UPPER_LAYOUT = [UpperUnitType.CABINET, UpperUnitType.TV_GAP, UpperUnitType.CABINET]
NO_TV_UPPER_LAYOUT = [UpperUnitType.CABINET, UpperUnitType.SHELVES, UpperUnitType.CABINET]


def default_project() -> DeskConfiguration:
    return DeskConfiguration(
        room=RoomConfig(
            width=120, height=96, depth=96,
            wall_color='#f3f4f6', floor_type=FloorType.WOOD, floor_color='#8d6e63',
            side_walls=(True, True),
        ),
        desk_height=30,
        desk_depth=26,
        base_layout=list(BASE_PRESETS['gamer']),
        has_uppers=True,
        upper_depth=14,
        upper_layout=list(TV_UPPER_LAYOUT),
        upper_height_from_desk=24,
        tv_size=42,
        monitor_count=2,
        material=MaterialType.BIRCH_PLYWOOD,
    )


def room_from_estimate(estimate: RoomEstimate) -> RoomConfig:
    """Photo analysis result -> room. Whatever the estimate leaves out takes the default."""
    default = default_project().room
    return RoomConfig(
        width=estimate.width or default.width,
        height=estimate.height or default.height,
        depth=default.depth,
        wall_color=estimate.wall_color or default.wall_color,
        floor_type=estimate.floor_type or default.floor_type,
        floor_color=estimate.floor_color or default.floor_color,
        side_walls=(True, True),
    )


def start_project(images: List[str], estimate: RoomEstimate) -> DeskConfiguration:
    """New project from the setup wizard: default desk in the analysed room."""
    return default_project().model_copy(
        update={'images': list(images), 'room': room_from_estimate(estimate)}
    )


def apply_patch(config: DeskConfiguration, patch: Dict[str, Any]) -> DeskConfiguration:
    """
    Shallow merge of top-level fields (camelCase or snake_case keys),
    re-validated as a whole. Raises pydantic.ValidationError on bad values.
    """
    data = config.model_dump(by_alias=True)
    for key, value in patch.items():
        field = DeskConfiguration.model_fields.get(key)
        data[field.alias if field and field.alias else key] = value
    return DeskConfiguration.model_validate(data)


def apply_base_preset(config: DeskConfiguration, name: str) -> DeskConfiguration:
    # Unknown names fall back to the standard layout
    layout = BASE_PRESETS.get(name, BASE_PRESETS['standard'])
    return config.model_copy(update={'base_layout': list(layout)})


def set_tv_size(config: DeskConfiguration, size: float) -> DeskConfiguration:
    """TV slider: a TV needs the tv_gap layout, no TV swaps the gap for shelves."""
    layout = TV_UPPER_LAYOUT if size > 0 else NO_TV_UPPER_LAYOUT
    return apply_patch(config, {'tvSize': size, 'upperLayout': [t.value for t in layout]})


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------

def export_project(config: DeskConfiguration) -> str:
    return config.model_dump_json(by_alias=True, indent=2)


def import_project(text: Union[str, bytes]) -> DeskConfiguration:
    try:
        return DeskConfiguration.model_validate_json(text)
    except ValidationError as e:
        logger.warning("Rejected project file: %s", e)
        raise ProjectFileError("Invalid project file") from e


def save_project(config: DeskConfiguration, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.write_text(export_project(config), encoding='utf-8')
    return path


def load_project(path: Union[str, Path]) -> DeskConfiguration:
    try:
        text = Path(path).read_text(encoding='utf-8')
    except OSError as e:
        raise ProjectFileError(f"Cannot read project file {path}: {e}") from e
    return import_project(text)


def export_room(room: RoomConfig) -> str:
    return room.model_dump_json(by_alias=True, indent=2)


def import_room(text: Union[str, bytes], current: RoomConfig) -> RoomConfig:
    """
    Loads a room document on top of the current room. Only width and height
    are required; every other key keeps its current value when absent.
    """
    try:
        imported = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProjectFileError("Error reading file.") from e

    if not isinstance(imported, dict) or not all(
        isinstance(imported.get(k), (int, float)) and not isinstance(imported.get(k), bool)
        for k in ('width', 'height')
    ):
        raise ProjectFileError("Invalid room configuration file.")

    merged = current.model_dump(by_alias=True)
    merged.update(imported)
    try:
        return RoomConfig.model_validate(merged)
    except ValidationError as e:
        raise ProjectFileError("Invalid room configuration file.") from e
