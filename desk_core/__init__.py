"""
Built-in desk configurator: parametric layout engine, project files,
3D export and an AI design assistant.
"""

from .schema import (
    DeskConfiguration,
    RoomConfig,
    PlacedObject,
    SceneGraph,
    PlacedUnit,
    BaseUnitType,
    UpperUnitType,
    MaterialType,
)
from .layout import build_scene
from .project import default_project, import_project, export_project, ProjectFileError

__all__ = [
    'DeskConfiguration',
    'RoomConfig',
    'PlacedObject',
    'SceneGraph',
    'PlacedUnit',
    'BaseUnitType',
    'UpperUnitType',
    'MaterialType',
    'build_scene',
    'default_project',
    'import_project',
    'export_project',
    'ProjectFileError',
]
