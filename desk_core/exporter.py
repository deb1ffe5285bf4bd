import logging
from typing import List, Optional, Sequence

import numpy as np
import trimesh

from .schema import DeskConfiguration, SceneGraph, PlacedUnit, PlacedObject, Component
from .materials import hex_to_rgba
from .layout import build_scene
from .room import RoomShell
from .objects import get_object_parts

logger = logging.getLogger(__name__)


class SceneExporter:
    """
    Renders a SceneGraph, the room shell and placed objects into a trimesh
    Scene of boxes (Y-Up, inches).
    """

    def __init__(self):
        self.scene = trimesh.Scene()

    @staticmethod
    def _mesh(comp: Component) -> Optional[trimesh.Trimesh]:
        if any(d <= 0 for d in comp.dims):
            # Negative widths are legal in the layout, they just have nothing to draw
            logger.debug("Skipping degenerate %s %s", comp.type, comp.dims)
            return None

        if comp.shape == "cylinder":
            mesh = trimesh.creation.cylinder(radius=comp.dims[0] / 2, height=comp.dims[1])
            # trimesh cylinders run along Z, ours stand along Y
            mesh.apply_transform(trimesh.transformations.rotation_matrix(np.pi / 2, [1, 0, 0]))
        else:
            mesh = trimesh.creation.box(extents=comp.dims)
        mesh.visual.face_colors = hex_to_rgba(comp.color, comp.opacity)
        return mesh

    def _add_parts(self, parts: Sequence[Component], base_matrix: np.ndarray, name: str) -> int:
        added = 0
        for comp in parts:
            mesh = self._mesh(comp)
            if mesh is None:
                continue
            T_local = trimesh.transformations.translation_matrix(comp.pos)
            self.scene.add_geometry(
                mesh, metadata={"name": name, "part": comp.type},
                transform=trimesh.transformations.concatenate_matrices(base_matrix, T_local),
            )
            added += 1
        return added

    def add_unit(self, unit: PlacedUnit, anchor: Sequence[float] = (0, 0, 0)) -> int:
        o = unit.origin
        T_global = trimesh.transformations.translation_matrix(
            [anchor[0] + o.x, anchor[1] + o.y, anchor[2] + o.z]
        )
        return self._add_parts(unit.components, T_global, unit.kind.value)

    def add_scene_graph(self, graph: SceneGraph, anchor: Sequence[float] = (0, 0, 0)) -> int:
        return sum(self.add_unit(u, anchor) for u in graph.all_units())

    def add_room(self, config: DeskConfiguration) -> int:
        return self._add_parts(RoomShell.build(config.room), np.eye(4), "room")

    @staticmethod
    def object_matrix(obj: PlacedObject) -> np.ndarray:
        """Position plus XYZ Euler rotation (Rx @ Ry @ Rz), as stored by the viewer."""
        T = trimesh.transformations.translation_matrix(obj.position)
        R = trimesh.transformations.euler_matrix(*obj.rotation, axes='rxyz')
        return trimesh.transformations.concatenate_matrices(T, R)

    def add_object(self, obj: PlacedObject) -> int:
        return self._add_parts(get_object_parts(obj.type), self.object_matrix(obj), obj.type.value)

    def export(self, filename: str, file_type: Optional[str] = None) -> str:
        self.scene.export(filename, file_type=file_type)
        return filename


def export_configuration(config: DeskConfiguration, filename: str,
                         include_room: bool = True, file_type: Optional[str] = None) -> str:
    """Lays out the desk and writes it (plus room and objects) to GLB/OBJ."""
    exporter = SceneExporter()
    graph = build_scene(config)
    count = exporter.add_scene_graph(graph, RoomShell.desk_anchor(config))
    if include_room:
        count += exporter.add_room(config)
    for obj in config.placed_objects:
        count += exporter.add_object(obj)
    logger.info("Exporting %d meshes to %s", count, filename)
    return exporter.export(filename, file_type=file_type)
