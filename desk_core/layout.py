"""
Parametric layout engine for the built-in desk.

Turns a DeskConfiguration into a SceneGraph of positioned boxes.
Pure and stateless: the whole graph is recomputed on every call.
"""

import logging
from typing import List, Optional, Tuple

from .schema import (
    DeskConfiguration, BaseUnitType, UpperUnitType, UnitKind,
    PlacedUnit, Bounds, Origin, Slot, SceneGraph,
)
from .materials import get_finish, countertop_color
from .components import ComponentFactory, MONITOR_SCREEN, MONITOR_SCREEN_Y, MONITOR_STAND

logger = logging.getLogger(__name__)

STORAGE_WIDTH = 24.0          # Fixed width of every non-empty base unit
COUNTERTOP_THICK = 1.5
COUNTERTOP_OVERHANG = 1.0     # Extra depth past the cabinet fronts
CEILING_GAP = 4.0             # Clearance above the uppers
TV_GAP_MIN_WIDTH = 48.0
TV_GAP_FACTOR = 1.2
TV_WIDTH_FACTOR = 0.87        # 16:9 panel width per inch of diagonal
TV_HEIGHT_FACTOR = 0.49
TV_LIFT = 2.0                 # TV bottom above the upper line
TV_WALL_OFFSET = 2.0
MONITOR_SPREAD = 12.0


def _walk(widths: List[float], start_x: float) -> List[float]:
    """Left to right walk; returns the centre x of each entry."""
    centers = []
    x = start_x
    for w in widths:
        centers.append(x + w / 2)
        x += w
    return centers


class BaseBandSolver:
    @staticmethod
    def knee_space_width(room_width: float, layout: List[BaseUnitType]) -> Optional[float]:
        """
        Leftover wall width shared by the 'empty' entries.
        None when there is no knee space to size. May be negative when the
        storage units alone exceed the wall; that is passed through as-is.
        """
        storage_count = sum(1 for t in layout if t != BaseUnitType.EMPTY)
        gap_count = len(layout) - storage_count
        if gap_count == 0:
            return None
        return (room_width - storage_count * STORAGE_WIDTH) / gap_count

    @staticmethod
    def slots(room_width: float, layout: List[BaseUnitType]) -> List[Slot]:
        gap_w = BaseBandSolver.knee_space_width(room_width, layout)
        widths = [gap_w if t == BaseUnitType.EMPTY else STORAGE_WIDTH for t in layout]
        centers = _walk(widths, -room_width / 2)
        return [
            Slot(index=i, tag=t.value, width=w, center_x=cx)
            for i, (t, w, cx) in enumerate(zip(layout, widths, centers))
        ]

    @staticmethod
    def solve(config: DeskConfiguration) -> Tuple[List[Slot], List[PlacedUnit]]:
        finish = get_finish(config.material)
        unit_h = config.desk_height - COUNTERTOP_THICK

        slots = BaseBandSolver.slots(config.room.width, config.base_layout)
        units = []
        for slot in slots:
            if slot.tag == BaseUnitType.EMPTY:
                continue  # Knee space is negative space
            units.append(PlacedUnit(
                kind=UnitKind.BASE_UNIT,
                tag=slot.tag,
                bounds=Bounds(width=slot.width, height=unit_h, depth=config.desk_depth),
                origin=Origin(x=slot.center_x, y=0, z=0),
                material_ref=finish['family'],
                color=finish['color'],
                components=ComponentFactory.cabinet(
                    slot.tag, slot.width, unit_h, config.desk_depth, finish['color']
                ),
            ))
        return slots, units


class CountertopSolver:
    @staticmethod
    def solve(config: DeskConfiguration) -> PlacedUnit:
        width = config.room.width
        depth = config.desk_depth + COUNTERTOP_OVERHANG
        color = countertop_color(config.material)
        return PlacedUnit(
            kind=UnitKind.COUNTERTOP,
            bounds=Bounds(width=width, height=COUNTERTOP_THICK, depth=depth),
            origin=Origin(x=0, y=config.desk_height - COUNTERTOP_THICK / 2, z=COUNTERTOP_OVERHANG / 2),
            anchor="center",
            material_ref=get_finish(config.material)['family'],
            color=color,
            components=ComponentFactory.slab(width, COUNTERTOP_THICK, depth, color),
        )


class UpperBandSolver:
    @staticmethod
    def tv_gap_width(tv_size: float) -> float:
        return max(tv_size * TV_GAP_FACTOR, TV_GAP_MIN_WIDTH)

    @staticmethod
    def slot_widths(room_width: float, layout: List[UpperUnitType], tv_size: float) -> List[float]:
        """
        Even split of the wall, except for the first tv_gap which is sized
        to the TV. Later tv_gap entries take an ordinary share.
        """
        n = len(layout)
        if n == 0:
            return []
        if UpperUnitType.TV_GAP not in layout:
            return [room_width / n] * n

        tv_index = layout.index(UpperUnitType.TV_GAP)
        tv_w = UpperBandSolver.tv_gap_width(tv_size)
        widths = []
        for i in range(n):
            if i == tv_index:
                widths.append(tv_w)
            else:
                widths.append((room_width - tv_w) / (n - 1))
        return widths

    @staticmethod
    def solve(config: DeskConfiguration) -> Tuple[List[Slot], List[PlacedUnit]]:
        if not config.has_uppers:
            return [], []

        finish = get_finish(config.material)
        upper_y = config.desk_height + config.upper_height_from_desk
        upper_h = config.room.height - upper_y - CEILING_GAP
        wall_z = -config.desk_depth / 2  # Back wall, relative to the desk centre

        layout = config.upper_layout
        widths = UpperBandSolver.slot_widths(config.room.width, layout, config.tv_size)
        centers = _walk(widths, -config.room.width / 2)

        slots = []
        units = []
        for i, (tag, w, cx) in enumerate(zip(layout, widths, centers)):
            slots.append(Slot(index=i, tag=tag.value, width=w, center_x=cx))

            if tag == UpperUnitType.TV_GAP:
                if config.tv_size > 0:
                    units.append(UpperBandSolver._television(config.tv_size, cx, upper_y, wall_z))
                continue

            units.append(PlacedUnit(
                kind=UnitKind.UPPER_UNIT,
                tag=tag.value,
                bounds=Bounds(width=w, height=upper_h, depth=config.upper_depth),
                origin=Origin(x=cx, y=upper_y, z=wall_z + config.upper_depth / 2),
                material_ref=finish['family'],
                color=finish['color'],
                components=ComponentFactory.cabinet(tag.value, w, upper_h, config.upper_depth, finish['color']),
            ))
        return slots, units

    @staticmethod
    def _television(tv_size: float, x: float, upper_y: float, wall_z: float) -> PlacedUnit:
        tv_w = tv_size * TV_WIDTH_FACTOR
        tv_h = tv_size * TV_HEIGHT_FACTOR
        parts = ComponentFactory.television(tv_w, tv_h)
        return PlacedUnit(
            kind=UnitKind.TV,
            tag=UpperUnitType.TV_GAP.value,
            bounds=Bounds(width=tv_w, height=tv_h, depth=1),
            origin=Origin(x=x, y=upper_y + tv_h / 2 + TV_LIFT, z=wall_z + TV_WALL_OFFSET),
            anchor="center",
            material_ref="screen",
            color=parts[0].color,
            components=parts,
        )


class EquipmentSolver:
    @staticmethod
    def monitor_anchor_x(config: DeskConfiguration) -> float:
        """
        Centre of the first knee space, or of the middle base slot when
        there is none. Falls back to the wall midpoint for an empty layout.
        """
        layout = config.base_layout
        if not layout:
            return 0.0
        if BaseUnitType.EMPTY in layout:
            idx = layout.index(BaseUnitType.EMPTY)
        else:
            idx = len(layout) // 2
        return BaseBandSolver.slots(config.room.width, layout)[idx].center_x

    @staticmethod
    def solve(config: DeskConfiguration) -> List[PlacedUnit]:
        if config.monitor_count <= 0:
            return []

        mx = EquipmentSolver.monitor_anchor_x(config)
        if config.monitor_count == 1:
            offsets = [0.0]
        else:
            offsets = [-MONITOR_SPREAD, MONITOR_SPREAD]

        # Bounds cover stand + screen: stand reaches back 2", screen top at 12 + 14/2
        height = MONITOR_SCREEN_Y + MONITOR_SCREEN[1] / 2
        depth = MONITOR_STAND[2] + MONITOR_SCREEN[2] / 2
        monitors = []
        for off in offsets:
            parts = ComponentFactory.monitor()
            monitors.append(PlacedUnit(
                kind=UnitKind.MONITOR,
                bounds=Bounds(width=MONITOR_SCREEN[0], height=height, depth=depth),
                origin=Origin(x=mx + off, y=config.desk_height, z=-config.desk_depth / 4),
                material_ref="screen",
                color=parts[0].color,
                components=parts,
            ))
        return monitors


def build_scene(config: DeskConfiguration) -> SceneGraph:
    """
    Entry point of the layout engine.
    1. Base band (storage units + knee spaces)
    2. Countertop
    3. Upper band (cabinets, shelves, TV)
    4. Equipment (monitors)
    """
    base_slots, base_units = BaseBandSolver.solve(config)
    upper_slots, upper_units = UpperBandSolver.solve(config)

    scene = SceneGraph(
        base_cabinets=base_units,
        countertop=[CountertopSolver.solve(config)],
        upper_cabinets=upper_units,
        equipment=EquipmentSolver.solve(config),
        base_slots=base_slots,
        upper_slots=upper_slots,
    )
    logger.debug(
        "Layout: %d base, %d upper, %d equipment units",
        len(scene.base_cabinets), len(scene.upper_cabinets), len(scene.equipment),
    )
    return scene
