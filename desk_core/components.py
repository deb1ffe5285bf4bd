from typing import List

from .schema import Component, BaseUnitType, UpperUnitType
from .materials import (
    HARDWARE_COLOR, CPU_CAGE_COLOR, SCREEN_COLOR, TV_GLOW_COLOR,
    MONITOR_GLOW_COLOR, STAND_COLOR,
)

FRONT_THICK = 0.75
FRONT_GAP = 1.0      # Total reduction of a front vs. the carcass (0.5 per side)
FRONT_OFFSET = 0.4   # Front sits proud of the carcass face
DRAWER_COUNT = 3
SHELF_THICK = 0.75

MONITOR_SCREEN = (22.0, 14.0, 1.0)
MONITOR_SCREEN_Y = 12.0
MONITOR_STAND = (2.0, 10.0, 2.0)


class ComponentFactory:
    """
    Converts a sized unit into its detail parts.
    COORDINATE SYSTEM: Y-UP, positions relative to the unit origin
    (bottom-centre for cabinets and monitors, centre for TV and countertop).
    """

    @staticmethod
    def cabinet(tag: str, width: float, height: float, depth: float, color: str) -> List[Component]:
        comps = [
            Component(type="carcass", dims=[width, height, depth], pos=[0, height / 2, 0], color=color)
        ]
        front_z = depth / 2 + FRONT_OFFSET

        if tag == BaseUnitType.DRAWERS:
            # Stack of 3 equal drawers, 1" lift off the floor line
            drawer_h = height / DRAWER_COUNT
            for i in range(DRAWER_COUNT):
                dy = drawer_h * i + drawer_h / 2 + 1
                comps.append(Component(
                    type="drawer_face", dims=[width - FRONT_GAP, drawer_h - FRONT_GAP, FRONT_THICK],
                    pos=[0, dy, front_z], color=color
                ))
                # Horizontal pull
                comps.append(Component(
                    type="handle", dims=[6, 0.5, 0.5], pos=[0, dy, front_z + 0.5], color=HARDWARE_COLOR
                ))

        elif tag == BaseUnitType.CABINET or tag == UpperUnitType.CABINET:
            comps.append(Component(
                type="door", dims=[width - FRONT_GAP, height - FRONT_GAP, FRONT_THICK],
                pos=[0, height / 2, front_z], color=color
            ))
            # Vertical pull near the right edge
            comps.append(Component(
                type="handle", dims=[0.5, 4, 0.5], pos=[width / 2 - 2, height / 2, front_z + 0.5],
                color=HARDWARE_COLOR
            ))

        elif tag == BaseUnitType.CPU_HOLDER:
            # Open cage, rendered as a faint outline
            comps.append(Component(
                type="cage", dims=[width - 2, height - 2, depth], pos=[0, height / 2, 0],
                color=CPU_CAGE_COLOR, opacity=0.1
            ))

        elif tag == UpperUnitType.SHELVES:
            for frac in (0.33, 0.66):
                comps.append(Component(
                    type="shelf", dims=[width, SHELF_THICK, depth], pos=[0, height * frac, 0], color=color
                ))

        return comps

    @staticmethod
    def slab(width: float, thickness: float, depth: float, color: str) -> List[Component]:
        return [Component(type="slab", dims=[width, thickness, depth], pos=[0, 0, 0], color=color)]

    @staticmethod
    def television(width: float, height: float) -> List[Component]:
        return [
            Component(type="bezel", dims=[width, height, 1], pos=[0, 0, 0], color=SCREEN_COLOR),
            Component(type="screen", dims=[width - 1, height - 1, 1.1], pos=[0, 0, 0],
                      color=TV_GLOW_COLOR, emissive=True),
        ]

    @staticmethod
    def monitor() -> List[Component]:
        sw, sh, sd = MONITOR_SCREEN
        return [
            Component(type="bezel", dims=[sw, sh, sd], pos=[0, MONITOR_SCREEN_Y, 0], color=SCREEN_COLOR),
            Component(type="screen", dims=[sw - 1, sh - 1, 1.1], pos=[0, MONITOR_SCREEN_Y, 0],
                      color=MONITOR_GLOW_COLOR, emissive=True),
            Component(type="stand", dims=list(MONITOR_STAND), pos=[0, MONITOR_STAND[1] / 2, -1],
                      color=STAND_COLOR),
        ]
