from typing import Dict, Any, List, Union

from .schema import MaterialType, FloorType

# Maps finish to display color (hex) and render family
MATERIAL_FINISHES: Dict[MaterialType, Dict[str, Any]] = {
    # Plywoods / hardwood (textured wood family)
    MaterialType.BIRCH_PLYWOOD: {'color': '#E3C8AA', 'family': 'wood'},
    MaterialType.WALNUT_PLYWOOD: {'color': '#5D4037', 'family': 'wood'},
    MaterialType.SOLID_OAK: {'color': '#C19A6B', 'family': 'wood'},

    # Painted (smooth, slightly glossy)
    MaterialType.PAINTED_MDF: {'color': '#ECEFF1', 'family': 'painted'},
}

DEFAULT_FINISH: Dict[str, Any] = {'color': '#E0E0E0', 'family': 'wood'}

# Painted carcasses get a contrasting wood top
PAINTED_COUNTERTOP_COLOR = '#8D6E63'

HARDWARE_COLOR = '#333333'
CPU_CAGE_COLOR = '#111111'
SCREEN_COLOR = '#000000'
TV_GLOW_COLOR = '#1A1A1A'
MONITOR_GLOW_COLOR = '#223344'
STAND_COLOR = '#222222'

FLOOR_FINISHES: Dict[FloorType, Dict[str, float]] = {
    FloorType.WOOD: {'roughness': 0.8, 'metalness': 0.0},
    FloorType.CARPET: {'roughness': 1.0, 'metalness': 0.0},
    FloorType.CONCRETE: {'roughness': 0.8, 'metalness': 0.1},
}


def get_finish(material: Union[MaterialType, str]) -> Dict[str, Any]:
    try:
        return MATERIAL_FINISHES[MaterialType(material)]
    except ValueError:
        return DEFAULT_FINISH


def countertop_color(material: Union[MaterialType, str]) -> str:
    if material == MaterialType.PAINTED_MDF:
        return PAINTED_COUNTERTOP_COLOR
    return get_finish(material)['color']


def hex_to_rgba(color: str, opacity: float = 1.0) -> List[int]:
    """
    '#E3C8AA' -> [227, 200, 170, 255]. Short form '#fff' is expanded.
    """
    h = color.lstrip('#')
    if len(h) == 3:
        h = ''.join(c * 2 for c in h)
    rgb = [int(h[i:i + 2], 16) for i in (0, 2, 4)]
    return rgb + [int(round(max(0.0, min(1.0, opacity)) * 255))]
