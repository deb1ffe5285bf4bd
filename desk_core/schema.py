from enum import Enum
from typing import List, Optional, Dict, Tuple, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class CamelModel(BaseModel):
    """
    Base for every record that is persisted in the project JSON.
    Python side uses snake_case, the document uses camelCase keys
    (deskHeight, baseLayout, sideWalls ...).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Closed enumerations (layout tags, finishes, object types)
# ---------------------------------------------------------------------------

class MaterialType(str, Enum):
    BIRCH_PLYWOOD = "Birch Plywood"
    WALNUT_PLYWOOD = "Walnut Plywood"
    SOLID_OAK = "Solid Oak"
    PAINTED_MDF = "Painted MDF"


class BaseUnitType(str, Enum):
    DRAWERS = "drawers"
    CABINET = "cabinet"
    CPU_HOLDER = "cpu_holder"
    EMPTY = "empty"  # Knee space


class UpperUnitType(str, Enum):
    CABINET = "cabinet"
    SHELVES = "shelves"
    TV_GAP = "tv_gap"


class FloorType(str, Enum):
    WOOD = "wood"
    CARPET = "carpet"
    CONCRETE = "concrete"


class ObjectType(str, Enum):
    CHAIR = "chair"
    PRINTER = "printer"
    LAMP = "lamp"
    PLANT = "plant"
    BOOKS = "books"
    STAPLER = "stapler"


# ---------------------------------------------------------------------------
# Configuration (input of the layout engine)
# ---------------------------------------------------------------------------

class RoomConfig(CamelModel):
    """
    The wall the unit is built against. All lengths in inches.
    """
    width: float = Field(gt=0)   # Available wall width
    height: float = Field(gt=0)  # Ceiling height
    depth: float = Field(gt=0)
    wall_color: str = Field(default="#f3f4f6", pattern=HEX_COLOR)
    floor_type: FloorType = FloorType.WOOD
    floor_color: str = Field(default="#8d6e63", pattern=HEX_COLOR)
    side_walls: Tuple[bool, bool] = (True, True)  # [Left, Right] visibility


class PlacedObject(CamelModel):
    """
    A free-standing decorative item. Owned by the configuration,
    the layout engine never generates or moves these.
    """
    id: str
    type: ObjectType
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)  # Euler, radians


class DeskConfiguration(CamelModel):
    images: List[str] = Field(default_factory=list)  # Base64 data URLs of room photos

    room: RoomConfig

    desk_height: float = Field(gt=0)
    desk_depth: float = Field(gt=0)

    base_layout: List[BaseUnitType] = Field(default_factory=list)  # Left to right

    has_uppers: bool = False
    upper_depth: float = Field(default=14, gt=0)
    upper_height_from_desk: float = Field(default=24, gt=0)  # Desktop to bottom of uppers
    upper_layout: List[UpperUnitType] = Field(default_factory=list)

    tv_size: float = Field(default=0, ge=0)  # Diagonal inches, 0 = no TV
    monitor_count: int = Field(default=0, ge=0, le=2)

    material: MaterialType = MaterialType.BIRCH_PLYWOOD

    placed_objects: List[PlacedObject] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Scene graph (output of the layout engine)
# ---------------------------------------------------------------------------

class UnitKind(str, Enum):
    BASE_UNIT = "base-unit"
    UPPER_UNIT = "upper-unit"
    COUNTERTOP = "countertop"
    MONITOR = "monitor"
    TV = "tv"


class Component(BaseModel):
    """
    A single part of a unit (e.g. carcass, drawer face, handle, screen).
    """
    type: str  # "carcass", "drawer_face", "door", "handle", "shelf", "cage", "slab", "bezel", "screen", "stand"
    dims: List[float]  # [width, height, depth]
    pos: List[float]   # [x, y, z] centre, relative to the unit origin
    color: str
    opacity: float = 1.0
    emissive: bool = False
    shape: Literal["box", "cylinder"] = "box"


class Bounds(BaseModel):
    width: float
    height: float
    depth: float


class Origin(BaseModel):
    x: float
    y: float
    z: float


class PlacedUnit(BaseModel):
    """
    A positioned, sized rectangular solid. Coordinates are relative to the
    desk anchor: x along the wall (0 = wall midpoint), y up from the floor,
    z towards the room (0 = middle of the desk depth).
    """
    kind: UnitKind
    tag: Optional[str] = None  # Layout tag that produced the unit
    bounds: Bounds
    origin: Origin
    anchor: Literal["bottom", "center"] = "bottom"  # What origin.y refers to
    material_ref: str  # Render family: wood, painted, screen
    color: str
    components: List[Component] = Field(default_factory=list)


class Slot(BaseModel):
    """
    One entry of a band walk. Knee spaces and TV gaps get slots too,
    even when nothing is rendered for them.
    """
    index: int
    tag: str
    width: float
    center_x: float


class SceneGraph(BaseModel):
    base_cabinets: List[PlacedUnit] = Field(default_factory=list)
    countertop: List[PlacedUnit] = Field(default_factory=list)
    upper_cabinets: List[PlacedUnit] = Field(default_factory=list)
    equipment: List[PlacedUnit] = Field(default_factory=list)

    base_slots: List[Slot] = Field(default_factory=list)
    upper_slots: List[Slot] = Field(default_factory=list)

    def bands(self) -> Dict[str, List[PlacedUnit]]:
        return {
            "base-cabinets": self.base_cabinets,
            "countertop": self.countertop,
            "upper-cabinets": self.upper_cabinets,
            "equipment": self.equipment,
        }

    def all_units(self) -> List[PlacedUnit]:
        units = []
        for band in self.bands().values():
            units.extend(band)
        return units


# ---------------------------------------------------------------------------
# AI advisory payloads
# ---------------------------------------------------------------------------

class RoomEstimate(CamelModel):
    """Partial room returned by photo analysis. Missing keys stay None."""
    width: Optional[float] = Field(default=None, gt=0)
    height: Optional[float] = Field(default=None, gt=0)
    wall_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    floor_type: Optional[FloorType] = None
    floor_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)

    @field_validator('*', mode='wrap')
    @classmethod
    def _drop_invalid(cls, value, handler):
        # A bad guess for one key (e.g. "white" as wall color) only clears that key
        try:
            return handler(value)
        except ValidationError:
            return None


class CutListItem(CamelModel):
    part_name: str
    length: float = 0
    width: float = 0
    thickness: float = 0
    quantity: int = 1
    material: str = ""

    @property
    def dimensions(self) -> str:
        return f'{self.length:g}" x {self.width:g}" x {self.thickness:g}"'


class BuildStep(CamelModel):
    title: str
    description: str


class BuildGuide(CamelModel):
    cut_list: List[CutListItem] = Field(default_factory=list)
    steps: List[BuildStep] = Field(default_factory=list)
    tools_required: List[str] = Field(default_factory=list)


class ChatMessage(CamelModel):
    id: str
    role: Literal["user", "model"]
    text: str
    timestamp: int  # ms since epoch
