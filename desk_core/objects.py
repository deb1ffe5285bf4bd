"""
Decorative objects the user can drop into the room (chair, lamp, ...).

These live in DeskConfiguration.placed_objects; the layout engine ignores
them. Helpers here return a new configuration instead of mutating.
"""

import time
from typing import List, Dict, Any, Optional, Sequence

from .schema import DeskConfiguration, PlacedObject, ObjectType, Component

DEFAULT_POSITION = (0.0, 5.0, 20.0)


def _box(dims, pos, color, **kw) -> Component:
    return Component(type="part", dims=list(dims), pos=list(pos), color=color, **kw)


def _cyl(radius, height, pos, color, **kw) -> Component:
    # Cylinders are stored by bounding box: [diameter, height, diameter]
    return Component(type="part", dims=[radius * 2, height, radius * 2], pos=list(pos),
                     color=color, shape="cylinder", **kw)


OBJECT_LIBRARY: Dict[ObjectType, Dict[str, Any]] = {
    ObjectType.CHAIR: {
        'label': 'Office Chair',
        'parts': [
            _box([18, 2, 18], [0, 18, 0], '#333333'),   # Seat
            _box([16, 20, 2], [0, 28, 8], '#333333'),   # Back
            _cyl(1, 16, [0, 8, 0], '#888888'),          # Gas lift
            _box([20, 2, 20], [0, 1, 0], '#222222'),    # Base
        ],
    },
    ObjectType.PRINTER: {
        'label': 'Printer',
        'parts': [
            _box([16, 10, 12], [0, 5, 0], '#eeeeee'),
            _box([14, 1, 10], [0, 8, 0], '#111111'),
        ],
    },
    ObjectType.LAMP: {
        'label': 'Desk Lamp',
        'parts': [
            _cyl(4, 1, [0, 0.5, 0], '#333333'),
            _cyl(0.5, 12, [0, 6, 0], '#FFD700'),
            _cyl(6, 5, [0, 12, 0], '#ffffff', opacity=0.8),
        ],
    },
    ObjectType.BOOKS: {
        'label': 'Books',
        'parts': [
            _box([2, 8, 6], [-2.5, 4, 0], '#1e88e5'),
            _box([2, 7, 6], [0, 3.5, 0], '#43a047'),
            _box([2, 8.5, 6], [2.5, 4.25, 0], '#e53935'),
        ],
    },
    ObjectType.STAPLER: {
        'label': 'Stapler',
        'parts': [
            _box([6, 2, 1.5], [0, 1, 0], '#d32f2f'),
            _box([6, 0.5, 1.5], [0, 0.25, 0], '#999999'),
        ],
    },
}

# Anything without a model renders as a placeholder cube
PLACEHOLDER_PARTS = [_box([5, 5, 5], [0, 0, 0], '#ff69b4')]


def get_object_parts(obj_type: ObjectType) -> List[Component]:
    entry = OBJECT_LIBRARY.get(obj_type)
    return entry['parts'] if entry else PLACEHOLDER_PARTS


def add_object(config: DeskConfiguration, obj_type: ObjectType,
               object_id: Optional[str] = None) -> DeskConfiguration:
    """
    Appends a new object at the default drop point.
    The id defaults to the current time in milliseconds.
    """
    if object_id is None:
        object_id = str(int(time.time() * 1000))
    obj = PlacedObject(id=object_id, type=obj_type, position=DEFAULT_POSITION)
    return config.model_copy(update={'placed_objects': config.placed_objects + [obj]})


def move_object(config: DeskConfiguration, object_id: str,
                position: Sequence[float], rotation: Sequence[float]) -> DeskConfiguration:
    """Replaces the transform of one object. Raises KeyError for unknown ids."""
    if not any(o.id == object_id for o in config.placed_objects):
        raise KeyError(object_id)

    objects = []
    for o in config.placed_objects:
        if o.id == object_id:
            o = PlacedObject(id=o.id, type=o.type, position=tuple(position), rotation=tuple(rotation))
        objects.append(o)
    return config.model_copy(update={'placed_objects': objects})


def remove_object(config: DeskConfiguration, object_id: str) -> DeskConfiguration:
    remaining = [o for o in config.placed_objects if o.id != object_id]
    if len(remaining) == len(config.placed_objects):
        raise KeyError(object_id)
    return config.model_copy(update={'placed_objects': remaining})
