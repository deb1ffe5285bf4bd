from typing import List

from .schema import RoomConfig, DeskConfiguration, Component

WALL_THICK = 1.0
FLOOR_THICK = 1.0
FLOOR_MARGIN = 100.0  # Floor extends past the walls on every side


class RoomShell:
    """Room geometry around the desk (Y-Up, origin at floor centre)."""

    @staticmethod
    def build(room: RoomConfig) -> List[Component]:
        W, H, D = room.width, room.height, room.depth
        parts = []

        # Floor
        parts.append(Component(
            type="floor", dims=[W + FLOOR_MARGIN, FLOOR_THICK, D + FLOOR_MARGIN],
            pos=[0, -FLOOR_THICK / 2, 0], color=room.floor_color
        ))

        # Back wall (the one the unit is built against)
        parts.append(Component(
            type="back_wall", dims=[W, H, WALL_THICK], pos=[0, H / 2, -D / 2], color=room.wall_color
        ))

        # Side walls, visual only
        left, right = room.side_walls
        if left:
            parts.append(Component(
                type="side_wall", dims=[WALL_THICK, H, D], pos=[-W / 2, H / 2, 0], color=room.wall_color
            ))
        if right:
            parts.append(Component(
                type="side_wall", dims=[WALL_THICK, H, D], pos=[W / 2, H / 2, 0], color=room.wall_color
            ))

        # Ceiling hint
        parts.append(Component(
            type="ceiling", dims=[W, 1, D], pos=[0, H, 0], color="#ffffff", opacity=0.1
        ))
        return parts

    @staticmethod
    def desk_anchor(config: DeskConfiguration) -> List[float]:
        """Where the desk origin sits in room coordinates: pushed back against the wall."""
        return [0.0, 0.0, -config.room.depth / 2 + config.desk_depth / 2]
