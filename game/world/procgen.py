# game/world/procgen.py
from typing import TYPE_CHECKING, List, NamedTuple, Tuple

import structlog

from game.world.game_map import GameMap

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from game_rng import GameRNG
    from game.world.populator import Populator

log = structlog.get_logger()


class Rect(NamedTuple):
    """A room rectangle.

    ``x2``/``y2`` are exclusive on the carve side: the floor spans
    ``x1 + 1 .. x2 - 1`` and ``y1 + 1 .. y2 - 1``, leaving a one tile wall
    border on every side.
    """

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, width: int, height: int) -> "Rect":
        return cls(x, y, x + width, y + height)

    @property
    def center(self) -> Tuple[int, int]:
        """Center coordinates of the rectangle."""
        center_x = (self.x1 + self.x2) // 2
        center_y = (self.y1 + self.y2) // 2
        return center_x, center_y

    def intersects(self, other: "Rect") -> bool:
        """Returns True if the closed rectangles overlap or share an edge."""
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def interior(self) -> Tuple[range, range]:
        return range(self.x1 + 1, self.x2), range(self.y1 + 1, self.y2)


class DungeonLayout(NamedTuple):
    game_map: GameMap
    spawn: Tuple[int, int]
    rooms: List[Rect]


def create_room(room: Rect, game_map: GameMap) -> None:
    game_map.carve_area(room.x1 + 1, room.y1 + 1, room.x2, room.y2)


def create_h_tunnel(x1: int, x2: int, y: int, game_map: GameMap) -> None:
    for x in range(min(x1, x2), max(x1, x2) + 1):
        game_map.set_empty(x, y)


def create_v_tunnel(y1: int, y2: int, x: int, game_map: GameMap) -> None:
    for y in range(min(y1, y2), max(y1, y2) + 1):
        game_map.set_empty(x, y)


def connect_rooms(
    prev_center: Tuple[int, int],
    new_center: Tuple[int, int],
    horizontal_first: bool,
    game_map: GameMap,
) -> None:
    """Carve one L-shaped corridor between two room centers."""
    prev_x, prev_y = prev_center
    new_x, new_y = new_center
    if horizontal_first:
        create_h_tunnel(prev_x, new_x, prev_y, game_map)
        create_v_tunnel(prev_y, new_y, new_x, game_map)
    else:
        create_v_tunnel(prev_y, new_y, prev_x, game_map)
        create_h_tunnel(prev_x, new_x, new_y, game_map)


def generate_dungeon(
    width: int,
    height: int,
    max_rooms: int,
    room_min_size: int,
    room_max_size: int,
    rng: "GameRNG",
    populator: "Populator | None" = None,
) -> DungeonLayout:
    """Carve up to ``max_rooms`` non-overlapping rooms joined by corridors.

    Each iteration draws one candidate room; a candidate touching or
    overlapping an accepted room is dropped and the iteration is spent.
    Fewer rooms than ``max_rooms`` is a valid outcome.  Each accepted room is
    populated before the next candidate is drawn.
    """
    if room_max_size >= min(width, height):
        raise ValueError("Rooms must be smaller than the map.")
    game_map = GameMap(width, height)
    rooms: List[Rect] = []
    spawn: Tuple[int, int] | None = None

    for attempt in range(max_rooms):
        w = rng.get_int(room_min_size, room_max_size)
        h = rng.get_int(room_min_size, room_max_size)
        x = rng.get_int(0, width - w - 1)
        y = rng.get_int(0, height - h - 1)
        new_room = Rect.from_size(x, y, w, h)

        if any(new_room.intersects(other) for other in rooms):
            log.debug("Room rejected: overlap", attempt=attempt, room=new_room)
            continue

        create_room(new_room, game_map)
        new_center = new_room.center
        if not rooms:
            spawn = new_center
        else:
            connect_rooms(rooms[-1].center, new_center, rng.get_bool(), game_map)

        rooms.append(new_room)
        if populator is not None:
            populator.populate(new_room, game_map, rng, reserved={spawn})

    if spawn is None:
        # max_rooms of zero leaves nothing carved
        log.error("Dungeon generation produced no rooms", max_rooms=max_rooms)
        raise ValueError("Dungeon generation needs at least one room.")

    log.info(
        "Dungeon generated",
        rooms=len(rooms),
        max_rooms=max_rooms,
        spawn=spawn,
        size=(width, height),
    )
    return DungeonLayout(game_map, spawn, rooms)
