from enum import Enum, IntEnum

Color = tuple[int, int, int]

# --- Tile presentation ---
COLOR_DARK_WALL: Color = (0, 0, 100)
COLOR_LIGHT_WALL: Color = (130, 110, 50)
COLOR_DARK_GROUND: Color = (50, 50, 150)
COLOR_LIGHT_GROUND: Color = (200, 180, 50)

# --- Named colors used by entities and messages ---
WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)
RED: Color = (255, 0, 0)
DARK_RED: Color = (191, 0, 0)
ORANGE: Color = (255, 127, 0)
LIGHT_GREY: Color = (159, 159, 159)
DESATURATED_GREEN: Color = (63, 127, 63)
DARKER_GREEN: Color = (0, 127, 0)
VIOLET: Color = (127, 0, 255)
LIGHT_VIOLET: Color = (184, 115, 255)
LIGHT_RED: Color = (255, 114, 114)
LIGHT_GREEN: Color = (114, 255, 114)

PLAYER_GLYPH: str = "@"
REMAINS_GLYPH: str = "%"


class TileShade(IntEnum):
    """Presentation state of a tile selected by visibility and wall-ness."""

    DARK_WALL = 0
    DARK_GROUND = 1
    LIGHT_WALL = 2
    LIGHT_GROUND = 3


SHADE_COLORS: dict[TileShade, Color] = {
    TileShade.DARK_WALL: COLOR_DARK_WALL,
    TileShade.DARK_GROUND: COLOR_DARK_GROUND,
    TileShade.LIGHT_WALL: COLOR_LIGHT_WALL,
    TileShade.LIGHT_GROUND: COLOR_LIGHT_GROUND,
}


class PlayerAction(Enum):
    """Outcome of resolving one player input."""

    TOOK_TURN = "took_turn"
    DIDNT_TAKE_TURN = "didnt_take_turn"
    EXIT = "exit"


__all__ = [
    "Color",
    "TileShade",
    "SHADE_COLORS",
    "PlayerAction",
    "PLAYER_GLYPH",
    "REMAINS_GLYPH",
]
