# engine/renderer.py
"""
Draws a GameState onto a presentation sink.

The map pass goes through the visibility gate, which marks newly seen tiles
explored and picks one of four shades per tile.  Entities are drawn only
when their cell is visible, non-blocking ones first so actors stand on top
of remains and items.  The bottom panel holds the mouse tooltip, the HP
line and the message log.
"""
from typing import TYPE_CHECKING, Protocol, Sequence

import structlog

from game.constants import LIGHT_GREY, LIGHT_RED, SHADE_COLORS, WHITE, Color, TileShade
from game.world.visibility import UNEXPLORED

if TYPE_CHECKING:
    from game.game_state import GameState

log = structlog.get_logger()

MAX_MENU_OPTIONS: int = 26


class Console(Protocol):
    width: int
    height: int

    def clear(self) -> None: ...

    def set_char_background(self, x: int, y: int, color: Color) -> None: ...

    def put_char(self, x: int, y: int, char: str, color: Color) -> None: ...

    def print_text(self, x: int, y: int, text: str, color: Color = WHITE) -> None: ...


# --- Panel helpers ---
def message_lines(
    message_log: Sequence[tuple[str, Color]], height: int
) -> list[tuple[str, Color]]:
    """Newest messages first, at most ``height`` of them."""
    if height <= 0:
        return []
    return list(reversed(message_log[-height:]))


def names_under_mouse(gs: "GameState", x: int, y: int) -> str:
    """Names of visible entities at ``(x, y)``, comma separated."""
    if not gs.is_visible(x, y):
        return ""
    names = [e.name for e in gs.entity_registry.entities() if e.x == x and e.y == y]
    return ", ".join(names)


def hp_text(gs: "GameState") -> str:
    fighter = gs.player.combat
    if fighter is None:
        return "HP: -"
    return f"HP: {fighter.hp}/{fighter.max_hp}"


# --- Menus ---
def format_menu(header: str, options: Sequence[str]) -> list[str]:
    """Lines of a letter-indexed menu: ``(a) first``, ``(b) second``..."""
    if len(options) > MAX_MENU_OPTIONS:
        raise ValueError(f"Cannot have a menu with more than {MAX_MENU_OPTIONS} options.")
    lines = [header] if header else []
    for index, option in enumerate(options):
        lines.append(f"({chr(ord('a') + index)}) {option}")
    return lines


def menu_index_for_key(key: str | None, option_count: int) -> int | None:
    """Map a pressed letter to a menu index, or ``None`` if it selects nothing."""
    if not key or len(key) != 1 or not key.isalpha():
        return None
    index = ord(key.lower()) - ord("a")
    if 0 <= index < option_count:
        return index
    return None


def inventory_options(gs: "GameState") -> list[str]:
    if not gs.inventory.items:
        return ["Inventory is empty."]
    return [item.name for item in gs.inventory.items]


# --- Main render ---
def render_map(gs: "GameState", console: Console) -> None:
    shades = gs.visibility.render_pass()
    height, width = shades.shape
    for y in range(min(height, console.height)):
        for x in range(min(width, console.width)):
            shade = int(shades[y, x])
            if shade == UNEXPLORED:
                continue
            console.set_char_background(x, y, SHADE_COLORS[TileShade(shade)])


def render_entities(gs: "GameState", console: Console) -> None:
    to_draw = [
        e for e in gs.entity_registry.entities() if gs.is_visible(e.x, e.y)
    ]
    to_draw.sort(key=lambda e: e.blocks_movement)
    for entity in to_draw:
        console.put_char(entity.x, entity.y, entity.glyph, entity.color)


def render_panel(
    gs: "GameState", console: Console, mouse: tuple[int, int] | None = None
) -> None:
    config = gs.config
    panel_y = gs.game_map.height
    panel_height = min(config.panel_height, console.height - panel_y)
    if panel_height <= 0:
        return

    if mouse is not None:
        console.print_text(1, panel_y, names_under_mouse(gs, *mouse), LIGHT_GREY)
    console.print_text(1, panel_y + 1, hp_text(gs), LIGHT_RED if gs.player_alive else WHITE)

    msg_x = config.bar_width + 2
    # Newest at the bottom, older lines going up.
    y = panel_y + panel_height - 1
    for text, color in message_lines(gs.message_log, panel_height):
        console.print_text(msg_x, y, text, color)
        y -= 1


def render_all(
    gs: "GameState", console: Console, mouse: tuple[int, int] | None = None
) -> None:
    console.clear()
    gs.update_fov()
    render_map(gs, console)
    render_entities(gs, console)
    render_panel(gs, console, mouse)
