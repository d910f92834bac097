# engine/main_loop.py
from typing import Any, Callable, Self, Sequence

import structlog

# Use absolute imports for game modules
from game.constants import PlayerAction
from game.game_state import GameState

# Use relative import for sibling modules within the same package ('engine')
from . import action_handler, renderer
from .input_handler import InputHandler
from .renderer import Console

log = structlog.get_logger()

# (header, options) -> chosen index or None
MenuFn = Callable[[str, Sequence[str]], int | None]


class MainLoop:
    """
    Coordinates the turn cycle: read one input, resolve the player's action,
    then let the monsters act if (and only if) the action consumed a turn.

    UI-only actions (inventory menu, fullscreen toggle, unbound keys) are
    resolved here and never reach the AI phase.
    """

    def __init__(
        self: Self,
        game_state: GameState,
        console: Console | None = None,
        input_handler: InputHandler | None = None,
        menu: MenuFn | None = None,
    ):
        self.game_state: GameState = game_state
        self.console = console
        self.input_handler = input_handler or InputHandler()
        self.menu = menu
        self.fullscreen: bool = False
        self.running: bool = True
        self.mouse: tuple[int, int] | None = None
        log.info("MainLoop initialized successfully")

    def _open_inventory(self: Self) -> dict[str, Any] | None:
        gs = self.game_state
        if self.menu is None:
            log.debug("No menu sink attached, inventory ignored")
            return None
        options = renderer.inventory_options(gs)
        choice = self.menu(
            "Press the key next to an item to use it, or any other to cancel.\n",
            options,
        )
        if choice is None or not gs.inventory.items:
            return None
        return {"type": "use_item", "index": choice}

    def handle_action(self: Self, action: dict[str, Any] | None) -> PlayerAction:
        """
        Resolves one action and, if it consumed a turn, advances the world.
        """
        gs = self.game_state
        if action is None:
            return PlayerAction.DIDNT_TAKE_TURN

        action_type = action.get("type")
        if action_type == "toggle_fullscreen":
            self.fullscreen = not self.fullscreen
            log.debug("Fullscreen toggled", fullscreen=self.fullscreen)
            return PlayerAction.DIDNT_TAKE_TURN
        if action_type == "inventory":
            action = self._open_inventory()
            if action is None:
                return PlayerAction.DIDNT_TAKE_TURN

        result = action_handler.process_player_action(action, gs)
        match result:
            case PlayerAction.TOOK_TURN:
                log.debug("Player action resulted in turn", action_type=action.get("type"))
                gs.advance_turn()
            case PlayerAction.EXIT:
                log.info("Exit requested")
                self.running = False
            case PlayerAction.DIDNT_TAKE_TURN:
                log.debug(
                    "Player action did not result in turn", action_type=action.get("type")
                )
        return result

    def handle_key(self: Self, key: str | None) -> PlayerAction:
        return self.handle_action(self.input_handler.action_for_key(key))

    def render(self: Self) -> None:
        if self.console is not None:
            renderer.render_all(self.game_state, self.console, self.mouse)

    def run(
        self: Self,
        read_key: Callable[[], str | None],
        present: Callable[[Console], None] | None = None,
    ) -> None:
        """Render, wait for a key, resolve it; until exit or input runs out."""
        while self.running:
            self.render()
            if present is not None and self.console is not None:
                present(self.console)
            key = read_key()
            if key is None:
                log.info("Input closed, leaving main loop")
                break
            self.handle_key(key)
