# engine/input_handler.py
"""
Maps raw key names to game actions based on the keybindings configuration.

Key names are lower case (``"up"``, ``"g"``, ``"alt+enter"``).  Bindings map a
key name to an action name; action names map to the action dictionaries the
main loop understands.  Unbound keys map to ``None``.
"""
from typing import Any
from typing import Dict as PyDict

import structlog

log = structlog.get_logger(__name__)

ACTIONS: PyDict[str, PyDict[str, Any]] = {
    "move_up": {"type": "move", "dx": 0, "dy": -1},
    "move_down": {"type": "move", "dx": 0, "dy": 1},
    "move_left": {"type": "move", "dx": -1, "dy": 0},
    "move_right": {"type": "move", "dx": 1, "dy": 0},
    "pickup": {"type": "pickup"},
    "inventory": {"type": "inventory"},
    "toggle_fullscreen": {"type": "toggle_fullscreen"},
    "exit": {"type": "exit"},
}

DEFAULT_BINDINGS: PyDict[str, str] = {
    "up": "move_up",
    "down": "move_down",
    "left": "move_left",
    "right": "move_right",
    "g": "pickup",
    "i": "inventory",
    "alt+enter": "toggle_fullscreen",
    "escape": "exit",
}


class InputHandler:
    """
    Translates key names into action dictionaries.
    """

    def __init__(self, keybindings_config: PyDict[str, Any] | None = None):
        bindings = (keybindings_config or {}).get("bindings")
        if not bindings:
            log.debug("No keybindings configured, using defaults.")
            bindings = DEFAULT_BINDINGS
        self.bindings: PyDict[str, str] = {}
        for key, action_name in bindings.items():
            if action_name not in ACTIONS:
                log.warning("Ignoring binding to unknown action", key=key, action=action_name)
                continue
            self.bindings[str(key).lower()] = action_name
        log.debug("InputHandler initialized.", bindings=len(self.bindings))

    def action_for_key(self, key: str | None) -> PyDict[str, Any] | None:
        if not key:
            return None
        action_name = self.bindings.get(key.strip().lower())
        if action_name is None:
            log.debug("Unbound key", key=key)
            return None
        return dict(ACTIONS[action_name])
