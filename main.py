# main.py
import os
import sys
from pathlib import Path
from typing import Sequence

import structlog

# Use absolute imports relative to project root
from engine.input_handler import InputHandler
from engine.main_loop import MainLoop
from engine.renderer import format_menu, menu_index_for_key
from engine.text_console import TextConsole
from game.config import load_game_config, load_toml_config
from game.game_state import new_game
from utils.logging_utils import resolve_level, setup_logging

# --- Paths relative to this script's location ---
SCRIPT_DIR = Path(__file__).parent.resolve()
CONFIG_DIR = SCRIPT_DIR / "config"

CONFIG_FILE = CONFIG_DIR / "config.yaml"
KEYBINDINGS_FILE = CONFIG_DIR / "keybindings.toml"
# --- End Paths ---

log = structlog.get_logger()  # module-level logger


def read_key_line() -> str | None:
    """Read one key name per line from stdin; ``None`` once input ends.

    ``mouse X Y`` lines are passed through unchanged for the tooltip.
    """
    line = sys.stdin.readline()
    if not line:
        return None
    return line.strip()


def present_console(console: TextConsole) -> None:
    sys.stdout.write(console.to_text() + "\n")
    sys.stdout.flush()


def terminal_menu(header: str, options: Sequence[str]) -> int | None:
    sys.stdout.write("\n".join(format_menu(header, options)) + "\n")
    sys.stdout.flush()
    key = read_key_line()
    return menu_index_for_key(key, len(options))


def main() -> None:
    """Main entry point for the application."""
    setup_logging(resolve_level(os.environ.get("UNROGUE_LOG_LEVEL")))
    log.info("Application starting...", config_dir=str(CONFIG_DIR))

    config = load_game_config(CONFIG_FILE)
    keybindings_config = load_toml_config(KEYBINDINGS_FILE, "Keybindings")

    gs = new_game(config)
    console = TextConsole(config.screen_width, config.screen_height)
    loop = MainLoop(
        gs,
        console=console,
        input_handler=InputHandler(keybindings_config),
        menu=terminal_menu,
    )

    def read_key() -> str | None:
        key = read_key_line()
        while key is not None and key.startswith("mouse "):
            parts = key.split()
            if len(parts) == 3 and all(p.lstrip("-").isdigit() for p in parts[1:]):
                loop.mouse = (int(parts[1]), int(parts[2]))
                loop.render()
                present_console(console)
            key = read_key_line()
        return key

    loop.run(read_key, present=present_console)
    log.info("Application finished", turns=gs.turn_count)


if __name__ == "__main__":
    main()
