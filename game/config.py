# game/config.py
"""Session configuration.

``GameConfig`` carries every tunable the simulation reads.  Defaults match
the classic 80x45 layout; ``from_dict`` overlays values loaded from
``config/config.yaml``.
"""
from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict

import structlog
import yaml

from game.world.fov import FovAlgorithm

log = structlog.get_logger(__name__)


@dataclass
class GameConfig:
    screen_width: int = 80
    screen_height: int = 52
    map_width: int = 80
    map_height: int = 45
    panel_height: int = 7
    bar_width: int = 20

    room_min_size: int = 6
    room_max_size: int = 10
    max_rooms: int = 30
    max_room_monsters: int = 3
    max_room_items: int = 2

    fov_algorithm: FovAlgorithm = FovAlgorithm.BASIC
    fov_light_walls: bool = True
    torch_radius: int = 10

    player_hp: int = 30
    player_defense: int = 2
    player_power: int = 5
    inventory_capacity: int = 26
    heal_amount: int = 4

    rng_seed: int | None = None
    monsters: Dict[str, Any] = field(default_factory=dict)
    items: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "GameConfig":
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            if key not in known:
                log.warning("Ignoring unknown config key", key=key)
                continue
            values[key] = value
        if "fov_algorithm" in values and not isinstance(
            values["fov_algorithm"], FovAlgorithm
        ):
            values["fov_algorithm"] = FovAlgorithm(str(values["fov_algorithm"]).lower())
        config = cls(**values)
        config.validate()
        return config

    def validate(self) -> None:
        if self.map_width <= 0 or self.map_height <= 0:
            raise ValueError("Map width and height must be positive integers.")
        if not 0 < self.room_min_size <= self.room_max_size:
            raise ValueError(
                f"Invalid room size range {self.room_min_size}..{self.room_max_size}"
            )
        if self.room_max_size >= min(self.map_width, self.map_height):
            raise ValueError("Rooms must be smaller than the map.")
        if not 0 < self.inventory_capacity <= 26:
            raise ValueError("Inventory capacity must be between 1 and 26.")


def load_yaml_config(config_path: Path, config_name: str) -> Dict[str, Any]:
    """Loads a generic YAML configuration file."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        raise FileNotFoundError(
            f"{config_name} configuration file not found: {config_path}"
        )
    try:
        with config_path.open("r") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.error(
            f"Error parsing YAML for {config_name}",
            path=str(config_path),
            error=str(e),
        )
        raise
    if config_data is None:
        log.warning(f"{config_name} config file is empty.", path=str(config_path))
        return {}
    log.info(f"{config_name} config loaded", path=str(config_path))
    return config_data


def load_game_config(config_path: Path) -> GameConfig:
    return GameConfig.from_dict(load_yaml_config(config_path, "Main"))


def load_toml_config(config_path: Path, config_name: str) -> Dict[str, Any]:
    """Loads a TOML configuration file; problems fall back to an empty mapping."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        return {}
    try:
        with config_path.open("rb") as f:  # tomllib requires bytes mode
            config_data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        log.error(
            f"Error parsing TOML for {config_name}",
            path=str(config_path),
            error=str(e),
        )
        return {}
    log.info(f"{config_name} config loaded", path=str(config_path))
    return config_data
