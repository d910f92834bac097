# game/world/game_map.py
from typing import NamedTuple

import numpy as np
import structlog

log = structlog.get_logger()


class Tile(NamedTuple):
    """Read-only view of one map cell."""

    blocked: bool
    block_sight: bool
    explored: bool


class GameMap:
    def __init__(self, width: int, height: int):
        """
        Initializes the game map with every tile set to wall.
        """
        if width <= 0 or height <= 0:
            log.error("Invalid map dimensions", width=width, height=height)
            raise ValueError("Map width and height must be positive integers.")
        self._width = width
        self._height = height

        # Arrays are indexed [y, x]
        self.blocked: np.ndarray = np.ones((height, width), dtype=bool, order="C")
        self.block_sight: np.ndarray = np.ones((height, width), dtype=bool, order="C")
        # Only the visibility gate writes this, and only False -> True
        self.explored: np.ndarray = np.zeros((height, width), dtype=bool, order="C")
        log.debug("GameMap arrays initialized", shape=(height, width))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def in_bounds(self, x: int, y: int) -> bool:
        """Checks if the given coordinates are within the map boundaries."""
        return 0 <= x < self._width and 0 <= y < self._height

    def _check_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            log.critical(
                "Map access out of bounds",
                pos=(x, y),
                size=(self._width, self._height),
            )
            raise IndexError(
                f"({x}, {y}) is outside the {self._width}x{self._height} map"
            )

    def tile(self, x: int, y: int) -> Tile:
        self._check_bounds(x, y)
        return Tile(
            blocked=bool(self.blocked[y, x]),
            block_sight=bool(self.block_sight[y, x]),
            explored=bool(self.explored[y, x]),
        )

    def is_wall(self, x: int, y: int) -> bool:
        self._check_bounds(x, y)
        return bool(self.blocked[y, x])

    def set_empty(self, x: int, y: int) -> None:
        self._check_bounds(x, y)
        self.blocked[y, x] = False
        self.block_sight[y, x] = False

    def carve_area(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Empty every tile with ``x1 <= x < x2`` and ``y1 <= y < y2``."""
        if x1 >= x2 or y1 >= y2:
            log.warning("Attempted to carve zero-size area", area=(x1, y1, x2, y2))
            return
        self._check_bounds(x1, y1)
        self._check_bounds(x2 - 1, y2 - 1)
        self.blocked[y1:y2, x1:x2] = False
        self.block_sight[y1:y2, x1:x2] = False

    @property
    def transparent(self) -> np.ndarray:
        return ~self.block_sight

    @property
    def walkable(self) -> np.ndarray:
        return ~self.blocked

    def mark_explored(self, visible: np.ndarray) -> None:
        """Ratchet ``explored`` on for every visible tile."""
        np.logical_or(self.explored, visible, out=self.explored)
