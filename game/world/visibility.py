"""Visibility gate between the simulation and the FOV capability.

The gate recomputes the field of view only when the player has moved since
the last computation, answers point-visibility queries from the cached
result, and ratchets the map's ``explored`` flags during each render pass.
"""

from __future__ import annotations

from typing import Protocol

import numpy as np
import structlog

from game.constants import TileShade
from game.world.fov import FovAlgorithm, FovMap
from game.world.game_map import GameMap

log = structlog.get_logger(__name__)

UNEXPLORED: int = -1
NO_POSITION: tuple[int, int] = (-1, -1)


class FovCapability(Protocol):
    """Pieces of an FOV implementation the gate relies on."""

    def set(self, x: int, y: int, transparent: bool, walkable: bool) -> None: ...

    def compute_fov(
        self,
        x: int,
        y: int,
        radius: int,
        light_walls: bool,
        algorithm: FovAlgorithm,
    ) -> None: ...

    def is_in_fov(self, x: int, y: int) -> bool: ...


class VisibilityGate:
    def __init__(
        self,
        game_map: GameMap,
        radius: int,
        light_walls: bool = True,
        algorithm: FovAlgorithm = FovAlgorithm.BASIC,
        fov: FovCapability | None = None,
    ) -> None:
        self.game_map = game_map
        self.radius = radius
        self.light_walls = light_walls
        self.algorithm = algorithm
        self.fov: FovCapability = fov or FovMap(game_map.width, game_map.height)
        self.previous_position: tuple[int, int] = NO_POSITION
        self.visible: np.ndarray = np.zeros(
            (game_map.height, game_map.width), dtype=bool
        )
        self.sync_from_map()

    def sync_from_map(self) -> None:
        """Copy sight/walk blocking from the map into the FOV capability."""
        gm = self.game_map
        for y in range(gm.height):
            for x in range(gm.width):
                self.fov.set(
                    x, y, not gm.block_sight[y, x], not gm.blocked[y, x]
                )
        # Force the next refresh to recompute against the new opacity.
        self.previous_position = NO_POSITION

    def needs_recompute(self, x: int, y: int) -> bool:
        return self.previous_position != (x, y)

    def refresh(self, x: int, y: int) -> bool:
        """Recompute visibility from ``(x, y)`` if it changed since last time.

        Returns ``True`` when a recomputation happened.
        """
        if not self.needs_recompute(x, y):
            return False
        self.fov.compute_fov(x, y, self.radius, self.light_walls, self.algorithm)
        gm = self.game_map
        self.visible = np.array(
            [[self.fov.is_in_fov(cx, cy) for cx in range(gm.width)] for cy in range(gm.height)],
            dtype=bool,
        )
        self.previous_position = (x, y)
        log.debug("Visibility recomputed", origin=(x, y), radius=self.radius)
        return True

    def is_visible(self, x: int, y: int) -> bool:
        if not self.game_map.in_bounds(x, y):
            return False
        return bool(self.visible[y, x])

    def render_pass(self) -> np.ndarray:
        """Mark visible tiles explored and return their presentation states.

        The result holds a :class:`TileShade` value per tile, or
        ``UNEXPLORED`` for tiles that have never been seen.
        """
        gm = self.game_map
        gm.mark_explored(self.visible)
        walls = gm.blocked
        shades = np.where(
            self.visible,
            np.where(walls, TileShade.LIGHT_WALL, TileShade.LIGHT_GROUND),
            np.where(walls, TileShade.DARK_WALL, TileShade.DARK_GROUND),
        ).astype(np.int8)
        shades[~gm.explored] = UNEXPLORED
        return shades
