"""Movement helper utilities.

This module exposes small helper functions for moving entities around the
game map.  Both delegate to the :class:`EntityRegistry`, whose
``is_blocked`` predicate is the only place movement legality is decided.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from game.game_state import GameState


def try_move(entity_id: int, dx: int, dy: int, gs: GameState) -> bool:
    """Attempt to move an entity.

    Parameters
    ----------
    entity_id:
        The identifier of the entity to move.
    dx, dy:
        Delta values to apply to the entity's current position.
    gs:
        The active :class:`~game.game_state.GameState` instance which contains
        the map and entity registry.

    Returns
    -------
    bool
        ``True`` if the movement succeeded, ``False`` if the destination was
        blocked and nothing changed.
    """
    return gs.entity_registry.move_by(entity_id, dx, dy, gs.game_map)


def step_towards(entity_id: int, target_x: int, target_y: int, gs: GameState) -> bool:
    """Take one greedy step towards a cell; see ``EntityRegistry.move_towards``."""
    return gs.entity_registry.move_towards(entity_id, target_x, target_y, gs.game_map)
