"""AI phase.

:func:`dispatch_ai` runs after every turn-consuming player action.  Entities
carrying an AI component act in collection order; the only policy is
``AiKind.BASIC``: approach the player while visible and melee when adjacent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from game.entities.components import AiKind
from game.systems import combat_system, movement_system

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from game.game_state import GameState

log = structlog.get_logger()

MELEE_RANGE: float = 2.0


def basic_take_turn(monster_id: int, gs: GameState) -> None:
    """Approach the player or attack when adjacent.

    A monster acts only while its cell is inside the player's field of
    view; off-screen monsters stay idle.
    """
    monster = gs.entity_registry.get(monster_id)
    if not gs.is_visible(monster.x, monster.y):
        return
    player = gs.player
    distance = monster.distance_to(player)
    if distance >= MELEE_RANGE:
        movement_system.step_towards(monster_id, player.x, player.y, gs)
    elif player.alive and player.combat is not None:
        combat_system.handle_melee_attack(monster_id, gs.player_id, gs)


_ADAPTERS = {
    AiKind.BASIC: basic_take_turn,
}


def dispatch_ai(gs: GameState) -> None:
    """Execute the AI of every acting entity, in collection order."""
    for entity_id in gs.entity_registry.handles():
        if entity_id == gs.player_id or entity_id not in gs.entity_registry:
            continue
        entity = gs.entity_registry.get(entity_id)
        # Checked per entity: a monster can lose its AI earlier in the phase.
        if not entity.can_act:
            continue
        log.debug("Dispatching AI", ai_type=entity.ai.value, entity_id=entity_id)
        _ADAPTERS[entity.ai](entity_id, gs)
