# game/systems/death_system.py
"""Death transitions.

A dead entity is never removed from the world.  The player keeps its record
with a corpse presentation, which the turn driver reads as game over.  A
monster becomes inert remains: no combat, no AI, no longer blocking.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from game.constants import DARK_RED, ORANGE, RED, REMAINS_GLYPH
from game.entities.components import DeathPolicy, Entity

if TYPE_CHECKING:
    from game.game_state import GameState

log = structlog.get_logger(__name__)


def player_death(player: Entity, gs: GameState) -> None:
    gs.add_message("You died!", RED)
    player.glyph = REMAINS_GLYPH
    player.color = DARK_RED


def monster_death(monster: Entity, gs: GameState, killer: Entity | None) -> None:
    xp_reward = monster.combat.xp if monster.combat else 0
    if killer is not None and killer.combat is not None and xp_reward:
        killer.combat.xp += xp_reward
    if killer is not None and killer is gs.player and xp_reward:
        gs.add_message(
            f"{monster.name.capitalize()} is dead! You gain {xp_reward} experience points.",
            ORANGE,
        )
    else:
        gs.add_message(f"{monster.name.capitalize()} is dead!", ORANGE)
    monster.glyph = REMAINS_GLYPH
    monster.color = DARK_RED
    monster.blocks_movement = False
    monster.combat = None
    monster.ai = None
    monster.name = f"remains of {monster.name}"


def handle_entity_death(
    entity_id: int,
    gs: GameState,
    killer_id: int | None = None,
) -> None:
    """Run the death policy of ``entity_id`` exactly once.

    Parameters
    ----------
    entity_id:
        The entity that died.
    gs:
        The active :class:`~game.game_state.GameState` instance.
    killer_id:
        Optional entity that dealt the killing blow; it receives the
        victim's experience reward.
    """
    entity = gs.entity_registry.get(entity_id)
    if entity.combat is None:
        log.critical("Death transition on entity without combat stats", entity_id=entity_id)
        raise ValueError(f"Entity {entity_id} has no combat stats to die from.")
    killer = gs.entity_registry.get(killer_id) if killer_id is not None else None

    entity.alive = False
    match entity.combat.on_death:
        case DeathPolicy.PLAYER:
            player_death(entity, gs)
        case DeathPolicy.MONSTER:
            monster_death(entity, gs, killer)
    log.info("Entity died", entity_id=entity_id, name=entity.name, killer_id=killer_id)
