# game/systems/combat_system.py
"""
Handles combat calculations and actions between entities.
"""
from typing import TYPE_CHECKING

import structlog

from game.constants import WHITE
from game.systems.death_system import handle_entity_death

if TYPE_CHECKING:
    from game.game_state import GameState

log = structlog.get_logger(__name__)


def compute_damage(power: int, defense: int) -> int:
    """Raw damage of an attack; zero or less means the attack has no effect."""
    return power - defense


def handle_melee_attack(attacker_id: int, defender_id: int, gs: "GameState") -> int:
    """
    Processes a melee attack from attacker_id to defender_id.
    Applies damage, reports the outcome and fires the death transition once
    the defender's HP reaches zero.  Returns the damage dealt.

    Callers only pick defenders that still carry combat stats; a missing
    component on either side is a caller bug.
    """
    attacker, defender = gs.entity_registry.borrow_pair(attacker_id, defender_id)
    if attacker.combat is None or defender.combat is None:
        log.critical(
            "Melee attack between entities without combat stats",
            attacker_id=attacker_id,
            defender_id=defender_id,
        )
        raise ValueError("Both attacker and defender need combat stats.")

    damage = compute_damage(attacker.combat.power, defender.combat.defense)
    log.debug(
        "Handling melee attack",
        attacker=attacker.name,
        defender=defender.name,
        damage=damage,
        defender_hp_old=defender.combat.hp,
    )

    if damage > 0:
        gs.add_message(
            f"{attacker.name.capitalize()} attacks {defender.name} for {damage} hit points.",
            WHITE,
        )
        defender.combat.take_damage(damage)
    else:
        gs.add_message(
            f"{attacker.name.capitalize()} attacks {defender.name} but it has no effect!",
            WHITE,
        )
        damage = 0

    if defender.alive and defender.combat.hp <= 0:
        defender.alive = False
        log.info(f"{defender.name} died.", defender_id=defender_id)
        handle_entity_death(defender_id, gs, killer_id=attacker_id)
    return damage
