# engine/action_handler.py
"""
Handles processing of player actions, validating them against game rules,
and triggering the matching game state changes.  Every handler reports
whether the action consumed a turn through :class:`PlayerAction`.
"""
from typing import Any, Dict

import structlog

from game.constants import LIGHT_GREY, LIGHT_GREEN, LIGHT_VIOLET, ORANGE, RED
from game.constants import PlayerAction
from game.entities.components import ItemKind

# Use absolute imports for game modules
from game.game_state import GameState
from game.systems import combat_system, movement_system

log = structlog.get_logger(__name__)


# --- Action Helper Functions ---
def _handle_player_move(dx: int, dy: int, gs: GameState) -> PlayerAction:
    """
    Moves the player by dx, dy, or attacks whatever can fight at the
    destination.  Moving and attacking are exclusive.  Bumping into a wall
    or a non-fighting blocker still spends the turn.
    """
    player_id = gs.player_id
    player = gs.player
    new_x, new_y = player.x + dx, player.y + dy

    target_id = gs.entity_registry.first_target_at(new_x, new_y, exclude=player_id)
    if target_id is not None:
        log.debug("Entity at destination, initiating attack", target_id=target_id)
        combat_system.handle_melee_attack(player_id, target_id, gs)
        return PlayerAction.TOOK_TURN

    if not movement_system.try_move(player_id, dx, dy, gs):
        gs.add_message("That way is blocked.", LIGHT_GREY)
    return PlayerAction.TOOK_TURN


def _handle_player_pickup(gs: GameState) -> PlayerAction:
    """
    Attempts to pick up an item from the ground at the player's location.
    The item moves from the world into the inventory; a full inventory
    leaves it on the ground.
    """
    px, py = gs.player_position
    item_id = gs.entity_registry.first_item_at(px, py)
    if item_id is None:
        gs.add_message("There is nothing here to pick up.", LIGHT_GREY)
        return PlayerAction.DIDNT_TAKE_TURN

    item_name = gs.entity_registry.get(item_id).name
    if gs.inventory.is_full:
        log.debug("Inventory full, aborting pickup", capacity=gs.inventory.capacity)
        gs.add_message(f"Your inventory is full, cannot pick up {item_name}.", RED)
        return PlayerAction.DIDNT_TAKE_TURN

    item = gs.entity_registry.remove(item_id)
    gs.inventory.items.append(item)
    gs.add_message(f"You picked up a {item_name}!", LIGHT_GREEN)
    return PlayerAction.TOOK_TURN


def _cast_heal(gs: GameState) -> bool:
    """Heal the player; returns False when the potion would be wasted."""
    fighter = gs.player.combat
    if fighter is None:
        return False
    if fighter.hp >= fighter.max_hp:
        gs.add_message("You are already at full health.", RED)
        return False
    gs.add_message("Your wounds start to feel better!", LIGHT_VIOLET)
    fighter.heal(gs.config.heal_amount)
    return True


_ITEM_EFFECTS = {
    ItemKind.HEAL: _cast_heal,
}


def _handle_use_item(index: int, gs: GameState) -> PlayerAction:
    """Use the inventory item at ``index``; a used item is consumed."""
    if not 0 <= index < len(gs.inventory):
        log.warning("Use action failed: index out of range", index=index)
        return PlayerAction.DIDNT_TAKE_TURN

    item = gs.inventory.items[index]
    effect = _ITEM_EFFECTS.get(item.item)
    if effect is None:
        gs.add_message(f"The {item.name} cannot be used.", ORANGE)
        return PlayerAction.DIDNT_TAKE_TURN
    if not effect(gs):
        gs.add_message("Cancelled", LIGHT_GREY)
        return PlayerAction.DIDNT_TAKE_TURN
    gs.inventory.items.pop(index)
    log.debug("Item used up", name=item.name)
    return PlayerAction.TOOK_TURN


# --- Main Action Processing Function ---
def process_player_action(action: Dict[str, Any], gs: GameState) -> PlayerAction:
    """
    Processes a player action dictionary, validates it, and performs the action.
    Returns the turn outcome; only ``TOOK_TURN`` lets the monsters act.
    """
    action_type = action.get("type")
    log.debug("ActionHandler: Processing action type", action_details=action)

    if action_type == "exit":
        return PlayerAction.EXIT

    if not gs.player_alive:
        log.debug("Player is dead, ignoring action", action_type=action_type)
        return PlayerAction.DIDNT_TAKE_TURN

    match action_type:
        case "move":
            dx, dy = action.get("dx", 0), action.get("dy", 0)
            if dx == 0 and dy == 0:
                return PlayerAction.DIDNT_TAKE_TURN
            return _handle_player_move(dx, dy, gs)

        case "pickup":
            return _handle_player_pickup(gs)

        case "use_item":
            index = action.get("index")
            if index is None:
                gs.add_message("Use what?", ORANGE)
                return PlayerAction.DIDNT_TAKE_TURN
            return _handle_use_item(int(index), gs)

        case _:
            log.warning(
                "Unknown action type received",
                received_action=action_type,
                action_details=action,
            )
            return PlayerAction.DIDNT_TAKE_TURN
