# game/entities/registry.py
from typing import TYPE_CHECKING, Iterator, Self, Tuple

import structlog

from game.entities.components import Entity

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from game.world.game_map import GameMap

log = structlog.get_logger()


class EntityRegistry:
    """Arena owning every entity in the world, addressed by stable handles.

    Handles are handed out from a counter and never reused.  Iteration follows
    insertion order; the first entity created (the player) gets handle 0.
    Removing an entity drops it from the arena; it may live on in another
    container such as the player's inventory.
    """

    def __init__(self: Self):
        self._entities: dict[int, Entity] = {}
        self._next_entity_id: int = 0
        log.debug("EntityRegistry initialized")

    def _get_next_id(self: Self) -> int:
        current_id = self._next_entity_id
        self._next_entity_id += 1
        return current_id

    def create(self: Self, entity: Entity) -> int:
        new_id = self._get_next_id()
        self._entities[new_id] = entity
        log.info(
            "Entity created",
            entity_id=new_id,
            name=entity.name,
            pos=(entity.x, entity.y),
        )
        return new_id

    def get(self: Self, entity_id: int) -> Entity:
        try:
            return self._entities[entity_id]
        except KeyError:
            log.critical("Unknown entity handle", entity_id=entity_id)
            raise

    def remove(self: Self, entity_id: int) -> Entity:
        """Detach an entity from the arena and return it."""
        entity = self.get(entity_id)
        del self._entities[entity_id]
        log.info("Entity removed", entity_id=entity_id, name=entity.name)
        return entity

    def __contains__(self: Self, entity_id: int) -> bool:
        return entity_id in self._entities

    def __len__(self: Self) -> int:
        return len(self._entities)

    def handles(self: Self) -> list[int]:
        """Snapshot of live handles in collection order."""
        return list(self._entities)

    def items(self: Self) -> Iterator[Tuple[int, Entity]]:
        return iter(list(self._entities.items()))

    def entities(self: Self) -> list[Entity]:
        return list(self._entities.values())

    # --- Spatial queries ---
    def entities_at(self: Self, x: int, y: int) -> list[int]:
        return [eid for eid, e in self._entities.items() if e.x == x and e.y == y]

    def get_blocking_entity_at(self: Self, x: int, y: int) -> int | None:
        for eid, entity in self._entities.items():
            if entity.blocks_movement and entity.x == x and entity.y == y:
                return eid
        return None

    def first_target_at(
        self: Self, x: int, y: int, exclude: int | None = None
    ) -> int | None:
        """First entity at ``(x, y)`` able to take part in combat."""
        for eid, entity in self._entities.items():
            if eid == exclude:
                continue
            if entity.can_fight and entity.x == x and entity.y == y:
                return eid
        return None

    def first_item_at(self: Self, x: int, y: int) -> int | None:
        for eid, entity in self._entities.items():
            if entity.is_item and entity.x == x and entity.y == y:
                return eid
        return None

    def is_blocked(self: Self, x: int, y: int, game_map: "GameMap") -> bool:
        """True if ``(x, y)`` is a wall or holds a blocking entity.

        Every placement and movement rule goes through this predicate.
        Coordinates outside the map raise ``IndexError``.
        """
        if game_map.tile(x, y).blocked:
            return True
        return self.get_blocking_entity_at(x, y) is not None

    # --- Pairwise access ---
    def borrow_pair(self: Self, first: int, second: int) -> Tuple[Entity, Entity]:
        """Return two distinct entities for simultaneous mutation.

        Asking for the same handle twice is a caller bug and raises
        ``ValueError``.
        """
        if first == second:
            log.critical("borrow_pair called with identical handles", entity_id=first)
            raise ValueError(f"borrow_pair requires distinct handles, got {first} twice")
        return self.get(first), self.get(second)

    # --- Movement ---
    def move_by(self: Self, entity_id: int, dx: int, dy: int, game_map: "GameMap") -> bool:
        """Move an entity by ``(dx, dy)`` unless the target cell is blocked.

        A blocked move is a no-op and returns ``False``.
        """
        entity = self.get(entity_id)
        dest_x, dest_y = entity.x + dx, entity.y + dy
        if self.is_blocked(dest_x, dest_y, game_map):
            log.debug(
                "Move blocked",
                entity_id=entity_id,
                from_pos=(entity.x, entity.y),
                to_pos=(dest_x, dest_y),
            )
            return False
        entity.x, entity.y = dest_x, dest_y
        return True

    def move_towards(
        self: Self, entity_id: int, target_x: int, target_y: int, game_map: "GameMap"
    ) -> bool:
        """Take one greedy 8-directional step towards ``(target_x, target_y)``.

        The displacement is divided by its Euclidean length and each axis is
        rounded to -1, 0 or 1.  This is not pathfinding: an actor whose
        rounded step lands on a wall stays put, so it can stay stuck on a
        corner between itself and the target.
        """
        entity = self.get(entity_id)
        dx = target_x - entity.x
        dy = target_y - entity.y
        distance = (dx**2 + dy**2) ** 0.5
        if distance == 0:
            return False
        step_x = round(dx / distance)
        step_y = round(dy / distance)
        return self.move_by(entity_id, step_x, step_y, game_map)
