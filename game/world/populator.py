"""Room population.

Places monsters and items inside a freshly carved room.  Every candidate cell
goes through :meth:`EntityRegistry.is_blocked`; a blocked draw is skipped, not
retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, AbstractSet, Sequence

import structlog

from game.entities.registry import EntityRegistry
from game.entities.template_registry import EntityTemplateRegistry

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from game_rng import GameRNG
    from game.world.game_map import GameMap
    from game.world.procgen import Rect

log = structlog.get_logger(__name__)


def weighted_pick(ids: Sequence[str], weights: Sequence[float], rng: "GameRNG") -> str:
    """Pick one of ``ids`` with probability proportional to its weight."""
    total = float(sum(weights))
    roll = rng.get_float() * total
    cumulative = 0.0
    for template_id, weight in zip(ids, weights):
        cumulative += weight
        if roll < cumulative:
            return template_id
    return ids[-1]


class Populator:
    def __init__(
        self,
        entity_registry: EntityRegistry,
        templates: EntityTemplateRegistry,
        max_room_monsters: int,
        max_room_items: int,
    ) -> None:
        self.entity_registry = entity_registry
        self.templates = templates
        self.max_room_monsters = max_room_monsters
        self.max_room_items = max_room_items

    def _random_cell(self, room: "Rect", rng: "GameRNG") -> tuple[int, int]:
        x = rng.get_int(room.x1 + 1, room.x2 - 1)
        y = rng.get_int(room.y1 + 1, room.y2 - 1)
        return x, y

    def _is_free(
        self,
        x: int,
        y: int,
        game_map: "GameMap",
        reserved: AbstractSet[tuple[int, int] | None],
    ) -> bool:
        if (x, y) in reserved:
            return False
        return not self.entity_registry.is_blocked(x, y, game_map)

    def populate(
        self,
        room: "Rect",
        game_map: "GameMap",
        rng: "GameRNG",
        reserved: AbstractSet[tuple[int, int] | None] = frozenset(),
    ) -> list[int]:
        """Place monsters and items in ``room``; return the new handles.

        ``reserved`` holds cells that must stay free, such as the player's
        spawn point.
        """
        created: list[int] = []

        num_monsters = rng.get_int(0, self.max_room_monsters)
        monster_ids, monster_weights = self.templates.monster_weights()
        for _ in range(num_monsters):
            x, y = self._random_cell(room, rng)
            if not self._is_free(x, y, game_map, reserved):
                log.debug("Monster placement skipped", pos=(x, y), room=room)
                continue
            template_id = weighted_pick(monster_ids, monster_weights, rng)
            monster = self.templates.spawn_monster(template_id, x, y)
            created.append(self.entity_registry.create(monster))

        # Items use an exclusive upper bound.
        num_items = rng.get_int(0, self.max_room_items - 1) if self.max_room_items > 0 else 0
        item_ids, item_weights = self.templates.item_weights()
        for _ in range(num_items):
            x, y = self._random_cell(room, rng)
            if not self._is_free(x, y, game_map, reserved):
                log.debug("Item placement skipped", pos=(x, y), room=room)
                continue
            template_id = weighted_pick(item_ids, item_weights, rng)
            item = self.templates.spawn_item(template_id, x, y)
            created.append(self.entity_registry.create(item))

        if created:
            log.debug("Room populated", room=room, created=len(created))
        return created
