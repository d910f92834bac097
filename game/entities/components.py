from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class DeathPolicy(Enum):
    """What happens to an entity when its HP drops to zero."""

    PLAYER = "player"
    MONSTER = "monster"


class AiKind(Enum):
    """Autonomous behaviour attached to an entity."""

    BASIC = "basic"  # approach the player and melee


class ItemKind(Enum):
    """Payload carried by an item entity."""

    HEAL = "heal"


@dataclass
class Position:
    """Spatial position on the map."""

    x: int
    y: int

    def __iter__(self):
        yield self.x
        yield self.y


@dataclass
class CombatStats:
    """Core combat related statistics."""

    max_hp: int
    hp: int
    defense: int
    power: int
    on_death: DeathPolicy
    xp: int = 0

    def take_damage(self, damage: int) -> None:
        """Subtract ``damage`` from HP.  Non-positive damage is ignored."""
        if damage > 0:
            self.hp -= damage

    def heal(self, amount: int) -> None:
        self.hp = min(self.hp + amount, self.max_hp)


@dataclass
class Entity:
    """A world object: the player, a monster, an item or a set of remains.

    All objects share this record; which optional components are populated
    decides what the object can do.
    """

    x: int
    y: int
    glyph: str
    color: Tuple[int, int, int]
    name: str
    blocks_movement: bool = False
    alive: bool = False
    combat: CombatStats | None = None
    ai: AiKind | None = None
    item: ItemKind | None = None

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    @property
    def can_fight(self) -> bool:
        return self.combat is not None

    @property
    def can_act(self) -> bool:
        return self.ai is not None

    @property
    def is_item(self) -> bool:
        return self.item is not None

    def distance(self, x: int, y: int) -> float:
        """Euclidean distance to the cell ``(x, y)``."""
        return math.hypot(x - self.x, y - self.y)

    def distance_to(self, other: "Entity") -> float:
        return self.distance(other.x, other.y)


@dataclass
class Inventory:
    """Container for items carried by the player."""

    capacity: int
    items: list[Entity] = field(default_factory=list)

    @property
    def is_full(self) -> bool:
        return len(self.items) >= self.capacity

    def __len__(self) -> int:
        return len(self.items)
