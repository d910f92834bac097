"""Registry for entity templates.

Stores immutable archetype data for monsters and items.  Templates come from
the ``monsters`` and ``items`` tables of the main configuration (falling back
to the built-in defaults below) and are looked up when populating rooms.
"""

from __future__ import annotations

from typing import Any, Dict, Self

import structlog

from game.constants import (
    DARKER_GREEN,
    DESATURATED_GREEN,
    VIOLET,
)
from game.entities.components import (
    AiKind,
    CombatStats,
    DeathPolicy,
    Entity,
    ItemKind,
)

log = structlog.get_logger()

DEFAULT_MONSTER_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "orc": {
        "name": "orc",
        "glyph": "o",
        "color_fg": list(DESATURATED_GREEN),
        "weight": 80,
        "hp": 10,
        "defense": 0,
        "power": 3,
        "xp": 35,
    },
    "troll": {
        "name": "troll",
        "glyph": "T",
        "color_fg": list(DARKER_GREEN),
        "weight": 20,
        "hp": 16,
        "defense": 1,
        "power": 4,
        "xp": 100,
    },
}

DEFAULT_ITEM_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "healing_potion": {
        "name": "healing potion",
        "glyph": "!",
        "color_fg": list(VIOLET),
        "weight": 100,
        "kind": "heal",
    },
}

MONSTER_REQUIRED_KEYS: tuple[str, ...] = ("glyph", "color_fg", "hp")
ITEM_REQUIRED_KEYS: tuple[str, ...] = ("glyph", "color_fg")


def _validate_table(
    table_name: str, table: Dict[str, Any], required: tuple[str, ...]
) -> None:
    """Reject a template table that could not spawn every entry."""
    if not table:
        log.error("Template table is empty", table=table_name)
        raise ValueError(f"Template table '{table_name}' is empty.")
    for template_id, template in table.items():
        if not isinstance(template, dict):
            log.error("Template is not a mapping", table=table_name, template=template_id)
            raise ValueError(f"Template '{template_id}' in '{table_name}' is not a mapping.")
        missing = [key for key in required if key not in template]
        if missing:
            log.error(
                "Template missing required keys",
                table=table_name,
                template=template_id,
                missing=missing,
            )
            raise ValueError(
                f"Template '{template_id}' in '{table_name}' lacks {', '.join(missing)}."
            )
        if table_name == "items":
            kind = template.get("kind", ItemKind.HEAL.value)
            if kind not in {k.value for k in ItemKind}:
                log.error("Unknown item kind", template=template_id, kind=kind)
                raise ValueError(f"Template '{template_id}' has unknown item kind '{kind}'.")
    if sum(float(t.get("weight", 0)) for t in table.values()) <= 0:
        log.error("Template table has no positive weight", table=table_name)
        raise ValueError(f"Template table '{table_name}' has no positive weight.")


class EntityTemplateRegistry:
    """Container providing weighted access to monster and item templates."""

    def __init__(
        self: Self,
        monsters: Dict[str, Any] | None = None,
        items: Dict[str, Any] | None = None,
    ):
        self.monsters: Dict[str, Any] = dict(monsters or DEFAULT_MONSTER_TEMPLATES)
        self.items: Dict[str, Any] = dict(items or DEFAULT_ITEM_TEMPLATES)
        _validate_table("monsters", self.monsters, MONSTER_REQUIRED_KEYS)
        _validate_table("items", self.items, ITEM_REQUIRED_KEYS)
        log.debug(
            "EntityTemplateRegistry initialized",
            monsters=len(self.monsters),
            items=len(self.items),
        )

    def monster_weights(self: Self) -> tuple[list[str], list[float]]:
        ids = list(self.monsters)
        return ids, [float(self.monsters[t].get("weight", 0)) for t in ids]

    def item_weights(self: Self) -> tuple[list[str], list[float]]:
        ids = list(self.items)
        return ids, [float(self.items[t].get("weight", 0)) for t in ids]

    def spawn_monster(self: Self, template_id: str, x: int, y: int) -> Entity:
        template = self.monsters[template_id]
        hp = int(template["hp"])
        return Entity(
            x=x,
            y=y,
            glyph=template["glyph"],
            color=tuple(template["color_fg"]),
            name=template.get("name", template_id),
            blocks_movement=True,
            alive=True,
            combat=CombatStats(
                max_hp=hp,
                hp=hp,
                defense=int(template.get("defense", 0)),
                power=int(template.get("power", 0)),
                on_death=DeathPolicy.MONSTER,
                xp=int(template.get("xp", 0)),
            ),
            ai=AiKind.BASIC,
        )

    def spawn_item(self: Self, template_id: str, x: int, y: int) -> Entity:
        template = self.items[template_id]
        return Entity(
            x=x,
            y=y,
            glyph=template["glyph"],
            color=tuple(template["color_fg"]),
            name=template.get("name", template_id),
            blocks_movement=False,
            item=ItemKind(template.get("kind", "heal")),
        )
