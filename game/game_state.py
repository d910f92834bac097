# game/game_state.py
from typing import Tuple

import structlog
from game_rng import GameRNG

from game.config import GameConfig
from game.constants import PLAYER_GLYPH, WHITE, Color
from game.entities.components import (
    CombatStats,
    DeathPolicy,
    Entity,
    Inventory,
    Position,
)
from game.entities.registry import EntityRegistry
from game.entities.template_registry import EntityTemplateRegistry
from game.systems.ai_system import dispatch_ai
from game.world.game_map import GameMap
from game.world.populator import Populator
from game.world.procgen import generate_dungeon
from game.world.visibility import FovCapability, VisibilityGate

log = structlog.get_logger()


def make_player(config: GameConfig, x: int, y: int) -> Entity:
    return Entity(
        x=x,
        y=y,
        glyph=PLAYER_GLYPH,
        color=WHITE,
        name="player",
        blocks_movement=True,
        alive=True,
        combat=CombatStats(
            max_hp=config.player_hp,
            hp=config.player_hp,
            defense=config.player_defense,
            power=config.player_power,
            on_death=DeathPolicy.PLAYER,
        ),
    )


class GameState:
    """Central container for the mutable state of one game session.

    Owns the map, the entity arena (player first), the player's inventory,
    the message log and the visibility gate.  Every core operation receives
    this object explicitly.
    """

    def __init__(
        self,
        existing_map: GameMap,
        player_start_pos: Tuple[int, int],
        config: GameConfig | None = None,
        rng: GameRNG | None = None,
        entity_registry: EntityRegistry | None = None,
        player_id: int | None = None,
        fov: FovCapability | None = None,
        templates: EntityTemplateRegistry | None = None,
    ):
        log.info("Initializing GameState...")

        if not isinstance(existing_map, GameMap):
            raise TypeError("GameState requires a valid GameMap instance.")
        if not player_start_pos or len(player_start_pos) != 2:
            raise ValueError(
                "GameState requires a valid player_start_pos tuple (x, y)."
            )

        self.config: GameConfig = config or GameConfig()
        self.game_map: GameMap = existing_map
        self.rng_instance: GameRNG = rng or GameRNG(seed=self.config.rng_seed)
        self.templates: EntityTemplateRegistry = templates or EntityTemplateRegistry(
            self.config.monsters, self.config.items
        )

        player_start_x, player_start_y = player_start_pos
        if entity_registry is None:
            self.entity_registry: EntityRegistry = EntityRegistry()
            self.player_id: int = self.entity_registry.create(
                make_player(self.config, player_start_x, player_start_y)
            )
        else:
            if player_id is None:
                raise ValueError("An existing registry needs its player_id.")
            self.entity_registry = entity_registry
            self.player_id = player_id
            player = self.entity_registry.get(player_id)
            player.x, player.y = player_start_x, player_start_y

        self.inventory: Inventory = Inventory(capacity=self.config.inventory_capacity)
        self.message_log: list[tuple[str, Color]] = []
        self.turn_count: int = 0

        self.visibility: VisibilityGate = VisibilityGate(
            self.game_map,
            radius=self.config.torch_radius,
            light_walls=self.config.fov_light_walls,
            algorithm=self.config.fov_algorithm,
            fov=fov,
        )

        self.add_message(
            "Welcome stranger! Prepare to perish in the Tombs of the Ancient Kings.",
            (255, 0, 0),
        )
        log.info(
            "Game state initialized",
            map_size=f"{self.game_map.width}x{self.game_map.height}",
            player_id=self.player_id,
            entities=len(self.entity_registry),
            rng_seed=self.rng_instance.initial_seed,
        )
        self.update_fov()  # Initial FOV calculation

    @property
    def player(self) -> Entity:
        return self.entity_registry.get(self.player_id)

    @property
    def player_position(self) -> Position:
        return self.player.position

    @property
    def player_alive(self) -> bool:
        return self.player.alive

    def add_message(self, text: str, color: Color = WHITE) -> None:
        """Adds a message to the game log."""
        self.message_log.append((text, color))
        log.debug("Message added", message=text, color=color)

    def update_fov(self) -> bool:
        """Recompute visibility if the player moved since the last call."""
        px, py = self.player_position
        return self.visibility.refresh(px, py)

    def is_visible(self, x: int, y: int) -> bool:
        return self.visibility.is_visible(x, y)

    def advance_turn(self) -> None:
        """Run the world's half of a turn after a turn-consuming player action."""
        self.turn_count += 1
        log.debug("Turn advanced", turn=self.turn_count)

        # Monsters decide against what the player sees after acting.
        self.update_fov()

        if not self.player_alive:
            log.debug("Player dead, skipping AI phase", turn=self.turn_count)
            return
        dispatch_ai(self)


def new_game(config: GameConfig | None = None, rng: GameRNG | None = None) -> GameState:
    """Generate a dungeon, populate it and wrap everything in a GameState."""
    config = config or GameConfig()
    rng = rng or GameRNG(seed=config.rng_seed)

    registry = EntityRegistry()
    # Player takes handle 0; placed on the spawn point once it is known.
    player_id = registry.create(make_player(config, -1, -1))
    templates = EntityTemplateRegistry(config.monsters, config.items)
    populator = Populator(
        registry,
        templates,
        max_room_monsters=config.max_room_monsters,
        max_room_items=config.max_room_items,
    )
    layout = generate_dungeon(
        config.map_width,
        config.map_height,
        config.max_rooms,
        config.room_min_size,
        config.room_max_size,
        rng,
        populator=populator,
    )
    return GameState(
        layout.game_map,
        layout.spawn,
        config=config,
        rng=rng,
        entity_registry=registry,
        player_id=player_id,
        templates=templates,
    )
