import pytest
from structlog.testing import capture_logs

from game.entities.components import AiKind, CombatStats, DeathPolicy, Entity, ItemKind
from game.entities.registry import EntityRegistry
from game.world.game_map import GameMap


def _open_map(width=10, height=10):
    gm = GameMap(width, height)
    gm.carve_area(1, 1, width - 1, height - 1)
    return gm


def _fighter(x, y, name="orc", blocks=True):
    return Entity(
        x=x,
        y=y,
        glyph=name[0],
        color=(255, 255, 255),
        name=name,
        blocks_movement=blocks,
        alive=True,
        combat=CombatStats(max_hp=10, hp=10, defense=0, power=3, on_death=DeathPolicy.MONSTER),
    )


def _potion(x, y):
    return Entity(x=x, y=y, glyph="!", color=(127, 0, 255), name="healing potion",
                  item=ItemKind.HEAL)


def test_handles_are_sequential_and_stable():
    registry = EntityRegistry()
    first = registry.create(_fighter(1, 1, "player"))
    second = registry.create(_fighter(2, 2))
    assert (first, second) == (0, 1)
    registry.remove(first)
    third = registry.create(_fighter(3, 3))
    assert third == 2
    assert registry.handles() == [1, 2]
    assert 0 not in registry


def test_get_unknown_handle_raises():
    registry = EntityRegistry()
    with pytest.raises(KeyError):
        registry.get(5)


def test_is_blocked_walls_and_blocking_entities():
    gm = _open_map()
    registry = EntityRegistry()
    registry.create(_fighter(3, 3))
    registry.create(_potion(4, 4))
    assert registry.is_blocked(0, 0, gm)
    assert registry.is_blocked(3, 3, gm)
    assert not registry.is_blocked(4, 4, gm)
    assert not registry.is_blocked(5, 5, gm)


def test_is_blocked_out_of_bounds_raises():
    registry = EntityRegistry()
    with pytest.raises(IndexError):
        registry.is_blocked(10, 3, _open_map())


def test_move_by_success_and_blocked_noop():
    gm = _open_map()
    registry = EntityRegistry()
    mover = registry.create(_fighter(1, 1))
    registry.create(_fighter(2, 2))

    assert registry.move_by(mover, 1, 0, gm)
    assert tuple(registry.get(mover).position) == (2, 1)
    assert not registry.move_by(mover, 0, 1, gm)  # occupied
    assert not registry.move_by(mover, 0, -1, gm)  # wall
    assert tuple(registry.get(mover).position) == (2, 1)


def test_move_towards_steps_diagonally():
    gm = _open_map()
    registry = EntityRegistry()
    mover = registry.create(_fighter(7, 7))
    assert registry.move_towards(mover, 2, 2, gm)
    assert tuple(registry.get(mover).position) == (6, 6)


def test_move_towards_shallow_angle_rounds_to_straight_step():
    gm = _open_map()
    registry = EntityRegistry()
    mover = registry.create(_fighter(8, 4))
    registry.move_towards(mover, 1, 3, gm)
    assert tuple(registry.get(mover).position) == (7, 4)


def test_move_towards_gets_stuck_on_corner():
    gm = _open_map()
    gm.blocked[3, 3] = True
    registry = EntityRegistry()
    mover = registry.create(_fighter(4, 4))
    for _ in range(3):
        assert not registry.move_towards(mover, 1, 1, gm)
    assert tuple(registry.get(mover).position) == (4, 4)


def test_move_towards_own_cell_is_noop():
    gm = _open_map()
    registry = EntityRegistry()
    mover = registry.create(_fighter(4, 4))
    assert not registry.move_towards(mover, 4, 4, gm)


def test_borrow_pair_returns_both():
    registry = EntityRegistry()
    a = registry.create(_fighter(1, 1, "player"))
    b = registry.create(_fighter(2, 1))
    first, second = registry.borrow_pair(a, b)
    assert (first.name, second.name) == ("player", "orc")


def test_borrow_pair_same_handle_raises():
    registry = EntityRegistry()
    a = registry.create(_fighter(1, 1))
    with pytest.raises(ValueError):
        registry.borrow_pair(a, a)


def test_first_target_and_item_lookups():
    registry = EntityRegistry()
    player = registry.create(_fighter(2, 2, "player"))
    potion = registry.create(_potion(2, 2))
    orc = registry.create(_fighter(3, 2))
    assert registry.first_target_at(2, 2, exclude=player) is None
    assert registry.first_target_at(3, 2, exclude=player) == orc
    assert registry.first_item_at(2, 2) == potion
    assert registry.get_blocking_entity_at(2, 2) == player
    assert sorted(registry.entities_at(2, 2)) == [player, potion]


def test_capability_queries_follow_components():
    orc = _fighter(1, 1)
    orc.ai = AiKind.BASIC
    potion = _potion(1, 1)
    assert orc.can_fight and orc.can_act and not orc.is_item
    assert potion.is_item and not potion.can_fight and not potion.can_act
    assert orc.distance(4, 5) == 5.0
    assert orc.distance_to(potion) == 0.0


def test_items_iterates_in_insertion_order():
    registry = EntityRegistry()
    handles = [registry.create(_fighter(x, 1)) for x in range(1, 4)]
    assert [h for h, _ in registry.items()] == handles
    assert len(registry) == 3


def test_create_and_remove_log_at_info():
    registry = EntityRegistry()
    with capture_logs() as logs:
        handle = registry.create(_fighter(1, 1))
        registry.remove(handle)
    assert [(e["event"], e["log_level"]) for e in logs] == [
        ("Entity created", "info"),
        ("Entity removed", "info"),
    ]
