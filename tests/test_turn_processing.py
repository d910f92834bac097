from game.config import GameConfig
from game.constants import PlayerAction
from game.game_state import GameState
from game.world.game_map import GameMap
from game_rng import GameRNG
from engine.main_loop import MainLoop
from engine.text_console import TextConsole


def create_game_state(game_map=None, player_pos=(2, 2), **config_overrides):
    if game_map is None:
        game_map = GameMap(12, 8)
        game_map.carve_area(1, 1, 11, 7)
    config = GameConfig(**config_overrides)
    return GameState(game_map, player_pos, config=config, rng=GameRNG(seed=1))


def add_orc(gs, x, y):
    return gs.entity_registry.create(gs.templates.spawn_monster("orc", x, y))


def snapshot(gs, handles):
    return [
        (tuple(gs.entity_registry.get(h).position), gs.entity_registry.get(h).combat.hp)
        for h in handles
    ]


def test_non_turn_actions_leave_world_untouched():
    gs = create_game_state()
    orc = add_orc(gs, 6, 2)
    loop = MainLoop(gs)
    before = snapshot(gs, [orc, gs.player_id])

    for key in ("x", "alt+enter", "g", "i", None):
        assert loop.handle_key(key) is PlayerAction.DIDNT_TAKE_TURN

    assert snapshot(gs, [orc, gs.player_id]) == before
    assert gs.turn_count == 0
    assert loop.fullscreen is True


def test_visible_monster_approaches_after_player_moves():
    gs = create_game_state()
    orc = add_orc(gs, 6, 2)
    loop = MainLoop(gs)
    assert loop.handle_key("right") is PlayerAction.TOOK_TURN
    assert tuple(gs.player_position) == (3, 2)
    assert tuple(gs.entity_registry.get(orc).position) == (5, 2)
    assert gs.turn_count == 1


def test_adjacent_monster_attacks():
    gs = create_game_state()
    add_orc(gs, 3, 2)
    MainLoop(gs).handle_key("up")
    assert tuple(gs.player_position) == (2, 1)
    # orc power 3 against player defense 2
    assert gs.player.combat.hp == 29
    assert gs.message_log[-1][0] == "Orc attacks player for 1 hit points."


def test_bump_attacks_instead_of_moving():
    gs = create_game_state(player_power=5)
    orc = add_orc(gs, 3, 2)
    MainLoop(gs).handle_key("right")
    assert tuple(gs.player_position) == (2, 2)
    assert gs.entity_registry.get(orc).combat.hp == 5
    assert gs.player.combat.hp == 29


def test_wall_bump_still_takes_turn():
    gs = create_game_state(player_pos=(1, 1))
    orc = add_orc(gs, 6, 1)
    result = MainLoop(gs).handle_key("up")
    assert result is PlayerAction.TOOK_TURN
    assert tuple(gs.player_position) == (1, 1)
    assert gs.message_log[-1][0] == "That way is blocked."
    assert tuple(gs.entity_registry.get(orc).position) == (5, 1)


def test_monster_out_of_sight_stays_idle():
    game_map = GameMap(14, 8)
    game_map.carve_area(1, 1, 6, 7)
    game_map.carve_area(7, 1, 13, 7)
    gs = create_game_state(game_map=game_map)
    orc = add_orc(gs, 10, 3)
    MainLoop(gs).handle_key("right")
    assert tuple(gs.entity_registry.get(orc).position) == (10, 3)
    assert not gs.is_visible(10, 3)


def test_monsters_act_in_collection_order():
    gs = create_game_state(player_pos=(1, 3))
    first = add_orc(gs, 5, 3)
    second = add_orc(gs, 6, 3)
    MainLoop(gs).handle_key("down")
    # first steps off (5, 3) before second tries to step onto it.
    assert tuple(gs.entity_registry.get(first).position) == (4, 3)
    assert tuple(gs.entity_registry.get(second).position) == (5, 3)


def test_dead_player_stops_world():
    gs = create_game_state(player_hp=1)
    killer = add_orc(gs, 3, 2)
    walker = add_orc(gs, 2, 4)
    loop = MainLoop(gs)

    loop.handle_key("up")
    assert gs.player_alive is False
    assert any(text == "You died!" for text, _ in gs.message_log)

    before = snapshot(gs, [killer, walker])
    turns = gs.turn_count
    for key in ("right", "left", "g"):
        assert loop.handle_key(key) is PlayerAction.DIDNT_TAKE_TURN
    assert snapshot(gs, [killer, walker]) == before
    assert gs.turn_count == turns


def test_exit_stops_loop():
    gs = create_game_state()
    loop = MainLoop(gs)
    assert loop.handle_key("escape") is PlayerAction.EXIT
    assert loop.running is False


def test_run_renders_until_exit():
    gs = create_game_state()
    console = TextConsole(12, 15)
    loop = MainLoop(gs, console=console)
    keys = iter(["right", "escape", "left"])
    frames = []

    loop.run(lambda: next(keys), present=lambda c: frames.append(c.to_text()))
    assert len(frames) == 2
    assert tuple(gs.player_position) == (3, 2)
    assert next(keys) == "left"


def test_run_stops_when_input_ends():
    gs = create_game_state()
    loop = MainLoop(gs)
    loop.run(lambda: None)
    assert gs.turn_count == 0
