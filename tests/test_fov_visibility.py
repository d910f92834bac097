import numpy as np
import pytest

from game.constants import TileShade
from game.world.fov import FovAlgorithm, FovMap, ShadowCaster, bresenham_line
from game.world.game_map import GameMap
from game.world.visibility import UNEXPLORED, VisibilityGate

ALGORITHMS = [FovAlgorithm.BASIC, FovAlgorithm.SHADOWCASTING]


def _wall_column_fov():
    """7x7 open field with a full wall column at x=3."""
    fov = FovMap(7, 7)
    for y in range(7):
        for x in range(7):
            fov.set(x, y, x != 3, x != 3)
    return fov


class CountingFov:
    """FOV stand-in that sees everything and counts recomputations."""

    def __init__(self):
        self.computed = []
        self.cells = {}

    def set(self, x, y, transparent, walkable):
        self.cells[(x, y)] = transparent

    def compute_fov(self, x, y, radius, light_walls, algorithm):
        self.computed.append((x, y))

    def is_in_fov(self, x, y):
        return True


def test_bresenham_skips_start_includes_end():
    assert list(bresenham_line(0, 0, 3, 0)) == [(1, 0), (2, 0), (3, 0)]
    assert list(bresenham_line(2, 2, 2, 2)) == []
    line = list(bresenham_line(0, 0, 4, 2))
    assert line[-1] == (4, 2)
    assert len(line) == 4


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_wall_blocks_sight(algorithm):
    fov = _wall_column_fov()
    fov.compute_fov(1, 3, 10, light_walls=True, algorithm=algorithm)
    assert fov.is_in_fov(1, 3)
    assert fov.is_in_fov(2, 3)
    assert fov.is_in_fov(3, 3)
    for y in range(7):
        for x in range(4, 7):
            assert not fov.is_in_fov(x, y)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_unlit_walls_hidden(algorithm):
    fov = _wall_column_fov()
    fov.compute_fov(1, 3, 10, light_walls=False, algorithm=algorithm)
    assert not fov.is_in_fov(3, 3)
    assert fov.is_in_fov(2, 3)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_radius_limits_sight(algorithm):
    fov = FovMap(11, 11)
    for y in range(11):
        for x in range(11):
            fov.set(x, y, True, True)
    fov.compute_fov(5, 5, 2, algorithm=algorithm)
    assert fov.is_in_fov(5, 7)
    assert fov.is_in_fov(7, 5)
    assert not fov.is_in_fov(5, 8)
    assert not fov.is_in_fov(9, 9)


def test_origin_out_of_bounds_rejected():
    with pytest.raises(ValueError):
        FovMap(5, 5).compute_fov(5, 0, 3)


def test_is_in_fov_outside_map_is_false():
    fov = FovMap(5, 5)
    assert not fov.is_in_fov(-1, 2)


def _two_room_map():
    """Two rooms separated by a solid wall column at x=5."""
    gm = GameMap(10, 6)
    gm.carve_area(1, 1, 5, 5)
    gm.carve_area(6, 1, 9, 5)
    return gm


def test_gate_recomputes_only_after_moving():
    gm = _two_room_map()
    counting = CountingFov()
    gate = VisibilityGate(gm, radius=10, fov=counting)
    assert len(counting.cells) == gm.width * gm.height

    assert gate.refresh(2, 2)
    assert not gate.refresh(2, 2)
    assert gate.refresh(3, 2)
    assert counting.computed == [(2, 2), (3, 2)]


def test_sync_forces_recompute_at_same_position():
    gm = _two_room_map()
    counting = CountingFov()
    gate = VisibilityGate(gm, radius=10, fov=counting)
    gate.refresh(2, 2)
    gate.sync_from_map()
    assert gate.refresh(2, 2)


def test_render_pass_shades_and_explored():
    gm = _two_room_map()
    gate = VisibilityGate(gm, radius=10)
    gate.refresh(2, 2)
    shades = gate.render_pass()

    assert shades[2, 2] == TileShade.LIGHT_GROUND
    assert shades[0, 0] == TileShade.LIGHT_WALL
    assert shades[2, 5] == TileShade.LIGHT_WALL
    assert shades[2, 7] == UNEXPLORED
    assert gm.explored[2, 2] and not gm.explored[2, 7]


def test_explored_never_reverts():
    gm = _two_room_map()
    gate = VisibilityGate(gm, radius=2)
    gate.refresh(2, 2)
    gate.render_pass()
    before = gm.explored.copy()

    gate.refresh(4, 4)
    shades = gate.render_pass()
    assert np.all(gm.explored[before])
    # Seen earlier, not visible now: drawn dark.
    assert shades[1, 1] == TileShade.DARK_GROUND
    assert shades[4, 4] == TileShade.LIGHT_GROUND


def test_gate_is_visible_outside_map_false():
    gate = VisibilityGate(_two_room_map(), radius=10)
    gate.refresh(2, 2)
    assert gate.is_visible(2, 2)
    assert not gate.is_visible(-1, 0)
    assert not gate.is_visible(7, 2)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
@pytest.mark.parametrize("radius", [0, -1])
def test_non_positive_radius_reaches_far_corners(algorithm, radius):
    fov = FovMap(80, 45)
    for y in range(45):
        for x in range(80):
            fov.set(x, y, True, True)
    fov.compute_fov(0, 0, radius, True, algorithm)
    assert fov.is_in_fov(79, 44)
    assert fov.is_in_fov(79, 0)
    assert fov.is_in_fov(0, 44)
    assert fov.is_in_fov(40, 22)


def test_unlimited_radius_covers_map_diagonal():
    assert FovMap(80, 45).unlimited_radius() ** 2 >= 79**2 + 44**2


def test_shadowcaster_uses_supplied_callables():
    walls = {(2, 0), (2, 1), (2, 2), (2, 3), (2, 4)}
    lit = set()
    caster = ShadowCaster(
        blocks_light=lambda x, y: not (0 <= x < 5 and 0 <= y < 5) or (x, y) in walls,
        set_visible=lambda x, y: lit.add((x, y)),
        in_range=lambda col, row: True,
    )
    caster.cast(0, 2, 6)
    assert (0, 2) in lit
    assert (1, 0) in lit and (2, 2) in lit
    assert not any(x > 2 for x, _ in lit)
