# game/world/fov.py
"""
Field of View (FOV) capability.

``FovMap`` mirrors the map's opacity and answers "is this cell visible from the
last computed origin".  Two algorithms are available: Bresenham ray casting to
the bounding-box perimeter (``BASIC``) and recursive symmetric shadowcasting
(``SHADOWCASTING``).
"""

import math
from enum import Enum
from typing import Callable, Iterator

import numpy as np
import structlog

log = structlog.get_logger(__name__)

Point = tuple[int, int]


class FovAlgorithm(Enum):
    BASIC = "basic"
    SHADOWCASTING = "shadowcasting"


# Transformation coefficients for the eight octants.
_MULTIPLIERS = (
    (1, 0, 0, 1),
    (0, 1, 1, 0),
    (0, -1, 1, 0),
    (-1, 0, 0, 1),
    (-1, 0, 0, -1),
    (0, -1, -1, 0),
    (0, 1, -1, 0),
    (1, 0, 0, -1),
)


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> Iterator[Point]:
    """Yield the cells of a Bresenham line from ``(x0, y0)`` to ``(x1, y1)``.

    The start cell is not yielded; the end cell is.
    """
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    xi, yi = x0, y0
    while (xi, yi) != (x1, y1):
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            xi += sx
        if e2 <= dx:
            err += dx
            yi += sy
        yield xi, yi


class ShadowCaster:
    """Recursive shadowcasting over the eight octants around an origin.

    The caster knows nothing about the map; it is handed three callables:

    ``blocks_light(x, y)``
        ``True`` for opaque cells and for cells outside the map.
    ``set_visible(x, y)``
        Records a lit cell.
    ``in_range(col, depth)``
        Octant-local distance check; ``depth`` is the row distance from the
        origin and ``col`` the offset along that row.
    """

    def __init__(
        self,
        *,
        blocks_light: Callable[[int, int], bool],
        set_visible: Callable[[int, int], None],
        in_range: Callable[[int, int], bool],
    ) -> None:
        self.blocks_light = blocks_light
        self.set_visible = set_visible
        self.in_range = in_range

    def cast(self, origin_x: int, origin_y: int, max_depth: int) -> None:
        self.set_visible(origin_x, origin_y)
        for octant in _MULTIPLIERS:
            self._scan_octant(origin_x, origin_y, max_depth, 1, 1.0, 0.0, octant)

    def _scan_octant(
        self,
        ox: int,
        oy: int,
        max_depth: int,
        depth: int,
        high: float,
        low: float,
        octant: tuple[int, int, int, int],
    ) -> None:
        """Light rows ``depth..max_depth`` between slopes ``high`` and ``low``."""
        if high < low:
            return
        xx, xy, yx, yy = octant

        for row in range(depth, max_depth + 1):
            in_shadow = False
            resume_high = high
            # Columns run from the diagonal (slope 1) to the axis (slope 0).
            for col in range(-row, 1):
                near_slope = (col - 0.5) / (0.5 - row)
                far_slope = (col + 0.5) / (-0.5 - row)
                if far_slope > high:
                    continue
                if near_slope < low:
                    break

                tx = ox + col * xx - row * xy
                ty = oy + col * yx - row * yy
                if self.in_range(col, row):
                    self.set_visible(tx, ty)
                opaque = self.blocks_light(tx, ty)

                if in_shadow:
                    if opaque:
                        resume_high = far_slope
                        continue
                    in_shadow = False
                    high = resume_high
                elif opaque and row < max_depth:
                    in_shadow = True
                    self._scan_octant(ox, oy, max_depth, row + 1, high, near_slope, octant)
                    resume_high = far_slope
            if in_shadow:
                break


class FovMap:
    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError("FOV map width and height must be positive integers.")
        self.width = width
        self.height = height
        self.transparent: np.ndarray = np.zeros((height, width), dtype=bool)
        self.walkable: np.ndarray = np.zeros((height, width), dtype=bool)
        self.visible: np.ndarray = np.zeros((height, width), dtype=bool)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set(self, x: int, y: int, transparent: bool, walkable: bool) -> None:
        self.transparent[y, x] = transparent
        self.walkable[y, x] = walkable

    def is_in_fov(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return bool(self.visible[y, x])

    def unlimited_radius(self) -> int:
        """Smallest radius reaching every cell from any origin on the map."""
        return math.ceil(math.hypot(self.width - 1, self.height - 1))

    def compute_fov(
        self,
        x: int,
        y: int,
        radius: int,
        light_walls: bool = True,
        algorithm: FovAlgorithm = FovAlgorithm.BASIC,
    ) -> None:
        """Calculate field of view from ``(x, y)``; ``radius <= 0`` is unlimited."""
        if not self.in_bounds(x, y):
            log.critical("FOV origin out of bounds", origin=(x, y))
            raise ValueError(f"FOV origin ({x}, {y}) is outside the map")

        self.visible.fill(False)
        if radius <= 0:
            radius = self.unlimited_radius()

        if algorithm is FovAlgorithm.SHADOWCASTING:
            self._compute_shadowcasting(x, y, radius)
        else:
            self._compute_basic(x, y, radius)

        if not light_walls:
            np.logical_and(self.visible, self.transparent, out=self.visible)
        self.visible[y, x] = True
        log.debug(
            "FOV computed",
            origin=(x, y),
            radius=radius,
            algorithm=algorithm.value,
            visible=int(self.visible.sum()),
        )

    # --- Basic ray casting ---
    def _compute_basic(self, ox: int, oy: int, radius: int) -> None:
        x_min = max(0, ox - radius)
        x_max = min(self.width - 1, ox + radius)
        y_min = max(0, oy - radius)
        y_max = min(self.height - 1, oy + radius)
        radius_sq = radius * radius

        perimeter: list[Point] = []
        for px in range(x_min, x_max + 1):
            perimeter.append((px, y_min))
            perimeter.append((px, y_max))
        for py in range(y_min + 1, y_max):
            perimeter.append((x_min, py))
            perimeter.append((x_max, py))

        for tx, ty in perimeter:
            for cx, cy in bresenham_line(ox, oy, tx, ty):
                if (cx - ox) ** 2 + (cy - oy) ** 2 > radius_sq:
                    break
                self.visible[cy, cx] = True
                if not self.transparent[cy, cx]:
                    break

    # --- Recursive shadowcasting ---
    def _blocks_light(self, x: int, y: int) -> bool:
        return not self.in_bounds(x, y) or not self.transparent[y, x]

    def _set_visible(self, x: int, y: int) -> None:
        if self.in_bounds(x, y):
            self.visible[y, x] = True

    def _compute_shadowcasting(self, ox: int, oy: int, radius: int) -> None:
        radius_sq = radius * radius
        caster = ShadowCaster(
            blocks_light=self._blocks_light,
            set_visible=self._set_visible,
            in_range=lambda col, row: col * col + row * row <= radius_sq,
        )
        caster.cast(ox, oy, radius)
