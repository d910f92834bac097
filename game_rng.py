"""Integrated GameRNG module.

This module provides the deterministic random number generator used by map
generation and room population.  It is a thin wrapper over
:func:`numpy.random.default_rng` exposing only the draws the simulation
needs:

* ``get_int(lo, hi)`` - uniform integer, both bounds inclusive.
* ``get_float()`` - uniform float in ``[0, 1)``.
* ``get_bool()`` - unweighted coin flip.

Any object exposing the same methods can be passed wherever a ``GameRNG`` is
expected, which is how the tests script exact draws.
"""

from __future__ import annotations

import random
from typing import Any, Dict, Optional

import numpy as np
import structlog

log = structlog.get_logger(__name__)


class GameRNG:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else random.randint(0, 2**32 - 1)
        self.rng = np.random.default_rng(self.initial_seed)
        log.debug("GameRNG seeded", seed=self.initial_seed)

    # ------------------------------------------------------------------
    # basic random helpers
    # ------------------------------------------------------------------
    def get_int(self, a: int, b: int) -> int:
        if a > b:
            raise ValueError(f"get_int requires a <= b, got {a} > {b}")
        return int(self.rng.integers(a, b + 1))

    def get_float(self, a: float = 0.0, b: float = 1.0) -> float:
        if a > b:
            raise ValueError(f"get_float requires a <= b, got {a} > {b}")
        return a + (b - a) * float(self.rng.random())

    def get_bool(self) -> bool:
        return bool(self.rng.integers(0, 2))

    # ------------------------------------------------------------------
    # state management
    # ------------------------------------------------------------------
    def get_state(self) -> Dict[str, Any]:
        return {
            "random_state": self.rng.bit_generator.state,
            "initial_seed": self.initial_seed,
        }

    def set_state(self, state: Dict[str, Any]) -> None:
        if "random_state" in state:
            self.rng.bit_generator.state = state["random_state"]
        if "initial_seed" in state:
            self.initial_seed = state["initial_seed"]

    def reset(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else random.randint(0, 2**32 - 1)
        self.rng = np.random.default_rng(self.initial_seed)
        log.debug("GameRNG reset", seed=self.initial_seed)


__all__ = ["GameRNG"]
