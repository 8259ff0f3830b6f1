"""Win detection, scoring and level progression."""
from __future__ import annotations

from typing import Callable

from .config import PHYSICS_CFG, PhysicsCfg
from .logging_utils import get_logger
from .model import SimState
from .physics import update_ring_position
from .storage import BestScoreStore
from .timekeeping import DeferredScheduler

logger = get_logger(__name__)


def is_standing(state: SimState, cfg: PhysicsCfg = PHYSICS_CFG) -> bool:
    """Return ``True`` if the bottle is near vertical and the base has settled."""

    return state.angle <= cfg.win_angle and abs(state.base_velocity) < cfg.settle_velocity


def next_friction(friction: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    return max(cfg.friction_floor, friction - cfg.friction_step)


def register_win(state: SimState, cfg: PhysicsCfg = PHYSICS_CFG) -> bool:
    """Apply the scoring side of a win. Returns ``True`` on a new best score."""

    state.has_won = True
    state.is_dragging = False
    state.score += cfg.points_per_level * state.level
    if state.score > state.best_score:
        state.best_score = state.score
        return True
    return False


def advance_level(state: SimState, cfg: PhysicsCfg = PHYSICS_CFG) -> None:
    state.level += 1
    state.friction = next_friction(state.friction, cfg)
    state.angle = 0.0
    state.base_x = state.original_base_x
    state.base_velocity = 0.0
    state.has_won = False
    update_ring_position(state, cfg)


class WinDetector:
    """Evaluates the win predicate and schedules the delayed level advance."""

    def __init__(
        self,
        scheduler: DeferredScheduler,
        store: BestScoreStore,
        cfg: PhysicsCfg = PHYSICS_CFG,
        *,
        on_win: Callable[[SimState, bool], None] | None = None,
        on_level: Callable[[SimState], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._store = store
        self._cfg = cfg
        self._on_win = on_win
        self._on_level = on_level

    def evaluate(self, state: SimState, now: float | None = None) -> bool:
        if state.paused or state.has_won:
            return False
        if not is_standing(state, self._cfg):
            return False

        new_best = register_win(state, self._cfg)
        logger.info("Bottle standing at level %d, score %d", state.level, state.score)
        if new_best:
            self._store.save(state.best_score)
        self._scheduler.schedule(
            self._cfg.level_advance_delay,
            lambda: self._advance(state),
            now=now,
            label="level-advance",
        )
        if self._on_win is not None:
            self._on_win(state, new_best)
        return True

    def _advance(self, state: SimState) -> None:
        advance_level(state, self._cfg)
        logger.info("Advanced to level %d (friction %.2f)", state.level, state.friction)
        if self._on_level is not None:
            self._on_level(state)


__all__ = [
    "WinDetector",
    "advance_level",
    "is_standing",
    "next_friction",
    "register_win",
]
