import math

import pytest

from bottle_sim.core.config import PHYSICS_CFG
from bottle_sim.core.progression import (
    WinDetector,
    advance_level,
    is_standing,
    register_win,
)
from bottle_sim.core.storage import MemoryBestScoreStore
from bottle_sim.core.timekeeping import DeferredScheduler


@pytest.fixture
def scheduler(clock):
    return DeferredScheduler(clock)


@pytest.fixture
def detector(store, scheduler):
    return WinDetector(scheduler, store, PHYSICS_CFG)


def test_basic_win(state, detector, store, scheduler):
    state.angle = -math.pi / 2
    state.base_velocity = 0.0
    assert detector.evaluate(state, now=0.0)
    assert state.has_won
    assert state.score == 100
    assert state.best_score == 100
    assert store.best_score == 100
    assert scheduler.pending is not None


def test_win_scores_by_level(state, detector):
    state.level = 3
    state.angle = -math.pi / 2
    detector.evaluate(state, now=0.0)
    assert state.score == 300


def test_near_miss_is_rejected(state, detector):
    state.angle = -(math.pi / 2) * 0.9
    state.base_velocity = 0.0
    assert not detector.evaluate(state, now=0.0)
    assert not state.has_won
    assert state.score == 0


def test_unstable_vertical_is_rejected(state, detector):
    state.angle = -math.pi / 2
    state.base_velocity = 1.0
    assert not detector.evaluate(state, now=0.0)
    assert state.score == 0


def test_threshold_angle_counts_as_standing(state):
    state.angle = PHYSICS_CFG.win_angle
    assert is_standing(state)
    state.base_velocity = -0.29
    assert is_standing(state)
    state.base_velocity = 0.3
    assert not is_standing(state)


def test_win_locks_out_dragging(state, detector):
    state.is_dragging = True
    state.angle = -math.pi / 2
    detector.evaluate(state, now=0.0)
    assert not state.is_dragging


def test_repeated_evaluation_does_not_rescore(state, detector, scheduler):
    state.angle = -math.pi / 2
    detector.evaluate(state, now=0.0)
    task = scheduler.pending
    assert not detector.evaluate(state, now=0.5)
    assert not detector.evaluate(state, now=1.0)
    assert state.score == 100
    assert scheduler.pending is task


def test_no_win_while_paused(state, detector):
    state.paused = True
    state.angle = -math.pi / 2
    assert not detector.evaluate(state, now=0.0)


def test_level_advances_after_delay(state, detector, scheduler):
    state.angle = -math.pi / 2
    state.base_x = 330.0
    detector.evaluate(state, now=0.0)
    assert not scheduler.poll(1.0)
    assert state.level == 1
    assert scheduler.poll(2.0)
    assert state.level == 2
    assert state.friction == pytest.approx(0.77)
    assert state.angle == 0.0
    assert state.base_x == pytest.approx(state.original_base_x)
    assert not state.has_won
    assert (state.ring_x, state.ring_y) == pytest.approx((490.0, 510.0))


def test_existing_best_score_is_not_overwritten(state, clock):
    store = MemoryBestScoreStore(1000)
    detector = WinDetector(DeferredScheduler(clock), store, PHYSICS_CFG)
    state.best_score = 1000
    state.angle = -math.pi / 2
    detector.evaluate(state, now=0.0)
    assert state.best_score == 1000
    assert store.saves == 0


def test_register_win_reports_new_best(state):
    assert register_win(state)
    state.has_won = False
    state.best_score = 10_000
    assert not register_win(state)


def test_friction_never_rises_and_is_floored(state):
    previous_friction = state.friction
    previous_level = state.level
    for _ in range(12):
        advance_level(state)
        assert state.level == previous_level + 1
        assert state.friction <= previous_friction
        assert state.friction >= 0.4
        previous_friction = state.friction
        previous_level = state.level
    assert state.friction == pytest.approx(0.4)
