import csv
import math

import pytest

from bottle_sim.core.config import PHYSICS_CFG
from bottle_sim.core.logging_utils import SessionRecorder
from bottle_sim.core.session import STATUS_WIN, GameSession
from bottle_sim.core.storage import MemoryBestScoreStore
from bottle_sim.core.timekeeping import DeferredScheduler


def _stand_bottle(session):
    session.state.is_dragging = True
    session.state.angle = -math.pi / 2
    session.state.base_velocity = 0.0


def test_new_session_waits_for_start(clock):
    session = GameSession(store=MemoryBestScoreStore(500), scheduler=DeferredScheduler(clock))
    assert session.state.paused
    assert session.hud().best_score == 500
    assert not session.tick(now=0.0)
    session.start(800, 600)
    assert session.tick(now=0.0)
    assert session.state.tick_count == 1


def test_attempts_count_completed_drags_only(session):
    session.pointer_down(490.0, 510.0)
    session.pointer_move(480.0, 500.0)
    session.tick(now=0.0)
    session.pointer_up()
    assert session.hud().attempts == 1

    assert not session.pointer_down(100.0, 100.0)
    session.pointer_up()
    assert session.hud().attempts == 1


def test_win_through_tick_emits_events(session, store):
    events = []
    session.subscribe(events.append)
    _stand_bottle(session)
    assert session.tick(now=0.0)
    assert session.state.has_won
    assert session.hud().score == 100
    assert session.hud().status == STATUS_WIN
    assert [event.kind for event in events] == ["win", "best_score"]
    assert store.best_score == 100


def test_released_bottle_falls_before_win_check(session):
    session.state.angle = -math.pi / 2
    session.tick(now=0.0)
    assert not session.state.has_won


def test_level_advance_fires_from_tick(session, clock):
    events = []
    session.subscribe(events.append)
    _stand_bottle(session)
    session.tick(now=0.0)
    assert not session.tick(now=1.0)
    assert session.state.level == 1
    assert session.tick(now=2.5)
    assert session.state.level == 2
    assert session.hud().status == "Level 2: GO!"
    assert session.hud().friction == pytest.approx(0.77)
    assert events[-1].kind == "level"


def test_reset_cancels_pending_level_advance(session, store):
    _stand_bottle(session)
    session.tick(now=0.0)
    old_state = session.state
    session.reset()
    session.tick(now=5.0)
    assert session.state.level == 1
    assert not session.state.has_won
    assert session.state.score == 0
    assert session.state.best_score == store.best_score == 100
    assert old_state.level == 1
    assert session.scheduler.pending is None


def test_reset_keeps_layout_and_running_state(session):
    session.state.base_x = 0.0
    session.reset()
    assert session.state.has_layout
    assert session.state.base_x == pytest.approx(320.0)
    assert not session.state.paused


def test_reset_before_start_stays_paused(clock):
    session = GameSession(scheduler=DeferredScheduler(clock))
    session.apply_layout(800, 600)
    session.reset()
    assert session.state.paused
    assert session.state.has_layout


def test_pause_and_resume_gate_ticks(session):
    session.pause()
    assert session.hud().paused
    assert not session.tick(now=0.0)
    session.toggle_pause()
    assert session.tick(now=0.0)


def test_paused_session_ignores_pointer(session):
    session.pause()
    assert not session.pointer_down(490.0, 510.0)


def test_exit_closes_session(session):
    session.exit()
    session.exit()
    with pytest.raises(RuntimeError):
        session.tick(now=0.0)
    with pytest.raises(RuntimeError):
        session.reset()


def test_unsubscribe_stops_events(session):
    events = []
    unsubscribe = session.subscribe(events.append)
    session.pause()
    unsubscribe()
    session.resume()
    assert [event.kind for event in events] == ["pause"]


def test_session_records_ticks_and_events(tmp_path, clock):
    recorder = SessionRecorder(tmp_path, session_id="run")
    session = GameSession(PHYSICS_CFG, scheduler=DeferredScheduler(clock), recorder=recorder)
    session.start(800, 600)
    for _ in range(10):
        session.tick(now=0.0)
    session.exit()

    rows = (tmp_path / "run" / "timeseries.csv").read_text().strip().splitlines()
    assert rows[0].startswith("tick,round,angle")
    assert len(rows) == 1 + 10 // PHYSICS_CFG.record_every_ticks
    events = (tmp_path / "run" / "events.csv").read_text()
    assert ",start," in events
    assert ",exit," in events
    assert (tmp_path / "run" / "meta.json").exists()
    assert recorder.closed


def test_recording_survives_reset(tmp_path, clock):
    recorder = SessionRecorder(tmp_path, session_id="reset")
    session = GameSession(PHYSICS_CFG, scheduler=DeferredScheduler(clock), recorder=recorder)
    session.start(800, 600)
    for _ in range(10):
        session.tick(now=0.0)
    session.reset()
    for _ in range(4):
        session.tick(now=0.0)
    session.exit()

    with (tmp_path / "reset" / "timeseries.csv").open(newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert [int(row["tick"]) for row in rows] == [2, 4, 6, 8, 10, 12, 14]
    assert [int(row["round"]) for row in rows] == [1, 1, 1, 1, 1, 2, 2]
    with (tmp_path / "reset" / "events.csv").open(newline="") as fh:
        events = [(int(row["tick"]), int(row["round"]), row["type"]) for row in csv.DictReader(fh)]
    assert events == [(0, 1, "start"), (10, 2, "reset"), (14, 2, "exit")]
    assert session.ticks == 14
    assert session.state.tick_count == 4
