"""Game session: owns the state and drives the per-frame update order."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Callable

from . import input as input_mapper
from .config import PHYSICS_CFG, PhysicsCfg
from .logging_utils import SessionRecorder, get_logger
from .model import SimState
from .physics import step
from .progression import WinDetector
from .storage import BestScoreStore, MemoryBestScoreStore
from .timekeeping import DeferredScheduler

logger = get_logger(__name__)

STATUS_READY = "Lift the bottle!"
STATUS_WIN = "STANDING!"


@dataclass(frozen=True)
class SessionEvent:
    kind: str
    level: int
    score: int
    details: dict = field(default_factory=dict)


@dataclass(frozen=True)
class HudSnapshot:
    score: int
    level: int
    attempts: int
    friction: float
    best_score: int
    status: str
    paused: bool


Listener = Callable[[SessionEvent], None]


class GameSession:
    """One play session.

    Per frame the host forwards pointer events to ``pointer_*`` and then calls
    :meth:`tick`, which fires a due level advance, integrates one step and
    evaluates the win predicate, in that order.

    ``ticks`` counts integrated frames and ``round`` counts resets. Both span
    the whole session and tag every recorded row.
    """

    def __init__(
        self,
        cfg: PhysicsCfg = PHYSICS_CFG,
        *,
        store: BestScoreStore | None = None,
        scheduler: DeferredScheduler | None = None,
        recorder: SessionRecorder | None = None,
    ) -> None:
        self.cfg = cfg
        self.store: BestScoreStore = store if store is not None else MemoryBestScoreStore()
        self.scheduler = scheduler if scheduler is not None else DeferredScheduler()
        self.recorder = recorder
        self.status = STATUS_READY
        self._listeners: list[Listener] = []
        self._layout: tuple[float, float] | None = None
        self._started = False
        self._closed = False
        self.ticks = 0
        self.round = 1
        self.win_detector = WinDetector(
            self.scheduler,
            self.store,
            cfg,
            on_win=self._handle_win,
            on_level=self._handle_level,
        )
        self.state = SimState.initial(cfg, best_score=self.store.load())
        if self.recorder is not None:
            self.recorder.write_meta({"physics": asdict(cfg), "best_score": self.state.best_score})

    # ------------------------------------------------------------------
    # Listeners and display values
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, kind: str, **details: object) -> None:
        event = SessionEvent(kind=kind, level=self.state.level, score=self.state.score, details=dict(details))
        if self.recorder is not None and not self.recorder.closed:
            self.recorder.record_event(self.ticks, self.round, event)
        for listener in list(self._listeners):
            listener(event)

    def hud(self) -> HudSnapshot:
        state = self.state
        return HudSnapshot(
            score=state.score,
            level=state.level,
            attempts=state.attempts,
            friction=state.friction,
            best_score=state.best_score,
            status=self.status,
            paused=state.paused,
        )

    # ------------------------------------------------------------------
    # Session control
    @property
    def started(self) -> bool:
        return self._started

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Session has been exited")

    def apply_layout(self, width: float, height: float) -> bool:
        self._ensure_open()
        if not self.state.apply_layout(width, height, self.cfg):
            logger.debug("Ignoring degenerate layout %sx%s", width, height)
            return False
        self._layout = (float(width), float(height))
        return True

    def start(self, width: float | None = None, height: float | None = None) -> None:
        self._ensure_open()
        if width is not None and height is not None:
            self.apply_layout(width, height)
        self._started = True
        self.state.paused = False
        logger.info("Session started (best score %d)", self.state.best_score)
        self._emit("start")

    def pause(self) -> None:
        self._ensure_open()
        if self.state.paused:
            return
        self.state.paused = True
        self._emit("pause")

    def resume(self) -> None:
        self._ensure_open()
        if not self.state.paused or not self._started:
            return
        self.state.paused = False
        self._emit("resume")

    def toggle_pause(self) -> None:
        if self.state.paused:
            self.resume()
        else:
            self.pause()

    def reset(self) -> None:
        """Start over from a fresh state, dropping any pending level advance."""

        self._ensure_open()
        self.scheduler.invalidate()
        self.state = SimState.initial(self.cfg, best_score=self.store.load())
        if self._layout is not None:
            self.state.apply_layout(*self._layout, self.cfg)
        self.state.paused = not self._started
        self.status = STATUS_READY
        self.round += 1
        logger.info("Session reset")
        self._emit("reset")

    def exit(self) -> None:
        if self._closed:
            return
        self.scheduler.invalidate()
        self.state.is_dragging = False
        self.state.paused = True
        self._emit("exit")
        if self.recorder is not None:
            self.recorder.close()
        self._closed = True
        logger.info("Session exited with score %d", self.state.score)

    # ------------------------------------------------------------------
    # Pointer input
    def pointer_down(self, x: float, y: float) -> bool:
        self._ensure_open()
        grabbed = input_mapper.pointer_down(self.state, x, y, self.cfg)
        if grabbed:
            self._emit("drag")
        return grabbed

    def pointer_move(self, x: float, y: float) -> bool:
        self._ensure_open()
        return input_mapper.pointer_move(self.state, x, y, self.cfg)

    def pointer_up(self) -> bool:
        self._ensure_open()
        released = input_mapper.pointer_up(self.state)
        if released:
            self._emit("attempt", attempts=self.state.attempts)
        return released

    # ------------------------------------------------------------------
    # Frame update
    def tick(self, now: float | None = None) -> bool:
        """Run one frame of simulation. Returns ``True`` if the state was integrated."""

        self._ensure_open()
        if now is None:
            now = self.scheduler.now()
        self.scheduler.poll(now)
        if not step(self.state, self.cfg):
            return False
        self.ticks += 1
        self._record_tick()
        self.win_detector.evaluate(self.state, now)
        return True

    def _record_tick(self) -> None:
        recorder = self.recorder
        if recorder is None or recorder.closed:
            return
        if self.ticks % max(1, self.cfg.record_every_ticks):
            return
        recorder.record_tick(self.ticks, self.round, self.state)

    def _handle_win(self, state: SimState, new_best: bool) -> None:
        if state is not self.state:
            return
        self.status = STATUS_WIN
        self._emit("win", points=self.cfg.points_per_level * state.level)
        if new_best:
            self._emit("best_score", best_score=state.best_score)

    def _handle_level(self, state: SimState) -> None:
        if state is not self.state:
            return
        self.status = f"Level {state.level}: GO!"
        self._emit("level", friction=round(state.friction, 4))


__all__ = ["GameSession", "HudSnapshot", "STATUS_READY", "STATUS_WIN", "SessionEvent"]
