import pytest

from bottle_sim.core.config import PHYSICS_CFG
from bottle_sim.core.model import SimState
from bottle_sim.core.session import GameSession
from bottle_sim.core.storage import MemoryBestScoreStore
from bottle_sim.core.timekeeping import DeferredScheduler

WIDTH = 800
HEIGHT = 600
# An 800x600 viewport puts the base at (320, 510) and the ring at (490, 510).


@pytest.fixture
def state():
    s = SimState.initial(PHYSICS_CFG)
    assert s.apply_layout(WIDTH, HEIGHT, PHYSICS_CFG)
    s.paused = False
    return s


@pytest.fixture
def clock():
    class ManualClock:
        def __init__(self):
            self.now = 0.0

        def __call__(self):
            return self.now

    return ManualClock()


@pytest.fixture
def store():
    return MemoryBestScoreStore()


@pytest.fixture
def session(store, clock):
    s = GameSession(PHYSICS_CFG, store=store, scheduler=DeferredScheduler(clock))
    s.start(WIDTH, HEIGHT)
    return s
