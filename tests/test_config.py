import math

import pytest

from bottle_sim.core.config import PHYSICS_CFG, SLIP_TRIGGERS, PhysicsCfg
from bottle_sim.core.physics import step
from bottle_sim.core.progression import advance_level
from bottle_sim.data.levels import SLIP_RULES, friction_for_level, level_table


def test_default_geometry():
    assert PHYSICS_CFG.arm_length == pytest.approx(170.0)
    assert PHYSICS_CFG.win_angle == pytest.approx(-(math.pi / 2) * 0.97)


@pytest.mark.parametrize(
    "overrides",
    [
        {"slip_trigger": "tilt"},
        {"friction_floor": 0.2},
        {"body_length": 0.0, "neck_length": 0.0},
        {"level_advance_delay": -1.0},
    ],
)
def test_invalid_config_is_rejected(overrides):
    with pytest.raises(ValueError):
        PhysicsCfg(**overrides)


def test_slip_rules_cover_every_trigger():
    assert set(SLIP_RULES) == set(SLIP_TRIGGERS)


def test_friction_for_level_matches_progression(state):
    for level in range(1, 12):
        assert state.level == level
        assert friction_for_level(level) == pytest.approx(state.friction)
        advance_level(state)


def test_friction_for_level_rejects_level_zero():
    with pytest.raises(ValueError):
        friction_for_level(0)


def test_level_table_rows():
    rows = level_table(3)
    assert [row[0] for row in rows] == [1, 2, 3]
    assert [row[2] for row in rows] == [100, 200, 300]
    assert rows[1][1] == pytest.approx(0.77)


def test_custom_arm_length_moves_ring(state):
    cfg = PhysicsCfg(body_length=100.0, neck_length=20.0)
    step(state, cfg)
    assert state.ring_x == pytest.approx(state.base_x + 120.0)
