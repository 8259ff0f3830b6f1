"""Maps raw pointer samples onto angle, rope and base perturbations."""
from __future__ import annotations

import math

from .config import PHYSICS_CFG, PhysicsCfg
from .model import SimState


def _accepts_input(state: SimState) -> bool:
    return not state.paused and not state.has_won


def slip_impulse(state: SimState, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Magnitude of one slip kick. Lower friction means a harder kick."""

    return cfg.slip_base - state.friction


def slip_triggered(
    state: SimState,
    x: float,
    speed: float,
    angle_change: float,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> bool:
    if cfg.slip_trigger == "speed":
        return abs(speed) > cfg.slip_speed_threshold
    if cfg.slip_trigger == "angular":
        return abs(angle_change) > cfg.slip_angular_threshold
    return abs(x - state.ring_x) > cfg.slip_pull_threshold


def pointer_down(state: SimState, x: float, y: float, cfg: PhysicsCfg = PHYSICS_CFG) -> bool:
    """Start a drag if the pointer lands on the ring. Returns ``True`` if it did."""

    if not _accepts_input(state):
        return False
    if math.hypot(x - state.ring_x, y - state.ring_y) >= cfg.capture_radius:
        return False
    state.is_dragging = True
    state.last_pointer_x = x
    return True


def pointer_move(state: SimState, x: float, y: float, cfg: PhysicsCfg = PHYSICS_CFG) -> bool:
    if not state.is_dragging or not _accepts_input(state):
        return False

    speed = x - state.last_pointer_x
    state.rope_velocity += speed * cfg.input_rope_gain
    if abs(speed) > cfg.wobble_trigger_speed:
        state.bottle_wobble = abs(speed) * cfg.wobble_gain

    previous_angle = state.angle
    state.angle = math.atan2(y - state.base_y, x - state.base_x)

    if slip_triggered(state, x, speed, state.angle - previous_angle, cfg):
        direction = 1.0 if x > state.base_x else -1.0
        state.base_velocity += direction * slip_impulse(state, cfg)

    state.last_pointer_x = x
    return True


def pointer_up(state: SimState) -> bool:
    """End a drag. Returns ``True`` if a drag was in progress (one attempt)."""

    if not state.is_dragging:
        return False
    state.is_dragging = False
    state.attempts += 1
    return True


__all__ = [
    "pointer_down",
    "pointer_move",
    "pointer_up",
    "slip_impulse",
    "slip_triggered",
]
