"""Fixed-step integrator for the rope, base and bottle rotation."""
from __future__ import annotations

import math

from .config import PHYSICS_CFG, PhysicsCfg
from .model import SimState


def ring_position(
    base_x: float,
    base_y: float,
    angle: float,
    arm_length: float,
) -> tuple[float, float]:
    """Endpoint of an arm of ``arm_length`` rotated by ``angle`` around the base."""

    return (
        base_x + math.cos(angle) * arm_length,
        base_y + math.sin(angle) * arm_length,
    )


def update_ring_position(state: SimState, cfg: PhysicsCfg = PHYSICS_CFG) -> None:
    state.ring_x, state.ring_y = ring_position(
        state.base_x, state.base_y, state.angle, cfg.arm_length
    )


def spring_step(
    position: float,
    velocity: float,
    target: float,
    stiffness: float,
    damping: float,
) -> tuple[float, float]:
    """One tick of a damped linear spring pulling ``position`` toward ``target``.

    Returns the new ``(position, velocity)``.
    """

    velocity += (target - position) * stiffness
    velocity *= damping
    return position + velocity, velocity


def step(state: SimState, cfg: PhysicsCfg = PHYSICS_CFG) -> bool:
    """Advance ``state`` by one virtual tick.

    Returns ``False`` without touching the state when the session is paused,
    a win is being celebrated, or no valid layout has been applied yet.
    """

    if state.paused or state.has_won or not state.has_layout:
        return False

    state.rope_swing, state.rope_velocity = spring_step(
        state.rope_swing,
        state.rope_velocity,
        0.0,
        cfg.rope_stiffness,
        cfg.rope_damping,
    )
    state.bottle_wobble *= cfg.wobble_decay

    if state.is_dragging:
        state.base_x += state.base_velocity
        state.base_velocity *= cfg.drag_damping
    else:
        state.base_x, state.base_velocity = spring_step(
            state.base_x,
            state.base_velocity,
            state.original_base_x,
            cfg.base_stiffness,
            cfg.base_damping,
        )
        # Gravity lays the bottle back down.
        if state.angle < 0.0:
            state.angle = min(state.angle + cfg.gravity_relax, 0.0)

    update_ring_position(state, cfg)
    state.tick_count += 1
    return True


__all__ = [
    "ring_position",
    "spring_step",
    "step",
    "update_ring_position",
]
