"""Data models for the bottle simulation state."""
from __future__ import annotations

import math
from dataclasses import dataclass

from .config import (
    ANGLE_MAX,
    ANGLE_MIN,
    FRICTION_MAX,
    FRICTION_MIN,
    PHYSICS_CFG,
    PhysicsCfg,
)


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass
class SimState:
    """Mutable state of the scene.

    ``angle`` and ``friction`` are clamped on every assignment, so no caller
    can push them outside the domain the win detector and renderer assume.
    """

    angle: float = 0.0
    base_x: float = 0.0
    original_base_x: float = 0.0
    base_y: float = 0.0
    base_velocity: float = 0.0
    rope_anchor_x: float = 0.0
    rope_anchor_y: float = 0.0
    rope_swing: float = 0.0
    rope_velocity: float = 0.0
    ring_x: float = 0.0
    ring_y: float = 0.0
    bottle_wobble: float = 0.0
    last_pointer_x: float = 0.0
    is_dragging: bool = False
    has_won: bool = False
    level: int = 1
    score: int = 0
    best_score: int = 0
    attempts: int = 0
    friction: float = PHYSICS_CFG.start_friction
    paused: bool = True
    viewport_width: float = 0.0
    viewport_height: float = 0.0
    tick_count: int = 0

    def __setattr__(self, name: str, value: object) -> None:
        if name == "angle":
            value = _clamp(float(value), ANGLE_MIN, ANGLE_MAX)
        elif name == "friction":
            value = _clamp(float(value), FRICTION_MIN, FRICTION_MAX)
        super().__setattr__(name, value)

    @classmethod
    def initial(cls, cfg: PhysicsCfg = PHYSICS_CFG, *, best_score: int = 0) -> "SimState":
        return cls(friction=cfg.start_friction, best_score=max(0, int(best_score)))

    @property
    def has_layout(self) -> bool:
        return self.viewport_width > 0.0 and self.viewport_height > 0.0

    def apply_layout(self, width: float, height: float, cfg: PhysicsCfg = PHYSICS_CFG) -> bool:
        """Derive the scene geometry from the viewport size.

        Returns ``False`` and leaves the state untouched for a degenerate viewport.
        """

        if width <= 0 or height <= 0:
            return False
        self.viewport_width = float(width)
        self.viewport_height = float(height)
        self.original_base_x = width / 2.0 - cfg.base_offset
        self.base_x = self.original_base_x
        self.base_y = height * cfg.ground_ratio
        self.rope_anchor_x = width / 2.0
        self.rope_anchor_y = cfg.rope_anchor_y
        self.ring_x = self.base_x + math.cos(self.angle) * cfg.arm_length
        self.ring_y = self.base_y + math.sin(self.angle) * cfg.arm_length
        return True


__all__ = ["SimState"]
