"""Configuration dataclasses for the bottle simulation."""
from __future__ import annotations

import math
from dataclasses import dataclass

SLIP_TRIGGERS: tuple[str, ...] = ("pull", "speed", "angular")

# Hard bounds enforced on every write to the state.
ANGLE_MIN = -math.pi / 2.0
ANGLE_MAX = 0.0
FRICTION_MIN = 0.4
FRICTION_MAX = 0.95


@dataclass(frozen=True)
class PhysicsCfg:
    # Rope spring
    rope_stiffness: float = 0.1
    rope_damping: float = 0.92
    # Base spring-damper (released) and drag decay (dragging)
    base_stiffness: float = 0.05
    base_damping: float = 0.8
    drag_damping: float = 0.9
    gravity_relax: float = 0.05
    wobble_decay: float = 0.9
    wobble_epsilon: float = 0.05
    # Geometry
    body_length: float = 135.0
    neck_length: float = 35.0
    capture_radius: float = 50.0
    ring_radius: float = 22.0
    # Input mapping
    input_rope_gain: float = 0.15
    wobble_trigger_speed: float = 10.0
    wobble_gain: float = 0.4
    slip_trigger: str = "pull"
    slip_pull_threshold: float = 40.0
    slip_speed_threshold: float = 10.0
    slip_angular_threshold: float = 0.15
    slip_base: float = 1.1
    # Progression
    start_friction: float = 0.85
    friction_step: float = 0.08
    friction_floor: float = FRICTION_MIN
    win_angle_ratio: float = 0.97
    settle_velocity: float = 0.3
    points_per_level: int = 100
    level_advance_delay: float = 2.0
    # Layout
    base_offset: float = 80.0
    ground_ratio: float = 0.85
    rope_anchor_y: float = 40.0
    record_every_ticks: int = 2

    def __post_init__(self) -> None:
        if self.slip_trigger not in SLIP_TRIGGERS:
            raise ValueError(
                f"Unknown slip trigger {self.slip_trigger!r}, expected one of {SLIP_TRIGGERS}"
            )
        if self.arm_length <= 0.0:
            raise ValueError("Arm length must be positive")
        if not FRICTION_MIN <= self.friction_floor <= FRICTION_MAX:
            raise ValueError(
                f"Friction floor must lie in [{FRICTION_MIN}, {FRICTION_MAX}]"
            )
        if self.level_advance_delay < 0.0:
            raise ValueError("Level advance delay must not be negative")

    @property
    def arm_length(self) -> float:
        return self.body_length + self.neck_length

    @property
    def win_angle(self) -> float:
        """Angle at or beyond which the bottle counts as standing."""

        return -(math.pi / 2.0) * self.win_angle_ratio


@dataclass(frozen=True)
class RenderCfg:
    width: int = 900
    height: int = 640
    min_size: tuple[int, int] = (480, 360)
    fps: int = 60
    background_color: tuple[int, int, int] = (10, 6, 24)
    ground_color: tuple[int, int, int] = (0, 243, 255)
    ground_width: int = 4
    glow_alpha: int = 70
    glow_width: int = 14
    rope_color: tuple[int, int, int] = (255, 238, 0)
    rope_width: int = 3
    rope_sag: float = 30.0
    rope_segments: int = 32
    bottle_color: tuple[int, int, int] = (16, 185, 129)
    cap_color: tuple[int, int, int] = (255, 0, 51)
    body_height: float = 42.0
    neck_height: float = 18.0
    cap_length: float = 8.0
    cap_height: float = 22.0
    wobble_frequency: float = 0.05
    ring_color: tuple[int, int, int] = (255, 0, 127)
    ring_width: int = 6
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_label_color: tuple[int, int, int] = (160, 170, 205)
    hud_panel_color: tuple[int, int, int, int] = (18, 12, 40, 170)
    status_color: tuple[int, int, int] = (255, 214, 130)
    win_status_color: tuple[int, int, int] = (46, 209, 140)
    button_color: tuple[int, int, int, int] = (40, 20, 80, int(255 * 0.78))
    button_hover_color: tuple[int, int, int, int] = (70, 36, 130, int(255 * 0.88))
    button_text_color: tuple[int, int, int] = (234, 241, 255)
    button_border_color: tuple[int, int, int, int] = (255, 0, 127, int(255 * 0.55))
    button_radius: int = 14
    button_size: tuple[int, int] = (110, 40)
    overlay_color: tuple[int, int, int, int] = (8, 4, 20, int(255 * 0.78))
    overlay_title_color: tuple[int, int, int] = (0, 243, 255)
    overlay_text_color: tuple[int, int, int] = (234, 241, 255)
    font_names: tuple[str, ...] = ("Segoe UI", "Helvetica", "Arial", "DejaVu Sans")


PHYSICS_CFG = PhysicsCfg()
RENDER_CFG = RenderCfg()


__all__ = [
    "ANGLE_MAX",
    "ANGLE_MIN",
    "FRICTION_MAX",
    "FRICTION_MIN",
    "PHYSICS_CFG",
    "RENDER_CFG",
    "PhysicsCfg",
    "RenderCfg",
    "SLIP_TRIGGERS",
]
