"""Slip-rule presets and the per-level difficulty table."""
from __future__ import annotations

from dataclasses import dataclass

from bottle_sim.core.config import PHYSICS_CFG, PhysicsCfg


@dataclass(frozen=True)
class SlipRule:
    key: str
    name: str
    description: str


SLIP_RULE_DEFINITIONS: tuple[SlipRule, ...] = (
    SlipRule(
        key="pull",
        name="Pull",
        description="Base slips when the pointer strays more than 40 px from the ring.",
    ),
    SlipRule(
        key="speed",
        name="Speed",
        description="Base slips when the pointer moves faster than 10 px per sample.",
    ),
    SlipRule(
        key="angular",
        name="Angular",
        description="Base slips when the bottle turns more than 0.15 rad in one sample.",
    ),
)

SLIP_RULES: dict[str, SlipRule] = {rule.key: rule for rule in SLIP_RULE_DEFINITIONS}
SLIP_RULE_ORDER: list[str] = [rule.key for rule in SLIP_RULE_DEFINITIONS]
DEFAULT_SLIP_RULE_KEY = SLIP_RULE_ORDER[0]


def friction_for_level(level: int, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Friction in effect at ``level`` when every earlier level was won once."""

    if level < 1:
        raise ValueError("Levels start at 1")
    return max(cfg.friction_floor, cfg.start_friction - cfg.friction_step * (level - 1))


def level_table(levels: int, cfg: PhysicsCfg = PHYSICS_CFG) -> list[tuple[int, float, int]]:
    """``(level, friction, points)`` rows for the first ``levels`` levels."""

    return [
        (level, friction_for_level(level, cfg), cfg.points_per_level * level)
        for level in range(1, levels + 1)
    ]


__all__ = [
    "DEFAULT_SLIP_RULE_KEY",
    "SLIP_RULES",
    "SLIP_RULE_DEFINITIONS",
    "SLIP_RULE_ORDER",
    "SlipRule",
    "friction_for_level",
    "level_table",
]
