from __future__ import annotations

import math
from typing import Sequence, TYPE_CHECKING

import numpy as np
import pygame

from .assets import Color

if TYPE_CHECKING:  # pragma: no cover
    from bottle_sim.core.config import PhysicsCfg, RenderCfg
    from bottle_sim.core.model import SimState


def quadratic_curve_points(
    start: tuple[float, float],
    control: tuple[float, float],
    end: tuple[float, float],
    segments: int,
) -> np.ndarray:
    """Sample a quadratic Bezier curve into ``segments + 1`` points."""

    t = np.linspace(0.0, 1.0, max(1, segments) + 1)[:, None]
    p0 = np.asarray(start, dtype=float)
    p1 = np.asarray(control, dtype=float)
    p2 = np.asarray(end, dtype=float)
    return (1.0 - t) ** 2 * p0 + 2.0 * (1.0 - t) * t * p1 + t**2 * p2


def rope_points(state: SimState, render_cfg: RenderCfg) -> np.ndarray:
    control = (
        (state.rope_anchor_x + state.ring_x) / 2.0 + state.rope_swing,
        (state.rope_anchor_y + state.ring_y) / 2.0 + render_cfg.rope_sag,
    )
    return quadratic_curve_points(
        (state.rope_anchor_x, state.rope_anchor_y),
        control,
        (state.ring_x, state.ring_y),
        render_cfg.rope_segments,
    )


def wobble_offset(
    wobble: float,
    time_ms: float,
    *,
    frequency: float,
    epsilon: float,
) -> float:
    if abs(wobble) < epsilon:
        return 0.0
    return math.sin(time_ms * frequency) * wobble


def _rotated_rect(
    x: float,
    y: float,
    width: float,
    height: float,
    angle: float,
    origin: tuple[float, float],
) -> np.ndarray:
    corners = np.array(
        [[x, y], [x + width, y], [x + width, y + height], [x, y + height]],
        dtype=float,
    )
    c, s = math.cos(angle), math.sin(angle)
    rotation = np.array([[c, -s], [s, c]])
    return corners @ rotation.T + np.asarray(origin, dtype=float)


def bottle_polygons(
    state: SimState,
    physics_cfg: PhysicsCfg,
    render_cfg: RenderCfg,
    offset_x: float = 0.0,
) -> dict[str, np.ndarray]:
    """Corner points of the bottle body, neck and cap in window coordinates."""

    origin = (state.base_x + offset_x, state.base_y)
    body_len = physics_cfg.body_length
    arm = physics_cfg.arm_length
    return {
        "body": _rotated_rect(
            0.0, -render_cfg.body_height / 2.0, body_len, render_cfg.body_height, state.angle, origin
        ),
        "neck": _rotated_rect(
            body_len,
            -render_cfg.neck_height / 2.0,
            physics_cfg.neck_length,
            render_cfg.neck_height,
            state.angle,
            origin,
        ),
        "cap": _rotated_rect(
            arm,
            -render_cfg.cap_height / 2.0,
            render_cfg.cap_length,
            render_cfg.cap_height,
            state.angle,
            origin,
        ),
    }


def _as_int_points(points: np.ndarray) -> list[tuple[int, int]]:
    return [(int(round(x)), int(round(y))) for x, y in points]


def draw_glow_line(
    surface: pygame.Surface,
    color: tuple[int, int, int],
    points: Sequence[tuple[int, int]],
    width: int,
    *,
    glow_width: int,
    glow_alpha: int,
) -> None:
    if len(points) < 2:
        return
    if glow_alpha > 0 and glow_width > width:
        glow_surface = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        pygame.draw.lines(glow_surface, (*color, glow_alpha), False, points, glow_width)
        surface.blit(glow_surface, (0, 0))
    pygame.draw.lines(surface, color, False, points, width)


def draw_ground(surface: pygame.Surface, ground_y: float, *, render_cfg: RenderCfg) -> None:
    y = int(ground_y) + 2
    draw_glow_line(
        surface,
        render_cfg.ground_color,
        [(0, y), (surface.get_width(), y)],
        render_cfg.ground_width,
        glow_width=render_cfg.glow_width,
        glow_alpha=render_cfg.glow_alpha,
    )


def draw_rope(surface: pygame.Surface, state: SimState, *, render_cfg: RenderCfg) -> None:
    points = _as_int_points(rope_points(state, render_cfg))
    pygame.draw.lines(surface, render_cfg.rope_color, False, points, render_cfg.rope_width)


def draw_bottle(
    surface: pygame.Surface,
    state: SimState,
    *,
    physics_cfg: PhysicsCfg,
    render_cfg: RenderCfg,
    time_ms: float,
) -> None:
    offset = wobble_offset(
        state.bottle_wobble,
        time_ms,
        frequency=render_cfg.wobble_frequency,
        epsilon=physics_cfg.wobble_epsilon,
    )
    polygons = bottle_polygons(state, physics_cfg, render_cfg, offset)
    colors: dict[str, Color] = {
        "body": render_cfg.bottle_color,
        "neck": render_cfg.bottle_color,
        "cap": render_cfg.cap_color,
    }
    for part, points in polygons.items():
        pygame.draw.polygon(surface, colors[part], _as_int_points(points))


def draw_ring(
    surface: pygame.Surface,
    position: tuple[float, float],
    radius: float,
    *,
    render_cfg: RenderCfg,
) -> None:
    if radius <= 0:
        return
    center = (int(position[0]), int(position[1]))
    glow_radius = int(radius + render_cfg.glow_width)
    glow_surface = pygame.Surface((glow_radius * 2, glow_radius * 2), pygame.SRCALPHA)
    pygame.draw.circle(
        glow_surface,
        (*render_cfg.ring_color, render_cfg.glow_alpha),
        (glow_radius, glow_radius),
        glow_radius,
        render_cfg.ring_width + render_cfg.glow_width,
    )
    surface.blit(glow_surface, glow_surface.get_rect(center=center))
    pygame.draw.circle(surface, render_cfg.ring_color, center, int(radius), render_cfg.ring_width)


def draw_scene(
    surface: pygame.Surface,
    state: SimState,
    *,
    physics_cfg: PhysicsCfg,
    render_cfg: RenderCfg,
    time_ms: float,
) -> None:
    """Draw ground, rope, bottle and ring. Reads ``state`` only."""

    surface.fill(render_cfg.background_color)
    if not state.has_layout:
        return
    draw_ground(surface, state.base_y, render_cfg=render_cfg)
    draw_rope(surface, state, render_cfg=render_cfg)
    draw_bottle(
        surface,
        state,
        physics_cfg=physics_cfg,
        render_cfg=render_cfg,
        time_ms=time_ms,
    )
    draw_ring(surface, (state.ring_x, state.ring_y), physics_cfg.ring_radius, render_cfg=render_cfg)
