import math

import numpy as np
import pygame
import pytest

from bottle_sim.core.config import PHYSICS_CFG, RENDER_CFG
from bottle_sim.core.model import SimState
from bottle_sim.core.session import HudSnapshot
from bottle_sim.render import (
    bottle_polygons,
    draw_scene,
    hud_lines,
    load_font,
    quadratic_curve_points,
    rope_points,
    wobble_offset,
)


def test_quadratic_curve_endpoints_and_midpoint():
    points = quadratic_curve_points((0.0, 0.0), (10.0, 20.0), (20.0, 0.0), 4)
    assert points.shape == (5, 2)
    assert points[0] == pytest.approx([0.0, 0.0])
    assert points[-1] == pytest.approx([20.0, 0.0])
    assert points[2] == pytest.approx([10.0, 10.0])


def test_rope_runs_from_anchor_to_ring(state):
    points = rope_points(state, RENDER_CFG)
    assert points[0] == pytest.approx([state.rope_anchor_x, state.rope_anchor_y])
    assert points[-1] == pytest.approx([state.ring_x, state.ring_y])


def test_flat_bottle_polygons(state):
    polygons = bottle_polygons(state, PHYSICS_CFG, RENDER_CFG)
    body = polygons["body"]
    assert body[0] == pytest.approx([320.0, 489.0])
    assert body[2] == pytest.approx([455.0, 531.0])
    assert polygons["cap"][1] == pytest.approx([498.0, 499.0])


def test_standing_bottle_points_up(state):
    state.angle = -math.pi / 2
    polygons = bottle_polygons(state, PHYSICS_CFG, RENDER_CFG, offset_x=5.0)
    top = np.min(polygons["cap"][:, 1])
    assert top == pytest.approx(state.base_y - 178.0)
    assert np.mean(polygons["body"][:, 0]) == pytest.approx(325.0)


def test_wobble_below_epsilon_is_hidden():
    assert wobble_offset(0.01, 123.0, frequency=0.05, epsilon=0.05) == 0.0
    assert wobble_offset(2.0, 10 * math.pi, frequency=0.05, epsilon=0.05) == pytest.approx(2.0)


def test_draw_scene_paints_ring(state):
    surface = pygame.Surface((800, 600))
    draw_scene(surface, state, physics_cfg=PHYSICS_CFG, render_cfg=RENDER_CFG, time_ms=0.0)
    ring_pixel = surface.get_at((int(state.ring_x) + 19, int(state.ring_y)))
    assert tuple(ring_pixel)[:3] == RENDER_CFG.ring_color


def test_draw_scene_without_layout_only_clears():
    surface = pygame.Surface((200, 100))
    draw_scene(surface, SimState(), physics_cfg=PHYSICS_CFG, render_cfg=RENDER_CFG, time_ms=0.0)
    assert tuple(surface.get_at((100, 50)))[:3] == RENDER_CFG.background_color


def test_hud_lines_dim_secondary_values():
    hud = HudSnapshot(
        score=200,
        level=2,
        attempts=3,
        friction=0.77,
        best_score=300,
        status="Lift the bottle!",
        paused=False,
    )
    colors = {text.split()[0]: color for text, color in hud_lines(hud, RENDER_CFG)}
    assert colors["Score"] == colors["Level"] == RENDER_CFG.hud_text_color
    assert colors["Best"] == colors["Attempts"] == colors["Friction"] == RENDER_CFG.hud_label_color


def test_load_font_falls_back_when_lookup_fails(monkeypatch):
    def broken_match_font(name, bold=False, italic=False):
        raise OSError("font cache unavailable")

    pygame.font.init()
    monkeypatch.setattr(pygame.font, "match_font", broken_match_font)
    font = load_font(["Missing Sans"], 18)
    assert isinstance(font, pygame.font.Font)
    assert font.get_height() > 0
