"""Rendering helpers for the bottle simulator."""

from .assets import (
    get_text_surface,
    load_font,
)
from .draw import (
    bottle_polygons,
    draw_bottle,
    draw_glow_line,
    draw_ground,
    draw_ring,
    draw_rope,
    draw_scene,
    quadratic_curve_points,
    rope_points,
    wobble_offset,
)
from .ui import (
    Button,
    ButtonVisualStyle,
    build_text_panel,
    draw_hud,
    draw_overlay,
    hud_lines,
)

__all__ = [
    "Button",
    "ButtonVisualStyle",
    "bottle_polygons",
    "build_text_panel",
    "draw_bottle",
    "draw_glow_line",
    "draw_ground",
    "draw_hud",
    "draw_overlay",
    "draw_ring",
    "draw_rope",
    "draw_scene",
    "get_text_surface",
    "hud_lines",
    "load_font",
    "quadratic_curve_points",
    "rope_points",
    "wobble_offset",
]
