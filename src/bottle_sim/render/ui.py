from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence, TYPE_CHECKING

import pygame

from .assets import Color, get_text_surface

if TYPE_CHECKING:  # pragma: no cover
    from bottle_sim.core.config import RenderCfg
    from bottle_sim.core.session import HudSnapshot


@dataclass(frozen=True)
class ButtonVisualStyle:
    base_color: Color
    hover_color: Color
    text_color: tuple[int, int, int]
    radius: int
    border_color: Color | None = None
    border_width: int = 0

    @classmethod
    def from_cfg(cls, render_cfg: RenderCfg) -> "ButtonVisualStyle":
        return cls(
            base_color=render_cfg.button_color,
            hover_color=render_cfg.button_hover_color,
            text_color=render_cfg.button_text_color,
            radius=render_cfg.button_radius,
            border_color=render_cfg.button_border_color,
            border_width=2,
        )


class Button:
    """Simple rectangular button with hover feedback and callbacks."""

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        callback: Callable[[], None],
        text_getter: Callable[[], str] | None = None,
        *,
        style: ButtonVisualStyle | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self._text = text
        self._callback = callback
        self._text_getter = text_getter
        self._style = style

    def get_text(self) -> str:
        if self._text_getter is not None:
            return self._text_getter()
        return self._text

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        mouse_pos: tuple[int, int] | None = None,
        *,
        style: ButtonVisualStyle | None = None,
    ) -> None:
        if mouse_pos is None:
            mouse_pos = pygame.mouse.get_pos()
        hovered = self.rect.collidepoint(mouse_pos)
        effective_style = style or self._style
        if effective_style is None:
            raise ValueError("Button style must be provided")
        color = effective_style.hover_color if hovered else effective_style.base_color
        button_surface = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(
            button_surface,
            color,
            button_surface.get_rect(),
            border_radius=effective_style.radius,
        )
        if effective_style.border_color is not None and effective_style.border_width > 0:
            pygame.draw.rect(
                button_surface,
                effective_style.border_color,
                button_surface.get_rect(),
                effective_style.border_width,
                border_radius=effective_style.radius,
            )
        surface.blit(button_surface, self.rect.topleft)
        text_surf = get_text_surface(font, self.get_text(), effective_style.text_color)
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Run the callback on a left click inside the button. Returns ``True`` if consumed."""

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self._callback()
                return True
        return False


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: tuple[int, int] = (14, 14),
) -> pygame.Surface:
    if not lines:
        raise ValueError("lines must not be empty")
    padding_x, padding_y = padding
    line_height = font.get_linesize()
    width = max(font.size(text)[0] for text, _ in lines) + padding_x * 2
    height = line_height * len(lines) + padding_y * 2
    panel_surface = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(
        panel_surface,
        background_color,
        panel_surface.get_rect(),
        border_radius=12,
    )
    for idx, (text, color) in enumerate(lines):
        if not text:
            continue
        text_surf = get_text_surface(font, text, color)
        panel_surface.blit(text_surf, (padding_x, padding_y + idx * line_height))
    return panel_surface


def hud_lines(hud: HudSnapshot, render_cfg: RenderCfg) -> list[tuple[str, tuple[int, int, int]]]:
    text = render_cfg.hud_text_color
    label = render_cfg.hud_label_color
    return [
        (f"Score     {hud.score}", text),
        (f"Best      {hud.best_score}", label),
        (f"Level     {hud.level}", text),
        (f"Attempts  {hud.attempts}", label),
        (f"Friction  {hud.friction:.2f}", label),
    ]


def draw_hud(
    surface: pygame.Surface,
    hud: HudSnapshot,
    *,
    font: pygame.font.Font,
    status_font: pygame.font.Font,
    render_cfg: RenderCfg,
    won: bool = False,
) -> None:
    panel = build_text_panel(font, hud_lines(hud, render_cfg), background_color=render_cfg.hud_panel_color)
    surface.blit(panel, (16, 16))
    status_color = render_cfg.win_status_color if won else render_cfg.status_color
    status = get_text_surface(status_font, hud.status, status_color)
    surface.blit(status, status.get_rect(midtop=(surface.get_width() // 2, 16)))


def draw_overlay(
    surface: pygame.Surface,
    title: str,
    lines: Sequence[str],
    *,
    title_font: pygame.font.Font,
    font: pygame.font.Font,
    render_cfg: RenderCfg,
) -> None:
    """Dim the whole window and centre a title with a few lines of text."""

    shade = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    shade.fill(render_cfg.overlay_color)
    surface.blit(shade, (0, 0))
    width, height = surface.get_size()
    title_surf = get_text_surface(title_font, title, render_cfg.overlay_title_color)
    y = height // 3
    surface.blit(title_surf, title_surf.get_rect(center=(width // 2, y)))
    y += title_surf.get_height()
    for line in lines:
        line_surf = get_text_surface(font, line, render_cfg.overlay_text_color)
        surface.blit(line_surf, line_surf.get_rect(center=(width // 2, y)))
        y += font.get_linesize()
