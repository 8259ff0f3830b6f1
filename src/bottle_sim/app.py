"""
Bottle Up - stand the bottle
============================

Drag the pink ring to lift the bottle until it stands upright and the base
settles. Every win scores 100 x level and makes the base slipperier.
"""
from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

import pygame
from pygame.locals import QUIT, RESIZABLE, VIDEORESIZE

from bottle_sim.core.config import PHYSICS_CFG, RENDER_CFG, PhysicsCfg, RenderCfg
from bottle_sim.core.logging_utils import SessionRecorder, get_logger, set_package_log_level
from bottle_sim.core.session import GameSession, SessionEvent
from bottle_sim.core.storage import JsonBestScoreStore
from bottle_sim.core.timekeeping import FrameTimer
from bottle_sim.data.levels import DEFAULT_SLIP_RULE_KEY, SLIP_RULE_ORDER, SLIP_RULES, level_table
from bottle_sim.render import (
    Button,
    ButtonVisualStyle,
    draw_hud,
    draw_overlay,
    draw_scene,
    load_font,
)

logger = get_logger("bottle_sim.app")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lift the bottle until it stands.")
    parser.add_argument("--width", type=int, default=RENDER_CFG.width, help="Window width in pixels")
    parser.add_argument("--height", type=int, default=RENDER_CFG.height, help="Window height in pixels")
    parser.add_argument(
        "--slip",
        choices=SLIP_RULE_ORDER,
        default=DEFAULT_SLIP_RULE_KEY,
        help="What makes the base slip while dragging",
    )
    parser.add_argument(
        "--best-score-file",
        type=Path,
        default=Path("data") / "best_score.json",
        help="Where the best score is kept between sessions",
    )
    parser.add_argument("--record", action="store_true", help="Record ticks and events under data/sessions")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    return parser


def tutorial_lines(physics_cfg: PhysicsCfg) -> list[str]:
    rule = SLIP_RULES[physics_cfg.slip_trigger]
    lines = [
        "Drag the pink ring to lift the bottle.",
        "Stand it upright and hold still to win.",
        f"Slip rule: {rule.name}. {rule.description}",
        "",
    ]
    for level, friction, points in level_table(4, physics_cfg):
        lines.append(f"Level {level}: friction {friction:.2f}, {points} points")
    lines += ["", "Click Start or press Space"]
    return lines


def run(
    physics_cfg: PhysicsCfg,
    render_cfg: RenderCfg,
    *,
    best_score_file: Path,
    record: bool,
) -> None:
    pygame.init()
    pygame.display.set_caption("Bottle Up")
    screen = pygame.display.set_mode((render_cfg.width, render_cfg.height), RESIZABLE)
    clock = pygame.time.Clock()

    hud_font = load_font(render_cfg.font_names, 18)
    status_font = load_font(render_cfg.font_names, 26, bold=True)
    title_font = load_font(render_cfg.font_names, 44, bold=True)
    button_font = load_font(render_cfg.font_names, 18, bold=True)
    button_style = ButtonVisualStyle.from_cfg(render_cfg)

    recorder = SessionRecorder() if record else None
    session = GameSession(
        physics_cfg,
        store=JsonBestScoreStore(best_score_file),
        recorder=recorder,
    )
    session.apply_layout(*screen.get_size())

    running = True
    won = False

    def on_event(event: SessionEvent) -> None:
        nonlocal won
        if event.kind == "win":
            won = True
        elif event.kind in ("level", "reset"):
            won = False

    session.subscribe(on_event)

    def start_game() -> None:
        session.start(*screen.get_size())

    def toggle_pause() -> None:
        if session.started:
            session.toggle_pause()

    def reset_game() -> None:
        session.reset()

    def quit_app() -> None:
        nonlocal running
        running = False

    button_w, button_h = render_cfg.button_size
    start_button = Button((0, 0, button_w, button_h), "Start", start_game, style=button_style)
    pause_button = Button(
        (0, 0, button_w, button_h),
        "Pause",
        toggle_pause,
        text_getter=lambda: "Resume" if session.state.paused else "Pause",
        style=button_style,
    )
    reset_button = Button((0, 0, button_w, button_h), "Reset", reset_game, style=button_style)

    def update_button_layout() -> None:
        width, height = screen.get_size()
        pause_button.rect.topright = (width - 16, 16)
        reset_button.rect.topright = (width - 16, 16 + button_h + 10)
        start_button.rect.center = (width // 2, int(height * 0.78))

    update_button_layout()
    frame_timer = FrameTimer()
    elapsed_ms = 0.0

    while running:
        elapsed_ms += frame_timer.tick() * 1000.0
        for event in pygame.event.get():
            if event.type == QUIT:
                quit_app()
            elif event.type == VIDEORESIZE:
                width = max(render_cfg.min_size[0], event.w)
                height = max(render_cfg.min_size[1], event.h)
                screen = pygame.display.set_mode((width, height), RESIZABLE)
                session.apply_layout(width, height)
                update_button_layout()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    quit_app()
                elif event.key == pygame.K_SPACE and not session.started:
                    start_game()
                elif event.key == pygame.K_p:
                    toggle_pause()
                elif event.key == pygame.K_r:
                    reset_game()
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if not session.started:
                    start_button.handle_event(event)
                elif not (pause_button.handle_event(event) or reset_button.handle_event(event)):
                    session.pointer_down(*event.pos)
            elif event.type == pygame.MOUSEMOTION:
                session.pointer_move(*event.pos)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                session.pointer_up()

        session.tick()

        draw_scene(
            screen,
            session.state,
            physics_cfg=physics_cfg,
            render_cfg=render_cfg,
            time_ms=elapsed_ms,
        )
        draw_hud(
            screen,
            session.hud(),
            font=hud_font,
            status_font=status_font,
            render_cfg=render_cfg,
            won=won,
        )
        if not session.started:
            draw_overlay(
                screen,
                "Bottle Up",
                tutorial_lines(physics_cfg),
                title_font=title_font,
                font=hud_font,
                render_cfg=render_cfg,
            )
            start_button.draw(screen, button_font)
        else:
            if session.state.paused:
                draw_overlay(
                    screen,
                    "Paused",
                    ["Press P or click Resume to continue"],
                    title_font=title_font,
                    font=hud_font,
                    render_cfg=render_cfg,
                )
            pause_button.draw(screen, button_font)
            reset_button.draw(screen, button_font)

        pygame.display.flip()
        clock.tick(render_cfg.fps)

    session.exit()
    pygame.quit()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level:
        set_package_log_level(args.log_level)
    physics_cfg = dataclasses.replace(PHYSICS_CFG, slip_trigger=args.slip)
    render_cfg = dataclasses.replace(RENDER_CFG, width=args.width, height=args.height)
    logger.info("Starting Bottle Up (slip rule %s)", physics_cfg.slip_trigger)
    run(physics_cfg, render_cfg, best_score_file=args.best_score_file, record=args.record)
    return 0


if __name__ == "__main__":
    sys.exit(main())
