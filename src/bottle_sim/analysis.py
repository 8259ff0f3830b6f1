"""Analyze a recorded session and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
DEFAULT_SESSIONS_DIR = Path("data") / "sessions"


@dataclass(frozen=True)
class SessionSummary:
    ticks: int
    rounds: int
    wins: int
    attempts: int
    max_level: int
    final_score: int
    max_lift_deg: float
    fastest_win_ticks: int | None
    event_counts: Dict[str, int]


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, List[float]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(float(value))
    return {key: np.asarray(values) for key, values in columns.items()}


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row or not row.get("type"):
                continue
            event = {
                "tick": int(float(row["tick"])),
                "round": int(float(row.get("round") or 1)),
                "type": row["type"],
                "level": int(float(row["level"])),
                "score": int(float(row["score"])),
                "details": {},
            }
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def ensure_fig_dir(session_dir: Path) -> Path:
    fig_dir = session_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def count_events(events: List[dict]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for event in events:
        counts[event["type"]] = counts.get(event["type"], 0) + 1
    return counts


def fastest_win(events: List[dict]) -> int | None:
    """Fewest ticks between a start, reset or level advance and the next win."""

    best: int | None = None
    since: int | None = None
    for event in events:
        if event["type"] in ("start", "reset", "level"):
            since = event["tick"]
        elif event["type"] == "win" and since is not None:
            duration = event["tick"] - since
            best = duration if best is None else min(best, duration)
            since = None
    return best


def summarize(ts: Dict[str, np.ndarray], events: List[dict]) -> SessionSummary:
    counts = count_events(events)
    angle = ts.get("angle", np.array([]))
    level = ts.get("level", np.array([]))
    ticks = ts.get("tick", np.array([]))
    rounds = [event["round"] for event in events]
    if "round" in ts and ts["round"].size:
        rounds.append(int(ts["round"].max()))
    levels = [event["level"] for event in events]
    if level.size:
        levels.append(int(level.max()))
    max_level = max(levels, default=1)
    attempts = max(
        (
            int(event["details"].get("attempts", 0))
            for event in events
            if isinstance(event["details"], dict)
        ),
        default=0,
    )
    final_score = events[-1]["score"] if events else 0
    max_lift = math.degrees(-float(angle.min())) if angle.size else 0.0
    return SessionSummary(
        ticks=int(ticks.max()) if ticks.size else 0,
        rounds=max(rounds, default=1),
        wins=counts.get("win", 0),
        attempts=attempts,
        max_level=max_level,
        final_score=final_score,
        max_lift_deg=max_lift,
        fastest_win_ticks=fastest_win(events),
        event_counts=counts,
    )


def _mark_wins(ax, events: List[dict]) -> None:
    labelled = False
    for event in events:
        if event["type"] == "win":
            ax.axvline(
                event["tick"],
                color="#2ed18c",
                linestyle="--",
                alpha=0.6,
                label=None if labelled else "Win",
            )
            labelled = True
    if labelled:
        ax.legend()


def plot_angle(fig_dir: Path, ts: Dict[str, np.ndarray], events: List[dict]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["tick"], np.degrees(-ts["angle"]), color="#10b981")
    ax.axhline(90.0, color="#ff007f", alpha=0.4)
    _mark_wins(ax, events)
    ax.set_xlabel("tick")
    ax.set_ylabel("lift [deg]")
    ax.set_title("Bottle lift over time")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "lift.png", dpi=150)
    plt.close(fig)


def plot_base_velocity(fig_dir: Path, ts: Dict[str, np.ndarray], events: List[dict]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["tick"], ts["base_velocity"], color="#00f3ff")
    _mark_wins(ax, events)
    ax.set_xlabel("tick")
    ax.set_ylabel("base velocity [px/tick]")
    ax.set_title("Base slip over time")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "base_velocity.png", dpi=150)
    plt.close(fig)


def plot_rope(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["tick"], ts["rope_swing"], color="#ffee00")
    ax.set_xlabel("tick")
    ax.set_ylabel("rope swing [px]")
    ax.set_title("Rope swing over time")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "rope_swing.png", dpi=150)
    plt.close(fig)


def print_summary(session_dir: Path, summary: SessionSummary) -> None:
    print(f"Session: {session_dir.name}")
    print(f" Ticks: {summary.ticks} over {summary.rounds} round(s)")
    print(f" Wins: {summary.wins} (attempts {summary.attempts})")
    print(f" Highest level: {summary.max_level}")
    print(f" Final score: {summary.final_score}")
    print(f" Highest lift: {summary.max_lift_deg:.1f} deg")
    if summary.fastest_win_ticks is not None:
        print(f" Fastest win: {summary.fastest_win_ticks} ticks")
    else:
        print(" Fastest win: no win recorded")
    print(
        " Events:" + ",".join(f" {etype}: {count}" for etype, count in summary.event_counts.items())
    )


def resolve_session_dir(session: str | None, base_dir: Path = DEFAULT_SESSIONS_DIR) -> Path:
    if session:
        path = Path(session)
        if not path.is_dir():
            path = base_dir / session
        return path
    marker = base_dir / "last_session.txt"
    if not marker.exists():
        raise FileNotFoundError("No session given and last_session.txt is missing")
    return base_dir / marker.read_text(encoding="utf-8").strip()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Analyze a recorded session and write figures.")
    parser.add_argument("session_dir", nargs="?", help="Path to (or id of) a recorded session")
    parser.add_argument("--no-figures", action="store_true", help="Only print the summary")
    args = parser.parse_args(argv)

    try:
        session_path = resolve_session_dir(args.session_dir)
    except FileNotFoundError as exc:
        parser.error(str(exc))

    if not session_path.is_dir():
        parser.error(f"Could not find session directory: {session_path}")

    ts_path = session_path / TIMESERIES_FILENAME
    ev_path = session_path / EVENTS_FILENAME
    if not ts_path.exists() or not ev_path.exists():
        parser.error("Session directory is missing timeseries.csv or events.csv")

    ts = load_timeseries(ts_path)
    events = load_events(ev_path)
    if not ts or ts.get("tick", np.array([])).size == 0:
        parser.error("timeseries.csv is empty, nothing to analyze")

    summary = summarize(ts, events)
    if not args.no_figures:
        fig_dir = ensure_fig_dir(session_path)
        plot_angle(fig_dir, ts, events)
        plot_base_velocity(fig_dir, ts, events)
        plot_rope(fig_dir, ts)

    print_summary(session_path, summary)


if __name__ == "__main__":
    main()
