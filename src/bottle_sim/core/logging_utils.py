"""Logging helpers scoped to the bottle simulator package."""
from __future__ import annotations

import csv
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Final, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .model import SimState
    from .session import SessionEvent

_LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _parse_level(level_str: str | None, default: int) -> int:
    if not level_str:
        return default
    mapping = {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
    }
    return mapping.get(level_str.strip().upper(), default)


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """Return a logger that emits to stderr.

    ``level`` takes precedence, then the ``LOG_LEVEL`` environment variable,
    then INFO.
    """

    chosen_level = level if level is not None else _parse_level(os.environ.get("LOG_LEVEL"), logging.INFO)

    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(chosen_level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(chosen_level)
    logger.propagate = False
    return logger


def set_package_log_level(level_str: str, package: str = "bottle_sim") -> int:
    """Apply ``level_str`` to every logger already created under ``package``."""

    level = _parse_level(level_str, logging.INFO)
    for name in list(logging.root.manager.loggerDict):
        if name != package and not name.startswith(package + "."):
            continue
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
    return level


class _CsvChannel:
    """One buffered CSV file with a fixed header."""

    def __init__(self, path: Path, header: Sequence[str], flush_threshold: int) -> None:
        self.path = path
        self.header = list(header)
        self._file = path.open("w", newline="")
        self._writer = csv.writer(self._file)
        self._writer.writerow(self.header)
        self._buffer: list[list[str]] = []
        self._threshold = max(1, flush_threshold)

    def append(self, row: list[str]) -> None:
        if len(row) != len(self.header):
            raise ValueError(f"{self.path.name} expects {len(self.header)} columns, got {len(row)}")
        self._buffer.append(row)
        if len(self._buffer) >= self._threshold:
            self.flush()

    def flush(self) -> None:
        if self._buffer:
            self._writer.writerows(self._buffer)
            self._file.flush()
            self._buffer.clear()

    def close(self) -> None:
        self.flush()
        self._file.close()


def _number(value: float) -> str:
    return f"{value:.10g}"


class SessionRecorder:
    """Records a play session to ``<root>/<id>/`` as CSV files plus ``meta.json``.

    ``tick`` counts frames integrated over the whole session and ``round``
    counts resets, so both keep increasing after :meth:`GameSession.reset`
    replaces the simulation state.
    """

    TIMESERIES_HEADER = [
        "tick",
        "round",
        "angle",
        "base_x",
        "base_velocity",
        "rope_swing",
        "ring_x",
        "ring_y",
        "dragging",
        "level",
        "friction",
    ]
    EVENTS_HEADER = ["tick", "round", "type", "level", "score", "details"]
    LAST_SESSION_MARKER = "last_session.txt"

    def __init__(
        self,
        root_dir: str | Path = "data/sessions",
        session_id: Optional[str] = None,
        *,
        timeseries_flush_threshold: int = 200,
        events_flush_threshold: int = 20,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self.session_id = self._unique_id(session_id)
        self.session_dir = self.root_dir / self.session_id
        self.session_dir.mkdir(parents=True, exist_ok=False)

        self.timeseries_path = self.session_dir / "timeseries.csv"
        self.events_path = self.session_dir / "events.csv"
        self.meta_path = self.session_dir / "meta.json"

        self._ticks = _CsvChannel(self.timeseries_path, self.TIMESERIES_HEADER, timeseries_flush_threshold)
        self._events = _CsvChannel(self.events_path, self.EVENTS_HEADER, events_flush_threshold)
        self._closed = False

        (self.root_dir / self.LAST_SESSION_MARKER).write_text(self.session_id, encoding="utf-8")

    def _unique_id(self, session_id: Optional[str]) -> str:
        base = session_id or datetime.now().strftime("%Y%m%d_%H%M%S") + "_session"
        candidate = base
        suffix = 1
        while (self.root_dir / candidate).exists():
            candidate = f"{base}_{suffix}" if session_id else f"{base}_{suffix:02d}"
            suffix += 1
        return candidate

    @property
    def closed(self) -> bool:
        return self._closed

    def write_meta(self, meta: dict) -> None:
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump(meta, fh, indent=2, sort_keys=True)

    def record_tick(self, tick: int, round_no: int, state: SimState) -> None:
        self._ticks.append(
            [
                str(tick),
                str(round_no),
                _number(state.angle),
                _number(state.base_x),
                _number(state.base_velocity),
                _number(state.rope_swing),
                _number(state.ring_x),
                _number(state.ring_y),
                "1" if state.is_dragging else "0",
                str(state.level),
                _number(state.friction),
            ]
        )

    def record_event(self, tick: int, round_no: int, event: SessionEvent) -> None:
        self._events.append(
            [
                str(tick),
                str(round_no),
                event.kind,
                str(event.level),
                str(event.score),
                json.dumps(event.details, sort_keys=True),
            ]
        )

    def close(self) -> None:
        if self._closed:
            return
        self._ticks.close()
        self._events.close()
        self._closed = True

    def __enter__(self) -> "SessionRecorder":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


__all__ = ["SessionRecorder", "get_logger", "set_package_log_level"]
