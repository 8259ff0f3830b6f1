"""Best-score persistence behind a tiny get/set capability."""
from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Protocol

from .logging_utils import get_logger

logger = get_logger(__name__)

BEST_SCORE_KEY = "best_score"


class BestScoreStore(Protocol):
    def load(self) -> int: ...

    def save(self, score: int) -> None: ...


class MemoryBestScoreStore:
    """Keeps the best score in memory only."""

    def __init__(self, best_score: int = 0) -> None:
        self.best_score = best_score
        self.saves = 0

    def load(self) -> int:
        return self.best_score

    def save(self, score: int) -> None:
        self.best_score = int(score)
        self.saves += 1


class JsonBestScoreStore:
    """Stores the best score as ``{"best_score": n}`` in a JSON file."""

    def __init__(self, path: str | Path = "data/best_score.json") -> None:
        self.path = Path(path)

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                payload = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read best score from %s: %s", self.path, exc)
            return 0
        value = payload.get(BEST_SCORE_KEY, 0) if isinstance(payload, dict) else 0
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or (isinstance(value, float) and not math.isfinite(value))
        ):
            logger.warning("Ignoring malformed best score %r in %s", value, self.path)
            return 0
        return max(0, int(value))

    def save(self, score: int) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as fh:
                json.dump({BEST_SCORE_KEY: int(score)}, fh)
        except OSError as exc:
            logger.warning("Could not write best score to %s: %s", self.path, exc)


__all__ = [
    "BEST_SCORE_KEY",
    "BestScoreStore",
    "JsonBestScoreStore",
    "MemoryBestScoreStore",
]
