import json
import logging
from typing import Iterable, List

from .domain import RunResult, StatsSummary


class StatsStore:
    """Run history persisted as one JSON array under a single key.

    A missing or unreadable payload is treated as an empty history; it is
    logged and then overwritten by the next write.
    """

    def __init__(self, storage, key: str = 'stats', logger=None):
        self.storage = storage
        self.key = key
        self.logger = logger or logging.getLogger(__name__)
        self._history: List[RunResult] = []

    @property
    def history(self) -> List[RunResult]:
        return list(self._history)

    def load(self) -> List[RunResult]:
        raw = self.storage.get(self.key)
        history: List[RunResult] = []
        if raw:
            try:
                payload = json.loads(raw)
                if not isinstance(payload, list):
                    raise ValueError(f"expected a list, got {type(payload).__name__}")
                history = [RunResult.from_dict(entry) for entry in payload]
            except (ValueError, KeyError, TypeError) as exc:
                self.logger.warning(f"[stats-load] key={self.key} unreadable payload, starting empty: {exc}")
                history = []
        self._history = history
        self.logger.info(f"[stats-load] key={self.key} runs={len(history)}")
        return self.history

    def append(self, result: RunResult) -> List[RunResult]:
        history = self._history + [result]
        self._save(history)
        self._history = history
        return self.history

    def clear(self) -> None:
        self._save([])
        self._history = []
        self.logger.info(f"[stats-reset] key={self.key}")

    def summary(self) -> StatsSummary:
        return aggregate(self._history)

    def _save(self, history: List[RunResult]) -> None:
        self.storage.set(self.key, json.dumps([run.to_dict() for run in history]))


def aggregate(history: Iterable[RunResult]) -> StatsSummary:
    """Totals across runs; percentage is None when nothing was attempted."""
    runs = list(history)
    correct_total = sum(run.correct for run in runs)
    attempted_total = sum(run.total for run in runs)
    percentage = None
    if attempted_total:
        percentage = f"{correct_total * 100 / attempted_total:.2f}"
    return StatsSummary(
        correct_total=correct_total,
        attempted_total=attempted_total,
        runs=len(runs),
        percentage=percentage,
    )
