# history.py
"""
In-memory performance history.

Keeps the most recent scoreboards for the lifetime of the process in a bounded
ring buffer (oldest evicted first) and derives trend figures from them.
Entries are appended in the order evaluations complete. Trend figures for a
new evaluation are computed against the entries recorded before it.
"""

import uuid
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, Iterator, List, Optional

from config_manager import get_history_capacity
from errors import ConfigurationError
from scoreboard_types import (
    STRONG_TIERS,
    WEAK_TIERS,
    ScoreCategory,
    ScoreLevel,
    Scoreboard,
    classify_tier,
)

logger = logging.getLogger(__name__)

TREND_THRESHOLD = 0.05
TREND_WINDOW = 3


class TrendDirection(Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


@dataclass
class PerformanceSummary:
    """Snapshot of the history for reporting"""
    session_id: str
    analysis_count: int
    average_score: float
    score_distribution: Dict[str, int]
    improvement_trend: float          # relative change over the trend window; > 0 means improving
    trend_direction: TrendDirection
    problem_areas: List[str] = field(default_factory=list)
    best_performing_areas: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "sessionId": self.session_id,
            "analysisCount": self.analysis_count,
            "averageScore": self.average_score,
            "scoreDistribution": dict(self.score_distribution),
            "improvementTrend": self.improvement_trend,
            "trendDirection": self.trend_direction.value,
            "problemAreas": list(self.problem_areas),
            "bestPerformingAreas": list(self.best_performing_areas),
        }


def _relative_change(current: float, previous: float) -> float:
    # a zero baseline has no relative change; report it as flat
    if previous == 0:
        logger.warning("Previous overall score is 0; treating relative change as 0")
        return 0.0
    return (current - previous) / previous


class PerformanceHistory:
    """Bounded, append-only record of past scoreboards"""

    def __init__(self, max_entries: Optional[int] = None):
        capacity = max_entries if max_entries is not None else get_history_capacity()
        if capacity < TREND_WINDOW:
            raise ConfigurationError(f"History must keep at least {TREND_WINDOW} entries, got {capacity}")
        self.session_id = uuid.uuid4().hex
        self._entries: Deque[Scoreboard] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Scoreboard]:
        return iter(list(self._entries))

    def record(self, scoreboard: Scoreboard):
        if len(self._entries) == self._entries.maxlen:
            logger.debug(f"History full ({self.capacity}), evicting {self._entries[0].document_id}")
        self._entries.append(scoreboard)

    def scores(self) -> List[float]:
        return [entry.overall_score for entry in self._entries]

    def percent_change(self, current: float) -> float:
        """
        Percent change of a not-yet-recorded score against the latest entry.

        Returns 0 until at least two earlier evaluations are on record.
        """
        if len(self._entries) < 2:
            return 0.0
        previous = self._entries[-1].overall_score
        return _relative_change(current, previous) * 100

    def trend_direction(self, current: Optional[float] = None) -> TrendDirection:
        """Direction over the last three scores, with `current` appended when given"""
        scores = self.scores()
        if current is not None:
            scores.append(current)
        if len(scores) < TREND_WINDOW:
            return TrendDirection.STABLE

        trend = self._window_change(scores)
        if trend > TREND_THRESHOLD:
            return TrendDirection.IMPROVING
        if trend < -TREND_THRESHOLD:
            return TrendDirection.DECLINING
        return TrendDirection.STABLE

    @staticmethod
    def _window_change(scores: List[float]) -> float:
        recent = scores[-TREND_WINDOW:]
        return _relative_change(recent[-1], recent[0])

    def summary(self) -> PerformanceSummary:
        scores = self.scores()
        distribution = {level.value: 0 for level in ScoreLevel}
        for entry in self._entries:
            distribution[entry.overall_tier.value] += 1

        category_scores: Dict[ScoreCategory, List[float]] = {}
        for entry in self._entries:
            for metric in entry.all_metrics():
                category_scores.setdefault(metric.category, []).append(metric.score)
        category_means = {
            category: sum(values) / len(values) for category, values in category_scores.items()
        }

        return PerformanceSummary(
            session_id=self.session_id,
            analysis_count=len(scores),
            average_score=round(sum(scores) / len(scores), 2) if scores else 0.0,
            score_distribution=distribution,
            improvement_trend=round(self._window_change(scores), 4) if len(scores) >= TREND_WINDOW else 0.0,
            trend_direction=self.trend_direction(),
            problem_areas=sorted(c.value for c, mean in category_means.items() if classify_tier(mean) in WEAK_TIERS),
            best_performing_areas=sorted(c.value for c, mean in category_means.items() if classify_tier(mean) in STRONG_TIERS),
        )
