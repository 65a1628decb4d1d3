"""
Scoreboard Aggregation Engine

Turns per-criterion judgments into MetricScores and combines them into the
figures reported on a scoreboard:
1. Tier classification and metric construction
2. Weighted aggregation and per-tier counts
3. Benchmark comparison against a fixed industry baseline
4. Quality flags

Everything here is a pure function of its inputs.
"""

import math
import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from errors import ConfigurationError, MalformedJudgment
from scoreboard_types import (
    AggregateMetrics,
    BenchmarkComparison,
    CriterionSpec,
    MetricScore,
    QualityFlags,
    ScoreCategory,
    ScoreLevel,
    clamp_score,
    classify_tier,
)

logger = logging.getLogger(__name__)

INDUSTRY_AVERAGE = 7.2
PERCENTILE_FLOOR = 1
PERCENTILE_CEILING = 99
LOW_CONFIDENCE_ADVISORY = "Low classification confidence"

__all__ = [
    "INDUSTRY_AVERAGE",
    "LOW_CONFIDENCE_ADVISORY",
    "aggregate",
    "build_section_scores",
    "classify_tier",
    "compare_to_benchmark",
    "count_tiers",
    "create_metric_score",
    "detect_quality_flags",
]


def _coerce_score(criterion: str, value: Any) -> float:
    """Numbers and numeric strings pass; anything else is a malformed judgment"""
    if isinstance(value, bool) or value is None:
        raise MalformedJudgment(criterion, f"score is not numeric: {value!r}")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise MalformedJudgment(criterion, f"score is not numeric: {value!r}") from None
    else:
        raise MalformedJudgment(criterion, f"score is not numeric: {value!r}")

    if math.isnan(number):
        raise MalformedJudgment(criterion, "score is NaN")
    return number


def create_metric_score(category: ScoreCategory, raw: Any, weight: float,
                        criterion: str = "") -> MetricScore:
    """
    Build a MetricScore from one raw judgment.

    Args:
        category: Category tag of the criterion
        raw: Judgment object {"score": number, "feedback"?: str, "evidence"?: [str]}
        weight: Weight of the criterion in the overall score
        criterion: Criterion name, used in error messages

    Returns:
        MetricScore with the score clamped into [0, 10]

    Raises:
        MalformedJudgment: judgment is not an object, or its score is missing or not numeric
    """
    name = criterion or category.value
    if not isinstance(raw, Mapping):
        raise MalformedJudgment(name, f"expected a judgment object, got {type(raw).__name__}")
    if "score" not in raw:
        raise MalformedJudgment(name, "judgment has no score")

    score = _coerce_score(name, raw["score"])
    if not 0.0 <= score <= 10.0:
        logger.warning(f"Clamping out-of-range score for {name}: {score}")

    feedback = raw.get("feedback") or ""
    evidence = raw.get("evidence") or []
    if isinstance(evidence, str):
        evidence = [evidence]

    return MetricScore(
        category=category,
        score=clamp_score(score),
        weight=weight,
        feedback=str(feedback),
        evidence=tuple(str(item) for item in evidence),
    )


def build_section_scores(specs: Sequence[CriterionSpec], raw_scores: Any) -> Dict[str, MetricScore]:
    """Convert one section of raw judgments (criterion name -> judgment) into MetricScores"""
    if not isinstance(raw_scores, Mapping):
        raise MalformedJudgment("response", f"expected an object of judgments, got {type(raw_scores).__name__}")

    section = {}
    for spec in specs:
        if spec.name not in raw_scores:
            raise MalformedJudgment(spec.name, "criterion missing from judgment response")
        section[spec.name] = create_metric_score(spec.category, raw_scores[spec.name], spec.weight, spec.name)
    return section


def aggregate(metrics: Iterable[MetricScore]) -> float:
    """
    Weighted mean of the metric scores, using each metric's own weight.

    Raises:
        ConfigurationError: empty metric set or zero total weight
    """
    metrics = list(metrics)
    total_weight = math.fsum(metric.weight for metric in metrics)
    if not metrics or total_weight <= 0:
        raise ConfigurationError("Cannot aggregate an empty or zero-weight metric set")

    weighted_sum = math.fsum(metric.score * metric.weight for metric in metrics)
    return clamp_score(weighted_sum / total_weight)


def count_tiers(metrics: Iterable[MetricScore]) -> AggregateMetrics:
    """Tally metrics per tier; the counts always add up to the total"""
    counts = {level: 0 for level in ScoreLevel}
    total = 0
    for metric in metrics:
        counts[metric.tier] += 1
        total += 1

    return AggregateMetrics(
        total_metrics=total,
        excellent_count=counts[ScoreLevel.EXCELLENT],
        good_count=counts[ScoreLevel.GOOD],
        satisfactory_count=counts[ScoreLevel.SATISFACTORY],
        needs_improvement_count=counts[ScoreLevel.NEEDS_IMPROVEMENT],
        poor_count=counts[ScoreLevel.POOR],
    )


def compare_to_benchmark(overall_score: float, baseline: float = INDUSTRY_AVERAGE) -> BenchmarkComparison:
    """
    Compare an overall score with the industry baseline.

    A score equal to the baseline is reported as "below average".
    """
    if baseline <= 0:
        raise ConfigurationError(f"Benchmark baseline must be positive, got {baseline}")

    percent_above = (overall_score - baseline) / baseline * 100
    percentile = int(round(overall_score / 10 * 100))
    percentile = min(PERCENTILE_CEILING, max(PERCENTILE_FLOOR, percentile))
    label = "above average" if overall_score > baseline else "below average"

    return BenchmarkComparison(
        percent_above_average=round(percent_above, 2),
        percentile=percentile,
        label=label,
        baseline=baseline,
    )


def detect_quality_flags(confidence: float, threshold: float) -> QualityFlags:
    """Only confidence issues are detected; the other categories stay empty"""
    confidence_issues: List[str] = []
    if confidence < threshold:
        confidence_issues.append(LOW_CONFIDENCE_ADVISORY)
    return QualityFlags(confidence_issues=tuple(confidence_issues))
