"""
Scoreboard Builder

Produces one immutable Scoreboard per evaluation request:
judge (summarization + classification) -> MetricScores -> aggregate ->
benchmark -> quality flags -> insights -> history.

The judgments come from an injected Judge, so the aggregation math can run
against synthetic judgments without a live model.
"""

import random
import string
import logging
import time
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Tuple

from config_manager import get_config, get_industry_average, get_max_tokens
from history import PerformanceHistory
from llm_client import gather_all
from prompt import judgment_schema, render_classification_judgment, render_summarization_judgment
from scoreboard_types import (
    DEFAULT_WEIGHTING,
    STRONG_TIERS,
    WEAK_TIERS,
    CriterionSpec,
    MetricScore,
    Scoreboard,
    ScoreboardInput,
    ScoringConfig,
    WeightingScheme,
)
from scoring import (
    aggregate,
    build_section_scores,
    compare_to_benchmark,
    count_tiers,
    detect_quality_flags,
)

logger = logging.getLogger(__name__)

STANDING_RECOMMENDATIONS = (
    "Consider additional legal precedent research",
    "Review factual accuracy against source document",
)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_document_id() -> str:
    """
    Synthetic id: epoch millis plus 9 random base36 characters.

    Collisions are unlikely but possible; the id is not a security token.
    """
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"doc_{int(time.time() * 1000)}_{suffix}"


class Judge:
    """Produces raw per-criterion judgments: {criterion: {score, feedback?, evidence?}}"""

    async def judge_summarization(self, scoreboard_input: ScoreboardInput,
                                  specs: Tuple[CriterionSpec, ...], config: ScoringConfig) -> Any:
        raise NotImplementedError

    async def judge_classification(self, scoreboard_input: ScoreboardInput,
                                   specs: Tuple[CriterionSpec, ...], config: ScoringConfig) -> Any:
        raise NotImplementedError


class LLMJudge(Judge):
    """Judge that asks the completion oracle to grade the analysis"""

    def __init__(self, llm_client):
        self.llm_client = llm_client

    async def judge_summarization(self, scoreboard_input, specs, config):
        prompt = render_summarization_judgment(
            scoreboard_input.document,
            scoreboard_input.analysis.summary.to_dict(),
            specs,
            config,
        )
        return await self.llm_client.complete(
            prompt, judgment_schema(specs),
            get_max_tokens('scoring.max_tokens.summarization_judgment', 2000)
        )

    async def judge_classification(self, scoreboard_input, specs, config):
        prompt = render_classification_judgment(
            scoreboard_input.document,
            scoreboard_input.analysis.classification.to_dict(),
            scoreboard_input.expected_legal_area,
            specs,
            config,
        )
        return await self.llm_client.complete(
            prompt, judgment_schema(specs),
            get_max_tokens('scoring.max_tokens.classification_judgment', 1500)
        )


class AIScoreboardEvaluator:
    """Builds scoreboards and records them into the performance history"""

    def __init__(self, judge: Judge, weighting: Optional[WeightingScheme] = None,
                 history: Optional[PerformanceHistory] = None,
                 industry_average: Optional[float] = None):
        self.judge = judge
        self.weighting = weighting or DEFAULT_WEIGHTING
        self.history = history if history is not None else PerformanceHistory()
        self.industry_average = industry_average if industry_average is not None else get_industry_average()

    async def evaluate_analysis(self, scoreboard_input: ScoreboardInput, record: bool = True) -> Scoreboard:
        """
        Grade one analysis.

        With record=False the caller takes over recording the scoreboard into
        the history once its own reporting has succeeded.

        Raises:
            OracleFailure: a judgment call failed
            MalformedJudgment: a judgment lacks a numeric score
            ConfigurationError: invalid weighting or baseline
        """
        config = scoreboard_input.config or ScoringConfig.from_defaults()
        weighting = self._weighting_for(config)

        raw_summarization, raw_classification = await gather_all(
            self.judge.judge_summarization(scoreboard_input, weighting.summarization, config),
            self.judge.judge_classification(scoreboard_input, weighting.classification, config),
        )

        summarization_scores = build_section_scores(weighting.summarization, raw_summarization)
        classification_scores = build_section_scores(weighting.classification, raw_classification)
        metrics = list(summarization_scores.values()) + list(classification_scores.values())

        overall_score = round(aggregate(metrics), 2)
        strengths, weaknesses, recommendations = self._generate_insights(
            summarization_scores, classification_scores, config
        )

        scoreboard = Scoreboard(
            document_id=generate_document_id(),
            timestamp=datetime.now(timezone.utc).isoformat(),
            overall_score=overall_score,
            summarization_scores=summarization_scores,
            classification_scores=classification_scores,
            aggregate_metrics=count_tiers(metrics),
            quality_flags=detect_quality_flags(
                scoreboard_input.analysis.classification.confidence,
                config.minimum_confidence_threshold,
            ),
            strengths=tuple(strengths),
            weaknesses=tuple(weaknesses),
            recommendations=tuple(recommendations),
            benchmark_comparison=(
                compare_to_benchmark(overall_score, self.industry_average)
                if config.include_comparative_benchmarks else None
            ),
            weighting_version=weighting.version,
            detailed=config.enable_detailed_scoring,
        )

        if record:
            self.history.record(scoreboard)

        logger.info(
            f"Scoreboard {scoreboard.document_id}: {overall_score} ({scoreboard.overall_tier.value}), "
            f"weighting={weighting.version}"
        )
        if get_config().is_decision_logging_enabled('scoreboard'):
            print(f"[SCOREBOARD][RESULT] score={overall_score} tier={scoreboard.overall_tier.value} "
                  f"excellent={scoreboard.aggregate_metrics.excellent_count} "
                  f"poor={scoreboard.aggregate_metrics.poor_count}")
        return scoreboard

    def _weighting_for(self, config: ScoringConfig) -> WeightingScheme:
        if config.custom_weights:
            return self.weighting.with_weights(config.custom_weights)
        return self.weighting

    def _generate_insights(self, summarization_scores: Mapping[str, MetricScore],
                           classification_scores: Mapping[str, MetricScore],
                           config: ScoringConfig) -> Tuple[List[str], List[str], List[str]]:
        metrics = list(summarization_scores.values()) + list(classification_scores.values())

        def _describe(metric: MetricScore) -> str:
            if config.enable_detailed_scoring and metric.feedback:
                return f"{metric.category.value}: {metric.feedback}"
            return metric.category.value

        strengths = [_describe(m) for m in metrics if m.tier in STRONG_TIERS]
        weaknesses = [_describe(m) for m in metrics if m.tier in WEAK_TIERS]

        recommendations: List[str] = []
        for metric in metrics:
            if metric.tier in WEAK_TIERS:
                recommendation = f"Improve {metric.category.value}"
                if recommendation not in recommendations:
                    recommendations.append(recommendation)
        for standing in STANDING_RECOMMENDATIONS:
            if standing.startswith("Consider additional legal precedent") and not config.require_precedent_analysis:
                continue
            recommendations.append(standing)

        return strengths, weaknesses, recommendations


def section_score(scores: Mapping[str, MetricScore]) -> float:
    """Weighted score of a single section"""
    return aggregate(scores.values())

