"""
Tests for the scoreboard builder, driven by static judgments.
"""

import asyncio
import re

import pytest

from errors import ConfigurationError, MalformedJudgment, OracleFailure
from history import PerformanceHistory
from scoreboard import AIScoreboardEvaluator, Judge, LLMJudge, generate_document_id, section_score
from scoreboard_types import (
    DEFAULT_WEIGHTING,
    MetricScore,
    ScoreLevel,
    ScoreboardInput,
    ScoringConfig,
)
from scoring import LOW_CONFIDENCE_ADVISORY


def _evaluate(evaluator, scoreboard_input):
    return asyncio.run(evaluator.evaluate_analysis(scoreboard_input))


@pytest.fixture
def make_evaluator(static_judge):
    def _make(judge=None, history=None, **kwargs):
        return AIScoreboardEvaluator(
            judge or static_judge(),
            history=history or PerformanceHistory(max_entries=10),
            **kwargs,
        )
    return _make


@pytest.fixture
def make_input(document, make_analysis):
    def _make(confidence=0.92, config=None, expected=None):
        return ScoreboardInput(
            document=document,
            analysis=make_analysis(confidence=confidence),
            expected_legal_area=expected,
            config=config,
        )
    return _make


class TestEvaluateAnalysis:

    def test_all_nines_scenario(self, make_evaluator, make_input):
        scoreboard = _evaluate(make_evaluator(), make_input())

        assert scoreboard.overall_score == 9.0
        assert scoreboard.overall_tier is ScoreLevel.EXCELLENT
        assert scoreboard.aggregate_metrics.total_metrics == 14
        assert scoreboard.aggregate_metrics.excellent_count == 14
        assert scoreboard.aggregate_metrics.counted == 14
        assert len(scoreboard.summarization_scores) == 8
        assert len(scoreboard.classification_scores) == 6
        assert scoreboard.weighting_version == "2024.1"

    def test_benchmark_for_all_nines(self, make_evaluator, make_input):
        comparison = _evaluate(make_evaluator(), make_input()).benchmark_comparison
        assert comparison.label == "above average"
        assert comparison.percentile == 90
        assert comparison.percent_above_average == pytest.approx(25.0)

    def test_out_of_range_score_clamped(self, make_evaluator, make_input, static_judge, judgments):
        judge = static_judge(summarization=judgments(
            DEFAULT_WEIGHTING.summarization, overrides={"factualAccuracy": 15}
        ))
        scoreboard = _evaluate(make_evaluator(judge), make_input())
        metric = scoreboard.summarization_scores["factualAccuracy"]
        assert metric.score == 10.0
        assert metric.tier is ScoreLevel.EXCELLENT

    def test_low_confidence_flag(self, make_evaluator, make_input):
        config = ScoringConfig(minimum_confidence_threshold=0.6)
        scoreboard = _evaluate(make_evaluator(), make_input(confidence=0.5, config=config))
        assert scoreboard.quality_flags.confidence_issues == (LOW_CONFIDENCE_ADVISORY,)

    def test_confident_classification_not_flagged(self, make_evaluator, make_input):
        scoreboard = _evaluate(make_evaluator(), make_input(confidence=0.9))
        assert scoreboard.quality_flags.confidence_issues == ()

    def test_missing_score_is_malformed(self, make_evaluator, make_input, static_judge, judgments):
        judge = static_judge(classification=judgments(
            DEFAULT_WEIGHTING.classification, overrides={"reasoningQuality": {"feedback": "no score"}}
        ))
        evaluator = make_evaluator(judge)
        with pytest.raises(MalformedJudgment) as exc_info:
            _evaluate(evaluator, make_input())
        assert exc_info.value.criterion == "reasoningQuality"
        assert len(evaluator.history) == 0

    def test_benchmarks_can_be_disabled(self, make_evaluator, make_input):
        config = ScoringConfig(include_comparative_benchmarks=False)
        scoreboard = _evaluate(make_evaluator(), make_input(config=config))
        assert scoreboard.benchmark_comparison is None
        assert scoreboard.to_dict()["benchmarkComparison"] is None

    def test_summary_detail_can_be_disabled(self, make_evaluator, make_input):
        config = ScoringConfig(enable_detailed_scoring=False)
        data = _evaluate(make_evaluator(), make_input(config=config)).to_dict()
        metric = data["summarizationScores"]["clarity"]
        assert set(metric) == {"category", "score", "tier", "weight"}
        assert data["strengths"][0] == "accuracy"

    def test_custom_weights(self, make_evaluator, make_input, static_judge, judgments):
        judge = static_judge(summarization=judgments(
            DEFAULT_WEIGHTING.summarization, overrides={"clarity": 0.0}
        ))
        default = _evaluate(make_evaluator(judge), make_input())
        heavier = _evaluate(
            make_evaluator(judge),
            make_input(config=ScoringConfig(custom_weights={"clarity": 1.0})),
        )
        assert heavier.overall_score < default.overall_score
        assert heavier.summarization_scores["clarity"].weight == 1.0
        assert heavier.weighting_version == "2024.1+custom"

    def test_unknown_custom_weight(self, make_evaluator, make_input):
        config = ScoringConfig(custom_weights={"eloquence": 0.5})
        with pytest.raises(ConfigurationError):
            _evaluate(make_evaluator(), make_input(config=config))

    def test_config_passed_to_judge(self, make_evaluator, make_input, static_judge):
        judge = static_judge()
        config = ScoringConfig(strict_accuracy_mode=True)
        _evaluate(make_evaluator(judge), make_input(config=config))
        assert {kind for kind, _ in judge.calls} == {"summarization", "classification"}
        assert all(call_config is config for _, call_config in judge.calls)

    def test_records_history(self, make_evaluator, make_input):
        evaluator = make_evaluator()
        first = _evaluate(evaluator, make_input())
        second = _evaluate(evaluator, make_input())
        assert [entry.document_id for entry in evaluator.history] == [first.document_id, second.document_id]

    def test_recording_can_be_deferred(self, make_evaluator, make_input):
        evaluator = make_evaluator()
        scoreboard = asyncio.run(evaluator.evaluate_analysis(make_input(), record=False))
        assert scoreboard.overall_score == 9.0
        assert len(evaluator.history) == 0

    def test_scoreboard_is_read_only(self, make_evaluator, make_input):
        scoreboard = _evaluate(make_evaluator(), make_input())
        with pytest.raises(TypeError):
            scoreboard.summarization_scores["clarity"] = None


class TestInsights:

    def test_strengths_weaknesses_and_recommendations(self, make_evaluator, make_input,
                                                      static_judge, judgments):
        judge = static_judge(
            summarization=judgments(DEFAULT_WEIGHTING.summarization, overrides={
                "clarity": {"score": 3, "feedback": "rambling"},
                "completeness": {"score": 5, "feedback": "misses remedies"},
            }),
            classification=judgments(DEFAULT_WEIGHTING.classification, overrides={
                "legalAreaCoverage": {"score": 4.5, "feedback": "omits property"},
            }),
        )
        scoreboard = _evaluate(make_evaluator(judge), make_input())

        assert "clarity: rambling" in scoreboard.weaknesses
        assert "completeness: misses remedies" in scoreboard.weaknesses
        assert len(scoreboard.weaknesses) == 3
        assert len(scoreboard.strengths) == 11
        # completeness appears twice among the weak metrics but is recommended once
        assert scoreboard.recommendations.count("Improve completeness") == 1
        assert "Improve clarity" in scoreboard.recommendations
        assert scoreboard.recommendations[-1] == "Review factual accuracy against source document"
        assert "Consider additional legal precedent research" in scoreboard.recommendations

    def test_precedent_recommendation_follows_config(self, make_evaluator, make_input):
        config = ScoringConfig(require_precedent_analysis=False)
        scoreboard = _evaluate(make_evaluator(), make_input(config=config))
        assert "Consider additional legal precedent research" not in scoreboard.recommendations
        assert scoreboard.recommendations == ("Review factual accuracy against source document",)


class TestLLMJudge:

    def test_judge_prompts_and_budgets(self, make_input, oracle):
        scripted = oracle()
        evaluator = AIScoreboardEvaluator(LLMJudge(scripted), history=PerformanceHistory(max_entries=5))
        config = ScoringConfig(strict_accuracy_mode=True)
        scoreboard = _evaluate(evaluator, make_input(config=config, expected="Contract Law"))

        assert scoreboard.overall_score == 9.0
        prompts = {kind: (prompt, budget) for kind, prompt, budget in scripted.prompts}
        summarization_prompt, summarization_budget = prompts["summarization_judgment"]
        classification_prompt, classification_budget = prompts["classification_judgment"]
        assert summarization_budget == 2000
        assert classification_budget == 1500
        assert "Strict accuracy mode" in summarization_prompt
        assert "Precedent analysis is required" in summarization_prompt
        assert "Expected Legal Area: Contract Law" in classification_prompt
        assert "factualAccuracy" in summarization_prompt

    def test_oracle_failure_propagates(self, make_input, oracle):
        scripted = oracle(classification_judgments=OracleFailure("upstream down", status_code=503))
        evaluator = AIScoreboardEvaluator(LLMJudge(scripted), history=PerformanceHistory(max_entries=5))
        with pytest.raises(OracleFailure) as exc_info:
            _evaluate(evaluator, make_input())
        assert exc_info.value.status_code == 503
        assert len(evaluator.history) == 0


def test_document_id_format():
    doc_id = generate_document_id()
    assert re.fullmatch(r"doc_\d{13,}_[0-9a-z]{9}", doc_id)


def test_section_score():
    metrics = {
        spec.name: MetricScore(spec.category, 8.0, spec.weight) for spec in DEFAULT_WEIGHTING.classification
    }
    assert section_score(metrics) == pytest.approx(8.0)


class _HalfFailingJudge(Judge):
    """Classification fails at once while summarization is still in flight"""

    def __init__(self):
        self.summarization_cancelled = False

    async def judge_summarization(self, scoreboard_input, specs, config):
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.summarization_cancelled = True
            raise

    async def judge_classification(self, scoreboard_input, specs, config):
        raise OracleFailure("upstream down", status_code=503)


def test_failed_judgment_cancels_sibling(make_evaluator, make_input):
    judge = _HalfFailingJudge()
    evaluator = make_evaluator(judge)

    async def _run():
        with pytest.raises(OracleFailure):
            await evaluator.evaluate_analysis(make_input())
        return judge.summarization_cancelled

    assert asyncio.run(_run()) is True
    assert len(evaluator.history) == 0


class TestScoringConfigDefaults:

    def test_snake_case_override(self):
        config = ScoringConfig.from_defaults({"minimum_confidence_threshold": 0.9})
        assert config.minimum_confidence_threshold == 0.9
        assert config.require_precedent_analysis is True

    def test_alias_override(self):
        config = ScoringConfig.from_defaults({"includeComparativeBenchmarks": False})
        assert config.include_comparative_benchmarks is False
        assert config.minimum_confidence_threshold == 0.6

    def test_custom_weights_by_field_name(self):
        config = ScoringConfig.from_defaults({"custom_weights": {"clarity": 0.3}})
        assert config.custom_weights == {"clarity": 0.3}
