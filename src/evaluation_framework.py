"""
Evaluation Framework

Runs the full pipeline for one or many documents:
analysis -> scoreboard -> performance insights -> improvement recommendations.

Batch runs are sequential so the history sees evaluations in submission order.
"""

import re
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from config_manager import get_config, get_industry_average, get_max_tokens
from errors import OracleFailure
from history import PerformanceHistory, PerformanceSummary, TrendDirection
from legal_analyzer import LegalAnalyzer
from legal_types import AnalysisResult, LegalDocument
from prompt import RECOMMENDATIONS_SCHEMA, render_recommendations_prompt
from scoreboard import AIScoreboardEvaluator, LLMJudge, section_score
from scoreboard_types import (
    GRADE_DESCRIPTIONS,
    STRONG_TIERS,
    WEAK_TIERS,
    ScoreLevel,
    Scoreboard,
    ScoreboardInput,
    ScoringConfig,
    classify_tier,
)

logger = logging.getLogger(__name__)

LEGAL_TERMS = (
    'plaintiff', 'defendant', 'appellant', 'appellee', 'motion', 'brief', 'holding',
    'precedent', 'jurisdiction', 'statute', 'regulation', 'constitutional', 'tort',
    'contract', 'breach', 'damages', 'liability', 'negligence', 'fraud', 'remedy',
)

UNCERTAINTY_THRESHOLD = 0.7
UNCERTAINTY_ADVISORY = "Primary classification confidence below threshold"
TOP_AREAS_LIMIT = 3

_SENTENCE_SPLIT = re.compile(r'[.!?]+')


@dataclass
class ConfidenceAnalysis:
    average_confidence: float
    reliability_score: int
    uncertainty_areas: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "averageConfidence": self.average_confidence,
            "reliabilityScore": self.reliability_score,
            "uncertaintyAreas": list(self.uncertainty_areas),
        }


@dataclass
class PerformanceInsights:
    overall_grade: str
    score_breakdown: Dict[str, float]
    strength_areas: List[str]
    improvement_areas: List[str]
    percentage_improvement: float
    trend_direction: TrendDirection
    confidence_analysis: ConfidenceAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overallGrade": self.overall_grade,
            "scoreBreakdown": dict(self.score_breakdown),
            "strengthAreas": list(self.strength_areas),
            "improvementAreas": list(self.improvement_areas),
            "comparisonToBaseline": {
                "percentageImprovement": self.percentage_improvement,
                "trendDirection": self.trend_direction.value,
            },
            "confidenceAnalysis": self.confidence_analysis.to_dict(),
        }


@dataclass
class ImprovementRecommendations:
    immediate_actions: List[str] = field(default_factory=list)
    long_term_improvements: List[str] = field(default_factory=list)
    training_focus: List[str] = field(default_factory=list)
    technical_optimizations: List[str] = field(default_factory=list)
    quality_assurance: List[str] = field(default_factory=list)

    _WIRE_NAMES = {
        "immediate_actions": "immediateActions",
        "long_term_improvements": "longTermImprovements",
        "training_focus": "trainingFocus",
        "technical_optimizations": "technicalOptimizations",
        "quality_assurance": "qualityAssurance",
    }

    @classmethod
    def from_dict(cls, data: Any) -> "ImprovementRecommendations":
        """Build from the model's JSON; missing categories become empty lists"""
        if not isinstance(data, dict):
            raise OracleFailure(f"Recommendations response must be an object, got {type(data).__name__}")

        values = {}
        for attr, wire in cls._WIRE_NAMES.items():
            items = data.get(wire, data.get(attr)) or []
            if isinstance(items, str):
                items = [items]
            values[attr] = [str(item) for item in items]
        return cls(**values)

    def to_dict(self) -> Dict[str, List[str]]:
        return {wire: list(getattr(self, attr)) for attr, wire in self._WIRE_NAMES.items()}


@dataclass
class EvaluationReport:
    document_id: str
    timestamp: str
    complexity: str
    original_analysis: AnalysisResult
    scoreboard: Scoreboard
    performance_insights: PerformanceInsights
    recommended_improvements: ImprovementRecommendations

    def to_dict(self) -> Dict[str, Any]:
        return {
            "documentId": self.document_id,
            "timestamp": self.timestamp,
            "complexity": self.complexity,
            "originalAnalysis": self.original_analysis.to_dict(),
            "scoreboard": self.scoreboard.to_dict(),
            "performanceInsights": self.performance_insights.to_dict(),
            "recommendedImprovements": self.recommended_improvements.to_dict(),
        }


@dataclass
class EvaluationItem:
    """One document of a batch, with the legal area it is expected to fall under"""
    document: LegalDocument
    expected_legal_area: Optional[str] = None


@dataclass
class AggregateEvaluationAnalysis:
    total_documents: int
    average_score: float
    grade_distribution: Dict[str, int]
    top_performing_areas: List[str]
    common_weaknesses: List[str]
    recommended_system_improvements: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalDocuments": self.total_documents,
            "averageScore": self.average_score,
            "gradeDistribution": dict(self.grade_distribution),
            "topPerformingAreas": list(self.top_performing_areas),
            "commonWeaknesses": list(self.common_weaknesses),
            "recommendedSystemImprovements": list(self.recommended_system_improvements),
        }


@dataclass
class BatchEvaluationResult:
    individual_reports: List[EvaluationReport]
    aggregate_analysis: AggregateEvaluationAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return {
            "individualReports": [report.to_dict() for report in self.individual_reports],
            "aggregateAnalysis": self.aggregate_analysis.to_dict(),
        }


def _count_legal_terms(content: str) -> int:
    words = set(content.lower().split())
    return sum(1 for term in LEGAL_TERMS if term in words)


def _sentence_complexity(content: str) -> float:
    """Average words per sentence normalized to [0, 1]; 30+ words counts as fully complex"""
    sentences = [s for s in _SENTENCE_SPLIT.split(content) if s.strip()]
    if not sentences:
        return 0.0
    average_words = sum(len(s.split()) for s in sentences) / len(sentences)
    return min(1.0, average_words / 30)


def assess_document_complexity(document: LegalDocument) -> str:
    """Rate a document 'simple', 'moderate' or 'complex'"""
    content = document.content
    points = 0

    if len(content) > 5000:
        points += 2
    elif len(content) > 2000:
        points += 1

    terms = _count_legal_terms(content)
    if terms > 20:
        points += 2
    elif terms > 10:
        points += 1

    sentence_complexity = _sentence_complexity(content)
    if sentence_complexity > 0.7:
        points += 2
    elif sentence_complexity > 0.5:
        points += 1

    if points >= 5:
        return "complex"
    if points >= 3:
        return "moderate"
    return "simple"


def reliability_score(confidence: float) -> int:
    if confidence > 0.8:
        return 9
    if confidence > 0.6:
        return 7
    return 5


class LegalAnalysisEvaluationFramework:
    """Sequences analysis, scoring and reporting over a shared performance history"""

    def __init__(self, llm_client, analyzer: Optional[LegalAnalyzer] = None,
                 evaluator: Optional[AIScoreboardEvaluator] = None,
                 history: Optional[PerformanceHistory] = None):
        self.llm_client = llm_client
        self.analyzer = analyzer or LegalAnalyzer(llm_client)
        if evaluator is None:
            evaluator = AIScoreboardEvaluator(LLMJudge(llm_client), history=history)
        self.evaluator = evaluator
        self.cfg = get_config()

    @property
    def history(self) -> PerformanceHistory:
        return self.evaluator.history

    async def run_comprehensive_evaluation(self, document: LegalDocument,
                                           expected_legal_area: Optional[str] = None,
                                           config: Optional[ScoringConfig] = None) -> EvaluationReport:
        complexity = assess_document_complexity(document)
        logger.info(f"Evaluating document '{document.title or 'untitled'}' (complexity={complexity})")

        analysis = await self.analyzer.analyze_document_full(document)

        scoreboard = await self.evaluator.evaluate_analysis(ScoreboardInput(
            document=document,
            analysis=analysis,
            expected_legal_area=expected_legal_area,
            complexity=complexity,
            config=config,
        ), record=False)

        insights = self.generate_performance_insights(analysis, scoreboard)
        recommendations = await self.generate_improvement_recommendations(scoreboard)

        if self.cfg.is_decision_logging_enabled('evaluation'):
            print(f"[EVAL][REPORT] {scoreboard.document_id} grade={insights.overall_grade} "
                  f"trend={insights.trend_direction.value}")

        report = EvaluationReport(
            document_id=scoreboard.document_id,
            timestamp=datetime.now(timezone.utc).isoformat(),
            complexity=complexity,
            original_analysis=analysis,
            scoreboard=scoreboard,
            performance_insights=insights,
            recommended_improvements=recommendations,
        )
        self.history.record(scoreboard)
        return report

    async def batch_evaluation(self, items: Sequence[EvaluationItem],
                               config: Optional[ScoringConfig] = None) -> BatchEvaluationResult:
        """Evaluate each item in order; the first failure aborts the batch"""
        reports = []
        for index, item in enumerate(items, 1):
            logger.info(f"Batch evaluation {index}/{len(items)}")
            reports.append(await self.run_comprehensive_evaluation(
                item.document, item.expected_legal_area, config
            ))
        return BatchEvaluationResult(
            individual_reports=reports,
            aggregate_analysis=self.generate_aggregate_analysis(reports),
        )

    def generate_performance_insights(self, analysis: AnalysisResult,
                                      scoreboard: Scoreboard) -> PerformanceInsights:
        """Insights for a scoreboard that has not been recorded into the history yet"""
        confidence = analysis.classification.confidence
        uncertainty = [UNCERTAINTY_ADVISORY] if confidence < UNCERTAINTY_THRESHOLD else []

        return PerformanceInsights(
            overall_grade=GRADE_DESCRIPTIONS[scoreboard.overall_tier],
            score_breakdown={
                "summarization": round(section_score(scoreboard.summarization_scores), 2),
                "classification": round(section_score(scoreboard.classification_scores), 2),
                "overall": scoreboard.overall_score,
            },
            strength_areas=list(scoreboard.strengths),
            improvement_areas=list(scoreboard.weaknesses),
            percentage_improvement=round(self.history.percent_change(scoreboard.overall_score), 2),
            trend_direction=self.history.trend_direction(scoreboard.overall_score),
            confidence_analysis=ConfidenceAnalysis(
                average_confidence=confidence,
                reliability_score=reliability_score(confidence),
                uncertainty_areas=uncertainty,
            ),
        )

    async def generate_improvement_recommendations(self, scoreboard: Scoreboard) -> ImprovementRecommendations:
        prompt = render_recommendations_prompt(
            scoreboard.overall_score,
            scoreboard.overall_tier.value,
            scoreboard.weaknesses,
            scoreboard.quality_flags.to_dict(),
        )
        raw = await self.llm_client.complete(
            prompt, RECOMMENDATIONS_SCHEMA, get_max_tokens('scoring.max_tokens.recommendations', 1500)
        )
        return ImprovementRecommendations.from_dict(raw)

    def generate_aggregate_analysis(self, reports: Sequence[EvaluationReport]) -> AggregateEvaluationAnalysis:
        distribution = {level.value: 0 for level in ScoreLevel}
        for report in reports:
            distribution[report.scoreboard.overall_tier.value] += 1

        scores = [report.scoreboard.overall_score for report in reports]
        average = round(sum(scores) / len(scores), 2) if scores else 0.0

        criterion_scores: Dict[str, List[float]] = {}
        weak_counts: Dict[str, int] = {}
        for report in reports:
            for name, metric in report.scoreboard.iter_metrics():
                criterion_scores.setdefault(name, []).append(metric.score)
                if metric.tier in WEAK_TIERS:
                    weak_counts[name] = weak_counts.get(name, 0) + 1
        means = {name: sum(values) / len(values) for name, values in criterion_scores.items()}

        top = sorted(
            (name for name, mean in means.items() if classify_tier(mean) in STRONG_TIERS),
            key=lambda name: (-means[name], name),
        )[:TOP_AREAS_LIMIT]

        # weak in at least half of the reports
        common = sorted(
            (name for name, count in weak_counts.items() if count * 2 >= len(reports)),
            key=lambda name: (-weak_counts[name], means[name], name),
        )

        return AggregateEvaluationAnalysis(
            total_documents=len(reports),
            average_score=average,
            grade_distribution=distribution,
            top_performing_areas=top,
            common_weaknesses=common,
            recommended_system_improvements=self._system_recommendations(common, average, bool(reports)),
        )

    @staticmethod
    def _system_recommendations(common_weaknesses: List[str], average: float, has_reports: bool) -> List[str]:
        recommendations = [f"Strengthen {name} across all analyses" for name in common_weaknesses]
        if has_reports and average <= get_industry_average():
            recommendations.append("Raise overall analysis quality above the industry average")
        return recommendations

    def performance_summary(self) -> PerformanceSummary:
        return self.history.summary()
