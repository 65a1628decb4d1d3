"""
Scoreboard data model.

Covers the scoring enums, the tier thresholds, the versioned weighting scheme,
per-criterion MetricScore records, the immutable Scoreboard and the scoring
options accepted from callers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Dict, Iterator, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from config_manager import get_scoring_defaults
from errors import ConfigurationError
from legal_types import AnalysisResult, LegalDocument


class ScoreCategory(Enum):
    """Category tag carried by every metric"""
    ACCURACY = "accuracy"
    COMPLETENESS = "completeness"
    RELEVANCE = "relevance"
    CLARITY = "clarity"
    LEGAL_REASONING = "legal_reasoning"
    FACTUAL_EXTRACTION = "factual_extraction"
    CLASSIFICATION_PRECISION = "classification_precision"
    CITATION_QUALITY = "citation_quality"


class ScoreLevel(Enum):
    """Quality tiers, best first"""
    EXCELLENT = "excellent"
    GOOD = "good"
    SATISFACTORY = "satisfactory"
    NEEDS_IMPROVEMENT = "needs_improvement"
    POOR = "poor"


# Lower bound (inclusive) of each tier; anything below the last bound is POOR
TIER_THRESHOLDS: Tuple[Tuple[float, ScoreLevel], ...] = (
    (9.0, ScoreLevel.EXCELLENT),
    (7.5, ScoreLevel.GOOD),
    (6.0, ScoreLevel.SATISFACTORY),
    (4.0, ScoreLevel.NEEDS_IMPROVEMENT),
)

STRONG_TIERS = frozenset({ScoreLevel.EXCELLENT, ScoreLevel.GOOD})
WEAK_TIERS = frozenset({ScoreLevel.NEEDS_IMPROVEMENT, ScoreLevel.POOR})

GRADE_DESCRIPTIONS = {
    ScoreLevel.EXCELLENT: "Excellent (A)",
    ScoreLevel.GOOD: "Good (B)",
    ScoreLevel.SATISFACTORY: "Satisfactory (C)",
    ScoreLevel.NEEDS_IMPROVEMENT: "Needs Improvement (D)",
    ScoreLevel.POOR: "Poor (F)",
}

MIN_SCORE = 0.0
MAX_SCORE = 10.0


def classify_tier(score: float) -> ScoreLevel:
    """Map a score to exactly one tier. Total over the reals."""
    for lower_bound, level in TIER_THRESHOLDS:
        if score >= lower_bound:
            return level
    return ScoreLevel.POOR


def clamp_score(score: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, float(score)))


# ============================================================================
# Weighting scheme
# ============================================================================

@dataclass(frozen=True)
class CriterionSpec:
    """One evaluable criterion: its wire name, category tag, weight and prompt text"""
    name: str
    category: ScoreCategory
    weight: float
    description: str = ""


@dataclass(frozen=True)
class WeightingScheme:
    """
    Versioned criterion -> weight table for both evaluation sections.

    Aggregation reads the weight stored on each MetricScore, so swapping the
    scheme is enough to change the weighting.
    """
    version: str
    summarization: Tuple[CriterionSpec, ...]
    classification: Tuple[CriterionSpec, ...]

    def __post_init__(self):
        names = [spec.name for spec in self.all_criteria()]
        if not names:
            raise ConfigurationError(f"Weighting scheme {self.version} has no criteria")
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Weighting scheme {self.version} repeats a criterion name")
        for spec in self.all_criteria():
            if not (0.0 < spec.weight <= 1.0):
                raise ConfigurationError(
                    f"Weight for {spec.name} must be in (0, 1], got {spec.weight}"
                )

    def all_criteria(self) -> Tuple[CriterionSpec, ...]:
        return self.summarization + self.classification

    def with_weights(self, overrides: Mapping[str, float], version: Optional[str] = None) -> "WeightingScheme":
        """Return a new scheme with some criterion weights replaced"""
        known = {spec.name for spec in self.all_criteria()}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(f"Unknown criteria in custom weights: {unknown}")

        def _apply(specs: Tuple[CriterionSpec, ...]) -> Tuple[CriterionSpec, ...]:
            return tuple(
                replace(spec, weight=float(overrides[spec.name])) if spec.name in overrides else spec
                for spec in specs
            )

        return WeightingScheme(
            version=version or f"{self.version}+custom",
            summarization=_apply(self.summarization),
            classification=_apply(self.classification),
        )


DEFAULT_WEIGHTING = WeightingScheme(
    version="2024.1",
    summarization=(
        CriterionSpec("factualAccuracy", ScoreCategory.ACCURACY, 0.20,
                      "Are all facts correctly represented?"),
        CriterionSpec("completeness", ScoreCategory.COMPLETENESS, 0.15,
                      "Does it capture all essential elements?"),
        CriterionSpec("clarity", ScoreCategory.CLARITY, 0.10,
                      "Is the summary clear and well-structured?"),
        CriterionSpec("legalReasoning", ScoreCategory.LEGAL_REASONING, 0.20,
                      "Is the legal analysis sound?"),
        CriterionSpec("keyFactsExtraction", ScoreCategory.FACTUAL_EXTRACTION, 0.15,
                      "Are the most important facts identified?"),
        CriterionSpec("holdingIdentification", ScoreCategory.LEGAL_REASONING, 0.10,
                      "Is the court's decision accurately captured?"),
        CriterionSpec("precedentRelevance", ScoreCategory.CITATION_QUALITY, 0.05,
                      "Are cited precedents relevant and accurate?"),
        CriterionSpec("lengthAppropriate", ScoreCategory.RELEVANCE, 0.05,
                      "Is the summary appropriately concise?"),
    ),
    classification=(
        CriterionSpec("primaryAreaAccuracy", ScoreCategory.CLASSIFICATION_PRECISION, 0.30,
                      "Is the primary legal area correct?"),
        CriterionSpec("confidenceReliability", ScoreCategory.ACCURACY, 0.20,
                      "Are confidence scores realistic?"),
        CriterionSpec("secondaryAreaRelevance", ScoreCategory.RELEVANCE, 0.15,
                      "Are secondary areas genuinely relevant?"),
        CriterionSpec("subcategoryPrecision", ScoreCategory.CLASSIFICATION_PRECISION, 0.15,
                      "Are subcategories accurate and specific?"),
        CriterionSpec("reasoningQuality", ScoreCategory.LEGAL_REASONING, 0.15,
                      "Is the classification reasoning sound?"),
        CriterionSpec("legalAreaCoverage", ScoreCategory.COMPLETENESS, 0.05,
                      "Are all applicable areas identified?"),
    ),
)


# ============================================================================
# Metric and scoreboard records
# ============================================================================

@dataclass(frozen=True)
class MetricScore:
    """A single graded judgment for one criterion. The tier is always derived from the score."""
    category: ScoreCategory
    score: float
    weight: float
    feedback: str = ""
    evidence: Tuple[str, ...] = ()

    def __post_init__(self):
        if math.isnan(self.score):
            raise ValueError("MetricScore.score must be a number")
        if self.weight < 0:
            raise ConfigurationError(f"Metric weight cannot be negative: {self.weight}")
        object.__setattr__(self, "score", clamp_score(self.score))
        object.__setattr__(self, "evidence", tuple(self.evidence))

    @property
    def tier(self) -> ScoreLevel:
        return classify_tier(self.score)

    def to_dict(self, detailed: bool = True) -> Dict[str, Any]:
        data = {
            "category": self.category.value,
            "score": self.score,
            "tier": self.tier.value,
            "weight": self.weight,
        }
        if detailed:
            data["feedback"] = self.feedback
            data["evidence"] = list(self.evidence)
        return data


@dataclass(frozen=True)
class AggregateMetrics:
    total_metrics: int
    excellent_count: int = 0
    good_count: int = 0
    satisfactory_count: int = 0
    needs_improvement_count: int = 0
    poor_count: int = 0

    def count_for(self, level: ScoreLevel) -> int:
        return {
            ScoreLevel.EXCELLENT: self.excellent_count,
            ScoreLevel.GOOD: self.good_count,
            ScoreLevel.SATISFACTORY: self.satisfactory_count,
            ScoreLevel.NEEDS_IMPROVEMENT: self.needs_improvement_count,
            ScoreLevel.POOR: self.poor_count,
        }[level]

    @property
    def counted(self) -> int:
        return sum(self.count_for(level) for level in ScoreLevel)

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalMetrics": self.total_metrics,
            "excellentCount": self.excellent_count,
            "goodCount": self.good_count,
            "satisfactoryCount": self.satisfactory_count,
            "needsImprovementCount": self.needs_improvement_count,
            "poorCount": self.poor_count,
        }


@dataclass(frozen=True)
class BenchmarkComparison:
    percent_above_average: float
    percentile: int
    label: str
    baseline: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "percentAboveIndustryAverage": self.percent_above_average,
            "percentile": self.percentile,
            "comparison": self.label,
            "industryAverage": self.baseline,
        }


@dataclass(frozen=True)
class QualityFlags:
    # potential_errors, inconsistencies and missing_elements have no detectors yet
    potential_errors: Tuple[str, ...] = ()
    inconsistencies: Tuple[str, ...] = ()
    missing_elements: Tuple[str, ...] = ()
    confidence_issues: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "potentialErrors": list(self.potential_errors),
            "inconsistencies": list(self.inconsistencies),
            "missingElements": list(self.missing_elements),
            "confidenceIssues": list(self.confidence_issues),
        }


@dataclass(frozen=True)
class Scoreboard:
    """Full grading result for one document evaluation. Never mutated after construction."""
    document_id: str
    timestamp: str
    overall_score: float
    summarization_scores: Mapping[str, MetricScore]
    classification_scores: Mapping[str, MetricScore]
    aggregate_metrics: AggregateMetrics
    quality_flags: QualityFlags
    strengths: Tuple[str, ...] = ()
    weaknesses: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()
    benchmark_comparison: Optional[BenchmarkComparison] = None
    weighting_version: str = DEFAULT_WEIGHTING.version
    detailed: bool = True

    def __post_init__(self):
        object.__setattr__(self, "summarization_scores", MappingProxyType(dict(self.summarization_scores)))
        object.__setattr__(self, "classification_scores", MappingProxyType(dict(self.classification_scores)))

    @property
    def overall_tier(self) -> ScoreLevel:
        return classify_tier(self.overall_score)

    def iter_metrics(self) -> Iterator[Tuple[str, MetricScore]]:
        yield from self.summarization_scores.items()
        yield from self.classification_scores.items()

    def all_metrics(self) -> List[MetricScore]:
        return [metric for _, metric in self.iter_metrics()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "documentId": self.document_id,
            "timestamp": self.timestamp,
            "overallScore": self.overall_score,
            "overallTier": self.overall_tier.value,
            "weightingVersion": self.weighting_version,
            "summarizationScores": {
                name: metric.to_dict(self.detailed) for name, metric in self.summarization_scores.items()
            },
            "classificationScores": {
                name: metric.to_dict(self.detailed) for name, metric in self.classification_scores.items()
            },
            "aggregateMetrics": self.aggregate_metrics.to_dict(),
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "recommendations": list(self.recommendations),
            "benchmarkComparison": self.benchmark_comparison.to_dict() if self.benchmark_comparison else None,
            "qualityFlags": self.quality_flags.to_dict(),
        }


# ============================================================================
# Scoring options
# ============================================================================

Weight = Annotated[float, Field(gt=0.0, le=1.0)]


class ScoringConfig(BaseModel):
    """Options recognized by the scoreboard builder"""
    model_config = ConfigDict(populate_by_name=True)

    enable_detailed_scoring: bool = Field(True, alias="enableDetailedScoring")
    include_comparative_benchmarks: bool = Field(True, alias="includeComparativeBenchmarks")
    strict_accuracy_mode: bool = Field(False, alias="strictAccuracyMode")
    minimum_confidence_threshold: float = Field(0.6, ge=0.0, le=1.0, alias="minimumConfidenceThreshold")
    require_precedent_analysis: bool = Field(True, alias="requirePrecedentAnalysis")
    custom_weights: Optional[Dict[str, Weight]] = Field(None, alias="customWeights")

    @classmethod
    def from_defaults(cls, overrides: Optional[Mapping[str, Any]] = None) -> "ScoringConfig":
        """Build options from config.yaml scoring.defaults, then apply caller overrides"""
        defaults = cls.model_validate(get_scoring_defaults())
        if not overrides:
            return defaults
        # both sides keyed by alias; only fields the caller set override
        explicit = cls.model_validate(dict(overrides)).model_dump(by_alias=True, exclude_unset=True)
        return cls.model_validate({**defaults.model_dump(by_alias=True), **explicit})


@dataclass
class ScoreboardInput:
    """Everything the builder needs for one evaluation"""
    document: LegalDocument
    analysis: AnalysisResult
    expected_legal_area: Optional[str] = None
    complexity: Optional[str] = None
    config: Optional[ScoringConfig] = None
