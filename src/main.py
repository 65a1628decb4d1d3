# main.py
import asyncio
import sys
import os
import json

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config_manager import configure_logging, get_config
from errors import ScoreboardError
from evaluation_framework import LegalAnalysisEvaluationFramework
from legal_analyzer import LegalAnalyzer
from llm_client import LLMClient
from sample_scenarios import SAMPLE_LEGAL_SCENARIOS, expected_area_for
from scoreboard_types import GRADE_DESCRIPTIONS


async def run_demo(scenario_indices):
    cfg = get_config()
    print(f"[CONFIG][LOADED] {cfg}")
    if not cfg.validate():
        print("[CONFIG][WARN] Configuration incomplete, continuing with defaults")

    evaluator_client = LLMClient(model_type="evaluator")
    analyzer_client = LLMClient(model_type="analyzer")
    framework = LegalAnalysisEvaluationFramework(
        evaluator_client, analyzer=LegalAnalyzer(analyzer_client)
    )

    print("[DEMO][START] LegalScore Demo")
    print(f"[DEMO][MODEL] analyzer={analyzer_client.config.model} evaluator={evaluator_client.config.model}")
    print("=" * 60)

    for i in scenario_indices:
        document = SAMPLE_LEGAL_SCENARIOS[i]
        expected = expected_area_for(i)
        print(f"\n[DEMO][SCENARIO_{i}] {document.title} (expected: {expected.value})")
        print("-" * 50)

        try:
            report = await framework.run_comprehensive_evaluation(document, expected.value)
        except ScoreboardError as e:
            print(f"[DEMO][ERROR] {type(e).__name__}: {e}")
            continue

        scoreboard = report.scoreboard
        insights = report.performance_insights
        print(f"[DEMO][SCORE] {scoreboard.overall_score} {GRADE_DESCRIPTIONS[scoreboard.overall_tier]}")
        print(f"[DEMO][BREAKDOWN] {insights.score_breakdown}")
        if scoreboard.benchmark_comparison:
            print(f"[DEMO][BENCHMARK] {scoreboard.benchmark_comparison.label} "
                  f"(percentile {scoreboard.benchmark_comparison.percentile})")
        for flag in scoreboard.quality_flags.confidence_issues:
            print(f"[DEMO][FLAG] {flag}")
        print(json.dumps(scoreboard.to_dict(), indent=2, ensure_ascii=False))
        print("=" * 60)

    summary = framework.performance_summary()
    print(f"[DEMO][SUMMARY] evaluations={summary.analysis_count} average={summary.average_score} "
          f"trend={summary.trend_direction.value}")


if __name__ == "__main__":
    configure_logging()
    # Scenario indices from the command line, default: the contract case
    indices = [int(arg) for arg in sys.argv[1:]] or [0]
    asyncio.run(run_demo(indices))
