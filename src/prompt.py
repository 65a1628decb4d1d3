# prompt.py
"""
Prompt templates for legal analysis and for judging analysis quality.

Templates use str.format placeholders; document text is always passed as an
argument, never formatted into the template itself. Schema descriptions are
appended to prompts by the LLM client.
"""

import json
from typing import Iterable, Optional

from legal_types import (
    LEGAL_AREA_DESCRIPTIONS,
    ClassificationOptions,
    LegalArea,
    LegalDocument,
    SummarizationOptions,
)
from scoreboard_types import CriterionSpec, ScoringConfig

# ============================================================================
# Analysis prompts
# ============================================================================

SUMMARIZATION_PROMPT = """You are a legal expert. Please analyze and summarize the following legal document:

Title: {title}
Case Number: {case_number}
Jurisdiction: {jurisdiction}
Date: {date}

Document Content:
{content}

Please provide a comprehensive legal analysis with the following components:
{components}"""

SUMMARIZATION_SCHEMA = """{
  "summary": "Executive summary of the legal document",
  "keyFacts": ["Array of key factual points"],
  "legalIssues": ["Array of legal issues identified"],
  "holding": "The court's decision or holding",
  "reasoning": "The legal reasoning behind the decision",
  "precedents": ["Array of relevant precedents or citations"],
  "wordCount": "Number of words in the summary"
}"""

CLASSIFICATION_PROMPT = """You are a legal classification expert. Please analyze and classify the following legal document into one or more of these legal areas:

{areas}

Document to classify:
Title: {title}
Content: {content}

Please classify this document by:
1. Identifying the PRIMARY legal area (highest confidence)
2. Identifying any SECONDARY legal areas{secondary_hint}
3. Providing confidence scores (0.0 to 1.0)
4. {subcategory_hint}
5. Explaining your classification reasoning

Minimum confidence threshold: {threshold}"""

CLASSIFICATION_SCHEMA_TEMPLATE = """{{
  "primaryArea": "One of: {area_names}",
  "confidence": "Number between 0.0 and 1.0",
  "secondaryAreas": [
    {{
      "area": "Legal area name",
      "confidence": "Number between 0.0 and 1.0"
    }}
  ],
  "subcategories": ["Array of specific subcategories"],
  "reasoning": "Explanation of classification decision"
}}"""

# ============================================================================
# Judgment prompts
# ============================================================================

SUMMARIZATION_JUDGMENT_PROMPT = """Evaluate the quality of this legal document summarization:

Original Document:
{content}

Generated Summary:
{summary}

Please evaluate on these criteria (score 0-10 for each):
{criteria}
{policies}
Format response as JSON with detailed scores and feedback."""

CLASSIFICATION_JUDGMENT_PROMPT = """Evaluate the accuracy of this legal document classification:

Document Content:
{content}
Expected Legal Area: {expected_area}

Classification Result:
{classification}

Evaluate on these criteria (score 0-10):
{criteria}
{policies}
Consider the 8 legal areas: {area_names}."""

STRICT_ACCURACY_POLICY = (
    "Strict accuracy mode: any factual statement that is not supported by the "
    "source document must cap the affected criterion at 5."
)
PRECEDENT_REQUIRED_POLICY = (
    "Precedent analysis is required: a summary that omits the precedents the "
    "document relies on must score low on precedent relevance."
)
PRECEDENT_OPTIONAL_POLICY = (
    "Precedent analysis is optional: do not penalize a summary for omitting "
    "precedents when the document itself cites none."
)

RECOMMENDATIONS_PROMPT = """Based on this legal analysis evaluation, provide specific improvement recommendations:

Overall Score: {overall_score}/10
Grade: {grade}
Weaknesses: {weaknesses}
Quality Flags: {quality_flags}

Provide actionable recommendations in these categories:
1. Immediate Actions (quick fixes)
2. Long-term Improvements (strategic changes)
3. Training Focus (areas for skill development)
4. Technical Optimizations (system improvements)
5. Quality Assurance (prevention measures)"""

RECOMMENDATIONS_SCHEMA = """{
  "immediateActions": ["string"],
  "longTermImprovements": ["string"],
  "trainingFocus": ["string"],
  "technicalOptimizations": ["string"],
  "qualityAssurance": ["string"]
}"""


def _or_na(value: Optional[str]) -> str:
    return value or "N/A"


def _area_names() -> str:
    return ", ".join(area.value for area in LegalArea)


def render_summarization_prompt(document: LegalDocument, options: SummarizationOptions) -> str:
    components = [f"Executive Summary ({options.max_length} words max)"]
    if options.include_key_facts:
        components.append("Key Facts (bullet points)")
    components.append("Legal Issues Identified")
    if options.include_holding:
        components.append("Court's Holding/Decision")
    if options.include_reasoning:
        components.append("Legal Reasoning")
    if options.include_citations:
        components.append("Relevant Precedents/Citations")

    return SUMMARIZATION_PROMPT.format(
        title=_or_na(document.title),
        case_number=_or_na(document.case_number),
        jurisdiction=_or_na(document.jurisdiction),
        date=_or_na(document.date),
        content=document.content,
        components="\n".join(f"{i}. {c}" for i, c in enumerate(components, 1)),
    )


def render_classification_prompt(document: LegalDocument, options: ClassificationOptions) -> str:
    areas = "\n".join(
        f"{i}. {area.value}: {LEGAL_AREA_DESCRIPTIONS[area]}" for i, area in enumerate(LegalArea, 1)
    )
    return CLASSIFICATION_PROMPT.format(
        areas=areas,
        title=_or_na(document.title),
        content=document.content,
        secondary_hint=" (if applicable)" if options.multi_label else " (leave empty unless clearly applicable)",
        subcategory_hint=(
            "Listing relevant subcategories within each area"
            if options.include_subcategories else "Subcategories may be left empty"
        ),
        threshold=options.confidence_threshold,
    )


def classification_schema() -> str:
    return CLASSIFICATION_SCHEMA_TEMPLATE.format(area_names=_area_names())


def judgment_schema(specs: Iterable[CriterionSpec]) -> str:
    """JSON shape description: one {score, feedback, evidence} object per criterion"""
    lines = [
        f'  "{spec.name}": {{"score": number, "feedback": "string", "evidence": ["string"]}}'
        for spec in specs
    ]
    return "{\n" + ",\n".join(lines) + "\n}"


def _criteria_block(specs: Iterable[CriterionSpec]) -> str:
    return "\n".join(
        f"{i}. {spec.name} - {spec.description}" for i, spec in enumerate(specs, 1)
    )


def _policies_block(config: ScoringConfig, include_precedents: bool) -> str:
    policies = []
    if config.strict_accuracy_mode:
        policies.append(STRICT_ACCURACY_POLICY)
    if include_precedents:
        policies.append(PRECEDENT_REQUIRED_POLICY if config.require_precedent_analysis else PRECEDENT_OPTIONAL_POLICY)
    if not policies:
        return ""
    return "\nScoring policies:\n" + "\n".join(f"- {p}" for p in policies) + "\n"


def render_summarization_judgment(document: LegalDocument, summary: dict,
                                  specs: Iterable[CriterionSpec], config: ScoringConfig) -> str:
    return SUMMARIZATION_JUDGMENT_PROMPT.format(
        content=document.content,
        summary=json.dumps(summary, indent=2, ensure_ascii=False),
        criteria=_criteria_block(specs),
        policies=_policies_block(config, include_precedents=True),
    )


def render_classification_judgment(document: LegalDocument, classification: dict,
                                   expected_area: Optional[str],
                                   specs: Iterable[CriterionSpec], config: ScoringConfig) -> str:
    return CLASSIFICATION_JUDGMENT_PROMPT.format(
        content=document.content,
        expected_area=expected_area or "Not specified",
        classification=json.dumps(classification, indent=2, ensure_ascii=False),
        criteria=_criteria_block(specs),
        policies=_policies_block(config, include_precedents=False),
        area_names=_area_names(),
    )


def render_recommendations_prompt(overall_score: float, grade: str,
                                  weaknesses: Iterable[str], quality_flags: dict) -> str:
    return RECOMMENDATIONS_PROMPT.format(
        overall_score=overall_score,
        grade=grade,
        weaknesses=", ".join(weaknesses) or "None",
        quality_flags=json.dumps(quality_flags, ensure_ascii=False),
    )
