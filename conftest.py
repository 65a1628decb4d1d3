"""
Shared fixtures: in-memory judges and completion oracles, sample documents.
"""

import os
import sys

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

import pytest

from legal_types import AnalysisResult, LegalClassification, LegalDocument, LegalSummary
from scoreboard import Judge
from scoreboard_types import DEFAULT_WEIGHTING

SUMMARY_RESPONSE = {
    "summary": "Builder delivered late and substituted materials; owner won damages.",
    "keyFacts": ["$500,000 contract", "76 days late", "Laminate substituted for hardwood"],
    "legalIssues": ["Material breach", "Liquidated damages"],
    "holding": "Material breach; builder liable for $40,200.",
    "reasoning": "Substitutions and delay defeated the bargain.",
    "precedents": [],
    "wordCount": 120,
}

CLASSIFICATION_RESPONSE = {
    "primaryArea": "Contract Law",
    "confidence": 0.92,
    "secondaryAreas": [{"area": "Property Law", "confidence": 0.3}],
    "subcategories": ["Construction contracts"],
    "reasoning": "Dispute over performance of a construction agreement.",
}

RECOMMENDATIONS_RESPONSE = {
    "immediateActions": ["Quote damages figures verbatim"],
    "longTermImprovements": ["Add precedent lookup"],
    "trainingFocus": ["Remedies"],
    "technicalOptimizations": ["Lower temperature"],
    "qualityAssurance": ["Spot-check holdings"],
}


def make_judgments(specs, score=9.0, overrides=None):
    """One judgment per criterion; `overrides` maps criterion name -> judgment or score"""
    judgments = {
        spec.name: {"score": score, "feedback": f"{spec.name} ok", "evidence": ["quoted passage"]}
        for spec in specs
    }
    for name, value in (overrides or {}).items():
        judgments[name] = value if isinstance(value, dict) else {"score": value}
    return judgments


class StaticJudge(Judge):
    """Returns fixed judgments and records the configs it was called with"""

    def __init__(self, summarization=None, classification=None):
        self.summarization = summarization
        self.classification = classification
        self.calls = []

    async def judge_summarization(self, scoreboard_input, specs, config):
        self.calls.append(("summarization", config))
        if self.summarization is None:
            return make_judgments(specs)
        return self.summarization

    async def judge_classification(self, scoreboard_input, specs, config):
        self.calls.append(("classification", config))
        if self.classification is None:
            return make_judgments(specs)
        return self.classification


class ScriptedOracle:
    """Completion oracle that answers by prompt kind"""

    def __init__(self, summary=None, classification=None, summarization_judgments=None,
                 classification_judgments=None, recommendations=None):
        self.responses = {
            "summary": summary if summary is not None else SUMMARY_RESPONSE,
            "classification": classification if classification is not None else CLASSIFICATION_RESPONSE,
            "summarization_judgment": (
                summarization_judgments if summarization_judgments is not None
                else make_judgments(DEFAULT_WEIGHTING.summarization)
            ),
            "classification_judgment": (
                classification_judgments if classification_judgments is not None
                else make_judgments(DEFAULT_WEIGHTING.classification)
            ),
            "recommendations": recommendations if recommendations is not None else RECOMMENDATIONS_RESPONSE,
        }
        self.prompts = []

    @staticmethod
    def kind_of(prompt):
        if prompt.startswith("You are a legal expert."):
            return "summary"
        if prompt.startswith("You are a legal classification expert."):
            return "classification"
        if prompt.startswith("Evaluate the quality of this legal document summarization"):
            return "summarization_judgment"
        if prompt.startswith("Evaluate the accuracy of this legal document classification"):
            return "classification_judgment"
        if prompt.startswith("Based on this legal analysis evaluation"):
            return "recommendations"
        raise AssertionError(f"unexpected prompt: {prompt[:60]}")

    async def complete(self, prompt, schema_description, max_tokens=2000):
        kind = self.kind_of(prompt)
        self.prompts.append((kind, prompt, max_tokens))
        response = self.responses[kind]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def document():
    return LegalDocument(
        title="Smith v. Jones Construction Co.",
        content="FACTS: Smith hired Jones to build a home. HOLDING: Jones materially breached the contract.",
    )


@pytest.fixture
def make_analysis():
    def _make(confidence=0.92, primary_area="Contract Law"):
        return AnalysisResult(
            summary=LegalSummary.model_validate(SUMMARY_RESPONSE),
            classification=LegalClassification(primary_area=primary_area, confidence=confidence),
        )
    return _make


@pytest.fixture
def static_judge():
    return StaticJudge


@pytest.fixture
def oracle():
    return ScriptedOracle


@pytest.fixture
def judgments():
    return make_judgments
