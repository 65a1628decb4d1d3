"""
Legal Analyzer

Summarizes and classifies legal documents through the completion oracle.
Model output is validated against the result schemas; a response that does
not fit is reported as an oracle failure.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from config_manager import get_config, get_max_tokens
from errors import OracleFailure
from legal_types import (
    AnalysisResult,
    ClassificationOptions,
    LegalClassification,
    LegalDocument,
    LegalSummary,
    SummarizationOptions,
)
from llm_client import gather_all
from prompt import (
    SUMMARIZATION_SCHEMA,
    classification_schema,
    render_classification_prompt,
    render_summarization_prompt,
)

logger = logging.getLogger(__name__)

FULL_SUMMARIZATION = SummarizationOptions(
    max_length=500, include_key_facts=True, include_holding=True,
    include_reasoning=True, include_citations=True,
)
FULL_CLASSIFICATION = ClassificationOptions(
    confidence_threshold=0.7, include_subcategories=True, multi_label=True,
)


class LegalAnalyzer:
    """Summarization and classification of legal documents"""

    def __init__(self, llm_client):
        self.llm_client = llm_client

    async def summarize_document(self, document: LegalDocument,
                                 options: Optional[SummarizationOptions] = None) -> LegalSummary:
        options = options or SummarizationOptions()
        prompt = render_summarization_prompt(document, options)
        raw = await self.llm_client.complete(
            prompt, SUMMARIZATION_SCHEMA, get_max_tokens('analysis.max_tokens.summary', 3000)
        )
        summary = self._validate(LegalSummary, raw, "summary")

        if get_config().is_decision_logging_enabled('analyzer'):
            print(f"[ANALYZER][SUMMARY] facts={len(summary.key_facts)} precedents={len(summary.precedents)}")
        return summary

    async def classify_document(self, document: LegalDocument,
                                options: Optional[ClassificationOptions] = None) -> LegalClassification:
        options = options or ClassificationOptions()
        prompt = render_classification_prompt(document, options)
        raw = await self.llm_client.complete(
            prompt, classification_schema(), get_max_tokens('analysis.max_tokens.classification', 2000)
        )
        classification = self._validate(LegalClassification, raw, "classification")

        if classification.confidence < options.confidence_threshold:
            logger.info(
                f"Classification confidence {classification.confidence} below threshold "
                f"{options.confidence_threshold} for {classification.primary_area}"
            )
        if get_config().is_decision_logging_enabled('analyzer'):
            print(f"[ANALYZER][CLASSIFY] {classification.primary_area} conf={classification.confidence:.2f}")
        return classification

    async def analyze_document_full(self, document: LegalDocument) -> AnalysisResult:
        """Summarize and classify concurrently; either failure fails the analysis"""
        summary, classification = await gather_all(
            self.summarize_document(document, FULL_SUMMARIZATION),
            self.classify_document(document, FULL_CLASSIFICATION),
        )
        return AnalysisResult(summary=summary, classification=classification)

    @staticmethod
    def _validate(model, raw, what: str):
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Model returned an invalid {what}: {e}")
            raise OracleFailure(f"LLM {what} response does not match the expected schema: {e}") from e
