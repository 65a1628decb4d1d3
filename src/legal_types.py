"""
Legal domain types: documents, analysis options and analysis results.

Request payloads are validated with pydantic (schema-level checks only).
Field names are snake_case in Python and camelCase on the wire.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LegalArea(Enum):
    """The eight legal areas a document can be classified into"""
    CONTRACT_LAW = "Contract Law"
    TAX_LAW = "Tax Law"
    CONSTITUTIONAL_LAW = "Constitutional Law"
    PROPERTY_LAW = "Property Law"
    TORT_LAW = "Tort Law"
    SECURITIES_LAW = "Securities Law"
    CRIMINAL_LAW = "Criminal Law"
    ADMINISTRATIVE_LAW = "Administrative Law"


LEGAL_AREA_DESCRIPTIONS = {
    LegalArea.CONTRACT_LAW: "Agreements, breaches, performance, remedies, formation",
    LegalArea.TAX_LAW: "Taxation, IRS matters, tax planning, compliance, disputes",
    LegalArea.CONSTITUTIONAL_LAW: "Constitutional rights, government powers, judicial review",
    LegalArea.PROPERTY_LAW: "Real estate, ownership, transfers, easements, zoning",
    LegalArea.TORT_LAW: "Personal injury, negligence, intentional torts, damages",
    LegalArea.SECURITIES_LAW: "Investment securities, SEC regulations, fraud, disclosure",
    LegalArea.CRIMINAL_LAW: "Criminal charges, prosecution, defense, sentencing",
    LegalArea.ADMINISTRATIVE_LAW: "Government agencies, regulations, administrative procedures",
}


class _WireModel(BaseModel):
    """Accept both the camelCase wire names and the Python field names"""
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class LegalDocument(_WireModel):
    """A legal document submitted for analysis"""
    content: str = Field(..., min_length=1, description="The legal document content")
    title: Optional[str] = None
    case_number: Optional[str] = Field(None, alias="caseNumber")
    jurisdiction: Optional[str] = None
    date: Optional[str] = None


class SummarizationOptions(_WireModel):
    max_length: int = Field(500, ge=50, le=2000, alias="maxLength")
    include_key_facts: bool = Field(True, alias="includeKeyFacts")
    include_holding: bool = Field(True, alias="includeHolding")
    include_reasoning: bool = Field(True, alias="includeReasoning")
    include_citations: bool = Field(False, alias="includeCitations")


class ClassificationOptions(_WireModel):
    confidence_threshold: float = Field(0.7, ge=0.0, le=1.0, alias="confidenceThreshold")
    include_subcategories: bool = Field(False, alias="includeSubcategories")
    multi_label: bool = Field(False, alias="multiLabel")


class LegalSummary(_WireModel):
    """Summarization result as returned by the model"""
    summary: str = ""
    key_facts: List[str] = Field(default_factory=list, alias="keyFacts")
    legal_issues: List[str] = Field(default_factory=list, alias="legalIssues")
    holding: str = ""
    reasoning: str = ""
    precedents: List[str] = Field(default_factory=list)
    word_count: int = Field(0, alias="wordCount")


class SecondaryArea(_WireModel):
    area: str
    confidence: float = Field(..., ge=0.0, le=1.0)


class LegalClassification(_WireModel):
    """Classification result as returned by the model"""
    # Kept as free text: models sometimes answer "Contract" instead of "Contract Law"
    primary_area: str = Field(..., alias="primaryArea")
    confidence: float = Field(..., ge=0.0, le=1.0)
    secondary_areas: List[SecondaryArea] = Field(default_factory=list, alias="secondaryAreas")
    subcategories: List[str] = Field(default_factory=list)
    reasoning: str = ""


class AnalysisResult(_WireModel):
    """Summary and classification of the same document"""
    summary: LegalSummary
    classification: LegalClassification
