"""
Pydantic models for rule evaluations, eligibility verdicts and match results
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict
from pydantic.alias_generators import to_camel

from .scheme import SchemeSummary


ConfidenceLevel = Literal["High", "Medium", "Low"]
Priority = Literal["high", "medium", "low"]


class RuleOutcome(BaseModel):
    """A rule that was evaluated and either passed or failed"""
    rule: str = Field(..., description="Rule name, e.g. 'Income Limit'")
    reason: str = Field(..., description="Why the rule passed or failed")
    fix: Optional[str] = Field(None, description="Suggested remediation for failed rules")
    source: Optional[str] = Field(None, description="Where the rule can be verified")


class MissingField(BaseModel):
    """A rule that could not be evaluated because profile data is missing"""
    field: str = Field(..., description="Missing profile field or document")
    reason: str = Field(..., description="Why the field is needed")
    action: str = Field(..., description="What the applicant should do")


class ScoreResult(BaseModel):
    """Outcome of scoring one profile against one scheme"""
    score: int = Field(0, ge=0, description="Sum of earned rule weights")
    confidence: float = Field(0.0, ge=0, le=1, description="Share of the maximum weight earned")
    missing_fields: List[str] = Field(default_factory=list, description="Short hints for unmet or unknown rules")
    passed: List[RuleOutcome] = Field(default_factory=list)
    failed: List[RuleOutcome] = Field(default_factory=list)
    missing: List[MissingField] = Field(default_factory=list)


class NextAction(BaseModel):
    """Suggested remediation step for the applicant"""
    action: str
    priority: Priority = "medium"
    description: str = ""

    @field_validator('priority', mode='before')
    @classmethod
    def validate_priority(cls, v):
        if isinstance(v, str) and v.strip().lower() in ("high", "medium", "low"):
            return v.strip().lower()
        return "medium"


class EligibilityReasons(BaseModel):
    """Explainable breakdown of a verdict"""
    passed: List[RuleOutcome] = Field(default_factory=list)
    failed: List[RuleOutcome] = Field(default_factory=list)
    missing: List[MissingField] = Field(default_factory=list)


class EligibilityVerdict(BaseModel):
    """Eligibility verdict for one profile and one scheme"""
    eligible: bool
    confidence: float = Field(..., ge=0, le=1)
    confidence_level: ConfidenceLevel
    explanation: str
    reasons: EligibilityReasons
    next_actions: List[NextAction] = Field(default_factory=list)
    score: int = Field(..., ge=0, description="Rule-based plus AI score")
    rule_based_score: int = Field(..., ge=0)
    ai_based_score: int = Field(0, ge=0, le=30)

    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        validate_by_alias=True,
        serialize_by_alias=True
    )


class EligibilityAssessment(BaseModel):
    """Structured answer of the explanation service for a single scheme"""
    eligible: Optional[bool] = None
    explanation: str = ""
    ai_score: int = Field(0, description="Additional score for edge cases, 0-30")
    next_actions: List[NextAction] = Field(default_factory=list)

    @field_validator('ai_score', mode='before')
    @classmethod
    def clamp_ai_score(cls, v):
        if v is None:
            return 0
        return max(0, min(30, int(round(float(v)))))

    @field_validator('explanation', mode='before')
    @classmethod
    def validate_explanation(cls, v):
        return v or ""

    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        validate_by_alias=True
    )


class SchemeReference(BaseModel):
    """Scheme identity returned next to a single-scheme verdict"""
    id: str
    title: str
    official_portal_url: Optional[str] = None


class EligibilityResponse(BaseModel):
    """Response of the single-scheme eligibility builder"""
    success: bool = True
    result: EligibilityVerdict
    scheme: SchemeReference


class MatchResult(BaseModel):
    """Ranked, explained match of one scheme"""
    scheme: SchemeSummary
    score: int = Field(..., ge=0)
    confidence: float = Field(..., ge=0, le=1)
    confidence_level: ConfidenceLevel
    explanation: str
    missing_fields: List[str] = Field(default_factory=list)
    needs_review: bool

    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        validate_by_alias=True,
        serialize_by_alias=True
    )


class MatchResponse(BaseModel):
    """Response of batch matching over the scheme catalog"""
    results: List[MatchResult] = Field(default_factory=list)
    total_schemes: int = Field(0, ge=0)
    matched_schemes: int = Field(0, ge=0)
    message: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        validate_by_alias=True,
        serialize_by_alias=True
    )
