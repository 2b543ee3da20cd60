"""
Models package for the YojanaMitra eligibility backend
"""

from .scheme import (
    NATIONWIDE,
    Scheme,
    SchemeEligibility,
    SchemeSummary
)

from .profile import Profile

from .eligibility import (
    RuleOutcome,
    MissingField,
    ScoreResult,
    NextAction,
    EligibilityReasons,
    EligibilityVerdict,
    EligibilityAssessment,
    SchemeReference,
    EligibilityResponse,
    MatchResult,
    MatchResponse
)

__all__ = [
    # Scheme models
    "NATIONWIDE",
    "Scheme",
    "SchemeEligibility",
    "SchemeSummary",

    # Profile models
    "Profile",

    # Eligibility models
    "RuleOutcome",
    "MissingField",
    "ScoreResult",
    "NextAction",
    "EligibilityReasons",
    "EligibilityVerdict",
    "EligibilityAssessment",
    "SchemeReference",
    "EligibilityResponse",
    "MatchResult",
    "MatchResponse"
]
