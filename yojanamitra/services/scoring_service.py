"""
Rule-based scoring of applicant profiles against scheme eligibility rules
"""
import logging
from typing import List

from ..models.profile import Profile
from ..models.scheme import Scheme
from ..models.eligibility import MissingField, RuleOutcome, ScoreResult
from ..utils.validators import contains_any, format_inr

logger = logging.getLogger(__name__)


class _Evaluation:
    """Accumulates rule outcomes while a scheme is being scored"""

    def __init__(self):
        self.score = 0
        self.passed: List[RuleOutcome] = []
        self.failed: List[RuleOutcome] = []
        self.missing: List[MissingField] = []
        self.hints: List[str] = []

    def passes(self, weight: int, rule: str, reason: str):
        self.score += weight
        self.passed.append(RuleOutcome(rule=rule, reason=reason))

    def fails(self, hint: str, rule: str, reason: str, fix: str):
        self.hints.append(hint)
        self.failed.append(RuleOutcome(rule=rule, reason=reason, fix=fix))

    def lacks(self, hint: str, field: str, reason: str, action: str):
        self.hints.append(hint)
        self.missing.append(MissingField(field=field, reason=reason, action=action))


class SchemeScorer:
    """Scores a profile against one scheme using weighted rules"""

    INCOME_WEIGHT = 40
    CASTE_WEIGHT = 30
    EDUCATION_WEIGHT = 20
    STATE_WEIGHT = 10
    DOCUMENTS_WEIGHT = 10
    MAX_SCORE = 100

    # Any of these in the education text satisfies a student scheme
    EDUCATION_KEYWORDS = ("post", "higher", "graduate")

    def score(self, profile: Profile, scheme: Scheme, single_scheme: bool = False) -> ScoreResult:
        """
        Score a profile against a scheme

        Rules the scheme does not define are skipped; rules the profile
        cannot answer are reported as missing and earn nothing.

        Catalog matching and single-scheme verdicts use slightly different
        rule sets. A single-scheme verdict also checks required documents,
        honours the scheme's own education keyword, and leaves nationwide
        schemes out of the state rule.

        Args:
            profile: Applicant profile
            scheme: Scheme to score against
            single_scheme: Use the single-scheme verdict rule set

        Returns:
            ScoreResult with score, confidence and per-rule outcomes
        """
        evaluation = _Evaluation()

        self._check_income(profile, scheme, evaluation)
        self._check_caste(profile, scheme, evaluation)
        if single_scheme:
            self._check_education_requirement(profile, scheme, evaluation)
            self._check_regional_state(profile, scheme, evaluation)
            self._check_documents(profile, scheme, evaluation)
        else:
            self._check_student(profile, scheme, evaluation)
            self._check_state(profile, scheme, evaluation)

        logger.debug(
            f"Scored scheme {scheme.id}: {evaluation.score} "
            f"({len(evaluation.passed)} passed, {len(evaluation.failed)} failed, {len(evaluation.missing)} missing)"
        )
        return ScoreResult(
            score=evaluation.score,
            confidence=self.confidence_for(evaluation.score),
            missing_fields=evaluation.hints,
            passed=evaluation.passed,
            failed=evaluation.failed,
            missing=evaluation.missing
        )

    @classmethod
    def confidence_for(cls, score: float) -> float:
        """Share of the maximum score, clamped to [0, 1]"""
        return max(0.0, min(1.0, score / cls.MAX_SCORE))

    def _check_income(self, profile: Profile, scheme: Scheme, evaluation: _Evaluation):
        income_max = scheme.eligibility.income_max
        if income_max is None:
            return

        income = profile.income_annual
        if income is None:
            evaluation.lacks(
                "Annual income",
                field="Annual Income",
                reason="Income information required for eligibility check",
                action="Obtain income certificate or upload income proof"
            )
        elif income <= income_max:
            evaluation.passes(
                self.INCOME_WEIGHT,
                rule="Income Limit",
                reason=f"Your income ₹{format_inr(income)} is below the scheme limit (₹{format_inr(income_max)})"
            )
        else:
            evaluation.fails(
                "Income exceeds limit",
                rule="Income Limit",
                reason=f"Your income ₹{format_inr(income)} exceeds the scheme limit (₹{format_inr(income_max)})",
                fix="Update your income certificate or declare lower income"
            )

    def _check_caste(self, profile: Profile, scheme: Scheme, evaluation: _Evaluation):
        eligible_castes = scheme.eligibility.caste
        if not eligible_castes:
            return

        if not profile.caste:
            evaluation.lacks(
                "Caste category",
                field="Category/Caste",
                reason="Category information required",
                action="Obtain category certificate (SC/ST/OBC/General)"
            )
        elif profile.caste.lower() in [c.lower() for c in eligible_castes]:
            evaluation.passes(
                self.CASTE_WEIGHT,
                rule="Category Match",
                reason=f"You belong to {profile.caste} category, which is eligible for this scheme"
            )
        else:
            evaluation.fails(
                "Caste category mismatch",
                rule="Category Match",
                reason=f"You belong to {profile.caste} category, but the scheme is for {', '.join(eligible_castes)}",
                fix="Verify your category certificate or select the correct category"
            )

    def _check_student(self, profile: Profile, scheme: Scheme, evaluation: _Evaluation):
        if not scheme.eligibility.student:
            return
        if self._lacks_education(profile, evaluation):
            return

        # Plain substring checks, so "postpone" counts as "post"
        self._record_education(
            profile,
            contains_any(profile.education, self.EDUCATION_KEYWORDS),
            "",
            evaluation
        )

    def _check_education_requirement(self, profile: Profile, scheme: Scheme, evaluation: _Evaluation):
        required = (scheme.eligibility.education or "").strip()
        if not scheme.eligibility.student and not required:
            return
        if self._lacks_education(profile, evaluation):
            return

        # An empty requirement is a substring of any education, so student-only
        # schemes accept every stated education here
        matched = required.lower() in profile.education.lower() or contains_any(
            profile.education, self.EDUCATION_KEYWORDS
        )
        self._record_education(profile, matched, required, evaluation)

    def _lacks_education(self, profile: Profile, evaluation: _Evaluation) -> bool:
        if profile.education:
            return False
        evaluation.lacks(
            "Education details",
            field="Education",
            reason="Education details required",
            action="Upload marksheet or education certificate"
        )
        return True

    def _record_education(self, profile: Profile, matched: bool, required: str, evaluation: _Evaluation):
        if matched:
            evaluation.passes(
                self.EDUCATION_WEIGHT,
                rule="Education Level",
                reason=f"Your education ({profile.education}) matches the scheme requirements"
            )
        else:
            evaluation.fails(
                "Education level",
                rule="Education Level",
                reason=f"Your education ({profile.education}) does not match the scheme requirement ({required})",
                fix="Update your education certificate or select the correct qualification"
            )

    def _check_state(self, profile: Profile, scheme: Scheme, evaluation: _Evaluation):
        if not scheme.state:
            return

        if not profile.state:
            if not scheme.is_nationwide:
                evaluation.lacks(
                    "State information",
                    field="State",
                    reason="State information required",
                    action="Upload State/Domicile certificate"
                )
            return

        if scheme.is_nationwide:
            evaluation.passes(
                self.STATE_WEIGHT,
                rule="State Match",
                reason="This scheme is available in all states"
            )
        elif scheme.state.lower() == profile.state.lower():
            evaluation.passes(
                self.STATE_WEIGHT,
                rule="State Match",
                reason=f"You are from {profile.state}, which is an eligible state for this scheme"
            )
        else:
            evaluation.fails(
                "State mismatch",
                rule="State Match",
                reason=f"Scheme is for {scheme.state}, but you are from {profile.state}",
                fix="Check state-specific schemes or obtain domicile certificate"
            )

    def _check_regional_state(self, profile: Profile, scheme: Scheme, evaluation: _Evaluation):
        if scheme.is_nationwide:
            return
        self._check_state(profile, scheme, evaluation)

    def _check_documents(self, profile: Profile, scheme: Scheme, evaluation: _Evaluation):
        # An empty list still passes the rule, only an absent one skips it
        if scheme.required_docs is None:
            return

        owned = [doc.lower() for doc in profile.documents]
        missing_docs = [
            doc for doc in scheme.required_docs
            if not any(doc.lower() in owned_doc for owned_doc in owned)
        ]

        if not missing_docs:
            evaluation.passes(
                self.DOCUMENTS_WEIGHT,
                rule="Documents",
                reason="All required documents are available"
            )
            return

        for doc in missing_docs:
            evaluation.lacks(
                doc,
                field=doc,
                reason=f"{doc} document required for application",
                action=f"Obtain or download {doc}"
            )


def rank_scores(scored: list) -> list:
    """
    Order (scheme, ScoreResult) pairs by descending score

    sorted() is stable, so ties keep catalog order.
    """
    return sorted(scored, key=lambda item: item[1].score, reverse=True)


# Global scorer instance
scheme_scorer = SchemeScorer()
