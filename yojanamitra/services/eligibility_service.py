"""
Eligibility service for matching profiles against the scheme catalog
"""
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from ..config import settings
from ..models.profile import Profile
from ..models.scheme import Scheme, SchemeSummary
from ..models.eligibility import (
    EligibilityReasons,
    EligibilityVerdict,
    MatchResponse,
    MatchResult,
    NextAction,
    RuleOutcome,
    ScoreResult
)
from ..utils.validators import format_inr, is_blank
from .scoring_service import SchemeScorer, rank_scores, scheme_scorer

logger = logging.getLogger(__name__)


ELIGIBLE_MIN_CONFIDENCE = 0.6
MAX_MISSING_FOR_ELIGIBLE = 2

NO_SCHEMES_MESSAGE = "No schemes available in database"
NO_MATCH_MESSAGE = "No matching schemes found. Please provide more information (state, education, etc.)"

ScoredScheme = Tuple[Optional[Scheme], ScoreResult]


class EligibilityService:
    """Ranks schemes for a profile and builds explainable eligibility verdicts"""

    def __init__(
        self,
        scorer: Optional[SchemeScorer] = None,
        match_pool_size: Optional[int] = None,
        explain_top_n: Optional[int] = None,
        max_next_actions: Optional[int] = None
    ):
        self.scorer = scorer or scheme_scorer
        self.match_pool_size = match_pool_size if match_pool_size is not None else settings.match_pool_size
        self.explain_top_n = explain_top_n if explain_top_n is not None else settings.explain_top_n
        self.max_next_actions = max_next_actions if max_next_actions is not None else settings.max_next_actions

    async def evaluate(
        self,
        profile: Profile,
        scheme: Optional[Scheme] = None,
        schemes: Optional[List[Dict[str, Any]]] = None,
        explainer=None,
        top_n: Optional[int] = None
    ) -> Union[EligibilityVerdict, MatchResponse]:
        """
        Evaluate one scheme, or match against a whole catalog

        Args:
            profile: Applicant profile
            scheme: Scheme for a single verdict
            schemes: Raw catalog records for batch matching
            explainer: Optional explanation service
            top_n: Number of matches to explain (batch mode only)

        Returns:
            EligibilityVerdict for a single scheme, MatchResponse for a catalog
        """
        if profile is None:
            raise ValueError("profile required")
        if scheme is not None:
            return await self.evaluate_scheme(profile, scheme, explainer=explainer)
        if schemes is None:
            raise ValueError("scheme or schemes required")
        return await self.match_schemes(profile, schemes, explainer=explainer, top_n=top_n)

    # Batch matching

    async def match_schemes(
        self,
        profile: Profile,
        records: List[Dict[str, Any]],
        explainer=None,
        top_n: Optional[int] = None
    ) -> MatchResponse:
        """
        Score every catalog record, rank them and explain the best matches

        Args:
            profile: Applicant profile
            records: Raw scheme records in catalog order
            explainer: Optional explanation service
            top_n: Number of matches to explain (defaults to settings)

        Returns:
            MatchResponse with explained results and summary counts
        """
        if not records:
            logger.warning("No schemes found in database")
            return MatchResponse(results=[], total_schemes=0, matched_schemes=0, message=NO_SCHEMES_MESSAGE)

        scored = [
            self._score_record(profile, record)
            for record in records
            if isinstance(record, dict) and not is_blank(record.get("id")) and not is_blank(record.get("title"))
        ]

        pool = rank_scores(scored)[:self.match_pool_size]
        relevant = [(scheme, result) for scheme, result in pool if result.score > 0]

        if not relevant:
            return MatchResponse(
                results=[],
                total_schemes=len(records),
                matched_schemes=0,
                message=NO_MATCH_MESSAGE
            )

        top = relevant[:top_n if top_n is not None else self.explain_top_n]

        if explainer is None:
            results = [self._template_result(profile, scheme, result, mention_score=True) for scheme, result in top]
        else:
            outcomes = await asyncio.gather(
                *(self._explain_match(profile, scheme, result, explainer) for scheme, result in top),
                return_exceptions=True
            )
            results = []
            for (scheme, result), outcome in zip(top, outcomes):
                if isinstance(outcome, BaseException):
                    logger.error(f"Failed to explain scheme {scheme.id}: {outcome}")
                    results.append(self._unexplained_result(scheme, result))
                else:
                    results.append(outcome)

        logger.info(f"Matched {len(relevant)}/{len(records)} schemes, explained {len(results)}")
        return MatchResponse(
            results=results,
            total_schemes=len(records),
            matched_schemes=len(relevant)
        )

    def _score_record(self, profile: Profile, record: Dict[str, Any]) -> ScoredScheme:
        try:
            scheme = Scheme.model_validate(record)
            return scheme, self.scorer.score(profile, scheme)
        except ValidationError as e:
            logger.error(f"Invalid scheme entry {record.get('id')}: {e.error_count()} validation errors")
            return None, ScoreResult()
        except Exception as e:
            logger.error(f"Error scoring scheme {record.get('id')}: {e}")
            return None, ScoreResult()

    async def _explain_match(
        self,
        profile: Profile,
        scheme: Scheme,
        result: ScoreResult,
        explainer
    ) -> MatchResult:
        try:
            explanation = await explainer.explain_match(profile, scheme)
        except Exception as e:
            logger.warning(f"Error explaining scheme {scheme.id}: {e}")
            return self._template_result(profile, scheme, result)

        confidence_level = self._explained_confidence_level(explanation, result)
        return MatchResult(
            scheme=SchemeSummary.from_scheme(scheme),
            score=result.score,
            confidence=result.confidence,
            confidence_level=confidence_level,
            explanation=explanation,
            missing_fields=result.missing_fields,
            needs_review=confidence_level == "Low" or result.confidence < 0.5
        )

    def _template_result(
        self,
        profile: Profile,
        scheme: Scheme,
        result: ScoreResult,
        mention_score: bool = False
    ) -> MatchResult:
        if mention_score:
            explanation = (
                f"This scheme may be suitable based on your profile. Score: {result.score}. "
                "Please check eligibility criteria."
            )
        else:
            criteria = json.dumps(
                scheme.eligibility.model_dump(exclude_none=True),
                separators=(",", ":"),
                ensure_ascii=False
            )
            explanation = (
                f"You may be eligible for this scheme. Your income is ₹{format_inr(profile.income_annual)} "
                f"and you belong to {profile.caste or 'N/A'} category. "
                f"Please check the eligibility criteria: {criteria}."
            )

        return MatchResult(
            scheme=SchemeSummary.from_scheme(scheme),
            score=result.score,
            confidence=result.confidence,
            confidence_level=self._threshold_confidence_level(result.confidence),
            explanation=explanation,
            missing_fields=result.missing_fields,
            needs_review=result.confidence < 0.5
        )

    def _unexplained_result(self, scheme: Scheme, result: ScoreResult) -> MatchResult:
        return MatchResult(
            scheme=SchemeSummary.from_scheme(scheme),
            score=result.score,
            confidence=result.confidence,
            confidence_level="Medium",
            explanation="You may be eligible for this scheme. Please check the eligibility criteria.",
            missing_fields=result.missing_fields,
            needs_review=True
        )

    @staticmethod
    def _threshold_confidence_level(confidence: float) -> str:
        if confidence > 0.7:
            return "High"
        if confidence > 0.4:
            return "Medium"
        return "Low"

    @staticmethod
    def _explained_confidence_level(explanation: str, result: ScoreResult) -> str:
        text = explanation.lower()
        if "high confidence" in text or result.confidence > 0.7:
            return "High"
        if "low confidence" in text or result.confidence < 0.4 or len(result.missing_fields) > 2:
            return "Low"
        return "Medium"

    # Single scheme verdict

    async def evaluate_scheme(self, profile: Profile, scheme: Scheme, explainer=None) -> EligibilityVerdict:
        """
        Build an explainable eligibility verdict for one scheme

        The rule-based score is blended with an optional AI score (0-30)
        against a maximum of 100. A failing or absent explanation service
        never changes the rule-based part of the verdict.

        Args:
            profile: Applicant profile
            scheme: Scheme to evaluate
            explainer: Optional explanation service

        Returns:
            EligibilityVerdict
        """
        if profile is None:
            raise ValueError("profile required")

        result = self.scorer.score(profile, scheme, single_scheme=True)
        mostly_passing = len(result.passed) > len(result.failed)

        explanation = ""
        ai_score = 0
        next_actions: List[NextAction] = []

        if explainer is not None:
            try:
                assessment = await explainer.assess_eligibility(profile, scheme, result)
                explanation = assessment.explanation
                ai_score = assessment.ai_score
                next_actions = list(assessment.next_actions)
            except Exception as e:
                logger.warning(f"AI analysis failed for scheme {scheme.id}: {e}")
                explanation = (
                    "You appear to be eligible for this scheme based on available information."
                    if mostly_passing
                    else "Some additional information or documents are needed to confirm eligibility."
                )
        else:
            explanation = (
                "You appear to be eligible for this scheme."
                if mostly_passing
                else "Some information is missing to confirm eligibility."
            )

        total_score = result.score + ai_score
        confidence = self.scorer.confidence_for(total_score)

        eligible = (
            len(result.failed) == 0
            and len(result.missing) <= MAX_MISSING_FOR_ELIGIBLE
            and confidence >= ELIGIBLE_MIN_CONFIDENCE
        )

        if not next_actions:
            next_actions = self.derive_next_actions(result)

        if not explanation:
            outcome = "you appear to be eligible" if eligible else "some additional steps are required"
            explanation = f"Based on available information, {outcome}."

        passed = [
            RuleOutcome(rule=p.rule, reason=p.reason, source=scheme.official_portal_url)
            for p in result.passed
        ]

        logger.info(
            f"Eligibility for {scheme.id}: eligible={eligible} confidence={confidence:.2f} "
            f"(rule {result.score}, ai {ai_score})"
        )
        return EligibilityVerdict(
            eligible=eligible,
            confidence=confidence,
            confidence_level=self.verdict_confidence_level(confidence),
            explanation=explanation,
            reasons=EligibilityReasons(passed=passed, failed=result.failed, missing=result.missing),
            next_actions=next_actions[:self.max_next_actions],
            score=total_score,
            rule_based_score=result.score,
            ai_based_score=ai_score
        )

    @staticmethod
    def verdict_confidence_level(confidence: float) -> str:
        if confidence >= 0.8:
            return "High"
        if confidence < 0.5:
            return "Low"
        return "Medium"

    def derive_next_actions(self, result: ScoreResult) -> List[NextAction]:
        """
        Turn missing fields and fixable failures into next actions

        Missing fields come first; income and category gaps are high priority.
        """
        actions = []
        for item in result.missing:
            field = item.field.lower()
            priority = "high" if "income" in field or "category" in field else "medium"
            actions.append(NextAction(action=item.action, priority=priority, description=item.reason))

        for item in result.failed:
            if item.fix:
                actions.append(NextAction(action=item.fix, priority="high", description=item.reason))

        return actions[:self.max_next_actions]


# Global eligibility service instance
eligibility_service = EligibilityService()
