"""
API routes for scheme matching and eligibility verdicts
"""
import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError

from ..dependencies import get_catalog, get_explainer
from ..models.profile import Profile
from ..models.scheme import Scheme
from ..models.eligibility import EligibilityResponse, MatchResponse, SchemeReference
from ..services.catalog_service import CatalogUnavailableError
from ..services.eligibility_service import eligibility_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["eligibility"])


def parse_profile(profile_data: Any) -> Profile:
    """Validate a profile from a request body"""
    try:
        return Profile.model_validate(profile_data)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid profile data: {e.errors(include_url=False)}")


@router.post("/match", response_model=MatchResponse)
async def match_schemes(
    request: Optional[Dict[str, Any]] = Body(None),
    catalog=Depends(get_catalog),
    explainer=Depends(get_explainer)
):
    """
    Rank all schemes for a profile and explain the best matches
    """
    request = request or {}
    if request.get("profile") is None:
        raise HTTPException(status_code=400, detail="profile required")

    profile = parse_profile(request["profile"])

    try:
        records = await catalog.load()
    except CatalogUnavailableError as e:
        logger.error(f"Scheme catalog unavailable: {e}")
        return MatchResponse(
            results=[],
            total_schemes=0,
            matched_schemes=0,
            message=f"Scheme catalog unavailable: {e}"
        )

    try:
        return await eligibility_service.match_schemes(profile, records, explainer=explainer)
    except Exception as e:
        logger.error(f"Error matching schemes: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/eligibility-builder", response_model=EligibilityResponse)
async def build_eligibility(
    request: Optional[Dict[str, Any]] = Body(None),
    catalog=Depends(get_catalog),
    explainer=Depends(get_explainer)
):
    """
    Explainable eligibility verdict for one scheme
    """
    request = request or {}
    if request.get("profile") is None:
        raise HTTPException(status_code=400, detail="Profile is required")

    scheme_id = request.get("schemeId") or request.get("scheme_id")
    if not scheme_id:
        raise HTTPException(status_code=400, detail="Scheme ID is required")

    profile = parse_profile(request["profile"])

    try:
        record = await catalog.get(str(scheme_id))
    except CatalogUnavailableError as e:
        logger.error(f"Scheme catalog unavailable: {e}")
        raise HTTPException(status_code=404, detail="Schemes database not found")

    if record is None:
        raise HTTPException(status_code=404, detail="Scheme not found")

    try:
        scheme = Scheme.model_validate(record)
    except ValidationError as e:
        logger.error(f"Invalid scheme entry {scheme_id}: {e}")
        raise HTTPException(status_code=422, detail=f"Invalid scheme data for {scheme_id}")

    try:
        verdict = await eligibility_service.evaluate_scheme(profile, scheme, explainer=explainer)
    except Exception as e:
        logger.error(f"Error analyzing eligibility for {scheme_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to analyze eligibility")

    return EligibilityResponse(
        success=True,
        result=verdict,
        scheme=SchemeReference(
            id=scheme.id,
            title=scheme.title,
            official_portal_url=scheme.official_portal_url
        )
    )
