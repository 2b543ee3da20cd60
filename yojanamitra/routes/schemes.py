"""
API routes for scheme lookup
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from ..dependencies import get_catalog
from ..models.scheme import Scheme
from ..services.catalog_service import CatalogUnavailableError
from ..services.scoring_service import SchemeScorer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["schemes"])


@router.get("/scheme")
async def get_scheme(
    scheme_id: Optional[str] = Query(None, alias="id", description="Scheme ID"),
    all_schemes: bool = Query(False, alias="all", description="Return every scheme"),
    catalog=Depends(get_catalog)
):
    """
    Get one scheme by ID, or all schemes with ?all=true
    """
    try:
        if all_schemes:
            schemes = await catalog.load()
            return {"success": True, "schemes": schemes}

        if not scheme_id:
            raise HTTPException(
                status_code=400,
                detail="Scheme ID is required (or use ?all=true for all schemes)"
            )

        scheme = await catalog.get(scheme_id)
        if not scheme:
            raise HTTPException(status_code=404, detail="Scheme not found")

        return {"success": True, "scheme": scheme}

    except HTTPException:
        raise
    except CatalogUnavailableError as e:
        logger.error(f"Scheme catalog unavailable: {e}")
        raise HTTPException(status_code=404, detail="Schemes database not found")
    except Exception as e:
        logger.error(f"Error fetching scheme: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch scheme")


@router.get("/scheme/{scheme_id}/requirements")
async def get_scheme_requirements(scheme_id: str, catalog=Depends(get_catalog)):
    """
    Get the eligibility rules and required documents of a scheme
    """
    try:
        record = await catalog.get(scheme_id)
    except CatalogUnavailableError as e:
        logger.error(f"Scheme catalog unavailable: {e}")
        raise HTTPException(status_code=404, detail="Schemes database not found")

    if not record:
        raise HTTPException(status_code=404, detail=f"Scheme not found: {scheme_id}")

    try:
        scheme = Scheme.model_validate(record)
    except ValidationError as e:
        logger.error(f"Invalid scheme entry {scheme_id}: {e}")
        raise HTTPException(status_code=422, detail=f"Invalid scheme data for {scheme_id}")

    eligibility = scheme.eligibility
    criteria = []
    if eligibility.income_max is not None:
        criteria.append({
            "rule": "Income Limit",
            "value": eligibility.income_max,
            "weight": SchemeScorer.INCOME_WEIGHT
        })
    if eligibility.caste:
        criteria.append({
            "rule": "Category Match",
            "value": eligibility.caste,
            "weight": SchemeScorer.CASTE_WEIGHT
        })
    if eligibility.student or eligibility.education:
        criteria.append({
            "rule": "Education Level",
            "value": eligibility.education or "student",
            "weight": SchemeScorer.EDUCATION_WEIGHT
        })
    if scheme.state:
        criteria.append({
            "rule": "State Match",
            "value": scheme.state,
            "weight": SchemeScorer.STATE_WEIGHT
        })

    return {
        "scheme_id": scheme.id,
        "title": scheme.title,
        "state": scheme.state,
        "eligibility_criteria": criteria,
        "other_conditions": eligibility.model_dump(
            exclude={"income_max", "caste", "student", "education"},
            exclude_none=True
        ),
        "required_documents": scheme.required_docs or [],
        "official_portal_url": scheme.official_portal_url,
        "application_url": scheme.application_url
    }
