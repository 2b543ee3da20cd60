"""
Services package for the YojanaMitra eligibility backend
"""

from .scoring_service import SchemeScorer
from .eligibility_service import EligibilityService
from .catalog_service import JsonSchemeCatalog, CatalogUnavailableError
from .mongo_service import MongoSchemeCatalog
from .llm_service import LLMService, ExplanationError

__all__ = [
    "SchemeScorer",
    "EligibilityService",
    "JsonSchemeCatalog",
    "CatalogUnavailableError",
    "MongoSchemeCatalog",
    "LLMService",
    "ExplanationError"
]
