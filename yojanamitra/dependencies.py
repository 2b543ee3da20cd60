"""
FastAPI dependencies for the scheme catalog and explanation service
"""
from fastapi import Request

from .config import settings
from .services.catalog_service import JsonSchemeCatalog


def get_catalog(request: Request):
    """Catalog created at startup, or the JSON file catalog from settings"""
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        catalog = JsonSchemeCatalog(settings.catalog_path)
    return catalog


def get_explainer(request: Request):
    """Explanation service created at startup, None when unconfigured"""
    return getattr(request.app.state, "explainer", None)
