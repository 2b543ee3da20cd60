"""
API routes for the YojanaMitra eligibility backend
"""

from .eligibility import router as eligibility_router
from .schemes import router as schemes_router

__all__ = [
    "eligibility_router",
    "schemes_router"
]
