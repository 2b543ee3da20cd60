"""
Utility functions for the YojanaMitra eligibility backend
"""

from .validators import (
    normalize_caste,
    split_list_value,
    parse_json_object,
    format_inr,
    contains_any,
    is_blank
)

__all__ = [
    "normalize_caste",
    "split_list_value",
    "parse_json_object",
    "format_inr",
    "contains_any",
    "is_blank"
]
