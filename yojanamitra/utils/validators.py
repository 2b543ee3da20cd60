"""
Utility functions for normalising catalog and profile values
"""
import json
import re
from typing import Any, List, Optional


def normalize_caste(caste: Optional[str]) -> Optional[str]:
    """
    Normalise a free-text caste/category value

    Args:
        caste: Raw category value (e.g. "obc category", "Scheduled Caste")

    Returns:
        One of SC/ST/OBC/General/EWS when recognised, otherwise the trimmed input
    """
    if caste is None:
        return None

    value = str(caste).strip()
    if not value:
        return None

    upper = value.upper()
    tokens = re.findall(r'[A-Z]+', upper)
    if 'OBC' in tokens or 'OTHER BACKWARD' in upper:
        return 'OBC'
    if 'SC' in tokens or 'SCHEDULED CASTE' in upper:
        return 'SC'
    if 'ST' in tokens or 'SCHEDULED TRIBE' in upper:
        return 'ST'
    if 'EWS' in tokens or 'ECONOMICALLY WEAKER' in upper:
        return 'EWS'
    if tokens and tokens[0].startswith('GEN'):
        return 'General'
    return value


def split_list_value(value: Any) -> Any:
    """
    Split comma-separated strings into lists

    Catalog rows converted from CSV carry list fields as "OBC, SC".
    Anything that is not a string is returned unchanged.
    """
    if isinstance(value, str):
        return [item.strip() for item in value.split(',') if item.strip()]
    return value


def parse_json_object(value: Any) -> Any:
    """
    Parse a JSON object stored as a string

    Args:
        value: Either a dict or a JSON string holding an object

    Returns:
        The parsed dict, an empty dict for blank strings, or the value unchanged
    """
    if isinstance(value, str):
        if not value.strip():
            return {}
        return json.loads(value)
    return value


def format_inr(amount: Optional[float]) -> str:
    """
    Format a rupee amount with thousands separators

    Args:
        amount: Amount in rupees

    Returns:
        "120,000" style string, or "N/A" when unknown
    """
    if amount is None:
        return "N/A"
    if float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def contains_any(text: str, keywords: List[str]) -> bool:
    """Case-insensitive check that any keyword occurs in text"""
    lowered = text.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def is_blank(value: Any) -> bool:
    """True for None and whitespace-only strings"""
    return value is None or (isinstance(value, str) and not re.sub(r'\s+', '', value))
