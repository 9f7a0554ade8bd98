"""
Money parsing for OCR'd amounts and CSV cost columns.

Handles:
- US: 1,234.56
- European decimal comma: 12,50 or 1.234,56
- Negative: -$12.34 or ($12.34) (rejected unless allow_negative)
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional
import re


class MoneyFormat(Enum):
    """Detected separator convention."""
    US = "US"  # 1,234.56
    EUROPEAN = "EUROPEAN"  # 1.234,56 or 12,50


def parse_money(amount_str: str, allow_negative: bool = False) -> Optional[Decimal]:
    """
    Parse a money string.

    Args:
        amount_str: String containing amount (e.g., "$1,234.56", "12,50")
        allow_negative: Whether to allow negative amounts

    Returns:
        Decimal amount or None if parsing fails

    Examples:
        >>> parse_money("$1,234.56")
        Decimal('1234.56')
        >>> parse_money("12,50")
        Decimal('12.50')
    """
    if not amount_str or not isinstance(amount_str, str):
        return None

    is_negative = False
    cleaned = amount_str.strip()

    if cleaned.startswith('(') and cleaned.endswith(')'):
        if not allow_negative:
            return None
        is_negative = True
        cleaned = cleaned[1:-1].strip()

    if cleaned.startswith('-'):
        if not allow_negative:
            return None
        is_negative = True
        cleaned = cleaned[1:].strip()

    # Strip currency symbols and ISO codes
    cleaned = re.sub(r'[$£€¥]\s*|[A-Z]{3}\s*', '', cleaned, flags=re.IGNORECASE)
    cleaned = cleaned.strip()

    if not cleaned:
        return None

    if _detect_money_format(cleaned) == MoneyFormat.EUROPEAN:
        result = _parse_european_format(cleaned)
    else:
        result = _parse_us_format(cleaned)

    if result is None or not result.is_finite():
        return None

    return -result if is_negative else result


def _detect_money_format(amount_str: str) -> MoneyFormat:
    """
    Auto-detect money format based on separator patterns.

    - Ends with ,XX (comma + 2 digits): European
    - Dot before the last comma: European
    - Otherwise US
    """
    if re.search(r',\d{2}$', amount_str):
        return MoneyFormat.EUROPEAN

    if '.' in amount_str and ',' in amount_str:
        if amount_str.index('.') < amount_str.rindex(','):
            return MoneyFormat.EUROPEAN

    return MoneyFormat.US


def _parse_us_format(amount_str: str) -> Optional[Decimal]:
    """Parse 1,234.56 (comma thousands, dot decimal)."""
    cleaned = amount_str.replace(',', '').replace(' ', '')
    try:
        return Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None


def _parse_european_format(amount_str: str) -> Optional[Decimal]:
    """Parse 1.234,56 (dot/space thousands, comma decimal)."""
    cleaned = amount_str.replace('.', '').replace(' ', '').replace(',', '.')
    try:
        return Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None
