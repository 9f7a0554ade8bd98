"""
Line classifier for product-name extraction.

Each predicate answers "should this line be kept away from name scoring?".
OCR flattens an order screenshot into a plain line stream, so navigation
chrome, shipping addresses and order metadata can only be told apart from the
product title by their text.
"""

import re
from functools import lru_cache
from typing import Optional, Pattern, Tuple

from .lines import within_length_gate
from .vocabulary import ExtractionVocabulary, DEFAULT_VOCABULARY

__all__ = [
    'looks_like_address', 'is_ui_chrome', 'is_excluded_line',
    'is_valid_product_name', 'rejection_reason', 'is_name_candidate',
]

_ZIP_CODE = re.compile(r'\b\d{5}(-\d{4})?\b')
_SHIP_TO = re.compile(r'ship(ping)?\s*to', re.IGNORECASE)
# "John Smith - CA" style recipient lines (case-sensitive on purpose)
_NAME_DASH_REGION = re.compile(r'[A-Z][a-z]+\s+[A-Z][a-z]+\s*[—–-]\s*[A-Z]+')

_METADATA_PATTERNS: Tuple[Pattern, ...] = tuple(
    re.compile(p, re.IGNORECASE) for p in (
        r'^sold\s+by',
        r'^ships\s+from',
        r'^fulfilled\s+by',
        r'^order\s*[#:]',
        r'^order\s+date',
        r'^order\s+placed',
        r'^order\s+number',
        r'^arriving',
        r'^delivered',
        r'^tracking',
        r'^condition:',
        r'^color:',
        r'^size:',
        r'^gender:',
        r'^quantity:',
        r'\d+\s*@\s*\$?\d+',
        r'\$\d+[.,]\d{2}.*\d+%',
        r'\d+%\s*(off|discount)',
        r'reference\s*price',
        r'^(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\s+\d+',
        r'^\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}',
        r'^order\s+details$',
        r'^help$',
    )
)

_ASCII_LETTER = re.compile(r'[a-zA-Z]')


@lru_cache(maxsize=8)
def _region_pattern(region_codes: Tuple[str, ...]) -> Pattern:
    alternation = '|'.join(re.escape(code.upper()) for code in region_codes)
    return re.compile(rf'\b(?:{alternation})\b')


def looks_like_address(line: str, vocabulary: ExtractionVocabulary = DEFAULT_VOCABULARY) -> bool:
    """
    Detect shipping-address lines.

    Matches any of: a standalone region code (e.g. "CA"), a ZIP code,
    a "ship to" phrase, or a "First Last - REGION" recipient line.
    """
    if vocabulary.region_codes and _region_pattern(vocabulary.region_codes).search(line.upper()):
        return True
    if _ZIP_CODE.search(line):
        return True
    if _SHIP_TO.search(line):
        return True
    if _NAME_DASH_REGION.search(line):
        return True
    return False


def is_ui_chrome(line: str, vocabulary: ExtractionVocabulary = DEFAULT_VOCABULARY) -> bool:
    """True if the line contains a known storefront navigation/checkout string."""
    lower = line.lower()
    return any(term in lower for term in vocabulary.ui_exclusions)


def is_excluded_line(line: str) -> bool:
    """True for seller, order, tracking, pricing-breakdown and label lines."""
    stripped = line.strip()
    return any(pattern.search(stripped) for pattern in _METADATA_PATTERNS)


def is_valid_product_name(line: str) -> bool:
    """
    Structural plausibility check for a product title.

    Requires at least two tokens longer than one character, a letter ratio
    of at least 0.6, a length of at least 15 and a leading letter.
    """
    words = [w for w in line.split() if len(w) > 1]
    if len(words) < 2:
        return False

    letter_ratio = len(_ASCII_LETTER.findall(line)) / len(line)
    if letter_ratio < 0.6:
        return False

    if len(line) < 15:
        return False

    return bool(_ASCII_LETTER.match(line))


def rejection_reason(
    line: str,
    vocabulary: ExtractionVocabulary = DEFAULT_VOCABULARY
) -> Optional[str]:
    """
    Run the filters in order against an already-cleaned line.

    Args:
        line: Cleaned line
        vocabulary: Vocabulary tables to match against

    Returns:
        Name of the first filter that rejected the line, or None if the line
        is a name candidate
    """
    if not within_length_gate(line):
        return 'length'
    if not is_valid_product_name(line):
        return 'structure'
    if is_ui_chrome(line, vocabulary):
        return 'ui_chrome'
    if looks_like_address(line, vocabulary):
        return 'address'
    if is_excluded_line(line):
        return 'metadata'
    return None


def is_name_candidate(line: str, vocabulary: ExtractionVocabulary = DEFAULT_VOCABULARY) -> bool:
    return rejection_reason(line, vocabulary) is None
