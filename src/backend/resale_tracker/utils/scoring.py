"""
Scoring and selection for product-name candidates.

Scores are plain integers built from independent, additive signals. They are
only meaningful relative to each other; there is no normalization and no cap.
No single signal is required: a brand hit, a size parenthetical or a
well-shaped title can each carry a line over the acceptance threshold.
"""

import re
from typing import List, Optional

from .candidates import Candidate
from .vocabulary import ExtractionVocabulary, DEFAULT_VOCABULARY

__all__ = [
    'score_name_candidate', 'score_candidates',
    'select_best_name', 'select_top_names',
    'MIN_SCORE_THRESHOLD', 'MAX_NAME_LENGTH',
]

MIN_SCORE_THRESHOLD = 50
MAX_NAME_LENGTH = 100

# Signal weights
PRODUCT_INDICATOR_BONUS = 30
BRAND_BONUS = 60
IDEAL_LENGTH_BONUS = 25
OK_LENGTH_BONUS = 10
IDEAL_WORD_COUNT_BONUS = 25
OK_WORD_COUNT_BONUS = 10
TITLE_CASE_BONUS = 15
MULTI_CAPITALIZED_BONUS = 20
SIZE_QUALIFIER_BONUS = 30
MID_DOCUMENT_BONUS = 15
EDGE_OF_DOCUMENT_PENALTY = -25

_TITLE_CASE_START = re.compile(r'^[A-Z][a-z]')
_CAPITALIZED_WORD = re.compile(r'\b[A-Z][a-z]{2,}')
_SIZE_QUALIFIER = re.compile(r'\([SMLX]{1,2}\)|\(Small\)|\(Medium\)|\(Large\)', re.IGNORECASE)


def _vocabulary_score(line: str, vocabulary: ExtractionVocabulary) -> int:
    lower = line.lower()
    score = sum(PRODUCT_INDICATOR_BONUS for term in vocabulary.product_indicators if term in lower)
    score += sum(BRAND_BONUS for brand in vocabulary.brands if brand in lower)
    return score


def score_name_candidate(
    candidate: Candidate,
    vocabulary: ExtractionVocabulary = DEFAULT_VOCABULARY
) -> int:
    """
    Score a product-name candidate.

    Scoring factors:
    - Product indicator word: +30 each
    - Known brand: +60 each
    - Length 20-70: +25 (15-90: +10)
    - Word count 4-12: +25 (3+: +10)
    - Starts Title-case: +15
    - Two or more capitalized words: +20
    - Size parenthetical like (M) or (Large): +30
    - Position 15%-55% into the document: +15
    - Position in the first 8% or last 15%: -25

    Args:
        candidate: Candidate to score
        vocabulary: Vocabulary tables for brand/indicator hits

    Returns:
        Integer score (may be negative)
    """
    line = candidate.value
    score = _vocabulary_score(line, vocabulary)

    length = len(line)
    if 20 <= length <= 70:
        score += IDEAL_LENGTH_BONUS
    elif 15 <= length <= 90:
        score += OK_LENGTH_BONUS

    word_count = len(line.split())
    if 4 <= word_count <= 12:
        score += IDEAL_WORD_COUNT_BONUS
    elif word_count >= 3:
        score += OK_WORD_COUNT_BONUS

    if _TITLE_CASE_START.match(line):
        score += TITLE_CASE_BONUS

    if len(_CAPITALIZED_WORD.findall(line)) >= 2:
        score += MULTI_CAPITALIZED_BONUS

    if _SIZE_QUALIFIER.search(line):
        score += SIZE_QUALIFIER_BONUS

    # Titles sit after header chrome and before footer/shipping blocks
    position = candidate.position_ratio
    if 0.15 <= position <= 0.55:
        score += MID_DOCUMENT_BONUS
    if position < 0.08 or position > 0.85:
        score += EDGE_OF_DOCUMENT_PENALTY

    return score


def score_candidates(
    candidates: List[Candidate],
    vocabulary: ExtractionVocabulary = DEFAULT_VOCABULARY
) -> List[Candidate]:
    """Assign a score to every candidate in place and return the list."""
    for candidate in candidates:
        candidate.score = score_name_candidate(candidate, vocabulary)
    return candidates


def select_top_names(candidates: List[Candidate], top_n: int = 5) -> List[Candidate]:
    """
    Rank scored candidates.

    Ties keep document order (earlier line first).

    Args:
        candidates: Scored candidates
        top_n: Number of candidates to return

    Returns:
        Up to top_n candidates, best first
    """
    ranked = sorted(candidates, key=lambda c: (-c.score, c.line_index))
    return ranked[:top_n]


def select_best_name(
    candidates: List[Candidate],
    min_score: int = MIN_SCORE_THRESHOLD
) -> Optional[str]:
    """
    Pick the product name from scored candidates.

    Args:
        candidates: Scored candidates
        min_score: Minimum score for acceptance

    Returns:
        Best name truncated to 100 characters, or None if no candidate
        reaches min_score
    """
    ranked = select_top_names(candidates, top_n=1)
    if not ranked or ranked[0].score < min_score:
        return None
    return ranked[0].value[:MAX_NAME_LENGTH].strip()
