"""
Candidate dataclass for product-name extraction.

A candidate is a cleaned OCR line that survived every classifier filter.
Candidates live only for the duration of one extraction call.
"""

from dataclasses import dataclass
from typing import List

from .classifier import rejection_reason
from .lines import clean_line
from .vocabulary import ExtractionVocabulary, DEFAULT_VOCABULARY


@dataclass
class Candidate:
    """Potential product name with its position in the document."""
    value: str  # Cleaned line
    line_index: int  # 0-based index among normalized lines
    total_lines: int
    raw_text: str = ""  # Line before cleanup
    score: int = 0

    @property
    def position_ratio(self) -> float:
        """Relative position of the line in the document (0.0 = top)."""
        if self.total_lines <= 0:
            return 0.0
        return self.line_index / self.total_lines


def build_name_candidates(
    lines: List[str],
    vocabulary: ExtractionVocabulary = DEFAULT_VOCABULARY
) -> List[Candidate]:
    """
    Clean and filter normalized lines into unscored candidates.

    Args:
        lines: Output of normalize_lines()
        vocabulary: Vocabulary tables for the classifier

    Returns:
        Candidates in document order
    """
    candidates = []
    total = len(lines)
    for index, line in enumerate(lines):
        cleaned = clean_line(line)
        if rejection_reason(cleaned, vocabulary) is not None:
            continue
        candidates.append(Candidate(
            value=cleaned,
            line_index=index,
            total_lines=total,
            raw_text=line,
        ))
    return candidates
