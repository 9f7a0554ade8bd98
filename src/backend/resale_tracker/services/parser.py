"""
Receipt parser service: OCR text -> best-guess {name, cost, quantity}.

The name comes from candidate scoring over individual lines. Cost and
quantity come from regex extractors that run over the whole text, independent
of the name pipeline.
"""

import re
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, List

from resale_tracker.utils.candidates import Candidate, build_name_candidates
from resale_tracker.utils.lines import normalize_lines
from resale_tracker.utils.money import parse_money
from resale_tracker.utils.scoring import (
    MIN_SCORE_THRESHOLD,
    score_candidates,
    select_best_name,
    select_top_names,
)
from resale_tracker.utils.vocabulary import ExtractionVocabulary, DEFAULT_VOCABULARY

logger = logging.getLogger(__name__)

UNNAMED_ITEM = "Unnamed Item"
NO_NAME_WARNING = "No product name found above threshold. Please enter manually."
MAX_PLAUSIBLE_PRICE = Decimal('5000')

# Amount with two decimals; thousands-grouped form first so "1,234.56" is not cut at "1,23"
_AMOUNT = r'(\d{1,3}(?:,\d{3})+\.\d{2}|\d+[.,]\d{2})'


@dataclass(frozen=True)
class PatternSpec:
    """A named regex pattern with example and notes for documentation."""
    name: str
    pattern: str
    example: str
    notes: Optional[str] = None
    priority: Optional[int] = None
    flags: int = re.IGNORECASE
    compiled: re.Pattern = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'compiled', re.compile(self.pattern, self.flags))


@dataclass
class ParsedFields:
    """Structured fields parsed out of one receipt's OCR text."""
    name: str = UNNAMED_ITEM
    cost: Decimal = Decimal('0')
    quantity: int = 1
    name_found: bool = False
    warnings: List[str] = field(default_factory=list)
    top_candidates: List[Candidate] = field(default_factory=list)


class ReceiptParser:
    """Parse order/receipt OCR text into lot fields."""

    def __init__(
        self,
        vocabulary: ExtractionVocabulary = DEFAULT_VOCABULARY,
        min_score: int = MIN_SCORE_THRESHOLD,
        max_price: Decimal = MAX_PLAUSIBLE_PRICE,
    ):
        """
        Initialize parser.

        Args:
            vocabulary: Brand/indicator/chrome tables for name extraction
            min_score: Minimum candidate score to accept a name
            max_price: Exclusive upper bound for a plausible item price
        """
        self.vocabulary = vocabulary
        self.min_score = min_score
        self.max_price = Decimal(max_price)
        self._init_patterns()

    def _init_patterns(self):
        """Initialize regex patterns for cost and quantity."""

        # Every match of every pattern is considered; the largest plausible value wins
        self.price_patterns = [
            PatternSpec(
                name='dollar_amount',
                pattern=r'\$\s*' + _AMOUNT,
                example='$89.99',
                priority=1,
            ),
            PatternSpec(
                name='usd_amount',
                pattern=r'USD\s*' + _AMOUNT,
                example='USD 89.99',
                priority=2,
            ),
            PatternSpec(
                name='total_label',
                pattern=r'Total[:\s]*\$?\s*' + _AMOUNT,
                example='Total: 89.99',
                notes='Catches totals printed without a currency symbol',
                priority=3,
            ),
        ]

        # Checked in this order; the first pattern that matches anywhere wins
        self.quantity_patterns = [
            PatternSpec(
                name='qty_label',
                pattern=r'Qty[:\s]*(\d+)',
                example='Qty: 2',
                priority=1,
            ),
            PatternSpec(
                name='quantity_label',
                pattern=r'Quantity[:\s]*(\d+)',
                example='Quantity: 2',
                priority=2,
            ),
            PatternSpec(
                name='unit_price_breakdown',
                pattern=r'(\d+)\s*@\s*\$',
                example='3 @ $5.00',
                priority=3,
            ),
        ]

    def parse(self, text: str) -> ParsedFields:
        """
        Parse OCR text into name, cost and quantity.

        Args:
            text: Raw OCR text

        Returns:
            ParsedFields; missing fields keep their defaults
        """
        text = text or ""
        result = ParsedFields(
            cost=self.extract_cost(text),
            quantity=self.extract_quantity(text),
        )

        lines = normalize_lines(text)
        candidates = score_candidates(build_name_candidates(lines, self.vocabulary), self.vocabulary)
        result.top_candidates = select_top_names(candidates, top_n=5)

        logger.debug("Name candidates scored", extra={
            "line_count": len(lines),
            "candidate_count": len(candidates),
            "top_candidates": [(c.value, c.score) for c in result.top_candidates],
        })

        name = select_best_name(candidates, self.min_score)
        if name:
            result.name = name
            result.name_found = True
        else:
            logger.warning("No product name found above threshold", extra={
                "min_score": self.min_score,
                "best_score": result.top_candidates[0].score if result.top_candidates else None,
            })
            result.warnings.append(NO_NAME_WARNING)

        return result

    def extract_cost(self, text: str) -> Decimal:
        """
        Extract the item cost.

        Scans every match of every price pattern and keeps the largest
        amount strictly between 0 and max_price. Large values are usually
        misread barcodes or order numbers; smaller ones are discounts or fees.

        Args:
            text: Raw OCR text

        Returns:
            Cost, or Decimal('0') when nothing plausible matched
        """
        best = Decimal('0')
        for spec in self.price_patterns:
            for match in spec.compiled.finditer(text or ""):
                amount = parse_money(match.group(1))
                if amount is None:
                    continue
                if Decimal('0') < amount < self.max_price and amount > best:
                    best = amount
        return best

    def extract_quantity(self, text: str) -> int:
        """
        Extract the purchased quantity.

        Patterns are tried in order (Qty, Quantity, N @ $); the first
        pattern that matches anywhere in the text decides. Result is at least 1.

        Args:
            text: Raw OCR text

        Returns:
            Quantity >= 1
        """
        for spec in self.quantity_patterns:
            match = spec.compiled.search(text or "")
            if match:
                try:
                    quantity = int(match.group(1))
                except ValueError:
                    continue
                logger.debug("Quantity matched", extra={"pattern": spec.name, "quantity": quantity})
                return max(1, quantity)
        return 1
