"""
Tests for ReceiptParser: name selection plus cost and quantity extractors.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from resale_tracker.services.parser import ReceiptParser, UNNAMED_ITEM, NO_NAME_WARNING
from resale_tracker.utils.vocabulary import vocabulary_from_settings


@pytest.fixture
def parser():
    return ReceiptParser()


class TestParseScenarios:

    def test_cole_haan_order(self, parser, cole_haan_text):
        result = parser.parse(cole_haan_text)
        assert result.name == "Cole Haan Men's Grand Crosscourt Sneaker (M)"
        assert result.cost == Decimal("89.99")
        assert result.quantity == 2
        assert result.name_found
        assert result.warnings == []

    def test_address_line_never_selected(self, parser, cole_haan_text):
        result = parser.parse(cole_haan_text)
        assert all("Ship to" not in c.value for c in result.top_candidates)

    def test_low_scoring_text_is_unnamed(self, parser):
        # Passes every filter but only scores 25 as the sole (top-of-document) line
        result = parser.parse("lorem ipsum dolor sit amet")
        assert [c.score for c in result.top_candidates] == [25]
        assert result.name == UNNAMED_ITEM
        assert not result.name_found
        assert result.warnings == [NO_NAME_WARNING]

    @pytest.mark.parametrize("text", ["", "   \n\t\n  "])
    def test_blank_text_defaults(self, parser, text):
        result = parser.parse(text)
        assert result.name == UNNAMED_ITEM
        assert result.cost == Decimal("0")
        assert result.quantity == 1

    def test_name_is_best_mid_document_title(self, parser):
        text = "\n".join([
            "Hello, Sam",
            "Your Orders",
            "Order placed January 9, 2024",
            "Apple AirPods Pro 2nd Generation Wireless Earbuds",
            "Sold by: Apple",
            "Return window closed on Feb 8",
            "Amazon Basics USB-C Charger Cable 6ft",
            "Buy it again",
            "Item subtotal: $189.99",
            "Grand total: $201.38",
        ])
        assert parser.parse(text).name == "Apple AirPods Pro 2nd Generation Wireless Earbuds"

    def test_name_truncated_to_100_chars(self, parser):
        title = "Nike Mens Running Shoes " + " ".join(["Lightweight"] * 8)
        text = "\n".join(["x", "y", title, "z", "w"])
        name = parser.parse(text).name
        assert len(name) <= 100
        assert title.startswith(name)

    def test_extra_brands_from_settings(self):
        fake_settings = SimpleNamespace(
            EXTRA_BRANDS=["zorblax"], EXTRA_PRODUCT_INDICATORS=[], EXTRA_UI_EXCLUSIONS=[],
        )
        text = "\n".join(["a", "b", "zorblax quux widget", "c", "d"])
        assert ReceiptParser().parse(text).name == UNNAMED_ITEM
        tuned = ReceiptParser(vocabulary=vocabulary_from_settings(fake_settings))
        assert tuned.parse(text).name == "zorblax quux widget"


class TestExtractCost:

    def test_largest_amount_wins(self, parser):
        text = "Discount: -$12.00\nTotal: $45.00"
        assert parser.extract_cost(text) == Decimal("45.00")

    def test_every_occurrence_is_considered(self, parser):
        text = "Shipping $5.99\nItem $45.00\nCoupon $3.00"
        assert parser.extract_cost(text) == Decimal("45.00")

    def test_upper_bound_is_exclusive(self, parser):
        assert parser.extract_cost("$5000.00\n$20.00") == Decimal("20.00")
        assert parser.extract_cost("$4999.99\n$20.00") == Decimal("4999.99")
        assert parser.extract_cost("Barcode $918273.45") == Decimal("0")

    def test_zero_is_not_a_price(self, parser):
        assert parser.extract_cost("Shipping: $0.00") == Decimal("0")

    def test_usd_and_total_patterns(self, parser):
        assert parser.extract_cost("Paid USD 31.50") == Decimal("31.50")
        assert parser.extract_cost("Order Total: 64.20") == Decimal("64.20")

    def test_decimal_comma(self, parser):
        assert parser.extract_cost("Total: 12,50") == Decimal("12.50")

    def test_thousands_separator(self, parser):
        assert parser.extract_cost("Total: $1,234.56") == Decimal("1234.56")

    def test_no_match_defaults_to_zero(self, parser):
        assert parser.extract_cost("no prices here") == Decimal("0")
        assert parser.extract_cost("") == Decimal("0")

    def test_custom_price_bound(self):
        assert ReceiptParser(max_price=Decimal("100")).extract_cost("$150.00\n$99.00") == Decimal("99.00")


class TestExtractQuantity:

    def test_qty_label(self, parser):
        assert parser.extract_quantity("Qty: 2") == 2
        assert parser.extract_quantity("QTY 4") == 4

    def test_quantity_label(self, parser):
        assert parser.extract_quantity("Quantity: 3") == 3

    def test_unit_price_breakdown(self, parser):
        assert parser.extract_quantity("3 @ $5.00") == 3

    def test_pattern_order_beats_document_order(self, parser):
        # Qty is checked before "N @ $" even though the breakdown comes first
        assert parser.extract_quantity("3 @ $5.00\nQty: 7") == 7

    def test_first_match_of_winning_pattern(self, parser):
        assert parser.extract_quantity("Qty: 2\nQty: 9") == 2

    def test_floor_at_one(self, parser):
        assert parser.extract_quantity("Qty: 0") == 1
        assert parser.extract_quantity("Quantity: 00") == 1

    def test_default(self, parser):
        assert parser.extract_quantity("nothing to see") == 1
        assert parser.extract_quantity("") == 1
