"""
CSV import of lots.

Expected columns: name, cost, quantity, purchase_date. Each field also
accepts a few common alternative header names so spreadsheets exported from
other tools import without editing.
"""

import csv
import io
import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from dateutil import parser as date_parser

from resale_tracker.models.lot import ImportResult, LotCreate
from resale_tracker.services.storage import LotStore
from resale_tracker.utils.money import parse_money

logger = logging.getLogger(__name__)

NAME_COLUMNS = ('name', 'item', 'product', 'description')
COST_COLUMNS = ('cost', 'price', 'total', 'amount')
QUANTITY_COLUMNS = ('quantity', 'qty', 'units')
DATE_COLUMNS = ('purchase_date', 'date', 'purchased')

CSV_TEMPLATE = """name,cost,quantity,purchase_date
"Example Item 1",25.99,5,2024-01-15
"Example Item 2",10.50,10,2024-01-20
"Multi-pack Bundle",45.00,3,2024-02-01"""


def parse_csv(csv_text: str) -> List[Dict[str, str]]:
    """
    Parse CSV text into row dicts keyed by lowercased header.

    Args:
        csv_text: Raw CSV content

    Returns:
        One dict per non-blank data row; missing cells are empty strings
    """
    text = (csv_text or "").strip()
    if len(text.splitlines()) < 2:
        return []

    reader = csv.reader(io.StringIO(text))
    headers = [h.strip().lower() for h in next(reader)]

    rows = []
    for values in reader:
        if not values or not any(v.strip() for v in values):
            continue
        rows.append({
            header: (values[i].strip() if i < len(values) else '')
            for i, header in enumerate(headers)
        })
    return rows


def _first_value(row: Dict[str, str], columns) -> str:
    for column in columns:
        if row.get(column):
            return row[column]
    return ''


def parse_purchase_date(date_str: str) -> Optional[date]:
    """
    Parse a purchase date.

    Tries YYYY-MM-DD, MM/DD/YYYY and MM-DD-YYYY first, then fuzzy parsing.

    Returns:
        date, or None if nothing parses
    """
    raw = (date_str or "").strip()
    if not raw:
        return None
    for fmt in ("%Y-%m-%d", "%m/%d/%Y", "%m-%d-%Y"):
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    try:
        return date_parser.parse(raw, dayfirst=False, yearfirst=False, fuzzy=True).date()
    except (ValueError, OverflowError):
        return None


def _parse_quantity(quantity_str: str) -> int:
    try:
        quantity = int(float(quantity_str))
    except (TypeError, ValueError, OverflowError):
        return 1
    return quantity if quantity >= 1 else 1


def import_lots_from_csv(csv_text: str, store: LotStore) -> ImportResult:
    """
    Import lots from CSV text into a store.

    Rows with a missing name or an invalid cost are skipped and reported;
    row numbers count the header as row 1.

    Args:
        csv_text: Raw CSV content
        store: Destination lot store

    Returns:
        ImportResult with the number of imported lots and per-row errors
    """
    result = ImportResult()

    for i, row in enumerate(parse_csv(csv_text)):
        row_number = i + 2

        name = _first_value(row, NAME_COLUMNS)
        if not name:
            result.errors.append(f"Row {row_number}: Missing name")
            continue

        cost_str = _first_value(row, COST_COLUMNS) or '0'
        cost = parse_money(cost_str, allow_negative=True)
        if cost is None:
            result.errors.append(f'Row {row_number}: Invalid cost "{cost_str}"')
            continue
        if cost < 0:
            result.errors.append(f'Row {row_number}: Negative cost "{cost_str}"')
            continue

        quantity = _parse_quantity(_first_value(row, QUANTITY_COLUMNS) or '1')
        purchase_date = parse_purchase_date(_first_value(row, DATE_COLUMNS)) or date.today()

        store.save_lot(LotCreate(
            name=name,
            cost=cost,
            quantity=quantity,
            purchase_date=purchase_date,
        ))
        result.success += 1

    logger.info("CSV import complete", extra={
        "imported": result.success,
        "failed": len(result.errors),
    })
    return result


def generate_csv_template() -> str:
    """Sample CSV with the expected columns."""
    return CSV_TEMPLATE
