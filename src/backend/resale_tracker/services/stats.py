"""
Profit analytics and return-window alerts.

Sales are summed over a time range ending today (7d, 30d, 90d or all).
Inventory figures (unsold units, cost basis) always describe the current
lots, whatever the range.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from resale_tracker.models.lot import Lot, ProfitStats, ReturnAlert, Sale
from resale_tracker.services.storage import LotStore

logger = logging.getLogger(__name__)

# Range name -> number of days including today; None means no lower bound
TIME_RANGES: Dict[str, Optional[int]] = {
    '7d': 7,
    '30d': 30,
    '90d': 90,
    'all': None,
}


def range_start(time_range: str, today: Optional[date] = None) -> Optional[date]:
    """
    First day covered by a time range.

    Args:
        time_range: One of TIME_RANGES
        today: Reference day, defaults to date.today()

    Returns:
        Start date (inclusive), or None for "all"

    Raises:
        ValueError: unknown range
    """
    if time_range not in TIME_RANGES:
        raise ValueError(f"Unknown time range: {time_range}. Expected one of {', '.join(TIME_RANGES)}")
    days = TIME_RANGES[time_range]
    if days is None:
        return None
    return (today or date.today()) - timedelta(days=days - 1)


def summarize_sales(sales: Iterable[Sale]) -> Dict[str, object]:
    """Revenue, cost of goods, fees, profit and unit totals for a set of sales."""
    totals = {
        'sale_count': 0,
        'units_sold': 0,
        'total_revenue': Decimal('0'),
        'total_costs': Decimal('0'),
        'total_fees': Decimal('0'),
        'total_profit': Decimal('0'),
    }
    for sale in sales:
        totals['sale_count'] += 1
        totals['units_sold'] += sale.units_sold
        totals['total_revenue'] += sale.revenue
        totals['total_costs'] += sale.cost_of_goods
        totals['total_fees'] += sale.fees
        totals['total_profit'] += sale.profit
    return totals


def inventory_status(lots: Iterable[Lot]) -> Tuple[int, Decimal]:
    """Unsold units and their cost basis (unit_cost * remaining) across lots."""
    units = 0
    basis = Decimal('0')
    for lot in lots:
        units += lot.remaining
        basis += lot.unit_cost * lot.remaining
    return units, basis


def profit_stats(store: LotStore, time_range: str = '30d', today: Optional[date] = None) -> ProfitStats:
    """
    Profit overview for a time range.

    Args:
        store: Lot/sale store
        time_range: '7d', '30d', '90d' or 'all'
        today: Reference day, defaults to date.today()

    Returns:
        ProfitStats

    Raises:
        ValueError: unknown range
    """
    today = today or date.today()
    start = range_start(time_range, today)
    sales = store.list_sales(start=start, end=today)
    unsold_units, unsold_cost_basis = inventory_status(store.list_lots())

    stats = ProfitStats(
        range=time_range,
        start_date=start,
        end_date=today,
        unsold_units=unsold_units,
        unsold_cost_basis=unsold_cost_basis,
        **summarize_sales(sales),
    )
    logger.debug("Profit stats computed", extra={
        "range": time_range,
        "sale_count": stats.sale_count,
        "total_profit": str(stats.total_profit),
    })
    return stats


def return_deadline(lot: Lot, window_days: int) -> date:
    """Last day the lot can be returned."""
    return lot.purchase_date + timedelta(days=window_days)


def lots_nearing_return_deadline(
    lots: Iterable[Lot],
    within_days: int,
    window_days: int,
    today: Optional[date] = None,
) -> List[ReturnAlert]:
    """
    Lots whose return window closes within the next few days.

    Only lots with unsold units and no dismissed alert are included; windows
    that already closed are skipped.

    Args:
        lots: Lots to check
        within_days: Alert horizon in days (0 = closes today)
        window_days: Return window length counted from purchase_date
        today: Reference day, defaults to date.today()

    Returns:
        Alerts, soonest deadline first
    """
    today = today or date.today()
    alerts = []
    for lot in lots:
        if lot.remaining <= 0 or lot.return_alert_dismissed:
            continue
        deadline = return_deadline(lot, window_days)
        days_left = (deadline - today).days
        if 0 <= days_left <= within_days:
            alerts.append(ReturnAlert(lot=lot, return_deadline=deadline, days_left=days_left))
    return sorted(alerts, key=lambda a: a.return_deadline)
