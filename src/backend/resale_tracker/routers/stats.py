"""
Stats API router: profit overview and return-window alerts.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
import logging

from resale_tracker.config import settings
from resale_tracker.models.lot import ProfitStats, ReturnAlert
from resale_tracker.services.stats import lots_nearing_return_deadline, profit_stats
from resale_tracker.services.storage import LotStore, get_lot_store

router = APIRouter(prefix="/stats", tags=["stats"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ProfitStats)
async def get_profit_stats(
    time_range: Optional[str] = Query(None, alias="range"),
    store: LotStore = Depends(get_lot_store),
):
    """
    Profit totals for a time range.

    Args:
        time_range: 7d, 30d, 90d or all (query parameter "range")

    Returns:
        Revenue, costs, fees, profit and units sold in the range, plus
        current unsold units and cost basis
    """
    try:
        return profit_stats(store, time_range or settings.DEFAULT_STATS_RANGE)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/return-alerts", response_model=List[ReturnAlert])
async def get_return_alerts(
    within_days: Optional[int] = Query(None, ge=0),
    store: LotStore = Depends(get_lot_store),
):
    """Lots whose return window closes within the next few days."""
    return lots_nearing_return_deadline(
        store.list_lots(),
        within_days=settings.RETURN_ALERT_DAYS if within_days is None else within_days,
        window_days=settings.RETURN_WINDOW_DAYS,
    )
