"""
Sales API router: record, list and delete sales against lots.
"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from typing import List, Optional
import logging

from resale_tracker.models.lot import Sale, SaleCreate
from resale_tracker.services.storage import (
    InsufficientInventoryError,
    LotNotFoundError,
    LotStore,
    get_lot_store,
)

router = APIRouter(prefix="/sales", tags=["sales"])
logger = logging.getLogger(__name__)


@router.post("", response_model=Sale, status_code=201)
async def create_sale(sale: SaleCreate, store: LotStore = Depends(get_lot_store)):
    """
    Record a sale against a lot.

    Returns:
        Stored sale; the lot's remaining units drop by units_sold
    """
    try:
        return store.save_sale(sale)
    except LotNotFoundError:
        raise HTTPException(status_code=404, detail=f"Lot not found: {sale.lot_id}")
    except InsufficientInventoryError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[Sale])
async def list_sales(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    store: LotStore = Depends(get_lot_store),
):
    """Sales between start and end (inclusive, YYYY-MM-DD), oldest first."""
    return store.list_sales(start=start, end=end)


@router.delete("/{sale_id}", status_code=204)
async def delete_sale(sale_id: str, store: LotStore = Depends(get_lot_store)):
    if not store.delete_sale(sale_id):
        raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")
    logger.info("Sale deleted", extra={"sale_id": sale_id})
    return Response(status_code=204)
