"""
Lots API router: lot CRUD, return handling and CSV import.
"""

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Response
from fastapi.responses import PlainTextResponse
from typing import List
import logging

from resale_tracker.models.lot import ImportResult, Lot, LotCreate
from resale_tracker.services.csv_import import generate_csv_template, import_lots_from_csv
from resale_tracker.services.storage import LotNotFoundError, LotStore, get_lot_store

router = APIRouter(prefix="/lots", tags=["lots"])
logger = logging.getLogger(__name__)


@router.post("", response_model=Lot, status_code=201)
async def create_lot(lot: LotCreate, store: LotStore = Depends(get_lot_store)):
    """Store a lot, typically the reviewed output of /scan."""
    return store.save_lot(lot)


@router.get("", response_model=List[Lot])
async def list_lots(store: LotStore = Depends(get_lot_store)):
    return store.list_lots()


@router.delete("/{lot_id}", status_code=204)
async def delete_lot(lot_id: str, store: LotStore = Depends(get_lot_store)):
    if not store.delete_lot(lot_id):
        raise HTTPException(status_code=404, detail=f"Lot not found: {lot_id}")
    return Response(status_code=204)


@router.post("/{lot_id}/returned", status_code=204)
async def mark_returned(lot_id: str, store: LotStore = Depends(get_lot_store)):
    """Item went back to the store: remove the lot from inventory."""
    if not store.delete_lot(lot_id):
        raise HTTPException(status_code=404, detail=f"Lot not found: {lot_id}")
    logger.info("Lot marked returned", extra={"lot_id": lot_id})
    return Response(status_code=204)


@router.post("/{lot_id}/keep", response_model=Lot)
async def keep_lot(lot_id: str, store: LotStore = Depends(get_lot_store)):
    """Keep the item past its return window and silence its alert."""
    try:
        return store.dismiss_return_alert(lot_id)
    except LotNotFoundError:
        raise HTTPException(status_code=404, detail=f"Lot not found: {lot_id}")


@router.post("/import", response_model=ImportResult)
async def import_lots(
    file: UploadFile = File(...),
    store: LotStore = Depends(get_lot_store),
):
    """
    Import lots from a CSV file.

    Args:
        file: CSV with name, cost, quantity and purchase_date columns

    Returns:
        Count of imported lots and per-row errors
    """
    raw = await file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")

    result = import_lots_from_csv(text, store)
    logger.info("Lots imported from CSV", extra={
        "filename": file.filename,
        "imported": result.success,
        "failed": len(result.errors)
    })
    return result


@router.get("/import/template", response_class=PlainTextResponse)
async def csv_template():
    return PlainTextResponse(
        generate_csv_template(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="lots_template.csv"'},
    )
