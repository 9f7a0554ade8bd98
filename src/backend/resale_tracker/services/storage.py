"""
Lot and sale storage.

The extraction pipeline never writes lots itself; routers and the CSV
importer hand reviewed fields to a LotStore. InMemoryLotStore backs a single
process and the test suite.
"""

import logging
import threading
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Protocol

from resale_tracker.models.lot import Lot, LotCreate, Sale, SaleCreate

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


class StorageError(Exception):
    """Base class for store errors."""


class LotNotFoundError(StorageError):
    """Raised when a lot id does not exist."""


class InsufficientInventoryError(StorageError):
    """Raised when a sale asks for more units than the lot has left."""


class LotStore(Protocol):
    def save_lot(self, lot: LotCreate) -> Lot:
        ...

    def get_lot(self, lot_id: str) -> Optional[Lot]:
        ...

    def list_lots(self) -> List[Lot]:
        ...

    def delete_lot(self, lot_id: str) -> bool:
        ...

    def dismiss_return_alert(self, lot_id: str) -> Lot:
        ...

    def save_sale(self, sale: SaleCreate) -> Sale:
        ...

    def list_sales(self, start: Optional[date] = None, end: Optional[date] = None) -> List[Sale]:
        ...

    def delete_sale(self, sale_id: str) -> bool:
        ...


def unit_cost_for(cost: Decimal, quantity: int) -> Decimal:
    """Per-unit cost rounded to cents."""
    return (Decimal(cost) / max(quantity, 1)).quantize(CENTS, rounding=ROUND_HALF_UP)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemoryLotStore:
    """Thread-safe dict-backed lot and sale store."""

    def __init__(self):
        self._lots: Dict[str, Lot] = {}
        self._sales: Dict[str, Sale] = {}
        self._lock = threading.Lock()

    def save_lot(self, lot: LotCreate) -> Lot:
        """
        Store a new lot.

        Args:
            lot: Lot fields (usually reviewed OCR output or a CSV row)

        Returns:
            Stored lot with id, created_at, unit_cost and all units remaining
        """
        stored = Lot(
            id=str(uuid.uuid4()),
            created_at=_now(),
            unit_cost=unit_cost_for(lot.cost, lot.quantity),
            remaining=lot.quantity,
            **lot.model_dump(),
        )
        with self._lock:
            self._lots[stored.id] = stored
        logger.info("Lot saved", extra={"lot_id": stored.id, "quantity": stored.quantity})
        return stored

    def get_lot(self, lot_id: str) -> Optional[Lot]:
        with self._lock:
            return self._lots.get(lot_id)

    def list_lots(self) -> List[Lot]:
        """Lots in insertion order."""
        with self._lock:
            return list(self._lots.values())

    def delete_lot(self, lot_id: str) -> bool:
        """Remove a lot. Sales already recorded against it are kept."""
        with self._lock:
            return self._lots.pop(lot_id, None) is not None

    def dismiss_return_alert(self, lot_id: str) -> Lot:
        """
        Stop return-window alerts for a lot the user is keeping.

        Raises:
            LotNotFoundError: unknown lot id
        """
        with self._lock:
            lot = self._lots.get(lot_id)
            if lot is None:
                raise LotNotFoundError(lot_id)
            updated = lot.model_copy(update={"return_alert_dismissed": True})
            self._lots[lot_id] = updated
        return updated

    def save_sale(self, sale: SaleCreate) -> Sale:
        """
        Record a sale and take the units out of the lot's remaining count.

        Args:
            sale: Sale fields

        Returns:
            Stored sale with the lot's unit cost captured

        Raises:
            LotNotFoundError: unknown lot id
            InsufficientInventoryError: more units than the lot has left
        """
        with self._lock:
            lot = self._lots.get(sale.lot_id)
            if lot is None:
                raise LotNotFoundError(sale.lot_id)
            if sale.units_sold > lot.remaining:
                raise InsufficientInventoryError(
                    f"Lot {lot.id} has {lot.remaining} unit(s) left, cannot sell {sale.units_sold}"
                )

            stored = Sale(
                id=str(uuid.uuid4()),
                created_at=_now(),
                lot_name=lot.name,
                unit_cost=lot.unit_cost,
                **sale.model_dump(),
            )
            self._sales[stored.id] = stored
            self._lots[lot.id] = lot.model_copy(update={"remaining": lot.remaining - sale.units_sold})

        logger.info("Sale saved", extra={
            "sale_id": stored.id,
            "lot_id": stored.lot_id,
            "units_sold": stored.units_sold,
        })
        return stored

    def list_sales(self, start: Optional[date] = None, end: Optional[date] = None) -> List[Sale]:
        """
        Sales with start <= sale_date <= end, oldest first.

        Args:
            start: First day to include; None for no lower bound
            end: Last day to include; None for no upper bound
        """
        with self._lock:
            sales = list(self._sales.values())
        selected = [
            s for s in sales
            if (start is None or s.sale_date >= start) and (end is None or s.sale_date <= end)
        ]
        return sorted(selected, key=lambda s: s.sale_date)

    def delete_sale(self, sale_id: str) -> bool:
        """Remove a sale and give its units back to the lot if it still exists."""
        with self._lock:
            sale = self._sales.pop(sale_id, None)
            if sale is None:
                return False
            lot = self._lots.get(sale.lot_id)
            if lot is not None:
                self._lots[lot.id] = lot.model_copy(update={"remaining": lot.remaining + sale.units_sold})
        return True


_default_store = InMemoryLotStore()


def get_lot_store() -> LotStore:
    return _default_store
