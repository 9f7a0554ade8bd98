"""
Pydantic models for lots, sales and receipt extraction results.
"""

from pydantic import BaseModel, Field, PlainSerializer
from typing import Annotated, List, Optional
from datetime import date
from decimal import Decimal


# Decimal in Python, plain number in JSON responses
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ExtractionResult(BaseModel):
    """Best-guess lot fields from one receipt image. Always returned, never raised."""
    name: str = "Unnamed Item"
    cost: Money = Field(default=Decimal("0"), ge=0)
    quantity: int = Field(default=1, ge=1)
    raw_text: str = ""
    success: bool = True
    error: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
    confidence: Optional[float] = None  # Mean OCR word confidence (0-100)


class ScanResponse(BaseModel):
    """Response for the scan endpoint."""
    result: ExtractionResult
    thumbnail: Optional[str] = None  # JPEG data URL


class LotBase(BaseModel):
    """Base lot model."""
    name: str = Field(min_length=1)
    cost: Money = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    purchase_date: date = Field(default_factory=date.today)
    thumbnail: Optional[str] = None


class LotCreate(LotBase):
    """Model for creating a lot."""
    pass


class Lot(LotBase):
    """Stored lot."""
    id: str
    created_at: str
    unit_cost: Money  # cost / quantity, rounded to cents
    remaining: int = Field(ge=0)  # Units not yet sold
    return_alert_dismissed: bool = False

    class Config:
        from_attributes = True


class ImportResult(BaseModel):
    """Outcome of a CSV import."""
    success: int = 0
    errors: List[str] = Field(default_factory=list)


class SaleBase(BaseModel):
    """Base sale model."""
    lot_id: str
    units_sold: int = Field(default=1, ge=1)
    price_per_unit: Money = Field(ge=0)
    fees: Money = Field(default=Decimal("0"), ge=0)  # Platform and shipping fees for the whole sale
    sale_date: date = Field(default_factory=date.today)


class SaleCreate(SaleBase):
    """Model for recording a sale."""
    pass


class Sale(SaleBase):
    """Stored sale. Unit cost is copied from the lot at sale time."""
    id: str
    created_at: str
    lot_name: str
    unit_cost: Money

    class Config:
        from_attributes = True

    @property
    def revenue(self) -> Decimal:
        return self.price_per_unit * self.units_sold

    @property
    def cost_of_goods(self) -> Decimal:
        return self.unit_cost * self.units_sold

    @property
    def profit(self) -> Decimal:
        return self.revenue - self.cost_of_goods - self.fees


class ProfitStats(BaseModel):
    """Sales totals for a time range plus current inventory status."""
    range: str
    start_date: Optional[date] = None  # None for "all"
    end_date: date
    sale_count: int = 0
    units_sold: int = 0
    total_revenue: Money = Decimal("0")
    total_costs: Money = Decimal("0")
    total_fees: Money = Decimal("0")
    total_profit: Money = Decimal("0")
    unsold_units: int = 0
    unsold_cost_basis: Money = Decimal("0")


class ReturnAlert(BaseModel):
    """Lot whose return window closes soon."""
    lot: Lot
    return_deadline: date
    days_left: int
