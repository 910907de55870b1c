from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional, Union

# Ids and skus keep the type the caller used, so output ids match input ids.
Key = Union[int, str]


# ── Input models ─────────────────────────────────────────────────────────────
# Fields stay optional: presence is checked by the validator and, per row,
# by the accumulator, which skips incomplete rows instead of failing.

class Seller(BaseModel):
    id: Optional[Key] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class Product(BaseModel):
    sku: Optional[Key] = None
    purchase_price: Optional[Decimal] = None
    sale_price: Optional[Decimal] = None


class Item(BaseModel):
    sku: Optional[Key] = None
    quantity: Optional[Decimal] = None
    sale_price: Optional[Decimal] = None
    discount: Optional[Decimal] = None  # percent, e.g. Decimal("10") for 10 %


class PurchaseRecord(BaseModel):
    seller_id: Optional[Key] = None
    total_amount: Optional[Decimal] = None
    items: Optional[list[Item]] = None


class SalesDataset(BaseModel):
    sellers: list[Seller]
    products: list[Product]
    purchase_records: list[PurchaseRecord]


# ── Strategy view ────────────────────────────────────────────────────────────

class ItemView(BaseModel):
    """What the revenue strategy sees of a purchased item."""
    sale_price: Decimal
    quantity: Decimal
    discount: Decimal = Decimal("0")


# ── Accumulator ──────────────────────────────────────────────────────────────

class SellerStat(BaseModel):
    id: Key
    name: str
    revenue: Decimal = Decimal("0")
    profit: Decimal = Decimal("0")
    sales_count: int = 0
    # sku → quantity, in first-sold order
    products_sold: dict[Key, Decimal] = Field(default_factory=dict)
    bonus: Decimal = Decimal("0")
    top_products: list["TopProduct"] = Field(default_factory=list)


# ── Response models ──────────────────────────────────────────────────────────

class TopProduct(BaseModel):
    sku: Key
    quantity: Decimal


class SellerReport(BaseModel):
    seller_id: Key
    name: str
    revenue: Decimal
    profit: Decimal
    sales_count: int
    top_products: list[TopProduct]
    bonus: Decimal


SellerStat.model_rebuild()
