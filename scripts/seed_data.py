"""
Deterministic sample-data generator.

Produces:
  - 5 sellers
  - 20 products (purchase price 40-80 % of the list price)
  - 200 purchase records spread across the sellers
    - 1-5 items each, quantity 1-10
    - ~30 % of items discounted by 5-25 %
  - optionally, a few "dirty" records that the pipeline must skip:
    an unknown seller id and an item with an unknown sku
"""

import random
from decimal import Decimal

from sales_analysis.models import Item, Product, PurchaseRecord, SalesDataset, Seller

SEED = 42

_FIRST_NAMES = ["Alexey", "Maria", "Ivan", "Olga", "Dmitry"]
_LAST_NAMES = ["Petrov", "Smirnova", "Volkov", "Orlova", "Sokolov"]


def _money(rng: random.Random, lo: float, hi: float) -> Decimal:
    return Decimal(str(round(rng.uniform(lo, hi), 2)))


def seed(
    record_count: int = 200,
    seller_count: int = 5,
    product_count: int = 20,
    dirty: bool = False,
    rng_seed: int = SEED,
) -> SalesDataset:
    rng = random.Random(rng_seed)

    # ── sellers ──────────────────────────────────────────────────────────────
    sellers = [
        Seller(
            id=f"seller_{n}",
            first_name=_FIRST_NAMES[(n - 1) % len(_FIRST_NAMES)],
            last_name=_LAST_NAMES[(n - 1) % len(_LAST_NAMES)],
        )
        for n in range(1, seller_count + 1)
    ]

    # ── products ─────────────────────────────────────────────────────────────
    products = []
    for n in range(1, product_count + 1):
        sale_price = _money(rng, 100, 5_000)
        purchase_price = (sale_price * Decimal(str(rng.uniform(0.4, 0.8)))).quantize(Decimal("0.01"))
        products.append(Product(
            sku=f"SKU_{n:03d}",
            purchase_price=purchase_price,
            sale_price=sale_price,
        ))

    # ── purchase records ─────────────────────────────────────────────────────
    records = []
    for _ in range(record_count):
        seller = rng.choice(sellers)
        items = []
        for product in rng.sample(products, rng.randint(1, min(5, len(products)))):
            discount = Decimal(rng.randint(5, 25)) if rng.random() < 0.30 else Decimal("0")
            items.append(Item(
                sku=product.sku,
                quantity=rng.randint(1, 10),
                sale_price=product.sale_price,
                discount=discount,
            ))
        total = sum(
            (i.sale_price * i.quantity * (1 - i.discount / 100) for i in items),
            Decimal("0"),
        ).quantize(Decimal("0.01"))
        records.append(PurchaseRecord(seller_id=seller.id, total_amount=total, items=items))

    if dirty:
        records.append(PurchaseRecord(
            seller_id="seller_unknown",
            total_amount=Decimal("100.00"),
            items=[Item(sku=products[0].sku, quantity=1, sale_price=products[0].sale_price)],
        ))
        records.append(PurchaseRecord(
            seller_id=sellers[0].id,
            total_amount=Decimal("100.00"),
            items=[Item(sku="SKU_MISSING", quantity=1, sale_price=Decimal("100.00"))],
        ))

    return SalesDataset(sellers=sellers, products=products, purchase_records=records)
