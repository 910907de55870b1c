import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Union
from collections.abc import Mapping

import pydantic

from sales_analysis.errors import ValidationError
from sales_analysis.models import (
    ItemView,
    Key,
    Product,
    PurchaseRecord,
    SalesDataset,
    Seller,
    SellerReport,
    SellerStat,
    TopProduct,
)
from sales_analysis.strategies import AnalysisOptions, TOP_PRODUCTS_LIMIT, to_decimal
from sales_analysis.validation import (
    ITEM_FIELDS,
    PRODUCT_FIELDS,
    SELLER_FIELDS,
    field_value,
    has_fields,
    validate_dataset,
    validate_options,
)

logger = logging.getLogger(__name__)

_TWO_DP = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    return value.quantize(_TWO_DP, rounding=ROUND_HALF_UP)


def _resolve_options(options: Any) -> AnalysisOptions:
    if isinstance(options, AnalysisOptions):
        return options
    return AnalysisOptions(
        calculate_revenue=field_value(options, "calculate_revenue"),
        calculate_bonus=field_value(options, "calculate_bonus"),
        top_products_limit=field_value(options, "top_products_limit") or TOP_PRODUCTS_LIMIT,
    )


def _parse_dataset(data: Mapping) -> SalesDataset:
    try:
        return SalesDataset.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError("invalid_types", f"Invalid data structure: {exc}") from exc


# ── Index builder ────────────────────────────────────────────────────────────

def build_indexes(dataset: SalesDataset) -> tuple[dict[Key, Seller], dict[Key, Product]]:
    """Return (seller id → Seller, sku → Product). Duplicates: last one wins."""
    seller_index: dict[Key, Seller] = {}
    product_index: dict[Key, Product] = {}

    for seller in dataset.sellers:
        if not has_fields(seller, SELLER_FIELDS):
            raise ValidationError(
                "invalid_seller_index",
                "Invalid data structure: not all required seller fields are filled",
            )
        seller_index[seller.id] = seller

    for product in dataset.products:
        if not has_fields(product, PRODUCT_FIELDS):
            raise ValidationError(
                "invalid_product_index",
                "Invalid data structure: not all required product fields are filled",
            )
        product_index[product.sku] = product

    logger.debug(f"Indexed {len(seller_index)} sellers and {len(product_index)} products")
    return seller_index, product_index


# ── Accumulator ──────────────────────────────────────────────────────────────

def init_seller_stats(sellers: list[Seller]) -> dict[Key, SellerStat]:
    """One zeroed accumulator per seller id, in seller-list order."""
    return {
        s.id: SellerStat(id=s.id, name=f"{s.first_name} {s.last_name}")
        for s in sellers
    }


def accumulate(
    records: list[PurchaseRecord],
    seller_index: dict[Key, Seller],
    product_index: dict[Key, Product],
    stats: dict[Key, SellerStat],
    options: AnalysisOptions,
) -> dict[str, int]:
    """Fold purchase records into the per-seller accumulators.

    Incomplete rows and unknown references are logged and skipped.
    Returns counters of processed and skipped rows.
    """
    counters = {"records_processed": 0, "records_skipped": 0, "items_skipped": 0}

    for record in records:
        if not record.seller_id or not record.items:
            logger.warning(f"Skipped purchase record with incomplete data: {record!r}")
            counters["records_skipped"] += 1
            continue

        seller = seller_index.get(record.seller_id)
        stat = stats.get(record.seller_id)
        if seller is None or stat is None:
            logger.warning(f"Seller with ID {record.seller_id} not found")
            counters["records_skipped"] += 1
            continue

        # revenue is the record total as billed; profit below comes from the
        # revenue strategy, so the two are not derived from the same figures
        stat.revenue += record.total_amount or Decimal("0")
        stat.sales_count += 1
        counters["records_processed"] += 1

        for item in record.items:
            if not has_fields(item, ITEM_FIELDS):
                logger.warning(f"Skipped item with incomplete data: {item!r}")
                counters["items_skipped"] += 1
                continue

            product = product_index.get(item.sku)
            if product is None:
                logger.warning(f"Product with SKU {item.sku} not found")
                counters["items_skipped"] += 1
                continue

            view = ItemView(
                sale_price=item.sale_price,
                quantity=item.quantity,
                discount=item.discount or Decimal("0"),
            )
            revenue = to_decimal(options.calculate_revenue(view, product))
            cost = product.purchase_price * item.quantity
            stat.profit += revenue - cost

            stat.products_sold[item.sku] = stat.products_sold.get(item.sku, Decimal("0")) + item.quantity

    return counters


# ── Ranking & bonus ──────────────────────────────────────────────────────────

def top_products(products_sold: dict[Key, Decimal], limit: int = TOP_PRODUCTS_LIMIT) -> list[TopProduct]:
    # sorted() is stable: equal quantities keep first-sold order
    ranked = sorted(products_sold.items(), key=lambda kv: kv[1], reverse=True)
    return [TopProduct(sku=sku, quantity=qty) for sku, qty in ranked[:limit]]


def rank_sellers(stats: list[SellerStat], options: AnalysisOptions) -> list[SellerStat]:
    """Sort by profit (descending, stable) and assign bonus and top products."""
    ranked = sorted(stats, key=lambda s: s.profit, reverse=True)
    total = len(ranked)
    for index, stat in enumerate(ranked):
        stat.bonus = to_decimal(options.calculate_bonus(index, total, stat))
        stat.top_products = top_products(stat.products_sold, options.top_products_limit)
    return ranked


def format_report(stat: SellerStat) -> SellerReport:
    return SellerReport(
        seller_id=stat.id,
        name=stat.name,
        revenue=round_money(stat.revenue),
        profit=round_money(stat.profit),
        sales_count=stat.sales_count,
        top_products=stat.top_products,
        bonus=round_money(stat.bonus),
    )


# ── Pipeline ─────────────────────────────────────────────────────────────────

def analyze_sales_data(
    data: Union[SalesDataset, Mapping],
    options: Any = None,
) -> list[SellerReport]:
    """
    Compute revenue, profit, bonus and top products for every seller.

    ``data`` is a SalesDataset or a mapping with ``sellers``, ``products`` and
    ``purchase_records``. ``options`` provides ``calculate_revenue`` and
    ``calculate_bonus`` (an AnalysisOptions, a mapping or any object with
    those attributes). Raises ValidationError on structural problems;
    malformed rows are skipped with a warning.
    """
    if isinstance(data, SalesDataset):
        data = data.model_dump()

    validate_dataset(data)
    validate_options(options)
    opts = _resolve_options(options)
    dataset = _parse_dataset(data)

    # ── 1. Indexes ───────────────────────────────────────────────────────────
    seller_index, product_index = build_indexes(dataset)

    # ── 2. Accumulate ────────────────────────────────────────────────────────
    stats = init_seller_stats(dataset.sellers)
    counters = accumulate(dataset.purchase_records, seller_index, product_index, stats, opts)

    # ── 3. Rank, bonus, top products ─────────────────────────────────────────
    ranked = rank_sellers(list(stats.values()), opts)

    logger.info(
        f"Analyzed {len(ranked)} sellers: "
        f"{counters['records_processed']} records processed, "
        f"{counters['records_skipped']} records skipped, "
        f"{counters['items_skipped']} items skipped"
    )

    # ── 4. Format ────────────────────────────────────────────────────────────
    return [format_report(s) for s in ranked]
