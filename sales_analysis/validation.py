"""
Structural checks run before any accumulation.

Presence is judged by truthiness: a missing key, ``None``, ``0`` and ``""``
all count as absent, so a product priced at 0 is rejected.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from sales_analysis.errors import ValidationError

SELLER_FIELDS = ("id", "first_name", "last_name")
PRODUCT_FIELDS = ("sku", "purchase_price", "sale_price")
ITEM_FIELDS = ("sku", "quantity", "sale_price")


def field_value(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def has_fields(obj: Any, names: tuple[str, ...]) -> bool:
    return all(field_value(obj, n) for n in names)


def validate_dataset(data: Any) -> None:
    collections = ("sellers", "products", "purchase_records")
    if not data or not all(_is_list(field_value(data, c)) and field_value(data, c) for c in collections):
        raise ValidationError(
            "missing_collections",
            "Invalid input data: sellers, products and purchase_records "
            "must be non-empty lists",
        )

    if not all(has_fields(s, SELLER_FIELDS) for s in field_value(data, "sellers")):
        raise ValidationError(
            "invalid_sellers",
            "Invalid data structure: every seller needs id, first_name and last_name",
        )

    if not all(has_fields(p, PRODUCT_FIELDS) for p in field_value(data, "products")):
        raise ValidationError(
            "invalid_products",
            "Invalid data structure: every product needs sku, purchase_price and sale_price",
        )

    for record in field_value(data, "purchase_records"):
        items = field_value(record, "items")
        if not field_value(record, "seller_id") or not _is_list(items) or not items:
            raise ValidationError(
                "invalid_purchase_records",
                "Invalid data structure: every purchase record needs seller_id "
                "and a non-empty items list",
            )

    for record in field_value(data, "purchase_records"):
        if not all(has_fields(item, ITEM_FIELDS) for item in field_value(record, "items")):
            raise ValidationError(
                "invalid_items",
                "Invalid items: every item needs sku, quantity and sale_price",
            )


def validate_options(options: Any) -> None:
    if (
        options is None
        or not callable(field_value(options, "calculate_revenue"))
        or not callable(field_value(options, "calculate_bonus"))
    ):
        raise ValidationError(
            "invalid_options",
            "Invalid options: calculate_revenue and calculate_bonus functions are required",
        )
