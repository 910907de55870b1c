from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable

from sales_analysis.models import ItemView, Product, SellerStat

RevenueFn = Callable[[ItemView, Product], Any]
BonusFn = Callable[[int, int, SellerStat], Any]

TOP_PRODUCTS_LIMIT = 10


def to_decimal(value: Any) -> Decimal:
    """Strategies may return int/float; go through str so 0.1 stays 0.1."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def calculate_simple_revenue(item: ItemView, _product: Product) -> Decimal:
    """Revenue of one item: sale price × quantity, less a percent discount."""
    discount_factor = 1 - item.discount / 100
    return item.sale_price * item.quantity * discount_factor


@dataclass(frozen=True)
class BonusPolicy:
    """Rank-dependent share of profit paid as bonus.

    The branches are checked in order, so a lone seller (index 0 and also
    the last index) gets the ``top`` rate.
    """
    top: Decimal = Decimal("0.15")
    runner_up: Decimal = Decimal("0.10")   # ranks 2-3
    regular: Decimal = Decimal("0.05")     # everyone else but the last
    last: Decimal = Decimal("0")

    def rate(self, index: int, total: int) -> Decimal:
        if index == 0:
            return self.top
        elif 0 < index <= 2:
            return self.runner_up
        elif index < total - 1:
            return self.regular
        return self.last

    def calculate(self, index: int, total: int, seller: SellerStat) -> Decimal:
        return seller.profit * self.rate(index, total)


DEFAULT_BONUS_POLICY = BonusPolicy()


def calculate_bonus_by_profit(index: int, total: int, seller: SellerStat) -> Decimal:
    return DEFAULT_BONUS_POLICY.calculate(index, total, seller)


@dataclass
class AnalysisOptions:
    calculate_revenue: RevenueFn = calculate_simple_revenue
    calculate_bonus: BonusFn = calculate_bonus_by_profit
    top_products_limit: int = field(default=TOP_PRODUCTS_LIMIT)
