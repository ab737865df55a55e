"""
Read-only aggregations over the order history: monthly report, admin
dashboard and per-salesperson statistics.
"""
from __future__ import annotations

import calendar
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta
from decimal import Decimal

from wholesale.domain.catalog import Catalog
from wholesale.domain.errors import InvalidInputError
from wholesale.domain.money import ZERO, as_decimal, percentage
from wholesale.domain.order import Order, OrderStatus

COMMISSION_RATE = Decimal("0.05")
UNKNOWN_PRODUCT_NAME = "Unknown product"


@dataclass(frozen=True)
class ReportWindow:
    """Inclusive calendar-day range."""
    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise InvalidInputError("Report window ends before it starts")

    @classmethod
    def for_month(cls, year: int, month: int) -> ReportWindow:
        if not MINYEAR <= year <= MAXYEAR:
            raise InvalidInputError(f"Year must be {MINYEAR}-{MAXYEAR}, got {year}")
        if not 1 <= month <= 12:
            raise InvalidInputError(f"Month must be 1-12, got {month}")
        last_day = calendar.monthrange(year, month)[1]
        return cls(date(year, month, 1), date(year, month, last_day))

    @classmethod
    def containing(cls, now: datetime | date) -> ReportWindow:
        """Calendar month containing ``now``."""
        return cls.for_month(now.year, now.month)

    def contains(self, moment: datetime | date) -> bool:
        day = moment.date() if isinstance(moment, datetime) else moment
        return self.start <= day <= self.end

    @property
    def is_calendar_month(self) -> bool:
        return (
            self.start.day == 1
            and (self.start.year, self.start.month) == (self.end.year, self.end.month)
            and self.end.day == calendar.monthrange(self.end.year, self.end.month)[1]
        )

    def days(self) -> Iterator[date]:
        day = self.start
        while day <= self.end:
            yield day
            day += timedelta(days=1)


@dataclass(frozen=True)
class ProductSales:
    product_id: str
    name: str
    quantity: Decimal
    sales: Decimal
    share: Decimal


@dataclass(frozen=True)
class DailySales:
    day: date
    sales: Decimal

    @property
    def label(self) -> str:
        return f"{self.day.day}/{self.day.month}"


@dataclass(frozen=True)
class MonthlyReport:
    window: ReportWindow
    total_sales: Decimal
    total_orders: int
    avg_order_value: Decimal
    commission_rate: Decimal
    commission: Decimal
    products: list[ProductSales] = field(default_factory=list)
    daily: list[DailySales] = field(default_factory=list)

    @property
    def top_product(self) -> ProductSales | None:
        return self.products[0] if self.products else None

    @property
    def total_quantity(self) -> Decimal:
        return sum((row.quantity for row in self.products), ZERO)


def active_orders(orders: Iterable[Order]) -> list[Order]:
    """Orders that count towards revenue (everything but cancelled)."""
    return [order for order in orders if order.status != OrderStatus.CANCELLED]


def build_monthly_report(
    orders: Iterable[Order],
    catalog: Catalog,
    window: ReportWindow,
    commission_rate: Decimal = COMMISSION_RATE,
) -> MonthlyReport:
    """Aggregate non-cancelled orders created inside ``window``."""
    commission_rate = as_decimal(commission_rate, "commission_rate")
    selected = [order for order in active_orders(orders) if window.contains(order.created_at)]

    total_sales = sum((order.total for order in selected), ZERO)
    total_orders = len(selected)
    avg_order_value = total_sales / total_orders if total_orders else ZERO

    per_product: dict[str, list[Decimal]] = {}
    for order in selected:
        for item in order.items:
            sales_quantity = per_product.setdefault(item.product_id, [ZERO, ZERO])
            sales_quantity[0] += item.subtotal
            sales_quantity[1] += item.quantity

    products = []
    for product_id, (sales, quantity) in per_product.items():
        product = catalog.get(product_id)
        products.append(ProductSales(
            product_id=product_id,
            name=product.name if product else UNKNOWN_PRODUCT_NAME,
            quantity=quantity,
            sales=sales,
            share=percentage(sales, total_sales),
        ))
    products.sort(key=lambda row: row.sales, reverse=True)

    per_day = {day: ZERO for day in window.days()}
    for order in selected:
        per_day[order.created_at.date()] += order.total
    daily = [DailySales(day, sales) for day, sales in sorted(per_day.items())]

    return MonthlyReport(
        window=window,
        total_sales=total_sales,
        total_orders=total_orders,
        avg_order_value=avg_order_value,
        commission_rate=commission_rate,
        commission=total_sales * commission_rate,
        products=products,
        daily=daily,
    )


@dataclass(frozen=True)
class ProductVolume:
    product_id: str
    name: str
    quantity: Decimal


@dataclass(frozen=True)
class DashboardStats:
    status_counts: dict[OrderStatus, int]
    total_orders: int
    total_revenue: Decimal
    total_sales_volume: Decimal
    top_products: list[ProductVolume]


def build_dashboard(orders: Iterable[Order], catalog: Catalog) -> DashboardStats:
    """Order counts by status plus revenue and volume over non-cancelled orders."""
    orders = list(orders)
    counted = active_orders(orders)

    status_counts = {status: 0 for status in OrderStatus if status != OrderStatus.DRAFT}
    for order in orders:
        status_counts[order.status] = status_counts.get(order.status, 0) + 1

    volume: dict[str, Decimal] = {}
    for order in counted:
        for item in order.items:
            volume[item.product_id] = volume.get(item.product_id, ZERO) + item.quantity

    top_products = [
        ProductVolume(product.id, product.name, volume.get(product.id, ZERO))
        for product in catalog
    ]
    top_products.extend(
        ProductVolume(product_id, UNKNOWN_PRODUCT_NAME, quantity)
        for product_id, quantity in volume.items()
        if catalog.get(product_id) is None
    )
    top_products.sort(key=lambda row: row.quantity, reverse=True)

    return DashboardStats(
        status_counts=status_counts,
        total_orders=len(orders),
        total_revenue=sum((order.total for order in counted), ZERO),
        total_sales_volume=sum(volume.values(), ZERO),
        top_products=top_products,
    )


@dataclass(frozen=True)
class UserStats:
    user_id: str
    total_orders: int
    status_counts: dict[OrderStatus, int]
    total_revenue: Decimal
    recent_orders: list[Order]


def build_user_stats(orders: Iterable[Order], user_id: str, recent: int = 5) -> UserStats:
    mine = [order for order in orders if order.salesperson_id == user_id]
    status_counts = {status: 0 for status in OrderStatus if status != OrderStatus.DRAFT}
    for order in mine:
        status_counts[order.status] = status_counts.get(order.status, 0) + 1
    return UserStats(
        user_id=user_id,
        total_orders=len(mine),
        status_counts=status_counts,
        total_revenue=sum((order.total for order in active_orders(mine)), ZERO),
        recent_orders=sorted(mine, key=lambda order: order.created_at, reverse=True)[:recent],
    )
