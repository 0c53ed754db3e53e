"""
Read-side projections over historical orders.

Every function here is pure: it takes a list of ``ReportOrder`` records
(already filtered by the caller, usually to completed orders) and returns
plain dataclasses. Empty input yields zeroed structures.
"""
import calendar
import math
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from core.pricing import SERVICE_DELIVERY

DEFAULT_CATEGORY = "other"


@dataclass(frozen=True)
class ReportLine:
    name: str
    quantity: int
    unit_price: float
    addons_total: float = 0.0
    category: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def revenue(self) -> float:
        return (self.unit_price + self.addons_total) * self.quantity


@dataclass(frozen=True)
class ReportOrder:
    order_code: str
    total: float
    created_at: datetime
    vat_amount: float = 0.0
    service_option: Optional[str] = None
    payment_method: Optional[str] = None
    customer_name: Optional[str] = None
    lines: Sequence[ReportLine] = field(default_factory=tuple)


@dataclass(frozen=True)
class BasicStats:
    total_sales: float
    total_vat: float
    total_orders: int
    avg_ticket: float


@dataclass(frozen=True)
class TopItem:
    name: str
    quantity: int
    revenue: float
    image_url: Optional[str] = None


@dataclass(frozen=True)
class CategoryShare:
    category: str
    revenue: float
    percentage: int


@dataclass(frozen=True)
class HourBucket:
    hour: int
    count: int


@dataclass(frozen=True)
class ServiceShare:
    name: str
    value: int


@dataclass(frozen=True)
class PeriodRow:
    label: str
    orders: int
    revenue: float

    @property
    def avg_ticket(self) -> float:
        return self.revenue / self.orders if self.orders else 0.0


@dataclass(frozen=True)
class LedgerRow:
    created_at: datetime
    order_code: str
    customer_name: Optional[str]
    subtotal: float
    vat: float
    total: float
    payment_method: Optional[str]


@dataclass(frozen=True)
class VatSummary:
    total_sales: float
    total_vat: float
    taxable_sales: float
    vat_percentage: float


@dataclass(frozen=True)
class ItemSalesRow:
    name: str
    category: str
    quantity: int
    revenue: float
    share_percent: float


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def basic_stats(orders: Sequence[ReportOrder]) -> BasicStats:
    total_sales = float(sum(o.total for o in orders))
    total_vat = float(sum(o.vat_amount or 0 for o in orders))
    total_orders = len(orders)
    avg_ticket = total_sales / total_orders if total_orders else 0.0
    return BasicStats(total_sales, total_vat, total_orders, avg_ticket)


def top_items(orders: Sequence[ReportOrder], limit: int = 5) -> List[TopItem]:
    stats: Dict[str, dict] = OrderedDict()
    for order in orders:
        for line in order.lines:
            entry = stats.setdefault(line.name, {"quantity": 0, "revenue": 0.0, "image_url": None})
            entry["quantity"] += line.quantity
            entry["revenue"] += line.revenue
            entry["image_url"] = line.image_url or entry["image_url"]

    items = [TopItem(name, s["quantity"], s["revenue"], s["image_url"]) for name, s in stats.items()]
    items.sort(key=lambda i: i.quantity, reverse=True)
    return items[:limit]


def category_mix(orders: Sequence[ReportOrder]) -> List[CategoryShare]:
    revenue_by_category: Dict[str, float] = OrderedDict()
    for order in orders:
        for line in order.lines:
            category = line.category or DEFAULT_CATEGORY
            revenue_by_category[category] = revenue_by_category.get(category, 0.0) + line.revenue

    total = sum(revenue_by_category.values())
    shares = [
        CategoryShare(
            category=category,
            revenue=revenue,
            percentage=_round_half_up(revenue / total * 100) if total > 0 else 0,
        )
        for category, revenue in revenue_by_category.items()
    ]
    shares.sort(key=lambda s: s.revenue, reverse=True)
    return shares


def busy_hours(orders: Sequence[ReportOrder]) -> List[HourBucket]:
    counts = [0] * 24
    for order in orders:
        counts[order.created_at.hour] += 1
    return [HourBucket(hour, count) for hour, count in enumerate(counts)]


def service_option_split(orders: Sequence[ReportOrder]) -> List[ServiceShare]:
    counts: Dict[str, int] = OrderedDict()
    for order in orders:
        option = order.service_option or SERVICE_DELIVERY
        counts[option] = counts.get(option, 0) + 1
    shares = [ServiceShare(name, value) for name, value in counts.items()]
    shares.sort(key=lambda s: (-s.value, s.name))
    return shares


# --- export projections ---

def monthly_breakdown(orders: Sequence[ReportOrder], year: int) -> List[PeriodRow]:
    """Orders and revenue for each of the 12 months of ``year``."""
    orders_per_month = [0] * 12
    revenue_per_month = [0.0] * 12
    for order in orders:
        if order.created_at.year != year:
            continue
        idx = order.created_at.month - 1
        orders_per_month[idx] += 1
        revenue_per_month[idx] += order.total
    return [
        PeriodRow(calendar.month_name[i + 1], orders_per_month[i], revenue_per_month[i])
        for i in range(12)
    ]


def daily_breakdown(orders: Sequence[ReportOrder], year: int, month: int) -> List[PeriodRow]:
    """One row per calendar day of the given month, zero-filled."""
    days = calendar.monthrange(year, month)[1]
    orders_per_day = [0] * days
    revenue_per_day = [0.0] * days
    for order in orders:
        ts = order.created_at
        if ts.year != year or ts.month != month:
            continue
        orders_per_day[ts.day - 1] += 1
        revenue_per_day[ts.day - 1] += order.total
    return [
        PeriodRow(date(year, month, d + 1).strftime("%d/%m/%Y"), orders_per_day[d], revenue_per_day[d])
        for d in range(days)
    ]


def sales_ledger(orders: Sequence[ReportOrder]) -> List[LedgerRow]:
    rows = []
    for order in orders:
        vat = order.vat_amount or 0.0
        rows.append(LedgerRow(
            created_at=order.created_at,
            order_code=order.order_code,
            customer_name=order.customer_name,
            subtotal=order.total - vat,
            vat=vat,
            total=order.total,
            payment_method=(order.payment_method or "").upper() or None,
        ))
    return rows


def vat_summary(orders: Sequence[ReportOrder], vat_percentage: float = 0.0) -> VatSummary:
    stats = basic_stats(orders)
    return VatSummary(
        total_sales=stats.total_sales,
        total_vat=stats.total_vat,
        taxable_sales=stats.total_sales - stats.total_vat,
        vat_percentage=float(vat_percentage or 0),
    )


def item_sales(orders: Sequence[ReportOrder]) -> List[ItemSalesRow]:
    stats: Dict[str, dict] = OrderedDict()
    total_revenue = 0.0
    for order in orders:
        for line in order.lines:
            entry = stats.setdefault(line.name, {"category": DEFAULT_CATEGORY, "quantity": 0, "revenue": 0.0})
            entry["category"] = line.category or entry["category"]
            entry["quantity"] += line.quantity
            entry["revenue"] += line.revenue
            total_revenue += line.revenue

    rows = [
        ItemSalesRow(
            name=name,
            category=s["category"],
            quantity=s["quantity"],
            revenue=s["revenue"],
            share_percent=(s["revenue"] / total_revenue * 100) if total_revenue > 0 else 0.0,
        )
        for name, s in stats.items()
    ]
    rows.sort(key=lambda r: r.revenue, reverse=True)
    return rows
