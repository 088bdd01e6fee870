"""Application service: Sales Summary use case (query).

Reports on the bills issued since the start of a period:

- ``today``: since midnight (UTC)
- ``week``:  since midnight seven days ago
- ``month``: since midnight on the same day of the previous month

Totals are summed from the stored bill figures; top products are ranked
by quantity sold, using the names snapshotted on the bill lines.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable

from pos.domain.exceptions import ValidationError
from pos.domain.model.bill import Bill, PaymentMode
from pos.domain.model.value_objects import Money
from pos.domain.repository.unit_of_work import UnitOfWork

PERIODS = ("today", "week", "month")
TOP_PRODUCTS_LIMIT = 5


@dataclass(frozen=True)
class DailySalesDTO:
    date: str
    sales: str
    bills: int


@dataclass(frozen=True)
class TopProductDTO:
    product_name: str
    quantity: int
    revenue: str


@dataclass(frozen=True)
class SalesSummaryDTO:
    period: str
    since: str
    total_sales: str
    bill_count: int
    total_discount: str
    total_gst: str
    payment_modes: dict[str, str]
    daily_sales: list[DailySalesDTO]
    top_products: list[TopProductDTO]
    product_count: int
    customer_count: int
    low_stock_count: int


class SalesSummaryHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._uow = uow
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def handle(self, period: str = "today") -> SalesSummaryDTO:
        period = (period or "").strip().lower()
        if period not in PERIODS:
            raise ValidationError(
                f"Invalid period {period!r} (expected one of: {', '.join(PERIODS)})"
            )
        since = _period_start(period, self._clock())

        with self._uow as uow:
            bills = uow.bills.list_bills(start=since)
            products = uow.products.list_all()
            customer_count = len(uow.customers.list_all())

        # list_bills is newest first; the daily breakdown reads oldest first.
        bills = sorted(bills, key=lambda b: (b.created_at, b.id))

        return SalesSummaryDTO(
            period=period,
            since=since.strftime("%Y-%m-%d %H:%M UTC"),
            total_sales=str(_sum(b.total_amount for b in bills)),
            bill_count=len(bills),
            total_discount=str(_sum(b.discount for b in bills)),
            total_gst=str(_sum(b.gst_amount for b in bills)),
            payment_modes=_by_payment_mode(bills),
            daily_sales=_daily_sales(bills),
            top_products=_top_products(bills),
            product_count=len(products),
            customer_count=customer_count,
            low_stock_count=sum(1 for p in products if p.is_low_stock),
        )


def _period_start(period: str, now: datetime) -> datetime:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    today = now.astimezone(timezone.utc).date()
    if period == "week":
        start = today - timedelta(days=7)
    elif period == "month":
        start = _one_month_before(today)
    else:
        start = today
    return datetime.combine(start, time.min, tzinfo=timezone.utc)


def _one_month_before(day: date) -> date:
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _sum(amounts) -> Money:
    total = Money.zero()
    for amount in amounts:
        total = total + amount
    return total


def _by_payment_mode(bills: list[Bill]) -> dict[str, str]:
    totals: dict[PaymentMode, Money] = {}
    for bill in bills:
        totals[bill.payment_mode] = totals.get(bill.payment_mode, Money.zero()) + bill.total_amount
    return {mode.value: str(totals[mode]) for mode in PaymentMode if mode in totals}


def _daily_sales(bills: list[Bill]) -> list[DailySalesDTO]:
    days: dict[str, tuple[Money, int]] = {}
    for bill in bills:
        key = bill.created_at.astimezone(timezone.utc).strftime("%Y-%m-%d")
        sales, count = days.get(key, (Money.zero(), 0))
        days[key] = (sales + bill.total_amount, count + 1)
    return [
        DailySalesDTO(date=key, sales=str(sales), bills=count)
        for key, (sales, count) in days.items()
    ]


def _top_products(bills: list[Bill]) -> list[TopProductDTO]:
    sold: dict[str, tuple[int, Money]] = {}
    for bill in bills:
        for item in bill.items:
            quantity, revenue = sold.get(item.product_name, (0, Money.zero()))
            sold[item.product_name] = (quantity + item.quantity.value, revenue + item.line_total)

    ranked = sorted(sold.items(), key=lambda entry: (-entry[1][0], entry[0]))
    return [
        TopProductDTO(product_name=name, quantity=quantity, revenue=str(revenue))
        for name, (quantity, revenue) in ranked[:TOP_PRODUCTS_LIMIT]
    ]
