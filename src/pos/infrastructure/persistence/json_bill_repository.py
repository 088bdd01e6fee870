"""JSON-backed implementation of BillRepository.

Bills are appended in insertion order, so the last record is always the
most recent bill.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal, InvalidOperation

from pos.domain.exceptions import PersistenceError, ValidationError
from pos.domain.model.bill import Bill, LineItem, PaymentMode
from pos.domain.model.value_objects import Money, Quantity
from pos.domain.repository.bill_repository import BillRepository


class JsonBillRepository(BillRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- BillRepository interface ---------------------------------------------

    def get_last_invoice_number(self) -> str | None:
        if not self._records:
            return None
        try:
            return max(self._records, key=lambda r: r["id"])["invoice_number"]
        except (KeyError, TypeError) as exc:
            raise PersistenceError(f"Malformed bill records: {exc!r}") from exc

    def insert(self, bill: Bill) -> Bill:
        if any(r.get("invoice_number") == bill.invoice_number for r in self._records):
            raise PersistenceError(f"Invoice number {bill.invoice_number} already exists")
        try:
            next_id = max((r["id"] for r in self._records), default=0) + 1
        except (KeyError, TypeError) as exc:
            raise PersistenceError(f"Malformed bill records: {exc!r}") from exc
        saved = replace(bill, id=next_id)
        self._records.append(self._to_raw(saved))
        return saved

    def get_by_id(self, bill_id: int) -> Bill | None:
        for raw in self._records:
            if raw.get("id") == bill_id:
                return self._to_domain(raw)
        return None

    def list_bills(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        payment_mode: PaymentMode | None = None,
    ) -> list[Bill]:
        bills = [self._to_domain(raw) for raw in self._records]
        if start is not None:
            bills = [b for b in bills if b.created_at >= start]
        if end is not None:
            bills = [b for b in bills if b.created_at <= end]
        if payment_mode is not None:
            bills = [b for b in bills if b.payment_mode == payment_mode]
        return sorted(bills, key=lambda b: (b.created_at, b.id), reverse=True)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(bill: Bill) -> dict:
        return {
            "id": bill.id,
            "invoice_number": bill.invoice_number,
            "customer_id": bill.customer_id,
            "customer_name": bill.customer_name,
            "customer_phone": bill.customer_phone,
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "line_total": str(item.line_total.amount),
                }
                for item in bill.items
            ],
            "subtotal": str(bill.subtotal.amount),
            "discount": str(bill.discount.amount),
            "gst_amount": str(bill.gst_amount.amount),
            "loyalty_points_redeemed": bill.loyalty_points_redeemed,
            "loyalty_points_earned": bill.loyalty_points_earned,
            "total_amount": str(bill.total_amount.amount),
            "payment_mode": bill.payment_mode.value,
            "created_by": bill.created_by,
            "created_at": bill.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Bill:
        try:
            items = tuple(
                LineItem(
                    product_id=i["product_id"],
                    product_name=i["product_name"],
                    quantity=Quantity(i["quantity"]),
                    unit_price=Money(Decimal(i["unit_price"])),
                    line_total=Money(Decimal(i["line_total"])),
                )
                for i in raw["items"]
            )
            return Bill(
                id=raw["id"],
                invoice_number=raw["invoice_number"],
                customer_id=raw.get("customer_id"),
                customer_name=raw["customer_name"],
                customer_phone=raw.get("customer_phone"),
                items=items,
                subtotal=Money(Decimal(raw["subtotal"])),
                discount=Money(Decimal(raw.get("discount", "0"))),
                gst_amount=Money(Decimal(raw["gst_amount"])),
                loyalty_points_redeemed=raw.get("loyalty_points_redeemed", 0),
                loyalty_points_earned=raw.get("loyalty_points_earned", 0),
                total_amount=Money(Decimal(raw["total_amount"])),
                payment_mode=PaymentMode(raw["payment_mode"]),
                created_by=raw["created_by"],
                created_at=datetime.fromisoformat(raw["created_at"]),
            )
        except (KeyError, TypeError, ValueError, InvalidOperation, ValidationError) as exc:
            raise PersistenceError(
                f"Malformed bill record #{raw.get('id', '?')}: {exc!r}"
            ) from exc
