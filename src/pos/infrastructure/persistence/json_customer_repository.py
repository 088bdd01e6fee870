"""JSON-backed implementation of CustomerRepository."""

from __future__ import annotations

from pos.domain.exceptions import (
    EntityNotFoundError,
    InsufficientPointsError,
    PersistenceError,
    ValidationError,
)
from pos.domain.model.customer import Customer
from pos.domain.repository.customer_repository import CustomerRepository


class JsonCustomerRepository(CustomerRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- CustomerRepository interface -----------------------------------------

    def next_id(self) -> int:
        if not self._records:
            return 1
        return max(r["id"] for r in self._records) + 1

    def get_by_id(self, customer_id: int) -> Customer | None:
        raw = self._find(customer_id)
        return self._to_domain(raw) if raw is not None else None

    def get_by_phone(self, phone: str) -> Customer | None:
        for raw in self._records:
            if raw.get("phone") == phone:
                return self._to_domain(raw)
        return None

    def adjust_loyalty(self, customer_id: int, delta: int) -> Customer:
        raw = self._find(customer_id)
        if raw is None:
            raise EntityNotFoundError(f"Customer #{customer_id} not found")
        balance = self._to_domain(raw).loyalty_points
        if balance + delta < 0:
            raise InsufficientPointsError(-delta, balance)
        raw["loyalty_points"] = balance + delta
        return self._to_domain(raw)

    def list_all(self) -> list[Customer]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, customer: Customer) -> None:
        if customer.id is None:
            customer.id = self.next_id()
        for i, raw in enumerate(self._records):
            if raw["id"] == customer.id:
                self._records[i] = self._to_raw(customer)
                return
        self._records.append(self._to_raw(customer))

    # --- Serialization --------------------------------------------------------

    def _find(self, customer_id: int) -> dict | None:
        for raw in self._records:
            if raw.get("id") == customer_id:
                return raw
        return None

    @staticmethod
    def _to_raw(customer: Customer) -> dict:
        return {
            "id": customer.id,
            "name": customer.name,
            "phone": customer.phone,
            "email": customer.email,
            "address": customer.address,
            "loyalty_points": customer.loyalty_points,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Customer:
        try:
            return Customer(
                id=raw["id"],
                name=raw["name"],
                phone=raw["phone"],
                email=raw.get("email"),
                address=raw.get("address"),
                loyalty_points=raw.get("loyalty_points", 0),
            )
        except (KeyError, TypeError, ValidationError) as exc:
            raise PersistenceError(
                f"Malformed customer record #{raw.get('id', '?')}: {exc!r}"
            ) from exc
