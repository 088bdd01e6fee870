"""Application service: List Customers use case (query).

An optional search term matches, case-insensitively, anywhere in the
customer's name, phone or email.
"""

from __future__ import annotations

from pos.domain.model.customer import Customer
from pos.domain.repository.unit_of_work import UnitOfWork


class ListCustomersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, search: str | None = None) -> list[Customer]:
        with self._uow as uow:
            customers = uow.customers.list_all()

        term = (search or "").strip().lower()
        if not term:
            return customers
        return [c for c in customers if _matches(c, term)]


def _matches(customer: Customer, term: str) -> bool:
    fields = (customer.name, customer.phone, customer.email or "")
    return any(term in value.lower() for value in fields)
