"""Abstract repository for the Customer aggregate (the customer ledger)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.customer import Customer


class CustomerRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique customer ID."""

    @abstractmethod
    def get_by_id(self, customer_id: int) -> Customer | None:
        """Return a customer by ID, or None if not found."""

    @abstractmethod
    def get_by_phone(self, phone: str) -> Customer | None:
        """Return the customer registered under ``phone``, or None."""

    @abstractmethod
    def adjust_loyalty(self, customer_id: int, delta: int) -> Customer:
        """Atomically add ``delta`` (possibly negative) to the balance.

        Raises EntityNotFoundError for an unknown customer and
        InsufficientPointsError if the balance would go negative.
        """

    @abstractmethod
    def list_all(self) -> list[Customer]:
        """Return every customer."""

    @abstractmethod
    def save(self, customer: Customer) -> None:
        """Persist a new or updated customer."""
