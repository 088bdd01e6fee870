"""Application service: Add Customer use case.

Phone numbers are the natural key: a second customer with the same
phone is rejected.
"""

from __future__ import annotations

from pos.domain.exceptions import ValidationError
from pos.domain.model.customer import Customer
from pos.domain.repository.unit_of_work import UnitOfWork


class AddCustomerHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        name: str,
        phone: str,
        email: str | None = None,
        address: str | None = None,
        loyalty_points: int = 0,
    ) -> Customer:
        if not name or not name.strip():
            raise ValidationError("Customer name is required")
        if not phone or not phone.strip():
            raise ValidationError("Customer phone is required")

        with self._uow as uow:
            existing = uow.customers.get_by_phone(phone.strip())
            if existing is not None:
                raise ValidationError(
                    f"Phone {phone.strip()} already belongs to customer #{existing.id}"
                )

            customer = Customer(
                id=uow.customers.next_id(),
                name=name.strip(),
                phone=phone.strip(),
                email=email,
                address=address,
                loyalty_points=loyalty_points,
            )
            uow.customers.save(customer)
            uow.commit()

        return customer
