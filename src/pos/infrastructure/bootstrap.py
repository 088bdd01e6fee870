"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from pos.application.checkout import CheckoutHandler
from pos.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork
from pos.infrastructure.settings import Settings


def settings() -> Settings:
    return Settings()


def unit_of_work() -> JsonUnitOfWork:
    return JsonUnitOfWork(settings().store_path)


def checkout_handler() -> CheckoutHandler:
    config = settings()
    return CheckoutHandler(
        uow=JsonUnitOfWork(config.store_path),
        invoice_tag=config.invoice_tag,
        verify_totals=config.verify_totals,
    )
