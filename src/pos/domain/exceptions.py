"""Domain-level exceptions.

Every checkout failure is a subclass of DomainException so the CLI (or
any web layer in front of the core) can catch them uniformly.  Each
class carries the HTTP status a thin web layer should map it to.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    http_status = 400


class ValidationError(DomainException):
    """A malformed or incomplete request, or a violated invariant."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


NotFoundError = EntityNotFoundError


class InsufficientStockError(DomainException):
    """A line item asks for more units than the product has in stock."""

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for {product_name} "
            f"(need {requested}, have {available})"
        )
        self.product_name = product_name
        self.requested = requested
        self.available = available


class InsufficientPointsError(DomainException):
    """A redemption exceeds the customer's loyalty balance."""

    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient loyalty points (redeeming {requested}, have {available})"
        )
        self.requested = requested
        self.available = available


class PersistenceError(DomainException):
    """The underlying storage could not be read or written."""

    http_status = 500
