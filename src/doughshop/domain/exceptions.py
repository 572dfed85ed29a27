"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(DomainException):
    """A single ledger operation asked for more units than are in stock."""

    def __init__(self, product_id: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for product '{product_id}' "
            f"(need {requested}, have {available} available)"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class OversellRejected(DomainException):
    """Checkout rejected: an aggregated product quantity exceeds stock."""

    def __init__(self, product_id: str, requested: int, available: int) -> None:
        super().__init__(
            f"Cannot place order: product '{product_id}' exceeds available "
            f"stock ({requested} requested, {available} left)"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidCustomizationError(ValidationError):
    """A customization selection does not fit the product's schema."""


class InvalidTransitionError(DomainException):
    """The requested status is not reachable from the current status."""


class UnauthorizedTransitionError(DomainException):
    """The acting role may not perform the requested status change."""


class PaymentTimeoutError(DomainException):
    """The payment round-trip did not complete in time; nothing was committed."""


class ConcurrentModificationError(DomainException):
    """A stored record changed between read and conditional write."""


class OrderCreationError(DomainException):
    """Stock was committed but the order record failed to persist.

    Carries the committed quantities so a reconciliation run can re-credit
    them when no matching order exists.
    """

    def __init__(self, order_id: int, quantities: dict[str, int], reason: str) -> None:
        super().__init__(
            f"Order #{order_id} could not be saved after stock was committed: {reason}"
        )
        self.order_id = order_id
        self.quantities = dict(quantities)
