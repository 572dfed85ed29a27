"""Application service: Place Order use case (checkout).

Orchestrates the cart, the payment gateway, the inventory ledger and the
order repository.

Steps:
1. Aggregate cart lines per product.
2. Pre-check availability; a short product rejects the whole order.
3. Payment round-trip, bounded by a timeout.  Nothing is reserved yet.
4. Commit every product through the ledger as one serialized operation,
   which re-validates under lock and journals the sale.
5. Persist the pending order, settle the journal, clear the cart.

A failure in step 5's persist leaves stock committed.  It is raised as
OrderCreationError and never retried here; ``ReconcileSalesHandler``
re-credits journal entries that still have no matching order once they
are older than its grace period.
"""

from __future__ import annotations

import structlog

from doughshop.application.dto import OrderDTO, order_to_dto
from doughshop.application.payment import PaymentGateway, authorize_within
from doughshop.domain.bus import EventPublisher, NullPublisher
from doughshop.domain.events import OrderPlaced
from doughshop.domain.exceptions import OrderCreationError, OversellRejected
from doughshop.domain.model.identity import Actor
from doughshop.domain.model.inventory import SaleJournalEntry
from doughshop.domain.model.order import DeliveryMethod, Order, PaymentMethod
from doughshop.domain.model.value_objects import Money
from doughshop.domain.repository.cart_repository import CartRepository
from doughshop.domain.repository.order_repository import OrderRepository
from doughshop.domain.repository.sale_journal_repository import SaleJournalRepository
from doughshop.domain.service.inventory_ledger import InventoryLedger

logger = structlog.get_logger(__name__)

DEFAULT_DELIVERY_FEE = Money.of("50.00")
DEFAULT_PAYMENT_TIMEOUT = 10.0


class PlaceOrderHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        order_repo: OrderRepository,
        journal_repo: SaleJournalRepository,
        ledger: InventoryLedger,
        payment_gateway: PaymentGateway,
        publisher: EventPublisher | None = None,
        delivery_fee: Money = DEFAULT_DELIVERY_FEE,
        payment_timeout: float = DEFAULT_PAYMENT_TIMEOUT,
    ) -> None:
        self._cart_repo = cart_repo
        self._order_repo = order_repo
        self._journal_repo = journal_repo
        self._ledger = ledger
        self._payment_gateway = payment_gateway
        self._publisher = publisher or NullPublisher()
        self._delivery_fee = delivery_fee
        self._payment_timeout = payment_timeout

    def handle(
        self,
        customer: Actor,
        payment_method: PaymentMethod,
        delivery_method: DeliveryMethod,
        notes: str = "",
    ) -> OrderDTO:
        cart = self._cart_repo.get(customer.cart_key)
        cart.ensure_not_empty()
        quantities = cart.aggregate_by_product()

        log = logger.bind(customer_id=customer.customer_id, quantities=quantities)
        log.info("order.checkout_started")

        # Fast rejection before the payment round-trip.  The binding
        # check is repeated under lock in commit_order.
        for product_id, qty in sorted(quantities.items()):
            available = self._ledger.get_available(product_id)
            if qty > available:
                log.info("order.oversell_rejected", product_id=product_id, available=available)
                raise OversellRejected(product_id, qty, available)

        order = Order.create(
            order_id=self._order_repo.next_id(),
            customer=customer,
            lines=cart.lines,
            delivery_method=delivery_method,
            payment_method=payment_method,
            delivery_fee=self._delivery_fee,
            notes=notes,
        )
        log = log.bind(order_id=order.id)

        reference = authorize_within(
            self._payment_gateway,
            self._payment_timeout,
            order.id,
            order.total,
            payment_method,
        )
        log.info("order.payment_authorized", reference=reference)

        entry = SaleJournalEntry(order_id=order.id, quantities=quantities)
        self._ledger.commit_order(
            quantities, on_committed=lambda: self._journal_repo.append(entry)
        )

        try:
            self._order_repo.save(order)
        except Exception as exc:
            log.critical("order.persist_failed_after_commit", exc_info=True)
            raise OrderCreationError(order.id, quantities, str(exc)) from exc

        self._journal_repo.settle(order.id)
        cart.clear()
        self._cart_repo.save(cart)

        log.info("order.placed", total=str(order.total))
        self._publisher.publish(
            OrderPlaced(
                aggregate_id=str(order.id),
                customer_id=order.customer_id,
                total=str(order.total),
            )
        )
        return order_to_dto(order)
