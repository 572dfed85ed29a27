"""Stand-in payment gateway that only models the round-trip delay."""

from __future__ import annotations

import time
from uuid import uuid4

import structlog

from doughshop.application.payment import PaymentGateway
from doughshop.domain.model.order import PaymentMethod
from doughshop.domain.model.value_objects import Money

logger = structlog.get_logger(__name__)


class SimulatedPaymentGateway(PaymentGateway):

    def __init__(self, delay: float = 2.0) -> None:
        self._delay = delay

    def authorize(self, order_id: int, amount: Money, method: PaymentMethod) -> str:
        if self._delay > 0:
            time.sleep(self._delay)
        reference = f"{method.value}-{uuid4().hex[:10]}"
        logger.debug(
            "payment.authorized",
            order_id=order_id,
            amount=str(amount),
            method=method.value,
            reference=reference,
        )
        return reference
