"""Payment gateway port.

Payment itself is handled by an external gateway; checkout only needs the
round-trip to finish (or fail) within a bounded time before stock is
committed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError

from doughshop.domain.exceptions import PaymentTimeoutError
from doughshop.domain.model.order import PaymentMethod
from doughshop.domain.model.value_objects import Money


class PaymentGateway(ABC):

    @abstractmethod
    def authorize(self, order_id: int, amount: Money, method: PaymentMethod) -> str:
        """Authorize *amount* for the order and return a gateway reference."""


def authorize_within(
    gateway: PaymentGateway,
    timeout: float,
    order_id: int,
    amount: Money,
    method: PaymentMethod,
) -> str:
    """Run ``gateway.authorize`` but give up after *timeout* seconds.

    Raises PaymentTimeoutError on expiry.  The gateway call may still be
    running in its worker thread; its result is discarded.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="payment")
    future = executor.submit(gateway.authorize, order_id, amount, method)
    try:
        return future.result(timeout=timeout)
    except FuturesTimeoutError as exc:
        future.cancel()
        raise PaymentTimeoutError(
            f"Payment for order #{order_id} timed out after {timeout:g}s"
        ) from exc
    finally:
        executor.shutdown(wait=False)
