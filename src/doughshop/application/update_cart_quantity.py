"""Application service: Update Cart Quantity use case.

The stock check here is advisory only.  Nothing is reserved, so the
quantity can still be rejected at checkout.
"""

from __future__ import annotations

import structlog

from doughshop.application.dto import CartUpdateDTO, cart_to_dto
from doughshop.domain.repository.cart_repository import CartRepository
from doughshop.domain.service.inventory_ledger import InventoryLedger

logger = structlog.get_logger(__name__)


class UpdateCartQuantityHandler:

    def __init__(self, cart_repo: CartRepository, ledger: InventoryLedger) -> None:
        self._cart_repo = cart_repo
        self._ledger = ledger

    def handle(self, customer_key: str, line_id: str, quantity: int) -> CartUpdateDTO:
        """Set a line's quantity.

        Zero or less removes the line.  A quantity above the product's
        current stock is refused: the cart is left as it was and the
        returned DTO carries a warning for the user.
        """
        cart = self._cart_repo.get(customer_key)
        line = cart.get_line(line_id)

        if quantity > 0:
            available = self._ledger.get_available(line.product_id)
            if quantity > available:
                logger.warning(
                    "cart.quantity_refused",
                    customer_key=customer_key,
                    product_id=line.product_id,
                    requested=quantity,
                    available=available,
                )
                return CartUpdateDTO(
                    cart=cart_to_dto(cart),
                    warning=(
                        f"Only {available} of {line.product.name} left; "
                        f"quantity kept at {line.quantity.value}"
                    ),
                )

        cart.set_quantity(line_id, quantity)
        self._cart_repo.save(cart)
        return CartUpdateDTO(cart=cart_to_dto(cart))
