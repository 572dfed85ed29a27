"""Application service: Add To Cart use case.

Validates the customization against the product schema.  Stock is not
checked or reserved here; that happens at checkout.
"""

from __future__ import annotations

import structlog

from doughshop.application.dto import CartDTO, cart_to_dto
from doughshop.domain.exceptions import EntityNotFoundError
from doughshop.domain.model.product import Customization
from doughshop.domain.repository.cart_repository import CartRepository
from doughshop.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class AddToCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo

    def handle(
        self,
        customer_key: str,
        product_id: str,
        customization: Customization | None = None,
        quantity: int = 1,
    ) -> CartDTO:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")

        cart = self._cart_repo.get(customer_key)
        line = cart.add_line(product, customization, quantity)
        self._cart_repo.save(cart)

        logger.info(
            "cart.line_added",
            customer_key=customer_key,
            line_id=line.id,
            product_id=product_id,
            quantity=quantity,
        )
        return cart_to_dto(cart)
