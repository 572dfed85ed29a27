"""Application service: Set Option Availability use case (admin).

Switches a flavor, or a topping within one tier, on or off across every
product that offers it.  Lines already in carts or orders are untouched;
new selections of a switched-off option are rejected when added to a cart.
"""

from __future__ import annotations

from dataclasses import replace

import structlog

from doughshop.domain.exceptions import EntityNotFoundError
from doughshop.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class SetOptionAvailabilityHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, option: str, available: bool, tier: str | None = None) -> list[str]:
        """Return the ids of the products that offer *option*.

        ``tier`` None means *option* is a flavor.
        """
        affected: list[str] = []
        for product in self._product_repo.list_all():
            schema = product.customization
            if not schema.offers(option, tier):
                continue
            affected.append(product.id)
            if schema.is_available(option, tier) == available:
                continue
            self._product_repo.save(
                replace(product, customization=schema.with_availability(option, available, tier))
            )

        if not affected:
            kind = "flavor" if tier is None else f"{tier} topping"
            raise EntityNotFoundError(f"No product offers the {kind} '{option}'")

        logger.info(
            "catalog.option_availability_set",
            option=option,
            tier=tier,
            available=available,
            products=affected,
        )
        return affected
