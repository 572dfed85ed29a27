"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

from pathlib import Path

from doughshop.domain.model.cart import Cart, CartLine
from doughshop.domain.model.product import Customization
from doughshop.domain.model.value_objects import Quantity
from doughshop.domain.repository.cart_repository import CartRepository
from doughshop.infrastructure.persistence.json_file import JsonFile
from doughshop.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- CartRepository interface ---------------------------------------------

    def get(self, customer_key: str) -> Cart:
        for raw in self._file.read():
            if raw["customer_key"] == customer_key:
                return self._to_domain(raw)
        return Cart(customer_key=customer_key)

    def save(self, cart: Cart) -> None:
        with self._file.locked():
            carts = [c for c in self._file.read() if c["customer_key"] != cart.customer_key]
            if not cart.is_empty:
                carts.append(self._to_raw(cart))
            self._file.write(carts)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "customer_key": cart.customer_key,
            "lines": [
                {
                    "id": line.id,
                    "product": JsonProductRepository.to_raw(line.product),
                    "quantity": line.quantity.value,
                    "customization": line.customization.to_dict(),
                }
                for line in cart.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        return Cart(
            customer_key=raw["customer_key"],
            lines=[
                CartLine(
                    id=line["id"],
                    product=JsonProductRepository.to_domain(line["product"]),
                    quantity=Quantity(line["quantity"]),
                    customization=Customization.from_dict(line.get("customization")),
                )
                for line in raw["lines"]
            ],
        )
