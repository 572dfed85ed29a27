"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from doughshop.domain.model.product import CustomizationSchema, Product
from doughshop.domain.model.value_objects import Money
from doughshop.domain.repository.product_repository import ProductRepository
from doughshop.infrastructure.persistence.json_file import JsonFile


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def save(self, product: Product) -> None:
        with self._file.locked():
            products = self._load()
            products[product.id] = product
            self._file.write([self.to_raw(p) for p in products.values()])

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        return {item["id"]: self.to_domain(item) for item in self._file.read()}

    @staticmethod
    def to_raw(product: Product) -> dict:
        schema = product.customization
        return {
            "id": product.id,
            "name": product.name,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "pack_size": product.pack_size,
            "flavors": list(schema.flavors),
            "max_flavors": schema.max_flavors,
            "topping_tiers": {tier: list(opts) for tier, opts in schema.topping_tiers.items()},
            "unavailable_flavors": sorted(schema.unavailable_flavors),
            "unavailable_toppings": {
                tier: sorted(opts) for tier, opts in schema.unavailable_toppings.items()
            },
        }

    @staticmethod
    def to_domain(item: dict) -> Product:
        return Product(
            id=item["id"],
            name=item["name"],
            price=Money(Decimal(item["price"]), item.get("currency", "PHP")),
            pack_size=item.get("pack_size", 1),
            customization=CustomizationSchema(
                flavors=tuple(item.get("flavors", ())),
                max_flavors=item.get("max_flavors", 0),
                topping_tiers={
                    tier: tuple(opts)
                    for tier, opts in item.get("topping_tiers", {}).items()
                },
                unavailable_flavors=frozenset(item.get("unavailable_flavors", ())),
                unavailable_toppings={
                    tier: frozenset(opts)
                    for tier, opts in item.get("unavailable_toppings", {}).items()
                },
            ),
        )
