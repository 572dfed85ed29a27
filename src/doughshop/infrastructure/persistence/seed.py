"""Starter catalog written to an empty product store."""

from __future__ import annotations

from doughshop.domain.model.product import CustomizationSchema, Product
from doughshop.domain.model.value_objects import Money
from doughshop.domain.repository.product_repository import ProductRepository

FLAVORS = ("Chocolate", "Strawberry", "Matcha", "Glaze", "White Chocolate")
TOPPING_TIERS = {
    "classic": ("Sprinkles", "Mallows", "Crushed Oreo"),
    "premium": (
        "Almonds",
        "Choco Sprinkles",
        "Choco Chips",
        "Bear Biscuits",
        "Mini Oreo",
        "White Choco Chips",
    ),
}

DEFAULT_CATALOG = [
    Product(
        id="1",
        name="Mini Donuts (12 pcs)",
        price=Money.of("120.00"),
        pack_size=12,
        customization=CustomizationSchema(
            flavors=FLAVORS, max_flavors=2, topping_tiers=TOPPING_TIERS
        ),
    ),
    Product(
        id="2",
        name="Mini Donuts (24 pcs)",
        price=Money.of("220.00"),
        pack_size=24,
        customization=CustomizationSchema(
            flavors=FLAVORS, max_flavors=3, topping_tiers=TOPPING_TIERS
        ),
    ),
    Product(
        id="3",
        name="Party Set (50 pcs)",
        price=Money.of("450.00"),
        pack_size=50,
        customization=CustomizationSchema(
            flavors=FLAVORS, max_flavors=4, topping_tiers=TOPPING_TIERS
        ),
    ),
    Product(
        id="4",
        name="Plain Glazed (6 pcs)",
        price=Money.of("60.00"),
        pack_size=6,
    ),
]


def seed_catalog(product_repo: ProductRepository) -> int:
    """Write the starter catalog if the store is empty; returns products added."""
    if product_repo.list_all():
        return 0
    for product in DEFAULT_CATALOG:
        product_repo.save(product)
    return len(DEFAULT_CATALOG)
