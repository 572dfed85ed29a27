"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from doughshop.domain.service.inventory_ledger import InventoryLedger
from doughshop.domain.service.keyed_locks import KeyedLocks
from doughshop.infrastructure.bus import InMemoryEventBus
from doughshop.infrastructure.config import Settings, load_settings
from doughshop.infrastructure.payment.simulated import SimulatedPaymentGateway
from doughshop.infrastructure.persistence.json_cart_repository import JsonCartRepository
from doughshop.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from doughshop.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from doughshop.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from doughshop.infrastructure.persistence.json_sale_journal_repository import (
    JsonSaleJournalRepository,
)
from doughshop.infrastructure.persistence.seed import seed_catalog


@dataclass
class Services:
    """Everything one process shares: repositories, the ledger, the bus, locks."""

    settings: Settings
    products: JsonProductRepository
    inventory: JsonInventoryRepository
    carts: JsonCartRepository
    orders: JsonOrderRepository
    journal: JsonSaleJournalRepository
    bus: InMemoryEventBus
    ledger: InventoryLedger
    payment_gateway: SimulatedPaymentGateway
    order_locks: KeyedLocks = field(default_factory=KeyedLocks)


def build_services(settings: Settings | None = None) -> Services:
    settings = settings or load_settings()
    data_dir = settings.data_dir

    products = JsonProductRepository(data_dir / "products.json")
    seed_catalog(products)
    inventory = JsonInventoryRepository(data_dir / "inventory.json")
    bus = InMemoryEventBus()

    return Services(
        settings=settings,
        products=products,
        inventory=inventory,
        carts=JsonCartRepository(data_dir / "carts.json"),
        orders=JsonOrderRepository(data_dir / "orders.json"),
        journal=JsonSaleJournalRepository(data_dir / "sale_journal.json"),
        bus=bus,
        ledger=InventoryLedger(inventory, products, publisher=bus),
        payment_gateway=SimulatedPaymentGateway(delay=settings.payment_delay),
    )
