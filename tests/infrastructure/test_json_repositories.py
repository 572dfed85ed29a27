"""Tests for the JSON-file repositories."""

import dataclasses
import json

import pytest

from doughshop.domain.exceptions import ConcurrentModificationError, EntityNotFoundError
from doughshop.domain.model.cart import Cart
from doughshop.domain.model.identity import Actor, Role
from doughshop.domain.model.inventory import SaleJournalEntry, StockRecord
from doughshop.domain.model.order import DeliveryMethod, Order, OrderStatus, PaymentMethod
from doughshop.domain.model.value_objects import Money
from doughshop.infrastructure.persistence.json_cart_repository import JsonCartRepository
from doughshop.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from doughshop.infrastructure.persistence.json_order_repository import JsonOrderRepository
from doughshop.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from doughshop.infrastructure.persistence.json_sale_journal_repository import (
    JsonSaleJournalRepository,
)
from doughshop.infrastructure.persistence.seed import DEFAULT_CATALOG, seed_catalog
from tests.fakes import make_product, pick


class TestJsonInventoryRepository:

    def test_save_and_reload(self, tmp_path):
        repo = JsonInventoryRepository(tmp_path / "inventory.json")
        record = StockRecord.fresh("1", 20)
        record.commit_sale(3)
        repo.save(record)

        loaded = JsonInventoryRepository(tmp_path / "inventory.json").get_by_product_id("1")
        assert (loaded.current_stock, loaded.sold_today, loaded.version) == (17, 3, 1)

    def test_stale_version_rejected(self, tmp_path):
        repo = JsonInventoryRepository(tmp_path / "inventory.json")
        repo.save(StockRecord.fresh("1", 20))
        first = repo.get_by_product_id("1")
        second = repo.get_by_product_id("1")

        first.commit_sale(1)
        repo.save(first)
        second.commit_sale(1)
        with pytest.raises(ConcurrentModificationError):
            repo.save(second)
        assert repo.get_by_product_id("1").current_stock == 19

    def test_missing_file_is_created(self, tmp_path):
        path = tmp_path / "nested" / "inventory.json"
        assert JsonInventoryRepository(path).list_all() == []
        assert json.loads(path.read_text()) == []


class TestJsonProductRepository:

    def test_seed_once(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        assert seed_catalog(repo) == len(DEFAULT_CATALOG)
        assert seed_catalog(repo) == 0

    def test_customization_schema_survives(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        seed_catalog(repo)
        party = repo.get_by_id("3")
        assert party.default_daily_limit == 10
        assert party.customization.max_flavors == 4
        assert "premium" in party.customization.topping_tiers
        assert not repo.get_by_id("4").customization.is_customizable

    def test_option_availability_survives(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        seed_catalog(repo)
        box = repo.get_by_id("1")
        schema = box.customization.with_availability("Matcha", available=False)
        schema = schema.with_availability("Almonds", available=False, tier="premium")
        repo.save(dataclasses.replace(box, customization=schema))

        loaded = repo.get_by_id("1").customization
        assert not loaded.is_available("Matcha")
        assert not loaded.is_available("Almonds", "premium")
        assert loaded.is_available("Almonds", "classic")
        assert repo.get_by_id("2").customization.is_available("Matcha")


class TestJsonCartRepository:

    def test_round_trip(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts.json")
        cart = Cart("alice")
        line = cart.add_line(make_product(customizable=True), pick("Chocolate", "Matcha"), 2)
        repo.save(cart)

        loaded = repo.get("alice")
        assert loaded.lines[0].id == line.id
        assert loaded.lines[0].customization.flavors == ("Chocolate", "Matcha")
        assert loaded.total == Money.of("240.00")

    def test_unknown_key_gives_empty_cart(self, tmp_path):
        assert JsonCartRepository(tmp_path / "carts.json").get("nobody").is_empty

    def test_empty_cart_is_dropped(self, tmp_path):
        path = tmp_path / "carts.json"
        repo = JsonCartRepository(path)
        cart = Cart("alice")
        cart.add_line(make_product())
        repo.save(cart)
        cart.clear()
        repo.save(cart)
        assert json.loads(path.read_text()) == []


class TestJsonOrderRepository:

    def _order(self, repo):
        cart = Cart("alice")
        cart.add_line(make_product(customizable=True), pick("Matcha"), 2)
        return Order.create(
            repo.next_id(), Actor("alice", "a@example.com"), cart.lines,
            DeliveryMethod.DELIVERY, PaymentMethod.COD, Money.of("50.00"),
        )

    def test_round_trip_with_history(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = self._order(repo)
        order.transition_to(OrderStatus.CONFIRMED, Actor("staff", role=Role.ADMIN))
        order.cancel(Actor("staff", role=Role.ADMIN))
        repo.save(order)

        loaded = repo.get_by_id(order.id)
        assert loaded.status is OrderStatus.CANCELLED
        assert loaded.cancelled_by is Role.ADMIN
        assert loaded.total == Money.of("290.00")
        assert loaded.lines[0].customization.flavors == ("Matcha",)
        assert [c.to_status for c in loaded.history] == [
            OrderStatus.CONFIRMED,
            OrderStatus.CANCELLED,
        ]

    def test_next_id_never_repeats(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        first = repo.next_id()
        second = repo.next_id()
        assert second == first + 1

    def test_next_id_unique_across_instances(self, tmp_path):
        one = JsonOrderRepository(tmp_path / "orders.json")
        two = JsonOrderRepository(tmp_path / "orders.json")
        assert [one.next_id(), two.next_id(), one.next_id()] == [1, 2, 3]

    def test_new_order_cannot_reuse_a_stored_id(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = self._order(repo)
        repo.save(order)

        with pytest.raises(ConcurrentModificationError, match="already exists"):
            repo.save(dataclasses.replace(order, customer_id="bob", version=0))
        assert repo.get_by_id(order.id).customer_id == "alice"

    def test_stale_copy_is_rejected(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.save(self._order(repo))
        admin = Actor("staff", role=Role.ADMIN)
        fresh, stale = repo.get_by_id(1), repo.get_by_id(1)

        fresh.cancel(admin)
        repo.save(fresh)
        stale.transition_to(OrderStatus.CONFIRMED, admin)

        with pytest.raises(ConcurrentModificationError):
            repo.save(stale)
        assert repo.get_by_id(1).status is OrderStatus.CANCELLED

    def test_list_by_customer(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.save(self._order(repo))
        assert len(repo.list_by_customer("alice")) == 1
        assert repo.list_by_customer("bob") == []


class TestJsonSaleJournalRepository:

    def test_append_and_settle(self, tmp_path):
        repo = JsonSaleJournalRepository(tmp_path / "journal.json")
        repo.append(SaleJournalEntry(order_id=7, quantities={"1": 2}))
        assert [e.order_id for e in repo.list_unsettled()] == [7]

        repo.settle(7)
        assert repo.list_unsettled() == []

    def test_settle_unknown(self, tmp_path):
        with pytest.raises(EntityNotFoundError):
            JsonSaleJournalRepository(tmp_path / "journal.json").settle(1)
