"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from doughshop.domain.exceptions import ConcurrentModificationError
from doughshop.domain.model.identity import Role
from doughshop.domain.model.order import (
    DeliveryMethod,
    Order,
    OrderLine,
    OrderStatus,
    PaymentMethod,
    StatusChange,
)
from doughshop.domain.model.product import Customization
from doughshop.domain.model.value_objects import Money, Quantity
from doughshop.domain.repository.order_repository import OrderRepository
from doughshop.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):
    """Orders in one JSON file; issued ids in a sidecar sequence file.

    The sequence file records the last id handed out, so an id reserved by
    one process is never reissued to another even before its order is saved.
    """

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)
        self._sequence = JsonFile(
            file_path.with_name(f"{file_path.stem}.sequence.json"),
            empty={"last_id": 0},
        )

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        with self._sequence.locked():
            last_id = self._sequence.read()["last_id"]
            stored = max((o["id"] for o in self._file.read()), default=0)
            issued = max(last_id, stored) + 1
            self._sequence.write({"last_id": issued})
            return issued

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._file.read():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._file.read()]

    def save(self, order: Order) -> None:
        with self._file.locked():
            orders = self._file.read()
            index = None
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    index = i
                    break

            stored_version = orders[index].get("version", 1) if index is not None else 0
            if index is not None and order.version == 0:
                raise ConcurrentModificationError(f"Order #{order.id} already exists")
            if stored_version != order.version:
                raise ConcurrentModificationError(
                    f"Order #{order.id} changed "
                    f"(expected version {order.version}, found {stored_version})"
                )

            raw = self._to_raw(order)
            raw["version"] = order.version + 1
            if index is None:
                orders.append(raw)
            else:
                orders[index] = raw
            self._file.write(orders)
            order.version += 1

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "customer_id": order.customer_id,
            "customer_email": order.customer_email,
            "status": order.status.value,
            "delivery_method": order.delivery_method.value,
            "payment_method": order.payment_method.value,
            "delivery_fee": str(order.delivery_fee.amount),
            "notes": order.notes,
            "created_at": order.created_at.isoformat(),
            "cancelled_by": order.cancelled_by.value if order.cancelled_by else None,
            "lines": [
                {
                    "line_id": line.line_id,
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                    "customization": line.customization.to_dict(),
                }
                for line in order.lines
            ],
            "history": [
                {
                    "from": change.from_status.value,
                    "to": change.to_status.value,
                    "role": change.role.value,
                    "at": change.at.isoformat(),
                }
                for change in order.history
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        lines = tuple(
            OrderLine(
                line_id=i["line_id"],
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "PHP")),
                customization=Customization.from_dict(i.get("customization")),
            )
            for i in raw["lines"]
        )
        return Order(
            id=raw["id"],
            customer_id=raw["customer_id"],
            customer_email=raw.get("customer_email", ""),
            lines=lines,
            delivery_method=DeliveryMethod(raw["delivery_method"]),
            payment_method=PaymentMethod(raw["payment_method"]),
            delivery_fee=Money(Decimal(raw.get("delivery_fee", "0"))),
            notes=raw.get("notes", ""),
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            cancelled_by=Role(raw["cancelled_by"]) if raw.get("cancelled_by") else None,
            history=[
                StatusChange(
                    from_status=OrderStatus(h["from"]),
                    to_status=OrderStatus(h["to"]),
                    role=Role(h["role"]),
                    at=datetime.fromisoformat(h["at"]),
                )
                for h in raw.get("history", [])
            ],
            version=raw.get("version", 1),
        )
