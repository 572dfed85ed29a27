"""Cart aggregate — line items a customer has picked but not yet ordered.

A cart belongs to one session key (customer id or the guest key).  Adding
lines never touches stock: nothing is reserved until checkout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4

from doughshop.domain.exceptions import EntityNotFoundError, ValidationError
from doughshop.domain.model.product import Customization, Product
from doughshop.domain.model.value_objects import Money, Quantity


def _new_line_id() -> str:
    return uuid4().hex[:12]


@dataclass
class CartLine:
    id: str
    product: Product  # snapshot taken when the line was added
    quantity: Quantity
    customization: Customization = field(default_factory=Customization)

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> Money:
        return self.product.price * self.quantity.value


@dataclass
class Cart:
    customer_key: str
    lines: list[CartLine] = field(default_factory=list)

    def add_line(
        self,
        product: Product,
        customization: Customization | None = None,
        quantity: int = 1,
    ) -> CartLine:
        """Validate the selection against the product schema and append a line."""
        customization = customization or Customization()
        product.customization.validate(customization)
        line = CartLine(
            id=_new_line_id(),
            product=product,
            quantity=Quantity(quantity),
            customization=customization,
        )
        self.lines.append(line)
        return line

    def set_quantity(self, line_id: str, quantity: int) -> None:
        """Change a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove_line(line_id)
            return
        line = self.get_line(line_id)
        line.quantity = Quantity(quantity)

    def remove_line(self, line_id: str) -> None:
        line = self.get_line(line_id)
        self.lines.remove(line)

    def get_line(self, line_id: str) -> CartLine:
        for line in self.lines:
            if line.id == line_id:
                return line
        raise EntityNotFoundError(f"Cart line '{line_id}' not found")

    def aggregate_by_product(self) -> dict[str, int]:
        """Sum quantities per product; stock is tracked per product, not variant."""
        totals: dict[str, int] = {}
        for line in self.lines:
            totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity.value
        return totals

    def clear(self) -> None:
        self.lines.clear()

    def ensure_not_empty(self) -> None:
        if not self.lines:
            raise ValidationError("Cart is empty")

    # --- Computed properties --------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total(self) -> Money:
        return Money.sum(line.line_total for line in self.lines)

    @property
    def total_items(self) -> int:
        return sum(line.quantity.value for line in self.lines)
