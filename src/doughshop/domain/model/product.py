"""Product catalog entries and their customization schema.

Products are supplied by the catalog.  Apart from switching customization
options on and off, the rest of the domain only reads them.  Carts and
orders take snapshots of them; stock is tracked by the inventory ledger
under the product id.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from doughshop.domain.exceptions import InvalidCustomizationError
from doughshop.domain.model.value_objects import Money

PARTY_DAILY_LIMIT = 10
STANDARD_DAILY_LIMIT = 20


@dataclass(frozen=True)
class Customization:
    """What the customer picked: flavors plus one option per topping tier."""

    flavors: tuple[str, ...] = ()
    toppings: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"flavors": list(self.flavors), "toppings": dict(self.toppings)}

    @staticmethod
    def from_dict(raw: dict | None) -> Customization:
        raw = raw or {}
        return Customization(
            flavors=tuple(raw.get("flavors", ())),
            toppings=dict(raw.get("toppings", {})),
        )

    def __str__(self) -> str:
        parts = []
        if self.flavors:
            parts.append("flavors: " + ", ".join(self.flavors))
        for tier, option in sorted(self.toppings.items()):
            parts.append(f"{tier}: {option}")
        return "; ".join(parts)


@dataclass(frozen=True)
class CustomizationSchema:
    """The choices a product offers.

    ``flavors`` empty means the product has no flavor choice.  Every tier in
    ``topping_tiers`` is required once the product offers toppings.  Options
    switched off by an admin stay listed but cannot be selected.
    """

    flavors: tuple[str, ...] = ()
    max_flavors: int = 0
    topping_tiers: dict[str, tuple[str, ...]] = field(default_factory=dict)
    unavailable_flavors: frozenset[str] = frozenset()
    unavailable_toppings: dict[str, frozenset[str]] = field(default_factory=dict)

    @property
    def is_customizable(self) -> bool:
        return bool(self.flavors or self.topping_tiers)

    def offers(self, option: str, tier: str | None = None) -> bool:
        """Whether *option* is one of this product's flavors, or of *tier*'s toppings."""
        if tier is None:
            return option in self.flavors
        return option in self.topping_tiers.get(tier, ())

    def is_available(self, option: str, tier: str | None = None) -> bool:
        if tier is None:
            return option not in self.unavailable_flavors
        return option not in self.unavailable_toppings.get(tier, frozenset())

    def with_availability(
        self, option: str, available: bool, tier: str | None = None
    ) -> CustomizationSchema:
        """A copy of this schema with *option* switched on or off."""
        if tier is None:
            flavors = set(self.unavailable_flavors)
            if available:
                flavors.discard(option)
            else:
                flavors.add(option)
            return replace(self, unavailable_flavors=frozenset(flavors))

        toppings = {t: set(opts) for t, opts in self.unavailable_toppings.items()}
        off = toppings.setdefault(tier, set())
        if available:
            off.discard(option)
        else:
            off.add(option)
        return replace(
            self,
            unavailable_toppings={t: frozenset(o) for t, o in toppings.items() if o},
        )

    def validate(self, selection: Customization) -> None:
        """Raise InvalidCustomizationError unless *selection* fits this schema."""
        if self.flavors:
            if not selection.flavors:
                raise InvalidCustomizationError("Please select at least one flavor")
            if len(selection.flavors) > self.max_flavors:
                raise InvalidCustomizationError(
                    f"At most {self.max_flavors} flavors may be selected, "
                    f"got {len(selection.flavors)}"
                )
            if len(set(selection.flavors)) != len(selection.flavors):
                raise InvalidCustomizationError("A flavor may only be selected once")
            unknown = [f for f in selection.flavors if f not in self.flavors]
            if unknown:
                raise InvalidCustomizationError(
                    f"Unknown flavor(s): {', '.join(unknown)}"
                )
            off = [f for f in selection.flavors if not self.is_available(f)]
            if off:
                raise InvalidCustomizationError(
                    f"Currently unavailable flavor(s): {', '.join(off)}"
                )
        elif selection.flavors:
            raise InvalidCustomizationError("This product has no flavor options")

        for tier, options in self.topping_tiers.items():
            choice = selection.toppings.get(tier)
            if not choice:
                raise InvalidCustomizationError(f"Please select a {tier} topping")
            if choice not in options:
                raise InvalidCustomizationError(
                    f"Unknown {tier} topping: '{choice}'"
                )
            if not self.is_available(choice, tier):
                raise InvalidCustomizationError(
                    f"The {tier} topping '{choice}' is currently unavailable"
                )

        extra = set(selection.toppings) - set(self.topping_tiers)
        if extra:
            raise InvalidCustomizationError(
                f"Unknown topping tier(s): {', '.join(sorted(extra))}"
            )


@dataclass(frozen=True)
class Product:
    """A product in the catalog.

    ``pack_size`` is the number of pieces sold per unit; stock and prices
    are both counted per unit.
    """

    id: str
    name: str
    price: Money
    pack_size: int = 1
    customization: CustomizationSchema = field(default_factory=CustomizationSchema)

    @property
    def is_party_set(self) -> bool:
        return "party" in self.name.lower()

    @property
    def default_daily_limit(self) -> int:
        """Limit given to a stock record created on first reference."""
        return PARTY_DAILY_LIMIT if self.is_party_set else STANDARD_DAILY_LIMIT
