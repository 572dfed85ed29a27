"""Who is acting.  Supplied by the identity provider and trusted as-is."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

GUEST_KEY = "guest"


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    customer_id: str
    email: str = ""
    role: Role = Role.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def cart_key(self) -> str:
        return self.customer_id or GUEST_KEY
