"""
Domain model for submitted orders and their clients.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from wholesale.domain.errors import InvalidInputError, InvalidTransitionError
from wholesale.domain.money import ZERO, as_decimal


class OrderStatus(str, Enum):
    """Order status enumeration."""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.DRAFT: frozenset({OrderStatus.SUBMITTED}),
    OrderStatus.SUBMITTED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class ClientInfo:
    """Client and contact details attached to an order."""
    name: str
    address: str = ""
    contact_person: str = ""
    phone: str = ""
    email: str = ""

    REQUIRED_FIELDS = ("name", "contact_person", "phone")

    def missing_fields(self) -> list[str]:
        return [field for field in self.REQUIRED_FIELDS if not (getattr(self, field) or "").strip()]

    def validate(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise InvalidInputError(f"Client info is missing: {', '.join(missing)}")


@dataclass(frozen=True)
class Client:
    """Client directory entry."""
    id: str
    name: str
    address: str = ""
    contact_person: str = ""
    phone: str = ""
    email: str = ""

    def to_client_info(self) -> ClientInfo:
        return ClientInfo(
            name=self.name,
            address=self.address,
            contact_person=self.contact_person,
            phone=self.phone,
            email=self.email,
        )


@dataclass(frozen=True)
class OrderLine:
    """Frozen copy of a cart line inside a submitted order."""
    product_id: str
    quantity: Decimal
    unit_price: Decimal
    notes: str = ""

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.unit_price


class Order:
    """Submitted order; only its status changes after creation."""

    def __init__(
        self,
        id: str,
        items: Iterable[OrderLine],
        client_info: ClientInfo,
        created_at: datetime,
        delivery_date: date | None = None,
        special_instructions: str = "",
        status: OrderStatus = OrderStatus.SUBMITTED,
        total: Decimal | None = None,
        client_id: str | None = None,
        salesperson_id: str | None = None,
    ):
        self.id = id
        self._items = tuple(items)
        self.client_info = client_info
        self.created_at = created_at
        self.delivery_date = delivery_date
        self.special_instructions = special_instructions
        self._status = OrderStatus(status)
        self.client_id = client_id
        self.salesperson_id = salesperson_id

        computed = sum((item.subtotal for item in self._items), ZERO)
        if total is not None and as_decimal(total, "total") != computed:
            raise InvalidInputError(
                f"Order {id} total {total} does not match items total {computed}"
            )
        self._total = computed

    @property
    def items(self) -> tuple[OrderLine, ...]:
        return self._items

    @property
    def total(self) -> Decimal:
        """Total frozen at submission."""
        return self._total

    @property
    def status(self) -> OrderStatus:
        return self._status

    def can_transition_to(self, status: OrderStatus) -> bool:
        return OrderStatus(status) in ALLOWED_TRANSITIONS[self._status]

    def transition_to(self, status: OrderStatus) -> None:
        status = OrderStatus(status)
        if not self.can_transition_to(status):
            raise InvalidTransitionError(
                f"Cannot move order {self.id} from {self._status.value} to {status.value}"
            )
        self._status = status

    def __repr__(self):
        return f"Order({self.id!r}, status={self._status.value}, total={self._total})"
