"""
Session state aggregate: the cart, the draft's client and delivery details,
the order history, the admin-managed lists and the download center for one
user session.
"""
from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from wholesale.domain.brochures import BrochureRegistry
from wholesale.domain.cart import Cart
from wholesale.domain.catalog import Catalog, ProductRegistry
from wholesale.domain.errors import InvalidInputError, UnknownReferenceError
from wholesale.domain.ids import time_derived_id
from wholesale.domain.order import Client, ClientInfo, Order, OrderLine, OrderStatus
from wholesale.domain.users import UserDirectory


class OrderSession:
    """
    Explicit state object passed to the application services.

    Catalog and client directory are supplied from configuration; everything
    else is session state and is what gets snapshotted.
    """

    def __init__(
        self,
        catalog: Catalog,
        clients: Iterable[Client] = (),
        cart: Cart | None = None,
        orders: Iterable[Order] | None = None,
        selected_client_id: str | None = None,
        delivery_date: date | None = None,
        special_instructions: str = "",
        products: ProductRegistry | None = None,
        users: UserDirectory | None = None,
        brochures: BrochureRegistry | None = None,
    ):
        self.catalog = catalog
        self._clients = {client.id: client for client in clients}
        self.cart = cart or Cart(catalog)
        self._orders: list[Order] = list(orders or [])
        self.selected_client_id = selected_client_id
        self.delivery_date = delivery_date
        self.special_instructions = special_instructions
        self.products = products if products is not None else ProductRegistry(catalog)
        self.users = users if users is not None else UserDirectory()
        self.brochures = brochures if brochures is not None else BrochureRegistry()

    # Clients and draft metadata

    @property
    def clients(self) -> list[Client]:
        return list(self._clients.values())

    @property
    def selected_client(self) -> Client | None:
        if self.selected_client_id is None:
            return None
        return self._clients.get(self.selected_client_id)

    def select_client(self, client_id: str, today: date) -> Client:
        """Start a fresh draft for a client; delivery defaults to tomorrow."""
        client = self._clients.get(client_id)
        if client is None:
            raise UnknownReferenceError(f"Client {client_id} not found")
        self.cart.clear()
        self.selected_client_id = client.id
        self.delivery_date = today + timedelta(days=1)
        self.special_instructions = ""
        return client

    def update_special_instructions(self, text: str) -> None:
        self.special_instructions = text or ""

    def update_delivery_date(self, delivery_date: date, today: date) -> None:
        if delivery_date < today:
            raise InvalidInputError("Delivery date cannot be in the past")
        self.delivery_date = delivery_date

    def reset(self) -> None:
        """Discard the draft: cart, selection and draft metadata."""
        self.cart.clear()
        self.selected_client_id = None
        self.delivery_date = None
        self.special_instructions = ""

    # Orders

    @property
    def orders(self) -> list[Order]:
        """Order history in submission order."""
        return list(self._orders)

    def order_history(self) -> list[Order]:
        return sorted(self._orders, key=lambda order: order.created_at, reverse=True)

    def get_order(self, order_id: str) -> Order | None:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    def search_orders(self, query: str = "", status: OrderStatus | None = None) -> list[Order]:
        """Match client name or order id; optionally filter by status."""
        term = (query or "").lower()
        return [
            order for order in self.order_history()
            if (not term or term in order.client_info.name.lower() or term in order.id.lower())
            and (status is None or order.status == OrderStatus(status))
        ]

    def submit(
        self,
        now: datetime,
        client_info: ClientInfo | None = None,
        salesperson_id: str | None = None,
    ) -> Order:
        """
        Turn the cart into a submitted order.

        All checks run before anything is mutated, so a rejected submission
        leaves the cart and history untouched.
        """
        if self.cart.is_empty:
            raise InvalidInputError("Cannot submit an empty order")

        selected = self.selected_client
        if client_info is None:
            if selected is None:
                raise InvalidInputError("Client info is required")
            client_info = selected.to_client_info()
        client_info.validate()

        order = Order(
            id=time_derived_id("order-", now, {o.id for o in self._orders}),
            items=[
                OrderLine(line.product_id, line.quantity, line.unit_price, line.notes)
                for line in self.cart.lines
            ],
            client_info=client_info,
            created_at=now,
            delivery_date=self.delivery_date,
            special_instructions=self.special_instructions,
            status=OrderStatus.SUBMITTED,
            client_id=selected.id if selected else None,
            salesperson_id=salesperson_id,
        )
        self._orders.append(order)
        self.reset()
        return order

    def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        order = self.get_order(order_id)
        if order is None:
            raise UnknownReferenceError(f"Order {order_id} not found")
        order.transition_to(status)
        return order
