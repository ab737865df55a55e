"""
Application services for ordering, reporting, documents and administration.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from wholesale.domain.brochures import Brochure
from wholesale.domain.cart import CartLine
from wholesale.domain.catalog import Product
from wholesale.domain.order import Client, ClientInfo, Order, OrderStatus
from wholesale.domain.report import (
    COMMISSION_RATE,
    DashboardStats,
    MonthlyReport,
    ReportWindow,
    UserStats,
    build_dashboard,
    build_monthly_report,
    build_user_stats,
)
from wholesale.domain.session import OrderSession
from wholesale.domain.users import Role, User
from wholesale.infra.pii_masker import mask_client_info
from wholesale.infra.repositories import SessionRepository

logger = logging.getLogger(__name__)


class OrderService:
    """Service for cart and order operations on one session."""

    def __init__(
        self,
        session_repo: SessionRepository | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ):
        self.session_repo = session_repo or SessionRepository()
        self.clock = clock

    @contextmanager
    def _session(self, key: str) -> Iterator[OrderSession]:
        """
        Load the session, hand it out for one operation, then save it.

        Nothing is saved when the operation raises.

        Usage:
            with self._session(key) as session:
                session.cart.clear()
        """
        with transaction.atomic():
            session = self.session_repo.get(key)
            yield session
            self.session_repo.save(key, session)

    def _today(self) -> date:
        return timezone.localdate(self.clock())

    def get_session(self, key: str) -> OrderSession:
        return self.session_repo.get(key)

    def list_products(self, key: str, category: str = "all", search: str = "") -> list[Product]:
        return self.get_session(key).catalog.browse(category=category, search=search)

    def list_clients(self, key: str) -> list[Client]:
        return self.get_session(key).clients

    def select_client(self, key: str, client_id: str) -> Client:
        """Start a new draft for client_id."""
        with self._session(key) as session:
            client = session.select_client(client_id, today=self._today())
        logger.info(
            "client_selected",
            extra={"session_key": key, "operation": "select_client", "client_id": client.id},
        )
        return client

    def add_item(self, key: str, product_id: str, quantity, notes: str = "") -> CartLine:
        with self._session(key) as session:
            line = session.cart.add_item(product_id, quantity, notes)
        logger.info(
            "cart_item_added",
            extra={"session_key": key, "operation": "add_item", "product_id": product_id},
        )
        return line

    def remove_item(self, key: str, product_id: str) -> bool:
        with self._session(key) as session:
            removed = session.cart.remove_item(product_id)
        return removed

    def update_quantity(self, key: str, product_id: str, quantity) -> CartLine | None:
        with self._session(key) as session:
            line = session.cart.update_quantity(product_id, quantity)
        return line

    def clear_cart(self, key: str) -> None:
        with self._session(key) as session:
            session.cart.clear()

    def update_special_instructions(self, key: str, text: str) -> None:
        with self._session(key) as session:
            session.update_special_instructions(text)

    def update_delivery_date(self, key: str, delivery_date: date) -> None:
        with self._session(key) as session:
            session.update_delivery_date(delivery_date, today=self._today())

    def submit_order(
        self,
        key: str,
        client_info: ClientInfo | None = None,
        salesperson_id: str | None = None,
    ) -> Order:
        """Submit the cart as an order and clear the draft."""
        with self._session(key) as session:
            order = session.submit(
                now=self.clock(),
                client_info=client_info,
                salesperson_id=salesperson_id,
            )
        logger.info(
            "order_submitted",
            extra={
                "session_key": key,
                "operation": "submit_order",
                "order_id": order.id,
                "user_id": salesperson_id,
                "client": mask_client_info(order.client_info),
                "total": str(order.total),
            },
        )
        return order

    def reset_order(self, key: str) -> None:
        with self._session(key) as session:
            session.reset()

    def get_order(self, key: str, order_id: str) -> Order | None:
        return self.get_session(key).get_order(order_id)

    def list_orders(self, key: str, search: str = "", status: OrderStatus | None = None) -> list[Order]:
        """Order history, newest first."""
        return self.get_session(key).search_orders(search, status)

    def update_order_status(self, key: str, order_id: str, status: OrderStatus) -> Order:
        with self._session(key) as session:
            order = session.update_order_status(order_id, status)
        logger.info(
            "order_status_changed",
            extra={
                "session_key": key,
                "operation": "update_order_status",
                "order_id": order_id,
                "status": order.status.value,
            },
        )
        return order

    def list_brochures(self, key: str) -> list[Brochure]:
        return self.get_session(key).brochures.brochures

    def download_brochure(self, key: str, brochure_id: str) -> Brochure:
        """Count a download and return the brochure with its url."""
        with self._session(key) as session:
            brochure = session.brochures.record_download(brochure_id)
        logger.info(
            "brochure_downloaded",
            extra={"session_key": key, "operation": "download_brochure", "brochure_id": brochure_id},
        )
        return brochure


class ReportService:
    """Service for read-only statistics over a session's orders."""

    def __init__(
        self,
        session_repo: SessionRepository | None = None,
        clock: Callable[[], datetime] = timezone.now,
        commission_rate: Decimal | None = None,
    ):
        self.session_repo = session_repo or SessionRepository()
        self.clock = clock
        if commission_rate is None:
            commission_rate = getattr(settings, "WHOLESALE_COMMISSION_RATE", COMMISSION_RATE)
        self.commission_rate = Decimal(str(commission_rate))

    def monthly_report(self, key: str, year: int | None = None, month: int | None = None) -> MonthlyReport:
        """Report for year/month, defaulting to the month containing now."""
        if year is None or month is None:
            window = ReportWindow.containing(timezone.localdate(self.clock()))
        else:
            window = ReportWindow.for_month(year, month)
        session = self.session_repo.get(key)
        return build_monthly_report(session.orders, session.catalog, window, self.commission_rate)

    def dashboard(self, key: str) -> DashboardStats:
        session = self.session_repo.get(key)
        return build_dashboard(session.orders, session.catalog)

    def user_stats(self, key: str, user_id: str) -> UserStats:
        session = self.session_repo.get(key)
        return build_user_stats(session.orders, user_id)


class AdminService(OrderService):
    """Service for the administrative product list, user directory and brochures."""

    def create_product(self, key: str, **fields) -> Product:
        with self._session(key) as session:
            product = session.products.add(now=self.clock(), **fields)
        logger.info(
            "product_created",
            extra={"session_key": key, "operation": "create_product", "product_id": product.id},
        )
        return product

    def update_product(self, key: str, product_id: str, **changes) -> Product:
        with self._session(key) as session:
            product = session.products.update(product_id, **changes)
        return product

    def delete_product(self, key: str, product_id: str) -> Product:
        with self._session(key) as session:
            product = session.products.delete(product_id)
        logger.info(
            "product_deleted",
            extra={"session_key": key, "operation": "delete_product", "product_id": product_id},
        )
        return product

    def toggle_product_availability(self, key: str, product_id: str) -> Product:
        with self._session(key) as session:
            product = session.products.toggle_availability(product_id)
        return product

    def list_admin_products(self, key: str, search: str = "", category: str = "all") -> list[Product]:
        return self.get_session(key).products.search(search, category)

    def list_users(self, key: str, search: str = "") -> list[User]:
        return self.get_session(key).users.search(search)

    def create_user(self, key: str, name: str, email: str, role: Role = Role.SALESPERSON) -> User:
        with self._session(key) as session:
            user = session.users.add(name, email, role, now=self.clock())
        logger.info(
            "user_created",
            extra={"session_key": key, "operation": "create_user", "user_id": user.id},
        )
        return user

    def update_user(self, key: str, user_id: str, **changes) -> tuple[User, bool]:
        with self._session(key) as session:
            user, changed = session.users.update(user_id, **changes)
        if not changed:
            logger.info("user_unchanged", extra={"session_key": key, "user_id": user_id})
        return user, changed

    def remove_user(self, key: str, user_id: str) -> User:
        with self._session(key) as session:
            user = session.users.remove(user_id)
        logger.info(
            "user_removed",
            extra={"session_key": key, "operation": "remove_user", "user_id": user_id},
        )
        return user

    def register_brochure(
        self, key: str, name: str, size: int, content_type: str, url: str = "#"
    ) -> Brochure:
        with self._session(key) as session:
            brochure = session.brochures.add(name, size, content_type, now=self.clock(), url=url)
        logger.info(
            "brochure_registered",
            extra={"session_key": key, "operation": "register_brochure", "brochure_id": brochure.id},
        )
        return brochure

    def delete_brochure(self, key: str, brochure_id: str) -> Brochure:
        with self._session(key) as session:
            brochure = session.brochures.delete(brochure_id)
        logger.info(
            "brochure_deleted",
            extra={"session_key": key, "operation": "delete_brochure", "brochure_id": brochure_id},
        )
        return brochure
