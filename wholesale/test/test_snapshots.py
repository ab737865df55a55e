"""
Tests for session snapshot serialization and the snapshot repository.
"""
import json
from datetime import datetime, timezone
from decimal import Decimal

from django.test import TestCase

from wholesale.domain.brochures import BrochureRegistry
from wholesale.domain.catalog import Catalog
from wholesale.domain.errors import SnapshotVersionError
from wholesale.domain.order import OrderStatus
from wholesale.domain.session import OrderSession
from wholesale.domain.users import Role, UserDirectory
from wholesale.infra.models import SessionSnapshotORM
from wholesale.infra.repositories import SessionRepository
from wholesale.infra.seed import DEFAULT_BROCHURES, DEFAULT_CLIENTS, DEFAULT_PRODUCTS, DEFAULT_USERS
from wholesale.infra.snapshots import CURRENT_VERSION, dump_session, load_session

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class SnapshotTest(TestCase):
    """Tests for dump_session / load_session."""

    def setUp(self):
        self.catalog = Catalog(DEFAULT_PRODUCTS)
        self.session = OrderSession(
            self.catalog,
            DEFAULT_CLIENTS,
            users=UserDirectory(DEFAULT_USERS),
            brochures=BrochureRegistry(DEFAULT_BROCHURES),
        )

    def _reload(self, payload):
        return load_session(json.loads(json.dumps(payload)), self.catalog, list(DEFAULT_CLIENTS))

    def test_payload_is_versioned_json(self):
        payload = dump_session(self.session)
        self.assertEqual(payload["version"], CURRENT_VERSION.value)
        json.dumps(payload)

    def test_restores_draft_and_history(self):
        """Test cart, draft metadata, orders and admin lists survive a reload."""
        self.session.select_client("c1", today=NOW.date())
        self.session.cart.add_item("p1", "2.5", notes="whole")
        order = self.session.submit(now=NOW, salesperson_id="1")
        self.session.update_order_status(order.id, OrderStatus.PROCESSING)
        self.session.select_client("c2", today=NOW.date())
        self.session.cart.add_item("p3", 1)
        self.session.update_special_instructions("call on arrival")
        self.session.products.update("p2", available=False)
        self.session.users.add("Jane", "jane@seafood.com", Role.ADMIN, now=NOW)

        restored = self._reload(dump_session(self.session))

        self.assertEqual(restored.cart.lines, self.session.cart.lines)
        self.assertEqual(restored.cart.total, Decimal("45.99"))
        self.assertEqual(restored.selected_client_id, "c2")
        self.assertEqual(restored.delivery_date, self.session.delivery_date)
        self.assertEqual(restored.special_instructions, "call on arrival")

        restored_order = restored.get_order(order.id)
        self.assertEqual(restored_order.status, OrderStatus.PROCESSING)
        self.assertEqual(restored_order.total, Decimal("54.975"))
        self.assertEqual(restored_order.created_at, NOW)
        self.assertEqual(restored_order.client_info, order.client_info)
        self.assertEqual(restored_order.items[0].notes, "whole")
        self.assertEqual(restored_order.salesperson_id, "1")

        self.assertFalse(restored.products.get("p2").available)
        self.assertEqual(len(restored.users.users), 3)

    def test_restores_brochures(self):
        self.session.brochures.record_download("brochure-1")
        self.session.brochures.delete("brochure-3")
        added = self.session.brochures.add("Winter.pdf", 4096, "application/pdf", now=NOW)

        restored = self._reload(dump_session(self.session))

        self.assertEqual(restored.brochures.brochures, self.session.brochures.brochures)
        self.assertEqual(restored.brochures.get(added.id).upload_date, NOW)
        self.assertEqual(restored.brochures.get("brochure-1").download_count, 36)
        self.assertIsNone(restored.brochures.get("brochure-3"))

    def test_unknown_version_rejected(self):
        payload = dump_session(self.session)
        payload["version"] = "99"
        with self.assertRaises(SnapshotVersionError):
            self._reload(payload)

    def test_missing_version_rejected(self):
        payload = dump_session(self.session)
        del payload["version"]
        with self.assertRaises(SnapshotVersionError):
            self._reload(payload)

    def test_missing_admin_lists_fall_back(self):
        payload = dump_session(self.session)
        del payload["products"]
        del payload["users"]
        del payload["brochures"]
        restored = load_session(
            payload, self.catalog, list(DEFAULT_CLIENTS), list(DEFAULT_USERS), list(DEFAULT_BROCHURES)
        )
        self.assertEqual(len(restored.products.products), 6)
        self.assertEqual(len(restored.users.users), 2)
        self.assertEqual(len(restored.brochures.brochures), 3)


class SessionRepositoryTest(TestCase):
    """Tests for SessionRepository."""

    def setUp(self):
        self.repo = SessionRepository()

    def test_unknown_key_gives_fresh_session(self):
        session = self.repo.get("nobody")
        self.assertTrue(session.cart.is_empty)
        self.assertEqual(len(session.clients), 3)
        self.assertEqual(len(session.users.users), 2)
        self.assertEqual(len(session.brochures.brochures), 3)
        self.assertFalse(SessionSnapshotORM.objects.filter(key="nobody").exists())

    def test_save_and_load(self):
        session = self.repo.get("s1")
        session.cart.add_item("p4", 3)
        self.repo.save("s1", session)
        self.repo.save("s1", session)

        self.assertEqual(SessionSnapshotORM.objects.filter(key="s1").count(), 1)
        self.assertEqual(self.repo.get("s1").cart.total, Decimal("97.50"))

    def test_sessions_are_isolated(self):
        session = self.repo.get("s1")
        session.cart.add_item("p4", 3)
        self.repo.save("s1", session)
        self.assertTrue(self.repo.get("s2").cart.is_empty)

    def test_key_is_unique_without_extra_index(self):
        key_field = SessionSnapshotORM._meta.get_field("key")
        self.assertTrue(key_field.unique)
        self.assertEqual(SessionSnapshotORM._meta.indexes, [])

    def test_delete(self):
        self.repo.save("s1", self.repo.get("s1"))
        self.assertTrue(self.repo.delete("s1"))
        self.assertFalse(self.repo.delete("s1"))

    def test_stored_unknown_version_rejected(self):
        SessionSnapshotORM.objects.create(key="old", version="0", payload={"version": "0"})
        with self.assertRaises(SnapshotVersionError):
            self.repo.get("old")
