"""
Infrastructure repositories for catalog supply and session snapshots.
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from django.conf import settings
from django.db import transaction

from wholesale.domain.brochures import BrochureRegistry
from wholesale.domain.catalog import Catalog
from wholesale.domain.order import Client
from wholesale.domain.session import OrderSession
from wholesale.domain.users import UserDirectory
from wholesale.infra.models import SessionSnapshotORM
from wholesale.infra.seed import DEFAULT_BROCHURES, DEFAULT_CLIENTS, DEFAULT_PRODUCTS, DEFAULT_USERS
from wholesale.infra.snapshots import (
    CURRENT_VERSION,
    client_from_dict,
    dump_session,
    load_session,
    product_from_dict,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=8)
def _read_catalog_file(path: str) -> tuple[Catalog, tuple[Client, ...]]:
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    catalog = Catalog(product_from_dict(p) for p in data.get("products", []))
    clients = tuple(client_from_dict(c) for c in data.get("clients", []))
    logger.info(
        "catalog_file_loaded",
        extra={"operation": "load_catalog", "path": path},
    )
    return catalog, clients


class CatalogRepository:
    """Supplies the read-only catalog and client directory."""

    def __init__(self, catalog_file: str | Path | None = None):
        if catalog_file is None:
            catalog_file = getattr(settings, "WHOLESALE_CATALOG_FILE", None)
        self.catalog_file = str(catalog_file) if catalog_file else None

    def get_catalog(self) -> Catalog:
        if self.catalog_file:
            return _read_catalog_file(self.catalog_file)[0]
        return Catalog(DEFAULT_PRODUCTS)

    def get_clients(self) -> list[Client]:
        if self.catalog_file:
            return list(_read_catalog_file(self.catalog_file)[1])
        return list(DEFAULT_CLIENTS)


class SessionRepository:
    """Repository for session snapshots (one row per session key, last write wins)."""

    def __init__(self, catalog_repo: CatalogRepository | None = None):
        self.catalog_repo = catalog_repo or CatalogRepository()

    def new_session(self) -> OrderSession:
        return OrderSession(
            catalog=self.catalog_repo.get_catalog(),
            clients=self.catalog_repo.get_clients(),
            users=UserDirectory(DEFAULT_USERS),
            brochures=BrochureRegistry(DEFAULT_BROCHURES),
        )

    def get(self, key: str) -> OrderSession:
        """Load the session for key, or a fresh one when nothing is stored."""
        row = SessionSnapshotORM.objects.filter(key=key).first()
        if row is None:
            return self.new_session()
        return load_session(
            row.payload,
            catalog=self.catalog_repo.get_catalog(),
            clients=self.catalog_repo.get_clients(),
            default_users=list(DEFAULT_USERS),
            default_brochures=list(DEFAULT_BROCHURES),
        )

    @transaction.atomic
    def save(self, key: str, session: OrderSession) -> None:
        SessionSnapshotORM.objects.update_or_create(
            key=key,
            defaults={
                "version": CURRENT_VERSION.value,
                "payload": dump_session(session),
            },
        )

    def delete(self, key: str) -> bool:
        deleted, _ = SessionSnapshotORM.objects.filter(key=key).delete()
        return deleted > 0
