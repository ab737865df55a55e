"""
Versioned serialization of session state to JSON-compatible dicts.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from wholesale.domain.brochures import Brochure, BrochureRegistry
from wholesale.domain.cart import Cart, CartLine
from wholesale.domain.catalog import Catalog, Product, ProductRegistry
from wholesale.domain.errors import SnapshotVersionError
from wholesale.domain.order import Client, ClientInfo, Order, OrderLine, OrderStatus
from wholesale.domain.session import OrderSession
from wholesale.domain.users import Role, User, UserDirectory


class SnapshotVersion(str, Enum):
    """Snapshot format version."""
    V1 = "1"


CURRENT_VERSION = SnapshotVersion.V1


def dump_session(session: OrderSession) -> dict:
    """Serialize everything in the session except catalog and clients."""
    return {
        "version": CURRENT_VERSION.value,
        "cart": [
            {
                "product_id": line.product_id,
                "quantity": str(line.quantity),
                "unit_price": str(line.unit_price),
                "notes": line.notes,
            }
            for line in session.cart.lines
        ],
        "selected_client_id": session.selected_client_id,
        "delivery_date": _dump_date(session.delivery_date),
        "special_instructions": session.special_instructions,
        "orders": [_dump_order(order) for order in session.orders],
        "products": [_dump_product(product) for product in session.products.products],
        "users": [
            {"id": user.id, "name": user.name, "email": user.email, "role": user.role.value}
            for user in session.users.users
        ],
        "brochures": [_dump_brochure(brochure) for brochure in session.brochures.brochures],
    }


def load_session(
    payload: dict,
    catalog: Catalog,
    clients: list[Client],
    default_users: list[User] = (),
    default_brochures: list[Brochure] = (),
) -> OrderSession:
    """Rehydrate a session; unknown versions are rejected rather than guessed."""
    version = payload.get("version")
    try:
        SnapshotVersion(version)
    except ValueError:
        raise SnapshotVersionError(f"Unsupported snapshot version: {version!r}")

    cart = Cart(catalog, [
        CartLine(
            product_id=line["product_id"],
            quantity=Decimal(line["quantity"]),
            unit_price=Decimal(line["unit_price"]),
            notes=line.get("notes", ""),
        )
        for line in payload.get("cart", [])
    ])

    products = payload.get("products")
    users = payload.get("users")
    brochures = payload.get("brochures")
    return OrderSession(
        catalog=catalog,
        clients=clients,
        cart=cart,
        orders=[_load_order(data) for data in payload.get("orders", [])],
        selected_client_id=payload.get("selected_client_id"),
        delivery_date=_load_date(payload.get("delivery_date")),
        special_instructions=payload.get("special_instructions", ""),
        products=ProductRegistry(product_from_dict(p) for p in products) if products is not None else None,
        users=UserDirectory(
            User(id=u["id"], name=u["name"], email=u["email"], role=Role(u["role"]))
            for u in users
        ) if users is not None else UserDirectory(default_users),
        brochures=BrochureRegistry(
            _load_brochure(b) for b in brochures
        ) if brochures is not None else BrochureRegistry(default_brochures),
    )


def _dump_order(order: Order) -> dict:
    info = order.client_info
    return {
        "id": order.id,
        "items": [
            {
                "product_id": item.product_id,
                "quantity": str(item.quantity),
                "unit_price": str(item.unit_price),
                "notes": item.notes,
            }
            for item in order.items
        ],
        "status": order.status.value,
        "delivery_date": _dump_date(order.delivery_date),
        "special_instructions": order.special_instructions,
        "created_at": order.created_at.isoformat(),
        "total": str(order.total),
        "client_info": {
            "name": info.name,
            "address": info.address,
            "contact_person": info.contact_person,
            "phone": info.phone,
            "email": info.email,
        },
        "client_id": order.client_id,
        "salesperson_id": order.salesperson_id,
    }


def _load_order(data: dict) -> Order:
    return Order(
        id=data["id"],
        items=[
            OrderLine(
                product_id=item["product_id"],
                quantity=Decimal(item["quantity"]),
                unit_price=Decimal(item["unit_price"]),
                notes=item.get("notes", ""),
            )
            for item in data["items"]
        ],
        client_info=ClientInfo(**data["client_info"]),
        created_at=datetime.fromisoformat(data["created_at"]),
        delivery_date=_load_date(data.get("delivery_date")),
        special_instructions=data.get("special_instructions", ""),
        status=OrderStatus(data["status"]),
        total=Decimal(data["total"]),
        client_id=data.get("client_id"),
        salesperson_id=data.get("salesperson_id"),
    )


def _dump_product(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "category": product.category,
        "unit": product.unit,
        "price": str(product.price),
        "available": product.available,
        "image": product.image,
    }


def product_from_dict(data: dict) -> Product:
    return Product(
        id=data["id"],
        name=data["name"],
        category=data["category"],
        unit=data.get("unit", ""),
        price=Decimal(str(data["price"])),
        available=data.get("available", True),
        image=data.get("image", ""),
    )


def _dump_brochure(brochure: Brochure) -> dict:
    return {
        "id": brochure.id,
        "name": brochure.name,
        "size": brochure.size,
        "content_type": brochure.content_type,
        "upload_date": brochure.upload_date.isoformat(),
        "url": brochure.url,
        "download_count": brochure.download_count,
    }


def _load_brochure(data: dict) -> Brochure:
    return Brochure(
        id=data["id"],
        name=data["name"],
        size=int(data["size"]),
        content_type=data["content_type"],
        upload_date=datetime.fromisoformat(data["upload_date"]),
        url=data.get("url", "#"),
        download_count=int(data.get("download_count", 0)),
    )


def _dump_date(value: date | None) -> str | None:
    return value.isoformat() if value else None


def _load_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def client_from_dict(data: dict) -> Client:
    return Client(
        id=data["id"],
        name=data["name"],
        address=data.get("address", ""),
        contact_person=data.get("contact_person", ""),
        phone=data.get("phone", ""),
        email=data.get("email", ""),
    )
