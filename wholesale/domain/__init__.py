from wholesale.domain.brochures import Brochure, BrochureRegistry
from wholesale.domain.cart import Cart, CartLine
from wholesale.domain.catalog import Catalog, Product, ProductRegistry
from wholesale.domain.order import Client, ClientInfo, Order, OrderLine, OrderStatus
from wholesale.domain.session import OrderSession
from wholesale.domain.users import Role, User, UserDirectory

__all__ = [
    "Brochure",
    "BrochureRegistry",
    "Cart",
    "CartLine",
    "Catalog",
    "Client",
    "ClientInfo",
    "Order",
    "OrderLine",
    "OrderSession",
    "OrderStatus",
    "Product",
    "ProductRegistry",
    "Role",
    "User",
    "UserDirectory",
]
