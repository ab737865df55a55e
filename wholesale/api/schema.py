"""
GraphQL schema definition using Ariadne.
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from ariadne import (
    EnumType,
    MutationType,
    ObjectType,
    QueryType,
    ScalarType,
    load_schema_from_path,
    make_executable_schema,
)

from wholesale.domain.order import ClientInfo, OrderStatus
from wholesale.domain.users import Role
from wholesale.infra.repositories import CatalogRepository
from wholesale.services import AdminService, OrderService, ReportService

# Load schema from .graphql files
SCHEMAS_DIR = Path(__file__).parent / "schemas"
type_defs = "\n".join([
    load_schema_from_path(SCHEMAS_DIR / "common.graphql"),
    load_schema_from_path(SCHEMAS_DIR / "query.graphql"),
    load_schema_from_path(SCHEMAS_DIR / "mutation.graphql"),
])

query = QueryType()
mutation = MutationType()
cart = ObjectType("Cart")
cart_line = ObjectType("CartLine")
order_line = ObjectType("OrderLine")
order = ObjectType("Order")
monthly_report = ObjectType("MonthlyReport")
daily_sales = ObjectType("DailySales")
dashboard = ObjectType("Dashboard")
user_stats = ObjectType("UserStats")
order_status_enum = EnumType("OrderStatus", OrderStatus)
role_enum = EnumType("Role", Role)


def _session_key(info) -> str:
    return info.context["session_key"]


def _user_id(info) -> str | None:
    return info.context.get("user_id")


def _present(values: dict) -> dict:
    """Drop keys the client left null."""
    return {key: value for key, value in values.items() if value is not None}


def _status_counts(counts: dict) -> list[dict]:
    return [{"status": status, "count": count} for status, count in counts.items()]


# Queries

@query.field("products")
def resolve_products(_, info, category="all", search=""):
    return OrderService().list_products(_session_key(info), category or "all", search or "")


@query.field("categories")
def resolve_categories(_, info):
    return OrderService().get_session(_session_key(info)).catalog.categories()


@query.field("clients")
def resolve_clients(_, info):
    return OrderService().list_clients(_session_key(info))


@query.field("cart")
def resolve_cart(_, info):
    return OrderService().get_session(_session_key(info))


@query.field("orders")
def resolve_orders(_, info, search="", status=None):
    return OrderService().list_orders(_session_key(info), search or "", status)


@query.field("order")
def resolve_order(_, info, id):
    return OrderService().get_order(_session_key(info), id)


@query.field("monthlyReport")
def resolve_monthly_report(_, info, year=None, month=None):
    return ReportService().monthly_report(_session_key(info), year, month)


@query.field("dashboard")
def resolve_dashboard(_, info):
    return ReportService().dashboard(_session_key(info))


@query.field("adminProducts")
def resolve_admin_products(_, info, search="", category="all"):
    return AdminService().list_admin_products(_session_key(info), search or "", category or "all")


@query.field("users")
def resolve_users(_, info, search=""):
    return AdminService().list_users(_session_key(info), search or "")


@query.field("userStats")
def resolve_user_stats(_, info, user_id):
    return ReportService().user_stats(_session_key(info), user_id)


@query.field("brochures")
def resolve_brochures(_, info):
    return OrderService().list_brochures(_session_key(info))


# Cart mutations return the whole session, rendered through the Cart type

@mutation.field("selectClient")
def resolve_select_client(_, info, client_id):
    service = OrderService()
    service.select_client(_session_key(info), client_id)
    return service.get_session(_session_key(info))


@mutation.field("addItem")
def resolve_add_item(_, info, product_id, quantity, notes=""):
    service = OrderService()
    service.add_item(_session_key(info), product_id, quantity, notes or "")
    return service.get_session(_session_key(info))


@mutation.field("removeItem")
def resolve_remove_item(_, info, product_id):
    service = OrderService()
    service.remove_item(_session_key(info), product_id)
    return service.get_session(_session_key(info))


@mutation.field("updateQuantity")
def resolve_update_quantity(_, info, product_id, quantity):
    service = OrderService()
    service.update_quantity(_session_key(info), product_id, quantity)
    return service.get_session(_session_key(info))


@mutation.field("clearCart")
def resolve_clear_cart(_, info):
    service = OrderService()
    service.clear_cart(_session_key(info))
    return service.get_session(_session_key(info))


@mutation.field("updateSpecialInstructions")
def resolve_update_special_instructions(_, info, text):
    service = OrderService()
    service.update_special_instructions(_session_key(info), text)
    return service.get_session(_session_key(info))


@mutation.field("updateDeliveryDate")
def resolve_update_delivery_date(_, info, date):
    service = OrderService()
    service.update_delivery_date(_session_key(info), date)
    return service.get_session(_session_key(info))


@mutation.field("resetOrder")
def resolve_reset_order(_, info):
    service = OrderService()
    service.reset_order(_session_key(info))
    return service.get_session(_session_key(info))


@mutation.field("submitOrder")
def resolve_submit_order(_, info, client_info=None):
    """Resolve submit order mutation."""
    info_obj = ClientInfo(**_present(client_info)) if client_info else None
    return OrderService().submit_order(
        _session_key(info),
        client_info=info_obj,
        salesperson_id=_user_id(info),
    )


@mutation.field("updateOrderStatus")
def resolve_update_order_status(_, info, order_id, status):
    return OrderService().update_order_status(_session_key(info), order_id, status)


# Administration

@mutation.field("createProduct")
def resolve_create_product(_, info, input):
    return AdminService().create_product(_session_key(info), **_present(input))


@mutation.field("updateProduct")
def resolve_update_product(_, info, id, input):
    return AdminService().update_product(_session_key(info), id, **_present(input))


@mutation.field("deleteProduct")
def resolve_delete_product(_, info, id):
    return AdminService().delete_product(_session_key(info), id)


@mutation.field("toggleProductAvailability")
def resolve_toggle_product_availability(_, info, id):
    return AdminService().toggle_product_availability(_session_key(info), id)


@mutation.field("createUser")
def resolve_create_user(_, info, input):
    return AdminService().create_user(_session_key(info), **_present(input))


@mutation.field("updateUser")
def resolve_update_user(_, info, id, input):
    user, changed = AdminService().update_user(_session_key(info), id, **_present(input))
    return {"user": user, "changed": changed}


@mutation.field("removeUser")
def resolve_remove_user(_, info, id):
    return AdminService().remove_user(_session_key(info), id)


# Download center

@mutation.field("downloadBrochure")
def resolve_download_brochure(_, info, id):
    return OrderService().download_brochure(_session_key(info), id)


@mutation.field("registerBrochure")
def resolve_register_brochure(_, info, input):
    return AdminService().register_brochure(_session_key(info), **_present(input))


@mutation.field("deleteBrochure")
def resolve_delete_brochure(_, info, id):
    return AdminService().delete_brochure(_session_key(info), id)


# Object fields

@cart.field("client")
def resolve_cart_client(session, info):
    return session.selected_client


@cart.field("items")
def resolve_cart_items(session, info):
    return session.cart.lines


@cart.field("itemCount")
def resolve_cart_item_count(session, info):
    return len(session.cart)


@cart.field("total")
def resolve_cart_total(session, info):
    return session.cart.total


@cart.field("deliveryDate")
def resolve_cart_delivery_date(session, info):
    return session.delivery_date


@cart.field("specialInstructions")
def resolve_cart_special_instructions(session, info):
    return session.special_instructions


@cart_line.field("product")
@order_line.field("product")
def resolve_line_product(line, info):
    return CatalogRepository().get_catalog().get(line.product_id)


@order.field("allowedTransitions")
def resolve_allowed_transitions(order_obj, info):
    return [status for status in OrderStatus if order_obj.can_transition_to(status)]


@monthly_report.field("start")
def resolve_report_start(report, info):
    return report.window.start


@monthly_report.field("end")
def resolve_report_end(report, info):
    return report.window.end


@daily_sales.field("date")
def resolve_daily_sales_date(row, info):
    return row.day


@dashboard.field("statusCounts")
@user_stats.field("statusCounts")
def resolve_status_counts(stats, info):
    return _status_counts(stats.status_counts)


# Define custom scalars
decimal_scalar = ScalarType("Decimal")
date_scalar = ScalarType("Date")
datetime_scalar = ScalarType("DateTime")


@decimal_scalar.serializer
def serialize_decimal(value):
    """Serialize Decimal to string."""
    return str(value)


@decimal_scalar.value_parser
def parse_decimal_value(value):
    """Parse Decimal from string or number."""
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid decimal: {value!r}")


@decimal_scalar.literal_parser
def parse_decimal_literal(ast, variable_values=None):
    """Parse Decimal from GraphQL literal."""
    return parse_decimal_value(ast.value)


@date_scalar.serializer
def serialize_date(value):
    if isinstance(value, datetime):
        return value.date().isoformat()
    return value.isoformat()


@date_scalar.value_parser
def parse_date_value(value):
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


@date_scalar.literal_parser
def parse_date_literal(ast, variable_values=None):
    return parse_date_value(ast.value)


@datetime_scalar.serializer
def serialize_datetime(value):
    """Serialize DateTime to ISO format string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


@datetime_scalar.value_parser
def parse_datetime_value(value):
    """Parse DateTime from string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


# Create executable schema
schema = make_executable_schema(
    type_defs,
    query,
    mutation,
    cart,
    cart_line,
    order_line,
    order,
    monthly_report,
    daily_sales,
    dashboard,
    user_stats,
    order_status_enum,
    role_enum,
    decimal_scalar,
    date_scalar,
    datetime_scalar,
    convert_names_case=True,
)
