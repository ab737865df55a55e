#!/usr/bin/env python3
"""
Smoke check of a running seafood ordering service over HTTP.

Walks one session through the main flow:
- pick a client and fill the cart
- submit the order and move it through processing
- read the monthly report and download it as CSV

Run the server first (``python manage.py runserver``) and point
API_BASE_URL at it if it is not on localhost:8000.
"""
import argparse
import os
import sys
from uuid import uuid4

import requests

API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8000")


class GraphQLClient:
    """Client for the GraphQL API bound to one session."""

    def __init__(self, base_url: str, session_id: str, user_id: str | None = None):
        self.base_url = base_url
        self.session = requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "X-Session-ID": session_id,
        })
        if user_id:
            self.session.headers["X-User-ID"] = user_id

    def execute(self, query: str, variables: dict = None) -> dict:
        payload = {"query": query}
        if variables:
            payload["variables"] = variables
        response = self.session.post(
            f"{self.base_url}/graphql/",
            json=payload,
            headers={"X-Request-ID": str(uuid4())},
            timeout=10,
        )
        response.raise_for_status()
        data = response.json()
        if "errors" in data:
            raise RuntimeError(f"GraphQL errors: {data['errors']}")
        return data["data"]


def print_section(title: str):
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)


def print_result(success: bool, message: str):
    status = "OK  " if success else "FAIL"
    print(f"[{status}] {message}")


def check_cart_flow(client: GraphQLClient) -> str:
    print_section("Cart")
    cart = client.execute(
        'mutation { selectClient(clientId: "c1") { client { name } deliveryDate } }'
    )["selectClient"]
    print_result(True, f"Client selected: {cart['client']['name']}, delivery {cart['deliveryDate']}")

    add = """
        mutation AddItem($productId: ID!, $quantity: Decimal!) {
            addItem(productId: $productId, quantity: $quantity) { total itemCount }
        }
    """
    client.execute(add, {"productId": "p1", "quantity": "5"})
    cart = client.execute(add, {"productId": "p3", "quantity": "2"})["addItem"]
    print_result(cart["itemCount"] == 2, f"Cart total: {cart['total']}")

    order = client.execute(
        "mutation { submitOrder { id status total } }"
    )["submitOrder"]
    print_result(order["status"] == "SUBMITTED", f"Order {order['id']} submitted for {order['total']}")
    return order["id"]


def check_status_flow(client: GraphQLClient, order_id: str):
    print_section("Order status")
    mutation = """
        mutation Move($orderId: ID!, $status: OrderStatus!) {
            updateOrderStatus(orderId: $orderId, status: $status) { status allowedTransitions }
        }
    """
    for status in ("PROCESSING", "COMPLETED"):
        order = client.execute(mutation, {"orderId": order_id, "status": status})["updateOrderStatus"]
        print_result(order["status"] == status, f"Order moved to {order['status']}")


def check_report(client: GraphQLClient, base_url: str, session_id: str):
    print_section("Monthly report")
    report = client.execute(
        "query { monthlyReport { totalSales totalOrders avgOrderValue commission } }"
    )["monthlyReport"]
    print_result(True, f"Sales {report['totalSales']} over {report['totalOrders']} orders")
    print_result(True, f"Commission {report['commission']}")

    response = requests.get(
        f"{base_url}/reports/monthly.csv",
        headers={"X-Session-ID": session_id},
        timeout=10,
    )
    print_result(
        response.status_code == 200 and response.text.startswith("Monthly Sales Report"),
        f"CSV export: {response.headers.get('Content-Disposition')}",
    )


def main(api_url: str, session_id: str):
    print(f"API endpoint: {api_url}/graphql/")
    print(f"Session: {session_id}")
    client = GraphQLClient(api_url, session_id, user_id="1")
    try:
        order_id = check_cart_flow(client)
        check_status_flow(client, order_id)
        check_report(client, api_url, session_id)
    except (requests.RequestException, RuntimeError) as e:
        print_section("ERROR")
        print_result(False, str(e))
        sys.exit(1)
    print_section("DONE")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Smoke check of the ordering API")
    parser.add_argument("--api-url", default=API_BASE_URL)
    parser.add_argument("--session", default=f"smoke-{uuid4().hex[:8]}")
    args = parser.parse_args()
    main(args.api_url.rstrip("/"), args.session)
