"""
Integration tests for the GraphQL API and the CSV report download.
"""
import json
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from graphql import GraphQLError

from wholesale.api.middleware import ErrorHandler
from wholesale.domain.errors import UnknownReferenceError

SESSION = {"X-Session-ID": "api-test", "X-User-ID": "1"}


class GraphQLAPITest(TestCase):
    """Integration tests for GraphQL API."""

    def execute(self, query, variables=None, headers=SESSION):
        payload = {"query": query}
        if variables:
            payload["variables"] = variables
        response = self.client.post(
            "/graphql/",
            data=payload,
            content_type="application/json",
            headers=headers,
        )
        return response, json.loads(response.content)

    def add_item(self, product_id, quantity):
        return self.execute(
            """
            mutation AddItem($productId: ID!, $quantity: Decimal!) {
                addItem(productId: $productId, quantity: $quantity) {
                    total
                    itemCount
                    items { productId quantity unitPrice subtotal product { name } }
                }
            }
            """,
            {"productId": product_id, "quantity": quantity},
        )

    def submit_for(self, client_id="c1"):
        self.execute('mutation { selectClient(clientId: "%s") { itemCount } }' % client_id)
        self.add_item("p1", "5")
        _, data = self.execute("mutation { submitOrder { id status total salespersonId } }")
        return data["data"]["submitOrder"]

    def test_get_returns_usage_hint(self):
        response = self.client.get("/graphql/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("message", json.loads(response.content))

    def test_invalid_json(self):
        response = self.client.post("/graphql/", data="{not json", content_type="application/json")
        self.assertEqual(response.status_code, 400)

    def test_products_query(self):
        """Test products query with category filter."""
        response, data = self.execute(
            '{ products(category: "shellfish") { id name price unit available } categories }'
        )
        self.assertEqual(response.status_code, 200)
        products = data["data"]["products"]
        self.assertEqual([p["id"] for p in products], ["p3", "p4", "p5"])
        self.assertEqual(products[0]["price"], "45.99")
        self.assertEqual(data["data"]["categories"], ["all", "fish", "shellfish"])

    def test_cart_mutations(self):
        """Test add, merge, update and remove through the API."""
        _, data = self.add_item("p1", "5")
        self.assertEqual(data["data"]["addItem"]["total"], "109.95")

        _, data = self.add_item("p1", "2")
        cart = data["data"]["addItem"]
        self.assertEqual(cart["total"], "153.93")
        self.assertEqual(cart["itemCount"], 1)
        self.assertEqual(cart["items"][0]["product"]["name"], "Atlantic Salmon")

        _, data = self.execute('mutation { updateQuantity(productId: "p1", quantity: 0) { total itemCount } }')
        self.assertEqual(data["data"]["updateQuantity"], {"total": "0", "itemCount": 0})

    def test_sessions_are_separate(self):
        self.add_item("p1", "1")
        _, data = self.execute("{ cart { itemCount } }", headers={"X-Session-ID": "other"})
        self.assertEqual(data["data"]["cart"]["itemCount"], 0)

    def test_unknown_product_error_code(self):
        _, data = self.add_item("ghost", "1")
        self.assertEqual(data["errors"][0]["extensions"]["code"], "NOT_FOUND")
        self.assertIn("ghost", data["errors"][0]["message"])

    def test_non_positive_quantity_error_code(self):
        _, data = self.add_item("p1", "-2")
        self.assertEqual(data["errors"][0]["extensions"]["code"], "VALIDATION_ERROR")

    def test_invalid_query_is_rejected(self):
        response, data = self.execute("{ noSuchField }")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(data["errors"][0]["extensions"]["code"], "VALIDATION_ERROR")
        self.assertIn("noSuchField", data["errors"][0]["message"])

    def test_malformed_decimal_is_validation_error(self):
        """Test an unparseable quantity is reported as bad input, not a server fault."""
        response, data = self.add_item("p1", "abc")
        self.assertEqual(response.status_code, 400)
        error = data["errors"][0]
        self.assertEqual(error["extensions"]["code"], "VALIDATION_ERROR")
        self.assertNotEqual(error["message"], "An internal error occurred")

        response, data = self.execute('mutation { addItem(productId: "p1", quantity: "abc") { total } }')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(data["errors"][0]["extensions"]["code"], "VALIDATION_ERROR")

    def test_malformed_date_is_validation_error(self):
        response, data = self.execute('mutation { updateDeliveryDate(date: "2026-13-45") { deliveryDate } }')
        self.assertEqual(response.status_code, 400)
        error = data["errors"][0]
        self.assertEqual(error["extensions"]["code"], "VALIDATION_ERROR")
        self.assertNotEqual(error["message"], "An internal error occurred")

    def test_monthly_report_year_out_of_range(self):
        _, data = self.execute("{ monthlyReport(year: 0, month: 1) { totalOrders } }")
        error = data["errors"][0]
        self.assertEqual(error["extensions"]["code"], "VALIDATION_ERROR")
        self.assertIn("Year", error["message"])

    def test_select_client_and_draft_details(self):
        tomorrow = timezone.localdate() + timedelta(days=1)
        _, data = self.execute(
            'mutation { selectClient(clientId: "c2") { client { name contactPerson } deliveryDate } }'
        )
        cart = data["data"]["selectClient"]
        self.assertEqual(cart["client"]["name"], "The Fish Market")
        self.assertEqual(cart["deliveryDate"], tomorrow.isoformat())

        _, data = self.execute(
            'mutation { updateSpecialInstructions(text: "Ice packed") { specialInstructions } }'
        )
        self.assertEqual(data["data"]["updateSpecialInstructions"]["specialInstructions"], "Ice packed")

        past = (timezone.localdate() - timedelta(days=3)).isoformat()
        _, data = self.execute('mutation { updateDeliveryDate(date: "%s") { deliveryDate } }' % past)
        self.assertEqual(data["errors"][0]["extensions"]["code"], "VALIDATION_ERROR")

    def test_submit_order(self):
        order = self.submit_for("c1")
        self.assertEqual(order["status"], "SUBMITTED")
        self.assertEqual(order["total"], "109.95")
        self.assertEqual(order["salespersonId"], "1")

        _, data = self.execute("{ cart { itemCount client { id } } }")
        self.assertEqual(data["data"]["cart"], {"itemCount": 0, "client": None})

    def test_submit_with_explicit_client_info(self):
        self.add_item("p2", "1")
        _, data = self.execute(
            """
            mutation {
                submitOrder(clientInfo: {name: "Walk-in", contactPerson: "Pat", phone: "555-0100"}) {
                    clientInfo { name contactPerson address }
                    clientId
                }
            }
            """
        )
        order = data["data"]["submitOrder"]
        self.assertEqual(order["clientInfo"], {"name": "Walk-in", "contactPerson": "Pat", "address": ""})
        self.assertIsNone(order["clientId"])

    def test_submit_empty_cart_fails(self):
        self.execute('mutation { selectClient(clientId: "c1") { itemCount } }')
        _, data = self.execute("mutation { submitOrder { id } }")
        self.assertEqual(data["errors"][0]["extensions"]["code"], "VALIDATION_ERROR")

    def test_order_status_updates(self):
        """Test status moves and rejected transitions."""
        order = self.submit_for()
        mutation = """
            mutation Move($orderId: ID!, $status: OrderStatus!) {
                updateOrderStatus(orderId: $orderId, status: $status) { status allowedTransitions }
            }
        """
        _, data = self.execute(mutation, {"orderId": order["id"], "status": "PROCESSING"})
        self.assertEqual(data["data"]["updateOrderStatus"], {
            "status": "PROCESSING",
            "allowedTransitions": ["COMPLETED", "CANCELLED"],
        })

        _, data = self.execute(mutation, {"orderId": order["id"], "status": "SUBMITTED"})
        self.assertEqual(data["errors"][0]["extensions"]["code"], "INVALID_STATE")

        _, data = self.execute(mutation, {"orderId": "order-0", "status": "CANCELLED"})
        self.assertEqual(data["errors"][0]["extensions"]["code"], "NOT_FOUND")

    def test_orders_query_filters(self):
        first = self.submit_for("c1")
        self.submit_for("c3")
        _, data = self.execute('{ orders(search: "bistro") { id clientInfo { name } } }')
        self.assertEqual([o["id"] for o in data["data"]["orders"]], [first["id"]])

        _, data = self.execute("{ orders(status: CANCELLED) { id } }")
        self.assertEqual(data["data"]["orders"], [])

        _, data = self.execute('{ order(id: "%s") { items { productId quantity } } }' % first["id"])
        self.assertEqual(data["data"]["order"]["items"], [{"productId": "p1", "quantity": "5"}])

    def test_monthly_report_query(self):
        """Test the report counts non-cancelled orders in the current month."""
        self.submit_for("c1")
        cancelled = self.submit_for("c2")
        self.execute(
            'mutation { updateOrderStatus(orderId: "%s", status: CANCELLED) { status } }' % cancelled["id"]
        )
        _, data = self.execute(
            """
            {
                monthlyReport {
                    start totalSales totalOrders avgOrderValue commission
                    products { name quantity sales share }
                    daily { date label sales }
                }
            }
            """
        )
        report = data["data"]["monthlyReport"]
        self.assertEqual(report["start"], timezone.localdate().replace(day=1).isoformat())
        self.assertEqual(Decimal(report["totalSales"]), Decimal("109.95"))
        self.assertEqual(report["totalOrders"], 1)
        self.assertEqual(Decimal(report["avgOrderValue"]), Decimal("109.95"))
        self.assertEqual(Decimal(report["commission"]), Decimal("5.4975"))
        self.assertEqual(report["products"][0]["name"], "Atlantic Salmon")
        self.assertEqual(Decimal(report["products"][0]["share"]), Decimal("100"))
        self.assertEqual(report["daily"][0]["label"], f"1/{timezone.localdate().month}")

    def test_empty_monthly_report(self):
        _, data = self.execute("{ monthlyReport(year: 2026, month: 2) { totalOrders avgOrderValue daily { sales } } }")
        report = data["data"]["monthlyReport"]
        self.assertEqual(report["totalOrders"], 0)
        self.assertEqual(report["avgOrderValue"], "0")
        self.assertEqual(len(report["daily"]), 28)

    def test_dashboard_and_user_stats(self):
        self.submit_for("c1")
        _, data = self.execute(
            """
            {
                dashboard { totalOrders totalRevenue statusCounts { status count } topProducts { productId quantity } }
                userStats(userId: "1") { totalOrders recentOrders { id } }
            }
            """
        )
        dashboard = data["data"]["dashboard"]
        self.assertEqual(dashboard["totalOrders"], 1)
        self.assertIn({"status": "SUBMITTED", "count": 1}, dashboard["statusCounts"])
        self.assertEqual(dashboard["topProducts"][0], {"productId": "p1", "quantity": "5"})
        self.assertEqual(data["data"]["userStats"]["totalOrders"], 1)

    def test_admin_product_and_user_mutations(self):
        _, data = self.execute(
            """
            mutation {
                createProduct(input: {name: "Mussels", category: "Shellfish", unit: "kg", price: "8.75"}) {
                    id price available
                }
            }
            """
        )
        product = data["data"]["createProduct"]
        self.assertEqual(product["price"], "8.75")
        self.assertTrue(product["available"])

        _, data = self.execute('mutation { toggleProductAvailability(id: "p1") { available } }')
        self.assertFalse(data["data"]["toggleProductAvailability"]["available"])

        _, data = self.execute('{ adminProducts(search: "mussels") { id } }')
        self.assertEqual(data["data"]["adminProducts"], [{"id": product["id"]}])

        _, data = self.execute(
            'mutation { createUser(input: {name: "Jane", email: "jane@seafood.com", role: ADMIN}) { id role } }'
        )
        user = data["data"]["createUser"]
        self.assertEqual(user["role"], "ADMIN")

        _, data = self.execute(
            'mutation { updateUser(id: "%s", input: {role: ADMIN}) { changed user { role } } }' % user["id"]
        )
        self.assertFalse(data["data"]["updateUser"]["changed"])

        _, data = self.execute('mutation { removeUser(id: "2") { id } }')
        self.assertEqual(data["data"]["removeUser"]["id"], "2")
        _, data = self.execute("{ users { id } }")
        self.assertEqual([u["id"] for u in data["data"]["users"]], ["1", user["id"]])

    def test_brochure_download_center(self):
        _, data = self.execute("{ brochures { id name sizeLabel contentType uploadDate downloadCount } }")
        brochures = data["data"]["brochures"]
        self.assertEqual(brochures[0], {
            "id": "brochure-1",
            "name": "How Kee Products Catalog 2023.pdf",
            "sizeLabel": "2.3 MB",
            "contentType": "application/pdf",
            "uploadDate": "2023-05-15T08:30:00+00:00",
            "downloadCount": 35,
        })

        _, data = self.execute('mutation { downloadBrochure(id: "brochure-3") { downloadCount url } }')
        self.assertEqual(data["data"]["downloadBrochure"], {"downloadCount": 43, "url": "#"})

        _, data = self.execute(
            'mutation { registerBrochure(input: {name: "Winter.pdf", size: 2048, contentType: "application/pdf"}) '
            "{ id sizeLabel downloadCount } }"
        )
        added = data["data"]["registerBrochure"]
        self.assertEqual((added["sizeLabel"], added["downloadCount"]), ("2.0 KB", 0))

        _, data = self.execute('mutation { deleteBrochure(id: "brochure-2") { id } }')
        self.assertEqual(data["data"]["deleteBrochure"]["id"], "brochure-2")
        _, data = self.execute("{ brochures { id } }")
        self.assertEqual(
            [b["id"] for b in data["data"]["brochures"]],
            [added["id"], "brochure-1", "brochure-3"],
        )

    def test_register_brochure_rejects_bad_files(self):
        _, data = self.execute(
            'mutation { registerBrochure(input: {name: "photo.png", size: 10, contentType: "image/png"}) { id } }'
        )
        self.assertEqual(data["errors"][0]["extensions"]["code"], "VALIDATION_ERROR")
        self.assertIn("Invalid file type", data["errors"][0]["message"])

        _, data = self.execute('mutation { downloadBrochure(id: "brochure-9") { id } }')
        self.assertEqual(data["errors"][0]["extensions"]["code"], "NOT_FOUND")


class ReportCsvViewTest(TestCase):
    """Tests for the CSV report download."""

    def test_download_empty_month(self):
        response = self.client.get(
            "/reports/monthly.csv", {"year": 2026, "month": 10}, headers={"X-Session-ID": "csv"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "text/csv")
        self.assertIn("sales-report-october-2026.csv", response["Content-Disposition"])
        content = response.content.decode()
        self.assertTrue(content.startswith("Monthly Sales Report - October 2026\n"))
        self.assertIn("Average Order Value: $0.00", content)

    def test_invalid_month(self):
        response = self.client.get("/reports/monthly.csv", {"year": 2026, "month": 13})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(json.loads(response.content)["error"]["code"], "VALIDATION_ERROR")

    def test_non_numeric_year(self):
        response = self.client.get("/reports/monthly.csv", {"year": "soon", "month": 1})
        self.assertEqual(response.status_code, 400)

    def test_year_out_of_range(self):
        response = self.client.get("/reports/monthly.csv", {"year": 0, "month": 1})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(json.loads(response.content)["error"]["code"], "VALIDATION_ERROR")


class ErrorFormatterTest(TestCase):
    """Tests for ErrorHandler.format_graphql_error."""

    def test_plain_value_error_keeps_message(self):
        error = GraphQLError("Invalid decimal: 'abc'", original_error=ValueError("Invalid decimal: 'abc'"))
        formatted = ErrorHandler.format_graphql_error(error)
        self.assertEqual(formatted["extensions"]["code"], "VALIDATION_ERROR")
        self.assertEqual(formatted["message"], "Invalid decimal: 'abc'")

    def test_domain_error_uses_its_code(self):
        original = UnknownReferenceError("Product not found: ghost")
        formatted = ErrorHandler.format_graphql_error(GraphQLError(str(original), original_error=original))
        self.assertEqual(formatted["extensions"]["code"], "NOT_FOUND")

    def test_unexpected_error_is_internal(self):
        formatted = ErrorHandler.format_graphql_error(
            GraphQLError("boom", original_error=RuntimeError("boom"))
        )
        self.assertEqual(formatted["extensions"]["code"], "INTERNAL_ERROR")
        self.assertEqual(formatted["message"], "An internal error occurred")
