from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from apps.core.models import IdempotentRequest
from apps.inventory.models import InventoryMovement, Product


class InventoryApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.client.credentials(HTTP_X_API_KEY="dev-api-key")
        self.product = Product.objects.create(name="Preform 28g", pieces_per_package=200, total_pieces=1000)

    def movement_url(self, product_id=None):
        return f"/api/v1/products/{product_id or self.product.id}/movements/"

    def test_requires_api_key(self):
        client = APIClient()
        response = client.get("/api/v1/products/")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "authentication_failed")

    def test_create_product_from_pallets(self):
        response = self.client.post(
            "/api/v1/products/",
            {"name": "Cap 38mm", "pieces_per_package": 500, "pallets": "2.5"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["total_pieces"], 1250)
        self.assertEqual(body["pallets"], "2.5000")

    def test_create_product_with_duplicate_name_is_rejected(self):
        response = self.client.post(
            "/api/v1/products/",
            {"name": "Preform 28g", "pieces_per_package": 100},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["code"], "validation_error")
        self.assertIn("name", body["field_errors"])

    def test_list_products_filters_by_stock_and_sorts(self):
        Product.objects.create(name="Handle", pieces_per_package=50, total_pieces=20)
        Product.objects.create(name="Cap 38mm", pieces_per_package=500, total_pieces=5000)

        low = self.client.get("/api/v1/products/?stock=low")
        self.assertEqual(low.status_code, 200)
        self.assertEqual([row["name"] for row in low.json()], ["Handle"])

        ordered = self.client.get("/api/v1/products/?order=desc")
        self.assertEqual([row["name"] for row in ordered.json()], ["Cap 38mm", "Preform 28g", "Handle"])

        invalid = self.client.get("/api/v1/products/?stock=medium")
        self.assertEqual(invalid.status_code, 400)
        self.assertEqual(invalid.json()["field_errors"], {"stock": ["stock must be 'low' or 'high'."]})

    @override_settings(PLANTLEDGER_LOW_STOCK_PIECES=2000)
    def test_low_stock_threshold_comes_from_settings(self):
        response = self.client.get("/api/v1/products/?stock=low")

        self.assertEqual([row["name"] for row in response.json()], ["Preform 28g"])

    def test_update_pieces_per_package_recomputes_pallets(self):
        response = self.client.patch(
            f"/api/v1/products/{self.product.id}/",
            {"pieces_per_package": 400},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["pallets"], "2.5000")
        self.assertEqual(response.json()["total_pieces"], 1000)

    def test_exit_movement_returns_updated_product(self):
        response = self.client.post(
            self.movement_url(),
            {"movement_type": "exit", "quantity_pieces": 300},
            format="json",
            HTTP_X_ACTOR_ID="op-7",
        )

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["total_pieces"], 700)
        self.assertEqual(body["pallets"], "3.5000")
        self.assertEqual(InventoryMovement.objects.get().actor_id, "op-7")

    def test_exit_above_stock_returns_conflict(self):
        response = self.client.post(
            self.movement_url(),
            {"movement_type": "exit", "quantity_pieces": 1200},
            format="json",
        )

        self.assertEqual(response.status_code, 409)
        body = response.json()
        self.assertEqual(body["code"], "insufficient_stock")
        self.assertEqual(body["field_errors"], {})
        self.product.refresh_from_db()
        self.assertEqual(self.product.total_pieces, 1000)
        self.assertFalse(InventoryMovement.objects.exists())

    def test_movement_requires_exactly_one_quantity(self):
        for payload in (
            {"movement_type": "entry"},
            {"movement_type": "entry", "quantity_pieces": 10, "quantity_pallets": "1"},
        ):
            with self.subTest(payload=payload):
                response = self.client.post(self.movement_url(), payload, format="json")
                self.assertEqual(response.status_code, 400)
                self.assertIn("quantity_pieces", response.json()["field_errors"])

    def test_movement_rejects_non_positive_quantity(self):
        response = self.client.post(
            self.movement_url(),
            {"movement_type": "entry", "quantity_pieces": 0},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "validation_error")

    def test_movement_rejects_quantity_beyond_column_range(self):
        response = self.client.post(
            self.movement_url(),
            {"movement_type": "entry", "quantity_pieces": 3000000000},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("quantity_pieces", response.json()["field_errors"])
        self.product.refresh_from_db()
        self.assertEqual(self.product.total_pieces, 1000)

    def test_rejected_movement_is_logged(self):
        with self.assertLogs("apps.core.api.exceptions", "WARNING") as logs:
            response = self.client.post(
                self.movement_url(),
                {"movement_type": "exit", "quantity_pieces": 1200},
                format="json",
            )

        self.assertEqual(response.status_code, 409)
        self.assertIn("insufficient_stock", logs.output[0])

    def test_movement_in_pallets(self):
        response = self.client.post(
            self.movement_url(),
            {"movement_type": "entry", "quantity_pallets": "0.5", "actor_id": "op-1"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["total_pieces"], 1100)

    def test_movement_on_unknown_product_returns_not_found(self):
        response = self.client.post(
            self.movement_url("00000000-0000-0000-0000-000000000000"),
            {"movement_type": "entry", "quantity_pieces": 5},
            format="json",
        )

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "not_found")

    def test_idempotency_key_replays_the_first_response(self):
        payload = {"movement_type": "entry", "quantity_pieces": 100, "actor_id": "op-1"}

        first = self.client.post(self.movement_url(), payload, format="json", HTTP_IDEMPOTENCY_KEY="scan-42")
        second = self.client.post(self.movement_url(), payload, format="json", HTTP_IDEMPOTENCY_KEY="scan-42")

        self.assertEqual(first.status_code, 201)
        self.assertEqual(second.status_code, 201)
        self.assertEqual(first.json(), second.json())
        self.assertEqual(InventoryMovement.objects.count(), 1)
        self.product.refresh_from_db()
        self.assertEqual(self.product.total_pieces, 1100)
        self.assertEqual(
            IdempotentRequest.objects.get().status,
            IdempotentRequest.Status.COMPLETED,
        )

    def test_idempotency_key_reused_for_another_product_is_rejected(self):
        other = Product.objects.create(name="Cap 38mm", pieces_per_package=500, total_pieces=0)
        payload = {"movement_type": "entry", "quantity_pieces": 100}

        first = self.client.post(self.movement_url(), payload, format="json", HTTP_IDEMPOTENCY_KEY="scan-44")
        second = self.client.post(
            self.movement_url(other.id), payload, format="json", HTTP_IDEMPOTENCY_KEY="scan-44"
        )

        self.assertEqual(first.status_code, 201)
        self.assertEqual(second.status_code, 400)
        body = second.json()
        self.assertEqual(body["code"], "validation_error")
        self.assertIn("idempotency_key", body["field_errors"])
        other.refresh_from_db()
        self.assertEqual(other.total_pieces, 0)
        self.assertEqual(InventoryMovement.objects.count(), 1)

    def test_failed_keyed_request_is_not_replayed(self):
        payload = {"movement_type": "exit", "quantity_pieces": 5000}

        first = self.client.post(self.movement_url(), payload, format="json", HTTP_IDEMPOTENCY_KEY="scan-43")
        self.assertEqual(first.status_code, 409)
        self.assertEqual(IdempotentRequest.objects.get().status, IdempotentRequest.Status.FAILED)

        retry = self.client.post(
            self.movement_url(),
            {"movement_type": "exit", "quantity_pieces": 500},
            format="json",
            HTTP_IDEMPOTENCY_KEY="scan-43",
        )
        self.assertEqual(retry.status_code, 201)
        self.assertEqual(retry.json()["total_pieces"], 500)

    def test_movement_history_is_listed_newest_first(self):
        self.client.post(self.movement_url(), {"movement_type": "entry", "quantity_pieces": 1}, format="json")
        self.client.post(self.movement_url(), {"movement_type": "exit", "quantity_pieces": 2}, format="json")

        response = self.client.get(f"/api/v1/movements/?product={self.product.id}&limit=10")

        self.assertEqual(response.status_code, 200)
        rows = response.json()
        self.assertEqual(len(rows), 2)
        self.assertEqual({row["quantity_pieces"] for row in rows}, {1, 2})
        self.assertEqual(rows[0]["product_name"], "Preform 28g")
        self.assertGreaterEqual(rows[0]["created_at"], rows[1]["created_at"])

    def test_movement_history_rejects_bad_limit(self):
        response = self.client.get("/api/v1/movements/?limit=abc")

        self.assertEqual(response.status_code, 400)
        self.assertIn("limit", response.json()["field_errors"])
