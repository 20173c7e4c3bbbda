import unittest

from fastapi.testclient import TestClient

from app.database import Base, build_engine, build_session_factory
from app.dependencies import get_db
from app.main import app
from app.models import import_all_models


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        engine = build_engine("sqlite:///:memory:")
        import_all_models()
        Base.metadata.create_all(bind=engine)
        Session = build_session_factory(engine)

        def override_get_db():
            db = Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def _create_product(self, **fields):
        body = {"description": "Arroz", "unit": "kg", "unitPrice": 6.0}
        body.update(fields)
        response = self.client.post("/products", json=body)
        self.assertEqual(response.status_code, 201)
        return response.json()["id"]


class RootApiTest(ApiTestCase):
    def test_liveness(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("no ar", response.text)

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.json()["status"], "ok")


class ProductApiTest(ApiTestCase):
    def test_create_and_list_use_camel_case(self):
        self._create_product(description="Feijão", unitSize=1, location="Estoque seco")
        self._create_product(description="Açúcar")

        response = self.client.get("/products")
        self.assertEqual(response.status_code, 200)
        products = response.json()
        self.assertEqual([p["description"] for p in products], ["Açúcar", "Feijão"])
        product = products[1]
        self.assertEqual(product["unitSize"], 1)
        self.assertEqual(product["yieldPercent"], 100)
        self.assertEqual(product["currentQuantity"], 0)
        self.assertIn("createdAt", product)

    def test_create_requires_description(self):
        response = self.client.post("/products", json={"unit": "kg", "unitPrice": 1})
        self.assertEqual(response.status_code, 400)
        self.assertIn("description", response.json()["detail"])

    def test_batch_reports_total_and_rejections(self):
        response = self.client.post(
            "/products/batch",
            json=[
                {"description": "Sal", "unit": "kg", "unitPrice": 5},
                {"unit": "kg", "unitPrice": 3},
            ],
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["total"], 2)
        self.assertEqual(body["created"], 1)
        self.assertEqual([r["status"] for r in body["results"]], ["accepted", "rejected"])
        self.assertEqual(len(self.client.get("/products").json()), 1)

    def test_batch_accepts_items_wrapper(self):
        response = self.client.post(
            "/products/batch",
            json={"items": [{"description": "Sal", "unit": "kg", "unitPrice": 5}]},
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["created"], 1)

    def test_batch_rejects_empty_payload(self):
        self.assertEqual(self.client.post("/products/batch", json=[]).status_code, 400)
        self.assertEqual(self.client.post("/products/batch", json={"x": 1}).status_code, 400)

    def test_purchase_then_summary(self):
        product_id = self._create_product()
        response = self.client.post(
            f"/products/{product_id}/purchase",
            json={"quantity": 4, "totalPrice": 30, "purchaseDate": "2024-05-02"},
        )
        self.assertEqual(response.status_code, 201)
        self.assertIn("purchaseId", response.json())

        self.client.post(
            f"/products/{product_id}/purchase",
            json={"quantity": 2, "totalPrice": 10, "purchaseDate": "2024-05-10"},
        )

        summary = self.client.get(f"/products/{product_id}/summary").json()
        self.assertEqual(summary["product"]["currentQuantity"], 6)
        self.assertEqual(summary["product"]["previousQuantity"], 4)
        self.assertEqual(summary["product"]["unitPrice"], 5)
        self.assertEqual(
            [p["purchaseDate"] for p in summary["lastPurchases"]],
            ["2024-05-10", "2024-05-02"],
        )
        self.assertAlmostEqual(summary["avgLast4UnitPrice"], 6.25)

        history = self.client.get(f"/products/{product_id}/history").json()
        self.assertEqual(len(history["purchases"]), 2)
        self.assertEqual(history["purchases"][0]["stockBefore"], 4)
        self.assertEqual(history["purchases"][0]["stockAfter"], 6)
        self.assertAlmostEqual(history["averageLast4UnitPrice"], 6.25)

    def test_summary_without_purchases(self):
        product_id = self._create_product()
        summary = self.client.get(f"/products/{product_id}/summary").json()
        self.assertEqual(summary["lastPurchases"], [])
        self.assertIsNone(summary["avgLast4UnitPrice"])

    def test_purchase_on_missing_product(self):
        response = self.client.post(
            "/products/nope/purchase", json={"quantity": 1, "totalPrice": 1}
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.client.get("/products/nope/summary").status_code, 404)
        self.assertEqual(self.client.get("/products/nope/history").status_code, 404)

    def test_zero_quantity_is_rejected(self):
        product_id = self._create_product()
        response = self.client.post(
            f"/products/{product_id}/purchase", json={"quantity": 0, "totalPrice": 10}
        )
        self.assertEqual(response.status_code, 400)

    def test_overflowing_unit_price_is_rejected(self):
        product_id = self._create_product()
        response = self.client.post(
            f"/products/{product_id}/purchase", json={"quantity": 0.1, "totalPrice": 1e308}
        )
        self.assertEqual(response.status_code, 400)

        history = self.client.get(f"/products/{product_id}/history").json()
        self.assertEqual(history["purchases"], [])
        self.assertEqual(history["product"]["unitPrice"], 6.0)

    def test_infinity_literal_is_rejected(self):
        product_id = self._create_product()
        response = self.client.post(
            f"/products/{product_id}/purchase",
            content='{"quantity": 1, "totalPrice": Infinity}',
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            "/products",
            content='{"description": "Sal", "unit": "kg", "unitPrice": Infinity}',
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(self.client.get("/products").json()), 1)

    def test_quick_purchase_rejects_zero_total(self):
        response = self.client.post(
            "/products/quick-purchase",
            json={"description": "Batata", "unit": "kg", "quantity": 1, "totalPrice": 0},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.get("/products").json(), [])

    def test_quick_purchase_creates_then_reuses(self):
        body = {"description": "Batata", "unit": "kg", "quantity": 10, "totalPrice": 40}
        first = self.client.post("/products/quick-purchase", json=body)
        self.assertEqual(first.status_code, 201)
        self.assertTrue(first.json()["createdNewProduct"])

        second = self.client.post(
            "/products/quick-purchase", json={**body, "quantity": 5, "supplier": "Ceasa"}
        )
        self.assertFalse(second.json()["createdNewProduct"])
        self.assertEqual(second.json()["productId"], first.json()["productId"])

        history = self.client.get(f"/products/{first.json()['productId']}/history").json()
        self.assertEqual(history["product"]["currentQuantity"], 15)
        suppliers = sorted(p["supplier"] for p in history["purchases"])
        self.assertEqual(suppliers, ["", "Ceasa"])

    def test_quick_purchase_requires_fields(self):
        response = self.client.post(
            "/products/quick-purchase", json={"description": "Batata", "quantity": 1}
        )
        self.assertEqual(response.status_code, 400)

    def test_patch_updates_allowed_fields(self):
        product_id = self._create_product()
        response = self.client.patch(
            f"/products/{product_id}", json={"notes": "orgânico", "yieldPercent": 90}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["notes"], "orgânico")
        self.assertEqual(response.json()["yieldPercent"], 90)

    def test_patch_without_allowed_fields(self):
        product_id = self._create_product()
        response = self.client.patch(f"/products/{product_id}", json={"currentQuantity": 99})
        self.assertEqual(response.status_code, 400)
        product = self.client.get("/products").json()[0]
        self.assertEqual(product["currentQuantity"], 0)

    def test_patch_missing_product(self):
        response = self.client.patch("/products/nope", json={"notes": "x"})
        self.assertEqual(response.status_code, 404)


class OrderApiTest(ApiTestCase):
    def test_create_list_get(self):
        response = self.client.post(
            "/orders",
            json={
                "tableNumber": 3,
                "customerName": "Leo",
                "channel": "garcom",
                "items": [{"name": "Suco", "qty": 2}],
            },
        )
        self.assertEqual(response.status_code, 201)
        order_id = response.json()["id"]

        orders = self.client.get("/orders").json()
        self.assertEqual([o["id"] for o in orders], [order_id])
        self.assertEqual(orders[0]["status"], "pendente")
        self.assertEqual(self.client.get("/orders?status=pronto").json(), [])

        order = self.client.get(f"/orders/{order_id}").json()
        self.assertEqual(order["customerName"], "Leo")
        self.assertEqual(order["items"], [{"name": "Suco", "qty": 2}])

    def test_fields_come_back_as_sent(self):
        response = self.client.post(
            "/orders", json={"tableNumber": 3, "items": {"a": 1}}
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["tableNumber"], 3)

        order = self.client.get(f"/orders/{response.json()['id']}").json()
        self.assertEqual(order["tableNumber"], 3)
        self.assertIsInstance(order["tableNumber"], int)
        self.assertEqual(order["items"], {"a": 1})

        labelled = self.client.post("/orders", json={"tableNumber": "Varanda 2"}).json()
        self.assertEqual(self.client.get(f"/orders/{labelled['id']}").json()["tableNumber"], "Varanda 2")

    def test_missing_order(self):
        self.assertEqual(self.client.get("/orders/nope").status_code, 404)


class CustomerApiTest(ApiTestCase):
    def test_upsert_status_codes(self):
        phone = "5511999990000"
        first = self.client.post("/customers", json={"name": "Bia", "phone": phone})
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["channel"], "presencial")

        second = self.client.post("/customers", json={"name": "Beatriz", "phone": phone})
        self.assertEqual(second.status_code, 200)

        fetched = self.client.get(f"/customers/{phone}").json()
        self.assertEqual(fetched["name"], "Beatriz")
        self.assertEqual(fetched["id"], phone)
        self.assertEqual(len(self.client.get("/customers").json()), 1)

    def test_phone_required(self):
        response = self.client.post("/customers", json={"name": "Bia"})
        self.assertEqual(response.status_code, 400)

    def test_missing_customer(self):
        self.assertEqual(self.client.get("/customers/000").status_code, 404)


if __name__ == "__main__":
    unittest.main()
