import unittest

from sqlalchemy import func, select

from app.core.errors import BadRequestError, NotFoundError
from app.database import Base, build_engine, build_session_factory
from app.models import Product, import_all_models
from app.schemas.product import ProductCreate
from app.services.product_service import (
    batch_create_products,
    create_product,
    list_products,
    update_product,
    validate_batch_item,
)


def _make_session():
    engine = build_engine("sqlite:///:memory:")
    import_all_models()
    Base.metadata.create_all(bind=engine)
    return build_session_factory(engine)()


class CreateProductTest(unittest.TestCase):
    def setUp(self):
        self.db = _make_session()

    def tearDown(self):
        self.db.close()

    def test_defaults(self):
        product = create_product(
            self.db, ProductCreate(description="Leite", unit="l", unit_price=5.0)
        )
        self.assertEqual(product.yield_percent, 100)
        self.assertEqual(product.notes, "")
        self.assertEqual(product.location, "")
        self.assertEqual(product.current_quantity, 0)
        self.assertIsNone(product.unit_size)

    def test_duplicates_are_allowed(self):
        payload = ProductCreate(description="Leite", unit="l", unit_price=5.0)
        first = create_product(self.db, payload)
        second = create_product(self.db, payload)
        self.assertNotEqual(first.id, second.id)

    def test_list_orders_by_description(self):
        for name in ("Tomate", "Alho", "Manteiga"):
            create_product(self.db, ProductCreate(description=name, unit="kg", unit_price=1.0))
        names = [product.description for product in list_products(self.db)]
        self.assertEqual(names, ["Alho", "Manteiga", "Tomate"])


class BatchCreateTest(unittest.TestCase):
    def setUp(self):
        self.db = _make_session()

    def tearDown(self):
        self.db.close()

    def test_skips_incomplete_entries_and_reports_them(self):
        outcome = batch_create_products(
            self.db,
            [
                {"description": "Sal", "unit": "kg", "unitPrice": 5},
                {"unit": "kg", "unitPrice": 3},
            ],
        )

        self.assertEqual(outcome["total"], 2)
        self.assertEqual(outcome["created"], 1)
        self.assertEqual(outcome["results"][0]["status"], "accepted")
        self.assertEqual(outcome["results"][1]["status"], "rejected")
        self.assertIn("description", outcome["results"][1]["reason"])

        products = list_products(self.db)
        self.assertEqual(len(products), 1)
        product = products[0]
        self.assertEqual(product.id, outcome["results"][0]["id"])
        self.assertIsNone(product.yield_percent)
        self.assertIsNone(product.unit_size)
        self.assertEqual(product.current_quantity, 0)

    def test_zero_price_is_accepted(self):
        item, reason = validate_batch_item({"description": "Agua", "unit": "l", "unitPrice": 0})
        self.assertIsNotNone(item)
        self.assertIsNone(reason)

    def test_non_object_and_bad_types_are_rejected(self):
        _, reason = validate_batch_item("Sal")
        self.assertEqual(reason, "entry must be an object")
        _, reason = validate_batch_item({"description": "Sal", "unit": "kg", "unitPrice": "caro"})
        self.assertIn("unitPrice", reason)

    def test_all_rejected_writes_nothing(self):
        outcome = batch_create_products(self.db, [{"description": "Sal"}])
        self.assertEqual(outcome["created"], 0)
        self.assertEqual(self.db.execute(select(func.count(Product.id))).scalar(), 0)


class UpdateProductTest(unittest.TestCase):
    def setUp(self):
        self.db = _make_session()
        self.product = create_product(
            self.db, ProductCreate(description="Oleo", unit="l", unit_price=8.0, notes="lata")
        )

    def tearDown(self):
        self.db.close()

    def test_applies_only_present_fields(self):
        updated = update_product(
            self.db, self.product.id, {"description": "Óleo de soja", "location": "Despensa"}
        )
        self.assertEqual(updated.description, "Óleo de soja")
        self.assertEqual(updated.location, "Despensa")
        self.assertEqual(updated.unit, "l")
        self.assertEqual(updated.notes, "lata")

    def test_quantities_are_not_updatable(self):
        with self.assertRaises(BadRequestError):
            update_product(self.db, self.product.id, {"current_quantity": 50})
        self.assertEqual(self.db.get(Product, self.product.id).current_quantity, 0)

    def test_empty_update_performs_no_write(self):
        before = self.db.get(Product, self.product.id).updated_at
        with self.assertRaises(BadRequestError):
            update_product(self.db, self.product.id, {})
        self.db.expire_all()
        self.assertEqual(self.db.get(Product, self.product.id).updated_at, before)

    def test_blank_description_is_rejected(self):
        with self.assertRaises(BadRequestError):
            update_product(self.db, self.product.id, {"description": None})

    def test_unknown_product(self):
        with self.assertRaises(NotFoundError):
            update_product(self.db, "missing", {"notes": "x"})


if __name__ == "__main__":
    unittest.main()
