import argparse
import sys
from datetime import date, timedelta
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sqlalchemy import delete, select

from app.core.logging import setup_logging
from app.database import Base, SessionLocal, check_store, engine
from app.models import Customer, Order, Product, Purchase, import_all_models
from app.schemas.customer import CustomerUpsert
from app.schemas.order import OrderCreate
from app.services.customer_service import upsert_customer
from app.services.order_service import create_order
from app.services.product_service import batch_create_products
from app.services.purchase_service import quick_purchase


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample restaurant data.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    status = check_store(engine)
    if not status.ok:
        raise SystemExit(f"Store unavailable: {status.error}")
    import_all_models()
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if args.reset:
            db.execute(delete(Purchase))
            db.execute(delete(Product))
            db.execute(delete(Order))
            db.execute(delete(Customer))
            db.commit()

        has_product = db.execute(select(Product.id).limit(1)).first()
        if has_product:
            print("Seed skipped: products already exist.")
            return

        batch_create_products(
            db,
            [
                {"description": "Arroz", "unit": "kg", "unitPrice": 6.5},
                {"description": "Azeite", "unit": "l", "unitPrice": 42.0},
                {"description": "Sal", "unit": "kg", "unitPrice": 3.2},
            ],
        )
        today = date.today()
        quick_purchase(
            db,
            description="Arroz",
            unit="kg",
            quantity=10,
            total_price=62.0,
            purchase_date=today - timedelta(days=7),
            supplier="Atacadão",
        )
        quick_purchase(
            db,
            description="Tomate",
            unit="kg",
            quantity=5,
            total_price=35.0,
            purchase_date=today,
        )
        upsert_customer(
            db,
            CustomerUpsert(name="Maria Souza", phone="5511999990000", channel="nicochat"),
        )
        create_order(
            db,
            OrderCreate(
                table_number=4,
                customer_name="Maria Souza",
                channel="garcom",
                items=[{"name": "Risoto", "quantity": 2}],
            ),
        )
        print("Seed data created.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
