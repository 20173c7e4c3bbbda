from app.services.customer_service import get_customer, list_customers, upsert_customer
from app.services.import_service import import_workbook
from app.services.order_service import create_order, get_order, list_orders
from app.services.product_service import (
    batch_create_products,
    create_product,
    list_products,
    update_product,
)
from app.services.purchase_service import (
    product_history,
    product_summary,
    quick_purchase,
    record_purchase,
)

__all__ = [
    "batch_create_products",
    "create_order",
    "create_product",
    "get_customer",
    "get_order",
    "import_workbook",
    "list_customers",
    "list_orders",
    "list_products",
    "product_history",
    "product_summary",
    "quick_purchase",
    "record_purchase",
    "update_product",
    "upsert_customer",
]
