import importlib

from app.models.customer import Customer
from app.models.order import Order
from app.models.product import Product
from app.models.purchase import Purchase


def import_all_models() -> None:
    for module_name in (
        "app.models.customer",
        "app.models.order",
        "app.models.product",
        "app.models.purchase",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Customer",
    "Order",
    "Product",
    "Purchase",
    "import_all_models",
]
