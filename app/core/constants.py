ORDER_STATUS_PENDING = "pendente"
DEFAULT_CUSTOMER_CHANNEL = "presencial"

DEFAULT_YIELD_PERCENT = 100

# Fields a product PATCH may touch; quantities only move through purchases.
PRODUCT_UPDATABLE_FIELDS = (
    "description",
    "unit",
    "unit_size",
    "unit_price",
    "yield_percent",
    "notes",
    "location",
)

LIVENESS_MESSAGE = "Saleh Digital API está no ar"
