from .flags import (
    UNSET_ID,
    NON_CANCELLABLE_FLAGS,
    OrderApprovalFlag,
    OrderFlag,
    LineItemFlag,
    LineItemStatus,
)

from .orders import Order
from .order_items import OrderLineItem
from .products import Product, ProductUnit
from .customers import Customer

__all__ = [
    # Flags
    "UNSET_ID",
    "NON_CANCELLABLE_FLAGS",
    "OrderApprovalFlag",
    "OrderFlag",
    "LineItemFlag",
    "LineItemStatus",
    # Order records
    "Order",
    "OrderLineItem",
    # Catalog records
    "Product",
    "ProductUnit",
    "Customer",
]
