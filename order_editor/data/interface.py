from __future__ import annotations

from typing import List, Optional, Protocol

from .models import (
    UNSET_ID,
    # Order records
    Order,
    OrderLineItem,
    # Catalog records
    Customer,
    Product,
)


# ---- Order store protocol ----

class OrderStore(Protocol):
    """
    Backend-agnostic contract for the order editor.

    Every method is a coroutine. Failures are reported by raising
    order_editor.errors.StoreError with a message fit to show the user.
    """

    # Order resolution

    async def get_draft_order(self, order_id: int) -> Optional[Order]:
        """Get a saved draft order, or None if there is no such draft."""
        ...

    async def create_temp_order(self) -> Order:
        """Return the latest temp order, creating one if none exists."""
        ...

    # Order master updates

    async def set_customer(self, order_id: int, customer_id: int, customer_name: str) -> None:
        """Assign a customer to the order and its line items."""
        ...

    async def set_note(self, order_id: int, note: str) -> None:
        """Replace the order note."""
        ...

    # Line items

    async def list_line_items(self, order_id: int) -> List[OrderLineItem]:
        """List the order's line items in insertion order."""
        ...

    async def add_line_item(self, item: OrderLineItem) -> OrderLineItem:
        """Insert a new line item and return it with its identifier assigned."""
        ...

    async def upsert_line_item(self, item: OrderLineItem) -> OrderLineItem:
        """Replace a line item by local id, or insert it when unknown. Local only."""
        ...

    async def delete_line_item(self, line_id: int) -> None:
        """Delete a single line item."""
        ...

    # Workflow

    async def save_draft(self, order_id: int, freight: float, total: float) -> Order:
        """Persist freight and total and mark the order as a draft."""
        ...

    async def submit(
        self,
        order_id: int,
        freight: float,
        total: float,
        storekeeper_id: int = UNSET_ID,
    ) -> Order:
        """Submit the order. storekeeper_id -1 offers it to every storekeeper."""
        ...

    async def cancel(self, order: Order) -> Order:
        """Cancel an order that has not reached a storekeeper or a terminal state."""
        ...

    async def delete_order_and_items(self, order_id: int) -> None:
        """Delete the order together with all of its line items."""
        ...


# ---- Product catalog protocol ----

class ProductCatalog(Protocol):
    """Lookup of products, units and customers."""

    async def get_product(self, product_id: int) -> Optional[Product]:
        """Get a product with its units, or None when unknown."""
        ...

    async def list_customers(self, search: str = "") -> List[Customer]:
        """List customers whose name or code contains the search text."""
        ...
