from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..data.models import (
    UNSET_ID,
    LineItemFlag,
    LineItemStatus,
    Order,
    OrderLineItem,
    Product,
    ProductUnit,
)
from ..errors import OrderValidationError


class LineItemForm(BaseModel):
    """Values entered in the add/edit item dialog."""
    product: Product = Field(description="Product the line refers to")
    unit_id: int = Field(default=UNSET_ID, description="Selected unit, -1 when none is selected")
    rate: float = Field(default=0.0, description="Effective rate")
    quantity: float = Field(default=0.0, description="Quantity in the selected unit")
    narration: str = Field(default="", description="Free text narration")


def build_new_form(
    product: Product,
    quantity: float,
    unit_id: Optional[int] = None,
    rate: Optional[float] = None,
    narration: str = "",
) -> LineItemForm:
    """Form for adding `product`; unit and rate fall back to the product's defaults."""
    if unit_id is None:
        unit = product.default_unit()
        unit_id = unit.unit_id if unit is not None else UNSET_ID
    return LineItemForm(
        product=product,
        unit_id=unit_id,
        rate=product.price if rate is None else rate,
        quantity=quantity,
        narration=narration,
    )


def build_edit_form(product: Product, item: OrderLineItem) -> LineItemForm:
    """Form pre-populated from an existing line item."""
    return LineItemForm(
        product=product,
        unit_id=item.unit_id,
        rate=item.update_rate,
        quantity=item.quantity,
        narration=item.narration or "",
    )


def validate_form(form: LineItemForm) -> ProductUnit:
    """Check the entry and return the selected unit."""
    if form.quantity <= 0:
        raise OrderValidationError("Please enter a valid quantity")
    if form.rate <= 0:
        raise OrderValidationError("Please enter a valid rate")
    unit = form.product.find_unit(form.unit_id) if form.unit_id != UNSET_ID else None
    if unit is None:
        raise OrderValidationError("Please select a unit")
    return unit


def new_line_item(order: Order, form: LineItemForm, now: Optional[datetime] = None) -> OrderLineItem:
    unit = validate_form(form)
    now = now or datetime.now()
    return OrderLineItem(
        order_id=order.id,
        customer_id=order.customer_id,
        salesman_id=order.salesman_id,
        date_time=now,
        product_id=form.product.product_id,
        unit_id=unit.unit_id,
        unit_base_qty=unit.base_qty,
        rate=form.product.price,
        update_rate=form.rate,
        quantity=form.quantity,
        narration=form.narration,
        status=LineItemStatus.NEW_ITEM,
        flag=LineItemFlag.TEMP if order.is_temp else LineItemFlag.ACTIVE,
        created_at=now,
        updated_at=now,
    )


def apply_line_item_edit(item: OrderLineItem, form: LineItemForm, now: Optional[datetime] = None) -> OrderLineItem:
    """
    Replacement for `item` carrying the edited values.

    Identity, linkage, original rate and creation time are kept; only the unit
    (id and base quantity), effective rate, quantity, narration and update time change.
    """
    unit = validate_form(form)
    if form.product.product_id != item.product_id:
        raise OrderValidationError("Edited entry refers to a different product")
    return item.model_copy(update={
        "unit_id": unit.unit_id,
        "unit_base_qty": unit.base_qty,
        "update_rate": form.rate,
        "quantity": form.quantity,
        "narration": form.narration,
        "updated_at": now or datetime.now(),
    })
