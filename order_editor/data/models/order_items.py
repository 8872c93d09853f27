from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .flags import UNSET_ID, LineItemFlag, LineItemStatus


class OrderLineItem(BaseModel):
    """One product entry within an order."""
    id: int = Field(default=UNSET_ID, description="Local line item identifier")
    server_id: int = Field(default=UNSET_ID, description="Identifier assigned on submission")
    order_id: int = Field(default=UNSET_ID, description="Local identifier of the parent order")
    customer_id: int = Field(default=UNSET_ID, description="Customer of the parent order")
    salesman_id: int = Field(default=UNSET_ID, description="Salesman of the parent order")
    storekeeper_id: int = Field(default=UNSET_ID, description="Storekeeper handling this line")
    date_time: Optional[datetime] = Field(default=None, description="Line timestamp")
    product_id: int = Field(default=UNSET_ID, description="Product reference")
    unit_id: int = Field(default=UNSET_ID, description="Unit reference")
    rate: float = Field(default=0.0, description="Original product rate")
    update_rate: float = Field(default=0.0, description="Effective rate used for the total")
    quantity: float = Field(default=0.0, description="Ordered quantity in the selected unit")
    available_qty: float = Field(default=0.0, description="Quantity confirmed available")
    unit_base_qty: float = Field(default=0.0, description="Base quantity of the selected unit")
    is_checked_flag: int = Field(default=0, description="Checker verification flag")
    status: LineItemStatus = Field(default=LineItemStatus.NEW_ITEM, description="Line workflow flag")
    note: Optional[str] = Field(default=None, description="Internal note")
    narration: Optional[str] = Field(default=None, description="Free text narration")
    flag: LineItemFlag = Field(default=LineItemFlag.ACTIVE, description="Record lifecycle flag")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")
    checker_image: Optional[str] = Field(default=None, description="Image attached by the checker")
    suggestions: List[Dict[str, Any]] = Field(default_factory=list, description="Replacement suggestions, passed through untouched")

    @property
    def amount(self) -> float:
        """Line amount (update_rate * quantity)."""
        return self.update_rate * self.quantity
