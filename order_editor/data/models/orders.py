from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .flags import UNSET_ID, OrderApprovalFlag, OrderFlag


class Order(BaseModel):
    """Master record of an order."""
    id: int = Field(default=UNSET_ID, description="Local order identifier")
    server_id: int = Field(default=UNSET_ID, description="Identifier assigned on submission")
    uuid: str = Field(default="", description="Client generated unique key")
    invoice_no: int = Field(default=0, description="Invoice number, 0 until billed")
    customer_id: int = Field(default=UNSET_ID, description="Customer reference, -1 when no customer is assigned")
    customer_name: str = Field(default="", description="Customer display name")
    salesman_id: int = Field(default=UNSET_ID, description="Salesman who created the order")
    storekeeper_id: int = Field(default=UNSET_ID, description="Assigned storekeeper, -1 for any storekeeper")
    biller_id: int = Field(default=UNSET_ID, description="Assigned biller")
    checker_id: int = Field(default=UNSET_ID, description="Assigned checker")
    date_time: Optional[datetime] = Field(default=None, description="Order timestamp")
    total: float = Field(default=0.0, description="Stored order total including freight")
    freight_charge: float = Field(default=0.0, description="Freight charge added to the total")
    note: Optional[str] = Field(default=None, description="Free text note")
    approve_flag: OrderApprovalFlag = Field(default=OrderApprovalFlag.UNSET, description="Approval workflow flag")
    flag: OrderFlag = Field(default=OrderFlag.ACTIVE, description="Record lifecycle flag")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")

    @property
    def has_customer(self) -> bool:
        return self.customer_id != UNSET_ID

    @property
    def is_temp(self) -> bool:
        return self.flag == OrderFlag.TEMP

    @property
    def is_draft(self) -> bool:
        return self.flag == OrderFlag.DRAFT
