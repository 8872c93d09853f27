from __future__ import annotations

from pydantic import BaseModel, Field


class Customer(BaseModel):
    """Customer an order can be placed for."""
    customer_id: int = Field(description="Unique customer identifier")
    name: str = Field(description="Customer name")
    code: str = Field(default="", description="Customer code")
    phone: str = Field(default="", description="Contact phone number")
    address: str = Field(default="", description="Delivery address")
