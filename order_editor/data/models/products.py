from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .flags import UNSET_ID


class ProductUnit(BaseModel):
    """A unit a product can be sold in."""
    unit_id: int = Field(description="Unique unit identifier")
    name: str = Field(description="Unit name")
    display_name: str = Field(default="", description="Name shown in pickers, falls back to name")
    base_qty: float = Field(default=1.0, description="Number of base units in this unit")

    @property
    def label(self) -> str:
        return self.display_name or self.name


class Product(BaseModel):
    """Catalog product with its sellable units."""
    product_id: int = Field(description="Unique product identifier")
    name: str = Field(description="Product name")
    code: str = Field(default="", description="Product code")
    brand: str = Field(default="", description="Product brand")
    base_unit_id: int = Field(default=UNSET_ID, description="Base unit identifier")
    default_unit_id: int = Field(default=UNSET_ID, description="Unit preselected when adding the product")
    price: float = Field(default=0.0, description="Default selling rate")
    mrp: float = Field(default=0.0, description="Maximum retail price")
    note: str = Field(default="", description="Product note")
    units: List[ProductUnit] = Field(default_factory=list, description="Units the product can be ordered in")

    def find_unit(self, unit_id: int) -> Optional[ProductUnit]:
        for unit in self.units:
            if unit.unit_id == unit_id:
                return unit
        return None

    def default_unit(self) -> Optional[ProductUnit]:
        """Unit preselected for a new line: the default unit, else the base unit, else the first one."""
        for unit_id in (self.default_unit_id, self.base_unit_id):
            unit = self.find_unit(unit_id) if unit_id != UNSET_ID else None
            if unit is not None:
                return unit
        return self.units[0] if self.units else None
