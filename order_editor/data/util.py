from __future__ import annotations

from typing import Literal

from .backends.csv_backend import CsvOrderStore
from ..config import get_config


def get_order_store(kind: Literal["csv"] = "csv") -> CsvOrderStore:
    """Build the configured backend. It serves as both OrderStore and ProductCatalog."""
    if kind == "csv":
        config = get_config()
        return CsvOrderStore(data_dir=config.data_dir, persist=config.persist_changes)
    raise ValueError(f"Unknown order store kind: {kind}")
