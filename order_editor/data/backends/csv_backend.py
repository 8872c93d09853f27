from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

import numpy as np
import pandas as pd

from ..interface import OrderStore, ProductCatalog
from ..models import (
    UNSET_ID, NON_CANCELLABLE_FLAGS, OrderApprovalFlag, OrderFlag, LineItemFlag,
    Order, OrderLineItem, Product, ProductUnit, Customer,
)
from ...config import get_config
from ...errors import StoreError
from ...logging import get_logger


ORDER_COLUMNS = list(Order.model_fields)
LINE_ITEM_COLUMNS = list(OrderLineItem.model_fields)

# Columns read as text so numeric-looking values survive the round trip
ORDER_TEXT_COLUMNS = ["uuid", "customer_name", "note", "date_time", "created_at", "updated_at"]
LINE_ITEM_TEXT_COLUMNS = [
    "note", "narration", "checker_image", "suggestions", "date_time", "created_at", "updated_at",
]
PRODUCT_TEXT_COLUMNS = ["name", "code", "brand", "note"]
UNIT_TEXT_COLUMNS = ["name", "display_name"]
CUSTOMER_TEXT_COLUMNS = ["name", "code", "phone", "address"]


@dataclass
class _Tables:
    orders: pd.DataFrame
    order_items: pd.DataFrame
    products: pd.DataFrame
    product_units: pd.DataFrame
    customers: pd.DataFrame


def _native(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    return value


def _clean_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Drop missing cells so model defaults apply, and unwrap numpy scalars."""
    out = {}
    for key, value in record.items():
        if pd.api.types.is_scalar(value) and pd.isna(value):
            continue
        out[key] = _native(value)
    return out


def _load_json_list(text: str | None) -> List[Dict[str, Any]]:
    try:
        v = json.loads(text or "[]")
        return v if isinstance(v, list) else []
    except (TypeError, ValueError):
        return []


def _text_dtypes(columns: List[str]) -> Dict[str, Any]:
    return {c: str for c in columns}


class CsvOrderStore(OrderStore, ProductCatalog):
    """
    CSV-backed order store and product catalog.
    - Loads CSVs from `data_dir` once at construction and keeps them as DataFrames.
    - Every mutation rewrites orders.csv and order_items.csv when `persist` is on.
    - Line items are listed by ascending local id, which is their insertion order.
    - Writes happen inline in the coroutines. The files are local and small, and
      a mutation is on disk by the time its call returns.
    """

    def __init__(self, data_dir: str | Path = None, persist: Optional[bool] = None) -> None:
        config = get_config()
        if data_dir is None:
            data_dir = config.data_dir

        self.data_dir = Path(data_dir)

        # If the path is relative, make it relative to the repository root
        if not self.data_dir.is_absolute():
            current = Path.cwd()
            repo_root = None

            for parent in [current] + list(current.parents):
                if (parent / "pyproject.toml").exists():
                    repo_root = parent
                    break

            self.data_dir = (repo_root or current) / self.data_dir

        self.persist = config.persist_changes if persist is None else persist
        self.salesman_id = config.salesman_id
        self.logger = get_logger(__name__)
        self._tables = self._load_tables(self.data_dir)

    # ---------- loading / persistence helpers ----------

    @staticmethod
    def _load_tables(data_dir: Path) -> _Tables:
        if not data_dir.exists():
            raise FileNotFoundError(
                f"Data directory not found: {data_dir}\n"
                f"Please either:\n"
                f"  1. Generate sample data: python -m order_editor.data.seed_data\n"
                f"  2. Set DATA_DIR environment variable to point to your data directory\n"
                f"  3. Create a .env file with DATA_DIR=/path/to/your/data"
            )

        required_files = ["products.csv", "product_units.csv", "customers.csv"]
        missing_files = [f for f in required_files if not (data_dir / f).exists()]

        if missing_files:
            raise FileNotFoundError(
                f"Required CSV files missing in {data_dir}:\n"
                f"  Missing: {', '.join(missing_files)}\n"
                f"  Expected files: {', '.join(required_files)}\n\n"
                f"Generate sample data with: python -m order_editor.data.seed_data --output-dir {data_dir}"
            )

        try:
            products = pd.read_csv(data_dir / "products.csv", dtype=_text_dtypes(PRODUCT_TEXT_COLUMNS))
            product_units = pd.read_csv(data_dir / "product_units.csv", dtype=_text_dtypes(UNIT_TEXT_COLUMNS))
            customers = pd.read_csv(data_dir / "customers.csv", dtype=_text_dtypes(CUSTOMER_TEXT_COLUMNS))

            # Order tables start empty on a fresh catalog
            orders = pd.DataFrame(columns=ORDER_COLUMNS)
            order_items = pd.DataFrame(columns=LINE_ITEM_COLUMNS)

            if (data_dir / "orders.csv").exists():
                orders = pd.read_csv(data_dir / "orders.csv", dtype=_text_dtypes(ORDER_TEXT_COLUMNS))
            if (data_dir / "order_items.csv").exists():
                order_items = pd.read_csv(data_dir / "order_items.csv", dtype=_text_dtypes(LINE_ITEM_TEXT_COLUMNS))

        except Exception as e:
            raise RuntimeError(
                f"Error reading CSV files from {data_dir}: {e}\n"
                f"Please check that the CSV files are valid and readable."
            ) from e

        return _Tables(
            orders=orders,
            order_items=order_items,
            products=products,
            product_units=product_units,
            customers=customers,
        )

    def _persist(self) -> None:
        if not self.persist:
            return
        self._tables.orders.to_csv(self.data_dir / "orders.csv", index=False)
        self._tables.order_items.to_csv(self.data_dir / "order_items.csv", index=False)

    @staticmethod
    def _append(df: pd.DataFrame, row: Dict[str, Any], columns: List[str]) -> pd.DataFrame:
        new = pd.DataFrame([row], columns=columns)
        if df.empty:
            return new
        return pd.concat([df, new], ignore_index=True)

    @staticmethod
    def _next_id(df: pd.DataFrame, col: str = "id") -> int:
        if df.empty:
            return 1
        return max(int(df[col].max()), 0) + 1

    # ---------- row <-> model ----------

    @staticmethod
    def _row_to_order(record: Dict[str, Any]) -> Order:
        return Order.model_validate(_clean_record(record))

    @staticmethod
    def _row_to_item(record: Dict[str, Any]) -> OrderLineItem:
        record = _clean_record(record)
        record["suggestions"] = _load_json_list(record.get("suggestions"))
        return OrderLineItem.model_validate(record)

    @staticmethod
    def _item_to_row(item: OrderLineItem) -> Dict[str, Any]:
        row = item.model_dump(mode="json")
        row["suggestions"] = json.dumps(row["suggestions"], ensure_ascii=False)
        return row

    # ---------- order helpers ----------

    def _find_order(self, order_id: int) -> Optional[Order]:
        df = self._tables.orders
        rows = df[df["id"] == order_id]
        if rows.empty:
            return None
        return self._row_to_order(rows.to_dict(orient="records")[0])

    def _require_order(self, order_id: int) -> Order:
        order = self._find_order(order_id)
        if order is None:
            raise StoreError(f"Order {order_id} not found")
        return order

    def _write_order(self, order: Order) -> None:
        df = self._tables.orders
        df = df[df["id"] != order.id]
        self._tables.orders = self._append(df, order.model_dump(mode="json"), ORDER_COLUMNS)

    def _items_for(self, order_id: int) -> List[OrderLineItem]:
        df = self._tables.order_items
        rows = df[df["order_id"] == order_id].sort_values("id")
        return [self._row_to_item(r) for r in rows.to_dict(orient="records")]

    def _write_item(self, item: OrderLineItem) -> None:
        df = self._tables.order_items
        df = df[df["id"] != item.id]
        self._tables.order_items = self._append(df, self._item_to_row(item), LINE_ITEM_COLUMNS)

    # ---------- order store implementation ----------

    async def get_draft_order(self, order_id: int) -> Optional[Order]:
        order = self._find_order(order_id)
        if order is None or not order.is_draft:
            self.logger.debug(f"No draft order with id {order_id}")
            return None
        return order

    async def create_temp_order(self) -> Order:
        df = self._tables.orders
        temps = df[df["flag"] == int(OrderFlag.TEMP)]
        # A cancelled or already handed over temp order is never reopened
        temps = temps[~temps["approve_flag"].isin([int(f) for f in NON_CANCELLABLE_FLAGS])]
        if not temps.empty:
            # Latest temp order wins; an unfinished session is resumed
            latest = temps.sort_values("id").to_dict(orient="records")[-1]
            order = self._row_to_order(latest)
            self.logger.info(f"Resuming temp order {order.id}")
            return order

        now = datetime.now()
        order = Order(
            id=self._next_id(df),
            uuid=uuid4().hex,
            salesman_id=self.salesman_id,
            date_time=now,
            flag=OrderFlag.TEMP,
            created_at=now,
            updated_at=now,
        )
        self._write_order(order)
        self._persist()
        self.logger.info(f"Created temp order {order.id}")
        return order

    async def set_customer(self, order_id: int, customer_id: int, customer_name: str) -> None:
        order = self._require_order(order_id)
        self._write_order(order.model_copy(update={
            "customer_id": customer_id,
            "customer_name": customer_name,
            "updated_at": datetime.now(),
        }))
        for item in self._items_for(order_id):
            self._write_item(item.model_copy(update={"customer_id": customer_id}))
        self._persist()

    async def set_note(self, order_id: int, note: str) -> None:
        order = self._require_order(order_id)
        self._write_order(order.model_copy(update={"note": note, "updated_at": datetime.now()}))
        self._persist()

    async def list_line_items(self, order_id: int) -> List[OrderLineItem]:
        return self._items_for(order_id)

    async def add_line_item(self, item: OrderLineItem) -> OrderLineItem:
        self._require_order(item.order_id)
        now = datetime.now()
        created = item.model_copy(update={
            "id": self._next_id(self._tables.order_items),
            "created_at": item.created_at or now,
            "updated_at": item.updated_at or now,
        })
        self._write_item(created)
        self._persist()
        self.logger.debug(f"Added line item {created.id} to order {created.order_id}")
        return created

    async def upsert_line_item(self, item: OrderLineItem) -> OrderLineItem:
        df = self._tables.order_items
        if item.id == UNSET_ID or df[df["id"] == item.id].empty:
            return await self.add_line_item(item)
        self._require_order(item.order_id)
        self._write_item(item)
        self._persist()
        self.logger.debug(f"Updated line item {item.id} of order {item.order_id}")
        return item

    async def delete_line_item(self, line_id: int) -> None:
        df = self._tables.order_items
        if df[df["id"] == line_id].empty:
            raise StoreError(f"Line item {line_id} not found")
        self._tables.order_items = df[df["id"] != line_id].reset_index(drop=True)
        self._persist()
        self.logger.debug(f"Deleted line item {line_id}")

    async def save_draft(self, order_id: int, freight: float, total: float) -> Order:
        order = self._require_order(order_id)
        draft = order.model_copy(update={
            "freight_charge": freight,
            "total": total,
            "flag": OrderFlag.DRAFT,
            "updated_at": datetime.now(),
        })
        self._write_order(draft)
        self._persist()
        self.logger.info(f"Saved order {order_id} as draft (freight={freight:.2f}, total={total:.2f})")
        return draft

    async def submit(
        self,
        order_id: int,
        freight: float,
        total: float,
        storekeeper_id: int = UNSET_ID,
    ) -> Order:
        order = self._require_order(order_id)
        if not order.has_customer:
            raise StoreError("Please select a customer!")
        items = self._items_for(order_id)
        if not items:
            raise StoreError("Cannot send an order without items")

        now = datetime.now()
        orders = self._tables.orders
        submitted = order.model_copy(update={
            "id": self._next_id(orders),
            "server_id": self._next_id(orders, "server_id"),
            "storekeeper_id": storekeeper_id,
            "freight_charge": freight,
            "total": total,
            "approve_flag": OrderApprovalFlag.NEW_ORDER,
            "flag": OrderFlag.ACTIVE,
            "date_time": now,
            "updated_at": now,
        })
        self._write_order(submitted)

        next_line_id = self._next_id(self._tables.order_items)
        next_line_server_id = self._next_id(self._tables.order_items, "server_id")
        for offset, item in enumerate(items):
            self._write_item(item.model_copy(update={
                "id": next_line_id + offset,
                "server_id": next_line_server_id + offset,
                "order_id": submitted.id,
                "customer_id": submitted.customer_id,
                "storekeeper_id": storekeeper_id,
                "flag": LineItemFlag.ACTIVE,
                "date_time": now,
            }))
        self._persist()
        self.logger.info(
            f"Submitted order {order_id} as {submitted.server_id} "
            f"with {len(items)} items (storekeeper={storekeeper_id})"
        )
        return submitted

    async def cancel(self, order: Order) -> Order:
        current = self._require_order(order.id)
        if current.approve_flag in NON_CANCELLABLE_FLAGS:
            raise StoreError("Order can no longer be cancelled")
        cancelled = current.model_copy(update={
            "approve_flag": OrderApprovalFlag.CANCELLED,
            "updated_at": datetime.now(),
        })
        self._write_order(cancelled)
        self._persist()
        self.logger.info(f"Cancelled order {order.id}")
        return cancelled

    async def delete_order_and_items(self, order_id: int) -> None:
        self._require_order(order_id)
        items = self._tables.order_items
        self._tables.order_items = items[items["order_id"] != order_id].reset_index(drop=True)
        orders = self._tables.orders
        self._tables.orders = orders[orders["id"] != order_id].reset_index(drop=True)
        self._persist()
        self.logger.info(f"Deleted order {order_id} and its items")

    # ---------- product catalog implementation ----------

    async def get_product(self, product_id: int) -> Optional[Product]:
        products = self._tables.products
        rows = products[products["product_id"] == product_id]
        if rows.empty:
            return None
        record = _clean_record(rows.to_dict(orient="records")[0])

        units = self._tables.product_units
        unit_rows = units[units["product_id"] == product_id].sort_values("unit_id")
        record["units"] = [
            ProductUnit.model_validate(_clean_record(u)) for u in unit_rows.to_dict(orient="records")
        ]
        return Product.model_validate(record)

    async def list_customers(self, search: str = "") -> List[Customer]:
        df = self._tables.customers
        if df.empty:
            return []
        if search and search.strip():
            s = search.strip().lower()
            mask = df["name"].str.lower().str.contains(s, na=False, regex=False)
            mask |= df["code"].str.lower().str.contains(s, na=False, regex=False)
            df = df[mask]
        df = df.sort_values("name")
        return [Customer.model_validate(_clean_record(r)) for r in df.to_dict(orient="records")]
