import asyncio
import inspect
from pathlib import Path

import pytest

from order_editor.config import set_config_for_test
from order_editor.data.backends.csv_backend import CsvOrderStore
from order_editor.data.models import Customer
from order_editor.data.seed_data import write_csv
from order_editor.errors import StoreError

PRODUCTS = [
    {"product_id": 1, "name": "Bosch Brake Pad 210", "code": "P0001", "brand": "Bosch",
     "base_unit_id": 1, "default_unit_id": 1, "price": 10.0, "mrp": 12.0, "note": ""},
    {"product_id": 2, "name": "Denso Spark Plug 118", "code": "P0002", "brand": "Denso",
     "base_unit_id": 1, "default_unit_id": 1, "price": 5.0, "mrp": 6.5, "note": ""},
]
PRODUCT_UNITS = [
    {"product_id": 1, "unit_id": 1, "name": "Nos", "display_name": "Numbers", "base_qty": 1.0},
    {"product_id": 1, "unit_id": 2, "name": "Box", "display_name": "Box of 10", "base_qty": 10.0},
    {"product_id": 2, "unit_id": 1, "name": "Nos", "display_name": "Numbers", "base_qty": 1.0},
]
CUSTOMERS = [
    {"customer_id": 1, "name": "Kochi Auto 001", "code": "C001", "phone": "9000000001", "address": "1 Market Road, Kochi"},
    {"customer_id": 2, "name": "Thrissur Motors 002", "code": "C002", "phone": "9000000002", "address": "2 Market Road, Thrissur"},
]


class RecordingStore:
    """Delegates to a real store, recording calls; can fail or hold chosen methods."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = []
        self.failures = {}
        self.gates = {}

    def fail(self, method, message="Store unavailable"):
        self.failures[method] = message

    def __getattr__(self, name):
        attr = getattr(self.inner, name)
        if name.startswith("_") or not inspect.iscoroutinefunction(attr):
            return attr

        async def wrapper(*args, **kwargs):
            self.calls.append(name)
            gate = self.gates.get(name)
            if gate is not None:
                await gate.wait()
            if name in self.failures:
                raise StoreError(self.failures[name])
            return await attr(*args, **kwargs)

        return wrapper


@pytest.fixture(autouse=True)
def quiet_config(tmp_path):
    set_config_for_test(log_level="WARNING", data_dir=str(tmp_path / "data"))
    yield


@pytest.fixture
def data_dir(tmp_path) -> Path:
    path = tmp_path / "data"
    path.mkdir(exist_ok=True)
    write_csv(str(path / "products.csv"), PRODUCTS, list(PRODUCTS[0]))
    write_csv(str(path / "product_units.csv"), PRODUCT_UNITS, list(PRODUCT_UNITS[0]))
    write_csv(str(path / "customers.csv"), CUSTOMERS, list(CUSTOMERS[0]))
    return path


@pytest.fixture
def store(data_dir) -> CsvOrderStore:
    return CsvOrderStore(data_dir=data_dir)


@pytest.fixture
def recording_store(store) -> RecordingStore:
    return RecordingStore(store)


@pytest.fixture
def customer() -> Customer:
    return Customer(customer_id=1, name="Kochi Auto 001", code="C001")
