#!/usr/bin/env python3
"""
seed_data.py

Generates a fake wholesale catalog to CSVs under a local folder (default: sample_data).
Order tables are written with headers only; orders are created through the editor.

Entities:
- products, product_units, customers, orders (empty), order_items (empty)

Run:
  python -m order_editor.data.seed_data --products 40 --customers 25
"""

from __future__ import annotations
import argparse
import csv
import os
import random
import string
import sys
from typing import Dict, List, Optional

from ..config import get_config
from .backends.csv_backend import LINE_ITEM_COLUMNS, ORDER_COLUMNS

# -----------------------------
# Catalog vocabulary
# -----------------------------

BRANDS = ["Bosch", "Denso", "Lumax", "Minda", "Valeo", "Hella", "Mahle", "Exide"]

PRODUCT_KINDS = [
    "Brake Pad", "Oil Filter", "Air Filter", "Spark Plug", "Head Lamp",
    "Wiper Blade", "Clutch Plate", "Fuel Pump", "Battery", "Horn",
]

# (name, base quantity) per derived unit; "Nos" is always the base unit
DERIVED_UNITS = [("Box", 10.0), ("Case", 24.0), ("Set", 4.0)]

CUSTOMER_WORDS = ["Auto", "Motors", "Spares", "Garage", "Traders", "Agencies", "Works"]
CITIES = ["Kochi", "Thrissur", "Calicut", "Kannur", "Kollam", "Palakkad"]


# -----------------------------
# Utility functions
# -----------------------------

def ensure_dir(path: str) -> None:
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)

def rand_code(prefix: str, k: int = 6) -> str:
    return prefix + "".join(random.choices(string.ascii_uppercase + string.digits, k=k))

def price_round(p: float) -> float:
    return round(max(p, 0.01), 2)


# -----------------------------
# Core generators
# -----------------------------

def gen_products(n: int) -> List[Dict]:
    products = []
    for product_id in range(1, n + 1):
        kind = random.choice(PRODUCT_KINDS)
        brand = random.choice(BRANDS)
        price = price_round(random.uniform(40.0, 2500.0))
        products.append({
            "product_id": product_id,
            "name": f"{brand} {kind} {random.randint(100, 999)}",
            "code": rand_code("P"),
            "brand": brand,
            "base_unit_id": 1,
            "default_unit_id": 1,
            "price": price,
            "mrp": price_round(price * random.uniform(1.05, 1.4)),
            "note": "",
        })
    return products

def gen_product_units(products: List[Dict]) -> List[Dict]:
    units = []
    for p in products:
        units.append({
            "product_id": p["product_id"],
            "unit_id": 1,
            "name": "Nos",
            "display_name": "Numbers",
            "base_qty": 1.0,
        })
        # each product gets zero to two packed units
        for unit_id, (name, base_qty) in enumerate(random.sample(DERIVED_UNITS, k=random.randint(0, 2)), start=2):
            units.append({
                "product_id": p["product_id"],
                "unit_id": unit_id,
                "name": name,
                "display_name": f"{name} of {int(base_qty)}",
                "base_qty": base_qty,
            })
    return units

def gen_customers(n: int) -> List[Dict]:
    customers = []
    for i in range(1, n + 1):
        city = random.choice(CITIES)
        customers.append({
            "customer_id": i,
            "name": f"{city} {random.choice(CUSTOMER_WORDS)} {i:03d}",
            "code": rand_code("C", k=4),
            "phone": "9" + "".join(random.choices(string.digits, k=9)),
            "address": f"{random.randint(1, 250)} Market Road, {city}",
        })
    return customers


# -----------------------------
# CSV writer
# -----------------------------

def write_csv(path: str, rows: List[Dict], headers: List[str]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=headers)
        w.writeheader()
        for r in rows:
            w.writerow(r)


# -----------------------------
# Main
# -----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    config = get_config()

    parser = argparse.ArgumentParser(description="Generate a fake product catalog and customers to CSVs.")
    parser.add_argument("--products", type=int, default=config.default_seed_products)
    parser.add_argument("--customers", type=int, default=config.default_seed_customers)
    parser.add_argument("--output-dir", type=str, default=config.data_dir)
    parser.add_argument("--seed", type=int, default=config.default_seed_value)
    parser.add_argument("--no-overwrite", action="store_true", help="Fail if CSVs already exist.")
    args = parser.parse_args(argv)

    random.seed(args.seed)

    outdir = args.output_dir
    ensure_dir(outdir)

    files = {
        "products": os.path.join(outdir, "products.csv"),
        "product_units": os.path.join(outdir, "product_units.csv"),
        "customers": os.path.join(outdir, "customers.csv"),
        "orders": os.path.join(outdir, "orders.csv"),
        "order_items": os.path.join(outdir, "order_items.csv"),
    }
    if args.no_overwrite:
        for p in files.values():
            if os.path.exists(p):
                print(f"Refusing to overwrite existing file: {p}", file=sys.stderr)
                return 2

    products = gen_products(args.products)
    units = gen_product_units(products)
    customers = gen_customers(args.customers)

    write_csv(files["products"], products,
              ["product_id", "name", "code", "brand", "base_unit_id", "default_unit_id", "price", "mrp", "note"])
    write_csv(files["product_units"], units,
              ["product_id", "unit_id", "name", "display_name", "base_qty"])
    write_csv(files["customers"], customers,
              ["customer_id", "name", "code", "phone", "address"])
    write_csv(files["orders"], [], ORDER_COLUMNS)
    write_csv(files["order_items"], [], LINE_ITEM_COLUMNS)

    print(f"Generated data in {outdir}")
    print(f" products: {len(products)} | units: {len(units)} | customers: {len(customers)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
