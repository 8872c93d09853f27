from __future__ import annotations

import math
from typing import Iterable

from ..data.models import OrderLineItem


def parse_freight(text: str | None) -> float:
    """Parse the freight field. Empty, non-numeric or non-finite input counts as 0."""
    try:
        value = float((text or "").strip())
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def calculate_total(items: Iterable[OrderLineItem], freight_text: str | None) -> float:
    total = parse_freight(freight_text)
    for item in items:
        total += item.amount
    return round(total, 2)


def format_amount(value: float) -> str:
    return f"{value:.2f}"
