import pytest
from order_editor.data.models import OrderLineItem
from order_editor.editor.totals import calculate_total, format_amount, parse_freight

@pytest.fixture
def items():
    return [
        OrderLineItem(id=1, update_rate=10.0, quantity=2),
        OrderLineItem(id=2, update_rate=5.0, quantity=1),
    ]

def test_total_includes_freight(items):
    """Line amounts plus parsed freight."""
    assert calculate_total(items, "3.50") == pytest.approx(28.50)

def test_empty_freight_counts_as_zero(items):
    assert calculate_total(items, "") == pytest.approx(25.00)

@pytest.mark.parametrize("text", ["", "   ", "abc", "1,5", "nan", "inf", None])
def test_unparseable_freight_degrades_to_zero(text):
    """Bad freight input never raises."""
    assert parse_freight(text) == 0.0

def test_freight_tolerates_surrounding_whitespace():
    assert parse_freight(" 12.25 ") == 12.25

def test_total_uses_effective_rate_not_original():
    item = OrderLineItem(id=1, rate=99.0, update_rate=4.0, quantity=3, unit_base_qty=10.0)
    assert calculate_total([item], "0") == pytest.approx(12.0)

def test_total_without_items_is_freight_only():
    assert calculate_total([], "7") == pytest.approx(7.0)

def test_format_amount_two_decimals():
    assert format_amount(3.5) == "3.50"

def test_line_amount():
    assert OrderLineItem(update_rate=2.5, quantity=4).amount == pytest.approx(10.0)
