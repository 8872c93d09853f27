import pytest
from order_editor.config import get_config, set_config_for_test
from order_editor.data.util import get_order_store

def test_store_built_from_config(data_dir):
    set_config_for_test(log_level="WARNING", data_dir=str(data_dir), persist_changes=False, salesman_id=12)
    store = get_order_store()
    assert store.data_dir == data_dir
    assert store.persist is False
    assert store.salesman_id == 12

def test_unknown_store_kind():
    with pytest.raises(ValueError):
        get_order_store("sqlite")

def test_config_reads_environment(monkeypatch):
    monkeypatch.setenv("DEFAULT_FREIGHT_TEXT", "5.00")
    set_config_for_test()
    assert get_config().default_freight_text == "5.00"
