from order_editor.config import set_config_for_test
from order_editor.logging import get_logger

def test_lines_carry_bound_name(capsys):
    set_config_for_test(log_level="INFO")
    get_logger("order_editor.editor.controller").info("order 7 saved")
    out = capsys.readouterr().out
    assert "order_editor.editor.controller" in out
    assert "order 7 saved" in out

def test_unnamed_logger_uses_package_name(capsys):
    set_config_for_test(log_level="INFO")
    get_logger().info("hello")
    assert "order_editor:" in capsys.readouterr().out

def test_level_filters_lines(capsys):
    set_config_for_test(log_level="WARNING")
    get_logger("x").info("hidden")
    assert "hidden" not in capsys.readouterr().out
