# tests/modules/rules/test_rules_engine.py
import pytest

from sge.modules.rules.services import check_condition, extract_metric_value, normalize_rule_value


@pytest.mark.parametrize(
    "metric,data,expected",
    [
        ("value", {"value": 1200}, 1200.0),
        ("amount", {"amount": "350.5"}, 350.5),
        ("value", {}, 0.0),
        ("score", {"score": 40}, 40.0),
        ("status", {"status": "inactive"}, "inactive"),
        ("status", {}, None),
        ("margin", {"value": 10}, None),
    ],
)
def test_extract_metric_value(metric, data, expected):
    assert extract_metric_value(metric, data) == expected


def test_ordering_operators_compare_numbers():
    assert check_condition(6000, ">", 5000) is True
    assert check_condition(5000, ">", 5000) is False
    assert check_condition(5000, ">=", "5000") is True
    assert check_condition(10, "<", 20) is True
    assert check_condition(20, "<=", 10) is False


def test_ordering_with_non_numeric_side_never_fires():
    assert check_condition("active", ">", 10) is False
    assert check_condition(10, "<", "abc") is False


def test_loose_equality():
    assert check_condition(5000.0, "==", "5000") is True
    assert check_condition("inactive", "==", "inactive") is True
    assert check_condition("inactive", "!=", "active") is True
    assert check_condition(10, "!=", 10.0) is False


def test_unknown_operator_is_false():
    assert check_condition(10, "~=", 10) is False


def test_normalize_rule_value():
    assert normalize_rule_value("5000") == 5000.0
    assert normalize_rule_value("inactive") == "inactive"
    assert normalize_rule_value(12) == 12.0
