from datetime import datetime, timedelta, timezone

import pytest

from openfare.lock.conditions import (
    Condition,
    Metrics,
    Operator,
    evaluate,
    evaluate_current_time,
    evaluate_developers_count,
    evaluate_operator,
    parse_operator,
)


@pytest.mark.parametrize("value", ["<= 100", "= 99", "> 98", ">= 99"])
def test_developers_count_cases(value):
    assert evaluate_developers_count(value, Metrics(developers_count=99)) is True


@pytest.mark.parametrize("value", ["< 99", "> 99", "= 100", ">= 100"])
def test_developers_count_false_cases(value):
    assert evaluate_developers_count(value, Metrics(developers_count=99)) is False


def test_developers_count_unset_metric_raises():
    with pytest.raises(ValueError, match="developers-count"):
        evaluate_developers_count("<= 100", Metrics())


def test_developers_count_bad_value_raises():
    with pytest.raises(ValueError, match="Regex failed"):
        evaluate_developers_count("around 100", Metrics(developers_count=1))


def test_current_time_ten_days_ahead():
    time = datetime.now(timezone.utc) + timedelta(days=10)
    assert evaluate_current_time(f"< {time.isoformat()}") is True


def test_current_time_with_fixed_now():
    now = datetime(2022, 1, 1, tzinfo=timezone.utc)
    assert evaluate_current_time("< 2022-06-01T00:00:00Z", now) is True
    assert evaluate_current_time(">= 2022-06-01T00:00:00Z", now) is False


def test_current_time_honours_offset():
    now = datetime(2022, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert evaluate_current_time("= 2022-01-01T14:00:00+02:00", now) is True


def test_current_time_nanosecond_fraction():
    now = datetime(2022, 1, 1, tzinfo=timezone.utc)
    assert evaluate_current_time("< 2022-01-01T00:00:00.123456789Z", now) is True


def test_current_time_invalid_timestamp_raises():
    with pytest.raises(ValueError):
        evaluate_current_time("< next tuesday")


@pytest.mark.parametrize("operator", list(Operator))
def test_parse_operator_round_trip(operator):
    assert parse_operator(operator.value) is operator


def test_parse_unknown_operator_raises():
    with pytest.raises(ValueError, match="Unknown operator: !="):
        parse_operator("!=")


@pytest.mark.parametrize(
    ("left", "operator", "right", "expected"),
    [
        (1, Operator.LESS_THAN, 2, True),
        (2, Operator.LESS_THAN, 2, False),
        (2, Operator.LESS_THAN_EQUAL, 2, True),
        (3, Operator.GREATER_THAN, 2, True),
        (2, Operator.GREATER_THAN_EQUAL, 3, False),
        (2, Operator.EQUAL, 2, True),
    ],
)
def test_evaluate_operator(left, operator, right, expected):
    assert evaluate_operator(left, operator, right) is expected


def test_evaluate_dispatches_on_condition():
    metrics = Metrics(developers_count=99)
    assert evaluate(Condition.DEVELOPERS_COUNT, "<= 100", metrics) is True
    future = (datetime.now(timezone.utc) + timedelta(days=10)).isoformat()
    assert evaluate(Condition.CURRENT_TIME, f"> {future}", metrics) is False