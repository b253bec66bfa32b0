"""Payment plan conditions and the metrics they are evaluated against."""

from __future__ import annotations

import operator as _op
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Optional

_MAX_QUANTITY = 2**64 - 1

_DEVELOPERS_COUNT_PATTERN = re.compile(
    r"(?P<operator>>=|<=|<|>|=) (?P<quantity>[0-9]+)"
)
_CURRENT_TIME_PATTERN = re.compile(r"(?P<operator>>=|<=|<|>|=) (?P<time>.*)")
_RFC3339_PATTERN = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))"
)


@dataclass
class Metrics:
    """User supplied metrics that plan conditions are checked against."""

    developers_count: Optional[int] = None


class Operator(Enum):
    """Comparison operator used in a condition value."""

    GREATER_THAN_EQUAL = ">="
    GREATER_THAN = ">"
    LESS_THAN_EQUAL = "<="
    LESS_THAN = "<"
    EQUAL = "="


_COMPARISONS = {
    Operator.GREATER_THAN_EQUAL: _op.ge,
    Operator.GREATER_THAN: _op.gt,
    Operator.LESS_THAN_EQUAL: _op.le,
    Operator.LESS_THAN: _op.lt,
    Operator.EQUAL: _op.eq,
}


class Condition(Enum):
    """Kinds of condition a payment plan may carry."""

    DEVELOPERS_COUNT = "developers-count"
    CURRENT_TIME = "current-time"


def parse_operator(value: str) -> Operator:
    """Parse one of ``>=``, ``>``, ``<=``, ``<`` or ``=``."""
    try:
        return Operator(value)
    except ValueError:
        raise ValueError(f"Unknown operator: {value}") from None


def evaluate_operator(variable_value: Any, operator: Operator, condition_value: Any) -> bool:
    """Compare ``variable_value`` against ``condition_value`` with ``operator``."""
    return bool(_COMPARISONS[operator](variable_value, condition_value))


def evaluate_developers_count(value: str, metrics: Metrics) -> bool:
    """Evaluate a condition such as ``<= 100`` against the developers count."""
    match = _DEVELOPERS_COUNT_PATTERN.search(value)
    if match is None:
        raise ValueError("Regex failed to capture field.")
    operator = parse_operator(match.group("operator"))
    quantity = int(match.group("quantity"))
    if quantity > _MAX_QUANTITY:
        raise ValueError(f"Failed to parse quantity: {value}")
    if metrics.developers_count is None:
        raise ValueError(
            "Attempting to evaluate condition but the `developers-count` metric is unset."
        )
    return evaluate_operator(metrics.developers_count, operator, quantity)


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339_PATTERN.fullmatch(text)
    if match is None:
        raise ValueError(f"Invalid RFC 3339 timestamp: {text}")
    year, month, day, hour, minute, second, fraction, zulu, sign, off_h, off_m = match.groups()
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))
    try:
        if zulu:
            tz = timezone.utc
        else:
            offset = timedelta(hours=int(off_h), minutes=int(off_m))
            tz = timezone(-offset if sign == "-" else offset)
        moment = datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), microsecond, tzinfo=tz,
        )
    except ValueError as error:
        raise ValueError(f"Invalid RFC 3339 timestamp: {text}") from error
    return moment.astimezone(timezone.utc)


def evaluate_current_time(value: str, now: Optional[datetime] = None) -> bool:
    """Evaluate a condition such as ``< 2030-01-01T00:00:00Z`` against ``now``.

    ``now`` defaults to the current UTC time.
    """
    match = _CURRENT_TIME_PATTERN.search(value)
    if match is None:
        raise ValueError("Regex failed to capture field.")
    operator = parse_operator(match.group("operator"))
    time = _parse_rfc3339(match.group("time"))
    current = now if now is not None else datetime.now(timezone.utc)
    return evaluate_operator(current, operator, time)


def evaluate(condition: Condition, value: str, metrics: Metrics) -> bool:
    """Evaluate a single plan condition."""
    if condition is Condition.DEVELOPERS_COUNT:
        return evaluate_developers_count(value, metrics)
    if condition is Condition.CURRENT_TIME:
        return evaluate_current_time(value)
    raise ValueError(f"Unknown condition: {condition}")