"""Payment plans and the OpenFare lock that holds them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from openfare.lock.conditions import Condition, Metrics, evaluate
from openfare.lock.frequency import Frequency, parse_frequency
from openfare.lock.payee import Payee
from openfare.lock.price import Price, parse_price

_CONDITION_ORDER = {condition: index for index, condition in enumerate(Condition)}


def _require(data: Any, key: str, kind: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"Expected an object for {kind}.")
    if key not in data:
        raise ValueError(f"Missing field '{key}' in {kind}.")
    return data[key]


def _require_str(data: Any, key: str, kind: str) -> str:
    value = _require(data, key, kind)
    if not isinstance(value, str):
        raise ValueError(f"Expected a string for field '{key}' in {kind}.")
    return value


@dataclass
class Split:
    """How a payment is shared: named parts plus a remainder payee."""

    remainder: str
    parts: Optional[Dict[str, str]] = None

    @classmethod
    def _from_dict(cls, data: Any) -> "Split":
        remainder = _require_str(data, "remainder", "split")
        parts = data.get("parts")
        if parts is not None:
            if not isinstance(parts, Mapping) or not all(
                isinstance(v, str) for v in parts.values()
            ):
                raise ValueError("Expected an object of strings for field 'parts' in split.")
            parts = dict(parts)
        return cls(remainder=remainder, parts=parts)

    def _to_dict(self) -> Dict[str, Any]:
        parts = None if self.parts is None else {k: self.parts[k] for k in sorted(self.parts)}
        return {"parts": parts, "remainder": self.remainder}


@dataclass
class Payments:
    """The price, frequency and split of a plan's payments."""

    total: Price
    frequency: Frequency
    split: Split

    @classmethod
    def _from_dict(cls, data: Any) -> "Payments":
        return cls(
            total=parse_price(_require_str(data, "total", "payments")),
            frequency=parse_frequency(_require_str(data, "frequency", "payments")),
            split=Split._from_dict(_require(data, "split", "payments")),
        )

    def _to_dict(self) -> Dict[str, Any]:
        return {
            "total": str(self.total),
            "frequency": str(self.frequency),
            "split": self.split._to_dict(),
        }


@dataclass
class PaymentPlan:
    """A payment plan that applies when all of its conditions hold."""

    id: str
    conditions: Dict[Condition, str]
    payments: Payments

    def is_applicable(self, metrics: Metrics) -> bool:
        """Return True if every condition holds; every condition is evaluated."""
        all_pass = True
        for condition in sorted(self.conditions, key=_CONDITION_ORDER.__getitem__):
            all_pass &= evaluate(condition, self.conditions[condition], metrics)
        return all_pass

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PaymentPlan":
        plan_id = _require_str(data, "id", "plan")
        raw_conditions = _require(data, "conditions", "plan")
        if not isinstance(raw_conditions, Mapping):
            raise ValueError("Expected an object for field 'conditions' in plan.")
        conditions: Dict[Condition, str] = {}
        for key, value in raw_conditions.items():
            try:
                condition = Condition(key)
            except ValueError:
                raise ValueError(f"Unknown condition: {key}") from None
            if not isinstance(value, str):
                raise ValueError(f"Expected a string value for condition '{key}'.")
            conditions[condition] = value
        payments = Payments._from_dict(_require(data, "payments", "plan"))
        return cls(id=plan_id, conditions=conditions, payments=payments)

    def to_dict(self) -> Dict[str, Any]:
        ordered = sorted(self.conditions, key=_CONDITION_ORDER.__getitem__)
        return {
            "id": self.id,
            "conditions": {c.value: self.conditions[c] for c in ordered},
            "payments": self.payments._to_dict(),
        }


@dataclass
class Lock:
    """A package's OpenFare lock file (OPENFARE.lock)."""

    plans: List[PaymentPlan] = field(default_factory=list)
    payees: Dict[str, Payee] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Lock":
        raw_plans = _require(data, "plans", "lock")
        if not isinstance(raw_plans, list):
            raise ValueError("Expected a list for field 'plans' in lock.")
        raw_payees = _require(data, "payees", "lock")
        if not isinstance(raw_payees, Mapping):
            raise ValueError("Expected an object for field 'payees' in lock.")
        return cls(
            plans=[PaymentPlan.from_dict(plan) for plan in raw_plans],
            payees={name: Payee.from_dict(payee) for name, payee in raw_payees.items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "plans": [plan.to_dict() for plan in self.plans],
            "payees": {name: self.payees[name].to_dict() for name in sorted(self.payees)},
        }