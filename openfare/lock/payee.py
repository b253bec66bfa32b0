"""Payees and the payment methods they accept."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Expected a string for field '{key}'.")
    return value


class PaymentMethod(ABC):
    """A way of paying a payee."""

    name: ClassVar[str]

    @abstractmethod
    def to_json(self) -> Dict[str, Any]:
        """Return the JSON object describing this payment method."""


@dataclass
class PayPal(PaymentMethod):
    """PayPal payment method identified by a PayPal ID, an e-mail, or both."""

    name: ClassVar[str] = "paypal"

    id: Optional[str] = None
    email: Optional[str] = None

    def __post_init__(self) -> None:
        if self.id is None and self.email is None:
            raise ValueError("Both id and email fields can not be none.")

    def to_json(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email}

    @classmethod
    def _from_json(cls, data: Any) -> "PayPal":
        if not isinstance(data, Mapping):
            raise ValueError("Expected an object for payment method 'paypal'.")
        return cls(id=_optional_str(data, "id"), email=_optional_str(data, "email"))


@dataclass
class BtcLightningKeysend(PaymentMethod):
    """Bitcoin lightning keysend payment to a node public key."""

    name: ClassVar[str] = "btc_lightning_keysend"

    public_key: str

    def to_json(self) -> Dict[str, Any]:
        return {"public_key": self.public_key}

    @classmethod
    def _from_json(cls, data: Any) -> "BtcLightningKeysend":
        if not isinstance(data, Mapping):
            raise ValueError("Expected an object for payment method 'btc_lightning_keysend'.")
        public_key = data.get("public_key")
        if not isinstance(public_key, str):
            raise ValueError("Missing or invalid field 'public_key'.")
        return cls(public_key=public_key)


_METHOD_TYPES = {method.name: method for method in (PayPal, BtcLightningKeysend)}


@dataclass
class Payee:
    """A payee profile holding raw payment method settings keyed by method name."""

    payment_methods: Dict[str, Any] = field(default_factory=dict)

    def get_payment_methods(self) -> List[PaymentMethod]:
        """Return the payee's payment methods, ordered by name."""
        methods: List[PaymentMethod] = []
        for name in sorted(self.payment_methods):
            method_type = _METHOD_TYPES.get(name)
            if method_type is None:
                raise ValueError(f"Unknown payment method: {name}")
            methods.append(method_type._from_json(self.payment_methods[name]))
        return methods

    def set_payment_method(self, method: PaymentMethod) -> None:
        """Add or replace the payment method with the same name."""
        self.payment_methods[method.name] = method.to_json()

    def remove_payment_method(self, name: str) -> None:
        """Remove a payment method by name; absent names are ignored."""
        self.payment_methods.pop(name, None)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Payee":
        if not isinstance(data, Mapping):
            raise ValueError("Expected an object for payee.")
        if "payment-methods" not in data:
            raise ValueError("Missing field 'payment-methods'.")
        methods = data["payment-methods"]
        if not isinstance(methods, Mapping):
            raise ValueError("Expected an object for field 'payment-methods'.")
        return cls(payment_methods=dict(methods))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "payment-methods": {
                name: self.payment_methods[name] for name in sorted(self.payment_methods)
            }
        }