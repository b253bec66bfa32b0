"""Prices such as ``50 USD`` and the currencies they are quoted in."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_PRICE_PATTERN = re.compile(r"([0-9]+) ([A-Z]+)")
_MAX_QUANTITY = 2**64 - 1


class Currency(Enum):
    """Supported currencies. USD is the default."""

    USD = "USD"
    BTC = "BTC"

    def __str__(self) -> str:
        return self.value


def parse_currency(value: str) -> Currency:
    """Parse a currency code, ignoring case."""
    code = value.upper()
    try:
        return Currency(code)
    except ValueError:
        raise ValueError(f"Unknown currency: {code}") from None


@dataclass(frozen=True)
class Price:
    """A whole quantity of some currency."""

    quantity: int
    currency: Currency = Currency.USD

    def __str__(self) -> str:
        return f"{self.quantity} {self.currency.value}"


def parse_price(text: str) -> Price:
    """Parse a price written as ``<quantity> <CURRENCY>``, e.g. ``50 USD``."""
    match = _PRICE_PATTERN.search(text)
    if match is None:
        raise ValueError(f"No regex captures found: {text}")
    quantity = int(match.group(1))
    if quantity > _MAX_QUANTITY:
        raise ValueError(f"Failed to parse quantity: {text}")
    try:
        currency = Currency(match.group(2))
    except ValueError:
        raise ValueError(f"Failed to parse currency: {text}") from None
    return Price(quantity=quantity, currency=currency)