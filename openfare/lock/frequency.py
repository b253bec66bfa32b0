"""Payment frequencies such as ``30 days``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_FREQUENCY_PATTERN = re.compile(r"([0-9]+) ([a-z]+)")
_MAX_QUANTITY = 2**64 - 1


class Unit(Enum):
    """Time unit of a payment frequency."""

    HOURS = "hours"
    DAYS = "days"
    MONTHS = "months"
    YEARS = "years"
    ONCE = "once"


@dataclass(frozen=True)
class Frequency:
    """How often a payment is due."""

    quantity: int
    unit: Unit

    def __str__(self) -> str:
        return f"{self.quantity} {self.unit.value}"


def parse_frequency(text: str) -> Frequency:
    """Parse a frequency written as ``<quantity> <unit>``, e.g. ``30 days``."""
    match = _FREQUENCY_PATTERN.search(text)
    if match is None:
        raise ValueError(f"No regex captures found: {text}")
    quantity = int(match.group(1))
    if quantity > _MAX_QUANTITY:
        raise ValueError(f"Failed to parse quantity: {text}")
    try:
        unit = Unit(match.group(2))
    except ValueError:
        raise ValueError(f"Failed to parse unit: {text}") from None
    return Frequency(quantity=quantity, unit=unit)