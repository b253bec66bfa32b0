"""The user's payee profiles and which one is active."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from openfare.config import FileStore
from openfare.lock.payee import Payee
from openfare.paths import get_config_paths


@dataclass
class Payees(FileStore):
    """Named payee profiles, one of which may be active."""

    active_name: str = ""
    payees: Dict[str, Payee] = field(default_factory=dict)

    @classmethod
    def file_path(cls) -> Path:
        return get_config_paths().payees_file

    def add(self, name: str) -> None:
        """Add an empty payee profile."""
        if name in self.payees:
            raise ValueError(f"Payee with given name already exists: {name}")
        self.payees[name] = Payee()

    def remove(self, name: str) -> None:
        """Remove a profile; if it was active, the first remaining one becomes active."""
        if name not in self.payees:
            raise ValueError(f"Failed to remove unknown payee: {name}")
        del self.payees[name]
        if name == self.active_name:
            self.active_name = min(self.payees, default="")

    def activate(self, name: str) -> None:
        """Make an existing profile the active one."""
        if name not in self.payees:
            raise ValueError(f"Payee does not exist. Can not set active payee: {name}")
        self.active_name = name

    def rename(self, old_name: str, new_name: str) -> None:
        """Rename a profile, keeping it active if it was."""
        if new_name in self.payees:
            raise ValueError(f"Target payee profile name already exists: {new_name}")
        if old_name not in self.payees:
            raise ValueError(f"Can't find payee profile named: {old_name}")
        self.payees[new_name] = self.payees.pop(old_name)
        if self.active_name == old_name:
            self.active_name = new_name

    def active(self) -> Optional[Tuple[str, Payee]]:
        """Return the active profile's name and payee, or None if there are no profiles."""
        if not self.payees:
            return None
        payee = self.payees.get(self.active_name)
        if payee is None:
            raise ValueError(f"Code error failed to find active payee: {self.active_name}")
        return self.active_name, payee

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Payees":
        if not isinstance(data, Mapping):
            raise ValueError("Expected an object for payees.")
        for key in ("active", "payees"):
            if key not in data:
                raise ValueError(f"Missing field '{key}' in payees.")
        active = data["active"]
        if not isinstance(active, str):
            raise ValueError("Expected a string for field 'active' in payees.")
        raw = data["payees"]
        if not isinstance(raw, Mapping):
            raise ValueError("Expected an object for field 'payees' in payees.")
        return cls(
            active_name=active,
            payees={name: Payee.from_dict(payee) for name, payee in raw.items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "active": self.active_name,
            "payees": {name: self.payees[name].to_dict() for name in sorted(self.payees)},
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)