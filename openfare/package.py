"""Packages and the OpenFare locks found for them and their dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from openfare.lock.plan import Lock


@dataclass(frozen=True, order=True)
class Package:
    """A software package's name and version."""

    name: str
    version: str


@dataclass
class PackageLocks:
    """Locks for a primary package and for each of its dependencies."""

    primary_package: Optional[Package] = None
    primary_package_lock: Optional[Lock] = None
    dependencies_locks: Dict[Package, Optional[Lock]] = field(default_factory=dict)

    def has_locks(self) -> bool:
        """True if a primary lock is present or any dependency is listed."""
        return self.primary_package_lock is not None or bool(self.dependencies_locks)