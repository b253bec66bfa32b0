"""OpenFare settings and the JSON file store they are kept in."""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Pattern, TypeVar, Union

from openfare.lock.conditions import Metrics
from openfare.lock.price import Currency, parse_currency
from openfare.paths import get_config_paths

PathLike = Union[str, Path]
S = TypeVar("S", bound="FileStore")

_MAX_QUANTITY = 2**64 - 1
_CORE_PATTERN = re.compile(r"core\.(.*)")
_EXTENSIONS_PATTERN = re.compile(r"extensions\.enabled\.(.*)")
_METRICS_PATTERN = re.compile(r"metrics\.(.*)")
_UNSIGNED_PATTERN = re.compile(r"\+?[0-9]+")


def bool_from_string(value: str) -> bool:
    """Parse exactly ``true`` or ``false``."""
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"Expected value: `true` or `false`. Found: {value}")


class FileStore(ABC):
    """An object kept as a pretty printed JSON file."""

    @classmethod
    @abstractmethod
    def file_path(cls) -> Path:
        """Default location of the store's file."""

    @classmethod
    @abstractmethod
    def from_dict(cls: type[S], data: Mapping[str, Any]) -> S:
        """Build the object from its JSON form."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Return the object's JSON form."""

    @classmethod
    def load(cls: type[S], path: Optional[PathLike] = None) -> S:
        """Read the store, first writing a default one if the file is missing."""
        target = Path(path) if path is not None else cls.file_path()
        if not target.is_file():
            cls().dump(target)
        with target.open(encoding="utf-8") as handle:
            data = json.load(handle)
        return cls.from_dict(data)

    def dump(self, path: Optional[PathLike] = None) -> None:
        """Write the store, replacing any existing file."""
        target = Path(path) if path is not None else self.file_path()
        text = json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
        if target.is_file():
            target.unlink()
        try:
            with target.open("w", encoding="utf-8") as handle:
                handle.write(text)
        except OSError as error:
            raise OSError(f"Can't open/create file for writing: {target}") from error


def _require(data: Any, key: str, kind: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"Expected an object for {kind}.")
    if key not in data:
        raise ValueError(f"Missing field '{key}' in {kind}.")
    return data[key]


def _field(pattern: Pattern[str], name: str) -> str:
    match = pattern.search(name)
    if match is None:
        raise ValueError(f"Unknown setting field name: {name}")
    return match.group(1)


def _parse_unsigned(value: str) -> int:
    if not _UNSIGNED_PATTERN.fullmatch(value) or int(value) > _MAX_QUANTITY:
        raise ValueError(f"Invalid unsigned integer: {value}")
    return int(value)


@dataclass
class Core:
    """Core settings."""

    preferred_currency: Currency = Currency.USD

    @classmethod
    def _from_dict(cls, data: Any) -> "Core":
        raw = _require(data, "preferred-currency", "core")
        try:
            return cls(preferred_currency=Currency(raw))
        except ValueError:
            raise ValueError(f"Unknown currency: {raw}") from None

    def _to_dict(self) -> Dict[str, Any]:
        return {"preferred-currency": self.preferred_currency.value}


@dataclass
class Extensions:
    """Which extensions are enabled and which extension handles each registry."""

    enabled: Dict[str, bool] = field(default_factory=dict)
    registries: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def _from_dict(cls, data: Any) -> "Extensions":
        enabled = _require(data, "enabled", "extensions")
        registries = _require(data, "registries", "extensions")
        if not isinstance(enabled, Mapping) or not all(
            isinstance(v, bool) for v in enabled.values()
        ):
            raise ValueError("Expected an object of booleans for field 'enabled'.")
        if not isinstance(registries, Mapping) or not all(
            isinstance(v, str) for v in registries.values()
        ):
            raise ValueError("Expected an object of strings for field 'registries'.")
        return cls(enabled=dict(enabled), registries=dict(registries))

    def _to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": {k: self.enabled[k] for k in sorted(self.enabled)},
            "registries": {k: self.registries[k] for k in sorted(self.registries)},
        }


def _metrics_from_dict(data: Any) -> Metrics:
    if not isinstance(data, Mapping):
        raise ValueError("Expected an object for metrics.")
    count = data.get("developers-count")
    if count is not None and (
        isinstance(count, bool) or not isinstance(count, int) or not 0 <= count <= _MAX_QUANTITY
    ):
        raise ValueError("Expected an unsigned integer for field 'developers-count'.")
    return Metrics(developers_count=count)


def _metrics_to_dict(metrics: Metrics) -> Dict[str, Any]:
    return {"developers-count": metrics.developers_count}


@dataclass
class Config(FileStore):
    """All OpenFare settings."""

    core: Core = field(default_factory=Core)
    metrics: Metrics = field(default_factory=Metrics)
    extensions: Extensions = field(default_factory=Extensions)

    @classmethod
    def file_path(cls) -> Path:
        return get_config_paths().config_file

    def set(self, name: str, value: str) -> None:
        """Set a setting by dotted name, such as ``core.preferred-currency``."""
        if _CORE_PATTERN.search(name):
            setting = _field(_CORE_PATTERN, name)
            if setting != "preferred-currency":
                raise ValueError(f"Unknown setting field name: {name}")
            self.core.preferred_currency = parse_currency(value)
        elif _EXTENSIONS_PATTERN.search(name):
            extension_name = _field(_EXTENSIONS_PATTERN, name)
            flag = bool_from_string(value)
            if extension_name not in self.extensions.enabled:
                raise ValueError(f"Unknown setting field name: {name}")
            self.extensions.enabled[extension_name] = flag
        elif _METRICS_PATTERN.search(name):
            setting = _field(_METRICS_PATTERN, name)
            if setting != "developers-count":
                raise ValueError(f"Unknown setting field name: {name}")
            self.metrics.developers_count = _parse_unsigned(value)
        else:
            raise ValueError(f"Unknown settings field: {name}")

    def get(self, name: str) -> str:
        """Return a setting's value as text."""
        if _CORE_PATTERN.search(name):
            if _field(_CORE_PATTERN, name) != "preferred-currency":
                raise ValueError(f"Unknown setting field name: {name}")
            return str(self.core.preferred_currency)
        if _EXTENSIONS_PATTERN.search(name):
            extension_name = _field(_EXTENSIONS_PATTERN, name)
            if extension_name not in self.extensions.enabled:
                raise ValueError(f"Unknown setting field name: {name}")
            return "true" if self.extensions.enabled[extension_name] else "false"
        if _METRICS_PATTERN.search(name):
            if _field(_METRICS_PATTERN, name) != "developers-count":
                raise ValueError(f"Unknown setting field name: {name}")
            count = self.metrics.developers_count
            return "" if count is None else str(count)
        raise ValueError(f"Unknown settings field: {name}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        return cls(
            core=Core._from_dict(_require(data, "core", "config")),
            metrics=_metrics_from_dict(_require(data, "metrics", "config")),
            extensions=Extensions._from_dict(_require(data, "extensions", "config")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "core": self.core._to_dict(),
            "metrics": _metrics_to_dict(self.metrics),
            "extensions": self.extensions._to_dict(),
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)