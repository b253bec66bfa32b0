"""Hex encoded binary results exchanged between OpenFare and extension processes.

A result holds an optional value and an optional error message. Values use a
compact little-endian layout: unsigned integers of fixed width, strings and
sequences prefixed by a 64-bit length, options by a one byte tag. Prices and
frequencies travel as their text form and payment method settings as JSON text.
"""

from __future__ import annotations

import json
import struct
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from openfare.extension.base import (
    FsDefinedDependenciesLocks,
    PackageDependenciesLocks,
    StaticData,
)
from openfare.lock.conditions import Condition
from openfare.lock.frequency import parse_frequency
from openfare.lock.payee import Payee
from openfare.lock.plan import Lock, PaymentPlan, Payments, Split
from openfare.lock.price import parse_price
from openfare.package import Package, PackageLocks

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")

_CONDITIONS = list(Condition)


class ResultKind(Enum):
    """The kind of value a result carries, named after the command producing it."""

    STATIC_DATA = "static-data"
    PACKAGE_DEPENDENCIES_LOCKS = "package-dependencies-locks"
    FS_DEFINED_DEPENDENCIES_LOCKS = "fs-defined-dependencies-locks"


class ExtensionError(Exception):
    """An error reported by an extension."""


class _Writer:
    def __init__(self) -> None:
        self._chunks: List[bytes] = []

    def u8(self, value: int) -> None:
        self._chunks.append(struct.pack("<B", value))

    def u32(self, value: int) -> None:
        self._chunks.append(struct.pack("<I", value))

    def u64(self, value: int) -> None:
        self._chunks.append(struct.pack("<Q", value))

    def string(self, value: str) -> None:
        data = value.encode("utf-8")
        self.u64(len(data))
        self._chunks.append(data)

    def option(self, value: Optional[T], write: Callable[[T], None]) -> None:
        if value is None:
            self.u8(0)
        else:
            self.u8(1)
            write(value)

    def seq(self, items: Iterable[T], write: Callable[[T], None]) -> None:
        items = list(items)
        self.u64(len(items))
        for item in items:
            write(item)

    def map(
        self,
        items: Iterable[Tuple[K, V]],
        write_key: Callable[[K], None],
        write_value: Callable[[V], None],
    ) -> None:
        items = list(items)
        self.u64(len(items))
        for key, value in items:
            write_key(key)
            write_value(value)

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    def _take(self, size: int) -> bytes:
        end = self._offset + size
        if end > len(self._data):
            raise ValueError("Unexpected end of result data.")
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def u8(self) -> int:
        return self._take(1)[0]

    def u32(self) -> int:
        return struct.unpack("<I", self._take(4))[0]

    def u64(self) -> int:
        return struct.unpack("<Q", self._take(8))[0]

    def string(self) -> str:
        size = self.u64()
        try:
            return self._take(size).decode("utf-8")
        except UnicodeDecodeError as error:
            raise ValueError("Invalid UTF-8 text in result data.") from error

    def option(self, read: Callable[[], T]) -> Optional[T]:
        tag = self.u8()
        if tag == 0:
            return None
        if tag == 1:
            return read()
        raise ValueError(f"Invalid option tag in result data: {tag}")

    def seq(self, read: Callable[[], T]) -> List[T]:
        return [read() for _ in range(self.u64())]

    def map(self, read_key: Callable[[], K], read_value: Callable[[], V]) -> Dict[K, V]:
        result: Dict[K, V] = {}
        for _ in range(self.u64()):
            key = read_key()
            result[key] = read_value()
        return result


def _write_package(w: _Writer, package: Package) -> None:
    w.string(package.name)
    w.string(package.version)


def _read_package(r: _Reader) -> Package:
    return Package(name=r.string(), version=r.string())


def _write_condition(w: _Writer, condition: Condition) -> None:
    w.u32(_CONDITIONS.index(condition))


def _read_condition(r: _Reader) -> Condition:
    index = r.u32()
    if index >= len(_CONDITIONS):
        raise ValueError(f"Unknown condition variant in result data: {index}")
    return _CONDITIONS[index]


def _write_split(w: _Writer, split: Split) -> None:
    w.option(split.parts, lambda parts: w.map(sorted(parts.items()), w.string, w.string))
    w.string(split.remainder)


def _read_split(r: _Reader) -> Split:
    parts = r.option(lambda: r.map(r.string, r.string))
    return Split(remainder=r.string(), parts=parts)


def _write_payments(w: _Writer, payments: Payments) -> None:
    w.string(str(payments.total))
    w.string(str(payments.frequency))
    _write_split(w, payments.split)


def _read_payments(r: _Reader) -> Payments:
    return Payments(
        total=parse_price(r.string()),
        frequency=parse_frequency(r.string()),
        split=_read_split(r),
    )


def _write_plan(w: _Writer, plan: PaymentPlan) -> None:
    w.string(plan.id)
    ordered = sorted(plan.conditions.items(), key=lambda item: _CONDITIONS.index(item[0]))
    w.map(ordered, lambda c: _write_condition(w, c), w.string)
    _write_payments(w, plan.payments)


def _read_plan(r: _Reader) -> PaymentPlan:
    return PaymentPlan(
        id=r.string(),
        conditions=r.map(lambda: _read_condition(r), r.string),
        payments=_read_payments(r),
    )


def _write_payee(w: _Writer, payee: Payee) -> None:
    w.map(
        sorted(payee.payment_methods.items(), key=lambda item: item[0]),
        w.string,
        lambda value: w.string(json.dumps(value, separators=(",", ":"))),
    )


def _read_payee(r: _Reader) -> Payee:
    return Payee(payment_methods=r.map(r.string, lambda: json.loads(r.string())))


def _write_lock(w: _Writer, lock: Lock) -> None:
    w.seq(lock.plans, lambda plan: _write_plan(w, plan))
    w.map(
        sorted(lock.payees.items(), key=lambda item: item[0]),
        w.string,
        lambda payee: _write_payee(w, payee),
    )


def _read_lock(r: _Reader) -> Lock:
    return Lock(
        plans=r.seq(lambda: _read_plan(r)),
        payees=r.map(r.string, lambda: _read_payee(r)),
    )


def _write_optional_lock(w: _Writer, lock: Optional[Lock]) -> None:
    w.option(lock, lambda value: _write_lock(w, value))


def _write_package_locks(w: _Writer, locks: PackageLocks) -> None:
    w.option(locks.primary_package, lambda package: _write_package(w, package))
    _write_optional_lock(w, locks.primary_package_lock)
    w.map(
        sorted(locks.dependencies_locks.items(), key=lambda item: item[0]),
        lambda package: _write_package(w, package),
        lambda lock: _write_optional_lock(w, lock),
    )


def _read_package_locks(r: _Reader) -> PackageLocks:
    return PackageLocks(
        primary_package=r.option(lambda: _read_package(r)),
        primary_package_lock=r.option(lambda: _read_lock(r)),
        dependencies_locks=r.map(
            lambda: _read_package(r), lambda: r.option(lambda: _read_lock(r))
        ),
    )


def _write_static_data(w: _Writer, data: StaticData) -> None:
    w.string(data.name)
    w.seq(data.registry_host_names, w.string)


def _read_static_data(r: _Reader) -> StaticData:
    return StaticData(name=r.string(), registry_host_names=r.seq(r.string))


def _write_package_dependencies_locks(w: _Writer, value: PackageDependenciesLocks) -> None:
    w.string(value.registry_host_name)
    _write_package_locks(w, value.package_locks)


def _read_package_dependencies_locks(r: _Reader) -> PackageDependenciesLocks:
    return PackageDependenciesLocks(
        registry_host_name=r.string(), package_locks=_read_package_locks(r)
    )


def _write_fs_defined_dependencies_locks(w: _Writer, value: FsDefinedDependenciesLocks) -> None:
    w.string(str(value.project_path))
    _write_package_locks(w, value.package_locks)


def _read_fs_defined_dependencies_locks(r: _Reader) -> FsDefinedDependenciesLocks:
    return FsDefinedDependenciesLocks(
        project_path=Path(r.string()), package_locks=_read_package_locks(r)
    )


_CODECS: Dict[ResultKind, Tuple[Callable[[_Writer, Any], None], Callable[[_Reader], Any]]] = {
    ResultKind.STATIC_DATA: (_write_static_data, _read_static_data),
    ResultKind.PACKAGE_DEPENDENCIES_LOCKS: (
        _write_package_dependencies_locks,
        _read_package_dependencies_locks,
    ),
    ResultKind.FS_DEFINED_DEPENDENCIES_LOCKS: (
        _write_fs_defined_dependencies_locks,
        _read_fs_defined_dependencies_locks,
    ),
}


def encode_result(kind: ResultKind, ok: Any = None, err: Optional[str] = None) -> str:
    """Encode a value or an error message of the given kind as lower case hex."""
    write, _ = _CODECS[kind]
    w = _Writer()
    w.option(ok, lambda value: write(w, value))
    w.option(err, w.string)
    return w.getvalue().hex()


def decode_result(kind: ResultKind, text: str) -> Any:
    """Decode a hex result and return its value.

    Raises ExtensionError when the result carries an error message or nothing
    at all, and ValueError when the text is not a well formed result.
    """
    try:
        data = bytes.fromhex(text.strip())
    except ValueError as error:
        raise ValueError(f"Invalid hex in extension result: {error}") from error
    _, read = _CODECS[kind]
    r = _Reader(data)
    ok = r.option(lambda: read(r))
    err = r.option(r.string)
    if ok is not None:
        return ok
    if err is not None:
        raise ExtensionError(err)
    raise ExtensionError("Failed to find ok or err result from process.")