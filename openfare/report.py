"""Price reports for a package and its dependencies, and their table form."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from openfare.config import Config
from openfare.lock.plan import Lock
from openfare.lock.price import Price
from openfare.package import Package, PackageLocks

_log = logging.getLogger(__name__)

_LEFT = "left"
_CENTER = "center"


@dataclass
class PackagePriceReport:
    """The price of one package; None when the package has no lock."""

    package: Package
    price_quantity: Optional[int] = None
    notes: List[str] = field(default_factory=list)


@dataclass
class PriceReport:
    """Price reports for several packages and their total."""

    package_reports: List[PackagePriceReport]
    price: Price


def get_package_price_report(
    package: Package, package_lock: Optional[Lock], config: Config
) -> PackagePriceReport:
    """Price a package by the first of its lock's plans that applies, or 0 if none do."""
    if package_lock is None:
        return PackagePriceReport(package=package)
    applicable = [plan for plan in package_lock.plans if plan.is_applicable(config.metrics)]
    quantity = applicable[0].payments.total.quantity if applicable else 0
    return PackagePriceReport(package=package, price_quantity=quantity)


def generate(package_locks: PackageLocks, config: Config) -> Optional[PriceReport]:
    """Build a report for the primary package, then each dependency in name order.

    Returns None when there are no packages to report on.
    """
    _log.info("Generating price report for package and it's dependencies.")
    reports: List[PackagePriceReport] = []
    if package_locks.primary_package is not None:
        reports.append(
            get_package_price_report(
                package_locks.primary_package, package_locks.primary_package_lock, config
            )
        )
    for package in sorted(package_locks.dependencies_locks):
        reports.append(
            get_package_price_report(package, package_locks.dependencies_locks[package], config)
        )

    _log.info("Number of price reports generated: %d", len(reports))
    if not reports:
        return None
    total = sum(report.price_quantity or 0 for report in reports)
    return PriceReport(
        package_reports=reports,
        price=Price(quantity=total, currency=config.core.preferred_currency),
    )


Cell = Tuple[str, str]


def _align(text: str, width: int, alignment: str) -> str:
    fill = width - len(text)
    if alignment == _LEFT:
        return text + " " * fill
    left = fill // 2
    return " " * left + text + " " * (fill - left)


def _row(report: PackagePriceReport) -> List[Cell]:
    price = "-" if report.price_quantity is None else str(report.price_quantity)
    return [
        (report.package.name, _LEFT),
        (report.package.version, _LEFT),
        (price, _CENTER),
    ]


def format_table(report: PriceReport, first_row_separate: bool) -> str:
    """Render a report as a borderless table with a line under the titles.

    With ``first_row_separate`` an empty row follows the first package.
    """
    titles: List[Cell] = [
        ("name", _CENTER),
        ("version", _CENTER),
        (f"price ({report.price.currency})", _CENTER),
        ("notes", _CENTER),
    ]
    columns = len(titles)
    package_reports: Sequence[PackagePriceReport] = report.package_reports
    rows: List[List[Cell]] = []
    if first_row_separate and package_reports:
        rows.append(_row(package_reports[0]))
        rows.append([("", _CENTER)] * columns)
        package_reports = package_reports[1:]
    rows.extend(_row(package_report) for package_report in package_reports)
    rows = [row + [("", _LEFT)] * (columns - len(row)) for row in rows]

    widths = [max(len(text) for text, _ in column) for column in zip(titles, *rows)]

    def render(row: List[Cell]) -> str:
        cells = (
            f" {_align(text, width, alignment)} "
            for (text, alignment), width in zip(row, widths)
        )
        return "|".join(cells).rstrip()

    separator = "+".join("-" * (width + 2) for width in widths)
    return "\n".join([render(titles), separator, *(render(row) for row in rows)])


def print_report(report: PriceReport, first_row_separate: bool) -> None:
    """Print a report as a table."""
    print(format_table(report, first_row_separate))