import pytest

from openfare.config import Config
from openfare.lock.conditions import Condition, Metrics
from openfare.lock.frequency import Frequency, Unit
from openfare.lock.plan import Lock, PaymentPlan, Payments, Split
from openfare.lock.price import Currency, Price
from openfare.package import Package, PackageLocks
from openfare.report import (
    PackagePriceReport,
    PriceReport,
    format_table,
    generate,
    get_package_price_report,
    print_report,
)


def _plan(plan_id, condition_value, quantity):
    return PaymentPlan(
        id=plan_id,
        conditions={Condition.DEVELOPERS_COUNT: condition_value},
        payments=Payments(
            total=Price(quantity, Currency.USD),
            frequency=Frequency(1, Unit.MONTHS),
            split=Split(remainder="alice"),
        ),
    )


@pytest.fixture
def config():
    return Config(metrics=Metrics(developers_count=10))


def test_report_without_lock_has_no_price(config):
    package = Package("left-pad", "1.0.0")
    report = get_package_price_report(package, None, config)
    assert report.package == package
    assert report.price_quantity is None
    assert report.notes == []


def test_report_uses_first_applicable_plan(config):
    lock = Lock(plans=[_plan("big", "> 100", 500), _plan("small", "<= 100", 30)])
    report = get_package_price_report(Package("a", "1"), lock, config)
    assert report.price_quantity == 30


def test_report_without_applicable_plan_is_free(config):
    lock = Lock(plans=[_plan("big", "> 100", 500)])
    report = get_package_price_report(Package("a", "1"), lock, config)
    assert report.price_quantity == 0


def test_report_needs_metric_for_condition():
    lock = Lock(plans=[_plan("small", "<= 100", 30)])
    with pytest.raises(ValueError):
        get_package_price_report(Package("a", "1"), lock, Config())


def test_generate_empty_gives_none(config):
    assert generate(PackageLocks(), config) is None


def test_generate_orders_and_totals(config):
    config.core.preferred_currency = Currency.BTC
    primary = Package("app", "2.0")
    locks = PackageLocks(
        primary_package=primary,
        primary_package_lock=Lock(plans=[_plan("p", "<= 100", 7)]),
        dependencies_locks={
            Package("zeta", "1"): None,
            Package("beta", "1"): Lock(plans=[_plan("d", "<= 100", 3)]),
        },
    )
    report = generate(locks, config)
    names = [item.package.name for item in report.package_reports]
    assert names == ["app", "beta", "zeta"]
    assert report.price.quantity == sum(
        item.price_quantity or 0 for item in report.package_reports
    )
    assert report.price.currency is Currency.BTC


def _sample_report():
    return PriceReport(
        package_reports=[
            PackagePriceReport(Package("a", "1"), 5),
            PackagePriceReport(Package("bb", "2.0"), None),
        ],
        price=Price(5, Currency.USD),
    )


def test_format_table_layout():
    table = format_table(_sample_report(), False)
    expected = "\n".join(
        [
            " name | version | price (USD) | notes",
            "------+---------+-------------+-------",
            " a" + " " * 4 + "|" + " 1" + " " * 7 + "|" + " " * 6 + "5" + " " * 6 + "|",
            " bb" + " " * 3 + "|" + " 2.0" + " " * 5 + "|" + " " * 6 + "-" + " " * 6 + "|",
        ]
    )
    assert table == expected


def test_format_table_separates_first_row():
    lines = format_table(_sample_report(), True).split("\n")
    assert len(lines) == 5
    assert lines[2].lstrip().startswith("a ")
    assert set(lines[3]) <= {" ", "|"}
    assert lines[4].lstrip().startswith("bb")


def test_format_table_lines_share_column_positions():
    lines = format_table(_sample_report(), False).split("\n")
    separator_positions = [i for i, char in enumerate(lines[1]) if char == "+"]
    for line in lines[0:1] + lines[2:]:
        assert [i for i, char in enumerate(line) if char == "|"] == separator_positions


def test_print_report(capsys):
    report = _sample_report()
    print_report(report, True)
    assert capsys.readouterr().out == format_table(report, True) + "\n"