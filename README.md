# openfare

A Python library for pricing a software package and its dependencies from
their OpenFare lock files, and for managing the payee profiles, payment
methods and extensions that go with them.

Support for each package ecosystem comes from extensions: separate
executables named `openfare-<name>` (for example `openfare-py`) found on
your `PATH` or in `~/.openfare_extensions`.

## Installation

```
pip install openfare
```

## Lock files, prices and plans

```python
from openfare.lock.price import parse_price, Currency
from openfare.lock.frequency import parse_frequency
from openfare.lock.conditions import Metrics
from openfare.lock.plan import Lock

parse_price("50 USD")        # Price(quantity=50, currency=Currency.USD)
parse_frequency("30 days")   # Frequency(quantity=30, unit=Unit.DAYS)

lock = Lock.from_dict(data)  # data: the parsed JSON of an OPENFARE.lock file
plan = lock.plans[0]
plan.is_applicable(Metrics(developers_count=12))
```

Plan conditions are `developers-count` (compared with
`Metrics.developers_count`) and `current-time` (an RFC 3339 timestamp
compared with the current UTC time), each written as an operator
(`>=`, `>`, `<=`, `<`, `=`) followed by a value, such as `<= 100`.

## Price reports

```python
from openfare.config import Config
from openfare.package import Package, PackageLocks
from openfare.report import generate, print_report

locks = PackageLocks(
    primary_package=Package("example", "1.0.0"),
    primary_package_lock=lock,
)
report = generate(locks, Config.load())
if report is not None:
    print_report(report, first_row_separate=True)
```

`generate` prices the primary package first and then each dependency in
name order, using the first applicable plan of each lock (0 when no plan
applies, `-` when a package has no lock), and totals the prices in the
preferred currency. `format_table` returns the same table as text.

## Configuration

`openfare.config.Config` is stored as `config.json` in the platform's user
config directory for `openfare` (see `openfare.paths.get_config_paths`).
`Config.load()` writes a default file first if none exists; `dump()` saves.

```python
config = Config.load()
config.set("core.preferred-currency", "BTC")
config.get("metrics.developers-count")
config.dump()
```

Known settings:

- `core.preferred-currency` — `USD` (default) or `BTC`
- `metrics.developers-count` — used by `developers-count` plan conditions
- `extensions.enabled.<name>` — `true` or `false`, for a known extension

`openfare.bootstrap.ensure()` creates the config directory, its
`extensions` directory and the config file if they are missing.

## Payees and payment methods

`openfare.payees.Payees` is stored as `payees.json` beside the config file.

```python
from openfare.commands import payee, payment_method

payee.add("alice")                                   # add and activate
payee.rename("alice", "bob")
payment_method.set_paypal(None, "payee@example.com")
payment_method.set_btc_lightning_keysend("02abcdef")
payment_method.show(verbosity=1)                     # details as JSON
payment_method.remove_payment_method("paypal")
```

## Extensions

```python
from openfare import manage, discovery
from openfare.commands import extension

extension.add("py")                  # download and install a release archive
extension.enable("py")
extension.disable("py")
extension.remove("py")
discovery.get_all()                  # load every installed extension
```

`manage.update_config` keeps the config's enabled extensions and registries
in line with what is installed. `discovery.package_dependencies_locks` and
`discovery.fs_defined_dependencies_locks` query several extensions in
parallel, returning each one's result or the exception it raised.

### Writing an extension

Subclass `openfare.extension.base.Extension` (the `name` and `registries`
properties and the two lock methods) and hand it to
`openfare.extension.runner.run`. It answers the `static-data`,
`package-dependencies-locks` and `fs-defined-dependencies-locks` commands,
printing each result as one hex line in the format of
`openfare.extension.wire`.

## What this package does not include

There is no `openfare` command-line program: nothing is installed on your
`PATH`. The modules in `openfare.commands` each provide `add_parser` and
`run_command` for registering their subcommand in an `argparse` parser of
your own. There is also no ready-made price command; build price reports
from extension results with `openfare.report` as shown above.