from openfare.lock.plan import Lock
from openfare.package import Package, PackageLocks


def test_empty_package_locks_has_no_locks():
    assert PackageLocks().has_locks() is False


def test_primary_package_without_lock_has_no_locks():
    locks = PackageLocks(primary_package=Package("left-pad", "1.0.0"))
    assert locks.has_locks() is False


def test_primary_lock_counts():
    locks = PackageLocks(
        primary_package=Package("left-pad", "1.0.0"),
        primary_package_lock=Lock(),
    )
    assert locks.has_locks() is True


def test_dependency_entry_counts_even_without_lock():
    locks = PackageLocks(dependencies_locks={Package("is-odd", "0.1.2"): None})
    assert locks.has_locks() is True


def test_packages_order_by_name_then_version():
    packages = [
        Package("kind-of", "3.2.2"),
        Package("is-buffer", "1.1.6"),
        Package("is-buffer", "1.0.0"),
    ]
    assert sorted(packages) == [packages[2], packages[1], packages[0]]


def test_package_usable_as_mapping_key():
    locks = {Package("is-even", "1.0.0"): None}
    assert Package("is-even", "1.0.0") in locks