import json
import os
from pathlib import Path

import pytest

from openfare.discovery import (
    fs_defined_dependencies_locks,
    get_all,
    get_config_path,
    get_extension_name,
    get_extension_paths,
    package_dependencies_locks,
)
from openfare.extension.base import (
    Extension,
    FsDefinedDependenciesLocks,
    PackageDependenciesLocks,
)
from openfare.paths import get_config_paths


class FakeExtension(Extension):
    def __init__(self, name, fail=False):
        self._name = name
        self._fail = fail
        self.calls = []

    @property
    def name(self):
        return self._name

    @property
    def registries(self):
        return [f"{self._name}.example.com"]

    def package_dependencies_locks(self, package_name, package_version, extension_args):
        self.calls.append((package_name, package_version, list(extension_args)))
        if self._fail:
            raise RuntimeError(f"{self._name} failed")
        return PackageDependenciesLocks(registry_host_name=self.registries[0])

    def fs_defined_dependencies_locks(self, working_directory, extension_args):
        self.calls.append((working_directory, list(extension_args)))
        if self._fail:
            raise RuntimeError(f"{self._name} failed")
        return FsDefinedDependenciesLocks(project_path=working_directory)


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return home


@pytest.mark.parametrize(
    "file_name, expected",
    [
        ("openfare-py", "py"),
        ("openfare-js.exe", "js"),
        ("/usr/bin/openfare-rs", "rs"),
        ("README", None),
    ],
)
def test_get_extension_name(file_name, expected):
    assert get_extension_name(file_name) == expected


def test_get_config_path():
    path = get_config_path("py")
    assert path.name == "py.json"
    assert path.parent == get_config_paths().extensions_directory


def test_get_extension_paths(tmp_path, monkeypatch, isolated_home):
    bin_directory = tmp_path / "bin"
    bin_directory.mkdir()
    (bin_directory / "openfare-py").write_text("")
    (bin_directory / "README").write_text("")
    (bin_directory / "openfare-sub").mkdir()
    single = tmp_path / "openfare-js.exe"
    single.write_text("")
    monkeypatch.setenv(
        "PATH",
        os.pathsep.join([str(bin_directory), "", str(tmp_path / "missing"), str(single)]),
    )
    assert get_extension_paths() == {"py": bin_directory / "openfare-py", "js": single}


def test_get_extension_paths_includes_default_directory(tmp_path, monkeypatch, isolated_home):
    default_directory = isolated_home / ".openfare_extensions"
    default_directory.mkdir(parents=True)
    (default_directory / "openfare-rs").write_text("")
    monkeypatch.setenv("PATH", str(tmp_path / "missing"))
    assert get_extension_paths() == {"rs": default_directory / "openfare-rs"}


def test_get_extension_paths_requires_path(monkeypatch):
    monkeypatch.delenv("PATH", raising=False)
    with pytest.raises(RuntimeError):
        get_extension_paths()


def test_get_all_loads_cached_and_reports_failures(tmp_path, monkeypatch, isolated_home, capsys):
    bin_directory = tmp_path / "bin"
    bin_directory.mkdir()
    (bin_directory / "openfare-py").write_text("")
    (bin_directory / "openfare-rs").write_text("")
    monkeypatch.setenv("PATH", str(bin_directory))

    cache = get_config_path("py")
    cache.parent.mkdir(parents=True)
    cache.write_text(json.dumps({"name": "py", "registry_host_names": ["pypi.org"]}))

    extensions = get_all()
    assert [extension.name for extension in extensions] == ["py"]
    assert extensions[0].registries == ["pypi.org"]
    assert "Failed to load extension." in capsys.readouterr().err


def test_package_dependencies_locks_keeps_order_and_errors():
    good = FakeExtension("js")
    bad = FakeExtension("py", fail=True)
    results = package_dependencies_locks("lodash", "4.0.0", [good, bad], ["--flag"])
    assert len(results) == 2
    assert results[0].registry_host_name == "js.example.com"
    assert isinstance(results[1], RuntimeError)
    assert str(results[1]) == "py failed"
    assert good.calls == [("lodash", "4.0.0", ["--flag"])]


def test_fs_defined_dependencies_locks(tmp_path):
    extension = FakeExtension("rs")
    results = fs_defined_dependencies_locks(str(tmp_path), [extension], [])
    assert [result.project_path for result in results] == [Path(tmp_path)]
    assert extension.calls == [(Path(tmp_path), [])]


def test_no_extensions_gives_no_results(tmp_path):
    assert fs_defined_dependencies_locks(tmp_path, [], []) == []