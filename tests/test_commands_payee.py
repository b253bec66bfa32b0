import argparse

import pytest

from openfare.commands import payee as command
from openfare.paths import get_config_paths
from openfare.payees import Payees


@pytest.fixture(autouse=True)
def env(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    get_config_paths().root_directory.mkdir(parents=True)
    return tmp_path


def test_add_activates_new_payee():
    command.add("alice", False)
    assert Payees.load().active()[0] == "alice"


def test_add_with_skip_activate_keeps_active():
    command.add("alice", False)
    command.add("bob", True)
    payees = Payees.load()
    assert payees.active()[0] == "alice"
    assert sorted(payees.payees) == ["alice", "bob"]


def test_add_duplicate_raises():
    command.add("alice", False)
    with pytest.raises(ValueError):
        command.add("alice", False)


def test_activate_switches_active():
    command.add("alice", False)
    command.add("bob", True)
    command.activate("bob")
    assert Payees.load().active()[0] == "bob"


def test_rename_keeps_active():
    command.add("alice", False)
    command.rename("alice", "carol")
    payees = Payees.load()
    assert payees.active()[0] == "carol"
    assert "alice" not in payees.payees


def test_remove_unknown_raises():
    with pytest.raises(ValueError):
        command.remove("nobody")


def test_remove_active_falls_back():
    command.add("alice", False)
    command.add("bob", True)
    command.remove("alice")
    assert Payees.load().active()[0] == "bob"


def test_show_marks_active(capsys):
    command.add("alice", False)
    command.add("bob", True)
    command.show(0)
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["alice (active) ", "bob  "]


def test_run_command_dispatches_add():
    parser = argparse.ArgumentParser()
    command.add_parser(parser.add_subparsers(dest="command"))
    command.run_command(parser.parse_args(["payee", "add", "dave", "--skip-activate"]))
    assert "dave" in Payees.load().payees