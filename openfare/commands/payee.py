"""The ``payee`` command: manage payee profiles."""

from __future__ import annotations

import argparse
import logging
from typing import Any

from openfare.payees import Payees

_log = logging.getLogger(__name__)


def add(name: str, skip_activate: bool = False) -> None:
    """Add a payee profile and, unless told not to, make it active."""
    _log.debug("Adding new payee profile.")
    payees = Payees.load()
    payees.add(name)
    if not skip_activate:
        _log.debug("Setting new profile to active.")
        payees.activate(name)
    else:
        _log.debug("Not setting new profile to active.")
    payees.dump()


def activate(name: str) -> None:
    """Make a profile the active one."""
    payees = Payees.load()
    payees.activate(name)
    payees.dump()


def rename(old_name: str, new_name: str) -> None:
    """Rename a profile."""
    payees = Payees.load()
    payees.rename(old_name, new_name)
    payees.dump()


def remove(name: str) -> None:
    """Remove a profile."""
    payees = Payees.load()
    payees.remove(name)
    payees.dump()


def show(verbosity: int = 0) -> None:
    """Print each profile, marking the active one and counting its payment methods."""
    payees = Payees.load()
    active = payees.active()
    active_name = active[0] if active is not None else None
    for name in sorted(payees.payees):
        active_tag = "(active)" if name == active_name else ""
        count = len(payees.payees[name].get_payment_methods())
        methods_tag = f"- {count} payment methods" if count else ""
        print(f"{name} {active_tag} {methods_tag}")


def add_parser(subparsers: Any) -> argparse.ArgumentParser:
    """Register the ``payee`` command with an argparse subparsers object."""
    parser = subparsers.add_parser("payee", help="Manage payee profiles.")
    parser.add_argument("-v", "--verbosity", action="count", default=0)
    commands = parser.add_subparsers(dest="payee_command", metavar="<command>")

    add_command = commands.add_parser("add", help="Add new payee.")
    add_command.add_argument("name", help="Payee name label.")
    add_command.add_argument(
        "--skip-activate",
        action="store_true",
        help="Skip setting active profile to new payee profile.",
    )

    activate_command = commands.add_parser("activate", help="Set active payee.")
    activate_command.add_argument("name", help="Payee name label.")

    rename_command = commands.add_parser("rename", help="Rename payee.")
    rename_command.add_argument("old_name", metavar="old-name", help="Old payee name.")
    rename_command.add_argument("new_name", metavar="new-name", help="New payee name.")

    remove_command = commands.add_parser("remove", help="Remove payee.")
    remove_command.add_argument("name", help="Payee name label.")
    return parser


def run_command(args: argparse.Namespace) -> None:
    """Run the ``payee`` command with parsed arguments."""
    command = getattr(args, "payee_command", None)
    if command is None:
        show(args.verbosity)
        return
    _log.info("Running command: payee %s", command)
    if command == "add":
        add(args.name, args.skip_activate)
    elif command == "activate":
        activate(args.name)
    elif command == "rename":
        rename(args.old_name, args.new_name)
    elif command == "remove":
        remove(args.name)
    else:
        raise ValueError(f"Unknown payee command: {command}")