"""The ``payment-method`` command: manage the active payee's payment methods."""

from __future__ import annotations

import argparse
import json
from typing import Any, Optional, Tuple

from openfare.lock.payee import BtcLightningKeysend, Payee, PayPal
from openfare.payees import Payees

_PAYPAL = "paypal"
_BTC_LIGHTNING_KEYSEND = "btc_lightning_keysend"

_CLI_METHOD_NAMES = {
    "paypal": _PAYPAL,
    "btc-lightning-keysend": _BTC_LIGHTNING_KEYSEND,
}


def _load_with_active() -> Tuple[Payees, Payee]:
    payees = Payees.load()
    active = payees.active()
    if active is None:
        raise ValueError("Failed to identify an active payee.")
    return payees, active[1]


def set_paypal(paypal_id: Optional[str], email: Optional[str]) -> None:
    """Set the active payee's PayPal payment method."""
    method = PayPal(paypal_id, email)
    payees, payee = _load_with_active()
    payee.set_payment_method(method)
    payees.dump()


def set_btc_lightning_keysend(public_key: str) -> None:
    """Set the active payee's BTC lightning keysend payment method."""
    method = BtcLightningKeysend(public_key)
    payees, payee = _load_with_active()
    payee.set_payment_method(method)
    payees.dump()


def remove_payment_method(method_name: str) -> None:
    """Remove a payment method, such as ``paypal``, from the active payee."""
    payees, payee = _load_with_active()
    payee.remove_payment_method(method_name)
    payees.dump()


def show(verbosity: int = 0) -> None:
    """Print the active payee's payment method names, or their details if verbose."""
    active = Payees.load().active()
    if active is None:
        return
    payee = active[1]
    payee.get_payment_methods()
    names = sorted(payee.payment_methods)
    if verbosity == 0:
        print("\n".join(names))
    else:
        details = [{name: payee.payment_methods[name]} for name in names]
        print(json.dumps(details, indent=2, ensure_ascii=False))


def add_parser(subparsers: Any) -> argparse.ArgumentParser:
    """Register the ``payment-method`` command with an argparse subparsers object."""
    parser = subparsers.add_parser("payment-method", help="Manage payee payment methods.")
    parser.add_argument("-v", "--verbosity", action="count", default=0)
    commands = parser.add_subparsers(dest="payment_method_command", metavar="<command>")

    set_command = commands.add_parser("set", help="Set payment method.")
    set_methods = set_command.add_subparsers(dest="method", metavar="<method>", required=True)
    paypal = set_methods.add_parser("paypal", help="Set PayPal payment method.")
    paypal.add_argument("--id", dest="paypal_id", default=None, help="PayPal ID.")
    paypal.add_argument("--email", default=None, help="Payee email.")
    keysend = set_methods.add_parser(
        "btc-lightning-keysend", help="Set BTC lightning keysend payment method."
    )
    keysend.add_argument("public_key", metavar="public-key", help="Public key destination")

    remove_command = commands.add_parser("remove", help="Remove payment method.")
    remove_methods = remove_command.add_subparsers(
        dest="method", metavar="<method>", required=True
    )
    remove_methods.add_parser("paypal", help="Remove PayPal payment method.")
    remove_methods.add_parser(
        "btc-lightning-keysend", help="Remove BTC lightning keysend payment method."
    )
    return parser


def run_command(args: argparse.Namespace) -> None:
    """Run the ``payment-method`` command with parsed arguments."""
    command = getattr(args, "payment_method_command", None)
    if command is None:
        show(args.verbosity)
    elif command == "set":
        if args.method == "paypal":
            if args.paypal_id is None and args.email is None:
                raise ValueError("The argument --email is required unless --id is given.")
            set_paypal(args.paypal_id, args.email)
        else:
            set_btc_lightning_keysend(args.public_key)
    elif command == "remove":
        remove_payment_method(_CLI_METHOD_NAMES[args.method])
    else:
        raise ValueError(f"Unknown payment-method command: {command}")