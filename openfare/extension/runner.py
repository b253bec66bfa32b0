"""Command line entry point that an extension executable hands its work to."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from openfare.extension.base import Extension, StaticData
from openfare.extension.wire import ResultKind, encode_result

_log = logging.getLogger(__name__)


def communicate_result(kind: ResultKind, outcome: Any) -> None:
    """Print a value, or an exception's message, as one hex encoded result line."""
    _log.debug("Communicating result: %r", outcome)
    if isinstance(outcome, Exception):
        line = encode_result(kind, err=str(outcome))
    else:
        line = encode_result(kind, ok=outcome)
    print(line)


def build_parser() -> argparse.ArgumentParser:
    """Return the parser for the commands an extension answers."""
    parser = argparse.ArgumentParser(description="Package Code Reviews")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(ResultKind.STATIC_DATA.value, help="Get extension static data.")

    package = subparsers.add_parser(
        ResultKind.PACKAGE_DEPENDENCIES_LOCKS.value, help="Identify package dependencies."
    )
    package.add_argument("--package-name", required=True, help="Package name.")
    package.add_argument("--package-version", help="Package version.")
    package.add_argument("--extension-args", action="extend", nargs="+", default=[])

    fs_defined = subparsers.add_parser(
        ResultKind.FS_DEFINED_DEPENDENCIES_LOCKS.value,
        help="Identify file defined dependencies.",
    )
    fs_defined.add_argument("--working-directory", required=True, help="Working directory.")
    fs_defined.add_argument("--extension-args", action="extend", nargs="+", default=[])
    return parser


def _dispatch(kind: ResultKind, args: argparse.Namespace, extension: Extension) -> Any:
    if kind is ResultKind.STATIC_DATA:
        return StaticData(name=extension.name, registry_host_names=list(extension.registries))
    if kind is ResultKind.PACKAGE_DEPENDENCIES_LOCKS:
        return extension.package_dependencies_locks(
            args.package_name, args.package_version, list(args.extension_args)
        )
    return extension.fs_defined_dependencies_locks(
        Path(args.working_directory), list(args.extension_args)
    )


def run_command(args: argparse.Namespace, extension: Extension) -> None:
    """Run a parsed command against ``extension`` and print its result."""
    kind = ResultKind(args.command)
    try:
        outcome = _dispatch(kind, args, extension)
    except Exception as error:
        outcome = error
    communicate_result(kind, outcome)


def run(extension: Extension, argv: Optional[Sequence[str]] = None) -> None:
    """Parse ``argv`` and run the command; exit with status -2 on failure."""
    args = build_parser().parse_args(argv)
    try:
        run_command(args, extension)
    except Exception:
        raise SystemExit(-2) from None