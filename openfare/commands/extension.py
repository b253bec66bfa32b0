"""The ``extension`` command: list, add, remove, enable and disable extensions."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import urlsplit, urlunsplit

from openfare import manage
from openfare.config import Config
from openfare.paths import ensure_extensions_bin_directory, get_extensions_default_directory

_log = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def try_parse_user_url(url: str) -> Optional[str]:
    """Turn a user supplied repository or archive URL into a full URL, or None."""
    if not url.startswith("https://") and not url.startswith("http://"):
        url = "https://" + url
    if url.endswith(".git"):
        url = url[: -len(".git")]
    try:
        parts = urlsplit(url)
        if not parts.hostname:
            return None
        return urlunsplit(
            (parts.scheme, parts.netloc, parts.path or "/", parts.query, parts.fragment)
        )
    except ValueError:
        return None


def get_url_from_name(name: str) -> str:
    """Return the repository URL of an official extension."""
    return f"https://github.com/openfare/openfare-{name}"


def is_directory_in_path_env(directory: PathLike) -> bool:
    """Return True if ``directory`` is listed in the PATH environment variable."""
    path_value = os.environ.get("PATH")
    if path_value is None:
        raise RuntimeError("Failed to read PATH environment variable.")
    target = Path(directory)
    return any(Path(entry) == target for entry in path_value.split(os.pathsep) if entry)


def is_install_directory_discoverable(directory: PathLike) -> bool:
    """Return True if extensions installed in ``directory`` can be found again."""
    if is_directory_in_path_env(directory):
        return True
    default_directory = get_extensions_default_directory()
    return default_directory is not None and default_directory == Path(directory)


def _loaded_config() -> Config:
    config = Config.load()
    manage.update_config(config)
    return config


def _known_name(name: str, config: Config) -> str:
    name = manage.clean_name(name)
    all_names = manage.get_all_names(config)
    if name not in all_names:
        raise ValueError(f"Failed to find extension. Known extensions: {', '.join(all_names)}")
    return name


def add(name_or_url: str, install_directory: Optional[str] = None) -> None:
    """Install an extension given its name, release archive URL or repository URL."""
    _log.info("Adding extension using argument: %s", name_or_url)
    if install_directory is not None:
        bin_directory = Path(os.path.expandvars(os.path.expanduser(install_directory)))
    else:
        found = ensure_extensions_bin_directory()
        if found is None:
            raise ValueError(
                "Failed to find suitable directory for installing extension binary.\n"
                "Please specify install directory with argument: --install-directory"
            )
        bin_directory = found

    if not is_install_directory_discoverable(bin_directory):
        print(
            "WARNING: install directory is not the default "
            "or not included in the PATH environment variable.\n"
            "OpenFare may not be able to find the extension."
        )
    _log.info("Using extension bin directory: %s", bin_directory)

    if "/" in name_or_url:
        _log.debug("Identified argument as URL.")
        url = try_parse_user_url(name_or_url)
        if url is None:
            raise ValueError(f"Failed to parse URL: {name_or_url}")
        _log.debug("Sanitized URL: %s", url)
    else:
        _log.debug("Identified argument as name.")
        url = get_url_from_name(manage.clean_name(name_or_url))
    extension_name = manage.add_from_url(url, bin_directory)

    _loaded_config()
    print(f"Added extension: {extension_name}")


def remove(name: str) -> None:
    """Delete an extension."""
    _loaded_config()
    name = manage.clean_name(name)
    manage.remove(name)
    print(f"Removed extension: {name}")


def enable(name: str) -> None:
    """Enable a known extension."""
    config = _loaded_config()
    name = _known_name(name, config)
    manage.enable(name, config)
    print(f"Enabled extension: {name}")


def disable(name: str) -> None:
    """Disable a known extension without deleting it."""
    config = _loaded_config()
    name = _known_name(name, config)
    manage.disable(name, config)
    print(f"Disabled extension: {name}")


def show(verbosity: int = 0) -> None:
    """Print the names of all known extensions."""
    config = _loaded_config()
    for name in manage.get_all_names(config):
        print(name)


def add_parser(subparsers: Any) -> argparse.ArgumentParser:
    """Register the ``extension`` command with an argparse subparsers object."""
    parser = subparsers.add_parser("extension", help="Manage extensions.")
    parser.add_argument("-v", "--verbosity", action="count", default=0)
    commands = parser.add_subparsers(dest="extension_command", metavar="<command>")

    add_command = commands.add_parser("add", help="Add and enable extension.")
    add_command.add_argument(
        "name_or_url",
        metavar="name-or-url",
        help="Extension name, release archive URL, or GitHub repository URL.",
    )
    add_command.add_argument(
        "-d", "--install-directory", dest="install_directory", default=None,
        help="Installation directory path.",
    )
    for command, text in (
        ("remove", "Disable and delete extension."),
        ("enable", "Enable extension."),
        ("disable", "Disable extension without deleting."),
    ):
        sub = commands.add_parser(command, help=text)
        sub.add_argument("name", help="Extension name.")
    return parser


def run_command(args: argparse.Namespace) -> None:
    """Run the ``extension`` command with parsed arguments."""
    command = getattr(args, "extension_command", None)
    if command is None:
        show(args.verbosity)
        return
    _log.info("Running command: extension %s", command)
    if command == "add":
        add(args.name_or_url, args.install_directory)
    elif command == "remove":
        remove(args.name)
    elif command == "enable":
        enable(args.name)
    elif command == "disable":
        disable(args.name)
    else:
        raise ValueError(f"Unknown extension command: {command}")