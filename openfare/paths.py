"""Filesystem locations used by OpenFare."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from platformdirs import user_config_dir

_log = logging.getLogger(__name__)

HTTP_USER_AGENT = "openfare"

_APP_NAME = "openfare"
_EXTENSIONS_DIRECTORY_NAME = ".openfare_extensions"


@dataclass(frozen=True)
class ConfigPaths:
    """Absolute paths of the configuration directory and the files within it."""

    root_directory: Path
    config_file: Path
    payees_file: Path
    extensions_directory: Path


def get_config_paths() -> ConfigPaths:
    """Return the user's OpenFare configuration paths. Nothing is created."""
    root = Path(user_config_dir(_APP_NAME, appauthor=False))
    return ConfigPaths(
        root_directory=root,
        config_file=root / "config.json",
        payees_file=root / "payees.json",
        extensions_directory=root / "extensions",
    )


def _home_directory() -> Optional[Path]:
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


def _executable_directory() -> Optional[Path]:
    if not sys.platform.startswith("linux"):
        return None
    bin_home = os.environ.get("XDG_BIN_HOME")
    if bin_home and os.path.isabs(bin_home):
        return Path(bin_home)
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home and os.path.isabs(data_home):
        return Path(data_home).parent / "bin"
    home = _home_directory()
    if home is None:
        return None
    return home / ".local" / "bin"


def get_extensions_default_directory() -> Optional[Path]:
    """Return the default extensions directory in the user's home directory.

    Returns None if the home directory does not exist. Does not create anything.
    """
    home = _home_directory()
    if home is None or not home.exists():
        return None
    return home / _EXTENSIONS_DIRECTORY_NAME


def ensure_extensions_bin_directory() -> Optional[Path]:
    """Return a directory for extension executables, creating it if needed.

    Prefers the default extensions directory, falling back to the user's
    executable directory. Returns None if neither can be determined.
    """
    directory = get_extensions_default_directory() or _executable_directory()
    if directory is not None and not directory.exists():
        _log.debug("Creating OpenFare extensions bin directory: %s", directory)
        directory.mkdir(parents=True, exist_ok=True)
    return directory