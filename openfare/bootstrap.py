"""Making sure the configuration directory is set up."""

from __future__ import annotations

import logging

from openfare.config import Config
from openfare.manage import update_config
from openfare.paths import get_config_paths

_log = logging.getLogger(__name__)


def is_complete() -> bool:
    """Return True if the config file exists."""
    return get_config_paths().config_file.is_file()


def setup(force: bool = False) -> None:
    """Create the config directories and, if missing or ``force``, a fresh config file."""
    paths = get_config_paths()
    _log.debug("Using config paths: %r", paths)
    paths.root_directory.mkdir(parents=True, exist_ok=True)
    paths.extensions_directory.mkdir(parents=True, exist_ok=True)

    if force or not paths.config_file.is_file():
        _log.debug("Generating config file: %s", paths.config_file)
        config = Config()
        update_config(config)
        config.dump()
    else:
        _log.debug(
            "Not overwriting existing config file (--force: %r): %s", force, paths.config_file
        )
    _log.debug("Config setup complete.")


def ensure() -> None:
    """Run setup if it has not been completed."""
    if not is_complete():
        setup(False)