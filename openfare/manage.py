"""Installing, discovering, enabling and removing extensions."""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union
from urllib.parse import urlsplit

from openfare import github
from openfare.archive import ArchiveType, download, extract
from openfare.config import Config
from openfare.discovery import (
    EXTENSION_FILE_NAME_PREFIX,
    get_all,
    get_config_path,
    get_extension_paths,
)
from openfare.extension.base import Extension

_log = logging.getLogger(__name__)

_BIN_NAME_PATTERN = re.compile(r"openfare-(?P<name>[a-zA-Z0-9]*)(?:\.exe)?\Z")

PathLike = Union[str, "os.PathLike[str]"]


def clean_name(name: str) -> str:
    """Strip the executable prefix from an extension name: ``openfare-py`` -> ``py``."""
    if name.startswith(EXTENSION_FILE_NAME_PREFIX):
        return name[len(EXTENSION_FILE_NAME_PREFIX):]
    return name


def get_name_from_bin(path: PathLike) -> Optional[str]:
    """Return the extension name of an extension executable path, or None."""
    file_name = Path(path).name
    if not file_name:
        return None
    match = _BIN_NAME_PATTERN.search(file_name)
    return match.group("name") if match else None


def is_supported_archive_url(url: str) -> bool:
    """Return True if the URL's path names an archive format that can be unpacked."""
    return ArchiveType.from_path(urlsplit(str(url)).path) is not ArchiveType.UNKNOWN


def _release_archive_url(url: str) -> Optional[str]:
    if urlsplit(str(url)).hostname == "github.com":
        return github.get_archive_url(url)
    return None


def _bin_file_metadata(directory: Path) -> Optional[Tuple[Path, str]]:
    for entry in sorted(directory.iterdir()):
        name = get_name_from_bin(entry)
        if name is not None:
            return entry, name
    return None


def _ensure_executable(path: Path) -> None:
    if os.name == "posix":
        _log.debug("Setting executable permissions to 755 for file: %s", path)
        os.chmod(path, 0o755)


def add_from_url(url: str, extensions_bin_directory: PathLike) -> str:
    """Download an extension release and install its executable; return its name."""
    archive_url = url if is_supported_archive_url(url) else _release_archive_url(url)
    if archive_url is None:
        raise ValueError("Failed to obtain suitable release archive URL.")
    _log.info("Using archive URL: %s", archive_url)

    archive_type = ArchiveType.from_path(urlsplit(str(archive_url)).path)
    bin_directory = Path(extensions_bin_directory)

    with tempfile.TemporaryDirectory(prefix="openfare_extension_add") as tmp:
        tmp_directory = Path(tmp)
        _log.info("Downloading extension archive to temporary directory: %s", tmp_directory)
        archive_path = tmp_directory / f"archive.{archive_type.to_suffix()}"
        download(archive_url, archive_path)
        extract(archive_path, tmp_directory)

        found = _bin_file_metadata(tmp_directory)
        if found is None:
            raise ValueError("Failed to identify extension binary in archive.")
        bin_path, extension_name = found
        _log.info("Identified binary for extension %s: %s", extension_name, bin_path)

        destination = bin_directory / bin_path.name
        _log.info("Copying binary to path: %s", destination)
        shutil.copy(bin_path, destination)
        _ensure_executable(destination)
    return extension_name


def update_config(config: Config) -> None:
    """Bring the config's extension settings in line with the installed extensions.

    Writes the config only when something changed.
    """
    _log.debug("Discover extensions and update config.")
    extension_map = {extension.name: extension for extension in get_all()}
    found_names = set(extension_map)
    configured_names = set(config.extensions.enabled)

    stale_names = sorted(configured_names - found_names)
    registries_snapshot = dict(config.extensions.registries)
    for name in stale_names:
        config.extensions.enabled.pop(name, None)
        for registry, extension_name in registries_snapshot.items():
            if extension_name == name:
                config.extensions.registries.pop(registry, None)

    new_names = sorted(found_names - configured_names)
    for name in new_names:
        config.extensions.enabled[name] = True
        for registry in extension_map[name].registries:
            config.extensions.registries[registry] = name

    if stale_names or new_names:
        config.dump()


def enable(name: str, config: Config) -> None:
    """Enable a known extension and save the config."""
    if name not in config.extensions.enabled:
        raise ValueError("Failed to find extension.")
    config.extensions.enabled[name] = True
    config.dump()


def disable(name: str, config: Config) -> None:
    """Disable a known extension and save the config."""
    if name not in config.extensions.enabled:
        raise ValueError("Failed to find extension.")
    config.extensions.enabled[name] = False
    config.dump()


def remove(name: str) -> None:
    """Delete an extension's executable and cached data, then update the config."""
    config = Config.load()
    update_config(config)

    all_names = get_all_names(config)
    if name not in all_names:
        raise ValueError(f"Failed to find extension. Known extensions: {', '.join(all_names)}")

    config_path = get_config_path(name)
    if config_path.is_file():
        _log.info("Removing extension config file: %s", config_path)
        config_path.unlink()

    bin_path = get_extension_paths().get(name)
    if bin_path is not None:
        _log.info("Deleting extension bin file: %s", bin_path)
        bin_path.unlink()

    update_config(config)


def is_enabled(name: str, config: Config) -> bool:
    """Return True if the named extension is enabled."""
    return config.extensions.enabled.get(name, False)


def get_enabled(names: Iterable[str], config: Config) -> List[Extension]:
    """Return the installed extensions that are enabled and among ``names``."""
    _log.debug("Identifying enabled extensions.")
    wanted = set(names)
    return [
        extension
        for extension in get_all()
        if config.extensions.enabled.get(extension.name, False) and extension.name in wanted
    ]


def get_enabled_names(config: Config) -> List[str]:
    """Return the names of enabled extensions, sorted."""
    return sorted(name for name, flag in config.extensions.enabled.items() if flag)


def get_all_names(config: Config) -> List[str]:
    """Return the names of all configured extensions, sorted."""
    return sorted(config.extensions.enabled)


def handle_extension_names_arg(
    extension_names: Optional[Sequence[str]], config: Config
) -> List[str]:
    """Check that the given extensions are enabled; default to all enabled extensions."""
    if extension_names is None:
        names = get_enabled_names(config)
    else:
        disabled = [name for name in extension_names if not is_enabled(name, config)]
        if disabled:
            raise ValueError(
                f"The following disabled extensions were given: {', '.join(disabled)}"
            )
        names = sorted(set(extension_names))
    _log.debug("Using extensions: %r", names)
    return names