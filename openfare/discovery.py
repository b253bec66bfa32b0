"""Finding installed extensions and querying them in parallel."""

from __future__ import annotations

import logging
import os
import re
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from openfare.extension.base import Extension
from openfare.extension.process import ProcessExtension
from openfare.paths import get_config_paths, get_extensions_default_directory

_log = logging.getLogger(__name__)

EXTENSION_FILE_NAME_PREFIX = "openfare-"

_NAME_PATTERN = re.compile(re.escape(EXTENSION_FILE_NAME_PREFIX) + r"([a-z]*).*")

PathLike = Union[str, "os.PathLike[str]"]


def get_config_path(extension_name: str) -> Path:
    """Return the path of the file caching an extension's static data."""
    return get_config_paths().extensions_directory / f"{extension_name}.json"


def get_extension_name(file_path: PathLike) -> Optional[str]:
    """Return the extension name from an executable's file name, or None."""
    file_name = Path(file_path).name
    if not file_name:
        raise ValueError("Failed to parse path file name.")
    match = _NAME_PATTERN.search(file_name)
    return match.group(1) if match else None


def _candidate_extension_paths() -> List[Path]:
    path_value = os.environ.get("PATH")
    if path_value is None:
        raise RuntimeError("Failed to read PATH environment variable.")
    paths = [Path(entry) for entry in path_value.split(os.pathsep) if entry]
    default_directory = get_extensions_default_directory()
    if default_directory is not None and default_directory.exists():
        paths.append(default_directory)
    return paths


def get_extension_paths() -> Dict[str, Path]:
    """Map extension names to executables found on PATH and in the default directory.

    Directories are searched one level deep; later findings replace earlier ones.
    """
    result: Dict[str, Path] = {}
    for path in _candidate_extension_paths():
        if path.is_file():
            candidates = [path]
        elif path.is_dir():
            candidates = [entry for entry in sorted(path.iterdir()) if entry.is_file()]
        else:
            continue
        for candidate in candidates:
            name = get_extension_name(candidate)
            if name is not None:
                result[name] = candidate
    return result


def _gather(extensions: Sequence[Extension], call: Callable[[Extension], Any]) -> List[Any]:
    if not extensions:
        return []
    with ThreadPoolExecutor(max_workers=len(extensions)) as pool:
        futures = [pool.submit(call, extension) for extension in extensions]
    outcomes: List[Any] = []
    for future in futures:
        error = future.exception()
        outcomes.append(error if isinstance(error, Exception) else future.result())
    return outcomes


def get_all() -> List[Extension]:
    """Load every discoverable extension; ones that fail to load are reported and skipped."""
    _log.debug("Identifying all extensions.")
    items = sorted(get_extension_paths().items())
    if not items:
        return []
    with ThreadPoolExecutor(max_workers=len(items)) as pool:
        futures = [
            pool.submit(ProcessExtension.from_process, path, get_config_path(name))
            for name, path in items
        ]
    extensions: List[Extension] = []
    for (_name, path), future in zip(items, futures):
        error = future.exception()
        if isinstance(error, Exception):
            print(f"{path}: Failed to load extension.\n{error}", file=sys.stderr)
        else:
            extensions.append(future.result())
    return extensions


def fs_defined_dependencies_locks(
    working_directory: PathLike,
    extensions: Sequence[Extension],
    extension_args: Sequence[str],
) -> List[Any]:
    """Ask every extension, in parallel, for a local project's dependency locks.

    Returns one entry per extension, in order: its result or the exception it raised.
    """
    directory = Path(working_directory)
    return _gather(
        extensions,
        lambda extension: extension.fs_defined_dependencies_locks(directory, extension_args),
    )


def package_dependencies_locks(
    package_name: str,
    package_version: Optional[str],
    extensions: Sequence[Extension],
    extension_args: Sequence[str],
) -> List[Any]:
    """Ask every extension, in parallel, for a package's dependency locks.

    Returns one entry per extension, in order: its result or the exception it raised.
    """
    return _gather(
        extensions,
        lambda extension: extension.package_dependencies_locks(
            package_name, package_version, extension_args
        ),
    )