"""Extensions that run as separate executables."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from openfare.extension.base import (
    Extension,
    FsDefinedDependenciesLocks,
    PackageDependenciesLocks,
    StaticData,
)
from openfare.extension.wire import ResultKind, decode_result

_log = logging.getLogger(__name__)

PathLike = Union[str, Path]


def run_process(process_path: PathLike, args: Sequence[str], kind: ResultKind) -> Any:
    """Run an extension executable with ``args`` and decode the result it prints."""
    args = list(args)
    _log.debug("Executing extensions process call with arguments\n%r", args)
    completed = subprocess.run(
        [str(process_path), *args],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        check=False,
    )
    stdout = completed.stdout.decode("utf-8", errors="replace")
    return decode_result(kind, stdout)


def _load_static_data(path: Path) -> StaticData:
    with path.open(encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"Invalid extension config file: {path}")
    name = data.get("name")
    registries = data.get("registry_host_names")
    if not isinstance(name, str) or not isinstance(registries, list) or not all(
        isinstance(registry, str) for registry in registries
    ):
        raise ValueError(f"Invalid extension config file: {path}")
    return StaticData(name=name, registry_host_names=registries)


def _store_static_data(path: Path, data: StaticData) -> None:
    try:
        with path.open("w", encoding="utf-8") as handle:
            json.dump(
                {"name": data.name, "registry_host_names": data.registry_host_names},
                handle,
                separators=(",", ":"),
            )
    except OSError as error:
        raise OSError(f"Can't open/create file for writing: {path}") from error


class ProcessExtension(Extension):
    """An extension executable driven through its command line."""

    def __init__(self, process_path: PathLike, name: str, registry_host_names: Sequence[str]):
        self.process_path = Path(process_path)
        self._name = name
        self._registries = list(registry_host_names)

    def __repr__(self) -> str:
        return (
            f"ProcessExtension(process_path={self.process_path!r}, "
            f"name={self._name!r}, registry_host_names={self._registries!r})"
        )

    @classmethod
    def from_process(
        cls, process_path: PathLike, extension_config_path: PathLike
    ) -> "ProcessExtension":
        """Load an extension, caching its static data in ``extension_config_path``."""
        config_path = Path(extension_config_path)
        if config_path.is_file():
            static_data = _load_static_data(config_path)
        else:
            static_data = run_process(
                process_path, [ResultKind.STATIC_DATA.value], ResultKind.STATIC_DATA
            )
            _store_static_data(config_path, static_data)
        return cls(process_path, static_data.name, static_data.registry_host_names)

    @property
    def name(self) -> str:
        return self._name

    @property
    def registries(self) -> List[str]:
        return list(self._registries)

    def package_dependencies_locks(
        self,
        package_name: str,
        package_version: Optional[str],
        extension_args: Sequence[str],
    ) -> PackageDependenciesLocks:
        kind = ResultKind.PACKAGE_DEPENDENCIES_LOCKS
        args = [kind.value, "--package-name", package_name]
        if package_version is not None:
            args += ["--package-version", package_version]
        for extension_arg in extension_args:
            args += ["--extension-args", extension_arg]
        return run_process(self.process_path, args, kind)

    def fs_defined_dependencies_locks(
        self,
        working_directory: PathLike,
        extension_args: Sequence[str],
    ) -> FsDefinedDependenciesLocks:
        kind = ResultKind.FS_DEFINED_DEPENDENCIES_LOCKS
        args = [kind.value, "--working-directory", str(working_directory)]
        for extension_arg in extension_args:
            args += ["--extension-args", extension_arg]
        return run_process(self.process_path, args, kind)