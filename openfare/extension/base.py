"""Data exchanged with extensions and the interface every extension provides."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from openfare.package import PackageLocks


@dataclass(frozen=True, order=True)
class VersionError:
    """Why a dependency's version could not be determined."""

    message: str

    @classmethod
    def from_missing_version(cls) -> "VersionError":
        return cls("Missing version number")

    @classmethod
    def from_parse_error(cls, raw_version_number: str) -> "VersionError":
        return cls(f"Version parse error: {raw_version_number}")

    def __str__(self) -> str:
        return self.message


VersionParseResult = Union[str, VersionError]


@dataclass(frozen=True)
class Dependency:
    """A dependency as specified within a dependencies definition file."""

    name: str
    version: VersionParseResult


@dataclass
class PackageDependencies:
    """Package dependencies found by querying a registry."""

    package_version: VersionParseResult
    registry_host_name: str
    dependencies: List[Dependency] = field(default_factory=list)


@dataclass
class FileDefinedDependencies:
    """A dependencies specification file found on the local filesystem."""

    path: Path
    registry_host_name: str
    dependencies: List[Dependency] = field(default_factory=list)


@dataclass(frozen=True)
class RegistryPackageMetadata:
    """Where a package lives in a registry."""

    registry_host_name: str
    human_url: str
    artifact_url: str
    is_primary: bool
    package_version: str


@dataclass
class StaticData:
    """Fixed facts about an extension: its name and supported registries."""

    name: str
    registry_host_names: List[str] = field(default_factory=list)


@dataclass
class PackageDependenciesLocks:
    """Locks found for a registry package and its dependencies."""

    registry_host_name: str
    package_locks: PackageLocks = field(default_factory=PackageLocks)


@dataclass
class FsDefinedDependenciesLocks:
    """Locks found for the dependencies of a local project."""

    project_path: Path
    package_locks: PackageLocks = field(default_factory=PackageLocks)


class Extension(ABC):
    """A handler for one language ecosystem's packages and registries."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short extension name, such as ``py``."""

    @property
    @abstractmethod
    def registries(self) -> List[str]:
        """Host names of the registries this extension supports."""

    @abstractmethod
    def package_dependencies_locks(
        self,
        package_name: str,
        package_version: Optional[str],
        extension_args: Sequence[str],
    ) -> PackageDependenciesLocks:
        """Return OpenFare locks for a package and its dependencies."""

    @abstractmethod
    def fs_defined_dependencies_locks(
        self,
        working_directory: Path,
        extension_args: Sequence[str],
    ) -> FsDefinedDependenciesLocks:
        """Return OpenFare locks for a local project's dependencies."""