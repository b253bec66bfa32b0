"""Downloading and unpacking extension release archives."""

from __future__ import annotations

import logging
import os
import shutil
import tarfile
import urllib.error
import urllib.request
import uuid
import zipfile
from enum import Enum
from pathlib import Path, PurePath, PurePosixPath
from typing import Optional, Union

_log = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class ArchiveType(Enum):
    """Archive formats that can be unpacked."""

    ZIP = "zip"
    TAR_GZ = "tar.gz"
    TGZ = "tgz"
    UNKNOWN = "unknown"

    @classmethod
    def from_path(cls, path: PathLike) -> "ArchiveType":
        """Identify the archive format from a path's file extension."""
        known = {member.value: member for member in (cls.ZIP, cls.TAR_GZ, cls.TGZ)}
        return known.get(get_file_extension(path), cls.UNKNOWN)

    def to_suffix(self) -> str:
        """Return the file extension for this format, without a leading dot."""
        if self is ArchiveType.UNKNOWN:
            raise ValueError("Failed to convert unknown archive type into string.")
        return self.value


def get_file_extension(path: PathLike) -> str:
    """Return the archive file extension of ``path``; ``tar.gz`` counts as one."""
    text = os.fspath(path)
    if text.endswith(".tar.gz"):
        return "tar.gz"
    return PurePath(text).suffix[1:]


def extract(archive_path: PathLike, destination_directory: PathLike) -> Path:
    """Unpack an archive into a directory and return the unpacked workspace directory."""
    archive_path = Path(archive_path)
    destination_directory = Path(destination_directory)
    _log.debug("Extracting archive: %s", archive_path)
    archive_type = ArchiveType.from_path(archive_path)
    if archive_type is ArchiveType.ZIP:
        workspace = _extract_zip(archive_path, destination_directory)
    elif archive_type in (ArchiveType.TAR_GZ, ArchiveType.TGZ):
        workspace = _extract_tar_gz(archive_path, destination_directory)
    else:
        raise ValueError(
            f"Archive extraction failed. Unsupported archive file type: {archive_path}"
        )
    _log.debug("Archive extraction complete. Workspace directory: %s", workspace)
    return workspace


def _enclosed_name(name: str) -> Optional[Path]:
    """Return ``name`` as a relative path, or None if it would escape its directory."""
    if "\0" in name:
        return None
    path = PurePosixPath(name)
    if path.is_absolute():
        return None
    depth = 0
    for part in path.parts:
        if part == "..":
            depth -= 1
            if depth < 0:
                return None
        else:
            depth += 1
    return Path(*path.parts) if path.parts else None


def _extract_zip(archive_path: Path, destination_directory: Path) -> Path:
    with zipfile.ZipFile(archive_path) as archive:
        entries = archive.infolist()
        first = _enclosed_name(entries[0].filename) if entries else None
        if first is None:
            raise ValueError(f"Archive is unexpectedly empty: {archive_path}")
        extracted_directory = destination_directory / first

        for info in entries:
            relative = _enclosed_name(info.filename)
            if relative is None:
                continue
            output_path = destination_directory / relative
            if info.filename.endswith("/"):
                output_path.mkdir(parents=True, exist_ok=True)
            else:
                output_path.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as source, output_path.open("wb") as target:
                    shutil.copyfileobj(source, target)
    return extracted_directory


def _tar_top_directory_name(archive_path: Path) -> Optional[str]:
    with tarfile.open(archive_path, "r:gz") as archive:
        first = archive.next()
    if first is None or not first.name:
        raise ValueError("Archive empty.")
    raw = first.name
    if raw.startswith("/"):
        return None
    if raw == "." or raw.startswith("./"):
        return "."
    parts = PurePosixPath(raw).parts
    if not parts:
        raise ValueError("Archive empty.")
    return parts[0]


def _extract_tar_gz(archive_path: Path, destination_directory: Path) -> Path:
    top_directory_name = _tar_top_directory_name(archive_path)

    with tarfile.open(archive_path, "r:gz") as archive:
        if hasattr(tarfile, "data_filter"):
            archive.extractall(destination_directory, filter="data")
        else:
            archive.extractall(destination_directory)

    if top_directory_name is not None:
        _log.debug("Found archive top level directory name: %s", top_directory_name)
        workspace = destination_directory / top_directory_name
    else:
        _log.debug("Archive top level directory not found. Creating stand-in.")
        workspace = destination_directory / f"openfare-workspace-{uuid.uuid4()}"
        workspace.mkdir()
        for entry in list(destination_directory.iterdir()):
            if entry == workspace or entry == archive_path:
                continue
            entry.rename(workspace / entry.name)

    _log.debug("Using workspace directory: %s", workspace)
    return workspace


def download(url: str, destination_path: PathLike) -> None:
    """Download ``url`` and write its body to ``destination_path``."""
    _log.debug("Downloading archive to destination path: %s", destination_path)
    try:
        with urllib.request.urlopen(str(url)) as response:
            content = response.read()
    except urllib.error.HTTPError as error:
        content = error.read()
    with open(destination_path, "wb") as handle:
        handle.write(content)
        handle.flush()
        os.fsync(handle.fileno())
    _log.debug("Finished writing archive.")