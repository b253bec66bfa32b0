"""Finding extension release archives on GitHub."""

from __future__ import annotations

import json
import logging
import sys
import urllib.error
import urllib.request
from typing import Any, List, Optional, Sequence
from urllib.parse import urlsplit

from openfare.paths import HTTP_USER_AGENT

_log = logging.getLogger(__name__)

_PLATFORMS = {
    "linux": "unknown-linux-musl",
    "darwin": "apple-darwin",
    "win32": "pc-windows-msvc",
}


def get_platform() -> str:
    """Return the release target name used for the running operating system."""
    os_name = "linux" if sys.platform.startswith("linux") else sys.platform
    try:
        return _PLATFORMS[os_name]
    except KeyError:
        raise ValueError(f"Unsupported OS type: {sys.platform}") from None


def _parse_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.scheme or (parts.scheme in ("http", "https") and not parts.netloc):
        raise ValueError(f"Invalid URL: {url}")
    return url


def find_asset_url(releases: Sequence[Any], platform: str) -> Optional[str]:
    """Return the download URL of the first release asset whose name mentions ``platform``."""
    for release in releases:
        assets = release.get("assets") if isinstance(release, dict) else None
        if not isinstance(assets, list):
            continue
        for asset in assets:
            if not isinstance(asset, dict):
                continue
            name = asset.get("name")
            if isinstance(name, str) and platform in name:
                url = asset.get("browser_download_url")
                if isinstance(url, str):
                    return _parse_url(url)
    return None


def get_releases(repo_url: str) -> List[Any]:
    """Fetch the releases of a repository given its GitHub URL."""
    path = urlsplit(str(repo_url)).path or "/"
    releases_url = f"https://api.github.com/repos{path}/releases"
    _log.debug("Using releases URL: %s", releases_url)

    request = urllib.request.Request(releases_url, headers={"User-Agent": HTTP_USER_AGENT})
    try:
        with urllib.request.urlopen(request) as response:
            body = response.read()
    except urllib.error.HTTPError as error:
        body = error.read()
    text = body.decode("utf-8", errors="replace")
    try:
        releases = json.loads(text)
    except json.JSONDecodeError as error:
        raise ValueError(f"JSON was not well-formatted:\n{text}") from error
    if not isinstance(releases, list):
        raise ValueError("Failed to find releases from GitHub repo.")
    return releases


def get_archive_url(repo_url: str) -> Optional[str]:
    """Return the release archive URL for this platform, or None if there is none."""
    platform = get_platform()
    _log.debug("Identified target platform: %s", platform)
    releases = get_releases(repo_url)
    if releases:
        _log.debug("Found %d candidate releases.", len(releases))
    else:
        _log.debug("Failed to find any releases corresponding to repository URL.")
    return find_asset_url(releases, platform)