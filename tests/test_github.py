import io
import json
import sys
from unittest import mock

import pytest

from openfare.github import find_asset_url, get_archive_url, get_platform, get_releases
from openfare.paths import HTTP_USER_AGENT

RELEASES = [
    {"assets": "not a list"},
    {
        "assets": [
            {"name": "openfare-py-pc-windows-msvc.zip",
             "browser_download_url": "https://example.com/win.zip"},
            {"name": "openfare-py-x86_64-unknown-linux-musl.tar.gz",
             "browser_download_url": "https://example.com/linux.tar.gz"},
        ]
    },
]


def _response(payload):
    return io.BytesIO(json.dumps(payload).encode("utf-8"))


@pytest.mark.parametrize(
    "platform_name, expected",
    [("linux", "unknown-linux-musl"), ("darwin", "apple-darwin"), ("win32", "pc-windows-msvc")],
)
def test_get_platform(monkeypatch, platform_name, expected):
    monkeypatch.setattr(sys, "platform", platform_name)
    assert get_platform() == expected


def test_get_platform_unsupported(monkeypatch):
    monkeypatch.setattr(sys, "platform", "sunos5")
    with pytest.raises(ValueError, match="Unsupported OS type"):
        get_platform()


def test_find_asset_url_matches_platform():
    url = find_asset_url(RELEASES, "unknown-linux-musl")
    assert url == "https://example.com/linux.tar.gz"


def test_find_asset_url_none_when_missing():
    assert find_asset_url(RELEASES, "apple-darwin") is None


def test_find_asset_url_rejects_invalid_url():
    releases = [{"assets": [{"name": "tool-apple-darwin", "browser_download_url": "no-scheme"}]}]
    with pytest.raises(ValueError):
        find_asset_url(releases, "apple-darwin")


def test_get_releases_requests_api():
    with mock.patch("urllib.request.urlopen", return_value=_response(RELEASES)) as urlopen:
        releases = get_releases("https://github.com/openfare/openfare-py")
    assert releases == RELEASES
    request = urlopen.call_args[0][0]
    assert request.full_url == "https://api.github.com/repos/openfare/openfare-py/releases"
    assert request.get_header("User-agent") == HTTP_USER_AGENT


def test_get_releases_rejects_non_list():
    with mock.patch("urllib.request.urlopen", return_value=_response({"message": "x"})):
        with pytest.raises(ValueError, match="Failed to find releases"):
            get_releases("https://github.com/openfare/openfare-py")


def test_get_releases_rejects_bad_json():
    with mock.patch("urllib.request.urlopen", return_value=io.BytesIO(b"<html>")):
        with pytest.raises(ValueError, match="JSON was not well-formatted"):
            get_releases("https://github.com/openfare/openfare-py")


def test_get_archive_url(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    with mock.patch("urllib.request.urlopen", return_value=_response(RELEASES)):
        url = get_archive_url("https://github.com/openfare/openfare-py")
    assert url == "https://example.com/linux.tar.gz"