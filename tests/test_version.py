"""
Tests for version lookup.
"""
import re
from importlib import metadata

import pytest

import smart_account_sdk
from smart_account_sdk.version import (
    UNKNOWN_VERSION,
    get_version,
    read_pyproject_version,
)


def _not_installed(name):
    raise metadata.PackageNotFoundError(name)


def test_package_exposes_semver():
    assert re.match(r"^\d+\.\d+\.\d+$", smart_account_sdk.__version__)


def test_installed_metadata_wins(monkeypatch):
    monkeypatch.setattr(metadata, "version", lambda name: "2.3.4")
    assert get_version() == "2.3.4"


def test_source_checkout_reads_pyproject(monkeypatch, tmp_path):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text('[project]\nname = "smart-account-sdk"\nversion = "1.2.3"\n')
    monkeypatch.setattr(metadata, "version", _not_installed)
    monkeypatch.setattr("smart_account_sdk.version.PYPROJECT_PATH", pyproject)

    assert get_version() == "1.2.3"


@pytest.mark.parametrize("content", [
    None,
    '[project]\nname = "smart-account-sdk"\n',
    "not = [valid toml",
])
def test_unreadable_pyproject_falls_back(tmp_path, content):
    pyproject = tmp_path / "pyproject.toml"
    if content is not None:
        pyproject.write_text(content)

    assert read_pyproject_version(pyproject) == UNKNOWN_VERSION
