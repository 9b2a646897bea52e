"""
Package version.

Installed distributions report the version from their metadata; a source
checkout reads it from ``pyproject.toml``.
"""
import pathlib
from importlib import metadata
from typing import Optional

import tomli

DISTRIBUTION_NAME = "smart-account-sdk"
UNKNOWN_VERSION = "0.3.0"
PYPROJECT_PATH = pathlib.Path(__file__).resolve().parent.parent / "pyproject.toml"


def read_pyproject_version(path: Optional[pathlib.Path] = None) -> str:
    """``project.version`` from a pyproject file, or UNKNOWN_VERSION when unreadable."""
    try:
        with (path or PYPROJECT_PATH).open("rb") as f:
            return tomli.load(f)["project"]["version"]
    except (OSError, KeyError, tomli.TOMLDecodeError):
        return UNKNOWN_VERSION


def get_version() -> str:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return read_pyproject_version()


__version__ = get_version()
