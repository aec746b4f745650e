"""Run identifiers and environment facts for the run manifest."""

import importlib.metadata
import platform
import secrets
import sys
from datetime import UTC, datetime

__all__ = [
    "RESULT_DEPENDENCIES",
    "generate_run_id",
    "get_dependency_versions",
    "get_package_version",
    "get_platform_info",
    "get_python_version",
]

# Libraries whose versions can change clustering results.
RESULT_DEPENDENCIES = ["rapidfuzz", "scikit-learn", "numpy", "openpyxl", "click"]


def generate_run_id() -> str:
    """Generate a run identifier.

    Returns
    -------
    str
        ``<UTC timestamp>__<8 hex chars>``, sortable by start time.
    """
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    return f"{timestamp}__{secrets.token_hex(4)}"


def get_package_version() -> str:
    """Installed booktally version, or "unknown" when running from a checkout."""
    try:
        return importlib.metadata.version("booktally")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_python_version() -> str:
    return sys.version.split()[0]


def get_platform_info() -> str:
    return f"{platform.system()}-{platform.release()}-{platform.machine()}"


def get_dependency_versions(packages: list[str]) -> dict[str, str]:
    """Look up installed versions of distributions.

    Parameters
    ----------
    packages : list[str]
        Distribution names as published on the package index.

    Returns
    -------
    dict[str, str]
        Name to version; "unknown" for packages that are not installed.
    """
    versions: dict[str, str] = {}
    for package in packages:
        try:
            versions[package] = importlib.metadata.version(package)
        except importlib.metadata.PackageNotFoundError:
            versions[package] = "unknown"
    return versions
