"""Launchpad package-manager support.

Key objects:
    PACKAGE_MANAGERS        - Registry of supported managers (npm, pnpm, yarn, bun)
    PackageManagerProfile   - Command templates for one manager
    PackageAction           - The eight operations every manager supports
"""

from .registry import (
    PACKAGE_MANAGERS,
    PackageAction,
    PackageManagerProfile,
    UnknownPackageManagerError,
    command_for,
    ensure_installed,
    get_profile,
    is_global_package_installed,
    is_installed,
    is_package_installed,
)

__all__ = [
    "PACKAGE_MANAGERS",
    "PackageAction",
    "PackageManagerProfile",
    "UnknownPackageManagerError",
    "command_for",
    "ensure_installed",
    "get_profile",
    "is_global_package_installed",
    "is_installed",
    "is_package_installed",
]
