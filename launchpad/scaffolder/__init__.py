"""Launchpad scaffolder -- materialises a template into the destination.

Quick usage::

    from launchpad.scaffolder import copy_recursive, personalize

    copy_recursive(template_dir, destination)
    personalize(destination / "package.json", "my-app", "Jane")
"""

from launchpad.scaffolder.filesystem import (
    CopyResult,
    clear_install_artifacts,
    copy_recursive,
    delete_directory_recursive,
    exists,
    is_effectively_empty,
    restore_ignore_file,
)
from launchpad.scaffolder.manifest import TEMPLATE_ONLY_FIELDS, ManifestError, personalize

__all__ = [
    "CopyResult",
    "ManifestError",
    "TEMPLATE_ONLY_FIELDS",
    "clear_install_artifacts",
    "copy_recursive",
    "delete_directory_recursive",
    "exists",
    "is_effectively_empty",
    "personalize",
    "restore_ignore_file",
]
