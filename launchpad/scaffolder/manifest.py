"""Manifest personaliser.

Rewrites the copied ``package.json`` so it describes the new project rather
than the template it came from.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from launchpad.utils import LaunchpadError, load_json, save_json

# Fields describing the template's own packaging; never carried over.
TEMPLATE_ONLY_FIELDS: tuple[str, ...] = (
    "bin",
    "files",
    "main",
    "repository",
    "homepage",
    "bugs",
)


class ManifestError(LaunchpadError):
    """Raised when the manifest cannot be read as a JSON object."""


def personalize(
    manifest_path: str | Path,
    new_name: str,
    author: str,
    version: str = "0.0.1",
) -> dict[str, Any]:
    """Rewrite identity fields in the manifest at *manifest_path*.

    * ``name`` becomes *new_name* when it is non-empty.
    * ``version`` is reset to *version*.
    * ``author`` is set to *author*.
    * Every field in ``TEMPLATE_ONLY_FIELDS`` is removed.

    Returns:
        The manifest as written.

    Raises:
        ManifestError: If the file is missing, not valid JSON, or not an object.
    """
    path = Path(manifest_path)
    try:
        data = load_json(path)
    except FileNotFoundError as exc:
        raise ManifestError(f"Manifest not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Manifest {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} must contain a JSON object")

    if new_name:
        data["name"] = new_name
    data["version"] = version
    data["author"] = author
    for key in TEMPLATE_ONLY_FIELDS:
        data.pop(key, None)

    save_json(data, path)
    return data
