"""Filesystem materialiser.

Existence probes, exclusion-aware recursive copy, and recursive delete for
the destination tree.  Everything here is synchronous; the orchestrator runs
the heavier calls through ``asyncio.to_thread``.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from launchpad.config import CopySettings
from launchpad.utils import print_error, print_info


@dataclass
class CopyResult:
    """Outcome of a recursive copy."""

    files_copied: int = 0
    directories_created: int = 0
    skipped: list[Path] = field(default_factory=list)
    errors: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


def exists(path: str | Path) -> bool:
    """Return ``True`` if *path* exists.  Any access error counts as absent."""
    try:
        os.stat(path)
    except (OSError, ValueError):
        return False
    return True


def is_excluded(path: Path, is_dir: bool, settings: CopySettings) -> bool:
    """Check *path*'s basename against the directory or file exclusion set."""
    exclusions = settings.directory_exclusions if is_dir else settings.file_exclusions
    return path.name in exclusions


def copy_recursive(
    src: str | Path,
    dest: str | Path,
    settings: CopySettings | None = None,
    result: CopyResult | None = None,
) -> CopyResult:
    """Copy *src* to *dest* depth-first, skipping excluded entries entirely.

    Directories are created with their parents; files are copied byte for
    byte, overwriting whatever is already at the target.  In best-effort
    mode (the default) a failure on one entry is logged and recorded in the
    result while its siblings are still copied.  With
    ``settings.fail_fast`` the first failure is re-raised.
    """
    settings = settings or CopySettings()
    result = result if result is not None else CopyResult()
    src_path = Path(src)
    dest_path = Path(dest)

    try:
        is_dir = src_path.is_dir()
        if is_excluded(src_path, is_dir, settings):
            result.skipped.append(src_path)
            return result

        if is_dir:
            dest_path.mkdir(parents=True, exist_ok=True)
            result.directories_created += 1
            children = sorted(os.listdir(src_path))
        else:
            shutil.copyfile(src_path, dest_path)
            result.files_copied += 1
            return result
    except OSError as exc:
        print_error(f"Error copying from {src_path} to {dest_path}: {exc}")
        result.errors.append((src_path, str(exc)))
        if settings.fail_fast:
            raise
        return result

    for name in children:
        copy_recursive(src_path / name, dest_path / name, settings, result)

    return result


def restore_ignore_file(destination: str | Path, settings: CopySettings | None = None) -> bool:
    """Rename the packaged ignore-file alias back to its real name.

    Templates ship ``.gitignore`` under a neutral name so package publishing
    keeps it.  Returns ``True`` if a rename happened.
    """
    settings = settings or CopySettings()
    alias = Path(destination) / settings.ignore_file_alias
    if not exists(alias):
        return False
    alias.replace(Path(destination) / settings.ignore_file_name)
    return True


def delete_directory_recursive(path: str | Path) -> None:
    """Delete *path* and everything below it.  No-op if it does not exist.

    Symlinks are removed, never followed.
    """
    dir_path = Path(path)
    if not exists(dir_path) and not dir_path.is_symlink():
        return
    if dir_path.is_symlink() or not dir_path.is_dir():
        dir_path.unlink()
        return

    for child in dir_path.iterdir():
        if child.is_dir() and not child.is_symlink():
            delete_directory_recursive(child)
        else:
            child.unlink()
    dir_path.rmdir()


def is_effectively_empty(path: str | Path, ignore: tuple[str, ...] = (".git",)) -> bool:
    """``True`` if *path* holds nothing apart from the names in *ignore*."""
    return not [name for name in os.listdir(path) if name not in ignore]


def clear_install_artifacts(
    destination: str | Path,
    lock_files: list[str],
    dependency_cache_dir: str,
) -> list[str]:
    """Remove lockfiles and the dependency cache before an overwrite.

    Returns:
        Names of the entries that were removed.
    """
    root = Path(destination)
    removed: list[str] = []

    for lock_file in lock_files:
        lock_path = root / lock_file
        if lock_path.is_file():
            lock_path.unlink()
            removed.append(lock_file)
            print_info(f"Removed {lock_file}")

    cache_path = root / dependency_cache_dir
    if cache_path.exists():
        shutil.rmtree(cache_path)
        removed.append(dependency_cache_dir)
        print_info(f"Removed {dependency_cache_dir}")

    return removed
