"""Package-manager registry.

Static command sets for every supported package manager, plus the presence
checks and bootstrap logic used before anything is installed.  The selected
manager is always passed in explicitly as a ``PackageManagerProfile``; there
is no module-level "current manager".
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from launchpad.utils import CommandRunner, print_error, print_info, print_success


class PackageAction(str, Enum):
    """Operations every package manager must support."""

    INSTALL = "install"
    ADD = "add"
    BUILD = "build"
    DEV = "dev"
    LIST = "list"
    GLOBAL_ADD = "global_add"
    GLOBAL_LIST = "global_list"
    REMOVE = "remove"


class PackageManagerProfile(BaseModel):
    """Command templates for one package manager.

    Templates are shell command prefixes; callers append package names where
    the action takes arguments (``add``, ``global_add``, ``remove``...).
    """

    id: str
    install: str = Field(..., min_length=1)
    add: str = Field(..., min_length=1)
    build: str = Field(..., min_length=1)
    dev: str = Field(..., min_length=1)
    list: str = Field(..., min_length=1)
    global_add: str = Field(..., min_length=1)
    global_list: str = Field(..., min_length=1)
    remove: str = Field(..., min_length=1)
    run: str = Field(..., min_length=1)
    bootstrap: str | None = Field(
        default=None,
        description="Command that installs this manager; None means manual install only",
    )
    install_url: str = Field(default="")

    @property
    def auto_installable(self) -> bool:
        return self.bootstrap is not None

    def command(self, action: PackageAction | str, *args: str) -> str:
        """Return the command for *action*, with *args* appended."""
        template = getattr(self, PackageAction(action).value)
        return " ".join([template, *args]) if args else template


PACKAGE_MANAGERS: dict[str, PackageManagerProfile] = {
    "npm": PackageManagerProfile(
        id="npm",
        install="npm install",
        add="npm install",
        build="npm run build",
        dev="npm run dev",
        list="npm list",
        global_add="npm install -g",
        global_list="npm list -g",
        remove="npm uninstall",
        run="npm run",
        install_url="https://www.npmjs.com/get-npm",
    ),
    "pnpm": PackageManagerProfile(
        id="pnpm",
        install="pnpm install",
        add="pnpm add",
        build="pnpm run build",
        dev="pnpm run dev",
        list="pnpm list",
        global_add="pnpm add -g",
        global_list="pnpm list -g",
        remove="pnpm remove",
        run="pnpm run",
        bootstrap="npm install -g pnpm",
    ),
    "yarn": PackageManagerProfile(
        id="yarn",
        install="yarn",
        add="yarn add",
        build="yarn build",
        dev="yarn dev",
        list="yarn list",
        global_add="yarn global add",
        global_list="yarn global list",
        remove="yarn remove",
        run="yarn",
        bootstrap="npm install -g yarn",
    ),
    "bun": PackageManagerProfile(
        id="bun",
        install="bun install",
        add="bun add",
        build="bun run build",
        dev="bun run dev",
        list="bun pm ls",
        global_add="bun add --global",
        global_list="bun pm ls --global",
        remove="bun remove",
        run="bun run",
        bootstrap="npm install -g bun",
    ),
}


class UnknownPackageManagerError(KeyError):
    """Raised when a manager identifier is not in the registry."""


def get_profile(manager_id: str) -> PackageManagerProfile:
    """Look up the profile for *manager_id*."""
    try:
        return PACKAGE_MANAGERS[manager_id]
    except KeyError:
        supported = ", ".join(sorted(PACKAGE_MANAGERS))
        raise UnknownPackageManagerError(
            f"Unsupported package manager '{manager_id}' (expected one of: {supported})"
        ) from None


def command_for(manager_id: str, action: PackageAction | str) -> str:
    """Return the command template for *action* under *manager_id*."""
    return get_profile(manager_id).command(action)


async def is_installed(profile: PackageManagerProfile, runner: CommandRunner) -> bool:
    """``True`` iff ``<manager> --version`` exits zero."""
    return await runner.succeeds(f"{profile.id} --version")


async def ensure_installed(profile: PackageManagerProfile, runner: CommandRunner) -> bool:
    """Make sure *profile*'s manager is on the PATH, installing it if allowed.

    Returns:
        ``True`` if the manager is available afterwards.  A missing manager
        is reported but never raised; the caller decides whether to go on.
    """
    if await is_installed(profile, runner):
        return True

    print_info(
        f"The selected package manager '{profile.id}' is not installed. "
        "Attempting to install..."
    )

    if not profile.auto_installable:
        print_error(
            f"Please install {profile.id} manually from {profile.install_url} "
            "and then rerun Launchpad."
        )
        return False

    print_info(profile.bootstrap or "")
    returncode, _, stderr = await runner.run(profile.bootstrap or "", capture=False)
    if returncode != 0 or not await is_installed(profile, runner):
        detail = f": {stderr}" if stderr else ""
        print_error(
            f"Failed to install {profile.id}{detail}. "
            "Please install it manually and rerun Launchpad."
        )
        return False

    print_success(f"{profile.id} has been installed successfully.")
    return True


async def is_package_installed(
    profile: PackageManagerProfile,
    package: str,
    runner: CommandRunner,
    cwd: str | Path | None = None,
) -> bool:
    """``True`` if *package* shows up in the local dependency listing."""
    returncode, stdout, stderr = await runner.run(profile.list, cwd=cwd, capture=True)
    if returncode != 0:
        print_error(f"Failed to check if {package} is installed: {stderr}")
        return False
    return package in stdout


async def is_global_package_installed(
    profile: PackageManagerProfile,
    package: str,
    runner: CommandRunner,
) -> bool:
    """``True`` if *package* is installed globally through *profile*."""
    returncode, stdout, _ = await runner.run(
        profile.command(PackageAction.GLOBAL_LIST, package), capture=True
    )
    return returncode == 0 and package in stdout
