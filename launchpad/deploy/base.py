"""Shared deployment flow for every hosting target.

A driver prepares the destination, makes sure the target's CLI is
installed, links the project to GitHub, and then either sets up continuous
deployment (linked) or installs, builds and deploys by hand (not linked).
Finally it records the chosen target in the project's hosting constant.

Nothing raised inside a step escapes ``deploy()`` except ``BootstrapAborted``,
which carries an explicit user decision to stop.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from launchpad.config import Config, HostingChoice
from launchpad.packages import PackageAction, PackageManagerProfile, is_global_package_installed
from launchpad.prompts import Prompter
from launchpad.utils import (
    BootstrapAborted,
    CommandError,
    CommandRunner,
    LaunchpadError,
    print_error,
    print_info,
    print_step_header,
    print_success,
    print_warning,
)
from launchpad.vcs import GitHubLinker, LinkResult, VcsLinkState

HOSTING_CONSTANT_PATTERN = re.compile(
    r'(export\s+const\s+HOSTING_SERVICE\s*:\s*"cloudflare"\s*\|\s*"netlify"\s*\|\s*"none"\s*=\s*)'
    r'"[^"]*"'
)


@dataclass
class DeploymentOutcome:
    """Result of one ``deploy()`` call."""

    target: HostingChoice
    link_state: VcsLinkState
    linked: bool
    success: bool
    constant_updated: bool = False
    errors: list[str] = field(default_factory=list)


def record_hosting_target(destination: str | Path, relative_file: str, value: str) -> bool:
    """Rewrite the ``HOSTING_SERVICE`` assignment in the project's source.

    Returns:
        ``True`` if the file was rewritten.  A missing file or a missing
        assignment is logged and reported as ``False``.
    """
    consts_path = Path(destination) / relative_file
    try:
        content = consts_path.read_text(encoding="utf-8")
    except (OSError, UnicodeError) as exc:
        print_warning(f"Could not read {relative_file} to record the hosting target: {exc}")
        return False

    updated, count = HOSTING_CONSTANT_PATTERN.subn(rf'\g<1>"{value}"', content, count=1)
    if count == 0:
        print_warning(f"No HOSTING_SERVICE assignment found in {relative_file}; left unchanged.")
        return False

    try:
        consts_path.write_text(updated, encoding="utf-8")
    except OSError as exc:
        print_warning(f"Could not update {relative_file}: {exc}")
        return False

    print_info(f"Updated HOSTING_SERVICE value to '{value}' in {relative_file}")
    return True


class DeploymentDriver:
    """Base class for hosting-target drivers.

    Subclasses set ``target``, ``cli_package`` and implement the two
    command builders; ``prepare``/``cleanup`` are optional hooks.
    """

    target: HostingChoice
    cli_package: str

    def __init__(
        self,
        profile: PackageManagerProfile,
        runner: CommandRunner,
        prompter: Prompter,
        config: Config | None = None,
        linker_factory: Callable[[Path], GitHubLinker] | None = None,
    ) -> None:
        self.profile = profile
        self.runner = runner
        self.prompter = prompter
        self.config = config or Config()
        self.linker_factory = linker_factory or self._default_linker

    def _default_linker(self, destination: Path) -> GitHubLinker:
        return GitHubLinker(destination, self.runner, self.prompter, self.config.vcs)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    async def prepare(self, destination: Path) -> None:
        """Write target-specific files before anything else runs."""

    async def cleanup(self, destination: Path) -> None:
        """Remove parts of the template the target does not use."""

    def continuous_setup_command(self, package_name: str) -> str:
        raise NotImplementedError

    def manual_deploy_command(self) -> str:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def ensure_cli(self) -> bool:
        """Install the target's CLI globally if the package manager lacks it."""
        if await is_global_package_installed(self.profile, self.cli_package, self.runner):
            print_info(f"{self.cli_package} is already installed.")
            return True

        print_info(f"{self.cli_package} is not installed. Installing using {self.profile.id}...")
        try:
            await self.runner.check(self.profile.command(PackageAction.GLOBAL_ADD, self.cli_package))
        except CommandError as exc:
            print_error(f"Failed to install {self.cli_package}: {exc}")
            return False
        print_success(f"{self.cli_package} installed successfully.")
        return True

    async def setup_continuous(self, package_name: str, destination: Path) -> bool:
        """Run the target's continuous-deployment setup in *destination*.

        Args:
            package_name: Name used for the hosted project where the target
                needs one.
            destination: Project root the command runs in.

        Returns:
            ``True`` if the setup command exited zero.  Failures are logged,
            never raised.
        """
        try:
            await self.runner.check(self.continuous_setup_command(package_name), cwd=destination)
        except CommandError as exc:
            print_error(f"Failed to set up continuous deployment to {self.target.label}: {exc}")
            return False
        print_success(f"Continuous deployment to {self.target.label} set up successfully.")
        return True

    async def deploy_manually(self, destination: Path) -> bool:
        """Install, build and deploy *destination* without a linked repository.

        The chain stops at the first failing command.

        Returns:
            ``True`` if all three commands exited zero.
        """
        try:
            print_info(f"Starting packages installation and build in {destination}")
            await self.runner.check(self.profile.install, cwd=destination)
            await self.runner.check(self.profile.build, cwd=destination)
            print_info(f"Build completed. Starting {self.target.label} deployment...")
            await self.runner.check(self.manual_deploy_command(), cwd=destination)
        except CommandError as exc:
            print_error(f"Failed to deploy to {self.target.label}: {exc}")
            return False
        print_success(f"Deployment to {self.target.label} completed successfully.")
        return True

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def deploy(self, package_name: str, destination: str | Path) -> DeploymentOutcome:
        """Run the full deployment flow for this target."""
        destination = Path(destination)
        errors: list[str] = []
        print_step_header(f"Deploying to {self.target.label}")

        for hook in (self.prepare, self.cleanup):
            try:
                await hook(destination)
            except (OSError, UnicodeError) as exc:
                print_error(f"{self.target.label} {hook.__name__} step failed: {exc}")
                errors.append(str(exc))

        print_info(f"Making sure that {self.cli_package} is installed.")
        if not await self.ensure_cli():
            errors.append(f"{self.cli_package} unavailable")

        print_info("Checking the GitHub connection and creating a repository if needed.")
        linker = self.linker_factory(destination)
        try:
            link = await linker.ensure_connected(package_name)
        except BootstrapAborted:
            raise
        except LaunchpadError as exc:
            print_error(f"Failed to link the repository: {exc}")
            errors.append(str(exc))
            link = LinkResult(linked=False, state=linker.state, repo_name=package_name)

        print_info(f"Starting {self.target.label} deployment, it could take some seconds.")
        if link.linked:
            success = await self.setup_continuous(package_name, destination)
        else:
            success = await self.deploy_manually(destination)
        if not success:
            errors.append("deployment did not complete")

        constant_updated = await asyncio.to_thread(
            record_hosting_target,
            destination,
            self.config.hosting_constant_file,
            self.target.value,
        )

        return DeploymentOutcome(
            target=self.target,
            link_state=link.state,
            linked=link.linked,
            success=success,
            constant_updated=constant_updated,
            errors=errors,
        )
