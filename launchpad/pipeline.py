"""Launchpad bootstrap orchestrator.

Runs the fixed sequence that turns a template into a new project:

1. Ensure the chosen package manager is installed.
2. Prepare the destination (create it, or confirm an overwrite).
3. Copy the template and restore its ignore file.
4. Personalise the manifest.
5. Install dependencies.
6. Deploy (Netlify / Cloudflare Pages), if requested.
7. Install any extra packages.
8. Print completion guidance and optionally start the dev server.

Usage::

    launchpad --name my-site --destination ./my-site --package-manager pnpm
    launchpad --config launchpad.json --save-config launchpad.json
    python -m launchpad.pipeline --hosting none --no-run-dev
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any

from rich.markup import escape

from launchpad.config import Config, HostingChoice, ProjectRequest
from launchpad.deploy import DRIVERS, DeploymentOutcome
from launchpad.packages import (
    PackageAction,
    ensure_installed,
    get_profile,
    is_package_installed,
)
from launchpad.prompts import Prompter, RichPrompter, gather_request
from launchpad.scaffolder import (
    clear_install_artifacts,
    copy_recursive,
    exists,
    is_effectively_empty,
    personalize,
    restore_ignore_file,
)
from launchpad.utils import (
    BootstrapAborted,
    CommandError,
    CommandRunner,
    console,
    print_error,
    print_info,
    print_panel,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
)
from launchpad.vcs import get_author_name

DEPLOY_GUIDES: dict[str, str] = {
    "Netlify": "https://docs.astro.build/en/guides/deploy/netlify",
    "Cloudflare Pages": "https://docs.astro.build/en/guides/deploy/cloudflare",
}


class Bootstrapper:
    """Sequences one bootstrap run.

    Attributes:
        config: Global configuration.
        request: What the user asked for.
        profile: The selected package manager, passed to every collaborator.
        state: Accumulates what each step did, for the final summary.
    """

    def __init__(
        self,
        config: Config,
        request: ProjectRequest,
        runner: CommandRunner | None = None,
        prompter: Prompter | None = None,
        *,
        interactive: bool = True,
        run_dev: bool | None = None,
        assume_yes: bool = False,
    ) -> None:
        self.config = config
        self.request = request
        self.runner = runner or CommandRunner()
        self.prompter = prompter or RichPrompter()
        self.interactive = interactive
        self.run_dev = run_dev
        self.assume_yes = assume_yes
        self.profile = get_profile(request.package_manager)
        self.destination = Path(request.destination).expanduser().resolve()
        self.state: dict[str, Any] = {
            "package_manager_available": False,
            "files_copied": 0,
            "copy_errors": 0,
            "dependencies_installed": False,
            "deployment": None,
            "extra_packages_installed": [],
            "extra_packages_failed": [],
        }

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def prepare_destination(self) -> None:
        """Create the destination, or confirm overwriting a non-empty one."""
        if not exists(self.destination):
            self.destination.mkdir(parents=True, exist_ok=True)
            return

        if is_effectively_empty(self.destination):
            return

        if not self.assume_yes and not self.prompter.confirm(
            f"The directory {self.destination} is not empty. "
            "Are you sure you want to proceed and overwrite its contents?",
            default=False,
        ):
            raise BootstrapAborted("Aborted. Exiting...")

        await asyncio.to_thread(
            clear_install_artifacts,
            self.destination,
            self.config.lock_files,
            self.config.dependency_cache_dir,
        )

    async def materialize(self) -> None:
        """Copy the template into the destination."""
        template_dir = self.config.template_dir
        if not template_dir.is_dir():
            raise FileNotFoundError(f"Template directory not found: {template_dir}")

        result = await asyncio.to_thread(
            copy_recursive, template_dir, self.destination, self.config.copy_settings
        )
        await asyncio.to_thread(
            restore_ignore_file, self.destination, self.config.copy_settings
        )

        self.state["files_copied"] = result.files_copied
        self.state["copy_errors"] = len(result.errors)
        if result.errors:
            print_warning(
                f"{len(result.errors)} template entries could not be copied; "
                "the project may be incomplete."
            )

    async def personalize_manifest(self) -> dict[str, Any]:
        author = await get_author_name(
            self.runner, cwd=self.destination, fallback=self.config.vcs.fallback_author
        )
        manifest = await asyncio.to_thread(
            personalize,
            self.destination / self.config.manifest_name,
            self.request.package_name,
            author,
            self.config.manifest_version,
        )
        print_info(f"Project initialized in {self.destination}")
        return manifest

    async def install_dependencies(self) -> None:
        print_info(f"Starting packages installation in {self.destination}")
        await self.runner.check(self.profile.install, cwd=self.destination)
        self.state["dependencies_installed"] = True
        print_success("Packages installed successfully.")

    async def deploy(self) -> DeploymentOutcome | None:
        driver_cls = DRIVERS.get(self.request.hosting)
        if driver_cls is None:
            return None
        driver = driver_cls(self.profile, self.runner, self.prompter, self.config)
        outcome = await driver.deploy(self.request.package_name, self.destination)
        self.state["deployment"] = outcome
        return outcome

    async def install_extra_packages(self, packages: list[str]) -> None:
        """Add *packages*; fall back to one at a time if the batch fails.

        Packages the project already depends on are skipped.
        """
        if not packages:
            return

        missing: list[str] = []
        for package in packages:
            if await is_package_installed(self.profile, package, self.runner, self.destination):
                print_info(f"{package} is already installed.")
                self.state["extra_packages_installed"].append(package)
            else:
                missing.append(package)
        packages = missing
        if not packages:
            return

        print_info(f"Installing additional packages: {' '.join(packages)}")
        try:
            await self.runner.check(
                self.profile.command(PackageAction.ADD, *packages), cwd=self.destination
            )
            self.state["extra_packages_installed"].extend(packages)
            print_success("Additional packages installed successfully.")
            return
        except CommandError as exc:
            print_error(f"Failed to install additional packages together: {exc}")

        for package in packages:
            try:
                await self.runner.check(
                    self.profile.command(PackageAction.ADD, package), cwd=self.destination
                )
                self.state["extra_packages_installed"].append(package)
            except CommandError as exc:
                print_error(f"Skipping {package}: {exc}")
                self.state["extra_packages_failed"].append(package)

    def _choose_extra_packages(self) -> list[str]:
        if self.request.extra_packages or not self.interactive:
            return list(self.request.extra_packages)
        return self.prompter.checkbox(
            "Which additional packages would you like to install?",
            self.config.optional_packages,
        )

    def print_completion_guidance(self) -> None:
        hosting = self.request.hosting
        steps = [f"1. [Run the project]: {self.profile.dev}"]
        if hosting is HostingChoice.NETLIFY:
            steps.append("2. [Open Netlify site]: netlify open")
        elif hosting is HostingChoice.CLOUDFLARE:
            steps.append(
                "2. [Connect Cloudflare Pages to your repo]: "
                "https://developers.cloudflare.com/pages/framework-guides/deploy-an-astro-site/"
            )
        else:
            steps.append("2. [Deployment] For Netlify or Cloudflare Pages deployment check:")
            steps.extend(f"     {name}: {url}" for name, url in DEPLOY_GUIDES.items())
        steps.append("3. [Astro docs]: https://docs.astro.build")

        body = "\n".join(
            [
                "[bold green]Your project has been successfully initialized![/bold green]",
                "",
                *(escape(step) for step in steps),
            ]
        )
        console.print()
        print_panel(body, title="PROJECT SUCCESSFULLY CREATED", border_style="bold green")

    async def maybe_run_dev(self) -> None:
        run_dev = self.run_dev
        if run_dev is None:
            run_dev = self.interactive and self.prompter.confirm(
                f"Do you want to run the project locally? ({self.profile.dev})", default=True
            )

        if not run_dev:
            print_info(
                f"You can run '{self.profile.dev}' in {self.destination} whenever you're ready."
            )
            return

        returncode, _, _ = await self.runner.run(
            self.profile.dev, cwd=self.destination, capture=False
        )
        if returncode != 0:
            print_warning(f"'{self.profile.dev}' exited with status {returncode}.")

    # ------------------------------------------------------------------
    # Sequencing
    # ------------------------------------------------------------------

    async def bootstrap(self) -> dict[str, Any]:
        """Run every step in order.  Errors propagate to ``run()``."""
        console.print(
            f"[bold bright_cyan]Launchpad[/bold bright_cyan]  "
            f"{escape(self.request.package_name)} -> {escape(str(self.destination))}"
        )

        print_step_header("Package manager")
        available = await ensure_installed(self.profile, self.runner)
        self.state["package_manager_available"] = available

        print_step_header("Project files")
        await self.prepare_destination()
        await self.materialize()
        await self.personalize_manifest()

        if not available:
            print_warning(
                f"{self.profile.id} is unavailable: skipping dependency installation, "
                "deployment and the dev server."
            )
            self.print_completion_guidance()
            self._print_summary()
            return self.state

        print_step_header("Dependencies")
        await self.install_dependencies()

        await self.deploy()

        extras = self._choose_extra_packages()
        await self.install_extra_packages(extras)

        self.print_completion_guidance()
        self._print_summary()
        await self.maybe_run_dev()
        return self.state

    async def run(self) -> int:
        """Run the bootstrap and turn any failure into an exit status."""
        try:
            await self.bootstrap()
        except BootstrapAborted as exc:
            print_warning(str(exc))
            return exc.exit_code
        except Exception as exc:
            print_error(f"Failed to create the project: {exc}")
            return 1
        return 0

    def _print_summary(self) -> None:
        outcome: DeploymentOutcome | None = self.state["deployment"]
        if outcome is None:
            deployment = self.request.hosting.label
        elif outcome.linked:
            deployment = f"{outcome.target.label} (continuous, {'ok' if outcome.success else 'failed'})"
        else:
            deployment = f"{outcome.target.label} (manual, {'ok' if outcome.success else 'failed'})"

        print_summary_table(
            {
                "Package": self.request.package_name,
                "Destination": str(self.destination),
                "Package manager": self.profile.id,
                "Files copied": str(self.state["files_copied"]),
                "Dependencies": "installed" if self.state["dependencies_installed"] else "not installed",
                "Deployment": deployment,
                "Extra packages": ", ".join(self.state["extra_packages_installed"]) or "none",
            },
            title="Bootstrap Summary",
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``launchpad`` / ``python -m launchpad.pipeline``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Launchpad -- bootstrap a new project from a template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  launchpad\n"
            "  launchpad --name my-site -d ./my-site -p pnpm --hosting netlify\n"
            "  launchpad --name demo -d ./demo -p npm --hosting none --no-run-dev\n"
        ),
    )
    parser.add_argument("--name", help="Package name (prompted if omitted)")
    parser.add_argument("--destination", "-d", help="Target directory (prompted if omitted)")
    parser.add_argument(
        "--package-manager", "-p",
        choices=["npm", "pnpm", "yarn", "bun"],
        help="Package manager to use (prompted if omitted)",
    )
    parser.add_argument(
        "--hosting",
        choices=[choice.value for choice in HostingChoice],
        help="Deployment target (prompted if omitted)",
    )
    parser.add_argument(
        "--extra",
        action="append",
        default=[],
        metavar="PACKAGE",
        help="Extra package to add (repeatable; prompted if omitted)",
    )
    parser.add_argument("--template", help="Template directory (default: bundled starter)")
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Load settings from a JSON file instead of LAUNCHPAD_* variables",
    )
    parser.add_argument(
        "--save-config",
        metavar="PATH",
        help="Write the effective settings to a JSON file before running",
    )
    parser.add_argument(
        "--run-dev",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Start the dev server when done (asked if omitted)",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Overwrite a non-empty destination without asking",
    )

    args = parser.parse_args(argv)

    try:
        config = Config.load(Path(args.config)) if args.config else Config.from_env()
    except (OSError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] could not load settings: {escape(str(exc))}")
        sys.exit(2)
    if args.template:
        config.template_dir = Path(args.template)
    if args.save_config:
        saved = config.save(Path(args.save_config))
        print_info(f"Settings written to {saved}")

    prompter = RichPrompter()
    try:
        request = gather_request(
            prompter,
            package_name=args.name,
            destination=args.destination,
            package_manager=args.package_manager,
            hosting=args.hosting,
        )
    except ValueError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        sys.exit(2)
    request.extra_packages = list(args.extra)

    bootstrapper = Bootstrapper(
        config,
        request,
        prompter=prompter,
        run_dev=args.run_dev,
        assume_yes=args.yes,
    )
    try:
        exit_code = asyncio.run(bootstrapper.run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        exit_code = 130

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
