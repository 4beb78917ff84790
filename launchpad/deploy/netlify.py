"""Netlify driver: continuous deployment from the linked GitHub repository."""

from __future__ import annotations

import asyncio
from pathlib import Path

from launchpad.config import HostingChoice
from launchpad.deploy.base import DeploymentDriver
from launchpad.packages import PackageManagerProfile
from launchpad.scaffolder import delete_directory_recursive
from launchpad.utils import print_error, print_info

NETLIFY_TOML_TEMPLATE = """\
[build]
  command = "{build_command}"
  functions = "netlify/functions"
  publish = "dist"
[build.environment]
  PNPM_FLAGS = "--no-frozen-lockfile"
  YARN_FLAGS = "--ignore-engines --no-lockfile"
  NPM_FLAGS = "--no-package-lock"
"""


def render_netlify_toml(profile: PackageManagerProfile) -> str:
    """Render ``netlify.toml`` for *profile*.

    Args:
        profile: Package manager whose build command Netlify should run.

    Returns:
        The file content, ready to write to the project root.
    """
    return NETLIFY_TOML_TEMPLATE.format(build_command=profile.build)


class NetlifyDriver(DeploymentDriver):
    target = HostingChoice.NETLIFY
    cli_package = "netlify-cli"

    async def prepare(self, destination: Path) -> None:
        toml_path = destination / "netlify.toml"
        await asyncio.to_thread(
            toml_path.write_text, render_netlify_toml(self.profile), "utf-8"
        )
        print_info(f"Generated 'netlify.toml' at {toml_path}")

    async def cleanup(self, destination: Path) -> None:
        # functions/ holds Cloudflare Pages functions only.
        functions_dir = destination / "functions"
        print_info(f"Removing 'functions' directory from {destination}.")
        try:
            await asyncio.to_thread(delete_directory_recursive, functions_dir)
        except OSError as exc:
            print_error(f"Failed to remove 'functions' directory from {destination}: {exc}")

    def continuous_setup_command(self, package_name: str) -> str:
        return "netlify init"

    def manual_deploy_command(self) -> str:
        return "netlify deploy --prod"
