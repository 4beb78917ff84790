"""Cloudflare Pages driver."""

from __future__ import annotations

import shlex

from launchpad.config import HostingChoice
from launchpad.deploy.base import DeploymentDriver


class CloudflareDriver(DeploymentDriver):
    target = HostingChoice.CLOUDFLARE
    cli_package = "wrangler"
    publish_dir = "dist"

    def continuous_setup_command(self, package_name: str) -> str:
        return f"wrangler pages project create {shlex.quote(package_name)}"

    def manual_deploy_command(self) -> str:
        return f"wrangler pages deploy {self.publish_dir}"
