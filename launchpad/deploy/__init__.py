"""Launchpad deployment drivers.

Key classes:
    DeploymentDriver   - Shared prepare -> CLI -> link -> deploy -> record flow
    NetlifyDriver      - Continuous deployment via ``netlify init``
    CloudflareDriver   - Cloudflare Pages via ``wrangler``
"""

from launchpad.config import HostingChoice

from .base import (
    HOSTING_CONSTANT_PATTERN,
    DeploymentDriver,
    DeploymentOutcome,
    record_hosting_target,
)
from .cloudflare import CloudflareDriver
from .netlify import NetlifyDriver, render_netlify_toml

DRIVERS: dict[HostingChoice, type[DeploymentDriver]] = {
    HostingChoice.NETLIFY: NetlifyDriver,
    HostingChoice.CLOUDFLARE: CloudflareDriver,
}

__all__ = [
    "DRIVERS",
    "HOSTING_CONSTANT_PATTERN",
    "CloudflareDriver",
    "DeploymentDriver",
    "DeploymentOutcome",
    "NetlifyDriver",
    "record_hosting_target",
    "render_netlify_toml",
]
