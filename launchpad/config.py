"""Launchpad configuration.

Centralised, typed configuration for a bootstrap run.  All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

PackageManagerId = Literal["npm", "pnpm", "yarn", "bun"]

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates" / "starter"


class HostingChoice(str, Enum):
    """Where the generated project should be deployed."""

    NETLIFY = "netlify"
    CLOUDFLARE = "cloudflare"
    MANUAL = "manual"
    NONE = "none"

    @property
    def label(self) -> str:
        return _HOSTING_LABELS[self]


_HOSTING_LABELS: dict[HostingChoice, str] = {
    HostingChoice.NETLIFY: "Netlify",
    HostingChoice.CLOUDFLARE: "Cloudflare Pages",
    HostingChoice.MANUAL: "Deploy manually",
    HostingChoice.NONE: "Do not deploy",
}


class ProjectRequest(BaseModel):
    """The user's scaffold intent, gathered from flags or prompts."""

    package_name: str = Field(..., min_length=1, description="Manifest and repository name")
    destination: Path = Field(default=Path("."))
    package_manager: PackageManagerId = Field(default="pnpm")
    hosting: HostingChoice = Field(default=HostingChoice.NETLIFY)
    extra_packages: list[str] = Field(default_factory=list)

    @field_validator("package_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("package name must not be blank")
        return value


class CopySettings(BaseModel):
    """Rules for materialising the template into the destination."""

    directory_exclusions: list[str] = Field(
        default_factory=lambda: ["node_modules", "bin", ".git", ".astro"]
    )
    file_exclusions: list[str] = Field(default_factory=lambda: [".DS_Store", ".git"])
    fail_fast: bool = Field(
        default=False, description="Re-raise the first per-entry copy failure"
    )
    ignore_file_alias: str = Field(default=".gitignore_include")
    ignore_file_name: str = Field(default=".gitignore")


class VcsSettings(BaseModel):
    """Source-control host and linkage knobs."""

    host: str = Field(default="github.com")
    remote_name: str = Field(default="origin")
    max_create_attempts: int = Field(
        default=5, ge=1, description="Repository-name collision retries before giving up"
    )
    initial_commit_message: str = Field(default="Initial commit")
    fallback_author: str = Field(default="your name")


class Config(BaseModel):
    """Global Launchpad configuration.

    Created once by the CLI entry point and passed to the orchestrator, which
    hands the relevant pieces to each collaborator.
    """

    template_dir: Path = Field(default=DEFAULT_TEMPLATE_DIR)
    manifest_name: str = Field(default="package.json")
    manifest_version: str = Field(default="0.0.1")
    lock_files: list[str] = Field(
        default_factory=lambda: ["package-lock.json", "yarn.lock", "pnpm-lock.yaml", "bun.lockb"]
    )
    dependency_cache_dir: str = Field(default="node_modules")
    optional_packages: list[str] = Field(
        default_factory=lambda: ["gsap", "three", "three-stdlib", "@vite-pwa/astro"]
    )
    hosting_constant_file: str = Field(default="src/consts.ts")
    copy_settings: CopySettings = Field(default_factory=CopySettings)
    vcs: VcsSettings = Field(default_factory=VcsSettings)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            LAUNCHPAD_TEMPLATE_DIR, LAUNCHPAD_GIT_HOST,
            LAUNCHPAD_MAX_CREATE_ATTEMPTS, LAUNCHPAD_COPY_FAIL_FAST.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("LAUNCHPAD_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["LAUNCHPAD_TEMPLATE_DIR"])

        vcs_kwargs: dict[str, Any] = {}
        if os.environ.get("LAUNCHPAD_GIT_HOST"):
            vcs_kwargs["host"] = os.environ["LAUNCHPAD_GIT_HOST"]
        if os.environ.get("LAUNCHPAD_MAX_CREATE_ATTEMPTS"):
            vcs_kwargs["max_create_attempts"] = int(os.environ["LAUNCHPAD_MAX_CREATE_ATTEMPTS"])

        copy_kwargs: dict[str, Any] = {}
        fail_fast = os.environ.get("LAUNCHPAD_COPY_FAIL_FAST", "")
        if fail_fast:
            copy_kwargs["fail_fast"] = fail_fast.strip().lower() in ("1", "true", "yes")

        return cls(
            copy_settings=CopySettings(**copy_kwargs),
            vcs=VcsSettings(**vcs_kwargs),
            **kwargs,
        )
