"""Integration tests for a full bootstrap run.

These run the real scaffolder, manifest personaliser and orchestrator
against an on-disk template.  External tools go through the recording
``FakeRunner`` so no package manager, git or hosting CLI is needed.
"""

from __future__ import annotations

import pytest

from conftest import FakeRunner, ScriptedPrompter, manifest_of
from launchpad.config import DEFAULT_TEMPLATE_DIR, Config, HostingChoice, ProjectRequest
from launchpad.pipeline import Bootstrapper

EXCLUDED = {"node_modules", ".git", ".astro", "bin", ".DS_Store"}


async def _bootstrap(config: Config, destination, runner: FakeRunner, **overrides) -> int:
    request = ProjectRequest(
        package_name=overrides.pop("package_name", "demo"),
        destination=destination,
        package_manager=overrides.pop("package_manager", "npm"),
        hosting=overrides.pop("hosting", HostingChoice.NONE),
    )
    boot = Bootstrapper(
        config,
        request,
        runner,
        ScriptedPrompter(),
        interactive=False,
        run_dev=False,
    )
    return await boot.run()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_tree_matches_template(test_config, sample_template, tmp_path, snapshot):
    dest = tmp_path / "out"
    runner = FakeRunner()

    assert await _bootstrap(test_config, dest, runner) == 0

    expected = {
        rel.replace(".gitignore_include", ".gitignore"): data
        for rel, data in snapshot(sample_template).items()
        if not set(rel.split("/")) & EXCLUDED and rel != "package.json"
    }
    actual = snapshot(dest)
    actual.pop("package.json")
    assert actual == expected


@pytest.mark.integration
@pytest.mark.asyncio
async def test_manifest_and_commands(test_config, tmp_path):
    dest = tmp_path / "out"
    runner = FakeRunner().on("git config user.name", (1, "", ""))

    assert await _bootstrap(test_config, dest, runner) == 0

    manifest = manifest_of(dest / "package.json")
    assert manifest["name"] == "demo"
    assert manifest["version"] == "0.0.1"
    assert manifest["author"] == "your name"
    assert "bin" not in manifest and "repository" not in manifest

    installs = [call for call in runner.calls if call.command == "npm install"]
    assert len(installs) == 1
    assert installs[0].cwd == dest.resolve()
    for prefix in ("git init", "git push", "gh ", "netlify", "wrangler"):
        assert not runner.ran(prefix), prefix


@pytest.mark.integration
@pytest.mark.asyncio
async def test_second_run_over_existing_project(test_config, tmp_path):
    dest = tmp_path / "out"
    runner = FakeRunner()
    assert await _bootstrap(test_config, dest, runner) == 0
    (dest / "package-lock.json").write_text("{}", encoding="utf-8")
    (dest / "node_modules" / "astro").mkdir(parents=True)

    request = ProjectRequest(package_name="demo2", destination=dest, package_manager="npm", hosting="none")
    boot = Bootstrapper(test_config, request, runner, ScriptedPrompter(), assume_yes=True, run_dev=False, interactive=False)

    assert await boot.run() == 0
    assert manifest_of(dest / "package.json")["name"] == "demo2"
    assert not (dest / "package-lock.json").exists()
    assert not (dest / "node_modules").exists()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_bundled_starter_with_cloudflare(tmp_path):
    dest = tmp_path / "site"
    runner = FakeRunner().fail("gh --version")
    prompter = ScriptedPrompter(select=["continue"])
    request = ProjectRequest(
        package_name="site", destination=dest, package_manager="pnpm", hosting="cloudflare"
    )
    boot = Bootstrapper(Config(), request, runner, prompter, interactive=False, run_dev=False)

    assert await boot.run() == 0

    assert (dest / ".gitignore").exists()
    assert (dest / "functions" / "_middleware.js").exists()
    consts = (dest / "src" / "consts.ts").read_text(encoding="utf-8")
    assert '= "cloudflare";' in consts
    assert runner.ran("wrangler pages deploy dist")
    assert not runner.ran("gh repo create")
    assert (DEFAULT_TEMPLATE_DIR / "src" / "consts.ts").read_text(encoding="utf-8").count('"none";') == 1
