"""Unit tests for local git operations (launchpad.vcs.git)."""

from __future__ import annotations

import pytest

from launchpad.utils import CommandError
from launchpad.vcs import GitClient, get_author_name


class TestGitClient:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_commands_run_in_repo(self, fake_runner, tmp_path):
        git = GitClient(tmp_path, fake_runner)
        await git.init()
        await git.add_all()
        await git.commit("Initial commit")
        await git.add_remote("origin", "https://github.com/jane/demo.git")
        await git.push()

        assert fake_runner.commands == [
            "git init",
            "git add .",
            "git commit -m Initial commit --allow-empty",
            "git remote add origin https://github.com/jane/demo.git",
            "git push -u origin HEAD",
        ]
        assert all(call.cwd == tmp_path for call in fake_runner.calls)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_commit_without_allow_empty(self, fake_runner, tmp_path):
        await GitClient(tmp_path, fake_runner).commit("msg", allow_empty=False)
        assert fake_runner.commands == ["git commit -m msg"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failure_raises(self, fake_runner, tmp_path):
        fake_runner.fail("git push", stderr="rejected")
        with pytest.raises(CommandError):
            await GitClient(tmp_path, fake_runner).push()

    @pytest.mark.unit
    def test_has_metadata(self, fake_runner, tmp_path):
        git = GitClient(tmp_path, fake_runner)
        assert not git.has_metadata()
        (tmp_path / ".git").mkdir()
        assert git.has_metadata()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_get_remote_url(self, fake_runner, tmp_path):
        fake_runner.on("git config --get remote.origin.url", (0, "https://github.com/a/b.git\n", ""))
        assert await GitClient(tmp_path, fake_runner).get_remote_url() == "https://github.com/a/b.git"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_get_remote_url_unset(self, fake_runner, tmp_path):
        fake_runner.on("git config --get", (1, "", ""))
        assert await GitClient(tmp_path, fake_runner).get_remote_url() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_has_remote(self, fake_runner, tmp_path):
        git = GitClient(tmp_path, fake_runner)
        assert await git.has_remote("origin") is True
        fake_runner.fail("git remote get-url")
        assert await git.has_remote("origin") is False


class TestAuthorName:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_configured(self, fake_runner):
        fake_runner.on("git config user.name", (0, "Jane Doe\n", ""))
        assert await get_author_name(fake_runner) == "Jane Doe"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unset_falls_back(self, fake_runner):
        fake_runner.fail("git config user.name", stderr="")
        assert await get_author_name(fake_runner) == "your name"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_blank_falls_back(self, fake_runner):
        assert await get_author_name(fake_runner, fallback="anon") == "anon"
