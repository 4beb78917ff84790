"""Local git operations for the destination repository."""

from __future__ import annotations

from pathlib import Path

from launchpad.utils import CommandError, CommandRunner, print_warning


class GitClient:
    """Thin async wrapper over the ``git`` CLI, bound to one working tree.

    Queries (remote URL, author) capture their output; mutating commands let
    git write straight to the terminal.
    """

    def __init__(self, repo_path: str | Path, runner: CommandRunner) -> None:
        self.repo_path = Path(repo_path)
        self.runner = runner

    async def _git(self, *args: str, capture: bool = False) -> str:
        return await self.runner.check(["git", *args], cwd=self.repo_path, capture=capture)

    def has_metadata(self) -> bool:
        """``True`` if the working tree has its own ``.git`` entry."""
        return (self.repo_path / ".git").exists()

    async def init(self) -> None:
        await self._git("init")

    async def add_all(self) -> None:
        await self._git("add", ".")

    async def commit(self, message: str, allow_empty: bool = True) -> None:
        args = ["commit", "-m", message]
        if allow_empty:
            args.append("--allow-empty")
        await self._git(*args)

    async def get_remote_url(self, remote: str = "origin") -> str | None:
        """Return the configured URL of *remote*, or ``None`` if unset."""
        returncode, stdout, _ = await self.runner.run(
            ["git", "config", "--get", f"remote.{remote}.url"],
            cwd=self.repo_path,
            capture=True,
        )
        if returncode != 0 or not stdout.strip():
            return None
        return stdout.strip()

    async def has_remote(self, remote: str = "origin") -> bool:
        return await self.runner.succeeds(
            ["git", "remote", "get-url", remote], cwd=self.repo_path
        )

    async def add_remote(self, remote: str, url: str) -> None:
        await self._git("remote", "add", remote, url)

    async def push(self, remote: str = "origin", branch: str = "HEAD") -> None:
        """Push *branch* and set it to track *remote*."""
        await self._git("push", "-u", remote, branch)


async def get_author_name(
    runner: CommandRunner,
    cwd: str | Path | None = None,
    fallback: str = "your name",
) -> str:
    """Resolve the local git identity, or *fallback* if none is configured."""
    try:
        name = await runner.check(["git", "config", "user.name"], cwd=cwd, capture=True)
    except CommandError as exc:
        print_warning(f"Failed to get git user name: {exc.stderr or exc}")
        return fallback
    return name.strip() or fallback
