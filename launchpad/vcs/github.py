"""Linking the destination repository to a GitHub remote.

``GitHubLinker.ensure_connected`` drives the destination through
``NOT_A_REPO -> LOCAL_ONLY -> REMOTE_LINKED``:

1. Initialise a local repository if there is none.
2. Without a GitHub remote, require the ``gh`` CLI (or let the user carry on
   unlinked) and create a public repository, re-prompting for a new name on
   failure up to ``VcsSettings.max_create_attempts`` times.
3. Stage everything and commit (empty commits allowed).
4. Resolve the account login, offering ``gh auth login`` if needed.
5. Add the ``origin`` remote unless one exists.
6. Push with upstream tracking; on failure create the repository once more
   and retry the push, then ask whether to continue.

The linker never touches the destination's files beyond what git itself
writes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from launchpad.config import VcsSettings
from launchpad.prompts import Prompter
from launchpad.utils import (
    BootstrapAborted,
    CommandError,
    CommandRunner,
    LaunchpadError,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from launchpad.vcs.git import GitClient


class VcsLinkState(str, Enum):
    """How far the destination is connected to the hosting service."""

    NOT_A_REPO = "not_a_repo"
    LOCAL_ONLY = "local_only"
    REMOTE_LINKED = "remote_linked"


_STATE_ORDER: dict[VcsLinkState, int] = {
    VcsLinkState.NOT_A_REPO: 0,
    VcsLinkState.LOCAL_ONLY: 1,
    VcsLinkState.REMOTE_LINKED: 2,
}


class LinkStateError(LaunchpadError):
    """Raised on an attempt to move the link state backwards."""


class RepositoryCreationError(LaunchpadError):
    """Raised when remote repository creation is given up."""


@dataclass
class LinkResult:
    """Outcome of ``ensure_connected``."""

    linked: bool
    state: VcsLinkState
    repo_name: str
    owner: str | None = None
    remote_url: str | None = None


class GitHubCLI:
    """The subset of the ``gh`` CLI Launchpad relies on."""

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    async def is_available(self) -> bool:
        return await self.runner.succeeds(["gh", "--version"])

    async def create_repo(self, name: str) -> None:
        await self.runner.check(["gh", "repo", "create", name, "--public"])

    async def current_login(self) -> str | None:
        """Return the authenticated account's login, or ``None``."""
        returncode, stdout, _ = await self.runner.run(["gh", "api", "user"], capture=True)
        if returncode != 0:
            return None
        try:
            data = json.loads(stdout)
        except json.JSONDecodeError:
            return None
        login = data.get("login") if isinstance(data, dict) else None
        return login or None

    async def login(self) -> None:
        """Run the interactive ``gh auth login`` flow."""
        await self.runner.check(["gh", "auth", "login"])


class GitHubLinker:
    """Owns the ``VcsLinkState`` of one destination directory."""

    def __init__(
        self,
        destination: str | Path,
        runner: CommandRunner,
        prompter: Prompter,
        settings: VcsSettings | None = None,
    ) -> None:
        self.destination = Path(destination)
        self.runner = runner
        self.prompter = prompter
        self.settings = settings or VcsSettings()
        self.git = GitClient(self.destination, runner)
        self.gh = GitHubCLI(runner)
        self._state = VcsLinkState.NOT_A_REPO

    # ------------------------------------------------------------------
    # State tracking
    # ------------------------------------------------------------------

    @property
    def state(self) -> VcsLinkState:
        return self._state

    def _advance(self, new_state: VcsLinkState) -> None:
        if _STATE_ORDER[new_state] < _STATE_ORDER[self._state]:
            raise LinkStateError(
                f"Cannot move link state from {self._state.value} back to {new_state.value}"
            )
        self._state = new_state

    async def probe_state(self) -> VcsLinkState:
        """Compute the current state from the destination's git metadata."""
        if not self.git.has_metadata():
            state = VcsLinkState.NOT_A_REPO
        else:
            url = await self.git.get_remote_url(self.settings.remote_name)
            if url and self.settings.host in url:
                state = VcsLinkState.REMOTE_LINKED
            else:
                state = VcsLinkState.LOCAL_ONLY
        self._advance(state)
        return state

    def remote_url(self, owner: str, repo_name: str) -> str:
        return f"https://{self.settings.host}/{owner}/{repo_name}.git"

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def create_repository(self, repo_name: str) -> str:
        """Create a public repository, asking for a new name after each failure.

        Returns:
            The name the repository was finally created under.

        Raises:
            RepositoryCreationError: After ``max_create_attempts`` failures, or
                if the user submits an empty name.
        """
        name = repo_name
        attempts = 0
        while True:
            attempts += 1
            print_info(f"Creating the public repo {name} on {self.settings.host}...")
            try:
                await self.gh.create_repo(name)
                print_success(f"Repository {name} created.")
                return name
            except CommandError as exc:
                print_error(f"Failed to create the repo: {exc}")

            if attempts >= self.settings.max_create_attempts:
                raise RepositoryCreationError(
                    f"Giving up on creating a repository after {attempts} attempt(s)"
                )

            name = self.prompter.text(
                "Enter a new repository name:", default=f"{name}-retry"
            ).strip()
            if not name:
                raise RepositoryCreationError("Repository creation abandoned")

    async def resolve_identity(self) -> str | None:
        """Return the GitHub login, offering to authenticate if there is none."""
        login = await self.gh.current_login()
        if login:
            return login

        print_error(
            "Failed to retrieve GitHub username. "
            "It's likely you're not authenticated with the GitHub CLI."
        )
        action = self.prompter.select(
            "You are not authenticated with the GitHub CLI. What would you like to do?",
            choices=["authenticate", "continue"],
            default="authenticate",
        )
        if action != "authenticate":
            print_warning("Continuing without GitHub CLI authentication.")
            return None

        try:
            await self.gh.login()
        except CommandError as exc:
            print_error(f"Failed to authenticate with GitHub CLI: {exc}")
            return None

        login = await self.gh.current_login()
        if login is None:
            print_error("Still not authenticated with the GitHub CLI.")
        return login

    async def push_with_fallback(self, repo_name: str) -> bool:
        """Push to the remote; on failure create the repo once and retry.

        Returns:
            ``True`` if a push succeeded, ``False`` if it failed and the user
            chose to continue anyway.

        Raises:
            BootstrapAborted: If the user declines to continue after both
                pushes failed.
        """
        remote = self.settings.remote_name
        try:
            await self.git.push(remote)
            return True
        except CommandError as exc:
            print_error(f"Failed to push to GitHub: {exc}")

        try:
            await self.gh.create_repo(repo_name)
            await self.git.push(remote)
            return True
        except CommandError as exc:
            print_error(f"Failed to create repository and push: {exc}")

        if not self.prompter.confirm(
            "Failed to push changes to GitHub, do you want to continue anyway?",
            default=False,
        ):
            raise BootstrapAborted("Aborted. Exiting...", exit_code=1)
        return False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ensure_connected(self, repo_name: str) -> LinkResult:
        """Bring the destination to ``REMOTE_LINKED`` if at all possible.

        Returns:
            A ``LinkResult`` whose ``linked`` flag tells the caller whether a
            remote was successfully attached and pushed to.

        Raises:
            BootstrapAborted: If the user chooses to exit because ``gh`` is
                missing, or refuses to continue after a failed push.
        """
        await self.probe_state()

        if self.state is VcsLinkState.NOT_A_REPO:
            print_warning("This directory is not a Git repository. Initializing it as one.")
            try:
                await self.git.init()
            except CommandError as exc:
                print_error(f"Failed to initialize the repository: {exc}")
                return LinkResult(linked=False, state=self.state, repo_name=repo_name)
            self._advance(VcsLinkState.LOCAL_ONLY)

        if self.state is VcsLinkState.LOCAL_ONLY:
            print_info("This repository is not connected to GitHub.")

            if not await self.gh.is_available():
                action = self.prompter.select(
                    "GitHub CLI (gh) is not installed but is required to create the "
                    "repository. What would you like to do?",
                    choices=["exit", "continue"],
                    default="continue",
                )
                if action == "exit":
                    raise BootstrapAborted(
                        "Exiting. Please install the GitHub CLI and run again.", exit_code=0
                    )
                print_warning("Continuing without attaching the repository to GitHub.")
                return LinkResult(linked=False, state=self.state, repo_name=repo_name)

            try:
                repo_name = await self.create_repository(repo_name)
            except RepositoryCreationError as exc:
                print_error(str(exc))
                return LinkResult(linked=False, state=self.state, repo_name=repo_name)

        print_info("Pushing all local changes to GitHub.")
        try:
            await self.git.add_all()
            await self.git.commit(self.settings.initial_commit_message, allow_empty=True)
        except CommandError as exc:
            print_error(f"Failed to commit the project: {exc}")
            return LinkResult(linked=False, state=self.state, repo_name=repo_name)

        owner = await self.resolve_identity()

        remote = self.settings.remote_name
        remote_url = await self.git.get_remote_url(remote)
        if remote_url is None and not await self.git.has_remote(remote):
            if owner is None:
                print_warning(
                    f"No GitHub account resolved; not adding the '{remote}' remote."
                )
            else:
                remote_url = self.remote_url(owner, repo_name)
                print_info(f"Adding the {remote} remote: {remote_url}")
                try:
                    await self.git.add_remote(remote, remote_url)
                except CommandError as exc:
                    print_error(f"Failed to add the {remote} remote: {exc}")

        if not await self.push_with_fallback(repo_name):
            return LinkResult(
                linked=False,
                state=self.state,
                repo_name=repo_name,
                owner=owner,
                remote_url=remote_url,
            )

        self._advance(VcsLinkState.REMOTE_LINKED)
        print_success(f"Repository linked to {remote_url or self.settings.host}.")
        return LinkResult(
            linked=True,
            state=self.state,
            repo_name=repo_name,
            owner=owner,
            remote_url=remote_url,
        )
