"""Launchpad version-control module.

Key classes:
    GitClient      - Local git operations on the destination
    GitHubCLI      - The ``gh`` commands used for repository creation and identity
    GitHubLinker   - NOT_A_REPO -> LOCAL_ONLY -> REMOTE_LINKED state machine
"""

from .git import GitClient, get_author_name
from .github import (
    GitHubCLI,
    GitHubLinker,
    LinkResult,
    LinkStateError,
    RepositoryCreationError,
    VcsLinkState,
)

__all__ = [
    "GitClient",
    "GitHubCLI",
    "GitHubLinker",
    "LinkResult",
    "LinkStateError",
    "RepositoryCreationError",
    "VcsLinkState",
    "get_author_name",
]
