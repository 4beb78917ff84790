"""Interactive prompts.

The orchestration code only talks to the ``Prompter`` protocol; the CLI
plugs in ``RichPrompter`` and tests plug in a scripted double.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence

from rich.prompt import Confirm, Prompt

from launchpad.config import HostingChoice, ProjectRequest
from launchpad.packages import PACKAGE_MANAGERS
from launchpad.utils import console, print_warning


class Prompter(Protocol):
    """Question surface used by the orchestrator and the VCS linker."""

    def text(self, message: str, default: str = "") -> str: ...

    def select(self, message: str, choices: Sequence[str], default: str | None = None) -> str: ...

    def checkbox(self, message: str, choices: Sequence[str]) -> list[str]: ...

    def confirm(self, message: str, default: bool = False) -> bool: ...


class RichPrompter:
    """``Prompter`` backed by ``rich.prompt``."""

    def text(self, message: str, default: str = "") -> str:
        return Prompt.ask(message, default=default, console=console)

    def select(self, message: str, choices: Sequence[str], default: str | None = None) -> str:
        return Prompt.ask(message, choices=list(choices), default=default, console=console)

    def checkbox(self, message: str, choices: Sequence[str]) -> list[str]:
        """Ask for a comma-separated subset of *choices* (blank for none)."""
        options = ", ".join(choices)
        while True:
            raw = Prompt.ask(
                f"{message} [dim]({options}; comma-separated, blank for none)[/dim]",
                default="",
                show_default=False,
                console=console,
            )
            picked = [item.strip() for item in raw.split(",") if item.strip()]
            unknown = [item for item in picked if item not in choices]
            if not unknown:
                return picked
            print_warning(f"Unknown choice(s): {', '.join(unknown)}")

    def confirm(self, message: str, default: bool = False) -> bool:
        return Confirm.ask(message, default=default, console=console)


def gather_request(
    prompter: Prompter,
    cwd: Path | None = None,
    *,
    package_name: str | None = None,
    destination: str | None = None,
    package_manager: str | None = None,
    hosting: str | None = None,
) -> ProjectRequest:
    """Ask for whatever parts of the request were not supplied up front."""
    cwd = cwd or Path.cwd()

    if package_name is None:
        package_name = prompter.text(
            "How would you like to name your package?", default=cwd.name
        )
    if destination is None:
        destination = prompter.text(
            'Where would you like to create the new project? (use "." for current directory)',
            default=".",
        )
    if package_manager is None:
        package_manager = prompter.select(
            "Which package manager would you like to use?",
            choices=list(PACKAGE_MANAGERS),
            default="pnpm",
        )
    if hosting is None:
        hosting = prompter.select(
            "Where do you want to deploy your project?",
            choices=[choice.value for choice in HostingChoice],
            default=HostingChoice.NETLIFY.value,
        )

    return ProjectRequest(
        package_name=package_name,
        destination=Path(destination),
        package_manager=package_manager,
        hosting=HostingChoice(hosting),
    )
