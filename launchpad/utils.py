"""Shared utility functions for Launchpad.

Provides async command execution, the ``CommandRunner`` capability handed to
every component, JSON I/O, and Rich-based console reporting.  All
user-visible diagnostics go through the single ``console`` defined here.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

console = Console()


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class LaunchpadError(Exception):
    """Base class for every error raised by Launchpad."""


class CommandError(LaunchpadError):
    """Raised when an external tool exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        command: str = "",
        returncode: int = 1,
        stderr: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class BootstrapAborted(LaunchpadError):
    """Raised when the user chooses not to continue the run."""

    def __init__(self, message: str = "Aborted.", exit_code: int = 1) -> None:
        self.exit_code = exit_code
        super().__init__(message)


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


def _format_cmd(cmd: str | list[str]) -> str:
    return cmd if isinstance(cmd, str) else " ".join(cmd)


async def run_command(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    capture: bool = True,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously.

    Args:
        cmd: Shell command string or list of arguments.  Lists are executed
            directly, strings go through the shell.
        cwd: Working directory for the child process.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams, so the user sees the tool's own output).
        env: Optional extra environment variables merged on top of ``os.environ``.
        timeout: Optional wall-clock limit in seconds.  ``None`` waits for
            the process however long it takes.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.  A missing executable is
        reported as returncode 127, a missing *cwd* as returncode 1, instead
        of raising.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    try:
        if isinstance(cmd, list):
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=stdout_pipe,
                stderr=stderr_pipe,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
            )
        else:
            process = await asyncio.create_subprocess_shell(
                cmd,
                stdout=stdout_pipe,
                stderr=stderr_pipe,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
            )
    except (FileNotFoundError, PermissionError) as exc:
        if cwd is not None and not Path(cwd).is_dir():
            return (1, "", f"Working directory not found: {cwd}")
        return (127, "", f"Could not start {_format_cmd(cmd)}: {exc}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {_format_cmd(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


class CommandRunner:
    """Runs external tools on behalf of the orchestration code.

    This is the single seam between Launchpad and the outside world: every
    component takes a runner, so tests can swap in a fake that records
    commands and returns scripted results.
    """

    async def run(
        self,
        cmd: str | list[str],
        cwd: str | Path | None = None,
        capture: bool = False,
    ) -> tuple[int, str, str]:
        """Run *cmd* in *cwd* and return ``(returncode, stdout, stderr)``."""
        return await run_command(cmd, cwd=cwd, capture=capture)

    async def check(
        self,
        cmd: str | list[str],
        cwd: str | Path | None = None,
        capture: bool = False,
    ) -> str:
        """Run *cmd* and raise ``CommandError`` on a non-zero exit.

        Returns:
            Captured stdout (empty when *capture* is ``False``).
        """
        returncode, stdout, stderr = await self.run(cmd, cwd=cwd, capture=capture)
        if returncode != 0:
            cmd_str = _format_cmd(cmd)
            detail = f"\n{stderr}" if stderr else ""
            raise CommandError(
                f"Command failed (exit {returncode}): {cmd_str}{detail}",
                command=cmd_str,
                returncode=returncode,
                stderr=stderr,
            )
        return stdout

    async def succeeds(self, cmd: str | list[str], cwd: str | Path | None = None) -> bool:
        """Return ``True`` iff *cmd* exits zero.  Output is captured and discarded."""
        returncode, _, _ = await self.run(cmd, cwd=cwd, capture=True)
        return returncode == 0


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> Any:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    raw = Path(path).read_text(encoding="utf-8")
    return json.loads(raw)


def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as pretty-printed JSON (two-space indent, trailing newline)."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(data, indent=2, ensure_ascii=False)
    file_path.write_text(content + "\n", encoding="utf-8")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_step_header(title: str, color: str = "bright_cyan") -> None:
    """Print a full-width rule announcing the next step."""
    console.print()
    console.print(Rule(f"[bold {color}] {title} [/bold {color}]", style=color))


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_panel(body: str, title: str, border_style: str = "bright_cyan") -> None:
    """Print *body* inside a titled panel."""
    console.print(Panel(body, title=f"[bold]{title}[/bold]", border_style=border_style))


def print_info(message: str) -> None:
    """Print a plain informational message."""
    console.print(escape(message))


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
