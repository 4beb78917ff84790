"""Shared pytest fixtures for the Launchpad test suite.

Provides reusable fixtures for:
- A sample template tree with excluded entries mixed in
- A recording fake ``CommandRunner`` with scripted results
- A scripted ``Prompter``
- Mock subprocess helpers
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest

from launchpad.config import Config, CopySettings
from launchpad.utils import CommandRunner

CONSTS_TS = (
    'export const SITE_TITLE = "Demo";\n'
    'export const HOSTING_SERVICE: "cloudflare" | "netlify" | "none" = "none";\n'
)


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------

@dataclass
class RecordedCall:
    command: str
    cwd: Path | None
    capture: bool


class FakeRunner(CommandRunner):
    """Records every command and answers from scripted rules.

    Rules match on command prefix (longest prefix wins).  Each rule holds a
    queue of ``(returncode, stdout, stderr)`` results; the last one repeats
    once the queue is down to a single entry.  Unmatched commands succeed
    with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self._rules: dict[str, list[tuple[int, str, str]]] = {}

    def on(self, prefix: str, *results: tuple[int, str, str]) -> "FakeRunner":
        self._rules[prefix] = list(results) or [(0, "", "")]
        return self

    def fail(self, prefix: str, stderr: str = "boom") -> "FakeRunner":
        return self.on(prefix, (1, "", stderr))

    async def run(
        self,
        cmd: str | list[str],
        cwd: str | Path | None = None,
        capture: bool = False,
    ) -> tuple[int, str, str]:
        command = cmd if isinstance(cmd, str) else " ".join(cmd)
        self.calls.append(RecordedCall(command, Path(cwd) if cwd else None, capture))
        for prefix in sorted(self._rules, key=len, reverse=True):
            if command.startswith(prefix):
                queue = self._rules[prefix]
                return queue.pop(0) if len(queue) > 1 else queue[0]
        return (0, "", "")

    @property
    def commands(self) -> list[str]:
        return [call.command for call in self.calls]

    def count(self, prefix: str) -> int:
        return sum(1 for command in self.commands if command.startswith(prefix))

    def ran(self, prefix: str) -> bool:
        return self.count(prefix) > 0


# ---------------------------------------------------------------------------
# Scripted prompter
# ---------------------------------------------------------------------------

class ScriptedPrompter:
    """Answers prompts from pre-loaded queues, falling back to defaults."""

    def __init__(
        self,
        text: Sequence[str] = (),
        select: Sequence[str] = (),
        checkbox: Sequence[list[str]] = (),
        confirm: Sequence[bool] = (),
    ) -> None:
        self._text = list(text)
        self._select = list(select)
        self._checkbox = list(checkbox)
        self._confirm = list(confirm)
        self.asked: list[str] = []

    def text(self, message: str, default: str = "") -> str:
        self.asked.append(message)
        return self._text.pop(0) if self._text else default

    def select(self, message: str, choices: Sequence[str], default: str | None = None) -> str:
        self.asked.append(message)
        if self._select:
            answer = self._select.pop(0)
            assert answer in choices, f"{answer!r} not in {list(choices)!r}"
            return answer
        return default if default is not None else choices[0]

    def checkbox(self, message: str, choices: Sequence[str]) -> list[str]:
        self.asked.append(message)
        return self._checkbox.pop(0) if self._checkbox else []

    def confirm(self, message: str, default: bool = False) -> bool:
        self.asked.append(message)
        return self._confirm.pop(0) if self._confirm else default


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_template(tmp_path: Path) -> Path:
    """A template tree containing normal files plus every excluded kind of entry."""
    root = tmp_path / "template"
    (root / "src").mkdir(parents=True)
    (root / "functions").mkdir()
    (root / "nested" / "deep").mkdir(parents=True)

    manifest = {
        "name": "tpl",
        "version": "1.2.3",
        "scripts": {"dev": "astro dev", "build": "astro build"},
        "bin": {"tpl": "bin/cli.js"},
        "files": ["bin", "templates"],
        "main": "index.js",
        "repository": {"type": "git", "url": "https://github.com/acme/tpl.git"},
        "homepage": "https://github.com/acme/tpl",
        "bugs": {"url": "https://github.com/acme/tpl/issues"},
    }
    (root / "package.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    (root / "src" / "consts.ts").write_text(CONSTS_TS, encoding="utf-8")
    (root / "functions" / "_middleware.js").write_text("export {};\n", encoding="utf-8")
    (root / ".gitignore_include").write_text("node_modules/\ndist/\n", encoding="utf-8")
    (root / "nested" / "deep" / "blob.bin").write_bytes(bytes(range(256)))

    # Entries that must never be copied.
    (root / "node_modules" / "left-pad").mkdir(parents=True)
    (root / "node_modules" / "left-pad" / "index.js").write_text("x", encoding="utf-8")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
    (root / ".astro").mkdir()
    (root / ".astro" / "types.d.ts").write_text("", encoding="utf-8")
    (root / "bin").mkdir()
    (root / "bin" / "cli.js").write_text("#!/usr/bin/env node\n", encoding="utf-8")
    (root / ".DS_Store").write_bytes(b"\x00\x01")
    (root / "nested" / ".DS_Store").write_bytes(b"\x00\x01")
    return root


@pytest.fixture
def test_config(sample_template: Path) -> Config:
    """Config pointing at the sample template with default copy rules."""
    return Config(template_dir=sample_template, copy_settings=CopySettings())


# ---------------------------------------------------------------------------
# Subprocess helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


def tree_snapshot(root: Path) -> dict[str, bytes | None]:
    """Map every path under *root* (relative, posix) to file bytes or None for dirs."""
    snapshot: dict[str, bytes | None] = {}
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root).as_posix()
        snapshot[rel] = path.read_bytes() if path.is_file() else None
    return snapshot


@pytest.fixture
def snapshot():
    return tree_snapshot


def manifest_of(path: Path) -> dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))
