from __future__ import annotations

import io
from pathlib import Path
from typing import Dict, Iterator, Optional

import pytest
from rich.console import Console

from superclaw_cli.cli.ui import Printer
from superclaw_cli.installer.runner import CommandResult
from superclaw_cli.users import BcryptHasher, UserStore


class ScriptedPrompter:
    """Prompter that replays queued answers and records every question.

    When the queue runs dry the question's default is returned, so tests only
    script the answers they care about.
    """

    def __init__(self, *answers):
        self.answers = list(answers)
        self.questions: list[str] = []

    def _next(self, question: str, default):
        self.questions.append(question)
        if self.answers:
            return self.answers.pop(0)
        return default

    def ask(self, question: str, default: Optional[str] = None) -> str:
        answer = self._next(question, default)
        return "" if answer is None else answer

    def confirm(self, question: str, default: bool = False) -> bool:
        return bool(self._next(question, default))

    def choose(self, question: str, options: Dict[str, str], default: Optional[str] = None) -> str:
        answer = self._next(question, default)
        assert answer in options, f"{answer!r} is not one of {list(options)}"
        return answer


class FakeRunner:
    """CommandRunner double: canned results keyed by command prefix."""

    def __init__(self, tools=("node", "git", "npm", "curl")):
        self.tools = set(tools)
        self.results: dict[tuple[str, ...], CommandResult] = {}
        self.calls: list[list[str]] = []

    def on(self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = "") -> "FakeRunner":
        self.results[tuple(prefix)] = CommandResult(list(prefix), returncode, stdout, stderr)
        return self

    def which(self, tool: str) -> Optional[str]:
        return f"/usr/bin/{tool}" if tool in self.tools else None

    def run(self, cmd, cwd=None, env=None, timeout=None) -> CommandResult:
        args = [str(part) for part in cmd]
        self.calls.append(args)
        best: Optional[tuple[str, ...]] = None
        for prefix in self.results:
            if tuple(args[: len(prefix)]) == prefix and (best is None or len(prefix) > len(best)):
                best = prefix
        if best is None:
            return CommandResult(args, 0, "", "")
        canned = self.results[best]
        return CommandResult(args, canned.returncode, canned.stdout, canned.stderr)

    def ran(self, *prefix: str) -> bool:
        return any(tuple(call[: len(prefix)]) == prefix for call in self.calls)


@pytest.fixture(autouse=True)
def isolated_home(
    tmp_path: Path, tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Point every per-user location at the test's temporary directory."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("SUPERCLAW_DATA_DIR", str(tmp_path / "data"))
    for var in ("SUPERCLAW_WORKSPACE", "SUPERCLAW_DASHBOARD_DIR", "OPENCLAW_WORKSPACE"):
        monkeypatch.delenv(var, raising=False)
    yield home


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep long temp paths on one line in captured CLI output."""
    from superclaw_cli.cli.helpers import console

    monkeypatch.setattr(console, "width", 240)


@pytest.fixture()
def fast_hasher() -> BcryptHasher:
    return BcryptHasher(rounds=4)


@pytest.fixture(autouse=True)
def fast_cli_hasher(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "superclaw_cli.cli.commands.setup.store_hasher",
        lambda: BcryptHasher(rounds=4),
    )


@pytest.fixture()
def store(tmp_path: Path, fast_hasher: BcryptHasher) -> UserStore:
    return UserStore(tmp_path / "users.db", hasher=fast_hasher)


@pytest.fixture()
def printer() -> Printer:
    return Printer(Console(file=io.StringIO(), width=200, color_system=None))


@pytest.fixture()
def make_runner():
    return FakeRunner


@pytest.fixture()
def fake_runner() -> FakeRunner:
    return FakeRunner().on("node", "--version", stdout="v20.11.1\n")


@pytest.fixture()
def scripted():
    """Factory fixture: ``scripted("a", True)`` returns a ScriptedPrompter."""
    return ScriptedPrompter


def printed(printer: Printer) -> str:
    return printer.console.file.getvalue()


@pytest.fixture()
def output():
    return printed
