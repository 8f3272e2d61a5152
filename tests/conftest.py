"""
Shared test fixtures and fakes.
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from src.core.context import ProcessContext
from src.core.errors import ElevationDenied
from src.core.runner import CommandResult


class FakeIdentity:
    """Identity with a fixed admin flag that counts queries."""

    def __init__(self, admin: bool = False):
        self.admin = admin
        self.queries = 0

    def is_admin(self) -> bool:
        self.queries += 1
        return self.admin


class FakeRunner:
    """Records commands instead of spawning them.

    Results are scripted per argv prefix; the longest matching prefix wins.
    Unscripted commands succeed with no output.
    """

    def __init__(self):
        self.calls: List[List[str]] = []
        self._scripted: Dict[Tuple[str, ...], Callable[[List[str]], CommandResult]] = {}

    def set_result(self, prefix: Sequence[str], returncode: int = 0, stdout: str = "", stderr: str = ""):
        self._scripted[tuple(prefix)] = lambda args: CommandResult(args, returncode, stdout, stderr)

    def set_handler(self, prefix: Sequence[str], handler: Callable[[List[str]], CommandResult]):
        self._scripted[tuple(prefix)] = handler

    def run(self, args: Sequence[str], capture: bool = True) -> CommandResult:
        argv = list(args)
        self.calls.append(argv)
        best: Optional[Tuple[str, ...]] = None
        for prefix in self._scripted:
            if tuple(argv[:len(prefix)]) == prefix and (best is None or len(prefix) > len(best)):
                best = prefix
        if best is None:
            return CommandResult(argv, 0)
        return self._scripted[best](argv)

    def calls_starting_with(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if tuple(c[:len(prefix)]) == prefix]


class FakeLocator:
    """Locator backed by a set of installed command names."""

    def __init__(self, present: Sequence[str] = ()):
        self.present = set(present)
        self.lookups: List[str] = []

    def locate(self, command: str) -> Optional[str]:
        self.lookups.append(command)
        if command in self.present:
            return f"/usr/local/bin/{command}"
        return None


class SpyGate:
    """Privilege gate double recording elevation requests."""

    def __init__(self, elevated: bool = False, child_status: int = 0, deny: bool = False):
        self.elevated = elevated
        self.child_status = child_status
        self.deny = deny
        self.elevated_runs: List[Tuple[str, ...]] = []

    def is_elevated(self) -> bool:
        return self.elevated

    def run_elevated(self, operation: str, *args: str) -> int:
        self.elevated_runs.append((operation, *args))
        if self.deny:
            raise ElevationDenied(operation, "declined in test")
        return self.child_status


class FakeGitConfig:
    """Simulates ``git config`` writes against an in-memory store."""

    def __init__(self, runner: FakeRunner, git: str = "git"):
        self.store: Dict[Tuple[str, str], str] = {}
        runner.set_handler([git, "config"], self._handle)

    def _handle(self, args: List[str]) -> CommandResult:
        if args[3] == "--get":
            _, _, level, _, key = args
            if (level, key) not in self.store:
                return CommandResult(args, 1)
            return CommandResult(args, 0, self.store[(level, key)] + "\n")
        _, _, level, key, value = args
        self.store[(level, key)] = value
        return CommandResult(args, 0)


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity(admin=False)


@pytest.fixture
def context(tmp_path: Path, identity: FakeIdentity) -> ProcessContext:
    """A POSIX process context rooted in a temporary directory."""
    home = tmp_path / "home"
    home.mkdir()
    return ProcessContext(
        cwd=tmp_path,
        environ={"PATH": ""},
        identity=identity,
        windows=False,
        home=home,
    )


@pytest.fixture
def windows_context(tmp_path: Path, identity: FakeIdentity) -> ProcessContext:
    return ProcessContext(
        cwd=tmp_path,
        environ={"PATH": ""},
        identity=identity,
        windows=True,
        home=tmp_path,
    )


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def locator() -> FakeLocator:
    return FakeLocator()
