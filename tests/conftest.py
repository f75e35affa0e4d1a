"""Shared pytest fixtures for the research scaffold test suite.

Provides reusable fixtures for:
- Temporary parent directories and template files
- Mock subprocess helpers and a recording fake for ``run_command``
- Isolation of the process-wide browser switch
- A throwaway git identity for tests that run real git
"""

from __future__ import annotations

import os
import textwrap
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from research_scaffold.remote import browser


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def parent_dir(tmp_path: Path) -> Path:
    """Empty parent directory in which projects get scaffolded."""
    parent = tmp_path / "projects"
    parent.mkdir()
    yield parent


@pytest.fixture
def write_template(tmp_path: Path):
    """Factory writing a YAML template file and returning its path."""
    def factory(body: str, name: str = "template.yaml") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(body), encoding="utf-8")
        return path

    return factory


# ---------------------------------------------------------------------------
# Subprocess mocks
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Factory for a fake ``asyncio.subprocess.Process``.

    Usage:
        proc = mock_subprocess(stdout="done")
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            ...
    """
    def factory(stdout: str = "", stderr: str = "", returncode: int = 0) -> MagicMock:
        proc = MagicMock(returncode=returncode, pid=4242)
        proc.communicate = AsyncMock(return_value=(stdout.encode(), stderr.encode()))
        proc.wait = AsyncMock(return_value=returncode)
        return proc

    return factory


class FakeRunner:
    """Stand-in for ``run_command`` that records calls.

    ``failures`` maps a command prefix (tuple of leading args) to the
    ``(returncode, stdout, stderr)`` it should produce; everything else
    succeeds.  When a ``git init`` call succeeds the fake creates ``.git`` in
    the working directory so ``GitRepository.initialized`` holds.
    """

    def __init__(self, failures: dict[tuple[str, ...], tuple[int, str, str]] | None = None) -> None:
        self.failures = failures or {}
        self.calls: list[dict[str, Any]] = []

    async def __call__(self, cmd, cwd=None, timeout=None, capture=True, env=None):
        self.calls.append({"cmd": list(cmd), "cwd": cwd, "env": env})
        for prefix, outcome in self.failures.items():
            if tuple(cmd[: len(prefix)]) == prefix:
                return outcome
        if list(cmd[:2]) == ["git", "init"] and cwd is not None:
            (Path(cwd) / ".git").mkdir(exist_ok=True)
        return (0, "", "")

    @property
    def commands(self) -> list[list[str]]:
        return [c["cmd"] for c in self.calls]


@pytest.fixture
def fake_runner():
    """Patch ``run_command`` as used by every external step with a FakeRunner.

    Usage:
        def test_x(fake_runner):
            runner = fake_runner({("git", "commit"): (1, "", "nothing to commit")})
    """
    patchers: list[Any] = []

    def factory(failures: dict[tuple[str, ...], tuple[int, str, str]] | None = None) -> FakeRunner:
        runner = FakeRunner(failures)
        p = patch("research_scaffold.vcs.policy.run_command", new=runner)
        p.start()
        patchers.append(p)
        return runner

    yield factory
    for p in patchers:
        p.stop()


# ---------------------------------------------------------------------------
# Global state isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _isolate_browser_state(monkeypatch):
    """Keep the browser switch and BROWSER env var from leaking across tests."""
    saved = dict(browser.options)
    monkeypatch.delenv("BROWSER", raising=False)
    yield
    browser.options.clear()
    browser.options.update(saved)


@pytest.fixture(autouse=True)
def _no_ambient_credentials(monkeypatch):
    """Tests never see the developer's real tokens or overrides."""
    for var in (
        "GITHUB_TOKEN",
        "GITHUB_PAT",
        "RESEARCH_SCAFFOLD_GITHUB_API",
        "RESEARCH_SCAFFOLD_ENV_COMMAND",
        "RESEARCH_SCAFFOLD_OPENER",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def git_identity(tmp_path: Path, monkeypatch) -> None:
    """Give real git a throwaway HOME and identity so commits succeed anywhere."""
    home = tmp_path / "home"
    home.mkdir()
    (home / ".gitconfig").write_text(
        "[user]\n\tname = Research Scaffold Test\n\temail = test@research-scaffold.local\n"
        "[commit]\n\tgpgsign = false\n"
        "[init]\n\tdefaultBranch = master\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("GIT_CONFIG_GLOBAL", raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    for var in ("GIT_AUTHOR_NAME", "GIT_AUTHOR_EMAIL", "GIT_COMMITTER_NAME", "GIT_COMMITTER_EMAIL"):
        monkeypatch.delenv(var, raising=False)
    assert os.environ["HOME"] == str(home)
