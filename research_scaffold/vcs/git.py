"""Git repository setup for a freshly scaffolded project.

Wraps the handful of git invocations the scaffolder needs: init, stage,
commit, default-branch rename, remote registration and push.  How each
failure is treated is decided by :mod:`research_scaffold.vcs.policy`.
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from research_scaffold.errors import VCSError
from research_scaffold.utils import console

from .policy import run_step


class GitRepository:
    """A git repository rooted at a project directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise VCSError(f"Not a directory: {self.root}")

    @property
    def initialized(self) -> bool:
        return (self.root / ".git").exists()

    async def _git(self, step: str, *args: str, env: dict[str, str] | None = None) -> bool:
        return await run_step(step, ["git", *args], cwd=self.root, env=env)

    # -- Individual steps --------------------------------------------------

    async def init(self) -> None:
        await self._git("git_init", "init")

    async def add_all(self) -> None:
        await self._git("git_add", "add", "--all")

    async def commit(self, message: str) -> None:
        await self._git("git_commit", "commit", "-m", message)

    async def rename_branch(self, branch: str) -> bool:
        """Rename the current branch; best-effort, returns success."""
        return await self._git("branch_rename", "branch", "-M", branch)

    async def add_remote(self, url: str, name: str = "origin", step: str = "url_remote_add") -> bool:
        return await self._git(step, "remote", "add", name, url)

    async def push(
        self,
        branch: str,
        remote: str = "origin",
        step: str = "url_push",
        env: dict[str, str] | None = None,
    ) -> bool:
        """Push the current commit to *branch* on *remote*.

        The source is ``HEAD``, so this works whether or not the local branch
        was renamed to *branch*.
        """
        return await self._git(step, "push", "-u", remote, f"HEAD:{branch}", env=env)

    # -- Composite ---------------------------------------------------------

    async def initial_commit(self, message: str, default_branch: str) -> bool:
        """Initialise, stage everything and commit, then rename the branch.

        Args:
            message: Commit message for the initial commit.
            default_branch: Name the current branch should end up with.

        Returns:
            Whether the branch rename succeeded.

        Raises:
            VCSError: If init, staging or the commit fails.
        """
        console.print(f"[cyan]Initialising git repository[/cyan] in [bold]{escape(str(self.root))}[/bold]...")
        await self.init()
        await self.add_all()
        await self.commit(message)
        renamed = await self.rename_branch(default_branch)
        if renamed:
            console.print(f"  [green]+[/green] Committed '{escape(message)}' on [green]{escape(default_branch)}[/green]")
        return renamed
