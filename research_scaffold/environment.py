"""Lay down a bare, reproducible dependency environment in the project.

The heavy lifting (pinning, locking, restoring) belongs to the external
tool; this module only invokes it once inside the project root.
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from research_scaffold.config import EnvironmentSettings
from research_scaffold.utils import console
from research_scaffold.vcs.policy import run_step


class EnvironmentInitializer:
    """Runs the configured environment command (``uv init --bare`` by default)."""

    def __init__(self, root: str | Path, settings: EnvironmentSettings | None = None) -> None:
        self.root = Path(root)
        self.settings = settings or EnvironmentSettings.from_env()

    async def initialize(self) -> None:
        """Run the environment tool in the project root.

        Raises:
            DependencyEnvError: If the tool is missing or exits non-zero.
        """
        command = list(self.settings.command)
        console.print(f"[cyan]Initialising environment[/cyan] with [bold]{escape(' '.join(command))}[/bold]...")
        await run_step("env_init", command, cwd=self.root)
        console.print("  [green]+[/green] Environment skeleton ready")
