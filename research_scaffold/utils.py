"""Shared helpers for the research scaffolder.

One place for running external programs, writing files without clobbering
anything, and printing progress through a single Rich console.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# External programs
# ---------------------------------------------------------------------------


def _decode(raw: bytes | None) -> str:
    return (raw or b"").decode("utf-8", errors="replace").strip()


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run *cmd* as a child process and wait for it.

    Args:
        cmd: Program followed by its arguments.
        cwd: Directory to run in; the current one when omitted.
        timeout: Seconds to wait before killing the child.  The default,
            ``None``, waits indefinitely (git pushes can be slow).
        capture: Collect stdout/stderr instead of sharing our terminal.
        env: Variables layered over the current environment.

    Returns:
        ``(returncode, stdout, stderr)``.  A program that cannot be found
        comes back as returncode 127 instead of raising.
    """
    child_env = {**os.environ, **env} if env else None
    stream = asyncio.subprocess.PIPE if capture else None

    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(cwd) if cwd else None,
            env=child_env,
            stdout=stream,
            stderr=stream,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {cmd[0]}")

    if timeout is None:
        out, err = await proc.communicate()
    else:
        try:
            out, err = await asyncio.wait_for(proc.communicate(), timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    return (proc.returncode or 0, _decode(out), _decode(err))


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """``mkdir -p`` *path* and return it."""
    target = Path(path)
    target.mkdir(parents=True, exist_ok=True)
    return target


def write_if_absent(path: str | Path, text: str) -> bool:
    """Write *text* to *path* unless something is already there.

    Returns whether the file was written.
    """
    target = Path(path)
    if target.exists():
        return False
    target.write_text(text, encoding="utf-8")
    return True


def format_duration(seconds: float) -> str:
    """``3.7`` -> ``"3.7s"``; ``65.2`` -> ``"1m 5s"``."""
    if seconds < 0:
        return "0.0s"
    minutes, rest = divmod(seconds, 60)
    if minutes:
        return f"{int(minutes)}m {int(rest)}s"
    return f"{rest:.1f}s"


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------


def print_stage_header(name: str) -> None:
    console.print(Rule(f"[bold cyan]{name}[/bold cyan]", style="cyan"))


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Render *data* as a two-column table."""
    table = Table(title=title, header_style="bold cyan")
    table.add_column("Stage", style="dim", no_wrap=True)
    table.add_column("Result")
    for label, value in data.items():
        table.add_row(escape(label), escape(str(value)))
    console.print(table)


def _styled(style: str, message: str) -> None:
    console.print(f"[{style}]{escape(message)}[/{style}]")


def print_success(message: str) -> None:
    _styled("bold green", message)


def print_error(message: str) -> None:
    _styled("bold red", message)


def print_warning(message: str) -> None:
    _styled("bold yellow", message)
