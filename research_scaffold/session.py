"""Hand the terminal over to the new project.

:func:`activate_session` never returns: it either replaces the current
process with an interactive shell rooted in the project, or launches an
opener (an editor, say) on the project and exits immediately.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import NoReturn

from rich.markup import escape

from research_scaffold.utils import console


def resolve_opener(opener: str | list[str] | None = None) -> list[str] | None:
    """Return the opener command, falling back to RESEARCH_SCAFFOLD_OPENER."""
    if opener is None:
        opener = os.environ.get("RESEARCH_SCAFFOLD_OPENER", "").strip() or None
    if opener is None:
        return None
    if isinstance(opener, str):
        return shlex.split(opener)
    return list(opener)


def activate_session(root: str | Path, opener: str | list[str] | None = None) -> NoReturn:
    """Switch into *root* and end the current session.

    With an opener, it is started detached on *root* and this process exits
    with status 0 without running exit handlers.  Without one, the process is
    replaced by ``$SHELL`` (``/bin/sh`` if unset) started in *root*.
    """
    root = Path(root)
    os.chdir(root)
    command = resolve_opener(opener)
    console.print(f"[cyan]Opening[/cyan] [bold]{escape(str(root))}[/bold]...")

    if command:
        subprocess.Popen([*command, str(root)], cwd=root, start_new_session=True)
        console.file.flush()
        os._exit(0)

    shell = os.environ.get("SHELL") or "/bin/sh"
    console.file.flush()
    os.execvp(shell, [shell])
