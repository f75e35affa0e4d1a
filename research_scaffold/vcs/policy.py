"""Failure policy for every external step the scaffolder runs.

Each step is either FATAL (its failure raises and aborts the rest of the
pipeline) or BEST_EFFORT (its failure is reported as a warning and the
pipeline carries on).  Keeping the table in one place makes the asymmetry
between, say, ``git init`` and the default-branch rename explicit.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from research_scaffold.errors import (
    DependencyEnvError,
    RemoteError,
    ScaffoldError,
    VCSError,
)
from research_scaffold.utils import print_warning, run_command


class StepPolicy(str, Enum):
    FATAL = "fatal"
    BEST_EFFORT = "best_effort"


STEP_POLICIES: dict[str, StepPolicy] = {
    "git_init": StepPolicy.FATAL,
    "git_add": StepPolicy.FATAL,
    "git_commit": StepPolicy.FATAL,
    "branch_rename": StepPolicy.BEST_EFFORT,
    "github_remote_add": StepPolicy.FATAL,
    "github_push": StepPolicy.FATAL,
    "url_remote_add": StepPolicy.BEST_EFFORT,
    "url_push": StepPolicy.BEST_EFFORT,
    "env_init": StepPolicy.FATAL,
}

STEP_ERRORS: dict[str, type[ScaffoldError]] = {
    "git_init": VCSError,
    "git_add": VCSError,
    "git_commit": VCSError,
    "branch_rename": VCSError,
    "github_remote_add": RemoteError,
    "github_push": RemoteError,
    "url_remote_add": RemoteError,
    "url_push": RemoteError,
    "env_init": DependencyEnvError,
}


def policy_for(step: str) -> StepPolicy:
    """Return the policy for *step*; unknown steps are FATAL."""
    return STEP_POLICIES.get(step, StepPolicy.FATAL)


def error_for(step: str) -> type[ScaffoldError]:
    """Return the exception class raised when a FATAL *step* fails."""
    return STEP_ERRORS.get(step, ScaffoldError)


async def run_step(
    step: str,
    cmd: list[str],
    cwd: str | Path | None = None,
    env: dict[str, str] | None = None,
) -> bool:
    """Run the external command for *step* and apply its failure policy.

    Returns:
        ``True`` on success, ``False`` if a BEST_EFFORT step failed.

    Raises:
        ScaffoldError: The step's error class, if a FATAL step failed.
    """
    cmd_str = " ".join(cmd)
    returncode, _, stderr = await run_command(cmd, cwd=cwd, env=env)
    if returncode == 0:
        return True

    message = f"{step} failed (exit {returncode}): {cmd_str}"
    if policy_for(step) is StepPolicy.BEST_EFFORT:
        print_warning(f"  {message} -- continuing")
        return False

    raise error_for(step)(f"{message}\n{stderr}".rstrip(), command=cmd_str, stderr=stderr)
