"""Research scaffold pipeline orchestrator.

Runs the scaffolding stages strictly in order:

VALIDATE -- resolve options and template; nothing on disk is touched.
TREE     -- create the root, directories and boilerplate files.
GIT      -- init, stage, commit "<name> initiated", rename default branch.
REMOTE   -- GitHub (auth, create, push) or arbitrary URL (add, push).
ENV      -- lay down the dependency-environment skeleton.
OPEN     -- optionally hand the terminal over to the new project.

A failure in any stage aborts every later stage.  Nothing is rolled back.

Usage::

    from research_scaffold import scaffold_project

    root = scaffold_project("my-study", path="~/projects", remote_mode="github")
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from rich.markup import escape

from research_scaffold.config import (
    DirectoryTemplate,
    EnvironmentSettings,
    RemoteMode,
    ScaffoldConfig,
    resolve_config,
    resolve_template,
)
from research_scaffold.environment import EnvironmentInitializer
from research_scaffold.remote.github import GitHubClient
from research_scaffold.remote.registrar import RemoteRegistrar
from research_scaffold.scaffolder import ProjectTree, TemplateRenderer
from research_scaffold.session import activate_session
from research_scaffold.utils import (
    console,
    format_duration,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
)
from research_scaffold.vcs.git import GitRepository


class ScaffoldResult(BaseModel):
    """What a scaffolding run did."""

    root: Path
    files_written: int = Field(default=0)
    git_initialized: bool = Field(default=False)
    branch_renamed: bool = Field(default=False)
    remote_registered: bool = Field(default=False)
    remote_url: str | None = Field(default=None)
    env_initialized: bool = Field(default=False)
    duration_s: float = Field(default=0.0)


class Scaffolder:
    """Sequences the scaffolding stages for one :class:`ScaffoldConfig`.

    Attributes:
        config: Validated per-run options.
        template: Effective directory template.
    """

    def __init__(
        self,
        config: ScaffoldConfig,
        template: DirectoryTemplate | None = None,
        github: GitHubClient | None = None,
        env_settings: EnvironmentSettings | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.template = template if template is not None else DirectoryTemplate()
        self.github = github
        self.env_settings = env_settings
        self.renderer = renderer

    async def run(self) -> ScaffoldResult:
        """Run every stage after validation and return a summary.

        Raises:
            FilesystemError: The tree could not be created.
            VCSError: git init/add/commit failed.
            AuthenticationError: GitHub credential missing or rejected.
            RemoteError: GitHub repository creation or push failed.
            DependencyEnvError: The environment tool failed.
        """
        started = time.monotonic()
        root = self.config.root
        result = ScaffoldResult(root=root)

        print_stage_header("Project tree")
        tree = ProjectTree(root, self.template, self.renderer)
        written = tree.build(self.config.name)
        result.files_written = len(written)
        console.print(
            f"  [green]+[/green] {len(self.template.dirs)} top-level directories, "
            f"{len(written)} files under [bold]{escape(str(root))}[/bold]"
        )

        repo: GitRepository | None = None
        if self.config.init_git:
            print_stage_header("Version control")
            repo = GitRepository(root)
            result.branch_renamed = await repo.initial_commit(
                self.config.commit_message, self.config.default_branch
            )
            result.git_initialized = True

        if self.config.remote_mode is not RemoteMode.NONE:
            if repo is None:
                print_warning(
                    f"  remote_mode={self.config.remote_mode.value!r} ignored: git initialisation is disabled."
                )
            else:
                print_stage_header("Remote")
                registrar = RemoteRegistrar(repo, self.config, self.github)
                result.remote_url = await registrar.register()
                result.remote_registered = result.remote_url is not None

        if self.config.init_env:
            print_stage_header("Environment")
            await EnvironmentInitializer(root, self.env_settings).initialize()
            result.env_initialized = True

        result.duration_s = time.monotonic() - started
        return result


def _summarise(result: ScaffoldResult) -> None:
    print_summary_table(
        {
            "Root": str(result.root),
            "Files written": str(result.files_written),
            "Git": "initialised" if result.git_initialized else "skipped",
            "Default branch renamed": "yes" if result.branch_renamed else "no",
            "Remote": result.remote_url or "none",
            "Environment": "initialised" if result.env_initialized else "skipped",
            "Duration": format_duration(result.duration_s),
        },
        title="Scaffold",
    )


def scaffold_project(
    name: str,
    path: str | Path = ".",
    init_git: bool = True,
    default_branch: str = "main",
    init_env: bool = True,
    remote_mode: RemoteMode | str = RemoteMode.NONE,
    remote_url: str | None = None,
    github_org: str | None = None,
    github_private: bool = True,
    template_path: str | Path | None = None,
    open_session: bool | None = None,
    **collaborators: Any,
) -> Path:
    """Create a new research project and return its absolute root.

    Options are validated, and the template loaded, before anything is
    written.  ``open_session`` defaults to whether we are attached to an
    interactive terminal; when true this function does not return.

    Keyword-only ``collaborators`` (``github``, ``env_settings``, ``renderer``,
    ``opener``) are passed through to :class:`Scaffolder` and
    :func:`activate_session`.

    Raises:
        ConfigurationError: Invalid options, bad template, or existing root.
        ScaffoldError: Any later stage failed (see :meth:`Scaffolder.run`).
    """
    options: dict[str, Any] = {
        "name": name,
        "path": Path(path),
        "init_git": init_git,
        "default_branch": default_branch,
        "init_env": init_env,
        "remote_mode": remote_mode,
        "remote_url": remote_url,
        "github_org": github_org,
        "github_private": github_private,
        "template_path": template_path,
    }
    if open_session is not None:
        options["open_session"] = open_session

    config = resolve_config(**options)
    template = resolve_template(config.template_path)

    opener = collaborators.pop("opener", None)
    scaffolder = Scaffolder(config, template, **collaborators)
    result = asyncio.run(scaffolder.run())

    _summarise(result)
    print_success(f"Project ready at: {result.root}")

    if config.open_session:
        activate_session(result.root, opener)
    return result.root
