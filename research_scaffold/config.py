"""Research scaffold configuration.

Typed configuration for a single scaffolding run.  All settings use Pydantic
v2 models so invalid option combinations are rejected at construction time,
before anything touches the filesystem.
"""

from __future__ import annotations

import os
import shlex
import sys
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from research_scaffold.errors import ConfigurationError, TargetExistsError
from research_scaffold.utils import print_warning

# ---------------------------------------------------------------------------
# Default directory layout
# ---------------------------------------------------------------------------

DEFAULT_DIRS: dict[str, list[str]] = {
    "data": ["raw", "preprocessed", "processed", "interim", "sim-input"],
    "notebooks": [],
    "reports": ["figures", "tables"],
    "src": [],
    "lib": [],
    "literature": [],
}

DEFAULT_FILES_ROOT: list[str] = ["README.md", ".gitignore", ".python-version"]


def is_interactive() -> bool:
    """Return ``True`` when both stdin and stdout are attached to a terminal."""
    return (
        sys.stdin is not None
        and sys.stdout is not None
        and sys.stdin.isatty()
        and sys.stdout.isatty()
    )


class RemoteMode(str, Enum):
    """Where (if anywhere) the new repository should be published."""

    NONE = "none"
    GITHUB = "github"
    URL = "url"


# ---------------------------------------------------------------------------
# Directory template
# ---------------------------------------------------------------------------


class DirectoryTemplate(BaseModel):
    """Directories and root files laid down for a new project.

    ``dirs`` maps each top-level directory to its subdirectories; ``files_root``
    lists the files created directly under the project root.
    """

    dirs: dict[str, list[str]] = Field(default_factory=lambda: {k: list(v) for k, v in DEFAULT_DIRS.items()})
    files_root: list[str] = Field(default_factory=lambda: list(DEFAULT_FILES_ROOT))

    @field_validator("dirs", mode="before")
    @classmethod
    def _null_subdirs_to_empty(cls, value: Any) -> Any:
        # ``notebooks:`` with no value parses as None in YAML; ``dirs: []``
        # is an empty layout, same as ``dirs: {}``.
        if isinstance(value, list) and not value:
            return {}
        if isinstance(value, dict):
            return {str(k): ([] if v is None else v) for k, v in value.items()}
        return value

    def top_level(self) -> list[str]:
        """Return the top-level directory names in template order."""
        return list(self.dirs.keys())


def load_template(path: str | Path) -> DirectoryTemplate:
    """Load a template override from a YAML (or JSON) document.

    Each recognised key (``dirs``, ``files_root``) that is present replaces the
    corresponding default wholesale.  Nothing is merged below the key level.

    Raises:
        ConfigurationError: If the file is missing, unparsable, or has the
            wrong shape.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigurationError(f"Template file not found: {file_path}")

    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Template file is not valid YAML: {file_path}\n{exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Template file must contain a mapping with 'dirs' and/or 'files_root': {file_path}"
        )

    overrides = {key: data[key] for key in ("dirs", "files_root") if data.get(key) is not None}
    try:
        return DirectoryTemplate(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid template {file_path}: {_format_validation(exc)}") from exc


def resolve_template(template_path: str | Path | None) -> DirectoryTemplate:
    """Return the effective template: the default, or the loaded override."""
    if template_path is None:
        return DirectoryTemplate()
    return load_template(template_path)


# ---------------------------------------------------------------------------
# Per-run configuration
# ---------------------------------------------------------------------------


class ScaffoldConfig(BaseModel):
    """Resolved options for one scaffolding invocation."""

    name: str = Field(..., description="Project name; used as directory and default repo name")
    path: Path = Field(default=Path("."), description="Parent directory of the new project")
    init_git: bool = Field(default=True)
    default_branch: str = Field(default="main")
    init_env: bool = Field(default=True, description="Lay down a dependency-environment skeleton")
    remote_mode: RemoteMode = Field(default=RemoteMode.NONE)
    remote_url: str | None = Field(default=None, description="Required iff remote_mode is 'url'")
    github_org: str | None = Field(default=None)
    github_private: bool = Field(default=True)
    template_path: Path | None = Field(default=None)
    open_session: bool = Field(default_factory=lambda: is_interactive())

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("project name must not be empty")
        if "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(f"project name must be a single path component: {value!r}")
        return value

    @field_validator("default_branch")
    @classmethod
    def _check_branch(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("default branch must not be empty")
        return value

    @model_validator(mode="after")
    def _check_remote(self) -> "ScaffoldConfig":
        if self.remote_mode is RemoteMode.URL and not self.remote_url:
            raise ValueError("Provide remote_url when remote_mode = 'url'.")
        if self.remote_mode is not RemoteMode.URL and self.remote_url:
            raise ValueError("remote_url is only accepted when remote_mode = 'url'.")
        return self

    @property
    def root(self) -> Path:
        """Absolute path of the project root."""
        return (Path(self.path).expanduser() / self.name).resolve()

    @property
    def commit_message(self) -> str:
        return f"{self.name} initiated"


def resolve_config(**options: Any) -> ScaffoldConfig:
    """Validate caller options and return a :class:`ScaffoldConfig`.

    Pure validation: nothing is created on disk.

    Raises:
        ConfigurationError: On invalid or contradictory options.
        TargetExistsError: If the project root already exists.
    """
    try:
        config = ScaffoldConfig(**options)
    except ValidationError as exc:
        raise ConfigurationError(_format_validation(exc)) from exc

    if config.github_org and config.remote_mode is not RemoteMode.GITHUB:
        print_warning(
            f"github_org={config.github_org!r} ignored: only used when remote_mode = 'github'."
        )

    if config.root.exists():
        raise TargetExistsError(str(config.root))

    return config


def _format_validation(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = str(err.get("msg", "")).removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


# ---------------------------------------------------------------------------
# Settings for external collaborators
# ---------------------------------------------------------------------------


class HostingSettings(BaseModel):
    """Connection settings for the GitHub API."""

    api_url: str = Field(default="https://api.github.com")
    token: str = Field(default="", repr=False)
    timeout: float = Field(default=30.0, gt=0)

    @classmethod
    def from_env(cls) -> "HostingSettings":
        """Build settings from the environment.

        Recognised variables: GITHUB_TOKEN (or GITHUB_PAT),
        RESEARCH_SCAFFOLD_GITHUB_API.
        """
        token = (os.environ.get("GITHUB_TOKEN") or os.environ.get("GITHUB_PAT") or "").strip()
        api_url = os.environ.get("RESEARCH_SCAFFOLD_GITHUB_API") or "https://api.github.com"
        return cls(api_url=api_url.strip().rstrip("/"), token=token)


class EnvironmentSettings(BaseModel):
    """Command used to lay down the reproducible dependency environment."""

    command: list[str] = Field(default_factory=lambda: ["uv", "init", "--bare"])

    @classmethod
    def from_env(cls) -> "EnvironmentSettings":
        """Build settings from RESEARCH_SCAFFOLD_ENV_COMMAND, if set."""
        raw = os.environ.get("RESEARCH_SCAFFOLD_ENV_COMMAND", "").strip()
        if raw:
            return cls(command=shlex.split(raw))
        return cls()
