"""Research project scaffolder.

Creates a new project directory with a standard research layout (data,
notebooks, reports, src, lib, literature), commits it to git, optionally
publishes it to GitHub or another remote, and optionally lays down a
reproducible dependency environment.
"""

from research_scaffold.config import DirectoryTemplate, RemoteMode, ScaffoldConfig
from research_scaffold.errors import (
    AuthenticationError,
    ConfigurationError,
    DependencyEnvError,
    FilesystemError,
    RemoteError,
    ScaffoldError,
    TargetExistsError,
    VCSError,
)
from research_scaffold.pipeline import Scaffolder, ScaffoldResult, scaffold_project

__all__ = [
    "scaffold_project",
    "Scaffolder",
    "ScaffoldResult",
    "ScaffoldConfig",
    "DirectoryTemplate",
    "RemoteMode",
    # Errors
    "ScaffoldError",
    "ConfigurationError",
    "FilesystemError",
    "TargetExistsError",
    "VCSError",
    "AuthenticationError",
    "RemoteError",
    "DependencyEnvError",
]
