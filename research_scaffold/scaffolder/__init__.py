"""Filesystem side of scaffolding: directory tree plus boilerplate files.

Quick usage::

    from research_scaffold.config import DirectoryTemplate
    from research_scaffold.scaffolder import ProjectTree

    ProjectTree("/tmp/my-study", DirectoryTemplate()).build("my-study")
"""

from research_scaffold.scaffolder.templates import TemplateRenderer
from research_scaffold.scaffolder.tree import ProjectTree

__all__ = [
    "ProjectTree",
    "TemplateRenderer",
]
