"""Jinja2 rendering for the boilerplate files of a new project.

The ``.j2`` sources ship inside the package under ``templates/``; a
different directory can be passed in to customise them wholesale.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

PACKAGED_TEMPLATES = Path(__file__).with_name("templates")

# Root filenames with shipped boilerplate.  Anything else listed in a
# template's ``files_root`` is created empty.
ROOT_FILE_TEMPLATES: dict[str, str] = {
    "README.md": "README.md.j2",
    ".gitignore": "gitignore.j2",
    ".python-version": "python-version.j2",
}

DIR_README_TEMPLATE = "dir_README.md.j2"


class TemplateRenderer:
    """Renders root files and per-directory README stubs."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        self.template_dir = Path(template_dir) if template_dir is not None else PACKAGED_TEMPLATES
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, name: str, context: dict[str, Any]) -> str:
        return self.env.get_template(name).render(context)

    def render_root_file(self, filename: str, context: dict[str, Any]) -> str:
        """Boilerplate for a root-level file, or ``""`` if none ships."""
        source = ROOT_FILE_TEMPLATES.get(filename)
        return self.render(source, context) if source else ""

    def render_dir_readme(self, top: str) -> str:
        return self.render(DIR_README_TEMPLATE, {"top": top})
