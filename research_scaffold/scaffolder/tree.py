"""Filesystem builder for the project skeleton.

Creates the root, the top-level directories and their subdirectories, then
writes boilerplate files.  Every file write is write-if-absent, so running
the builder again over a populated tree never clobbers user edits.  There is
no rollback: a failure part-way leaves the partial tree on disk.
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

from research_scaffold.config import DirectoryTemplate
from research_scaffold.errors import FilesystemError
from research_scaffold.utils import ensure_dir, write_if_absent

from .templates import TemplateRenderer

# Top-level directories ignored wholesale by the generated .gitignore; git
# cannot re-include a README inside an excluded directory.
IGNORED_TOP_LEVEL: frozenset[str] = frozenset({"literature"})


class ProjectTree:
    """Lays a :class:`DirectoryTemplate` down under a project root."""

    def __init__(
        self,
        root: str | Path,
        template: DirectoryTemplate,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.root = Path(root)
        self.template = template
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    def build(self, name: str, created: date | None = None) -> list[Path]:
        """Create the full skeleton.

        Args:
            name: Project name rendered into the root README.
            created: Creation date for the README; defaults to today.

        Returns:
            Files actually written by this call (pre-existing ones are skipped).

        Raises:
            FilesystemError: If a directory or file cannot be created.
        """
        self.create_root()
        self.create_directories()
        written = self.write_root_files(name, created or date.today())
        written.extend(self.write_dir_readmes())
        return written

    def create_root(self) -> None:
        """Create the project root; it must not exist yet."""
        try:
            self.root.mkdir(parents=True, exist_ok=False)
        except FileExistsError as exc:
            raise FilesystemError(f"Target dir already exists: {self.root}", path=str(self.root)) from exc
        except OSError as exc:
            raise FilesystemError(f"Cannot create {self.root}: {exc}", path=str(self.root)) from exc

    def create_directories(self) -> None:
        """Create every top-level directory and its subdirectories."""
        for top, subdirs in self.template.dirs.items():
            self._mkdir(self.root / top)
            for sub in subdirs:
                self._mkdir(self.root / top / sub)

    def write_root_files(self, name: str, created: date) -> list[Path]:
        """Write each root file named by the template, if absent."""
        context = {
            "name": name,
            "created": created.isoformat(),
            "top_level": [t for t in self.template.top_level() if t not in IGNORED_TOP_LEVEL],
            "python_version": f"{sys.version_info.major}.{sys.version_info.minor}",
        }
        written: list[Path] = []
        for filename in self.template.files_root:
            target = self.root / filename
            if self._write(target, self.renderer.render_root_file(filename, context)):
                written.append(target)
        return written

    def write_dir_readmes(self) -> list[Path]:
        """Write a README stub in each top-level directory, if absent."""
        written: list[Path] = []
        for top in self.template.top_level():
            target = self.root / top / "README.md"
            if self._write(target, self.renderer.render_dir_readme(top)):
                written.append(target)
        return written

    # -- Internals ---------------------------------------------------------

    @staticmethod
    def _mkdir(path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(f"Cannot create directory {path}: {exc}", path=str(path)) from exc

    @staticmethod
    def _write(path: Path, text: str) -> bool:
        try:
            ensure_dir(path.parent)
            return write_if_absent(path, text)
        except OSError as exc:
            raise FilesystemError(f"Cannot write {path}: {exc}", path=str(path)) from exc
