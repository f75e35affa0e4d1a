"""Unit tests for the filesystem builder (research_scaffold.scaffolder.tree).

Tests cover:
- Default template produces exactly the expected directories and files
- Boilerplate contents (README, .gitignore, .python-version, per-dir stubs)
- Write-if-absent idempotence on re-runs
- Custom and empty templates
- FilesystemError wrapping of OSError
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from research_scaffold.config import DirectoryTemplate
from research_scaffold.errors import FilesystemError
from research_scaffold.scaffolder import ProjectTree


def _tree_listing(root: Path) -> tuple[set[str], set[str]]:
    """Return (directories, files) relative to *root* as posix strings."""
    dirs = {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_dir()}
    files = {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}
    return dirs, files


# ---------------------------------------------------------------------------
# Default template
# ---------------------------------------------------------------------------


class TestDefaultTree:
    @pytest.mark.unit
    def test_exact_directories(self, tmp_path: Path):
        root = tmp_path / "study"
        ProjectTree(root, DirectoryTemplate()).build("study", created=date(2024, 5, 1))
        dirs, _ = _tree_listing(root)
        assert dirs == {
            "data",
            "data/raw",
            "data/preprocessed",
            "data/processed",
            "data/interim",
            "data/sim-input",
            "notebooks",
            "reports",
            "reports/figures",
            "reports/tables",
            "src",
            "lib",
            "literature",
        }

    @pytest.mark.unit
    def test_exact_files(self, tmp_path: Path):
        root = tmp_path / "study"
        written = ProjectTree(root, DirectoryTemplate()).build("study")
        _, files = _tree_listing(root)
        assert files == {
            "README.md",
            ".gitignore",
            ".python-version",
            "data/README.md",
            "notebooks/README.md",
            "reports/README.md",
            "src/README.md",
            "lib/README.md",
            "literature/README.md",
        }
        assert len(written) == 9

    @pytest.mark.unit
    def test_root_readme(self, tmp_path: Path):
        root = tmp_path / "study"
        ProjectTree(root, DirectoryTemplate()).build("study", created=date(2024, 5, 1))
        text = (root / "README.md").read_text(encoding="utf-8")
        assert text.startswith("# study\n")
        assert "Project initialised on 2024-05-01." in text

    @pytest.mark.unit
    def test_gitignore(self, tmp_path: Path):
        root = tmp_path / "study"
        ProjectTree(root, DirectoryTemplate()).build("study")
        lines = (root / ".gitignore").read_text(encoding="utf-8").splitlines()
        for pattern in (".venv/", "__pycache__/", "reports/figures/", "data/raw/", "literature/"):
            assert pattern in lines
        for top in ("data", "notebooks", "reports", "src", "lib"):
            assert f"!{top}/README.md" in lines
        # literature/ is ignored wholesale, so no un-ignore for its README
        assert "!literature/README.md" not in lines

    @pytest.mark.unit
    def test_python_version_profile(self, tmp_path: Path):
        root = tmp_path / "study"
        ProjectTree(root, DirectoryTemplate()).build("study")
        expected = f"{sys.version_info.major}.{sys.version_info.minor}"
        assert (root / ".python-version").read_text(encoding="utf-8").strip() == expected

    @pytest.mark.unit
    def test_dir_readme_stub(self, tmp_path: Path):
        root = tmp_path / "study"
        ProjectTree(root, DirectoryTemplate()).build("study")
        text = (root / "data" / "README.md").read_text(encoding="utf-8")
        assert text.startswith("# data\n")
        assert "Describe how you use `data/`." in text


# ---------------------------------------------------------------------------
# Idempotence
# ---------------------------------------------------------------------------


class TestWriteIfAbsent:
    @pytest.mark.unit
    def test_rerun_does_not_overwrite(self, tmp_path: Path):
        root = tmp_path / "study"
        tree = ProjectTree(root, DirectoryTemplate())
        tree.build("study")
        (root / "README.md").write_text("my notes", encoding="utf-8")
        (root / "data" / "README.md").write_text("data notes", encoding="utf-8")

        tree.create_directories()
        written = tree.write_root_files("renamed", date.today())
        written += tree.write_dir_readmes()

        assert written == []
        assert (root / "README.md").read_text(encoding="utf-8") == "my notes"
        assert (root / "data" / "README.md").read_text(encoding="utf-8") == "data notes"

    @pytest.mark.unit
    def test_missing_files_are_filled_in(self, tmp_path: Path):
        root = tmp_path / "study"
        tree = ProjectTree(root, DirectoryTemplate())
        tree.build("study")
        (root / "src" / "README.md").unlink()

        written = tree.write_dir_readmes()
        assert written == [root / "src" / "README.md"]

    @pytest.mark.unit
    def test_existing_root_raises(self, tmp_path: Path):
        root = tmp_path / "study"
        root.mkdir()
        with pytest.raises(FilesystemError, match="already exists"):
            ProjectTree(root, DirectoryTemplate()).build("study")
        assert list(root.iterdir()) == []


# ---------------------------------------------------------------------------
# Custom templates
# ---------------------------------------------------------------------------


class TestCustomTemplate:
    @pytest.mark.unit
    def test_empty_dirs_gives_only_root_files(self, tmp_path: Path):
        root = tmp_path / "study"
        ProjectTree(root, DirectoryTemplate(dirs={})).build("study")
        dirs, files = _tree_listing(root)
        assert dirs == set()
        assert files == {"README.md", ".gitignore", ".python-version"}

    @pytest.mark.unit
    def test_unknown_root_file_created_empty(self, tmp_path: Path):
        root = tmp_path / "study"
        tpl = DirectoryTemplate(dirs={}, files_root=["README.md", "CITATION.cff"])
        ProjectTree(root, tpl).build("study")
        assert (root / "CITATION.cff").read_text(encoding="utf-8") == ""
        assert not (root / ".gitignore").exists()

    @pytest.mark.unit
    def test_nested_subdir_names(self, tmp_path: Path):
        root = tmp_path / "study"
        tpl = DirectoryTemplate(dirs={"data": ["raw/2024", "raw/2025"]}, files_root=[])
        ProjectTree(root, tpl).build("study")
        assert (root / "data" / "raw" / "2024").is_dir()
        assert (root / "data" / "raw" / "2025").is_dir()


# ---------------------------------------------------------------------------
# Error wrapping
# ---------------------------------------------------------------------------


class TestFilesystemErrors:
    @pytest.mark.unit
    def test_root_creation_oserror(self, tmp_path: Path):
        root = tmp_path / "study"
        with patch.object(Path, "mkdir", side_effect=PermissionError("denied")):
            with pytest.raises(FilesystemError, match="Cannot create") as excinfo:
                ProjectTree(root, DirectoryTemplate()).build("study")
        assert excinfo.value.path == str(root)

    @pytest.mark.unit
    def test_write_oserror(self, tmp_path: Path):
        root = tmp_path / "study"
        with patch.object(Path, "write_text", side_effect=OSError("disk full")):
            with pytest.raises(FilesystemError, match="Cannot write"):
                ProjectTree(root, DirectoryTemplate()).build("study")
        # partial tree is left behind
        assert (root / "data" / "raw").is_dir()
