"""Command-line entry point: ``python -m research_scaffold NAME``."""

from __future__ import annotations

import argparse
import sys

from rich.markup import escape

from research_scaffold.config import RemoteMode
from research_scaffold.errors import AuthenticationError, ScaffoldError
from research_scaffold.pipeline import scaffold_project
from research_scaffold.utils import console


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="research-scaffold",
        description="Create a new research project with a standard layout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m research_scaffold my-study\n"
            "  python -m research_scaffold my-study -p ~/projects --remote github --github-org my-lab\n"
            "  python -m research_scaffold my-study --remote url --remote-url git@host:me/my-study.git\n"
        ),
    )
    parser.add_argument("name", help="Project name (directory and repository name)")
    parser.add_argument("--path", "-p", default=".", help="Parent directory (default: .)")
    parser.add_argument("--no-git", dest="init_git", action="store_false", help="Skip git initialisation")
    parser.add_argument("--branch", default="main", help="Default branch name (default: main)")
    parser.add_argument("--no-env", dest="init_env", action="store_false", help="Skip the environment skeleton")
    parser.add_argument(
        "--remote",
        choices=[m.value for m in RemoteMode],
        default=RemoteMode.NONE.value,
        help="Remote to create (default: none)",
    )
    parser.add_argument("--remote-url", default=None, help="Remote URL (required with --remote url)")
    parser.add_argument("--github-org", default=None, help="GitHub organisation that owns the repository")
    parser.add_argument("--public", action="store_true", help="Create a public GitHub repository")
    parser.add_argument("--template", default=None, help="YAML file overriding dirs and/or files_root")
    parser.add_argument(
        "--open",
        dest="open_session",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Open the project when done (default: only in an interactive terminal)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        scaffold_project(
            args.name,
            path=args.path,
            init_git=args.init_git,
            default_branch=args.branch,
            init_env=args.init_env,
            remote_mode=args.remote,
            remote_url=args.remote_url,
            github_org=args.github_org,
            github_private=not args.public,
            template_path=args.template,
            open_session=args.open_session,
        )
    except AuthenticationError as exc:
        console.print(f"[bold red]Authentication failed:[/bold red] {escape(str(exc))}")
        return 1
    except ScaffoldError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
