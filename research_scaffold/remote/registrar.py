"""Register a remote for the new repository and push the initial commit.

Two modes:

* ``github`` -- verify the credential, create the repository through the
  API, add it as ``origin`` and push.  Any failure here is fatal.
* ``url``    -- add an arbitrary URL as ``origin`` and push.  Both steps are
  best-effort; their exit codes only produce warnings.
"""

from __future__ import annotations

from rich.markup import escape

from research_scaffold.config import RemoteMode, ScaffoldConfig
from research_scaffold.errors import VCSError
from research_scaffold.utils import console
from research_scaffold.vcs.git import GitRepository

from .browser import browser_suppressed
from .github import GitHubClient


class RemoteRegistrar:
    """Publishes a freshly committed repository according to ``remote_mode``."""

    def __init__(
        self,
        repo: GitRepository,
        config: ScaffoldConfig,
        client: GitHubClient | None = None,
    ) -> None:
        self.repo = repo
        self.config = config
        self._client = client

    @property
    def client(self) -> GitHubClient:
        if self._client is None:
            self._client = GitHubClient.from_env()
        return self._client

    async def register(self) -> str | None:
        """Register the remote.

        Returns:
            The remote URL that was configured, or ``None`` when
            ``remote_mode`` is ``none``.

        Raises:
            AuthenticationError: GitHub rejected (or lacks) the credential.
            RemoteError: Repository creation or the push failed (github mode).
            VCSError: The repository was never initialised.
        """
        mode = self.config.remote_mode
        if mode is RemoteMode.NONE:
            return None
        if not self.repo.initialized:
            raise VCSError(f"Cannot add a remote: {self.repo.root} is not a git repository")
        if mode is RemoteMode.GITHUB:
            return await self._register_github()
        return await self._register_url()

    async def _register_github(self) -> str:
        login = await self.client.whoami()
        console.print(f"  [green]+[/green] Authenticated with GitHub as [bold]{escape(login)}[/bold]")

        with browser_suppressed():
            created = await self.client.create_repository(
                self.config.name,
                private=self.config.github_private,
                org=self.config.github_org,
            )
            console.print(f"  [green]+[/green] Created [bold]{escape(created.full_name)}[/bold]")
            await self.repo.add_remote(created.clone_url, step="github_remote_add")
            await self.repo.push(
                self.config.default_branch,
                step="github_push",
                env=self.client.git_auth_env(created.clone_url),
            )

        console.print(f"  [green]+[/green] Pushed [green]{escape(self.config.default_branch)}[/green] to {escape(created.html_url)}")
        return created.clone_url

    async def _register_url(self) -> str:
        url = self.config.remote_url or ""
        await self.repo.add_remote(url)
        pushed = await self.repo.push(self.config.default_branch)
        if pushed:
            console.print(f"  [green]+[/green] Pushed [green]{escape(self.config.default_branch)}[/green] to {escape(url)}")
        return url
