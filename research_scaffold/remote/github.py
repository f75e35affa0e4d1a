"""Async client for the parts of the GitHub REST API the scaffolder uses.

Only two calls are needed: ``GET /user`` to confirm the credential works and
``POST /user/repos`` (or ``/orgs/{org}/repos``) to create the repository.

Typical usage::

    client = GitHubClient.from_env()
    login = await client.whoami()
    repo = await client.create_repository("my-study", private=True)
"""

from __future__ import annotations

import base64
from typing import Any
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, Field

from research_scaffold.config import HostingSettings
from research_scaffold.errors import AuthenticationError, RemoteError

TOKEN_REMEDIATION = (
    "Create a personal access token at https://github.com/settings/tokens "
    "(scope: repo),\n"
    "then add `export GITHUB_TOKEN=<token>` to your shell profile and reload it,\n"
    "then check with `curl -H \"Authorization: Bearer $GITHUB_TOKEN\" "
    "https://api.github.com/user` - it should show your username,\n"
    "then retry."
)


class GitHubRepository(BaseModel):
    """The subset of a created repository's metadata we act on."""

    full_name: str
    html_url: str = Field(default="")
    clone_url: str
    private: bool = Field(default=True)


class GitHubClient:
    """Thin async wrapper around ``httpx.AsyncClient`` for the GitHub API."""

    def __init__(
        self,
        settings: HostingSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or HostingSettings()
        self._transport = transport

    @classmethod
    def from_env(cls, transport: httpx.AsyncBaseTransport | None = None) -> "GitHubClient":
        return cls(HostingSettings.from_env(), transport=transport)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.api_url,
            headers={
                "Authorization": f"Bearer {self.settings.token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=httpx.Timeout(self.settings.timeout, connect=10.0),
            transport=self._transport,
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload: Any = response.json()
        except ValueError:
            return response.text
        if isinstance(payload, dict):
            message = str(payload.get("message", ""))
            errors = payload.get("errors") or []
            details = "; ".join(
                str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors
            )
            return f"{message} ({details})" if details else message
        return str(payload)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def whoami(self) -> str:
        """Return the authenticated user's login.

        Raises:
            AuthenticationError: If no token is configured, the token is
                rejected, or GitHub cannot be reached.
        """
        if not self.settings.token:
            raise AuthenticationError("GitHub token missing.", remediation=TOKEN_REMEDIATION)

        try:
            async with self._client() as client:
                response = await client.get("/user")
        except httpx.HTTPError as exc:
            raise AuthenticationError(
                f"Could not verify GitHub credentials: {exc}", remediation=TOKEN_REMEDIATION
            ) from exc

        if response.status_code in (401, 403):
            raise AuthenticationError(
                "GitHub token missing or expired.", remediation=TOKEN_REMEDIATION
            )
        if response.status_code != 200:
            raise AuthenticationError(
                f"GitHub /user returned {response.status_code}: {self._error_message(response)}",
                remediation=TOKEN_REMEDIATION,
            )
        return str(response.json().get("login", ""))

    async def create_repository(
        self,
        name: str,
        private: bool = True,
        org: str | None = None,
        description: str = "",
    ) -> GitHubRepository:
        """Create an empty repository for the authenticated user or *org*.

        Raises:
            RemoteError: If the API call fails.
        """
        path = f"/orgs/{org}/repos" if org else "/user/repos"
        payload = {"name": name, "private": private, "auto_init": False}
        if description:
            payload["description"] = description

        try:
            async with self._client() as client:
                response = await client.post(path, json=payload)
        except httpx.HTTPError as exc:
            raise RemoteError(f"Could not reach GitHub to create {name}: {exc}") from exc

        if response.status_code != 201:
            raise RemoteError(
                f"GitHub refused to create repository {name!r} "
                f"({response.status_code}): {self._error_message(response)}",
                status_code=response.status_code,
            )
        return GitHubRepository.model_validate(response.json())

    def git_auth_env(self, clone_url: str) -> dict[str, str]:
        """Environment that lets ``git push`` authenticate with our token.

        Uses git's ``GIT_CONFIG_*`` variables so the token never appears on
        the command line (and so never in error messages).
        """
        parts = urlsplit(clone_url)
        basic = base64.b64encode(f"x-access-token:{self.settings.token}".encode()).decode()
        return {
            "GIT_TERMINAL_PROMPT": "0",
            "GIT_CONFIG_COUNT": "1",
            "GIT_CONFIG_KEY_0": f"http.{parts.scheme}://{parts.netloc}/.extraheader",
            "GIT_CONFIG_VALUE_0": f"AUTHORIZATION: basic {basic}",
        }
