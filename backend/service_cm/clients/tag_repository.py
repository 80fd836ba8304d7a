"""
CM repository clients.

Defines the tag operations the core needs from the version-control
system and a GitHub REST implementation of them.
"""

import logging
from typing import Any, Protocol
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

TAG_REF_PREFIX = "refs/tags/"


class TagRepository(Protocol):
    """Tag operations of the CM repository."""

    async def list_tags(self, prefix: str = "") -> list[str]: ...

    async def create_tag(self, name: str, sha: str) -> dict[str, Any]: ...

    async def delete_tags(self, names: list[str]) -> list[str]: ...


class GitHubTagRepository:
    """
    Async tag client for a GitHub hosted CM repository.

    Features:
    - Automatic authentication handling
    - Lightweight tags managed through the git refs API
    """

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        repo: str,
        token: str | None = None,
        api_version: str = "2022-11-28",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.repo = repo
        self.token = token
        self.api_version = api_version
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def headers(self) -> dict[str, str]:
        """Get default headers for API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.api_version,
            "User-Agent": "Service-CM/1.0",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.BASE_URL,
                headers=self.headers,
                timeout=30.0,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _ref_path(self, name: str) -> str:
        return f"/repos/{self.repo}/git/refs/tags/{quote(name, safe='/')}"

    async def list_tags(self, prefix: str = "") -> list[str]:
        """
        List tag names starting with a prefix.

        Args:
            prefix: Tag name prefix, e.g. "feature/"

        Returns:
            Tag names in the order returned by the repository

        Raises:
            httpx.HTTPStatusError: On HTTP errors
        """
        client = await self._get_client()
        response = await client.get(
            f"/repos/{self.repo}/git/matching-refs/tags/{quote(prefix, safe='/')}"
        )
        response.raise_for_status()
        refs = response.json()

        names = [
            ref["ref"][len(TAG_REF_PREFIX):]
            for ref in refs
            if ref.get("ref", "").startswith(TAG_REF_PREFIX)
        ]
        logger.info(f"Listed {len(names)} tags matching '{prefix}' in {self.repo}")
        return names

    async def create_tag(self, name: str, sha: str) -> dict[str, Any]:
        """
        Create a lightweight tag pointing at a commit.

        Raises:
            httpx.HTTPStatusError: On HTTP errors (422 if the tag exists)
        """
        client = await self._get_client()
        response = await client.post(
            f"/repos/{self.repo}/git/refs",
            json={"ref": f"{TAG_REF_PREFIX}{name}", "sha": sha},
        )
        response.raise_for_status()
        logger.info(f"Created tag '{name}' at {sha[:12]}")
        return response.json()

    async def delete_tags(self, names: list[str]) -> list[str]:
        """
        Delete tags one by one.

        A tag that is already gone counts as deleted; any other error
        aborts the remaining deletions.

        Returns:
            Names of the deleted tags

        Raises:
            httpx.HTTPStatusError: On HTTP errors other than 404/422
        """
        client = await self._get_client()
        deleted = []
        for name in names:
            response = await client.delete(self._ref_path(name))
            if response.status_code in (404, 422):
                logger.warning(f"Tag '{name}' does not exist, nothing to delete")
            else:
                response.raise_for_status()
            deleted.append(name)
        logger.info(f"Deleted {len(deleted)} tags from {self.repo}")
        return deleted

    async def __aenter__(self) -> "GitHubTagRepository":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
