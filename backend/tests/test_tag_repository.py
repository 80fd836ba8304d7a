"""
Tests for the GitHub tag repository client.
"""

import json

import httpx
import pytest

from service_cm.clients.tag_repository import GitHubTagRepository


def make_repository(handler, token: str | None = "secret") -> GitHubTagRepository:
    return GitHubTagRepository(
        repo="org/models",
        token=token,
        transport=httpx.MockTransport(handler),
    )


class TestGitHubTagRepository:
    """Tests for GitHubTagRepository."""

    def test_headers(self):
        """Test authentication and API version headers."""
        repository = GitHubTagRepository(repo="org/models", token="secret")

        assert repository.headers["Authorization"] == "Bearer secret"
        assert repository.headers["X-GitHub-Api-Version"] == "2022-11-28"

    def test_headers_without_token(self):
        """Test anonymous access."""
        repository = GitHubTagRepository(repo="org/models")

        assert "Authorization" not in repository.headers

    @pytest.mark.asyncio
    async def test_list_tags(self):
        """Test listing tags by prefix strips the ref prefix."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(
                200,
                json=[
                    {"ref": "refs/tags/feature/T1/fn.cont/SvcA_V1P0B0", "object": {"sha": "a"}},
                    {"ref": "refs/tags/feature/broken", "object": {"sha": "b"}},
                ],
            )

        async with make_repository(handler) as repository:
            tags = await repository.list_tags("feature/")

        assert tags == ["feature/T1/fn.cont/SvcA_V1P0B0", "feature/broken"]
        assert seen["path"] == "/repos/org/models/git/matching-refs/tags/feature/"
        assert seen["auth"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_create_tag(self):
        """Test creating a lightweight tag ref."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"ref": seen["body"]["ref"]})

        async with make_repository(handler) as repository:
            result = await repository.create_tag("feature/T1/fn.cont/Svc_V1P4B0", "abc1234def")

        assert seen["method"] == "POST"
        assert seen["path"] == "/repos/org/models/git/refs"
        assert seen["body"] == {"ref": "refs/tags/feature/T1/fn.cont/Svc_V1P4B0", "sha": "abc1234def"}
        assert result["ref"] == "refs/tags/feature/T1/fn.cont/Svc_V1P4B0"

    @pytest.mark.asyncio
    async def test_delete_tags(self):
        """Test that missing tags count as deleted."""
        paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            if request.url.path.endswith("Gone_V1P0B0"):
                return httpx.Response(422, json={"message": "Reference does not exist"})
            return httpx.Response(204)

        async with make_repository(handler) as repository:
            deleted = await repository.delete_tags(
                ["feature/T1/fn.cont/SvcA_V1P0B0", "feature/T1/fn.cont/Gone_V1P0B0"]
            )

        assert deleted == ["feature/T1/fn.cont/SvcA_V1P0B0", "feature/T1/fn.cont/Gone_V1P0B0"]
        assert paths[0] == "/repos/org/models/git/refs/tags/feature/T1/fn.cont/SvcA_V1P0B0"

    @pytest.mark.asyncio
    async def test_delete_tags_error(self):
        """Test that server errors are raised."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        async with make_repository(handler) as repository:
            with pytest.raises(httpx.HTTPStatusError):
                await repository.delete_tags(["feature/T1/fn.cont/SvcA_V1P0B0"])

    @pytest.mark.asyncio
    async def test_close(self):
        """Test that the client is released on close."""
        repository = make_repository(lambda request: httpx.Response(200, json=[]))
        await repository.list_tags()
        assert repository._client is not None

        await repository.close()

        assert repository._client is None
