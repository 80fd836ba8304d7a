"""
Tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from service_cm.dependencies import get_tag_repository
from service_cm.main import app

TAGS = [
    "feature/T1/fn.cont/SvcA_V1P0B0",
    "feature/T1/fn.cont/SvcA_V1P1B0",
    "feature/T2/fn.cont/SvcB_V2P0B1",
    "feature/broken",
    "fn.cont.SvcA_V1P0B3",
    "fn.cont.SvcA_V1P1B0",
]


class FakeTagRepository:
    """In-memory CM repository."""

    def __init__(self, tags: list[str]):
        self.tags = list(tags)
        self.created: list[tuple[str, str]] = []
        self.deleted: list[str] = []

    async def list_tags(self, prefix: str = "") -> list[str]:
        return [t for t in self.tags if t.startswith(prefix)]

    async def create_tag(self, name: str, sha: str) -> dict:
        self.created.append((name, sha))
        self.tags.append(name)
        return {"ref": f"refs/tags/{name}"}

    async def delete_tags(self, names: list[str]) -> list[str]:
        self.deleted.extend(names)
        self.tags = [t for t in self.tags if t not in names]
        return list(names)


@pytest.fixture
def repository():
    return FakeTagRepository(TAGS)


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_tag_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client):
        """Test basic health check."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestFeatureTags:
    """Tests for the feature tag endpoints."""

    def test_list(self, client):
        """Test listing grouped feature tags."""
        response = client.get("/api/tags/feature")

        assert response.status_code == 200
        body = response.json()
        assert [g["ticket_id"] for g in body["groups"]] == ["T1", "T2"]
        assert [m["tag"]["raw"] for m in body["groups"][0]["members"]] == TAGS[:2]
        assert [s["raw"] for s in body["skipped"]] == ["feature/broken"]
        assert body["total"] == 3

    def test_list_for_service(self, client):
        """Test listing the feature tags of one service."""
        response = client.get(
            "/api/tags/feature",
            params={"business_function": "fn", "container": "cont", "service_name": "SvcB"},
        )

        assert response.status_code == 200
        groups = response.json()["groups"]
        assert [g["ticket_id"] for g in groups] == ["T2"]

    def test_list_incomplete_service_filter(self, client):
        """Test that a partial service filter is rejected."""
        response = client.get("/api/tags/feature", params={"business_function": "fn"})
        assert response.status_code == 400

    def test_create(self, client, repository):
        """Test creating a feature tag."""
        response = client.post(
            "/api/tags/feature",
            json={
                "ticket_id": "T3",
                "business_function": "fn",
                "container": "cont",
                "service_name": "SvcC",
                "version": {"major": 1, "minor": 4, "build": 0},
                "sha": "abc1234def",
            },
        )

        assert response.status_code == 201
        assert response.json()["tag"]["raw"] == "feature/T3/fn.cont/SvcC_V1P4B0"
        assert repository.created == [("feature/T3/fn.cont/SvcC_V1P4B0", "abc1234def")]

    def test_create_invalid_segment(self, client, repository):
        """Test that reserved characters are rejected."""
        response = client.post(
            "/api/tags/feature",
            json={
                "ticket_id": "T/3",
                "business_function": "fn",
                "container": "cont",
                "service_name": "SvcC",
                "version": {"major": 1, "minor": 4, "build": 0},
                "sha": "abc1234def",
            },
        )

        assert response.status_code == 422
        assert response.json()["type"] == "InvalidSegmentError"
        assert repository.created == []

    def test_delete_selection(self, client, repository):
        """Test deleting the tags left selected after the checkbox events."""
        response = client.post(
            "/api/tags/feature/delete",
            json={
                "events": [
                    {"kind": "group", "ticket_id": "T1", "checked": True},
                    {
                        "kind": "tag",
                        "ticket_id": "T1",
                        "raw": "feature/T1/fn.cont/SvcA_V1P1B0",
                        "checked": False,
                    },
                ]
            },
        )

        assert response.status_code == 200
        assert response.json()["deleted"] == ["feature/T1/fn.cont/SvcA_V1P0B0"]
        assert repository.deleted == ["feature/T1/fn.cont/SvcA_V1P0B0"]

    def test_delete_dry_run(self, client, repository):
        """Test that a dry run only reports the selection."""
        response = client.post(
            "/api/tags/feature/delete",
            json={
                "dry_run": True,
                "events": [{"kind": "group", "ticket_id": "T2", "checked": True}],
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "selected": ["feature/T2/fn.cont/SvcB_V2P0B1"],
            "deleted": [],
        }
        assert repository.deleted == []

    def test_delete_unknown_ticket(self, client, repository):
        """Test that events for unknown tickets are rejected."""
        response = client.post(
            "/api/tags/feature/delete",
            json={"events": [{"kind": "group", "ticket_id": "T9", "checked": True}]},
        )

        assert response.status_code == 404
        assert repository.deleted == []

    def test_release_tags(self, client):
        """Test listing release tags with their versions."""
        response = client.get(
            "/api/tags/release",
            params={"business_function": "fn", "container": "cont", "service_name": "SvcA"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["tags"][0] == {
            "tag": "fn.cont.SvcA_V1P0B3",
            "version": {"major": 1, "minor": 0, "build": 3},
        }

    def test_release_tags_exclude_sibling_service(self, client, repository):
        """Test that a service whose name extends this one is not listed."""
        repository.tags.append("fn.cont.SvcA_Extra_V9P0B0")
        response = client.get(
            "/api/tags/release",
            params={"business_function": "fn", "container": "cont", "service_name": "SvcA"},
        )

        assert response.status_code == 200
        assert [t["tag"] for t in response.json()["tags"]] == [
            "fn.cont.SvcA_V1P0B3",
            "fn.cont.SvcA_V1P1B0",
        ]

    def test_list_with_oversized_version(self, client, repository):
        """Test that a tag with a version too long to convert is skipped."""
        oversized = "feature/T3/fn.cont/SvcA_V" + "9" * 5000 + "P0B0"
        repository.tags.append(oversized)
        response = client.get("/api/tags/feature")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert oversized in [s["raw"] for s in body["skipped"]]


class TestCheckout:
    """Tests for the checkout endpoints."""

    def test_decision_from_feature_tag(self, client):
        """Test adopting a feature tag after the proposed version."""
        response = client.post(
            "/api/checkout/decision",
            json={
                "current_version": {"major": 1, "minor": 3},
                "actions": [{"kind": "feature_tag", "tag": "feature/T9/fn.cont/Svc_V2P0B5"}],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["proposed"] == {"major": 1, "minor": 4, "build": 0}
        assert body["decision"]["source"] == "FeatureTag"
        assert body["decision"]["version"] == {"major": 2, "minor": 0, "build": 5}
        assert body["decision"]["tag_ref"]["raw"] == "feature/T9/fn.cont/Svc_V2P0B5"
        assert body["ready"] is False

    def test_decision_rejects_malformed_version(self, client):
        """Test that a malformed entry keeps the previous decision."""
        response = client.post(
            "/api/checkout/decision",
            json={
                "current_version": {"major": 1, "minor": 3},
                "ticket_id": "T1",
                "project_order_id": "P1",
                "actions": [
                    {"kind": "explicit_version", "text": "2.5"},
                    {"kind": "explicit_version", "text": "two.five"},
                ],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["decision"]["source"] == "ExplicitVersion"
        assert body["decision"]["version"] == {"major": 2, "minor": 5, "build": 0}
        assert body["decision"]["tag_ref"] is None
        assert [r["index"] for r in body["rejected"]] == [1]
        assert body["ready"] is True

    def test_decision_non_standard_tag(self, client):
        """Test that a non-standard feature tag fails the request."""
        response = client.post(
            "/api/checkout/decision",
            json={
                "current_version": {"major": 1, "minor": 3},
                "actions": [{"kind": "feature_tag", "tag": "feature/broken"}],
            },
        )

        assert response.status_code == 422

    def test_revert_defaults_to_first_release(self, client):
        """Test reverting without choosing a tag."""
        response = client.post(
            "/api/checkout/revert",
            json={"business_function": "fn", "container": "cont", "service_name": "SvcA"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["tag"] == "fn.cont.SvcA_V1P0B3"
        assert body["version"] == {"major": 1, "minor": 0, "build": 3}

    def test_revert_with_override(self, client):
        """Test choosing a release and overriding its version."""
        response = client.post(
            "/api/checkout/revert",
            json={
                "business_function": "fn",
                "container": "cont",
                "service_name": "SvcA",
                "tag": "fn.cont.SvcA_V1P1B0",
                "version": {"major": 1, "minor": 2, "build": 0},
            },
        )

        assert response.status_code == 200
        assert response.json()["tag"] == "fn.cont.SvcA_V1P1B0"
        assert response.json()["version"] == {"major": 1, "minor": 2, "build": 0}

    def test_revert_ignores_sibling_service(self, client, repository):
        """Test that releases of a service extending this name are not offered."""
        repository.tags.insert(0, "fn.cont.SvcA_Extra_V9P0B0")
        response = client.post(
            "/api/checkout/revert",
            json={"business_function": "fn", "container": "cont", "service_name": "SvcA"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["tag"] == "fn.cont.SvcA_V1P0B3"
        assert "fn.cont.SvcA_Extra_V9P0B0" not in body["available"]

    def test_revert_nothing(self, client):
        """Test reverting a service that was never released."""
        response = client.post(
            "/api/checkout/revert",
            json={"business_function": "fn", "container": "cont", "service_name": "SvcB"},
        )

        assert response.status_code == 422
        assert response.json()["type"] == "NothingToRevertError"


class TestCommit:
    """Tests for annotation validation."""

    def test_commit_too_short(self, client):
        """Test that a commit annotation needs eight characters."""
        response = client.post("/api/commit/validate", json={"kind": "commit", "text": "abcd"})

        assert response.status_code == 200
        body = response.json()
        assert body["check"]["ok"] is False
        assert body["check"]["required"] == 8
        assert body["request"] is None

    def test_change_accepted(self, client):
        """Test that a change annotation needs four characters."""
        response = client.post(
            "/api/commit/validate",
            json={"kind": "change", "text": "abcd", "release_requested": True},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["check"]["ok"] is True
        assert body["request"] == {
            "kind": "change",
            "annotation": "abcd",
            "release_requested": True,
        }
