"""
CodeCollab Backend — Project API Tests
========================================

What:  End-to-end tests of the /api/projects endpoints.
How:   Requests go through the real FastAPI app (middleware, exception
       handlers, routes, service) into a per-test SQLite database.

What we test:
    ✅ Create: required title, trimming, default templates, constraint messages
    ✅ Get: found, unknown id, malformed id (404, never 500)
    ✅ Update: partial replacement, validation, 404s
    ✅ Delete: removal followed by 404
    ✅ List ordering by updatedAt descending, recent summaries
"""

from datetime import datetime
from uuid import uuid4

import pytest

from codecollab.models.project import (
    DEFAULT_CSS_CODE,
    DEFAULT_HTML_CODE,
    DEFAULT_JS_CODE,
    DESCRIPTION_TOO_LONG_MESSAGE,
    TITLE_REQUIRED_MESSAGE,
    TITLE_TOO_LONG_MESSAGE,
)


def parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def create(client, **body):
    response = await client.post("/api/projects", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateProject:
    """POST /api/projects"""

    @pytest.mark.asyncio
    async def test_missing_title_returns_400(self, test_client):
        response = await test_client.post("/api/projects", json={"htmlCode": "<p>hi</p>"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": TITLE_REQUIRED_MESSAGE}

    @pytest.mark.asyncio
    async def test_blank_title_returns_400(self, test_client):
        response = await test_client.post("/api/projects", json={"title": "   "})

        assert response.status_code == 400
        assert response.json()["error"] == TITLE_REQUIRED_MESSAGE

    @pytest.mark.asyncio
    async def test_title_only_persists_default_templates(self, test_client):
        created = await create(test_client, title="Scratchpad")

        response = await test_client.get(f"/api/projects/{created['id']}")
        data = response.json()["data"]

        assert data["htmlCode"] == DEFAULT_HTML_CODE
        assert data["cssCode"] == DEFAULT_CSS_CODE
        assert data["jsCode"] == DEFAULT_JS_CODE
        assert data["isPublic"] is False
        assert data["description"] is None
        assert data["createdAt"]
        assert data["updatedAt"]

    @pytest.mark.asyncio
    async def test_title_and_description_are_trimmed(self, test_client):
        data = await create(test_client, title="  Portfolio  ", description="  my site \n")

        assert data["title"] == "Portfolio"
        assert data["description"] == "my site"

    @pytest.mark.asyncio
    async def test_empty_sources_fall_back_to_templates(self, test_client):
        data = await create(test_client, title="Blank", htmlCode="", cssCode=None, jsCode="let x = 1;")

        assert data["htmlCode"] == DEFAULT_HTML_CODE
        assert data["cssCode"] == DEFAULT_CSS_CODE
        assert data["jsCode"] == "let x = 1;"

    @pytest.mark.asyncio
    async def test_is_public_can_be_set(self, test_client):
        data = await create(test_client, title="Shared", isPublic=True)
        assert data["isPublic"] is True

    @pytest.mark.asyncio
    async def test_title_over_limit_returns_message_list(self, test_client):
        response = await test_client.post("/api/projects", json={"title": "x" * 101})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": [TITLE_TOO_LONG_MESSAGE]}

    @pytest.mark.asyncio
    async def test_title_at_limit_is_accepted(self, test_client):
        data = await create(test_client, title="x" * 100)
        assert len(data["title"]) == 100

    @pytest.mark.asyncio
    async def test_every_violation_is_reported(self, test_client):
        response = await test_client.post(
            "/api/projects",
            json={"title": "t" * 150, "description": "d" * 501},
        )

        assert response.status_code == 400
        assert response.json()["error"] == [TITLE_TOO_LONG_MESSAGE, DESCRIPTION_TOO_LONG_MESSAGE]

    @pytest.mark.asyncio
    async def test_wrong_field_type_returns_400(self, test_client):
        response = await test_client.post("/api/projects", json={"title": 42})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert isinstance(body["error"], list)
        assert body["error"][0].startswith("title")

    @pytest.mark.asyncio
    async def test_non_json_body_returns_400(self, test_client):
        response = await test_client.post(
            "/api/projects",
            content=b"title=oops",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_missing_body_returns_title_message(self, test_client):
        response = await test_client.post("/api/projects")

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": TITLE_REQUIRED_MESSAGE}

    @pytest.mark.asyncio
    async def test_form_encoded_body_returns_400(self, test_client):
        response = await test_client.post("/api/projects", data={"title": "Form"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert isinstance(body["error"], list)


class TestGetProject:
    """GET /api/projects/{id}"""

    @pytest.mark.asyncio
    async def test_get_existing(self, test_client):
        created = await create(test_client, title="Demo", cssCode="h1 { color: red; }")

        response = await test_client.get(f"/api/projects/{created['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["title"] == "Demo"
        assert body["data"]["cssCode"] == "h1 { color: red; }"

    @pytest.mark.asyncio
    async def test_unknown_id_returns_404(self, test_client):
        response = await test_client.get(f"/api/projects/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Project not found"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["not-a-valid-id", "507f1f77bcf86cd799439011", "123"])
    async def test_malformed_id_returns_404(self, test_client, bad_id):
        response = await test_client.get(f"/api/projects/{bad_id}")

        assert response.status_code == 404
        assert response.json()["error"] == "Project not found"


class TestUpdateProject:
    """PUT /api/projects/{id}"""

    @pytest.mark.asyncio
    async def test_partial_update_keeps_omitted_fields(self, test_client):
        created = await create(
            test_client,
            title="Original",
            description="keep me",
            cssCode="body { margin: 0; }",
        )

        response = await test_client.put(
            f"/api/projects/{created['id']}", json={"jsCode": "console.log(1);"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["jsCode"] == "console.log(1);"
        assert data["title"] == "Original"
        assert data["description"] == "keep me"
        assert data["cssCode"] == "body { margin: 0; }"
        assert data["htmlCode"] == DEFAULT_HTML_CODE
        assert data["createdAt"] == created["createdAt"]
        assert parse_ts(data["updatedAt"]) >= parse_ts(created["updatedAt"])

        # Persisted, not just echoed
        fetched = (await test_client.get(f"/api/projects/{created['id']}")).json()["data"]
        assert fetched["jsCode"] == "console.log(1);"
        assert fetched["description"] == "keep me"

    @pytest.mark.asyncio
    async def test_update_trims_title(self, test_client):
        created = await create(test_client, title="Before")

        response = await test_client.put(f"/api/projects/{created['id']}", json={"title": "  After  "})

        assert response.json()["data"]["title"] == "After"

    @pytest.mark.asyncio
    async def test_update_blank_title_returns_400(self, test_client):
        created = await create(test_client, title="Keep")

        response = await test_client.put(f"/api/projects/{created['id']}", json={"title": "  "})

        assert response.status_code == 400
        assert response.json()["error"] == [TITLE_REQUIRED_MESSAGE]
        fetched = (await test_client.get(f"/api/projects/{created['id']}")).json()["data"]
        assert fetched["title"] == "Keep"

    @pytest.mark.asyncio
    async def test_update_description_over_limit_returns_400(self, test_client):
        created = await create(test_client, title="Keep")

        response = await test_client.put(
            f"/api/projects/{created['id']}", json={"description": "d" * 501}
        )

        assert response.status_code == 400
        assert response.json()["error"] == [DESCRIPTION_TOO_LONG_MESSAGE]

    @pytest.mark.asyncio
    async def test_null_source_resets_to_template(self, test_client):
        created = await create(test_client, title="Reset", htmlCode="<p>custom</p>")

        response = await test_client.put(f"/api/projects/{created['id']}", json={"htmlCode": None})

        assert response.json()["data"]["htmlCode"] == DEFAULT_HTML_CODE

    @pytest.mark.asyncio
    async def test_toggle_is_public(self, test_client):
        created = await create(test_client, title="Toggle")

        response = await test_client.put(f"/api/projects/{created['id']}", json={"isPublic": True})

        assert response.json()["data"]["isPublic"] is True

    @pytest.mark.asyncio
    async def test_update_unknown_id_returns_404(self, test_client):
        response = await test_client.put(f"/api/projects/{uuid4()}", json={"title": "x"})

        assert response.status_code == 404
        assert response.json()["error"] == "Project not found"

    @pytest.mark.asyncio
    async def test_update_malformed_id_returns_404(self, test_client):
        response = await test_client.put("/api/projects/abc", json={"title": "x"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_body_only_refreshes_updated_at(self, test_client):
        created = await create(test_client, title="Untouched", description="same")

        response = await test_client.put(f"/api/projects/{created['id']}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Untouched"
        assert data["description"] == "same"
        assert data["htmlCode"] == DEFAULT_HTML_CODE
        assert parse_ts(data["updatedAt"]) >= parse_ts(created["updatedAt"])


class TestDeleteProject:
    """DELETE /api/projects/{id}"""

    @pytest.mark.asyncio
    async def test_delete_then_get_returns_404(self, test_client):
        created = await create(test_client, title="Doomed")

        response = await test_client.delete(f"/api/projects/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Project deleted successfully",
            "data": {},
        }
        follow_up = await test_client.get(f"/api/projects/{created['id']}")
        assert follow_up.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_twice_returns_404(self, test_client):
        created = await create(test_client, title="Once")
        await test_client.delete(f"/api/projects/{created['id']}")

        response = await test_client.delete(f"/api/projects/{created['id']}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_malformed_id_returns_404(self, test_client):
        response = await test_client.delete("/api/projects/not-a-uuid")
        assert response.status_code == 404


class TestListProjects:
    """GET /api/projects and GET /api/projects/recent"""

    @pytest.mark.asyncio
    async def test_empty_list(self, test_client):
        response = await test_client.get("/api/projects")

        assert response.status_code == 200
        assert response.json() == {"success": True, "count": 0, "data": []}

    @pytest.mark.asyncio
    async def test_sorted_by_updated_at_descending(self, test_client):
        first = await create(test_client, title="first")
        second = await create(test_client, title="second")
        third = await create(test_client, title="third")
        await test_client.put(f"/api/projects/{first['id']}", json={"description": "touched"})

        body = (await test_client.get("/api/projects")).json()

        assert body["count"] == 3
        ids = [p["id"] for p in body["data"]]
        assert ids == [first["id"], third["id"], second["id"]]
        stamps = [parse_ts(p["updatedAt"]) for p in body["data"]]
        assert stamps == sorted(stamps, reverse=True)

    @pytest.mark.asyncio
    async def test_recent_returns_summaries(self, test_client):
        for i in range(3):
            await create(test_client, title=f"project {i}", description=f"d{i}")

        response = await test_client.get("/api/projects/recent", params={"limit": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert [p["title"] for p in body["data"]] == ["project 2", "project 1"]
        summary = body["data"][0]
        assert set(summary) == {"id", "title", "description", "createdAt", "updatedAt", "formattedDate"}

    @pytest.mark.asyncio
    async def test_recent_rejects_bad_limit(self, test_client):
        response = await test_client.get("/api/projects/recent", params={"limit": 0})
        assert response.status_code == 400
