"""HTTP-level tests for the project and stage routes."""

from datetime import timedelta

import pytest

from tests.api.conftest import ACTOR_HEADERS
from tests.conftest import NOW

pytestmark = pytest.mark.integration


def create_body(**overrides) -> dict:
    body = {
        "external_code": "BS-200",
        "name": "Lot 9 Creek Rd",
        "house_type": "Single",
        "target_finish": (NOW + timedelta(days=30)).isoformat(),
    }
    body.update(overrides)
    return body


async def create(client, **overrides) -> dict:
    response = await client.post("/api/projects/", json=create_body(**overrides), headers=ACTOR_HEADERS)
    assert response.status_code == 201
    return response.json()


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    async def test_request_id_echoed(self, client):
        response = await client.get("/api/health", headers={"X-Request-ID": "trace-abc"})

        assert response.headers["X-Request-ID"] == "trace-abc"


class TestProjects:
    async def test_create_and_get(self, client):
        created = await create(client)

        assert created["stage"] == "Project Setup"
        assert created["percent_complete"] == 10
        assert created["status"] == "On Track"

        response = await client.get(f"/api/projects/{created['id']}")
        assert response.status_code == 200
        assert response.json()["external_code"] == "BS-200"

    async def test_create_requires_actor(self, client):
        response = await client.post("/api/projects/", json=create_body())

        assert response.status_code == 401
        assert "debug_id" in response.json()

    async def test_list(self, client):
        await create(client)
        await create(client, external_code="BS-201")

        response = await client.get("/api/projects/")

        assert response.status_code == 200
        assert len(response.json()) == 2

    async def test_patch_advances_stage(self, client):
        created = await create(client)

        response = await client.patch(
            f"/api/projects/{created['id']}", json={"stage": "Frames"}, headers=ACTOR_HEADERS
        )

        assert response.status_code == 200
        assert response.json()["percent_complete"] == 40

        history = (await client.get(f"/api/projects/{created['id']}/history")).json()
        assert [h["field_name"] for h in history] == ["stage", "percent_complete"]
        assert {h["changed_by"] for h in history} == {"Priya Shah"}

    async def test_patch_requires_actor(self, client):
        created = await create(client)

        response = await client.patch(f"/api/projects/{created['id']}", json={"notes": "x"})

        assert response.status_code == 401

    async def test_patch_null_for_required_field(self, client):
        created = await create(client)

        response = await client.patch(
            f"/api/projects/{created['id']}", json={"name": None}, headers=ACTOR_HEADERS
        )

        assert response.status_code == 422

    async def test_unknown_project(self, client):
        response = await client.get("/api/projects/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404
        assert response.json()["error"] == "ProjectNotFoundError"

    async def test_policy_violation(self, client, clock):
        created = await create(client)
        clock.advance(hours=30)
        compliance = await client.post(f"/api/projects/{created['id']}/compliance")
        assert compliance.json() == {"project_id": created["id"], "changed": True}

        response = await client.patch(
            f"/api/projects/{created['id']}", json={"stage": "Finalisation"}, headers=ACTOR_HEADERS
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "PolicyViolationError"
        assert "debug_id" in body

        project = (await client.get(f"/api/projects/{created['id']}")).json()
        assert project["stage"] == "Project Setup"

    async def test_clearing_sla_flag_rejected(self, client, clock):
        created = await create(client)
        clock.advance(hours=30)
        await client.post(f"/api/projects/{created['id']}/compliance")

        response = await client.patch(
            f"/api/projects/{created['id']}", json={"is_delayed": False}, headers=ACTOR_HEADERS
        )

        assert response.status_code == 422
        assert response.json()["error"] == "InvalidUpdateError"


class TestStages:
    async def test_list_stages(self, client):
        response = await client.get("/api/stages/Single")

        assert response.status_code == 200
        stages = response.json()
        assert stages[0] == {"stage_name": "Project Setup", "percent": 10, "position": 0}
        assert stages[-1]["stage_name"] == "Finalisation"

    async def test_unknown_house_type(self, client):
        response = await client.get("/api/stages/Triple")

        assert response.status_code == 422
