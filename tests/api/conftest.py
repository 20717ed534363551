"""API test fixtures: the real app wired to the per-test database and frozen clock."""

import pytest
from httpx import ASGITransport, AsyncClient

from buildsketch.api.deps import get_clock
from buildsketch.db import base as db_base
from buildsketch.main import app

ACTOR_HEADERS = {"X-Actor-Id": "user-42", "X-Actor-Name": "Priya Shah"}


@pytest.fixture
async def client(session_factory, clock, monkeypatch):
    monkeypatch.setattr(db_base, "_session_factory", session_factory)
    app.dependency_overrides[get_clock] = lambda: clock

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
