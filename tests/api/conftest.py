"""API test fixtures - the FastAPI app over in-memory SQLite and a temp image dir.

Invariants:
    - get_db yields a fresh session per request from the test engine
    - get_image_store writes under tmp_path, never the configured image_path
    - dependency_overrides are cleared after every test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from effect_service.api.dependencies import get_image_store
from effect_service.infrastructure.database import get_db
from effect_service.infrastructure.image_store import LocalImageStore
from effect_service.main import app


@pytest.fixture
def image_store(tmp_path):
    return LocalImageStore(tmp_path / "images", "/images/effect/")


@pytest.fixture
async def client(test_session_factory, image_store):
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_store] = lambda: image_store
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
