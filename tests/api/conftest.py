import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api import deps
from src.api.routes import promo_codes, publish, readiness, ticketing, workspaces


@pytest.fixture
def app(rules, store, clock) -> FastAPI:
    """Test FastAPI app with every router, served from the fixture store."""
    app = FastAPI()
    app.include_router(readiness.router, prefix="/api/readiness")
    app.include_router(promo_codes.router, prefix="/api/promo-codes")
    app.include_router(ticketing.router, prefix="/api/ticketing")
    app.include_router(publish.router, prefix="/api/events")
    app.include_router(workspaces.router, prefix="/api/workspaces")

    app.dependency_overrides[deps.get_rules] = lambda: rules
    app.dependency_overrides[deps.get_store] = lambda: store
    app.dependency_overrides[deps.get_clock] = lambda: clock
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def actor(user_id: str, role: str | None = None) -> dict[str, str]:
    headers = {"X-User-Id": user_id}
    if role:
        headers["X-Workspace-Role"] = role
    return headers


@pytest.fixture
def as_actor():
    """Header builder for the gateway identity headers."""
    return actor
