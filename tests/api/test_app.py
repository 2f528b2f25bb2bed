"""Application wiring: health endpoint and fail-fast rules loading on startup."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.api.deps import get_settings
from src.api.main import app


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch, project_root: Path):
    monkeypatch.setenv("RULES_PATH", str(project_root / "rules.yaml"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_health():
    with TestClient(app) as client:
        resp = client.get("/health")
    assert resp.json() == {"status": "ok", "service": "api"}


def test_startup_fails_on_invalid_rules(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    bad = tmp_path / "rules.yaml"
    bad.write_text("project: {slug: x}\n")
    monkeypatch.setenv("RULES_PATH", str(bad))
    get_settings.cache_clear()

    with pytest.raises(ValueError):
        with TestClient(app):
            pass


def test_startup_fails_on_missing_rules(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("RULES_PATH", str(tmp_path / "missing.yaml"))
    get_settings.cache_clear()

    with pytest.raises(FileNotFoundError):
        with TestClient(app):
            pass


def test_routers_mounted():
    paths = {route.path for route in app.routes}
    assert "/api/readiness/evaluate" in paths
    assert "/api/events/{event_id}/publish" in paths
    assert "/api/ticketing/events/{event_id}/quote" in paths
    assert "/api/workspaces/roles" in paths
