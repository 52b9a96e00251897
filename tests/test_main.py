"""애플리케이션 진입점 최소 동작 테스트."""

from __future__ import annotations

import importlib

from fastapi.testclient import TestClient

from app.core.config import get_settings


def _set_required_env(monkeypatch, **overrides: str) -> None:
    monkeypatch.setenv("LOCAL_STORE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("DOCS_MODE", "disabled")
    for key, value in overrides.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()


def _load_main_module():
    import app.main as main_module

    return importlib.reload(main_module)


def test_health_check_endpoint(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "TravelBook Server is running"}


def test_security_and_cors_headers_on_every_response(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    response = TestClient(main_module.app).get("/")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["cache-control"] == "no-store"
    assert response.headers["access-control-allow-origin"] == "*"
    assert "Content-Type" in response.headers["access-control-allow-headers"]


def test_options_request_short_circuits_on_any_path(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    response = TestClient(main_module.app).options("/not-a-route")

    assert response.status_code == 200
    assert response.headers["access-control-allow-methods"] == "GET,OPTIONS,PATCH,DELETE,POST,PUT"


def test_docs_disabled_by_default(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    client = TestClient(main_module.app)

    assert client.get("/docs").status_code == 404
    assert client.get("/redoc").status_code == 404
    assert client.get("/openapi.json").status_code == 404


def test_docs_public_mode_exposes_openapi(monkeypatch) -> None:
    _set_required_env(monkeypatch, DOCS_MODE="public")
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    schema = client.get("/openapi.json").json()

    assert "/api/drive" in schema["paths"]
    assert "/api/weather" in schema["paths"]


def test_invalid_docs_mode_falls_back_to_disabled(monkeypatch) -> None:
    _set_required_env(monkeypatch, DOCS_MODE="secret")
    main_module = _load_main_module()

    assert main_module.docs_mode == "disabled"
    assert TestClient(main_module.app).get("/docs").status_code == 404


def test_ready_endpoint_reports_status(monkeypatch) -> None:
    _set_required_env(monkeypatch, GOOGLE_CLIENT_EMAIL="")

    async def _fake_tcp(*args, **kwargs):
        return {"status": "ok", "ok": True, "required": False, "detail": "mock-ok"}

    monkeypatch.setattr("app.core.readiness._check_tcp_connectivity", _fake_tcp)
    main_module = _load_main_module()

    response = TestClient(main_module.app).get("/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "ready"
    assert response.json()["checks"]["google_drive"]["status"] == "skip"
