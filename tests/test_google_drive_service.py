"""Google Drive 원격 저장소 테스트 (HTTP 호출은 모두 가짜 응답으로 대체)."""

from __future__ import annotations

import asyncio
import json

import pytest
import requests

from app.core.exceptions import (
    RemoteFileNotFoundError,
    RemoteStoreError,
    RemoteUnavailableError,
    RootFolderNotFoundError,
)
from app.services.google_drive_service import GoogleDriveService, escape_query_value

SERVICE_IDENTITY = "travelbook@test-project.iam.gserviceaccount.com"


class _FakeTokenProvider:
    client_email = SERVICE_IDENTITY

    def get_access_token(self) -> str:
        return "test-token"


class _Response:
    def __init__(self, status_code: int = 200, payload: object | None = None, text: str | None = None) -> None:
        self.status_code = status_code
        self.text = text if text is not None else (json.dumps(payload) if payload is not None else "")
        self.content = self.text.encode()

    def json(self) -> object:
        return json.loads(self.text)


def _install_fake_session(monkeypatch, handler) -> list[dict]:
    calls: list[dict] = []

    def _fake_request(self, method, url, params=None, json=None, data=None, headers=None, timeout=None):
        call = {"method": method, "url": url, "params": params or {}, "json": json, "data": data, "headers": headers}
        calls.append(call)
        return handler(call)

    monkeypatch.setattr("app.services.google_drive_service.requests.Session.request", _fake_request)
    return calls


def _make_service() -> GoogleDriveService:
    return GoogleDriveService(token_provider=_FakeTokenProvider(), root_folder_name="TravelBook")


def test_escape_query_value() -> None:
    assert escape_query_value("O'Brien") == "O\\'Brien"
    assert escape_query_value("a\\b") == "a\\\\b"


def test_list_namespace_creates_user_folder_and_lists_json_files(monkeypatch) -> None:
    def _handler(call):
        query = call["params"].get("q", "")
        if call["method"] == "GET" and "name = 'TravelBook'" in query:
            return _Response(payload={"files": [{"id": "root-1", "name": "TravelBook"}]})
        if call["method"] == "GET" and "name = 'alice'" in query:
            return _Response(payload={"files": []})
        if call["method"] == "POST":
            return _Response(payload={"id": "user-1"})
        if call["method"] == "GET" and "'user-1' in parents" in query:
            return _Response(payload={"files": [{"id": "f1", "name": "trip.json"}]})
        raise AssertionError(f"unexpected call: {call}")

    calls = _install_fake_session(monkeypatch, _handler)

    listing = asyncio.run(_make_service().list_namespace("alice"))

    assert listing.folder_id == "user-1"
    assert [(item.id, item.name) for item in listing.files] == [("f1", "trip.json")]
    create_call = next(call for call in calls if call["method"] == "POST")
    assert create_call["json"]["parents"] == ["root-1"]
    assert create_call["json"]["mimeType"] == "application/vnd.google-apps.folder"
    assert all(call["headers"]["Authorization"] == "Bearer test-token" for call in calls)


def test_list_namespace_without_root_folder_raises_with_identity(monkeypatch) -> None:
    _install_fake_session(monkeypatch, lambda call: _Response(payload={"files": []}))

    with pytest.raises(RootFolderNotFoundError) as exc_info:
        asyncio.run(_make_service().list_namespace("alice"))

    assert exc_info.value.service_identity == SERVICE_IDENTITY


def test_ensure_user_folder_rechecks_after_failed_create(monkeypatch) -> None:
    lookups = {"count": 0}

    def _handler(call):
        if call["method"] == "POST":
            return _Response(status_code=409, text="conflict")
        lookups["count"] += 1
        files = [] if lookups["count"] == 1 else [{"id": "user-9", "name": "alice"}]
        return _Response(payload={"files": files})

    _install_fake_session(monkeypatch, _handler)

    assert asyncio.run(_make_service().ensure_user_folder("root-1", "alice")) == "user-9"
    assert lookups["count"] == 2


def test_get_entry_returns_document_and_maps_not_found(monkeypatch) -> None:
    def _handler(call):
        if call["url"].endswith("/missing"):
            return _Response(status_code=404, text="not found")
        return _Response(payload=[{"dayId": 1}])

    calls = _install_fake_session(monkeypatch, _handler)
    service = _make_service()

    assert asyncio.run(service.get_entry("file-1")) == [{"dayId": 1}]
    assert calls[0]["params"]["alt"] == "media"
    with pytest.raises(RemoteFileNotFoundError):
        asyncio.run(service.get_entry("missing"))


def test_create_entry_uploads_multipart_with_json_suffix(monkeypatch) -> None:
    calls = _install_fake_session(monkeypatch, lambda call: _Response(payload={"id": "new-1", "parents": ["user-1"]}))

    file_id = asyncio.run(_make_service().create_entry("user-1", "shikoku", [{"dayId": 1, "region": "高松"}]))

    assert file_id == "new-1"
    call = calls[0]
    assert call["params"]["uploadType"] == "multipart"
    assert call["headers"]["Content-Type"].startswith("multipart/related; boundary=")
    body = call["data"].decode("utf-8")
    assert '"name": "shikoku.json"' in body
    assert '"parents": ["user-1"]' in body
    assert '  {\n    "dayId": 1,\n    "region": "高松"\n  }' in body


def test_update_entry_patches_media_and_returns_same_id(monkeypatch) -> None:
    calls = _install_fake_session(monkeypatch, lambda call: _Response(payload={"id": "file-1"}))

    assert asyncio.run(_make_service().update_entry("file-1", [])) == "file-1"
    assert calls[0]["method"] == "PATCH"
    assert calls[0]["params"]["uploadType"] == "media"
    assert calls[0]["data"] == b"[]"


@pytest.mark.parametrize(
    ("response", "error_type"),
    [
        (_Response(status_code=503, text="unavailable"), RemoteUnavailableError),
        (_Response(status_code=429, text="slow down"), RemoteUnavailableError),
        (_Response(status_code=403, text="forbidden"), RemoteStoreError),
        (_Response(status_code=200, text="<html>"), RemoteUnavailableError),
    ],
)
def test_request_errors_are_classified(monkeypatch, response, error_type) -> None:
    _install_fake_session(monkeypatch, lambda call: response)

    with pytest.raises(error_type):
        asyncio.run(_make_service().find_root_folder())


def test_network_failure_is_remote_unavailable(monkeypatch) -> None:
    def _handler(call):
        raise requests.ConnectionError("offline")

    _install_fake_session(monkeypatch, _handler)

    with pytest.raises(RemoteUnavailableError):
        asyncio.run(_make_service().find_root_folder())
