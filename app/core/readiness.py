"""애플리케이션 준비성(readiness) 체크 유틸."""

from __future__ import annotations

import asyncio
import socket
import sqlite3
from pathlib import Path
from urllib.parse import unquote, urlparse

from app.core.config import Settings, get_settings
from app.core.timeout_policy import TimeoutPolicy, get_timeout_policy

ReadinessCheck = dict[str, str | bool]


def _ok(detail: str, *, required: bool = True) -> ReadinessCheck:
    return {"status": "ok", "ok": True, "required": required, "detail": detail}


def _fail(detail: str, *, required: bool = True) -> ReadinessCheck:
    return {"status": "fail", "ok": False, "required": required, "detail": detail}


def _skip(detail: str, *, required: bool = False) -> ReadinessCheck:
    return {"status": "skip", "ok": True, "required": required, "detail": detail}


def _normalize_sqlite_path(store_url: str) -> str | None:
    parsed = urlparse(store_url)
    if parsed.scheme.split("+")[0].lower() not in {"sqlite", "sqlite3"}:
        return None

    if store_url.endswith(":memory:"):
        return ":memory:"

    db_path = unquote(parsed.path or "")
    if not db_path:
        return None

    # sqlite:///./file.db 형태는 path가 /./file.db 로 파싱된다.
    if db_path.startswith("/./"):
        db_path = db_path[1:]
    # Windows absolute path 형태(/C:/...) 보정
    if len(db_path) >= 3 and db_path[0] == "/" and db_path[2] == ":":
        db_path = db_path[1:]
    return db_path


async def _check_tcp_connectivity(
    host: str,
    port: int,
    timeout_seconds: int,
    label: str,
    *,
    required: bool = True,
) -> ReadinessCheck:
    def _connect() -> None:
        with socket.create_connection((host, port), timeout=timeout_seconds):
            return None

    try:
        await asyncio.to_thread(_connect)
        return _ok(f"{label} 연결 가능 ({host}:{port})", required=required)
    except OSError as exc:
        return _fail(f"{label} 연결 실패 ({host}:{port}): {exc}", required=required)


async def _check_local_store_readiness(settings: Settings) -> ReadinessCheck:
    store_url = (settings.LOCAL_STORE_URL or "").strip()
    if not store_url:
        return _fail("LOCAL_STORE_URL이 설정되지 않았습니다.")

    sqlite_path = _normalize_sqlite_path(store_url)
    if sqlite_path is None:
        return _fail("LOCAL_STORE_URL은 SQLite URL이어야 합니다.")

    def _check_sqlite() -> None:
        if sqlite_path != ":memory:":
            parent = Path(sqlite_path).parent
            if parent and not parent.exists():
                raise FileNotFoundError(f"로컬 저장소 경로 디렉터리가 존재하지 않습니다: {parent}")
        connection = sqlite3.connect(sqlite_path)
        try:
            connection.execute("SELECT 1")
        finally:
            connection.close()

    try:
        await asyncio.to_thread(_check_sqlite)
        return _ok("로컬 저장소(SQLite) 연결 확인 완료")
    except (OSError, sqlite3.Error) as exc:
        return _fail(f"로컬 저장소(SQLite) 연결 실패: {exc}")


async def _check_google_drive_readiness(settings: Settings, timeout_policy: TimeoutPolicy) -> ReadinessCheck:
    if not settings.GOOGLE_CLIENT_EMAIL:
        return _skip("GOOGLE_CLIENT_EMAIL 미설정으로 Google Drive 체크를 건너뜁니다.")

    # 원격 저장소 장애는 로컬 fallback으로 처리되므로 필수 항목이 아니다.
    return await _check_tcp_connectivity(
        host="www.googleapis.com",
        port=443,
        timeout_seconds=timeout_policy.drive_timeout_seconds,
        label="Google Drive API",
        required=False,
    )


async def _check_open_meteo_readiness(timeout_policy: TimeoutPolicy) -> ReadinessCheck:
    return await _check_tcp_connectivity(
        host="api.open-meteo.com",
        port=443,
        timeout_seconds=timeout_policy.weather_timeout_seconds,
        label="Open-Meteo API",
        required=False,
    )


async def collect_readiness_status() -> dict[str, object]:
    """로컬 저장소/외부 API 의존성 준비 상태를 점검합니다."""
    settings = get_settings()
    timeout_policy = get_timeout_policy(settings)

    local_store_check, google_drive_check, open_meteo_check = await asyncio.gather(
        _check_local_store_readiness(settings),
        _check_google_drive_readiness(settings, timeout_policy),
        _check_open_meteo_readiness(timeout_policy),
    )

    checks: dict[str, ReadinessCheck] = {
        "local_store": local_store_check,
        "google_drive": google_drive_check,
        "open_meteo": open_meteo_check,
    }
    required_checks_ok = all(bool(check["ok"]) for check in checks.values() if bool(check.get("required", True)))

    return {
        "status": "ready" if required_checks_ok else "not_ready",
        "checks": checks,
    }
