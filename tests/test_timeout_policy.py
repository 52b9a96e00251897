"""타임아웃 정책 유틸 테스트."""

from app.core.config import Settings
from app.core.timeout_policy import build_timeout_policy, to_requests_timeout


def test_build_timeout_policy_caps_by_request_timeout() -> None:
    settings = Settings(
        REQUEST_TIMEOUT_SECONDS=20,
        EXTERNAL_API_TIMEOUT_SECONDS=50,
        DRIVE_TIMEOUT_SECONDS=30,
        DRIVE_CLIENT_TIMEOUT_SECONDS=45,
        WEATHER_TIMEOUT_SECONDS=25,
    )

    policy = build_timeout_policy(settings)

    assert policy.request_timeout_seconds == 20
    assert policy.external_api_timeout_seconds == 20
    assert policy.drive_timeout_seconds == 20
    assert policy.drive_client_timeout_seconds == 20
    assert policy.weather_timeout_seconds == 20


def test_drive_and_weather_are_capped_by_external_timeout() -> None:
    settings = Settings(
        REQUEST_TIMEOUT_SECONDS=60,
        EXTERNAL_API_TIMEOUT_SECONDS=8,
        DRIVE_TIMEOUT_SECONDS=15,
        DRIVE_CLIENT_TIMEOUT_SECONDS=30,
        WEATHER_TIMEOUT_SECONDS=10,
    )

    policy = build_timeout_policy(settings)

    assert policy.drive_timeout_seconds == 8
    assert policy.weather_timeout_seconds == 8
    assert policy.drive_client_timeout_seconds == 30


def test_to_requests_timeout_returns_connect_and_read_timeout() -> None:
    connect_timeout, read_timeout = to_requests_timeout(10)

    assert connect_timeout == 3.0
    assert read_timeout == 7.0
