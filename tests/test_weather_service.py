"""날씨 조회 서비스 테스트."""

from __future__ import annotations

import asyncio
from datetime import date

import pytest
import requests
from pydantic import ValidationError

from app.core.geo import CITY_COORDINATES, DEFAULT_COORDINATES, Coordinates
from app.schemas.weather import WEATHER_UNAVAILABLE
from app.services.weather_service import (
    ARCHIVE_URL,
    FORECAST_URL,
    GEOCODING_URL,
    LocationStrategy,
    WeatherService,
    get_weather_advice,
    get_weather_condition,
    match_static_location,
    plan_weather_query,
    round_half_up,
    same_day_previous_year,
)

TODAY = date(2026, 2, 1)


def _daily(dates: list[str], highs: list[float], lows: list[float], codes: list[int]) -> dict:
    return {
        "daily": {
            "time": dates,
            "temperature_2m_max": highs,
            "temperature_2m_min": lows,
            "weathercode": codes,
        }
    }


def _make_service(monkeypatch, responses: dict[str, object]) -> tuple[WeatherService, list[tuple[str, dict]]]:
    service = WeatherService(today_provider=lambda: TODAY)
    calls: list[tuple[str, dict]] = []

    async def _fake_request(url: str, params: dict):
        calls.append((url, params))
        return responses.get(url)

    monkeypatch.setattr(service, "_request", _fake_request)
    return service, calls


@pytest.mark.parametrize(
    ("location", "strategy", "expected"),
    [
        ("高松 Takamatsu", LocationStrategy.EXACT, CITY_COORDINATES["高松"]),
        ("  KOCHI ", LocationStrategy.EXACT, CITY_COORDINATES["kochi"]),
        ("鳴門 & 祖谷", LocationStrategy.TOKEN, CITY_COORDINATES["鳴門"]),
        ("Osaka/Kyoto", LocationStrategy.TOKEN, CITY_COORDINATES["osaka"]),
        ("高松市", LocationStrategy.SUBSTRING, CITY_COORDINATES["高松"]),
    ],
)
def test_match_static_location_strategies(location: str, strategy: LocationStrategy, expected: Coordinates) -> None:
    resolved = match_static_location(location)

    assert resolved is not None
    assert resolved.strategy == strategy
    assert resolved.coordinates == expected


def test_match_static_location_returns_none_for_blank_or_unknown() -> None:
    assert match_static_location("   ") is None
    assert match_static_location("Reykjavik") is None


def test_resolve_location_geocodes_first_token(monkeypatch) -> None:
    service, calls = _make_service(
        monkeypatch,
        {GEOCODING_URL: {"results": [{"latitude": 64.1466, "longitude": -21.9426}]}},
    )

    resolved = asyncio.run(service.resolve_location("Reykjavik & Blue Lagoon"))

    assert resolved.strategy == LocationStrategy.GEOCODE
    assert resolved.coordinates == Coordinates(64.1466, -21.9426)
    assert calls[0][1]["name"] == "Reykjavik"
    assert calls[0][1]["count"] == 1


def test_unknown_location_with_failing_geocode_uses_default_and_still_returns(monkeypatch) -> None:
    service, calls = _make_service(
        monkeypatch,
        {FORECAST_URL: _daily(["2026-02-03"], [8.4], [1.5], [3])},
    )

    result = asyncio.run(service.get_weather("Atlantis", "2026-02-03"))

    assert calls[0][0] == GEOCODING_URL
    assert calls[1][0] == FORECAST_URL
    assert calls[1][1]["latitude"] == DEFAULT_COORDINATES.latitude
    assert calls[1][1]["longitude"] == DEFAULT_COORDINATES.longitude
    assert result.temperature == "2°C - 8°C"
    assert result.source == "forecast"


def test_plan_weather_query_branches_on_day_difference() -> None:
    past = plan_weather_query(date(2026, 1, 31), TODAY)
    today = plan_weather_query(TODAY, TODAY)
    horizon = plan_weather_query(date(2026, 2, 17), TODAY)
    beyond = plan_weather_query(date(2026, 2, 18), TODAY)

    assert (past.url, past.query_date, past.source) == (ARCHIVE_URL, date(2026, 1, 31), "historical")
    assert (today.url, today.source) == (FORECAST_URL, "forecast")
    assert (horizon.url, horizon.source) == (FORECAST_URL, "forecast")
    assert (beyond.url, beyond.query_date, beyond.source) == (ARCHIVE_URL, date(2025, 2, 18), "historical")


def test_same_day_previous_year_maps_leap_day() -> None:
    assert same_day_previous_year(date(2028, 2, 29)) == date(2027, 2, 28)
    assert same_day_previous_year(date(2026, 7, 1)) == date(2025, 7, 1)


def test_seventeen_days_ahead_uses_last_year_archive(monkeypatch) -> None:
    service, calls = _make_service(
        monkeypatch,
        {ARCHIVE_URL: _daily(["2025-02-18"], [12.5], [3.49], [61])},
    )

    result = asyncio.run(service.get_weather("高松 Takamatsu", "2026-02-18"))

    url, params = calls[0]
    assert url == ARCHIVE_URL
    assert params["start_date"] == params["end_date"] == "2025-02-18"
    assert result.source == "historical"
    assert result.temperature == "3°C - 13°C"
    assert result.condition == "小陣雨"
    assert result.advice == "記得攜帶雨具"


def test_forecast_picks_entry_matching_target_date(monkeypatch) -> None:
    service, calls = _make_service(
        monkeypatch,
        {FORECAST_URL: _daily(["2026-02-01", "2026-02-02"], [20.0, 31.2], [10.0, 22.8], [0, 1])},
    )

    result = asyncio.run(service.get_weather("高知 Kochi", "2026-02-02"))

    assert calls[0][1]["start_date"] == calls[0][1]["end_date"] == "2026-02-02"
    assert calls[0][1]["timezone"] == "auto"
    assert result.temperature == "23°C - 31°C"
    assert result.condition == "大致晴朗"
    assert result.advice == "天氣炎熱，注意防曬"


def test_sixteen_days_ahead_requests_that_date_from_forecast(monkeypatch) -> None:
    service, calls = _make_service(
        monkeypatch,
        {FORECAST_URL: _daily(["2026-02-17"], [16.0], [16.0], [3])},
    )

    result = asyncio.run(service.get_weather("tokyo", "2026-02-17"))

    url, params = calls[0]
    assert url == FORECAST_URL
    assert params["start_date"] == params["end_date"] == "2026-02-17"
    assert "forecast_days" not in params
    assert result.source == "forecast"
    assert result.temperature == "16°C - 16°C"


def test_forecast_without_target_date_returns_unavailable_sentinel(monkeypatch) -> None:
    service, _ = _make_service(
        monkeypatch,
        {FORECAST_URL: _daily(["2026-02-01"], [0.0], [0.0], [0])},
    )

    assert asyncio.run(service.get_weather("tokyo", "2026-02-17")) == WEATHER_UNAVAILABLE


def test_archive_missing_date_falls_back_to_first_entry(monkeypatch) -> None:
    service, _ = _make_service(
        monkeypatch,
        {ARCHIVE_URL: _daily(["2026-01-01"], [9.0], [-2.5], [2])},
    )

    result = asyncio.run(service.get_weather("tokyo", "2026-01-15"))

    assert result.temperature == "-2°C - 9°C"
    assert result.advice == "氣溫較低，多穿衣物"


def test_network_failure_returns_unavailable_sentinel(monkeypatch) -> None:
    service, _ = _make_service(monkeypatch, {})

    assert asyncio.run(service.get_weather("高松", "2026-02-05")) == WEATHER_UNAVAILABLE


def test_malformed_payload_or_date_returns_unavailable_sentinel(monkeypatch) -> None:
    service, _ = _make_service(monkeypatch, {FORECAST_URL: {"daily": {"time": []}}})

    assert asyncio.run(service.get_weather("高松", "2026-02-05")) == WEATHER_UNAVAILABLE
    assert asyncio.run(service.get_weather("高松", "02/05/2026")) == WEATHER_UNAVAILABLE


def test_request_swallows_requests_errors(monkeypatch) -> None:
    def _raise(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr("app.services.weather_service.requests.Session.get", _raise)
    service = WeatherService(today_provider=lambda: TODAY)

    assert asyncio.run(service._request(FORECAST_URL, {})) is None


@pytest.mark.parametrize(
    ("code", "label"),
    [
        (0, "晴天"),
        (3, "多雲"),
        (48, "霧淞"),
        (55, "大雨"),
        (77, "雪粒"),
        (82, "大陣雨"),
        (86, "大陣雪"),
        (99, "強雷雨夾冰雹"),
        (42, "未知"),
    ],
)
def test_weather_condition_table(code: int, label: str) -> None:
    assert get_weather_condition(code) == label


@pytest.mark.parametrize(
    ("code", "temp_max", "advice"),
    [
        (95, 35.0, "有雷雨風險，注意安全"),
        (73, 35.0, "天氣寒冷，注意保暖"),
        (63, 35.0, "記得攜帶雨具"),
        (3, 30.5, "天氣炎熱，注意防曬"),
        (3, 9.9, "氣溫較低，多穿衣物"),
        (1, 20.0, "天氣晴朗，適合戶外活動"),
        (2, 20.0, "天氣穩定，適合旅遊"),
        (45, 30.0, "天氣穩定，適合旅遊"),
    ],
)
def test_weather_advice_thresholds(code: int, temp_max: float, advice: str) -> None:
    assert get_weather_advice(code, temp_max) == advice


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(3.49) == 3


def test_unavailable_sentinel_cannot_be_mutated() -> None:
    with pytest.raises(ValidationError):
        WEATHER_UNAVAILABLE.temperature = "20°C - 25°C"

    assert WEATHER_UNAVAILABLE.temperature == "--"
