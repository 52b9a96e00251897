"""Open-Meteo 기반 여행지 날씨 조회 서비스.

지역 이름 → 좌표 변환은 다음 순서로 시도하며, 처음 성공한 결과를 사용합니다.

1. 정규화한 전체 문자열의 정확 일치
2. 구분자로 나눈 토큰별 일치
3. 부분 문자열 포함 (양방향)
4. 첫 토큰 지오코딩
5. 기본 좌표 (도쿄)

날씨 조회 실패는 예외로 올리지 않고 `WEATHER_UNAVAILABLE`을 반환합니다.
"""

from __future__ import annotations

import asyncio
import math
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from functools import lru_cache
from typing import Any

import requests

from app.core.config import get_settings
from app.core.geo import CITY_COORDINATES, DEFAULT_COORDINATES, Coordinates
from app.core.logger import get_logger
from app.core.timeout_policy import get_timeout_policy, to_requests_timeout
from app.schemas.weather import WEATHER_UNAVAILABLE, WeatherResult, WeatherSource

logger = get_logger(__name__)

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"
GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"

FORECAST_HORIZON_DAYS = 16
_DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,weathercode"
_TOKEN_SEPARATORS = re.compile(r"[\s&,/、，・]+")

WEATHER_CONDITIONS: dict[int, str] = {
    0: "晴天",
    1: "大致晴朗",
    2: "部分多雲",
    3: "多雲",
    45: "有霧",
    48: "霧淞",
    51: "小雨",
    53: "中雨",
    55: "大雨",
    61: "小陣雨",
    63: "中陣雨",
    65: "大陣雨",
    71: "小雪",
    73: "中雪",
    75: "大雪",
    77: "雪粒",
    80: "陣雨",
    81: "中陣雨",
    82: "大陣雨",
    85: "陣雪",
    86: "大陣雪",
    95: "雷雨",
    96: "雷雨夾冰雹",
    99: "強雷雨夾冰雹",
}
UNKNOWN_CONDITION = "未知"


class LocationStrategy(str, Enum):
    """좌표를 찾은 방법."""

    EXACT = "exact"
    TOKEN = "token"
    SUBSTRING = "substring"
    GEOCODE = "geocode"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ResolvedLocation:
    coordinates: Coordinates
    strategy: LocationStrategy


@dataclass(frozen=True, slots=True)
class WeatherQuery:
    """날짜 차이로 결정된 조회 대상."""

    url: str
    query_date: date
    source: WeatherSource


def get_weather_condition(code: int) -> str:
    """WMO 날씨 코드를 상태 라벨로 변환합니다."""
    return WEATHER_CONDITIONS.get(code, UNKNOWN_CONDITION)


def get_weather_advice(code: int, temp_max: float) -> str:
    if code >= 95:
        return "有雷雨風險，注意安全"
    if code >= 71:
        return "天氣寒冷，注意保暖"
    if code >= 61:
        return "記得攜帶雨具"
    if temp_max > 30:
        return "天氣炎熱，注意防曬"
    if temp_max < 10:
        return "氣溫較低，多穿衣物"
    if code <= 1:
        return "天氣晴朗，適合戶外活動"
    return "天氣穩定，適合旅遊"


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_temperature_range(temp_min: float, temp_max: float) -> str:
    return f"{round_half_up(temp_min)}°C - {round_half_up(temp_max)}°C"


def same_day_previous_year(value: date) -> date:
    """1년 전 같은 날짜. 2월 29일은 2월 28일로 대체합니다."""
    try:
        return value.replace(year=value.year - 1)
    except ValueError:
        return value.replace(year=value.year - 1, day=28)


def plan_weather_query(target: date, today: date) -> WeatherQuery:
    """오늘과의 날짜 차이로 예보/과거 기록 조회를 결정합니다.

    - 과거: 해당 날짜의 과거 기록
    - 오늘 ~ 16일 후: 예보
    - 16일 초과: 1년 전 같은 날짜의 과거 기록 (참고용)
    """
    diff = (target - today).days
    if diff < 0:
        return WeatherQuery(url=ARCHIVE_URL, query_date=target, source="historical")
    if diff <= FORECAST_HORIZON_DAYS:
        return WeatherQuery(url=FORECAST_URL, query_date=target, source="forecast")
    return WeatherQuery(url=ARCHIVE_URL, query_date=same_day_previous_year(target), source="historical")


def _normalize(value: str) -> str:
    return value.strip().lower()


def split_location_tokens(location: str) -> list[str]:
    return [token for token in _TOKEN_SEPARATORS.split(location.strip()) if token]


def match_static_location(location: str) -> ResolvedLocation | None:
    """정적 좌표 테이블에서 지역을 찾습니다. 찾지 못하면 None."""
    normalized = _normalize(location)
    if not normalized:
        return None

    if normalized in CITY_COORDINATES:
        return ResolvedLocation(CITY_COORDINATES[normalized], LocationStrategy.EXACT)

    for token in split_location_tokens(location):
        coordinates = CITY_COORDINATES.get(token.lower()) or CITY_COORDINATES.get(token)
        if coordinates is not None:
            return ResolvedLocation(coordinates, LocationStrategy.TOKEN)

    for key, coordinates in CITY_COORDINATES.items():
        if key in normalized or normalized in key:
            return ResolvedLocation(coordinates, LocationStrategy.SUBSTRING)
    return None


class WeatherService:
    """지역 이름과 날짜로 기온/날씨 상태/여행 조언을 조회합니다."""

    def __init__(
        self,
        timeout_seconds: int = 10,
        geocoding_language: str = "zh",
        today_provider: Callable[[], date] = date.today,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._geocoding_language = geocoding_language
        self._today_provider = today_provider

    @classmethod
    def from_settings(cls) -> WeatherService:
        """애플리케이션 설정으로 서비스 인스턴스를 생성합니다."""
        settings = get_settings()
        timeout_policy = get_timeout_policy(settings)
        return cls(
            timeout_seconds=timeout_policy.weather_timeout_seconds,
            geocoding_language=settings.WEATHER_GEOCODING_LANGUAGE,
        )

    async def resolve_location(self, location: str) -> ResolvedLocation:
        """지역 이름을 좌표로 변환합니다. 이 함수는 예외를 올리지 않습니다."""
        matched = match_static_location(location)
        if matched is not None:
            return matched

        tokens = split_location_tokens(location)
        if tokens:
            coordinates = await self.geocode(tokens[0])
            if coordinates is not None:
                return ResolvedLocation(coordinates, LocationStrategy.GEOCODE)

        logger.info("Location not resolved, using default coordinates: location=%s", location)
        return ResolvedLocation(DEFAULT_COORDINATES, LocationStrategy.DEFAULT)

    async def geocode(self, name: str) -> Coordinates | None:
        data = await self._request(
            GEOCODING_URL,
            {"name": name, "count": 1, "language": self._geocoding_language, "format": "json"},
        )
        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            return None
        try:
            return Coordinates(results[0]["latitude"], results[0]["longitude"])
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Geocoding result parse failed: name=%s error=%s", name, exc)
            return None

    async def get_weather(self, location: str, date_str: str) -> WeatherResult:
        """날씨를 조회합니다. 어떤 단계에서 실패해도 `WEATHER_UNAVAILABLE`을 반환합니다."""
        try:
            target = date.fromisoformat(date_str)
        except (TypeError, ValueError):
            logger.warning("Invalid weather date: %s", date_str)
            return WEATHER_UNAVAILABLE

        resolved = await self.resolve_location(location)
        query = plan_weather_query(target, self._today_provider())

        params: dict[str, Any] = {
            **resolved.coordinates.to_query_params(),
            "daily": _DAILY_FIELDS,
            "timezone": "auto",
            "start_date": query.query_date.isoformat(),
            "end_date": query.query_date.isoformat(),
        }

        data = await self._request(query.url, params)
        if data is None:
            return WEATHER_UNAVAILABLE

        try:
            return self._build_result(data, query)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            logger.error("Weather response parse failed: location=%s date=%s error=%s", location, date_str, exc)
            return WEATHER_UNAVAILABLE

    @staticmethod
    def _build_result(data: dict[str, Any], query: WeatherQuery) -> WeatherResult:
        daily = data["daily"]
        times = daily.get("time") or []
        query_date = query.query_date.isoformat()
        if query_date in times:
            index = times.index(query_date)
        elif query.source == "forecast":
            raise ValueError(f"forecast has no entry for {query_date}")
        else:
            index = 0

        temp_max = float(daily["temperature_2m_max"][index])
        temp_min = float(daily["temperature_2m_min"][index])
        code = int(daily["weathercode"][index])

        return WeatherResult(
            temperature=format_temperature_range(temp_min, temp_max),
            condition=get_weather_condition(code),
            advice=get_weather_advice(code, temp_max),
            source=query.source,
        )

    async def _request(self, url: str, params: dict[str, Any]) -> dict[str, Any] | None:
        request_timeout = to_requests_timeout(self._timeout_seconds)

        def _send() -> requests.Response:
            with requests.Session() as session:
                return session.get(url, params=params, timeout=request_timeout)

        try:
            response = await asyncio.to_thread(_send)
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as exc:
            response = exc.response
            status_code = response.status_code if response is not None else None
            body = (response.text or "")[:200] if response is not None else ""
            logger.error("Open-Meteo API error: url=%s status=%s body=%s", url, status_code, body)
            return None
        except requests.RequestException as exc:
            logger.error("Open-Meteo API request failed: url=%s error=%s", url, exc)
            return None
        except ValueError as exc:
            logger.error("Open-Meteo API response parse failed: url=%s error=%s", url, exc)
            return None


@lru_cache(maxsize=1)
def get_weather_service() -> WeatherService:
    """설정 재사용을 위한 프로세스 단위 싱글톤을 반환합니다."""
    return WeatherService.from_settings()
