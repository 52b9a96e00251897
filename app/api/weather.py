"""여행지 날씨 조회 API (`/api/weather`)."""

from fastapi import APIRouter, Depends, Request

from app.api.dependencies import get_weather
from app.core.logger import get_logger
from app.schemas.weather import WEATHER_UNAVAILABLE, WeatherRequest, WeatherResult
from app.services.weather_service import WeatherService

router = APIRouter(prefix="/api", tags=["weather"])
logger = get_logger(__name__)


@router.post("/weather", response_model=WeatherResult)
async def get_trip_weather(
    request: Request,
    service: WeatherService = Depends(get_weather),  # noqa: B008
) -> WeatherResult:
    """지역 이름과 날짜로 날씨를 조회합니다. 실패해도 항상 200으로 대체 값을 반환합니다."""
    try:
        payload = WeatherRequest.model_validate(await request.json())
    except ValueError as exc:
        logger.warning("Invalid weather request: %s", exc)
        return WEATHER_UNAVAILABLE

    try:
        return await service.get_weather(payload.location, payload.date_str)
    except Exception as exc:
        logger.exception("Weather lookup failed: location=%s error=%s", payload.location, exc)
        return WEATHER_UNAVAILABLE
