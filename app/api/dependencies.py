"""API 의존성 모음."""

from app.services.google_drive_service import GoogleDriveService, get_google_drive_service
from app.services.weather_service import WeatherService, get_weather_service


def get_drive_store() -> GoogleDriveService:
    """`/api/drive`가 사용할 Google Drive 저장소를 제공합니다."""
    return get_google_drive_service()


def get_weather() -> WeatherService:
    """날씨 조회 서비스 인스턴스를 제공합니다."""
    return get_weather_service()
