"""애플리케이션 전역 설정을 관리하는 모듈."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """환경 변수 기반 설정 모델."""

    REQUEST_TIMEOUT_SECONDS: int = 60
    EXTERNAL_API_TIMEOUT_SECONDS: int = 15
    DRIVE_TIMEOUT_SECONDS: int = 15
    DRIVE_CLIENT_TIMEOUT_SECONDS: int = 20
    WEATHER_TIMEOUT_SECONDS: int = 10
    GOOGLE_CLIENT_EMAIL: str | None = None
    GOOGLE_PRIVATE_KEY: str | None = None
    DRIVE_ROOT_FOLDER_NAME: str = "TravelBook"
    DRIVE_API_BASE_URL: str = "http://127.0.0.1:8000/api/drive"
    LOCAL_STORE_URL: str = "sqlite:///./travelbook_local.db"
    WEATHER_GEOCODING_LANGUAGE: str = "zh"
    DOCS_MODE: str = "disabled"
    EXPOSE_INTERNAL_ERRORS: bool = False
    CORS_ALLOW_ORIGIN: str = "*"
    CORS_ALLOW_METHODS: str = "GET,OPTIONS,PATCH,DELETE,POST,PUT"
    CORS_ALLOW_HEADERS: str = (
        "X-CSRF-Token,X-Requested-With,Accept,Accept-Version,Content-Length,"
        "Content-MD5,Content-Type,Date,X-Api-Version"
    )
    CORS_ALLOW_CREDENTIALS: bool = True
    SECURITY_HEADERS_ENABLED: bool = True
    ENABLE_HSTS: bool = False
    HSTS_MAX_AGE_SECONDS: int = 31536000
    PROXY_HEADERS_ENABLED: bool = True
    PROXY_TRUSTED_HOSTS: str = "127.0.0.1"
    TRUSTED_HOSTS: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("DRIVE_ROOT_FOLDER_NAME", mode="before")
    @classmethod
    def _default_root_folder_name(cls, value: object) -> str:
        normalized = str(value).strip() if value is not None else ""
        return normalized or "TravelBook"

    @field_validator("WEATHER_GEOCODING_LANGUAGE", mode="before")
    @classmethod
    def _normalize_geocoding_language(cls, value: object) -> str:
        normalized = str(value).strip().lower() if value is not None else ""
        return normalized or "zh"


@lru_cache
def get_settings() -> Settings:
    """Settings 인스턴스를 반환한다. 최초 호출 시에만 생성되고 이후 캐싱된다."""
    return Settings()
