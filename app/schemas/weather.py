"""날씨 조회 API 요청/응답 스키마."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

WeatherSource = Literal["forecast", "historical"]


class WeatherRequest(BaseModel):
    """지역 이름과 날짜로 날씨를 조회하는 요청."""

    model_config = ConfigDict(populate_by_name=True)

    location: str = Field(..., min_length=1, description="자유 텍스트 지역 이름")
    date_str: str = Field(..., alias="dateStr", min_length=1, description="조회 날짜 (YYYY-MM-DD)")


class WeatherResult(BaseModel):
    """날씨 조회 결과. 조회 실패 시에도 화면에 그릴 수 있는 값을 담습니다."""

    model_config = ConfigDict(frozen=True)

    temperature: str = Field(..., description="'<min>°C - <max>°C' 형식의 기온 범위")
    condition: str = Field(..., description="날씨 상태 라벨")
    advice: str = Field("", description="여행 조언")
    source: WeatherSource = Field(..., description="예보(forecast) 또는 과거 기록(historical)")


WEATHER_UNAVAILABLE = WeatherResult(temperature="--", condition="無法取得", advice="", source="historical")
