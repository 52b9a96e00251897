"""일자별 여행 일정(Itinerary) 데이터 모델.

저장 파일과 내보내기 JSON은 프론트엔드와 동일한 camelCase 키를 사용하므로
모든 모델은 alias로 직렬화합니다.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

SETTINGS_DAY_ID = 0
TEMP_EVENT_ID_PREFIX = "new-"
_TIME_PATTERN = r"^\d{2}:\d{2}$"
_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class EventType(str, Enum):
    """일정 항목 유형."""

    FLIGHT = "FLIGHT"
    TRAIN = "TRAIN"
    BUS = "BUS"
    HOTEL = "HOTEL"
    SIGHTSEEING = "SIGHTSEEING"
    FOOD = "FOOD"
    SHOPPING = "SHOPPING"
    WALKING = "WALKING"


class DetailEntry(BaseModel):
    """일정 항목 상세 정보(예약 번호, 교통편 메모 등)."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description="상세 항목 제목")
    content: str = Field(..., description="상세 내용 (코드, 티켓 번호, 메모)")
    image_url: str | None = Field(None, alias="imageUrl", description="첨부 이미지 URL")


class Event(BaseModel):
    """하루 일정 안의 개별 항목."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, description="일자 내 고유 ID")
    time: str = Field(..., pattern=_TIME_PATTERN, description="시작 시각 (HH:MM, 정렬 키)")
    end_time: str | None = Field(None, alias="endTime", pattern=_TIME_PATTERN, description="종료 시각 (HH:MM)")
    title: str = Field(..., description="항목 제목")
    location_name: str = Field("", alias="locationName", description="장소 이름")
    location_url: str | None = Field(None, alias="locationUrl", description="지도 URL")
    type: EventType = Field(..., description="항목 유형")
    description: str = Field("", description="설명")
    cost: int | None = Field(None, ge=0, description="비용 (통화 단위)")
    details: list[DetailEntry] = Field(default_factory=list, description="상세 정보 목록")

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("일정 제목은 비어 있을 수 없습니다.")
        return value

    @property
    def is_temporary(self) -> bool:
        """아직 저장되지 않은 임시 ID인지 여부."""
        return self.id.startswith(TEMP_EVENT_ID_PREFIX)


class Day(BaseModel):
    """하루 단위 일정. events는 항상 time 오름차순으로 유지됩니다."""

    model_config = ConfigDict(populate_by_name=True)

    day_id: int = Field(..., alias="dayId", description="일자 ID (0은 설정 화면용으로 예약)")
    date_str: str = Field(..., alias="dateStr", pattern=_DATE_PATTERN, description="날짜 (YYYY-MM-DD)")
    display_date: str = Field(..., alias="displayDate", description="표시용 날짜 라벨")
    region: str = Field(..., description="지역 이름 (자유 텍스트)")
    events: list[Event] = Field(default_factory=list, description="시간순 일정 항목")

    @model_validator(mode="after")
    def validate_events(self) -> Day:
        ids = [event.id for event in self.events]
        if len(ids) != len(set(ids)):
            raise ValueError(f"{self.day_id}일차에 중복된 일정 ID가 있습니다.")

        ordered = sorted(self.events, key=lambda event: event.time)
        if ordered != self.events:
            self.events = ordered
        return self


ItineraryAdapter = TypeAdapter(list[Day])


def dump_itinerary(days: list[Day]) -> list[dict]:
    """일정을 저장/내보내기용 camelCase dict 목록으로 변환합니다."""
    return [day.model_dump(mode="json", by_alias=True, exclude_unset=True) for day in days]
