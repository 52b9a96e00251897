"""일정 편집, 생성, 가져오기/내보내기 서비스.

모든 함수는 입력 목록을 변경하지 않고 새 목록을 반환합니다.
"""

from __future__ import annotations

import json
import time
import uuid
from datetime import date, timedelta
from typing import Any

from pydantic import ValidationError

from app.core.exceptions import ItineraryFormatError
from app.schemas.itinerary import (
    SETTINGS_DAY_ID,
    TEMP_EVENT_ID_PREFIX,
    Day,
    Event,
    EventType,
    ItineraryAdapter,
    dump_itinerary,
)

DEFAULT_REGION = "待定地點"
WEEKDAY_LABELS = ("(一)", "(二)", "(三)", "(四)", "(五)", "(六)", "(日)")


def format_display_date(value: date) -> str:
    """`2/13 (五)` 형식의 표시용 날짜를 만듭니다."""
    return f"{value.month}/{value.day} {WEEKDAY_LABELS[value.weekday()]}"


def _build_day(day_id: int, value: date, region: str = DEFAULT_REGION) -> Day:
    return Day(
        day_id=day_id,
        date_str=value.isoformat(),
        display_date=format_display_date(value),
        region=region,
        events=[],
    )


def generate_empty_itinerary(days: int, start_date: date | str) -> list[Day]:
    """시작일부터 N일 동안의 빈 일정을 생성합니다. 일자 ID는 1부터 시작합니다."""
    if days < 1:
        raise ItineraryFormatError("여행 일수는 1일 이상이어야 합니다.")
    start = date.fromisoformat(start_date) if isinstance(start_date, str) else start_date
    return [_build_day(offset + 1, start + timedelta(days=offset)) for offset in range(days)]


def parse_itinerary(raw: Any) -> list[Day]:
    """저장/가져오기 데이터를 검증된 일정으로 변환합니다.

    Raises:
        ItineraryFormatError: 배열이 아니거나, 필수 값이 비었거나,
            일자 ID가 중복/예약값(0)인 경우.
    """
    if not isinstance(raw, list):
        raise ItineraryFormatError("일정 데이터는 배열이어야 합니다.")

    try:
        days = ItineraryAdapter.validate_python(raw)
    except ValidationError as exc:
        raise ItineraryFormatError(f"일정 데이터 형식이 올바르지 않습니다: {exc.error_count()}개 오류") from exc

    day_ids = [day.day_id for day in days]
    if SETTINGS_DAY_ID in day_ids:
        raise ItineraryFormatError("일자 ID 0은 예약되어 있어 사용할 수 없습니다.")
    if len(day_ids) != len(set(day_ids)):
        raise ItineraryFormatError("중복된 일자 ID가 있습니다.")
    return days


def import_itinerary(text: str) -> list[Day]:
    """JSON 문자열을 읽어 일정 전체를 대체할 새 일정을 반환합니다."""
    try:
        raw = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise ItineraryFormatError("JSON 파일을 읽을 수 없습니다.") from exc
    return parse_itinerary(raw)


def export_itinerary(days: list[Day]) -> str:
    """일정을 2칸 들여쓰기 JSON 배열로 내보냅니다."""
    return json.dumps(dump_itinerary(days), ensure_ascii=False, indent=2)


def navigable_days(days: list[Day]) -> list[Day]:
    """일자 탐색에 노출할 일정 (설정 화면용 ID 0 제외)."""
    return [day for day in days if day.day_id != SETTINGS_DAY_ID]


def find_day(days: list[Day], day_id: int) -> Day:
    for day in days:
        if day.day_id == day_id:
            return day
    raise KeyError(f"{day_id}일차를 찾을 수 없습니다.")


def _replace_day(days: list[Day], updated: Day) -> list[Day]:
    return [updated if day.day_id == updated.day_id else day for day in days]


def new_event_draft() -> Event:
    """새 일정 입력 폼의 초기값. 저장 전까지 임시 ID를 사용합니다."""
    return Event(
        id=f"{TEMP_EVENT_ID_PREFIX}{int(time.time() * 1000)}",
        time="09:00",
        title="新行程",
        location_name="",
        type=EventType.SIGHTSEEING,
        description="",
        details=[],
    )


def save_event(days: list[Day], day_id: int, event: Event) -> list[Day]:
    """일정 항목을 추가하거나 같은 ID의 항목을 교체한 뒤 시간순으로 정렬합니다.

    임시 ID로 들어온 항목은 저장 시점에 영구 ID를 발급받습니다.
    """
    day = find_day(days, day_id)
    if event.is_temporary:
        event = event.model_copy(update={"id": f"evt-{uuid.uuid4().hex[:12]}"})

    events = list(day.events)
    for index, existing in enumerate(events):
        if existing.id == event.id:
            events[index] = event
            break
    else:
        events.append(event)

    events.sort(key=lambda item: item.time)
    return _replace_day(days, day.model_copy(update={"events": events}))


def delete_event(days: list[Day], day_id: int, event_id: str) -> list[Day]:
    day = find_day(days, day_id)
    events = [event for event in day.events if event.id != event_id]
    return _replace_day(days, day.model_copy(update={"events": events}))


def append_day(days: list[Day]) -> list[Day]:
    """마지막 일자 다음 날을 새 일자로 추가합니다."""
    existing = navigable_days(days)
    if not existing:
        return days + [_build_day(1, date.today())]

    last = max(existing, key=lambda day: day.day_id)
    next_date = date.fromisoformat(last.date_str) + timedelta(days=1)
    return days + [_build_day(last.day_id + 1, next_date)]


def remove_last_day(days: list[Day]) -> list[Day]:
    """마지막 일자를 삭제합니다. 최소 하루는 남깁니다."""
    existing = navigable_days(days)
    if len(existing) <= 1:
        raise ItineraryFormatError("최소 하루의 일정은 남아 있어야 합니다.")

    last_id = max(day.day_id for day in existing)
    return [day for day in days if day.day_id != last_id]


def rename_region(days: list[Day], day_id: int, region: str) -> list[Day]:
    normalized = region.strip()
    if not normalized:
        raise ItineraryFormatError("지역 이름은 비어 있을 수 없습니다.")
    day = find_day(days, day_id)
    return _replace_day(days, day.model_copy(update={"region": normalized}))
