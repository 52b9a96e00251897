"""날씨 조회용 좌표 유틸리티와 정적 도시 좌표 테이블."""

from __future__ import annotations

from dataclasses import dataclass

_MIN_LAT = -90.0
_MAX_LAT = 90.0
_MIN_LNG = -180.0
_MAX_LNG = 180.0


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass(frozen=True, slots=True)
class Coordinates:
    """위경도 좌표."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "latitude", _clamp(float(self.latitude), _MIN_LAT, _MAX_LAT))
        object.__setattr__(self, "longitude", _clamp(float(self.longitude), _MIN_LNG, _MAX_LNG))

    def to_query_params(self) -> dict[str, float]:
        """Open-Meteo `latitude`/`longitude` 쿼리 파라미터로 변환합니다."""
        return {"latitude": self.latitude, "longitude": self.longitude}


_TAKAMATSU = Coordinates(34.3428, 134.0434)
_NARUTO = Coordinates(34.1734, 134.6096)
_IYA = Coordinates(33.9167, 133.8167)
_KOCHI = Coordinates(33.5597, 133.5311)
_UWAJIMA = Coordinates(33.2233, 132.5606)
_DOGO = Coordinates(33.8520, 132.7859)
_MATSUYAMA = Coordinates(33.8391, 132.7656)
_KANONJI = Coordinates(34.1290, 133.6630)
_MARUGAME = Coordinates(34.2899, 133.7975)
_KOTOHIRA = Coordinates(34.1914, 133.8184)
_TAKAMATSU_AIRPORT = Coordinates(34.2140, 134.0195)
_TOKYO = Coordinates(35.6762, 139.6503)
_OSAKA = Coordinates(34.6937, 135.5023)
_KYOTO = Coordinates(35.0116, 135.7681)

# 키는 소문자로 정규화된 형태로 저장합니다. 데모 일정의 지역 라벨도 그대로 포함합니다.
CITY_COORDINATES: dict[str, Coordinates] = {
    "高松": _TAKAMATSU,
    "takamatsu": _TAKAMATSU,
    "高松 takamatsu": _TAKAMATSU,
    "鳴門": _NARUTO,
    "naruto": _NARUTO,
    "祖谷": _IYA,
    "iya": _IYA,
    "高知": _KOCHI,
    "kochi": _KOCHI,
    "高知 kochi": _KOCHI,
    "宇和島": _UWAJIMA,
    "uwajima": _UWAJIMA,
    "宇和島 uwajima": _UWAJIMA,
    "道後": _DOGO,
    "道後溫泉": _DOGO,
    "dogo": _DOGO,
    "道後溫泉 dogo": _DOGO,
    "松山": _MATSUYAMA,
    "matsuyama": _MATSUYAMA,
    "松山 matsuyama": _MATSUYAMA,
    "觀音寺": _KANONJI,
    "kanonji": _KANONJI,
    "觀音寺 kanonji": _KANONJI,
    "丸龜": _MARUGAME,
    "marugame": _MARUGAME,
    "丸龜 marugame": _MARUGAME,
    "琴平": _KOTOHIRA,
    "kotohira": _KOTOHIRA,
    "返程": _TAKAMATSU_AIRPORT,
    "東京": _TOKYO,
    "tokyo": _TOKYO,
    "大阪": _OSAKA,
    "osaka": _OSAKA,
    "京都": _KYOTO,
    "kyoto": _KYOTO,
}

DEFAULT_COORDINATES = _TOKYO
