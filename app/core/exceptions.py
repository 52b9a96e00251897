"""일정 저장소/날씨 계층에서 사용하는 예외 분류.

원격 저장소 장애(일시적), 설정 오류(치명적), 쓰기 실패, 입력 형식 오류를
구분하여 호출자가 fallback 여부를 결정할 수 있도록 합니다.
"""

from __future__ import annotations

from typing import Any


class TravelBookError(Exception):
    """모든 TravelBook 예외의 기반 클래스."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}


class RemoteStoreError(TravelBookError):
    """원격 저장소 호출 실패의 기반 예외."""


class RemoteUnavailableError(RemoteStoreError):
    """네트워크 장애, 타임아웃, 5xx, JSON이 아닌 응답 등 일시적 장애.

    목록 조회 경로에서만 로컬 저장소로 fallback 됩니다.
    """


class RootFolderNotFoundError(RemoteStoreError):
    """루트 네임스페이스 폴더가 없거나 서비스 계정에 공유되지 않은 경우.

    사용자가 직접 조치해야 하는 설정 오류이므로 fallback으로 가리지 않고
    서비스 계정 식별자와 함께 그대로 전달합니다.
    """

    def __init__(self, service_identity: str | None) -> None:
        self.service_identity = service_identity or ""
        super().__init__(
            "Root folder not found. Share it with the service identity: "
            f"{self.service_identity or '(unknown)'}",
            {"service_identity": self.service_identity},
        )


class RemoteFileNotFoundError(RemoteStoreError):
    """원격 저장소에 요청한 파일이 없는 경우."""

    def __init__(self, file_id: str) -> None:
        self.file_id = file_id
        super().__init__(f"Remote file not found: {file_id}", {"file_id": file_id})


class StoreConfigurationError(RemoteStoreError):
    """서비스 계정 자격 증명이 없거나 잘못된 경우."""


class LocalFileNotFoundError(TravelBookError):
    """로컬 fallback 저장소에 파일이 없는 경우."""

    def __init__(self, file_id: str) -> None:
        self.file_id = file_id
        super().__init__(f"Local file not found: {file_id}", {"file_id": file_id})


class SaveFailedError(TravelBookError):
    """원격 쓰기가 실패한 경우. 로컬 저장으로 조용히 대체하지 않습니다."""


class ItineraryFormatError(TravelBookError, ValueError):
    """가져오기/저장된 일정 데이터 형식이 올바르지 않은 경우."""
