"""일정 저장 API(`/api/drive`)를 호출하는 HTTP 클라이언트.

서버 측 `GoogleDriveService`와 같은 프로토콜을 구현하므로 Resolver는
어느 쪽이든 원격 저장소로 사용할 수 있습니다.
"""

from __future__ import annotations

import asyncio
from typing import Any

import requests

from app.core.config import get_settings
from app.core.exceptions import (
    RemoteFileNotFoundError,
    RemoteStoreError,
    RemoteUnavailableError,
    RootFolderNotFoundError,
)
from app.core.logger import get_logger
from app.core.timeout_policy import get_timeout_policy, to_requests_timeout
from app.schemas.drive import FILE_NOT_FOUND, ROOT_FOLDER_NOT_FOUND, DriveListResponse, DriveSaveResponse
from app.schemas.storage import NamespaceListing
from app.services.remote_store import RemoteStoreProtocol

logger = get_logger(__name__)


class DriveApiClient(RemoteStoreProtocol):
    """`/api/drive` 엔드포인트 클라이언트."""

    def __init__(self, base_url: str, timeout_seconds: int = 20) -> None:
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls) -> DriveApiClient:
        """애플리케이션 설정으로 클라이언트를 생성합니다."""
        settings = get_settings()
        timeout_policy = get_timeout_policy(settings)
        return cls(
            base_url=settings.DRIVE_API_BASE_URL,
            timeout_seconds=timeout_policy.drive_client_timeout_seconds,
        )

    async def list_namespace(self, username: str) -> NamespaceListing:
        response = await self._send("GET", params={"action": "list", "username": username})
        body = self._parse_json(response)

        if response.status_code == 404 and isinstance(body, dict) and body.get("error") == ROOT_FOLDER_NOT_FOUND:
            raise RootFolderNotFoundError(body.get("serviceIdentity"))
        self._raise_for_status(response, body)

        try:
            listing = DriveListResponse.model_validate(body)
        except ValueError as exc:
            raise RemoteUnavailableError(f"목록 응답 형식이 올바르지 않습니다: {exc}") from exc
        return NamespaceListing(folder_id=listing.user_folder_id, files=listing.files)

    async def get_entry(self, file_id: str) -> Any:
        response = await self._send("GET", params={"action": "get", "fileId": file_id})
        body = self._parse_json(response)

        if response.status_code == 404:
            error = body.get("error") if isinstance(body, dict) else None
            if error in (None, FILE_NOT_FOUND):
                raise RemoteFileNotFoundError(file_id)
        self._raise_for_status(response, body)
        return body

    async def create_entry(self, folder_id: str, file_name: str, data: Any) -> str:
        response = await self._send("POST", params={"folderId": folder_id, "fileName": file_name}, payload=data)
        return self._parse_saved_id(response)

    async def update_entry(self, file_id: str, data: Any) -> str:
        response = await self._send("POST", params={"fileId": file_id}, payload=data)
        return self._parse_saved_id(response)

    async def _send(self, method: str, params: dict[str, str], payload: Any = None) -> requests.Response:
        request_timeout = to_requests_timeout(self._timeout_seconds)

        def _request() -> requests.Response:
            return requests.request(
                method,
                self._base_url,
                params=params,
                json={"data": payload} if method == "POST" else None,
                timeout=request_timeout,
            )

        try:
            return await asyncio.to_thread(_request)
        except requests.RequestException as exc:
            logger.warning("Drive API request failed: method=%s params=%s error=%s", method, params, exc)
            raise RemoteUnavailableError(f"저장 서버에 연결할 수 없습니다: {exc}") from exc

    @staticmethod
    def _parse_json(response: requests.Response) -> Any:
        # 인프라 장애 시 HTML 오류 페이지 등 JSON이 아닌 응답이 올 수 있다.
        try:
            return response.json()
        except ValueError as exc:
            logger.warning(
                "Drive API returned non-JSON body: status=%s body=%s",
                response.status_code,
                (response.text or "")[:200],
            )
            raise RemoteUnavailableError("저장 서버 응답이 JSON이 아닙니다.") from exc

    @staticmethod
    def _raise_for_status(response: requests.Response, body: Any) -> None:
        status_code = response.status_code
        if status_code < 400:
            return

        message = body.get("error") if isinstance(body, dict) else None
        logger.error("Drive API error: status=%s error=%s", status_code, message)
        if status_code >= 500 or status_code == 429:
            raise RemoteUnavailableError(f"저장 서버 오류: status={status_code} error={message}")
        raise RemoteStoreError(f"저장 요청이 거부되었습니다: status={status_code} error={message}")

    def _parse_saved_id(self, response: requests.Response) -> str:
        body = self._parse_json(response)
        self._raise_for_status(response, body)
        try:
            return DriveSaveResponse.model_validate(body).id
        except ValueError as exc:
            raise RemoteUnavailableError(f"저장 응답 형식이 올바르지 않습니다: {exc}") from exc
