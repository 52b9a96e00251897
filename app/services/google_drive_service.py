"""Google Drive API 기반 원격 일정 저장소 구현."""

from __future__ import annotations

import asyncio
import json
import uuid
from functools import lru_cache
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
from app.schemas.drive import DriveFile
from app.schemas.storage import NamespaceListing
from app.services.remote_store import RemoteStoreProtocol
from app.services.service_account import ServiceAccountTokenProvider

logger = get_logger(__name__)


def escape_query_value(value: str) -> str:
    """Drive 검색 쿼리 문자열 리터럴에 들어갈 값을 이스케이프합니다."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def serialize_entry(data: Any) -> str:
    """저장 파일 본문을 2칸 들여쓰기 JSON으로 직렬화합니다."""
    return json.dumps(data, ensure_ascii=False, indent=2)


class GoogleDriveService(RemoteStoreProtocol):
    """서비스 계정으로 `TravelBook/<username>/*.json` 구조를 다루는 저장소."""

    _FILES_URL = "https://www.googleapis.com/drive/v3/files"
    _UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
    _FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
    _JSON_MIME_TYPE = "application/json"
    _SHARED_DRIVE_PARAMS = {"supportsAllDrives": "true", "includeItemsFromAllDrives": "true"}

    def __init__(
        self,
        token_provider: ServiceAccountTokenProvider,
        root_folder_name: str = "TravelBook",
        timeout_seconds: int = 15,
    ) -> None:
        self._token_provider = token_provider
        self._root_folder_name = root_folder_name
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls) -> GoogleDriveService:
        """애플리케이션 설정으로 서비스 인스턴스를 생성합니다."""
        settings = get_settings()
        timeout_policy = get_timeout_policy(settings)
        if not settings.GOOGLE_CLIENT_EMAIL or not settings.GOOGLE_PRIVATE_KEY:
            logger.error("GOOGLE_CLIENT_EMAIL / GOOGLE_PRIVATE_KEY is not configured.")
        token_provider = ServiceAccountTokenProvider(
            client_email=settings.GOOGLE_CLIENT_EMAIL,
            private_key=settings.GOOGLE_PRIVATE_KEY,
            timeout_seconds=timeout_policy.drive_timeout_seconds,
        )
        return cls(
            token_provider=token_provider,
            root_folder_name=settings.DRIVE_ROOT_FOLDER_NAME,
            timeout_seconds=timeout_policy.drive_timeout_seconds,
        )

    @property
    def service_identity(self) -> str:
        """루트 폴더를 공유받아야 하는 서비스 계정 이메일."""
        return self._token_provider.client_email

    async def find_folder(self, name: str, parent_id: str | None = None) -> str | None:
        """이름(과 부모 폴더)으로 폴더를 찾습니다."""
        clauses = [
            f"name = '{escape_query_value(name)}'",
            f"mimeType = '{self._FOLDER_MIME_TYPE}'",
            "trashed = false",
        ]
        if parent_id:
            clauses.insert(1, f"'{escape_query_value(parent_id)}' in parents")

        data = await self._request(
            "GET",
            self._FILES_URL,
            params={"q": " and ".join(clauses), "fields": "files(id, name)", **self._SHARED_DRIVE_PARAMS},
        )
        files = (data or {}).get("files") or []
        return files[0]["id"] if files else None

    async def find_root_folder(self) -> str | None:
        """서비스 계정에 공유된 루트 폴더를 찾습니다."""
        return await self.find_folder(self._root_folder_name)

    async def _create_folder(self, name: str, parent_id: str) -> str:
        data = await self._request(
            "POST",
            self._FILES_URL,
            params={"fields": "id", "supportsAllDrives": "true"},
            json_body={"name": name, "mimeType": self._FOLDER_MIME_TYPE, "parents": [parent_id]},
        )
        return data["id"]

    async def ensure_user_folder(self, root_id: str, username: str) -> str:
        """루트 폴더 바로 아래의 사용자 폴더를 찾고, 없으면 만듭니다.

        동시에 만들려는 요청이 있어 생성이 실패하면 한 번 더 찾아봅니다.
        """
        folder_id = await self.find_folder(username, root_id)
        if folder_id:
            return folder_id

        try:
            folder_id = await self._create_folder(username, root_id)
            logger.info("User folder created: username=%s folder_id=%s", username, folder_id)
            return folder_id
        except RemoteStoreError as exc:
            logger.warning("User folder create failed, re-checking: username=%s error=%s", username, exc)
            folder_id = await self.find_folder(username, root_id)
            if folder_id:
                return folder_id
            raise

    async def list_json_files(self, folder_id: str) -> list[DriveFile]:
        """폴더 안의 JSON 파일 목록을 반환합니다."""
        query = (
            f"'{escape_query_value(folder_id)}' in parents and "
            f"mimeType = '{self._JSON_MIME_TYPE}' and trashed = false"
        )
        data = await self._request(
            "GET",
            self._FILES_URL,
            params={"q": query, "fields": "files(id, name)", **self._SHARED_DRIVE_PARAMS},
        )
        return [DriveFile(id=item["id"], name=item["name"]) for item in (data or {}).get("files") or []]

    async def list_namespace(self, username: str) -> NamespaceListing:
        root_id = await self.find_root_folder()
        if not root_id:
            logger.error(
                "Root folder not found: name=%s service_identity=%s",
                self._root_folder_name,
                self.service_identity,
            )
            raise RootFolderNotFoundError(self.service_identity)

        folder_id = await self.ensure_user_folder(root_id, username)
        files = await self.list_json_files(folder_id)
        return NamespaceListing(folder_id=folder_id, files=files)

    async def get_entry(self, file_id: str) -> Any:
        return await self._request(
            "GET",
            f"{self._FILES_URL}/{file_id}",
            params={"alt": "media", "supportsAllDrives": "true"},
            not_found_id=file_id,
        )

    async def create_entry(self, folder_id: str, file_name: str, data: Any) -> str:
        name = file_name if file_name.endswith(".json") else f"{file_name}.json"
        metadata = {"name": name, "mimeType": self._JSON_MIME_TYPE, "parents": [folder_id]}
        boundary = f"travelbook-{uuid.uuid4().hex}"
        body = (
            f"--{boundary}\r\n"
            "Content-Type: application/json; charset=UTF-8\r\n\r\n"
            f"{json.dumps(metadata, ensure_ascii=False)}\r\n"
            f"--{boundary}\r\n"
            f"Content-Type: {self._JSON_MIME_TYPE}\r\n\r\n"
            f"{serialize_entry(data)}\r\n"
            f"--{boundary}--"
        ).encode("utf-8")

        created = await self._request(
            "POST",
            self._UPLOAD_URL,
            params={"uploadType": "multipart", "fields": "id, parents", "supportsAllDrives": "true"},
            content=body,
            content_type=f"multipart/related; boundary={boundary}",
        )

        parents = created.get("parents") or []
        if folder_id not in parents:
            logger.warning("File created but parent mismatch. Expected %s, got %s", folder_id, parents)
        logger.info("Drive file created: folder_id=%s file_id=%s name=%s", folder_id, created["id"], name)
        return created["id"]

    async def update_entry(self, file_id: str, data: Any) -> str:
        await self._request(
            "PATCH",
            f"{self._UPLOAD_URL}/{file_id}",
            params={"uploadType": "media", "supportsAllDrives": "true"},
            content=serialize_entry(data).encode("utf-8"),
            content_type=self._JSON_MIME_TYPE,
            not_found_id=file_id,
        )
        logger.info("Drive file updated: file_id=%s", file_id)
        return file_id

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        content: bytes | None = None,
        content_type: str | None = None,
        not_found_id: str | None = None,
    ) -> Any:
        request_timeout = to_requests_timeout(self._timeout_seconds)

        def _send() -> requests.Response:
            headers = {"Authorization": f"Bearer {self._token_provider.get_access_token()}"}
            if content_type:
                headers["Content-Type"] = content_type
            with requests.Session() as session:
                return session.request(
                    method=method,
                    url=url,
                    params=params,
                    json=json_body,
                    data=content,
                    headers=headers,
                    timeout=request_timeout,
                )

        try:
            response = await asyncio.to_thread(_send)
        except requests.RequestException as exc:
            logger.error("Google Drive API request failed: %s", exc)
            raise RemoteUnavailableError(f"Google Drive 요청 실패: {exc}") from exc

        status_code = response.status_code
        if status_code == 404 and not_found_id is not None:
            raise RemoteFileNotFoundError(not_found_id)
        if status_code >= 400:
            body = (response.text or "")[:200]
            logger.error("Google Drive API error: status=%s body=%s", status_code, body)
            if status_code == 429 or status_code >= 500:
                raise RemoteUnavailableError(f"Google Drive 일시 오류: status={status_code}")
            raise RemoteStoreError(f"Google Drive 요청 거부: status={status_code} body={body}")

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            logger.error("Google Drive API response parse failed: %s", exc)
            raise RemoteUnavailableError(f"Google Drive 응답 파싱 실패: {exc}") from exc


@lru_cache(maxsize=1)
def get_google_drive_service() -> GoogleDriveService:
    """설정 재사용을 위한 프로세스 단위 싱글톤을 반환합니다."""
    return GoogleDriveService.from_settings()
