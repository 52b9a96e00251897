"""원격 우선, 로컬 fallback 일정 저장 Resolver.

- 목록 조회: 원격 장애 시 로컬 인덱스로 대체하고 `degraded` 핸들을 반환합니다.
- 불러오기: 파일 ID 타입(로컬/원격)에 따라 저장소를 선택합니다.
- 저장: 원격 쓰기 실패는 로컬 저장으로 대체하지 않고 `SaveFailedError`로 올립니다.
"""

from __future__ import annotations

from app.core.exceptions import RemoteStoreError, RemoteUnavailableError, SaveFailedError
from app.core.logger import get_logger
from app.schemas.itinerary import Day, dump_itinerary
from app.schemas.storage import (
    LOCAL_FILE_ID_PREFIX,
    FileId,
    FileListing,
    LocalFileId,
    NamespaceHandle,
    PersistedFile,
    RemoteFileId,
)
from app.services.drive_client import DriveApiClient
from app.services.itinerary_service import parse_itinerary
from app.services.local_store import LocalFallbackStore
from app.services.remote_store import RemoteStoreProtocol

logger = get_logger(__name__)


class PersistenceResolver:
    """원격 저장소와 로컬 fallback 저장소 사이의 라우팅을 담당합니다."""

    def __init__(self, remote: RemoteStoreProtocol, local: LocalFallbackStore) -> None:
        self._remote = remote
        self._local = local

    @classmethod
    def from_settings(cls) -> PersistenceResolver:
        """`DRIVE_API_BASE_URL`의 저장 API와 `LOCAL_STORE_URL` 로컬 저장소로 Resolver를 생성합니다."""
        return cls(remote=DriveApiClient.from_settings(), local=LocalFallbackStore.from_settings())

    async def list_files(self, username: str) -> FileListing:
        """사용자 네임스페이스의 파일 목록을 반환합니다.

        루트 폴더 누락(`RootFolderNotFoundError`)은 사용자 조치가 필요한 설정 오류이므로
        fallback 하지 않고 그대로 전파합니다.
        """
        try:
            listing = await self._remote.list_namespace(username)
        except RemoteUnavailableError as exc:
            logger.warning("원격 저장소 연결 실패, 로컬 목록으로 대체: user=%s error=%s", username, exc)
            return FileListing(namespace=NamespaceHandle.local(username), files=self._local.list_files(username))

        files = [PersistedFile(file_id=RemoteFileId(item.id), name=item.name) for item in listing.files]
        return FileListing(
            namespace=NamespaceHandle(username=username, folder_id=listing.folder_id),
            files=files,
        )

    async def load(self, file_id: FileId) -> list[Day]:
        """파일 본문을 불러와 검증된 일정으로 반환합니다.

        원격 파일을 읽다가 실패하면 로컬로 대체하지 않고 예외를 그대로 올립니다.
        """
        if isinstance(file_id, LocalFileId):
            raw = self._local.load(file_id)
        else:
            raw = await self._remote.get_entry(file_id.value)
        return parse_itinerary(raw)

    async def save(
        self,
        namespace: NamespaceHandle,
        days: list[Day],
        file_name: str,
        existing: FileId | None = None,
    ) -> FileId:
        """일정을 저장하고 저장된 파일 ID를 반환합니다.

        1. 네임스페이스가 degraded이면 로컬에 저장합니다. 원격 ID는 같은 로컬 ID로 대응되어
           반복 저장이 하나의 로컬 사본을 덮어씁니다.
        2. 로컬 파일을 원격 네임스페이스에 저장하면 원격으로 승격하고 로컬 사본을 지웁니다.
        3. 그 외에는 원격 파일을 생성하거나 덮어씁니다.

        Raises:
            SaveFailedError: 원격 쓰기가 실패한 경우.
        """
        data = dump_itinerary(days)

        if namespace.degraded:
            return self._local.save(namespace.username, data, file_name, existing_id=_local_id_for(existing))

        if isinstance(existing, LocalFileId):
            remote_id = await self._write_remote(namespace, data, file_name, None)
            self._local.remove(namespace.username, existing)
            logger.info(
                "Local file promoted: user=%s local_id=%s remote_id=%s",
                namespace.username,
                existing.value,
                remote_id.value,
            )
            return remote_id

        return await self._write_remote(namespace, data, file_name, existing)

    async def _write_remote(
        self,
        namespace: NamespaceHandle,
        data: list[dict],
        file_name: str,
        existing: RemoteFileId | None,
    ) -> RemoteFileId:
        try:
            if existing is None:
                saved_id = await self._remote.create_entry(namespace.folder_id, file_name, data)
            else:
                saved_id = await self._remote.update_entry(existing.value, data)
        except RemoteStoreError as exc:
            logger.error("원격 저장 실패: user=%s file=%s error=%s", namespace.username, file_name, exc)
            raise SaveFailedError(
                f"일정을 저장하지 못했습니다: {exc}",
                {"username": namespace.username, "file_name": file_name},
            ) from exc
        return RemoteFileId(saved_id)


def _local_id_for(existing: FileId | None) -> LocalFileId | None:
    if existing is None or isinstance(existing, LocalFileId):
        return existing
    return LocalFileId(f"{LOCAL_FILE_ID_PREFIX}{existing.value}")
