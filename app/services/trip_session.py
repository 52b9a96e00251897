"""사용자 세션과 파일 선택/동기화 흐름.

세션 상태(사용자 이름, 네임스페이스, 현재 파일)는 전역 변수가 아니라
`SessionContext` 객체에 담아 명시적으로 전달합니다.

- 초기화: `restore()`가 로컬 저장소의 캐시된 사용자 이름으로 로그인합니다.
- 종료: `logout()`이 캐시를 지우고 컨텍스트를 초기화합니다.

이 모듈과 `persistence_resolver`는 서버 라우터가 아니라 편집 화면(클라이언트) 쪽에서
쓰는 라이브러리입니다. 원격 저장소로는 `/api/drive`를 호출하는 `DriveApiClient`를 사용합니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from app.core.exceptions import TravelBookError
from app.core.logger import get_logger
from app.schemas.itinerary import Day
from app.schemas.storage import FileId, FileListing, NamespaceHandle, PersistedFile
from app.services.demo_itinerary import build_demo_itinerary
from app.services.drive_client import DriveApiClient
from app.services.itinerary_service import generate_empty_itinerary
from app.services.local_store import SESSION_USER_KEY, LocalFallbackStore, with_json_suffix
from app.services.persistence_resolver import PersistenceResolver

logger = get_logger(__name__)


class NoOpenFileError(TravelBookError):
    """열린 파일 없이 동기화를 요청한 경우."""


@dataclass
class SessionContext:
    """현재 사용자와 열린 파일 상태."""

    username: str | None = None
    namespace: NamespaceHandle | None = None
    files: list[PersistedFile] = field(default_factory=list)
    current_file_id: FileId | None = None
    current_file_name: str | None = None
    file_epoch: int = 0

    @property
    def is_logged_in(self) -> bool:
        return self.username is not None and self.namespace is not None

    @property
    def degraded(self) -> bool:
        return bool(self.namespace and self.namespace.degraded)

    def open_file(self, file_id: FileId, name: str) -> None:
        """다른 파일을 열면 epoch가 증가해 이전 파일의 늦은 저장 결과를 무시합니다."""
        self.current_file_id = file_id
        self.current_file_name = name
        self.file_epoch += 1

    def close_file(self) -> None:
        self.current_file_id = None
        self.current_file_name = None
        self.file_epoch += 1

    def apply_saved_id(self, epoch: int, saved_id: FileId) -> bool:
        """저장 결과 ID를 반영합니다. 그 사이 파일이 바뀌었으면 무시하고 False를 반환합니다."""
        if epoch != self.file_epoch:
            logger.info("Late save result ignored: epoch=%s current=%s", epoch, self.file_epoch)
            return False
        previous_id = self.current_file_id
        self.files = [
            PersistedFile(file_id=saved_id, name=item.name) if item.file_id == previous_id else item
            for item in self.files
        ]
        self.current_file_id = saved_id
        return True

    def apply_listing(self, listing: FileListing) -> None:
        self.namespace = listing.namespace
        self.files = listing.files


class TripSessionService:
    """로그인, 파일 선택, 새 파일 생성, 동기화 흐름을 조율합니다."""

    def __init__(self, resolver: PersistenceResolver, local_store: LocalFallbackStore) -> None:
        self._resolver = resolver
        self._local_store = local_store

    @classmethod
    def from_settings(cls) -> TripSessionService:
        """애플리케이션 설정으로 세션 서비스를 생성합니다. Resolver와 같은 로컬 저장소를 공유합니다."""
        local_store = LocalFallbackStore.from_settings()
        remote = DriveApiClient.from_settings()
        return cls(PersistenceResolver(remote, local_store), local_store)

    async def restore(self) -> SessionContext:
        """캐시된 사용자 이름이 있으면 로그인된 컨텍스트를 반환합니다."""
        cached = self._local_store.get_value(SESSION_USER_KEY)
        if not cached:
            return SessionContext()
        return await self.login(cached)

    async def login(self, username: str) -> SessionContext:
        normalized = username.strip()
        if not normalized:
            raise TravelBookError("사용자 이름을 입력해 주세요.")

        listing = await self._resolver.list_files(normalized)
        self._local_store.set_value(SESSION_USER_KEY, normalized)

        context = SessionContext(username=normalized)
        context.apply_listing(listing)
        logger.info(
            "Session started: user=%s files=%s degraded=%s",
            normalized,
            len(listing.files),
            listing.namespace.degraded,
        )
        return context

    def logout(self, context: SessionContext) -> SessionContext:
        self._local_store.delete_value(SESSION_USER_KEY)
        logger.info("Session ended: user=%s", context.username)
        return SessionContext(file_epoch=context.file_epoch + 1)

    async def switch_file(self, context: SessionContext) -> SessionContext:
        """현재 파일을 닫고 파일 목록을 다시 불러옵니다."""
        if context.username is None:
            raise TravelBookError("로그인이 필요합니다.")
        context.close_file()
        context.apply_listing(await self._resolver.list_files(context.username))
        return context

    async def select_file(self, context: SessionContext, file: PersistedFile) -> list[Day]:
        days = await self._resolver.load(file.file_id)
        context.open_file(file.file_id, file.display_name)
        return days

    async def create_file(
        self,
        context: SessionContext,
        name: str,
        days: int = 0,
        start_date: str | None = None,
        use_demo: bool = False,
    ) -> list[Day]:
        """새 파일을 만들고 바로 엽니다.

        `use_demo`이면 예시 일정으로, 아니면 `days`일짜리 빈 일정으로 채웁니다.
        """
        if context.namespace is None:
            raise TravelBookError("로그인이 필요합니다.")
        file_name = name.strip()
        if not file_name:
            raise TravelBookError("파일 이름을 입력해 주세요.")

        if use_demo:
            itinerary = build_demo_itinerary()
        else:
            if not start_date:
                raise TravelBookError("시작 날짜를 입력해 주세요.")
            itinerary = generate_empty_itinerary(days, start_date)

        file_id = await self._resolver.save(context.namespace, itinerary, file_name)
        context.open_file(file_id, file_name)
        context.files = [*context.files, PersistedFile(file_id=file_id, name=with_json_suffix(file_name))]
        return itinerary

    async def sync(self, context: SessionContext, days: list[Day]) -> FileId:
        """현재 파일에 일정을 저장합니다.

        저장 도중 다른 파일로 전환되었다면 반환된 ID는 컨텍스트에 반영하지 않습니다.

        Raises:
            NoOpenFileError: 열린 파일이 없는 경우.
            SaveFailedError: 원격 쓰기가 실패한 경우.
        """
        if context.namespace is None or context.current_file_id is None:
            raise NoOpenFileError("저장할 파일을 먼저 선택해 주세요.")

        epoch = context.file_epoch
        saved_id = await self._resolver.save(
            context.namespace,
            days,
            context.current_file_name or "itinerary",
            existing=context.current_file_id,
        )
        if saved_id != context.current_file_id:
            context.apply_saved_id(epoch, saved_id)
        return saved_id
