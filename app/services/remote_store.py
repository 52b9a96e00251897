"""원격 일정 저장소 추상 프로토콜 정의."""

from abc import ABC, abstractmethod
from typing import Any

from app.schemas.storage import NamespaceListing


class RemoteStoreProtocol(ABC):
    """Resolver가 필요로 하는 원격 저장소 기본 연산을 정의합니다.

    모든 연산은 네트워크 호출이며 로컬 캐시 없이 독립적으로 실패할 수 있습니다.
    """

    @abstractmethod
    async def list_namespace(self, username: str) -> NamespaceListing:
        """사용자 폴더를 찾거나 만들고, 그 안의 JSON 파일 목록을 반환합니다.

        Args:
            username: 네임스페이스 파티션 키로 쓰는 사용자 이름

        Returns:
            사용자 폴더 ID와 JSON 파일 목록

        Raises:
            RootFolderNotFoundError: 루트 폴더가 없을 때
            RemoteUnavailableError: 네트워크/인프라 장애
        """
        raise NotImplementedError

    @abstractmethod
    async def get_entry(self, file_id: str) -> Any:
        """파일 본문(JSON)을 반환합니다.

        Raises:
            RemoteFileNotFoundError: 파일이 없을 때
            RemoteUnavailableError: 네트워크/인프라 장애
        """
        raise NotImplementedError

    @abstractmethod
    async def create_entry(self, folder_id: str, file_name: str, data: Any) -> str:
        """사용자 폴더에 새 파일을 만들고 발급된 ID를 반환합니다."""
        raise NotImplementedError

    @abstractmethod
    async def update_entry(self, file_id: str, data: Any) -> str:
        """기존 파일 본문을 덮어쓰고 같은 ID를 반환합니다."""
        raise NotImplementedError
