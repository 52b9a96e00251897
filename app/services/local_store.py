"""기기 로컬 fallback 저장소.

원격 저장소에 접근할 수 없을 때 사용자별 파일 인덱스와 파일 본문을
결정적인 키로 `local_entries` 테이블에 보관합니다.
"""

from __future__ import annotations

import json
import uuid
from typing import Any

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from app.core.exceptions import LocalFileNotFoundError
from app.core.logger import get_logger
from app.database import get_engine, get_session_local
from app.models.base import Base
from app.models.local_entry import LocalEntry
from app.schemas.storage import LOCAL_FILE_ID_PREFIX, LocalFileId, PersistedFile

logger = get_logger(__name__)

SESSION_USER_KEY = "travelbook_user"


def files_index_key(username: str) -> str:
    """사용자별 파일 인덱스 키."""
    return f"travelbook_files_{username}"


def file_content_key(file_id: LocalFileId) -> str:
    """파일 본문 키."""
    return f"travelbook_file_{file_id.value}"


def with_json_suffix(name: str) -> str:
    return name if name.endswith(".json") else f"{name}.json"


class LocalFallbackStore:
    """SQLAlchemy 기반 key-value 로컬 저장소."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_local = get_session_local(engine)
        Base.metadata.create_all(engine)

    @classmethod
    def from_settings(cls) -> LocalFallbackStore:
        """애플리케이션 설정의 `LOCAL_STORE_URL`로 저장소를 생성합니다."""
        return cls(get_engine())

    def get_value(self, key: str) -> Any | None:
        with self._session_local() as session:
            return _read(session, key)

    def set_value(self, key: str, value: Any) -> None:
        with self._session_local() as session:
            _write(session, key, value)
            session.commit()

    def delete_value(self, key: str) -> None:
        with self._session_local() as session:
            _delete(session, key)
            session.commit()

    def list_files(self, username: str) -> list[PersistedFile]:
        """사용자의 로컬 파일 목록을 반환합니다."""
        index = self.get_value(files_index_key(username)) or []
        return [PersistedFile(file_id=LocalFileId(item["id"]), name=item["name"]) for item in index]

    def load(self, file_id: LocalFileId) -> Any:
        """로컬 파일 본문을 반환합니다."""
        content = self.get_value(file_content_key(file_id))
        if content is None:
            raise LocalFileNotFoundError(file_id.value)
        return content

    def save(self, username: str, data: Any, file_name: str, existing_id: LocalFileId | None = None) -> LocalFileId:
        """로컬 파일을 생성하거나 덮어씁니다.

        본문과 인덱스는 한 트랜잭션에서 함께 기록됩니다.

        Args:
            username: 인덱스를 소유한 사용자 이름.
            data: 직렬화된 일정.
            file_name: 파일 이름 (.json이 없으면 붙입니다).
            existing_id: 덮어쓸 로컬 파일 ID. None이면 새 ID를 발급합니다.

        Returns:
            저장된 파일의 로컬 ID.
        """
        file_id = existing_id or LocalFileId(f"{LOCAL_FILE_ID_PREFIX}{uuid.uuid4().hex}")
        name = with_json_suffix(file_name)
        index_key = files_index_key(username)

        with self._session_local() as session:
            index = [item for item in (_read(session, index_key) or []) if item["id"] != file_id.value]
            index.append({"id": file_id.value, "name": name})
            _write(session, file_content_key(file_id), data)
            _write(session, index_key, index)
            session.commit()

        logger.info("Local file saved: user=%s file_id=%s name=%s", username, file_id.value, name)
        return file_id

    def remove(self, username: str, file_id: LocalFileId) -> None:
        """로컬 파일과 인덱스 항목을 삭제합니다."""
        index_key = files_index_key(username)
        with self._session_local() as session:
            index = [item for item in (_read(session, index_key) or []) if item["id"] != file_id.value]
            _write(session, index_key, index)
            _delete(session, file_content_key(file_id))
            session.commit()


def _read(session: Session, key: str) -> Any | None:
    entry = session.get(LocalEntry, key)
    return json.loads(entry.value) if entry is not None else None


def _write(session: Session, key: str, value: Any) -> None:
    payload = json.dumps(value, ensure_ascii=False)
    entry = session.get(LocalEntry, key)
    if entry is None:
        session.add(LocalEntry(key=key, value=payload))
    else:
        entry.value = payload


def _delete(session: Session, key: str) -> None:
    entry = session.get(LocalEntry, key)
    if entry is not None:
        session.delete(entry)
