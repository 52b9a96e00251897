"""저장 위치를 나타내는 식별자 타입.

파일 ID 문자열의 prefix를 곳곳에서 검사하는 대신 로컬/원격을 타입으로 구분합니다.
문자열 변환은 직렬화 경계(`parse_file_id`, `FileId.value`)에서만 일어납니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from app.schemas.drive import DriveFile

LOCAL_FILE_ID_PREFIX = "local-"
LOCAL_NAMESPACE_PREFIX = "local-namespace:"


@dataclass(frozen=True, slots=True)
class LocalFileId:
    """로컬 fallback 저장소에 있는 파일."""

    value: str


@dataclass(frozen=True, slots=True)
class RemoteFileId:
    """원격 저장소에 있는 파일."""

    value: str


FileId = Union[LocalFileId, RemoteFileId]


def parse_file_id(raw: str) -> FileId:
    """외부에서 받은 파일 ID 문자열을 타입 있는 ID로 변환합니다."""
    if not raw:
        raise ValueError("파일 ID가 비어 있습니다.")
    if raw.startswith(LOCAL_FILE_ID_PREFIX):
        return LocalFileId(raw)
    return RemoteFileId(raw)


@dataclass(frozen=True, slots=True)
class NamespaceHandle:
    """사용자 네임스페이스(원격 사용자 폴더 또는 로컬 인덱스)에 대한 핸들.

    `degraded`가 True이면 목록 조회가 로컬 fallback으로만 성공한 상태이며,
    UI는 이를 사용자에게 알려야 합니다.
    """

    username: str
    folder_id: str
    degraded: bool = False

    @classmethod
    def local(cls, username: str) -> NamespaceHandle:
        return cls(username=username, folder_id=f"{LOCAL_NAMESPACE_PREFIX}{username}", degraded=True)


@dataclass(frozen=True, slots=True)
class PersistedFile:
    """네임스페이스 안의 저장 파일 하나."""

    file_id: FileId
    name: str

    @property
    def display_name(self) -> str:
        return self.name[: -len(".json")] if self.name.endswith(".json") else self.name


@dataclass(frozen=True, slots=True)
class NamespaceListing:
    """원격 저장소의 사용자 폴더 ID와 그 안의 JSON 파일 목록."""

    folder_id: str
    files: list[DriveFile] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FileListing:
    """Resolver가 반환하는 목록 결과."""

    namespace: NamespaceHandle
    files: list[PersistedFile] = field(default_factory=list)
