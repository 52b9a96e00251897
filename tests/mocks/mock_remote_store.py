"""메모리 기반 원격 저장소 Mock.

실제 네트워크 호출 없이 `RemoteStoreProtocol`을 구현하며, 플래그로 장애 상황을 재현한다.
"""

from __future__ import annotations

import copy
from typing import Any

from app.core.exceptions import (
    RemoteFileNotFoundError,
    RemoteUnavailableError,
    RootFolderNotFoundError,
)
from app.schemas.drive import DriveFile
from app.schemas.storage import NamespaceListing
from app.services.remote_store import RemoteStoreProtocol


class InMemoryRemoteStore(RemoteStoreProtocol):
    """Mock 원격 저장소.

    - `unreachable`: 모든 호출이 `RemoteUnavailableError`
    - `root_missing`: 목록 조회가 `RootFolderNotFoundError`
    - `fail_writes`: 생성/수정이 `RemoteUnavailableError`
    """

    SERVICE_IDENTITY = "travelbook@test-project.iam.gserviceaccount.com"

    def __init__(self) -> None:
        self.unreachable = False
        self.root_missing = False
        self.fail_writes = False
        self.folders: dict[str, str] = {}
        self.files: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []
        self._next_id = 1

    def _mint_id(self, prefix: str) -> str:
        value = f"{prefix}-{self._next_id}"
        self._next_id += 1
        return value

    def _check_reachable(self) -> None:
        if self.unreachable:
            raise RemoteUnavailableError("mock remote store is unreachable")

    async def list_namespace(self, username: str) -> NamespaceListing:
        self.calls.append(("list", username))
        self._check_reachable()
        if self.root_missing:
            raise RootFolderNotFoundError(self.SERVICE_IDENTITY)

        folder_id = self.folders.setdefault(username, self._mint_id("folder"))
        files = [
            DriveFile(id=file_id, name=entry["name"])
            for file_id, entry in self.files.items()
            if entry["folder_id"] == folder_id
        ]
        return NamespaceListing(folder_id=folder_id, files=files)

    async def get_entry(self, file_id: str) -> Any:
        self.calls.append(("get", file_id))
        self._check_reachable()
        if file_id not in self.files:
            raise RemoteFileNotFoundError(file_id)
        return copy.deepcopy(self.files[file_id]["data"])

    async def create_entry(self, folder_id: str, file_name: str, data: Any) -> str:
        self.calls.append(("create", file_name))
        self._check_reachable()
        if self.fail_writes:
            raise RemoteUnavailableError("mock write failure")

        file_id = self._mint_id("remote")
        name = file_name if file_name.endswith(".json") else f"{file_name}.json"
        self.files[file_id] = {"folder_id": folder_id, "name": name, "data": copy.deepcopy(data)}
        return file_id

    async def update_entry(self, file_id: str, data: Any) -> str:
        self.calls.append(("update", file_id))
        self._check_reachable()
        if self.fail_writes:
            raise RemoteUnavailableError("mock write failure")
        if file_id not in self.files:
            raise RemoteFileNotFoundError(file_id)

        self.files[file_id]["data"] = copy.deepcopy(data)
        return file_id
