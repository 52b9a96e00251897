"""일정 파일 저장 API (`/api/drive`)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.api.dependencies import get_drive_store
from app.core.config import get_settings
from app.core.exceptions import RemoteFileNotFoundError, RootFolderNotFoundError
from app.core.logger import get_logger
from app.schemas.drive import (
    FILE_NOT_FOUND,
    ROOT_FOLDER_NOT_FOUND,
    DriveErrorResponse,
    DriveListResponse,
    DriveSaveResponse,
)
from app.services.google_drive_service import GoogleDriveService

router = APIRouter(prefix="/api", tags=["drive"])
logger = get_logger(__name__)


def _error(status_code: int, error: str, service_identity: str | None = None) -> JSONResponse:
    body = DriveErrorResponse(error=error, service_identity=service_identity)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, exclude_none=True))


def _internal_error(exc: Exception) -> JSONResponse:
    logger.exception("Drive API failed: %s", exc)
    message = str(exc) if get_settings().EXPOSE_INTERNAL_ERRORS else "내부 서버 오류가 발생했습니다."
    return _error(500, message)


async def _read_data(request: Request) -> Any:
    """요청 본문의 `data` 필드를 읽습니다. 본문이 없거나 JSON이 아니면 None."""
    try:
        body = await request.json()
    except ValueError:
        return None
    return body.get("data") if isinstance(body, dict) else None


@router.get("/drive")
async def drive_get(
    request: Request,
    store: GoogleDriveService = Depends(get_drive_store),  # noqa: B008
) -> JSONResponse:
    """`action=list`로 사용자 폴더 목록을, `action=get`으로 파일 본문을 반환합니다."""
    params = request.query_params
    action = params.get("action")
    username = params.get("username")
    file_id = params.get("fileId")

    try:
        if action == "list" and username:
            listing = await store.list_namespace(username)
            logger.info("Drive list completed: user=%s files=%d", username, len(listing.files))
            body = DriveListResponse(user_folder_id=listing.folder_id, files=listing.files)
            return JSONResponse(content=body.model_dump(by_alias=True))

        if action == "get" and file_id:
            return JSONResponse(content=await store.get_entry(file_id))
    except RootFolderNotFoundError as exc:
        return _error(404, ROOT_FOLDER_NOT_FOUND, exc.service_identity)
    except RemoteFileNotFoundError:
        return _error(404, FILE_NOT_FOUND)
    except Exception as exc:
        return _internal_error(exc)

    return _error(400, "Invalid action")


@router.post("/drive")
async def drive_post(
    request: Request,
    store: GoogleDriveService = Depends(get_drive_store),  # noqa: B008
) -> JSONResponse:
    """`fileId`가 있으면 덮어쓰고, `folderId`와 `fileName`이 있으면 새 파일을 만듭니다."""
    params = request.query_params
    file_id = params.get("fileId")
    folder_id = params.get("folderId")
    file_name = params.get("fileName")

    data = await _read_data(request)
    if data is None:
        return _error(400, "No data provided")

    try:
        if file_id:
            saved_id = await store.update_entry(file_id, data)
        elif folder_id and file_name:
            saved_id = await store.create_entry(folder_id, file_name, data)
        else:
            return _error(400, "Invalid action")
    except RemoteFileNotFoundError:
        return _error(404, FILE_NOT_FOUND)
    except Exception as exc:
        return _internal_error(exc)

    return JSONResponse(content=DriveSaveResponse(id=saved_id).model_dump())
