"""일정 저장 API(`/api/drive`) 요청/응답 스키마."""

from pydantic import BaseModel, ConfigDict, Field

ROOT_FOLDER_NOT_FOUND = "ROOT_FOLDER_NOT_FOUND"
FILE_NOT_FOUND = "FILE_NOT_FOUND"


class DriveFile(BaseModel):
    """사용자 폴더 안의 JSON 파일 요약."""

    id: str = Field(..., description="원격 저장소 파일 ID")
    name: str = Field(..., description="파일 이름 (.json 포함)")


class DriveListResponse(BaseModel):
    """`action=list` 응답."""

    model_config = ConfigDict(populate_by_name=True)

    user_folder_id: str = Field(..., alias="userFolderId", description="사용자 폴더 ID")
    files: list[DriveFile] = Field(default_factory=list, description="JSON 파일 목록")


class DriveSaveResponse(BaseModel):
    """생성/수정 결과."""

    id: str = Field(..., description="저장된 파일 ID")


class DriveErrorResponse(BaseModel):
    """오류 응답. 루트 폴더 누락 시 서비스 계정 식별자를 함께 반환합니다."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(..., description="오류 코드 또는 메시지")
    service_identity: str | None = Field(None, alias="serviceIdentity", description="폴더를 공유할 서비스 계정")
