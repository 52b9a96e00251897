# app/models/local_entry.py
from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


# 기기 로컬 key-value 저장소 (사용자별 파일 인덱스, 파일 본문, 세션 사용자)
class LocalEntry(Base):
    __tablename__ = "local_entries"

    # 결정적 키 (예: travelbook_files_<username>, travelbook_file_<fileId>)
    key: Mapped[str] = mapped_column(String(255), primary_key=True)

    # JSON 직렬화된 값
    value: Mapped[str] = mapped_column(Text, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), server_default=func.now()
    )

    def __repr__(self):
        return f"<LocalEntry(key={self.key})>"
