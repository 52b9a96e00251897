# app/models/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """로컬 fallback 저장소 모델이 공유하는 선언적 기본 클래스."""

    pass
