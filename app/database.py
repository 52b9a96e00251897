from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings


def build_engine(url: str) -> Engine:
    """로컬 저장소용 `SQLAlchemy` 엔진을 생성한다.

    SQLite는 스레드 간 공유를 허용하고, 인메모리 DB는 단일 커넥션을 재사용해
    연결마다 빈 DB가 생기지 않도록 한다.
    """
    if not url.startswith("sqlite"):
        return create_engine(url)

    if url.endswith(":memory:") or url in {"sqlite://", "sqlite+pysqlite://"}:
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    return create_engine(url, connect_args={"check_same_thread": False})


@lru_cache
def get_engine() -> Engine:
    """`SQLAlchemy` 엔진을 반환한다. 최초 호출 시에만 생성되고 이후 캐싱된다."""
    return build_engine(get_settings().LOCAL_STORE_URL)


def get_session_local(engine: Engine | None = None) -> sessionmaker[Session]:
    """`SessionLocal` 팩토리를 반환한다."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine or get_engine())
