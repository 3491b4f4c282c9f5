from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from openmusic.core.config import DATABASE_URL

Base = declarative_base()


def create_engine(url: str = DATABASE_URL, **kwargs) -> AsyncEngine:
    """비동기 엔진을 생성합니다.

    SQLite는 기본적으로 외래키 제약을 검사하지 않으므로, 연결마다
    PRAGMA foreign_keys=ON 을 실행해 ON DELETE CASCADE가 동작하도록 합니다.
    """
    engine = create_async_engine(url, **kwargs)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # NOTE: 요청마다 독립적인 세션을 생성하기 위해 팩토리를 사용함.
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def init_models(engine: AsyncEngine) -> None:
    """모든 테이블을 생성합니다. (이미 존재하면 건너뜀)"""
    # 모델 모듈을 임포트해야 Base.metadata에 테이블이 등록됨
    from openmusic.models import album, like, playlist, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def session_scope(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """요청 단위 세션 생명주기. 예외 시 rollback 후 반드시 close 합니다."""
    session = session_factory()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
