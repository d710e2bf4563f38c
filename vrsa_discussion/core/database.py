"""댓글 저장소용 비동기 DB 연결

PostgreSQL(asyncpg) 엔진과 세션 팩토리.
CommentRepository는 작업마다 async_session_maker로 새 세션을 열기 때문에
동시에 도는 봇 응답 작업끼리 세션을 공유하지 않는다.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from vrsa_discussion.core.config import get_settings

settings = get_settings()

# 워커는 유휴 시간이 길어 끊긴 커넥션을 꺼내기 전에 확인한다
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # 커밋 후에도 CommentRecord 변환에 컬럼 값 사용
)


class Base(DeclarativeBase):
    """profiles / post_comments / notifications 테이블 기본 클래스"""


async def dispose_engine() -> None:
    """커넥션 풀 정리 (워커 종료 시)"""
    await engine.dispose()
