"""
데이터베이스 연결 관리
- MySQL(aiomysql) 기본, DATABASE_URL 로 다른 비동기 드라이버 지정 가능
- 세션 관리
- 연결 풀 설정
"""

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from ..config_manager import config_manager
from ..errors import MarketplaceError

logger = logging.getLogger(__name__)

DATABASE_URL = config_manager.database.url

# SQLAlchemy Base 클래스
class Base(DeclarativeBase):
    metadata = MetaData()

def _engine_options() -> dict:
    """드라이버별 엔진 옵션"""
    if config_manager.database.is_sqlite:
        # sqlite 는 이벤트 루프마다 새 연결 사용
        return {"poolclass": NullPool}
    return {
        "pool_size": config_manager.database.pool_size,  # 연결 풀 크기
        "max_overflow": config_manager.database.max_overflow,  # 추가 연결 허용 수
        "pool_timeout": 30,  # 연결 대기 시간
        "pool_recycle": 3600,  # 연결 재활용 시간 (1시간)
        "pool_pre_ping": True,  # 연결 상태 확인
    }

# 비동기 엔진 생성
engine: AsyncEngine = create_async_engine(
    DATABASE_URL,
    echo=config_manager.database.echo,
    **_engine_options(),
)

# 세션 팩토리 생성
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """DB 세션 컨텍스트 매니저 (성공 시 commit, 예외 시 rollback)"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except MarketplaceError:
            await session.rollback()
            raise
        except Exception as e:
            await session.rollback()
            logger.error(f"데이터베이스 오류: {str(e)}")
            raise
        finally:
            await session.close()

async def init_db():
    """테이블 생성"""
    # 모델 모듈을 불러와야 metadata 에 테이블이 등록됨
    from .. import models  # noqa: F401
    from ..auth import models as auth_models  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("✅ 데이터베이스 테이블 초기화 완료")
    except Exception as e:
        logger.error(f"❌ 데이터베이스 테이블 초기화 실패: {str(e)}")
        raise

async def drop_db():
    """테이블 전체 삭제 (테스트용)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("🗑️ 데이터베이스 테이블 삭제 완료")

async def check_connection() -> bool:
    """DB 연결 테스트"""
    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
            logger.info("✅ 데이터베이스 연결 테스트 성공")
            return True
    except Exception as e:
        logger.error(f"❌ 데이터베이스 연결 테스트 실패: {str(e)}")
        return False
