"""
애플리케이션 생명주기 관리 모듈
- 시작 시 데이터베이스 연결 확인 및 마이그레이션
- 종료 시 연결 풀 정리
"""

import logging
from contextlib import asynccontextmanager

from .config_manager import config_manager
from .database import run_migration, check_connection, engine

logger = logging.getLogger(__name__)

class DatabaseManager:
    """데이터베이스 초기화 및 관리"""

    @staticmethod
    async def initialize_database() -> bool:
        """연결 확인 후 테이블 생성, 기본 설정, 최고 관리자 보장"""
        if not await check_connection():
            logger.error("❌ 데이터베이스 연결 실패")
            return False

        await run_migration()
        logger.info("✅ 데이터베이스 초기화 완료")
        return True

    @staticmethod
    async def dispose():
        """연결 풀 반환"""
        await engine.dispose()
        logger.info("🔌 데이터베이스 연결 풀 정리 완료")

class ApplicationLifecycle:
    """애플리케이션 생명주기 총괄 관리"""

    def __init__(self):
        self.db_manager = DatabaseManager()

    async def startup(self):
        """애플리케이션 시작 시 초기화 작업"""
        logger.info(f"🚀 임풋 서버 시작 - 환경: {config_manager.system.environment}")

        startup_results = {"database": await self.db_manager.initialize_database()}

        if not config_manager.ai.gemini_api_key:
            logger.warning("⚠️ GEMINI_API_KEY 미설정 - AI 브리핑 생성 비활성화")

        return startup_results

    async def shutdown(self):
        """애플리케이션 종료 시 정리 작업"""
        logger.info("🛑 임풋 서버 종료")
        await self.db_manager.dispose()

# 전역 인스턴스
app_lifecycle = ApplicationLifecycle()

@asynccontextmanager
async def lifespan_manager(app):
    """FastAPI 애플리케이션 생명주기 관리"""
    try:
        await app_lifecycle.startup()
        yield
    except Exception as e:
        logger.error(f"❌ 시스템 시작 중 오류: {str(e)}")
        raise
    finally:
        await app_lifecycle.shutdown()
