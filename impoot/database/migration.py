"""
데이터베이스 마이그레이션 관리
- ORM 메타데이터 기준 테이블 생성
- 기본 설정값 시드
- 최고 관리자 계정 보장
"""

import logging
from sqlalchemy import select

from .connection import init_db, get_session
from config import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

async def seed_default_settings() -> int:
    """settings 테이블에 없는 기본값만 추가"""
    from ..models.marketplace import Setting

    added = 0
    async with get_session() as session:
        result = await session.execute(select(Setting.key))
        existing = {row[0] for row in result.all()}

        for key, value in DEFAULT_SETTINGS.items():
            if key not in existing:
                session.add(Setting(key=key, value=value))
                added += 1

    if added:
        logger.info(f"✅ 기본 설정 {added}건 추가")
    return added

async def run_migration():
    """데이터베이스 마이그레이션 실행"""
    from ..auth.role_system import role_system

    try:
        # 1. 테이블 생성
        await init_db()

        # 2. 기본 설정값
        await seed_default_settings()

        # 3. 최고 관리자 계정
        await role_system.ensure_super_admin_exists()

        logger.info("🎉 데이터베이스 마이그레이션 완료")

    except Exception as e:
        logger.error(f"❌ 데이터베이스 마이그레이션 실패: {str(e)}")
        raise
