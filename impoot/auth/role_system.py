"""
역할 기반 권한 시스템
- super_admin / {category}_manager 역할 판정
- ADMIN_EMAIL 계정을 최고 관리자로 자동 보장
"""

import logging
from typing import Dict, Any, List
from sqlalchemy import select

from .models import User, SUPER_ADMIN, default_avatar
from ..database.connection import get_session
from ..config_manager import config_manager
from ..errors import NotFoundError

logger = logging.getLogger(__name__)

def manager_role(category: str) -> str:
    """카테고리 매니저 역할 이름"""
    return f"{category}_manager"

def is_super_admin(user: Dict[str, Any]) -> bool:
    return SUPER_ADMIN in (user.get("roles") or [])

def is_partner(user: Dict[str, Any]) -> bool:
    """파트너 여부 (매니저 역할 하나 이상 또는 최고 관리자)"""
    roles = user.get("roles") or []
    return SUPER_ADMIN in roles or any("manager" in role for role in roles)

def can_manage_category(user: Dict[str, Any], category: str) -> bool:
    """해당 카테고리 콘텐츠 개설 권한"""
    roles = user.get("roles") or []
    return SUPER_ADMIN in roles or manager_role(category) in roles

def managed_categories(user: Dict[str, Any]) -> List[str]:
    """사용자가 관리할 수 있는 카테고리 목록"""
    if is_super_admin(user):
        return list(config_manager.marketplace.categories)
    return [c for c in config_manager.marketplace.categories if manager_role(c) in (user.get("roles") or [])]

class RoleSystem:
    """역할 조회/변경 및 최고 관리자 보장"""

    async def toggle_role(self, user_id: int, role: str) -> List[str]:
        """역할 토글 (있으면 제거, 없으면 추가) 후 최신 목록 반환"""
        async with get_session() as session:
            user = await session.get(User, user_id)
            if not user:
                raise NotFoundError("사용자를 찾을 수 없습니다")

            roles = list(user.roles or [])
            if role in roles:
                roles.remove(role)
                logger.info(f"➖ 역할 제거: user_id={user_id}, role={role}")
            else:
                roles.append(role)
                logger.info(f"➕ 역할 부여: user_id={user_id}, role={role}")
            user.roles = roles
            return roles

    async def grant_role(self, user_id: int, role: str) -> List[str]:
        """역할 부여 (이미 있으면 그대로)"""
        async with get_session() as session:
            user = await session.get(User, user_id)
            if not user:
                raise NotFoundError("사용자를 찾을 수 없습니다")

            roles = list(user.roles or [])
            if role not in roles:
                roles.append(role)
                user.roles = roles
                logger.info(f"✅ 역할 부여 완료: user_id={user_id}, role={role}")
            return roles

    async def ensure_super_admin_exists(self) -> bool:
        """ADMIN_EMAIL 계정 존재 확인 및 super_admin 역할 보장"""
        admin_email = config_manager.auth.admin_email
        if not admin_email:
            logger.info("ℹ️ ADMIN_EMAIL 미설정 - 최고 관리자 확인 생략")
            return False

        # 순환 import 방지
        from .auth_service import AuthService

        try:
            async with get_session() as session:
                result = await session.execute(select(User).where(User.email == admin_email))
                admin = result.scalar_one_or_none()

                if admin:
                    roles = list(admin.roles or [])
                    if SUPER_ADMIN not in roles:
                        admin.roles = roles + [SUPER_ADMIN]
                        logger.info(f"✅ 최고 관리자 역할 업데이트 완료: {admin_email}")
                    else:
                        logger.info(f"✅ 최고 관리자 계정 확인 완료: {admin_email}")
                    return True

                password = config_manager.auth.admin_password
                if not password:
                    logger.warning("⚠️ ADMIN_PASSWORD 미설정 - 최고 관리자 계정 생성 생략")
                    return False

                session.add(User(
                    email=admin_email,
                    password_hash=AuthService.hash_password(password),
                    name="관리자",
                    avatar=default_avatar(admin_email),
                    roles=[SUPER_ADMIN],
                    interests=[],
                ))
                logger.info(f"✅ 최고 관리자 계정 자동 생성 완료: {admin_email}")
                return True

        except Exception as e:
            logger.error(f"❌ 최고 관리자 계정 확인/생성 실패: {str(e)}")
            return False

# 전역 역할 시스템 인스턴스
role_system = RoleSystem()
