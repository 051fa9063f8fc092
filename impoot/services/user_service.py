"""
사용자 서비스
- 프로필 수정 / 프로필 완성
- 파트너 신청 (카테고리 매니저 역할 즉시 부여)
- 관리자: 사용자 목록, 역할 토글, 삭제
"""

import logging
from typing import Dict, Any, List, Optional
from sqlalchemy import select, delete, update

from ..database.connection import get_session
from ..auth.models import User, SUPER_ADMIN
from ..auth.auth_service import is_valid_phone
from ..auth.role_system import role_system, manager_role
from ..models.marketplace import Item, Application, UserLike, UserUnlock, Review, UserNotification
from ..errors import InvalidRequestError, NotFoundError, PermissionDeniedError
from config import CATEGORIES

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "avatar", "phone", "birthdate", "interests", "is_profile_complete")

async def update_profile(user_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
    """프로필 수정 (전달된 필드만)"""
    if updates.get("phone") and not is_valid_phone(updates["phone"]):
        raise InvalidRequestError("연락처 형식이 올바르지 않습니다 (010-XXXX-XXXX)")

    async with get_session() as session:
        user = await session.get(User, user_id)
        if not user:
            raise NotFoundError("사용자를 찾을 수 없습니다")

        for field in PROFILE_FIELDS:
            if field in updates and updates[field] is not None:
                setattr(user, field, updates[field])

        logger.info(f"👤 프로필 수정 완료: user_id={user_id}, fields={[f for f in PROFILE_FIELDS if f in updates]}")
        return user.to_dict()

async def complete_profile(user_id: int, name: str, birthdate: str, phone: str,
                           interests: Optional[List[str]] = None) -> Dict[str, Any]:
    """최초 프로필 완성"""
    if not name or not name.strip():
        raise InvalidRequestError("이름을 입력해주세요")
    if not birthdate:
        raise InvalidRequestError("생년월일을 입력해주세요")
    if not is_valid_phone(phone):
        raise InvalidRequestError("연락처 형식이 올바르지 않습니다 (010-XXXX-XXXX)")

    return await update_profile(user_id, {
        "name": name.strip(),
        "birthdate": birthdate,
        "phone": phone,
        "interests": interests or [],
        "is_profile_complete": True,
    })

async def apply_partner(user_id: int, category: str) -> List[str]:
    """파트너 신청 - 해당 카테고리 매니저 역할 부여"""
    if category not in CATEGORIES:
        raise InvalidRequestError(f"알 수 없는 카테고리입니다: {category}")

    roles = await role_system.grant_role(user_id, manager_role(category))
    logger.info(f"🤝 파트너 등록 완료: user_id={user_id}, category={category}")
    return roles

async def list_users() -> List[Dict[str, Any]]:
    async with get_session() as session:
        result = await session.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
        return [user.to_dict() for user in result.scalars().all()]

def _valid_role(role: str) -> bool:
    return role == SUPER_ADMIN or role in {manager_role(c) for c in CATEGORIES}

async def toggle_user_role(actor: Dict[str, Any], user_id: int, role: str) -> List[str]:
    """역할 토글 (본인 super_admin 해제 불가)"""
    if not _valid_role(role):
        raise InvalidRequestError(f"알 수 없는 역할입니다: {role}")
    if role == SUPER_ADMIN and user_id == actor.get("id"):
        raise PermissionDeniedError("본인의 최고 관리자 권한은 해제할 수 없습니다")

    return await role_system.toggle_role(user_id, role)

async def delete_user(actor: Dict[str, Any], user_id: int) -> None:
    """사용자 삭제 (관련 기록 포함)"""
    if user_id == actor.get("id"):
        raise PermissionDeniedError("본인 계정은 삭제할 수 없습니다")

    async with get_session() as session:
        user = await session.get(User, user_id)
        if not user:
            raise NotFoundError("사용자를 찾을 수 없습니다")

        for model in (Application, UserLike, UserUnlock, Review, UserNotification):
            await session.execute(delete(model).where(model.user_id == user_id))
        await session.execute(update(Item).where(Item.author_id == user_id).values(author_id=None))
        await session.delete(user)

        logger.info(f"🗑️ 사용자 삭제 완료: user_id={user_id}, email={user.email}")
