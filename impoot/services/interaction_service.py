"""
사용자 상호작용 서비스
- 찜 토글
- 임장 리포트 열람권 구매 (구매수 증가)
- 사용자 알림함
"""

import logging
from typing import Dict, Any, List
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..database.connection import get_session
from ..models.marketplace import Item, UserLike, UserUnlock, UserNotification
from ..errors import ConflictError, NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)

async def get_liked_item_ids(user_id: int) -> List[int]:
    async with get_session() as session:
        result = await session.execute(select(UserLike.item_id).where(UserLike.user_id == user_id))
        return [row[0] for row in result.all()]

async def toggle_like(user_id: int, item_id: int) -> List[int]:
    """찜 토글 후 최신 찜 목록 반환"""
    async with get_session() as session:
        if not await session.get(Item, item_id):
            raise NotFoundError("콘텐츠를 찾을 수 없습니다")

        result = await session.execute(
            select(UserLike).where(UserLike.user_id == user_id).where(UserLike.item_id == item_id)
        )
        like = result.scalar_one_or_none()
        if like:
            await session.delete(like)
            logger.info(f"💔 찜 해제: user_id={user_id}, item_id={item_id}")
        else:
            session.add(UserLike(user_id=user_id, item_id=item_id))
            logger.info(f"❤️ 찜 추가: user_id={user_id}, item_id={item_id}")

    return await get_liked_item_ids(user_id)

async def get_unlocked_item_ids(user_id: int) -> List[int]:
    async with get_session() as session:
        result = await session.execute(select(UserUnlock.item_id).where(UserUnlock.user_id == user_id))
        return [row[0] for row in result.all()]

async def _has_unlocked(session, user_id: int, item_id: int) -> bool:
    result = await session.execute(
        select(UserUnlock.id).where(UserUnlock.user_id == user_id).where(UserUnlock.item_id == item_id)
    )
    return result.first() is not None

async def unlock_report(user_id: int, item_id: int) -> Dict[str, Any]:
    """리포트 열람권 구매"""
    async with get_session() as session:
        item = await session.get(Item, item_id)
        if not item:
            raise NotFoundError("콘텐츠를 찾을 수 없습니다")

        if await _has_unlocked(session, user_id, item_id):
            raise ConflictError("이미 열람권을 구매한 리포트입니다")

        session.add(UserUnlock(user_id=user_id, item_id=item_id))
        try:
            await session.flush()
        except IntegrityError:
            raise ConflictError("이미 열람권을 구매한 리포트입니다")
        item.purchase_count = (item.purchase_count or 0) + 1

        logger.info(f"🔓 리포트 열람권 구매: user_id={user_id}, item_id={item_id}, 누적={item.purchase_count}")
        return {"item_id": item_id, "purchase_count": item.purchase_count}

async def get_unread_notifications(user_id: int) -> List[Dict[str, Any]]:
    """읽지 않은 알림 (최신순)"""
    async with get_session() as session:
        result = await session.execute(
            select(UserNotification)
            .where(UserNotification.user_id == user_id)
            .where(UserNotification.is_read == False)  # noqa: E712
            .order_by(UserNotification.created_at.desc(), UserNotification.id.desc())
        )
        return [n.to_dict() for n in result.scalars().all()]

async def mark_notification_read(user_id: int, notification_id: int) -> None:
    async with get_session() as session:
        notification = await session.get(UserNotification, notification_id)
        if not notification:
            raise NotFoundError("알림을 찾을 수 없습니다")
        if notification.user_id != user_id:
            raise PermissionDeniedError("본인 알림만 읽음 처리할 수 있습니다")
        notification.is_read = True
