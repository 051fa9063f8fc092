"""찜 / 리포트 열람권 / 알림함 API 라우터"""

import logging
from typing import Dict
from fastapi import APIRouter, HTTPException, Depends

from ..auth.middleware import require_auth
from ..errors import MarketplaceError
from ..services import interaction_service

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/api/likes")
async def get_likes(user: Dict = Depends(require_auth)):
    """찜한 콘텐츠 ID 목록"""
    try:
        return {"success": True, "item_ids": await interaction_service.get_liked_item_ids(user["id"])}
    except Exception as e:
        logger.error(f"찜 목록 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="찜 목록 조회에 실패했습니다")

@router.post("/api/items/{item_id}/like")
async def toggle_like(item_id: int, user: Dict = Depends(require_auth)):
    """찜 토글"""
    try:
        item_ids = await interaction_service.toggle_like(user["id"], item_id)
        return {"success": True, "liked": item_id in item_ids, "item_ids": item_ids}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"찜 토글 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="찜 처리에 실패했습니다")

@router.get("/api/unlocks")
async def get_unlocks(user: Dict = Depends(require_auth)):
    """열람권 구매한 리포트 ID 목록"""
    try:
        return {"success": True, "item_ids": await interaction_service.get_unlocked_item_ids(user["id"])}
    except Exception as e:
        logger.error(f"열람권 목록 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="열람권 목록 조회에 실패했습니다")

@router.post("/api/items/{item_id}/unlock")
async def unlock_report(item_id: int, user: Dict = Depends(require_auth)):
    """리포트 열람권 구매"""
    try:
        result = await interaction_service.unlock_report(user["id"], item_id)
        return {"success": True, "message": "리포트가 열렸습니다", **result}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"리포트 열람권 구매 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="리포트 열람권 구매에 실패했습니다")

@router.get("/api/notifications/me")
async def get_my_notifications(user: Dict = Depends(require_auth)):
    """읽지 않은 알림"""
    try:
        notifications = await interaction_service.get_unread_notifications(user["id"])
        return {"success": True, "notifications": notifications}
    except Exception as e:
        logger.error(f"알림 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="알림 조회에 실패했습니다")

@router.post("/api/notifications/{notification_id}/read")
async def mark_notification_read(notification_id: int, user: Dict = Depends(require_auth)):
    """알림 읽음 처리"""
    try:
        await interaction_service.mark_notification_read(user["id"], notification_id)
        return {"success": True}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"알림 읽음 처리 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="알림 읽음 처리에 실패했습니다")
