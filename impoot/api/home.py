"""홈 화면 공개 API 라우터 (슬라이드, 공지, 헤더, 브리핑, 슬로건)"""

import logging
from fastapi import APIRouter, HTTPException

from ..services import content_service, briefing_service
from ..services.settings_service import get_tagline

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/api/home")
async def get_global_data():
    """홈 화면 전역 데이터 묶음"""
    try:
        return {"success": True, **await content_service.load_global_data()}
    except Exception as e:
        logger.error(f"홈 데이터 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="홈 데이터 조회에 실패했습니다")

@router.get("/api/slides")
async def get_slides():
    try:
        return {"success": True, "slides": await content_service.list_slides(active_only=True)}
    except Exception as e:
        logger.error(f"슬라이드 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="슬라이드 조회에 실패했습니다")

@router.get("/api/notices")
async def get_notices():
    try:
        return {"success": True, "notices": await content_service.list_notices(active_only=True)}
    except Exception as e:
        logger.error(f"공지 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="공지 조회에 실패했습니다")

@router.get("/api/briefings")
async def get_briefings():
    try:
        return {"success": True, "briefings": await briefing_service.list_briefings()}
    except Exception as e:
        logger.error(f"브리핑 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="브리핑 조회에 실패했습니다")

@router.get("/api/tagline")
async def get_site_tagline():
    try:
        return {"success": True, "tagline": await get_tagline()}
    except Exception as e:
        logger.error(f"슬로건 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="슬로건 조회에 실패했습니다")
