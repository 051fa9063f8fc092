"""
관리자 API 엔드포인트 (super_admin 전용)
- 대시보드 통계
- 사용자/역할 관리
- 홈 디자인 (슬라이드, 공지, 카테고리 헤더/상세 이미지, 슬로건, 배너)
- 수수료율, 정산 현황/완료 처리
- AI 브리핑 생성/교체
"""

import logging
from typing import List, Optional, Dict
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field

from config import CATEGORIES
from ..auth.middleware import require_super_admin
from ..errors import MarketplaceError
from ..services import user_service, content_service, settlement_service, briefing_service
from ..services.settings_service import (
    get_commission_rate, set_commission_rate, set_setting, TAGLINE_KEY, MYPAGE_BANNER_KEY
)

logger = logging.getLogger(__name__)
router = APIRouter()

# === 요청 모델 ===

class RoleToggleRequest(BaseModel):
    role: str = Field(..., min_length=1)

class SlidePayload(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    desc: Optional[str] = None
    img: Optional[str] = None
    sortOrder: Optional[int] = None
    isActive: Optional[bool] = None

class NoticePayload(BaseModel):
    message: Optional[str] = Field(None, min_length=1)
    linkUrl: Optional[str] = None
    isActive: Optional[bool] = None
    sortOrder: Optional[int] = None

class CategoryHeaderPayload(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None

class DetailImagePayload(BaseModel):
    image_url: str = Field(..., min_length=1)

class SettingPayload(BaseModel):
    value: str

class CommissionPayload(BaseModel):
    rate: int = Field(..., ge=0, le=100)

class BriefingEntry(BaseModel):
    highlight: str = Field(..., min_length=1, max_length=100)
    text: str = Field(..., min_length=1)

class BriefingReplaceRequest(BaseModel):
    briefings: List[BriefingEntry]

def _fail(action: str, e: Exception):
    logger.error(f"{action} 실패: {str(e)}")
    raise HTTPException(status_code=500, detail=f"{action}에 실패했습니다")

# === 대시보드 ===

@router.get("/api/admin/dashboard")
async def get_dashboard(admin: Dict = Depends(require_super_admin)):
    try:
        return {"success": True, "stats": await content_service.get_dashboard_stats()}
    except Exception as e:
        _fail("대시보드 조회", e)

# === 사용자 관리 ===

@router.get("/api/admin/users")
async def get_users(admin: Dict = Depends(require_super_admin)):
    """사용자 목록 (최신 가입순)"""
    try:
        return {"success": True, "users": await user_service.list_users()}
    except Exception as e:
        _fail("사용자 목록 조회", e)

@router.post("/api/admin/users/{user_id}/roles")
async def toggle_user_role(user_id: int, request: RoleToggleRequest, admin: Dict = Depends(require_super_admin)):
    """역할 토글"""
    try:
        roles = await user_service.toggle_user_role(admin, user_id, request.role)
        return {"success": True, "roles": roles}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        _fail("역할 변경", e)

@router.delete("/api/admin/users/{user_id}")
async def delete_user(user_id: int, admin: Dict = Depends(require_super_admin)):
    try:
        await user_service.delete_user(admin, user_id)
        return {"success": True, "message": "사용자가 삭제되었습니다"}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        _fail("사용자 삭제", e)

# === 슬라이드 ===

@router.get("/api/admin/slides")
async def get_all_slides(admin: Dict = Depends(require_super_admin)):
    try:
        return {"success": True, "slides": await content_service.list_slides()}
    except Exception as e:
        _fail("슬라이드 조회", e)

@router.post("/api/admin/slides")
async def create_slide(payload: SlidePayload, admin: Dict = Depends(require_super_admin)):
    if not payload.title:
        raise HTTPException(status_code=400, detail="슬라이드 제목은 필수입니다")
    try:
        return {"success": True, "slide": await content_service.create_slide(payload.model_dump(exclude_unset=True))}
    except Exception as e:
        _fail("슬라이드 추가", e)

@router.put("/api/admin/slides/{slide_id}")
async def update_slide(slide_id: int, payload: SlidePayload, admin: Dict = Depends(require_super_admin)):
    try:
        slide = await content_service.update_slide(slide_id, payload.model_dump(exclude_unset=True))
        return {"success": True, "slide": slide}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        _fail("슬라이드 수정", e)

@router.delete("/api/admin/slides/{slide_id}")
async def delete_slide(slide_id: int, admin: Dict = Depends(require_super_admin)):
    try:
        await content_service.delete_slide(slide_id)
        return {"success": True}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        _fail("슬라이드 삭제", e)

# === 공지 배너 ===

@router.get("/api/admin/notices")
async def get_all_notices(admin: Dict = Depends(require_super_admin)):
    try:
        return {"success": True, "notices": await content_service.list_notices()}
    except Exception as e:
        _fail("공지 조회", e)

@router.post("/api/admin/notices")
async def create_notice(payload: NoticePayload, admin: Dict = Depends(require_super_admin)):
    if not payload.message:
        raise HTTPException(status_code=400, detail="공지 내용은 필수입니다")
    try:
        return {"success": True, "notice": await content_service.create_notice(payload.model_dump(exclude_unset=True))}
    except Exception as e:
        _fail("공지 추가", e)

@router.put("/api/admin/notices/{notice_id}")
async def update_notice(notice_id: int, payload: NoticePayload, admin: Dict = Depends(require_super_admin)):
    try:
        notice = await content_service.update_notice(notice_id, payload.model_dump(exclude_unset=True))
        return {"success": True, "notice": notice}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        _fail("공지 수정", e)

@router.delete("/api/admin/notices/{notice_id}")
async def delete_notice(notice_id: int, admin: Dict = Depends(require_super_admin)):
    try:
        await content_service.delete_notice(notice_id)
        return {"success": True}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        _fail("공지 삭제", e)

# === 카테고리 디자인 ===

@router.put("/api/admin/categories/{category}/header")
async def update_category_header(category: str, payload: CategoryHeaderPayload,
                                 admin: Dict = Depends(require_super_admin)):
    if category not in CATEGORIES:
        raise HTTPException(status_code=400, detail="알 수 없는 카테고리입니다")
    try:
        await content_service.update_category_header(category, payload.title, payload.description)
        return {"success": True, "headers": await content_service.get_category_headers()}
    except Exception as e:
        _fail("카테고리 헤더 저장", e)

@router.put("/api/admin/categories/{category}/detail-image")
async def update_detail_image(category: str, payload: DetailImagePayload,
                              admin: Dict = Depends(require_super_admin)):
    if category not in CATEGORIES:
        raise HTTPException(status_code=400, detail="알 수 없는 카테고리입니다")
    try:
        await content_service.update_detail_image(category, payload.image_url)
        return {"success": True, "detailImages": await content_service.get_detail_images()}
    except Exception as e:
        _fail("상세 이미지 저장", e)

# === 설정 ===

@router.put("/api/admin/settings/tagline")
async def update_tagline(payload: SettingPayload, admin: Dict = Depends(require_super_admin)):
    try:
        await set_setting(TAGLINE_KEY, payload.value)
        return {"success": True, "message": "슬로건 저장 완료"}
    except Exception as e:
        _fail("슬로건 저장", e)

@router.put("/api/admin/settings/mypage-banner")
async def update_mypage_banner(payload: SettingPayload, admin: Dict = Depends(require_super_admin)):
    try:
        await set_setting(MYPAGE_BANNER_KEY, payload.value)
        return {"success": True, "message": "배너 저장 완료"}
    except Exception as e:
        _fail("배너 저장", e)

@router.get("/api/admin/commission")
async def get_commission(admin: Dict = Depends(require_super_admin)):
    try:
        return {"success": True, "rate": await get_commission_rate()}
    except Exception as e:
        _fail("수수료율 조회", e)

@router.put("/api/admin/commission")
async def update_commission(payload: CommissionPayload, admin: Dict = Depends(require_super_admin)):
    try:
        return {"success": True, "rate": await set_commission_rate(payload.rate)}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        _fail("수수료율 저장", e)

# === 정산 ===

@router.get("/api/admin/settlement")
async def get_settlement_overview(admin: Dict = Depends(require_super_admin)):
    """콘텐츠별 예상 정산 금액"""
    try:
        return {"success": True, **await settlement_service.get_admin_overview()}
    except Exception as e:
        _fail("정산 현황 조회", e)

@router.post("/api/admin/items/{item_id}/settle")
async def complete_settlement(item_id: int, admin: Dict = Depends(require_super_admin)):
    """정산 완료 처리"""
    try:
        result = await settlement_service.complete_settlement(item_id)
        return {"success": True, "message": "정산 완료 처리되었습니다", **result}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        _fail("정산 완료 처리", e)

# === 브리핑 ===

@router.put("/api/admin/briefings")
async def replace_briefings(request: BriefingReplaceRequest, admin: Dict = Depends(require_super_admin)):
    try:
        entries = [entry.model_dump() for entry in request.briefings]
        return {"success": True, "briefings": await briefing_service.replace_briefings(entries)}
    except Exception as e:
        _fail("브리핑 저장", e)

@router.post("/api/admin/briefings/generate")
async def generate_briefings(admin: Dict = Depends(require_super_admin)):
    """AI 뉴스 요약 생성"""
    try:
        briefings = await briefing_service.generate_briefings()
        return {"success": True, "message": "AI 뉴스 요약 완료!", "briefings": briefings}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        _fail("AI 브리핑 생성", e)
