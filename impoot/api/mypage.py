"""
마이페이지 API 엔드포인트
- 프로필 수정 / 프로필 완성
- 경험치/레벨
- 파트너 신청, 파트너 정산 요약
"""

import logging
from typing import List, Optional, Dict
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field

from ..auth.middleware import require_auth, require_partner
from ..errors import MarketplaceError
from ..services import user_service, settlement_service, gamification_service
from ..services.settings_service import get_mypage_banner

logger = logging.getLogger(__name__)
router = APIRouter()

class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    avatar: Optional[str] = None
    phone: Optional[str] = None
    birthdate: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    interests: Optional[List[str]] = None

class ProfileComplete(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    birthdate: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    phone: str
    interests: List[str] = []

class PartnerApplyRequest(BaseModel):
    category: str = Field(..., pattern="^(networking|minddate|crew|lecture)$")

@router.put("/api/users/me")
async def update_my_profile(request: ProfileUpdate, user: Dict = Depends(require_auth)):
    """프로필 수정"""
    try:
        updated = await user_service.update_profile(user["id"], request.model_dump(exclude_unset=True))
        return {"success": True, "message": "프로필이 수정되었습니다", "user": updated}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"프로필 수정 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="프로필 수정에 실패했습니다")

@router.post("/api/users/me/complete-profile")
async def complete_my_profile(request: ProfileComplete, user: Dict = Depends(require_auth)):
    """최초 프로필 완성"""
    try:
        updated = await user_service.complete_profile(
            user["id"], request.name, request.birthdate, request.phone, request.interests
        )
        return {"success": True, "message": "프로필이 완성되었습니다", "user": updated}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"프로필 완성 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="프로필 저장에 실패했습니다")

@router.get("/api/users/me/level")
async def get_my_level(user: Dict = Depends(require_auth)):
    """경험치/레벨"""
    try:
        info = await gamification_service.get_user_level(user["id"])
        return {"success": True, "level": info.to_dict()}
    except Exception as e:
        logger.error(f"레벨 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="레벨 조회에 실패했습니다")

@router.post("/api/users/me/partner")
async def apply_partner(request: PartnerApplyRequest, user: Dict = Depends(require_auth)):
    """파트너 신청 (즉시 승인)"""
    try:
        roles = await user_service.apply_partner(user["id"], request.category)
        return {"success": True, "message": "파트너 등록이 완료되었습니다", "roles": roles}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"파트너 신청 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="파트너 신청에 실패했습니다")

@router.get("/api/users/me/settlement")
async def get_my_settlement(user: Dict = Depends(require_partner)):
    """파트너 정산 요약"""
    try:
        summary = await settlement_service.get_partner_summary(user["id"])
        return {"success": True, "settlement": summary.to_dict()}
    except Exception as e:
        logger.error(f"정산 요약 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="정산 정보 조회에 실패했습니다")

@router.get("/api/mypage/banner")
async def get_banner():
    """마이페이지 배너 이미지"""
    try:
        return {"success": True, "banner": await get_mypage_banner()}
    except Exception as e:
        logger.error(f"배너 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="배너 조회에 실패했습니다")
