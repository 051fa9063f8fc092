"""
참여 신청 API 엔드포인트
- 신청 / 취소(환불 요청)
- 내 신청 목록
- 호스트용 신청자 목록 및 상태 변경
"""

import logging
from typing import Optional, Dict
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field

from ..auth.middleware import require_auth
from ..errors import MarketplaceError
from ..services.application_service import ApplicationService, STATUS_LABELS

logger = logging.getLogger(__name__)
router = APIRouter()

STATUS_PATTERN = "^(applied|confirmed|paid|checked-in|refund-requested|refund-completed|cancelled)$"

class ApplyRequest(BaseModel):
    refund_account: Optional[str] = Field(None, max_length=200)
    user_name: Optional[str] = Field(None, max_length=50)
    user_phone: Optional[str] = Field(None, max_length=20)

class CancelRequest(BaseModel):
    reason: str = Field(..., min_length=1)
    account: str = Field(..., min_length=1, max_length=200)

class StatusChangeRequest(BaseModel):
    status: str = Field(..., pattern=STATUS_PATTERN)

@router.get("/api/applications/statuses")
async def get_status_labels():
    """신청 상태 라벨"""
    return {"success": True, "statuses": STATUS_LABELS}

@router.post("/api/items/{item_id}/apply")
async def apply_item(item_id: int, request: ApplyRequest, user: Dict = Depends(require_auth)):
    """참여 신청"""
    try:
        application = await ApplicationService.apply(
            user_id=user["id"],
            item_id=item_id,
            refund_account=request.refund_account,
            user_name=request.user_name,
            user_phone=request.user_phone,
        )
        return {"success": True, "message": "신청이 완료되었습니다", "application": application}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"참여 신청 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="참여 신청에 실패했습니다")

@router.post("/api/items/{item_id}/cancel")
async def cancel_application(item_id: int, request: CancelRequest, user: Dict = Depends(require_auth)):
    """신청 취소 (환불 요청)"""
    try:
        application = await ApplicationService.cancel(user["id"], item_id, request.reason, request.account)
        return {"success": True, "message": "환불 요청이 접수되었습니다", "application": application}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"신청 취소 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="신청 취소에 실패했습니다")

@router.get("/api/applications/me")
async def get_my_applications(user: Dict = Depends(require_auth)):
    """내 신청 목록 (최신순)"""
    try:
        applications = await ApplicationService.get_my_applications(user["id"])
        return {"success": True, "applications": applications}
    except Exception as e:
        logger.error(f"내 신청 목록 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="신청 목록 조회에 실패했습니다")

@router.get("/api/applications/me/item-ids")
async def get_my_applied_item_ids(user: Dict = Depends(require_auth)):
    """신청한 콘텐츠 ID 목록"""
    try:
        return {"success": True, "item_ids": await ApplicationService.get_applied_item_ids(user["id"])}
    except Exception as e:
        logger.error(f"신청 콘텐츠 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="신청 목록 조회에 실패했습니다")

@router.get("/api/items/{item_id}/applicants")
async def get_item_applicants(item_id: int, user: Dict = Depends(require_auth)):
    """신청자 목록 (호스트/관리자)"""
    try:
        applicants = await ApplicationService.get_item_applicants(item_id, user)
        return {"success": True, "applicants": applicants}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"신청자 목록 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="신청자 목록 조회에 실패했습니다")

@router.patch("/api/applications/{application_id}/status")
async def change_application_status(application_id: int, request: StatusChangeRequest,
                                    user: Dict = Depends(require_auth)):
    """신청 상태 변경 (호스트/관리자)"""
    try:
        application = await ApplicationService.change_status(application_id, request.status, user)
        return {"success": True, "message": "상태가 변경되었습니다", "application": application}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"신청 상태 변경 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="신청 상태 변경에 실패했습니다")
