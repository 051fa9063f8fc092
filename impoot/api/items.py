"""
콘텐츠 API 엔드포인트
- 목록/카테고리 필터/상세
- 개설(파트너), 수정/삭제(작성자 또는 관리자)
- 내가 개설한 콘텐츠
"""

import logging
from typing import List, Optional, Dict, Any
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field

from ..auth.middleware import require_auth, require_partner
from ..errors import MarketplaceError
from ..services.item_service import ItemService

logger = logging.getLogger(__name__)
router = APIRouter()

CATEGORY_PATTERN = "^(networking|minddate|crew|lecture)$"

class GenderRatio(BaseModel):
    male: int = Field(..., ge=0)
    female: int = Field(..., ge=0)

class ItemPayload(BaseModel):
    """콘텐츠 개설/수정 요청 (뷰 모델 키 그대로)"""
    categoryType: Optional[str] = Field(None, pattern=CATEGORY_PATTERN)
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    img: Optional[str] = None
    desc: Optional[str] = None
    date: Optional[str] = None
    price: Optional[str] = None
    rawPrice: Optional[int] = Field(None, ge=0)
    loc: Optional[str] = None
    status: Optional[str] = Field(None, pattern="^(open|closed|ended)$")
    settlementStatus: Optional[str] = Field(None, pattern="^(pending|completed)$")
    hostBankInfo: Optional[str] = None
    kakaoChatUrl: Optional[str] = None
    hostDescription: Optional[str] = None
    hostIntroImage: Optional[str] = None

    # 카테고리별
    type: Optional[str] = None
    format: Optional[str] = Field(None, pattern="^(VOD|오프라인)$")
    curriculum: Optional[List[Any]] = None
    currentParticipants: Optional[int] = Field(None, ge=0)
    maxParticipants: Optional[int] = Field(None, ge=1)
    groupPhoto: Optional[str] = None
    target: Optional[str] = None
    genderRatio: Optional[GenderRatio] = None
    matchedCouples: Optional[int] = Field(None, ge=0)
    bankInfo: Optional[str] = None
    refundPolicy: Optional[str] = None
    leader: Optional[str] = None
    leaderProfile: Optional[str] = None
    level: Optional[str] = Field(None, pattern="^(입문|중급|실전)$")
    course: Optional[List[Any]] = None
    gallery: Optional[List[str]] = None
    reportContent: Optional[str] = None
    relatedRecruitTitle: Optional[str] = None
    purchaseCount: Optional[int] = Field(None, ge=0)
    teacher: Optional[str] = None
    teacherProfile: Optional[str] = None

@router.get("/api/items")
async def get_items(category: Optional[str] = None, filter: str = "all"):
    """콘텐츠 목록 조회 (최신순, 카테고리/유형 필터)"""
    try:
        items = await ItemService.list_items(category=category, filter_value=filter)
        return {"success": True, "items": items, "count": len(items)}
    except Exception as e:
        logger.error(f"콘텐츠 목록 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="콘텐츠 목록 조회에 실패했습니다")

@router.get("/api/items/mine")
async def get_my_items(user: Dict = Depends(require_partner)):
    """내가 개설한 콘텐츠"""
    try:
        items = await ItemService.list_by_author(user["id"])
        return {"success": True, "items": items}
    except Exception as e:
        logger.error(f"내 콘텐츠 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="내 콘텐츠 조회에 실패했습니다")

@router.get("/api/items/{item_id}")
async def get_item(item_id: int):
    """콘텐츠 상세 조회 (조회수 증가)"""
    try:
        item = await ItemService.get_item(item_id)
        return {"success": True, "item": item}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"콘텐츠 상세 조회 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="콘텐츠 조회에 실패했습니다")

@router.post("/api/items")
async def create_item(payload: ItemPayload, user: Dict = Depends(require_partner)):
    """콘텐츠 개설"""
    if not payload.categoryType or not payload.title:
        raise HTTPException(status_code=400, detail="카테고리와 제목은 필수입니다")

    try:
        item = await ItemService.create_item(payload.model_dump(exclude_unset=True), user)
        return {"success": True, "message": "콘텐츠가 개설되었습니다", "item": item}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"콘텐츠 개설 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="콘텐츠 개설에 실패했습니다")

@router.put("/api/items/{item_id}")
async def update_item(item_id: int, payload: ItemPayload, user: Dict = Depends(require_auth)):
    """콘텐츠 수정"""
    try:
        item = await ItemService.update_item(item_id, payload.model_dump(exclude_unset=True), user)
        return {"success": True, "message": "콘텐츠가 수정되었습니다", "item": item}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"콘텐츠 수정 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="콘텐츠 수정에 실패했습니다")

@router.delete("/api/items/{item_id}")
async def delete_item(item_id: int, user: Dict = Depends(require_auth)):
    """콘텐츠 삭제"""
    try:
        await ItemService.delete_item(item_id, user)
        return {"success": True, "message": "콘텐츠가 삭제되었습니다"}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"콘텐츠 삭제 실패: {str(e)}")
        raise HTTPException(status_code=500, detail="콘텐츠 삭제에 실패했습니다")
